"""Ledger error types and translation of raw ledger failures into user-facing text.

The ledger reports failures as free text only, so classification is an
ordered substring match over ``ERROR_RULES``; the first rule whose pattern
occurs in the message wins.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

UNKNOWN_FAILURE = "Error: Unknown failure"


class LedgerError(RuntimeError):
    """Base class for failures reported by the ledger or its transport."""


class LedgerQueryError(LedgerError):
    """A read-only script query failed."""


class LedgerSubmissionError(LedgerError):
    """Submitting a transaction, or waiting for it to seal, failed."""


@dataclass(frozen=True)
class ErrorRule:
    pattern: str
    message: str


ERROR_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(
        pattern="Cannot withdraw tokens",
        message="Not enough funds in your wallet for that amount. Lower the amount or top up.",
    ),
    ErrorRule(
        pattern="would make position unhealthy",
        message=(
            "This action would push your health factor below the limit. "
            "Adjust the amount or add more collateral."
        ),
    ),
)


def translate_error(error: object, rules: Sequence[ErrorRule] = ERROR_RULES) -> str:
    """Map a failure to the status text shown to the user."""
    if not isinstance(error, Exception):
        return UNKNOWN_FAILURE

    message = str(error)
    for rule in rules:
        if rule.pattern in message:
            return rule.message
    return f"Error: {message}"
