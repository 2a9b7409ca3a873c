"""Data models — positions and summaries are frozen, transaction records mutate in place."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Position:
    """One user's position as reported by the ledger (UFix64 strings)."""

    collateral: str
    borrowed: str


@dataclass(frozen=True)
class PoolState:
    """Protocol-wide snapshot, independent of any user."""

    total_collateral: str
    total_borrows: str
    utilization_rate: str


@dataclass(frozen=True)
class HealthSummary:
    health_factor: float
    max_borrowable: float
    max_withdrawable: float


@dataclass(frozen=True)
class SealedResult:
    """Terminal transaction result returned by the finality subscription."""

    status_string: str
    status_code: int = 0
    error_message: str = ""
    events: tuple[dict[str, Any], ...] = ()


class ActionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    BORROW = "borrow"
    REPAY = "repay"


class TransactionStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUBMITTED = "submitted"
    SEALED = "sealed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TransactionStatus.SEALED, TransactionStatus.FAILED)


@dataclass
class TransactionRecord:
    """Lifecycle of a single user action.

    ``id`` is the ledger transaction id and stays ``None`` until submission
    succeeds. ``status_text`` is the user-facing line for the current status.
    """

    kind: ActionKind
    amount: str
    id: str | None = None
    status: TransactionStatus = TransactionStatus.IDLE
    status_text: str = ""
    result: SealedResult | None = field(default=None, repr=False)
