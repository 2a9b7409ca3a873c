"""Ledger client protocols — read, write and finality abstractions."""
from typing import Any, Protocol

from ..models import SealedResult


class LedgerQueryClient(Protocol):
    """Read-only script execution. Raises ``LedgerQueryError`` on failure."""

    async def query(self, program: str, args: list[dict[str, Any]] | None = None) -> Any: ...


class LedgerMutateClient(Protocol):
    """Signs and submits a transaction, returning its id.

    Failures carry the ledger's free-text message.
    """

    async def mutate(self, program: str, args: list[dict[str, Any]], limit: int) -> str: ...


class FinalitySubscription(Protocol):
    """Resolves once a transaction is sealed; raises if it failed."""

    async def await_sealed(self, transaction_id: str) -> SealedResult: ...
