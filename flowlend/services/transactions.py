"""Transaction lifecycle — normalize, submit, await sealing, classify failures."""
from __future__ import annotations

import logging
from typing import Callable, Mapping

from ..amounts import normalize_amount
from ..cadence import arg, resolve_imports
from ..cadence.programs import ACTION_PROGRAMS
from ..errors import translate_error
from ..interfaces.auth import AuthProvider
from ..interfaces.ledger import FinalitySubscription, LedgerMutateClient
from ..models import ActionKind, TransactionRecord, TransactionStatus
from .position_sync import PositionDataSync

logger = logging.getLogger(__name__)

PENDING_TEXT = "Pending…"

StatusListener = Callable[[TransactionRecord], None]


class TransactionController:
    """Drives one user action through IDLE → PENDING → SUBMITTED → SEALED | FAILED.

    Actions are not queued or cancelled. Each call gets its own record and
    ``current`` always points at the most recently invoked one, while
    ``status_text`` holds whichever lifecycle wrote last.
    """

    def __init__(
        self,
        mutate_client: LedgerMutateClient,
        finality: FinalitySubscription,
        sync: PositionDataSync,
        auth: AuthProvider,
        contracts: Mapping[str, str],
        compute_limit: int = 9999,
    ) -> None:
        self._mutate = mutate_client
        self._finality = finality
        self._sync = sync
        self._auth = auth
        self._contracts = dict(contracts)
        self._compute_limit = compute_limit
        self._listeners: list[StatusListener] = []
        self.current: TransactionRecord | None = None
        self.status_text: str | None = None

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _set_status(
        self, record: TransactionRecord, status: TransactionStatus, text: str
    ) -> None:
        record.status = status
        record.status_text = text
        self.status_text = text
        for listener in self._listeners:
            listener(record)

    async def submit_action(
        self, kind: ActionKind | str, raw_amount: str
    ) -> TransactionRecord:
        """Run a deposit/withdraw/borrow/repay to completion and return its record."""
        kind = ActionKind(kind)
        record = TransactionRecord(kind=kind, amount=normalize_amount(raw_amount))
        self.current = record
        self._set_status(record, TransactionStatus.PENDING, PENDING_TEXT)

        program = resolve_imports(ACTION_PROGRAMS[kind], self._contracts)
        args = [arg(record.amount, "UFix64")]

        try:
            transaction_id = await self._mutate.mutate(program, args, self._compute_limit)
            if not transaction_id:
                logger.error("Flow transaction error: %s returned no transaction id", kind.value)
                self._set_status(record, TransactionStatus.FAILED, translate_error(None))
                return record

            record.id = transaction_id
            self._set_status(
                record, TransactionStatus.SUBMITTED, f"Submitted: {transaction_id}"
            )

            result = await self._finality.await_sealed(transaction_id)
            record.result = result
            self._set_status(
                record, TransactionStatus.SEALED, f"Sealed: {result.status_string}"
            )
        except Exception as e:
            logger.error("Flow transaction error (%s %s): %s", kind.value, record.amount, e)
            self._set_status(record, TransactionStatus.FAILED, translate_error(e))
            return record

        logger.info("%s of %s sealed in %s", kind.value, record.amount, record.id)
        await self._sync.refresh(self._auth.address)
        return record
