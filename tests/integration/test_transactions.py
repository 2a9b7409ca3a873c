"""Integration tests for the transaction lifecycle controller."""
from __future__ import annotations

import asyncio

import pytest

from flowlend.auth import WalletAuth
from flowlend.errors import LedgerSubmissionError
from flowlend.models import ActionKind, TransactionRecord, TransactionStatus
from flowlend.services.position_sync import PositionDataSync
from flowlend.services.transactions import PENDING_TEXT, TransactionController

from tests.fakes import CONTRACTS, WALLET, FakeLedger


@pytest.fixture()
def sync(ledger: FakeLedger) -> PositionDataSync:
    return PositionDataSync(ledger)


@pytest.fixture()
def controller(
    ledger: FakeLedger, sync: PositionDataSync, auth: WalletAuth
) -> TransactionController:
    return TransactionController(ledger, ledger, sync, auth, CONTRACTS, compute_limit=9999)


def _record_history(controller: TransactionController) -> list[tuple[TransactionStatus, str]]:
    history: list[tuple[TransactionStatus, str]] = []

    def listener(record: TransactionRecord) -> None:
        history.append((record.status, record.status_text))

    controller.add_listener(listener)
    return history


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_successful_borrow(
        self,
        controller: TransactionController,
        ledger: FakeLedger,
        sync: PositionDataSync,
        auth: WalletAuth,
    ) -> None:
        await auth.log_in()
        history = _record_history(controller)

        record = await controller.submit_action(ActionKind.BORROW, "50")

        assert record.amount == "50.0"
        assert record.id == "tx0001"
        assert record.status is TransactionStatus.SEALED
        assert history == [
            (TransactionStatus.PENDING, PENDING_TEXT),
            (TransactionStatus.SUBMITTED, "Submitted: tx0001"),
            (TransactionStatus.SEALED, "Sealed: SEALED"),
        ]
        assert controller.status_text == "Sealed: SEALED"
        assert sync.position is not None
        assert sync.position.borrowed == "50.00000000"

    @pytest.mark.asyncio
    async def test_binds_normalized_ufix64_and_resolved_program(
        self, controller: TransactionController, ledger: FakeLedger
    ) -> None:
        await controller.submit_action("deposit", ".5")

        program, args, limit = ledger.mutations[0]
        assert args == [{"type": "UFix64", "value": "0.5"}]
        assert limit == 9999
        assert "FlowLend.deposit(" in program
        assert "0xFlowLend" not in program
        assert CONTRACTS["FlowLend"] in program

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind,call",
        [
            (ActionKind.DEPOSIT, "FlowLend.deposit("),
            (ActionKind.WITHDRAW, "FlowLend.withdraw("),
            (ActionKind.BORROW, "FlowLend.borrow("),
            (ActionKind.REPAY, "FlowLend.repay("),
        ],
    )
    async def test_each_kind_uses_its_program(
        self,
        controller: TransactionController,
        ledger: FakeLedger,
        kind: ActionKind,
        call: str,
    ) -> None:
        ledger.set_position(WALLET, collateral=100.0, borrowed=10.0)
        record = await controller.submit_action(kind, "1")
        assert record.status is TransactionStatus.SEALED
        assert call in ledger.mutations[0][0]

    @pytest.mark.asyncio
    async def test_resync_after_seal_uses_current_address(
        self, controller: TransactionController, ledger: FakeLedger, auth: WalletAuth
    ) -> None:
        await auth.log_in()
        await controller.submit_action(ActionKind.DEPOSIT, "1")
        assert len(ledger.queries) == 3

    @pytest.mark.asyncio
    async def test_invalid_kind(self, controller: TransactionController) -> None:
        with pytest.raises(ValueError):
            await controller.submit_action("liquidate", "1")


class TestFailures:
    @pytest.mark.asyncio
    async def test_submission_error_insufficient_funds(
        self, controller: TransactionController, ledger: FakeLedger
    ) -> None:
        ledger.mutate_error = LedgerSubmissionError(
            "[Error Code: 1101] Cannot withdraw tokens: amount exceeds balance"
        )
        history = _record_history(controller)

        record = await controller.submit_action(ActionKind.DEPOSIT, "1000")

        assert record.status is TransactionStatus.FAILED
        assert record.id is None
        assert record.status_text.startswith("Not enough funds in your wallet")
        assert [s for s, _ in history] == [TransactionStatus.PENDING, TransactionStatus.FAILED]
        assert ledger.queries == []

    @pytest.mark.asyncio
    async def test_seal_error_health_breach(
        self, controller: TransactionController, ledger: FakeLedger
    ) -> None:
        ledger.seal_error = LedgerSubmissionError(
            "panic: FlowLend: would make position unhealthy"
        )
        history = _record_history(controller)

        record = await controller.submit_action(ActionKind.BORROW, "80")

        assert record.status is TransactionStatus.FAILED
        assert record.id == "tx0001"
        assert "health factor below the limit" in record.status_text
        assert [s for s, _ in history] == [
            TransactionStatus.PENDING,
            TransactionStatus.SUBMITTED,
            TransactionStatus.FAILED,
        ]
        assert ledger.queries == []

    @pytest.mark.asyncio
    async def test_generic_error(
        self, controller: TransactionController, ledger: FakeLedger
    ) -> None:
        ledger.mutate_error = RuntimeError("boom")
        record = await controller.submit_action(ActionKind.REPAY, "1")
        assert record.status_text == "Error: boom"

    @pytest.mark.asyncio
    async def test_missing_transaction_id_is_unknown_failure(
        self, controller: TransactionController, ledger: FakeLedger
    ) -> None:
        async def no_id(program, args, limit):
            return ""

        ledger.mutate = no_id  # type: ignore[method-assign]
        record = await controller.submit_action(ActionKind.BORROW, "1")
        assert record.status is TransactionStatus.FAILED
        assert record.status_text == "Error: Unknown failure"

    @pytest.mark.asyncio
    async def test_no_automatic_retry(
        self, controller: TransactionController, ledger: FakeLedger
    ) -> None:
        ledger.mutate_error = RuntimeError("boom")
        await controller.submit_action(ActionKind.BORROW, "1")
        assert len(ledger.mutations) == 1


class TestOverlappingActions:
    @pytest.mark.asyncio
    async def test_most_recent_action_is_current_and_last_write_wins(
        self, controller: TransactionController, ledger: FakeLedger
    ) -> None:
        first_sealed = asyncio.Event()
        release_first = asyncio.Event()
        original = ledger.await_sealed

        async def gated(transaction_id: str):
            if transaction_id == "tx0001":
                await release_first.wait()
            result = await original(transaction_id)
            if transaction_id == "tx0001":
                first_sealed.set()
            return result

        ledger.await_sealed = gated  # type: ignore[method-assign]

        first = asyncio.create_task(controller.submit_action(ActionKind.DEPOSIT, "1"))
        await asyncio.sleep(0)
        second = await controller.submit_action(ActionKind.DEPOSIT, "2")

        assert controller.current is second
        assert controller.status_text == "Sealed: SEALED"

        release_first.set()
        first_record = await first
        await first_sealed.wait()

        assert first_record is not second
        assert first_record.status is TransactionStatus.SEALED
        assert controller.current is second
        assert len(ledger.mutations) == 2
