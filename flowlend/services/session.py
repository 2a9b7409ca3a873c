"""Lending session — wires wallet auth, position sync, risk figures and transactions."""
from __future__ import annotations

import logging

from ..amounts import format_amount, format_health_factor
from ..config import AppConfig
from ..interfaces.auth import AuthProvider
from ..interfaces.ledger import (
    FinalitySubscription,
    LedgerMutateClient,
    LedgerQueryClient,
)
from ..models import ActionKind, HealthSummary, TransactionRecord
from ..risk import RiskParameters, get_health_summary, is_at_risk
from .position_sync import PositionDataSync
from .transactions import TransactionController

logger = logging.getLogger(__name__)


class LendingSession:
    """Presentation-facing entry point for one wallet.

    Logging in (a transition from no address to an address) triggers a sync;
    logging out clears every figure without querying.
    """

    def __init__(
        self,
        config: AppConfig,
        auth: AuthProvider,
        query_client: LedgerQueryClient,
        finality: FinalitySubscription,
        mutate_client: LedgerMutateClient | None = None,
    ) -> None:
        self._auth = auth
        self.params = RiskParameters(
            collateral_factor=config.risk.collateral_factor,
            liquidation_threshold=config.risk.liquidation_threshold,
        )
        self.sync = PositionDataSync(query_client)
        self.transactions: TransactionController | None = None
        if mutate_client is not None:
            self.transactions = TransactionController(
                mutate_client,
                finality,
                self.sync,
                auth,
                config.contracts,
                compute_limit=config.transactions.compute_limit,
            )
        self._logged_in = False
        self._unsubscribe = auth.subscribe(self._on_address_change)

    @property
    def is_logged_in(self) -> bool:
        return self._logged_in

    async def _on_address_change(self, address: str | None) -> None:
        if address:
            if not self._logged_in:
                self._logged_in = True
                await self.sync.refresh(address)
        else:
            self._logged_in = False
            self.sync.clear()

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_health_summary(self) -> HealthSummary:
        return get_health_summary(self.sync.position, self.params)

    async def refresh_position(self, address: str | None = None) -> None:
        await self.sync.refresh(address or self._auth.address)

    async def submit_action(
        self, kind: ActionKind | str, raw_amount: str
    ) -> TransactionRecord:
        if self.transactions is None:
            raise RuntimeError("No wallet signer configured; transactions are unavailable")
        return await self.transactions.submit_action(kind, raw_amount)

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_wallet(address: str) -> str:
        if len(address) > 10:
            return f"{address[:6]}…{address[-4:]}"
        return address

    @staticmethod
    def _format_chain_health(value: str | None) -> str:
        if not value:
            return "—"
        try:
            return f"{float(value):.3f}"
        except ValueError:
            return "—"

    @staticmethod
    def _format_utilization(rate: str | None) -> str:
        if rate is None:
            return "0.00"
        try:
            return f"{float(rate) * 100:.2f}"
        except ValueError:
            return "0.00"

    def render(self) -> str:
        """Plain-text dashboard for the logged-in wallet."""
        address = self._auth.address
        if not address:
            return "Not connected. Log in with a Flow wallet address."

        summary = self.get_health_summary()
        position = self.sync.position
        pool = self.sync.pool_state
        status = (
            "🚨 AT RISK"
            if is_at_risk(summary.health_factor, self.params)
            else "✅ Healthy"
        )

        lines = [
            f"📊 FlowLend · {self._format_wallet(address)}",
            "",
            f"{status}",
            (
                f"Health factor formula: (Collateral × {self.params.collateral_factor}) "
                f"÷ Borrowed. You must stay ≥ {self.params.liquidation_threshold:.2f}."
            ),
            (
                f"Current HF: {format_health_factor(summary.health_factor)}. "
                f"Max borrow you can add now: {format_amount(summary.max_borrowable)} FLOW. "
                f"Safe withdraw available: {format_amount(summary.max_withdrawable)} FLOW."
            ),
            "",
            "Your Position" + (" (refreshing…)" if self.sync.loading else ""),
            f"  Collateral: {format_amount(position.collateral if position else None)} FLOW",
            f"  Borrowed: {format_amount(position.borrowed if position else None)} FLOW",
            f"  Health Factor: {self._format_chain_health(self.sync.health_factor)}",
            "",
            "Pool State",
            f"  Total Collateral: {format_amount(pool.total_collateral if pool else None)} FLOW",
            f"  Total Borrows: {format_amount(pool.total_borrows if pool else None)} FLOW",
            f"  Utilization: {self._format_utilization(pool.utilization_rate if pool else None)}%",
        ]

        if self.transactions is not None and self.transactions.status_text:
            lines += ["", f"Last transaction: {self.transactions.status_text}"]

        return "\n".join(lines)
