"""Keeps position, health factor and pool state in step with the ledger."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from ..cadence import arg, programs
from ..interfaces.ledger import LedgerQueryClient
from ..models import PoolState, Position

logger = logging.getLogger(__name__)


def _to_position(raw: Any) -> Position:
    return Position(collateral=str(raw["collateral"]), borrowed=str(raw["borrowed"]))


def _to_pool_state(raw: Any) -> PoolState:
    return PoolState(
        total_collateral=str(raw["totalCollateral"]),
        total_borrows=str(raw["totalBorrows"]),
        utilization_rate=str(raw["utilizationRate"]),
    )


class PositionDataSync:
    """Fetches the three FlowLend read models for one address.

    The queries are independent: a failed query is logged and its field keeps
    the last successfully fetched value. Overlapping refreshes are not
    coalesced; whichever finishes last wins, and `loading` stays set until
    every one of them has finished. Results of a refresh that started before
    the last `clear()` are discarded.
    """

    def __init__(self, client: LedgerQueryClient) -> None:
        self._client = client
        self.position: Position | None = None
        self.pool_state: PoolState | None = None
        self.health_factor: str | None = None
        self.loading = False
        self._in_flight = 0
        self._generation = 0

    def clear(self) -> None:
        """Drop all figures, e.g. on logout. No query is issued."""
        self.position = None
        self.pool_state = None
        self.health_factor = None
        self._generation += 1

    async def refresh(self, address: str | None) -> None:
        if not address:
            return

        generation = self._generation
        self._in_flight += 1
        self.loading = True
        try:
            address_args = [arg(address, "Address")]
            position_raw, health_raw, pool_raw = await asyncio.gather(
                self._client.query(programs.GET_USER_POSITION, address_args),
                self._client.query(programs.GET_USER_HEALTH_FACTOR, address_args),
                self._client.query(programs.GET_POOL_STATE),
                return_exceptions=True,
            )

            if generation != self._generation:
                logger.debug("Discarding FlowLend figures for %s fetched before clear", address)
                return

            self._apply("position", position_raw, _to_position, address)
            self._apply("health_factor", health_raw, str, address)
            self._apply("pool_state", pool_raw, _to_pool_state, address)
        finally:
            self._in_flight -= 1
            self.loading = self._in_flight > 0

        logger.info(
            "Position — %s · Collateral: %s  Borrowed: %s  HF: %s",
            address,
            self.position.collateral if self.position else "—",
            self.position.borrowed if self.position else "—",
            self.health_factor or "—",
        )

    def _apply(
        self, name: str, raw: Any, convert: Callable[[Any], Any], address: str
    ) -> None:
        if isinstance(raw, BaseException):
            logger.warning("Error fetching FlowLend %s for %s: %s", name, address, raw)
            return
        try:
            setattr(self, name, convert(raw))
        except (KeyError, TypeError) as e:
            logger.warning("Unexpected FlowLend %s payload for %s: %s", name, address, e)
