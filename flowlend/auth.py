"""Wallet session — tracks the logged-in address and notifies subscribers."""
from __future__ import annotations

import logging
from typing import Callable

from .config import AppConfig
from .interfaces.auth import AddressListener

logger = logging.getLogger(__name__)


class WalletAuth:
    """Authentication provider for a single wallet address.

    The address comes from configuration or is passed to ``log_in``.
    Listeners are awaited in subscription order on every change.
    """

    def __init__(self, config: AppConfig) -> None:
        self._default_address = config.wallet.address
        self._walletconnect_project_id = config.wallet.walletconnect_project_id
        self._discovery_wallet = config.ledger.discovery_wallet
        self._app_title = config.app.title
        self._address: str | None = None
        self._listeners: list[AddressListener] = []
        self._bridge_initialized = False

    @property
    def address(self) -> str | None:
        return self._address

    @property
    def bridge_initialized(self) -> bool:
        return self._bridge_initialized

    def init_wallet_bridge(self) -> bool:
        """Set up the WalletConnect bridge once per provider.

        Returns True only on the call that performed the initialization.
        """
        if self._bridge_initialized:
            return False
        self._bridge_initialized = True

        if not self._walletconnect_project_id:
            logger.warning(
                "[%s] WalletConnect project id is not set. "
                "WalletConnect wallets may fail to connect.",
                self._app_title,
            )
        else:
            logger.info("WalletConnect bridge ready (discovery: %s)", self._discovery_wallet)
        return True

    def subscribe(self, listener: AddressListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def log_in(self, address: str | None = None) -> None:
        self.init_wallet_bridge()
        address = address or self._default_address
        if not address:
            raise ValueError("No wallet address to log in with")
        logger.info("Logged in as %s", address)
        await self._publish(address)

    async def log_out(self) -> None:
        logger.info("Logged out")
        await self._publish(None)

    async def _publish(self, address: str | None) -> None:
        self._address = address
        for listener in list(self._listeners):
            await listener(address)
