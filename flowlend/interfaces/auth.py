"""Authentication provider protocol — wallet session abstraction."""
from typing import Awaitable, Callable, Protocol

AddressListener = Callable[[str | None], Awaitable[None]]


class AuthProvider(Protocol):
    """Publishes the current user address (``None`` when logged out)."""

    @property
    def address(self) -> str | None: ...

    def subscribe(self, listener: AddressListener) -> Callable[[], None]: ...

    async def log_in(self) -> None: ...

    async def log_out(self) -> None: ...
