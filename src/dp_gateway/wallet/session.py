"""WalletSession — current account address and connectedness.

Key management and signing live in the wallet; this object only tracks
which account is connected and notifies listeners on every change so
in-flight protocols can be hard-stopped on disconnect.
"""
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

WalletListener = Callable[["WalletSession"], Awaitable[None]]


class WalletSession:
    def __init__(self) -> None:
        self._address: str | None = None
        self._listeners: list[WalletListener] = []

    @property
    def address(self) -> str | None:
        return self._address

    @property
    def is_connected(self) -> bool:
        return self._address is not None

    def add_listener(self, listener: WalletListener) -> None:
        self._listeners.append(listener)

    async def connect(self, address: str) -> None:
        if not address:
            raise ValueError("address must not be empty")
        if self._address is not None and self._address.lower() == address.lower():
            return
        self._address = address
        logger.info("Wallet connected: %s", address)
        await self._notify()

    async def disconnect(self) -> None:
        if self._address is None:
            return
        logger.info("Wallet disconnected: %s", self._address)
        self._address = None
        await self._notify()

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            await listener(self)
