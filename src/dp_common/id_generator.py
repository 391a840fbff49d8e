"""Timestamp-derived business IDs for ledger records (order-<unix-ms>).

IDs are assigned client-side before the create transaction is sent, so
they only need to be unique within one session. Two calls inside the same
millisecond are pushed to the next free millisecond instead of colliding.
"""

import threading
import time

from config.settings import settings


class OrderIdGenerator:
    """Monotonic millisecond ID generator.

    Output format: f"{prefix}{ms}" where ms is strictly increasing
    across calls on the same generator.
    """

    def __init__(self, prefix: str = "order-") -> None:
        self._prefix = prefix
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            ms = self._current_ms()
            if ms <= self._last_ms:
                ms = self._last_ms + 1
            self._last_ms = ms
            return f"{self._prefix}{ms}"

    def _current_ms(self) -> int:
        return int(time.time() * 1000)


_default_generator = OrderIdGenerator(prefix=settings.ORDER_ID_PREFIX)


def generate_order_id() -> str:
    """Generate a unique order ID using the module-level default generator."""
    return _default_generator.next_id()
