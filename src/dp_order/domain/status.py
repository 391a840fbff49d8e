"""Transient transaction status shown to the user.

Success and error statuses hide themselves after a fixed delay; pending
stays until overwritten. The auto-clear timer is bound to the status
object it was scheduled for, and showing a new status cancels it, so an
old timer can never hide a newer message.
"""
import asyncio
import logging
from dataclasses import dataclass

from config.settings import settings
from src.dp_common.enums import TransactionPhase

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TransactionStatus:
    phase: TransactionPhase = TransactionPhase.PENDING
    message: str = ""
    visible: bool = False


HIDDEN = TransactionStatus()


class StatusBoard:
    def __init__(
        self,
        success_delay: float | None = None,
        error_delay: float | None = None,
    ) -> None:
        self._success_delay = (
            success_delay if success_delay is not None else settings.STATUS_SUCCESS_CLEAR_SECONDS
        )
        self._error_delay = (
            error_delay if error_delay is not None else settings.STATUS_ERROR_CLEAR_SECONDS
        )
        self._current: TransactionStatus = HIDDEN
        self._clear_handle: asyncio.TimerHandle | None = None

    @property
    def current(self) -> TransactionStatus:
        return self._current

    def pending(self, message: str) -> TransactionStatus:
        return self._show(TransactionPhase.PENDING, message, None)

    def success(self, message: str) -> TransactionStatus:
        return self._show(TransactionPhase.SUCCESS, message, self._success_delay)

    def error(self, message: str) -> TransactionStatus:
        return self._show(TransactionPhase.ERROR, message, self._error_delay)

    def clear(self) -> None:
        self._cancel_timer()
        self._current = HIDDEN

    def _show(
        self, phase: TransactionPhase, message: str, delay: float | None
    ) -> TransactionStatus:
        self._cancel_timer()
        status = TransactionStatus(phase=phase, message=message, visible=True)
        self._current = status
        logger.debug("Status -> %s: %s", phase.value, message)
        if delay is not None:
            loop = asyncio.get_running_loop()
            self._clear_handle = loop.call_later(delay, self._expire, status)
        return status

    def _expire(self, status: TransactionStatus) -> None:
        if self._current is status:
            self._current = HIDDEN
            self._clear_handle = None

    def _cancel_timer(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
