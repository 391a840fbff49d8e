"""EncryptionSession — guards the FHE init handshake and the encrypt call."""
import asyncio
import logging

from config.settings import settings
from src.dp_common.errors import AppError, EncryptionError, OrderValidationError
from src.dp_fhe.domain.capability import EncryptedInput, FheCapabilityProtocol

logger = logging.getLogger(__name__)


def check_value_range(value: int, bits: int) -> None:
    """Raise OrderValidationError unless 0 <= value < 2**bits."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise OrderValidationError(f"value must be an integer, got {type(value).__name__}")
    upper = 1 << bits
    if not (0 <= value < upper):
        raise OrderValidationError(f"value {value} out of range [0, {upper - 1}]")


class EncryptionSession:
    def __init__(
        self, capability: FheCapabilityProtocol, bits: int | None = None
    ) -> None:
        self._capability = capability
        self._bits = bits if bits is not None else settings.FHE_VALUE_BITS
        self._init_lock = asyncio.Lock()
        self._initializing = False
        # Bumped by reset(); a handshake started under an older value is void
        self._generation = 0

    @property
    def is_initialized(self) -> bool:
        return self._capability.is_initialized

    @property
    def is_initializing(self) -> bool:
        return self._initializing

    @property
    def bits(self) -> int:
        return self._bits

    async def ensure_initialized(self) -> None:
        """One-time handshake; concurrent callers wait on the same attempt.

        A handshake that completes after reset() is discarded, and the
        caller waiting behind it runs its own.
        """
        if self._capability.is_initialized:
            return
        async with self._init_lock:
            if self._capability.is_initialized:
                return
            generation = self._generation
            self._initializing = True
            try:
                await self._capability.initialize()
            except Exception as exc:
                logger.warning("FHE initialization failed: %s", exc)
                raise EncryptionError(f"FHE initialization failed: {exc}") from exc
            finally:
                if generation == self._generation:
                    self._initializing = False
            if generation != self._generation:
                logger.info("Discarding FHE handshake from a reset session")
                self._capability.reset()
                return
        logger.info("FHE capability initialized")

    def reset(self) -> None:
        """Drop session key material; the next action re-runs the handshake."""
        self._generation += 1
        self._initializing = False
        self._capability.reset()

    async def encrypt(
        self, contract_address: str, owner_address: str, value: int
    ) -> EncryptedInput:
        check_value_range(value, self._bits)
        if not self._capability.is_initialized:
            raise EncryptionError("FHE capability not initialized")
        try:
            return await self._capability.encrypt(
                contract_address, owner_address, value, self._bits
            )
        except AppError:
            raise
        except Exception as exc:
            raise EncryptionError(f"Encryption rejected: {exc}") from exc
