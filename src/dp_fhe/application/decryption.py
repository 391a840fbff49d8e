"""DecryptionSession — two-phase reveal: prepare proof, then submit proof.

The capability only performs the cryptographic step (prepare). Submission
is a caller-supplied coroutine returning a pending ledger transaction;
clear values are handed back only after that transaction confirms.
"""
import logging
from collections.abc import Awaitable, Callable

from src.dp_common.errors import AlreadyVerifiedError, AppError, DecryptionError
from src.dp_fhe.domain.capability import FheCapabilityProtocol, RevealProof
from src.dp_ledger.domain.contract import PendingTransactionProtocol

logger = logging.getLogger(__name__)

SubmitProofFn = Callable[[str, str], Awaitable[PendingTransactionProtocol]]


def _classify_reveal_error(exc: Exception, detail: str) -> AppError:
    # Relayer and contract only report the reveal race in the message text
    if "already verified" in str(exc).lower():
        return AlreadyVerifiedError()
    return DecryptionError(f"{detail}: {exc}")


class DecryptionSession:
    def __init__(self, capability: FheCapabilityProtocol) -> None:
        self._capability = capability

    async def prepare(self, handles: list[str], contract_address: str) -> RevealProof:
        if not handles:
            raise DecryptionError("No handles to reveal")
        try:
            proof = await self._capability.prepare_reveal(handles, contract_address)
        except AppError:
            raise
        except Exception as exc:
            raise _classify_reveal_error(exc, "Decryption proof generation failed") from exc
        missing = [h for h in handles if h not in proof.clear_values]
        if missing:
            raise DecryptionError(f"Relayer returned no value for {len(missing)} handle(s)")
        return proof

    async def submit(self, proof: RevealProof, submit_fn: SubmitProofFn) -> None:
        tx = await submit_fn(proof.abi_encoded_clear_values, proof.decryption_proof)
        await tx.wait()

    async def reveal_values(
        self, handles: list[str], contract_address: str, submit_fn: SubmitProofFn
    ) -> dict[str, int]:
        """Run both phases. An "already verified" failure from either phase
        surfaces as AlreadyVerifiedError; anything else as DecryptionError.
        """
        try:
            proof = await self.prepare(handles, contract_address)
            await self.submit(proof, submit_fn)
        except (AlreadyVerifiedError, DecryptionError):
            raise
        except Exception as exc:
            err = _classify_reveal_error(exc, "Reveal failed")
            if isinstance(err, DecryptionError):
                logger.warning("Reveal failed for %d handle(s): %s", len(handles), exc)
            raise err from exc
        return dict(proof.clear_values)
