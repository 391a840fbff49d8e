"""LocalFheCapability — in-process stand-in for the FHE SDK + relayer.

Used by the local dev chain and the tests. It keeps plaintexts in a vault
keyed by opaque handles and signs proofs with a shared HMAC key, so the
in-memory contract can check them the way the on-chain ACL/KMS would.
It provides no confidentiality whatsoever.
"""
import asyncio
import hashlib
import hmac
import itertools
import logging

from config.settings import settings
from src.dp_fhe.domain.capability import EncryptedInput, RevealProof
from src.dp_ledger.domain.abi import encode_uints

logger = logging.getLogger(__name__)


class LocalFheCapability:
    def __init__(
        self, secret: str | None = None, vault: dict[str, int] | None = None
    ) -> None:
        self._key = (secret or settings.LOCAL_FHE_SECRET).encode()
        # Shared vault = shared relayer: any capability on it can reveal any handle
        self._vault: dict[str, int] = vault if vault is not None else {}
        self._nonce = itertools.count(1)
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        # Real SDK fetches public key + CRS from the relayer here.
        await asyncio.sleep(0)
        self._initialized = True

    def reset(self) -> None:
        self._initialized = False

    def _sign(self, *parts: str) -> str:
        msg = "|".join(parts).encode()
        return "0x" + hmac.new(self._key, msg, hashlib.sha256).hexdigest()

    async def encrypt(
        self, contract_address: str, user_address: str, value: int, bits: int
    ) -> EncryptedInput:
        if not self._initialized:
            raise RuntimeError("FHE instance not initialized")
        if not (0 <= value < 1 << bits):
            raise ValueError(f"value does not fit euint{bits}")
        nonce = str(next(self._nonce))
        handle = self._sign("handle", contract_address.lower(), user_address.lower(), nonce)
        self._vault[handle] = value
        proof = self._sign("input", handle, contract_address.lower(), user_address.lower())
        logger.debug("Local encrypt: user=%s handle=%s", user_address, handle[:18])
        return EncryptedInput(handle=handle, proof=proof)

    async def prepare_reveal(self, handles: list[str], contract_address: str) -> RevealProof:
        if not self._initialized:
            raise RuntimeError("FHE instance not initialized")
        unknown = [h for h in handles if h not in self._vault]
        if unknown:
            raise KeyError(f"unknown ciphertext handle {unknown[0]}")
        clear = {h: self._vault[h] for h in handles}
        abi = encode_uints([clear[h] for h in handles])
        proof = self._sign("reveal", ",".join(handles), abi)
        return RevealProof(
            clear_values=clear,
            abi_encoded_clear_values=abi,
            decryption_proof=proof,
        )

    # --- checks the in-memory contract runs on submission ---

    def verify_input(
        self, handle: str, proof: str, contract_address: str, user_address: str
    ) -> bool:
        expected = self._sign("input", handle, contract_address.lower(), user_address.lower())
        return hmac.compare_digest(expected, proof)

    def verify_reveal(self, handles: list[str], abi_encoded: str, proof: str) -> bool:
        expected = self._sign("reveal", ",".join(handles), abi_encoded)
        return hmac.compare_digest(expected, proof)
