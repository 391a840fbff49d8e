# src/dp_fhe/domain/capability.py
"""FHE capability Protocol — interface contract for the encrypt/decrypt SDK.

The SDK owns key material and the relayer round-trip; this codebase only
sees opaque handles, proofs and (after a reveal) cleartext integers.
"""
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class EncryptedInput:
    handle: str  # externalEuint32 handle passed to the contract
    proof: str  # input correctness proof (hex)


@dataclass(frozen=True)
class RevealProof:
    """Output of the off-ledger decryption round, ready for submission."""

    clear_values: dict[str, int] = field(default_factory=dict)
    abi_encoded_clear_values: str = ""
    decryption_proof: str = ""


class FheCapabilityProtocol(Protocol):
    @property
    def is_initialized(self) -> bool: ...

    async def initialize(self) -> None: ...

    def reset(self) -> None: ...

    async def encrypt(
        self, contract_address: str, user_address: str, value: int, bits: int
    ) -> EncryptedInput: ...

    async def prepare_reveal(
        self, handles: list[str], contract_address: str
    ) -> RevealProof: ...
