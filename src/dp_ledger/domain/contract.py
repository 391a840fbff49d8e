# src/dp_ledger/domain/contract.py
"""Ledger Protocols — interface contract for the deployed dark pool contract.

Method names follow the contract ABI (getAllBusinessIds, getBusinessData, ...)
in snake_case. A provider resolves to a read-only or a signer-bound handle;
either may be None when the contract is not deployed on the current network.
"""
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class BusinessData:
    """Raw struct returned by getBusinessData."""

    name: str
    public_value1: int  # NFT token id
    public_value2: int  # order type code (0=Buy, 1=Sell)
    description: str
    creator: str
    timestamp: int  # block timestamp, unix seconds
    is_verified: bool
    decrypted_value: int


class PendingTransactionProtocol(Protocol):
    @property
    def hash(self) -> str: ...

    async def wait(self) -> None: ...


class DarkPoolContractProtocol(Protocol):
    async def get_address(self) -> str: ...

    async def is_available(self) -> bool: ...

    async def get_all_business_ids(self) -> list[str]: ...

    async def get_business_data(self, business_id: str) -> BusinessData: ...

    async def get_encrypted_value(self, business_id: str) -> str: ...

    async def create_business_data(
        self,
        business_id: str,
        name: str,
        encrypted_value: str,
        input_proof: str,
        public_value1: int,
        public_value2: int,
        description: str,
    ) -> PendingTransactionProtocol: ...

    async def verify_decryption(
        self, business_id: str, abi_encoded_clear_values: str, decryption_proof: str
    ) -> PendingTransactionProtocol: ...


class ContractProviderProtocol(Protocol):
    async def get_read_only(self) -> DarkPoolContractProtocol | None: ...

    async def get_with_signer(self) -> DarkPoolContractProtocol | None: ...
