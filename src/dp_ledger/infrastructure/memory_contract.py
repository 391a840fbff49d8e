"""In-process simulation of the deployed dark pool contract.

Backs the local dev chain and the tests. Writes are validated when sent
(like a gas estimate) and applied when the pending transaction is waited
on (like mining), re-checking state then, so two racing reveals end with
the second one reverting "Data already verified".
"""
import asyncio
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol

from src.dp_common.datetime_utils import unix_now
from src.dp_ledger.domain.abi import decode_uints
from src.dp_ledger.domain.contract import BusinessData

logger = logging.getLogger(__name__)


class ContractRevertError(Exception):
    """Execution reverted with a reason string."""


class ProofVerifierProtocol(Protocol):
    def verify_input(
        self, handle: str, proof: str, contract_address: str, user_address: str
    ) -> bool: ...

    def verify_reveal(self, handles: list[str], abi_encoded: str, proof: str) -> bool: ...


@dataclass
class _Entry:
    data: BusinessData
    encrypted_value: str


class InMemoryTransaction:
    def __init__(self, tx_hash: str, apply: Callable[[], None]) -> None:
        self._hash = tx_hash
        self._apply = apply
        self._mined = False

    @property
    def hash(self) -> str:
        return self._hash

    async def wait(self) -> None:
        if self._mined:
            return
        await asyncio.sleep(0)
        self._apply()
        self._mined = True


class InMemoryChain:
    """Contract storage shared by every bound contract handle."""

    def __init__(
        self,
        address: str,
        verifier: ProofVerifierProtocol,
        clock: Callable[[], int] = unix_now,
    ) -> None:
        self.address = address
        self._verifier = verifier
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._ids: list[str] = []
        self._tx_counter = itertools.count(1)

    def next_tx_hash(self) -> str:
        return f"0x{next(self._tx_counter):064x}"

    def get(self, business_id: str) -> _Entry:
        entry = self._entries.get(business_id)
        if entry is None:
            raise ContractRevertError("Business data does not exist")
        return entry

    def ids(self) -> list[str]:
        return list(self._ids)

    def check_create(
        self, business_id: str, handle: str, proof: str, sender: str
    ) -> None:
        if business_id in self._entries:
            raise ContractRevertError("Business data already exists")
        if not self._verifier.verify_input(handle, proof, self.address, sender):
            raise ContractRevertError("Invalid input proof")

    def apply_create(self, business_id: str, data: BusinessData, handle: str) -> None:
        self._entries[business_id] = _Entry(
            data=replace(data, timestamp=self._clock()), encrypted_value=handle
        )
        self._ids.append(business_id)

    def check_reveal(self, business_id: str, abi_encoded: str, proof: str) -> None:
        entry = self.get(business_id)
        if entry.data.is_verified:
            raise ContractRevertError("Data already verified")
        if not self._verifier.verify_reveal([entry.encrypted_value], abi_encoded, proof):
            raise ContractRevertError("Invalid decryption proof")

    def apply_reveal(self, business_id: str, abi_encoded: str) -> None:
        entry = self.get(business_id)
        (value,) = decode_uints(abi_encoded)
        entry.data = replace(entry.data, is_verified=True, decrypted_value=value)


class InMemoryDarkPoolContract:
    """Contract handle; `sender` is None for a read-only handle."""

    def __init__(self, chain: InMemoryChain, sender: str | None = None) -> None:
        self._chain = chain
        self._sender = sender

    def _require_signer(self) -> str:
        if self._sender is None:
            raise ContractRevertError("sending a transaction requires a signer")
        return self._sender

    async def get_address(self) -> str:
        return self._chain.address

    async def is_available(self) -> bool:
        return True

    async def get_all_business_ids(self) -> list[str]:
        return self._chain.ids()

    async def get_business_data(self, business_id: str) -> BusinessData:
        return self._chain.get(business_id).data

    async def get_encrypted_value(self, business_id: str) -> str:
        return self._chain.get(business_id).encrypted_value

    async def create_business_data(
        self,
        business_id: str,
        name: str,
        encrypted_value: str,
        input_proof: str,
        public_value1: int,
        public_value2: int,
        description: str,
    ) -> InMemoryTransaction:
        sender = self._require_signer()
        self._chain.check_create(business_id, encrypted_value, input_proof, sender)
        data = BusinessData(
            name=name,
            public_value1=public_value1,
            public_value2=public_value2,
            description=description,
            creator=sender,
            timestamp=0,
            is_verified=False,
            decrypted_value=0,
        )

        def apply() -> None:
            self._chain.check_create(business_id, encrypted_value, input_proof, sender)
            self._chain.apply_create(business_id, data, encrypted_value)

        return InMemoryTransaction(self._chain.next_tx_hash(), apply)

    async def verify_decryption(
        self, business_id: str, abi_encoded_clear_values: str, decryption_proof: str
    ) -> InMemoryTransaction:
        self._require_signer()
        self._chain.check_reveal(business_id, abi_encoded_clear_values, decryption_proof)

        def apply() -> None:
            self._chain.check_reveal(business_id, abi_encoded_clear_values, decryption_proof)
            self._chain.apply_reveal(business_id, abi_encoded_clear_values)

        return InMemoryTransaction(self._chain.next_tx_hash(), apply)


class InMemoryContractProvider:
    """Resolves contract handles; the signer is whatever account is connected."""

    def __init__(
        self,
        chain: InMemoryChain | None,
        signer_address: Callable[[], str | None],
    ) -> None:
        self._chain = chain
        self._signer_address = signer_address

    async def get_read_only(self) -> InMemoryDarkPoolContract | None:
        if self._chain is None:
            return None
        return InMemoryDarkPoolContract(self._chain)

    async def get_with_signer(self) -> InMemoryDarkPoolContract | None:
        if self._chain is None:
            return None
        address = self._signer_address()
        if address is None:
            logger.debug("No signer available; wallet not connected")
            return None
        return InMemoryDarkPoolContract(self._chain, sender=address)
