"""Unit tests for the in-memory dark pool contract and local FHE capability."""
import pytest

from src.dp_fhe.infrastructure.local_capability import LocalFheCapability
from src.dp_ledger.domain.abi import encode_uints
from src.dp_ledger.infrastructure.memory_contract import (
    ContractRevertError,
    InMemoryChain,
    InMemoryContractProvider,
    InMemoryDarkPoolContract,
)

CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
ALICE = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
BOB = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"


@pytest.fixture
async def capability() -> LocalFheCapability:
    cap = LocalFheCapability(secret="test")
    await cap.initialize()
    return cap


@pytest.fixture
def chain(capability: LocalFheCapability) -> InMemoryChain:
    return InMemoryChain(CONTRACT, verifier=capability, clock=lambda: 1_700_000_000)


async def _create(
    chain: InMemoryChain, cap: LocalFheCapability, business_id: str, value: int
) -> str:
    enc = await cap.encrypt(CONTRACT, ALICE, value, 32)
    contract = InMemoryDarkPoolContract(chain, sender=ALICE)
    tx = await contract.create_business_data(business_id, "A", enc.handle, enc.proof, 1, 0, "")
    await tx.wait()
    return enc.handle


class TestLocalFheCapability:
    async def test_encrypt_requires_init(self) -> None:
        with pytest.raises(RuntimeError):
            await LocalFheCapability(secret="x").encrypt(CONTRACT, ALICE, 1, 32)

    async def test_input_proof_bound_to_user(self, capability: LocalFheCapability) -> None:
        enc = await capability.encrypt(CONTRACT, ALICE, 5, 32)
        assert capability.verify_input(enc.handle, enc.proof, CONTRACT, ALICE)
        assert not capability.verify_input(enc.handle, enc.proof, CONTRACT, BOB)

    async def test_reveal_proof_verifies(self, capability: LocalFheCapability) -> None:
        enc = await capability.encrypt(CONTRACT, ALICE, 5, 32)
        proof = await capability.prepare_reveal([enc.handle], CONTRACT)
        assert proof.clear_values == {enc.handle: 5}
        assert capability.verify_reveal(
            [enc.handle], proof.abi_encoded_clear_values, proof.decryption_proof
        )
        # A forged cleartext does not verify against the same proof
        assert not capability.verify_reveal(
            [enc.handle], encode_uints([6]), proof.decryption_proof
        )

    async def test_unknown_handle(self, capability: LocalFheCapability) -> None:
        with pytest.raises(KeyError):
            await capability.prepare_reveal(["0xdead"], CONTRACT)


class TestInMemoryContract:
    async def test_create_applies_on_wait(
        self, chain: InMemoryChain, capability: LocalFheCapability
    ) -> None:
        enc = await capability.encrypt(CONTRACT, ALICE, 5, 32)
        contract = InMemoryDarkPoolContract(chain, sender=ALICE)
        tx = await contract.create_business_data("order-1", "A", enc.handle, enc.proof, 1, 0, "")
        assert await contract.get_all_business_ids() == []
        await tx.wait()
        data = await contract.get_business_data("order-1")
        assert data.creator == ALICE
        assert data.timestamp == 1_700_000_000
        assert data.is_verified is False

    async def test_duplicate_id_reverts(
        self, chain: InMemoryChain, capability: LocalFheCapability
    ) -> None:
        await _create(chain, capability, "order-1", 5)
        with pytest.raises(ContractRevertError):
            await _create(chain, capability, "order-1", 6)

    async def test_invalid_input_proof_reverts(
        self, chain: InMemoryChain, capability: LocalFheCapability
    ) -> None:
        enc = await capability.encrypt(CONTRACT, ALICE, 5, 32)
        contract = InMemoryDarkPoolContract(chain, sender=BOB)
        with pytest.raises(ContractRevertError, match="Invalid input proof"):
            await contract.create_business_data("order-1", "A", enc.handle, enc.proof, 1, 0, "")

    async def test_read_only_handle_cannot_send(self, chain: InMemoryChain) -> None:
        with pytest.raises(ContractRevertError):
            await InMemoryDarkPoolContract(chain).verify_decryption("order-1", "0x", "0x")

    async def test_racing_reveals_second_reverts(
        self, chain: InMemoryChain, capability: LocalFheCapability
    ) -> None:
        handle = await _create(chain, capability, "order-1", 5)
        proof = await capability.prepare_reveal([handle], CONTRACT)
        contract = InMemoryDarkPoolContract(chain, sender=BOB)
        first = await contract.verify_decryption(
            "order-1", proof.abi_encoded_clear_values, proof.decryption_proof
        )
        second = await contract.verify_decryption(
            "order-1", proof.abi_encoded_clear_values, proof.decryption_proof
        )
        await first.wait()
        with pytest.raises(ContractRevertError, match="Data already verified"):
            await second.wait()
        data = await contract.get_business_data("order-1")
        assert data.is_verified is True
        assert data.decrypted_value == 5


class TestInMemoryContractProvider:
    async def test_signer_follows_wallet(self, chain: InMemoryChain) -> None:
        current: dict[str, str | None] = {"address": None}
        provider = InMemoryContractProvider(chain, signer_address=lambda: current["address"])
        assert await provider.get_with_signer() is None
        current["address"] = ALICE
        assert await provider.get_with_signer() is not None

    async def test_not_deployed(self) -> None:
        provider = InMemoryContractProvider(None, signer_address=lambda: ALICE)
        assert await provider.get_read_only() is None
        assert await provider.get_with_signer() is None
