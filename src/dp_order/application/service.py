# src/dp_order/application/service.py
"""Process-wide OrderWorkflow wired to the local dev chain.

Swap build_workflow() arguments for a real contract provider / FHE SDK
binding when running against a network.
"""
from config.settings import settings
from src.dp_fhe.application.decryption import DecryptionSession
from src.dp_fhe.application.encryption import EncryptionSession
from src.dp_fhe.domain.capability import FheCapabilityProtocol
from src.dp_fhe.infrastructure.local_capability import LocalFheCapability
from src.dp_gateway.wallet.session import WalletSession
from src.dp_ledger.application.gateway import LedgerGateway
from src.dp_ledger.domain.contract import ContractProviderProtocol
from src.dp_ledger.infrastructure.memory_contract import (
    InMemoryChain,
    InMemoryContractProvider,
)
from src.dp_order.application.workflow import OrderWorkflow

_workflow: OrderWorkflow | None = None


def build_workflow(
    wallet: WalletSession,
    provider: ContractProviderProtocol,
    capability: FheCapabilityProtocol,
) -> OrderWorkflow:
    return OrderWorkflow(
        wallet=wallet,
        ledger=LedgerGateway(provider),
        encryption=EncryptionSession(capability),
        decryption=DecryptionSession(capability),
    )


def build_local_workflow() -> OrderWorkflow:
    wallet = WalletSession()
    capability = LocalFheCapability()
    chain = InMemoryChain(settings.LOCAL_CONTRACT_ADDRESS, verifier=capability)
    provider = InMemoryContractProvider(chain, signer_address=lambda: wallet.address)
    return build_workflow(wallet, provider, capability)


def get_workflow() -> OrderWorkflow:
    global _workflow  # noqa: PLW0603
    if _workflow is None:
        _workflow = build_local_workflow()
    return _workflow


def reset_workflow() -> None:
    """Drop the singleton; the next get_workflow() starts a fresh chain."""
    global _workflow  # noqa: PLW0603
    _workflow = None
