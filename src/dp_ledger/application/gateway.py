"""LedgerGateway — typed reads/writes over the dark pool contract.

Reads degrade to "no data" when the contract is absent; writes raise
ContractNotFoundError. Every raw failure is classified into the
LedgerError family so callers can pick a user-facing message.
"""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from src.dp_common.enums import OrderType
from src.dp_common.errors import (
    AlreadyVerifiedError,
    AppError,
    ContractNotFoundError,
    LedgerError,
    UserRejectedError,
)
from src.dp_fhe.domain.capability import EncryptedInput
from src.dp_ledger.domain.contract import (
    BusinessData,
    ContractProviderProtocol,
    DarkPoolContractProtocol,
    PendingTransactionProtocol,
)
from src.dp_order.domain.models import Order

logger = logging.getLogger(__name__)


def classify_ledger_error(exc: Exception, business_id: str = "") -> AppError:
    """Map a raw provider/contract exception onto the AppError taxonomy."""
    text = str(exc).lower()
    if "user rejected" in text or "user denied" in text:
        return UserRejectedError()
    if "already verified" in text:
        return AlreadyVerifiedError(business_id)
    return LedgerError(f"Ledger call failed: {exc}")


@contextmanager
def _ledger_call(business_id: str = "") -> Iterator[None]:
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        raise classify_ledger_error(exc, business_id) from exc


def business_data_to_order(business_id: str, data: BusinessData) -> Order:
    return Order(
        id=business_id,
        name=data.name,
        token_id=int(data.public_value1),
        order_type=OrderType.from_ledger_code(int(data.public_value2)),
        description=data.description,
        creator=data.creator,
        created_at=int(data.timestamp),
        is_verified=bool(data.is_verified),
        decrypted_value=int(data.decrypted_value or 0),
    )


class LedgerGateway:
    def __init__(self, provider: ContractProviderProtocol) -> None:
        self._provider = provider

    async def _reader(self) -> DarkPoolContractProtocol | None:
        with _ledger_call():
            return await self._provider.get_read_only()

    async def _signer(self) -> DarkPoolContractProtocol:
        with _ledger_call():
            contract = await self._provider.get_with_signer()
        if contract is None:
            raise ContractNotFoundError()
        return contract

    # --- reads ---

    async def contract_address(self) -> str | None:
        contract = await self._reader()
        if contract is None:
            return None
        with _ledger_call():
            return await contract.get_address()

    async def check_liveness(self) -> bool:
        contract = await self._reader()
        if contract is None:
            return False
        with _ledger_call():
            return bool(await contract.is_available())

    async def list_record_ids(self) -> list[str]:
        contract = await self._reader()
        if contract is None:
            return []
        with _ledger_call():
            return list(await contract.get_all_business_ids())

    async def get_record(self, business_id: str) -> Order:
        contract = await self._reader()
        if contract is None:
            raise ContractNotFoundError()
        with _ledger_call(business_id):
            data = await contract.get_business_data(business_id)
            # A malformed struct classifies like a failed call
            return business_data_to_order(business_id, data)

    async def get_encrypted_handle(self, business_id: str) -> str:
        contract = await self._reader()
        if contract is None:
            raise ContractNotFoundError()
        with _ledger_call(business_id):
            return await contract.get_encrypted_value(business_id)

    async def load_records(self) -> list[Order]:
        """Full snapshot. A failing id is skipped; a failing listing raises."""
        ids = await self.list_record_ids()
        orders: list[Order] = []
        for business_id in ids:
            try:
                orders.append(await self.get_record(business_id))
            except AppError as exc:
                logger.warning("Skipping order %s: %s", business_id, exc.message)
        logger.debug("Loaded %d/%d orders", len(orders), len(ids))
        return orders

    # --- writes ---

    async def create_record(
        self,
        business_id: str,
        name: str,
        encrypted: EncryptedInput,
        token_id: int,
        order_type: OrderType,
        description: str,
    ) -> PendingTransactionProtocol:
        contract = await self._signer()
        with _ledger_call(business_id):
            tx = await contract.create_business_data(
                business_id,
                name,
                encrypted.handle,
                encrypted.proof,
                token_id,
                order_type.ledger_code,
                description,
            )
        logger.info("createBusinessData sent: id=%s tx=%s", business_id, tx.hash)
        return _ClassifiedTransaction(tx, business_id)

    async def submit_reveal_proof(
        self, business_id: str, abi_encoded_clear_values: str, decryption_proof: str
    ) -> PendingTransactionProtocol:
        contract = await self._signer()
        with _ledger_call(business_id):
            tx = await contract.verify_decryption(
                business_id, abi_encoded_clear_values, decryption_proof
            )
        logger.info("verifyDecryption sent: id=%s tx=%s", business_id, tx.hash)
        return _ClassifiedTransaction(tx, business_id)


class _ClassifiedTransaction:
    """Pending tx whose wait() reverts are classified like the send path."""

    def __init__(self, tx: PendingTransactionProtocol, business_id: str) -> None:
        self._tx = tx
        self._business_id = business_id

    @property
    def hash(self) -> str:
        return self._tx.hash

    async def wait(self) -> None:
        with _ledger_call(self._business_id):
            await self._tx.wait()
