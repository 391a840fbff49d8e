"""OrderWorkflow — confidential order lifecycle orchestrator.

Composes LedgerGateway, EncryptionSession and DecryptionSession into the
create-order and reveal-price protocols, and owns all session-scoped UI
state: the order snapshot and derived views, per-action busy flags and
the transaction status.

Reset rules:
  - every protocol sets its busy flag on entry and clears it on exit;
  - a wallet change bumps the session epoch, clears every flag, the status
    and the views. A protocol that resumes after that sees a stale epoch
    and returns without touching state.

The order set is only ever replaced wholesale by load_data(); nothing
patches it in place, so overlapping reloads converge (last one wins).
"""
import logging
from collections.abc import Callable

from src.dp_common.errors import (
    AlreadyVerifiedError,
    AppError,
    ContractNotFoundError,
    EncryptionError,
    OrderNotFoundError,
    OrderValidationError,
    UserRejectedError,
)
from src.dp_common.id_generator import generate_order_id
from src.dp_fhe.application.decryption import DecryptionSession
from src.dp_fhe.application.encryption import EncryptionSession
from src.dp_gateway.wallet.session import WalletSession
from src.dp_ledger.application.gateway import LedgerGateway
from src.dp_ledger.domain.contract import PendingTransactionProtocol
from src.dp_order.application.schemas import CreateOrderRequest
from src.dp_order.domain.models import MarketStats, Order
from src.dp_order.domain.projector import compute_stats, filter_by_creator
from src.dp_order.domain.status import StatusBoard

logger = logging.getLogger(__name__)

MSG_CONNECT_FIRST = "Connect wallet first"
MSG_FHE_INIT_FAILED = "FHEVM initialization failed"
MSG_LOAD_FAILED = "Failed to load data"
MSG_CREATING = "Creating order with FHE..."
MSG_CONFIRMING = "Confirming transaction..."
MSG_CREATED = "Order created!"
MSG_REJECTED = "Transaction rejected"
MSG_INVALID_PRICE = "Invalid price"
MSG_CREATE_FAILED = "Creation failed"
MSG_VERIFIED = "Price verified"
MSG_VERIFYING = "Verifying decryption..."
MSG_DECRYPTED = "Price decrypted!"
MSG_DECRYPT_FAILED = "Decryption failed"
MSG_CONTRACT_AVAILABLE = "Contract available"
MSG_CHECK_FAILED = "Check failed"


class OrderWorkflow:
    def __init__(
        self,
        wallet: WalletSession,
        ledger: LedgerGateway,
        encryption: EncryptionSession,
        decryption: DecryptionSession,
        status: StatusBoard | None = None,
        id_factory: Callable[[], str] = generate_order_id,
    ) -> None:
        self._wallet = wallet
        self._ledger = ledger
        self._encryption = encryption
        self._decryption = decryption
        self._status = status or StatusBoard()
        self._next_id = id_factory
        self._epoch = 0

        self.orders: list[Order] = []
        self.market_stats = MarketStats()
        self.user_history: list[Order] = []
        self.contract_address: str | None = None

        self.loading = False
        self.creating_order = False
        self.is_decrypting = False
        self.show_create_form = False
        self._refreshes_in_flight = 0

        wallet.add_listener(self._on_wallet_change)

    # --- state accessors ---

    @property
    def wallet(self) -> WalletSession:
        return self._wallet

    @property
    def status(self) -> StatusBoard:
        return self._status

    @property
    def is_connected(self) -> bool:
        return self._wallet.is_connected

    @property
    def address(self) -> str | None:
        return self._wallet.address

    @property
    def is_refreshing(self) -> bool:
        return self._refreshes_in_flight > 0

    @property
    def fhe_initialized(self) -> bool:
        return self._encryption.is_initialized

    @property
    def fhe_initializing(self) -> bool:
        return self._encryption.is_initializing

    def get_order(self, order_id: str) -> Order:
        for order in self.orders:
            if order.id == order_id:
                return order
        raise OrderNotFoundError(order_id)

    def open_create_form(self) -> None:
        self.show_create_form = True

    def close_create_form(self) -> None:
        self.show_create_form = False

    # --- session lifecycle ---

    async def _on_wallet_change(self, wallet: WalletSession) -> None:
        self._reset_session()
        if wallet.is_connected:
            await self.on_connected()

    def _reset_session(self) -> None:
        """Hard stop: nothing from the previous session survives."""
        self._epoch += 1
        self._status.clear()
        self._encryption.reset()
        self.orders = []
        self.market_stats = MarketStats()
        self.user_history = []
        self.contract_address = None
        self.loading = False
        self.creating_order = False
        self.is_decrypting = False
        self.show_create_form = False
        self._refreshes_in_flight = 0

    def _stale(self, epoch: int) -> bool:
        return epoch != self._epoch

    async def on_connected(self) -> None:
        epoch = self._epoch
        self.loading = True
        try:
            await self.initialize_fhe()
            if self._stale(epoch):
                return
            await self.load_data()
            if self._stale(epoch):
                return
            try:
                address = await self._ledger.contract_address()
            except AppError as exc:
                logger.error("Failed to resolve contract address: %s", exc.message)
            else:
                if not self._stale(epoch):
                    self.contract_address = address
        finally:
            if not self._stale(epoch):
                self.loading = False

    async def initialize_fhe(self) -> None:
        if (
            not self._wallet.is_connected
            or self._encryption.is_initialized
            or self._encryption.is_initializing
        ):
            return
        epoch = self._epoch
        try:
            await self._encryption.ensure_initialized()
        except EncryptionError:
            if not self._stale(epoch):
                self._status.error(MSG_FHE_INIT_FAILED)

    # --- reload ---

    async def refresh(self) -> None:
        """User-triggered reload; ignored while one is already running."""
        if self.is_refreshing:
            return
        await self.load_data()

    async def load_data(self) -> None:
        """Replace the order snapshot and recompute every derived view."""
        if not self._wallet.is_connected:
            return
        epoch = self._epoch
        self._refreshes_in_flight += 1
        try:
            orders = await self._ledger.load_records()
        except Exception as exc:
            logger.warning("Order listing failed: %s", exc)
            if not self._stale(epoch):
                self._status.error(MSG_LOAD_FAILED)
            return
        finally:
            if not self._stale(epoch):
                self._refreshes_in_flight -= 1

        if self._stale(epoch):
            return
        self.orders = orders
        self.market_stats = compute_stats(orders)
        self.user_history = filter_by_creator(orders, self._wallet.address, self.user_history)

    async def _resolve_contract_address(self, epoch: int) -> str:
        address = self.contract_address
        if address is None:
            address = await self._ledger.contract_address()
            if address is not None and not self._stale(epoch):
                self.contract_address = address
        if address is None:
            raise ContractNotFoundError()
        return address

    # --- create-order protocol ---

    async def create_order(self, req: CreateOrderRequest) -> bool:
        """Encrypt the price, submit the record, await confirmation, reload.

        Returns True once the record is confirmed on the ledger.
        """
        if self.creating_order:
            return False
        owner = self._wallet.address
        if owner is None or not self._encryption.is_initialized:
            self._status.error(MSG_CONNECT_FIRST)
            return False

        epoch = self._epoch
        self.creating_order = True
        self._status.pending(MSG_CREATING)
        try:
            business_id = self._next_id()
            contract_address = await self._resolve_contract_address(epoch)
            encrypted = await self._encryption.encrypt(contract_address, owner, req.price)
            tx = await self._ledger.create_record(
                business_id,
                req.name,
                encrypted,
                req.token_id,
                req.order_type,
                req.description,
            )
            if self._stale(epoch):
                return False
            self._status.pending(MSG_CONFIRMING)
            await tx.wait()
        except OrderValidationError as exc:
            logger.info("Create order rejected: %s", exc.message)
            self._fail(epoch, MSG_INVALID_PRICE)
            return False
        except UserRejectedError:
            self._fail(epoch, MSG_REJECTED)
            return False
        except Exception as exc:
            logger.warning(
                "Create order failed: %s", exc, exc_info=not isinstance(exc, AppError)
            )
            self._fail(epoch, MSG_CREATE_FAILED)
            return False
        finally:
            if not self._stale(epoch):
                self.creating_order = False

        if self._stale(epoch):
            return False
        logger.info("Order created: id=%s owner=%s", business_id, owner)
        self._status.success(MSG_CREATED)
        await self.load_data()
        self.show_create_form = False
        return True

    # --- reveal protocol ---

    async def reveal_price(self, order_id: str) -> int | None:
        """Reveal and attest an order's price.

        Already-verified orders return their stored price without a new
        transaction. Losing a race to another revealer reloads and returns
        None with a success status.
        """
        if not self._wallet.is_connected or self.is_decrypting:
            return None

        epoch = self._epoch
        self.is_decrypting = True
        try:
            order = await self._ledger.get_record(order_id)
            if order.is_verified:
                if not self._stale(epoch):
                    self._status.success(MSG_VERIFIED)
                return order.decrypted_value

            handle = await self._ledger.get_encrypted_handle(order_id)
            contract_address = await self._resolve_contract_address(epoch)

            async def submit(abi_encoded: str, proof: str) -> PendingTransactionProtocol:
                return await self._ledger.submit_reveal_proof(order_id, abi_encoded, proof)

            clear_values = await self._decryption.reveal_values(
                [handle], contract_address, submit
            )
            if self._stale(epoch):
                return None
            self._status.pending(MSG_VERIFYING)
            value = int(clear_values[handle])
            await self.load_data()
            if self._stale(epoch):
                return None
            logger.info("Order %s revealed", order_id)
            self._status.success(MSG_DECRYPTED)
            return value
        except AlreadyVerifiedError:
            logger.info("Order %s was verified concurrently; reconciling", order_id)
            if self._stale(epoch):
                return None
            self._status.success(MSG_VERIFIED)
            await self.load_data()
            return None
        except Exception as exc:
            logger.warning(
                "Reveal failed for %s: %s",
                order_id,
                exc,
                exc_info=not isinstance(exc, AppError),
            )
            self._fail(epoch, MSG_DECRYPT_FAILED)
            return None
        finally:
            if not self._stale(epoch):
                self.is_decrypting = False

    # --- liveness ---

    async def check_availability(self) -> bool:
        try:
            available = await self._ledger.check_liveness()
        except Exception as exc:
            logger.warning("Availability check failed: %s", exc)
            self._status.error(MSG_CHECK_FAILED)
            return False
        if available:
            self._status.success(MSG_CONTRACT_AVAILABLE)
        return available

    def _fail(self, epoch: int, message: str) -> None:
        if not self._stale(epoch):
            self._status.error(message)
