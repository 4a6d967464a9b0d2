"""Chain client: queries, transaction submission and node error classification."""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from eth_abi.exceptions import DecodingError

from tronwallet.core.config import get_settings
from tronwallet.core.exceptions import (
    AccountNotFound,
    BroadcastRejected,
    ContractCallFailed,
    InsufficientBalance,
    InvalidAmount,
    TransactionIncomplete,
    TransactionNotFound,
    TransportError,
    WalletError,
)
from tronwallet.infrastructure.blockchain import abi
from tronwallet.infrastructure.blockchain.address import Address
from tronwallet.infrastructure.blockchain.events import decode_transfer_log
from tronwallet.infrastructure.blockchain.models import AccountInfo, Block, TransactionInfo
from tronwallet.infrastructure.blockchain.transaction import (
    AccountCreate,
    CoinTransfer,
    ContractTrigger,
    SubmissionState,
    TokenTransfer,
    TransactionBuilder,
    TransactionSigner,
    UnsignedTransaction,
)
from tronwallet.infrastructure.blockchain.transport import TronNodeTransport
from tronwallet.infrastructure.blockchain.units import TRX_DECIMALS, to_display, to_smallest_unit

logger = logging.getLogger(__name__)

# Account fields reported as resource metadata
RESOURCE_FIELDS = ("net_usage", "free_net_usage", "net_window_size", "energy_usage")


def _node_message(value: Any) -> str:
    """Node messages are usually hex-encoded UTF-8."""
    if not isinstance(value, str):
        return str(value) if value is not None else ""
    try:
        return bytes.fromhex(value).decode("utf-8")
    except ValueError:
        return value


class ChainClient(ABC):
    """Wallet capabilities any supported network provides."""

    @abstractmethod
    async def create_account(self, private_key: str | bytes, new_address: str | Address) -> str:
        """Activate a new account, paid by the key's owner. Returns the tx ID."""
        ...

    @abstractmethod
    async def get_account(self, address: str | Address) -> AccountInfo:
        """Get native balance."""
        ...

    @abstractmethod
    async def get_token_account(
        self, address: str | Address, contract_address: str | Address
    ) -> AccountInfo:
        """Get token balance."""
        ...

    @abstractmethod
    async def transfer(
        self, private_key: str | bytes, to: str | Address, amount: Decimal | int | str
    ) -> str:
        """Send native coin. Returns the tx ID."""
        ...

    @abstractmethod
    async def transfer_token(
        self,
        private_key: str | bytes,
        to: str | Address,
        contract_address: str | Address,
        amount: Decimal | int | str,
    ) -> str:
        """Send tokens. Returns the tx ID."""
        ...

    @abstractmethod
    async def trigger_contract(
        self,
        private_key: str | bytes,
        contract_address: str | Address,
        call_data: bytes,
        call_value: int = 0,
        fee_limit: int | None = None,
    ) -> str:
        """Submit a state-changing contract call. Returns the tx ID."""
        ...

    @abstractmethod
    async def get_transaction_info(self, tx_id: str) -> TransactionInfo:
        """Get decoded transaction receipt."""
        ...

    @abstractmethod
    async def get_latest_block_number(self) -> int:
        """Get current block number."""
        ...

    @abstractmethod
    async def get_block(self, number: int) -> Block | None:
        """Get block by number, or None if not produced yet."""
        ...


class TronClient(ChainClient):
    """TRON implementation over the full-node HTTP API."""

    def __init__(
        self,
        transport: TronNodeTransport | None = None,
        token_decimals: int | None = None,
        fee_limit: int | None = None,
    ):
        """Initialize TRON client.

        Args:
            transport: Node transport. If None, one is built from config.
            token_decimals: Decimals of TRC-20 amounts. If None, uses config.
            fee_limit: Fee limit in SUN for contract triggers. If None, uses config.
        """
        settings = get_settings()
        self.transport = transport or TronNodeTransport()
        self.token_decimals = (
            token_decimals if token_decimals is not None else settings.token_decimals
        )
        self.fee_limit = fee_limit if fee_limit is not None else settings.fee_limit
        self.builder = TransactionBuilder()
        self.signer = TransactionSigner()

    async def aclose(self) -> None:
        await self.transport.aclose()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_account(self, address: str | Address) -> AccountInfo:
        address = Address.parse(address)
        response = await self.transport.get_account(address.to_hex())
        if not response:
            raise AccountNotFound(address=str(address))

        return AccountInfo(
            address=address,
            balance=to_display(response.get("balance", 0), TRX_DECIMALS),
            resources={key: response[key] for key in RESOURCE_FIELDS if key in response},
        )

    async def get_token_account(
        self, address: str | Address, contract_address: str | Address
    ) -> AccountInfo:
        """Query ``balanceOf(address)`` with a constant call."""
        address = Address.parse(address)
        contract_address = Address.parse(contract_address)

        response = await self.transport.trigger_constant_contract(
            owner_address=address.to_hex(),
            contract_address=contract_address.to_hex(),
            data=abi.encode_balance_of(address).hex(),
        )
        result = self._constant_result(response, address)
        try:
            balance = abi.decode_uint256(result)
        except DecodingError as e:
            raise ContractCallFailed(
                f"cannot decode balanceOf result: {result.hex()}", address=str(address)
            ) from e

        return AccountInfo(address=address, balance=to_display(balance, self.token_decimals))

    async def get_transaction_info(self, tx_id: str) -> TransactionInfo:
        """Decode the receipt of a token transfer.

        Raises:
            TransactionNotFound: Node returned an empty object
            TransactionIncomplete: No event log yet
            MalformedReceipt: Log lacks transfer topics or data
        """
        response = await self.transport.get_transaction_info(tx_id)
        if not response:
            raise TransactionNotFound(tx_hash=tx_id)

        logs = response.get("log") or []
        if not logs:
            raise TransactionIncomplete(tx_hash=tx_id)

        try:
            transfer = decode_transfer_log(logs[0])
        except WalletError as e:
            e.tx_hash = tx_id
            raise

        contract_address = response.get("contract_address")
        receipt = response.get("receipt") or {}

        return TransactionInfo(
            tx_id=tx_id,
            block_number=int(response.get("blockNumber", 0)),
            timestamp=int(response.get("blockTimeStamp", 0)),
            fee=to_display(response.get("fee", 0), TRX_DECIMALS),
            contract_address=Address.from_hex(contract_address) if contract_address else None,
            value=to_display(transfer.value, self.token_decimals),
            from_address=transfer.from_address,
            to_address=transfer.to_address,
            success=receipt.get("result") == "SUCCESS",
        )

    async def get_latest_block_number(self) -> int:
        block = await self.transport.get_now_block()
        try:
            return int(block["block_header"]["raw_data"]["number"])
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"getnowblock returned no block header: {block}") from e

    async def get_block(self, number: int) -> Block | None:
        response = await self.transport.get_block_by_number(number)
        header = response.get("block_header")
        if not header:
            return None

        raw_data = header.get("raw_data", {})
        return Block(
            number=int(raw_data.get("number", number)),
            block_id=response.get("blockID", ""),
            timestamp=int(raw_data.get("timestamp", 0)),
            transactions=response.get("transactions") or [],
        )

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def create_account(self, private_key: str | bytes, new_address: str | Address) -> str:
        owner = self.signer.address_from_key(private_key)
        unsigned = self.builder.build_account_create(owner, Address.parse(new_address))
        return await self._submit(unsigned, private_key)

    async def transfer(
        self, private_key: str | bytes, to: str | Address, amount: Decimal | int | str
    ) -> str:
        """Send TRX after checking the sender can cover ``amount``.

        Raises:
            InvalidAmount: Zero or negative amount; checked before any node call
            InsufficientBalance: Balance below amount; nothing is broadcast
            BroadcastRejected: Node refused the transaction
        """
        sun = to_smallest_unit(amount, TRX_DECIMALS)
        if sun <= 0:
            raise InvalidAmount(f"transfer amount must be positive, got {amount}")
        owner = self.signer.address_from_key(private_key)

        account = await self.get_account(owner)
        if to_display(sun, TRX_DECIMALS) > account.balance:
            raise InsufficientBalance(
                f"balance {account.balance} TRX is below {amount}", address=str(owner)
            )

        unsigned = self.builder.build_coin_transfer(owner, Address.parse(to), sun)
        return await self._submit(unsigned, private_key)

    async def transfer_token(
        self,
        private_key: str | bytes,
        to: str | Address,
        contract_address: str | Address,
        amount: Decimal | int | str,
    ) -> str:
        """Send TRC-20 tokens after checking the token balance."""
        units = to_smallest_unit(amount, self.token_decimals)
        if units <= 0:
            raise InvalidAmount(f"transfer amount must be positive, got {amount}")
        owner = self.signer.address_from_key(private_key)
        contract_address = Address.parse(contract_address)

        account = await self.get_token_account(owner, contract_address)
        if to_display(units, self.token_decimals) > account.balance:
            raise InsufficientBalance(
                f"token balance {account.balance} is below {amount}", address=str(owner)
            )

        unsigned = self.builder.build_token_transfer(
            owner, Address.parse(to), contract_address, units
        )
        return await self._submit(unsigned, private_key)

    async def trigger_contract(
        self,
        private_key: str | bytes,
        contract_address: str | Address,
        call_data: bytes,
        call_value: int = 0,
        fee_limit: int | None = None,
    ) -> str:
        """Submit an arbitrary state-changing contract call."""
        owner = self.signer.address_from_key(private_key)
        unsigned = self.builder.build_contract_trigger(
            owner, Address.parse(contract_address), call_data, call_value
        )
        return await self._submit(unsigned, private_key, fee_limit=fee_limit)

    async def _submit(
        self,
        unsigned: UnsignedTransaction,
        private_key: str | bytes,
        fee_limit: int | None = None,
    ) -> str:
        """Create on node, sign and broadcast. Returns the tx ID."""
        owner = str(unsigned.owner)
        kind = type(unsigned.payload).__name__
        state = SubmissionState.IDLE
        try:
            state = SubmissionState.BUILDING
            logger.debug(f"{kind} from {owner}: {state.value}")
            unsigned = await self._create_on_node(unsigned, fee_limit)

            state = SubmissionState.SIGNING
            logger.debug(f"{kind} from {owner}: {state.value}")
            signed = self.signer.sign(unsigned, private_key)

            state = SubmissionState.BROADCASTING
            logger.debug(f"{kind} {signed.tx_id}: {state.value}")
            result = await self.transport.broadcast_transaction(signed.to_broadcast_payload())
            if not result.get("result"):
                message = _node_message(result.get("message")) or result.get("code", "")
                logger.warning(f"Broadcast of {signed.tx_id} rejected: {message}")
                raise BroadcastRejected(
                    f"broadcast rejected: {message}", address=owner, tx_hash=signed.tx_id
                )
        except WalletError:
            logger.debug(f"{kind} from {owner}: {SubmissionState.FAILED.value} while {state.value}")
            raise

        logger.info(f"{kind} {SubmissionState.CONFIRMED.value}: {signed.tx_id} from {owner}")
        return signed.tx_id

    async def _create_on_node(
        self, unsigned: UnsignedTransaction, fee_limit: int | None
    ) -> UnsignedTransaction:
        """Have the node produce raw data (block reference, expiration) for a payload."""
        payload = unsigned.payload
        owner = payload.owner.to_hex()

        if isinstance(payload, CoinTransfer):
            response = await self.transport.create_transaction(
                owner, payload.to.to_hex(), payload.amount
            )
        elif isinstance(payload, AccountCreate):
            response = await self.transport.create_account(owner, payload.account.to_hex())
        elif isinstance(payload, TokenTransfer):
            constant = await self.transport.trigger_constant_contract(
                owner, payload.contract_address.to_hex(), payload.call_data.hex()
            )
            self._constant_result(constant, payload.owner)
            response = constant.get("transaction") or {}
        elif isinstance(payload, ContractTrigger):
            trigger = await self.transport.trigger_smart_contract(
                owner,
                payload.contract_address.to_hex(),
                payload.call_data.hex(),
                fee_limit=fee_limit if fee_limit is not None else self.fee_limit,
                call_value=payload.call_value,
            )
            self._check_call_result(trigger, payload.owner)
            response = trigger.get("transaction") or {}
        else:
            raise TypeError(f"unsupported payload: {type(payload).__name__}")

        if "Error" in response:
            raise BroadcastRejected(
                f"node refused to create transaction: {response['Error']}",
                address=str(payload.owner),
            )
        if "raw_data_hex" not in response or "raw_data" not in response:
            raise TransportError(
                f"node returned no transaction for {type(payload).__name__}",
                address=str(payload.owner),
            )
        try:
            return unsigned.with_node_transaction(response)
        except (TypeError, ValueError) as e:
            raise TransportError(
                f"node returned a malformed transaction for {type(payload).__name__}: {e}",
                address=str(payload.owner),
            ) from e

    @staticmethod
    def _check_call_result(response: dict[str, Any], address: Address) -> None:
        result = response.get("result") or {}
        if result and not result.get("result", False):
            message = _node_message(result.get("message")) or result.get("code", "")
            raise ContractCallFailed(f"contract call failed: {message}", address=str(address))

    def _constant_result(self, response: dict[str, Any], address: Address) -> bytes:
        """First ``constant_result`` entry of a constant call."""
        self._check_call_result(response, address)
        results = response.get("constant_result") or []
        if not results:
            raise ContractCallFailed(address=str(address))
        try:
            return bytes.fromhex(results[0])
        except (TypeError, ValueError) as e:
            raise ContractCallFailed(
                f"constant result is not hex: {results[0]!r}", address=str(address)
            ) from e
