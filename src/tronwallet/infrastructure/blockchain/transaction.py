"""Transaction construction and signing.

Provides:
- Typed payloads for the four transaction kinds the wallet submits
- A network-free builder turning intents into unsigned transactions
- A deterministic signer producing new, immutable signed transactions
"""

import hashlib
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar

from eth_account import Account

from tronwallet.core.exceptions import InvalidAmount, SigningError
from tronwallet.infrastructure.blockchain import abi
from tronwallet.infrastructure.blockchain.address import Address

logger = logging.getLogger(__name__)

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


class ContractType(str, Enum):
    """Node contract type of a transaction payload."""

    TRANSFER = "TransferContract"
    TRIGGER_SMART_CONTRACT = "TriggerSmartContract"
    ACCOUNT_CREATE = "AccountCreateContract"


class SubmissionState(str, Enum):
    """Progress of a single submit operation."""

    IDLE = "idle"
    BUILDING = "building"
    SIGNING = "signing"
    BROADCASTING = "broadcasting"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class CoinTransfer:
    """Native TRX transfer, amount in SUN."""

    contract_type: ClassVar[ContractType] = ContractType.TRANSFER

    owner: Address
    to: Address
    amount: int


@dataclass(frozen=True)
class TokenTransfer:
    """TRC-20 ``transfer(address,uint256)`` call, amount in token units."""

    contract_type: ClassVar[ContractType] = ContractType.TRIGGER_SMART_CONTRACT

    owner: Address
    contract_address: Address
    to: Address
    amount: int
    call_data: bytes


@dataclass(frozen=True)
class AccountCreate:
    """Activation of a new account, paid by the owner."""

    contract_type: ClassVar[ContractType] = ContractType.ACCOUNT_CREATE

    owner: Address
    account: Address


@dataclass(frozen=True)
class ContractTrigger:
    """Arbitrary state-changing contract call."""

    contract_type: ClassVar[ContractType] = ContractType.TRIGGER_SMART_CONTRACT

    owner: Address
    contract_address: Address
    call_data: bytes
    call_value: int = 0


TransactionPayload = CoinTransfer | TokenTransfer | AccountCreate | ContractTrigger


@dataclass(frozen=True)
class UnsignedTransaction:
    """Payload plus the raw data the node produced for it.

    ``raw_data_hex`` stays empty until the chain client has created the
    transaction on the node.
    """

    payload: TransactionPayload
    raw_data: dict[str, Any] = field(default_factory=dict)
    raw_data_hex: str = ""
    node_tx_id: str = ""
    signatures: tuple[bytes, ...] = ()

    @property
    def owner(self) -> Address:
        return self.payload.owner

    @property
    def is_materialized(self) -> bool:
        return bool(self.raw_data_hex)

    def with_node_transaction(self, transaction: dict[str, Any]) -> "UnsignedTransaction":
        """Return a copy carrying the node's ``raw_data`` and ``raw_data_hex``.

        Signatures already present on the node transaction are kept.
        """
        return replace(
            self,
            raw_data=transaction["raw_data"],
            raw_data_hex=transaction["raw_data_hex"],
            node_tx_id=transaction.get("txID", ""),
            signatures=tuple(bytes.fromhex(s) for s in transaction.get("signature") or []),
        )


@dataclass(frozen=True)
class SignedTransaction:
    """Unsigned transaction plus signatures and its ID. Never mutated."""

    unsigned: UnsignedTransaction
    signatures: tuple[bytes, ...]
    tx_id: str

    def to_broadcast_payload(self) -> dict[str, Any]:
        """JSON body for ``/wallet/broadcasttransaction``."""
        return {
            "txID": self.tx_id,
            "raw_data": dict(self.unsigned.raw_data),
            "raw_data_hex": self.unsigned.raw_data_hex,
            "signature": [signature.hex() for signature in self.signatures],
            "visible": False,
        }


class TransactionBuilder:
    """Assembles unsigned transactions from intents.

    Builders never contact the network; amounts are already in smallest units.
    """

    @staticmethod
    def _require_positive(amount: int) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise InvalidAmount(f"amount must be a positive integer, got {amount!r}")

    def build_coin_transfer(self, owner: Address, to: Address, amount: int) -> UnsignedTransaction:
        self._require_positive(amount)
        return UnsignedTransaction(CoinTransfer(owner=owner, to=to, amount=amount))

    def build_token_transfer(
        self, owner: Address, to: Address, contract_address: Address, amount: int
    ) -> UnsignedTransaction:
        """Encode a TRC-20 transfer call to ``to`` of ``amount`` token units."""
        self._require_positive(amount)
        return UnsignedTransaction(
            TokenTransfer(
                owner=owner,
                contract_address=contract_address,
                to=to,
                amount=amount,
                call_data=abi.encode_transfer(to, amount),
            )
        )

    def build_account_create(self, owner: Address, new_address: Address) -> UnsignedTransaction:
        return UnsignedTransaction(AccountCreate(owner=owner, account=new_address))

    def build_contract_trigger(
        self,
        owner: Address,
        contract_address: Address,
        call_data: bytes,
        call_value: int = 0,
    ) -> UnsignedTransaction:
        if call_value < 0:
            raise InvalidAmount(f"call value must not be negative, got {call_value}")
        return UnsignedTransaction(
            ContractTrigger(
                owner=owner,
                contract_address=contract_address,
                call_data=call_data,
                call_value=call_value,
            )
        )


def _parse_private_key(private_key: str | bytes) -> bytes:
    """Validate key material and return its 32 raw bytes."""
    if isinstance(private_key, str):
        text = private_key[2:] if private_key.startswith("0x") else private_key
        try:
            key = bytes.fromhex(text)
        except ValueError as e:
            raise SigningError("private key is not valid hex") from e
    elif isinstance(private_key, (bytes, bytearray)):
        key = bytes(private_key)
    else:
        raise SigningError(f"unsupported private key type: {type(private_key).__name__}")

    if len(key) != 32:
        raise SigningError(f"private key must be 32 bytes, got {len(key)}")
    if not 0 < int.from_bytes(key, "big") < SECP256K1_N:
        raise SigningError("private key is outside the secp256k1 range")
    return key


class TransactionSigner:
    """Signs raw transaction data with a secp256k1 key.

    The digest is SHA-256 of the raw-data bytes and doubles as the
    transaction ID. Signatures are RFC 6979 deterministic.
    """

    def sign(self, unsigned: UnsignedTransaction, private_key: str | bytes) -> SignedTransaction:
        """Sign a transaction the node has already created.

        Args:
            unsigned: Transaction with raw data filled in
            private_key: 32-byte key, raw or hex (with or without 0x)

        Returns:
            New SignedTransaction; ``unsigned`` is left untouched

        Raises:
            SigningError: Malformed key or transaction without raw data
        """
        if not unsigned.is_materialized:
            raise SigningError(
                "transaction has no raw data; create it on the node first",
                address=str(unsigned.owner),
            )
        try:
            raw = bytes.fromhex(unsigned.raw_data_hex)
        except ValueError as e:
            raise SigningError("raw data is not valid hex", address=str(unsigned.owner)) from e

        digest = hashlib.sha256(raw).digest()
        tx_id = digest.hex()

        if unsigned.node_tx_id and unsigned.node_tx_id != tx_id:
            logger.warning(
                f"Node reported txID {unsigned.node_tx_id}, computed {tx_id}; using computed"
            )

        account = Account.from_key(_parse_private_key(private_key))
        signed = account.unsafe_sign_hash(digest)

        return SignedTransaction(
            unsigned=unsigned,
            signatures=unsigned.signatures + (bytes(signed.signature),),
            tx_id=tx_id,
        )

    def address_from_key(self, private_key: str | bytes) -> Address:
        """Derive the TRON address controlled by a key."""
        account = Account.from_key(_parse_private_key(private_key))
        return Address.from_hex(account.address)


def generate_keypair() -> tuple[Address, str]:
    """Create a fresh key and return its address and hex private key."""
    account = Account.create()
    return Address.from_hex(account.address), bytes(account.key).hex()
