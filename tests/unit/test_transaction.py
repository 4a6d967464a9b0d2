"""Tests for ABI encoding, transaction building and signing."""

import hashlib

import pytest
from eth_abi import decode

from tronwallet.core.exceptions import EventDecodeError, InvalidAmount, SigningError
from tronwallet.infrastructure.blockchain import abi
from tronwallet.infrastructure.blockchain.address import Address
from tronwallet.infrastructure.blockchain.transaction import (
    AccountCreate,
    CoinTransfer,
    ContractTrigger,
    ContractType,
    SignedTransaction,
    TokenTransfer,
    TransactionBuilder,
    TransactionSigner,
    UnsignedTransaction,
    generate_keypair,
)

RAW_DATA_HEX = "0a0207902208e1b9de559665c6714080c49789bb2c5a67080112630a2d747970652e676f6f676c65617069732e636f6d2f70726f746f636f6c2e5472616e73666572436f6e747261637412320a1541"


def node_transaction(raw_data_hex: str = RAW_DATA_HEX) -> dict:
    return {
        "txID": hashlib.sha256(bytes.fromhex(raw_data_hex)).hexdigest(),
        "raw_data": {"expiration": 1700000060000, "timestamp": 1700000000000},
        "raw_data_hex": raw_data_hex,
        "visible": False,
    }


class TestAbi:
    """Tests for the ABI helpers."""

    def test_well_known_selectors(self):
        assert abi.TRANSFER_SELECTOR.hex() == "a9059cbb"
        assert abi.BALANCE_OF_SELECTOR.hex() == "70a08231"

    def test_method_id_from_signature(self):
        assert abi.method_id("transfer(address,uint256)") == abi.TRANSFER_SELECTOR

    def test_method_id_literal_selector(self):
        assert abi.method_id("0xa9059cbb") == abi.TRANSFER_SELECTOR

    def test_encode_balance_of(self, owner):
        data = abi.encode_balance_of(owner)

        assert data[:4] == abi.BALANCE_OF_SELECTOR
        assert len(data) == 4 + 32
        assert data[4:] == bytes(12) + owner.evm_bytes

    def test_encode_transfer_words(self, recipient):
        data = abi.encode_transfer(recipient, 1_500_000)

        assert len(data) == 4 + 64
        assert data[4:36] == bytes(12) + recipient.evm_bytes
        assert int.from_bytes(data[36:], "big") == 1_500_000

    def test_decode_transfer_args(self, recipient):
        data = abi.encode_transfer(recipient, 42)

        to, amount = abi.decode_transfer_args(data[4:])

        assert to == recipient
        assert amount == 42

    def test_decode_transfer_args_short_data(self):
        with pytest.raises(EventDecodeError):
            abi.decode_transfer_args(bytes(10))

    def test_split_call_data_too_short(self):
        with pytest.raises(EventDecodeError):
            abi.split_call_data(b"\xa9\x05")

    def test_decode_uint256(self):
        assert abi.decode_uint256((123456).to_bytes(32, "big")) == 123456


class TestTransactionBuilder:
    """Tests for TransactionBuilder."""

    def setup_method(self):
        self.builder = TransactionBuilder()

    def test_coin_transfer(self, owner, recipient):
        unsigned = self.builder.build_coin_transfer(owner, recipient, 1_000_000)

        assert isinstance(unsigned.payload, CoinTransfer)
        assert unsigned.payload.amount == 1_000_000
        assert unsigned.payload.contract_type == ContractType.TRANSFER
        assert unsigned.owner == owner
        assert unsigned.is_materialized is False

    @pytest.mark.parametrize("amount", [0, -1])
    def test_coin_transfer_requires_positive_amount(self, owner, recipient, amount):
        with pytest.raises(InvalidAmount):
            self.builder.build_coin_transfer(owner, recipient, amount)

    def test_token_transfer_call_data_starts_with_selector(self, owner, recipient, token_contract):
        for amount in (1, 10**6, 2**255):
            unsigned = self.builder.build_token_transfer(owner, recipient, token_contract, amount)
            assert unsigned.payload.call_data[:4] == bytes.fromhex("a9059cbb")

    def test_token_transfer_arguments(self, owner, recipient, token_contract):
        unsigned = self.builder.build_token_transfer(owner, recipient, token_contract, 5_000_000)
        payload = unsigned.payload

        assert isinstance(payload, TokenTransfer)
        assert payload.contract_type == ContractType.TRIGGER_SMART_CONTRACT
        to, amount = decode(["address", "uint256"], payload.call_data[4:])
        assert Address.from_hex(to) == recipient
        assert amount == 5_000_000

    def test_token_transfer_requires_positive_amount(self, owner, recipient, token_contract):
        with pytest.raises(InvalidAmount):
            self.builder.build_token_transfer(owner, recipient, token_contract, 0)

    def test_account_create(self, owner, recipient):
        unsigned = self.builder.build_account_create(owner, recipient)

        assert isinstance(unsigned.payload, AccountCreate)
        assert unsigned.payload.account == recipient
        assert unsigned.payload.contract_type == ContractType.ACCOUNT_CREATE

    def test_contract_trigger(self, owner, token_contract):
        unsigned = self.builder.build_contract_trigger(owner, token_contract, b"\x01\x02", 7)

        assert isinstance(unsigned.payload, ContractTrigger)
        assert unsigned.payload.call_value == 7

    def test_with_node_transaction_returns_copy(self, owner, recipient):
        unsigned = self.builder.build_coin_transfer(owner, recipient, 1)
        materialized = unsigned.with_node_transaction(node_transaction())

        assert materialized is not unsigned
        assert unsigned.raw_data_hex == ""
        assert materialized.raw_data_hex == RAW_DATA_HEX
        assert materialized.is_materialized is True


class TestTransactionSigner:
    """Tests for TransactionSigner."""

    def setup_method(self):
        self.signer = TransactionSigner()
        self.builder = TransactionBuilder()

    def _unsigned(self, owner, recipient) -> UnsignedTransaction:
        return self.builder.build_coin_transfer(owner, recipient, 1_000_000).with_node_transaction(
            node_transaction()
        )

    def test_tx_id_is_sha256_of_raw_data(self, owner, recipient, private_key):
        signed = self.signer.sign(self._unsigned(owner, recipient), private_key)

        assert signed.tx_id == hashlib.sha256(bytes.fromhex(RAW_DATA_HEX)).hexdigest()

    def test_signature_shape(self, owner, recipient, private_key):
        signed = self.signer.sign(self._unsigned(owner, recipient), private_key)

        assert isinstance(signed, SignedTransaction)
        assert len(signed.signatures) == 1
        assert len(signed.signatures[0]) == 65

    def test_signing_is_deterministic(self, owner, recipient, private_key):
        unsigned = self._unsigned(owner, recipient)

        first = self.signer.sign(unsigned, private_key)
        second = self.signer.sign(unsigned, "0x" + private_key)

        assert first.signatures == second.signatures
        assert first.tx_id == second.tx_id

    def test_signing_does_not_mutate_input(self, owner, recipient, private_key):
        unsigned = self._unsigned(owner, recipient)
        raw_before = dict(unsigned.raw_data)

        signed = self.signer.sign(unsigned, private_key)

        assert signed.unsigned is unsigned
        assert unsigned.raw_data == raw_before

    def test_signature_is_appended(self, owner, recipient, private_key):
        existing = "11" * 65
        transaction = {**node_transaction(), "signature": [existing]}
        unsigned = self.builder.build_coin_transfer(owner, recipient, 1).with_node_transaction(
            transaction
        )

        signed = self.signer.sign(unsigned, private_key)

        assert len(signed.signatures) == 2
        assert signed.signatures[0] == bytes.fromhex(existing)
        assert unsigned.signatures == (bytes.fromhex(existing),)

    def test_broadcast_payload(self, owner, recipient, private_key):
        signed = self.signer.sign(self._unsigned(owner, recipient), private_key)
        payload = signed.to_broadcast_payload()

        assert payload["txID"] == signed.tx_id
        assert payload["raw_data_hex"] == RAW_DATA_HEX
        assert payload["signature"] == [signed.signatures[0].hex()]
        assert payload["visible"] is False

    @pytest.mark.parametrize(
        "bad_key",
        ["not-hex", "abcd", "00" * 32, "ff" * 32, 12345],
    )
    def test_malformed_key(self, owner, recipient, bad_key):
        with pytest.raises(SigningError):
            self.signer.sign(self._unsigned(owner, recipient), bad_key)

    def test_unmaterialized_transaction(self, owner, recipient, private_key):
        unsigned = self.builder.build_coin_transfer(owner, recipient, 1)

        with pytest.raises(SigningError):
            self.signer.sign(unsigned, private_key)

    def test_address_from_key(self, private_key, owner):
        assert self.signer.address_from_key(private_key) == owner

    def test_generate_keypair(self):
        address, key = generate_keypair()

        assert len(bytes.fromhex(key)) == 32
        assert self.signer.address_from_key(key) == address
