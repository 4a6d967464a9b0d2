"""Tests for the TRON address value object."""

import pytest

from tronwallet.core.exceptions import InvalidAddress
from tronwallet.infrastructure.blockchain.address import Address

# USDT on TRON mainnet
USDT_BASE58 = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
USDT_HEX = "41a614f803b6fd780986a42c78ec9c7f77e6ded13c"


class TestAddress:
    """Tests for Address."""

    def test_known_address_base58_to_hex(self):
        assert Address.from_base58(USDT_BASE58).to_hex() == USDT_HEX

    def test_known_address_hex_to_base58(self):
        assert Address.from_hex(USDT_HEX).to_base58() == USDT_BASE58

    def test_base58_round_trip(self):
        assert Address.from_base58(USDT_BASE58).to_base58() == USDT_BASE58

    def test_generated_round_trip(self):
        address = Address.from_hex("41" + "ab" * 20)
        assert Address.from_base58(address.to_base58()) == address
        assert Address.from_hex(address.to_hex()) == address

    def test_display_form_starts_with_t(self):
        assert str(Address.from_hex("41" + "00" * 20)).startswith("T")

    def test_evm_hex_gets_tron_prefix(self):
        address = Address.from_hex("0x" + "11" * 20)
        assert address.to_hex() == "41" + "11" * 20
        assert address.evm_bytes == bytes.fromhex("11" * 20)

    def test_parse_accepts_both_forms(self):
        assert Address.parse(USDT_BASE58) == Address.parse(USDT_HEX)

    def test_parse_passes_through_address(self):
        address = Address.from_hex(USDT_HEX)
        assert Address.parse(address) is address

    def test_bad_checksum(self):
        corrupted = USDT_BASE58[:-1] + ("u" if USDT_BASE58[-1] != "u" else "v")
        with pytest.raises(InvalidAddress):
            Address.from_base58(corrupted)

    def test_wrong_prefix(self):
        with pytest.raises(InvalidAddress):
            Address.from_hex("42" + "11" * 20)

    def test_wrong_length(self):
        with pytest.raises(InvalidAddress):
            Address(b"\x41" + b"\x00" * 10)

    def test_not_hex(self):
        with pytest.raises(InvalidAddress):
            Address.from_hex("41zz")

    def test_addresses_are_hashable(self):
        a = Address.from_hex(USDT_HEX)
        b = Address.from_base58(USDT_BASE58)
        assert {a, b} == {a}
