"""Tests for wallet error types."""

import pytest

from tronwallet.core.exceptions import (
    AccountNotFound,
    AddressNotFound,
    BroadcastError,
    BroadcastRejected,
    InsufficientBalance,
    InvalidAddress,
    MalformedLog,
    MalformedReceipt,
    TransportError,
    WalletError,
)


class TestWalletError:
    """Tests for WalletError."""

    def test_default_message(self):
        assert str(TransportError()) == "node request failed"

    def test_context_in_message(self):
        error = BroadcastRejected("broadcast rejected: SIGERROR", address="TXyz", tx_hash="ab12")

        assert str(error) == "broadcast rejected: SIGERROR (address=TXyz, tx_hash=ab12)"
        assert error.message == "broadcast rejected: SIGERROR"

    @pytest.mark.parametrize(
        "error_class",
        [TransportError, BroadcastRejected, InsufficientBalance, AccountNotFound, InvalidAddress],
    )
    def test_all_errors_are_wallet_errors(self, error_class):
        with pytest.raises(WalletError):
            raise error_class()

    def test_invalid_address_is_value_error(self):
        assert issubclass(InvalidAddress, ValueError)

    def test_aliases(self):
        assert AddressNotFound is AccountNotFound
        assert BroadcastError is BroadcastRejected
        assert MalformedLog is MalformedReceipt
