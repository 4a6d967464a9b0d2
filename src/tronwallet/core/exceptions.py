"""Typed wallet failures.

Every error carries enough context (address and/or transaction hash) for the
caller to act on it. Nothing here is retried automatically.
"""


class WalletError(Exception):
    """Base class for all wallet errors."""

    def __init__(
        self,
        message: str | None = None,
        address: str | None = None,
        tx_hash: str | None = None,
    ):
        self.message = message or self.get_default_message()
        self.address = address
        self.tx_hash = tx_hash
        super().__init__(self.message)

    def get_default_message(self) -> str:
        """Return default error message."""
        return "wallet operation failed"

    def __str__(self) -> str:
        context = []
        if self.address:
            context.append(f"address={self.address}")
        if self.tx_hash:
            context.append(f"tx_hash={self.tx_hash}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class TransportError(WalletError):
    """Node unreachable, timed out, or answered with something unparseable."""

    def get_default_message(self) -> str:
        return "node request failed"


class BroadcastRejected(WalletError):
    """Node accepted the request but refused the transaction."""

    def get_default_message(self) -> str:
        return "broadcast rejected"


class InsufficientBalance(WalletError):
    """Local balance pre-check failed; nothing was broadcast."""

    def get_default_message(self) -> str:
        return "insufficient balance"


class AccountNotFound(WalletError):
    """Node has no account for the address."""

    def get_default_message(self) -> str:
        return "account not found"


class ContractCallFailed(WalletError):
    """Constant contract call returned no result."""

    def get_default_message(self) -> str:
        return "contract call returned no result"


class TransactionNotFound(WalletError):
    """Node knows nothing about the transaction."""

    def get_default_message(self) -> str:
        return "transaction not found"


class TransactionIncomplete(WalletError):
    """Transaction is known but has no event log yet."""

    def get_default_message(self) -> str:
        return "transaction has no event log yet"


class MalformedReceipt(WalletError):
    """Receipt log lacks the expected topic or data fields."""

    def get_default_message(self) -> str:
        return "receipt log is malformed"


class SigningError(WalletError):
    """Malformed key material or an unsignable transaction."""

    def get_default_message(self) -> str:
        return "signing failed"


class PrecisionError(WalletError):
    """Amount has more fractional digits than the unit allows."""

    def get_default_message(self) -> str:
        return "amount exceeds unit precision"


class InvalidAmount(WalletError, ValueError):
    """Amount is negative, zero where a positive value is needed, or not finite."""

    def get_default_message(self) -> str:
        return "invalid amount"


class InvalidAddress(WalletError, ValueError):
    """Address cannot be decoded."""

    def get_default_message(self) -> str:
        return "invalid address"


class EventDecodeError(WalletError):
    """Contract invocation cannot be decoded as a transfer."""

    def get_default_message(self) -> str:
        return "cannot decode contract invocation"


# Names used by the client operations
AddressNotFound = AccountNotFound
ContractCallError = ContractCallFailed
BroadcastError = BroadcastRejected
MalformedLog = MalformedReceipt
