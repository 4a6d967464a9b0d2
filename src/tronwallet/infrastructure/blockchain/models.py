"""Query results and event values produced by the chain client."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from tronwallet.infrastructure.blockchain.abi import method_id
from tronwallet.infrastructure.blockchain.address import Address


@dataclass(frozen=True)
class AccountInfo:
    """Balance of an account, native or for one token."""

    address: Address
    balance: Decimal
    resources: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionInfo:
    """Decoded transaction receipt."""

    tx_id: str
    block_number: int
    timestamp: int
    fee: Decimal
    contract_address: Address | None
    value: Decimal
    from_address: Address
    to_address: Address
    success: bool


@dataclass(frozen=True)
class TransactionEvent:
    """A matching contract invocation found while watching blocks."""

    tx_hash: str
    block_number: int
    from_address: Address
    to_address: Address
    value: Decimal
    contract_address: Address
    method_id: bytes


@dataclass(frozen=True)
class EventFilter:
    """Contract address and method selector to match invocations against."""

    contract_address: Address
    method_id: bytes

    @classmethod
    def create(cls, contract_address: str | Address, event_name: str) -> "EventFilter":
        """Build a filter from a contract address and a method signature.

        Args:
            contract_address: Contract address in either representation
            event_name: Method signature such as ``transfer(address,uint256)``,
                or a literal ``0x``-prefixed selector
        """
        return cls(
            contract_address=Address.parse(contract_address),
            method_id=method_id(event_name),
        )

    def matches(self, contract_address: Address, selector: bytes) -> bool:
        return contract_address == self.contract_address and selector == self.method_id


@dataclass(frozen=True)
class Block:
    """A produced block, as far as the watcher needs it."""

    number: int
    block_id: str
    timestamp: int
    transactions: list[dict[str, Any]] = field(default_factory=list)
