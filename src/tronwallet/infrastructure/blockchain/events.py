"""Decoding of contract invocations and transfer logs.

Two shapes are decoded here:
- ``TriggerSmartContract`` entries in a block's transactions (call data)
- The first log entry of a transaction receipt (Transfer event topics)
"""

import logging
from dataclasses import dataclass
from typing import Any

from tronwallet.core.exceptions import EventDecodeError, MalformedReceipt
from tronwallet.infrastructure.blockchain import abi
from tronwallet.infrastructure.blockchain.address import Address
from tronwallet.infrastructure.blockchain.transaction import ContractType

logger = logging.getLogger(__name__)

# topics[1] / topics[2] carry the address in their low 20 bytes
_TOPIC_ADDRESS_OFFSET = 24


@dataclass(frozen=True)
class ContractInvocation:
    """Decoded ``TriggerSmartContract`` call."""

    contract_address: Address
    method_id: bytes
    from_address: Address
    to_address: Address
    value: int


@dataclass(frozen=True)
class TransferLog:
    """Decoded Transfer event from a receipt log."""

    from_address: Address
    to_address: Address
    value: int


def _hex_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


class InvocationParser:
    """Parses contract invocations out of block transactions."""

    def trigger_contracts(self, transaction: dict[str, Any]) -> list[dict[str, Any]]:
        """Return the ``TriggerSmartContract`` parameter values of a transaction.

        Raises:
            EventDecodeError: Contract list or entries are not the node's shapes
        """
        try:
            contracts = (transaction.get("raw_data") or {}).get("contract") or []
            return [
                contract["parameter"]["value"]
                for contract in contracts
                if contract.get("type") == ContractType.TRIGGER_SMART_CONTRACT.value
            ]
        except (AttributeError, KeyError, TypeError) as e:
            raise EventDecodeError(f"malformed transaction contracts: {e!r}") from e

    def decode_invocation(self, value: dict[str, Any]) -> ContractInvocation:
        """Decode one trigger-contract parameter as a transfer call.

        Args:
            value: ``parameter.value`` of a TriggerSmartContract entry

        Returns:
            Contract, selector, sender, recipient and raw amount

        Raises:
            EventDecodeError: Missing fields or call data that is not
                selector + (address, uint256)
        """
        try:
            contract_address = Address.from_hex(value["contract_address"])
            from_address = Address.from_hex(value["owner_address"])
            data = _hex_bytes(value["data"])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise EventDecodeError(f"incomplete trigger contract: {e!r}") from e

        selector, args = abi.split_call_data(data)
        to_address, amount = abi.decode_transfer_args(args)

        return ContractInvocation(
            contract_address=contract_address,
            method_id=selector,
            from_address=from_address,
            to_address=to_address,
            value=amount,
        )


def decode_transfer_log(log: dict[str, Any]) -> TransferLog:
    """Decode a receipt log entry as ``Transfer(from, to, value)``.

    The value is decoded from topics[1] followed by the log data, with the
    same decoder used for ``transfer(address,uint256)`` arguments.

    Raises:
        MalformedReceipt: Topics or data missing or undecodable
    """
    topics = log.get("topics")
    data = log.get("data")
    if not topics or len(topics) < 3 or data is None:
        raise MalformedReceipt(f"log has no transfer topics: {log}")

    try:
        from_address = Address.from_hex(topics[1][_TOPIC_ADDRESS_OFFSET:])
        to_address = Address.from_hex(topics[2][_TOPIC_ADDRESS_OFFSET:])
        _, value = abi.decode_transfer_args(_hex_bytes(topics[1] + data))
    except (TypeError, ValueError, EventDecodeError) as e:
        raise MalformedReceipt(f"cannot decode transfer log: {e}") from e

    return TransferLog(from_address=from_address, to_address=to_address, value=value)
