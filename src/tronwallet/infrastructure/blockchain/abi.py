"""ABI encoding for the fixed TRC-20 calls the wallet makes.

TRC-20 call data follows the EVM convention: a 4-byte keccak selector
followed by 32-byte words. Addresses are encoded as their low 20 bytes.
"""

import logging

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from tronwallet.core.exceptions import EventDecodeError
from tronwallet.infrastructure.blockchain.address import Address

logger = logging.getLogger(__name__)

TRANSFER_SIGNATURE = "transfer(address,uint256)"
BALANCE_OF_SIGNATURE = "balanceOf(address)"

TRANSFER_SELECTOR = function_signature_to_4byte_selector(TRANSFER_SIGNATURE)  # a9059cbb
BALANCE_OF_SELECTOR = function_signature_to_4byte_selector(BALANCE_OF_SIGNATURE)  # 70a08231

SELECTOR_LENGTH = 4
WORD_LENGTH = 32


def method_id(signature: str) -> bytes:
    """Selector for a function signature.

    A literal ``0x``-prefixed 4-byte selector is returned as-is.
    """
    if signature.startswith("0x") and len(signature) == 2 + 2 * SELECTOR_LENGTH:
        return bytes.fromhex(signature[2:])
    return function_signature_to_4byte_selector(signature)


def encode_transfer(to: Address, amount: int) -> bytes:
    """Call data for ``transfer(address,uint256)``."""
    return TRANSFER_SELECTOR + encode(["address", "uint256"], [to.evm_bytes, amount])


def encode_balance_of(owner: Address) -> bytes:
    """Call data for ``balanceOf(address)``."""
    return BALANCE_OF_SELECTOR + encode(["address"], [owner.evm_bytes])


def decode_uint256(data: bytes) -> int:
    """Decode a single uint256 return value."""
    return decode(["uint256"], data)[0]


def decode_transfer_args(data: bytes) -> tuple[Address, int]:
    """Decode the ``(address, uint256)`` argument pair of a transfer.

    Args:
        data: Argument words, without the selector

    Returns:
        Recipient address and raw amount

    Raises:
        EventDecodeError: If the data is not two ABI words of the right types
    """
    try:
        to, amount = decode(["address", "uint256"], data)
    except DecodingError as e:
        raise EventDecodeError(f"cannot decode transfer arguments: {e}") from e
    return Address.from_hex(to), amount


def split_call_data(data: bytes) -> tuple[bytes, bytes]:
    """Split call data into selector and argument words."""
    if len(data) < SELECTOR_LENGTH:
        raise EventDecodeError(f"call data too short for a selector: {data.hex()}")
    return data[:SELECTOR_LENGTH], data[SELECTOR_LENGTH:]
