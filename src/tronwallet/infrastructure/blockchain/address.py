"""TRON address value object.

A TRON address is 21 bytes: the ``0x41`` network prefix followed by the same
20 bytes an EVM address would carry. It is displayed in Base58Check
(``T...``) and sent to the node in hex (``41...``).
"""

from dataclasses import dataclass

import base58

from tronwallet.core.exceptions import InvalidAddress

ADDRESS_PREFIX = b"\x41"
ADDRESS_LENGTH = 21


@dataclass(frozen=True)
class Address:
    """Validated 21-byte TRON address."""

    raw: bytes

    def __post_init__(self):
        """Validate address bytes on creation."""
        if len(self.raw) != ADDRESS_LENGTH:
            raise InvalidAddress(f"address must be {ADDRESS_LENGTH} bytes, got {len(self.raw)}")
        if self.raw[:1] != ADDRESS_PREFIX:
            raise InvalidAddress(f"address must start with 0x41, got 0x{self.raw[:1].hex()}")

    @classmethod
    def from_base58(cls, value: str) -> "Address":
        """Decode a Base58Check display address."""
        try:
            raw = base58.b58decode_check(value)
        except ValueError as e:
            raise InvalidAddress(f"invalid base58 address: {value}", address=value) from e
        return cls(raw)

    @classmethod
    def from_hex(cls, value: str) -> "Address":
        """Decode a hex address.

        Accepts the node form (``41`` + 20 bytes) as well as EVM forms
        (``0x`` + 20 bytes, or 20 bytes of bare hex), which get the TRON prefix.
        """
        text = value[2:] if value.lower().startswith("0x") else value
        try:
            raw = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidAddress(f"invalid hex address: {value}", address=value) from e
        if len(raw) == ADDRESS_LENGTH - 1:
            raw = ADDRESS_PREFIX + raw
        return cls(raw)

    @classmethod
    def parse(cls, value: "str | Address") -> "Address":
        """Accept either representation."""
        if isinstance(value, Address):
            return value
        if value.startswith("T"):
            return cls.from_base58(value)
        return cls.from_hex(value)

    def to_base58(self) -> str:
        return base58.b58encode_check(self.raw).decode("ascii")

    def to_hex(self) -> str:
        return self.raw.hex()

    @property
    def evm_bytes(self) -> bytes:
        """Low 20 bytes, as used in ABI-encoded arguments."""
        return self.raw[1:]

    def __str__(self) -> str:
        return self.to_base58()
