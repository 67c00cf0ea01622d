"""
IoTeX Address Codec - io-address <-> 0x-address conversion.

IoTeX names every account with a 20-byte identifier shown in two forms:
- io-address: bech32, "io1" + 32 data chars + 6 checksum chars (41 chars)
- 0x-address: EVM hex, "0x" + 40 hex chars (42 chars)

Both forms denote the same account and convert losslessly. Output is
always lowercase.

Decoding an io-address checks shape only (length + alphabet) unless
``verify=True`` is passed, in which case the checksum is recomputed and
a mismatch raises ChecksumMismatch.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Any

from .bech32 import (
    CHARSET,
    CHECKSUM_LENGTH,
    bytes_to_quintets,
    compute_checksum,
    decode_quintets,
    encode_quintets,
    quintets_to_bytes,
    verify_checksum,
)

HRP = "io"
NATIVE_PREFIX = HRP + "1"
HEX_PREFIX = "0x"

ADDRESS_BYTES = 20
NATIVE_LENGTH = 41
HEX_LENGTH = 42

_CHARSET_SET = frozenset(CHARSET)
_HEX_DIGITS = frozenset(string.hexdigits)


class InvalidAddressFormat(ValueError):
    exit_code: int = 2

    def __init__(self, address: Any, reason: str = "") -> None:
        self.address = address
        message = f"Invalid address: {address!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ChecksumMismatch(InvalidAddressFormat):
    exit_code = 3

    def __init__(self, address: Any) -> None:
        super().__init__(address, "checksum mismatch")


@dataclass(frozen=True)
class AddressFormats:
    """Both representations of one account."""
    native: str
    hex: str

    def to_dict(self) -> dict[str, str]:
        return {"native": self.native, "hex": self.hex}


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def is_native_format(address: Any) -> bool:
    """
    True for "io1" + 38 bech32 characters.

    The "io1" prefix is matched exactly (lowercase only); the 38 characters
    after it are matched case-insensitively.
    """
    if not isinstance(address, str) or len(address) != NATIVE_LENGTH:
        return False
    if not address.startswith(NATIVE_PREFIX):
        return False
    return all(c in _CHARSET_SET for c in address[len(NATIVE_PREFIX):].lower())


def is_hex_format(address: Any) -> bool:
    """True for "0x" + 40 hex digits (either case)."""
    if not isinstance(address, str) or len(address) != HEX_LENGTH:
        return False
    if not address.startswith(HEX_PREFIX):
        return False
    return all(c in _HEX_DIGITS for c in address[len(HEX_PREFIX):])


def is_valid_address(address: Any) -> bool:
    return is_native_format(address) or is_hex_format(address)


def has_valid_checksum(address: Any) -> bool:
    """Shape check plus checksum recomputation for an io-address."""
    if not is_native_format(address):
        return False
    quintets = decode_quintets(address.lower()[len(NATIVE_PREFIX):])
    return verify_checksum(HRP, quintets)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

def native_to_hex(address: str, verify: bool = False) -> str:
    """
    Convert an io-address to a 0x-address.

    Args:
        address: io-address ("io1...", 41 chars)
        verify: Recompute the checksum before decoding

    Returns:
        Lowercase 0x-prefixed hex address

    Raises:
        InvalidAddressFormat: If the input is not io-address shaped
        ChecksumMismatch: If verify is set and the checksum is wrong
    """
    if not is_native_format(address):
        raise InvalidAddressFormat(address)
    if verify and not has_valid_checksum(address):
        raise ChecksumMismatch(address)

    body = address.lower()[len(NATIVE_PREFIX):-CHECKSUM_LENGTH]
    raw = quintets_to_bytes(decode_quintets(body))
    return HEX_PREFIX + raw.hex()


def hex_to_native(address: str) -> str:
    """
    Convert a 0x-address to an io-address.

    Args:
        address: 0x-address ("0x...", 42 chars, any case)

    Returns:
        io-address with a freshly computed checksum

    Raises:
        InvalidAddressFormat: If the input is not 0x-address shaped
    """
    if not is_hex_format(address):
        raise InvalidAddressFormat(address)

    raw = bytes.fromhex(address[len(HEX_PREFIX):])
    data = bytes_to_quintets(raw)
    checksum = compute_checksum(HRP, data)
    return NATIVE_PREFIX + encode_quintets(data) + encode_quintets(checksum)


def bytes_to_native(raw: bytes) -> str:
    """Encode a raw 20-byte identifier as an io-address."""
    if len(raw) != ADDRESS_BYTES:
        raise InvalidAddressFormat(raw, f"expected {ADDRESS_BYTES} bytes")
    return hex_to_native(HEX_PREFIX + raw.hex())


def to_native(address: str, verify: bool = False) -> str:
    """Return the io-address form of any valid address."""
    if is_native_format(address):
        if verify and not has_valid_checksum(address):
            raise ChecksumMismatch(address)
        return address.lower()
    if is_hex_format(address):
        return hex_to_native(address)
    raise InvalidAddressFormat(address)


def to_hex(address: str, verify: bool = False) -> str:
    """Return the 0x-address form of any valid address."""
    if is_hex_format(address):
        return address.lower()
    if is_native_format(address):
        return native_to_hex(address, verify=verify)
    raise InvalidAddressFormat(address)


def both_formats(address: str, verify: bool = False) -> AddressFormats:
    """Return both forms of any valid address."""
    return AddressFormats(
        native=to_native(address, verify=verify),
        hex=to_hex(address, verify=verify),
    )
