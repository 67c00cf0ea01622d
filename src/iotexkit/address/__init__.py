"""
Address - IoTeX io-address / 0x-address codec.

Pure functions, no I/O. See codec.py for the public API and bech32.py
for the bit-regrouping and checksum primitives.
"""

from .codec import (
    AddressFormats,
    ChecksumMismatch,
    InvalidAddressFormat,
    both_formats,
    bytes_to_native,
    has_valid_checksum,
    hex_to_native,
    is_hex_format,
    is_native_format,
    is_valid_address,
    native_to_hex,
    to_hex,
    to_native,
)

__all__ = [
    "AddressFormats",
    "ChecksumMismatch",
    "InvalidAddressFormat",
    "both_formats",
    "bytes_to_native",
    "has_valid_checksum",
    "hex_to_native",
    "is_hex_format",
    "is_native_format",
    "is_valid_address",
    "native_to_hex",
    "to_hex",
    "to_native",
]
