"""
Bech32 primitives for IoTeX io-addresses.

Two pieces:
- Bit regrouping between 8-bit bytes and 5-bit quintets
- The BIP-173 polymod checksum (constant 1, not bech32m)

Everything here is pure and stateless; the tables below are the only
module-level data and are never mutated.
"""

from __future__ import annotations

from typing import Iterable, Sequence

# Position in the string is the quintet value.
CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_REV = {c: i for i, c in enumerate(CHARSET)}

GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)

CHECKSUM_LENGTH = 6
_BECH32_CONST = 1


# ---------------------------------------------------------------------------
# Bit regrouping
# ---------------------------------------------------------------------------

def bytes_to_quintets(data: bytes) -> list[int]:
    """
    Repack bytes into 5-bit groups, most-significant bit first.

    Leftover bits (1-4) are zero-padded on the right into one final
    quintet. A 20-byte payload always yields exactly 32 quintets.

    Args:
        data: Input bytes

    Returns:
        List of integers in 0..31
    """
    acc = 0
    bits = 0
    out: list[int] = []
    for byte in data:
        acc = (acc << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append((acc >> bits) & 0x1F)
        acc &= (1 << bits) - 1
    if bits:
        out.append((acc << (5 - bits)) & 0x1F)
    return out


def quintets_to_bytes(quintets: Iterable[int]) -> bytes:
    """
    Repack 5-bit groups into bytes, most-significant bit first.

    Trailing bits that do not fill a whole byte are dropped. They are
    not required to be zero.

    Args:
        quintets: Integers in 0..31

    Returns:
        Packed bytes

    Raises:
        ValueError: If a value does not fit in 5 bits
    """
    acc = 0
    bits = 0
    out = bytearray()
    for value in quintets:
        if value < 0 or value > 31:
            raise ValueError(f"Quintet out of range: {value}")
        acc = (acc << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((acc >> bits) & 0xFF)
        acc &= (1 << bits) - 1
    return bytes(out)


def encode_quintets(quintets: Iterable[int]) -> str:
    """Map quintet values to alphabet characters."""
    return "".join(CHARSET[q] for q in quintets)


def decode_quintets(chars: str) -> list[int]:
    """
    Map alphabet characters back to quintet values.

    Raises:
        ValueError: If a character is not in the alphabet
    """
    values: list[int] = []
    for c in chars:
        value = CHARSET_REV.get(c)
        if value is None:
            raise ValueError(f"Invalid bech32 character: {c!r}")
        values.append(value)
    return values


# ---------------------------------------------------------------------------
# Checksum
# ---------------------------------------------------------------------------

def hrp_expand(hrp: str) -> list[int]:
    """High 3 bits of each prefix char, a zero, then the low 5 bits."""
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def polymod(values: Sequence[int]) -> int:
    """Run the 30-bit polymod reduction over a sequence of 5-bit values."""
    chk = 1
    for v in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i in range(5):
            if (top >> i) & 1:
                chk ^= GENERATOR[i]
    return chk


def compute_checksum(hrp: str, data: Sequence[int]) -> list[int]:
    """
    Compute the six checksum quintets for a prefix and data part.

    Args:
        hrp: Human-readable prefix (e.g. "io")
        data: Data quintets, without checksum

    Returns:
        Six quintets, most-significant first
    """
    values = hrp_expand(hrp) + list(data) + [0] * CHECKSUM_LENGTH
    mod = polymod(values) ^ _BECH32_CONST
    return [(mod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]


def verify_checksum(hrp: str, data: Sequence[int]) -> bool:
    """Check quintets that end with their six-quintet checksum."""
    return polymod(hrp_expand(hrp) + list(data)) == _BECH32_CONST
