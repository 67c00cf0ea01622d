"""
ECDSA / secp256k1 key management for IoTeX accounts.

IoTeX accounts use the same keys as Ethereum; only the address display
differs. Every address returned here is offered in both forms.

Keys are stored in ~/.iotexkit/.env as IOTEX_PRIVATE_KEY (hex format).

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from eth_keys import keys

from ..address import AddressFormats, both_formats, to_hex


# Default config directory
IOTEXKIT_DIR = Path.home() / ".iotexkit"
IOTEXKIT_ENV = IOTEXKIT_DIR / ".env"

PRIVATE_KEY_VAR = "IOTEX_PRIVATE_KEY"


@dataclass(frozen=True)
class Keypair:
    private_key: str
    public_key: str
    native_address: str
    hex_address: str


def generate_keypair() -> Keypair:
    """
    Generate a new ECDSA/secp256k1 keypair.

    Returns:
        Keypair with a 0x-prefixed private key (66 chars), the
        uncompressed public key and both address forms
    """
    private_key = "0x" + secrets.token_hex(32)
    return keypair_from_private_key(private_key)


def keypair_from_private_key(private_key: str) -> Keypair:
    private_key = _normalize_key(private_key)
    key = keys.PrivateKey(bytes.fromhex(private_key[2:]))
    formats = both_formats(key.public_key.to_checksum_address())
    return Keypair(
        private_key=private_key,
        public_key=key.public_key.to_hex(),
        native_address=formats.native,
        hex_address=formats.hex,
    )


def private_key_to_address(private_key: str) -> AddressFormats:
    """Derive both address forms from a private key."""
    return both_formats(Account.from_key(private_key).address)


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Save private key to .env file.

    Args:
        private_key: 0x-prefixed hex private key
        env_path: Path to .env file (default: ~/.iotexkit/.env)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or IOTEXKIT_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing[PRIVATE_KEY_VAR] = _normalize_key(private_key)

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.iotexkit/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If IOTEX_PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or IOTEXKIT_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get(PRIVATE_KEY_VAR)
    if not private_key:
        raise ValueError(
            f"{PRIVATE_KEY_VAR} not found. Run 'iotexkit wallet create --save' "
            f"or set {PRIVATE_KEY_VAR} in {env_path}"
        )

    return _normalize_key(private_key)


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from .env.
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_address(private_key: Optional[str] = None) -> AddressFormats:
    return both_formats(get_account(private_key).address)


def sign_message(message: str, private_key: Optional[str] = None) -> str:
    """
    Sign a message using EIP-191 personal_sign.

    Returns:
        0x-prefixed hex signature (65 bytes: r + s + v)
    """
    account = get_account(private_key)
    signed = account.sign_message(encode_defunct(text=message))
    return "0x" + bytes(signed.signature).hex()


def recover_signer(message: str, signature: str) -> AddressFormats:
    """Recover the signing account of an EIP-191 message."""
    recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
    return both_formats(recovered)


def verify_message(message: str, signature: str, address: str) -> bool:
    """
    Check that `signature` over `message` was made by `address`.

    Args:
        address: Expected signer, io- or 0x-form
    """
    return recover_signer(message, signature).hex == to_hex(address)


def _normalize_key(private_key: str) -> str:
    private_key = private_key.strip()
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key
