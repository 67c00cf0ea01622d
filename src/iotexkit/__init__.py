__all__ = [
    # Address codec
    "AddressFormats",
    "ChecksumMismatch",
    "InvalidAddressFormat",
    "both_formats",
    "has_valid_checksum",
    "hex_to_native",
    "is_hex_format",
    "is_native_format",
    "is_valid_address",
    "native_to_hex",
    "to_hex",
    "to_native",
    # Units
    "UNITS",
    "UnitError",
    "convert_units",
    "format_iotx",
    "iotx_to_rau",
    "rau_to_iotx",
    # Networks
    "NETWORKS",
    "NetworkConfig",
    "TokenInfo",
    "UnknownNetworkError",
    "get_network_config",
    "network_for_chain_id",
    # Wallet
    "Keypair",
    "generate_keypair",
    "private_key_to_address",
    "sign_message",
    "verify_message",
]

from .address import (
    AddressFormats,
    ChecksumMismatch,
    InvalidAddressFormat,
    both_formats,
    has_valid_checksum,
    hex_to_native,
    is_hex_format,
    is_native_format,
    is_valid_address,
    native_to_hex,
    to_hex,
    to_native,
)
from .units import UNITS, UnitError, convert_units, format_iotx, iotx_to_rau, rau_to_iotx
from .networks import (
    NETWORKS,
    NetworkConfig,
    TokenInfo,
    UnknownNetworkError,
    get_network_config,
    network_for_chain_id,
)
from .wallet.eth import (
    Keypair,
    generate_keypair,
    private_key_to_address,
    sign_message,
    verify_message,
)
