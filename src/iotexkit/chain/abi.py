"""
ABI helpers - load contract ABIs and encode/decode calls with eth-abi.

Bundled ABIs (XRC20, XRC721) live in chain/abis/. Any other ABI can be
loaded from a JSON file holding either a bare ABI list or a compiler
artifact with an "abi" key. Artifacts also supply deployment bytecode.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from eth_abi import decode, encode
from eth_hash.auto import keccak

from ..address import is_valid_address, to_hex

BUNDLED_ABI_DIR = Path(__file__).resolve().parent / "abis"


def keccak256(data: bytes) -> bytes:
    """Keccak-256 (NOT hashlib.sha3_256, which is NIST SHA-3)."""
    return keccak(data)


def bundled_abi_names() -> list[str]:
    return sorted(p.stem for p in BUNDLED_ABI_DIR.glob("*.json"))


@lru_cache(maxsize=16)
def load_abi(name_or_path: str) -> list[dict[str, Any]]:
    """
    Load an ABI by bundled name or from a JSON file.

    Args:
        name_or_path: "XRC20", "XRC721", or a path to a JSON file

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If neither a bundled ABI nor a file matches
    """
    bundled = BUNDLED_ABI_DIR / f"{name_or_path.upper()}.json"
    path = bundled if bundled.exists() else Path(name_or_path).expanduser()

    if not path.exists():
        raise FileNotFoundError(
            f"ABI not found: {name_or_path}. "
            f"Bundled ABIs: {', '.join(bundled_abi_names())}"
        )

    with path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    if isinstance(artifact, dict):
        artifact = artifact.get("abi", [])
    if not isinstance(artifact, list):
        raise ValueError(f"Not an ABI: {path}")
    return artifact


def find_function(abi: list, function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def function_selector(function_name: str, input_types: list[str]) -> bytes:
    sig = f"{function_name}({','.join(input_types)})"
    return keccak256(sig.encode("utf-8"))[:4]


def _normalize_args(input_types: list[str], args: list) -> list:
    # eth-abi only understands 0x-addresses
    normalized = []
    for typ, value in zip(input_types, args):
        if typ == "address" and is_valid_address(value):
            value = to_hex(value)
        elif typ == "address[]" and isinstance(value, list):
            value = [to_hex(v) if is_valid_address(v) else v for v in value]
        normalized.append(value)
    return normalized


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Address arguments may be given in io- or 0x-form.

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} arguments, got {len(args)}"
        )

    selector = function_selector(function_name, input_types)
    encoded_args = encode(input_types, _normalize_args(input_types, args)) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Single value, tuple of values, or None for functions without outputs
    """
    func = find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def _hex_bytes(data: str) -> bytes:
    return bytes.fromhex(data[2:] if data.startswith("0x") else data)


def _arg_names(inputs: list[dict[str, Any]]) -> list[str]:
    return [inp.get("name") or f"arg{i}" for i, inp in enumerate(inputs)]


# ==================== Events ====================

def find_event(abi: list, event_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "event" and entry.get("name") == event_name:
            return entry
    raise ValueError(f"Event {event_name} not found in ABI")


def event_topic(event_name: str, input_types: list[str]) -> str:
    """Selector topic (topics[0]) of a non-anonymous event, 0x-prefixed."""
    sig = f"{event_name}({','.join(input_types)})"
    return "0x" + keccak256(sig.encode("utf-8")).hex()


def _is_dynamic(typ: str) -> bool:
    return typ in ("string", "bytes") or typ.endswith("]") or typ.startswith("tuple")


def decode_event_log(abi: list, event_name: str, data: str, topics: list[str]) -> dict[str, Any]:
    """
    Decode one log entry as the named event.

    Indexed arguments come from the topics, the rest from the data field.
    Indexed dynamic values (string, bytes, arrays) are stored on chain as
    their Keccak hash and are returned as that 0x-hash.

    Args:
        abi: Contract ABI
        event_name: Event to decode as
        data: Log data (0x-hex)
        topics: Log topics (0x-hex), selector first unless anonymous

    Returns:
        Dict of argument name -> value, in declaration order

    Raises:
        ValueError: If the log does not match the event
    """
    event = find_event(abi, event_name)
    inputs = event.get("inputs", [])
    names = _arg_names(inputs)

    topic_values = list(topics)
    if not event.get("anonymous"):
        expected = event_topic(event_name, [inp["type"] for inp in inputs])
        if not topic_values or topic_values[0].lower() != expected:
            raise ValueError(f"Log is not a {event_name} event")
        topic_values = topic_values[1:]

    indexed = [(name, inp) for name, inp in zip(names, inputs) if inp.get("indexed")]
    plain = [(name, inp) for name, inp in zip(names, inputs) if not inp.get("indexed")]
    if len(topic_values) != len(indexed):
        raise ValueError(
            f"{event_name} expects {len(indexed)} indexed topics, got {len(topic_values)}"
        )

    values: dict[str, Any] = {}
    for (name, inp), topic in zip(indexed, topic_values):
        raw = _hex_bytes(topic)
        if _is_dynamic(inp["type"]):
            values[name] = "0x" + raw.hex()
        else:
            values[name] = decode([inp["type"]], raw)[0]

    if plain:
        decoded = decode([inp["type"] for _, inp in plain], _hex_bytes(data))
        values.update(zip([name for name, _ in plain], decoded))

    return {name: values[name] for name in names}


def decode_log(abi: list, log: dict[str, Any]) -> Optional[dict[str, Any]]:
    """
    Decode an eth_getLogs entry against every event in an ABI.

    Returns:
        {"event": name, "args": {...}}, or None if no event matches
    """
    topics = log.get("topics") or []
    if not topics:
        return None
    for entry in abi:
        if entry.get("type") != "event" or entry.get("anonymous"):
            continue
        topic = event_topic(entry["name"], [inp["type"] for inp in entry.get("inputs", [])])
        if topics[0].lower() != topic:
            continue
        try:
            args = decode_event_log(abi, entry["name"], log.get("data", "0x"), topics)
        except ValueError:
            # Same signature, different indexing (e.g. XRC-20 vs XRC-721 Transfer)
            continue
        return {"event": entry["name"], "args": args}
    return None


# ==================== Deployment ====================

def load_bytecode(path: str) -> str:
    """
    Load deployment bytecode from a compiler artifact.

    Accepts Foundry ({"bytecode": {"object": ...}}) and Hardhat
    ({"bytecode": "0x..."}) layouts.

    Returns:
        0x-prefixed bytecode
    """
    artifact_path = Path(path).expanduser()
    if not artifact_path.exists():
        raise FileNotFoundError(f"Artifact not found: {path}")

    with artifact_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    bytecode = artifact.get("bytecode", "") if isinstance(artifact, dict) else ""
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object", "")
    if not bytecode or bytecode == "0x":
        raise ValueError(f"No bytecode in artifact: {path}")

    return bytecode if bytecode.startswith("0x") else "0x" + bytecode


def encode_deploy_data(bytecode: str, abi: Optional[list] = None, constructor_args: Optional[list] = None) -> str:
    """
    Bytecode followed by ABI-encoded constructor arguments.

    Raises:
        ValueError: If arguments are given but the ABI has no matching constructor
    """
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    if not constructor_args:
        return bytecode

    constructor = next((e for e in abi or [] if e.get("type") == "constructor"), None)
    if constructor is None:
        raise ValueError("Constructor not found in ABI, but constructor_args were provided")

    input_types = [inp["type"] for inp in constructor.get("inputs", [])]
    if len(constructor_args) != len(input_types):
        raise ValueError(
            f"constructor expects {len(input_types)} arguments, got {len(constructor_args)}"
        )
    encoded = encode(input_types, _normalize_args(input_types, constructor_args))
    return bytecode + encoded.hex()
