"""
Deterministic canonical encoding primitives.

Two consumers:
- event payloads (`canonical_json_bytes`), so indexers see byte-identical JSON;
- pool-address seeds (`domain_sep_bytes`, `encode_str`, `encode_bytes`), where
  every field is length-prefixed so no two seed tuples concatenate to the
  same preimage.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


CANONICAL_ENCODING_VERSION = 1

DOMAIN_PREFIX = b"sendswap:"


def _check_text(s: str) -> None:
    # Lone surrogates have no UTF-8 encoding; json.dumps would emit them anyway.
    if any(0xD800 <= ord(ch) <= 0xDFFF for ch in s):
        raise TypeError("surrogate code points are not allowed in canonical encoding")


def _check_value(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, str):
        _check_text(value)
    elif isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError("dict keys must be str for canonical encoding")
            _check_text(k)
            _check_value(v)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_value(item)


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON: UTF-8, sorted keys, no whitespace, no NaN, no floats.

    Amounts are integers everywhere; a float reaching this point is a bug in the
    caller, so it is rejected rather than formatted.
    """
    _check_value(value)
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """`sendswap:<label>:v<version>` followed by a NUL terminator."""
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if not label.isascii() or "\x00" in label:
        raise ValueError("label must be ASCII without NUL")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return DOMAIN_PREFIX + f"{label}:v{version}".encode("ascii") + b"\x00"


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uvarint must be a non-negative int, got {value!r}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_bytes(value: bytes) -> bytes:
    """Length-prefixed raw bytes."""
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError("value must be bytes")
    return encode_uvarint(len(value)) + bytes(value)


def encode_str(value: str) -> bytes:
    """Length-prefixed UTF-8 text."""
    if not isinstance(value, str):
        raise TypeError("value must be a str")
    _check_text(value)
    return encode_bytes(value.encode("utf-8"))
