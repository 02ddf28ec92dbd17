"""
Minimal ABI codec for ReverseRecords.getNames(address[]) -> string[].

Only the two shapes that call needs: a dynamic address array argument and a
dynamic string array result. Big-endian 32-byte words throughout.
"""

from __future__ import annotations

import re

WORD_SIZE = 32

# bytes4(keccak256("getNames(address[])"))
GET_NAMES_SELECTOR = "cbf8b66c"

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def _encode_uint(value: int) -> str:
    return f"{value:064x}"


def _encode_address(address: str) -> str:
    if not _ADDRESS_RE.match(address or ""):
        raise ValueError(f"Not a 20-byte hex address: {address!r}")
    return address[2:].lower().rjust(64, "0")


def encode_get_names_call(addresses: list[str]) -> str:
    """Calldata hex (0x-prefixed) for getNames(addresses)."""
    parts = [
        GET_NAMES_SELECTOR,
        _encode_uint(WORD_SIZE),  # offset of the array argument
        _encode_uint(len(addresses)),
    ]
    parts.extend(_encode_address(a) for a in addresses)
    return "0x" + "".join(parts)


def _read_word(data: bytes, offset: int) -> int:
    end = offset + WORD_SIZE
    if offset < 0 or end > len(data):
        raise ValueError(f"ABI data truncated: need bytes {offset}..{end}, have {len(data)}")
    return int.from_bytes(data[offset:end], "big")


def decode_string_array(result_hex: str) -> list[str]:
    """Decode an ABI-encoded string[] return value. Raises ValueError on malformed data."""
    text = (result_hex or "").strip()
    if text.startswith(("0x", "0X")):
        text = text[2:]
    try:
        data = bytes.fromhex(text)
    except ValueError as e:
        raise ValueError(f"Result is not hex: {e}") from e

    array_offset = _read_word(data, 0)
    count = _read_word(data, array_offset)
    head = array_offset + WORD_SIZE
    names: list[str] = []
    for i in range(count):
        str_offset = head + _read_word(data, head + WORD_SIZE * i)
        length = _read_word(data, str_offset)
        start = str_offset + WORD_SIZE
        if start + length > len(data):
            raise ValueError(f"ABI string {i} truncated")
        names.append(data[start : start + length].decode("utf-8", errors="replace"))
    return names
