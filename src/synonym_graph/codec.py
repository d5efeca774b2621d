"""Variable-length integers and the id-list encoding stored in the transducer.

An id list is written as ``VInt(count << 1)`` followed by one ``VInt`` per
id. The low bit of the header is reserved for an "include original term"
flag and is always zero here.
"""

from __future__ import annotations

from collections.abc import Iterable


def write_vint(value: int, out: bytearray) -> None:
    """Append ``value`` using 7 bits per byte, low bits first."""
    if value < 0:
        raise ValueError(f"vint must be non-negative, got {value}")
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)


def read_vint(data: bytes, pos: int = 0) -> tuple[int, int]:
    """Decode one vint at ``pos``; returns ``(value, next_pos)``."""
    value = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated vint")
        b = data[pos]
        pos += 1
        value |= (b & 0x7F) << shift
        if not b & 0x80:
            return value, pos
        shift += 7


def encode_ids(ids: Iterable[int]) -> bytes:
    body = bytearray()
    count = 0
    for i in ids:
        write_vint(i, body)
        count += 1
    out = bytearray()
    write_vint(count << 1, out)
    out += body
    return bytes(out)


def decode_ids(data: bytes) -> list[int]:
    header, pos = read_vint(data)
    ids = []
    for _ in range(header >> 1):
        value, pos = read_vint(data, pos)
        ids.append(value)
    if pos != len(data):
        raise ValueError(f"{len(data) - pos} trailing bytes after id list")
    return ids
