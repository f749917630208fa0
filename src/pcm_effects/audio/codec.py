"""Little-endian integer codec for WAV header fields and PCM samples."""

from __future__ import annotations

import struct
from typing import Sequence

I16_MIN = -0x8000
I16_MAX = 0x7FFF
I24_MIN = -0x800000
I24_MAX = 0x7FFFFF

_I24_SIGN_BIT = 0x00800000
_I24_SIGN_EXTEND = 0xFF800000
_I24_MAGNITUDE = 0x007FFFFF


def _check_bounds(data: bytes | bytearray, offset: int, width: int) -> None:
    if offset < 0 or offset + width > len(data):
        raise IndexError(f"{width}-byte field at offset {offset} exceeds buffer of {len(data)} bytes")


def _check_range(value: int, minimum: int, maximum: int, label: str) -> None:
    if value < minimum or value > maximum:
        raise ValueError(f"{label} value out of range: {value}")


def read_u16(data: bytes | bytearray, offset: int) -> int:
    _check_bounds(data, offset, 2)
    return data[offset] | (data[offset + 1] << 8)


def read_u32(data: bytes | bytearray, offset: int) -> int:
    _check_bounds(data, offset, 4)
    return int.from_bytes(data[offset : offset + 4], "little", signed=False)


def write_u16(value: int, data: bytearray, offset: int) -> None:
    _check_range(value, 0, 0xFFFF, "u16")
    _check_bounds(data, offset, 2)
    data[offset : offset + 2] = value.to_bytes(2, "little")


def write_u32(value: int, data: bytearray, offset: int) -> None:
    _check_range(value, 0, 0xFFFFFFFF, "u32")
    _check_bounds(data, offset, 4)
    data[offset : offset + 4] = value.to_bytes(4, "little")


def decode_i16(data: bytes | bytearray, offset: int) -> int:
    _check_bounds(data, offset, 2)
    return int.from_bytes(data[offset : offset + 2], "little", signed=True)


def encode_i16(value: int, data: bytearray, offset: int) -> None:
    _check_range(value, I16_MIN, I16_MAX, "i16")
    _check_bounds(data, offset, 2)
    data[offset : offset + 2] = value.to_bytes(2, "little", signed=True)


def decode_i24(data: bytes | bytearray, offset: int) -> int:
    _check_bounds(data, offset, 3)
    value = data[offset] | (data[offset + 1] << 8) | (data[offset + 2] << 16)
    if value & _I24_SIGN_BIT:
        value |= _I24_SIGN_EXTEND
    else:
        value &= _I24_MAGNITUDE
    # reinterpret the 32-bit container as signed
    if value & 0x80000000:
        value -= 1 << 32
    return value


def encode_i24(value: int, data: bytearray, offset: int) -> None:
    _check_range(value, I24_MIN, I24_MAX, "i24")
    _check_bounds(data, offset, 3)
    packed = value & 0xFFFFFF
    data[offset] = packed & 0xFF
    data[offset + 1] = (packed >> 8) & 0xFF
    data[offset + 2] = (packed >> 16) & 0xFF


def decode_samples(data: bytes | bytearray, bit_depth: int) -> list[int]:
    """Decode a whole buffer of little-endian PCM samples.

    Trailing bytes that do not form a complete sample are ignored.
    """
    if bit_depth == 16:
        count = len(data) // 2
        return list(struct.unpack_from(f"<{count}h", data, 0))
    if bit_depth == 24:
        return [decode_i24(data, offset) for offset in range(0, len(data) - len(data) % 3, 3)]
    raise ValueError(f"unsupported bit depth: {bit_depth}")


def encode_samples(samples: Sequence[int], bit_depth: int) -> bytes:
    if bit_depth == 16:
        try:
            return struct.pack(f"<{len(samples)}h", *samples)
        except struct.error as exc:
            raise ValueError(f"i16 value out of range: {exc}") from exc
    if bit_depth == 24:
        out = bytearray(len(samples) * 3)
        for index, sample in enumerate(samples):
            encode_i24(sample, out, index * 3)
        return bytes(out)
    raise ValueError(f"unsupported bit depth: {bit_depth}")
