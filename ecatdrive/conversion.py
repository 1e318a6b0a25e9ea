"""Conversion between textual SDO values and their little-endian wire bytes."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass


class SizeError(Exception):
    """Raised when data does not fit its buffer or does not match its type size."""


@dataclass(frozen=True)
class DataType:
    """A CoE data type: its name, type code and size in bytes (0 if variable)."""

    name: str
    code: int
    byte_size: int


DATA_TYPES: tuple[DataType, ...] = (
    DataType("bool", 0x0001, 1),
    DataType("int8", 0x0002, 1),
    DataType("int16", 0x0003, 2),
    DataType("int32", 0x0004, 4),
    DataType("uint8", 0x0005, 1),
    DataType("uint16", 0x0006, 2),
    DataType("uint32", 0x0007, 4),
    DataType("float", 0x0008, 4),
    DataType("string", 0x0009, 0),
    DataType("octet_string", 0x000A, 0),
    DataType("unicode_string", 0x000B, 0),
    DataType("int24", 0x0010, 3),
    DataType("double", 0x0011, 8),
    DataType("int40", 0x0012, 5),
    DataType("int48", 0x0013, 6),
    DataType("int56", 0x0014, 7),
    DataType("int64", 0x0015, 8),
    DataType("uint24", 0x0016, 3),
    DataType("uint40", 0x0018, 5),
    DataType("uint48", 0x0019, 6),
    DataType("uint56", 0x001A, 7),
    DataType("uint64", 0x001B, 8),
    DataType("sm8", 0xFFFB, 1),
    DataType("sm16", 0xFFFC, 2),
    DataType("sm32", 0xFFFD, 4),
    DataType("sm64", 0xFFFE, 8),
    DataType("raw", 0xFFFF, 0),
)

_BY_NAME = {data_type.name: data_type for data_type in DATA_TYPES}
_BY_CODE = {data_type.code: data_type for data_type in DATA_TYPES}

_STRING_CODES = frozenset({0x0009, 0x000A, 0x000B})
_NON_NATIVE_CODES = frozenset({0x0010, 0x0012, 0x0013, 0x0014, 0x0016, 0x0018, 0x0019, 0x001A})
_SIGN_MAGNITUDE_CODES = frozenset({0xFFFB, 0xFFFC, 0xFFFD, 0xFFFE})

# Integer encoding: struct format and accepted value range.
_INT_ENCODE = {
    0x0001: ("<B", 0, 1),
    0x0002: ("<b", -(1 << 7), (1 << 7) - 1),
    0x0003: ("<h", -(1 << 15), (1 << 15) - 1),
    0x0004: ("<i", -(1 << 31), (1 << 31) - 1),
    0x0005: ("<B", 0, (1 << 8) - 1),
    0x0006: ("<H", 0, (1 << 16) - 1),
    0x0007: ("<I", 0, (1 << 32) - 1),
    0x0015: ("<q", -(1 << 63), (1 << 63) - 1),
    0x001B: ("<Q", 0, (1 << 64) - 1),
}

_FLOAT_ENCODE = {0x0008: "<f", 0x0011: "<d"}

# Integer decoding: struct format, bit width shown in hex, and hex digit count.
_INT_DECODE = {
    0x0001: ("<b", 32, 2),
    0x0002: ("<b", 32, 2),
    0x0003: ("<h", 16, 4),
    0x0004: ("<i", 32, 8),
    0x0005: ("<B", 32, 2),
    0x0006: ("<H", 16, 4),
    0x0007: ("<I", 32, 8),
    0x0015: ("<q", 64, 16),
    0x001B: ("<Q", 64, 16),
}

_SIGN_MAGNITUDE_DECODE = {
    0xFFFB: ("<b", 32, 2, 0x7F),
    0xFFFC: ("<h", 16, 4, 0x7FFF),
    0xFFFD: ("<i", 32, 8, 0x7FFFFFFF),
    0xFFFE: ("<q", 64, 16, 0x7FFFFFFFFFFFFFFF),
}

_INT_RE = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def get_data_type(key: str | int) -> DataType | None:
    """Look a data type up by name or by type code; return None if unknown."""
    if isinstance(key, str):
        return _BY_NAME.get(key)
    return _BY_CODE.get(key)


def buffer2raw(data: bytes | bytearray | memoryview) -> str:
    """Format bytes as a list of hexadecimal values, each preceded by a space."""
    return "".join(f" 0x{byte:02x}" for byte in bytes(data))


def _parse_int(source: str) -> int:
    """Parse a leading integer, guessing the base from a 0x or 0 prefix."""
    match = _INT_RE.match(source)
    if match is None:
        raise ValueError(f"Invalid integer value {source!r}")
    sign, digits = match.groups()
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif len(digits) > 1 and digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits, 10)
    return -value if sign == "-" else value


def _parse_float(source: str) -> float:
    match = _FLOAT_RE.match(source)
    if match is None:
        raise ValueError(f"Invalid floating point value {source!r}")
    return float(match.group(0))


def data2buffer(data_type: DataType, source: str, target_size: int | None = None) -> bytes:
    """Encode the textual value ``source`` as the wire bytes of ``data_type``.

    Raises ValueError for a value that cannot be parsed or is out of range,
    SizeError for a string longer than ``target_size``, and TypeError for a
    data type that cannot be written.
    """
    code = data_type.code
    if code in _INT_ENCODE:
        fmt, low, high = _INT_ENCODE[code]
        value = _parse_int(source)
        if not low <= value <= high:
            raise ValueError("Value out of range")
        return struct.pack(fmt, value)
    if code in _FLOAT_ENCODE:
        value = _parse_float(source)
        try:
            return struct.pack(_FLOAT_ENCODE[code], value)
        except OverflowError:
            raise ValueError("Value out of range") from None
    if code in _STRING_CODES:
        encoded = source.encode("utf-8")
        if target_size is not None and len(encoded) > target_size:
            raise SizeError(f"String too large ({len(encoded)} > {target_size})")
        return encoded
    if code in _NON_NATIVE_CODES:
        raise TypeError(f"Non-native integer type {data_type.name} is not supported.")
    if code in _SIGN_MAGNITUDE_CODES:
        raise TypeError("Sign-and-magnitude types are not supported for input direction.")
    raise TypeError(f"Unknown data type 0x{code:x}")


def _hex(value: int, bits: int, width: int) -> str:
    return "0x" + format(value & ((1 << bits) - 1), f"0{width}x")


def buffer2data(
    data_type: DataType | None, data: bytes | bytearray | memoryview
) -> tuple[str, float]:
    """Decode wire bytes into a display string and a numeric value.

    The numeric value is NaN for string and raw data. A ``data_type`` of None
    treats the bytes as raw. Raises SizeError when the byte count does not
    match a fixed-size type.
    """
    data = bytes(data)
    if data_type is None:
        code = 0xFFFF
    else:
        if data_type.byte_size and len(data) != data_type.byte_size:
            raise SizeError(
                f"Data type mismatch. Expected {data_type.name} with "
                f"{data_type.byte_size} byte, but got {len(data)} byte."
            )
        code = data_type.code

    if code in _INT_DECODE:
        fmt, bits, width = _INT_DECODE[code]
        value = struct.unpack(fmt, data)[0]
        return _hex(value, bits, width), float(value)
    if code == 0x0008:
        raw = struct.unpack("<I", data)[0]
        real = struct.unpack("<f", data)[0]
        # The numeric value carries the raw bit pattern, as the device reports it.
        return format(real, ".6g"), float(raw)
    if code == 0x0011:
        raw = struct.unpack("<Q", data)[0]
        real = struct.unpack("<d", data)[0]
        return format(real, ".6g"), float(raw)
    if code in _STRING_CODES:
        return data.decode("utf-8", errors="replace"), math.nan
    if code in _SIGN_MAGNITUDE_DECODE:
        fmt, bits, width, magnitude_mask = _SIGN_MAGNITUDE_DECODE[code]
        value = struct.unpack(fmt, data)[0]
        magnitude = -(value & magnitude_mask) if value < 0 else value
        return _hex(value, bits, width), float(magnitude)
    return buffer2raw(data), math.nan