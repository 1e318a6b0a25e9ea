"""Service data object entries written to a slave at start-up."""

from __future__ import annotations

import struct
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_TYPE_SIZES = {
    "int8": 1,
    "uint8": 1,
    "int16": 2,
    "uint16": 2,
    "int32": 4,
    "uint32": 4,
    "int64": 8,
    "uint64": 8,
}

_FORMATS = {1: "<B", 2: "<H", 4: "<I", 8: "<Q"}


def type2bytes(data_type: str) -> int:
    """Return the byte size of an SDO data type."""
    try:
        return _TYPE_SIZES[data_type]
    except KeyError:
        raise ValueError(f"unsupported SDO data type {data_type!r}") from None


@dataclass
class SdoConfigEntry:
    """One SDO value: object index, sub-index, data type and integer value."""

    index: int = 0
    sub_index: int = 0
    data_type: str = ""
    data: int = 0

    def buffer_write(self) -> bytes:
        """Return the value encoded little-endian in ``data_size()`` bytes."""
        size = self.data_size()
        raw = int(self.data) & ((1 << (8 * size)) - 1)
        return struct.pack(_FORMATS[size], raw)

    def load_from_config(self, sdo_config: Mapping[str, Any]) -> None:
        """Read the entry from a parsed mapping; raise ValueError if incomplete."""
        if "index" not in sdo_config:
            raise ValueError("missing sdo index info")
        self.index = int(sdo_config["index"])
        if "sub_index" not in sdo_config:
            raise ValueError(f"sdo {self.index}: missing sdo info")
        self.sub_index = int(sdo_config["sub_index"])
        if "type" not in sdo_config:
            raise ValueError(f"sdo {self.index}: missing sdo data type info")
        self.data_type = str(sdo_config["type"])
        if "value" not in sdo_config:
            raise ValueError(f"sdo {self.index}: missing sdo value")
        self.data = int(sdo_config["value"])

    def data_size(self) -> int:
        """Return the number of bytes the value occupies."""
        return type2bytes(self.data_type)