"""Process data object channels: decoding and encoding of domain bytes."""

from __future__ import annotations

import enum
import logging
import math
import struct
from collections.abc import Mapping, MutableSequence
from dataclasses import dataclass, field
from typing import Any, NamedTuple

_log = logging.getLogger(__name__)

# Bit length reported for a type that cannot be interpreted (an 8-bit -1).
UNKNOWN_BITS = 0xFF


class PdoType(enum.IntEnum):
    """Direction of a process data object."""

    RPDO = 0
    TPDO = 1


@dataclass(frozen=True)
class PdoEntryInfo:
    """Index, sub-index and bit length of one mapped PDO entry."""

    index: int
    subindex: int
    bit_length: int


class _IntSpec(NamedTuple):
    read_format: str
    write_format: str
    bits: int


_INT_TYPES = {
    "uint8": _IntSpec("<B", "<B", 8),
    "int8": _IntSpec("<b", "<B", 8),
    "uint16": _IntSpec("<H", "<H", 16),
    "int16": _IntSpec("<h", "<H", 16),
    "uint32": _IntSpec("<I", "<I", 32),
    "int32": _IntSpec("<i", "<I", 32),
    "uint64": _IntSpec("<Q", "<Q", 64),
    "int64": _IntSpec("<q", "<Q", 64),
}


def type2bits(data_type: str) -> int:
    """Return the bit length of a channel data type such as ``int16`` or ``bit3``."""
    if data_type == "bool":
        return 1
    spec = _INT_TYPES.get(data_type)
    if spec is not None:
        return spec.bits
    marker = data_type.find("bit")
    if marker != -1:
        return int(data_type[marker + 3:]) & 0xFF
    return UNKNOWN_BITS


def _as_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class EcPdoChannelManager:
    """One PDO channel: its mapping, scaling and link to an interface slot."""

    pdo_type: PdoType = PdoType.RPDO
    index: int = 0
    sub_index: int = 0
    data_type: str = ""
    interface_name: str = ""
    data_mask: int = 0xFF
    default_value: float = math.nan
    interface_index: int = -1
    last_value: float = math.nan
    allow_ec_write: bool = True
    override_command: bool = False
    factor: float = 1.0
    offset: float = 0.0
    _state_interface: MutableSequence[float] | None = field(
        default=None, init=False, repr=False, compare=False
    )
    _command_interface: MutableSequence[float] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def setup_interface_ptrs(
        self,
        state_interface: MutableSequence[float] | None,
        command_interface: MutableSequence[float] | None,
    ) -> None:
        """Attach the state and command value lists this channel exchanges with."""
        self._state_interface = state_interface
        self._command_interface = command_interface

    def get_pdo_entry_info(self) -> PdoEntryInfo:
        """Return the entry description used in the slave's PDO mapping."""
        return PdoEntryInfo(self.index, self.sub_index, type2bits(self.data_type))

    def ec_read(self, data: bytes | bytearray | memoryview, pos: int = 0) -> float:
        """Decode the channel value at ``pos``, scale it and remember it."""
        spec = _INT_TYPES.get(self.data_type)
        if spec is not None:
            raw = float(struct.unpack_from(spec.read_format, data, pos)[0])
        elif self.data_type == "bool":
            raw = 1.0 if data[pos] & self.data_mask else 0.0
        else:
            raw = float(data[pos] & self.data_mask)
        self.last_value = self.factor * raw + self.offset
        return self.last_value

    def ec_write(self, data: bytearray | memoryview, value: float, pos: int = 0) -> None:
        """Encode ``value`` into the domain bytes at ``pos``."""
        spec = _INT_TYPES.get(self.data_type)
        if spec is not None:
            raw = int(value) & ((1 << spec.bits) - 1)
            struct.pack_into(spec.write_format, data, pos, raw)
        else:
            mask = self.data_mask
            buffer = data[pos]
            if mask.bit_count() == 1:
                buffer &= ~mask & 0xFF
                if value:
                    buffer |= mask
            elif mask != 0:
                buffer = int(value) & 0xFF & mask
            data[pos] = buffer
        self.last_value = value

    def ec_update(self, data: bytearray | memoryview, pos: int = 0) -> None:
        """Exchange one cycle of data between the domain and the interfaces."""
        if self.pdo_type is PdoType.TPDO:
            self.ec_read(data, pos)
            if self.interface_index >= 0:
                self._state_interface[self.interface_index] = self.last_value
        elif self.pdo_type is PdoType.RPDO and self.allow_ec_write:
            use_command = False
            if self.interface_index >= 0:
                command = self._command_interface[self.interface_index]
                use_command = not math.isnan(command) and not self.override_command
            if use_command:
                self.ec_write(data, self.factor * command + self.offset, pos)
            elif not math.isnan(self.default_value):
                self.ec_write(data, self.default_value, pos)

    def load_from_config(self, channel_config: Mapping[str, Any]) -> None:
        """Read the channel description from a parsed configuration mapping."""
        if "index" in channel_config:
            self.index = int(channel_config["index"])
        else:
            _log.warning("missing channel index info")
        if "sub_index" in channel_config:
            self.sub_index = int(channel_config["sub_index"])
        else:
            _log.warning("channel %d: missing channel info", self.index)
        if "type" in channel_config:
            self.data_type = _as_text(channel_config["type"])
        else:
            _log.warning("channel %d: missing channel data type info", self.index)

        if self.pdo_type is PdoType.RPDO:
            if "command_interface" in channel_config:
                self.interface_name = _as_text(channel_config["command_interface"])
            if "default" in channel_config:
                self.default_value = float(channel_config["default"])
        elif self.pdo_type is PdoType.TPDO:
            if "state_interface" in channel_config:
                self.interface_name = _as_text(channel_config["state_interface"])

        if "factor" in channel_config:
            self.factor = float(channel_config["factor"])
        if "offset" in channel_config:
            self.offset = float(channel_config["offset"])
        if "mask" in channel_config:
            self.data_mask = int(channel_config["mask"]) & 0xFF