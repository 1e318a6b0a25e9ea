"""Base slave device and the mapping structures it describes itself with."""

from __future__ import annotations

from collections.abc import Mapping, MutableSequence
from dataclasses import dataclass, field

from .pdo import PdoEntryInfo
from .sdo import SdoConfigEntry
from .sync import Direction, WatchdogMode


@dataclass
class PdoInfo:
    """A PDO and the entries mapped into it."""

    index: int
    entries: list[PdoEntryInfo] = field(default_factory=list)

    @property
    def n_entries(self) -> int:
        return len(self.entries)


@dataclass
class SyncInfo:
    """A sync manager with its direction, PDOs and watchdog mode."""

    index: int
    direction: Direction | None = None
    pdos: list[PdoInfo] = field(default_factory=list)
    watchdog_mode: WatchdogMode = WatchdogMode.DEFAULT

    @property
    def n_pdos(self) -> int:
        return len(self.pdos)


class EcSlave:
    """A device on the bus that exchanges process data with the master."""

    def __init__(self, vendor_id: int = 0, product_id: int = 0) -> None:
        self.vendor_id = vendor_id
        self.product_id = product_id
        self.sdo_config: list[SdoConfigEntry] = []
        self.state_interface: MutableSequence[float] | None = None
        self.command_interface: MutableSequence[float] | None = None
        self.parameters: dict[str, str] = {}
        self.is_operational = False

    def process_data(self, index: int, data: bytearray | memoryview, pos: int = 0) -> None:
        """Read or write the domain data of channel ``index``; nothing by default."""

    def syncs(self) -> list[SyncInfo]:
        """Return the sync manager configuration."""
        return []

    def initialized(self) -> bool:
        """Return True once the device is ready for cyclic operation."""
        return True

    def set_state_is_operational(self, value: bool) -> None:
        self.is_operational = bool(value)

    def assign_activate_dc_sync(self) -> int:
        """Return the distributed-clock activation word (0 disables it)."""
        return 0x00

    def channels(self) -> list[PdoEntryInfo]:
        """Return every PDO entry of the device."""
        return []

    def domains(self) -> dict[int, list[int]]:
        """Map each domain index to the channel indices placed in it."""
        return {}

    def setup_slave(
        self,
        parameters: Mapping[str, str],
        state_interface: MutableSequence[float] | None,
        command_interface: MutableSequence[float] | None,
    ) -> None:
        """Store the parameters and the interface value lists of the device."""
        self.state_interface = state_interface
        self.command_interface = command_interface
        self.parameters = dict(parameters)