"""A slave whose PDO mapping, sync managers and SDOs come from a YAML description."""

from __future__ import annotations

from collections.abc import Mapping, MutableSequence
from os import PathLike
from typing import Any

import yaml

from .pdo import EcPdoChannelManager, PdoEntryInfo, PdoType
from .sdo import SdoConfigEntry
from .slave import EcSlave, PdoInfo, SyncInfo
from .sync import Direction, SMConfig, WatchdogMode

# Index of the entry that closes a sync manager list.
SYNC_END_INDEX = 0xFF


def _sequence(value: Any) -> list[Any]:
    """Return a configuration list, treating an absent or null node as empty."""
    if value is None:
        return []
    return list(value)


class GenericEcSlave(EcSlave):
    """A slave configured entirely from a mapping or a YAML file."""

    def __init__(self) -> None:
        super().__init__(0, 0)
        self.counter = 0
        self.rpdos: list[PdoInfo] = []
        self.tpdos: list[PdoInfo] = []
        self.all_channels: list[PdoEntryInfo] = []
        self.pdo_channels_info: list[EcPdoChannelManager] = []
        self.sm_configs: list[SMConfig] = []
        self.domain_map: list[int] = []
        self.slave_config: Mapping[str, Any] = {}
        self.assign_activate = 0
        self._syncs: list[SyncInfo] = []

    def assign_activate_dc_sync(self) -> int:
        """Return the distributed-clock activation word from the configuration."""
        return self.assign_activate

    def process_data(self, index: int, data: bytearray | memoryview, pos: int = 0) -> None:
        """Exchange the data of the ``index``-th domain entry."""
        self.pdo_channels_info[self.domain_map[index]].ec_update(data, pos)

    def syncs(self) -> list[SyncInfo]:
        """Return the sync managers, closed by an entry with index 0xFF."""
        return list(self._syncs)

    def channels(self) -> list[PdoEntryInfo]:
        """Return every PDO entry, RxPDOs first, in configuration order."""
        return list(self.all_channels)

    def domains(self) -> dict[int, list[int]]:
        """Place every non-gap channel into domain 0."""
        return {0: list(self.domain_map)}

    def setup_slave(
        self,
        parameters: Mapping[str, str],
        state_interface: MutableSequence[float] | None,
        command_interface: MutableSequence[float] | None,
    ) -> None:
        """Configure the slave from the file named by the ``slave_config`` parameter.

        Raises ValueError when the parameter is missing or the configuration is
        invalid, and OSError when the file cannot be read.
        """
        self.state_interface = state_interface
        self.command_interface = command_interface
        self.parameters = dict(parameters)

        if "slave_config" not in self.parameters:
            raise ValueError(
                f"{type(self).__name__}: failed to find 'slave_config' tag in URDF"
            )
        self.setup_from_config_file(self.parameters["slave_config"])
        self.setup_interface_mapping()
        self.setup_syncs()

    def setup_from_config(self, slave_config: Mapping[str, Any] | None) -> None:
        """Read identity, sync managers, SDOs and PDO channels from a mapping."""
        if not slave_config:
            raise ValueError(
                f"{type(self).__name__}: failed to load slave configuration: "
                "empty configuration"
            )
        if "vendor_id" not in slave_config:
            raise ValueError(f"{type(self).__name__}: failed to load drive vendor ID")
        self.vendor_id = int(slave_config["vendor_id"]) & 0xFFFFFFFF
        if "product_id" not in slave_config:
            raise ValueError(f"{type(self).__name__}: failed to load drive product ID")
        self.product_id = int(slave_config["product_id"]) & 0xFFFFFFFF
        if "assign_activate" in slave_config:
            self.assign_activate = int(slave_config["assign_activate"]) & 0xFFFFFFFF

        self.sm_configs = []
        for sm in _sequence(slave_config.get("sm")):
            config = SMConfig()
            try:
                config.load_from_config(sm)
            except ValueError:
                continue
            self.sm_configs.append(config)

        self.sdo_config = []
        for sdo in _sequence(slave_config.get("sdo")):
            entry = SdoConfigEntry()
            try:
                entry.load_from_config(sdo)
            except ValueError:
                continue
            self.sdo_config.append(entry)

        self.pdo_channels_info = []
        self.all_channels = []
        self.rpdos = self._load_pdos(slave_config.get("rpdo"), PdoType.RPDO)
        self.tpdos = self._load_pdos(slave_config.get("tpdo"), PdoType.TPDO)

        self.domain_map = [
            position
            for position, entry in enumerate(self.all_channels)
            if entry.index != 0x0000
        ]

    def _load_pdos(self, groups: Any, pdo_type: PdoType) -> list[PdoInfo]:
        pdos = []
        for group in _sequence(groups):
            entries = []
            for channel_config in _sequence(group.get("channels")):
                channel = EcPdoChannelManager(pdo_type=pdo_type)
                channel.load_from_config(channel_config)
                entry = channel.get_pdo_entry_info()
                self.pdo_channels_info.append(channel)
                self.all_channels.append(entry)
                entries.append(entry)
            pdos.append(PdoInfo(int(group["index"]) & 0xFFFF, entries))
        return pdos

    def setup_from_config_file(self, config_file: str | PathLike[str]) -> None:
        """Load the YAML file and configure the slave from it."""
        try:
            with open(config_file, encoding="utf-8") as stream:
                loaded = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            raise ValueError(
                f"{type(self).__name__}: failed to load drive configuration: {exc}"
            ) from exc
        if loaded is not None and not isinstance(loaded, Mapping):
            raise ValueError(
                f"{type(self).__name__}: failed to load drive configuration: "
                "top level is not a mapping"
            )
        self.slave_config = loaded or {}
        self.setup_from_config(self.slave_config)

    def setup_syncs(self) -> None:
        """Build the sync manager list from the configuration or the default layout."""
        syncs: list[SyncInfo] = []
        if not self.sm_configs:
            syncs.append(SyncInfo(0, Direction.OUTPUT, [], WatchdogMode.DISABLE))
            syncs.append(SyncInfo(1, Direction.INPUT, [], WatchdogMode.DISABLE))
            syncs.append(SyncInfo(2, Direction.OUTPUT, list(self.rpdos), WatchdogMode.ENABLE))
            syncs.append(SyncInfo(3, Direction.INPUT, list(self.tpdos), WatchdogMode.DISABLE))
        else:
            groups = {"null": [], "rpdo": self.rpdos, "tpdo": self.tpdos}
            for sm in self.sm_configs:
                pdos = groups.get(sm.pdo_name)
                if pdos is not None:
                    syncs.append(SyncInfo(sm.index, sm.type, list(pdos), sm.watchdog))
        syncs.append(SyncInfo(SYNC_END_INDEX))
        self._syncs = syncs

    def setup_interface_mapping(self) -> None:
        """Link each channel to its slot in the state or command interface list."""
        for channel in self.pdo_channels_info:
            if channel.pdo_type is PdoType.TPDO:
                key = "state_interface/" + channel.interface_name
            else:
                key = "command_interface/" + channel.interface_name
            if key in self.parameters:
                channel.interface_index = int(self.parameters[key])
            channel.setup_interface_ptrs(self.state_interface, self.command_interface)