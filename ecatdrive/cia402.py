"""A CiA 402 drive: a generic slave that also walks the drive state machine."""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Mapping, MutableSequence
from typing import Any

from .generic_slave import GenericEcSlave

_log = logging.getLogger(__name__)

RPDO_CONTROLWORD = 0x6040
RPDO_POSITION = 0x607A
RPDO_VELOCITY = 0x60FF
RPDO_EFFORT = 0x6071
RPDO_MODE_OF_OPERATION = 0x6060

TPDO_POSITION = 0x6064
TPDO_STATUSWORD = 0x6041
TPDO_MODE_OF_OPERATION_DISPLAY = 0x6061


class DeviceState(enum.IntEnum):
    """States of the CiA 402 power drive state machine."""

    UNDEFINED = 0
    START = 1
    NOT_READY_TO_SWITCH_ON = 2
    SWITCH_ON_DISABLED = 3
    READY_TO_SWITCH_ON = 4
    SWITCH_ON = 5
    OPERATION_ENABLED = 6
    QUICK_STOP_ACTIVE = 7
    FAULT_REACTION_ACTIVE = 8
    FAULT = 9

    @property
    def label(self) -> str:
        """Human-readable name of the state."""
        return _STATE_LABELS[self]


_STATE_LABELS = {
    DeviceState.START: "Start",
    DeviceState.NOT_READY_TO_SWITCH_ON: "Not Ready to Switch On",
    DeviceState.SWITCH_ON_DISABLED: "Switch on Disabled",
    DeviceState.READY_TO_SWITCH_ON: "Ready to Switch On",
    DeviceState.SWITCH_ON: "Switch On",
    DeviceState.OPERATION_ENABLED: "Operation Enabled",
    DeviceState.QUICK_STOP_ACTIVE: "Quick Stop Active",
    DeviceState.FAULT_REACTION_ACTIVE: "Fault Reaction Active",
    DeviceState.FAULT: "Fault",
    DeviceState.UNDEFINED: "Undefined State",
}


class ModeOfOperation(enum.IntEnum):
    """Modes of operation of a CiA 402 drive."""

    NO_MODE = 0
    PROFILED_POSITION = 1
    PROFILED_VELOCITY = 3
    PROFILED_TORQUE = 4
    HOMING = 6
    INTERPOLATED_POSITION = 7
    CYCLIC_SYNC_POSITION = 8
    CYCLIC_SYNC_VELOCITY = 9
    CYCLIC_SYNC_TORQUE = 10


def device_state(status_word: int) -> DeviceState:
    """Return the drive state encoded in a status word."""
    if status_word & 0b01001111 == 0b00000000:
        return DeviceState.NOT_READY_TO_SWITCH_ON
    if status_word & 0b01001111 == 0b01000000:
        return DeviceState.SWITCH_ON_DISABLED
    if status_word & 0b01101111 == 0b00100001:
        return DeviceState.READY_TO_SWITCH_ON
    if status_word & 0b01101111 == 0b00100011:
        return DeviceState.SWITCH_ON
    if status_word & 0b01101111 == 0b00100111:
        return DeviceState.OPERATION_ENABLED
    if status_word & 0b01101111 == 0b00000111:
        return DeviceState.QUICK_STOP_ACTIVE
    if status_word & 0b01001111 == 0b00001111:
        return DeviceState.FAULT_REACTION_ACTIVE
    if status_word & 0b00001000:
        return DeviceState.FAULT
    return DeviceState.UNDEFINED


def _to_int8(value: float) -> int:
    raw = int(value) & 0xFF
    return raw - 0x100 if raw >= 0x80 else raw


def _to_uint16(value: float) -> int:
    return int(value) & 0xFFFF


def _as_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean, got {value!r}")
    return value


class EcCiA402Drive(GenericEcSlave):
    """A drive that is brought to "operation enabled" automatically."""

    def __init__(self) -> None:
        super().__init__()
        self.mode_of_operation_display = 0
        self.mode_of_operation = -1
        self.last_status_word = 0xFFFF
        self.status_word = 0
        self.control_word = 0
        self.last_state = DeviceState.START
        self.state = DeviceState.START
        self._initialized = False
        self.auto_fault_reset = False
        self.auto_state_transitions = True
        self.fault_reset = False
        self.fault_reset_command_interface_index = -1
        self.last_fault_reset_command = False
        self.last_position = math.nan

    def initialized(self) -> bool:
        """Return True once the drive has stayed in "operation enabled" for a cycle."""
        return self._initialized

    def process_data(self, index: int, data: bytearray | memoryview, pos: int = 0) -> None:
        """Exchange channel ``index`` and advance the state machine."""
        channel = self.pdo_channels_info[index]

        if channel.index == RPDO_CONTROLWORD and self.is_operational:
            if self.fault_reset_command_interface_index >= 0:
                command = self.command_interface[self.fault_reset_command_interface_index]
                if command == 0:
                    self.last_fault_reset_command = False
                if (
                    not self.last_fault_reset_command
                    and command != 0
                    and not math.isnan(command)
                ):
                    self.last_fault_reset_command = True
                    self.fault_reset = True
            if self.auto_state_transitions:
                current = _to_uint16(channel.ec_read(data, pos))
                channel.default_value = float(self.transition(self.state, current))

        if channel.index == RPDO_POSITION:
            if self.mode_of_operation_display != ModeOfOperation.NO_MODE:
                channel.default_value = channel.factor * self.last_position + channel.offset
            channel.override_command = (
                self.mode_of_operation_display != ModeOfOperation.CYCLIC_SYNC_POSITION
            )

        if channel.index == RPDO_MODE_OF_OPERATION and 0 <= self.mode_of_operation <= 10:
            channel.default_value = float(self.mode_of_operation)

        channel.ec_update(data, pos)

        if channel.index == TPDO_MODE_OF_OPERATION_DISPLAY:
            self.mode_of_operation_display = _to_int8(channel.last_value)
        if channel.index == TPDO_POSITION:
            self.last_position = channel.last_value
        if channel.index == TPDO_STATUSWORD:
            self.status_word = _to_uint16(channel.last_value)

        if index == len(self.all_channels) - 1:
            if self.status_word != self.last_status_word:
                self.state = device_state(self.status_word)
                if self.state != self.last_state:
                    _log.info(
                        "STATE: %s with status word :%d", self.state.label, self.status_word
                    )
            self._initialized = (
                self.state is DeviceState.OPERATION_ENABLED
                and self.last_state is DeviceState.OPERATION_ENABLED
            )
            self.last_status_word = self.status_word
            self.last_state = self.state
            self.counter += 1

    def setup_slave(
        self,
        parameters: Mapping[str, str],
        state_interface: MutableSequence[float] | None,
        command_interface: MutableSequence[float] | None,
    ) -> None:
        """Configure the drive and read its mode and fault-reset parameters."""
        super().setup_slave(parameters, state_interface, command_interface)
        if "mode_of_operation" in self.parameters:
            self.mode_of_operation = _to_int8(float(self.parameters["mode_of_operation"]))
        if "command_interface/reset_fault" in self.parameters:
            self.fault_reset_command_interface_index = int(
                self.parameters["command_interface/reset_fault"]
            )

    def setup_from_config(self, drive_config: Mapping[str, Any] | None) -> None:
        """Read the generic configuration plus the drive's automation switches."""
        super().setup_from_config(drive_config)
        if drive_config.get("auto_fault_reset") is not None:
            self.auto_fault_reset = _as_bool("auto_fault_reset", drive_config["auto_fault_reset"])
        if drive_config.get("auto_state_transitions") is not None:
            self.auto_state_transitions = _as_bool(
                "auto_state_transitions", drive_config["auto_state_transitions"]
            )

    def transition(self, state: DeviceState, control_word: int) -> int:
        """Return the control word that moves the drive on from ``state``."""
        if state is DeviceState.SWITCH_ON_DISABLED:
            return (control_word & 0b01111110) | 0b00000110
        if state is DeviceState.READY_TO_SWITCH_ON:
            return (control_word & 0b01110111) | 0b00000111
        if state in (DeviceState.SWITCH_ON, DeviceState.QUICK_STOP_ACTIVE):
            return (control_word & 0b01111111) | 0b00001111
        if state is DeviceState.FAULT and (self.auto_fault_reset or self.fault_reset):
            self.fault_reset = False
            return (control_word & 0b11111111) | 0b10000000
        return control_word