import logging
import math
import struct

import pytest
import yaml

from ecatdrive.pdo import (
    UNKNOWN_BITS,
    EcPdoChannelManager,
    PdoEntryInfo,
    PdoType,
    type2bits,
)

EFFORT_CONFIG = (
    "{index: 0x6071, sub_index: 0, type: int16, command_interface: effort, "
    "default: -5, factor: 2, offset: 10}"
)


def _load(text, pdo_type=PdoType.RPDO):
    manager = EcPdoChannelManager(pdo_type=pdo_type)
    manager.load_from_config(yaml.safe_load(text))
    return manager


def test_load_from_config():
    manager = _load(EFFORT_CONFIG)
    assert manager.index == 0x6071
    assert manager.sub_index == 0
    assert manager.data_type == "int16"
    assert manager.interface_name == "effort"
    assert manager.default_value == -5
    assert manager.factor == 2
    assert manager.offset == 10


def test_ec_read_s16():
    manager = _load(EFFORT_CONFIG)
    buffer = bytearray(16)
    struct.pack_into("<h", buffer, 0, 42)
    assert manager.ec_read(buffer) == 2 * 42 + 10


def test_ec_read_write_bit2():
    manager = _load("{index: 0x6071, sub_index: 0, type: bit2, mask: 3}")
    assert manager.data_type == "bit2"
    assert manager.data_mask == 3
    assert type2bits(manager.data_type) == 2

    buffer = bytearray(1)
    buffer[0] = 0
    assert manager.ec_read(buffer) == 0
    buffer[0] = 3
    assert manager.ec_read(buffer) == 3
    buffer[0] = 5
    assert manager.ec_read(buffer) == 1

    manager.ec_write(buffer, 0)
    assert buffer[0] == 0
    manager.ec_write(buffer, 2)
    assert buffer[0] == 2
    manager.ec_write(buffer, 5)
    assert buffer[0] == 1


def test_ec_read_write_bool_mask1():
    manager = _load("{index: 0x6071, sub_index: 0, type: bool, mask: 1}")
    assert manager.data_type == "bool"
    assert manager.data_mask == 1
    assert type2bits(manager.data_type) == 1

    buffer = bytearray(1)
    buffer[0] = 3
    assert manager.ec_read(buffer) == 1
    buffer[0] = 0
    assert manager.ec_read(buffer) == 0

    manager.ec_write(buffer, 0)
    assert buffer[0] == 0
    manager.ec_write(buffer, 5)
    assert buffer[0] == 1


def test_ec_read_write_bool_mask5():
    manager = _load("{index: 0x6071, sub_index: 0, type: bool, mask: 5}")
    assert manager.data_type == "bool"
    assert manager.data_mask == 5
    assert type2bits(manager.data_type) == 1

    buffer = bytearray(1)
    buffer[0] = 7
    assert manager.ec_read(buffer) == 1
    buffer[0] = 0
    assert manager.ec_read(buffer) == 0

    manager.ec_write(buffer, 0)
    assert buffer[0] == 0
    manager.ec_write(buffer, 3)
    assert buffer[0] == 1
    manager.ec_write(buffer, 7)
    assert buffer[0] == 5
    manager.ec_write(buffer, 5)
    assert buffer[0] == 5


@pytest.mark.parametrize(
    "name, bits",
    [("int8", 8), ("uint16", 16), ("int32", 32), ("uint64", 64), ("bool", 1)],
)
def test_type2bits_known(name, bits):
    assert type2bits(name) == bits


def test_type2bits_unknown_and_invalid():
    assert type2bits("float") == UNKNOWN_BITS
    with pytest.raises(ValueError):
        type2bits("bitx")


def test_get_pdo_entry_info():
    manager = _load(EFFORT_CONFIG)
    assert manager.get_pdo_entry_info() == PdoEntryInfo(0x6071, 0, 16)


@pytest.mark.parametrize("name", ["int8", "int16", "int32", "int64"])
def test_signed_write_read_round_trip(name):
    manager = EcPdoChannelManager(data_type=name)
    buffer = bytearray(8)
    manager.ec_write(buffer, -3)
    assert manager.last_value == -3
    assert manager.ec_read(buffer) == -3


def test_write_offset_position():
    manager = EcPdoChannelManager(data_type="uint16")
    buffer = bytearray(4)
    manager.ec_write(buffer, 1000, pos=2)
    assert buffer[:2] == b"\x00\x00"
    assert manager.ec_read(buffer, pos=2) == 1000


def test_update_tpdo_to_state_interface():
    manager = _load(
        "{index: 0x6077, sub_index: 0, type: int16, state_interface: effort, "
        "factor: 5, offset: 15}",
        PdoType.TPDO,
    )
    assert manager.interface_name == "effort"
    state = [0.0, 0.0]
    manager.interface_index = 1
    manager.setup_interface_ptrs(state, None)
    buffer = bytearray(2)
    struct.pack_into("<h", buffer, 0, 42)
    manager.ec_update(buffer)
    assert state[1] == 5 * 42 + 15


def test_update_rpdo_from_command_interface():
    manager = _load(EFFORT_CONFIG)
    command = [0.0, 42.0]
    manager.interface_index = 1
    manager.setup_interface_ptrs(None, command)
    buffer = bytearray(2)
    manager.ec_update(buffer)
    assert manager.last_value == 2 * 42 + 10
    assert struct.unpack_from("<h", buffer)[0] == 2 * 42 + 10


def test_update_rpdo_default_value():
    manager = _load(EFFORT_CONFIG)
    manager.setup_interface_ptrs(None, None)
    buffer = bytearray(2)
    manager.ec_update(buffer)
    assert manager.last_value == -5
    assert struct.unpack_from("<h", buffer)[0] == -5


def test_update_rpdo_nan_command_falls_back_to_default():
    manager = _load(EFFORT_CONFIG)
    manager.interface_index = 0
    manager.setup_interface_ptrs(None, [math.nan])
    buffer = bytearray(2)
    manager.ec_update(buffer)
    assert struct.unpack_from("<h", buffer)[0] == -5


def test_update_rpdo_override_uses_default():
    manager = _load(EFFORT_CONFIG)
    manager.interface_index = 0
    manager.override_command = True
    manager.setup_interface_ptrs(None, [42.0])
    buffer = bytearray(2)
    manager.ec_update(buffer)
    assert struct.unpack_from("<h", buffer)[0] == -5


def test_update_rpdo_without_default_leaves_data():
    manager = _load("{index: 0x607a, sub_index: 0, type: int32, default: .nan}")
    assert math.isnan(manager.default_value)
    buffer = bytearray(b"\x01\x02\x03\x04")
    manager.ec_update(buffer)
    assert buffer == bytearray(b"\x01\x02\x03\x04")
    assert math.isnan(manager.last_value)


def test_update_rpdo_write_disabled():
    manager = _load(EFFORT_CONFIG)
    manager.allow_ec_write = False
    buffer = bytearray(2)
    manager.ec_update(buffer)
    assert buffer == bytearray(2)


def test_null_interface_name():
    manager = _load("{index: 0x6072, sub_index: 0, type: int16, command_interface: ~}")
    assert manager.interface_name == "null"


def test_missing_fields_are_reported(caplog):
    with caplog.at_level(logging.WARNING, logger="ecatdrive.pdo"):
        manager = _load("{factor: 3}")
    assert "missing channel index info" in caplog.text
    assert "missing channel data type info" in caplog.text
    assert manager.factor == 3