import struct

import pytest

from ecatdrive.sdo import SdoConfigEntry, type2bytes


def _entry(**overrides):
    config = {"index": 0x60C2, "sub_index": 1, "type": "int8", "value": 10}
    config.update(overrides)
    entry = SdoConfigEntry()
    entry.load_from_config(config)
    return entry


def test_load_from_config():
    entry = _entry()
    assert entry.index == 0x60C2
    assert entry.sub_index == 1
    assert entry.data_type == "int8"
    assert entry.data == 10
    assert entry.data_size() == 1


def test_data_size_int32():
    assert _entry(type="int32", value=0).data_size() == 4


def test_buffer_write_int8():
    assert _entry().buffer_write() == bytes([10])


@pytest.mark.parametrize(
    "name, fmt",
    [("int8", "<b"), ("int16", "<h"), ("int32", "<i"), ("int64", "<q")],
)
def test_buffer_write_signed_round_trip(name, fmt):
    entry = _entry(type=name, value=-3)
    encoded = entry.buffer_write()
    assert len(encoded) == entry.data_size()
    assert struct.unpack(fmt, encoded)[0] == -3


@pytest.mark.parametrize(
    "name, fmt",
    [("uint8", "<B"), ("uint16", "<H"), ("uint32", "<I"), ("uint64", "<Q")],
)
def test_buffer_write_unsigned_round_trip(name, fmt):
    entry = _entry(type=name, value=35)
    assert struct.unpack(fmt, entry.buffer_write())[0] == 35


def test_type2bytes_matches_entry_size():
    for name in ("int8", "uint16", "int32", "uint64"):
        assert _entry(type=name).data_size() == type2bytes(name)


def test_unknown_type_raises():
    with pytest.raises(ValueError):
        type2bytes("float")
    with pytest.raises(ValueError):
        _entry(type="float").buffer_write()


@pytest.mark.parametrize(
    "missing, message",
    [
        ("index", "missing sdo index"),
        ("sub_index", "missing sdo info"),
        ("type", "missing sdo data type"),
        ("value", "missing sdo value"),
    ],
)
def test_missing_field_raises(missing, message):
    config = {"index": 0x6098, "sub_index": 0, "type": "int8", "value": 35}
    del config[missing]
    with pytest.raises(ValueError, match=message):
        SdoConfigEntry().load_from_config(config)