# ecatdrive

`ecatdrive` models EtherCAT slave devices in Python. It turns a YAML
description of a slave into the PDO, sync manager and SDO layout that a master
needs. It moves values between process-data buffers and the state and command
value lists of a controller, and it runs the CiA 402 drive state machine.

## Installation

```
pip install ecatdrive
```

For the test suite:

```
pip install "ecatdrive[test]"
pytest
```

## What is inside

| Module | Purpose |
| --- | --- |
| `ecatdrive.pdo` | `EcPdoChannelManager` handles one PDO entry. It reads the entry from a process-data buffer and writes it back, with factor, offset, bit mask and default value. `PdoType` and `PdoEntryInfo` describe entries, and `type2bits` gives the bit width of a data type name. |
| `ecatdrive.sdo` | `SdoConfigEntry` is an SDO value written at start-up and encoded little-endian. `type2bytes` gives its size. |
| `ecatdrive.sync` | `SMConfig`, `Direction` and `WatchdogMode` hold the sync manager configuration. |
| `ecatdrive.slave` | `EcSlave`, `PdoInfo` and `SyncInfo` make up the base slave interface. |
| `ecatdrive.generic_slave` | `GenericEcSlave` is a slave configured entirely from a mapping or a YAML file. |
| `ecatdrive.cia402` | `EcCiA402Drive`, `DeviceState`, `ModeOfOperation` and `device_state` model a CiA 402 servo drive with automatic state transitions and fault reset. |
| `ecatdrive.conversion` | `DataType`, `get_data_type`, `data2buffer`, `buffer2data`, `buffer2raw` and `SizeError` convert SDO values between text and bytes. |
| `ecatdrive.urdf` | `get_ec_module_params` extracts `ec_module` parameters from a robot description. |

## Describing a slave

A slave is described in YAML:

```yaml
vendor_id: 0x00000011
product_id: 0x00000001
assign_activate: 0x0321
sdo:
  - {index: 0x60C2, sub_index: 1, type: int8, value: 10}
rpdo:
  - index: 0x1607
    channels:
      - {index: 0x607a, sub_index: 0, type: int32, command_interface: position, default: .nan}
      - {index: 0x6040, sub_index: 0, type: uint16, default: 0}
tpdo:
  - index: 0x1a07
    channels:
      - {index: 0x6064, sub_index: 0, type: int32, state_interface: position}
      - {index: 0x6041, sub_index: 0, type: uint16}
sm:
  - {index: 2, type: output, pdo: rpdo, watchdog: enable}
  - {index: 3, type: input, pdo: tpdo, watchdog: disable}
```

To load it, attach the controller's value lists:

```python
from ecatdrive.generic_slave import GenericEcSlave

state = [0.0]
command = [float("nan")]

slave = GenericEcSlave()
slave.setup_slave(
    {
        "slave_config": "my_slave.yaml",
        "state_interface/position": "0",
        "command_interface/position": "0",
    },
    state,
    command,
)
```

`setup_slave` raises `ValueError` in two cases: the `slave_config` parameter is
missing, or the configuration is invalid. It raises `OSError` when the file
cannot be read. `setup_from_config` takes an already parsed mapping instead of
a file.

After setup, three methods describe the layout that a master registers:

* `slave.syncs()` gives the sync manager list. It ends with an entry whose index is 0xFF.
* `slave.channels()` gives every PDO entry.
* `slave.domains()` gives `{0: [...]}`.

In each cycle, `slave.process_data(index, data, pos)` exchanges domain entry
`index` with the buffer `data` at offset `pos`. Values that the slave sends go
into the state list. Toward the slave, the command value is written, or the
channel default when there is no command.

`EcCiA402Drive` is set up the same way. Its YAML also takes `auto_fault_reset`
and `auto_state_transitions`, and its parameters may give `mode_of_operation`
and `command_interface/reset_fault`. On the control word channel the drive
writes the control word that moves it to the next state.
`initialized()` becomes true once the drive has been in
`DeviceState.OPERATION_ENABLED` at the end of two consecutive cycles.
`device_state(status_word)` decodes a status word on its own.

## A single PDO channel

```python
from ecatdrive.pdo import EcPdoChannelManager, PdoType

channel = EcPdoChannelManager(pdo_type=PdoType.RPDO)
channel.load_from_config(
    {"index": 0x6071, "sub_index": 0, "type": "int16", "factor": 2, "offset": 10}
)

buffer = bytearray(2)
channel.ec_write(buffer, 42, 0)     # writes the raw value 42
value = channel.ec_read(buffer, 0)  # factor * raw + offset == 94.0
```

## SDO values

`get_data_type` looks up a data type by name (`"uint16"`, `"float"`,
`"string"`, ...) or by its CoE code. It returns `None` for an unknown type.

`data2buffer(data_type, source, target_size)` parses a textual value into
little-endian bytes. An integer value may carry a `0x` or `0` prefix. It
raises these errors:

* `ValueError` for a value that cannot be parsed or is out of range.
* `SizeError` for a string longer than `target_size`.
* `TypeError` for a type that cannot be written.

`buffer2data(data_type, data)` decodes bytes into a display string and a
number. It raises `SizeError` when the byte count does not match a fixed-size
type. `buffer2raw` formats bytes as hexadecimal values.

## Robot descriptions

`get_ec_module_params(urdf, component_name, component_type)` searches a robot
description. It reads the `ros2_control` sections and returns one dictionary
for each `ec_module` of the named `joint`, `gpio` or `sensor`. Each dictionary
holds the module `name`, its `plugin` and its `param` values.

## What this package does not do

`ecatdrive` does not talk to a bus or a device itself. It has no master: it
does not open the master's device and does not run the cyclic exchange. It
performs no SDO uploads or downloads either, and it provides no command-line
tool or service. It describes slaves, and it encodes and decodes their data.
Moving those bytes over the wire is left to the caller.