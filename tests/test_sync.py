import pytest
import yaml

from ecatdrive.sync import Direction, SMConfig, WatchdogMode


def _load(text):
    config = SMConfig()
    config.load_from_config(yaml.safe_load(text))
    return config


def test_output_without_pdo():
    config = _load("{index: 0, type: output, pdo: ~, watchdog: disable}")
    assert config.index == 0
    assert config.type is Direction.OUTPUT
    assert config.watchdog is WatchdogMode.DISABLE
    assert config.pdo_name == "null"


def test_rpdo_with_watchdog():
    config = _load("{index: 2, type: output, pdo: rpdo, watchdog: enable}")
    assert config.index == 2
    assert config.pdo_name == "rpdo"
    assert config.watchdog is WatchdogMode.ENABLE


def test_tpdo_input():
    config = _load("{index: 3, type: input, pdo: tpdo}")
    assert config.type is Direction.INPUT
    assert config.pdo_name == "tpdo"
    assert config.watchdog is WatchdogMode.DEFAULT


def test_unknown_pdo_and_watchdog_keep_defaults():
    config = _load("{index: 1, type: input, pdo: other, watchdog: maybe}")
    assert config.pdo_name == "null"
    assert config.watchdog is WatchdogMode.DEFAULT


def test_missing_index_raises():
    with pytest.raises(ValueError, match="missing sm index"):
        SMConfig().load_from_config({"type": "input"})


def test_missing_type_raises():
    with pytest.raises(ValueError, match="missing type info"):
        SMConfig().load_from_config({"index": 1})


def test_bad_type_raises():
    with pytest.raises(ValueError, match="input/output"):
        SMConfig().load_from_config({"index": 1, "type": "both"})