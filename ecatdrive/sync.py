"""Sync manager configuration of a slave."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class Direction(enum.Enum):
    """Data direction of a sync manager, seen from the master."""

    OUTPUT = "output"
    INPUT = "input"


class WatchdogMode(enum.Enum):
    """Watchdog setting of a sync manager."""

    DEFAULT = "default"
    ENABLE = "enable"
    DISABLE = "disable"


def _as_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class SMConfig:
    """One sync manager: index, direction, attached PDO group and watchdog."""

    index: int = 0
    type: Direction | None = None
    pdo_name: str = "null"
    watchdog: WatchdogMode = WatchdogMode.DEFAULT

    def load_from_config(self, sm_config: Mapping[str, Any]) -> None:
        """Read the sync manager from a parsed mapping; raise ValueError if invalid."""
        if "index" not in sm_config:
            raise ValueError("missing sm index info")
        self.index = int(sm_config["index"])

        if "type" not in sm_config:
            raise ValueError(f"sm {self.index}: missing type info")
        direction = _as_text(sm_config["type"])
        if direction == "input":
            self.type = Direction.INPUT
        elif direction == "output":
            self.type = Direction.OUTPUT
        else:
            raise ValueError(f"sm {self.index}: type should be input/output")

        if "pdo" in sm_config:
            pdo_name = _as_text(sm_config["pdo"])
            if pdo_name in ("rpdo", "tpdo"):
                self.pdo_name = pdo_name

        if "watchdog" in sm_config:
            watchdog = _as_text(sm_config["watchdog"])
            if watchdog == "enable":
                self.watchdog = WatchdogMode.ENABLE
            elif watchdog == "disable":
                self.watchdog = WatchdogMode.DISABLE