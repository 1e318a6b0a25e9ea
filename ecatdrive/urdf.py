"""Extraction of bus module parameters from a robot description."""

from __future__ import annotations

import xml.etree.ElementTree as ET


def _text(element: ET.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def get_ec_module_params(
    urdf: str, component_name: str, component_type: str
) -> list[dict[str, str]]:
    """Return the parameters of every ``ec_module`` of one named component.

    Each dictionary holds the module ``name``, its ``plugin`` when given, and
    every ``param`` by name. Raises ValueError for an empty or invalid
    description, one whose root is not ``robot``, or one without ``ros2_control``.
    """
    if not urdf:
        raise ValueError("empty URDF passed to robot")
    try:
        root = ET.fromstring(urdf)
    except ET.ParseError as exc:
        raise ValueError("invalid URDF passed in to robot parser") from exc
    if root.tag != "robot":
        raise ValueError("the robot tag is not root element in URDF")

    controls = root.findall("ros2_control")
    if not controls:
        raise ValueError("no ros2_control tag")

    module_params: list[dict[str, str]] = []
    for control in controls:
        for component in control.findall(component_type):
            if component.get("name") != component_name:
                continue
            for module in component.findall("ec_module"):
                params = {"name": module.get("name", "")}
                plugin = module.find("plugin")
                if plugin is not None:
                    params["plugin"] = _text(plugin)
                for param in module.findall("param"):
                    params[param.get("name", "")] = _text(param)
                module_params.append(params)
    return module_params