[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecatdrive"
version = "0.1.0"
description = "EtherCAT slave modelling: PDO channel mapping, SDO configuration, sync managers, CiA 402 drive state machine and SDO data conversion"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "ethercat",
    "fieldbus",
    "cia402",
    "pdo",
    "sdo",
    "servo drive",
    "robotics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ecatdrive"]

[tool.hatch.build.targets.sdist]
include = [
    "ecatdrive",
    "tests",
    "README.md",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
