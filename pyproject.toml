[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "isobus_support"
version = "0.1.0"
description = "Support utilities for ISOBUS/J1939 applications: UTF conversions, persistent settings, MAC-based serial numbers and stack configuration."
requires-python = ">=3.10"
dependencies = []
keywords = ["isobus", "iso11783", "j1939", "can", "utf-8", "utf-16", "settings"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems :: Controller Area Network (CAN) :: J1939",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["isobus_support"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
