[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pumpctl"
version = "0.1.0"
description = "Two-pump well-to-cistern controller with sensor, timer and manual modes, modelled in plain Python"
requires-python = ">=3.10"
dependencies = []
keywords = ["pump", "cistern", "well", "controller", "automation", "lcd", "eeprom", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pumpctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
