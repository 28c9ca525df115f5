[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labemu"
version = "0.1.0"
description = "Building blocks for instruction-set emulators: memory buses, MMIO devices, trace records, CoreMark helpers and memory-image converters"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "mmio", "riscv", "loongarch", "coremark", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
labemu-memfiles = "labemu.memfiles:main"
labemu-cryptonight = "labemu.cryptonight:main"

[tool.hatch.build.targets.wheel]
packages = ["labemu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
