"""Building blocks for instruction-set emulators: buses, devices, traces and tools."""

__version__ = "0.1.0"