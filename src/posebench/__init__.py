"""Motion planning benchmarks built from the predefined poses of a robot."""

__version__ = "0.1.0"
