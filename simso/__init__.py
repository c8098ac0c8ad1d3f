"""A simulated computer with an assembler, devices, processes, schedulers and a small teaching operating system."""

__version__ = "0.1.0"