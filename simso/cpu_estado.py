"""Internal state of the simulated CPU: registers, error and mode."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum

from simso.err import Err

__all__ = ["CpuMode", "CpuState"]


class CpuMode(Enum):
    """Execution modes of the CPU.

    SUPERVISOR runs every instruction, USER traps on privileged ones and
    ZOMBIE executes nothing (used when no process is ready).
    """

    SUPERVISOR = "supervisor"
    USER = "usuario"
    ZOMBIE = "zumbi"


@dataclass
class CpuState:
    """Register values, pending error and execution mode of the CPU."""

    pc: int = 0
    a: int = 0
    x: int = 0
    error: int = Err.OK
    complement: int = 0
    mode: CpuMode = CpuMode.SUPERVISOR

    def copy(self) -> CpuState:
        """Return an independent copy of this state."""
        return dataclasses.replace(self)

    def set_error(self, err: int, complement: int) -> None:
        """Record an error together with its complement."""
        self.error = err
        self.complement = complement