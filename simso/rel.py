"""Simulated clock, counting executed instructions."""

from __future__ import annotations

import time

from simso.err import Err, MachineError

__all__ = ["Clock"]


class Clock:
    """Counts time units and interrupts every ``period`` ticks (0: never).

    As an I/O device it supports reading only: ident 0 gives the tick
    count, ident 1 the processor time used by the simulator in ms.
    """

    def __init__(self, period: int = 0) -> None:
        self.period = period
        self.now = 0

    def tick(self) -> Err:
        """Advance one unit; return Err.TIC when an interrupt is due, else Err.OK."""
        self.now += 1
        if self.period != 0 and self.now % self.period == 0:
            return Err.TIC
        return Err.OK

    def read(self, ident: int) -> int:
        """Read the clock as an I/O device."""
        if ident == 0:
            return self.now
        if ident == 1:
            return int(time.process_time() * 1000)
        raise MachineError(Err.END_INV, ident)