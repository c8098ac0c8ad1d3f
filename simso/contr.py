"""Controller of the simulated hardware and its instruction loop."""

from __future__ import annotations

from typing import Protocol

from simso.cpu_estado import CpuMode
from simso.err import Err, MachineError, error_name
from simso.es import IOController
from simso.executor import Executor
from simso.instr import arg_count, name_of
from simso.mem import Memory
from simso.mmu import Mmu
from simso.rel import Clock
from simso.tela import N_TERM, Screen
from simso.term import Terminal

__all__ = [
    "MEM_SIZE",
    "CLOCK_DEVICE",
    "CPU_TIME_DEVICE",
    "CYCLES_DEVICE",
    "TOTAL_TIME_DEVICE",
    "Controller",
]

MEM_SIZE = 2000

CLOCK_DEVICE = 11
CPU_TIME_DEVICE = 12
CYCLES_DEVICE = 99
TOTAL_TIME_DEVICE = 98


class _System(Protocol):
    def interrupt(self, err: Err) -> None: ...

    def ok(self) -> bool: ...


class Controller:
    """Owns the simulated hardware and runs instructions one at a time.

    Terminals are devices 0 to 7.  The clock is readable as devices 11
    and 99 (instruction count) and 12 and 98 (simulator CPU time in ms).
    """

    def __init__(self, screen: Screen | None = None) -> None:
        self.screen = screen if screen is not None else Screen()
        self.memory = Memory(MEM_SIZE)
        self.mmu = Mmu(self.memory)
        self.terminal = Terminal(self.screen)
        self.clock = Clock(0)
        self.io = IOController()
        for terminal in range(N_TERM):
            self.io.register(
                terminal,
                terminal,
                self.terminal.read,
                self.terminal.write,
                self.terminal.ready,
            )
        self.io.register(CLOCK_DEVICE, 0, self.clock.read)
        self.io.register(CPU_TIME_DEVICE, 1, self.clock.read)
        self.io.register(CYCLES_DEVICE, 0, self.clock.read)
        self.io.register(TOTAL_TIME_DEVICE, 1, self.clock.read)
        self.executor = Executor(self.mmu, self.io)
        self.system: _System | None = None

    def attach_os(self, system: _System) -> None:
        """Tell the controller which operating system handles interrupts."""
        self.system = system

    def _peek(self, address: int, default: int) -> int:
        try:
            return self.mmu.read(address)
        except MachineError:
            return default

    def status_line(self) -> str:
        """Describe the CPU: registers, instruction at the PC and pending error."""
        state = self.executor.copy_state()
        if state.mode is CpuMode.ZOMBIE:
            return "zumbi"
        pc = state.pc
        opcode = self._peek(pc, -1)
        name = name_of(opcode) or "?"
        text = f"PC={pc:04d} A={state.a:06d} X={state.x:06d} {opcode:02d} {name}"
        if (arg_count(opcode) or 0) > 0:
            text += f" {self._peek(pc + 1, 0)}"
        if state.error != Err.OK:
            text += (
                f" E={int(state.error)}({state.complement}) {error_name(state.error)}"
            )
        return text

    def run(self) -> None:
        """Execute instructions until the operating system says to stop."""
        system = self.system
        if system is None:
            raise RuntimeError("no operating system attached")
        while True:
            err = self.executor.step()
            if err != Err.OK:
                system.interrupt(err)
            err = self.clock.tick()
            if err != Err.OK:
                system.interrupt(err)
            self.screen.status(self.status_line())
            self.screen.update()
            if not system.ok():
                break
        self.screen.log("Fim da execução.")
        self.screen.log(f"relógio: {self.clock.now}\n")