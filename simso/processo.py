"""Processes of the simulated system and the table that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from simso.cpu_estado import CpuState
from simso.mem import Memory

__all__ = [
    "Program",
    "ProcessState",
    "BlockKind",
    "Metrics",
    "Process",
    "ProcessTable",
    "TABLE_GROWTH",
]

TABLE_GROWTH = 5


@dataclass(frozen=True)
class Program:
    """Machine code of a program, loaded from address 0."""

    code: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", tuple(self.code))


class ProcessState(Enum):
    """Scheduling state of a process."""

    BLOCKED = "bloqueado"
    READY = "pronto"
    RUNNING = "em_execucao"


class BlockKind(Enum):
    """Why a process is blocked."""

    IO = "es"


@dataclass
class Metrics:
    """Clock accounting of a process.

    The totals hold the time spent in each state; ``last_change`` is the
    clock of the latest state change.
    """

    last_change: int
    start: int
    end: int = 0
    total_running: int = 0
    total_blocked: int = 0
    total_ready: int = 0
    blocks: int = 0
    preemptions: int = 0


class Process:
    """A process: its own memory image, saved CPU state and metrics.

    Raises MachineError if the program does not fit in ``memory_size``.
    """

    def __init__(self, program: Program, memory_size: int, clock: int) -> None:
        self.memory = Memory(memory_size)
        for address, word in enumerate(program.code):
            self.memory.write(address, word)
        self.cpu = CpuState()
        self.state = ProcessState.READY
        self.block_kind: BlockKind | None = None
        self.block_info: Any = None
        self.metrics = Metrics(last_change=clock, start=clock)

    def _account(self, clock: int) -> None:
        metrics = self.metrics
        elapsed = clock - metrics.last_change
        if self.state is ProcessState.RUNNING:
            metrics.total_running += elapsed
        elif self.state is ProcessState.BLOCKED:
            metrics.total_blocked += elapsed
        else:
            metrics.total_ready += elapsed
        metrics.last_change = clock

    def change_state(self, state: ProcessState, clock: int) -> None:
        """Move to ``state`` at ``clock``, accounting time and interruptions."""
        self._account(clock)
        if self.state is ProcessState.RUNNING:
            if state is ProcessState.BLOCKED:
                self.metrics.blocks += 1
            elif state is ProcessState.READY:
                self.metrics.preemptions += 1
        self.state = state

    def block(self, kind: BlockKind, info: Any, clock: int) -> None:
        """Block the process for ``kind``, keeping ``info`` about the wait."""
        self.change_state(ProcessState.BLOCKED, clock)
        self.block_kind = kind
        self.block_info = info

    def finish(self, clock: int) -> None:
        """Account the final stretch of time and record the end clock."""
        self._account(clock)
        self.metrics.end = clock


class ProcessTable:
    """Slots of processes; an empty slot holds None.

    Adding to a full table grows it by TABLE_GROWTH slots.
    """

    def __init__(self, size: int) -> None:
        self._slots: list[Process | None] = [None] * size

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Process | None]:
        return iter(self._slots)

    def __getitem__(self, index: int) -> Process | None:
        return self._slots[index]

    def _find(self, target: Process | None) -> int:
        return next(
            (i for i, slot in enumerate(self._slots) if slot is target),
            len(self._slots),
        )

    def add(self, process: Process) -> int:
        """Put ``process`` in the first empty slot and return its index."""
        index = self._find(None)
        if index >= len(self._slots):
            self._slots.extend([None] * TABLE_GROWTH)
        self._slots[index] = process
        return index

    def remove(self, index: int) -> None:
        """Empty the slot at ``index``."""
        self._slots[index] = None

    def index(self, process: Process | None) -> int:
        """Return the slot holding ``process``, or the table size if absent."""
        return self._find(process)

    def any_alive(self) -> bool:
        """Return True if some slot holds a process."""
        return any(slot is not None for slot in self._slots)