"""Schedulers choosing which ready process runs next."""

from __future__ import annotations

from abc import ABC, abstractmethod

from simso.processo import Metrics, Process, ProcessState, ProcessTable

__all__ = [
    "QUANTUM",
    "Scheduler",
    "SimpleScheduler",
    "RoundRobinScheduler",
    "ShortestJobScheduler",
    "expected_time",
]

QUANTUM = 5


def expected_time(metrics: Metrics) -> int:
    """Estimate the next running burst: mean burst so far, or QUANTUM."""
    stops = metrics.blocks + metrics.preemptions
    return QUANTUM if stops <= 0 else metrics.total_running // stops


class Scheduler(ABC):
    """Keeps the running process and picks the next one when needed."""

    def __init__(self, running: Process | None = None) -> None:
        self.running = running

    def _expired(self, process: Process, clock: int) -> bool:
        return clock - process.metrics.last_change > QUANTUM

    @abstractmethod
    def _pick(self, ready: list[Process]) -> Process | None:
        """Choose among the ready processes, in table order."""

    def schedule(self, table: ProcessTable, clock: int) -> Process | None:
        """Return the process that should run now, or None if none is ready.

        A running process whose time slice is over is moved back to ready.
        """
        current = self.running
        if current is not None and current.state is ProcessState.RUNNING:
            if not self._expired(current, clock):
                return current
            current.change_state(ProcessState.READY, clock)
        ready = [
            proc for proc in table
            if proc is not None and proc.state is ProcessState.READY
        ]
        self.running = self._pick(ready)
        return self.running

    def remove_running(self) -> None:
        """Forget the running process."""
        self.running = None


class SimpleScheduler(Scheduler):
    """Runs a process until it stops; then takes the last ready one."""

    def _expired(self, process: Process, clock: int) -> bool:
        return False

    def _pick(self, ready: list[Process]) -> Process | None:
        return ready[-1] if ready else None


class RoundRobinScheduler(Scheduler):
    """Preempts after QUANTUM; picks the process ready for the longest time."""

    def _pick(self, ready: list[Process]) -> Process | None:
        return min(ready, key=lambda proc: proc.metrics.last_change, default=None)


class ShortestJobScheduler(Scheduler):
    """Preempts after QUANTUM; picks the shortest expected burst."""

    def _pick(self, ready: list[Process]) -> Process | None:
        return min(ready, key=lambda proc: expected_time(proc.metrics), default=None)