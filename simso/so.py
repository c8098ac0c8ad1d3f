"""The simulated operating system: processes, system calls and scheduling."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, Optional, Sequence

from simso.contr import CYCLES_DEVICE, Controller
from simso.cpu_estado import CpuMode, CpuState
from simso.err import Err, MachineError, error_name
from simso.es import Access
from simso.escalonador import RoundRobinScheduler, Scheduler
from simso.mem import Memory
from simso.processo import (
    BlockKind,
    Metrics,
    Process,
    ProcessState,
    Program,
    ProcessTable,
)

__all__ = ["SysCall", "IoWait", "OperatingSystem", "load_program"]

SchedulerFactory = Callable[[Optional[Process]], Scheduler]

_COMMENT = re.compile(r"/\*.*?\*/", re.S)


class SysCall(IntEnum):
    """System calls, selected by the argument of SISOP."""

    LE = 1  # read from device A; the value goes to X
    ESCR = 2  # write X to device A
    FIM = 3  # end the process
    CRIA = 4  # create a process running program A


@dataclass(frozen=True)
class IoWait:
    """What a process blocked on I/O is waiting for."""

    device: int
    access: Access


def load_program(path: str | os.PathLike) -> Program:
    """Read a program written as comma-separated words, with /* */ comments."""
    text = _COMMENT.sub(" ", Path(path).read_text(encoding="utf-8"))
    words = (token.strip() for token in text.split(","))
    return Program(tuple(int(word) for word in words if word))


class OperatingSystem:
    """Handles the interrupts of the controller.

    The first program is started as the first process; the others can be
    started by the CRIA system call.  ``scheduler`` builds the scheduler
    from the first running process.
    """

    def __init__(
        self,
        controller: Controller,
        programs: Sequence[Program],
        scheduler: SchedulerFactory = RoundRobinScheduler,
    ) -> None:
        if not programs:
            raise ValueError("at least one program is needed")
        self.controller = controller
        self.programs = list(programs)
        self.table = ProcessTable(len(self.programs))
        self.clock = 0
        self.finished: list[Metrics] = []
        self._panicked = False
        self._running_index: int | None = None

        first = self._new_process(0)
        self._running_index = self.table.add(first)
        first.change_state(ProcessState.RUNNING, self.clock)
        self.scheduler = scheduler(self.running_process())
        self._load_context(first)
        self._set_mode(CpuMode.USER)

    # helpers

    @property
    def _executor(self):
        return self.controller.executor

    def _log(self, text: str) -> None:
        self.controller.screen.log(text)

    def _new_process(self, number: int) -> Process:
        return Process(self.programs[number], len(self.controller.memory), self.clock)

    def running_process(self) -> Process | None:
        """Return the process currently on the CPU, or None."""
        index = self._running_index
        if index is None or index >= len(self.table):
            return None
        return self.table[index]

    def _set_mode(self, mode: CpuMode) -> None:
        state = self._executor.copy_state()
        state.mode = mode
        self._executor.set_state(state)
        proc = self.running_process()
        if proc is not None:
            proc.cpu = state

    def _copy_memory(self, destination: Memory, original: Memory) -> None:
        for address in range(len(original)):
            try:
                value = original.read(address)
            except MachineError:
                self._log(f"copia_memoria: erro de leitura na memória, endereco {address}")
                continue
            try:
                destination.write(address, value)
            except MachineError:
                self._log(f"copia_memoria: erro de escrita na memória, endereco {address}")

    def _save_context(self, proc: Process) -> None:
        self._copy_memory(proc.memory, self.controller.memory)
        proc.cpu = self._executor.copy_state()

    def _load_context(self, proc: Process) -> None:
        self._copy_memory(self.controller.memory, proc.memory)
        self._executor.set_state(proc.cpu)

    def _update_clock(self) -> None:
        try:
            self.clock = self.controller.io.read(CYCLES_DEVICE)
        except MachineError:
            pass

    def _panic(self) -> None:
        self._log("Problema irrecuperável no SO")
        self._panicked = True

    # system calls

    def _io_wait(self, proc: Process) -> IoWait:
        access = Access.READ if proc.cpu.complement == SysCall.LE else Access.WRITE
        return IoWait(proc.cpu.a, access)

    def _syscall_read(self, proc: Process) -> None:
        cpu = proc.cpu
        device = cpu.a
        io = self.controller.io
        if not io.ready(device, Access.READ):
            proc.block(BlockKind.IO, self._io_wait(proc), self.clock)
            return
        try:
            value = io.read(device)
        except MachineError as exc:
            cpu.a = int(exc.err)
        else:
            cpu.a = int(Err.OK)
            cpu.x = value
        cpu.pc += 2
        self._executor.set_state(cpu)

    def _syscall_write(self, proc: Process) -> None:
        cpu = proc.cpu
        device = cpu.a
        io = self.controller.io
        if not io.ready(device, Access.WRITE):
            proc.block(BlockKind.IO, self._io_wait(proc), self.clock)
            return
        try:
            io.write(device, cpu.x)
        except MachineError as exc:
            cpu.a = int(exc.err)
        else:
            cpu.a = int(Err.OK)
        cpu.pc += 2
        self._executor.set_state(cpu)

    def _syscall_end(self, proc: Process) -> None:
        index = self._running_index
        assert index is not None
        proc.finish(self.clock)
        metrics = proc.metrics
        self.finished.append(metrics)
        self._log(
            f"({index}) e: {metrics.total_running}, b: {metrics.total_blocked}, "
            f"qtd_b: {metrics.blocks}, p: {metrics.total_ready}, "
            f"qtd_p: {metrics.preemptions}, total: {metrics.end - metrics.start}"
        )
        self.scheduler.remove_running()
        self.table.remove(index)
        self._running_index = None

    def _syscall_create(self, proc: Process) -> None:
        cpu = proc.cpu
        number = cpu.a
        try:
            if not 0 <= number < len(self.programs):
                raise MachineError(Err.OP_INV, number)
            child = self._new_process(number)
        except MachineError as exc:
            cpu.a = int(exc.err)
        else:
            cpu.a = int(Err.OK)
            self.table.add(child)
        cpu.pc += 2
        self._executor.set_state(cpu)

    def _handle_syscall(self) -> None:
        proc = self.running_process()
        assert proc is not None
        proc.cpu = self._executor.copy_state()
        handlers = {
            SysCall.LE: self._syscall_read,
            SysCall.ESCR: self._syscall_write,
            SysCall.FIM: self._syscall_end,
            SysCall.CRIA: self._syscall_create,
        }
        call = proc.cpu.complement
        handler = handlers.get(call)
        if handler is None:
            self._log(f"so: chamada de sistema não reconhecida {call}\n")
            self._panic()
            return
        handler(proc)

    # scheduling

    def _must_unblock(self, proc: Process | None) -> bool:
        if proc is None or proc.state is not ProcessState.BLOCKED:
            return False
        if proc.block_kind is BlockKind.IO:
            wait: IoWait = proc.block_info
            return self.controller.io.ready(wait.device, wait.access)
        return False

    def _unblock(self) -> None:
        for proc in self.table:
            if self._must_unblock(proc):
                proc.change_state(ProcessState.READY, self.clock)

    def _switch_to(self, chosen: Process | None) -> None:
        if not self.table.any_alive():
            self._panicked = True
            return
        current = self.running_process()
        if chosen is current:
            return
        if current is not None:
            self._save_context(current)
        if chosen is None:
            self._set_mode(CpuMode.ZOMBIE)
        else:
            self._load_context(chosen)
            chosen.change_state(ProcessState.RUNNING, self.clock)
            self._running_index = self.table.index(chosen)

    def _clear_syscall_error(self) -> None:
        proc = self.running_process()
        saved = proc.cpu if proc is not None else CpuState()
        if saved.error == Err.SISOP and not self._panicked:
            state = self._executor.copy_state()
            state.set_error(Err.OK, 0)
            self._executor.set_state(state)
            if proc is not None:
                proc.cpu = state

    # interface to the controller

    def interrupt(self, err: Err) -> None:
        """Handle an interrupt raised by the hardware."""
        self._set_mode(CpuMode.SUPERVISOR)
        self._update_clock()
        if self.running_process() is not None:
            if err == Err.SISOP:
                self._handle_syscall()
            elif err == Err.TIC:
                pass
            else:
                self._log(f"SO: interrupção não tratada [{error_name(err)}]")
                self._panicked = True
        self._unblock()
        chosen = self.scheduler.schedule(self.table, self.clock)
        self._switch_to(chosen)
        self._clear_syscall_error()
        self._set_mode(CpuMode.USER)

    def ok(self) -> bool:
        """Return False once the system should be shut down."""
        return not self._panicked