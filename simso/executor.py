"""Instruction executor of the simulated CPU."""

from __future__ import annotations

from typing import Callable

from simso.cpu_estado import CpuMode, CpuState
from simso.err import Err, MachineError
from simso.es import IOController
from simso.instr import Opcode
from simso.mmu import Mmu

__all__ = ["Executor"]


def _trunc_div(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


def _trunc_mod(dividend: int, divisor: int) -> int:
    return dividend - divisor * _trunc_div(dividend, divisor)


class Executor:
    """Executes the instruction at the PC, using memory through the MMU and
    devices through the I/O controller.

    Errors are kept in the CPU state: once one is pending no further
    instruction runs until the state is replaced.
    """

    def __init__(self, mmu: Mmu, io: IOController) -> None:
        self.mmu = mmu
        self.io = io
        self.state = CpuState()
        self._handlers: dict[int, Callable[[], None]] = {
            Opcode.NOP: self._nop,
            Opcode.PARA: self._para,
            Opcode.CARGI: self._cargi,
            Opcode.CARGM: self._cargm,
            Opcode.CARGX: self._cargx,
            Opcode.ARMM: self._armm,
            Opcode.ARMX: self._armx,
            Opcode.MVAX: self._mvax,
            Opcode.MVXA: self._mvxa,
            Opcode.INCX: self._incx,
            Opcode.SOMA: lambda: self._arith(lambda a, m: a + m),
            Opcode.SUB: lambda: self._arith(lambda a, m: a - m),
            Opcode.MULT: lambda: self._arith(lambda a, m: a * m),
            Opcode.DIV: lambda: self._arith(_trunc_div),
            Opcode.RESTO: lambda: self._arith(_trunc_mod),
            Opcode.NEG: self._neg,
            Opcode.DESV: self._jump,
            Opcode.DESVZ: lambda: self._branch_if(self.state.a == 0),
            Opcode.DESVNZ: lambda: self._branch_if(self.state.a != 0),
            Opcode.DESVN: lambda: self._branch_if(self.state.a < 0),
            Opcode.DESVP: lambda: self._branch_if(self.state.a > 0),
            Opcode.CHAMA: self._chama,
            Opcode.RET: self._ret,
            Opcode.LE: self._le,
            Opcode.ESCR: self._escr,
            Opcode.SISOP: self._sisop,
        }

    def copy_state(self) -> CpuState:
        """Return a copy of the CPU's internal state."""
        return self.state.copy()

    def set_state(self, state: CpuState) -> None:
        """Replace the CPU's internal state with a copy of ``state``."""
        self.state = state.copy()

    def step(self) -> Err:
        """Execute one instruction and return the CPU's pending error.

        A zombie CPU does nothing and reports Err.OK; a CPU with a pending
        error does nothing and reports that error.  Division by zero
        raises ZeroDivisionError.
        """
        state = self.state
        if state.mode is CpuMode.ZOMBIE:
            return Err.OK
        if state.error != Err.OK:
            return Err(state.error)
        try:
            opcode = self._load(state.pc)
            handler = self._handlers.get(opcode)
            if handler is None:
                state.set_error(Err.INSTR_INV, 0)
            else:
                handler()
        except MachineError as exc:
            state.set_error(exc.err, exc.detail)
        return Err(state.error)

    # memory and device access, reporting the address or device at fault

    def _load(self, address: int) -> int:
        try:
            return self.mmu.read(address)
        except MachineError as exc:
            raise MachineError(exc.err, address) from exc

    def _store(self, address: int, value: int) -> None:
        try:
            self.mmu.write(address, value)
        except MachineError as exc:
            raise MachineError(exc.err, address) from exc

    def _device_read(self, device: int) -> int:
        try:
            return self.io.read(device)
        except MachineError as exc:
            raise MachineError(exc.err, device) from exc

    def _device_write(self, device: int, value: int) -> None:
        try:
            self.io.write(device, value)
        except MachineError as exc:
            raise MachineError(exc.err, device) from exc

    def _arg(self) -> int:
        return self._load(self.state.pc + 1)

    def _advance(self, words: int) -> None:
        self.state.pc += words

    def _require_supervisor(self, opcode: Opcode) -> None:
        if self.state.mode is not CpuMode.SUPERVISOR:
            raise MachineError(Err.INSTR_PRIV, opcode)

    # instructions

    def _nop(self) -> None:
        self._advance(1)

    def _para(self) -> None:
        self._require_supervisor(Opcode.PARA)
        raise MachineError(Err.CPU_PARADA, 0)

    def _cargi(self) -> None:
        self.state.a = self._arg()
        self._advance(2)

    def _cargm(self) -> None:
        self.state.a = self._load(self._arg())
        self._advance(2)

    def _cargx(self) -> None:
        index = self.state.x
        self.state.a = self._load(self._arg() + index)
        self._advance(2)

    def _armm(self) -> None:
        self._store(self._arg(), self.state.a)
        self._advance(2)

    def _armx(self) -> None:
        index = self.state.x
        self._store(self._arg() + index, self.state.a)
        self._advance(2)

    def _mvax(self) -> None:
        self.state.x = self.state.a
        self._advance(1)

    def _mvxa(self) -> None:
        self.state.a = self.state.x
        self._advance(1)

    def _incx(self) -> None:
        self.state.x += 1
        self._advance(1)

    def _arith(self, operation: Callable[[int, int], int]) -> None:
        operand = self._load(self._arg())
        self.state.a = operation(self.state.a, operand)
        self._advance(2)

    def _neg(self) -> None:
        self.state.a = -self.state.a
        self._advance(1)

    def _jump(self) -> None:
        self.state.pc = self._arg()

    def _branch_if(self, condition: bool) -> None:
        if condition:
            self._jump()
        else:
            self._advance(2)

    def _chama(self) -> None:
        target = self._arg()
        self._store(target, self.state.pc + 2)
        self.state.pc = target + 1

    def _ret(self) -> None:
        self.state.pc = self._load(self._arg())

    def _le(self) -> None:
        self._require_supervisor(Opcode.LE)
        self.state.a = self._device_read(self._arg())
        self._advance(2)

    def _escr(self) -> None:
        self._require_supervisor(Opcode.ESCR)
        self._device_write(self._arg(), self.state.a)
        self._advance(2)

    def _sisop(self) -> None:
        # the PC is left on the call; the system advances it
        self.state.set_error(Err.SISOP, self._arg())