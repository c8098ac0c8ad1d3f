"""Instruction set of the simulated CPU and the assembler's pseudo-instructions."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["Opcode", "opcode_for", "name_of", "arg_count"]


class Opcode(IntEnum):
    """Machine opcodes followed by assembler pseudo-instructions."""

    NOP = 0
    PARA = 1
    CARGI = 2
    CARGM = 3
    CARGX = 4
    ARMM = 5
    ARMX = 6
    MVAX = 7
    MVXA = 8
    INCX = 9
    SOMA = 10
    SUB = 11
    MULT = 12
    DIV = 13
    RESTO = 14
    NEG = 15
    DESV = 16
    DESVZ = 17
    DESVNZ = 18
    DESVN = 19
    DESVP = 20
    CHAMA = 21
    RET = 22
    LE = 23
    ESCR = 24
    SISOP = 25
    # pseudo-instructions
    DEFINE = 26
    VALOR = 27
    ESPACO = 28


_NO_ARGS = {Opcode.NOP, Opcode.PARA, Opcode.MVAX, Opcode.MVXA, Opcode.INCX, Opcode.NEG}

_ARG_COUNT = {op: 0 if op in _NO_ARGS else 1 for op in Opcode}

_BY_NAME = {op.name.lower(): op for op in Opcode}


def opcode_for(name: str | None) -> Opcode | None:
    """Return the opcode for a (case-insensitive) name, or None if unknown."""
    if name is None:
        return None
    return _BY_NAME.get(name.lower())


def _lookup(opcode: int) -> Opcode | None:
    try:
        return Opcode(opcode)
    except ValueError:
        return None


def name_of(opcode: int) -> str | None:
    """Return the mnemonic for an opcode, or None if unknown."""
    op = _lookup(opcode)
    return None if op is None else op.name


def arg_count(opcode: int) -> int | None:
    """Return how many arguments an opcode takes, or None if unknown."""
    op = _lookup(opcode)
    return None if op is None else _ARG_COUNT[op]