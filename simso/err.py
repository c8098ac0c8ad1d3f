"""Error codes raised while the simulated machine executes instructions."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["Err", "MachineError", "error_name"]


class Err(IntEnum):
    """Kinds of error that can happen while executing an instruction."""

    OK = 0
    END_INV = 1
    OP_INV = 2
    OCUP = 3
    CPU_PARADA = 4
    INSTR_PRIV = 5
    INSTR_INV = 6
    TIC = 7
    SISOP = 8
    PAGINV = 10
    FALPAG = 11


_NAMES = {
    Err.OK: "OK",
    Err.END_INV: "Endereço inválido",
    Err.OP_INV: "Operação inválida",
    Err.OCUP: "Dispositivo ocupado",
    Err.CPU_PARADA: "CPU parada",
    Err.INSTR_PRIV: "Instrução privilegiada",
    Err.INSTR_INV: "Instrução inválida",
    Err.SISOP: "Chamada de sistema",
    Err.TIC: "Interrupção de relógio",
}


def error_name(err: int) -> str:
    """Return the human-readable name of an error code."""
    return _NAMES.get(err, "DESCONHECIDO")


class MachineError(Exception):
    """An error reported by a piece of simulated hardware.

    ``detail`` carries the complement of the error, such as the address
    or device number that caused it.
    """

    def __init__(self, err: int, detail: int = 0) -> None:
        self.err = err
        self.detail = detail
        super().__init__(f"{error_name(err)} ({detail})")