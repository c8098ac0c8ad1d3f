"""Terminal device: numeric input and output through the screen."""

from __future__ import annotations

from simso.err import Err, MachineError
from simso.es import Access
from simso.tela import Screen

__all__ = ["Terminal"]


class Terminal:
    """Exposes the screen's terminals to the I/O controller.

    The ident given by the controller selects which screen terminal is used.
    """

    def __init__(self, screen: Screen) -> None:
        self.screen = screen

    def read(self, ident: int) -> int:
        """Read a number; raise MachineError(Err.OCUP) if none is waiting."""
        if not self.ready(ident, Access.READ):
            raise MachineError(Err.OCUP, ident)
        return self.screen.read_number(ident)

    def write(self, ident: int, value: int) -> None:
        """Write a number; raise MachineError(Err.OCUP) if the output is full."""
        if not self.ready(ident, Access.WRITE):
            raise MachineError(Err.OCUP, ident)
        self.screen.print_number(ident, value)

    def ready(self, ident: int, access: Access) -> bool:
        """Return True if the terminal can be read or written now."""
        if access is Access.READ:
            return self.screen.has_input(ident)
        if access is Access.WRITE:
            return self.screen.free(ident)
        return False