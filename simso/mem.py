"""Main memory of the simulated machine: a fixed-size vector of integers."""

from __future__ import annotations

import os

from simso.err import Err, MachineError

__all__ = ["Memory"]

_DUMP_PAGE = 10


class Memory:
    """A region of memory holding ``size`` integer words."""

    def __init__(self, size: int) -> None:
        self._contents = [0] * size

    def __len__(self) -> int:
        return len(self._contents)

    def _check(self, address: int) -> None:
        if not 0 <= address < len(self._contents):
            raise MachineError(Err.END_INV, address)

    def read(self, address: int) -> int:
        """Return the word at ``address``; raise MachineError if invalid."""
        self._check(address)
        return self._contents[address]

    def write(self, address: int, value: int) -> None:
        """Store ``value`` at ``address``; raise MachineError if invalid."""
        self._check(address)
        self._contents[address] = value

    def dump(self, path: str | os.PathLike) -> None:
        """Write the memory contents to a text file, ten words per line."""
        parts = []
        for address, value in enumerate(self._contents):
            if address % _DUMP_PAGE == 0:
                parts.append(f"\n({address // _DUMP_PAGE:8d}): ")
            parts.append(f"{value:16d}, ")
        with open(path, "w", encoding="utf-8") as out:
            out.write("".join(parts))