"""Memory management unit: translates virtual addresses through a page table."""

from __future__ import annotations

from simso.mem import Memory
from simso.tab_pag import PageTable

__all__ = ["Mmu"]


class Mmu:
    """Forwards memory accesses to physical memory, translating them when a
    page table is in use.

    ``last_address`` holds the last virtual address that was translated
    (or whose translation was attempted), so the system can find the
    address that caused a page fault.
    """

    def __init__(self, memory: Memory) -> None:
        self.memory = memory
        self.page_table: PageTable | None = None
        self.last_address = 0

    def use_page_table(self, page_table: PageTable | None) -> None:
        """Use ``page_table`` for later accesses; None disables translation."""
        self.page_table = page_table

    def _physical(self, address: int, *, modify: bool) -> int:
        self.last_address = address
        if self.page_table is None:
            return address
        translation = self.page_table.translate(address)
        descriptor = self.page_table[translation.page]
        descriptor.accessed = True
        if modify:
            descriptor.modified = True
        return translation.physical

    def read(self, address: int) -> int:
        """Return the word at a virtual address; raise MachineError on failure."""
        return self.memory.read(self._physical(address, modify=False))

    def write(self, address: int, value: int) -> None:
        """Store a word at a virtual address; raise MachineError on failure."""
        self.memory.write(self._physical(address, modify=True), value)