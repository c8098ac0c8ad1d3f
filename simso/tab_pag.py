"""Page table used by the MMU to translate virtual into physical addresses."""

from __future__ import annotations

from dataclasses import dataclass

from simso.err import Err, MachineError

__all__ = ["PageDescriptor", "Translation", "PageTable"]


@dataclass
class PageDescriptor:
    """Information kept about one page."""

    valid: bool = False
    frame: int = 0
    accessed: bool = False
    modified: bool = False


@dataclass(frozen=True)
class Translation:
    """Result of translating a virtual address."""

    page: int
    offset: int
    frame: int
    physical: int


def _trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    """Division truncating toward zero, with the matching remainder."""
    quotient = abs(value) // abs(divisor)
    if (value < 0) != (divisor < 0):
        quotient = -quotient
    return quotient, value - quotient * divisor


class PageTable:
    """A table of ``num_pages`` pages of ``page_size`` words each."""

    def __init__(self, num_pages: int, page_size: int) -> None:
        self.num_pages = num_pages
        self.page_size = page_size
        self._pages = [PageDescriptor() for _ in range(num_pages)]

    def __getitem__(self, page: int) -> PageDescriptor:
        if not 0 <= page < self.num_pages:
            raise IndexError(f"page {page} out of range")
        return self._pages[page]

    def translate(self, virtual_address: int) -> Translation:
        """Translate a virtual address.

        Raises MachineError with Err.PAGINV if the page is outside the
        table, or Err.FALPAG if the page is not valid.
        """
        page, offset = _trunc_divmod(virtual_address, self.page_size)
        if not 0 <= page < self.num_pages:
            raise MachineError(Err.PAGINV, virtual_address)
        descriptor = self._pages[page]
        if not descriptor.valid:
            raise MachineError(Err.FALPAG, virtual_address)
        frame = descriptor.frame
        return Translation(page, offset, frame, frame * self.page_size + offset)