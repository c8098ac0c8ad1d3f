"""Input/output controller: routes device numbers to registered devices."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from simso.err import Err, MachineError

__all__ = ["Access", "IOController", "MAX_DEVICES"]

MAX_DEVICES = 100
_READY_FOR_READ = 100
_READY_FOR_WRITE = 200


class Access(Enum):
    """Kinds of access that can be made to a device."""

    READ = "leitura"
    WRITE = "escrita"


ReadFn = Callable[[int], int]
WriteFn = Callable[[int, int], None]
ReadyFn = Callable[[int, Access], bool]


@dataclass
class _Device:
    ident: int = 0
    read: ReadFn | None = None
    write: WriteFn | None = None
    ready: ReadyFn | None = None


class IOController:
    """Holds up to MAX_DEVICES devices, each reached through its callables.

    A device without a read or write callable does not support that
    operation; one without a ready callable is always ready.  Reading
    device ``100 + n`` yields 1 if device ``n`` is ready for reading and
    0 otherwise; reading ``200 + n`` does the same for writing.
    """

    def __init__(self) -> None:
        self._devices = [_Device() for _ in range(MAX_DEVICES)]

    def register(
        self,
        number: int,
        ident: int,
        read: ReadFn | None = None,
        write: WriteFn | None = None,
        ready: ReadyFn | None = None,
    ) -> None:
        """Register a device under ``number``; ``ident`` is passed to its callables."""
        if not 0 <= number < MAX_DEVICES:
            raise ValueError(f"device number {number} out of range")
        self._devices[number] = _Device(ident, read, write, ready)

    def _device(self, number: int, access: Access) -> _Device:
        if not 0 <= number < MAX_DEVICES:
            raise MachineError(Err.END_INV, number)
        device = self._devices[number]
        handler = device.read if access is Access.READ else device.write
        if handler is None:
            raise MachineError(Err.OP_INV, number)
        return device

    def _read_virtual(self, number: int) -> int:
        if number < _READY_FOR_WRITE:
            ready = self.ready(number - _READY_FOR_READ, Access.READ)
        else:
            ready = self.ready(number - _READY_FOR_WRITE, Access.WRITE)
        return 1 if ready else 0

    def read(self, number: int) -> int:
        """Read an integer from a device; raise MachineError on failure."""
        if number >= _READY_FOR_READ:
            return self._read_virtual(number)
        device = self._device(number, Access.READ)
        assert device.read is not None
        return device.read(device.ident)

    def write(self, number: int, value: int) -> None:
        """Write an integer to a device; raise MachineError on failure."""
        device = self._device(number, Access.WRITE)
        assert device.write is not None
        device.write(device.ident, value)

    def ready(self, number: int, access: Access) -> bool:
        """Return True if the given access to the device can be made now."""
        try:
            device = self._device(number, access)
        except MachineError:
            return False
        if device.ready is None:
            return True
        return device.ready(device.ident, access)