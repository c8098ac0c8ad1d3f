import pytest

from simso.err import Err, MachineError
from simso.es import Access, IOController
from simso.tela import QUEUE_SIZE, Screen
from simso.term import Terminal


@pytest.fixture
def screen():
    return Screen()


@pytest.fixture
def terminal(screen):
    return Terminal(screen)


def test_read_empty_is_busy(terminal):
    with pytest.raises(MachineError) as info:
        terminal.read(0)
    assert info.value.err == Err.OCUP


def test_read_after_insert(screen, terminal):
    screen.insert(3, 21)
    assert terminal.ready(3, Access.READ)
    assert terminal.read(3) == 21
    assert not terminal.ready(3, Access.READ)


def test_write_until_full(screen, terminal):
    for number in range(QUEUE_SIZE):
        terminal.write(1, number)
    assert list(screen.outputs[1]) == list(range(QUEUE_SIZE))
    assert not terminal.ready(1, Access.WRITE)
    with pytest.raises(MachineError) as info:
        terminal.write(1, 0)
    assert info.value.err == Err.OCUP


def test_through_io_controller(screen, terminal):
    io = IOController()
    for number in range(8):
        io.register(number, number, terminal.read, terminal.write, terminal.ready)
    screen.insert(4, 6)
    assert io.read(104) == 1
    assert io.read(4) == 6
    assert io.read(104) == 0
    io.write(5, 11)
    assert list(screen.outputs[5]) == [11]
    assert io.read(205) == 1