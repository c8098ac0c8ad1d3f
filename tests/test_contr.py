import pytest

from simso.contr import CLOCK_DEVICE, CYCLES_DEVICE, MEM_SIZE, Controller
from simso.cpu_estado import CpuMode, CpuState
from simso.err import Err, MachineError, error_name
from simso.instr import Opcode
from simso.tela import Screen


class _StubSystem:
    def __init__(self, rounds: int = 1) -> None:
        self.errors = []
        self.rounds = rounds
        self.calls = 0

    def interrupt(self, err):
        self.errors.append(err)

    def ok(self):
        self.calls += 1
        return self.calls < self.rounds


def test_memory_has_planned_size():
    controller = Controller(Screen())
    assert len(controller.memory) == MEM_SIZE


def test_status_line_of_fresh_machine():
    controller = Controller(Screen())
    assert controller.status_line() == "PC=0000 A=000000 X=000000 00 NOP"


def test_status_line_shows_argument():
    controller = Controller(Screen())
    controller.memory.write(0, Opcode.CARGI)
    controller.memory.write(1, 5)
    line = controller.status_line()
    assert line.startswith("PC=0000 ")
    assert line.endswith(" CARGI 5")


def test_status_line_zombie():
    controller = Controller(Screen())
    controller.executor.set_state(CpuState(mode=CpuMode.ZOMBIE))
    assert controller.status_line() == "zumbi"


def test_status_line_shows_error():
    controller = Controller(Screen())
    controller.executor.set_state(CpuState(error=Err.END_INV, complement=3))
    expected = f" E={int(Err.END_INV)}(3) {error_name(Err.END_INV)}"
    assert controller.status_line().endswith(expected)


def test_terminals_are_devices():
    screen = Screen()
    controller = Controller(screen)
    screen.insert(3, 8)
    assert controller.io.read(3) == 8
    controller.io.write(4, 6)
    assert screen.outputs[4][0] == 6


def test_clock_devices_count_ticks():
    controller = Controller(Screen())
    assert controller.io.read(CLOCK_DEVICE) == 0
    controller.clock.tick()
    controller.clock.tick()
    assert controller.io.read(CLOCK_DEVICE) == controller.clock.now
    assert controller.io.read(CYCLES_DEVICE) == controller.clock.now


def test_clock_device_is_read_only():
    controller = Controller(Screen())
    with pytest.raises(MachineError) as info:
        controller.io.write(CLOCK_DEVICE, 1)
    assert info.value.err == Err.OP_INV


def test_run_requires_system():
    controller = Controller(Screen())
    with pytest.raises(RuntimeError):
        controller.run()


def test_run_stops_when_system_says_so():
    screen = Screen()
    controller = Controller(screen)
    system = _StubSystem(rounds=1)
    controller.attach_os(system)
    controller.run()
    assert controller.clock.now == 1
    assert system.errors == []
    last = list(screen.console)[-2:]
    assert last == ["Fim da execução.", f"relógio: {controller.clock.now}"]
    assert screen.status_text.startswith("PC=0001")


def test_run_reports_errors_to_system():
    controller = Controller(Screen())
    controller.memory.write(0, Opcode.PARA)
    system = _StubSystem(rounds=2)
    controller.attach_os(system)
    controller.run()
    assert system.errors == [Err.CPU_PARADA, Err.CPU_PARADA]