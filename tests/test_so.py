import pytest

from simso.assembler import assemble, format_memory
from simso.contr import Controller
from simso.cpu_estado import CpuMode
from simso.err import Err, error_name
from simso.es import Access
from simso.escalonador import (
    RoundRobinScheduler,
    ShortestJobScheduler,
    SimpleScheduler,
)
from simso.processo import ProcessState, Program
from simso.so import IoWait, OperatingSystem, SysCall, load_program
from simso.tela import Screen


def _program(source: str) -> Program:
    return Program(assemble(source))


def _boot(*sources, scheduler=RoundRobinScheduler):
    screen = Screen()
    controller = Controller(screen)
    system = OperatingSystem(controller, [_program(s) for s in sources], scheduler)
    controller.attach_os(system)
    return screen, controller, system


WRITE_42 = " CARGI 42\n MVAX\n CARGI 0\n SISOP 2\n SISOP 3\n"


def test_first_process_is_loaded_and_running():
    screen, controller, system = _boot(WRITE_42)
    proc = system.running_process()
    assert proc is system.table[0]
    assert proc.state is ProcessState.RUNNING
    assert controller.executor.state.mode is CpuMode.USER
    code = system.programs[0].code
    assert [controller.memory.read(i) for i in range(len(code))] == list(code)


def test_needs_programs():
    with pytest.raises(ValueError):
        OperatingSystem(Controller(Screen()), [])


def test_write_syscall_and_end():
    screen, controller, system = _boot(WRITE_42)
    controller.run()
    assert list(screen.outputs[0]) == [42]
    assert not system.ok()
    assert len(system.finished) == 1
    metrics = system.finished[0]
    assert metrics.end >= metrics.start
    assert not system.table.any_alive()


def test_read_syscall_then_echo():
    source = " CARGI 0\n SISOP 1\n CARGI 1\n SISOP 2\n SISOP 3\n"
    screen, controller, system = _boot(source)
    screen.insert(0, 7)
    controller.run()
    assert list(screen.outputs[1]) == [7]


@pytest.mark.parametrize(
    "scheduler", [SimpleScheduler, RoundRobinScheduler, ShortestJobScheduler]
)
def test_create_runs_child(scheduler):
    parent = " CARGI 1\n SISOP 4\n SISOP 3\n"
    child = " CARGI 9\n MVAX\n CARGI 2\n SISOP 2\n SISOP 3\n"
    screen, controller, system = _boot(parent, child, scheduler=scheduler)
    controller.run()
    assert list(screen.outputs[2]) == [9]
    assert len(system.finished) == 2


def test_read_blocks_until_input_arrives():
    screen, controller, system = _boot(" CARGI 0\n SISOP 1\n SISOP 3\n")
    executor = controller.executor
    executor.step()
    err = executor.step()
    system.interrupt(err)
    proc = system.table[0]
    assert proc.state is ProcessState.BLOCKED
    assert proc.block_info == IoWait(0, Access.READ)
    assert system.ok()

    screen.insert(0, 5)
    err = executor.step()
    assert err == Err.SISOP
    system.interrupt(err)
    assert executor.state.x == 5
    assert executor.state.a == Err.OK


def test_unknown_syscall_panics():
    screen, controller, system = _boot(" SISOP 9\n")
    controller.run()
    assert not system.ok()
    assert "Problema irrecuperável no SO" in list(screen.console)


def test_unhandled_interrupt_stops_system():
    screen, controller, system = _boot(" PARA\n")
    controller.run()
    assert not system.ok()
    expected = f"SO: interrupção não tratada [{error_name(Err.INSTR_PRIV)}]"
    assert expected in list(screen.console)


def test_clock_follows_controller():
    screen, controller, system = _boot(WRITE_42)
    controller.run()
    assert 0 < system.clock <= controller.clock.now


def test_syscall_numbers():
    assert [int(c) for c in SysCall] == [1, 2, 3, 4]
    write_call, end_call = list(SysCall)[1:3]
    source = (
        f" CARGI 5\n MVAX\n CARGI 0\n SISOP {int(write_call)}\n"
        f" SISOP {int(end_call)}\n"
    )
    screen, controller, system = _boot(source)
    controller.run()
    assert list(screen.outputs[0]) == [5]
    assert len(system.finished) == 1


def test_load_program_round_trip(tmp_path):
    words = assemble(" CARGI 42\n MVAX\n DESV 0\n" + " NOP\n" * 12)
    path = tmp_path / "prog.maq"
    path.write_text(format_memory(words), encoding="utf-8")
    assert load_program(path).code == tuple(words)


def test_load_program_empty(tmp_path):
    path = tmp_path / "empty.maq"
    path.write_text("", encoding="utf-8")
    assert load_program(path).code == ()


def test_load_program_rejects_garbage(tmp_path):
    path = tmp_path / "bad.maq"
    path.write_text("1, x, 2,", encoding="utf-8")
    with pytest.raises(ValueError):
        load_program(path)