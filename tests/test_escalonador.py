import pytest

from simso.escalonador import (
    QUANTUM,
    RoundRobinScheduler,
    ShortestJobScheduler,
    SimpleScheduler,
    expected_time,
)
from simso.processo import Metrics, Process, ProcessState, ProcessTable, Program


def make(clock=0):
    return Process(Program([0]), 4, clock)


def table_of(*procs):
    table = ProcessTable(len(procs))
    for proc in procs:
        table.add(proc)
    return table


def test_expected_time_without_stops_is_quantum():
    assert expected_time(Metrics(last_change=0, start=0)) == QUANTUM


def test_expected_time_is_mean_burst():
    metrics = Metrics(last_change=0, start=0, total_running=20, blocks=3, preemptions=1)
    assert expected_time(metrics) == 20 // 4


@pytest.mark.parametrize(
    "cls", [SimpleScheduler, RoundRobinScheduler, ShortestJobScheduler]
)
def test_no_ready_process_gives_none(cls):
    proc = make()
    proc.change_state(ProcessState.BLOCKED, 0)
    scheduler = cls()
    assert scheduler.schedule(table_of(proc), 1) is None
    assert scheduler.running is None


@pytest.mark.parametrize(
    "cls", [SimpleScheduler, RoundRobinScheduler, ShortestJobScheduler]
)
def test_keeps_running_process_within_quantum(cls):
    running, other = make(), make()
    running.change_state(ProcessState.RUNNING, 0)
    scheduler = cls(running)
    assert scheduler.schedule(table_of(running, other), QUANTUM) is running
    assert running.state is ProcessState.RUNNING


def test_simple_never_preempts_and_picks_last_ready():
    running = make()
    running.change_state(ProcessState.RUNNING, 0)
    scheduler = SimpleScheduler(running)
    a, b = make(), make()
    table = table_of(running, a, b)
    assert scheduler.schedule(table, 100) is running
    scheduler.remove_running()
    running.change_state(ProcessState.BLOCKED, 100)
    assert scheduler.schedule(table, 101) is b
    assert scheduler.running is b


def test_round_robin_preempts_and_picks_oldest():
    running, older, newer = make(0), make(1), make(3)
    running.change_state(ProcessState.RUNNING, 0)
    scheduler = RoundRobinScheduler(running)
    chosen = scheduler.schedule(table_of(running, newer, older), QUANTUM + 1)
    assert chosen is older
    assert running.state is ProcessState.READY
    assert running.metrics.preemptions == 1


def test_round_robin_reschedules_only_ready_process():
    running = make(0)
    running.change_state(ProcessState.RUNNING, 0)
    scheduler = RoundRobinScheduler(running)
    assert scheduler.schedule(table_of(running), QUANTUM + 1) is running
    assert running.state is ProcessState.READY


def test_shortest_job_picks_smallest_expected_time():
    long_job, default_job, short_job = make(), make(), make()
    long_job.metrics.total_running = 20
    long_job.metrics.blocks = 2
    short_job.metrics.total_running = 4
    short_job.metrics.preemptions = 2
    scheduler = ShortestJobScheduler()
    chosen = scheduler.schedule(table_of(long_job, default_job, short_job), 0)
    assert chosen is short_job


def test_shortest_job_ties_go_to_first():
    first, second = make(), make()
    scheduler = ShortestJobScheduler()
    assert scheduler.schedule(table_of(first, second), 0) is first


def test_remove_running_forgets_process():
    proc = make()
    scheduler = RoundRobinScheduler(proc)
    scheduler.remove_running()
    assert scheduler.running is None