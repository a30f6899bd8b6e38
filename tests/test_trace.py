import pytest

from schedsim.algorithms import simulate
from schedsim.errors import InvalidInputError
from schedsim.models import Algorithm, ProcessDescriptor
from schedsim.trace import StepTrace, generate_steps, numbered


def _pair():
    return [
        ProcessDescriptor("1", name="A", arrival_time=0, burst_time=5, priority=3),
        ProcessDescriptor("2", name="B", arrival_time=1, burst_time=3, priority=1),
    ]


def test_fifo_steps():
    assert list(generate_steps(_pair(), Algorithm.FIFO)) == [
        "Sort processes by arrival time",
        "Process A arrives at time 0",
        "Process A starts execution at time 0",
        "Process A runs for 5 time units",
        "Process A completes at time 5",
        "Next process in queue: B",
        "Process B arrives at time 1",
        "Process B starts execution at time 5",
        "Process B runs for 3 time units",
        "Process B completes at time 8",
    ]


def test_sjf_steps_follow_burst_order():
    steps = list(generate_steps(_pair(), "sjf"))
    assert steps[0] == "Sort processes by burst time (shortest first)"
    assert steps[1] == "Process B has burst time 3"
    assert steps[2] == "Process B starts execution at time 1"
    assert "Next shortest job: A with burst time 5" in steps


def test_priority_steps():
    steps = list(generate_steps(_pair(), Algorithm.PRIORITY))
    assert steps[0] == "Sort processes by priority (lower number = higher priority)"
    assert steps[1] == "Process B has priority 1"
    assert "Next highest priority: A with priority 3" in steps


def test_round_robin_steps():
    trace = generate_steps([ProcessDescriptor("1", name="A", arrival_time=0, burst_time=5)], "rr")
    assert list(trace) == [
        "Initialize Round Robin with time quantum = 4",
        "Initial queue: A",
        "Selected process: A with 5 time units remaining",
        "Process A executes for 4 time units",
        "Process A still has 1 time units remaining, added back to queue",
        "Current queue: A",
        "Selected process: A with 1 time units remaining",
        "Process A executes for 1 time units",
        "Process A completed at time 5",
        "Current queue: (empty)",
    ]


def test_round_robin_idle_step():
    procs = [
        ProcessDescriptor("1", name="A", arrival_time=0, burst_time=2),
        ProcessDescriptor("2", name="B", arrival_time=10, burst_time=2),
    ]
    steps = list(generate_steps(procs, Algorithm.ROUND_ROBIN, quantum=4, respect_arrivals=True))
    assert "CPU idle until time 10, queue: B" in steps
    assert steps[-2] == "Process B completed at time 12"


def test_trace_is_restartable_and_lazy():
    trace = StepTrace(_pair(), Algorithm.FIFO)
    first = iter(trace)
    assert next(first) == "Sort processes by arrival time"
    assert list(trace) == list(trace)
    assert len(list(trace)) == 10


def test_trace_matches_engine_dispatches():
    procs = [
        ProcessDescriptor("a", arrival_time=0, burst_time=7),
        ProcessDescriptor("b", arrival_time=2, burst_time=3),
        ProcessDescriptor("c", arrival_time=3, burst_time=5),
    ]
    result = simulate(procs, Algorithm.ROUND_ROBIN, quantum=3)
    executes = [s for s in generate_steps(procs, Algorithm.ROUND_ROBIN, quantum=3) if " executes for " in s]
    expected = [f"Process {e.name} executes for {e.duration} time units" for e in result.schedule]
    assert executes == expected


def test_trace_validates_input():
    with pytest.raises(InvalidInputError):
        StepTrace([ProcessDescriptor("x", arrival_time=0, burst_time=0)], Algorithm.FIFO)
    with pytest.raises(InvalidInputError):
        StepTrace(_pair(), Algorithm.ROUND_ROBIN, quantum=0)


def test_empty_trace():
    assert list(generate_steps([], Algorithm.FIFO)) == ["Sort processes by arrival time"]


def test_numbered():
    assert list(numbered(["first", "second"])) == ["Step 1: first", "Step 2: second"]
