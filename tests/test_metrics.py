import pytest

from schedsim.metrics import compute_process_metrics, cpu_utilization, summarize, summarize_metrics
from schedsim.models import Algorithm, MetricsSummary, ProcessDescriptor, ScheduleEntry, SimulationResult


@pytest.mark.parametrize(
    "end_time, expected",
    [(0, 0), (5, 50), (3, 38), (15, 75), (16, 76), (95, 95)],
)
def test_cpu_utilization(end_time, expected):
    assert cpu_utilization(end_time) == expected


def test_waiting_uses_first_start_and_last_completion():
    procs = [ProcessDescriptor("a", arrival_time=1, burst_time=4)]
    schedule = [
        ScheduleEntry("a", "a", start_time=2, duration=2, algorithm="RR"),
        ScheduleEntry("a", "a", start_time=7, duration=2, algorithm="RR"),
    ]
    (m,) = compute_process_metrics(procs, schedule)
    assert m.start_time == 2
    assert m.completion_time == 9
    assert m.turnaround_time == 8
    assert m.waiting_time == 4
    assert m.response_time == 1
    assert m.slices == 2


def test_missing_process_is_an_error():
    procs = [ProcessDescriptor("a", arrival_time=0, burst_time=1)]
    with pytest.raises(ValueError):
        compute_process_metrics(procs, [])


def test_summarize_metrics_empty():
    assert summarize_metrics([], context_switches=0, end_time=0) == MetricsSummary()


def test_summarize_empty_result():
    result = SimulationResult(algorithm=Algorithm.FIFO, quantum=None)
    assert summarize(result) == {
        "avg_waiting": 0.0,
        "avg_turnaround": 0.0,
        "avg_response": 0.0,
        "context_switches": 0,
        "cpu_utilization": 0,
    }
