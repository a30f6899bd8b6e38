from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence

from .config import UTILIZATION_OVERHEAD
from .models import MetricsSummary, ProcessDescriptor, ProcessMetrics, ScheduleEntry, SimulationResult


def cpu_utilization(end_time: int) -> int:
    """
    Simplified utilization figure: ``round(100 * t / (t + 5))`` with halves
    rounded up, where ``t`` is the instant the CPU becomes free for good.
    """
    if end_time <= 0:
        return 0
    denominator = end_time + UTILIZATION_OVERHEAD
    return (200 * end_time + denominator) // (2 * denominator)


def compute_process_metrics(
    processes: Sequence[ProcessDescriptor],
    schedule: Sequence[ScheduleEntry],
) -> List[ProcessMetrics]:
    """
    Per-process waiting, turnaround and response times, in input order.

    A process may own several schedule entries (Round-Robin); only its first
    start and last completion matter. Waiting time is turnaround minus burst,
    i.e. all the time spent ready but not running.

    The arrival-agnostic Round-Robin queue can dispatch a process before its
    nominal arrival. Such a process is measured from its first dispatch.
    """
    slices: Dict[str, List[ScheduleEntry]] = defaultdict(list)
    for entry in schedule:
        slices[entry.pid].append(entry)

    metrics: List[ProcessMetrics] = []
    for p in processes:
        entries = slices.get(p.pid)
        if not entries:
            raise ValueError(f"Process {p.pid!r} never appears in the schedule")

        first_start = min(e.start_time for e in entries)
        completion = max(e.end_time for e in entries)
        origin = min(p.arrival_time, first_start)

        turnaround_time = completion - origin
        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                name=p.name,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority,
                start_time=first_start,
                completion_time=completion,
                waiting_time=turnaround_time - p.burst_time,
                turnaround_time=turnaround_time,
                response_time=first_start - origin,
                slices=len(entries),
            )
        )

    return metrics


def summarize_metrics(
    process_metrics: Sequence[ProcessMetrics],
    context_switches: int,
    end_time: int,
) -> MetricsSummary:
    if not process_metrics:
        return MetricsSummary()

    n = len(process_metrics)
    return MetricsSummary(
        avg_waiting_time=sum(p.waiting_time for p in process_metrics) / n,
        avg_turnaround_time=sum(p.turnaround_time for p in process_metrics) / n,
        context_switches=context_switches,
        cpu_utilization=cpu_utilization(end_time),
    )


def summarize(result: SimulationResult) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    processes = result.processes
    if not processes:
        return {
            "avg_waiting": 0.0,
            "avg_turnaround": 0.0,
            "avg_response": 0.0,
            "context_switches": 0,
            "cpu_utilization": 0,
        }

    n = len(processes)
    return {
        "avg_waiting": result.metrics.avg_waiting_time,
        "avg_turnaround": result.metrics.avg_turnaround_time,
        "avg_response": sum(p.response_time for p in processes) / n,
        "context_switches": result.metrics.context_switches,
        "cpu_utilization": result.metrics.cpu_utilization,
    }
