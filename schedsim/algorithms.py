from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .config import DEFAULT_QUANTUM
from .errors import InvalidInputError
from .metrics import compute_process_metrics, summarize_metrics
from .models import (
    Algorithm,
    Decision,
    DecisionKind,
    ProcessDescriptor,
    ScheduleEntry,
    SimulationResult,
)

logger = logging.getLogger(__name__)

Policy = Callable[[Sequence[ProcessDescriptor], Optional[int], bool], Iterator[Decision]]


def _run_to_completion(ordered: Sequence[ProcessDescriptor]) -> Iterator[Decision]:
    """
    Run every process to completion in the given order on a single CPU.
    """
    time = 0
    for index, p in enumerate(ordered):
        if index:
            yield Decision(DecisionKind.SELECT, time, p)

        start_time = max(time, p.arrival_time)
        yield Decision(DecisionKind.DISPATCH, start_time, p, duration=p.burst_time, remaining=p.burst_time)

        time = start_time + p.burst_time
        yield Decision(DecisionKind.COMPLETE, time, p)


def fifo_policy(
    processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None, respect_arrivals: bool = False
) -> Iterator[Decision]:
    """
    First-In-First-Out (non-preemptive). Ties keep input order.
    """
    yield Decision(DecisionKind.ORDER)
    yield from _run_to_completion(sorted(processes, key=lambda p: p.arrival_time))


def sjf_policy(
    processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None, respect_arrivals: bool = False
) -> Iterator[Decision]:
    """
    Shortest Job First (non-preemptive).

    The whole set is ordered by burst time up front; arrivals only delay a
    start, they never reorder the queue.
    """
    yield Decision(DecisionKind.ORDER)
    yield from _run_to_completion(sorted(processes, key=lambda p: p.burst_time))


def priority_policy(
    processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None, respect_arrivals: bool = False
) -> Iterator[Decision]:
    """
    Static Priority (non-preemptive). Lower number means higher priority.
    """
    yield Decision(DecisionKind.ORDER)
    yield from _run_to_completion(sorted(processes, key=lambda p: p.priority))


@dataclass
class _ReadyProcess:
    """Working copy of a process, owned by a single Round-Robin run."""

    process: ProcessDescriptor
    remaining_time: int


def _queue_names(ready: Iterable[_ReadyProcess]) -> Tuple[str, ...]:
    return tuple(r.process.name for r in ready)


def round_robin_policy(
    processes: Sequence[ProcessDescriptor], quantum: Optional[int] = None, respect_arrivals: bool = False
) -> Iterator[Decision]:
    """
    Round Robin scheduling with a fixed time quantum.

    By default every process is queued at time 0 in input order, whatever its
    arrival time. With ``respect_arrivals`` processes join the tail of the
    queue as they arrive (ahead of a process preempted at the same instant)
    and the CPU idles until the next arrival when nothing is ready.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM

    if respect_arrivals:
        pending: Deque[ProcessDescriptor] = deque(sorted(processes, key=lambda p: p.arrival_time))
    else:
        pending = deque(processes)
    ready: Deque[_ReadyProcess] = deque()

    def admit(now: int) -> None:
        while pending and (not respect_arrivals or pending[0].arrival_time <= now):
            p = pending.popleft()
            ready.append(_ReadyProcess(p, p.burst_time))

    time = 0
    admit(time)
    yield Decision(DecisionKind.QUEUE, time, queue=_queue_names(ready))

    while ready or pending:
        if not ready:
            # CPU idle: jump to the next arrival.
            time = pending[0].arrival_time
            admit(time)
            yield Decision(DecisionKind.IDLE, time, queue=_queue_names(ready))
            continue

        current = ready.popleft()
        p = current.process
        yield Decision(DecisionKind.SELECT, time, p, remaining=current.remaining_time)

        run_time = min(current.remaining_time, quantum)
        yield Decision(DecisionKind.DISPATCH, time, p, duration=run_time, remaining=current.remaining_time)

        current.remaining_time -= run_time
        time += run_time
        admit(time)

        if current.remaining_time > 0:
            ready.append(current)
            yield Decision(DecisionKind.REQUEUE, time, p, remaining=current.remaining_time)
        else:
            yield Decision(DecisionKind.COMPLETE, time, p)

        yield Decision(DecisionKind.QUEUE, time, queue=_queue_names(ready))


POLICIES: Dict[Algorithm, Policy] = {
    Algorithm.FIFO: fifo_policy,
    Algorithm.SJF: sjf_policy,
    Algorithm.ROUND_ROBIN: round_robin_policy,
    Algorithm.PRIORITY: priority_policy,
}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Iterable[ProcessDescriptor]) -> Tuple[ProcessDescriptor, ...]:
    """
    Check every descriptor and return an immutable snapshot of the input.
    """
    if processes is None:
        raise InvalidInputError("processes must be a sequence, got None")

    snapshot = tuple(processes)
    seen = set()
    for p in snapshot:
        if not isinstance(p, ProcessDescriptor):
            raise InvalidInputError(f"Expected ProcessDescriptor, got {type(p).__name__}")
        if not _is_int(p.burst_time) or p.burst_time <= 0:
            raise InvalidInputError(f"Process {p.pid!r}: burst time must be a positive integer, got {p.burst_time!r}")
        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidInputError(
                f"Process {p.pid!r}: arrival time must be a non-negative integer, got {p.arrival_time!r}"
            )
        if not _is_int(p.priority):
            raise InvalidInputError(f"Process {p.pid!r}: priority must be an integer, got {p.priority!r}")
        if p.pid in seen:
            raise InvalidInputError(f"Duplicate process id {p.pid!r}")
        seen.add(p.pid)

    return snapshot


def resolve_quantum(algorithm: Algorithm, quantum: Optional[int]) -> Optional[int]:
    """
    Return the quantum a run will use: ``None`` for non-preemptive
    algorithms, the default when Round-Robin gets none.
    """
    if algorithm is not Algorithm.ROUND_ROBIN:
        return None
    if quantum is None:
        return DEFAULT_QUANTUM
    if not _is_int(quantum) or quantum <= 0:
        raise InvalidInputError(f"Round Robin requires a positive integer quantum, got {quantum!r}")
    return quantum


def simulate(
    processes: Iterable[ProcessDescriptor],
    algorithm: Algorithm | str = Algorithm.FIFO,
    quantum: Optional[int] = None,
    *,
    respect_arrivals: bool = False,
) -> SimulationResult:
    """
    Simulate one run and return the schedule with its metrics.

    The result unpacks as ``(schedule, metrics)``. Invalid input raises
    :class:`InvalidInputError` before anything is scheduled; an empty
    process list yields an empty schedule and zeroed metrics.
    """
    algorithm = Algorithm.parse(algorithm)
    snapshot = validate_processes(processes)
    quantum = resolve_quantum(algorithm, quantum)

    result = SimulationResult(algorithm=algorithm, quantum=quantum)
    if not snapshot:
        return result

    logger.debug(
        "Simulating %s over %d processes (quantum=%s, respect_arrivals=%s)",
        algorithm.value,
        len(snapshot),
        quantum,
        respect_arrivals,
    )

    schedule: List[ScheduleEntry] = []
    requeues = 0
    end_time = 0

    for decision in POLICIES[algorithm](snapshot, quantum, respect_arrivals):
        if decision.kind is DecisionKind.DISPATCH:
            p = decision.process
            entry = ScheduleEntry(
                pid=p.pid,
                name=p.name,
                start_time=decision.time,
                duration=decision.duration,
                algorithm=algorithm.value,
            )
            schedule.append(entry)
            end_time = entry.end_time
            logger.debug("t=%d: dispatch %s for %d", entry.start_time, p.pid, entry.duration)
        elif decision.kind is DecisionKind.REQUEUE:
            requeues += 1

    context_switches = requeues if algorithm.preemptive else len(snapshot) - 1

    result.schedule = schedule
    result.processes = compute_process_metrics(snapshot, schedule)
    result.metrics = summarize_metrics(result.processes, context_switches, end_time)
    return result


def schedule_fifo(processes: Iterable[ProcessDescriptor]) -> SimulationResult:
    return simulate(processes, Algorithm.FIFO)


def schedule_sjf(processes: Iterable[ProcessDescriptor]) -> SimulationResult:
    return simulate(processes, Algorithm.SJF)


def schedule_rr(
    processes: Iterable[ProcessDescriptor],
    quantum: Optional[int] = DEFAULT_QUANTUM,
    respect_arrivals: bool = False,
) -> SimulationResult:
    return simulate(processes, Algorithm.ROUND_ROBIN, quantum, respect_arrivals=respect_arrivals)


def schedule_priority(processes: Iterable[ProcessDescriptor]) -> SimulationResult:
    return simulate(processes, Algorithm.PRIORITY)
