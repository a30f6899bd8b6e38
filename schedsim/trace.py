"""
Human-readable explanation of a scheduling run.

The trace replays the same policy generator the engine consumes, so every
line corresponds to a decision the engine actually made.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional

from .algorithms import POLICIES, resolve_quantum, validate_processes
from .models import Algorithm, Decision, DecisionKind, ProcessDescriptor

_ORDER_TEXT: Dict[Algorithm, str] = {
    Algorithm.FIFO: "Sort processes by arrival time",
    Algorithm.SJF: "Sort processes by burst time (shortest first)",
    Algorithm.PRIORITY: "Sort processes by priority (lower number = higher priority)",
}


def _queue_text(decision: Decision) -> str:
    return ", ".join(decision.queue) if decision.queue else "(empty)"


def _context_line(algorithm: Algorithm, p: ProcessDescriptor) -> str:
    if algorithm is Algorithm.SJF:
        return f"Process {p.name} has burst time {p.burst_time}"
    if algorithm is Algorithm.PRIORITY:
        return f"Process {p.name} has priority {p.priority}"
    return f"Process {p.name} arrives at time {p.arrival_time}"


def _next_line(algorithm: Algorithm, p: ProcessDescriptor) -> str:
    if algorithm is Algorithm.SJF:
        return f"Next shortest job: {p.name} with burst time {p.burst_time}"
    if algorithm is Algorithm.PRIORITY:
        return f"Next highest priority: {p.name} with priority {p.priority}"
    return f"Next process in queue: {p.name}"


class StepTrace:
    """
    Lazy, restartable sequence of explanation steps.

    Input is validated up front; each call to ``iter()`` replays the run from
    scratch and never touches the caller's processes.
    """

    def __init__(
        self,
        processes: Iterable[ProcessDescriptor],
        algorithm: Algorithm | str,
        quantum: Optional[int] = None,
        respect_arrivals: bool = False,
    ) -> None:
        self.algorithm = Algorithm.parse(algorithm)
        self.processes = validate_processes(processes)
        self.quantum = resolve_quantum(self.algorithm, quantum)
        self.respect_arrivals = respect_arrivals

    def __iter__(self) -> Iterator[str]:
        policy = POLICIES[self.algorithm]
        return self._describe(policy(self.processes, self.quantum, self.respect_arrivals))

    def _describe(self, decisions: Iterable[Decision]) -> Iterator[str]:
        if self.algorithm is Algorithm.ROUND_ROBIN:
            return self._describe_round_robin(decisions)
        return self._describe_run_to_completion(decisions)

    def _describe_run_to_completion(self, decisions: Iterable[Decision]) -> Iterator[str]:
        algorithm = self.algorithm
        for d in decisions:
            p = d.process
            if d.kind is DecisionKind.ORDER:
                yield _ORDER_TEXT[algorithm]
            elif d.kind is DecisionKind.DISPATCH:
                yield _context_line(algorithm, p)
                yield f"Process {p.name} starts execution at time {d.time}"
                yield f"Process {p.name} runs for {d.duration} time units"
            elif d.kind is DecisionKind.COMPLETE:
                yield f"Process {p.name} completes at time {d.time}"
            elif d.kind is DecisionKind.SELECT:
                yield _next_line(algorithm, p)

    def _describe_round_robin(self, decisions: Iterable[Decision]) -> Iterator[str]:
        started = False
        for d in decisions:
            p = d.process
            if d.kind is DecisionKind.QUEUE and not started:
                started = True
                yield f"Initialize Round Robin with time quantum = {self.quantum}"
                yield f"Initial queue: {_queue_text(d)}"
            elif d.kind is DecisionKind.QUEUE:
                yield f"Current queue: {_queue_text(d)}"
            elif d.kind is DecisionKind.IDLE:
                yield f"CPU idle until time {d.time}, queue: {_queue_text(d)}"
            elif d.kind is DecisionKind.SELECT:
                yield f"Selected process: {p.name} with {d.remaining} time units remaining"
            elif d.kind is DecisionKind.DISPATCH:
                yield f"Process {p.name} executes for {d.duration} time units"
            elif d.kind is DecisionKind.REQUEUE:
                yield f"Process {p.name} still has {d.remaining} time units remaining, added back to queue"
            elif d.kind is DecisionKind.COMPLETE:
                yield f"Process {p.name} completed at time {d.time}"


def generate_steps(
    processes: Iterable[ProcessDescriptor],
    algorithm: Algorithm | str,
    quantum: Optional[int] = None,
    respect_arrivals: bool = False,
) -> StepTrace:
    return StepTrace(processes, algorithm, quantum=quantum, respect_arrivals=respect_arrivals)


def numbered(steps: Iterable[str]) -> Iterator[str]:
    for index, step in enumerate(steps, start=1):
        yield f"Step {index}: {step}"
