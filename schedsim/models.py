from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from .errors import InvalidInputError


class Algorithm(Enum):
    """
    Supported scheduling disciplines. The value doubles as the tag stored on
    every schedule entry.
    """

    FIFO = "FIFO"
    SJF = "SJF"
    ROUND_ROBIN = "RR"
    PRIORITY = "PRIORITY"

    @classmethod
    def parse(cls, value: "Algorithm | str") -> "Algorithm":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        try:
            return _ALIASES[key]
        except KeyError:
            raise InvalidInputError(f"Unknown algorithm '{value}'") from None

    @property
    def preemptive(self) -> bool:
        return self is Algorithm.ROUND_ROBIN


_ALIASES = {
    "fifo": Algorithm.FIFO,
    "fcfs": Algorithm.FIFO,
    "sjf": Algorithm.SJF,
    "rr": Algorithm.ROUND_ROBIN,
    "round_robin": Algorithm.ROUND_ROBIN,
    "roundrobin": Algorithm.ROUND_ROBIN,
    "priority": Algorithm.PRIORITY,
}


@dataclass(frozen=True)
class ProcessDescriptor:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", str(self.pid))


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One contiguous CPU allocation in the Gantt chart.
    """

    pid: str
    name: str
    start_time: int
    duration: int
    algorithm: str

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration


@dataclass
class ProcessMetrics:
    pid: str
    name: str
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    slices: int = 1


@dataclass(frozen=True)
class MetricsSummary:
    avg_waiting_time: float = 0.0
    avg_turnaround_time: float = 0.0
    context_switches: int = 0
    cpu_utilization: int = 0


@dataclass
class SimulationResult:
    algorithm: Algorithm
    quantum: Optional[int]
    schedule: List[ScheduleEntry] = field(default_factory=list)
    processes: List[ProcessMetrics] = field(default_factory=list)
    metrics: MetricsSummary = field(default_factory=MetricsSummary)

    def __iter__(self) -> Iterator:
        # Allows ``schedule, metrics = simulate(...)``.
        return iter((self.schedule, self.metrics))

    @property
    def makespan(self) -> int:
        return max((e.end_time for e in self.schedule), default=0)


class DecisionKind(Enum):
    ORDER = "order"
    QUEUE = "queue"
    SELECT = "select"
    DISPATCH = "dispatch"
    REQUEUE = "requeue"
    COMPLETE = "complete"
    IDLE = "idle"


@dataclass(frozen=True)
class Decision:
    """
    A single scheduling decision, yielded by a policy while it simulates.

    ``time`` is the CPU cursor the decision refers to: the start of a
    dispatch, the completion instant, or the cursor when the queue changed.
    """

    kind: DecisionKind
    time: int = 0
    process: Optional[ProcessDescriptor] = None
    duration: int = 0
    remaining: int = 0
    queue: Tuple[str, ...] = ()
