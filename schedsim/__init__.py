"""
schedsim package.

Single-CPU scheduling simulator: computes a Gantt schedule and summary
metrics for FIFO, SJF, Round Robin and Priority scheduling, and explains
each run step by step.
"""

from .algorithms import simulate
from .errors import InvalidInputError, SchedulerError, WorkloadError
from .models import Algorithm, MetricsSummary, ProcessDescriptor, ScheduleEntry, SimulationResult
from .trace import StepTrace, generate_steps

__all__ = [
    "Algorithm",
    "InvalidInputError",
    "MetricsSummary",
    "ProcessDescriptor",
    "ScheduleEntry",
    "SchedulerError",
    "SimulationResult",
    "StepTrace",
    "WorkloadError",
    "generate_steps",
    "simulate",
]
