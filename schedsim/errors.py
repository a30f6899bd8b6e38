from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by schedsim."""


class InvalidInputError(SchedulerError, ValueError):
    """
    The caller handed the engine something it cannot simulate: a
    non-positive burst, a negative arrival, a bad quantum, duplicate ids or
    an unknown algorithm.
    """


class WorkloadError(SchedulerError, ValueError):
    """A workload file could not be read, parsed or written."""


class ConfigError(SchedulerError, ValueError):
    """A ``SCHEDSIM_*`` environment variable holds an unusable value."""
