from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence

from .config import ARRIVAL_SPACING, DEFAULT_BURST_TIME, DEFAULT_PRIORITY
from .errors import InvalidInputError, WorkloadError
from .models import ProcessDescriptor

logger = logging.getLogger(__name__)

CSV_FIELDS = ["pid", "name", "arrival_time", "burst_time", "priority"]

# Key spellings accepted in workload files, first match wins.
_KEYS = {
    "pid": ("pid", "id", "processId"),
    "name": ("name", "processName"),
    "arrival_time": ("arrival_time", "arrivalTime", "arrival"),
    "burst_time": ("burst_time", "burstTime", "burst"),
    "priority": ("priority",),
}


def load_workload(path: str | Path) -> List[ProcessDescriptor]:
    """
    Load a workload from a JSON or CSV file into a list of process descriptors.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[ProcessDescriptor]:
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as exc:
        raise WorkloadError(f"Cannot read workload {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"Workload {path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise WorkloadError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessDescriptor]:
    processes: List[ProcessDescriptor] = []
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            for row in reader:
                processes.append(_process_from_mapping(row))
    except OSError as exc:
        raise WorkloadError(f"Cannot read workload {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"Workload {path} is not valid UTF-8: {exc}") from exc
    return processes


def _lookup(mapping: Mapping, field: str):
    for key in _KEYS[field]:
        value = mapping.get(key)
        if value not in (None, ""):
            return value
    return None


def _as_int(value) -> int:
    """
    Whole numbers only: JSON floats with a fraction and booleans are rejected
    rather than truncated.
    """
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    return int(value)


def _process_from_mapping(mapping) -> ProcessDescriptor:
    if not isinstance(mapping, Mapping):
        raise WorkloadError(f"Invalid process entry: {mapping!r}")

    pid = _lookup(mapping, "pid")
    arrival = _lookup(mapping, "arrival_time")
    burst = _lookup(mapping, "burst_time")
    if pid is None or arrival is None or burst is None:
        raise WorkloadError(f"Invalid process entry: {mapping!r}")

    try:
        arrival_time = _as_int(arrival)
        burst_time = _as_int(burst)
        priority_val = _lookup(mapping, "priority")
        priority = _as_int(priority_val) if priority_val is not None else 0
    except (TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    name = _lookup(mapping, "name")
    return ProcessDescriptor(
        pid=str(pid),
        name="" if name is None else str(name),
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def save_workload(processes: Iterable[ProcessDescriptor], path: str | Path) -> Path:
    """
    Write processes to ``path`` in the format implied by its suffix.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    rows = [
        {
            "pid": p.pid,
            "name": p.name,
            "arrival_time": p.arrival_time,
            "burst_time": p.burst_time,
            "priority": p.priority,
        }
        for p in processes
    ]

    try:
        if suffix == ".json":
            with path.open("w", encoding="utf-8") as f:
                json.dump(rows, f, indent=2)
                f.write("\n")
        elif suffix == ".csv":
            with path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
                writer.writeheader()
                writer.writerows(rows)
        else:
            raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")
    except OSError as exc:
        raise WorkloadError(f"Cannot write workload {path}: {exc}") from exc

    logger.info("Saved %d processes to %s", len(rows), path)
    return path


def create_process(
    existing: Sequence[ProcessDescriptor],
    name: str,
    burst_time: int = DEFAULT_BURST_TIME,
    priority: int = DEFAULT_PRIORITY,
) -> ProcessDescriptor:
    """
    Build the next process of a workload the way the interactive form does:
    ids ``proc_1``, ``proc_2``... and arrivals spaced two time units apart.
    """
    name = name.strip()
    if not name:
        raise InvalidInputError("Please enter a process name")
    if burst_time <= 0:
        raise InvalidInputError(f"Burst time must be positive, got {burst_time}")

    taken = {p.pid for p in existing}
    number = len(existing) + 1
    while f"proc_{number}" in taken:
        number += 1

    return ProcessDescriptor(
        pid=f"proc_{number}",
        name=name,
        arrival_time=len(existing) * ARRIVAL_SPACING,
        burst_time=burst_time,
        priority=priority,
    )
