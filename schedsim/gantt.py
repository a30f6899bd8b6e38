from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduleEntry

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def _ordered(schedule: Sequence[ScheduleEntry]) -> List[ScheduleEntry]:
    return sorted(schedule, key=lambda e: (e.start_time, e.end_time))


def render_gantt(schedule: Sequence[ScheduleEntry]) -> str:
    """
    Plain-text Gantt chart: one bar row, one label row, one row of time marks.
    """
    if not schedule:
        return "(no execution)"

    line = "|"
    labels = ""
    time_marks = "0"
    last_time = 0

    for entry in _ordered(schedule):
        idle_gap = entry.start_time - last_time
        if idle_gap > 0:
            line += "." * idle_gap
            labels += " " * idle_gap
            last_time = entry.start_time
            time_marks += f"{last_time:>3}"

        width = max(1, entry.duration)
        line += "=" * width
        labels += entry.name[:width].ljust(width)
        last_time = entry.end_time
        time_marks += f"{last_time:>3}"

    line += "|"

    return "\n".join(["Gantt Chart:", line, labels, time_marks])


def render_rows(schedule: Sequence[ScheduleEntry]) -> List[str]:
    """
    One ``name [start-end]`` line per schedule entry, in schedule order.
    """
    return [f"{e.name} [{e.start_time}-{e.end_time}]" for e in schedule]


def build_rich_gantt(schedule: Sequence[ScheduleEntry]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not schedule:
        return Panel("No schedule data available", title="Gantt Chart"), ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for entry in _ordered(schedule):
        idle_gap = entry.start_time - last_time
        if idle_gap > 0:
            timeline.append(" " * idle_gap)
            labels.append(" " * idle_gap)
            last_time = entry.start_time
            time_marks += f"{last_time:>3}"

        width = max(1, entry.duration)
        timeline.append(" " * width, style=f"on {pid_color(entry.pid)}")
        labels.append(entry.name[:width].ljust(width), style="bold")

        last_time = entry.end_time
        time_marks += f"{last_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    title = f"Gantt Chart ({schedule[0].algorithm})"
    return Panel.fit(table, title=title), time_marks
