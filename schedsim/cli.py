from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import simulate
from .config import DEFAULT_BURST_TIME, DEFAULT_PRIORITY, LOG_LEVELS, Settings
from .errors import ConfigError, SchedulerError
from .gantt import build_rich_gantt, render_gantt, render_rows
from .metrics import summarize
from .models import Algorithm, SimulationResult
from .trace import generate_steps, numbered
from .workload_io import create_process, load_workload, save_workload

logger = logging.getLogger(__name__)

ALGORITHM_CHOICES = ["fifo", "sjf", "rr", "priority"]


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    settings = settings or Settings.from_env()

    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Single-CPU scheduling simulator (FIFO, SJF, Round Robin, Priority).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level}, env SCHEDSIM_LOG_LEVEL).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Shortcut for --log-level DEBUG.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_run_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--algorithm",
            "-a",
            required=True,
            help="Algorithm to use (fifo, sjf, rr, priority).",
        )
        sub.add_argument("--workload", "-w", required=True, help="Path to JSON or CSV workload file.")
        add_quantum_options(sub)

    def add_quantum_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--quantum",
            "-q",
            type=int,
            default=settings.quantum,
            help=f"Time quantum for round-robin (default: {settings.quantum}; ignored by other algorithms).",
        )
        sub.add_argument(
            "--respect-arrivals",
            action="store_true",
            default=settings.respect_arrivals,
            help="Round-robin admits processes only once they have arrived.",
        )

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    add_run_options(run_parser)
    run_parser.add_argument(
        "--steps",
        action="store_true",
        help="Also print the step-by-step explanation of the run.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart and slice list instead of the colored panel.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument("--workload", "-w", required=True, help="Path to JSON or CSV workload file.")
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHM_CHOICES),
        help="Algorithms to compare (default: fifo sjf rr priority).",
    )
    add_quantum_options(compare_parser)

    steps_parser = subparsers.add_parser("steps", help="Explain how an algorithm schedules a workload.")
    add_run_options(steps_parser)

    new_parser = subparsers.add_parser("new", help="Append a process to a workload file.")
    new_parser.add_argument("--workload", "-w", required=True, help="JSON or CSV workload file (created if missing).")
    new_parser.add_argument("--name", "-n", required=True, help="Process name.")
    new_parser.add_argument(
        "--burst",
        type=int,
        default=DEFAULT_BURST_TIME,
        help=f"Burst time (default: {DEFAULT_BURST_TIME}).",
    )
    new_parser.add_argument(
        "--priority",
        type=int,
        default=DEFAULT_PRIORITY,
        help=f"Priority, lower runs first (default: {DEFAULT_PRIORITY}).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _print_result(result: SimulationResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm.value}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.schedule), markup=False, highlight=False, soft_wrap=True)
        console.print()
        for row in render_rows(result.schedule):
            console.print(row, markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.schedule)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Name",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Slices",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Name", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            p.name,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.slices),
        )

    console.print(proc_table)
    console.print()

    metrics = result.metrics
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")
    sys_table.add_row("Avg waiting", f"{metrics.avg_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{metrics.avg_turnaround_time:.2f}")
    sys_table.add_row("Context switches", str(metrics.context_switches))
    sys_table.add_row("CPU utilization", f"{metrics.cpu_utilization}%")
    sys_table.add_row("Makespan", str(result.makespan))

    console.print(sys_table)


def _print_steps(steps, console: Console) -> None:
    console.print("[bold]Algorithm steps[/bold]")
    for line in numbered(steps):
        console.print(line, highlight=False)


def _run_compare(processes, algorithms: List[Algorithm], quantum: int, respect_arrivals: bool, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Switches", justify="right")
    summary_table.add_column("CPU %", justify="right")

    for alg in algorithms:
        result = simulate(processes, alg, quantum, respect_arrivals=respect_arrivals)
        summary = summarize(result)
        summary_table.add_row(
            result.algorithm.value,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            str(summary["context_switches"]),
            str(summary["cpu_utilization"]),
        )

    console.print(summary_table)


def _append_process(workload: Path, name: str, burst: int, priority: int, console: Console) -> None:
    processes = load_workload(workload) if workload.exists() else []
    process = create_process(processes, name, burst_time=burst, priority=priority)
    save_workload([*processes, process], workload)
    console.print(
        f"Added [bold]{process.name}[/bold] ({process.pid}) arriving at {process.arrival_time} "
        f"to {workload}"
    )


def main(argv: list[str] | None = None) -> int:
    console = Console()
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else args.log_level)

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = simulate(processes, args.algorithm, args.quantum, respect_arrivals=args.respect_arrivals)
            _print_result(result, console, plain=args.plain)
            if args.steps:
                console.print()
                _print_steps(
                    generate_steps(processes, result.algorithm, args.quantum, args.respect_arrivals),
                    console,
                )
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            algorithms = [Algorithm.parse(a) for a in args.algorithms]
            _run_compare(processes, algorithms, args.quantum, args.respect_arrivals, console)
            return 0

        if args.command == "steps":
            processes = load_workload(Path(args.workload))
            _print_steps(generate_steps(processes, args.algorithm, args.quantum, args.respect_arrivals), console)
            return 0

        if args.command == "new":
            _append_process(Path(args.workload), args.name, args.burst, args.priority, console)
            return 0
    except SchedulerError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
