from pathlib import Path

import pytest

from schedsim.errors import InvalidInputError, WorkloadError
from schedsim.models import ProcessDescriptor
from schedsim.workload_io import create_process, load_workload, save_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":"B","arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], ProcessDescriptor)
    assert procs[0].name == "A"
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 1


def test_load_json_camel_case(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"id":"proc_1","name":"editor","arrivalTime":2,"burstTime":5,"priority":5}]')
    (proc,) = load_workload(p)
    assert proc == ProcessDescriptor("proc_1", name="editor", arrival_time=2, burst_time=5, priority=5)


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == "A"
    assert procs[1].priority == 0


def test_save_then_load(tmp_path: Path):
    procs = [
        ProcessDescriptor("1", name="shell", arrival_time=0, burst_time=4, priority=2),
        ProcessDescriptor("2", name="daemon", arrival_time=3, burst_time=1, priority=7),
    ]
    for name in ("w.json", "w.csv"):
        path = save_workload(procs, tmp_path / name)
        assert load_workload(path) == procs


def test_unsupported_format(tmp_path: Path):
    p = tmp_path / "w.yaml"
    p.write_text("[]")
    with pytest.raises(WorkloadError):
        load_workload(p)


@pytest.mark.parametrize(
    "content",
    [
        '{"pid": "A"}',
        '[{"pid": "A", "arrival_time": 0}]',
        '[{"pid": "A", "arrival_time": "soon", "burst_time": 1}]',
        "[1, 2]",
        "not json",
    ],
)
def test_invalid_json_workload(tmp_path: Path, content):
    p = tmp_path / "w.json"
    p.write_text(content)
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadError):
        load_workload(tmp_path / "nope.csv")


def test_create_process_defaults():
    first = create_process([], "editor")
    assert first == ProcessDescriptor("proc_1", name="editor", arrival_time=0, burst_time=5, priority=5)

    second = create_process([first], "  shell ", burst_time=2, priority=1)
    assert second.pid == "proc_2"
    assert second.name == "shell"
    assert second.arrival_time == 2


def test_create_process_skips_taken_ids():
    existing = [ProcessDescriptor("proc_2", arrival_time=0, burst_time=1)]
    assert create_process(existing, "x").pid == "proc_3"


def test_create_process_requires_name():
    with pytest.raises(InvalidInputError):
        create_process([], "   ")


@pytest.mark.parametrize("name", ["w.json", "w.csv"])
def test_non_utf8_workload(tmp_path: Path, name):
    p = tmp_path / name
    p.write_bytes(b'[{"pid": "\xff", "arrival_time": 0, "burst_time": 1}]')
    with pytest.raises(WorkloadError):
        load_workload(p)


@pytest.mark.parametrize(
    "entry",
    [
        '{"pid": "A", "arrival_time": 0.9, "burst_time": 3}',
        '{"pid": "A", "arrival_time": 0, "burst_time": 2.7}',
        '{"pid": "A", "arrival_time": 0, "burst_time": 3, "priority": 1.5}',
        '{"pid": "A", "arrival_time": false, "burst_time": 3}',
        '{"pid": "A", "arrival_time": 0, "burst_time": true}',
    ],
)
def test_non_integer_times_rejected(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text(f"[{entry}]")
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_whole_float_times_accepted(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid": "A", "arrival_time": 2.0, "burst_time": 3.0}]')
    (proc,) = load_workload(p)
    assert proc.arrival_time == 2
    assert proc.burst_time == 3


def test_fractional_csv_value_rejected(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\nA,0,2.7\n")
    with pytest.raises(WorkloadError):
        load_workload(p)
