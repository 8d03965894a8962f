import sys
from pathlib import Path

import pytest

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from batch import cli
from batch.parallel import BatchJob, JobResult


def test_missing_path_exits_non_zero():
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code != 0


def test_nonexistent_path_exits_non_zero(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "nope.inst.dat")])
    assert excinfo.value.code != 0


def test_file_mode_prints_one_line_per_knapsack_instance(tmp_path, capsys):
    path = tmp_path / "knap_3.inst.dat"
    path.write_text("1 3 10 2 3 3 4 4 5\n2 3 7 2 3 3 4 4 5\n", encoding="utf-8")

    assert cli.main([str(path), "--seed", "1"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert len(out) == 2
    first = out[0].split()
    assert first[:2] == ["1", "3"]
    assert len(first) == 3 + 3
    assert int(first[2]) <= 12


def test_file_mode_measure_prints_summary(tmp_path, capsys):
    path = tmp_path / "sat_2_1.inst.dat"
    path.write_text("p cnf 2 2\n1 2 0\n-1 -2 0\n\np cnf 2 1\n1 2 0\n", encoding="utf-8")

    assert cli.main([str(path), "-m"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert len(out) == 1
    assert out[0].split()[0] == "2"
    assert len(out[0].split()) == 4


def test_parse_error_exits_with_status_one(tmp_path, capsys):
    path = tmp_path / "knap_1.inst.dat"
    path.write_text("1 1 10 two 3\n", encoding="utf-8")

    assert cli.main([str(path)]) == 1
    assert capsys.readouterr().out == ""


def test_file_mode_correctness_check(tmp_path, capsys):
    instances = tmp_path / "inst"
    expected = tmp_path / "sol"
    instances.mkdir()
    expected.mkdir()

    # The only item never fits, so the answer is deterministic.
    path = instances / "knap_1.inst.dat"
    path.write_text("1 1 0 5 10\n", encoding="utf-8")
    (expected / "knap_1.sol.dat").write_text("1 1 0 0\n", encoding="utf-8")

    assert cli.main([str(path), "-t", str(expected)]) == 0
    assert capsys.readouterr().out.splitlines() == ["1 OK"]


def test_directory_mode_prints_sorted_results_and_report(tmp_path, capsys, monkeypatch):
    seen = {}

    def fake_run_batch(directory, config):
        seen["config"] = config
        return [
            JobResult(job=BatchJob(path=Path(directory) / "knap_4.inst.dat", difficulty=4.0), returncode=0, lines=("4 ok",)),
            JobResult(job=BatchJob(path=Path(directory) / "knap_9.inst.dat", difficulty=9.0), returncode=0, lines=("9 ok",)),
        ]

    monkeypatch.setattr(cli, "run_batch", fake_run_batch)
    report = tmp_path / "out" / "report.csv"

    code = cli.main([str(tmp_path), "-j", "3", "-d", "10", "--report", str(report)])

    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["4 ok", "9 ok"]
    assert seen["config"].jobs == 3
    assert seen["config"].max_difficulty == 10.0
    assert report.exists()


def test_jobs_must_be_positive(tmp_path):
    with pytest.raises(SystemExit):
        cli.main([str(tmp_path), "-j", "0"])


def test_malformed_jobs_env_is_a_usage_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("ANNEAL_JOBS", "many")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path)])

    assert excinfo.value.code == 2
    assert "ANNEAL_JOBS must be an integer" in capsys.readouterr().err
