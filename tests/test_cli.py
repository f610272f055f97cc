import json
import sys
from datetime import date

import pytest

from conftest import weekdays
from revenue_pacing.cli import revenue_report


@pytest.fixture
def revenue_csv(tmp_path):
    lines = ["Date,Austin Revenue,Charlotte Revenue"]
    lines += [f"{d.isoformat()},1000,2000" for d in weekdays(date(2024, 3, 1), date(2024, 3, 14))]
    path = tmp_path / "revenue.csv"
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def targets_json(tmp_path):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps({"dailyTargets": {"austin": 1000, "charlotte": 2000}, "monthlyAdjustments": []}))
    return path


def run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["revenue-report", *argv])
    revenue_report.main()


def test_report(monkeypatch, capsys, revenue_csv, targets_json, tmp_path):
    export = tmp_path / "export.csv"
    run(monkeypatch, str(revenue_csv), "--targets", str(targets_json), "--as-of", "2024-03-15",
        "--export", str(export))

    out = capsys.readouterr().out
    assert "10 records, 0 skipped" in out
    assert "Data validation passed" in out
    assert "No missing working days" in out
    assert "Executive Summary" in out
    assert "Risk level: low" in out
    assert export.exists()


def test_template(monkeypatch, tmp_path):
    template = tmp_path / "template.csv"
    run(monkeypatch, "--template", str(template), "--as-of", "2024-03-15")
    assert template.read_text().splitlines()[1] == "2024-03-15,0.0,0.0"


def test_missing_file_exits(monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, str(tmp_path / "missing.csv"), "--as-of", "2024-03-15")
    assert exc.value.code == 1
    assert "File not found" in capsys.readouterr().out


def test_bad_as_of_exits(monkeypatch):
    with pytest.raises(SystemExit):
        run(monkeypatch, "--template", "x.csv", "--as-of", "15/03/2024")
