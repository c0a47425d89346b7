from __future__ import annotations

import json
from pathlib import Path

import pytest

from e2e_trends import cli


@pytest.fixture
def report_path(tmp_path: Path, sample_report) -> Path:
    path = tmp_path / "report.json"
    path.write_text(json.dumps(sample_report), encoding="utf-8")
    return path


def test_main_writes_all_outputs(tmp_path: Path, report_path: Path) -> None:
    out_json = tmp_path / "out" / "trends.json"
    out_md = tmp_path / "out" / "snapshot.md"
    csv_dir = tmp_path / "csv"

    exit_code = cli.main(
        [
            "--report",
            str(report_path),
            "--out-json",
            str(out_json),
            "--out-markdown",
            str(out_md),
            "--csv-dir",
            str(csv_dir),
            "--now",
            "2025-07-31T12:00:00Z",
        ]
    )

    assert exit_code == cli.EXIT_OK
    payload = json.loads(out_json.read_text(encoding="utf-8"))
    assert payload["generated_at"] == "2025-07-31T12:00:00Z"
    assert out_md.read_text(encoding="utf-8").startswith("# E2E Quality Snapshot - 2025-07-31\n")
    assert sorted(path.name for path in csv_dir.iterdir()) == [
        "Pricing_Override-.csv",
        "Smoke_Tests-2025-07-03-02-10-04.csv",
        "UI_UAT_Tests-2025-07-02-02-10-04.csv",
    ]


def test_main_applies_config(tmp_path: Path, report_path: Path) -> None:
    config = tmp_path / "trends.yaml"
    config.write_text(
        "suites:\n  smokeTests:\n    title: Nightly\nfilter:\n  flaky_only: true\n",
        encoding="utf-8",
    )
    out_json = tmp_path / "trends.json"

    exit_code = cli.main(
        ["--report", str(report_path), "--config", str(config), "--out-json", str(out_json)]
    )

    assert exit_code == cli.EXIT_OK
    smoke = json.loads(out_json.read_text(encoding="utf-8"))["suites"][0]
    assert smoke["title"] == "Nightly"
    assert [row["title"] for row in smoke["rows"]] == ["Smoke: Login works"]


def test_main_rejects_malformed_report(tmp_path: Path, capsys) -> None:
    bad = tmp_path / "report.json"
    bad.write_text('{"smokeTests": {"r1": {"results": []}}}', encoding="utf-8")
    out_json = tmp_path / "trends.json"

    exit_code = cli.main(["--report", str(bad), "--out-json", str(out_json)])

    assert exit_code == cli.EXIT_INPUT_ERROR
    assert not out_json.exists()
    assert "stats" in capsys.readouterr().err


def test_main_rejects_missing_report(tmp_path: Path, capsys) -> None:
    exit_code = cli.main(["--report", str(tmp_path / "absent.json")])

    assert exit_code == cli.EXIT_INPUT_ERROR
    assert "cannot read report" in capsys.readouterr().err


def test_main_rejects_invalid_config(tmp_path: Path, report_path: Path) -> None:
    config = tmp_path / "trends.yaml"
    config.write_text("windows: [0]\n", encoding="utf-8")

    assert cli.main(["--report", str(report_path), "--config", str(config)]) == cli.EXIT_INPUT_ERROR


def test_invalid_now_is_a_usage_error(report_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_args(["--report", str(report_path), "--now", "yesterday"])

    assert excinfo.value.code == 2


def test_json_log_format(report_path: Path, capsys) -> None:
    exit_code = cli.main(["--report", str(report_path), "--log-format", "json"])

    assert exit_code == cli.EXIT_OK
    records = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line]
    assert records
    assert {record["level"] for record in records} <= {"info", "debug"}
    assert any(record["logger"] == "e2e_trends.io" for record in records)
