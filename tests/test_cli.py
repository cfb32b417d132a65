from __future__ import annotations

import json

from typer.testing import CliRunner

from timing_summary.cli import app
from timing_summary.db import load_dashboard
from timing_summary.exporter import TABLE_FILES

runner = CliRunner()


def test_preprocess_writes_tables_and_cache(tmp_path, export_file):
    out_dir = tmp_path / "processed"
    db_path = tmp_path / "cache.sqlite3"
    result = runner.invoke(
        app, ["preprocess", str(export_file), "--out", str(out_dir), "--db", str(db_path)]
    )

    assert result.exit_code == 0, result.output
    assert "Date range:  2024-01-15 to 2024-02-02" in result.output
    assert sorted(path.name for path in out_dir.iterdir()) == sorted(TABLE_FILES.values())
    metadata = json.loads((out_dir / "metadata.json").read_text())
    assert metadata["totalSeconds"] == 16890
    assert load_dashboard(db_path)["metadata"] == metadata


def test_preprocess_with_filters(tmp_path, export_file):
    out_dir = tmp_path / "processed"
    result = runner.invoke(
        app,
        [
            "preprocess",
            str(export_file),
            "--out",
            str(out_dir),
            "--no-store",
            "--device",
            "iPhone",
            "--device",
            "iPad",
        ],
    )
    assert result.exit_code == 0, result.output
    devices = json.loads((out_dir / "device-totals.json").read_text())
    assert [device["device"] for device in devices] == ["iPad", "iPhone"]


def test_preprocess_owner_label(tmp_path, export_file):
    out_dir = tmp_path / "processed"
    result = runner.invoke(
        app,
        ["preprocess", str(export_file), "--out", str(out_dir), "--no-store", "--owner", "Ana's Mac"],
    )
    assert result.exit_code == 0, result.output
    devices = json.loads((out_dir / "device-totals.json").read_text())
    assert devices[0]["device"] == "Ana's Mac"


def test_preprocess_rejects_empty_export(tmp_path):
    export = tmp_path / "empty.json"
    export.write_text("[]")
    result = runner.invoke(app, ["preprocess", str(export), "--no-store", "--out", str(tmp_path)])
    assert result.exit_code == 1
    assert "File contains no activities." in result.output


def test_preprocess_strict_dates(tmp_path):
    export = tmp_path / "bad-dates.json"
    export.write_text(
        json.dumps(
            [
                {
                    "application": "Safari",
                    "device": "iPhone",
                    "duration": "0:01:00",
                    "startDate": "soon",
                    "endDate": "later",
                }
            ]
        )
    )
    args = ["preprocess", str(export), "--no-store", "--out", str(tmp_path / "out")]
    assert runner.invoke(app, args).exit_code == 0
    strict = runner.invoke(app, [*args, "--strict-dates"])
    assert strict.exit_code == 1
    assert "Unparseable startDate" in strict.output


def test_summary_and_clear(tmp_path, export_file):
    db_path = tmp_path / "cache.sqlite3"
    runner.invoke(
        app, ["preprocess", str(export_file), "--out", str(tmp_path / "out"), "--db", str(db_path)]
    )

    result = runner.invoke(app, ["summary", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert "Top applications:" in result.output
    assert "Mail" in result.output

    cleared = runner.invoke(app, ["clear", "--db", str(db_path)])
    assert "Cleared stored dashboard." in cleared.output
    missing = runner.invoke(app, ["summary", "--db", str(db_path)])
    assert missing.exit_code == 1


def test_summary_from_directory(tmp_path, export_file):
    out_dir = tmp_path / "out"
    runner.invoke(app, ["preprocess", str(export_file), "--out", str(out_dir), "--no-store"])
    result = runner.invoke(app, ["summary", "--dir", str(out_dir)])
    assert result.exit_code == 0, result.output
    assert "Devices:" in result.output


def test_preprocess_rejects_undecodable_export(tmp_path):
    export = tmp_path / "binary.json"
    export.write_bytes(b"\x80\xff[not utf-8]")
    result = runner.invoke(app, ["preprocess", str(export), "--no-store", "--out", str(tmp_path)])
    assert result.exit_code == 1
    assert "Invalid JSON file" in result.output


def test_preprocess_accepts_export_with_byte_order_mark(tmp_path, sample_records):
    export = tmp_path / "bom.json"
    export.write_bytes(b"\xef\xbb\xbf" + json.dumps(sample_records).encode("utf-8"))
    out_dir = tmp_path / "out"
    result = runner.invoke(app, ["preprocess", str(export), "--no-store", "--out", str(out_dir)])
    assert result.exit_code == 0, result.output
    metadata = json.loads((out_dir / "metadata.json").read_text())
    assert metadata["totalSeconds"] == 16890


def test_clear_reports_unreadable_store(tmp_path):
    db_path = tmp_path / "cache.sqlite3"
    db_path.write_bytes(b"this is not a sqlite database" * 64)
    result = runner.invoke(app, ["clear", "--db", str(db_path)])
    assert result.exit_code == 1
    assert "Failed to clear data" in result.output
