"""Command-line tests, run against a throwaway workspace."""
from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from vcard_exporter.cli import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_csv(path: Path, n: int) -> Path:
    lines = ["name,number"] + [f"Person {i},555 {i:04d}" for i in range(n)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_list_count(workspace: Path):
    src = workspace / "phone.csv"
    src.write_text("name,number\nAlice,555 123\nAlice ,555123\nBob,\n", encoding="utf-8")
    result = runner.invoke(app, ["list", str(src), "--count"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "1"


def test_list_table(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 2)
    result = runner.invoke(app, ["list", str(src)])
    assert result.exit_code == 0, result.output
    assert "Person 1" in result.output
    assert "5550001" in result.output


def test_list_uses_source_dir(workspace: Path):
    (workspace / "cards-source").mkdir()
    _write_csv(workspace / "cards-source" / "phone.csv", 3)
    result = runner.invoke(app, ["list", "--count"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "3"


def test_no_sources_exits_2(workspace: Path):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 2
    assert "Nothing to read" in result.output


def test_unsupported_source_exits_2(workspace: Path):
    (workspace / "notes.txt").write_text("")
    result = runner.invoke(app, ["list", "notes.txt"])
    assert result.exit_code == 2


def test_unreadable_source_gives_empty_list(workspace: Path):
    result = runner.invoke(app, ["list", "missing.vcf", "--count"])
    assert result.exit_code == 0, result.output
    assert result.output.strip().endswith("0")


def test_export_single(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 3)
    result = runner.invoke(app, ["export", str(src), "--no-share"])
    assert result.exit_code == 0, result.output
    out = workspace / "cards-export" / "contacts.vcf"
    assert out.read_text(encoding="utf-8").count("BEGIN:VCARD") == 3


def test_export_selected_indices(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 5)
    result = runner.invoke(app, ["export", str(src), "--select", "4,1", "--no-share"])
    assert result.exit_code == 0, result.output
    text = (workspace / "cards-export" / "contacts.vcf").read_text(encoding="utf-8")
    assert text == (
        "BEGIN:VCARD\nVERSION:3.0\nFN:Person 1\nTEL:5550001\nEND:VCARD\n"
        "BEGIN:VCARD\nVERSION:3.0\nFN:Person 4\nTEL:5550004\nEND:VCARD\n"
    )


def test_export_batches(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 250)
    result = runner.invoke(app, ["export", str(src), "--batch", "-o", "out", "--share", "console"])
    assert result.exit_code == 0, result.output
    names = sorted(p.name for p in (workspace / "out").iterdir())
    assert names == ["contacts1.vcf", "contacts2.vcf", "contacts3.vcf"]
    assert (workspace / "out" / "contacts3.vcf").read_text().count("BEGIN:VCARD") == 50
    assert "text/x-vcard" in result.output


def test_export_batch_size_from_config(workspace: Path):
    (workspace / "local").mkdir()
    (workspace / "local" / "export.conf").write_text("batch_size = 2\n")
    src = _write_csv(workspace / "phone.csv", 5)
    result = runner.invoke(app, ["export", str(src), "--batch", "--no-share"])
    assert result.exit_code == 0, result.output
    assert len(list((workspace / "cards-export").glob("contacts*.vcf"))) == 3


def test_export_invalid_batch_size(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 5)
    result = runner.invoke(app, ["export", str(src), "--batch", "--batch-size", "0", "--no-share"])
    assert result.exit_code == 2
    assert not list((workspace / "cards-export").iterdir())


def test_export_bad_index(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 2)
    result = runner.invoke(app, ["export", str(src), "--select", "0,7", "--no-share"])
    assert result.exit_code == 2


def test_export_select_and_all_conflict(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 2)
    result = runner.invoke(app, ["export", str(src), "--select", "0", "--all", "--no-share"])
    assert result.exit_code == 2


def test_export_unknown_share_target(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 2)
    result = runner.invoke(app, ["export", str(src), "--share", "bluetooth"])
    assert result.exit_code == 2


def test_export_write_failure_exits_1(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 2)
    (workspace / "blocker").write_text("")
    result = runner.invoke(app, ["export", str(src), "-o", "blocker", "--no-share"])
    assert result.exit_code == 1
    assert "Export failed" in result.output


def test_export_unicode_digit_index_exits_2(workspace: Path):
    src = _write_csv(workspace / "phone.csv", 2)
    result = runner.invoke(app, ["export", str(src), "--select", "²", "--no-share"])
    assert result.exit_code == 2
    assert not (workspace / "cards-export" / "contacts.vcf").exists()


def test_list_survives_malformed_csv(workspace: Path):
    src = workspace / "phone.csv"
    src.write_text("name,number\n" + "A" * 200_000 + ",123\n", encoding="utf-8")
    result = runner.invoke(app, ["list", str(src), "--count"])
    assert result.exit_code == 0, result.output
    assert result.output.strip().endswith("0")
