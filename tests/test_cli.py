from __future__ import annotations

import argparse
import json

import pytest

from readar import cli


def test_text_report(sample_file, capsys):
    exit_code = cli.main(["--in", str(sample_file), "--width", "26", "-q"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Page 1" in out
    assert "+2.30s  Line two same paragraph." in out
    assert "2 paragraphs, 3 lines" in out
    assert "at 120 WPM" in out


def test_json_report(sample_file, capsys):
    exit_code = cli.main(["--in", str(sample_file), "--width", "26", "--json", "-q"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert data["words_per_minute"] == 120
    assert len(data["pages"][0]["paragraphs"]) == 2


def test_position_report(sample_file, capsys):
    cli.main(["--in", str(sample_file), "--width", "26", "--at", "1", "-q"])
    assert "At 1.00s: page 1, paragraph 1, line 1" in capsys.readouterr().out


def test_position_report_numbers_paragraphs_per_page(tmp_path, capsys):
    path = tmp_path / "book.txt"
    path.write_text("Alpha one.\n\nAlpha two.\fBeta one.", encoding="utf-8")

    cli.main(["--in", str(path), "--wpm", "120", "--at", "3", "-q"])

    assert "At 3.00s: page 2, paragraph 1, line 1" in capsys.readouterr().out


def test_wpm_default_comes_from_environment(sample_file, capsys, monkeypatch):
    monkeypatch.setenv("READAR_WPM", "60")
    cli.main(["--in", str(sample_file), "-q"])
    assert "at 60 WPM" in capsys.readouterr().out


def test_missing_input_returns_error(tmp_path, capsys):
    assert cli.main(["--in", str(tmp_path / "missing.txt"), "-q"]) == 1


def test_invalid_wpm_returns_error(sample_file):
    assert cli.main(["--in", str(sample_file), "--wpm", "0", "-q"]) == 1


@pytest.mark.parametrize(
    "value, expected",
    [("0", [0]), ("0,2-4", [0, 2, 3, 4]), (" 1 , 3 ", [1, 3])],
)
def test_parse_pages(value, expected):
    assert cli.parse_pages(value) == expected


@pytest.mark.parametrize("value", ["a", "4-2", "1-x"])
def test_parse_pages_rejects_garbage(value):
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_pages(value)
