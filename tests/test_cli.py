"""Tests for replacer.cli.main — exit codes, usage text, switches."""
import os
import json
from tempfile import TemporaryDirectory
from openpyxl import Workbook, load_workbook

from replacer.cli import main


def _make_book(path, rows):
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    for r, row in enumerate(rows, 1):
        for c, val in enumerate(row, 1):
            ws.cell(row=r, column=c, value=val)
    wb.save(path)


def _pair(td):
    src = os.path.join(td, "input.xlsx")
    dest = os.path.join(td, "target.xlsx")
    _make_book(src, [["a", "A"], ["b", "B"]])
    _make_book(dest, [["b", "x"], ["c", "x"]])
    return src, dest


def test_merge_success_returns_zero(capsys):
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        code = main(["-t", f"{dest},1,2", "-i", f"{src},1,2"])
        assert code == 0
        ws = load_workbook(dest)["Sheet1"]
        assert ws["B1"].value == "B"
        assert ws["B2"].value == "x"
        assert "Cells written" in capsys.readouterr().out


def test_slash_and_uppercase_switches():
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        assert main(["/T", f"{dest},1,B", "-I", f"{src},A,2"]) == 0
        assert load_workbook(dest)["Sheet1"]["B1"].value == "B"


def test_dry_run_does_not_save(capsys):
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        assert main(["-t", f"{dest},1,2", "-i", f"{src},1,2", "--dry-run"]) == 0
        assert load_workbook(dest)["Sheet1"]["B1"].value == "x"
        assert "Dry run" in capsys.readouterr().out


def test_missing_input_prints_usage(capsys):
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        assert main(["-t", f"{dest},1,2"]) == 2
        assert "Usage:" in capsys.readouterr().out
        assert load_workbook(dest)["Sheet1"]["B1"].value == "x"


def test_missing_switch_value_prints_usage(capsys):
    assert main(["-t"]) == 2
    assert "Usage:" in capsys.readouterr().out


def test_nonexistent_file_prints_usage(capsys):
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        code = main(["-t", f"{dest},1,2", "-i", f"{os.path.join(td, 'none.xlsx')},1,2"])
        assert code == 2
        assert "Usage:" in capsys.readouterr().out


def test_malformed_selector_prints_usage(capsys):
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        assert main(["-t", f"{dest},1", "-i", f"{src},1,2"]) == 2
        assert "Usage:" in capsys.readouterr().out


def test_unreadable_input_is_a_hard_failure(capsys):
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        with open(src, "wb") as f:
            f.write(b"garbage")
        assert main(["-t", f"{dest},1,2", "-i", f"{src},1,2"]) == 1
        out = capsys.readouterr().out
        assert "Could not open" in out
        assert "Usage:" not in out


def test_job_file_with_override():
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        job = os.path.join(td, "job.json")
        with open(job, "w", encoding="utf-8") as f:
            json.dump({
                "target": {"file_path": dest, "id_column": 1, "value_column": 2},
                "input": {"file_path": src, "id_column": 1, "value_column": 1},
                "commit": True,
            }, f)

        assert main(["--job", job, "-i", f"{src},1,2"]) == 0
        assert load_workbook(dest)["Sheet1"]["B1"].value == "B"


def test_job_file_commit_false_is_a_dry_run():
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        job = os.path.join(td, "job.json")
        with open(job, "w", encoding="utf-8") as f:
            json.dump({
                "target": {"file_path": dest, "id_column": 1, "value_column": 2},
                "input": {"file_path": src, "id_column": 1, "value_column": 2},
                "commit": False,
            }, f)

        assert main(["--job", job]) == 0
        assert load_workbook(dest)["Sheet1"]["B1"].value == "x"


def test_help_prints_usage(capsys):
    assert main(["-h"]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_control_character_in_input_fails_without_traceback(capsys):
    with TemporaryDirectory() as td:
        src = os.path.join(td, "input.csv")
        dest = os.path.join(td, "target.xlsx")
        with open(src, "w", newline="", encoding="utf-8") as f:
            f.write("b,x\x01y\n")
        _make_book(dest, [["b", "x"]])

        assert main(["-t", f"{dest},1,2", "-i", f"{src},1,2"]) == 1
        out = capsys.readouterr().out
        assert "control characters" in out
        assert "Traceback" not in out
        assert load_workbook(dest)["Sheet1"]["B1"].value == "x"


def test_stale_job_file_is_ignored_when_both_selectors_given():
    with TemporaryDirectory() as td:
        src, dest = _pair(td)
        job = os.path.join(td, "job.json")
        with open(job, "w", encoding="utf-8") as f:
            json.dump({
                "target": {"file_path": os.path.join(td, "moved.xlsx"), "id_column": 1, "value_column": 2},
                "input": {"file_path": os.path.join(td, "moved.xlsx"), "id_column": 1, "value_column": 2},
            }, f)

        assert main(["--job", job, "-t", f"{dest},1,2", "-i", f"{src},1,2"]) == 0
        assert load_workbook(dest)["Sheet1"]["B1"].value == "B"
