"""
Pytest tests for ghf.display (prompt, truncation, dates, tables).

Run from the repo root:
    pytest ghf/test_display.py -v
"""

import builtins

import pytest

from ghf.display import EMPTY_CELL, ask_yes_no, format_date, print_table, truncate


# ============================================================================
# ask_yes_no
# ============================================================================

@pytest.mark.parametrize("answer,expected", [
    ("", False),
    ("n", False),
    ("y", True),
    ("YES", True),
    ("  yes  ", True),
    ("yep", False),
])
def test_ask_yes_no_answers(monkeypatch, answer, expected):
    monkeypatch.setattr(builtins, "input", lambda prompt: answer)
    assert ask_yes_no("Load next page?") is expected


def test_ask_yes_no_shows_default_no(monkeypatch):
    prompts = []

    def fake_input(prompt):
        prompts.append(prompt)
        return ""

    monkeypatch.setattr(builtins, "input", fake_input)
    ask_yes_no("Load next page?")
    assert prompts == ["Load next page? [y/N] "]


def test_ask_yes_no_eof_means_no(monkeypatch):
    def closed_stdin(prompt):
        raise EOFError

    monkeypatch.setattr(builtins, "input", closed_stdin)
    assert ask_yes_no("Load next page?") is False


# ============================================================================
# truncate / format_date
# ============================================================================

def test_truncate():
    assert truncate("short", 10) == "short"
    assert truncate("exactly10!", 10) == "exactly10!"
    assert truncate("a much longer title", 10) == "a much lo…"
    assert len(truncate("a much longer title", 10)) == 10
    assert truncate(None, 10) == ""
    assert truncate("", 10) == ""


def test_format_date():
    assert format_date("2026-01-24T10:30:00Z") == "Jan 24, 2026"
    assert format_date("2025-12-03T00:00:00+00:00") == "Dec 3, 2025"
    assert format_date(None) == EMPTY_CELL
    assert format_date("") == EMPTY_CELL
    assert format_date("not a date") == "not a date"


# ============================================================================
# print_table
# ============================================================================

def test_print_table_aligns_columns_and_fills_empty_cells(capsys):
    print_table(["Name", "Lang"], [["requests", "Python"], ["x", None]])
    lines = capsys.readouterr().out.splitlines()
    body = [ln for ln in lines if "requests" in ln or ln.strip().startswith("x")]
    assert len(body) == 2
    assert body[0].index("Python") == body[1].index(EMPTY_CELL)
