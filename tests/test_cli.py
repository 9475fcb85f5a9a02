"""Tests for the interactive CLI."""

import builtins
import json

import pytest

from crashmap import cli


def test_causes_lists_legend_order(viz, capsys):
    cli.handle(viz, "causes")
    out = capsys.readouterr().out.splitlines()
    assert out[0].strip() == "1. Human factor (3)"
    assert out[-1].strip() == "3. Weather (1)"


def test_select_and_reset(viz, capsys):
    cli.handle(viz, 'select "Weather"')
    assert viz.selection.selected_cause == "Weather"
    cli.handle(viz, "tree")
    out = capsys.readouterr().out
    assert "Crash Locations for Cause: Weather" in out
    cli.handle(viz, "reset")
    assert viz.selection.selected_cause is None


def test_select_unknown_cause_prints_empty_state(viz, capsys):
    cli.handle(viz, 'select "Bird strike"')
    assert "No location data available for cause: Bird strike" in capsys.readouterr().out


def test_select_requires_cause(viz):
    with pytest.raises(ValueError):
        cli.handle(viz, "select")


def test_undo_redo(viz, capsys):
    cli.handle(viz, "undo")
    assert "Nothing to undo." in capsys.readouterr().out
    cli.handle(viz, 'select "Weather"')
    cli.handle(viz, "undo")
    assert viz.selection.selected_cause is None
    cli.handle(viz, "redo")
    assert viz.selection.selected_cause == "Weather"


def test_hover_commands(viz, capsys):
    cli.handle(viz, "hover series 50 200")
    out = capsys.readouterr().out
    assert "1980-1990" in out
    assert "Human factor: 1 crashes" in out
    cli.handle(viz, "hover tree -5 -5")
    assert "(nothing under the pointer)" in capsys.readouterr().out


def test_hover_requires_kind(viz):
    with pytest.raises(ValueError):
        cli.handle(viz, "hover nowhere 1 2")


def test_series_command(viz, capsys):
    cli.handle(viz, "series 2")
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "1985: Human factor:0-1"
    assert "y max = 2" in out


def test_export_json(viz, tmp_path):
    path = tmp_path / "scene.json"
    cli.handle(viz, f'export json "{path}"')
    assert json.loads(path.read_text(encoding="utf-8"))["title"] == "Crashes by Cause"


def test_unknown_command(viz, capsys):
    cli.handle(viz, "fly")
    assert "Unknown command" in capsys.readouterr().out


def test_main_repl(crash_csv, monkeypatch, capsys):
    lines = iter(['select "Terrorism"', "stats", "bogus 1 2", "quit"])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(lines))
    cli.main(["--data", str(crash_csv), "--treemap-size", "400", "300"])
    out = capsys.readouterr().out
    assert "Loaded 3 records" in out
    assert "Selection: Terrorism" in out


def test_main_stops_on_eof(crash_csv, monkeypatch, capsys):
    def _eof(prompt=""):
        raise EOFError
    monkeypatch.setattr(builtins, "input", _eof)
    cli.main(["--data", str(crash_csv)])
    assert "Loaded 3 records" in capsys.readouterr().out
