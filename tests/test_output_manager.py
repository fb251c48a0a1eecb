"""Tests for OutputManager -- format selection, stdout/stderr split, verbosity."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import BaseModel

from cordkit.output import (
    OutputFormat,
    OutputManager,
    debug,
    get_output,
    reset_output,
    set_output,
    to_jsonable,
)


class _Thing(BaseModel):
    id: int
    name: str


class TestFormats:
    def test_auto_without_tty_is_plain(self) -> None:
        # pytest captures stdout, so it is never a TTY here.
        assert OutputManager().format == OutputFormat.PLAIN

    def test_json_response(self, json_output: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        json_output.format_response(_Thing(id=1, name="a"))
        assert json.loads(capsys.readouterr().out) == {"id": 1, "name": "a"}

    def test_plain_dict(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response({"id": 1, "tags": ["x"], "gone": None})
        assert capsys.readouterr().out.splitlines() == ["id\t1", 'tags\t["x"]', "gone\t"]

    def test_plain_list_of_models(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response([_Thing(id=1, name="a"), _Thing(id=2, name="b")])
        assert capsys.readouterr().out.splitlines() == ["1\ta", "2\tb"]

    def test_output_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        target = tmp_path / "out.json"
        OutputManager(format=OutputFormat.PLAIN, output_file=str(target)).format_response({"a": 1})
        assert json.loads(target.read_text()) == {"a": 1}
        assert capsys.readouterr().out == ""


class TestTables:
    def test_json_table(self, json_output: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        json_output.print_table(["ID", "Name"], [["1", "a"], ["2", "b"]])
        assert json.loads(capsys.readouterr().out) == [{"ID": "1", "Name": "a"}, {"ID": "2", "Name": "b"}]

    def test_plain_table_is_tsv(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_table(["ID", "Name"], [["1", "a"]])
        assert capsys.readouterr().out == "ID\tName\n1\ta\n"


class TestDiagnostics:
    def _manager(self, **kwargs) -> OutputManager:
        return OutputManager(format=OutputFormat.PLAIN, no_color=True, **kwargs)

    def test_messages_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = self._manager()
        out.info("hello")
        out.warning("careful")
        out.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.splitlines() == ["hello", "Warning: careful", "Error: broken"]

    def test_quiet_keeps_warnings_and_errors(self, capsys: pytest.CaptureFixture[str]) -> None:
        out = self._manager(quiet=True)
        out.info("hello")
        out.success("done")
        out.warning("careful")
        out.error("broken")
        assert capsys.readouterr().err.splitlines() == ["Warning: careful", "Error: broken"]

    def test_debug_only_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        self._manager().debug("hidden")
        self._manager(verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        OutputManager(format=OutputFormat.PLAIN).error("plain")
        assert capsys.readouterr().err == "Error: plain\n"


class TestGlobalInstance:
    def test_set_and_reset(self) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager

    def test_module_debug_uses_installed_manager(
        self, verbose_output: OutputManager, capsys: pytest.CaptureFixture[str]
    ) -> None:
        debug("retrying")
        assert "[debug] retrying" in capsys.readouterr().err


def test_to_jsonable() -> None:
    assert to_jsonable((_Thing(id=1, name="a"), 2)) == [{"id": 1, "name": "a"}, 2]
    assert to_jsonable("x") == "x"
