# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from stencil.stencilc import tree as T
from stencil.stencilc.passes import (
	DATA_ATTRIBUTE_ONLY_ALLOWED_ON_STATIC_CALLS,
	MUST_BE_CONSTANT,
	MUST_BE_DOLLAR_IDENT,
)
from stencil.stencilc.stencilc import (
	GlobalsFileError,
	compile_source,
	load_globals_file,
	main as stencilc_main,
	parse_global_assignment,
	parse_global_value,
)

CLEAN_SRC = """{namespace demo}
{template demo.main}
	{@param items: list}
	{for $item in $items}
		{call demo.row data="$item" /}
	{/for}
{/template}
"""

BROKEN_SRC = """{template demo.broken}
	{@param tpl: string}
	{let x: 1 /}
	{call $tpl data="all" /}
	{print ve($marker)}
{/template}
"""


def _write_file(path: Path, content: str) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(content)
	return path


def _run_stencilc_json(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, dict]:
	rc = stencilc_main(argv + ["--json"])
	out = capsys.readouterr().out
	payload = json.loads(out) if out.strip() else {}
	return rc, payload


def test_clean_file_exits_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "main.stencil", CLEAN_SRC)
	rc, payload = _run_stencilc_json([str(src)], capsys)
	assert rc == 0, payload
	assert payload == {"exit_code": 0, "diagnostics": []}


def test_broken_file_reports_every_check(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "broken.stencil", BROKEN_SRC)
	rc, payload = _run_stencilc_json([str(src)], capsys)
	assert rc == 1
	assert payload["exit_code"] == 1
	diags = payload["diagnostics"]
	assert [d["message"] for d in diags] == [
		DATA_ATTRIBUTE_ONLY_ALLOWED_ON_STATIC_CALLS,
		MUST_BE_DOLLAR_IDENT,
		MUST_BE_CONSTANT,
	]
	assert [(d["line"], d["column"]) for d in diags] == [(4, 2), (3, 7), (5, 12)]
	assert all(d["phase"] == "passes" for d in diags)
	assert all(d["file"] == str(src) for d in diags)


def test_human_output_goes_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "broken.stencil", BROKEN_SRC)
	rc = stencilc_main([str(src)])
	captured = capsys.readouterr()
	assert rc == 1
	assert captured.out == ""
	lines = captured.err.splitlines()
	assert f"{src}:3:7: error: {MUST_BE_DOLLAR_IDENT}" in lines
	assert len(lines) == 3


def test_parse_error_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "bad.stencil", "{template t}\n{let $x /}\n{/template}\n")
	rc, payload = _run_stencilc_json([str(src)], capsys)
	assert rc == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "parser"
	assert diag["line"] == 2


def test_multiple_files_are_checked_independently(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	clean = _write_file(tmp_path / "a.stencil", CLEAN_SRC)
	broken = _write_file(tmp_path / "b.stencil", BROKEN_SRC)
	rc, payload = _run_stencilc_json([str(clean), str(broken)], capsys)
	assert rc == 1
	assert {d["file"] for d in payload["diagnostics"]} == {str(broken)}


def test_missing_file_is_a_diagnostic(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	rc, payload = _run_stencilc_json([str(tmp_path / "nope.stencil")], capsys)
	assert rc == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "config"
	assert "cannot read template file" in diag["message"]


def test_global_flag_folds_constants(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "g.stencil", "{template t}{print app.LIMIT}{/template}\n")
	rc, payload = _run_stencilc_json([str(src), "--global", "app.LIMIT=10"], capsys)
	assert rc == 0, payload
	result = compile_source(src.read_text(), compile_time_globals={"app.LIMIT": 10})
	(cmd,) = result.file.templates[0].body
	assert isinstance(cmd.expr.root, T.IntNode)
	assert cmd.expr.root.value == 10


def test_globals_file_is_loaded(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	globals_path = _write_file(
		tmp_path / "globals.txt",
		"// site settings\n\napp.TITLE = 'Hello there'\napp.LIMIT = 5\n",
	)
	assert load_globals_file(globals_path) == {"app.TITLE": "Hello there", "app.LIMIT": 5}
	src = _write_file(tmp_path / "g.stencil", "{template t}{print app.TITLE}{/template}\n")
	rc, payload = _run_stencilc_json([str(src), "--globals-file", str(globals_path)], capsys)
	assert rc == 0, payload


def test_malformed_globals_file_is_a_config_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	globals_path = _write_file(tmp_path / "globals.txt", "app.OK = 1\nthis is not valid\n")
	src = _write_file(tmp_path / "g.stencil", CLEAN_SRC)
	rc, payload = _run_stencilc_json([str(src), "--globals-file", str(globals_path)], capsys)
	assert rc == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "config"
	assert diag["file"] == str(globals_path)
	assert diag["line"] == 2


def test_bad_global_flag_is_a_config_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "g.stencil", CLEAN_SRC)
	rc, payload = _run_stencilc_json([str(src), "--global", "NOVALUE"], capsys)
	assert rc == 1
	assert payload["diagnostics"][0]["phase"] == "config"


def test_global_value_parsing() -> None:
	assert parse_global_value(" 42 ") == 42
	assert parse_global_value("-3") == -3
	assert parse_global_value("'quoted text'") == "quoted text"
	assert parse_global_value("bare") == "bare"
	assert parse_global_assignment("a.b=1") == ("a.b", 1)
	with pytest.raises(GlobalsFileError):
		parse_global_assignment("1bad = 2")
	with pytest.raises(GlobalsFileError):
		parse_global_assignment("name =")


def test_compile_source_result_flags_errors() -> None:
	result = compile_source(BROKEN_SRC, path="inline.stencil")
	assert result.has_errors
	assert result.file is not None
	failed = compile_source("{template t}", path="inline.stencil")
	assert failed.file is None
	assert failed.has_errors
