# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
stencilc driver: parse template files and run the per-file front-end passes.

Pipeline per file:
  source -> parser (lark) -> ResolveGlobalsPass -> RestoreCompilerChecksPass

Each file gets its own IdGenerator and DiagnosticSink; files never share tree
state, so they can be compiled independently.

CLI:
  python -m stencil.stencilc FILE... [--json] [--global NAME=VALUE]... [--globals-file PATH]

Human-readable diagnostics go to stderr as `path:line:col: severity: message`.
With `--json` a single `{"exit_code": N, "diagnostics": [...]}` object is
printed to stdout. The exit code is 1 when any error was reported.
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from stencil.stencilc.core.diagnostics import Diagnostic, DiagnosticSink
from stencil.stencilc.core.id_gen import IdGenerator
from stencil.stencilc.core.span import Span
from stencil.stencilc.parser import parse_stencil_source
from stencil.stencilc.passes import GlobalValue, PassManager, default_passes
from stencil.stencilc.tree import nodes as N

PASSES_PHASE = "passes"
CONFIG_PHASE = "config"

_GLOBAL_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*(\.[A-Za-z_][A-Za-z_0-9]*)*$")
_INT_RE = re.compile(r"^-?[0-9]+$")


class GlobalsFileError(ValueError):
	"""
	Malformed compile-time global definition.

	Raised by the globals loaders; the CLI converts it into a config-phase
	diagnostic pinned to `line` when known.
	"""

	def __init__(self, message: str, *, path: Optional[str] = None, line: Optional[int] = None) -> None:
		super().__init__(message)
		self.path = path
		self.line = line


@dataclass
class CompileResult:
	"""Outcome of compiling one file; `file` is None when parsing failed."""

	file: Optional[N.FileNode]
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self.diagnostics)


def parse_global_value(raw: str) -> GlobalValue:
	"""
	Interpret the right-hand side of a global definition.

	Integers become ints, `'quoted'` text loses its quotes, anything else is
	kept as a plain string.
	"""
	text = raw.strip()
	if _INT_RE.match(text):
		return int(text)
	if len(text) >= 2 and text[0] == text[-1] == "'":
		return text[1:-1]
	return text


def parse_global_assignment(text: str, *, path: Optional[str] = None, line: Optional[int] = None) -> tuple[str, GlobalValue]:
	"""Split `NAME = value` into its name and parsed value."""
	name, sep, value = text.partition("=")
	name = name.strip()
	if not sep or not _GLOBAL_NAME_RE.match(name) or not value.strip():
		raise GlobalsFileError(f"expected NAME = value, got {text.strip()!r}", path=path, line=line)
	return name, parse_global_value(value)


def load_globals_file(path: Path) -> Dict[str, GlobalValue]:
	"""
	Load compile-time globals from a `NAME = value` per line file.

	Blank lines and `//` comment lines are skipped. Later definitions of the
	same name win.
	"""
	values: Dict[str, GlobalValue] = {}
	for lineno, raw_line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
		line = raw_line.strip()
		if not line or line.startswith("//"):
			continue
		name, value = parse_global_assignment(line, path=str(path), line=lineno)
		values[name] = value
	return values


def compile_source(
	source: str,
	*,
	path: Optional[str] = None,
	compile_time_globals: Optional[Mapping[str, GlobalValue]] = None,
) -> CompileResult:
	"""Parse `source` and run the default pass list over the resulting tree."""
	id_gen = IdGenerator()
	file_node, diagnostics = parse_stencil_source(source, path=path, id_gen=id_gen)
	if file_node is None:
		return CompileResult(file=None, diagnostics=diagnostics)
	sink = DiagnosticSink(phase=PASSES_PHASE)
	manager = PassManager(default_passes(sink, compile_time_globals=compile_time_globals))
	manager.run_file(file_node, id_gen)
	return CompileResult(file=file_node, diagnostics=diagnostics + sink.diagnostics)


def compile_file(
	path: Path,
	*,
	compile_time_globals: Optional[Mapping[str, GlobalValue]] = None,
) -> CompileResult:
	"""Read and compile one template file."""
	source = path.read_text(encoding="utf-8")
	return compile_source(source, path=str(path), compile_time_globals=compile_time_globals)


def _diag_to_json(diag: Diagnostic, phase: str, source: Optional[Path]) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	file = getattr(diag.span, "file", None)
	if file is None and source is not None:
		file = str(source)
	return {
		"phase": diag.phase or phase,
		"message": diag.message,
		"severity": diag.severity,
		"file": file,
		"line": getattr(diag.span, "line", None),
		"column": getattr(diag.span, "column", None),
		"notes": list(diag.notes),
	}


def _emit(diagnostics: List[Diagnostic], *, as_json: bool, exit_code: int) -> None:
	if as_json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [_diag_to_json(d, PASSES_PHASE, None) for d in diagnostics],
		}
		print(json.dumps(payload))
		return
	for d in diagnostics:
		line = "?" if d.span.line is None else d.span.line
		column = "?" if d.span.column is None else d.span.column
		print(f"{d.span.file or '<unknown>'}:{line}:{column}: {d.severity}: {d.message}", file=sys.stderr)


def _config_diagnostic(message: str, *, path: Optional[str] = None, line: Optional[int] = None) -> Diagnostic:
	return Diagnostic(message=message, phase=CONFIG_PHASE, severity="error", span=Span(file=path, line=line))


def main(argv: list[str] | None = None) -> int:
	"""
	Check template files: parse, resolve globals, restore compatibility checks.

	Returns the process exit code (0 = clean, 1 = errors reported).
	"""
	parser = argparse.ArgumentParser(description="Stencil template front-end checker")
	parser.add_argument("files", nargs="+", type=Path, help="template files to check")
	parser.add_argument("--json", action="store_true", help="emit diagnostics as JSON on stdout")
	parser.add_argument(
		"--global",
		dest="globals",
		action="append",
		default=[],
		metavar="NAME=VALUE",
		help="define a compile-time global (repeatable)",
	)
	parser.add_argument("--globals-file", type=Path, help="file of NAME = value compile-time globals")
	args = parser.parse_args(argv)

	config_diags: List[Diagnostic] = []
	compile_time_globals: Dict[str, GlobalValue] = {}
	if args.globals_file is not None:
		try:
			compile_time_globals.update(load_globals_file(args.globals_file))
		except GlobalsFileError as err:
			config_diags.append(_config_diagnostic(str(err), path=err.path, line=err.line))
		except OSError as err:
			config_diags.append(_config_diagnostic(f"cannot read globals file: {err}", path=str(args.globals_file)))
	# Command-line definitions override the globals file.
	for item in args.globals:
		try:
			name, value = parse_global_assignment(item)
		except GlobalsFileError as err:
			config_diags.append(_config_diagnostic(str(err)))
			continue
		compile_time_globals[name] = value
	if config_diags:
		_emit(config_diags, as_json=args.json, exit_code=1)
		return 1

	diagnostics: List[Diagnostic] = []
	for path in args.files:
		try:
			result = compile_file(path, compile_time_globals=compile_time_globals)
		except OSError as err:
			diagnostics.append(_config_diagnostic(f"cannot read template file: {err}", path=str(path)))
			continue
		diagnostics.extend(result.diagnostics)

	exit_code = 1 if any(d.severity == "error" for d in diagnostics) else 0
	_emit(diagnostics, as_json=args.json, exit_code=exit_code)
	return exit_code


__all__ = [
	"CompileResult",
	"GlobalsFileError",
	"compile_file",
	"compile_source",
	"load_globals_file",
	"main",
	"parse_global_assignment",
	"parse_global_value",
]
