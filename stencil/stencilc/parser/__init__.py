# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser adapter: template source -> template tree plus parser diagnostics.

The lark grammar lives in `grammar.lark`; `parser.parse_source` raises on
malformed input. The helpers here turn those exceptions into pinned
parser-phase diagnostics so the driver never sees a raw lark error.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from . import parser as _parser
from stencil.stencilc.core.diagnostics import Diagnostic
from stencil.stencilc.core.id_gen import IdGenerator
from stencil.stencilc.core.span import Span
from stencil.stencilc.tree import nodes as N

PARSER_PHASE = "parser"


def _parse_error_message(err: UnexpectedInput) -> str:
	"""One-line description of a lark parse error."""
	if isinstance(err, UnexpectedToken):
		if err.token.type == "$END":
			return "unexpected end of input"
		return f"unexpected {err.token.value!r}"
	if isinstance(err, UnexpectedCharacters):
		return f"unexpected character {err.char!r}"
	if isinstance(err, UnexpectedEOF):
		return "unexpected end of input"
	return str(err).strip().splitlines()[0]


def parse_stencil_source(
	source: str,
	*,
	path: Optional[str] = None,
	id_gen: Optional[IdGenerator] = None,
) -> Tuple[Optional[N.FileNode], List[Diagnostic]]:
	"""
	Parse template source text.

	Returns `(file, diagnostics)`; `file` is None when parsing failed.
	"""
	try:
		file_node = _parser.parse_source(source, path=path, id_gen=id_gen)
	except UnexpectedInput as err:
		span = Span(
			file=path,
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
			raw=err,
		)
		return None, [Diagnostic(message=_parse_error_message(err), phase=PARSER_PHASE, severity="error", span=span)]
	return file_node, []


def parse_stencil_file(
	path: Path,
	*,
	id_gen: Optional[IdGenerator] = None,
) -> Tuple[Optional[N.FileNode], List[Diagnostic]]:
	"""Read and parse one template file."""
	source = path.read_text(encoding="utf-8")
	return parse_stencil_source(source, path=str(path), id_gen=id_gen)


__all__ = ["PARSER_PHASE", "parse_stencil_file", "parse_stencil_source"]
