# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation used by tree nodes and diagnostics.

A Span carries best-effort file/line/column info plus the raw parser location
object (a lark Token or Meta) it was built from, when there is one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = field(default=None, compare=False)

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from an existing parser/location object.

		If `loc` is already a Span, it is returned unchanged; otherwise the
		parser-specific object is stored in `raw`.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	@classmethod
	def covering(cls, first: "Span", last: "Span") -> "Span":
		"""Span from the start of `first` to the end of `last` (same file)."""
		return cls(
			file=first.file,
			line=first.line,
			column=first.column,
			end_line=last.end_line,
			end_column=last.end_column,
		)

	def __str__(self) -> str:
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{self.file or '<unknown>'}:{line}:{column}"


__all__ = ["Span"]
