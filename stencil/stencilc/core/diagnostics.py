# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for parser/pass/driver phases.

Passes never build Diagnostic objects themselves: they only see the narrow
`ErrorReporter` contract (`report(span, message)`). `DiagnosticSink` is the
reporter the driver hands out; it records one Diagnostic per report, tagged with
the phase it was created for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Optional diagnostic phase label ("parser", "passes", "config").
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so downstream tooling
		# can rely on a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


class ErrorReporter(Protocol):
	"""Reporting contract consumed by compiler passes."""

	def report(self, span: Span, message: str) -> None:
		...


class DiagnosticSink:
	"""
	Accumulating ErrorReporter.

	Every `report` call appends exactly one Diagnostic; nothing is merged or
	deduplicated, so callers see violations in the order they were found.
	"""

	def __init__(self, phase: Optional[str] = None, *, severity: str = "error") -> None:
		self.phase = phase
		self.severity = severity
		self.diagnostics: List[Diagnostic] = []

	def report(self, span: Span, message: str) -> None:
		self.diagnostics.append(
			Diagnostic(message=message, phase=self.phase, severity=self.severity, span=span)
		)

	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self.diagnostics)

	def messages(self) -> List[str]:
		return [d.message for d in self.diagnostics]


__all__ = ["Diagnostic", "DiagnosticSink", "ErrorReporter"]
