# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Core front-end types shared by the tree, parser, passes and driver.
"""

from .diagnostics import Diagnostic, DiagnosticSink, ErrorReporter
from .id_gen import IdGenerator
from .span import Span

__all__ = ["Diagnostic", "DiagnosticSink", "ErrorReporter", "IdGenerator", "Span"]
