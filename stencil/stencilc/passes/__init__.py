# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-file front-end passes.

Default order (see `default_passes`):
  ResolveGlobalsPass -> RestoreCompilerChecksPass
"""

from __future__ import annotations

from typing import List, Mapping, Optional

from stencil.stencilc.core.diagnostics import ErrorReporter

from .pass_manager import CompilerFilePass, PassManager, PassOrderingError, run_after
from .resolve_globals import GlobalValue, ResolveGlobalsPass
from .restore_compiler_checks import (
	DATA_ATTRIBUTE_ONLY_ALLOWED_ON_STATIC_CALLS,
	MUST_BE_CONSTANT,
	MUST_BE_DOLLAR_IDENT,
	RestoreCompilerChecksPass,
)


def default_passes(
	error_reporter: ErrorReporter,
	*,
	compile_time_globals: Optional[Mapping[str, GlobalValue]] = None,
) -> List[CompilerFilePass]:
	"""The front-end pass list, in dependency order."""
	return [
		ResolveGlobalsPass(compile_time_globals),
		RestoreCompilerChecksPass(error_reporter),
	]


__all__ = [
	"CompilerFilePass",
	"DATA_ATTRIBUTE_ONLY_ALLOWED_ON_STATIC_CALLS",
	"GlobalValue",
	"MUST_BE_CONSTANT",
	"MUST_BE_DOLLAR_IDENT",
	"PassManager",
	"PassOrderingError",
	"ResolveGlobalsPass",
	"RestoreCompilerChecksPass",
	"default_passes",
	"run_after",
]
