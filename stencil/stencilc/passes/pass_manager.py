# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-file compiler passes and their ordering.

A pass is an object with `run(file, id_gen)` that inspects or rewrites one file
tree in place. Passes declare hard ordering dependencies with `@run_after(...)`;
`PassManager` refuses a pass list that would run a pass before one of its
dependencies.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple, Type, TypeVar

from stencil.stencilc.core.id_gen import IdGenerator
from stencil.stencilc.tree import nodes as N


class PassOrderingError(ValueError):
	"""A pass list violates a declared `run_after` dependency (compiler bug, not user error)."""


class CompilerFilePass:
	"""Base class for passes that run once per file tree."""

	# Pass classes that must have run on the same file before this one.
	run_after: Tuple[Type["CompilerFilePass"], ...] = ()

	@property
	def name(self) -> str:
		return type(self).__name__

	def run(self, file: N.FileNode, id_gen: IdGenerator) -> None:
		raise NotImplementedError


_PassT = TypeVar("_PassT", bound=Type[CompilerFilePass])


def run_after(*deps: Type[CompilerFilePass]) -> Callable[[_PassT], _PassT]:
	"""Class decorator declaring that the decorated pass must run after `deps`."""

	def wrap(cls: _PassT) -> _PassT:
		cls.run_after = tuple(deps)
		return cls

	return wrap


class PassManager:
	"""Runs an ordered list of file passes, checking declared dependencies up front."""

	def __init__(self, passes: Sequence[CompilerFilePass]) -> None:
		self.passes: List[CompilerFilePass] = list(passes)
		self._check_ordering()

	def _check_ordering(self) -> None:
		for idx, file_pass in enumerate(self.passes):
			earlier = self.passes[:idx]
			for dep in type(file_pass).run_after:
				if not any(isinstance(prev, dep) for prev in earlier):
					raise PassOrderingError(f"{file_pass.name} must run after {dep.__name__}")

	def run_file(self, file: N.FileNode, id_gen: IdGenerator) -> None:
		for file_pass in self.passes:
			file_pass.run(file, id_gen)


__all__ = ["CompilerFilePass", "PassManager", "PassOrderingError", "run_after"]
