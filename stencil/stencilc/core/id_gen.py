# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Node id generation.

One IdGenerator is created per file; the parser draws ids from it for every
node it builds and passes that synthesize nodes draw from the same generator,
so ids stay unique within a file tree.
"""

from __future__ import annotations


class IdGenerator:
	"""Hands out increasing integer ids starting at `start`."""

	def __init__(self, start: int = 1) -> None:
		self._next_id = start

	def gen_id(self) -> int:
		node_id = self._next_id
		self._next_id += 1
		return node_id

	def peek(self) -> int:
		"""Return the id the next `gen_id()` call will produce."""
		return self._next_id


__all__ = ["IdGenerator"]
