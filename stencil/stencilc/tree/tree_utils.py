# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generic traversal helpers for the template tree.

Nodes are dataclasses; children are the field values that are nodes or lists of
nodes. Non-node field values (spans, identifiers, variable definitions) are
never descended into.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Callable, Iterator, List, Type, TypeVar

from . import nodes as N

T = TypeVar("T", bound=N.Node)


def iter_child_nodes(node: N.Node) -> Iterator[N.Node]:
	"""Yield the direct children of `node` in field order."""
	if not is_dataclass(node):
		return
	for f in fields(node):
		val = getattr(node, f.name)
		if isinstance(val, N.Node):
			yield val
		elif isinstance(val, list):
			for item in val:
				if isinstance(item, N.Node):
					yield item


def walk(root: N.Node) -> Iterator[N.Node]:
	"""Pre-order walk over `root` and everything below it."""
	stack: List[N.Node] = [root]
	while stack:
		node = stack.pop()
		yield node
		children = list(iter_child_nodes(node))
		stack.extend(reversed(children))


def all_nodes_of_type(root: N.Node, node_type: Type[T]) -> List[T]:
	"""
	Collect every node below (and including) `root` that is a `node_type`.

	Results are in pre-order, which is source order for this tree.
	"""
	return [node for node in walk(root) if isinstance(node, node_type)]


def replace_child_exprs(node: N.Node, fn: Callable[[N.ExprNode], N.ExprNode]) -> None:
	"""
	Replace every direct expression child of `node` with `fn(child)`.

	Single-expression fields are reassigned; list fields are rebuilt in place so
	the owning node keeps the same list object.
	"""
	if not is_dataclass(node):
		return
	for f in fields(node):
		val = getattr(node, f.name)
		if isinstance(val, N.ExprNode):
			setattr(node, f.name, fn(val))
		elif isinstance(val, list) and any(isinstance(item, N.ExprNode) for item in val):
			val[:] = [fn(item) if isinstance(item, N.ExprNode) else item for item in val]


__all__ = ["all_nodes_of_type", "iter_child_nodes", "replace_child_exprs", "walk"]
