# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Global identifier resolution.

The grammar parses every name (`$item`, `foo.bar`, `$p.field`) through one
production and the parser emits all of them as `GlobalNode`. This pass walks
each template with its lexical scopes and classifies every GlobalNode:

  * head of the dotted name bound in scope -> VarRefNode (+ FieldAccessNode per
    remaining segment),
  * whole name is a compile-time global    -> IntNode / StringNode,
  * anything else                          -> left as GlobalNode.

Scopes:
  * template params are bound as `$name`,
  * `{let}` is visible to the siblings that follow it (and their children),
  * loop variables are visible in the loop body, not in `{ifempty}`,
  * comprehension variables are visible in the item and filter expressions.

Unresolved names are not errors here; later passes decide what an unresolved
name means in their position (e.g. a call target).
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Union

from stencil.stencilc.core.id_gen import IdGenerator
from stencil.stencilc.tree import nodes as N
from stencil.stencilc.tree.tree_utils import replace_child_exprs

from .pass_manager import CompilerFilePass

Scope = Dict[str, N.VarDefn]
GlobalValue = Union[int, str]


class ResolveGlobalsPass(CompilerFilePass):
	"""Classify GlobalNodes into local references, compile-time constants or true globals."""

	def __init__(self, compile_time_globals: Optional[Mapping[str, GlobalValue]] = None) -> None:
		self.compile_time_globals: Dict[str, GlobalValue] = dict(compile_time_globals or {})

	def run(self, file: N.FileNode, id_gen: IdGenerator) -> None:
		for template in file.templates:
			scope: Scope = {param.ref_name: param for param in template.params}
			self._resolve_block(template.body, scope, id_gen)

	# Commands ------------------------------------------------------------

	def _resolve_block(self, commands: List[N.CommandNode], outer: Scope, id_gen: IdGenerator) -> None:
		scope = dict(outer)
		for cmd in commands:
			if isinstance(cmd, N.LetNode):
				self._resolve_root(cmd.value, scope, id_gen)
				scope[cmd.var.original_name] = cmd.var
			elif isinstance(cmd, N.ForNode):
				self._resolve_root(cmd.list_expr, scope, id_gen)
				loop_scope = dict(scope)
				loop_scope[cmd.nonempty.var.original_name] = cmd.nonempty.var
				if cmd.nonempty.index_var is not None:
					loop_scope[cmd.nonempty.index_var.original_name] = cmd.nonempty.index_var
				self._resolve_block(cmd.nonempty.body, loop_scope, id_gen)
				if cmd.ifempty is not None:
					self._resolve_block(cmd.ifempty.body, scope, id_gen)
			elif isinstance(cmd, N.PrintNode):
				self._resolve_root(cmd.expr, scope, id_gen)
			elif isinstance(cmd, N.CallNode):
				if isinstance(cmd.callee.root, N.GlobalNode):
					# A call target names a template or a local, never a compile-time constant.
					cmd.callee.root = self._classify(cmd.callee.root, scope, id_gen, constants=False)
				else:
					self._resolve_root(cmd.callee, scope, id_gen)
				if cmd.data is not None:
					self._resolve_root(cmd.data, scope, id_gen)
				for param in cmd.params:
					self._resolve_root(param.value, scope, id_gen)
			# Raw text holds no expressions.

	# Expressions ---------------------------------------------------------

	def _resolve_root(self, root: N.ExprRootNode, scope: Scope, id_gen: IdGenerator) -> None:
		root.root = self._resolve_expr(root.root, scope, id_gen)

	def _resolve_expr(self, expr: N.ExprNode, scope: Scope, id_gen: IdGenerator) -> N.ExprNode:
		if isinstance(expr, N.GlobalNode):
			return self._classify(expr, scope, id_gen)
		if isinstance(expr, N.ListComprehensionNode):
			expr.list_expr = self._resolve_expr(expr.list_expr, scope, id_gen)
			inner = dict(scope)
			inner[expr.list_iter_var.original_name] = expr.list_iter_var
			if expr.index_var is not None:
				inner[expr.index_var.original_name] = expr.index_var
			expr.item_expr = self._resolve_expr(expr.item_expr, inner, id_gen)
			if expr.filter_expr is not None:
				expr.filter_expr = self._resolve_expr(expr.filter_expr, inner, id_gen)
			return expr
		replace_child_exprs(expr, lambda child: self._resolve_expr(child, scope, id_gen))
		return expr

	def _classify(
		self,
		node: N.GlobalNode,
		scope: Scope,
		id_gen: IdGenerator,
		*,
		constants: bool = True,
	) -> N.ExprNode:
		head, *segments = node.identifier.text.split(".")
		defn = scope.get(head)
		if defn is not None:
			result: N.ExprNode = _with_id(N.VarRefNode(name=head, defn=defn, span=node.span), id_gen)
			for field_name in segments:
				result = _with_id(N.FieldAccessNode(base=result, field_name=field_name, span=node.span), id_gen)
			return result
		if constants and node.identifier.text in self.compile_time_globals:
			value = self.compile_time_globals[node.identifier.text]
			if isinstance(value, int) and not isinstance(value, bool):
				return _with_id(N.IntNode(value=value, span=node.span), id_gen)
			return _with_id(N.StringNode(value=str(value), span=node.span), id_gen)
		return node


def _with_id(node: N.ExprNode, id_gen: IdGenerator) -> N.ExprNode:
	node.node_id = id_gen.gen_id()
	return node


__all__ = ["GlobalValue", "ResolveGlobalsPass"]
