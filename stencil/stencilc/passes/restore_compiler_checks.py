# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Compatibility restoration pass.

Once `$`-prefixed variable references and bare global names became a single
grammar production, the parser stopped enforcing a few rules that used to be
syntactic. This pass puts them back at the tree level, once per file:

  1. call targets that are still GlobalNodes become (synthetic) template
     literals;
  2. `data="..."` is only accepted on static calls;
  3. `let`, loop and list-comprehension variables must start with `$`;
  4. `ve(...)` names must be constants, never `$` names.

Step 2 reads the result of step 1 (a rewritten callee makes the call static),
so 1 -> 2 must stay ordered if the steps are ever split up or run
concurrently. Steps 3 and 4 are independent of everything else.

Every problem is reported through the ErrorReporter and scanning continues;
the pass itself never raises for user errors.
"""

from __future__ import annotations

from stencil.stencilc.core.diagnostics import ErrorReporter
from stencil.stencilc.core.id_gen import IdGenerator
from stencil.stencilc.tree import nodes as N
from stencil.stencilc.tree.tree_utils import all_nodes_of_type

from .pass_manager import CompilerFilePass, run_after
from .resolve_globals import ResolveGlobalsPass

DATA_ATTRIBUTE_ONLY_ALLOWED_ON_STATIC_CALLS = "The data attribute is only allowed on static calls."
MUST_BE_DOLLAR_IDENT = "Name must begin with a '$'."
MUST_BE_CONSTANT = "Expected constant identifier."


@run_after(ResolveGlobalsPass)
class RestoreCompilerChecksPass(CompilerFilePass):
	"""Re-establish the call-target, data-attribute and sigil rules on one file tree."""

	def __init__(self, error_reporter: ErrorReporter) -> None:
		self.error_reporter = error_reporter

	def run(self, file: N.FileNode, id_gen: IdGenerator) -> None:
		self._rewrite_global_callees(file)
		self._check_data_attributes(file)
		self._check_local_var_names(file)
		self._check_ve_literal_names(file)

	def _rewrite_global_callees(self, file: N.FileNode) -> None:
		# Unresolved names in call position are template names. The parser used
		# to build these literals directly; now it can only happen after globals
		# are resolved.
		for call in all_nodes_of_type(file, N.CallNode):
			global_node = call.callee.root
			if not isinstance(global_node, N.GlobalNode):
				continue
			literal = N.TemplateLiteralNode(
				identifier=global_node.identifier,
				span=global_node.span,
				is_synthetic=True,
			)
			literal.node_id = global_node.node_id
			callee = N.ExprRootNode(root=literal)
			callee.node_id = call.callee.node_id
			call.set_callee_expr(callee)

	def _check_data_attributes(self, file: N.FileNode) -> None:
		for call in all_nodes_of_type(file, N.CallNode):
			if call.is_passing_data and not call.is_static_call:
				self.error_reporter.report(call.open_tag_span, DATA_ATTRIBUTE_ONLY_ALLOWED_ON_STATIC_CALLS)

	def _check_local_var_names(self, file: N.FileNode) -> None:
		for let_node in all_nodes_of_type(file, N.LetNode):
			self._check_dollar_ident(let_node.var)
		for nonempty in all_nodes_of_type(file, N.ForNonemptyNode):
			self._check_dollar_ident(nonempty.var)
			if nonempty.index_var is not None:
				self._check_dollar_ident(nonempty.index_var)
		for comprehension in all_nodes_of_type(file, N.ListComprehensionNode):
			self._check_dollar_ident(comprehension.list_iter_var)
			if comprehension.index_var is not None:
				self._check_dollar_ident(comprehension.index_var)

	def _check_ve_literal_names(self, file: N.FileNode) -> None:
		# `ve($x)` parses now that `$x` is an ordinary name, but a visual
		# element must be named by a constant.
		for ve_node in all_nodes_of_type(file, N.VeLiteralNode):
			if ve_node.name.text.startswith(N.LOCAL_SIGIL):
				self.error_reporter.report(ve_node.name.span, MUST_BE_CONSTANT)

	def _check_dollar_ident(self, local_var: N.LocalVarDefn) -> None:
		if not local_var.original_name.startswith(N.LOCAL_SIGIL):
			self.error_reporter.report(local_var.name_span, MUST_BE_DOLLAR_IDENT)


__all__ = [
	"DATA_ATTRIBUTE_ONLY_ALLOWED_ON_STATIC_CALLS",
	"MUST_BE_CONSTANT",
	"MUST_BE_DOLLAR_IDENT",
	"RestoreCompilerChecksPass",
]
