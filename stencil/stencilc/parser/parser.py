# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark-based parser for Stencil template files.

`parse_source` runs the grammar in `grammar.lark` and builds the template tree
(`stencil.stencilc.tree`) from the lark parse tree. Every tree node receives a
fresh id from the file's IdGenerator.

Parse errors surface as `lark.exceptions.UnexpectedInput`; the package-level
helpers convert them into parser diagnostics.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, TypeVar

from lark import Lark, Token, Tree

from stencil.stencilc.core.id_gen import IdGenerator
from stencil.stencilc.core.span import Span
from stencil.stencilc.tree import nodes as N

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

# Keyword-looking words (`in`, `for`, `data`, ...) are only keywords where the
# grammar expects them; the contextual lexer keeps them usable as names
# elsewhere.
_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

# `data="all"` passes the caller's whole data record rather than an expression.
_PASS_ALL_DATA = "all"

_NodeT = TypeVar("_NodeT", bound=N.Node)


def parse_source(source: str, *, path: Optional[str] = None, id_gen: Optional[IdGenerator] = None) -> N.FileNode:
	"""Parse one template file's source into a FileNode."""
	tree = _PARSER.parse(source)
	return _TreeBuilder(path=path, id_gen=id_gen or IdGenerator()).build_file(tree)


class _TreeBuilder:
	"""Builds template tree nodes from a lark parse tree for one file."""

	def __init__(self, *, path: Optional[str], id_gen: IdGenerator) -> None:
		self._path = path
		self._id_gen = id_gen

	def _node(self, node: _NodeT) -> _NodeT:
		node.node_id = self._id_gen.gen_id()
		return node

	# Locations -----------------------------------------------------------

	def _span_tok(self, tok: Token) -> Span:
		return Span.from_loc(tok, file=self._path)

	def _span_tree(self, tree: Tree) -> Span:
		meta = tree.meta
		if getattr(meta, "empty", True):
			return Span(file=self._path)
		return Span(
			file=self._path,
			line=meta.line,
			column=meta.column,
			end_line=meta.end_line,
			end_column=meta.end_column,
		)

	# File / template -----------------------------------------------------

	def build_file(self, tree: Tree) -> N.FileNode:
		namespace: Optional[str] = None
		templates: List[N.TemplateNode] = []
		for child in tree.children:
			kind = _name(child)
			if kind == "namespace_decl":
				namespace = self._identifier(child.children[0]).text
			elif kind == "template_def":
				templates.append(self._build_template(child))
			else:
				raise TypeError(f"Unexpected top-level node: {kind}")
		file_node = N.FileNode(templates=templates, namespace=namespace, path=self._path, span=self._span_tree(tree))
		return self._node(file_node)

	def _build_template(self, tree: Tree) -> N.TemplateNode:
		name_node = next(c for c in tree.children if isinstance(c, Tree) and _name(c) == "dotted_name")
		params = [self._build_param(c) for c in tree.children if isinstance(c, Tree) and _name(c) == "param_decl"]
		block = next(c for c in tree.children if isinstance(c, Tree) and _name(c) == "block")
		template = N.TemplateNode(
			name=self._identifier(name_node),
			params=params,
			body=self._build_block(block),
			span=self._span_tree(tree),
		)
		return self._node(template)

	def _build_param(self, tree: Tree) -> N.TemplateParam:
		name_tok, type_tok = _tokens(tree, "NAME")
		return N.TemplateParam(name=name_tok.value, type_name=type_tok.value, span=self._span_tok(name_tok))

	def _build_block(self, tree: Tree) -> List[N.CommandNode]:
		return [self._build_command(child) for child in tree.children]

	# Commands ------------------------------------------------------------

	def _build_command(self, tree: Tree) -> N.CommandNode:
		kind = _name(tree)
		if kind == "raw_text":
			tok = tree.children[0]
			return self._node(N.RawTextNode(text=tok.value, span=self._span_tok(tok)))
		if kind == "print_cmd":
			expr_node = _trees(tree)[0]
			return self._node(N.PrintNode(expr=self._root(expr_node), span=self._span_tree(tree)))
		if kind == "let_cmd":
			return self._build_let(tree)
		if kind == "for_cmd":
			return self._build_for(tree)
		if kind == "call_cmd":
			return self._build_call(tree)
		raise TypeError(f"Unexpected command node: {kind}")

	def _build_let(self, tree: Tree) -> N.LetNode:
		(name_tok,) = _tokens(tree, "NAME")
		var = N.LocalVarDefn(original_name=name_tok.value, name_span=self._span_tok(name_tok), kind=N.LocalVarKind.LET)
		value = self._root(_trees(tree)[0])
		return self._node(N.LetNode(var=var, value=value, span=self._span_tree(tree)))

	def _build_for(self, tree: Tree) -> N.ForNode:
		# for_cmd: FOR_OPEN NAME ("," NAME)? "in" expr "}" block ifempty_block? "{/for}"
		name_toks = _tokens(tree, "NAME")
		subtrees = _trees(tree)
		list_expr_node = subtrees[0]
		block = subtrees[1]
		var = N.LocalVarDefn(
			original_name=name_toks[0].value,
			name_span=self._span_tok(name_toks[0]),
			kind=N.LocalVarKind.FOR_ITEM,
		)
		index_var = None
		if len(name_toks) > 1:
			index_var = N.LocalVarDefn(
				original_name=name_toks[1].value,
				name_span=self._span_tok(name_toks[1]),
				kind=N.LocalVarKind.FOR_INDEX,
			)
		nonempty = N.ForNonemptyNode(
			var=var,
			body=self._build_block(block),
			index_var=index_var,
			span=self._span_tree(block),
		)
		ifempty = None
		if len(subtrees) > 2:
			ifempty_tree = subtrees[2]
			ifempty_block = _trees(ifempty_tree)[0]
			ifempty = self._node(
				N.ForIfemptyNode(body=self._build_block(ifempty_block), span=self._span_tree(ifempty_tree))
			)
		for_node = N.ForNode(
			list_expr=self._root(list_expr_node),
			nonempty=self._node(nonempty),
			ifempty=ifempty,
			span=self._span_tree(tree),
		)
		return self._node(for_node)

	def _build_call(self, tree: Tree) -> N.CallNode:
		# call_cmd: CALL_OPEN expr data_attr? ("/}" | "}" call_param* "{/call}")
		(open_tok,) = _tokens(tree, "CALL_OPEN")
		subtrees = _trees(tree)
		callee = self._root(subtrees[0])
		data: Optional[N.ExprRootNode] = None
		passing_all = False
		params: List[N.CallParamNode] = []
		for child in subtrees[1:]:
			kind = _name(child)
			if kind == "data_attr":
				data_node = _trees(child)[0]
				if _is_bare_name(data_node, _PASS_ALL_DATA):
					passing_all = True
				else:
					data = self._root(data_node)
			elif kind == "call_param":
				params.append(self._build_call_param(child))
			else:
				raise TypeError(f"Unexpected call child: {kind}")
		call = N.CallNode(
			callee=callee,
			open_tag_span=self._span_tok(open_tok),
			data=data,
			is_passing_all_data=passing_all,
			params=params,
			span=self._span_tree(tree),
		)
		return self._node(call)

	def _build_call_param(self, tree: Tree) -> N.CallParamNode:
		(key_tok,) = _tokens(tree, "NAME")
		value = self._root(_trees(tree)[0])
		return self._node(N.CallParamNode(key=key_tok.value, value=value, span=self._span_tree(tree)))

	# Expressions ---------------------------------------------------------

	def _root(self, tree: Tree) -> N.ExprRootNode:
		return self._node(N.ExprRootNode(root=self._build_expr(tree)))

	def _identifier(self, tree: Tree) -> N.Identifier:
		toks = _tokens(tree, "NAME")
		span = Span.covering(self._span_tok(toks[0]), self._span_tok(toks[-1]))
		return N.Identifier(text=".".join(tok.value for tok in toks), span=span)

	def _build_expr(self, tree: Tree) -> N.ExprNode:
		if not isinstance(tree, Tree):
			raise TypeError(f"Unexpected expression node: {tree!r}")
		kind = _name(tree)
		expr: N.ExprNode
		if kind == "name_ref":
			ident = self._identifier(tree.children[0])
			expr = N.GlobalNode(identifier=ident, span=ident.span)
		elif kind == "int_lit":
			expr = N.IntNode(value=int(tree.children[0].value), span=self._span_tree(tree))
		elif kind == "string_lit":
			expr = N.StringNode(value=tree.children[0].value[1:-1], span=self._span_tree(tree))
		elif kind == "ve_literal":
			name_node = next(c for c in tree.children if isinstance(c, Tree))
			expr = N.VeLiteralNode(name=self._identifier(name_node), span=self._span_tree(tree))
		elif kind == "function_call":
			(name_tok,) = _tokens(tree, "NAME")
			args = [self._build_expr(c) for c in _trees(tree)]
			expr = N.FunctionCallNode(name=name_tok.value, args=args, span=self._span_tree(tree))
		elif kind == "list_literal":
			items = [self._build_expr(c) for c in _trees(tree)]
			expr = N.ListLiteralNode(items=items, span=self._span_tree(tree))
		elif kind == "list_comprehension":
			return self._build_list_comprehension(tree)
		elif kind in {"comparison", "sum", "product"}:
			return self._fold_binary(tree)
		else:
			raise TypeError(f"Unexpected expression node: {kind}")
		return self._node(expr)

	def _build_list_comprehension(self, tree: Tree) -> N.ListComprehensionNode:
		# "[" expr "for" NAME ("," NAME)? "in" expr ("if" expr)? "]"
		# The item expression is the only subtree before the loop variables.
		item_node: Optional[Tree] = None
		name_toks: List[Token] = []
		trailing: List[Tree] = []
		for child in tree.children:
			if isinstance(child, Token):
				name_toks.append(child)
			elif item_node is None:
				item_node = child
			else:
				trailing.append(child)
		if item_node is None or not name_toks or not trailing:
			raise TypeError(f"Malformed list comprehension: {tree.children!r}")
		list_iter_var = N.LocalVarDefn(
			original_name=name_toks[0].value,
			name_span=self._span_tok(name_toks[0]),
			kind=N.LocalVarKind.COMPREHENSION_ITEM,
		)
		index_var = None
		if len(name_toks) > 1:
			index_var = N.LocalVarDefn(
				original_name=name_toks[1].value,
				name_span=self._span_tok(name_toks[1]),
				kind=N.LocalVarKind.COMPREHENSION_INDEX,
			)
		node = N.ListComprehensionNode(
			item_expr=self._build_expr(item_node),
			list_iter_var=list_iter_var,
			list_expr=self._build_expr(trailing[0]),
			index_var=index_var,
			filter_expr=self._build_expr(trailing[1]) if len(trailing) > 1 else None,
			span=self._span_tree(tree),
		)
		return self._node(node)

	def _fold_binary(self, tree: Tree) -> N.ExprNode:
		"""Fold `a OP b OP c` chains left-associatively."""
		children = tree.children
		left = self._build_expr(children[0])
		idx = 1
		while idx < len(children):
			op_tok = children[idx]
			right = self._build_expr(children[idx + 1])
			left = self._node(
				N.BinaryOpNode(op=op_tok.value, left=left, right=right, span=Span.covering(left.span, right.span))
			)
			idx += 2
		return left


def _is_bare_name(tree: Tree, text: str) -> bool:
	if _name(tree) != "name_ref":
		return False
	toks = _tokens(tree.children[0], "NAME")
	return len(toks) == 1 and toks[0].value == text


def _tokens(tree: Tree, type_name: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and c.type == type_name]


def _trees(tree: Tree) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree)]


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["parse_source"]
