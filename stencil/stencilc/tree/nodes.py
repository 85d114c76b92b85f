# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stencil template tree.

Pipeline placement:
  source -> parser (lark) -> tree (this file) -> passes -> later stages

The tree keeps two families of nodes:
- command nodes: the contents of a `{template}` body (`{let}`, `{for}`, ...);
- expression nodes: the values inside command tags.

Expression-holding commands never point at a bare expression; they own an
`ExprRootNode` slot, so replacing a whole expression is a single assignment on
the owning node (see `CallNode.set_callee_expr`).

Identifiers are parsed by one grammar production whether or not they carry the
`$` sigil. The parser therefore emits every name as a `GlobalNode`; the globals
resolution pass turns the ones bound in scope into `VarRefNode`s and the
compatibility restoration pass turns call targets into template literals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Union

from stencil.stencilc.core.span import Span

# Stable identifiers for tree nodes (used by id-keyed side tables).
NodeId = int

# Leading character of every locally bound variable name (`$item`, `$i`).
LOCAL_SIGIL = "$"


# Base node kinds

class Node:
	"""Base class for all tree nodes."""
	node_id: NodeId = 0


class ExprNode(Node):
	"""Base class for all expression nodes."""
	pass


class CommandNode(Node):
	"""Base class for nodes that appear in a template body."""
	pass


@dataclass(frozen=True)
class Identifier:
	"""An identifier exactly as written in source, plus where it was written."""
	text: str
	span: Span = field(default_factory=Span)


class LocalVarKind(Enum):
	"""Binding construct that introduced a local variable."""
	LET = auto()
	FOR_ITEM = auto()
	FOR_INDEX = auto()
	COMPREHENSION_ITEM = auto()
	COMPREHENSION_INDEX = auto()


@dataclass(eq=False)
class LocalVarDefn:
	"""
	A locally bound variable.

	`original_name` is the name as written, sigil included when present.
	"""
	original_name: str
	name_span: Span
	kind: LocalVarKind


@dataclass(eq=False)
class TemplateParam:
	"""`{@param name: type}` declaration; referenced in the body as `$name`."""
	name: str
	type_name: str
	span: Span = field(default_factory=Span)

	@property
	def ref_name(self) -> str:
		return f"{LOCAL_SIGIL}{self.name}"


VarDefn = Union[LocalVarDefn, TemplateParam]


# Expressions

@dataclass(eq=False)
class ExprRootNode(Node):
	"""Owner of a single expression tree."""
	root: ExprNode


@dataclass(eq=False)
class GlobalNode(ExprNode):
	"""Identifier that was not classified as a local when it was parsed."""
	identifier: Identifier
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class VarRefNode(ExprNode):
	"""Reference to a local variable or template parameter."""
	name: str
	defn: Optional[VarDefn] = None
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class TemplateLiteralNode(ExprNode):
	"""
	Statically known template name.

	`is_synthetic` marks literals created by a pass rather than written
	directly by the template author.
	"""
	identifier: Identifier
	span: Span = field(default_factory=Span)
	is_synthetic: bool = False


@dataclass(eq=False)
class VeLiteralNode(ExprNode):
	"""`ve(Name)`: reference to a compile-time constant visual element."""
	name: Identifier
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class StringNode(ExprNode):
	value: str
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class IntNode(ExprNode):
	value: int
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class ListLiteralNode(ExprNode):
	items: List[ExprNode] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class ListComprehensionNode(ExprNode):
	"""`[item_expr for $x, $i in list_expr if filter_expr]`."""
	item_expr: ExprNode
	list_iter_var: LocalVarDefn
	list_expr: ExprNode
	index_var: Optional[LocalVarDefn] = None
	filter_expr: Optional[ExprNode] = None
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class FieldAccessNode(ExprNode):
	base: ExprNode
	field_name: str
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class FunctionCallNode(ExprNode):
	name: str
	args: List[ExprNode] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class BinaryOpNode(ExprNode):
	op: str
	left: ExprNode
	right: ExprNode
	span: Span = field(default_factory=Span)


# Commands

@dataclass(eq=False)
class RawTextNode(CommandNode):
	text: str
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class PrintNode(CommandNode):
	expr: ExprRootNode
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class LetNode(CommandNode):
	"""`{let $name: value /}`; the binding is visible to following siblings."""
	var: LocalVarDefn
	value: ExprRootNode
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class ForNonemptyNode(Node):
	"""Loop body run once per element; owns the loop variables."""
	var: LocalVarDefn
	body: List[CommandNode] = field(default_factory=list)
	index_var: Optional[LocalVarDefn] = None
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class ForIfemptyNode(Node):
	"""`{ifempty}` branch, run when the list has no elements."""
	body: List[CommandNode] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class ForNode(CommandNode):
	list_expr: ExprRootNode
	nonempty: ForNonemptyNode
	ifempty: Optional[ForIfemptyNode] = None
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class CallParamNode(Node):
	"""`{param key: value /}` inside a `{call}`."""
	key: str
	value: ExprRootNode
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class CallNode(CommandNode):
	"""
	Template invocation.

	`open_tag_span` points at the `{call` tag. `data` holds the expression of a
	`data="..."` attribute; `data="all"` sets `is_passing_all_data` instead.
	"""
	callee: ExprRootNode
	open_tag_span: Span = field(default_factory=Span)
	data: Optional[ExprRootNode] = None
	is_passing_all_data: bool = False
	params: List[CallParamNode] = field(default_factory=list)
	span: Span = field(default_factory=Span)

	@property
	def is_passing_data(self) -> bool:
		return self.is_passing_all_data or self.data is not None

	@property
	def is_static_call(self) -> bool:
		"""True when the callee is a fixed template name, not a computed value."""
		return isinstance(self.callee.root, TemplateLiteralNode)

	def set_callee_expr(self, callee: ExprRootNode) -> None:
		self.callee = callee


# Top level

@dataclass(eq=False)
class TemplateNode(Node):
	name: Identifier
	params: List[TemplateParam] = field(default_factory=list)
	body: List[CommandNode] = field(default_factory=list)
	span: Span = field(default_factory=Span)


@dataclass(eq=False)
class FileNode(Node):
	"""Root of one source file's tree."""
	templates: List[TemplateNode] = field(default_factory=list)
	namespace: Optional[str] = None
	path: Optional[str] = None
	span: Span = field(default_factory=Span)


__all__ = [
	"CallNode",
	"CallParamNode",
	"CommandNode",
	"ExprNode",
	"ExprRootNode",
	"FieldAccessNode",
	"FileNode",
	"ForIfemptyNode",
	"ForNode",
	"ForNonemptyNode",
	"FunctionCallNode",
	"GlobalNode",
	"Identifier",
	"IntNode",
	"LOCAL_SIGIL",
	"LetNode",
	"ListComprehensionNode",
	"ListLiteralNode",
	"LocalVarDefn",
	"LocalVarKind",
	"BinaryOpNode",
	"Node",
	"NodeId",
	"PrintNode",
	"RawTextNode",
	"StringNode",
	"TemplateLiteralNode",
	"TemplateNode",
	"TemplateParam",
	"VarDefn",
	"VarRefNode",
	"VeLiteralNode",
]
