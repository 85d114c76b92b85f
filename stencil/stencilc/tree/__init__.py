# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Template tree package: node classes and traversal utilities.

Public API:
  - tree node classes (file/template/commands/expressions)
  - generic traversal (`all_nodes_of_type`, `walk`, `replace_child_exprs`)
"""

from .nodes import (
	LOCAL_SIGIL,
	BinaryOpNode,
	CallNode,
	CallParamNode,
	CommandNode,
	ExprNode,
	ExprRootNode,
	FieldAccessNode,
	FileNode,
	ForIfemptyNode,
	ForNode,
	ForNonemptyNode,
	FunctionCallNode,
	GlobalNode,
	Identifier,
	IntNode,
	LetNode,
	ListComprehensionNode,
	ListLiteralNode,
	LocalVarDefn,
	LocalVarKind,
	Node,
	NodeId,
	PrintNode,
	RawTextNode,
	StringNode,
	TemplateLiteralNode,
	TemplateNode,
	TemplateParam,
	VarDefn,
	VarRefNode,
	VeLiteralNode,
)
from .tree_utils import all_nodes_of_type, iter_child_nodes, replace_child_exprs, walk

__all__ = [
	"LOCAL_SIGIL",
	"BinaryOpNode",
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
	"LetNode",
	"ListComprehensionNode",
	"ListLiteralNode",
	"LocalVarDefn",
	"LocalVarKind",
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
	"all_nodes_of_type",
	"iter_child_nodes",
	"replace_child_exprs",
	"walk",
]
