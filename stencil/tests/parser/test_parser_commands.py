# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from stencil.stencilc import tree as T
from stencil.stencilc.core import IdGenerator
from stencil.stencilc.parser.parser import parse_source


def _loc(source: str, needle: str) -> tuple[int, int]:
	"""1-based (line, column) of the first occurrence of `needle`."""
	offset = source.index(needle)
	line = source.count("\n", 0, offset) + 1
	column = offset - (source.rfind("\n", 0, offset) + 1) + 1
	return line, column


def _body(source: str) -> list[T.CommandNode]:
	file = parse_source(source)
	assert len(file.templates) == 1
	return file.templates[0].body


def test_parse_namespace_templates_and_params() -> None:
	source = """
{namespace demo.pages}

{template demo.pages.main}
	{@param user: string}
	{@param items: list}
	Hello
{/template}

{template demo.pages.other}
{/template}
"""
	file = parse_source(source, path="main.stencil")
	assert file.namespace == "demo.pages"
	assert file.path == "main.stencil"
	assert [t.name.text for t in file.templates] == ["demo.pages.main", "demo.pages.other"]
	main = file.templates[0]
	assert [(p.name, p.type_name) for p in main.params] == [("user", "string"), ("items", "list")]
	assert [p.ref_name for p in main.params] == ["$user", "$items"]
	assert len(main.body) == 1
	assert isinstance(main.body[0], T.RawTextNode)
	assert main.body[0].text.strip() == "Hello"
	assert file.templates[1].body == []


def test_parse_let_keeps_name_as_written() -> None:
	source = "{template t}{let $x: 1 /}{let y: 2 /}{/template}"
	body = _body(source)
	assert [type(cmd) for cmd in body] == [T.LetNode, T.LetNode]
	assert body[0].var.original_name == "$x"
	assert body[0].var.kind is T.LocalVarKind.LET
	assert body[1].var.original_name == "y"
	assert (body[1].var.name_span.line, body[1].var.name_span.column) == _loc(source, "y:")
	assert isinstance(body[1].value.root, T.IntNode)


def test_parse_for_with_index_and_ifempty() -> None:
	source = """{template t}
{for $item, $i in $items}
	{print $item}
{ifempty}
	nothing
{/for}
{/template}"""
	(loop,) = _body(source)
	assert isinstance(loop, T.ForNode)
	assert loop.nonempty.var.original_name == "$item"
	assert loop.nonempty.var.kind is T.LocalVarKind.FOR_ITEM
	assert loop.nonempty.index_var is not None
	assert loop.nonempty.index_var.original_name == "$i"
	assert loop.nonempty.index_var.kind is T.LocalVarKind.FOR_INDEX
	assert (loop.nonempty.index_var.name_span.line, loop.nonempty.index_var.name_span.column) == _loc(source, "$i ")
	assert isinstance(loop.list_expr.root, T.GlobalNode)
	assert loop.list_expr.root.identifier.text == "$items"
	assert [type(cmd) for cmd in loop.nonempty.body] == [T.PrintNode]
	assert loop.ifempty is not None
	assert [type(cmd) for cmd in loop.ifempty.body] == [T.RawTextNode]


def test_parse_for_without_index() -> None:
	(loop,) = _body("{template t}{for item in $items}{/for}{/template}")
	assert loop.nonempty.var.original_name == "item"
	assert loop.nonempty.index_var is None
	assert loop.nonempty.body == []
	assert loop.ifempty is None


def test_parse_self_closing_call_with_data_all() -> None:
	source = "{template t}\n  {call other.tpl data=\"all\" /}\n{/template}"
	(call,) = _body(source)
	assert isinstance(call, T.CallNode)
	assert call.is_passing_all_data
	assert call.data is None
	assert call.is_passing_data
	assert isinstance(call.callee.root, T.GlobalNode)
	assert call.callee.root.identifier.text == "other.tpl"
	assert (call.open_tag_span.line, call.open_tag_span.column) == _loc(source, "{call")


def test_parse_call_with_data_expression_and_params() -> None:
	source = """{template t}
{call other data="$record.inner"}
	{param title: 'Hi' /}
	{param count: 2 + 3 /}
{/call}
{/template}"""
	(call,) = _body(source)
	assert not call.is_passing_all_data
	assert call.data is not None
	assert isinstance(call.data.root, T.GlobalNode)
	assert call.data.root.identifier.text == "$record.inner"
	assert [p.key for p in call.params] == ["title", "count"]
	assert isinstance(call.params[0].value.root, T.StringNode)
	assert call.params[0].value.root.value == "Hi"
	assert isinstance(call.params[1].value.root, T.BinaryOpNode)


def test_parse_call_without_data() -> None:
	(call,) = _body("{template t}{call other /}{/template}")
	assert not call.is_passing_data
	assert call.params == []


def test_keywords_are_plain_names_outside_their_tags() -> None:
	body = _body("{template t}{let $in: data /}{print for}{/template}")
	assert body[0].var.original_name == "$in"
	assert body[0].value.root.identifier.text == "data"
	assert body[1].expr.root.identifier.text == "for"


def test_every_node_gets_a_distinct_id() -> None:
	gen = IdGenerator()
	file = parse_source("{template t}{for $x in [1, 2]}{print $x}{/for}{/template}", id_gen=gen)
	ids = [node.node_id for node in T.walk(file)]
	assert 0 not in ids
	assert len(ids) == len(set(ids))
	assert max(ids) < gen.peek()
