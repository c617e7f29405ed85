from __future__ import annotations

import re
from typing import TypeGuard

from vtc.ast import (
	AttributeNode,
	CallExpression,
	CompoundExpressionNode,
	DirectiveNode,
	ElementCall,
	ElementNode,
	ElementType,
	ExpressionNode,
	InterpolationNode,
	Node,
	ObjectExpression,
	Position,
	Property,
	SimpleExpressionNode,
	TextNode,
	create_object_expression,
)
from vtc.runtime_helpers import MERGE_PROPS, RENDER_SLOT, TO_HANDLERS


def is_static_exp(node: Node | None) -> TypeGuard[SimpleExpressionNode]:
	return isinstance(node, SimpleExpressionNode) and node.is_static


def is_static_arg_of(arg: Node | None, name: str) -> bool:
	return is_static_exp(arg) and arg.content == name


def is_text(node: Node) -> TypeGuard[TextNode | InterpolationNode]:
	return isinstance(node, (TextNode, InterpolationNode))


def is_template_node(node: Node) -> TypeGuard[ElementNode]:
	return isinstance(node, ElementNode) and node.tag_type == ElementType.TEMPLATE


def is_slot_outlet(node: Node) -> TypeGuard[ElementNode]:
	return isinstance(node, ElementNode) and node.tag_type == ElementType.SLOT


def find_dir(
	node: ElementNode, name: str | re.Pattern[str], allow_empty: bool = False
) -> DirectiveNode | None:
	"""First directive on ``node`` whose name matches, skipping expression-less ones."""
	for p in node.props:
		if not isinstance(p, DirectiveNode):
			continue
		if not (allow_empty or p.exp is not None):
			continue
		matched = p.name == name if isinstance(name, str) else name.fullmatch(p.name)
		if matched:
			return p
	return None


def find_prop(
	node: ElementNode,
	name: str,
	dynamic_only: bool = False,
	allow_empty: bool = False,
) -> AttributeNode | DirectiveNode | None:
	"""Static attribute or `v-bind:name` on ``node``."""
	for p in node.props:
		if isinstance(p, AttributeNode):
			if dynamic_only:
				continue
			if p.name == name and (p.value is not None or allow_empty):
				return p
		elif p.name == "bind" and (p.exp is not None or allow_empty) and is_static_arg_of(
			p.arg, name
		):
			return p
	return None


def has_dynamic_key_v_bind(node: ElementNode) -> bool:
	return any(
		isinstance(p, DirectiveNode)
		and p.name == "bind"
		and (p.arg is None or not is_static_exp(p.arg))
		for p in node.props
	)


def to_valid_asset_id(name: str, kind: str) -> str:
	"""`my-comp` -> `_component_my_comp`; other non-word characters become char codes."""

	def replace(m: re.Match[str]) -> str:
		return "_" if m.group(0) == "-" else str(ord(m.group(0)))

	valid = re.sub(r"[^\w]", replace, name)
	return f"_{kind}_{valid}"


def advance_position(pos: Position, source: str, num_chars: int | None = None) -> Position:
	"""Position reached after consuming ``source[:num_chars]`` starting at ``pos``."""
	if num_chars is None:
		num_chars = len(source)
	lines = source.count("\n", 0, num_chars)
	last_newline = source.rfind("\n", 0, num_chars)
	column = pos.column + num_chars if last_newline == -1 else num_chars - last_newline
	return Position(pos.offset + num_chars, pos.line + lines, column)


def inject_prop(node: ElementCall | CallExpression, prop: Property) -> None:
	"""Add ``prop`` to an element call or slot-outlet call unless the key is already set."""
	if isinstance(node, CallExpression):
		if node.callee is not RENDER_SLOT:
			return
		# renderSlot(slots, name, props)
		if len(node.arguments) > 2:
			props = node.arguments[2]
		else:
			props = None
		merged = _merge_into_props(props, prop)
		if len(node.arguments) > 2:
			node.arguments[2] = merged
		else:
			node.arguments.append(merged)
		return
	node.props = _merge_into_props(node.props, prop)


def _merge_into_props(props: object, prop: Property) -> ObjectExpression | CallExpression:
	# renderSlot passes "{}" as a placeholder when the outlet has fallback content only
	if props is None or props == "{}":
		return create_object_expression([prop])
	if isinstance(props, ObjectExpression):
		if not _has_prop(props, prop):
			props.properties.insert(0, prop)
		return props
	if isinstance(props, CallExpression) and props.callee is MERGE_PROPS:
		first = props.arguments[0] if props.arguments else None
		if isinstance(first, ObjectExpression):
			if not _has_prop(first, prop):
				first.properties.insert(0, prop)
		else:
			props.arguments.insert(0, create_object_expression([prop]))
		return props
	if isinstance(props, CallExpression) and props.callee is TO_HANDLERS:
		return CallExpression(
			callee=MERGE_PROPS, arguments=[create_object_expression([prop]), props]
		)
	# a bare props expression (e.g. a v-bind object)
	assert isinstance(props, (SimpleExpressionNode, CompoundExpressionNode))
	return CallExpression(
		callee=MERGE_PROPS,
		arguments=[create_object_expression([prop]), props],
	)


def _has_prop(obj: ObjectExpression, prop: Property) -> bool:
	key = prop.key
	if not isinstance(key, SimpleExpressionNode):
		return False
	return any(
		isinstance(p.key, SimpleExpressionNode) and p.key.content == key.content
		for p in obj.properties
	)


def expression_source(exp: ExpressionNode) -> str:
	"""Original template text of an expression, before any rewriting."""
	if exp.loc.source:
		return exp.loc.source
	if isinstance(exp, SimpleExpressionNode):
		return exp.content
	return "".join(
		c if isinstance(c, str) else expression_source(c)
		for c in exp.children
		if isinstance(c, (str, SimpleExpressionNode, CompoundExpressionNode))
	)
