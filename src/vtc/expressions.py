"""Scope analysis of template expressions.

Template expressions run against the component instance, so every free
identifier has to be read from the render context: ``count + 1`` becomes
``_ctx.count + 1``. Identifiers bound by an enclosing ``v-for``/``v-slot``,
parameters of functions written inside the expression, globals such as
``Math`` and literals are left alone.

Expressions are parsed with tree-sitter's JavaScript grammar. The rewritten
expression is a `CompoundExpressionNode` whose children alternate between the
untouched source text and one `SimpleExpressionNode` per rewritten identifier,
so concatenating the children's original text gives back the input.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from vtc.ast import (
	CompoundChild,
	CompoundExpressionNode,
	ConstantType,
	ExpressionNode,
	SimpleExpressionNode,
	SourceLocation,
)
from vtc.errors import CompilerError, ErrorCodes, create_compiler_error
from vtc.shared import LITERAL_KEYWORDS, is_globally_allowed, is_simple_identifier
from vtc.utils import advance_position

if TYPE_CHECKING:
	from vtc.transform import TransformContext

CONTEXT_PREFIX = "_ctx."

JS_LANGUAGE = Language(tree_sitter_javascript.language())

_FUNCTION_TYPES = frozenset(
	{
		"arrow_function",
		"function",
		"function_expression",
		"generator_function",
		"method_definition",
	}
)
_PATTERN_CONTAINERS = frozenset({"object_pattern", "array_pattern", "formal_parameters"})
_MEMBER_TYPES = frozenset({"identifier", "member_expression", "subscript_expression"})

_FN_EXPRESSION_RE = re.compile(
	r"^\s*(async\s*)?(\([^)]*?\)|[\w$_]+)\s*(:[^=]+)?=>|^\s*(async\s+)?function(?:\s+[\w$]+)?\s*\("
)


def parse_js(source: str) -> Tree:
	# a fresh parser per call keeps concurrent compiles independent
	return Parser(JS_LANGUAGE).parse(source.encode("utf-8"))


@dataclass(slots=True)
class _IdentifierUse:
	start: int
	end: int
	name: str
	shorthand: bool


# =============================================================================
# Entry points
# =============================================================================
def process_expression(
	node: SimpleExpressionNode,
	context: TransformContext,
	as_params: bool = False,
	as_raw_statements: bool = False,
	local_vars: frozenset[str] = frozenset(),
) -> ExpressionNode:
	"""Rewrite ``node`` against the scopes currently open in ``context``.

	With ``as_params`` the expression is a binding pattern (`v-for` alias,
	`v-slot` props): nothing is rewritten, the bound names are recorded on
	``node.identifiers`` instead.
	"""
	if not context.prefix_identifiers or not node.content.strip():
		return node
	return rewrite_expression(
		node,
		lambda name: name in local_vars or context.is_local(name),
		as_params=as_params,
		as_raw_statements=as_raw_statements,
		on_error=context.on_error,
	)


def rewrite_expression(
	node: SimpleExpressionNode,
	is_local: Callable[[str], bool],
	*,
	as_params: bool = False,
	as_raw_statements: bool = False,
	on_error: Callable[[CompilerError], None] | None = None,
) -> ExpressionNode:
	raw = node.content

	if is_simple_identifier(raw):
		if as_params:
			node.identifiers = [raw]
			return node
		is_scope_var = is_local(raw)
		if is_scope_var:
			node.local_refs = [raw]
		is_literal = raw in LITERAL_KEYWORDS
		if not is_scope_var and not is_literal and not is_globally_allowed(raw):
			node.content = f"{CONTEXT_PREFIX}{raw}"
		elif not is_scope_var:
			node.const_type = ConstantType.CAN_STRINGIFY if is_literal else ConstantType.CAN_HOIST
		return node

	if as_params:
		prefix, suffix = "(", ") => {}"
	elif as_raw_statements:
		prefix, suffix = "", ""
	else:
		prefix, suffix = "(", ")"
	source = f"{prefix}{raw}{suffix}".encode("utf-8")
	tree = Parser(JS_LANGUAGE).parse(source)
	if tree.root_node.has_error:
		if on_error is not None:
			on_error(
				create_compiler_error(
					ErrorCodes.X_INVALID_EXPRESSION,
					node.loc,
					additional_message=f"Invalid expression: {raw}",
				)
			)
		return node

	offset = len(prefix.encode("utf-8"))

	if as_params:
		params = _arrow_params(tree.root_node)
		node.identifiers = list(_pattern_names(params, source)) if params is not None else []
		return node

	uses: list[_IdentifierUse] = []
	declared: set[str] = set()
	_walk(tree.root_node, source, frozenset(), uses, declared)

	free: list[_IdentifierUse] = []
	local_refs: list[str] = []
	for use in uses:
		if use.name in declared or use.name in LITERAL_KEYWORDS:
			continue
		if is_local(use.name):
			if use.name not in local_refs:
				local_refs.append(use.name)
			continue
		if is_globally_allowed(use.name):
			continue
		free.append(use)

	if not free:
		if local_refs:
			node.local_refs = local_refs
		else:
			node.const_type = ConstantType.CAN_STRINGIFY
		return node

	raw_bytes = raw.encode("utf-8")
	children: list[CompoundChild] = []
	cursor = 0
	for use in sorted(free, key=lambda u: u.start):
		start, end = use.start - offset, use.end - offset
		if start > cursor:
			children.append(raw_bytes[cursor:start].decode("utf-8"))
		name = raw_bytes[start:end].decode("utf-8")
		content = f"{name}: {CONTEXT_PREFIX}{name}" if use.shorthand else f"{CONTEXT_PREFIX}{name}"
		char_start = len(raw_bytes[:start].decode("utf-8"))
		children.append(
			SimpleExpressionNode(
				content=content,
				loc=_sub_location(node.loc, raw, char_start, char_start + len(name)),
			)
		)
		cursor = end
	if cursor < len(raw_bytes):
		children.append(raw_bytes[cursor:].decode("utf-8"))

	return CompoundExpressionNode(children=children, loc=node.loc, local_refs=local_refs or None)


def is_member_expression(source: str) -> bool:
	"""Whether ``source`` is an assignable reference such as ``a``, ``a.b`` or ``a[b]``."""
	tree = parse_js(f"({source})")
	if tree.root_node.has_error:
		return False
	statements = tree.root_node.named_children
	if len(statements) != 1 or statements[0].type != "expression_statement":
		return False
	expr = statements[0].named_children[0]
	while expr.type == "parenthesized_expression" and expr.named_children:
		expr = expr.named_children[0]
	return expr.type in _MEMBER_TYPES


def is_fn_expression(source: str) -> bool:
	"""Whether ``source`` starts with an arrow function or `function` literal."""
	return _FN_EXPRESSION_RE.match(source) is not None


# =============================================================================
# Tree walking
# =============================================================================
def _text(node: Node, source: bytes) -> str:
	return source[node.start_byte : node.end_byte].decode("utf-8")


def _walk(
	node: Node,
	source: bytes,
	scope: frozenset[str],
	uses: list[_IdentifierUse],
	declared: set[str],
) -> None:
	kind = node.type

	if kind in _FUNCTION_TYPES:
		params = node.child_by_field_name("parameters") or node.child_by_field_name("parameter")
		names = set(_pattern_names(params, source)) if params is not None else set()
		name_node = node.child_by_field_name("name")
		if name_node is not None and name_node.type == "identifier":
			names.add(_text(name_node, source))
		inner = scope | names
		if params is not None:
			for default in _pattern_expressions(params):
				_walk(default, source, inner, uses, declared)
		body = node.child_by_field_name("body")
		if body is not None:
			_walk(body, source, inner, uses, declared)
		return

	if kind == "identifier":
		name = _text(node, source)
		if name not in scope:
			uses.append(_IdentifierUse(node.start_byte, node.end_byte, name, False))
		return

	if kind == "shorthand_property_identifier":
		name = _text(node, source)
		if name not in scope:
			uses.append(_IdentifierUse(node.start_byte, node.end_byte, name, True))
		return

	if kind == "variable_declarator":
		name_node = node.child_by_field_name("name")
		if name_node is not None:
			declared.update(_pattern_names(name_node, source))
			for default in _pattern_expressions(name_node):
				_walk(default, source, scope, uses, declared)
		value = node.child_by_field_name("value")
		if value is not None:
			_walk(value, source, scope, uses, declared)
		return

	for child in node.children:
		_walk(child, source, scope, uses, declared)


def _arrow_params(root: Node) -> Node | None:
	statement = root.named_children[0] if root.named_children else None
	if statement is None or not statement.named_children:
		return None
	arrow = statement.named_children[0]
	if arrow.type != "arrow_function":
		return None
	return arrow.child_by_field_name("parameters") or arrow.child_by_field_name("parameter")


def _pattern_names(node: Node, source: bytes) -> Iterator[str]:
	"""Names bound by a parameter list or destructuring pattern."""
	kind = node.type
	if kind in ("identifier", "shorthand_property_identifier_pattern"):
		yield _text(node, source)
	elif kind in ("assignment_pattern", "object_assignment_pattern"):
		left = node.child_by_field_name("left")
		if left is not None:
			yield from _pattern_names(left, source)
	elif kind == "pair_pattern":
		value = node.child_by_field_name("value")
		if value is not None:
			yield from _pattern_names(value, source)
	elif kind == "rest_pattern" or kind in _PATTERN_CONTAINERS:
		for child in node.named_children:
			yield from _pattern_names(child, source)


def _pattern_expressions(node: Node) -> Iterator[Node]:
	"""Default values and computed keys inside a pattern; these are real expressions."""
	kind = node.type
	if kind in ("assignment_pattern", "object_assignment_pattern"):
		left = node.child_by_field_name("left")
		right = node.child_by_field_name("right")
		if left is not None:
			yield from _pattern_expressions(left)
		if right is not None:
			yield right
	elif kind == "pair_pattern":
		key = node.child_by_field_name("key")
		value = node.child_by_field_name("value")
		if key is not None and key.type == "computed_property_name":
			yield key
		if value is not None:
			yield from _pattern_expressions(value)
	elif kind == "rest_pattern" or kind in _PATTERN_CONTAINERS:
		for child in node.named_children:
			yield from _pattern_expressions(child)


def _sub_location(base: SourceLocation, raw: str, start: int, end: int) -> SourceLocation:
	return SourceLocation(
		advance_position(base.start, raw, start),
		advance_position(base.start, raw, end),
		raw[start:end],
	)
