from __future__ import annotations

import re
from collections.abc import Callable

from vtc.ast import (
	CompoundExpressionNode,
	DirectiveNode,
	ElementNode,
	ElementType,
	ExpressionNode,
	SimpleExpressionNode,
	create_compound_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.expressions import is_fn_expression, is_member_expression, process_expression
from vtc.runtime_helpers import TO_HANDLER_KEY
from vtc.shared import camelize, to_handler_key
from vtc.transform import DirectiveTransformResult, TransformContext
from vtc.utils import expression_source

_UPPERCASE_RE = re.compile(r"[A-Z]")

Augmentor = Callable[[DirectiveTransformResult], DirectiveTransformResult]


def transform_on(
	dir: DirectiveNode,
	node: ElementNode,
	context: TransformContext,
	augmentor: Augmentor | None = None,
) -> DirectiveTransformResult:
	"""`@click="handler"` -> `{ onClick: handler }`.

	Inline statements are wrapped in an arrow function taking `$event`;
	references to a function (`handler`, `a.b`, `() => ...`) pass through.
	"""
	arg = dir.arg
	assert arg is not None
	if dir.exp is None and not dir.modifiers:
		context.on_error(create_compiler_error(ErrorCodes.X_V_ON_NO_EXPRESSION, dir.loc))

	event_name: ExpressionNode
	if isinstance(arg, SimpleExpressionNode):
		if arg.is_static:
			raw_name = arg.content
			if raw_name.startswith("vue:"):
				raw_name = f"vnode-{raw_name[4:]}"
			# listeners on plain elements keep their exact case
			if (
				node.tag_type != ElementType.ELEMENT
				or raw_name.startswith("vnode")
				or not _UPPERCASE_RE.search(raw_name)
			):
				event_string = to_handler_key(camelize(raw_name))
			else:
				event_string = f"on:{raw_name}"
			event_name = create_simple_expression(event_string, True, arg.loc)
		else:
			event_name = create_compound_expression([TO_HANDLER_KEY, "(", arg, ")"], arg.loc)
	else:
		event_name = arg
		event_name.children.insert(0, "(")
		event_name.children.insert(0, TO_HANDLER_KEY)
		event_name.children.append(")")

	exp = dir.exp
	if isinstance(exp, SimpleExpressionNode) and not exp.content.strip():
		exp = None

	if exp is not None:
		raw = expression_source(exp)
		is_member_exp = is_member_expression(raw)
		is_inline_statement = not (is_member_exp or is_fn_expression(raw))
		has_multiple_statements = ";" in raw
		if context.prefix_identifiers and isinstance(exp, SimpleExpressionNode):
			if is_inline_statement:
				context.add_identifiers("$event")
			exp = dir.exp = process_expression(
				exp, context, as_raw_statements=has_multiple_statements
			)
			if is_inline_statement:
				context.remove_identifiers()
		if is_inline_statement:
			exp = create_compound_expression(
				[
					"$event => {" if has_multiple_statements else "$event => (",
					exp,
					"}" if has_multiple_statements else ")",
				]
			)

	result = DirectiveTransformResult(
		props=[
			create_object_property(
				event_name, exp or create_simple_expression("() => {}", False, dir.loc)
			)
		]
	)
	if augmentor is not None:
		result = augmentor(result)
	return result


def is_handler_key(exp: ExpressionNode) -> bool:
	"""Whether ``exp`` is a computed event name built by `transform_on`."""
	return (
		isinstance(exp, CompoundExpressionNode)
		and bool(exp.children)
		and exp.children[0] is TO_HANDLER_KEY
	)
