from __future__ import annotations

from vtc.ast import (
	CompoundExpressionNode,
	DirectiveNode,
	ElementNode,
	ExpressionNode,
	SimpleExpressionNode,
	create_compound_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.expressions import process_expression
from vtc.runtime_helpers import CAMELIZE
from vtc.shared import camelize
from vtc.transform import DirectiveTransformResult, TransformContext


def transform_bind(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	"""`:name="exp"` -> `{ name: exp }`.

	`v-bind` without an argument never gets here; element lowering merges the
	bound object with `mergeProps`.
	"""
	arg = dir.arg
	assert arg is not None
	exp = dir.exp
	if isinstance(exp, SimpleExpressionNode) and not exp.content.strip():
		exp = None

	if exp is None:
		if isinstance(arg, SimpleExpressionNode) and arg.is_static:
			# `:foo` is short for `:foo="foo"`
			exp = transform_bind_shorthand(dir, context)
		else:
			context.on_error(create_compiler_error(ErrorCodes.X_V_BIND_NO_EXPRESSION, dir.loc))
			return DirectiveTransformResult(
				props=[create_object_property(arg, create_simple_expression("", True, dir.loc))]
			)

	if isinstance(arg, CompoundExpressionNode):
		arg.children.insert(0, "(")
		arg.children.append(') || ""')
	elif not arg.is_static:
		arg.content = f'{arg.content} || ""'

	modifiers = dir.modifiers
	if "camel" in modifiers:
		if isinstance(arg, SimpleExpressionNode) and arg.is_static:
			arg.content = camelize(arg.content)
		else:
			arg = create_compound_expression([CAMELIZE, "(", arg, ")"], arg.loc)
	if "prop" in modifiers:
		arg = _inject_prefix(arg, ".")
	if "attr" in modifiers:
		arg = _inject_prefix(arg, "^")

	return DirectiveTransformResult(props=[create_object_property(arg, exp)])


def transform_bind_shorthand(dir: DirectiveNode, context: TransformContext) -> ExpressionNode:
	assert isinstance(dir.arg, SimpleExpressionNode)
	prop_name = camelize(dir.arg.content)
	dir.exp = process_expression(
		create_simple_expression(prop_name, False, dir.arg.loc), context
	)
	return dir.exp


def _inject_prefix(arg: ExpressionNode, prefix: str) -> ExpressionNode:
	if isinstance(arg, SimpleExpressionNode):
		if arg.is_static:
			arg.content = prefix + arg.content
		else:
			arg.content = f"`{prefix}${{{arg.content}}}`"
		return arg
	arg.children.insert(0, f"'{prefix}' + (")
	arg.children.append(")")
	return arg
