from __future__ import annotations

import json

from vtc.ast import (
	ConstantType,
	DirectiveNode,
	ElementNode,
	ElementType,
	ExpressionNode,
	Property,
	create_compound_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.expressions import is_member_expression
from vtc.shared import camelize, is_simple_identifier
from vtc.transform import DirectiveTransformResult, TransformContext
from vtc.utils import expression_source, is_static_exp


def transform_model(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	"""`v-model:title="doc.title"` -> a value prop plus an `onUpdate:title` assignment handler."""
	exp, arg = dir.exp, dir.arg
	if exp is None:
		context.on_error(create_compiler_error(ErrorCodes.X_V_MODEL_NO_EXPRESSION, dir.loc))
		return DirectiveTransformResult()

	raw = expression_source(exp).strip()
	if not raw or not is_member_expression(raw):
		context.on_error(create_compiler_error(ErrorCodes.X_V_MODEL_MALFORMED_EXPRESSION, exp.loc))
		return DirectiveTransformResult()

	if context.prefix_identifiers and is_simple_identifier(raw) and context.is_local(raw):
		context.on_error(create_compiler_error(ErrorCodes.X_V_MODEL_ON_SCOPE_VARIABLE, exp.loc))
		return DirectiveTransformResult()

	prop_name: ExpressionNode = arg if arg is not None else create_simple_expression("modelValue", True)
	event_name: str | ExpressionNode
	if arg is None:
		event_name = "onUpdate:modelValue"
	elif is_static_exp(arg):
		event_name = f"onUpdate:{camelize(arg.content)}"
	else:
		event_name = create_compound_expression(['"onUpdate:" + ', arg])

	assignment = create_compound_expression(["$event => ((", exp, ") = $event)"])
	props: list[Property] = [
		create_object_property(prop_name, exp),
		create_object_property(event_name, assignment),
	]

	if dir.modifiers and node.tag_type == ElementType.COMPONENT:
		modifiers = ", ".join(
			f"{m if is_simple_identifier(m) else json.dumps(m)}: true" for m in dir.modifiers
		)
		modifiers_key: str | ExpressionNode
		if arg is None:
			modifiers_key = "modelModifiers"
		elif is_static_exp(arg):
			modifiers_key = f"{arg.content}Modifiers"
		else:
			modifiers_key = create_compound_expression([arg, ' + "Modifiers"'])
		props.append(
			create_object_property(
				modifiers_key,
				create_simple_expression(
					f"{{ {modifiers} }}", False, dir.loc, ConstantType.CAN_HOIST
				),
			)
		)

	return DirectiveTransformResult(props=props)
