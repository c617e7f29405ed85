from __future__ import annotations

import json

from vtc.ast import (
	AttributeNode,
	CallArgument,
	DirectiveNode,
	ElementNode,
	ExpressionNode,
	PropsExpression,
	RootNode,
	SimpleExpressionNode,
	TemplateChildNode,
	create_call_expression,
	create_function_expression,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.expressions import process_expression
from vtc.runtime_helpers import RENDER_SLOT
from vtc.shared import camelize
from vtc.transform import TransformContext
from vtc.transforms.transform_element import build_props
from vtc.utils import is_slot_outlet, is_static_arg_of, is_static_exp


def transform_slot_outlet(node: TemplateChildNode | RootNode, context: TransformContext) -> None:
	"""`<slot name="x" :item="i">fallback</slot>` -> `_renderSlot(_ctx.$slots, "x", { item: i }, () => [...])`."""
	if not is_slot_outlet(node):
		return
	slot_name, slot_props = process_slot_outlet(node, context)
	args: list[CallArgument] = [
		"_ctx.$slots" if context.prefix_identifiers else "$slots",
		slot_name,
	]
	if slot_props is not None or node.children:
		args.append(slot_props if slot_props is not None else "{}")
	if node.children:
		args.append(create_function_expression([], node.children, loc=node.loc))
	call = create_call_expression(RENDER_SLOT, args, node.loc)
	call.is_block = True
	node.codegen_node = call


def process_slot_outlet(
	node: ElementNode, context: TransformContext
) -> tuple[str | ExpressionNode, PropsExpression | None]:
	"""Split the outlet's props into the slot name and the props passed to the slot."""
	slot_name: str | ExpressionNode = '"default"'
	non_name_props: list[AttributeNode | DirectiveNode] = []
	for p in node.props:
		if isinstance(p, AttributeNode):
			if p.value is not None:
				if p.name == "name":
					slot_name = json.dumps(p.value.content)
				else:
					p.name = camelize(p.name)
					non_name_props.append(p)
		elif p.name == "bind" and is_static_arg_of(p.arg, "name"):
			if p.exp is not None:
				slot_name = p.exp
			elif isinstance(p.arg, SimpleExpressionNode):
				# `:name` shorthand binds the same-named variable
				exp = create_simple_expression(camelize(p.arg.content), False, p.arg.loc)
				p.exp = process_expression(exp, context)
				slot_name = p.exp
		else:
			if p.name == "bind" and is_static_exp(p.arg):
				p.arg.content = camelize(p.arg.content)
			non_name_props.append(p)

	slot_props: PropsExpression | None = None
	if non_name_props:
		result = build_props(node, context, non_name_props)
		slot_props = result.props
		if result.directives:
			context.on_error(
				create_compiler_error(
					ErrorCodes.X_V_SLOT_UNEXPECTED_DIRECTIVE_ON_SLOT_OUTLET,
					result.directives[0].loc,
				)
			)
	return slot_name, slot_props
