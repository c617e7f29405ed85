from __future__ import annotations

from vtc.ast import (
	DirectiveNode,
	ElementNode,
	InterpolationNode,
	RootNode,
	SimpleExpressionNode,
	TemplateChildNode,
)
from vtc.expressions import process_expression
from vtc.transform import TransformContext


def transform_expression(node: TemplateChildNode | RootNode, context: TransformContext) -> None:
	"""Rewrite interpolations and directive expressions against the open scopes.

	`v-for` is handled by its own transform. `v-on` with an argument is left to
	the `on` directive transform, which needs the raw text to decide how to
	wrap the handler. `v-slot` expressions are parameter lists.
	"""
	if isinstance(node, InterpolationNode):
		if isinstance(node.content, SimpleExpressionNode):
			node.content = process_expression(node.content, context)
		return

	if not isinstance(node, ElementNode):
		return

	for dir in node.props:
		if not isinstance(dir, DirectiveNode) or dir.name == "for":
			continue
		exp = dir.exp
		arg = dir.arg
		if (
			isinstance(exp, SimpleExpressionNode)
			and not (dir.name == "on" and arg is not None)
		):
			dir.exp = process_expression(exp, context, as_params=dir.name == "slot")
		if isinstance(arg, SimpleExpressionNode) and not arg.is_static:
			dir.arg = process_expression(arg, context)
