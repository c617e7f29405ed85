from __future__ import annotations

from vtc.ast import (
	CallArgument,
	CompoundExpressionNode,
	ConstantType,
	DirectiveNode,
	ElementNode,
	ElementType,
	ForNode,
	IfBranchNode,
	RootNode,
	TemplateChildNode,
	TextCallNode,
	TextNode,
	create_call_expression,
	create_compound_expression,
)
from vtc.hoist_static import get_constant_type
from vtc.runtime_helpers import CREATE_TEXT
from vtc.shared import PatchFlags, patch_flag_text
from vtc.transform import ExitFn, TransformContext
from vtc.utils import is_text


def transform_text(node: TemplateChildNode | RootNode, context: TransformContext) -> ExitFn | None:
	"""Merge adjacent text and interpolations into one `" + "`-joined expression.

	Text that still sits next to other nodes afterwards becomes a
	`createTextVNode(...)` call, flagged when it can change.
	"""
	if not isinstance(node, (RootNode, ElementNode, ForNode, IfBranchNode)):
		return None

	def on_exit() -> None:
		children = node.children
		has_text = False
		i = 0
		while i < len(children):
			child = children[i]
			if is_text(child):
				has_text = True
				container: CompoundExpressionNode | None = None
				while i + 1 < len(children) and is_text(children[i + 1]):
					if container is None:
						container = create_compound_expression([child], child.loc)
						children[i] = container
					container.children.extend([" + ", children.pop(i + 1)])
			i += 1

		if not has_text:
			return
		# a lone text child is passed straight to the element call
		if len(children) == 1 and (
			isinstance(node, RootNode)
			or (
				isinstance(node, ElementNode)
				and node.tag_type == ElementType.ELEMENT
				and not any(
					isinstance(p, DirectiveNode) and p.name not in context.directive_transforms
					for p in node.props
				)
			)
		):
			return

		for i, child in enumerate(children):
			if not (is_text(child) or isinstance(child, CompoundExpressionNode)):
				continue
			args: list[CallArgument] = []
			if not isinstance(child, TextNode) or child.content != " ":
				args.append(child)
			call = create_call_expression(CREATE_TEXT, args)
			if get_constant_type(child, context) == ConstantType.NOT_CONSTANT:
				call.arguments.append(patch_flag_text(PatchFlags.TEXT))
				call.patch_flag = PatchFlags.TEXT
			children[i] = TextCallNode(content=child, codegen_node=call, loc=child.loc)

	return on_exit
