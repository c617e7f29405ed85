"""Constant analysis and static hoisting.

Every node gets a `ConstantType`. Plain elements whose whole subtree is at
least `CAN_HOIST` are moved into the module-level hoists list and replaced by
a `_hoisted_N` reference, so they are created once instead of on every render.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vtc.ast import (
	CommentNode,
	CompoundExpressionNode,
	ConstantType,
	DirectiveNode,
	ElementCall,
	ElementNode,
	ElementType,
	ForNode,
	IfBranchNode,
	IfNode,
	InterpolationNode,
	Node,
	ObjectExpression,
	RootNode,
	SimpleExpressionNode,
	TextCallNode,
	TextNode,
)
from vtc.shared import PatchFlags

if TYPE_CHECKING:
	from vtc.transform import TransformContext

logger = logging.getLogger(__name__)


def hoist_static(root: RootNode, context: TransformContext) -> None:
	_walk(root, context, do_not_hoist_node=False)
	if context.hoists:
		logger.debug("hoisted %d static node(s)", len(context.hoists))


def _walk(
	node: RootNode | ElementNode | IfBranchNode | ForNode,
	context: TransformContext,
	do_not_hoist_node: bool,
) -> None:
	for child in node.children:
		if isinstance(child, ElementNode) and child.tag_type == ElementType.ELEMENT:
			constant_type = (
				ConstantType.NOT_CONSTANT if do_not_hoist_node else get_constant_type(child, context)
			)
			if constant_type >= ConstantType.CAN_HOIST:
				codegen = child.codegen_node
				assert isinstance(codegen, ElementCall)
				codegen.patch_flag = PatchFlags.HOISTED
				codegen.is_block = False
				child.codegen_node = context.hoist(codegen)
				continue
		elif isinstance(child, TextCallNode):
			if not do_not_hoist_node and get_constant_type(child, context) >= ConstantType.CAN_HOIST:
				child.codegen_node = context.hoist(child.codegen_node)
				continue

		if isinstance(child, ElementNode):
			_walk(child, context, do_not_hoist_node=False)
		elif isinstance(child, ForNode):
			# the body is the block returned from the loop callback
			_walk(child, context, do_not_hoist_node=len(child.children) == 1)
		elif isinstance(child, IfNode):
			for branch in child.branches:
				_walk(branch, context, do_not_hoist_node=len(branch.children) == 1)


def get_constant_type(node: Node, context: TransformContext) -> ConstantType:
	"""Constant level of ``node``, memoized per node for the current compile."""
	if isinstance(node, ElementNode):
		if node.tag_type != ElementType.ELEMENT:
			return ConstantType.NOT_CONSTANT
		cached = context.constant_cache.get(id(node))
		if cached is not None:
			return cached
		result = _element_constant_type(node, context)
		context.constant_cache[id(node)] = result
		return result
	if isinstance(node, (TextNode, CommentNode)):
		return ConstantType.CAN_STRINGIFY
	if isinstance(node, (IfNode, IfBranchNode, ForNode, InterpolationNode)):
		return ConstantType.NOT_CONSTANT
	if isinstance(node, TextCallNode):
		return get_constant_type(node.content, context)
	if isinstance(node, SimpleExpressionNode):
		return node.const_type
	if isinstance(node, CompoundExpressionNode):
		result = ConstantType.CAN_STRINGIFY
		for child in node.children:
			if not isinstance(child, Node):
				continue
			child_type = get_constant_type(child, context)
			if child_type == ConstantType.NOT_CONSTANT:
				return child_type
			result = min(result, child_type)
		return result
	return ConstantType.NOT_CONSTANT


def _element_constant_type(node: ElementNode, context: TransformContext) -> ConstantType:
	codegen = node.codegen_node
	if not isinstance(codegen, ElementCall):
		return ConstantType.NOT_CONSTANT
	if codegen.is_block and node.tag not in ("svg", "foreignObject"):
		return ConstantType.NOT_CONSTANT
	if codegen.patch_flag != 0 or codegen.directives is not None:
		return ConstantType.NOT_CONSTANT
	if any(isinstance(p, DirectiveNode) for p in node.props):
		return ConstantType.NOT_CONSTANT

	result = _props_constant_type(codegen, context)
	for child in node.children:
		if result == ConstantType.NOT_CONSTANT:
			break
		result = min(result, get_constant_type(child, context))
	return result


def _props_constant_type(codegen: ElementCall, context: TransformContext) -> ConstantType:
	props = codegen.props
	if props is None:
		return ConstantType.CAN_STRINGIFY
	if not isinstance(props, ObjectExpression):
		return ConstantType.NOT_CONSTANT
	result = ConstantType.CAN_STRINGIFY
	for prop in props.properties:
		for part in (prop.key, prop.value):
			part_type = get_constant_type(part, context)
			if part_type == ConstantType.NOT_CONSTANT:
				return part_type
			result = min(result, part_type)
	return result
