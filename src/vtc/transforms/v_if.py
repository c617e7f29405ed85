from __future__ import annotations

import re
from collections.abc import Callable

from vtc.ast import (
	AttributeNode,
	CallExpression,
	CommentNode,
	ConditionalExpression,
	ConstantType,
	DirectiveNode,
	ElementCall,
	ElementNode,
	ForNode,
	IfBranchNode,
	IfNode,
	JSChildNode,
	Property,
	SimpleExpressionNode,
	TextNode,
	create_call_expression,
	create_conditional_expression,
	create_element_call,
	create_object_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.expressions import process_expression
from vtc.runtime_helpers import CREATE_COMMENT, FRAGMENT
from vtc.shared import PatchFlags
from vtc.transform import (
	ExitFn,
	TransformContext,
	create_structural_directive_transform,
	traverse_node,
)
from vtc.utils import find_prop, inject_prop, is_template_node

ProcessCodegen = Callable[[IfNode, IfBranchNode, bool], ExitFn | None]


def _on_if(node: ElementNode, dir: DirectiveNode, context: TransformContext) -> ExitFn | None:
	def process_codegen(if_node: IfNode, branch: IfBranchNode, is_root: bool) -> ExitFn:
		# keys continue across sibling chains so that each branch is unique
		parent = context.parent
		assert parent is not None
		siblings = parent.children
		index = next(i for i, n in enumerate(siblings) if n is if_node)
		key = sum(len(s.branches) for s in siblings[:index] if isinstance(s, IfNode))

		def on_exit() -> None:
			if is_root:
				if_node.codegen_node = _create_codegen_node_for_branch(branch, key, context)
			else:
				assert if_node.codegen_node is not None
				parent_condition = _parent_condition(if_node.codegen_node)
				parent_condition.alternate = _create_codegen_node_for_branch(
					branch, key + len(if_node.branches) - 1, context
				)

		return on_exit

	return process_if(node, dir, context, process_codegen)


transform_if = create_structural_directive_transform(re.compile(r"if|else|else-if"), _on_if)


def process_if(
	node: ElementNode,
	dir: DirectiveNode,
	context: TransformContext,
	process_codegen: ProcessCodegen | None = None,
) -> ExitFn | None:
	if dir.name != "else" and (dir.exp is None or not dir.exp.content.strip()):
		context.on_error(create_compiler_error(ErrorCodes.X_V_IF_NO_EXPRESSION, dir.loc))
		dir.exp = create_simple_expression("true", False, dir.loc)

	if context.prefix_identifiers and isinstance(dir.exp, SimpleExpressionNode):
		dir.exp = process_expression(dir.exp, context)

	if dir.name == "if":
		return _start_chain(node, dir, context, process_codegen)

	parent = context.parent
	assert parent is not None
	siblings = parent.children
	i = next(idx for idx, n in enumerate(siblings) if n is node)
	while i > 0:
		i -= 1
		sibling = siblings[i]
		if isinstance(sibling, CommentNode) or (
			isinstance(sibling, TextNode) and not sibling.content.strip()
		):
			context.remove_node(sibling)
			continue
		if isinstance(sibling, IfNode) and sibling.branches[-1].condition is not None:
			context.remove_node()
			branch = _create_if_branch(node, dir)
			sibling.branches.append(branch)
			on_exit = process_codegen(sibling, branch, False) if process_codegen else None
			# the branch was taken out of the sibling list; visit it here
			traverse_node(branch, context)
			if on_exit is not None:
				on_exit()
			context.current_node = None
			return None
		break

	return _orphan_else(node, dir, context, process_codegen)


def _start_chain(
	node: ElementNode,
	dir: DirectiveNode,
	context: TransformContext,
	process_codegen: ProcessCodegen | None,
) -> ExitFn | None:
	branch = _create_if_branch(node, dir)
	if_node = IfNode(branches=[branch], loc=node.loc)
	context.replace_node(if_node)
	if process_codegen is not None:
		return process_codegen(if_node, branch, True)
	return None


def _orphan_else(
	node: ElementNode,
	dir: DirectiveNode,
	context: TransformContext,
	process_codegen: ProcessCodegen | None,
) -> ExitFn | None:
	"""A `v-else`/`v-else-if` with no open chain before it.

	`v-else-if` starts a new chain on its own condition; `v-else` renders
	unconditionally. Both are reported.
	"""
	context.on_error(create_compiler_error(ErrorCodes.X_V_ELSE_NO_ADJACENT_IF, dir.loc))
	if dir.name == "else-if":
		return _start_chain(node, dir, context, process_codegen)
	return None


def _create_if_branch(node: ElementNode, dir: DirectiveNode) -> IfBranchNode:
	is_template_if = is_template_node(node)
	return IfBranchNode(
		condition=None if dir.name == "else" else dir.exp,
		children=list(node.children) if is_template_if and not _has_for(node) else [node],
		loc=node.loc,
		user_key=find_prop(node, "key"),
		is_template_if=is_template_if,
	)


def _has_for(node: ElementNode) -> bool:
	return any(isinstance(p, DirectiveNode) and p.name == "for" for p in node.props)


def _create_codegen_node_for_branch(
	branch: IfBranchNode, key_index: int, context: TransformContext
) -> JSChildNode:
	if branch.condition is not None:
		return create_conditional_expression(
			branch.condition,
			_create_children_codegen_node(branch, key_index),
			create_call_expression(CREATE_COMMENT, ['"v-if"', "true"]),
		)
	return _create_children_codegen_node(branch, key_index)


def _create_children_codegen_node(branch: IfBranchNode, key_index: int) -> JSChildNode:
	key_property = _branch_key(branch, key_index)
	children = branch.children
	first = children[0] if children else None
	needs_fragment = len(children) != 1 or not isinstance(first, ElementNode)
	if needs_fragment:
		if len(children) == 1 and isinstance(first, ForNode) and first.codegen_node is not None:
			vnode_call = first.codegen_node
			inject_prop(vnode_call, key_property)
			return vnode_call
		return create_element_call(
			FRAGMENT,
			create_object_expression([key_property]),
			list(children),
			PatchFlags.STABLE_FRAGMENT,
			is_block=True,
			loc=branch.loc,
		)

	assert isinstance(first, ElementNode)
	ret = first.codegen_node
	if isinstance(ret, ElementCall):
		ret.is_block = True
		inject_prop(ret, key_property)
		return ret
	if isinstance(ret, CallExpression):
		inject_prop(ret, key_property)
		return ret
	# an element the other transforms left without codegen (e.g. <template v-slot>)
	return create_element_call(
		FRAGMENT,
		create_object_expression([key_property]),
		list(children),
		PatchFlags.STABLE_FRAGMENT,
		is_block=True,
		loc=branch.loc,
	)


def _branch_key(branch: IfBranchNode, key_index: int) -> Property:
	user_key = branch.user_key
	if isinstance(user_key, AttributeNode) and user_key.value is not None:
		return create_object_property("key", create_simple_expression(user_key.value.content, True))
	if isinstance(user_key, DirectiveNode) and user_key.exp is not None:
		return create_object_property("key", user_key.exp)
	return create_object_property(
		"key",
		create_simple_expression(str(key_index), False, const_type=ConstantType.CAN_HOIST),
	)


def _parent_condition(node: JSChildNode) -> ConditionalExpression:
	while True:
		if isinstance(node, ConditionalExpression):
			if isinstance(node.alternate, ConditionalExpression):
				node = node.alternate
			else:
				return node
		else:
			raise AssertionError("v-if chain without a conditional codegen node")
