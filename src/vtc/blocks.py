"""Block flattening.

A block is a subtree whose shape cannot change: the template root, every
`v-if` branch, every `v-for` body and every component. For each block we
record the nodes under it that can change (a non-zero patch flag) and the
nested blocks, without descending into those. The renderer then patches a
block by walking that flat list instead of the whole tree.
"""

from __future__ import annotations

from vtc.ast import (
	ArrayExpression,
	CallExpression,
	ConditionalExpression,
	ElementCall,
	ElementNode,
	ForNode,
	FunctionExpression,
	IfNode,
	JSChildNode,
	Node,
	ObjectExpression,
	RootNode,
	SimpleExpressionNode,
	TextCallNode,
)


def flatten_blocks(root: RootNode) -> None:
	codegen = root.codegen_node
	if isinstance(codegen, ElementCall) and codegen.is_block:
		_close_block(codegen)
		root.dynamic_children = codegen.dynamic_children
		return
	root.dynamic_children = []
	_visit(codegen, root.dynamic_children)


def _close_block(block: ElementCall) -> None:
	tracked: list[JSChildNode] = []
	_visit(block.children, tracked)
	# keyed/unkeyed fragments are diffed in full; their list is never read
	block.dynamic_children = None if block.disable_tracking else tracked


def _visit(node: object, current: list[JSChildNode]) -> None:
	if node is None or isinstance(node, str):
		return
	if isinstance(node, list):
		for child in node:
			_visit(child, current)
		return
	if not isinstance(node, Node):
		# runtime helper symbols
		return

	# content nodes: follow their codegen
	if isinstance(node, (ElementNode, IfNode, ForNode, TextCallNode)):
		_visit(node.codegen_node, current)
		return

	if isinstance(node, SimpleExpressionNode):
		# hoisted nodes never change; plain expressions hold no vnodes
		return

	if isinstance(node, ElementCall):
		if node.is_block:
			current.append(node)
			_close_block(node)
			return
		if node.patch_flag > 0:
			current.append(node)
		_visit(node.children, current)
		return

	if isinstance(node, CallExpression):
		if node.is_block:
			# renderSlot opens its own block at runtime
			current.append(node)
			_visit(node.arguments, [])
			return
		if node.patch_flag > 0:
			current.append(node)
			return
		_visit(node.arguments, current)
		return

	if isinstance(node, ConditionalExpression):
		_visit(node.consequent, current)
		_visit(node.alternate, current)
		return

	if isinstance(node, FunctionExpression):
		if node.is_slot:
			node.dynamic_children = []
			_visit(node.returns, node.dynamic_children)
		else:
			_visit(node.returns, current)
		return

	if isinstance(node, ObjectExpression):
		for prop in node.properties:
			_visit(prop.value, current)
		return

	if isinstance(node, ArrayExpression):
		_visit(node.elements, current)
