"""Node transform pipeline.

`transform` walks the content AST once. Each node is handed to every node
transform in order; a transform may return exit callbacks, which run after the
node's children were visited, in reverse order. Transforms rewrite the tree in
place through `TransformContext.replace_node` / `remove_node`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TypeAlias

from vtc.ast import (
	CompoundExpressionNode,
	ConstantType,
	DirectiveNode,
	ElementCall,
	ElementNode,
	ElementType,
	ExpressionNode,
	ForNode,
	IfBranchNode,
	IfNode,
	JSChildNode,
	ParentNode,
	Property,
	RootNode,
	SimpleExpressionNode,
	TemplateChildNode,
	create_element_call,
)
from vtc.blocks import flatten_blocks
from vtc.errors import CompilerError
from vtc.hoist_static import hoist_static
from vtc.options import CompilerOptions
from vtc.runtime_helpers import FRAGMENT
from vtc.shared import PatchFlags
from vtc.utils import is_slot_outlet, is_template_node

ExitFn: TypeAlias = Callable[[], None]
NodeTransform: TypeAlias = Callable[
	["TemplateChildNode | RootNode", "TransformContext"],
	"ExitFn | list[ExitFn] | None",
]
StructuralDirectiveTransform: TypeAlias = Callable[
	[ElementNode, DirectiveNode, "TransformContext"], "ExitFn | None"
]


@dataclass(slots=True)
class DirectiveTransformResult:
	props: list[Property] = field(default_factory=list)
	# True for a user directive, or the runtime helper implementing a built-in one
	need_runtime: bool | object = False


DirectiveTransform: TypeAlias = Callable[
	[DirectiveNode, ElementNode, "TransformContext"], DirectiveTransformResult
]


@dataclass(slots=True)
class _ChildCursor:
	"""Position of the child currently being traversed in its parent's list."""

	parent: ParentNode
	index: int = 0

	def node_removed(self) -> None:
		self.index -= 1


class TransformContext:
	"""State shared by all transforms during one compile.

	Everything here lives exactly as long as one `transform` call.
	"""

	__slots__: tuple[str, ...] = (
		"root",
		"options",
		"node_transforms",
		"directive_transforms",
		"prefix_identifiers",
		"hoist_static",
		"components",
		"directives",
		"hoists",
		"constant_cache",
		"current_node",
		"_cursor",
		"_scopes",
	)

	root: RootNode
	options: CompilerOptions
	node_transforms: list[NodeTransform]
	directive_transforms: dict[str, DirectiveTransform]
	prefix_identifiers: bool
	hoist_static: bool
	components: dict[str, None]
	directives: dict[str, None]
	hoists: list[JSChildNode]
	constant_cache: dict[int, ConstantType]
	current_node: TemplateChildNode | RootNode | None
	_cursor: _ChildCursor | None
	_scopes: list[frozenset[str]]

	def __init__(self, root: RootNode, options: CompilerOptions) -> None:
		self.root = root
		self.options = options
		self.node_transforms = list(options.node_transforms)
		self.directive_transforms = dict(options.directive_transforms)
		self.prefix_identifiers = options.prefix_identifiers
		self.hoist_static = options.hoist_static
		self.components = {}
		self.directives = {}
		self.hoists = []
		self.constant_cache = {}
		self.current_node = root
		self._cursor = None
		self._scopes = []

	# -------------------------------------------------------------------------
	# Diagnostics
	# -------------------------------------------------------------------------
	def on_error(self, error: CompilerError) -> None:
		self.options.on_error(error)

	def on_warn(self, error: CompilerError) -> None:
		self.options.on_warn(error)

	# -------------------------------------------------------------------------
	# Tree position
	# -------------------------------------------------------------------------
	@property
	def parent(self) -> ParentNode | None:
		return self._cursor.parent if self._cursor else None

	@property
	def child_index(self) -> int:
		return self._cursor.index if self._cursor else 0

	def replace_node(self, node: TemplateChildNode) -> None:
		cursor = self._cursor
		assert cursor is not None, "the root node cannot be replaced"
		cursor.parent.children[cursor.index] = node
		self.current_node = node

	def remove_node(self, node: TemplateChildNode | None = None) -> None:
		cursor = self._cursor
		assert cursor is not None, "the root node cannot be removed"
		siblings = cursor.parent.children
		if node is None or node is self.current_node:
			removal_index = cursor.index
			self.current_node = None
			cursor.node_removed()
		else:
			removal_index = next(i for i, n in enumerate(siblings) if n is node)
			if removal_index < cursor.index:
				cursor.node_removed()
		siblings.pop(removal_index)

	# -------------------------------------------------------------------------
	# Scopes
	# -------------------------------------------------------------------------
	def add_identifiers(self, exp: ExpressionNode | str | Iterable[str] | None) -> None:
		"""Open a scope binding the names declared by ``exp``."""
		self._scopes.append(frozenset(_identifier_names(exp)))

	def remove_identifiers(self) -> None:
		"""Close the scope opened by the matching `add_identifiers` call."""
		self._scopes.pop()

	def is_local(self, name: str) -> bool:
		return any(name in scope for scope in self._scopes)

	@property
	def in_scope(self) -> bool:
		"""Whether any `v-for` or `v-slot` scope is open."""
		return bool(self._scopes)

	# -------------------------------------------------------------------------
	# Hoisting
	# -------------------------------------------------------------------------
	def hoist(self, exp: JSChildNode) -> SimpleExpressionNode:
		self.hoists.append(exp)
		identifier = SimpleExpressionNode(
			content=f"_hoisted_{len(self.hoists)}",
			const_type=ConstantType.CAN_HOIST,
			loc=exp.loc,
		)
		identifier.hoisted = exp
		return identifier


def _identifier_names(exp: ExpressionNode | str | Iterable[str] | None) -> list[str]:
	if exp is None:
		return []
	if isinstance(exp, str):
		return [exp]
	if isinstance(exp, (SimpleExpressionNode, CompoundExpressionNode)):
		return exp.identifiers or []
	return list(exp)


# =============================================================================
# Traversal
# =============================================================================
def transform(root: RootNode, options: CompilerOptions) -> TransformContext:
	"""Run the node transforms over ``root`` and attach its codegen node.

	Static hoisting and block flattening run afterwards, on the finished tree.
	"""
	context = TransformContext(root, options)
	traverse_node(root, context)
	if context.hoist_static:
		hoist_static(root, context)
	create_root_codegen(root)
	root.components = list(context.components)
	root.directives = list(context.directives)
	root.hoists = context.hoists
	flatten_blocks(root)
	return context


def traverse_node(node: TemplateChildNode | RootNode, context: TransformContext) -> None:
	context.current_node = node
	exit_fns: list[ExitFn] = []
	for node_transform in context.node_transforms:
		on_exit = node_transform(node, context)
		if on_exit is not None:
			if isinstance(on_exit, list):
				exit_fns.extend(on_exit)
			else:
				exit_fns.append(on_exit)
		current = context.current_node
		if current is None:
			# removed
			return
		# may have been replaced
		node = current

	if isinstance(node, IfNode):
		for branch in node.branches:
			traverse_node(branch, context)
	elif isinstance(node, (IfBranchNode, ElementNode, RootNode, ForNode)):
		traverse_children(node, context)

	context.current_node = node
	for fn in reversed(exit_fns):
		fn()


def traverse_children(parent: ParentNode, context: TransformContext) -> None:
	saved = context._cursor
	cursor = _ChildCursor(parent)
	while cursor.index < len(parent.children):
		child = parent.children[cursor.index]
		context._cursor = cursor
		traverse_node(child, context)
		cursor.index += 1
	context._cursor = saved


def create_structural_directive_transform(
	name: str | re.Pattern[str], fn: StructuralDirectiveTransform
) -> NodeTransform:
	"""Build a node transform that consumes directives matching ``name``.

	The matched directive is removed from the element before ``fn`` runs, so
	later transforms never see it.
	"""

	def matches(n: str) -> bool:
		return n == name if isinstance(name, str) else name.fullmatch(n) is not None

	def structural_transform(
		node: TemplateChildNode | RootNode, context: TransformContext
	) -> list[ExitFn] | None:
		if not isinstance(node, ElementNode):
			return None
		# structural directives on a slot template are handled by the slot builder
		if node.tag_type == ElementType.TEMPLATE and any(
			isinstance(p, DirectiveNode) and p.name == "slot" for p in node.props
		):
			return None
		exit_fns: list[ExitFn] = []
		i = 0
		while i < len(node.props):
			prop = node.props[i]
			if isinstance(prop, DirectiveNode) and matches(prop.name):
				node.props.pop(i)
				on_exit = fn(node, prop, context)
				if on_exit is not None:
					exit_fns.append(on_exit)
			else:
				i += 1
		return exit_fns

	return structural_transform


# =============================================================================
# Root codegen
# =============================================================================
def create_root_codegen(root: RootNode) -> None:
	children = root.children
	if len(children) == 1:
		child = children[0]
		if _is_single_element_root(child) and child.codegen_node is not None:
			codegen = child.codegen_node
			if isinstance(codegen, ElementCall):
				codegen.is_block = True
			root.codegen_node = codegen
		else:
			root.codegen_node = child
	elif len(children) > 1:
		root.codegen_node = create_element_call(
			FRAGMENT,
			None,
			list(children),
			PatchFlags.STABLE_FRAGMENT,
			is_block=True,
			loc=root.loc,
		)


def _is_single_element_root(child: TemplateChildNode) -> bool:
	return (
		isinstance(child, ElementNode)
		and not is_slot_outlet(child)
		and not is_template_node(child)
	)
