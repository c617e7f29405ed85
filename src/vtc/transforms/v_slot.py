"""Slot objects for component children.

A component's children compile to an object of slot functions:

	{
	  default: _withCtx(() => [...]),
	  header: _withCtx(({ title }) => [...]),
	  _: 1 /* STABLE */
	}

The `_` entry tells the runtime whether the slot object can change between
renders.
"""

from __future__ import annotations

import re

from vtc.ast import (
	CallExpression,
	CommentNode,
	CompoundExpressionNode,
	DirectiveNode,
	ElementNode,
	ElementType,
	ExpressionNode,
	ForNode,
	IfBranchNode,
	IfNode,
	InterpolationNode,
	Node,
	ObjectExpression,
	Property,
	RootNode,
	SimpleExpressionNode,
	SourceLocation,
	TemplateChildNode,
	TextCallNode,
	TextNode,
	create_call_expression,
	create_function_expression,
	create_object_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.runtime_helpers import WITH_CTX
from vtc.shared import SlotFlags
from vtc.transform import ExitFn, TransformContext
from vtc.utils import find_dir, is_static_exp, is_template_node


def track_slot_scopes(
	node: TemplateChildNode | RootNode, context: TransformContext
) -> ExitFn | None:
	"""Open the scope of the props bound by `v-slot` while its content is visited."""
	if not isinstance(node, ElementNode) or node.tag_type not in (
		ElementType.COMPONENT,
		ElementType.TEMPLATE,
	):
		return None
	v_slot = find_dir(node, "slot")
	if v_slot is None:
		return None
	context.add_identifiers(v_slot.exp)
	return context.remove_identifiers


def build_slots(node: ElementNode, context: TransformContext) -> tuple[ObjectExpression, bool]:
	"""Build the slots object of component ``node``.

	Returns the object and whether it may change between renders.
	"""
	children = node.children
	slots_properties: list[Property] = []
	if context.prefix_identifiers:
		has_dynamic_slots = _has_scope_ref(node, context)
	else:
		# without rewriting, reads of scope variables are not recorded
		has_dynamic_slots = context.in_scope

	on_component_slot = find_dir(node, "slot", allow_empty=True)
	if on_component_slot is not None:
		arg = on_component_slot.arg
		if arg is not None and not is_static_exp(arg):
			has_dynamic_slots = True
		slots_properties.append(
			create_object_property(
				arg or create_simple_expression("default", True),
				_build_slot_fn(on_component_slot.exp, children, node.loc),
			)
		)

	has_template_slots = False
	has_named_default_slot = False
	implicit_default_children: list[TemplateChildNode] = []
	seen_slot_names: set[str] = set()

	for slot_element in children:
		slot_dir = (
			find_dir(slot_element, "slot", allow_empty=True)
			if is_template_node(slot_element)
			else None
		)
		if slot_dir is None:
			if not isinstance(slot_element, CommentNode):
				implicit_default_children.append(slot_element)
			continue
		assert isinstance(slot_element, ElementNode)

		if on_component_slot is not None:
			context.on_error(create_compiler_error(ErrorCodes.X_V_SLOT_MIXED_SLOT_USAGE, slot_dir.loc))
			break

		has_template_slots = True

		structural = find_dir(slot_element, re.compile(r"if|else|else-if|for"), allow_empty=True)
		if structural is not None:
			context.on_error(
				create_compiler_error(ErrorCodes.X_V_SLOT_STRUCTURAL_DIRECTIVE, structural.loc)
			)
			continue

		slot_name = slot_dir.arg or create_simple_expression("default", True)
		static_slot_name: str | None = None
		if is_static_exp(slot_name):
			static_slot_name = slot_name.content
		else:
			has_dynamic_slots = True

		if static_slot_name is not None:
			if static_slot_name in seen_slot_names:
				context.on_error(
					create_compiler_error(ErrorCodes.X_V_SLOT_DUPLICATE_SLOT_NAMES, slot_dir.loc)
				)
				continue
			seen_slot_names.add(static_slot_name)
			if static_slot_name == "default":
				has_named_default_slot = True

		slots_properties.append(
			create_object_property(
				slot_name,
				_build_slot_fn(slot_dir.exp, slot_element.children, slot_element.loc),
			)
		)

	if on_component_slot is None:
		if not has_template_slots:
			slots_properties.append(
				create_object_property("default", _build_slot_fn(None, children, node.loc))
			)
		elif any(_is_non_whitespace_content(c) for c in implicit_default_children):
			if has_named_default_slot:
				context.on_error(
					create_compiler_error(
						ErrorCodes.X_V_SLOT_EXTRANEOUS_DEFAULT_SLOT_CHILDREN,
						implicit_default_children[0].loc,
					)
				)
			else:
				slots_properties.append(
					create_object_property(
						"default", _build_slot_fn(None, implicit_default_children, node.loc)
					)
				)

	if has_dynamic_slots:
		slot_flag = SlotFlags.DYNAMIC
	elif _has_forwarded_slots(node.children):
		slot_flag = SlotFlags.FORWARDED
	else:
		slot_flag = SlotFlags.STABLE
	slots_properties.append(
		create_object_property(
			"_", create_simple_expression(f"{int(slot_flag)} /* {slot_flag.name} */", False)
		)
	)
	return create_object_expression(slots_properties, node.loc), has_dynamic_slots


def _build_slot_fn(
	props: ExpressionNode | None,
	children: list[TemplateChildNode],
	loc: SourceLocation,
) -> CallExpression:
	fn = create_function_expression(
		props,
		list(children),
		newline=False,
		is_slot=True,
		loc=children[0].loc if children else loc,
	)
	return create_call_expression(WITH_CTX, [fn], loc)


def _is_non_whitespace_content(node: TemplateChildNode) -> bool:
	if isinstance(node, TextNode):
		return bool(node.content.strip())
	if isinstance(node, TextCallNode):
		return _is_non_whitespace_content(node.content)
	return True


def _has_forwarded_slots(children: list[TemplateChildNode] | list[IfBranchNode]) -> bool:
	for child in children:
		if isinstance(child, ElementNode):
			if child.tag_type == ElementType.SLOT or _has_forwarded_slots(child.children):
				return True
		elif isinstance(child, IfNode):
			if _has_forwarded_slots(child.branches):
				return True
		elif isinstance(child, (IfBranchNode, ForNode)):
			if _has_forwarded_slots(child.children):
				return True
	return False


# =============================================================================
# Scope references
# =============================================================================
def _has_scope_ref(node: Node | None, context: TransformContext) -> bool:
	"""Whether anything under ``node`` reads a name bound by an enclosing `v-for`/`v-slot`.

	Slot content that does can change from one render to the next.
	"""
	if node is None:
		return False
	if isinstance(node, ElementNode):
		for p in node.props:
			if isinstance(p, DirectiveNode) and (
				_has_scope_ref(p.arg, context) or _has_scope_ref(p.exp, context)
			):
				return True
		return any(_has_scope_ref(c, context) for c in node.children)
	if isinstance(node, ForNode):
		if _has_scope_ref(node.source, context):
			return True
		return any(_has_scope_ref(c, context) for c in node.children)
	if isinstance(node, IfNode):
		return any(_has_scope_ref(b, context) for b in node.branches)
	if isinstance(node, IfBranchNode):
		if _has_scope_ref(node.condition, context):
			return True
		return any(_has_scope_ref(c, context) for c in node.children)
	if isinstance(node, (InterpolationNode, TextCallNode)):
		return _has_scope_ref(node.content, context)
	if isinstance(node, SimpleExpressionNode):
		return _reads_local(node.local_refs, context)
	if isinstance(node, CompoundExpressionNode):
		return _reads_local(node.local_refs, context) or any(
			_has_scope_ref(c, context) for c in node.children if isinstance(c, Node)
		)
	return False


def _reads_local(names: list[str] | None, context: TransformContext) -> bool:
	# the component's own slot props are out of scope by the time its slots are built
	return any(context.is_local(name) for name in names or ())
