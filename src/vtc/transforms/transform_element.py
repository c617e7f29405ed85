"""Element and component lowering.

Runs on exit, once the children have their final shape, and attaches an
`ElementCall` to every plain element and component. Props are collected into
an object literal; `v-bind="obj"` and `v-on="obj"` split the props into
segments combined with `mergeProps`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from vtc.ast import (
	ArrayExpression,
	AttributeNode,
	CallArgument,
	CallExpression,
	CompoundExpressionNode,
	ConstantType,
	DirectiveNode,
	ElementCallChildren,
	ElementNode,
	ElementType,
	ExpressionNode,
	InterpolationNode,
	ObjectExpression,
	PropsExpression,
	Property,
	RootNode,
	SimpleExpressionNode,
	TemplateChildNode,
	TextNode,
	create_array_expression,
	create_call_expression,
	create_element_call,
	create_object_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.hoist_static import get_constant_type
from vtc.runtime_helpers import (
	FRAGMENT,
	MERGE_PROPS,
	NORMALIZE_CLASS,
	NORMALIZE_STYLE,
	RESOLVE_DYNAMIC_COMPONENT,
	TO_HANDLERS,
	RuntimeHelper,
)
from vtc.shared import PatchFlags, is_builtin_directive, is_on
from vtc.transform import ExitFn, TransformContext
from vtc.transforms.v_on import is_handler_key
from vtc.transforms.v_slot import build_slots
from vtc.utils import (
	find_dir,
	find_prop,
	is_static_arg_of,
	is_static_exp,
	is_template_node,
	to_valid_asset_id,
)


def transform_element(node: TemplateChildNode | RootNode, context: TransformContext) -> ExitFn:
	def post_transform_element() -> None:
		node = context.current_node
		if is_template_node(node):
			_lower_stray_slot_template(node, context)
			return
		if not isinstance(node, ElementNode) or node.tag_type not in (
			ElementType.ELEMENT,
			ElementType.COMPONENT,
		):
			return

		tag = node.tag
		is_component = node.tag_type == ElementType.COMPONENT
		vnode_tag = resolve_component_type(node, context) if is_component else json.dumps(tag)
		is_dynamic_component = (
			isinstance(vnode_tag, CallExpression) and vnode_tag.callee is RESOLVE_DYNAMIC_COMPONENT
		)

		vnode_props: PropsExpression | None = None
		vnode_children: ElementCallChildren = None
		vnode_directives: ArrayExpression | None = None
		patch_flag = 0
		dynamic_prop_names: list[str] = []
		# every component call is the root of its own block
		should_use_block = is_component or tag in ("svg", "foreignObject")

		if node.props or (context.options.scope_id and not is_component):
			result = build_props(node, context, None, is_component, is_dynamic_component)
			vnode_props = result.props
			patch_flag = result.patch_flag
			dynamic_prop_names = result.dynamic_prop_names
			if result.directives:
				vnode_directives = create_array_expression(
					[build_directive_args(d, result.runtime_helpers, context) for d in result.directives]
				)
			if result.should_use_block:
				should_use_block = True

		if node.children:
			if is_component:
				slots, has_dynamic_slots = build_slots(node, context)
				vnode_children = slots
				if has_dynamic_slots:
					patch_flag |= PatchFlags.DYNAMIC_SLOTS
			elif len(node.children) == 1:
				child = node.children[0]
				has_dynamic_text_child = isinstance(
					child, (InterpolationNode, CompoundExpressionNode)
				)
				if (
					has_dynamic_text_child
					and get_constant_type(child, context) == ConstantType.NOT_CONSTANT
				):
					patch_flag |= PatchFlags.TEXT
				if has_dynamic_text_child or isinstance(child, TextNode):
					vnode_children = child
				else:
					vnode_children = list(node.children)
			else:
				vnode_children = list(node.children)

		node.codegen_node = create_element_call(
			vnode_tag,
			vnode_props,
			vnode_children,
			patch_flag,
			dynamic_prop_names or None,
			vnode_directives,
			is_block=should_use_block,
			is_component=is_component,
			loc=node.loc,
		)

	return post_transform_element


def _lower_stray_slot_template(node: ElementNode, context: TransformContext) -> None:
	"""`<template v-slot>` outside a component renders its children as a fragment."""
	parent = context.parent
	if isinstance(parent, ElementNode) and parent.tag_type == ElementType.COMPONENT:
		return
	v_slot = find_dir(node, "slot", allow_empty=True)
	if v_slot is None:
		return
	context.on_error(create_compiler_error(ErrorCodes.X_V_SLOT_MISPLACED, v_slot.loc))
	node.codegen_node = create_element_call(
		FRAGMENT,
		None,
		list(node.children),
		PatchFlags.STABLE_FRAGMENT,
		is_block=True,
		loc=node.loc,
	)


def resolve_component_type(node: ElementNode, context: TransformContext) -> str | CallExpression:
	"""`_component_Foo` for registered components, a `resolveDynamicComponent` call for `<component>`."""
	tag = node.tag
	is_explicit_dynamic = _is_component_tag(tag)
	is_prop = find_prop(node, "is", allow_empty=True)
	if is_prop is not None:
		if is_explicit_dynamic:
			exp: ExpressionNode | None
			if isinstance(is_prop, AttributeNode):
				exp = (
					create_simple_expression(is_prop.value.content, True)
					if is_prop.value is not None
					else None
				)
			else:
				exp = is_prop.exp
			if exp is not None:
				return create_call_expression(RESOLVE_DYNAMIC_COMPONENT, [exp])
		elif (
			isinstance(is_prop, AttributeNode)
			and is_prop.value is not None
			and is_prop.value.content.startswith("vue:")
		):
			tag = is_prop.value.content[4:]

	context.components[tag] = None
	return to_valid_asset_id(tag, "component")


def _is_component_tag(tag: str) -> bool:
	return tag in ("component", "Component")


# =============================================================================
# Props
# =============================================================================
@dataclass(slots=True)
class PropsBuildResult:
	props: PropsExpression | None
	directives: list[DirectiveNode]
	patch_flag: int
	dynamic_prop_names: list[str]
	should_use_block: bool
	# runtime helper implementing a built-in directive, keyed by id of the directive
	runtime_helpers: dict[int, RuntimeHelper] = field(default_factory=dict)


class _PatchFlagAnalysis:
	__slots__: tuple[str, ...] = (
		"context",
		"is_component",
		"is_dynamic_component",
		"has_ref",
		"has_class_binding",
		"has_style_binding",
		"has_hydration_event_binding",
		"has_dynamic_keys",
		"dynamic_prop_names",
	)

	def __init__(
		self, context: TransformContext, is_component: bool, is_dynamic_component: bool
	) -> None:
		self.context = context
		self.is_component = is_component
		self.is_dynamic_component = is_dynamic_component
		self.has_ref = False
		self.has_class_binding = False
		self.has_style_binding = False
		self.has_hydration_event_binding = False
		self.has_dynamic_keys = False
		self.dynamic_prop_names: list[str] = []

	def analyze(self, prop: Property) -> None:
		key, value = prop.key, prop.value
		if not is_static_exp(key):
			self.has_dynamic_keys = True
			return
		name = key.content
		is_event_handler = is_on(name)
		if (
			is_event_handler
			and (not self.is_component or self.is_dynamic_component)
			and name.lower() != "onclick"
			and name != "onUpdate:modelValue"
		):
			self.has_hydration_event_binding = True
		if isinstance(value, (SimpleExpressionNode, CompoundExpressionNode)) and (
			get_constant_type(value, self.context) > ConstantType.NOT_CONSTANT
		):
			return
		if name == "ref":
			self.has_ref = True
		elif name == "class":
			self.has_class_binding = True
		elif name == "style":
			self.has_style_binding = True
		elif name != "key" and name not in self.dynamic_prop_names:
			self.dynamic_prop_names.append(name)
		# class and style are plain props to a component
		if (
			self.is_component
			and name in ("class", "style")
			and name not in self.dynamic_prop_names
		):
			self.dynamic_prop_names.append(name)


def build_props(
	node: ElementNode,
	context: TransformContext,
	props: list[AttributeNode | DirectiveNode] | None = None,
	is_component: bool = False,
	is_dynamic_component: bool = False,
) -> PropsBuildResult:
	"""Lower the props of ``node`` (or the given subset) to a props expression."""
	tag = node.tag
	has_children = bool(node.children)
	properties: list[Property] = []
	merge_args: list[PropsExpression] = []
	runtime_directives: list[DirectiveNode] = []
	runtime_helpers: dict[int, RuntimeHelper] = {}
	should_use_block = False
	patch_flag = 0
	analysis = _PatchFlagAnalysis(context, is_component, is_dynamic_component)

	def push_merge_arg(arg: PropsExpression | None = None) -> None:
		nonlocal properties
		if properties:
			merge_args.append(create_object_expression(dedupe_properties(properties), node.loc))
			properties = []
		if arg is not None:
			merge_args.append(arg)

	for prop in node.props if props is None else props:
		if isinstance(prop, AttributeNode):
			name, value = prop.name, prop.value
			if name == "ref":
				analysis.has_ref = True
			# `is` selects the component, it is not passed down
			if name == "is" and (
				_is_component_tag(tag) or (value is not None and value.content.startswith("vue:"))
			):
				continue
			properties.append(
				create_object_property(
					create_simple_expression(name, True, prop.name_loc),
					create_simple_expression(
						value.content if value is not None else "",
						True,
						value.loc if value is not None else prop.loc,
					),
				)
			)
			continue

		name, arg, exp = prop.name, prop.arg, prop.exp
		is_v_bind = name == "bind"
		is_v_on = name == "on"

		if name == "slot":
			if not is_component:
				context.on_error(create_compiler_error(ErrorCodes.X_V_SLOT_MISPLACED, prop.loc))
			continue
		if name in ("once", "memo", "is"):
			continue
		if is_v_bind and is_static_arg_of(arg, "is") and _is_component_tag(tag):
			continue
		# a changing key must re-create the element
		if is_v_bind and is_static_arg_of(arg, "key"):
			should_use_block = True

		if arg is None and (is_v_bind or is_v_on):
			analysis.has_dynamic_keys = True
			if exp is not None:
				if is_v_bind:
					push_merge_arg()
					merge_args.append(exp)
				else:
					push_merge_arg(
						create_call_expression(
							TO_HANDLERS, [exp] if is_component else [exp, "true"], prop.loc
						)
					)
			else:
				context.on_error(
					create_compiler_error(
						ErrorCodes.X_V_BIND_NO_EXPRESSION
						if is_v_bind
						else ErrorCodes.X_V_ON_NO_EXPRESSION,
						prop.loc,
					)
				)
			continue

		if is_v_bind and "prop" in prop.modifiers:
			patch_flag |= PatchFlags.NEED_HYDRATION

		directive_transform = context.directive_transforms.get(name)
		if directive_transform is not None:
			result = directive_transform(prop, node, context)
			for p in result.props:
				analysis.analyze(p)
			if is_v_on and arg is not None and not is_static_exp(arg):
				push_merge_arg(create_object_expression(result.props, node.loc))
			else:
				properties.extend(result.props)
			if result.need_runtime:
				runtime_directives.append(prop)
				if isinstance(result.need_runtime, RuntimeHelper):
					runtime_helpers[id(prop)] = result.need_runtime
		elif not is_builtin_directive(name):
			# user directive; may hook into before-update of children
			runtime_directives.append(prop)
			if has_children:
				should_use_block = True

	scope_id = context.options.scope_id
	if scope_id and node.tag_type == ElementType.ELEMENT:
		properties.append(create_object_property(scope_id, create_simple_expression("", True)))

	props_expression: PropsExpression | None = None
	if merge_args:
		push_merge_arg()
		props_expression = create_call_expression(MERGE_PROPS, list(merge_args), node.loc)
	elif properties:
		props_expression = create_object_expression(dedupe_properties(properties), node.loc)

	if analysis.has_dynamic_keys:
		patch_flag |= PatchFlags.FULL_PROPS
	else:
		if analysis.has_class_binding and not is_component:
			patch_flag |= PatchFlags.CLASS
		if analysis.has_style_binding and not is_component:
			patch_flag |= PatchFlags.STYLE
		if analysis.dynamic_prop_names:
			patch_flag |= PatchFlags.PROPS
		if analysis.has_hydration_event_binding:
			patch_flag |= PatchFlags.NEED_HYDRATION
	if (
		not should_use_block
		and patch_flag in (0, PatchFlags.NEED_HYDRATION)
		and (analysis.has_ref or runtime_directives)
	):
		patch_flag |= PatchFlags.NEED_PATCH

	if isinstance(props_expression, ObjectExpression):
		_normalize_class_and_style(props_expression, analysis.has_style_binding)

	return PropsBuildResult(
		props=props_expression,
		directives=runtime_directives,
		patch_flag=patch_flag,
		dynamic_prop_names=analysis.dynamic_prop_names,
		should_use_block=should_use_block,
		runtime_helpers=runtime_helpers,
	)


def _normalize_class_and_style(props: ObjectExpression, has_style_binding: bool) -> None:
	class_prop: Property | None = None
	style_prop: Property | None = None
	for p in props.properties:
		if is_static_exp(p.key):
			if p.key.content == "class":
				class_prop = p
			elif p.key.content == "style":
				style_prop = p
		elif not is_handler_key(p.key):
			# the runtime normalizes objects with computed keys itself
			return
	if class_prop is not None and not is_static_exp(class_prop.value):
		class_prop.value = create_call_expression(NORMALIZE_CLASS, [class_prop.value])
	if style_prop is not None:
		value = style_prop.value
		if (
			has_style_binding
			or (isinstance(value, SimpleExpressionNode) and value.content.strip().startswith("["))
			or isinstance(value, ArrayExpression)
		):
			style_prop.value = create_call_expression(NORMALIZE_STYLE, [value])


def dedupe_properties(properties: list[Property]) -> list[Property]:
	"""Drop repeated static keys; repeated `class`, `style` and handlers become arrays."""
	known: dict[str, Property] = {}
	deduped: list[Property] = []
	for prop in properties:
		key = prop.key
		if not is_static_exp(key):
			deduped.append(prop)
			continue
		existing = known.get(key.content)
		if existing is None:
			known[key.content] = prop
			deduped.append(prop)
		elif key.content in ("class", "style") or is_on(key.content):
			_merge_as_array(existing, prop)
	return deduped


def _merge_as_array(existing: Property, incoming: Property) -> None:
	if isinstance(existing.value, ArrayExpression):
		existing.value.elements.append(incoming.value)
	else:
		existing.value = create_array_expression([existing.value, incoming.value], existing.loc)


def build_directive_args(
	dir: DirectiveNode,
	runtime_helpers: dict[int, RuntimeHelper],
	context: TransformContext,
) -> ArrayExpression:
	"""`[directive, value, arg, modifiers]` as passed to `withDirectives`."""
	args: list[CallArgument] = []
	runtime = runtime_helpers.get(id(dir))
	if runtime is not None:
		args.append(runtime)
	else:
		context.directives[dir.name] = None
		args.append(to_valid_asset_id(dir.name, "directive"))
	if dir.exp is not None:
		args.append(dir.exp)
	if dir.arg is not None:
		if dir.exp is None:
			args.append("void 0")
		args.append(dir.arg)
	if dir.modifiers:
		if dir.arg is None:
			if dir.exp is None:
				args.append("void 0")
			args.append("void 0")
		true_exp = create_simple_expression("true", False, dir.loc)
		args.append(
			create_object_expression(
				[create_object_property(m, true_exp) for m in dir.modifiers], dir.loc
			)
		)
	return create_array_expression(args, dir.loc)
