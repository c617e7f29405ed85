"""DOM event modifiers on top of the core `v-on` transform.

`.stop`, `.prevent`, `.self` and system-key modifiers wrap the handler in
`withModifiers`; key names wrap it in `withKeys`; `.once`, `.capture` and
`.passive` are encoded into the event name as suffixes (`onClickOnce`).
"""

from __future__ import annotations

import json

from vtc.ast import (
	DirectiveNode,
	ElementNode,
	ExpressionNode,
	JSChildNode,
	create_call_expression,
	create_compound_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.dom.runtime_helpers import V_ON_WITH_KEYS, V_ON_WITH_MODIFIERS
from vtc.shared import capitalize
from vtc.transform import DirectiveTransformResult, TransformContext
from vtc.transforms.v_on import transform_on as base_transform_on
from vtc.utils import is_static_exp

_EVENT_OPTION_MODIFIERS = frozenset({"passive", "once", "capture"})
_NON_KEY_MODIFIERS = frozenset(
	{
		# event propagation management
		"stop",
		"prevent",
		"self",
		# system modifiers + exact
		"ctrl",
		"shift",
		"alt",
		"meta",
		"exact",
		# mouse
		"middle",
	}
)
# left & right could be mouse or key modifiers based on event type
_MAYBE_KEY_MODIFIERS = frozenset({"left", "right"})
_KEYBOARD_EVENTS = frozenset({"onkeyup", "onkeydown", "onkeypress"})


def _resolve_modifiers(
	key: ExpressionNode, modifiers: list[str]
) -> tuple[list[str], list[str], list[str]]:
	key_modifiers: list[str] = []
	non_key_modifiers: list[str] = []
	event_option_modifiers: list[str] = []
	for modifier in modifiers:
		if modifier in _EVENT_OPTION_MODIFIERS:
			event_option_modifiers.append(modifier)
		elif modifier in _MAYBE_KEY_MODIFIERS:
			if is_static_exp(key):
				if key.content.lower() in _KEYBOARD_EVENTS:
					key_modifiers.append(modifier)
				else:
					non_key_modifiers.append(modifier)
			else:
				key_modifiers.append(modifier)
				non_key_modifiers.append(modifier)
		elif modifier in _NON_KEY_MODIFIERS:
			non_key_modifiers.append(modifier)
		else:
			key_modifiers.append(modifier)
	return key_modifiers, non_key_modifiers, event_option_modifiers


def _transform_click(key: ExpressionNode, event: str) -> ExpressionNode:
	if is_static_exp(key):
		if key.content.lower() == "onclick":
			return create_simple_expression(event, True, key.loc)
		return key
	return create_compound_expression(
		["(", key, f') === "onClick" ? "{event}" : (', key, ")"]
	)


def _js_list(items: list[str]) -> str:
	return json.dumps(items, separators=(",", ":"))


def transform_on(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	def augment(result: DirectiveTransformResult) -> DirectiveTransformResult:
		if not dir.modifiers:
			return result
		key = result.props[0].key
		handler: JSChildNode = result.props[0].value
		key_modifiers, non_key_modifiers, event_option_modifiers = _resolve_modifiers(
			key, dir.modifiers
		)

		# a right click fires contextmenu, a middle click fires mouseup
		if "right" in non_key_modifiers:
			key = _transform_click(key, "onContextmenu")
		if "middle" in non_key_modifiers:
			key = _transform_click(key, "onMouseup")

		if non_key_modifiers:
			handler = create_call_expression(
				V_ON_WITH_MODIFIERS, [handler, _js_list(non_key_modifiers)]
			)
		if key_modifiers and (
			not is_static_exp(key) or key.content.lower() in _KEYBOARD_EVENTS
		):
			handler = create_call_expression(V_ON_WITH_KEYS, [handler, _js_list(key_modifiers)])

		if event_option_modifiers:
			suffix = "".join(capitalize(m) for m in event_option_modifiers)
			if is_static_exp(key):
				key = create_simple_expression(f"{key.content}{suffix}", True, key.loc)
			else:
				key = create_compound_expression(["(", key, f') + "{suffix}"'])

		return DirectiveTransformResult(props=[create_object_property(key, handler)])

	return base_transform_on(dir, node, context, augment)
