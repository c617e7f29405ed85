from __future__ import annotations

from vtc.ast import DirectiveNode, ElementNode, ElementType
from vtc.dom.errors import DOMErrorCodes, create_dom_compiler_error
from vtc.dom.runtime_helpers import (
	V_MODEL_CHECKBOX,
	V_MODEL_DYNAMIC,
	V_MODEL_RADIO,
	V_MODEL_SELECT,
	V_MODEL_TEXT,
)
from vtc.runtime_helpers import RuntimeHelper
from vtc.transform import DirectiveTransformResult, TransformContext
from vtc.transforms.v_model import transform_model as base_transform_model
from vtc.utils import find_prop, has_dynamic_key_v_bind, is_static_exp


def transform_model(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	"""`v-model` on form elements: keep the update handler, let a runtime directive set the value."""
	result = base_transform_model(dir, node, context)
	# components, and models that already failed, keep the core lowering
	if not result.props or node.tag_type == ElementType.COMPONENT:
		return result

	if dir.arg is not None:
		context.on_error(
			create_dom_compiler_error(DOMErrorCodes.X_V_MODEL_ARG_ON_ELEMENT, dir.arg.loc)
		)

	tag = node.tag
	if tag in ("input", "textarea", "select"):
		directive: RuntimeHelper | None = V_MODEL_TEXT
		if tag == "input":
			type_prop = find_prop(node, "type")
			if type_prop is not None:
				if isinstance(type_prop, DirectiveNode):
					directive = V_MODEL_DYNAMIC
				elif type_prop.value is not None:
					input_type = type_prop.value.content
					if input_type == "radio":
						directive = V_MODEL_RADIO
					elif input_type == "checkbox":
						directive = V_MODEL_CHECKBOX
					elif input_type == "file":
						directive = None
						context.on_error(
							create_dom_compiler_error(
								DOMErrorCodes.X_V_MODEL_ON_FILE_INPUT_ELEMENT, dir.loc
							)
						)
			elif has_dynamic_key_v_bind(node):
				directive = V_MODEL_DYNAMIC
		elif tag == "select":
			directive = V_MODEL_SELECT

		if directive is V_MODEL_TEXT:
			value = find_prop(node, "value")
			if value is not None:
				context.on_error(
					create_dom_compiler_error(DOMErrorCodes.X_V_MODEL_UNNECESSARY_VALUE, value.loc)
				)
		if directive is not None:
			result.need_runtime = directive
	else:
		context.on_error(
			create_dom_compiler_error(DOMErrorCodes.X_V_MODEL_ON_INVALID_ELEMENT, dir.loc)
		)

	# the runtime directive writes the value itself
	result.props = [
		p for p in result.props if not (is_static_exp(p.key) and p.key.content == "modelValue")
	]
	return result
