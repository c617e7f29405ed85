from __future__ import annotations

from vtc.ast import (
	ConstantType,
	DirectiveNode,
	ElementNode,
	JSChildNode,
	create_call_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.dom.errors import DOMErrorCodes, create_dom_compiler_error
from vtc.hoist_static import get_constant_type
from vtc.runtime_helpers import TO_DISPLAY_STRING
from vtc.transform import DirectiveTransformResult, TransformContext


def transform_v_text(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	exp = dir.exp
	if exp is None:
		context.on_error(create_dom_compiler_error(DOMErrorCodes.X_V_TEXT_NO_EXPRESSION, dir.loc))
	if node.children:
		context.on_error(create_dom_compiler_error(DOMErrorCodes.X_V_TEXT_WITH_CHILDREN, dir.loc))
		node.children.clear()

	value: JSChildNode
	if exp is None:
		value = create_simple_expression("", True)
	elif get_constant_type(exp, context) > ConstantType.NOT_CONSTANT:
		value = exp
	else:
		value = create_call_expression(TO_DISPLAY_STRING, [exp], dir.loc)
	return DirectiveTransformResult(props=[create_object_property("textContent", value)])
