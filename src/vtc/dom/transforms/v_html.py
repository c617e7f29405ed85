from __future__ import annotations

from vtc.ast import DirectiveNode, ElementNode, create_object_property, create_simple_expression
from vtc.dom.errors import DOMErrorCodes, create_dom_compiler_error
from vtc.transform import DirectiveTransformResult, TransformContext


def transform_v_html(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	"""`v-html="raw"` -> `{ innerHTML: raw }`; element children are dropped."""
	exp = dir.exp
	if exp is None:
		context.on_error(create_dom_compiler_error(DOMErrorCodes.X_V_HTML_NO_EXPRESSION, dir.loc))
	if node.children:
		context.on_error(create_dom_compiler_error(DOMErrorCodes.X_V_HTML_WITH_CHILDREN, dir.loc))
		node.children.clear()
	return DirectiveTransformResult(
		props=[
			create_object_property(
				"innerHTML", exp if exp is not None else create_simple_expression("", True)
			)
		]
	)
