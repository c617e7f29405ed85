from __future__ import annotations

from vtc.ast import DirectiveNode, ElementNode
from vtc.dom.errors import DOMErrorCodes, create_dom_compiler_error
from vtc.dom.runtime_helpers import V_SHOW
from vtc.transform import DirectiveTransformResult, TransformContext


def transform_show(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	if dir.exp is None:
		context.on_error(create_dom_compiler_error(DOMErrorCodes.X_V_SHOW_NO_EXPRESSION, dir.loc))
	return DirectiveTransformResult(need_runtime=V_SHOW)
