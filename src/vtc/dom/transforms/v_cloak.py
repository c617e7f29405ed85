from __future__ import annotations

from vtc.ast import DirectiveNode, ElementNode
from vtc.transform import DirectiveTransformResult, TransformContext


def transform_cloak(
	dir: DirectiveNode, node: ElementNode, context: TransformContext
) -> DirectiveTransformResult:
	# only meaningful for in-DOM templates, which are compiled away
	return DirectiveTransformResult()
