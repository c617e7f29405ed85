from __future__ import annotations

from vtc.ast import ElementNode, ElementType, RootNode, TemplateChildNode
from vtc.dom.errors import DOMErrorCodes, create_dom_compiler_error
from vtc.transform import TransformContext


def ignore_side_effect_tags(node: TemplateChildNode | RootNode, context: TransformContext) -> None:
	"""Remove `<script>` and `<style>` from templates; they would run on every render."""
	if (
		isinstance(node, ElementNode)
		and node.tag_type == ElementType.ELEMENT
		and node.tag in ("script", "style")
	):
		context.on_error(
			create_dom_compiler_error(DOMErrorCodes.X_IGNORED_SIDE_EFFECT_TAG, node.loc)
		)
		context.remove_node()
