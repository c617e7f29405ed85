from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class RuntimeHelper:
	"""A function exported by the renderer runtime that generated code calls.

	Generated code refers to a helper through its alias, the name prefixed
	with an underscore. Environment layers define their own helpers by
	instantiating this class; no registration step is needed.
	"""

	name: str

	@property
	def alias(self) -> str:
		return f"_{self.name}"


FRAGMENT = RuntimeHelper("Fragment")
OPEN_BLOCK = RuntimeHelper("openBlock")
CREATE_BLOCK = RuntimeHelper("createBlock")
CREATE_ELEMENT_BLOCK = RuntimeHelper("createElementBlock")
CREATE_VNODE = RuntimeHelper("createVNode")
CREATE_ELEMENT_VNODE = RuntimeHelper("createElementVNode")
CREATE_COMMENT = RuntimeHelper("createCommentVNode")
CREATE_TEXT = RuntimeHelper("createTextVNode")
RESOLVE_COMPONENT = RuntimeHelper("resolveComponent")
RESOLVE_DYNAMIC_COMPONENT = RuntimeHelper("resolveDynamicComponent")
RESOLVE_DIRECTIVE = RuntimeHelper("resolveDirective")
WITH_DIRECTIVES = RuntimeHelper("withDirectives")
RENDER_LIST = RuntimeHelper("renderList")
RENDER_SLOT = RuntimeHelper("renderSlot")
WITH_CTX = RuntimeHelper("withCtx")
TO_DISPLAY_STRING = RuntimeHelper("toDisplayString")
MERGE_PROPS = RuntimeHelper("mergeProps")
NORMALIZE_CLASS = RuntimeHelper("normalizeClass")
NORMALIZE_STYLE = RuntimeHelper("normalizeStyle")
TO_HANDLERS = RuntimeHelper("toHandlers")
TO_HANDLER_KEY = RuntimeHelper("toHandlerKey")
CAMELIZE = RuntimeHelper("camelize")


def vnode_helper(is_component: bool) -> RuntimeHelper:
	return CREATE_VNODE if is_component else CREATE_ELEMENT_VNODE


def vnode_block_helper(is_component: bool) -> RuntimeHelper:
	return CREATE_BLOCK if is_component else CREATE_ELEMENT_BLOCK
