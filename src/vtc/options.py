from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from vtc.errors import CompilerError, default_on_error, default_on_warn

if TYPE_CHECKING:
	from vtc.ast import ElementNode
	from vtc.parser import TextMode
	from vtc.transform import DirectiveTransform, NodeTransform

WhitespaceStrategy = Literal["condense", "preserve"]
CodegenMode = Literal["function", "module"]


def _no(_tag: str) -> bool:
	return False


@dataclass
class CompilerOptions:
	"""Configuration for one compile call.

	Environment layers (such as `vtc.dom`) derive their options from this
	dataclass with `dataclasses.replace`; nothing here is mutated during a
	compile.
	"""

	# -------------------------------------------------------------------------
	# Parsing
	# -------------------------------------------------------------------------
	delimiters: tuple[str, str] = ("{{", "}}")
	"""Open and close markers of text interpolation."""

	whitespace: WhitespaceStrategy = "condense"
	"""`condense` trims and collapses insignificant whitespace; `preserve` keeps all of it."""

	comments: bool = True
	"""Keep comment nodes in the output."""

	is_native_tag: Callable[[str], bool] | None = None
	"""Tags known to the platform. When set, any other tag is compiled as a component."""

	is_void_tag: Callable[[str], bool] = _no
	"""Tags that never have children or an end tag (`<br>`, `<img>`)."""

	is_pre_tag: Callable[[str], bool] = _no
	"""Tags whose whitespace is significant (`<pre>`)."""

	get_text_mode: Callable[[ElementNode, ElementNode | None], TextMode] | None = None
	"""How the content of an element is tokenized. Defaults to regular markup."""

	decode_entities: Callable[[str], str] | None = None
	"""Decodes character references in text and attribute values."""

	# -------------------------------------------------------------------------
	# Transforms
	# -------------------------------------------------------------------------
	prefix_identifiers: bool = True
	"""Rewrite free identifiers to `_ctx.<name>`. When off, the render body runs inside `with (_ctx)`."""

	hoist_static: bool = True
	"""Lift constant subtrees out of the render function."""

	node_transforms: list[NodeTransform] = field(default_factory=list)
	"""Extra node transforms, run after the built-in ones."""

	directive_transforms: dict[str, DirectiveTransform] = field(default_factory=dict)
	"""Directive transforms by name; entries override the built-in ones."""

	# -------------------------------------------------------------------------
	# Codegen
	# -------------------------------------------------------------------------
	mode: CodegenMode = "function"
	"""`function` returns the render function from a script body; `module` exports it."""

	runtime_module_name: str = "vue"
	"""Module that runtime helpers are imported from in module mode."""

	runtime_global_name: str = "Vue"
	"""Global object that runtime helpers are read from in function mode."""

	scope_id: str | None = None
	"""Attribute added to every plain element, for scoped styles."""

	# -------------------------------------------------------------------------
	# Diagnostics
	# -------------------------------------------------------------------------
	on_error: Callable[[CompilerError], None] = default_on_error
	on_warn: Callable[[CompilerError], None] = default_on_warn
