from __future__ import annotations

import dataclasses

from vtc.ast import RootNode
from vtc.codegen import CodegenResult
from vtc.compile import base_compile
from vtc.dom.parser_options import decode_html, get_text_mode, is_native_tag, is_pre_tag, is_void_tag
from vtc.dom.transforms.ignore_side_effect_tags import ignore_side_effect_tags
from vtc.dom.transforms.v_cloak import transform_cloak
from vtc.dom.transforms.v_html import transform_v_html
from vtc.dom.transforms.v_model import transform_model
from vtc.dom.transforms.v_on import transform_on
from vtc.dom.transforms.v_show import transform_show
from vtc.dom.transforms.v_text import transform_v_text
from vtc.options import CompilerOptions
from vtc.parser import base_parse
from vtc.transform import DirectiveTransform, NodeTransform

DOM_NODE_TRANSFORMS: list[NodeTransform] = [ignore_side_effect_tags]

DOM_DIRECTIVE_TRANSFORMS: dict[str, DirectiveTransform] = {
	"cloak": transform_cloak,
	"html": transform_v_html,
	"text": transform_v_text,
	# overrides the core transforms
	"model": transform_model,
	"on": transform_on,
	"show": transform_show,
}


def dom_options(options: CompilerOptions | None = None) -> CompilerOptions:
	"""``options`` with the HTML tag tables, tokenizer hooks and DOM transforms filled in."""
	options = options or CompilerOptions()
	return dataclasses.replace(
		options,
		is_native_tag=is_native_tag,
		is_void_tag=is_void_tag,
		is_pre_tag=is_pre_tag,
		get_text_mode=get_text_mode,
		decode_entities=decode_html,
		node_transforms=[*DOM_NODE_TRANSFORMS, *options.node_transforms],
		directive_transforms={**DOM_DIRECTIVE_TRANSFORMS, **options.directive_transforms},
	)


def compile(template: str | RootNode, options: CompilerOptions | None = None) -> CodegenResult:
	return base_compile(template, dom_options(options))


def parse(template: str, options: CompilerOptions | None = None) -> RootNode:
	return base_parse(template, dom_options(options))
