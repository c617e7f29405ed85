from __future__ import annotations

import dataclasses
import logging

from vtc.ast import RootNode
from vtc.codegen import CodegenResult, generate
from vtc.errors import CompilerError, ErrorCodes, create_compiler_error
from vtc.options import CompilerOptions
from vtc.parser import base_parse
from vtc.transform import DirectiveTransform, NodeTransform, transform
from vtc.transforms.transform_element import transform_element
from vtc.transforms.transform_expression import transform_expression
from vtc.transforms.transform_slot_outlet import transform_slot_outlet
from vtc.transforms.transform_text import transform_text
from vtc.transforms.v_bind import transform_bind
from vtc.transforms.v_for import transform_for
from vtc.transforms.v_if import transform_if
from vtc.transforms.v_model import transform_model
from vtc.transforms.v_on import transform_on
from vtc.transforms.v_slot import track_slot_scopes

logger = logging.getLogger(__name__)


def get_base_transform_preset(
	prefix_identifiers: bool = True,
) -> tuple[list[NodeTransform], dict[str, DirectiveTransform]]:
	"""Built-in node transforms, in run order, and directive transforms by name."""
	node_transforms: list[NodeTransform] = [transform_if, transform_for]
	if prefix_identifiers:
		node_transforms.append(transform_expression)
	node_transforms += [
		transform_slot_outlet,
		transform_element,
		track_slot_scopes,
		transform_text,
	]
	directive_transforms: dict[str, DirectiveTransform] = {
		"on": transform_on,
		"bind": transform_bind,
		"model": transform_model,
	}
	return node_transforms, directive_transforms


def base_compile(
	template: str | RootNode, options: CompilerOptions | None = None
) -> CodegenResult:
	"""Compile ``template`` (or an already parsed root) into a render function.

	Problems in the template never raise: each one is passed to
	``options.on_error`` and collected on the result.
	"""
	if not isinstance(template, (str, RootNode)):
		raise TypeError(f"Expected template source or RootNode, got {type(template).__name__}")
	options = options or CompilerOptions()
	errors: list[CompilerError] = []
	user_on_error = options.on_error

	def on_error(error: CompilerError) -> None:
		errors.append(error)
		user_on_error(error)

	prefix_identifiers = options.prefix_identifiers
	if options.mode == "module" and not prefix_identifiers:
		on_error(create_compiler_error(ErrorCodes.X_PREFIX_ID_REQUIRED_IN_MODULE_MODE))
		prefix_identifiers = True

	node_transforms, directive_transforms = get_base_transform_preset(prefix_identifiers)
	options = dataclasses.replace(
		options,
		prefix_identifiers=prefix_identifiers,
		node_transforms=[*node_transforms, *options.node_transforms],
		directive_transforms={**directive_transforms, **options.directive_transforms},
		on_error=on_error,
	)

	ast = base_parse(template, options) if isinstance(template, str) else template
	transform(ast, options)
	result = generate(ast, options)
	result.errors = errors
	logger.debug(
		"compiled template: mode=%s helpers=%d hoists=%d errors=%d",
		options.mode,
		len(result.helpers),
		len(result.hoists),
		len(errors),
	)
	return result
