from __future__ import annotations

import re
from collections.abc import Callable

from vtc.ast import (
	AttributeNode,
	CallArgument,
	ConstantType,
	DirectiveNode,
	ElementCall,
	ElementNode,
	ExpressionNode,
	ForNode,
	ForParseResult,
	SimpleExpressionNode,
	SourceLocation,
	create_call_expression,
	create_element_call,
	create_function_expression,
	create_object_expression,
	create_object_property,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.expressions import process_expression
from vtc.runtime_helpers import FRAGMENT, RENDER_LIST
from vtc.shared import PatchFlags
from vtc.transform import ExitFn, TransformContext, create_structural_directive_transform
from vtc.utils import advance_position, find_prop, inject_prop, is_slot_outlet, is_template_node

_FOR_ALIAS_RE = re.compile(r"([\s\S]*?)\s+(?:in|of)\s+(\S[\s\S]*)")
_FOR_ITERATOR_RE = re.compile(r",([^,\}\]]*)(?:,([^,\}\]]*))?$")
_STRIP_PARENS_RE = re.compile(r"^\(|\)$")


def _on_for(node: ElementNode, dir: DirectiveNode, context: TransformContext) -> ExitFn | None:
	def process_codegen(for_node: ForNode) -> ExitFn:
		render_exp = create_call_expression(RENDER_LIST, [for_node.source])
		is_template = is_template_node(node)
		key_prop = find_prop(node, "key")
		key_exp: ExpressionNode | None = None
		if isinstance(key_prop, AttributeNode):
			if key_prop.value is not None:
				key_exp = create_simple_expression(key_prop.value.content, True)
		elif key_prop is not None:
			key_exp = key_prop.exp
		key_property = create_object_property("key", key_exp) if key_exp is not None else None
		if (
			is_template
			and key_property is not None
			and isinstance(key_prop, DirectiveNode)
			and isinstance(key_property.value, SimpleExpressionNode)
		):
			# the template itself is dropped, so nothing else visits its key
			key_property.value = process_expression(key_property.value, context)

		source = for_node.source
		is_stable = (
			isinstance(source, SimpleExpressionNode)
			and source.const_type > ConstantType.NOT_CONSTANT
		)
		if is_stable:
			fragment_flag = PatchFlags.STABLE_FRAGMENT
		elif key_prop is not None:
			fragment_flag = PatchFlags.KEYED_FRAGMENT
		else:
			fragment_flag = PatchFlags.UNKEYED_FRAGMENT

		for_node.codegen_node = create_element_call(
			FRAGMENT,
			None,
			render_exp,
			fragment_flag,
			is_block=True,
			disable_tracking=not is_stable,
			loc=node.loc,
		)

		def on_exit() -> None:
			if is_template:
				for c in for_node.children:
					if isinstance(c, ElementNode):
						misplaced = find_prop(c, "key")
						if misplaced is not None:
							context.on_error(
								create_compiler_error(
									ErrorCodes.X_V_FOR_TEMPLATE_KEY_PLACEMENT, misplaced.loc
								)
							)
							break

			children = for_node.children
			need_fragment_wrapper = len(children) != 1 or not isinstance(children[0], ElementNode)
			if is_slot_outlet(node):
				slot_outlet: ElementNode | None = node
			elif is_template and len(children) == 1 and is_slot_outlet(children[0]):
				slot_outlet = children[0]
			else:
				slot_outlet = None

			child_block: CallArgument
			if slot_outlet is not None:
				assert slot_outlet.codegen_node is not None
				child_block = slot_outlet.codegen_node
				if is_template and key_property is not None:
					assert not isinstance(child_block, SimpleExpressionNode)
					inject_prop(child_block, key_property)
			elif need_fragment_wrapper:
				child_block = create_element_call(
					FRAGMENT,
					create_object_expression([key_property]) if key_property else None,
					list(children),
					PatchFlags.STABLE_FRAGMENT,
					is_block=True,
				)
			else:
				element = children[0]
				assert isinstance(element, ElementNode)
				codegen = element.codegen_node
				assert isinstance(codegen, ElementCall)
				if is_template and key_property is not None:
					inject_prop(codegen, key_property)
				codegen.is_block = True
				child_block = codegen

			render_exp.arguments.append(
				create_function_expression(
					_create_for_loop_params(for_node.parse_result), child_block, newline=True
				)
			)

		return on_exit

	return process_for(node, dir, context, process_codegen)


transform_for = create_structural_directive_transform("for", _on_for)


def process_for(
	node: ElementNode,
	dir: DirectiveNode,
	context: TransformContext,
	process_codegen: Callable[[ForNode], ExitFn] | None = None,
) -> ExitFn | None:
	"""Replace ``node`` with a `ForNode` and open the scope of its aliases."""
	if dir.exp is None:
		context.on_error(create_compiler_error(ErrorCodes.X_V_FOR_NO_EXPRESSION, dir.loc))
		return None

	parse_result = dir.for_parse_result or parse_for_expression(dir.exp)
	if parse_result is None:
		context.on_error(create_compiler_error(ErrorCodes.X_V_FOR_MALFORMED_EXPRESSION, dir.loc))
		return None
	dir.for_parse_result = parse_result
	_finalize_for_parse_result(parse_result, context)

	for_node = ForNode(
		source=parse_result.source,
		parse_result=parse_result,
		value_alias=parse_result.value,
		key_alias=parse_result.key,
		object_index_alias=parse_result.index,
		children=list(node.children) if is_template_node(node) else [node],
		loc=node.loc,
	)
	context.replace_node(for_node)

	aliases: list[str] = []
	for alias in (parse_result.value, parse_result.key, parse_result.index):
		if alias is not None and alias.identifiers:
			aliases.extend(alias.identifiers)
	context.add_identifiers(aliases)

	on_exit = process_codegen(for_node) if process_codegen else None

	def exit_scope() -> None:
		context.remove_identifiers()
		if on_exit is not None:
			on_exit()

	return exit_scope


# =============================================================================
# Alias parsing
# =============================================================================
def parse_for_expression(exp: ExpressionNode) -> ForParseResult | None:
	"""Split `(item, key, index) in source` into its parts.

	Parts are plain expressions with locations inside ``exp``; nothing is
	rewritten here.
	"""
	if not isinstance(exp, SimpleExpressionNode):
		return None
	content = exp.content
	match = _FOR_ALIAS_RE.fullmatch(content)
	if match is None:
		return None
	lhs, rhs = match.group(1), match.group(2)

	def part(text: str, offset: int) -> SimpleExpressionNode:
		start = advance_position(exp.loc.start, content, offset)
		end = advance_position(exp.loc.start, content, offset + len(text))
		return SimpleExpressionNode(content=text, loc=SourceLocation(start, end, text))

	result = ForParseResult(source=part(rhs.strip(), content.index(rhs, len(lhs))))

	value_content = _STRIP_PARENS_RE.sub("", lhs.strip()).strip()
	trimmed_offset = content.index(value_content) if value_content else 0

	iterator = _FOR_ITERATOR_RE.search(value_content)
	if iterator is not None:
		value_content = _FOR_ITERATOR_RE.sub("", value_content).strip()
		key_content = iterator.group(1).strip()
		if key_content:
			key_offset = content.index(key_content, trimmed_offset + len(value_content))
			result.key = part(key_content, key_offset)
		if iterator.group(2) is not None:
			index_content = iterator.group(2).strip()
			if index_content:
				search_from = trimmed_offset + len(value_content)
				if result.key is not None:
					search_from = key_offset + len(key_content)
				result.index = part(index_content, content.index(index_content, search_from))

	if value_content:
		result.value = part(value_content, trimmed_offset)
	return result


def _finalize_for_parse_result(result: ForParseResult, context: TransformContext) -> None:
	if not context.prefix_identifiers:
		return
	# the source runs outside the generated callback
	if isinstance(result.source, SimpleExpressionNode):
		result.source = process_expression(result.source, context)
	for name in ("value", "key", "index"):
		alias = getattr(result, name)
		if isinstance(alias, SimpleExpressionNode):
			setattr(result, name, process_expression(alias, context, as_params=True))


def _create_for_loop_params(result: ForParseResult) -> list[ExpressionNode | str]:
	"""`(value, key, index)` trimmed after the last alias in use.

	Skipped positions before it are filled with `_`, `__`, ...
	"""
	args = [result.value, result.key, result.index]
	while args and args[-1] is None:
		args.pop()
	return [arg if arg is not None else "_" * (i + 1) for i, arg in enumerate(args)]

