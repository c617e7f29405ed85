"""Template parser.

Turns template text into the content AST. The parser never gives up: malformed
markup is reported through ``CompilerOptions.on_error`` and the offending span
is kept as text, so callers always get a tree back.
"""

from __future__ import annotations

import re
from enum import IntEnum

from vtc.ast import (
	AttributeNode,
	CommentNode,
	ConstantType,
	DirectiveNode,
	ElementNode,
	ElementType,
	InterpolationNode,
	Position,
	RootNode,
	SourceLocation,
	TemplateChildNode,
	TextNode,
	create_simple_expression,
)
from vtc.errors import ErrorCodes, create_compiler_error
from vtc.options import CompilerOptions
from vtc.utils import advance_position


class TextMode(IntEnum):
	"""How the content of an element is tokenized.

	RCDATA (`<textarea>`) decodes entities but has no child elements; RAWTEXT
	(`<style>`, `<script>`) is taken verbatim up to the parent end tag.
	"""

	DATA = 0
	RCDATA = 1
	RAWTEXT = 2
	CDATA = 3
	ATTRIBUTE_VALUE = 4


class _TagType(IntEnum):
	START = 0
	END = 1


_TAG_RE = re.compile(r"^</?([a-z][^\t\r\n\f />]*)", re.I)
_ATTR_NAME_RE = re.compile(r"^[^\t\r\n\f />][^\t\r\n\f />=]*")
_ATTR_NAME_BAD_CHARS_RE = re.compile(r"[\"'<]")
_UNQUOTED_VALUE_RE = re.compile(r"^[^\t\r\n\f >]+")
_UNQUOTED_VALUE_BAD_CHARS_RE = re.compile(r"[\"'<=`]")
_COMMENT_END_RE = re.compile(r"--(!)?>")
_DIRECTIVE_START_RE = re.compile(r"^(v-[A-Za-z0-9-]|:|\.|@|#)")
_DIRECTIVE_RE = re.compile(
	r"(?:^v-([a-z0-9-]+))?(?:(?::|^\.|^@|^#)(\[[^\]]+\]|[^\.]+))?(.+)?$", re.I
)
_WHITESPACE_RUN_RE = re.compile(r"[\t\r\n\f ]+")
_NON_WHITESPACE_RE = re.compile(r"[^\t\r\n\f ]")
_SPECIAL_TEMPLATE_DIRECTIVES = frozenset({"if", "else", "else-if", "for", "slot"})

_XML_ENTITIES = {"gt": ">", "lt": "<", "amp": "&", "apos": "'", "quot": '"'}
_XML_ENTITY_RE = re.compile(r"&(gt|lt|amp|apos|quot);")


def _decode_xml_entities(raw: str) -> str:
	return _XML_ENTITY_RE.sub(lambda m: _XML_ENTITIES[m.group(1)], raw)


class ParserContext:
	"""Cursor over the remaining template text."""

	__slots__: tuple[str, ...] = (
		"options",
		"original_source",
		"source",
		"offset",
		"line",
		"column",
		"in_pre",
	)

	options: CompilerOptions
	original_source: str
	source: str
	offset: int
	line: int
	column: int
	in_pre: bool

	def __init__(self, content: str, options: CompilerOptions) -> None:
		self.options = options
		self.original_source = content
		self.source = content
		self.offset = 0
		self.line = 1
		self.column = 1
		self.in_pre = False

	def cursor(self) -> Position:
		return Position(self.offset, self.line, self.column)

	def advance_by(self, num_chars: int) -> None:
		pos = advance_position(self.cursor(), self.source, num_chars)
		self.offset, self.line, self.column = pos.offset, pos.line, pos.column
		self.source = self.source[num_chars:]

	def advance_spaces(self) -> None:
		stripped = self.source.lstrip("\t\r\n\f ")
		if len(stripped) != len(self.source):
			self.advance_by(len(self.source) - len(stripped))

	def selection(self, start: Position, end: Position | None = None) -> SourceLocation:
		end = end or self.cursor()
		return SourceLocation(start, end, self.original_source[start.offset : end.offset])

	def emit_error(
		self, code: ErrorCodes, offset: int | None = None, pos: Position | None = None
	) -> None:
		pos = pos or self.cursor()
		if offset:
			pos = Position(pos.offset + offset, pos.line, pos.column + offset)
		self.options.on_error(create_compiler_error(code, SourceLocation(pos, pos, "")))


def base_parse(content: str, options: CompilerOptions | None = None) -> RootNode:
	"""Parse template text into a `RootNode`."""
	context = ParserContext(content, options or CompilerOptions())
	start = context.cursor()
	children = _parse_children(context, TextMode.DATA, [])
	return RootNode(children=children, source=content, loc=context.selection(start))


# =============================================================================
# Children
# =============================================================================
def _parse_children(
	context: ParserContext, mode: TextMode, ancestors: list[ElementNode]
) -> list[TemplateChildNode]:
	parent = ancestors[-1] if ancestors else None
	nodes: list[TemplateChildNode] = []
	open_delim = context.options.delimiters[0]

	while not _is_end(context, mode, ancestors):
		s = context.source
		node: TemplateChildNode | None = None

		if mode in (TextMode.DATA, TextMode.RCDATA):
			if s.startswith(open_delim):
				node = _parse_interpolation(context, mode)
			elif mode == TextMode.DATA and s[0] == "<":
				if len(s) == 1:
					context.emit_error(ErrorCodes.EOF_BEFORE_TAG_NAME, 1)
				elif s[1] == "!":
					if s.startswith("<!--"):
						node = _parse_comment(context)
					elif s.startswith("<!DOCTYPE"):
						node = _parse_bogus_comment(context)
					elif s.startswith("<![CDATA["):
						context.emit_error(ErrorCodes.CDATA_IN_HTML_CONTENT)
						node = _parse_bogus_comment(context)
					else:
						context.emit_error(ErrorCodes.INCORRECTLY_OPENED_COMMENT)
						node = _parse_bogus_comment(context)
				elif s[1] == "/":
					if len(s) == 2:
						context.emit_error(ErrorCodes.EOF_BEFORE_TAG_NAME, 2)
					elif s[2] == ">":
						context.emit_error(ErrorCodes.MISSING_END_TAG_NAME, 2)
						context.advance_by(3)
						continue
					elif s[2].isascii() and s[2].isalpha():
						context.emit_error(ErrorCodes.X_INVALID_END_TAG)
						_parse_tag(context, _TagType.END, parent)
						continue
					else:
						context.emit_error(ErrorCodes.INVALID_FIRST_CHARACTER_OF_TAG_NAME, 2)
						node = _parse_bogus_comment(context)
				elif s[1].isascii() and s[1].isalpha():
					node = _parse_element(context, ancestors)
				elif s[1] == "?":
					context.emit_error(ErrorCodes.UNEXPECTED_QUESTION_MARK_INSTEAD_OF_TAG_NAME, 1)
					node = _parse_bogus_comment(context)
				else:
					context.emit_error(ErrorCodes.INVALID_FIRST_CHARACTER_OF_TAG_NAME, 1)

		if node is None:
			node = _parse_text(context, mode)
		_push_node(nodes, node)

	if mode in (TextMode.RAWTEXT, TextMode.RCDATA):
		return nodes

	if not context.options.comments:
		nodes = [n for n in nodes if not isinstance(n, CommentNode)]

	if context.in_pre:
		for node in nodes:
			if isinstance(node, TextNode):
				node.content = node.content.replace("\r\n", "\n")
		if parent is not None and context.options.is_pre_tag(parent.tag):
			first = nodes[0] if nodes else None
			if isinstance(first, TextNode):
				first.content = re.sub(r"^\r?\n", "", first.content)
		return nodes

	if context.options.whitespace == "preserve":
		return nodes
	return condense_whitespace(nodes)


def condense_whitespace(nodes: list[TemplateChildNode]) -> list[TemplateChildNode]:
	"""Drop and collapse insignificant whitespace in a sibling list.

	Whitespace-only text is removed at either end of the list, between two
	comments, between a comment and an element, and between two elements when
	it contains a newline; any other whitespace-only text becomes a single
	space. Runs of whitespace inside other text collapse to one space.
	Applying this to its own output changes nothing.
	"""
	result: list[TemplateChildNode] = []
	for i, node in enumerate(nodes):
		if not isinstance(node, TextNode):
			result.append(node)
			continue
		if _NON_WHITESPACE_RE.search(node.content):
			node.content = _WHITESPACE_RUN_RE.sub(" ", node.content)
			result.append(node)
			continue
		prev = nodes[i - 1] if i > 0 else None
		next_ = nodes[i + 1] if i + 1 < len(nodes) else None
		if prev is None or next_ is None:
			continue
		prev_kind = _spacing_kind(prev)
		next_kind = _spacing_kind(next_)
		if prev_kind == "comment" and next_kind in ("comment", "element"):
			continue
		if prev_kind == "element" and next_kind == "comment":
			continue
		if prev_kind == "element" and next_kind == "element" and (
			"\n" in node.content or "\r" in node.content
		):
			continue
		node.content = " "
		result.append(node)
	return result


def _spacing_kind(node: TemplateChildNode) -> str:
	if isinstance(node, CommentNode):
		return "comment"
	if isinstance(node, ElementNode):
		return "element"
	return "other"


def _push_node(nodes: list[TemplateChildNode], node: TemplateChildNode) -> None:
	if isinstance(node, TextNode) and nodes:
		prev = nodes[-1]
		if isinstance(prev, TextNode) and prev.loc.end.offset == node.loc.start.offset:
			prev.content += node.content
			prev.loc = SourceLocation(prev.loc.start, node.loc.end, prev.loc.source + node.loc.source)
			return
	nodes.append(node)


def _is_end(context: ParserContext, mode: TextMode, ancestors: list[ElementNode]) -> bool:
	s = context.source
	if not s:
		return True
	if mode == TextMode.DATA:
		if s.startswith("</"):
			return any(_starts_with_end_tag_open(s, a.tag) for a in reversed(ancestors))
	elif mode in (TextMode.RCDATA, TextMode.RAWTEXT):
		parent = ancestors[-1] if ancestors else None
		if parent is not None and _starts_with_end_tag_open(s, parent.tag):
			return True
	elif mode == TextMode.CDATA and s.startswith("]]>"):
		return True
	return False


def _starts_with_end_tag_open(source: str, tag: str) -> bool:
	end = 2 + len(tag)
	return (
		source.startswith("</")
		and source[2:end].lower() == tag.lower()
		and (source[end : end + 1] or ">") in "\t\r\n\f />"
	)


# =============================================================================
# Comments
# =============================================================================
def _parse_comment(context: ParserContext) -> CommentNode:
	start = context.cursor()
	match = _COMMENT_END_RE.search(context.source)
	if match is None:
		content = context.source[4:]
		context.advance_by(len(context.source))
		context.emit_error(ErrorCodes.EOF_IN_COMMENT)
	else:
		if match.start() <= 3:
			context.emit_error(ErrorCodes.ABRUPT_CLOSING_OF_EMPTY_COMMENT)
		if match.group(1):
			context.emit_error(ErrorCodes.INCORRECTLY_CLOSED_COMMENT)
		content = context.source[4 : match.start()]
		nested = context.source.find("<!--", 4, match.start())
		while nested != -1:
			context.emit_error(ErrorCodes.NESTED_COMMENT, nested)
			nested = context.source.find("<!--", nested + 4, match.start())
		context.advance_by(match.end())
	return CommentNode(content=content, loc=context.selection(start))


def _parse_bogus_comment(context: ParserContext) -> CommentNode:
	start = context.cursor()
	content_start = 1 if context.source[1] == "?" else 2
	close_index = context.source.find(">")
	if close_index == -1:
		content = context.source[content_start:]
		context.advance_by(len(context.source))
	else:
		content = context.source[content_start:close_index]
		context.advance_by(close_index + 1)
	return CommentNode(content=content, loc=context.selection(start))


# =============================================================================
# Elements
# =============================================================================
def _parse_element(context: ParserContext, ancestors: list[ElementNode]) -> ElementNode | None:
	was_in_pre = context.in_pre
	parent = ancestors[-1] if ancestors else None
	element = _parse_tag(context, _TagType.START, parent)
	assert element is not None
	is_pre_boundary = context.in_pre and not was_in_pre

	if element.is_self_closing or context.options.is_void_tag(element.tag):
		if is_pre_boundary:
			context.in_pre = False
		return element

	ancestors.append(element)
	mode = _text_mode(context, element, parent)
	element.children = _parse_children(context, mode, ancestors)
	ancestors.pop()

	if _starts_with_end_tag_open(context.source, element.tag):
		_parse_tag(context, _TagType.END, parent)
	else:
		context.emit_error(ErrorCodes.X_MISSING_END_TAG, 0, element.loc.start)

	element.loc = context.selection(element.loc.start)
	if is_pre_boundary:
		context.in_pre = False
	return element


def _text_mode(context: ParserContext, element: ElementNode, parent: ElementNode | None) -> TextMode:
	get_text_mode = context.options.get_text_mode
	if get_text_mode is None:
		return TextMode.DATA
	return get_text_mode(element, parent)


def _parse_tag(
	context: ParserContext, tag_type: _TagType, parent: ElementNode | None
) -> ElementNode | None:
	start = context.cursor()
	match = _TAG_RE.match(context.source)
	assert match is not None
	tag = match.group(1)
	context.advance_by(len(match.group(0)))
	context.advance_spaces()

	props = _parse_attributes(context, tag_type)

	if tag_type == _TagType.START and context.options.is_pre_tag(tag):
		context.in_pre = True

	is_self_closing = False
	if not context.source:
		context.emit_error(ErrorCodes.EOF_IN_TAG)
	else:
		is_self_closing = context.source.startswith("/>")
		if tag_type == _TagType.END and is_self_closing:
			context.emit_error(ErrorCodes.END_TAG_WITH_TRAILING_SOLIDUS)
		context.advance_by(2 if is_self_closing else 1)

	if tag_type == _TagType.END:
		return None

	element_type = ElementType.ELEMENT
	if tag == "slot":
		element_type = ElementType.SLOT
	elif tag == "template":
		if any(
			isinstance(p, DirectiveNode) and p.name in _SPECIAL_TEMPLATE_DIRECTIVES
			for p in props
		):
			element_type = ElementType.TEMPLATE
	elif _is_component(tag, context):
		element_type = ElementType.COMPONENT

	return ElementNode(
		tag=tag,
		tag_type=element_type,
		props=props,
		children=[],
		is_self_closing=is_self_closing,
		loc=context.selection(start),
	)


def _is_component(tag: str, context: ParserContext) -> bool:
	if tag == "component" or tag[0].isupper():
		return True
	is_native_tag = context.options.is_native_tag
	return is_native_tag is not None and not is_native_tag(tag)


# =============================================================================
# Attributes and directives
# =============================================================================
def _parse_attributes(
	context: ParserContext, tag_type: _TagType
) -> list[AttributeNode | DirectiveNode]:
	props: list[AttributeNode | DirectiveNode] = []
	names: set[str] = set()
	while context.source and not context.source.startswith((">", "/>")):
		if context.source.startswith("/"):
			context.emit_error(ErrorCodes.UNEXPECTED_SOLIDUS_IN_TAG)
			context.advance_by(1)
			context.advance_spaces()
			continue
		if tag_type == _TagType.END:
			context.emit_error(ErrorCodes.END_TAG_WITH_ATTRIBUTES)

		attr = _parse_attribute(context, names)

		if isinstance(attr, AttributeNode) and attr.value is not None and attr.name == "class":
			attr.value.content = _WHITESPACE_RUN_RE.sub(" ", attr.value.content).strip()

		if tag_type == _TagType.START:
			props.append(attr)

		if re.match(r"^[^\t\r\n\f />]", context.source):
			context.emit_error(ErrorCodes.MISSING_WHITESPACE_BETWEEN_ATTRIBUTES)
		context.advance_spaces()
	return props


def _parse_attribute(context: ParserContext, names: set[str]) -> AttributeNode | DirectiveNode:
	start = context.cursor()
	match = _ATTR_NAME_RE.match(context.source)
	assert match is not None
	name = match.group(0)

	if name in names:
		context.emit_error(ErrorCodes.DUPLICATE_ATTRIBUTE)
	names.add(name)

	if name[0] == "=":
		context.emit_error(ErrorCodes.UNEXPECTED_EQUALS_SIGN_BEFORE_ATTRIBUTE_NAME)
	for bad in _ATTR_NAME_BAD_CHARS_RE.finditer(name):
		context.emit_error(ErrorCodes.UNEXPECTED_CHARACTER_IN_ATTRIBUTE_NAME, bad.start())

	context.advance_by(len(name))
	name_loc = context.selection(start)

	value: tuple[str, bool, SourceLocation] | None = None
	if re.match(r"^[\t\r\n\f ]*=", context.source):
		context.advance_spaces()
		context.advance_by(1)
		context.advance_spaces()
		value = _parse_attribute_value(context)
		if value is None:
			context.emit_error(ErrorCodes.MISSING_ATTRIBUTE_VALUE)
	loc = context.selection(start)

	if _DIRECTIVE_START_RE.match(name):
		return _parse_directive(context, name, start, loc, value)

	if name.startswith("v-"):
		context.emit_error(ErrorCodes.X_MISSING_DIRECTIVE_NAME)

	text = None
	if value is not None:
		content, _quoted, value_loc = value
		text = TextNode(content=content, loc=value_loc)
	return AttributeNode(name=name, value=text, loc=loc, name_loc=name_loc)


def _parse_directive(
	context: ParserContext,
	name: str,
	start: Position,
	loc: SourceLocation,
	value: tuple[str, bool, SourceLocation] | None,
) -> DirectiveNode:
	match = _DIRECTIVE_RE.match(name)
	assert match is not None
	dir_name_match, arg_match, modifier_match = match.group(1), match.group(2), match.group(3)
	is_prop_shorthand = name.startswith(".")
	if dir_name_match:
		dir_name = dir_name_match
	elif is_prop_shorthand or name.startswith(":"):
		dir_name = "bind"
	elif name.startswith("@"):
		dir_name = "on"
	else:
		dir_name = "slot"

	arg = None
	if arg_match:
		is_slot = dir_name == "slot"
		search_end = len(name) - len(modifier_match or "")
		start_offset = name.rfind(arg_match, 0, search_end + len(arg_match))
		arg_start = advance_position(start, name, start_offset)
		arg_len = len(arg_match) + (len(modifier_match or "") if is_slot else 0)
		arg_end = advance_position(start, name, start_offset + arg_len)
		arg_loc = context.selection(arg_start, arg_end)

		content = arg_match
		is_static = True
		if content.startswith("["):
			is_static = False
			if not content.endswith("]"):
				context.emit_error(ErrorCodes.X_MISSING_DYNAMIC_DIRECTIVE_ARGUMENT_END)
				content = content[1:]
			else:
				content = content[1:-1]
		elif is_slot:
			# slot names may contain dots
			content += modifier_match or ""
		arg = create_simple_expression(
			content,
			is_static,
			arg_loc,
			ConstantType.CAN_STRINGIFY if is_static else ConstantType.NOT_CONSTANT,
		)

	exp = None
	if value is not None:
		content, _quoted, value_loc = value
		exp = create_simple_expression(content, False, value_loc)

	modifiers = modifier_match[1:].split(".") if modifier_match and dir_name != "slot" else []
	if is_prop_shorthand:
		modifiers.append("prop")

	return DirectiveNode(
		name=dir_name,
		raw_name=name,
		exp=exp,
		arg=arg,
		modifiers=modifiers,
		loc=loc,
	)


def _parse_attribute_value(context: ParserContext) -> tuple[str, bool, SourceLocation] | None:
	start = context.cursor()
	quote = context.source[:1]
	is_quoted = quote in ('"', "'")
	if is_quoted:
		context.advance_by(1)
		value_start = context.cursor()
		end_index = context.source.find(quote)
		if end_index == -1:
			content = _parse_text_data(context, len(context.source), TextMode.ATTRIBUTE_VALUE)
			value_loc = context.selection(value_start)
		else:
			content = _parse_text_data(context, end_index, TextMode.ATTRIBUTE_VALUE)
			value_loc = context.selection(value_start)
			context.advance_by(1)
		return content, True, value_loc

	match = _UNQUOTED_VALUE_RE.match(context.source)
	if match is None:
		return None
	for bad in _UNQUOTED_VALUE_BAD_CHARS_RE.finditer(match.group(0)):
		context.emit_error(ErrorCodes.UNEXPECTED_CHARACTER_IN_UNQUOTED_ATTRIBUTE_VALUE, bad.start())
	content = _parse_text_data(context, len(match.group(0)), TextMode.ATTRIBUTE_VALUE)
	return content, False, context.selection(start)


# =============================================================================
# Text and interpolation
# =============================================================================
def _parse_interpolation(context: ParserContext, mode: TextMode) -> InterpolationNode | None:
	open_delim, close_delim = context.options.delimiters
	close_index = context.source.find(close_delim, len(open_delim))
	if close_index == -1:
		context.emit_error(ErrorCodes.X_MISSING_INTERPOLATION_END)
		return None

	start = context.cursor()
	context.advance_by(len(open_delim))
	content_start = context.cursor()
	raw_length = close_index - len(open_delim)
	raw_content = context.source[:raw_length]
	pre_trim = _parse_text_data(context, raw_length, mode)
	content = pre_trim.strip()
	start_offset = max(pre_trim.find(content), 0)
	end_offset = raw_length - (len(pre_trim) - len(content) - start_offset)
	inner_start = advance_position(content_start, raw_content, start_offset)
	inner_end = advance_position(content_start, raw_content, end_offset)
	context.advance_by(len(close_delim))

	return InterpolationNode(
		content=create_simple_expression(
			content, False, SourceLocation(inner_start, inner_end, content)
		),
		loc=context.selection(start),
	)


def _parse_text(context: ParserContext, mode: TextMode) -> TextNode:
	end_tokens = ["]]>"] if mode == TextMode.CDATA else ["<", context.options.delimiters[0]]
	end_index = len(context.source)
	for token in end_tokens:
		index = context.source.find(token, 1)
		if index != -1 and index < end_index:
			end_index = index

	start = context.cursor()
	content = _parse_text_data(context, end_index, mode)
	return TextNode(content=content, loc=context.selection(start))


def _parse_text_data(context: ParserContext, length: int, mode: TextMode) -> str:
	raw = context.source[:length]
	context.advance_by(length)
	if mode in (TextMode.RAWTEXT, TextMode.CDATA) or "&" not in raw:
		return raw
	decode = context.options.decode_entities or _decode_xml_entities
	return decode(raw)
