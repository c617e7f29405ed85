"""
Tests for template parsing: elements, attributes, directives, whitespace and
error recovery.
"""

from typing import Any

import pytest
from vtc import (
	AttributeNode,
	CommentNode,
	CompilerError,
	CompilerOptions,
	DirectiveNode,
	ElementNode,
	ElementType,
	ErrorCodes,
	InterpolationNode,
	RootNode,
	SimpleExpressionNode,
	TextNode,
	base_parse,
)
from vtc.dom import parse as dom_parse
from vtc.parser import condense_whitespace


def parse(template: str, **options: Any) -> tuple[RootNode, list[CompilerError]]:
	errors: list[CompilerError] = []
	root = base_parse(template, CompilerOptions(on_error=errors.append, **options))
	return root, errors


def codes(errors: list[CompilerError]) -> list[int]:
	return [e.code for e in errors]


def first_element(root: RootNode) -> ElementNode:
	node = root.children[0]
	assert isinstance(node, ElementNode)
	return node


# =============================================================================
# Text and interpolation
# =============================================================================


class TestText:
	def test_plain_text(self):
		root, errors = parse("some text")
		assert errors == []
		assert len(root.children) == 1
		text = root.children[0]
		assert isinstance(text, TextNode)
		assert text.content == "some text"
		assert text.loc.start.offset == 0
		assert text.loc.end.offset == 9

	def test_interpolation(self):
		root, _ = parse("{{ message }}")
		node = root.children[0]
		assert isinstance(node, InterpolationNode)
		assert isinstance(node.content, SimpleExpressionNode)
		assert node.content.content == "message"
		assert node.content.is_static is False
		assert node.content.loc.start.offset == 3
		assert node.content.loc.source == "message"
		assert node.loc.source == "{{ message }}"

	def test_text_around_interpolation(self):
		root, _ = parse("a {{ b }} c")
		assert [type(n) for n in root.children] == [TextNode, InterpolationNode, TextNode]
		assert root.children[0].content == "a "
		assert root.children[2].content == " c"

	def test_custom_delimiters(self):
		root, _ = parse("${ value }", delimiters=("${", "}"))
		node = root.children[0]
		assert isinstance(node, InterpolationNode)
		assert node.content.content == "value"

	def test_unclosed_interpolation_is_text(self):
		root, errors = parse("{{ open")
		assert codes(errors) == [ErrorCodes.X_MISSING_INTERPOLATION_END]
		assert isinstance(root.children[0], TextNode)
		assert root.children[0].content == "{{ open"

	def test_xml_entities_decoded_by_default(self):
		root, _ = parse("a &amp; b &lt;c&gt;")
		assert root.children[0].content == "a & b <c>"

	def test_html_entities_need_dom_decoder(self):
		root, _ = parse("a&nbsp;b")
		assert root.children[0].content == "a&nbsp;b"
		root = dom_parse("a&nbsp;b")
		assert root.children[0].content == "a\xa0b"


# =============================================================================
# Elements
# =============================================================================


class TestElements:
	def test_nested_elements(self):
		root, errors = parse("<div><span>hi</span></div>")
		assert errors == []
		div = first_element(root)
		assert div.tag == "div"
		span = div.children[0]
		assert isinstance(span, ElementNode)
		assert span.tag == "span"
		assert span.children[0].content == "hi"
		assert div.loc.source == "<div><span>hi</span></div>"

	def test_self_closing(self):
		root, _ = parse("<div/><p></p>")
		div = first_element(root)
		assert div.is_self_closing is True
		assert len(root.children) == 2

	def test_void_tag(self):
		root, errors = parse('<img src="a.png"><p>x</p>', is_void_tag=lambda tag: tag == "img")
		assert errors == []
		assert [n.tag for n in root.children] == ["img", "p"]
		assert first_element(root).children == []

	@pytest.mark.parametrize(
		("template", "tag_type"),
		[
			("<div></div>", ElementType.ELEMENT),
			("<Foo></Foo>", ElementType.COMPONENT),
			("<component></component>", ElementType.COMPONENT),
			("<slot></slot>", ElementType.SLOT),
			('<template v-if="ok"></template>', ElementType.TEMPLATE),
			("<template #header></template>", ElementType.TEMPLATE),
			("<template></template>", ElementType.ELEMENT),
		],
	)
	def test_tag_type(self, template: str, tag_type: ElementType):
		root, _ = parse(template)
		assert first_element(root).tag_type == tag_type

	def test_non_native_tag_is_component(self):
		root, _ = parse("<my-widget></my-widget>", is_native_tag=lambda tag: tag == "div")
		assert first_element(root).tag_type == ElementType.COMPONENT
		root, _ = parse("<my-widget></my-widget>")
		assert first_element(root).tag_type == ElementType.ELEMENT

	def test_dom_parse_knows_html_tags(self):
		root = dom_parse("<section><my-widget></my-widget></section>")
		section = first_element(root)
		assert section.tag_type == ElementType.ELEMENT
		assert section.children[0].tag_type == ElementType.COMPONENT


# =============================================================================
# Attributes and directives
# =============================================================================


class TestAttributes:
	def test_static_attributes(self):
		root, _ = parse('<div id="foo" hidden data-x=\'1\'></div>')
		props = first_element(root).props
		assert all(isinstance(p, AttributeNode) for p in props)
		assert [p.name for p in props] == ["id", "hidden", "data-x"]
		assert props[0].value.content == "foo"
		assert props[1].value is None
		assert props[2].value.content == "1"

	def test_unquoted_value(self):
		root, _ = parse("<div id=foo></div>")
		assert first_element(root).props[0].value.content == "foo"

	def test_class_whitespace_collapsed(self):
		root, _ = parse('<div class="  a   b\n c "></div>')
		assert first_element(root).props[0].value.content == "a b c"

	def test_directive_with_arg_and_modifiers(self):
		root, _ = parse('<div v-on:click.stop.prevent="go"></div>')
		dir = first_element(root).props[0]
		assert isinstance(dir, DirectiveNode)
		assert dir.name == "on"
		assert dir.arg is not None and dir.arg.content == "click" and dir.arg.is_static
		assert dir.modifiers == ["stop", "prevent"]
		assert dir.exp is not None and dir.exp.content == "go"
		assert dir.raw_name == "v-on:click.stop.prevent"

	@pytest.mark.parametrize(
		("attr", "name", "arg"),
		[
			(':title="t"', "bind", "title"),
			('@click="go"', "on", "click"),
			('#header="props"', "slot", "header"),
			('v-if="ok"', "if", None),
			('v-my-dir:foo="x"', "my-dir", "foo"),
		],
	)
	def test_shorthands(self, attr: str, name: str, arg: str | None):
		root, _ = parse(f"<div {attr}></div>")
		dir = first_element(root).props[0]
		assert isinstance(dir, DirectiveNode)
		assert dir.name == name
		if arg is None:
			assert dir.arg is None
		else:
			assert dir.arg.content == arg

	def test_dynamic_argument(self):
		root, _ = parse('<div :[key]="value"></div>')
		dir = first_element(root).props[0]
		assert dir.arg.content == "key"
		assert dir.arg.is_static is False

	def test_prop_shorthand_adds_modifier(self):
		root, _ = parse('<div .inner-text="t"></div>')
		dir = first_element(root).props[0]
		assert dir.name == "bind"
		assert dir.arg.content == "inner-text"
		assert dir.modifiers == ["prop"]

	def test_slot_name_keeps_dots(self):
		root, _ = parse('<template v-slot:item.name="p"></template>')
		dir = first_element(root).props[0]
		assert dir.arg.content == "item.name"
		assert dir.modifiers == []

	def test_unterminated_dynamic_argument(self):
		_, errors = parse('<div :[foo="x"></div>')
		assert ErrorCodes.X_MISSING_DYNAMIC_DIRECTIVE_ARGUMENT_END in codes(errors)

	def test_duplicate_attribute(self):
		_, errors = parse('<div id="a" id="b"></div>')
		assert codes(errors) == [ErrorCodes.DUPLICATE_ATTRIBUTE]


# =============================================================================
# Error recovery
# =============================================================================


class TestRecovery:
	def test_missing_end_tag(self):
		root, errors = parse("<div><span>text")
		assert ErrorCodes.X_MISSING_END_TAG in codes(errors)
		div = first_element(root)
		assert div.children[0].tag == "span"

	def test_stray_end_tag(self):
		root, errors = parse("<div></span></div>")
		assert codes(errors) == [ErrorCodes.X_INVALID_END_TAG]
		assert first_element(root).children == []

	def test_unclosed_comment(self):
		root, errors = parse("<!-- never closed")
		assert codes(errors) == [ErrorCodes.EOF_IN_COMMENT]
		assert isinstance(root.children[0], CommentNode)

	def test_bogus_comment(self):
		root, _ = parse("<!DOCTYPE html>")
		node = root.children[0]
		assert isinstance(node, CommentNode)
		assert node.content == "DOCTYPE html"

	def test_parse_never_raises_on_garbage(self):
		root, errors = parse("<div <p =x>< / {{ }} </")
		assert isinstance(root, RootNode)
		assert errors


# =============================================================================
# Whitespace and comments
# =============================================================================


class TestWhitespace:
	def test_condense_removes_boundary_and_newline_whitespace(self):
		root, _ = parse("<div>  <span>a</span>\n  <span>b</span>  </div>")
		div = first_element(root)
		assert [n.tag for n in div.children] == ["span", "span"]

	def test_condense_keeps_inline_space(self):
		root, _ = parse("<span>a</span> <span>b</span>")
		assert len(root.children) == 3
		assert root.children[1].content == " "

	def test_condense_collapses_runs(self):
		root, _ = parse("a   \n\t b")
		assert root.children[0].content == "a b"

	def test_preserve(self):
		root, _ = parse("<div>  <span>a</span>\n  </div>", whitespace="preserve")
		div = first_element(root)
		assert div.children[0].content == "  "
		assert div.children[2].content == "\n  "

	def test_condense_is_idempotent(self):
		root, _ = parse("<p> a  b </p>\n<p>c</p> <!-- x --> d   e ", whitespace="preserve")
		once = condense_whitespace(list(root.children))
		snapshot = [getattr(n, "content", getattr(n, "tag", None)) for n in once]
		twice = condense_whitespace(list(once))
		assert [getattr(n, "content", getattr(n, "tag", None)) for n in twice] == snapshot

	def test_comments_dropped_when_disabled(self):
		root, _ = parse("<div><!-- note -->a</div>", comments=False)
		div = first_element(root)
		assert [type(n) for n in div.children] == [TextNode]

	def test_comment_content(self):
		root, _ = parse("<!-- note -->")
		assert root.children[0].content == " note "

	def test_pre_keeps_whitespace(self):
		root, _ = parse("<pre>\n  a   b\n</pre>", is_pre_tag=lambda tag: tag == "pre")
		pre = first_element(root)
		assert pre.children[0].content == "  a   b\n"


# =============================================================================
# Text modes
# =============================================================================


class TestTextModes:
	def test_rawtext_style(self):
		root = dom_parse("<style>a < b {{ x }}</style>")
		style = first_element(root)
		assert len(style.children) == 1
		assert style.children[0].content == "a < b {{ x }}"

	def test_rcdata_textarea(self):
		root = dom_parse("<textarea><div>{{ x }}</div></textarea>")
		textarea = first_element(root)
		assert [type(n) for n in textarea.children] == [TextNode, InterpolationNode, TextNode]
		assert textarea.children[0].content == "<div>"
		assert textarea.children[2].content == "</div>"
