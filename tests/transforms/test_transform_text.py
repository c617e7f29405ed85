"""
Tests for merging adjacent text and interpolations.
"""

from typing import Any

from vtc import CodegenResult, CompilerOptions, base_compile
from vtc.ast import CompoundExpressionNode, TextCallNode


def compile_template(template: str, **options: Any) -> CodegenResult:
	return base_compile(template, CompilerOptions(**options))


class TestTransformText:
	def test_adjacent_text_merged(self):
		result = compile_template("<div>a {{ b }} c</div>")
		div = result.ast.children[0]
		assert len(div.children) == 1
		assert isinstance(div.children[0], CompoundExpressionNode)
		assert (
			'_createElementBlock("div", null, "a " + _toDisplayString(_ctx.b) + " c", 1 /* TEXT */)'
			in result.code
		)

	def test_root_text(self):
		result = compile_template("hello {{ name }}")
		assert '  return "hello " + _toDisplayString(_ctx.name)\n' in result.code

	def test_text_next_to_element_becomes_call(self):
		result = compile_template("<div><span/>{{ a }}</div>")
		div = result.ast.children[0]
		assert isinstance(div.children[1], TextCallNode)
		assert "_createTextVNode(_toDisplayString(_ctx.a), 1 /* TEXT */)" in result.code

	def test_static_text_call_is_hoisted(self):
		result = compile_template('<div :id="x"><span>x</span>text</div>')
		assert result.hoists == [
			'/*#__PURE__*/_createElementVNode("span", null, "x", -1 /* HOISTED */)',
			'/*#__PURE__*/_createTextVNode("text")',
		]

	def test_single_space_has_no_argument(self):
		result = compile_template('<div><b>{{ a }}</b> <b>{{ c }}</b></div>')
		assert result.hoists == ["/*#__PURE__*/_createTextVNode()"]

	def test_element_with_runtime_directive_keeps_text_call(self):
		result = compile_template("<div v-foo>{{ a }}</div>")
		assert "_createTextVNode(_toDisplayString(_ctx.a), 1 /* TEXT */)" in result.code

	def test_component_text_is_call(self):
		result = compile_template("<Comp>{{ a }}</Comp>")
		assert "_createTextVNode(_toDisplayString(_ctx.a), 1 /* TEXT */)" in result.code
