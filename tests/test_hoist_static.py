"""
Tests for constant analysis and static hoisting.
"""

from typing import Any

import pytest
from vtc import (
	CodegenResult,
	CompilerOptions,
	ConstantType,
	InterpolationNode,
	SimpleExpressionNode,
	TextNode,
	TransformContext,
	base_compile,
)
from vtc.ast import CommentNode, CompoundExpressionNode
from vtc.hoist_static import get_constant_type


def compile_template(template: str, **options: Any) -> CodegenResult:
	return base_compile(template, CompilerOptions(**options))


# =============================================================================
# Hoisting
# =============================================================================


class TestHoisting:
	def test_fully_static_template(self):
		result = compile_template("<div>Hello World</div>")
		assert result.code == (
			"const _Vue = Vue\n"
			"const { createElementVNode: _createElementVNode } = _Vue\n"
			"\n"
			'const _hoisted_1 = /*#__PURE__*/_createElementVNode("div", null, "Hello World", -1 /* HOISTED */)\n'
			"\n"
			"return function render(_ctx, _cache) {\n"
			"  return _hoisted_1\n"
			"}\n"
		)
		assert "toDisplayString" not in result.code

	def test_static_subtree_hoisted_whole(self):
		result = compile_template('<div :id="x"><p class="a"><b>x</b></p></div>')
		assert len(result.hoists) == 1
		assert result.hoists[0].startswith('/*#__PURE__*/_createElementVNode("p", { class: "a" }, [')

	def test_interpolation_blocks_ancestors(self):
		result = compile_template("<div><p><b>{{ x }}</b></p><i>static</i></div>")
		assert result.hoists == ['/*#__PURE__*/_createElementVNode("i", null, "static", -1 /* HOISTED */)']
		assert "_hoisted_1" in result.code

	def test_hoists_numbered_in_order(self):
		result = compile_template('<div :id="x"><p>a</p><p>b</p></div>')
		assert result.hoists == [
			'/*#__PURE__*/_createElementVNode("p", null, "a", -1 /* HOISTED */)',
			'/*#__PURE__*/_createElementVNode("p", null, "b", -1 /* HOISTED */)',
		]
		assert "const _hoisted_1 = " in result.code
		assert "const _hoisted_2 = " in result.code
		assert "    _hoisted_1,\n    _hoisted_2\n" in result.code

	def test_disabled(self):
		result = compile_template("<div>Hello</div>", hoist_static=False)
		assert result.hoists == []
		assert 'return (_openBlock(), _createElementBlock("div", null, "Hello"))' in result.code

	@pytest.mark.parametrize(
		"template",
		[
			'<div :id="x"><Comp/></div>',
			'<div :id="x"><p :title="t">a</p></div>',
			'<div :id="x"><p ref="r">a</p></div>',
			'<div :id="x"><p>{{ a }}</p></div>',
		],
	)
	def test_not_hoisted(self, template: str):
		assert compile_template(template).hoists == []

	def test_element_with_runtime_directive(self):
		result = compile_template('<div :id="x"><p v-foo>a</p></div>')
		# the element stays in the tree; only its text call is static
		assert result.hoists == ['/*#__PURE__*/_createTextVNode("a")']
		assert '_withDirectives(_createElementVNode("p", null, [\n' in result.code

	def test_single_branch_child_stays_in_place(self):
		result = compile_template('<div v-if="a"><p>x</p></div>')
		assert result.hoists == ['/*#__PURE__*/_createElementVNode("p", null, "x", -1 /* HOISTED */)']
		assert '(_openBlock(), _createElementBlock("div", { key: 0 }, [\n' in result.code

	def test_loop_body_stays_in_place(self):
		result = compile_template('<p v-for="i in 3">x</p>')
		assert result.hoists == []


# =============================================================================
# Constant levels
# =============================================================================


class TestConstantType:
	def test_text_and_comments(self, context: TransformContext):
		assert get_constant_type(TextNode(content="x"), context) == ConstantType.CAN_STRINGIFY
		assert get_constant_type(CommentNode(content="x"), context) == ConstantType.CAN_STRINGIFY

	def test_interpolation(self, context: TransformContext):
		node = InterpolationNode(content=SimpleExpressionNode(content="1", const_type=ConstantType.CAN_STRINGIFY))
		assert get_constant_type(node, context) == ConstantType.NOT_CONSTANT

	def test_compound_takes_lowest(self, context: TransformContext):
		compound = CompoundExpressionNode(
			children=[
				SimpleExpressionNode(content="Math", const_type=ConstantType.CAN_HOIST),
				".max(",
				SimpleExpressionNode(content="1", const_type=ConstantType.CAN_STRINGIFY),
				")",
			]
		)
		assert get_constant_type(compound, context) == ConstantType.CAN_HOIST
		compound.children.append(SimpleExpressionNode(content="_ctx.a"))
		assert get_constant_type(compound, context) == ConstantType.NOT_CONSTANT
