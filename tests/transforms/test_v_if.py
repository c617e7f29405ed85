"""
Tests for v-if / v-else-if / v-else chains.
"""

from typing import Any

from vtc import CodegenResult, CompilerOptions, ElementNode, ErrorCodes, IfNode, base_compile
from vtc.ast import ConditionalExpression, ElementCall


def compile_template(template: str, **options: Any) -> CodegenResult:
	return base_compile(template, CompilerOptions(**options))


def codes(result: CodegenResult) -> list[int]:
	return [e.code for e in result.errors]


# =============================================================================
# Chains
# =============================================================================


class TestChains:
	def test_single_if(self):
		result = compile_template('<div v-if="ok">yes</div>')
		if_node = result.ast.children[0]
		assert isinstance(if_node, IfNode)
		assert len(if_node.branches) == 1
		assert isinstance(if_node.codegen_node, ConditionalExpression)
		assert (
			"return (_ctx.ok)\n"
			'    ? (_openBlock(), _createElementBlock("div", { key: 0 }, "yes"))\n'
			'    : _createCommentVNode("v-if", true)'
		) in result.code
		assert result.helpers == ["openBlock", "createElementBlock", "createCommentVNode"]

	def test_if_else(self):
		result = compile_template('<div v-if="ok">yes</div><p v-else>no</p>')
		assert len(result.ast.children) == 1
		if_node = result.ast.children[0]
		assert isinstance(if_node, IfNode)
		assert [b.condition is None for b in if_node.branches] == [False, True]
		assert (
			"return (_ctx.ok)\n"
			'    ? (_openBlock(), _createElementBlock("div", { key: 0 }, "yes"))\n'
			'    : (_openBlock(), _createElementBlock("p", { key: 1 }, "no"))'
		) in result.code
		assert result.errors == []

	def test_else_if_chain_keys(self):
		result = compile_template(
			'<p v-if="a">1</p>\n<p v-else-if="b">2</p>\n<p v-else-if="c">3</p>\n<p v-else>4</p>'
		)
		if_node = result.ast.children[0]
		assert isinstance(if_node, IfNode)
		assert len(if_node.branches) == 4
		for key in range(4):
			assert f"{{ key: {key} }}" in result.code

	def test_condition_with_operators_is_parenthesized(self):
		result = compile_template('<p v-if="n > 1">x</p>')
		assert "return (_ctx.n > 1)\n" in result.code

	def test_comments_between_branches_dropped(self):
		result = compile_template('<p v-if="a">1</p><!-- note --><p v-else>2</p>')
		assert len(result.ast.children) == 1
		assert result.errors == []
		assert "note" not in result.code

	def test_sibling_chains_continue_keys(self):
		result = compile_template(
			'<div><p v-if="a">1</p><p v-else>2</p><p v-if="b">3</p><p v-else>4</p></div>'
		)
		for key in range(4):
			assert f"{{ key: {key} }}" in result.code

	def test_user_key(self):
		result = compile_template('<p v-if="a" key="x">1</p><p v-else key="y">2</p>')
		assert '{ key: "x" }' in result.code
		assert '{ key: "y" }' in result.code
		assert "key: 0" not in result.code

	def test_branches_are_blocks(self):
		result = compile_template('<div><p v-if="a">{{ b }}</p></div>')
		if_node = result.ast.children[0].children[0]
		assert isinstance(if_node, IfNode)
		conditional = if_node.codegen_node
		assert isinstance(conditional, ConditionalExpression)
		assert isinstance(conditional.consequent, ElementCall)
		assert conditional.consequent.is_block is True
		root_call = result.ast.codegen_node
		assert isinstance(root_call, ElementCall)
		assert root_call.dynamic_children == [conditional.consequent]


# =============================================================================
# Templates
# =============================================================================


class TestTemplateIf:
	def test_template_renders_fragment(self):
		result = compile_template('<template v-if="ok"><span>a</span><span>b</span></template>')
		if_node = result.ast.children[0]
		assert isinstance(if_node, IfNode)
		assert if_node.branches[0].is_template_if is True
		assert [c.tag for c in if_node.branches[0].children] == ["span", "span"]
		assert "_createElementBlock(_Fragment, { key: 0 }, [" in result.code
		assert "64 /* STABLE_FRAGMENT */" in result.code

	def test_template_with_single_element_child(self):
		result = compile_template('<template v-if="ok"><span>{{ a }}</span></template>')
		assert '_createElementBlock("span", { key: 0 }, _toDisplayString(_ctx.a), 1 /* TEXT */)' in result.code


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
	def test_missing_expression(self):
		result = compile_template("<p v-if>x</p>")
		assert codes(result) == [ErrorCodes.X_V_IF_NO_EXPRESSION]
		assert "return true\n" in result.code

	def test_orphan_else_renders_unconditionally(self):
		result = compile_template("<p v-else>x</p>")
		assert codes(result) == [ErrorCodes.X_V_ELSE_NO_ADJACENT_IF]
		node = result.ast.children[0]
		assert isinstance(node, ElementNode)
		assert node.props == []

	def test_orphan_else_if_starts_chain(self):
		result = compile_template('<p v-else-if="b">x</p>')
		assert codes(result) == [ErrorCodes.X_V_ELSE_NO_ADJACENT_IF]
		assert isinstance(result.ast.children[0], IfNode)
		assert "return (_ctx.b)\n" in result.code

	def test_else_after_else(self):
		result = compile_template('<p v-if="a">1</p><p v-else>2</p><p v-else>3</p>')
		assert codes(result) == [ErrorCodes.X_V_ELSE_NO_ADJACENT_IF]
