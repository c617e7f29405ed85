"""
Tests for element and component lowering.
"""

from typing import Any

from vtc import CodegenResult, CompilerOptions, ElementNode, base_compile
from vtc.ast import ElementCall


def compile_template(template: str, **options: Any) -> CodegenResult:
	return base_compile(template, CompilerOptions(**options))


# =============================================================================
# Plain elements
# =============================================================================


class TestElements:
	def test_dynamic_text_child(self):
		result = compile_template("<div>{{ msg }}</div>")
		assert (
			'return (_openBlock(), _createElementBlock("div", null, _toDisplayString(_ctx.msg), 1 /* TEXT */))'
			in result.code
		)

	def test_element_children_array(self):
		result = compile_template('<div :id="x"><span>{{ a }}</span><b>{{ b }}</b></div>')
		assert (
			'_createElementBlock("div", { id: _ctx.x }, [\n'
			'    _createElementVNode("span", null, _toDisplayString(_ctx.a), 1 /* TEXT */),\n'
			'    _createElementVNode("b", null, _toDisplayString(_ctx.b), 1 /* TEXT */)\n'
			'  ], 8 /* PROPS */, ["id"]))'
		) in result.code

	def test_svg_is_a_block(self):
		result = compile_template('<div><svg><path :d="d"/></svg></div>')
		div = result.ast.children[0]
		svg = div.children[0]
		assert isinstance(svg, ElementNode)
		assert isinstance(svg.codegen_node, ElementCall)
		assert svg.codegen_node.is_block is True
		assert '(_openBlock(), _createElementBlock("svg", null, [' in result.code

	def test_scope_id(self):
		result = compile_template('<div :id="x"><p>a</p><Comp/></div>', scope_id="data-v-1")
		assert result.hoists == [
			'/*#__PURE__*/_createElementVNode("p", { "data-v-1": "" }, "a", -1 /* HOISTED */)'
		]
		assert 'id: _ctx.x,\n    "data-v-1": ""' in result.code
		assert "_createBlock(_component_Comp))" in result.code


# =============================================================================
# Components
# =============================================================================


class TestComponents:
	def test_components_resolved_once_in_order(self):
		result = compile_template("<Foo/><Bar/><Foo/>")
		assert result.components == ["Foo", "Bar"]
		assert (
			'  const _component_Foo = _resolveComponent("Foo")\n'
			'  const _component_Bar = _resolveComponent("Bar")\n'
			"\n"
			"  return "
		) in result.code
		assert result.code.count("_createBlock(_component_Foo))") == 2

	def test_hyphenated_component(self):
		result = compile_template("<my-comp/>", is_native_tag=lambda tag: tag == "div")
		assert 'const _component_my_comp = _resolveComponent("my-comp")' in result.code

	def test_dynamic_component(self):
		result = compile_template('<component :is="view"/>')
		assert result.components == []
		assert "(_openBlock(), _createBlock(_resolveDynamicComponent(_ctx.view)))" in result.code

	def test_dynamic_component_static_is(self):
		result = compile_template('<component is="Foo"/>')
		assert '_createBlock(_resolveDynamicComponent("Foo"))' in result.code

	def test_class_is_a_plain_prop(self):
		result = compile_template('<Comp :class="c"/>')
		assert "class: _normalizeClass(_ctx.c)" in result.code
		assert '8 /* PROPS */, ["class"]' in result.code


# =============================================================================
# Custom directives
# =============================================================================


class TestDirectives:
	def test_runtime_directive(self):
		result = compile_template("<div v-focus></div>")
		assert result.directives == ["focus"]
		assert (
			'  const _directive_focus = _resolveDirective("focus")\n'
			"\n"
			'  return _withDirectives((_openBlock(), _createElementBlock("div", null, null, 512 /* NEED_PATCH */)), [\n'
			"    [_directive_focus]\n"
			"  ])\n"
		) in result.code

	def test_directive_value(self):
		result = compile_template('<div v-focus="on"></div>')
		assert "[_directive_focus, _ctx.on]" in result.code

	def test_directive_arg_without_value(self):
		result = compile_template("<div v-focus:x></div>")
		assert '[_directive_focus, void 0, "x"]' in result.code

	def test_hyphenated_directive(self):
		result = compile_template("<div v-my-dir></div>")
		assert 'const _directive_my_dir = _resolveDirective("my-dir")' in result.code

	def test_components_and_directives_preamble(self):
		result = compile_template("<Comp v-focus/>")
		assert (
			'  const _component_Comp = _resolveComponent("Comp")\n'
			'  const _directive_focus = _resolveDirective("focus")\n'
			"\n"
		) in result.code
