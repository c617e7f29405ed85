"""
Tests for v-bind props and element props lowering.
"""

from typing import Any

from vtc import CodegenResult, CompilerOptions, ErrorCodes, base_compile


def compile_template(template: str, **options: Any) -> CodegenResult:
	return base_compile(template, CompilerOptions(**options))


def codes(result: CodegenResult) -> list[int]:
	return [e.code for e in result.errors]


# =============================================================================
# Basic binding
# =============================================================================


class TestBind:
	def test_bound_prop(self):
		result = compile_template('<div :id="foo"></div>')
		assert result.errors == []
		assert (
			'return (_openBlock(), _createElementBlock("div", { id: _ctx.foo }, null, 8 /* PROPS */, ["id"]))'
			in result.code
		)

	def test_constant_value_is_not_dynamic(self):
		result = compile_template("<div :tab-index=\"1\"><b>{{ x }}</b></div>")
		assert '{ "tab-index": 1 }' in result.code
		assert "PROPS" not in result.code

	def test_same_name_shorthand(self):
		result = compile_template("<div :title></div>")
		assert "{ title: _ctx.title }" in result.code

	def test_shorthand_is_camelized(self):
		result = compile_template("<div :foo-bar></div>")
		assert '{ "foo-bar": _ctx.fooBar }' in result.code

	def test_scope_variable_not_prefixed(self):
		result = compile_template('<i v-for="item in items" :title="item.label"></i>')
		assert "{ title: item.label }" in result.code

	def test_dynamic_argument(self):
		result = compile_template('<div :[key]="value"></div>')
		assert '{ [_ctx.key || ""]: _ctx.value }' in result.code
		assert "16 /* FULL_PROPS */" in result.code

	def test_missing_expression_with_dynamic_argument(self):
		result = compile_template("<div :[key]></div>")
		assert codes(result) == [ErrorCodes.X_V_BIND_NO_EXPRESSION]


# =============================================================================
# Modifiers
# =============================================================================


class TestModifiers:
	def test_camel(self):
		result = compile_template('<svg :view-box.camel="box"></svg>')
		assert "{ viewBox: _ctx.box }" in result.code

	def test_prop(self):
		result = compile_template('<div :inner-text.prop="t"></div>')
		assert '".inner-text": _ctx.t' in result.code
		assert "NEED_HYDRATION" in result.code

	def test_prop_shorthand(self):
		result = compile_template('<div .inner-text="t"></div>')
		assert '".inner-text": _ctx.t' in result.code

	def test_attr(self):
		result = compile_template('<div :aria-label.attr="label"></div>')
		assert '"^aria-label": _ctx.label' in result.code


# =============================================================================
# Class and style
# =============================================================================


class TestClassAndStyle:
	def test_dynamic_class(self):
		result = compile_template('<div :class="cls"></div>')
		assert "class: _normalizeClass(_ctx.cls)" in result.code
		assert "2 /* CLASS */" in result.code
		assert "normalizeClass" in result.helpers

	def test_static_and_dynamic_class_merge(self):
		result = compile_template('<div class="a" :class="b"></div>')
		assert 'class: _normalizeClass(["a", _ctx.b])' in result.code
		assert "2 /* CLASS */" in result.code

	def test_dynamic_style(self):
		result = compile_template('<div :style="s"></div>')
		assert "style: _normalizeStyle(_ctx.s)" in result.code
		assert "4 /* STYLE */" in result.code

	def test_static_class_is_hoisted(self):
		result = compile_template('<div><p class="a">x</p>{{ y }}</div>')
		assert result.hoists == ['/*#__PURE__*/_createElementVNode("p", { class: "a" }, "x", -1 /* HOISTED */)']


# =============================================================================
# Object binding
# =============================================================================


class TestObjectBinding:
	def test_merged_with_static_props(self):
		result = compile_template('<div v-bind="attrs" id="x"></div>')
		assert '_mergeProps(_ctx.attrs, { id: "x" })' in result.code
		assert "16 /* FULL_PROPS */" in result.code

	def test_order_is_kept(self):
		result = compile_template('<div id="x" v-bind="attrs"></div>')
		assert '_mergeProps({ id: "x" }, _ctx.attrs)' in result.code

	def test_missing_expression(self):
		result = compile_template("<div v-bind></div>")
		assert ErrorCodes.X_V_BIND_NO_EXPRESSION in codes(result)


# =============================================================================
# Keys and refs
# =============================================================================


class TestKeyAndRef:
	def test_key_is_not_a_dynamic_prop(self):
		result = compile_template('<div><p :key="k">{{ a }}</p></div>')
		assert '_createElementBlock("p", { key: _ctx.k }, _toDisplayString(_ctx.a), 1 /* TEXT */)' in result.code

	def test_static_ref_needs_patch(self):
		result = compile_template('<div><p ref="el">x</p></div>')
		assert '_createElementVNode("p", { ref: "el" }, "x", 512 /* NEED_PATCH */)' in result.code
		assert result.hoists == []
