"""
Tests for the core v-model lowering (component models).
"""

from typing import Any

from vtc import CodegenResult, CompilerOptions, ErrorCodes, base_compile


def compile_template(template: str, **options: Any) -> CodegenResult:
	return base_compile(template, CompilerOptions(**options))


def codes(result: CodegenResult) -> list[int]:
	return [e.code for e in result.errors]


# =============================================================================
# Lowering
# =============================================================================


class TestModel:
	def test_default_model(self):
		result = compile_template('<Comp v-model="msg"/>')
		assert result.errors == []
		assert (
			"return (_openBlock(), _createBlock(_component_Comp, {\n"
			"    modelValue: _ctx.msg,\n"
			'    "onUpdate:modelValue": $event => ((_ctx.msg) = $event)\n'
			'  }, null, 8 /* PROPS */, ["modelValue", "onUpdate:modelValue"]))'
		) in result.code

	def test_member_expression(self):
		result = compile_template('<Comp v-model="form.name"/>')
		assert '"onUpdate:modelValue": $event => ((_ctx.form.name) = $event)' in result.code

	def test_named_model(self):
		result = compile_template('<Comp v-model:title="doc.title"/>')
		assert "title: _ctx.doc.title," in result.code
		assert '"onUpdate:title": $event => ((_ctx.doc.title) = $event)' in result.code

	def test_named_model_is_camelized_in_event(self):
		result = compile_template('<Comp v-model:first-name="n"/>')
		assert '"onUpdate:firstName": $event => ((_ctx.n) = $event)' in result.code

	def test_modifiers(self):
		result = compile_template('<Comp v-model.trim.number="x"/>')
		assert "modelModifiers: { trim: true, number: true }" in result.code

	def test_named_modifiers(self):
		result = compile_template('<Comp v-model:title.trim="x"/>')
		assert "titleModifiers: { trim: true }" in result.code

	def test_loop_member_is_allowed(self):
		result = compile_template('<Comp v-for="item in items" v-model="item.value"/>')
		assert result.errors == []
		assert "$event => ((item.value) = $event)" in result.code


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
	def test_missing_expression(self):
		result = compile_template("<Comp v-model/>")
		assert codes(result) == [ErrorCodes.X_V_MODEL_NO_EXPRESSION]

	def test_not_assignable(self):
		result = compile_template('<Comp v-model="a + b"/>')
		assert codes(result) == [ErrorCodes.X_V_MODEL_MALFORMED_EXPRESSION]

	def test_loop_alias(self):
		result = compile_template('<Comp v-for="item in items" v-model="item"/>')
		assert codes(result) == [ErrorCodes.X_V_MODEL_ON_SCOPE_VARIABLE]
