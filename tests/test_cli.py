"""
Tests for the vtc command-line interface.
"""

import json
from pathlib import Path

from typer.testing import CliRunner
from vtc.cli import cli

runner = CliRunner()


def compile_json(*args: str, input: str | None = None) -> dict:
	result = runner.invoke(cli, ["compile", "--json", *args], input=input)
	assert result.exit_code == 0, result.output
	return json.loads(result.stdout)


# =============================================================================
# compile
# =============================================================================


class TestCompileCommand:
	def test_json_output(self):
		payload = compile_json("<div>{{ msg }}</div>")
		assert payload["helpers"] == ["openBlock", "createElementBlock", "toDisplayString"]
		assert payload["errors"] == []
		assert payload["components"] == []
		assert '_toDisplayString(_ctx.msg), 1 /* TEXT */' in payload["code"]

	def test_module_mode(self):
		payload = compile_json("--mode", "module", "<p>{{ a }}</p>")
		assert payload["code"].startswith("import { ")
		assert 'from "vue"' in payload["code"]

	def test_no_prefix(self):
		payload = compile_json("--no-prefix", "<p>{{ a }}</p>")
		assert "with (_ctx) {" in payload["code"]

	def test_no_hoist(self):
		assert compile_json("<div>static</div>")["hoists"] != []
		assert compile_json("--no-hoist", "<div>static</div>")["hoists"] == []

	def test_dom_layer_by_default(self):
		payload = compile_json('<input v-model="x">')
		assert "vModelText" in payload["helpers"]

	def test_core_only(self):
		payload = compile_json("--core", '<input v-model="x">')
		assert "vModelText" not in payload["helpers"]
		assert "modelValue: _ctx.x" in payload["code"]

	def test_errors_reported(self):
		payload = compile_json('<div v-if="">x</div>')
		assert payload["errors"] == [
			{
				"code": 28,
				"message": "v-if/v-else-if is missing expression. (1:6)",
				"line": 1,
				"column": 6,
			}
		]

	def test_stdin(self):
		payload = compile_json(input="<b>{{ x }}</b>")
		assert "_ctx.x" in payload["code"]

	def test_file(self, tmp_path: Path):
		template = tmp_path / "view.html"
		template.write_text("<p>{{ fromFile }}</p>", encoding="utf-8")
		payload = compile_json("--file", str(template))
		assert "_ctx.fromFile" in payload["code"]

	def test_template_and_file(self, tmp_path: Path):
		template = tmp_path / "view.html"
		template.write_text("<p/>", encoding="utf-8")
		result = runner.invoke(cli, ["compile", "--file", str(template), "<div/>"])
		assert result.exit_code == 2

	def test_unknown_mode(self):
		result = runner.invoke(cli, ["compile", "--mode", "esm", "<div/>"])
		assert result.exit_code == 2

	def test_unknown_whitespace(self):
		result = runner.invoke(cli, ["compile", "--whitespace", "strip", "<div/>"])
		assert result.exit_code == 2

	def test_strict(self):
		assert runner.invoke(cli, ["compile", "--strict", "<p v-else>x</p>"]).exit_code == 1
		assert runner.invoke(cli, ["compile", "--strict", "<p>x</p>"]).exit_code == 0

	def test_plain_output(self):
		result = runner.invoke(cli, ["compile", "<div>{{ msg }}</div>"])
		assert result.exit_code == 0
		assert "function render(_ctx, _cache)" in result.stdout


# =============================================================================
# parse
# =============================================================================


class TestParseCommand:
	def test_tree(self):
		result = runner.invoke(
			cli, ["parse", '<div @click="go"><!-- c -->hi {{ name }}</div>']
		)
		assert result.exit_code == 0
		out = result.stdout
		assert "Root" in out
		assert "<div> ELEMENT" in out
		assert 'v-on:click="go"' in out
		assert 'Comment " c "' in out
		assert 'Text "hi "' in out
		assert "Interpolation {{ name }}" in out

	def test_components(self):
		result = runner.invoke(cli, ["parse", "<my-comp :value.camel=\"v\"/>"])
		assert "<my-comp> COMPONENT" in result.stdout
		assert 'v-bind:value.camel="v"' in result.stdout
