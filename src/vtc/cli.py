"""
Command-line interface for vtc.
Compiles templates to render functions and dumps parsed template trees.
"""
# typer relies on function calls used as default values
# pyright: reportCallInDefaultInitializer=false

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.tree import Tree

from vtc import dom
from vtc.ast import (
	AttributeNode,
	CommentNode,
	CompoundExpressionNode,
	DirectiveNode,
	ElementNode,
	InterpolationNode,
	Node,
	RootNode,
	SimpleExpressionNode,
	TextNode,
)
from vtc.compile import base_compile
from vtc.errors import CompilerError
from vtc.options import CodegenMode, CompilerOptions, WhitespaceStrategy
from vtc.parser import base_parse

cli = typer.Typer(
	name="vtc",
	help="vtc - compile view templates into render functions",
	no_args_is_help=True,
)


def setup_logging(verbose: bool) -> None:
	handler = RichHandler(
		console=Console(stderr=True),
		show_time=False,
		show_path=verbose,
		rich_tracebacks=True,
	)
	handler.setFormatter(logging.Formatter("%(message)s"))
	vtc_logger = logging.getLogger("vtc")
	vtc_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
	vtc_logger.handlers = [handler]
	vtc_logger.propagate = False


def _read_template(template: str | None, file: Path | None) -> str:
	if template is not None and file is not None:
		typer.echo("❌ Pass either a template or --file, not both.", err=True)
		raise typer.Exit(2)
	if file is not None:
		return file.read_text(encoding="utf-8")
	if template is not None:
		return template
	return sys.stdin.read()


def _error_payload(error: CompilerError) -> dict[str, Any]:
	payload: dict[str, Any] = {"code": int(error.code), "message": error.message}
	if error.loc is not None:
		payload["line"] = error.loc.start.line
		payload["column"] = error.loc.start.column
	return payload


@cli.command("compile")
def compile_template(
	template: str | None = typer.Argument(
		None, help="Template source. Read from stdin when omitted."
	),
	file: Path | None = typer.Option(
		None, "--file", "-f", exists=True, dir_okay=False, help="Read the template from a file"
	),
	mode: str = typer.Option("function", "--mode", help="Output shape: 'function' or 'module'"),
	no_prefix: bool = typer.Option(
		False, "--no-prefix", help="Do not prefix identifiers; wrap the body in `with (_ctx)`"
	),
	whitespace: str = typer.Option("condense", "--whitespace", help="'condense' or 'preserve'"),
	no_hoist: bool = typer.Option(False, "--no-hoist", help="Disable static hoisting"),
	core: bool = typer.Option(False, "--core", help="Compile without the DOM layer"),
	as_json: bool = typer.Option(False, "--json", help="Print the compile result as JSON"),
	strict: bool = typer.Option(False, "--strict", help="Exit with code 1 on any diagnostic"),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
	"""Compile a template into render function source."""
	setup_logging(verbose)
	if mode not in ("function", "module"):
		typer.echo(f"❌ Unknown mode {mode!r}. Use 'function' or 'module'.", err=True)
		raise typer.Exit(2)
	if whitespace not in ("condense", "preserve"):
		typer.echo(f"❌ Unknown whitespace strategy {whitespace!r}.", err=True)
		raise typer.Exit(2)

	source = _read_template(template, file)
	errors: list[CompilerError] = []
	options = CompilerOptions(
		mode=_as_mode(mode),
		prefix_identifiers=not no_prefix,
		whitespace=_as_whitespace(whitespace),
		hoist_static=not no_hoist,
		on_error=errors.append,
	)
	result = base_compile(source, options) if core else dom.compile(source, options)

	if as_json:
		typer.echo(
			json.dumps(
				{
					"code": result.code,
					"helpers": result.helpers,
					"hoists": result.hoists,
					"components": result.components,
					"directives": result.directives,
					"errors": [_error_payload(e) for e in errors],
				},
				indent=2,
			)
		)
	else:
		console = Console()
		console.print(Syntax(result.code, "javascript", theme="ansi_dark"))
		err_console = Console(stderr=True)
		for error in errors:
			err_console.print(f"[yellow]⚠ [{int(error.code)}][/yellow] {escape(error.message)}")

	if strict and errors:
		raise typer.Exit(1)


def _as_mode(mode: str) -> CodegenMode:
	return "module" if mode == "module" else "function"


def _as_whitespace(whitespace: str) -> WhitespaceStrategy:
	return "preserve" if whitespace == "preserve" else "condense"


@cli.command("parse")
def parse_template(
	template: str | None = typer.Argument(
		None, help="Template source. Read from stdin when omitted."
	),
	file: Path | None = typer.Option(
		None, "--file", "-f", exists=True, dir_okay=False, help="Read the template from a file"
	),
	core: bool = typer.Option(False, "--core", help="Parse without the HTML tag tables"),
	whitespace: str = typer.Option("condense", "--whitespace", help="'condense' or 'preserve'"),
):
	"""Print the parsed template tree."""
	source = _read_template(template, file)
	errors: list[CompilerError] = []
	options = CompilerOptions(whitespace=_as_whitespace(whitespace), on_error=errors.append)
	root = base_parse(source, options) if core else dom.parse(source, options)

	console = Console()
	console.print(build_tree(root))
	err_console = Console(stderr=True)
	for error in errors:
		err_console.print(f"[yellow]⚠ [{int(error.code)}][/yellow] {escape(error.message)}")


def build_tree(root: RootNode) -> Tree:
	tree = Tree("[bold]Root[/bold]")
	for child in root.children:
		_add_node(tree, child)
	return tree


def _add_node(tree: Tree, node: Node) -> None:
	if isinstance(node, ElementNode):
		branch = tree.add(f"[cyan]<{node.tag}>[/cyan] [dim]{node.tag_type.name}[/dim]")
		for prop in node.props:
			branch.add(escape(_describe_prop(prop)), style="green")
		for child in node.children:
			_add_node(branch, child)
	elif isinstance(node, TextNode):
		tree.add(escape(f"Text {json.dumps(node.content)}"))
	elif isinstance(node, InterpolationNode):
		tree.add(escape(f"Interpolation {{{{ {_describe_expression(node.content)} }}}}"))
	elif isinstance(node, CommentNode):
		tree.add(escape(f"Comment {json.dumps(node.content)}"), style="dim")
	else:
		tree.add(type(node).__name__)


def _describe_prop(prop: AttributeNode | DirectiveNode) -> str:
	if isinstance(prop, AttributeNode):
		value = json.dumps(prop.value.content) if prop.value is not None else ""
		return f"{prop.name}={value}" if value else prop.name
	text = f"v-{prop.name}"
	if prop.arg is not None:
		arg = _describe_expression(prop.arg)
		text += f":{arg}" if _is_static(prop.arg) else f":[{arg}]"
	for modifier in prop.modifiers:
		text += f".{modifier}"
	if prop.exp is not None:
		text += f"={json.dumps(_describe_expression(prop.exp))}"
	return text


def _is_static(exp: Node) -> bool:
	return isinstance(exp, SimpleExpressionNode) and exp.is_static


def _describe_expression(exp: Node) -> str:
	if isinstance(exp, SimpleExpressionNode):
		return exp.content
	if isinstance(exp, CompoundExpressionNode):
		return exp.loc.source or "".join(
			c if isinstance(c, str) else _describe_expression(c)
			for c in exp.children
			if isinstance(c, (str, Node))
		)
	return type(exp).__name__


def main():
	"""Main CLI entry point."""
	try:
		cli()
	except Exception:
		console = Console()
		console.print_exception()
		raise typer.Exit(1) from None


if __name__ == "__main__":
	main()
