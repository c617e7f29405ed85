"""Code generation.

Emits JavaScript for a transformed `RootNode`. Nodes are written depth first
into a buffer that tracks indentation; every runtime helper referenced along
the way is recorded so that the module preamble imports exactly those. The
module shell around the render function comes from a mako template.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from vtc.ast import (
	ArrayExpression,
	CallExpression,
	CommentNode,
	CompoundExpressionNode,
	ConditionalExpression,
	ElementCall,
	ElementNode,
	ForNode,
	FunctionExpression,
	IfNode,
	InterpolationNode,
	Node,
	ObjectExpression,
	RootNode,
	SimpleExpressionNode,
	TextCallNode,
	TextNode,
)
from vtc.codegen.templates.render import RENDER_MODULE_TEMPLATE
from vtc.errors import CompilerError
from vtc.options import CompilerOptions
from vtc.runtime_helpers import (
	CREATE_COMMENT,
	OPEN_BLOCK,
	RESOLVE_COMPONENT,
	RESOLVE_DIRECTIVE,
	TO_DISPLAY_STRING,
	WITH_DIRECTIVES,
	RuntimeHelper,
	vnode_block_helper,
	vnode_helper,
)
from vtc.shared import is_simple_identifier, patch_flag_text
from vtc.utils import to_valid_asset_id

PURE_ANNOTATION = "/*#__PURE__*/"
INDENT = "  "


@dataclass
class CodegenResult:
	code: str
	ast: RootNode
	helpers: list[str] = field(default_factory=list)
	"""Names of the runtime helpers the code imports."""
	hoists: list[str] = field(default_factory=list)
	"""Generated source of each `_hoisted_N` constant, in order."""
	components: list[str] = field(default_factory=list)
	directives: list[str] = field(default_factory=list)
	errors: list[CompilerError] = field(default_factory=list)


class CodegenContext:
	__slots__: tuple[str, ...] = ("parts", "indent_level", "pure", "helpers")

	parts: list[str]
	indent_level: int
	pure: bool
	helpers: dict[RuntimeHelper, None]

	def __init__(self) -> None:
		self.parts = []
		self.indent_level = 0
		self.pure = False
		self.helpers = {}

	def helper(self, helper: RuntimeHelper) -> str:
		self.helpers[helper] = None
		return helper.alias

	def push(self, code: str) -> None:
		self.parts.append(code)

	def newline(self) -> None:
		self.parts.append("\n" + INDENT * self.indent_level)

	def indent(self) -> None:
		self.indent_level += 1
		self.newline()

	def deindent(self, without_newline: bool = False) -> None:
		self.indent_level -= 1
		if not without_newline:
			self.newline()

	def take(self) -> str:
		code = "".join(self.parts)
		self.parts = []
		return code


def generate(ast: RootNode, options: CompilerOptions | None = None) -> CodegenResult:
	"""Generate the render function module for a transformed ``ast``."""
	options = options or CompilerOptions()
	context = CodegenContext()
	with_block = not options.prefix_identifiers

	hoists: list[str] = []
	context.pure = True
	for exp in ast.hoists:
		gen_node(exp, context)
		hoists.append(context.take())
	context.pure = False

	context.indent_level = 2 if with_block else 1
	context.push(INDENT * context.indent_level)
	if ast.components:
		_gen_assets(ast.components, "component", context)
		if ast.directives:
			context.newline()
	if ast.directives:
		_gen_assets(ast.directives, "directive", context)
	if ast.components or ast.directives:
		context.push("\n")
		context.newline()
	context.push("return ")
	if ast.codegen_node is not None:
		gen_node(ast.codegen_node, context)
	else:
		context.push("null")
	body = context.take()

	helpers = list(context.helpers)
	ast.helpers = helpers
	separator = " as " if options.mode == "module" else ": "
	code = RENDER_MODULE_TEMPLATE.render_unicode(
		mode=options.mode,
		helpers=[f"{h.name}{separator}{h.alias}" for h in helpers],
		runtime_module_name=options.runtime_module_name,
		runtime_global_name=options.runtime_global_name,
		hoists=hoists,
		with_block=with_block,
		body=body,
	)
	return CodegenResult(
		code=str(code),
		ast=ast,
		helpers=[h.name for h in helpers],
		hoists=hoists,
		components=list(ast.components),
		directives=list(ast.directives),
	)


def _gen_assets(assets: list[str], kind: str, context: CodegenContext) -> None:
	resolver = context.helper(RESOLVE_COMPONENT if kind == "component" else RESOLVE_DIRECTIVE)
	for i, name in enumerate(assets):
		context.push(f"const {to_valid_asset_id(name, kind)} = {resolver}({_js_string(name)})")
		if i < len(assets) - 1:
			context.newline()


def _js_string(value: str) -> str:
	return json.dumps(value, ensure_ascii=False)


# =============================================================================
# Nodes
# =============================================================================
def gen_node(node: object, context: CodegenContext) -> None:
	if isinstance(node, str):
		context.push(node)
	elif isinstance(node, RuntimeHelper):
		context.push(context.helper(node))
	elif isinstance(node, list):
		_gen_node_list_as_array(node, context)
	elif isinstance(node, (ElementNode, IfNode, ForNode, TextCallNode)):
		assert node.codegen_node is not None, f"{type(node).__name__} has no codegen node"
		gen_node(node.codegen_node, context)
	elif isinstance(node, TextNode):
		context.push(_js_string(node.content))
	elif isinstance(node, SimpleExpressionNode):
		context.push(_js_string(node.content) if node.is_static else node.content)
	elif isinstance(node, InterpolationNode):
		context.push(f"{context.helper(TO_DISPLAY_STRING)}(")
		gen_node(node.content, context)
		context.push(")")
	elif isinstance(node, CompoundExpressionNode):
		for child in node.children:
			gen_node(child, context)
	elif isinstance(node, CommentNode):
		context.push(f"{context.helper(CREATE_COMMENT)}({_js_string(node.content)})")
	elif isinstance(node, ElementCall):
		_gen_element_call(node, context)
	elif isinstance(node, CallExpression):
		_gen_call_expression(node, context)
	elif isinstance(node, ObjectExpression):
		_gen_object_expression(node, context)
	elif isinstance(node, ArrayExpression):
		_gen_node_list_as_array(node.elements, context)
	elif isinstance(node, FunctionExpression):
		_gen_function_expression(node, context)
	elif isinstance(node, ConditionalExpression):
		_gen_conditional_expression(node, context)
	else:
		raise TypeError(f"Cannot generate code for {type(node).__name__}")


def _gen_node_list(nodes: list, context: CodegenContext, multilines: bool = False) -> None:
	for i, node in enumerate(nodes):
		gen_node(node, context)
		if i < len(nodes) - 1:
			if multilines:
				context.push(",")
				context.newline()
			else:
				context.push(", ")


def _is_text(node: object) -> bool:
	return isinstance(
		node,
		(
			str,
			RuntimeHelper,
			SimpleExpressionNode,
			TextNode,
			InterpolationNode,
			CompoundExpressionNode,
		),
	)


def _gen_node_list_as_array(nodes: list, context: CodegenContext) -> None:
	multilines = len(nodes) > 3 or any(not _is_text(n) for n in nodes)
	context.push("[")
	if multilines:
		context.indent()
	_gen_node_list(nodes, context, multilines)
	if multilines:
		context.deindent()
	context.push("]")


def _gen_element_call(node: ElementCall, context: CodegenContext) -> None:
	if node.directives is not None:
		context.push(f"{context.helper(WITH_DIRECTIVES)}(")
	if node.is_block:
		context.push(f"({context.helper(OPEN_BLOCK)}({'true' if node.disable_tracking else ''}), ")
	if context.pure:
		context.push(PURE_ANNOTATION)
	call_helper = (
		vnode_block_helper(node.is_component) if node.is_block else vnode_helper(node.is_component)
	)
	context.push(f"{context.helper(call_helper)}(")

	dynamic_props = (
		"[" + ", ".join(_js_string(p) for p in node.dynamic_props) + "]"
		if node.dynamic_props
		else None
	)
	args: list[object] = [
		node.tag,
		node.props,
		node.children,
		patch_flag_text(node.patch_flag) if node.patch_flag else None,
		dynamic_props,
	]
	while args and args[-1] is None:
		args.pop()
	_gen_node_list(["null" if a is None else a for a in args], context)

	context.push(")")
	if node.is_block:
		context.push(")")
	if node.directives is not None:
		context.push(", ")
		gen_node(node.directives, context)
		context.push(")")


def _gen_call_expression(node: CallExpression, context: CodegenContext) -> None:
	callee = node.callee if isinstance(node.callee, str) else context.helper(node.callee)
	if context.pure:
		context.push(PURE_ANNOTATION)
	context.push(f"{callee}(")
	_gen_node_list(node.arguments, context)
	context.push(")")


def _gen_object_expression(node: ObjectExpression, context: CodegenContext) -> None:
	properties = node.properties
	if not properties:
		context.push("{}")
		return
	multilines = len(properties) > 1 or any(
		not isinstance(p.value, SimpleExpressionNode) for p in properties
	)
	context.push("{" if multilines else "{ ")
	if multilines:
		context.indent()
	for i, prop in enumerate(properties):
		_gen_property_key(prop.key, context)
		context.push(": ")
		gen_node(prop.value, context)
		if i < len(properties) - 1:
			context.push(",")
			context.newline()
	if multilines:
		context.deindent()
	context.push("}" if multilines else " }")


def _gen_property_key(key: Node, context: CodegenContext) -> None:
	if isinstance(key, CompoundExpressionNode):
		context.push("[")
		gen_node(key, context)
		context.push("]")
	elif isinstance(key, SimpleExpressionNode) and key.is_static:
		context.push(key.content if is_simple_identifier(key.content) else _js_string(key.content))
	elif isinstance(key, SimpleExpressionNode):
		context.push(f"[{key.content}]")
	else:
		raise TypeError(f"Invalid property key {type(key).__name__}")


def _gen_function_expression(node: FunctionExpression, context: CodegenContext) -> None:
	context.push("(")
	if isinstance(node.params, list):
		_gen_node_list(node.params, context)
	elif node.params is not None:
		gen_node(node.params, context)
	context.push(") => ")
	if node.newline:
		context.push("{")
		context.indent()
	if node.returns is not None:
		if node.newline:
			context.push("return ")
		gen_node(node.returns, context)
	if node.newline:
		context.deindent()
		context.push("}")


def _gen_conditional_expression(node: ConditionalExpression, context: CodegenContext) -> None:
	test = node.test
	if isinstance(test, SimpleExpressionNode):
		needs_parens = not is_simple_identifier(test.content)
		if needs_parens:
			context.push("(")
		gen_node(test, context)
		if needs_parens:
			context.push(")")
	else:
		context.push("(")
		gen_node(test, context)
		context.push(")")

	if node.newline:
		context.indent()
	context.indent_level += 1
	if not node.newline:
		context.push(" ")
	context.push("? ")
	gen_node(node.consequent, context)
	context.indent_level -= 1
	if node.newline:
		context.newline()
	else:
		context.push(" ")
	context.push(": ")
	is_nested = isinstance(node.alternate, ConditionalExpression)
	if not is_nested:
		context.indent_level += 1
	gen_node(node.alternate, context)
	if not is_nested:
		context.indent_level -= 1
	if node.newline:
		context.deindent(without_newline=True)
