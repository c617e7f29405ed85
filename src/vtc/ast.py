"""Template AST and codegen descriptors.

The content AST is produced by the parser and rewritten in place by the
transform pipeline. Codegen descriptors (`ElementCall`, `CallExpression`, ...)
are attached to content nodes through their ``codegen_node`` attribute and
describe the JavaScript to emit for them.

Nodes compare by identity: the transforms locate, replace and remove nodes
inside sibling lists, and two structurally equal nodes are still different
positions in the tree.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, TypeAlias

from vtc.runtime_helpers import RuntimeHelper


class NodeType(IntEnum):
	ROOT = 0
	ELEMENT = 1
	TEXT = 2
	COMMENT = 3
	SIMPLE_EXPRESSION = 4
	INTERPOLATION = 5
	ATTRIBUTE = 6
	DIRECTIVE = 7
	# containers
	COMPOUND_EXPRESSION = 8
	IF = 9
	IF_BRANCH = 10
	FOR = 11
	TEXT_CALL = 12
	# codegen
	ELEMENT_CALL = 13
	JS_CALL_EXPRESSION = 14
	JS_OBJECT_EXPRESSION = 15
	JS_PROPERTY = 16
	JS_ARRAY_EXPRESSION = 17
	JS_FUNCTION_EXPRESSION = 18
	JS_CONDITIONAL_EXPRESSION = 19


class ElementType(IntEnum):
	ELEMENT = 0
	COMPONENT = 1
	SLOT = 2
	TEMPLATE = 3


class ConstantType(IntEnum):
	"""How much of a node's construction can be skipped at render time.

	Levels are ordered: a higher level implies every lower one.
	"""

	NOT_CONSTANT = 0
	CAN_SKIP_PATCH = 1
	CAN_HOIST = 2
	CAN_STRINGIFY = 3


@dataclass(slots=True, frozen=True)
class Position:
	offset: int
	line: int
	column: int


@dataclass(slots=True, frozen=True)
class SourceLocation:
	start: Position
	end: Position
	source: str


LOC_STUB = SourceLocation(Position(0, 1, 1), Position(0, 1, 1), "")


# =============================================================================
# Base class
# =============================================================================
class Node(ABC):
	"""Base class for template and codegen nodes."""

	__slots__: tuple[str, ...] = ()

	type: ClassVar[NodeType]


# =============================================================================
# Content AST
# =============================================================================
@dataclass(slots=True, eq=False)
class RootNode(Node):
	type: ClassVar[NodeType] = NodeType.ROOT

	children: list[TemplateChildNode] = field(default_factory=list)
	source: str = ""
	loc: SourceLocation = LOC_STUB
	helpers: list[RuntimeHelper] = field(default_factory=list)
	components: list[str] = field(default_factory=list)
	directives: list[str] = field(default_factory=list)
	hoists: list[JSChildNode] = field(default_factory=list)
	codegen_node: TemplateChildNode | JSChildNode | None = None
	dynamic_children: list[JSChildNode] | None = None


@dataclass(slots=True, eq=False)
class ElementNode(Node):
	type: ClassVar[NodeType] = NodeType.ELEMENT

	tag: str
	tag_type: ElementType = ElementType.ELEMENT
	props: list[AttributeNode | DirectiveNode] = field(default_factory=list)
	children: list[TemplateChildNode] = field(default_factory=list)
	is_self_closing: bool = False
	loc: SourceLocation = LOC_STUB
	codegen_node: ElementCall | CallExpression | SimpleExpressionNode | None = None


@dataclass(slots=True, eq=False)
class TextNode(Node):
	type: ClassVar[NodeType] = NodeType.TEXT

	content: str
	loc: SourceLocation = LOC_STUB


@dataclass(slots=True, eq=False)
class CommentNode(Node):
	type: ClassVar[NodeType] = NodeType.COMMENT

	content: str
	loc: SourceLocation = LOC_STUB


@dataclass(slots=True, eq=False)
class AttributeNode(Node):
	type: ClassVar[NodeType] = NodeType.ATTRIBUTE

	name: str
	value: TextNode | None = None
	loc: SourceLocation = LOC_STUB
	name_loc: SourceLocation = LOC_STUB


@dataclass(slots=True, eq=False)
class DirectiveNode(Node):
	"""`v-name:arg.modifier="exp"` and its shorthands (`:`, `@`, `#`, `.`)."""

	type: ClassVar[NodeType] = NodeType.DIRECTIVE

	name: str
	raw_name: str = ""
	exp: ExpressionNode | None = None
	arg: ExpressionNode | None = None
	modifiers: list[str] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB
	for_parse_result: ForParseResult | None = None


@dataclass(slots=True, eq=False)
class SimpleExpressionNode(Node):
	"""A fragment of JavaScript.

	``content`` is what gets emitted; ``loc.source`` keeps the original text,
	which may differ after identifier rewriting. Static expressions are string
	literals and are emitted quoted.
	"""

	type: ClassVar[NodeType] = NodeType.SIMPLE_EXPRESSION

	content: str
	is_static: bool = False
	const_type: ConstantType = ConstantType.NOT_CONSTANT
	loc: SourceLocation = LOC_STUB
	# names bound by this expression when it is a parameter list
	identifiers: list[str] | None = None
	# scope-local names this expression reads
	local_refs: list[str] | None = None
	# set on `_hoisted_N` references
	hoisted: JSChildNode | None = None


@dataclass(slots=True, eq=False)
class InterpolationNode(Node):
	type: ClassVar[NodeType] = NodeType.INTERPOLATION

	content: ExpressionNode
	loc: SourceLocation = LOC_STUB


@dataclass(slots=True, eq=False)
class CompoundExpressionNode(Node):
	"""Literal code fragments interleaved with expression nodes, in source order."""

	type: ClassVar[NodeType] = NodeType.COMPOUND_EXPRESSION

	children: list[CompoundChild] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB
	identifiers: list[str] | None = None
	local_refs: list[str] | None = None


@dataclass(slots=True, eq=False)
class IfNode(Node):
	type: ClassVar[NodeType] = NodeType.IF

	branches: list[IfBranchNode] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB
	codegen_node: ConditionalExpression | ElementCall | CallExpression | None = None


@dataclass(slots=True, eq=False)
class IfBranchNode(Node):
	type: ClassVar[NodeType] = NodeType.IF_BRANCH

	condition: ExpressionNode | None
	children: list[TemplateChildNode] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB
	user_key: AttributeNode | DirectiveNode | None = None
	is_template_if: bool = False


@dataclass(slots=True, eq=False)
class ForParseResult:
	source: ExpressionNode
	value: ExpressionNode | None = None
	key: ExpressionNode | None = None
	index: ExpressionNode | None = None


@dataclass(slots=True, eq=False)
class ForNode(Node):
	type: ClassVar[NodeType] = NodeType.FOR

	source: ExpressionNode
	parse_result: ForParseResult
	value_alias: ExpressionNode | None = None
	key_alias: ExpressionNode | None = None
	object_index_alias: ExpressionNode | None = None
	children: list[TemplateChildNode] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB
	codegen_node: ElementCall | None = None


@dataclass(slots=True, eq=False)
class TextCallNode(Node):
	"""A text run that has to become a `createTextVNode(...)` call."""

	type: ClassVar[NodeType] = NodeType.TEXT_CALL

	content: TextNode | InterpolationNode | CompoundExpressionNode
	codegen_node: CallExpression | SimpleExpressionNode
	loc: SourceLocation = LOC_STUB


# =============================================================================
# Codegen descriptors
# =============================================================================
@dataclass(slots=True, eq=False)
class ElementCall(Node):
	"""`createElementVNode(tag, props, children, patchFlag, dynamicProps)` and its variants.

	``is_block`` selects the `(openBlock(), createElementBlock(...))` form;
	``dynamic_children`` is filled in by block flattening for block roots.
	"""

	type: ClassVar[NodeType] = NodeType.ELEMENT_CALL

	tag: str | RuntimeHelper | CallExpression
	props: PropsExpression | None = None
	children: ElementCallChildren = None
	patch_flag: int = 0
	dynamic_props: list[str] | None = None
	directives: ArrayExpression | None = None
	is_block: bool = False
	disable_tracking: bool = False
	is_component: bool = False
	loc: SourceLocation = LOC_STUB
	dynamic_children: list[JSChildNode] | None = None


@dataclass(slots=True, eq=False)
class CallExpression(Node):
	type: ClassVar[NodeType] = NodeType.JS_CALL_EXPRESSION

	callee: str | RuntimeHelper
	arguments: list[CallArgument] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB
	# dynamic-update flag carried for block flattening (text calls)
	patch_flag: int = 0
	# calls that open their own block at runtime (slot rendering)
	is_block: bool = False


@dataclass(slots=True, eq=False)
class Property(Node):
	type: ClassVar[NodeType] = NodeType.JS_PROPERTY

	key: ExpressionNode
	value: JSChildNode
	loc: SourceLocation = LOC_STUB


@dataclass(slots=True, eq=False)
class ObjectExpression(Node):
	type: ClassVar[NodeType] = NodeType.JS_OBJECT_EXPRESSION

	properties: list[Property] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB


@dataclass(slots=True, eq=False)
class ArrayExpression(Node):
	type: ClassVar[NodeType] = NodeType.JS_ARRAY_EXPRESSION

	elements: list[CallArgument] = field(default_factory=list)
	loc: SourceLocation = LOC_STUB


@dataclass(slots=True, eq=False)
class FunctionExpression(Node):
	"""An arrow function. ``returns`` may be a child list, emitted as an array."""

	type: ClassVar[NodeType] = NodeType.JS_FUNCTION_EXPRESSION

	params: ExpressionNode | str | list[ExpressionNode | str] | None = None
	returns: TemplateChildNode | JSChildNode | list[TemplateChildNode] | None = None
	newline: bool = False
	is_slot: bool = False
	loc: SourceLocation = LOC_STUB
	dynamic_children: list[JSChildNode] | None = None


@dataclass(slots=True, eq=False)
class ConditionalExpression(Node):
	type: ClassVar[NodeType] = NodeType.JS_CONDITIONAL_EXPRESSION

	test: JSChildNode
	consequent: JSChildNode
	alternate: JSChildNode
	newline: bool = True
	loc: SourceLocation = LOC_STUB


# =============================================================================
# Type aliases
# =============================================================================
ExpressionNode: TypeAlias = SimpleExpressionNode | CompoundExpressionNode
TemplateChildNode: TypeAlias = (
	ElementNode
	| InterpolationNode
	| CompoundExpressionNode
	| TextNode
	| CommentNode
	| IfNode
	| IfBranchNode
	| ForNode
	| TextCallNode
)
ParentNode: TypeAlias = RootNode | ElementNode | IfBranchNode | ForNode
TemplateTextChildNode: TypeAlias = TextNode | InterpolationNode | CompoundExpressionNode
JSChildNode: TypeAlias = (
	ElementCall
	| CallExpression
	| ObjectExpression
	| ArrayExpression
	| SimpleExpressionNode
	| CompoundExpressionNode
	| FunctionExpression
	| ConditionalExpression
)
PropsExpression: TypeAlias = ObjectExpression | CallExpression | ExpressionNode
CompoundChild: TypeAlias = (
	str | SimpleExpressionNode | CompoundExpressionNode | InterpolationNode | TextNode | RuntimeHelper
)
CallArgument: TypeAlias = (
	str | RuntimeHelper | JSChildNode | TemplateChildNode | list[TemplateChildNode]
)
ElementCallChildren: TypeAlias = (
	list[TemplateChildNode]
	| TemplateTextChildNode
	| ObjectExpression
	| CallExpression
	| SimpleExpressionNode
	| None
)


# =============================================================================
# Constructors
# =============================================================================
def create_simple_expression(
	content: str,
	is_static: bool = False,
	loc: SourceLocation = LOC_STUB,
	const_type: ConstantType = ConstantType.NOT_CONSTANT,
) -> SimpleExpressionNode:
	return SimpleExpressionNode(
		content=content,
		is_static=is_static,
		const_type=ConstantType.CAN_STRINGIFY if is_static else const_type,
		loc=loc,
	)


def create_compound_expression(
	children: list[CompoundChild], loc: SourceLocation = LOC_STUB
) -> CompoundExpressionNode:
	return CompoundExpressionNode(children=children, loc=loc)


def create_object_property(key: str | ExpressionNode, value: JSChildNode) -> Property:
	if isinstance(key, str):
		key = create_simple_expression(key, True)
	return Property(key=key, value=value, loc=LOC_STUB)


def create_object_expression(
	properties: list[Property], loc: SourceLocation = LOC_STUB
) -> ObjectExpression:
	return ObjectExpression(properties=properties, loc=loc)


def create_array_expression(
	elements: list[CallArgument], loc: SourceLocation = LOC_STUB
) -> ArrayExpression:
	return ArrayExpression(elements=elements, loc=loc)


def create_call_expression(
	callee: str | RuntimeHelper,
	args: list[CallArgument] | None = None,
	loc: SourceLocation = LOC_STUB,
) -> CallExpression:
	return CallExpression(callee=callee, arguments=list(args or []), loc=loc)


def create_function_expression(
	params: ExpressionNode | str | list[ExpressionNode | str] | None,
	returns: TemplateChildNode | JSChildNode | list[TemplateChildNode] | None = None,
	newline: bool = False,
	is_slot: bool = False,
	loc: SourceLocation = LOC_STUB,
) -> FunctionExpression:
	return FunctionExpression(
		params=params, returns=returns, newline=newline, is_slot=is_slot, loc=loc
	)


def create_conditional_expression(
	test: JSChildNode,
	consequent: JSChildNode,
	alternate: JSChildNode,
	newline: bool = True,
) -> ConditionalExpression:
	return ConditionalExpression(
		test=test, consequent=consequent, alternate=alternate, newline=newline
	)


def create_element_call(
	tag: str | RuntimeHelper | CallExpression,
	props: PropsExpression | None = None,
	children: ElementCallChildren = None,
	patch_flag: int = 0,
	dynamic_props: list[str] | None = None,
	directives: ArrayExpression | None = None,
	is_block: bool = False,
	disable_tracking: bool = False,
	is_component: bool = False,
	loc: SourceLocation = LOC_STUB,
) -> ElementCall:
	return ElementCall(
		tag=tag,
		props=props,
		children=children,
		patch_flag=patch_flag,
		dynamic_props=dynamic_props,
		directives=directives,
		is_block=is_block,
		disable_tracking=disable_tracking,
		is_component=is_component,
		loc=loc,
	)
