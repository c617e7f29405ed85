"""
Tests for block flattening (dynamic children of block roots).
"""

from vtc import CompilerOptions, ElementNode, ForNode, IfNode, base_compile
from vtc.ast import (
	CallExpression,
	ConditionalExpression,
	ElementCall,
	FunctionExpression,
	ObjectExpression,
	RootNode,
	TextCallNode,
)


def compile_ast(template: str) -> RootNode:
	return base_compile(template, CompilerOptions()).ast


def root_block(root: RootNode) -> ElementCall:
	codegen = root.codegen_node
	assert isinstance(codegen, ElementCall)
	assert codegen.is_block
	return codegen


class TestBlocks:
	def test_dynamic_descendants_collected(self):
		root = compile_ast('<div><p>{{ a }}</p><span>static</span><section><b :id="x"></b></section></div>')
		div = root.children[0]
		p, _, section = div.children
		b = section.children[0]
		block = root_block(root)
		assert block.dynamic_children == [p.codegen_node, b.codegen_node]
		assert root.dynamic_children is block.dynamic_children

	def test_static_root_has_no_dynamic_children(self):
		root = compile_ast("<div><p>a</p></div>")
		assert root.dynamic_children == []

	def test_nested_block_does_not_leak(self):
		root = compile_ast('<div><p v-if="a">{{ b }}</p><i>{{ c }}</i></div>')
		div = root.children[0]
		if_node, i = div.children
		assert isinstance(if_node, IfNode)
		conditional = if_node.codegen_node
		assert isinstance(conditional, ConditionalExpression)
		branch_block = conditional.consequent
		assert isinstance(branch_block, ElementCall)
		assert root_block(root).dynamic_children == [branch_block, i.codegen_node]
		assert branch_block.dynamic_children == []

	def test_keyed_fragment_is_untracked(self):
		root = compile_ast('<div><li v-for="x in xs" :key="x">{{ x }}</li></div>')
		for_node = root.children[0].children[0]
		assert isinstance(for_node, ForNode)
		fragment = for_node.codegen_node
		assert root_block(root).dynamic_children == [fragment]
		assert fragment.dynamic_children is None
		body = for_node.children[0]
		assert isinstance(body, ElementNode)
		assert body.codegen_node.is_block
		assert body.codegen_node.dynamic_children == []

	def test_stable_fragment_is_tracked(self):
		root = compile_ast('<li v-for="n in 3">{{ n }}</li>')
		for_node = root.children[0]
		assert isinstance(for_node, ForNode)
		fragment = for_node.codegen_node
		assert isinstance(fragment, ElementCall)
		assert fragment.disable_tracking is False
		assert fragment.dynamic_children == [for_node.children[0].codegen_node]

	def test_component_slot_content(self):
		root = compile_ast("<div><Comp>{{ a }}</Comp></div>")
		comp = root.children[0].children[0]
		comp_call = comp.codegen_node
		assert isinstance(comp_call, ElementCall)
		assert root_block(root).dynamic_children == [comp_call]
		assert comp_call.dynamic_children == []

		slots = comp_call.children
		assert isinstance(slots, ObjectExpression)
		with_ctx = slots.properties[0].value
		assert isinstance(with_ctx, CallExpression)
		slot_fn = with_ctx.arguments[0]
		assert isinstance(slot_fn, FunctionExpression)
		text = comp.children[0]
		assert isinstance(text, TextCallNode)
		assert slot_fn.dynamic_children == [text.codegen_node]

	def test_root_fragment(self):
		root = compile_ast("<p>{{ a }}</p><p>b</p>")
		block = root_block(root)
		assert block.patch_flag == 64
		assert block.dynamic_children == [root.children[0].codegen_node]

	def test_slot_outlet_opens_block(self):
		root = compile_ast("<div><slot/><p>{{ a }}</p></div>")
		outlet, p = root.children[0].children
		assert root_block(root).dynamic_children == [outlet.codegen_node, p.codegen_node]
