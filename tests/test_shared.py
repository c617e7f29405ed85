"""
Tests for flag rendering and name casing helpers.
"""

import pytest
from vtc.shared import (
	PatchFlags,
	camelize,
	capitalize,
	hyphenate,
	is_on,
	is_simple_identifier,
	patch_flag_text,
	to_handler_key,
)
from vtc.utils import to_valid_asset_id


class TestPatchFlagText:
	def test_single_flag(self):
		assert patch_flag_text(PatchFlags.TEXT) == "1 /* TEXT */"

	def test_combined_flags(self):
		assert patch_flag_text(PatchFlags.TEXT | PatchFlags.PROPS) == "9 /* TEXT, PROPS */"

	def test_negative_flag(self):
		assert patch_flag_text(PatchFlags.HOISTED) == "-1 /* HOISTED */"


class TestCasing:
	@pytest.mark.parametrize(
		("raw", "expected"),
		[("foo-bar", "fooBar"), ("foo-bar-baz", "fooBarBaz"), ("foo", "foo"), ("fooBar", "fooBar")],
	)
	def test_camelize(self, raw: str, expected: str):
		assert camelize(raw) == expected

	@pytest.mark.parametrize(
		("raw", "expected"),
		[("fooBar", "foo-bar"), ("FooBar", "foo-bar"), ("foo", "foo")],
	)
	def test_hyphenate(self, raw: str, expected: str):
		assert hyphenate(raw) == expected

	def test_capitalize(self):
		assert capitalize("click") == "Click"
		assert capitalize("") == ""

	def test_handler_key(self):
		assert to_handler_key("click") == "onClick"
		assert to_handler_key("update:modelValue") == "onUpdate:modelValue"
		assert to_handler_key("") == ""

	@pytest.mark.parametrize(
		("key", "expected"),
		[("onClick", True), ("on:click", True), ("once", False), ("on", False)],
	)
	def test_is_on(self, key: str, expected: bool):
		assert is_on(key) is expected


class TestIdentifiers:
	@pytest.mark.parametrize("name", ["foo", "_bar", "$slots", "a1"])
	def test_simple(self, name: str):
		assert is_simple_identifier(name)

	@pytest.mark.parametrize("name", ["1a", "a.b", "data-x", ""])
	def test_not_simple(self, name: str):
		assert not is_simple_identifier(name)

	def test_asset_ids(self):
		assert to_valid_asset_id("my-comp", "component") == "_component_my_comp"
		assert to_valid_asset_id("Foo", "directive") == "_directive_Foo"
		assert to_valid_asset_id("a.b", "component") == "_component_a46b"
