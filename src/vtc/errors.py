from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from vtc.ast import SourceLocation

logger = logging.getLogger(__name__)


class ErrorCodes(IntEnum):
	# parse errors
	ABRUPT_CLOSING_OF_EMPTY_COMMENT = 0
	CDATA_IN_HTML_CONTENT = 1
	DUPLICATE_ATTRIBUTE = 2
	END_TAG_WITH_ATTRIBUTES = 3
	END_TAG_WITH_TRAILING_SOLIDUS = 4
	EOF_BEFORE_TAG_NAME = 5
	EOF_IN_CDATA = 6
	EOF_IN_COMMENT = 7
	EOF_IN_SCRIPT_HTML_COMMENT_LIKE_TEXT = 8
	EOF_IN_TAG = 9
	INCORRECTLY_CLOSED_COMMENT = 10
	INCORRECTLY_OPENED_COMMENT = 11
	INVALID_FIRST_CHARACTER_OF_TAG_NAME = 12
	MISSING_ATTRIBUTE_VALUE = 13
	MISSING_END_TAG_NAME = 14
	MISSING_WHITESPACE_BETWEEN_ATTRIBUTES = 15
	NESTED_COMMENT = 16
	UNEXPECTED_CHARACTER_IN_ATTRIBUTE_NAME = 17
	UNEXPECTED_CHARACTER_IN_UNQUOTED_ATTRIBUTE_VALUE = 18
	UNEXPECTED_EQUALS_SIGN_BEFORE_ATTRIBUTE_NAME = 19
	UNEXPECTED_NULL_CHARACTER = 20
	UNEXPECTED_QUESTION_MARK_INSTEAD_OF_TAG_NAME = 21
	UNEXPECTED_SOLIDUS_IN_TAG = 22

	# template syntax errors
	X_INVALID_END_TAG = 23
	X_MISSING_END_TAG = 24
	X_MISSING_INTERPOLATION_END = 25
	X_MISSING_DIRECTIVE_NAME = 26
	X_MISSING_DYNAMIC_DIRECTIVE_ARGUMENT_END = 27

	# transform errors
	X_V_IF_NO_EXPRESSION = 28
	X_V_IF_SAME_KEY = 29
	X_V_ELSE_NO_ADJACENT_IF = 30
	X_V_FOR_NO_EXPRESSION = 31
	X_V_FOR_MALFORMED_EXPRESSION = 32
	X_V_FOR_TEMPLATE_KEY_PLACEMENT = 33
	X_V_BIND_NO_EXPRESSION = 34
	X_V_ON_NO_EXPRESSION = 35
	X_V_SLOT_UNEXPECTED_DIRECTIVE_ON_SLOT_OUTLET = 36
	X_V_SLOT_MIXED_SLOT_USAGE = 37
	X_V_SLOT_DUPLICATE_SLOT_NAMES = 38
	X_V_SLOT_EXTRANEOUS_DEFAULT_SLOT_CHILDREN = 39
	X_V_SLOT_MISPLACED = 40
	X_V_SLOT_STRUCTURAL_DIRECTIVE = 41
	X_V_MODEL_NO_EXPRESSION = 42
	X_V_MODEL_MALFORMED_EXPRESSION = 43
	X_V_MODEL_ON_SCOPE_VARIABLE = 44
	X_INVALID_EXPRESSION = 45

	# generic errors
	X_PREFIX_ID_REQUIRED_IN_MODULE_MODE = 46


# extension layers continue numbering from here
EXTEND_POINT = 47


ERROR_MESSAGES: dict[int, str] = {
	ErrorCodes.ABRUPT_CLOSING_OF_EMPTY_COMMENT: "Illegal comment.",
	ErrorCodes.CDATA_IN_HTML_CONTENT: "CDATA section is allowed only in XML context.",
	ErrorCodes.DUPLICATE_ATTRIBUTE: "Duplicate attribute.",
	ErrorCodes.END_TAG_WITH_ATTRIBUTES: "End tag cannot have attributes.",
	ErrorCodes.END_TAG_WITH_TRAILING_SOLIDUS: "Illegal '/' in tags.",
	ErrorCodes.EOF_BEFORE_TAG_NAME: "Unexpected EOF in tag.",
	ErrorCodes.EOF_IN_CDATA: "Unexpected EOF in CDATA section.",
	ErrorCodes.EOF_IN_COMMENT: "Unexpected EOF in comment.",
	ErrorCodes.EOF_IN_SCRIPT_HTML_COMMENT_LIKE_TEXT: "Unexpected EOF in script.",
	ErrorCodes.EOF_IN_TAG: "Unexpected EOF in tag.",
	ErrorCodes.INCORRECTLY_CLOSED_COMMENT: "Incorrectly closed comment.",
	ErrorCodes.INCORRECTLY_OPENED_COMMENT: "Incorrectly opened comment.",
	ErrorCodes.INVALID_FIRST_CHARACTER_OF_TAG_NAME: "Illegal tag name. Use '&lt;' to print '<'.",
	ErrorCodes.MISSING_ATTRIBUTE_VALUE: "Attribute value was expected.",
	ErrorCodes.MISSING_END_TAG_NAME: "End tag name was expected.",
	ErrorCodes.MISSING_WHITESPACE_BETWEEN_ATTRIBUTES: "Whitespace was expected.",
	ErrorCodes.NESTED_COMMENT: "Unexpected '<!--' in comment.",
	ErrorCodes.UNEXPECTED_CHARACTER_IN_ATTRIBUTE_NAME: "Attribute name cannot contain U+0022 (\"), U+0027 ('), and U+003C (<).",
	ErrorCodes.UNEXPECTED_CHARACTER_IN_UNQUOTED_ATTRIBUTE_VALUE: "Unquoted attribute value cannot contain U+0022 (\"), U+0027 ('), U+003C (<), U+003D (=), and U+0060 (`).",
	ErrorCodes.UNEXPECTED_EQUALS_SIGN_BEFORE_ATTRIBUTE_NAME: "Attribute name cannot start with '='.",
	ErrorCodes.UNEXPECTED_NULL_CHARACTER: "Unexpected null character.",
	ErrorCodes.UNEXPECTED_QUESTION_MARK_INSTEAD_OF_TAG_NAME: "'<?' is allowed only in XML context.",
	ErrorCodes.UNEXPECTED_SOLIDUS_IN_TAG: "Illegal '/' in tags.",
	ErrorCodes.X_INVALID_END_TAG: "Invalid end tag.",
	ErrorCodes.X_MISSING_END_TAG: "Element is missing end tag.",
	ErrorCodes.X_MISSING_INTERPOLATION_END: "Interpolation end sign was not found.",
	ErrorCodes.X_MISSING_DIRECTIVE_NAME: "Legal directive name was expected.",
	ErrorCodes.X_MISSING_DYNAMIC_DIRECTIVE_ARGUMENT_END: "End bracket for dynamic directive argument was not found. Note that dynamic directive argument cannot contain spaces.",
	ErrorCodes.X_V_IF_NO_EXPRESSION: "v-if/v-else-if is missing expression.",
	ErrorCodes.X_V_IF_SAME_KEY: "v-if/else branches must use unique keys.",
	ErrorCodes.X_V_ELSE_NO_ADJACENT_IF: "v-else/v-else-if has no adjacent v-if or v-else-if.",
	ErrorCodes.X_V_FOR_NO_EXPRESSION: "v-for is missing expression.",
	ErrorCodes.X_V_FOR_MALFORMED_EXPRESSION: "v-for has invalid expression.",
	ErrorCodes.X_V_FOR_TEMPLATE_KEY_PLACEMENT: "<template v-for> key should be placed on the <template> tag.",
	ErrorCodes.X_V_BIND_NO_EXPRESSION: "v-bind is missing expression.",
	ErrorCodes.X_V_ON_NO_EXPRESSION: "v-on is missing expression.",
	ErrorCodes.X_V_SLOT_UNEXPECTED_DIRECTIVE_ON_SLOT_OUTLET: "Unexpected custom directive on <slot> outlet.",
	ErrorCodes.X_V_SLOT_MIXED_SLOT_USAGE: "Mixed v-slot usage on both the component and nested <template>. When there are multiple named slots, all slots should use <template> syntax to avoid scope ambiguity.",
	ErrorCodes.X_V_SLOT_DUPLICATE_SLOT_NAMES: "Duplicate slot names found.",
	ErrorCodes.X_V_SLOT_EXTRANEOUS_DEFAULT_SLOT_CHILDREN: "Extraneous children found when component already has explicitly named default slot. These children will be ignored.",
	ErrorCodes.X_V_SLOT_MISPLACED: "v-slot can only be used on components or <template> tags.",
	ErrorCodes.X_V_SLOT_STRUCTURAL_DIRECTIVE: "v-if/v-for on a <template v-slot> is not supported. Move the condition inside the slot.",
	ErrorCodes.X_V_MODEL_NO_EXPRESSION: "v-model is missing expression.",
	ErrorCodes.X_V_MODEL_MALFORMED_EXPRESSION: "v-model value must be a valid JavaScript member expression.",
	ErrorCodes.X_V_MODEL_ON_SCOPE_VARIABLE: "v-model cannot be used on v-for or v-slot scope variables because they are not writable.",
	ErrorCodes.X_INVALID_EXPRESSION: "Error parsing JavaScript expression.",
	ErrorCodes.X_PREFIX_ID_REQUIRED_IN_MODULE_MODE: "Module mode requires identifier prefixing; it has been enabled for this compile.",
}


class CompilerError(Exception):
	"""A recoverable problem found in a template.

	Compiler errors are reported through ``CompilerOptions.on_error`` and
	collected on the compile result; they are never raised out of a compile.
	"""

	code: int
	loc: SourceLocation | None

	def __init__(self, code: int, loc: SourceLocation | None, message: str) -> None:
		super().__init__(message)
		self.code = code
		self.loc = loc

	@property
	def message(self) -> str:
		return str(self.args[0])

	def __repr__(self) -> str:
		return f"CompilerError(code={self.code}, message={self.message!r})"


def create_compiler_error(
	code: int,
	loc: SourceLocation | None = None,
	messages: Mapping[int, str] | None = None,
	additional_message: str | None = None,
) -> CompilerError:
	msg = (messages or ERROR_MESSAGES)[code]
	if additional_message:
		msg = f"{msg} {additional_message}"
	if loc is not None:
		msg = f"{msg} ({loc.start.line}:{loc.start.column})"
	return CompilerError(code, loc, msg)


def default_on_error(error: CompilerError) -> None:
	logger.warning("%s", error.message)


def default_on_warn(error: CompilerError) -> None:
	logger.info("%s", error.message)
