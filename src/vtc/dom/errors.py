from __future__ import annotations

from enum import IntEnum

from vtc.ast import SourceLocation
from vtc.errors import EXTEND_POINT, CompilerError, create_compiler_error


class DOMErrorCodes(IntEnum):
	X_V_HTML_NO_EXPRESSION = EXTEND_POINT
	X_V_HTML_WITH_CHILDREN = EXTEND_POINT + 1
	X_V_TEXT_NO_EXPRESSION = EXTEND_POINT + 2
	X_V_TEXT_WITH_CHILDREN = EXTEND_POINT + 3
	X_V_MODEL_ON_INVALID_ELEMENT = EXTEND_POINT + 4
	X_V_MODEL_ARG_ON_ELEMENT = EXTEND_POINT + 5
	X_V_MODEL_ON_FILE_INPUT_ELEMENT = EXTEND_POINT + 6
	X_V_MODEL_UNNECESSARY_VALUE = EXTEND_POINT + 7
	X_V_SHOW_NO_EXPRESSION = EXTEND_POINT + 8
	X_IGNORED_SIDE_EFFECT_TAG = EXTEND_POINT + 9


DOM_ERROR_MESSAGES: dict[int, str] = {
	DOMErrorCodes.X_V_HTML_NO_EXPRESSION: "v-html is missing expression.",
	DOMErrorCodes.X_V_HTML_WITH_CHILDREN: "v-html will override element children.",
	DOMErrorCodes.X_V_TEXT_NO_EXPRESSION: "v-text is missing expression.",
	DOMErrorCodes.X_V_TEXT_WITH_CHILDREN: "v-text will override element children.",
	DOMErrorCodes.X_V_MODEL_ON_INVALID_ELEMENT: "v-model can only be used on <input>, <textarea> and <select> elements.",
	DOMErrorCodes.X_V_MODEL_ARG_ON_ELEMENT: "v-model argument is not supported on plain elements.",
	DOMErrorCodes.X_V_MODEL_ON_FILE_INPUT_ELEMENT: "v-model cannot be used on file inputs since they are read-only. Use a v-on:change listener instead.",
	DOMErrorCodes.X_V_MODEL_UNNECESSARY_VALUE: "Unnecessary value binding used alongside v-model. It will interfere with v-model's behavior.",
	DOMErrorCodes.X_V_SHOW_NO_EXPRESSION: "v-show is missing expression.",
	DOMErrorCodes.X_IGNORED_SIDE_EFFECT_TAG: "Tags with side effect (<script> and <style>) are ignored in client component templates.",
}


def create_dom_compiler_error(
	code: DOMErrorCodes, loc: SourceLocation | None = None
) -> CompilerError:
	return create_compiler_error(code, loc, DOM_ERROR_MESSAGES)
