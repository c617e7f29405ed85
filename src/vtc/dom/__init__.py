"""HTML flavour of the compiler: tag tables, entity decoding and DOM directives."""

from vtc.dom.compiler import DOM_DIRECTIVE_TRANSFORMS as DOM_DIRECTIVE_TRANSFORMS
from vtc.dom.compiler import DOM_NODE_TRANSFORMS as DOM_NODE_TRANSFORMS
from vtc.dom.compiler import compile as compile
from vtc.dom.compiler import dom_options as dom_options
from vtc.dom.compiler import parse as parse

# Errors
from vtc.dom.errors import DOM_ERROR_MESSAGES as DOM_ERROR_MESSAGES
from vtc.dom.errors import DOMErrorCodes as DOMErrorCodes
from vtc.dom.errors import create_dom_compiler_error as create_dom_compiler_error

# Parser options
from vtc.dom.parser_options import is_html_tag as is_html_tag
from vtc.dom.parser_options import is_math_ml_tag as is_math_ml_tag
from vtc.dom.parser_options import is_native_tag as is_native_tag
from vtc.dom.parser_options import is_svg_tag as is_svg_tag
from vtc.dom.parser_options import is_void_tag as is_void_tag

# Runtime helpers
from vtc.dom.runtime_helpers import V_MODEL_CHECKBOX as V_MODEL_CHECKBOX
from vtc.dom.runtime_helpers import V_MODEL_DYNAMIC as V_MODEL_DYNAMIC
from vtc.dom.runtime_helpers import V_MODEL_RADIO as V_MODEL_RADIO
from vtc.dom.runtime_helpers import V_MODEL_SELECT as V_MODEL_SELECT
from vtc.dom.runtime_helpers import V_MODEL_TEXT as V_MODEL_TEXT
from vtc.dom.runtime_helpers import V_ON_WITH_KEYS as V_ON_WITH_KEYS
from vtc.dom.runtime_helpers import V_ON_WITH_MODIFIERS as V_ON_WITH_MODIFIERS
from vtc.dom.runtime_helpers import V_SHOW as V_SHOW
