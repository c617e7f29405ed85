from __future__ import annotations

import re
from enum import IntEnum
from functools import cache


class PatchFlags(IntEnum):
	"""Hints attached to generated element calls so the renderer can skip work.

	Flags combine with bitwise OR. The negative values are special markers and
	never combine.
	"""

	TEXT = 1
	CLASS = 1 << 1
	STYLE = 1 << 2
	PROPS = 1 << 3
	FULL_PROPS = 1 << 4
	NEED_HYDRATION = 1 << 5
	STABLE_FRAGMENT = 1 << 6
	KEYED_FRAGMENT = 1 << 7
	UNKEYED_FRAGMENT = 1 << 8
	NEED_PATCH = 1 << 9
	DYNAMIC_SLOTS = 1 << 10
	HOISTED = -1
	BAIL = -2


class SlotFlags(IntEnum):
	STABLE = 1
	DYNAMIC = 2
	FORWARDED = 3


def patch_flag_text(flag: int) -> str:
	"""Render a patch flag the way it appears in generated code: `9 /* TEXT, PROPS */`."""
	if flag < 0:
		return f"{flag} /* {PatchFlags(flag).name} */"
	names = [f.name for f in PatchFlags if f > 0 and flag & f]
	return f"{flag} /* {', '.join(names)} */"


# =============================================================================
# String helpers
# =============================================================================

_CAMELIZE_RE = re.compile(r"-(\w)")
_HYPHENATE_RE = re.compile(r"\B([A-Z])")


@cache
def camelize(s: str) -> str:
	return _CAMELIZE_RE.sub(lambda m: m.group(1).upper(), s)


@cache
def hyphenate(s: str) -> str:
	return _HYPHENATE_RE.sub(r"-\1", s).lower()


def capitalize(s: str) -> str:
	return s[:1].upper() + s[1:]


def to_handler_key(s: str) -> str:
	"""`click` -> `onClick`. An empty name stays empty."""
	return f"on{capitalize(s)}" if s else ""


def is_on(key: str) -> bool:
	"""Event handler prop names: `on` followed by a non-lowercase character."""
	return len(key) > 2 and key.startswith("on") and not ("a" <= key[2] <= "z")


_SIMPLE_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


def is_simple_identifier(name: str) -> bool:
	return _SIMPLE_IDENTIFIER_RE.match(name) is not None


GLOBALLY_ALLOWED = frozenset(
	{
		"Infinity",
		"undefined",
		"NaN",
		"isFinite",
		"isNaN",
		"parseFloat",
		"parseInt",
		"decodeURI",
		"decodeURIComponent",
		"encodeURI",
		"encodeURIComponent",
		"Math",
		"Number",
		"Date",
		"Array",
		"Object",
		"Boolean",
		"String",
		"RegExp",
		"Map",
		"Set",
		"JSON",
		"Intl",
		"BigInt",
		"console",
		"Error",
		"Symbol",
	}
)

LITERAL_KEYWORDS = frozenset({"true", "false", "null", "this"})


def is_globally_allowed(name: str) -> bool:
	return name in GLOBALLY_ALLOWED


BUILTIN_DIRECTIVES = frozenset(
	{
		"bind",
		"cloak",
		"else-if",
		"else",
		"for",
		"html",
		"if",
		"model",
		"on",
		"once",
		"pre",
		"show",
		"slot",
		"text",
		"memo",
	}
)


def is_builtin_directive(name: str) -> bool:
	return name in BUILTIN_DIRECTIVES
