"""
Value and condition sub-parsing for the natural-language parser

Both classifiers are explicit ordered rule tables evaluated first-match-wins.
Ordering is part of correctness: a more specific phrasing must be tried before
any shorter phrasing that is a prefix of it ("greater than or equal to" before
"greater than", "is not equal to" before "is not" before "is").
"""

import re
from collections.abc import Callable

from .models import (
    ArrayAccess,
    BinaryExpression,
    DataKind,
    FunctionCall,
    Identifier,
    Literal,
    Node,
    PropertyAccess,
    UnaryExpression,
)

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_NAME = r"[A-Za-z_][\w.]*"
_CALL_RE = re.compile(rf"^({_NAME})\s*\((.*)\)$", re.S)
_INDEX_RE = re.compile(r"^([A-Za-z_]\w*)\[(.*)\]$", re.S)
_PROPERTY_RE = re.compile(r"^([A-Za-z_][\w.]*)\.([A-Za-z_]\w*)$")

_BRACKETS = {"(": ")", "[": "]", "{": "}"}
_QUOTES = {'"', "'"}

# Word operators, by precedence class (lowest first)
_ADDITIVE_WORDS_RE = re.compile(r"\s(plus|minus)\s", re.I)
_MULTIPLICATIVE_WORDS_RE = re.compile(
    r"\s(times|multiplied\s+by|divided\s+by|modulo|mod)\s", re.I
)
_WORD_OPERATORS = {
    "plus": "+",
    "minus": "-",
    "times": "*",
    "multiplied by": "*",
    "divided by": "/",
    "mod": "%",
    "modulo": "%",
}
_OPERATOR_CHARS = "+-*/%<>=!&|(,"

# "than or equal to" is one comparison, not a disjunction
_OR_RE = re.compile(r"\s+or\s+(?!equal\s+to\b)|\s*\|\|\s*", re.I)
_AND_RE = re.compile(r"\s+and\s+|\s*&&\s*", re.I)
_NOT_RE = re.compile(r"^(?:not\s+|!(?!=))", re.I)
_SYMBOLIC_LOGIC_RE = re.compile(r"==|!=|>=|<=|&&|\|\||(?<![=!<>-])[<>](?![=])")


def mask(text: str) -> str:
    """
    Hide the inside of quoted strings and bracketed groups.

    Returns a string of the same length where characters inside quotes or
    inside a top-level bracket pair are replaced by "_", so operator searches
    only see top-level structure. Positions map 1:1 onto the input.
    """
    out: list[str] = []
    quote: str | None = None
    stack: list[str] = []
    prev = ""
    for ch in text:
        if quote:
            if ch == quote and prev != "\\":
                quote = None
                out.append(ch if not stack else "_")
            else:
                out.append("_")
        elif ch in _QUOTES:
            quote = ch
            out.append(ch if not stack else "_")
        elif ch in _BRACKETS:
            out.append(ch if not stack else "_")
            stack.append(_BRACKETS[ch])
        elif stack and ch == stack[-1]:
            stack.pop()
            out.append(ch if not stack else "_")
        else:
            out.append("_" if stack else ch)
        prev = ch
    return "".join(out)


def is_wrapped(text: str, opening: str = "(") -> bool:
    """True when the whole text is a single bracketed group"""
    closing = _BRACKETS[opening]
    if len(text) < 2 or text[0] != opening or text[-1] != closing:
        return False
    return mask(text).find(closing, 1) == len(text) - 1


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on a separator that is not inside quotes or brackets"""
    if not text.strip():
        return []
    masked = mask(text)
    parts: list[str] = []
    start = 0
    for i, ch in enumerate(masked):
        if ch == separator:
            parts.append(text[start:i].strip())
            start = i + 1
    parts.append(text[start:].strip())
    return [p for p in parts if p]


def _is_quoted(text: str) -> bool:
    if len(text) < 2 or text[0] not in _QUOTES or text[-1] != text[0]:
        return False
    masked = mask(text)
    return masked.find(text[0], 1) == len(text) - 1


def _unescape(inner: str, quote: str) -> str:
    return inner.replace("\\" + quote, quote).replace("\\\\", "\\")


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


def _string_literal(text: str) -> Node | None:
    if _is_quoted(text):
        return Literal(_unescape(text[1:-1], text[0]), DataKind.STRING)
    return None


def _number_literal(text: str) -> Node | None:
    match = _NUMBER_RE.match(text)
    if not match:
        return None
    return Literal(float(text) if match.group(1) else int(text), DataKind.NUMBER)


def _boolean_literal(text: str) -> Node | None:
    lowered = text.lower()
    if lowered in ("true", "false"):
        return Literal(lowered == "true", DataKind.BOOLEAN)
    return None


def _null_literal(text: str) -> Node | None:
    if text.lower() in ("null", "none", "nil"):
        return Literal(None, DataKind.NULL)
    return None


def _binary_split(text: str, masked: str, words_re: re.Pattern[str], symbols: str):
    """
    Find the rightmost top-level operator of one precedence class.

    Returns (left, operator, right) or None.
    """
    best: tuple[int, int, str] | None = None

    for match in words_re.finditer(masked):
        word = re.sub(r"\s+", " ", match.group(1).lower())
        start, end = match.span()
        if best is None or start > best[0]:
            best = (start, end, _WORD_OPERATORS[word])

    for i, ch in enumerate(masked):
        if ch not in symbols:
            continue
        before = masked[:i].rstrip()
        after = masked[i + 1 :].lstrip()
        if not before or not after or before[-1] in _OPERATOR_CHARS:
            continue
        if after[0] in "=*" or masked[i + 1 : i + 2] in ("=", ">"):
            continue
        if ch == "-" and masked[i - 1 : i].isalnum() and masked[i + 1 : i + 2].isalnum():
            # hyphenated word, not a subtraction
            continue
        if best is None or i > best[0]:
            best = (i, i + 1, ch)

    if best is None:
        return None
    start, end, operator = best
    left, right = text[:start].strip(), text[end:].strip()
    if not left or not right:
        return None
    return left, operator, right


def _arithmetic(text: str) -> Node | None:
    masked = mask(text)
    for words_re, symbols in (
        (_ADDITIVE_WORDS_RE, "+-"),
        (_MULTIPLICATIVE_WORDS_RE, "*/%"),
    ):
        split = _binary_split(text, masked, words_re, symbols)
        if split:
            left, operator, right = split
            return BinaryExpression(operator, parse_value(left), parse_value(right))
    return None


def _negation(text: str) -> Node | None:
    if text.startswith("-") and len(text) > 1:
        return UnaryExpression("-", parse_value(text[1:]))
    return None


def _grouped(text: str) -> Node | None:
    if is_wrapped(text, "("):
        inner = text[1:-1].strip()
        if inner:
            return parse_expression(inner)
    return None


def _call(text: str) -> Node | None:
    match = _CALL_RE.match(text)
    if not match or not is_wrapped(text[text.index("(") :].strip(), "("):
        return None
    arguments = [parse_expression(arg) for arg in split_top_level(match.group(2))]
    return FunctionCall(match.group(1), tuple(arguments))


def _array_access(text: str) -> Node | None:
    match = _INDEX_RE.match(text)
    if not match or not is_wrapped(text[text.index("[") :], "["):
        return None
    return ArrayAccess(match.group(1), parse_expression(match.group(2).strip()))


def _property_access(text: str) -> Node | None:
    match = _PROPERTY_RE.match(text)
    if not match:
        return None
    return PropertyAccess(match.group(1), match.group(2))


# Ordered value rules: literals first, then structured expressions, and
# Identifier as the catch-all.
VALUE_RULES: tuple[tuple[str, Callable[[str], Node | None]], ...] = (
    ("string", _string_literal),
    ("number", _number_literal),
    ("boolean", _boolean_literal),
    ("null", _null_literal),
    ("group", _grouped),
    ("arithmetic", _arithmetic),
    ("negation", _negation),
    ("call", _call),
    ("array_access", _array_access),
    ("property_access", _property_access),
)


def parse_value(value: str) -> Node:
    """
    Classify a value string

    Never fails: text that matches no rule is an Identifier carrying the
    trimmed text, so a malformed literal becomes a variable reference.
    """
    text = value.strip()
    for _name, rule in VALUE_RULES:
        node = rule(text)
        if node is not None:
            return node
    return Identifier(text)


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------

_LEFT = r"(.+?)\s+"
# Ordered comparison phrasings, most specific first
COMPARISON_RULES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.I | re.S), op)
    for pattern, op in (
        (_LEFT + r"is\s+not\s+greater\s+than\s+or\s+equal\s+to\s+(.+)", "<"),
        (_LEFT + r"is\s+not\s+less\s+than\s+or\s+equal\s+to\s+(.+)", ">"),
        (_LEFT + r"is\s+not\s+at\s+least\s+(.+)", "<"),
        (_LEFT + r"is\s+not\s+at\s+most\s+(.+)", ">"),
        (_LEFT + r"(?:is\s+)?greater\s+than\s+or\s+equal\s+to\s+(.+)", ">="),
        (_LEFT + r"(?:is\s+)?at\s+least\s+(.+)", ">="),
        (_LEFT + r"is\s+(?:not|no)\s+(?:greater|more|bigger|larger)\s+than\s+(.+)", "<="),
        (_LEFT + r"is\s+(?:not|no)\s+(?:less|fewer|smaller)\s+than\s+(.+)", ">="),
        (_LEFT + r"(?:is\s+)?(?:greater|more|bigger|larger)\s+than\s+(.+)", ">"),
        (_LEFT + r"(?:is\s+)?less\s+than\s+or\s+equal\s+to\s+(.+)", "<="),
        (_LEFT + r"(?:is\s+)?at\s+most\s+(.+)", "<="),
        (_LEFT + r"(?:is\s+)?(?:less|fewer|smaller)\s+than\s+(.+)", "<"),
        (_LEFT + r"(?:is\s+)?not\s+equal\s+to\s+(.+)", "!="),
        (_LEFT + r"does\s+not\s+equal\s+(.+)", "!="),
        (_LEFT + r"is\s+not\s+(.+)", "!="),
        (_LEFT + r"(?:is\s+)?equal\s+to\s+(.+)", "=="),
        (_LEFT + r"equals\s+(.+)", "=="),
        (r"(.+?)\s*>=\s*(.+)", ">="),
        (r"(.+?)\s*<=\s*(.+)", "<="),
        (r"(.+?)\s*!==?\s*(.+)", "!="),
        (r"(.+?)\s*===?\s*(.+)", "=="),
        (r"(.+?)\s*>\s*(.+)", ">"),
        (r"(.+?)\s*<\s*(.+)", "<"),
        (r"(.+?)\s*=\s*(.+)", "=="),
        (_LEFT + r"is\s+(.+)", "=="),
    )
)


def _split_rightmost(text: str, pattern: re.Pattern[str]) -> tuple[str, str] | None:
    matches = list(pattern.finditer(mask(text)))
    if not matches:
        return None
    last = matches[-1]
    left, right = text[: last.start()].strip(), text[last.end() :].strip()
    if not left or not right:
        return None
    return left, right


def parse_condition(condition: str) -> Node:
    """
    Classify a condition string

    Logical connectives bind loosest (or, then and), then a leading "not",
    then the first matching comparison phrasing. With no comparison the
    condition is parsed as a plain value and tested for truthiness.
    """
    text = condition.strip()
    if is_wrapped(text, "(") and text[1:-1].strip():
        return parse_condition(text[1:-1])

    for pattern, operator in ((_OR_RE, "||"), (_AND_RE, "&&")):
        split = _split_rightmost(text, pattern)
        if split:
            return BinaryExpression(operator, parse_condition(split[0]), parse_condition(split[1]))

    negated = _NOT_RE.match(text)
    if negated and text[negated.end() :].strip():
        return UnaryExpression("!", parse_condition(text[negated.end() :]))

    masked = mask(text)
    for pattern, operator in COMPARISON_RULES:
        match = pattern.fullmatch(masked)
        if match:
            left = text[match.start(1) : match.end(1)]
            right = text[match.start(2) : match.end(2)]
            if left.strip() and right.strip():
                return BinaryExpression(operator, parse_value(left), parse_value(right))

    return parse_value(text)


def parse_expression(text: str) -> Node:
    """
    Parse a right-hand side: a condition when it carries symbolic comparison
    or logic operators at top level, otherwise a value.
    """
    stripped = text.strip()
    if _SYMBOLIC_LOGIC_RE.search(mask(stripped)):
        return parse_condition(stripped)
    return parse_value(stripped)
