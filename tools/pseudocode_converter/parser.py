"""
Parser module for the Pseudocode Converter

Turns loosely written, line-oriented natural language (and canonical
pseudocode, which uses the same keywords) into the statement tree defined in
models.py. There is no grammar and no tokenizer: every line is matched against
an ordered table of keyword rules, and block constructs consume the following
lines until their terminator keyword.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from .expressions import (
    is_wrapped,
    parse_condition,
    parse_expression,
    parse_value,
    split_top_level,
)
from .models import (
    Assignment,
    BinaryExpression,
    Comment,
    ElseIfStatement,
    ElseStatement,
    ForEachLoop,
    ForLoop,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    Literal,
    Node,
    PrintStatement,
    ReturnStatement,
    UnaryExpression,
    VariableDeclaration,
    WhileLoop,
)

logger = logging.getLogger(__name__)

_INDUCTION_NAMES = ("i", "j", "k", "m", "n")
_TYPE_WORDS = frozenset(
    {"number", "integer", "int", "float", "real", "string", "text", "boolean", "bool",
     "list", "array", "any"}
)


@dataclass(frozen=True)
class ParseOptions:
    """
    Parser switches

    use_indentation: when True, a line indented at or left of a block's
    opening line closes that block (without being consumed), in addition to
    the explicit terminator keywords.
    """

    use_indentation: bool = False


@dataclass
class ParseResult:
    """
    Result of parsing: the statement sequence plus structural warnings
    """

    nodes: list[Node]
    warnings: list[str] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


@dataclass
class _Cursor:
    """Per-call parse state: the lines, a forward index, collected warnings"""

    lines: list[str]
    index: int = 0
    warnings: list[str] = field(default_factory=list)
    loop_vars: list[str] = field(default_factory=list)

    def done(self) -> bool:
        return self.index >= len(self.lines)

    @property
    def line_number(self) -> int:
        return self.index + 1


@dataclass(frozen=True)
class _Block:
    """How a block construct ends"""

    name: str
    end: re.Pattern[str]
    branch: re.Pattern[str] | None = None


@dataclass(frozen=True)
class _Opener:
    """The line that opened the construct being parsed"""

    line: str
    indent: int
    line_number: int


def _terminator(pattern: str) -> re.Pattern[str]:
    return re.compile(rf"(?:{pattern})\s*[.:;]?", re.I)


_IF_BLOCK = _Block(
    "if",
    _terminator(r"end(?:\s+if)?|endif"),
    branch=re.compile(r"(?:else|otherwise)\b.*", re.I),
)
_ELSE_BLOCK = _Block("else", _IF_BLOCK.end)
_WHILE_BLOCK = _Block("while", _terminator(r"end(?:\s+(?:while|loop))?|endwhile|endloop"))
_REPEAT_BLOCK = _Block(
    "repeat", _terminator(r"end(?:\s+(?:repeat|loop))?|endrepeat|endloop")
)
_FOR_BLOCK = _Block(
    "for", _terminator(r"end(?:\s+for(?:\s*each)?)?|endfor|endforeach|next(?:\s+\w+)?")
)
_FUNCTION_BLOCK = _Block(
    "function",
    _terminator(r"end(?:\s+(?:function|procedure))?|endfunction|endprocedure"),
)


def _indent_of(raw: str) -> int:
    expanded = raw.expandtabs(4)
    return len(expanded) - len(expanded.lstrip())


def _strip_block_suffix(text: str) -> str:
    """Drop a trailing "then"/"do"/":" from a block header clause"""
    return re.sub(r"(?:\s+(?:then|do))?\s*:?\s*$", "", text.strip(), flags=re.I)


class NaturalLanguageParser:
    """
    Main parser class that processes natural-language pseudocode
    """

    # Rule keywords, checked in this order; the first rule whose builder
    # produces nodes wins, anything else becomes a Comment.
    _DECLARATION_RE = re.compile(
        r"^(set|create|make|declare|define|let|var|const|constant)\b", re.I
    )
    _IF_RE = re.compile(r"^if\s+", re.I)
    _LOOP_RE = re.compile(r"^(while|loop|repeat|for)\b", re.I)
    _PRINT_RE = re.compile(r"^(print|display|output|show|log)\b", re.I)
    _COMMENT_RE = re.compile(r"^(//|#)")
    _FUNCTION_RE = re.compile(
        r"^(?:define\s+(?:a\s+)?)?(?:function|procedure|func|def)\s+[A-Za-z_]", re.I
    )
    _CALL_OR_RETURN_RE = re.compile(r"^(?:return\b|call\s+|[A-Za-z_][\w.]*\s*\()", re.I)
    _ASSIGNMENT_RE = re.compile(
        r"^(?:[A-Za-z_]\w*\s*(?:=(?!=)|\s(?:is|becomes|equals)\s)|"
        r"(?:increment|decrement|increase|decrease|add|subtract)\s)",
        re.I,
    )

    # Builders
    _DECLARATION_VALUE_RE = re.compile(
        r"^(?P<kw>set|create|make|declare|define|let|var|const|constant)\s+"
        r"(?:(?:a|an|the)\s+)?(?:new\s+)?(?P<mod>(?:variable|var|constant|const)\s+)?"
        r"(?:(?:called|named)\s+)?(?P<name>[A-Za-z_]\w*)"
        r"(?:\s+as\s+\w+\s+with\s+|\s*:?=\s*|\s+(?:equal\s+to|equals?|to|is|as|be)\s+)"
        r"(?P<value>.+)$",
        re.I,
    )
    _DECLARATION_BARE_RE = re.compile(
        r"^(?P<kw>create|declare|define|let|var)\s+(?:(?:a|an|the)\s+)?(?:new\s+)?"
        r"(?P<mod>(?:variable|var|constant|const)\s+)?(?:(?:called|named)\s+)?"
        r"(?P<name>[A-Za-z_]\w*)(?:\s+as\s+\w+)?$",
        re.I,
    )
    _INLINE_IF_RE = re.compile(r"^if\s+(.+?)\s+then\s+(.+)$", re.I)
    _WHILE_RE = re.compile(r"^(?:while|(?:loop|repeat)\s+while)\s+(.+)$", re.I)
    _UNTIL_RE = re.compile(r"^(?:loop|repeat)\s+until\s+(.+)$", re.I)
    _FOREVER_RE = re.compile(r"^(?:loop|repeat)\s+forever\s*:?$", re.I)
    _TIMES_RE = re.compile(
        r"^(?:repeat|loop)\s+(\d+|[A-Za-z_]\w*)\s+times?(?:\s+do)?\s*:?$", re.I
    )
    _FOR_EACH_RE = re.compile(
        r"^for\s+(?:(?:each|every)\s+)?([A-Za-z_]\w*)\s+in\s+(.+)$", re.I
    )
    _FOR_RANGE_RE = re.compile(
        r"^for\s+([A-Za-z_]\w*)\s+(?:from|=)\s+(.+?)\s+to\s+(.+?)(?:\s+step\s+(.+?))?"
        r"(?:\s+do)?\s*:?$",
        re.I,
    )
    _PRINT_VALUE_RE = re.compile(r"^(?:print|display|output|show|log)\b\s*(.*?)\s*;?$", re.I)
    _FUNCTION_HEADER_RE = re.compile(
        r"^(?:define\s+(?:a\s+)?)?(?:function|procedure|func|def)\s+(?:(?:called|named)\s+)?"
        r"(?P<name>[A-Za-z_]\w*)\s*(?:\((?P<params>.*)\)|\s(?:with|taking|that\s+takes)\s+"
        r"(?:(?:parameters?|arguments?|inputs?)\s+)?(?P<words>.+))?$",
        re.I,
    )
    _RETURNS_SUFFIX_RE = re.compile(r"\s+(?:returns?|->)\s*[\w\[\]<>]+\s*$", re.I)
    _RETURN_RE = re.compile(r"^return(?:\s+(.+))?$", re.I)
    _CALL_RE = re.compile(
        r"^call\s+([A-Za-z_][\w.]*)(?:\s*\((.*)\)|\s+with\s+(.+))?\s*;?$", re.I
    )
    _BARE_CALL_RE = re.compile(r"^[A-Za-z_][\w.]*\s*\(.*\)\s*;?$")
    _ASSIGN_VALUE_RE = re.compile(
        r"^([A-Za-z_]\w*)\s*(?:=(?!=)|\s(?:is|becomes|equals)\s)\s*(.+)$", re.I
    )
    _STEP_RE = re.compile(
        r"^(increment|decrement|increase|decrease)\s+([A-Za-z_]\w*)(?:\s+by\s+(.+))?$", re.I
    )
    _ADD_TO_RE = re.compile(r"^add\s+(.+?)\s+to\s+([A-Za-z_]\w*)$", re.I)
    _SUBTRACT_FROM_RE = re.compile(r"^subtract\s+(.+?)\s+from\s+([A-Za-z_]\w*)$", re.I)

    def __init__(self, options: ParseOptions | None = None):
        """Initialize the parser; it holds no per-call state"""
        self.options = options or ParseOptions()
        self._rules: tuple[tuple[str, re.Pattern[str], Callable], ...] = (
            ("declaration", self._DECLARATION_RE, self._parse_declaration),
            ("if", self._IF_RE, self._parse_if),
            ("loop", self._LOOP_RE, self._parse_loop),
            ("print", self._PRINT_RE, self._parse_print),
            ("comment", self._COMMENT_RE, self._parse_comment),
            ("function", self._FUNCTION_RE, self._parse_function),
            ("call", self._CALL_OR_RETURN_RE, self._parse_call_or_return),
            ("assignment", self._ASSIGNMENT_RE, self._parse_assignment),
        )

    def parse(self, input_text: str) -> list[Node]:
        """
        Main parsing method that converts input text to a statement list

        Args:
            input_text: Natural-language pseudocode text

        Returns:
            Ordered list of statement nodes (empty for blank input)
        """
        return self.get_parse_result(input_text).nodes

    def get_parse_result(self, input_text: str) -> ParseResult:
        """
        Parse and return the nodes together with structural warnings
        """
        if not input_text or not input_text.strip():
            return ParseResult(nodes=[])

        cursor = _Cursor(lines=input_text.splitlines())
        nodes: list[Node] = []
        while not cursor.done():
            if not cursor.lines[cursor.index].strip():
                cursor.index += 1
                continue
            nodes.extend(self._parse_statement(cursor))

        for warning in cursor.warnings:
            logger.debug("Parse warning: %s", warning)
        return ParseResult(nodes=nodes, warnings=cursor.warnings)

    # ------------------------------------------------------------------
    # Line classification
    # ------------------------------------------------------------------

    def _parse_statement(self, cursor: _Cursor) -> list[Node]:
        """Classify the line under the cursor and consume it (plus any body)"""
        raw = cursor.lines[cursor.index]
        line = raw.strip()
        opener = _Opener(line=line, indent=_indent_of(raw), line_number=cursor.line_number)
        cursor.index += 1

        for _name, keyword_re, builder in self._rules:
            if not keyword_re.match(line):
                continue
            nodes = builder(cursor, opener)
            if nodes is not None:
                return nodes

        return [Comment(line)]

    def _parse_block(
        self, cursor: _Cursor, block: _Block, opener: _Opener
    ) -> tuple[list[Node], str | None]:
        """
        Consume body lines until the block's terminator.

        Returns (body, reason) where reason is "end" or "branch" for an
        explicit terminator (left under the cursor, not consumed) or None when
        the body was closed by a dedent or by the end of input.
        """
        body: list[Node] = []
        saw_indented = False

        while not cursor.done():
            raw = cursor.lines[cursor.index]
            line = raw.strip()
            if not line:
                cursor.index += 1
                continue

            indent = _indent_of(raw)
            if self.options.use_indentation and indent < opener.indent:
                # belongs to an enclosing block, even if it is a terminator
                return body, None

            if block.end.fullmatch(line):
                return body, "end"
            if block.branch is not None and block.branch.fullmatch(line):
                return body, "branch"

            if indent <= opener.indent:
                if self.options.use_indentation:
                    return body, None
                if saw_indented:
                    cursor.warnings.append(
                        f"Line {cursor.line_number}: dedented line absorbed into the "
                        f"'{block.name}' block opened on line {opener.line_number}"
                    )
            else:
                saw_indented = True

            body.extend(self._parse_statement(cursor))

        if not self.options.use_indentation:
            cursor.warnings.append(
                f"Line {opener.line_number}: '{block.name}' block has no terminator "
                "before the end of input"
            )
        return body, None

    def _finish_block(self, cursor: _Cursor, block: _Block, opener: _Opener) -> list[Node]:
        body, reason = self._parse_block(cursor, block, opener)
        if reason == "end":
            cursor.index += 1
        return body

    # ------------------------------------------------------------------
    # Rule builders: return nodes, or None to let the next rule try
    # ------------------------------------------------------------------

    def _parse_declaration(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        line = opener.line
        if self._FUNCTION_RE.match(line):
            return None

        match = self._DECLARATION_VALUE_RE.match(line)
        if match and not self._is_type_only(line, match):
            return [
                VariableDeclaration(
                    name=match.group("name"),
                    value=parse_expression(match.group("value")),
                    is_constant=self._is_constant(match),
                )
            ]

        match = self._DECLARATION_BARE_RE.match(line)
        if match:
            return [VariableDeclaration(name=match.group("name"), is_constant=self._is_constant(match))]
        return None

    @staticmethod
    def _is_type_only(line: str, match: re.Match[str]) -> bool:
        """`declare x as number` names a type, not an initial value"""
        separator = line[match.end("name") : match.start("value")]
        return (
            re.fullmatch(r"\s+as\s+", separator, re.I) is not None
            and match.group("value").strip().lower() in _TYPE_WORDS
        )

    @staticmethod
    def _is_constant(match: re.Match[str]) -> bool:
        keyword = match.group("kw").lower()
        modifier = (match.group("mod") or "").strip().lower()
        return keyword in ("const", "constant") or modifier in ("const", "constant")

    def _parse_if(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        inline = self._INLINE_IF_RE.match(opener.line)
        if inline and not re.fullmatch(r"\s*:?\s*", inline.group(2)):
            body = self._parse_inline(inline.group(2), opener)
            return [IfStatement(parse_condition(inline.group(1)), tuple(body))]

        condition_text = _strip_block_suffix(opener.line[2:])
        if not condition_text:
            return None

        body, reason = self._parse_block(cursor, _IF_BLOCK, opener)
        nodes: list[Node] = [IfStatement(parse_condition(condition_text), tuple(body))]

        while reason == "branch":
            branch_line = cursor.lines[cursor.index].strip()
            branch_opener = _Opener(
                line=branch_line,
                indent=opener.indent,
                line_number=cursor.line_number,
            )
            cursor.index += 1
            else_if = re.match(r"^(?:else|otherwise)[,\s]+if\s+(.+)$", branch_line, re.I)
            if else_if:
                condition = parse_condition(_strip_block_suffix(else_if.group(1)))
                body, reason = self._parse_block(cursor, _IF_BLOCK, branch_opener)
                nodes.append(ElseIfStatement(condition, tuple(body)))
                continue

            rest = re.sub(r"^(?:else|otherwise)[,:]?\s*", "", branch_line, flags=re.I)
            first = self._parse_inline(rest, branch_opener) if rest.strip(" :") else []
            body, reason = self._parse_block(cursor, _ELSE_BLOCK, branch_opener)
            nodes.append(ElseStatement(tuple(first + body)))

        if reason == "end":
            cursor.index += 1
        return nodes

    def _parse_inline(self, text: str, opener: _Opener) -> list[Node]:
        """Parse the statement written on the same line as a block keyword"""
        sub = _Cursor(lines=[text.strip()], loop_vars=[])
        nodes = self._parse_statement(sub)
        if sub.warnings:
            logger.debug("Inline statement on line %d: %s", opener.line_number, sub.warnings)
        return nodes

    def _parse_loop(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        line = opener.line

        match = self._FOREVER_RE.match(line)
        if match:
            body = self._finish_block(cursor, _WHILE_BLOCK, opener)
            return [WhileLoop(Literal.of(True), tuple(body))]

        match = self._UNTIL_RE.match(line)
        if match:
            condition = UnaryExpression("!", parse_condition(_strip_block_suffix(match.group(1))))
            body = self._finish_block(cursor, _WHILE_BLOCK, opener)
            return [WhileLoop(condition, tuple(body))]

        match = self._TIMES_RE.match(line)
        if match:
            return [self._parse_repeat(cursor, opener, parse_value(match.group(1)))]

        match = self._WHILE_RE.match(line)
        if match:
            condition_text = _strip_block_suffix(match.group(1))
            if condition_text:
                body = self._finish_block(cursor, _WHILE_BLOCK, opener)
                return [WhileLoop(parse_condition(condition_text), tuple(body))]

        match = self._FOR_RANGE_RE.match(line)
        if match:
            return [self._parse_for_range(cursor, opener, match)]

        match = self._FOR_EACH_RE.match(line)
        if match:
            iterable = parse_value(_strip_block_suffix(match.group(2)))
            cursor.loop_vars.append(match.group(1))
            try:
                body = self._finish_block(cursor, _FOR_BLOCK, opener)
            finally:
                cursor.loop_vars.pop()
            return [ForEachLoop(match.group(1), iterable, tuple(body))]

        return None

    def _parse_repeat(self, cursor: _Cursor, opener: _Opener, count: Node) -> ForLoop:
        """`repeat N times` becomes a counting loop over a fresh induction variable"""
        name = next(
            (n for n in _INDUCTION_NAMES if n not in cursor.loop_vars),
            f"i{len(cursor.loop_vars)}",
        )
        cursor.loop_vars.append(name)
        try:
            body = self._finish_block(cursor, _REPEAT_BLOCK, opener)
        finally:
            cursor.loop_vars.pop()

        var = Identifier(name)
        return ForLoop(
            init=VariableDeclaration(name, Literal.of(0)),
            condition=BinaryExpression("<", var, count),
            increment=Assignment(name, BinaryExpression("+", var, Literal.of(1))),
            body=tuple(body),
        )

    def _parse_for_range(self, cursor: _Cursor, opener: _Opener, match: re.Match[str]) -> ForLoop:
        name = match.group(1)
        start = parse_value(match.group(2))
        stop = parse_value(match.group(3))
        step = parse_value(match.group(4)) if match.group(4) else Literal.of(1)

        descending = (
            isinstance(step, UnaryExpression)
            or (isinstance(step, Literal) and isinstance(step.value, (int, float)) and step.value < 0)
        )
        cursor.loop_vars.append(name)
        try:
            body = self._finish_block(cursor, _FOR_BLOCK, opener)
        finally:
            cursor.loop_vars.pop()

        var = Identifier(name)
        return ForLoop(
            init=VariableDeclaration(name, start),
            condition=BinaryExpression(">=" if descending else "<=", var, stop),
            increment=Assignment(name, BinaryExpression("+", var, step)),
            body=tuple(body),
        )

    def _parse_print(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        match = self._PRINT_VALUE_RE.match(opener.line)
        if not match:
            return None
        value = match.group(1)
        if is_wrapped(value, "("):
            value = value[1:-1]
        if not value.strip():
            return None
        return [PrintStatement(parse_expression(value))]

    def _parse_comment(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        return [Comment(re.sub(r"^(//|#)\s*", "", opener.line))]

    def _parse_function(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        header = self._RETURNS_SUFFIX_RE.sub("", opener.line.rstrip(" :{"))
        match = self._FUNCTION_HEADER_RE.match(header)
        if not match:
            return None

        if match.group("params") is not None:
            parameters = split_top_level(match.group("params"))
        elif match.group("words"):
            parameters = [p for p in re.split(r"\s*,\s*|\s+and\s+", match.group("words")) if p]
        else:
            parameters = []
        # "a: int" style annotations keep only the name
        names = tuple(re.split(r"[\s:=]", p.strip(), maxsplit=1)[0] for p in parameters)

        body = self._finish_block(cursor, _FUNCTION_BLOCK, opener)
        return [FunctionDeclaration(match.group("name"), names, tuple(body))]

    def _parse_call_or_return(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        line = opener.line

        match = self._RETURN_RE.match(line)
        if match:
            value = match.group(1)
            return [ReturnStatement(parse_expression(value) if value and value.strip() else None)]

        match = self._CALL_RE.match(line)
        if match:
            raw_args = match.group(2) if match.group(2) is not None else match.group(3) or ""
            if match.group(3):
                raw_args = re.sub(r"\s+and\s+", ", ", raw_args)
            arguments = tuple(parse_expression(a) for a in split_top_level(raw_args))
            return [FunctionCall(match.group(1), arguments)]

        if self._BARE_CALL_RE.match(line):
            node = parse_value(line.rstrip(";").strip())
            if isinstance(node, FunctionCall):
                return [node]
        return None

    def _parse_assignment(self, cursor: _Cursor, opener: _Opener) -> list[Node] | None:
        line = opener.line.rstrip(";").strip()

        match = self._STEP_RE.match(line)
        if match:
            verb, name, amount = match.groups()
            operator = "+" if verb.lower() in ("increment", "increase") else "-"
            delta = parse_value(amount) if amount else Literal.of(1)
            return [Assignment(name, BinaryExpression(operator, Identifier(name), delta))]

        match = self._ADD_TO_RE.match(line)
        if match:
            amount, name = match.groups()
            return [Assignment(name, BinaryExpression("+", Identifier(name), parse_value(amount)))]

        match = self._SUBTRACT_FROM_RE.match(line)
        if match:
            amount, name = match.groups()
            return [Assignment(name, BinaryExpression("-", Identifier(name), parse_value(amount)))]

        match = self._ASSIGN_VALUE_RE.match(line)
        if match:
            return [Assignment(match.group(1), parse_expression(match.group(2)))]
        return None


def parse_natural_language(text: str, options: ParseOptions | None = None) -> list[Node]:
    """Convenience wrapper: parse text with a fresh parser"""
    return NaturalLanguageParser(options).parse(text)
