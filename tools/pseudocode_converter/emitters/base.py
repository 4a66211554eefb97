"""
Base emitter interface for the Pseudocode Converter

Every target language is a subclass of BaseEmitter. The base class owns the
statement walker (depth-based indentation, else-chain joining, degrade to a
placeholder line) and declares one abstract method per node kind, so an
emitter that forgets a kind cannot be instantiated.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from ..exceptions import ConfigurationError
from ..languages import TargetLanguage
from ..models import (
    ArrayAccess,
    Assignment,
    BinaryExpression,
    Comment,
    DataKind,
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
    PropertyAccess,
    ReturnStatement,
    UnaryExpression,
    VariableDeclaration,
    WhileLoop,
    iter_nodes,
)

logger = logging.getLogger(__name__)

# Binding strength of the canonical binary operators (higher binds tighter)
PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 4,
    ">": 4,
    "<=": 4,
    ">=": 4,
    "+": 5,
    "-": 5,
    "*": 6,
    "/": 6,
    "%": 6,
}

VALID_INDENT_CHARS = (" ", "\t")


@dataclass(frozen=True)
class AnnotationOptions:
    """
    Learner annotations for targets that have an annotated emitter

    Attributes:
        show_metacognition: Explain the intent of each step and of each block body
        show_actor_pattern: Break calls and bindings into actor, action and parts
        explain_every_line: Add the general syntax before and the result after each line
    """

    show_metacognition: bool = False
    show_actor_pattern: bool = False
    explain_every_line: bool = False

    @property
    def enabled(self) -> bool:
        return self.show_metacognition or self.show_actor_pattern or self.explain_every_line


@dataclass(frozen=True)
class GenerateOptions:
    """
    Rendering options shared by all emitters

    Attributes:
        indent_size: Number of indent characters per nesting level
        indent_char: A single space or a tab
        include_comments: Emit Comment nodes (placeholders are always emitted)
        strict_mode: Prepend 'use strict'; for JavaScript/TypeScript output
        annotations: Learner comments; only targets with an annotated emitter use them
    """

    indent_size: int = 2
    indent_char: str = " "
    include_comments: bool = True
    strict_mode: bool = False
    annotations: AnnotationOptions | None = None

    def __post_init__(self):
        if isinstance(self.indent_size, bool) or not isinstance(self.indent_size, int):
            raise ConfigurationError(
                f"indent_size must be an integer, got {self.indent_size!r}",
                config_key="indent_size",
                config_value=self.indent_size,
            )
        if self.indent_size < 1:
            raise ConfigurationError(
                f"indent_size must be a positive integer, got {self.indent_size}",
                config_key="indent_size",
                config_value=self.indent_size,
            )
        if self.indent_char not in VALID_INDENT_CHARS:
            raise ConfigurationError(
                f"indent_char must be a space or a tab, got {self.indent_char!r}",
                config_key="indent_char",
                config_value=self.indent_char,
            )
        if self.annotations is not None and not isinstance(self.annotations, AnnotationOptions):
            raise ConfigurationError(
                f"annotations must be AnnotationOptions, got {type(self.annotations).__name__}",
                config_key="annotations",
                config_value=self.annotations,
            )

    @property
    def unit(self) -> str:
        """One level of indentation"""
        return self.indent_char * self.indent_size


@dataclass(frozen=True)
class CountingLoop:
    """A ForLoop recognized as `var` counting from `start` towards `stop`"""

    variable: str
    start: Node
    stop: Node
    operator: str
    step: Node

    @property
    def inclusive(self) -> bool:
        return self.operator in ("<=", ">=")

    @property
    def step_value(self) -> int | float | None:
        """The step as a number, when it is a numeric literal"""
        if isinstance(self.step, Literal) and isinstance(self.step.value, (int, float)):
            if not isinstance(self.step.value, bool):
                return self.step.value
        return None


def counting_loop(node: ForLoop) -> CountingLoop | None:
    """
    Recognize `v = a; v < b; v = v + s` (and the <=, >, >= variants).

    Returns None when the loop has any other shape.
    """
    init, condition, increment = node.init, node.condition, node.increment

    if isinstance(init, VariableDeclaration) and init.value is not None:
        name, start = init.name, init.value
    elif isinstance(init, Assignment):
        name, start = init.target, init.value
    else:
        return None

    if not (
        isinstance(condition, BinaryExpression)
        and condition.operator in ("<", "<=", ">", ">=")
        and condition.left == Identifier(name)
    ):
        return None

    if not (
        isinstance(increment, Assignment)
        and increment.target == name
        and isinstance(increment.value, BinaryExpression)
        and increment.value.operator in ("+", "-")
        and increment.value.left == Identifier(name)
    ):
        return None

    step = increment.value.right
    if increment.value.operator == "-":
        if isinstance(step, Literal) and step.data_kind is DataKind.NUMBER:
            step = Literal.of(-step.value)
        else:
            step = UnaryExpression("-", step)
    return CountingLoop(name, start, condition.right, condition.operator, step)


def has_value_return(body: Sequence[Node]) -> bool:
    """True when a body returns a value, not counting nested functions"""
    for node in body:
        if isinstance(node, ReturnStatement) and node.value is not None:
            return True
        if isinstance(node, FunctionDeclaration):
            continue
        nested = getattr(node, "body", None)
        if isinstance(nested, tuple) and has_value_return(nested):
            return True
    return False


def uses_print(tree: Sequence[Node]) -> bool:
    return any(isinstance(node, PrintStatement) for node in iter_nodes(tree))


class UnsupportedNode(Exception):
    """Raised by the expression renderer for a node it cannot render"""

    def __init__(self, node: object):
        super().__init__(type(node).__name__)
        self.node = node


class BaseEmitter(ABC):
    """
    Abstract base class for all target-language emitters

    Subclasses implement one `emit_*` method per statement kind (returning
    output lines at a given depth) and one `render_*` method per expression
    kind (returning inline text).
    """

    language: TargetLanguage
    comment_prefix = "//"
    # Line that closes an if/else-if body, and whether the next branch is
    # written on the same line ("} else {") or replaces it ("END IF" -> "ELSE")
    chain_closer: str | None = "}"
    cuddle_else = True

    def __init__(self, options: GenerateOptions | None = None):
        self.options = options or GenerateOptions()
        self._statement_handlers: dict[type, Callable[[Node, int], list[str]]] = {
            VariableDeclaration: self.emit_variable_declaration,
            Assignment: self.emit_assignment,
            IfStatement: self.emit_if,
            ElseIfStatement: self.emit_else_if,
            ElseStatement: self.emit_else,
            WhileLoop: self.emit_while,
            ForLoop: self.emit_for,
            ForEachLoop: self.emit_for_each,
            FunctionDeclaration: self.emit_function,
            FunctionCall: self.emit_call,
            ReturnStatement: self.emit_return,
            PrintStatement: self.emit_print,
            Comment: self.emit_comment,
        }
        self._expression_handlers: dict[type, Callable[[Node], str]] = {
            Literal: self.render_literal,
            Identifier: self.render_identifier,
            BinaryExpression: self.render_binary,
            UnaryExpression: self.render_unary,
            ArrayAccess: self.render_array_access,
            PropertyAccess: self.render_property_access,
            FunctionCall: self.render_call,
        }
        # names bound by each open block, innermost last; reset per function
        self._scopes: list[set[str]] = [set()]

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def emit(self, tree: Sequence[Node]) -> str:
        """Render a whole statement sequence to target text"""
        return "\n".join(self.emit_program(list(tree)))

    def emit_program(self, tree: list[Node]) -> list[str]:
        """Program-level wrapping; plain statement list by default"""
        return self.emit_block(tree, 0)

    def emit_block(self, body: Sequence[Node], depth: int) -> list[str]:
        """Render a statement sequence at a given depth"""
        out: list[str] = []
        self._scopes.append(set())
        try:
            for node in body:
                lines = self.emit_statement(node, depth)
                if isinstance(node, (ElseIfStatement, ElseStatement)) and lines:
                    self._join_branch(out, lines, depth)
                out.extend(lines)
        finally:
            self._scopes.pop()
        return out

    def emit_statement(self, node: Node, depth: int) -> list[str]:
        handler = self._statement_handlers.get(type(node))
        if handler is None:
            return [self.placeholder(node, depth)]
        try:
            return handler(node, depth)
        except UnsupportedNode as exc:
            logger.debug("Cannot render %s inside %s", exc, node.kind)
            return [self.placeholder(exc.node, depth)]

    def expr(self, node: Node | None) -> str:
        """Render an expression; raises UnsupportedNode for unknown kinds"""
        handler = self._expression_handlers.get(type(node))
        if handler is None:
            raise UnsupportedNode(node)
        return handler(node)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def indent(self, depth: int) -> str:
        return self.options.unit * depth

    def line(self, depth: int, text: str) -> str:
        return f"{self.indent(depth)}{text}"

    @contextmanager
    def function_scope(self, node: FunctionDeclaration) -> Iterator[None]:
        """Emit a function body with only its parameters bound"""
        saved = self._scopes
        self._scopes = [set(node.parameters)]
        try:
            yield
        finally:
            self._scopes = saved

    def redeclared(self, node: VariableDeclaration) -> Assignment | None:
        """
        Bind the declared name in the innermost block.

        Returns the assignment to emit instead when an enclosing block of the
        same function already binds the name, so block-scoped targets do not
        shadow or redeclare it.
        """
        if any(node.name in scope for scope in self._scopes):
            if node.value is not None:
                return Assignment(node.name, node.value)
            return None
        self._scopes[-1].add(node.name)
        return None

    def placeholder(self, node: object, depth: int) -> str:
        kind = node.kind if isinstance(node, Node) else type(node).__name__
        return self.line(depth, f"{self.comment_prefix} unsupported node: {kind}")

    def comment_lines(self, node: Comment, depth: int) -> list[str]:
        if not self.options.include_comments:
            return []
        text = f"{self.comment_prefix} {node.text}" if node.text else self.comment_prefix
        return [self.line(depth, text)]

    def braced(self, header: str, body: Sequence[Node], depth: int) -> list[str]:
        """`header {` + body one level deeper + `}`"""
        return [
            self.line(depth, f"{header} {{"),
            *self.emit_block(body, depth + 1),
            self.line(depth, "}"),
        ]

    def _join_branch(self, out: list[str], lines: list[str], depth: int) -> None:
        if self.chain_closer is None or not out:
            return
        if out[-1] != self.line(depth, self.chain_closer):
            return
        out.pop()
        if self.cuddle_else:
            lines[0] = self.line(depth, f"{self.chain_closer} {lines[0].lstrip()}")

    def binary(self, node: BinaryExpression, operators: dict[str, str] | None = None) -> str:
        """Infix rendering with parentheses only where precedence requires them"""
        spelled = (operators or {}).get(node.operator, node.operator)
        left = self._operand(node.left, node.operator, right_side=False)
        right = self._operand(node.right, node.operator, right_side=True)
        return f"{left} {spelled} {right}"

    def _operand(self, child: Node, parent_op: str, right_side: bool) -> str:
        text = self.expr(child)
        if isinstance(child, BinaryExpression):
            parent, own = PRECEDENCE[parent_op], PRECEDENCE[child.operator]
            if own < parent or (right_side and own == parent):
                return f"({text})"
        return text

    def unary_operand(self, node: UnaryExpression) -> str:
        text = self.expr(node.operand)
        if isinstance(node.operand, (BinaryExpression, UnaryExpression)):
            return f"({text})"
        return text

    def arguments(self, args: Sequence[Node]) -> str:
        return ", ".join(self.expr(arg) for arg in args)

    @staticmethod
    def quote(text: str, quote_char: str = '"') -> str:
        escaped = (
            text.replace("\\", "\\\\")
            .replace(quote_char, "\\" + quote_char)
            .replace("\n", "\\n")
            .replace("\t", "\\t")
        )
        return f"{quote_char}{escaped}{quote_char}"

    @staticmethod
    def number(value: int | float) -> str:
        return repr(value)

    def render_identifier(self, node: Identifier) -> str:
        return node.name

    def render_array_access(self, node: ArrayAccess) -> str:
        return f"{node.array}[{self.expr(node.index)}]"

    def render_property_access(self, node: PropertyAccess) -> str:
        return f"{node.object}.{node.property}"

    def render_call(self, node: FunctionCall) -> str:
        return f"{node.name}({self.arguments(node.arguments)})"

    # ------------------------------------------------------------------
    # Per-kind handlers
    # ------------------------------------------------------------------

    @abstractmethod
    def emit_variable_declaration(self, node: VariableDeclaration, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_assignment(self, node: Assignment, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_if(self, node: IfStatement, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_else_if(self, node: ElseIfStatement, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_else(self, node: ElseStatement, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_while(self, node: WhileLoop, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_for(self, node: ForLoop, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_for_each(self, node: ForEachLoop, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_function(self, node: FunctionDeclaration, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_call(self, node: FunctionCall, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_return(self, node: ReturnStatement, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_print(self, node: PrintStatement, depth: int) -> list[str]:
        pass

    @abstractmethod
    def emit_comment(self, node: Comment, depth: int) -> list[str]:
        pass

    @abstractmethod
    def render_literal(self, node: Literal) -> str:
        pass

    @abstractmethod
    def render_binary(self, node: BinaryExpression) -> str:
        pass

    @abstractmethod
    def render_unary(self, node: UnaryExpression) -> str:
        pass
