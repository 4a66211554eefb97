"""
Data models for the Pseudocode Converter

The canonical tree ("pseudocode AST") shared by the parser and every emitter.
Nodes are frozen dataclasses: built once by the parser, read by one emitter,
compared by value.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class DataKind(Enum):
    """
    Runtime kind of a literal value
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


BINARY_OPERATORS = frozenset(
    {"+", "-", "*", "/", "%", "==", "!=", "<", ">", "<=", ">=", "&&", "||"}
)
UNARY_OPERATORS = frozenset({"!", "-"})


def _as_node_tuple(owner: "Node", name: str, items: Sequence["Node"]) -> None:
    """Freeze a body/argument sequence into a tuple of nodes."""
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise ValueError(f"{owner.kind}.{name} must be a sequence of nodes")
    frozen = tuple(items)
    for item in frozen:
        if not isinstance(item, Node):
            raise ValueError(
                f"{owner.kind}.{name} contains {type(item).__name__}, which is not a tree node"
            )
    object.__setattr__(owner, name, frozen)


def _check_node(owner: "Node", name: str, value: Any, optional: bool = False) -> None:
    if value is None and optional:
        return
    if not isinstance(value, Node):
        raise ValueError(f"{owner.kind}.{name} must be a tree node, got {type(value).__name__}")


@dataclass(frozen=True)
class Node:
    """Base class of every tree node"""

    @property
    def kind(self) -> str:
        return type(self).__name__


class Statement(Node):
    """Marker base for nodes that occupy a line of their own"""


class Expression(Node):
    """Marker base for nodes rendered inline"""


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal(Expression):
    value: str | int | float | bool | None
    data_kind: DataKind

    def __post_init__(self):
        expected = {
            DataKind.STRING: lambda v: isinstance(v, str),
            DataKind.NUMBER: lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
            DataKind.BOOLEAN: lambda v: isinstance(v, bool),
            DataKind.NULL: lambda v: v is None,
        }
        if not isinstance(self.data_kind, DataKind):
            raise ValueError(f"Unknown literal data kind: {self.data_kind!r}")
        if not expected[self.data_kind](self.value):
            raise ValueError(
                f"Literal value {self.value!r} does not match data kind {self.data_kind.value}"
            )

    @classmethod
    def of(cls, value: str | int | float | bool | None) -> "Literal":
        """Build a literal, inferring the data kind from the Python value"""
        if value is None:
            return cls(None, DataKind.NULL)
        if isinstance(value, bool):
            return cls(value, DataKind.BOOLEAN)
        if isinstance(value, (int, float)):
            return cls(value, DataKind.NUMBER)
        return cls(str(value), DataKind.STRING)


@dataclass(frozen=True)
class Identifier(Expression):
    name: str


@dataclass(frozen=True)
class BinaryExpression(Expression):
    operator: str
    left: Node
    right: Node

    def __post_init__(self):
        if self.operator not in BINARY_OPERATORS:
            raise ValueError(f"Unknown binary operator: {self.operator!r}")
        _check_node(self, "left", self.left)
        _check_node(self, "right", self.right)


@dataclass(frozen=True)
class UnaryExpression(Expression):
    operator: str
    operand: Node

    def __post_init__(self):
        if self.operator not in UNARY_OPERATORS:
            raise ValueError(f"Unknown unary operator: {self.operator!r}")
        _check_node(self, "operand", self.operand)


@dataclass(frozen=True)
class ArrayAccess(Expression):
    array: str
    index: Node

    def __post_init__(self):
        _check_node(self, "index", self.index)


@dataclass(frozen=True)
class PropertyAccess(Expression):
    object: str
    property: str


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VariableDeclaration(Statement):
    name: str
    value: Node | None = None
    is_constant: bool = False

    def __post_init__(self):
        _check_node(self, "value", self.value, optional=True)

    @property
    def data_type(self) -> str:
        """Advisory type of the initializer: a DataKind value or "any"."""
        if isinstance(self.value, Literal):
            return self.value.data_kind.value
        return "any"


@dataclass(frozen=True)
class Assignment(Statement):
    target: str
    value: Node

    def __post_init__(self):
        _check_node(self, "value", self.value)


@dataclass(frozen=True)
class IfStatement(Statement):
    condition: Node
    body: tuple[Node, ...] = ()

    def __post_init__(self):
        _check_node(self, "condition", self.condition)
        _as_node_tuple(self, "body", self.body)


@dataclass(frozen=True)
class ElseIfStatement(Statement):
    condition: Node
    body: tuple[Node, ...] = ()

    def __post_init__(self):
        _check_node(self, "condition", self.condition)
        _as_node_tuple(self, "body", self.body)


@dataclass(frozen=True)
class ElseStatement(Statement):
    body: tuple[Node, ...] = ()

    def __post_init__(self):
        _as_node_tuple(self, "body", self.body)


@dataclass(frozen=True)
class WhileLoop(Statement):
    condition: Node
    body: tuple[Node, ...] = ()

    def __post_init__(self):
        _check_node(self, "condition", self.condition)
        _as_node_tuple(self, "body", self.body)


@dataclass(frozen=True)
class ForLoop(Statement):
    init: Node
    condition: Node
    increment: Node
    body: tuple[Node, ...] = ()

    def __post_init__(self):
        _check_node(self, "init", self.init)
        _check_node(self, "condition", self.condition)
        _check_node(self, "increment", self.increment)
        _as_node_tuple(self, "body", self.body)


@dataclass(frozen=True)
class ForEachLoop(Statement):
    variable: str
    iterable: Node
    body: tuple[Node, ...] = ()

    def __post_init__(self):
        _check_node(self, "iterable", self.iterable)
        _as_node_tuple(self, "body", self.body)


@dataclass(frozen=True)
class FunctionDeclaration(Statement):
    name: str
    parameters: tuple[str, ...] = ()
    body: tuple[Node, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "parameters", tuple(self.parameters))
        _as_node_tuple(self, "body", self.body)


@dataclass(frozen=True)
class FunctionCall(Statement, Expression):
    """A call; valid both as a statement and inside an expression"""

    name: str
    arguments: tuple[Node, ...] = ()

    def __post_init__(self):
        _as_node_tuple(self, "arguments", self.arguments)


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Node | None = None

    def __post_init__(self):
        _check_node(self, "value", self.value, optional=True)


@dataclass(frozen=True)
class PrintStatement(Statement):
    value: Node

    def __post_init__(self):
        _check_node(self, "value", self.value)


@dataclass(frozen=True)
class Comment(Statement):
    text: str = field(default="")


# The closed set of node kinds every emitter must handle
STATEMENT_KINDS: tuple[type[Node], ...] = (
    VariableDeclaration,
    Assignment,
    IfStatement,
    ElseIfStatement,
    ElseStatement,
    WhileLoop,
    ForLoop,
    ForEachLoop,
    FunctionDeclaration,
    FunctionCall,
    ReturnStatement,
    PrintStatement,
    Comment,
)
EXPRESSION_KINDS: tuple[type[Node], ...] = (
    BinaryExpression,
    UnaryExpression,
    Literal,
    Identifier,
    ArrayAccess,
    PropertyAccess,
    FunctionCall,
)
NODE_KINDS: tuple[type[Node], ...] = tuple(dict.fromkeys(STATEMENT_KINDS + EXPRESSION_KINDS))


def child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of a node in field order"""
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, tuple):
            yield from (item for item in value if isinstance(item, Node))


def iter_nodes(tree: Sequence[Node]) -> Iterator[Node]:
    """Depth-first, pre-order walk over a statement sequence"""
    for node in tree:
        yield node
        yield from iter_nodes(list(child_nodes(node)))


def node_to_dict(node: Node) -> dict[str, Any]:
    """JSON-friendly view of a node (and its subtree)"""
    data: dict[str, Any] = {"type": node.kind}
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Node):
            data[f.name] = node_to_dict(value)
        elif isinstance(value, DataKind):
            data[f.name] = value.value
        elif isinstance(value, tuple):
            data[f.name] = [node_to_dict(v) if isinstance(v, Node) else v for v in value]
        else:
            data[f.name] = value
    return data


def tree_to_dicts(tree: Sequence[Node]) -> list[dict[str, Any]]:
    return [node_to_dict(node) for node in tree]
