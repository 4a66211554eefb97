"""
Java emitter

Statements go into `public static void main` of a `Main` class; top-level
functions are hoisted to static methods of that class. Variable types are
inferred from literal initializers, with `var` for anything else.
"""

from ..languages import TargetLanguage
from ..models import (
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
    IfStatement,
    Literal,
    Node,
    PrintStatement,
    ReturnStatement,
    UnaryExpression,
    VariableDeclaration,
    WhileLoop,
)
from .base import BaseEmitter, counting_loop, has_value_return
from .registry import register_emitter

_COMPARISON_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">=", "&&", "||"})


def java_type(value: Node | None) -> str:
    """Static type of an initializer; `var` when it is not obvious"""
    if isinstance(value, Literal):
        if value.data_kind is DataKind.STRING:
            return "String"
        if value.data_kind is DataKind.BOOLEAN:
            return "boolean"
        if value.data_kind is DataKind.NUMBER:
            return "double" if isinstance(value.value, float) else "int"
        return "Object"
    if isinstance(value, BinaryExpression) and value.operator in _COMPARISON_OPERATORS:
        return "boolean"
    if isinstance(value, UnaryExpression) and value.operator == "!":
        return "boolean"
    if value is None:
        return "Object"
    return "var"


@register_emitter(TargetLanguage.JAVA)
class JavaEmitter(BaseEmitter):
    comment_prefix = "//"

    def emit_program(self, tree: list[Node]) -> list[str]:
        functions = [node for node in tree if isinstance(node, FunctionDeclaration)]
        statements = [node for node in tree if not isinstance(node, FunctionDeclaration)]

        lines = [
            "public class Main {",
            *self.braced("public static void main(String[] args)", statements, 1),
        ]
        for function in functions:
            lines.append("")
            lines.extend(self._method(function, 1))
        lines.append("}")
        return lines

    def _method(self, node: FunctionDeclaration, depth: int) -> list[str]:
        returns = "Object" if has_value_return(node.body) else "void"
        params = ", ".join(f"Object {p}" for p in node.parameters)
        with self.function_scope(node):
            return self.braced(f"public static {returns} {node.name}({params})", node.body, depth)

    def declaration(self, node: VariableDeclaration) -> str:
        type_name = java_type(node.value)
        prefix = "final " if node.is_constant else ""
        if node.value is None:
            return f"{prefix}{type_name} {node.name}"
        return f"{prefix}{type_name} {node.name} = {self.expr(node.value)}"

    def emit_variable_declaration(self, node: VariableDeclaration, depth: int) -> list[str]:
        assignment = self.redeclared(node)
        if assignment is not None:
            return self.emit_assignment(assignment, depth)
        return [self.line(depth, f"{self.declaration(node)};")]

    def emit_assignment(self, node: Assignment, depth: int) -> list[str]:
        return [self.line(depth, f"{node.target} = {self.expr(node.value)};")]

    def emit_if(self, node: IfStatement, depth: int) -> list[str]:
        return self.braced(f"if ({self.expr(node.condition)})", node.body, depth)

    def emit_else_if(self, node: ElseIfStatement, depth: int) -> list[str]:
        return self.braced(f"else if ({self.expr(node.condition)})", node.body, depth)

    def emit_else(self, node: ElseStatement, depth: int) -> list[str]:
        return self.braced("else", node.body, depth)

    def emit_while(self, node: WhileLoop, depth: int) -> list[str]:
        return self.braced(f"while ({self.expr(node.condition)})", node.body, depth)

    def emit_for(self, node: ForLoop, depth: int) -> list[str]:
        loop = counting_loop(node)
        if loop is None:
            return [
                *self.emit_statement(node.init, depth),
                *self.braced(
                    f"while ({self.expr(node.condition)})", (*node.body, node.increment), depth
                ),
            ]

        start = self.expr(loop.start)
        type_name = java_type(loop.start)
        init = f"{type_name} {loop.variable} = {start}"
        if isinstance(node.init, Assignment):
            init = f"{loop.variable} = {start}"

        if loop.step_value == 1:
            update = f"{loop.variable}++"
        elif loop.step_value == -1:
            update = f"{loop.variable}--"
        else:
            update = f"{loop.variable} += {self.expr(loop.step)}"
        header = f"for ({init}; {self.expr(node.condition)}; {update})"
        return self.braced(header, node.body, depth)

    def emit_for_each(self, node: ForEachLoop, depth: int) -> list[str]:
        return self.braced(
            f"for (var {node.variable} : {self.expr(node.iterable)})", node.body, depth
        )

    def emit_function(self, node: FunctionDeclaration, depth: int) -> list[str]:
        # Java has no local functions; only top-level ones become methods
        return [self.placeholder(node, depth)]

    def emit_call(self, node: FunctionCall, depth: int) -> list[str]:
        return [self.line(depth, f"{self.render_call(node)};")]

    def emit_return(self, node: ReturnStatement, depth: int) -> list[str]:
        if node.value is None:
            return [self.line(depth, "return;")]
        return [self.line(depth, f"return {self.expr(node.value)};")]

    def emit_print(self, node: PrintStatement, depth: int) -> list[str]:
        return [self.line(depth, f"System.out.println({self.expr(node.value)});")]

    def emit_comment(self, node: Comment, depth: int) -> list[str]:
        return self.comment_lines(node, depth)

    def render_literal(self, node: Literal) -> str:
        if node.data_kind is DataKind.STRING:
            return self.quote(node.value)
        if node.data_kind is DataKind.BOOLEAN:
            return "true" if node.value else "false"
        if node.data_kind is DataKind.NULL:
            return "null"
        return self.number(node.value)

    def render_binary(self, node: BinaryExpression) -> str:
        return self.binary(node)

    def render_unary(self, node: UnaryExpression) -> str:
        return f"{node.operator}{self.unary_operand(node)}"
