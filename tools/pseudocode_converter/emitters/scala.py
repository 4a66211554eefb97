"""
Scala emitter

The program body is wrapped in `object Main extends App`. Constants are
`val`, everything else `var`; literal initializers get a type annotation.
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

SCALA_TYPES = {
    DataKind.STRING.value: "String",
    DataKind.BOOLEAN.value: "Boolean",
    DataKind.NULL.value: "Any",
}


def scala_type(value: Node | None) -> str | None:
    if value is None:
        return "Any"
    if not isinstance(value, Literal):
        return None
    if value.data_kind is DataKind.NUMBER:
        return "Double" if isinstance(value.value, float) else "Int"
    return SCALA_TYPES[value.data_kind.value]


@register_emitter(TargetLanguage.SCALA)
class ScalaEmitter(BaseEmitter):
    comment_prefix = "//"

    def emit_program(self, tree: list[Node]) -> list[str]:
        return self.braced("object Main extends App", tree, 0)

    def emit_variable_declaration(self, node: VariableDeclaration, depth: int) -> list[str]:
        assignment = self.redeclared(node)
        if assignment is not None:
            return self.emit_assignment(assignment, depth)
        keyword = "val" if node.is_constant and node.value is not None else "var"
        type_name = scala_type(node.value)
        annotation = f": {type_name}" if type_name else ""
        value = "null" if node.value is None else self.expr(node.value)
        return [self.line(depth, f"{keyword} {node.name}{annotation} = {value}")]

    def emit_assignment(self, node: Assignment, depth: int) -> list[str]:
        return [self.line(depth, f"{node.target} = {self.expr(node.value)}")]

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
        if loop is None or loop.step_value is None or loop.step_value == 0:
            return [
                *self.emit_statement(node.init, depth),
                *self.braced(
                    f"while ({self.expr(node.condition)})", (*node.body, node.increment), depth
                ),
            ]

        keyword = "to" if loop.inclusive else "until"
        header = f"for ({loop.variable} <- {self.expr(loop.start)} {keyword} {self.expr(loop.stop)}"
        if loop.step_value != 1:
            header += f" by {self.expr(loop.step)}"
        return self.braced(f"{header})", node.body, depth)

    def emit_for_each(self, node: ForEachLoop, depth: int) -> list[str]:
        return self.braced(
            f"for ({node.variable} <- {self.expr(node.iterable)})", node.body, depth
        )

    def emit_function(self, node: FunctionDeclaration, depth: int) -> list[str]:
        params = ", ".join(f"{p}: Any" for p in node.parameters)
        returns = "Any" if has_value_return(node.body) else "Unit"
        with self.function_scope(node):
            return self.braced(f"def {node.name}({params}): {returns} =", node.body, depth)

    def emit_call(self, node: FunctionCall, depth: int) -> list[str]:
        return [self.line(depth, self.render_call(node))]

    def emit_return(self, node: ReturnStatement, depth: int) -> list[str]:
        if node.value is None:
            return [self.line(depth, "return")]
        return [self.line(depth, f"return {self.expr(node.value)}")]

    def emit_print(self, node: PrintStatement, depth: int) -> list[str]:
        return [self.line(depth, f"println({self.expr(node.value)})")]

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
