"""
Python emitter

Colon blocks with `pass` for empty bodies; counting loops become
`for ... in range(...)`.
"""

from collections.abc import Sequence

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
from .base import BaseEmitter, CountingLoop, counting_loop
from .registry import register_emitter

OPERATORS = {"&&": "and", "||": "or"}


@register_emitter(TargetLanguage.PYTHON)
class PythonEmitter(BaseEmitter):
    comment_prefix = "#"
    chain_closer = None
    cuddle_else = False

    def suite(self, header: str, body: Sequence[Node], depth: int) -> list[str]:
        """`header:` followed by an indented body, `pass` when it is empty"""
        lines = self.emit_block(body, depth + 1)
        if not lines:
            lines = [self.line(depth + 1, "pass")]
        return [self.line(depth, f"{header}:"), *lines]

    def emit_variable_declaration(self, node: VariableDeclaration, depth: int) -> list[str]:
        value = "None" if node.value is None else self.expr(node.value)
        return [self.line(depth, f"{node.name} = {value}")]

    def emit_assignment(self, node: Assignment, depth: int) -> list[str]:
        return [self.line(depth, f"{node.target} = {self.expr(node.value)}")]

    def emit_if(self, node: IfStatement, depth: int) -> list[str]:
        return self.suite(f"if {self.expr(node.condition)}", node.body, depth)

    def emit_else_if(self, node: ElseIfStatement, depth: int) -> list[str]:
        return self.suite(f"elif {self.expr(node.condition)}", node.body, depth)

    def emit_else(self, node: ElseStatement, depth: int) -> list[str]:
        return self.suite("else", node.body, depth)

    def emit_while(self, node: WhileLoop, depth: int) -> list[str]:
        return self.suite(f"while {self.expr(node.condition)}", node.body, depth)

    def emit_for(self, node: ForLoop, depth: int) -> list[str]:
        loop = counting_loop(node)
        if loop is not None and loop.step_value not in (None, 0):
            return self.suite(f"for {loop.variable} in {self._range(loop)}", node.body, depth)

        return [
            *self.emit_statement(node.init, depth),
            *self.suite(
                f"while {self.expr(node.condition)}", (*node.body, node.increment), depth
            ),
        ]

    def _range(self, loop: CountingLoop) -> str:
        stop = self.expr(loop.stop)
        if loop.inclusive:
            # range() excludes its stop value
            delta = 1 if loop.operator == "<=" else -1
            if isinstance(loop.stop, Literal) and loop.stop.data_kind is DataKind.NUMBER:
                stop = self.number(loop.stop.value + delta)
            else:
                stop = f"{stop} {'+' if delta > 0 else '-'} 1"

        start = self.expr(loop.start)
        if loop.step_value == 1:
            if start == "0":
                return f"range({stop})"
            return f"range({start}, {stop})"
        return f"range({start}, {stop}, {self.expr(loop.step)})"

    def emit_for_each(self, node: ForEachLoop, depth: int) -> list[str]:
        return self.suite(f"for {node.variable} in {self.expr(node.iterable)}", node.body, depth)

    def emit_function(self, node: FunctionDeclaration, depth: int) -> list[str]:
        return self.suite(f"def {node.name}({', '.join(node.parameters)})", node.body, depth)

    def emit_call(self, node: FunctionCall, depth: int) -> list[str]:
        return [self.line(depth, self.render_call(node))]

    def emit_return(self, node: ReturnStatement, depth: int) -> list[str]:
        if node.value is None:
            return [self.line(depth, "return")]
        return [self.line(depth, f"return {self.expr(node.value)}")]

    def emit_print(self, node: PrintStatement, depth: int) -> list[str]:
        return [self.line(depth, f"print({self.expr(node.value)})")]

    def emit_comment(self, node: Comment, depth: int) -> list[str]:
        return self.comment_lines(node, depth)

    def render_literal(self, node: Literal) -> str:
        if node.data_kind is DataKind.STRING:
            return self.quote(node.value, "'")
        if node.data_kind is DataKind.BOOLEAN:
            return "True" if node.value else "False"
        if node.data_kind is DataKind.NULL:
            return "None"
        return self.number(node.value)

    def render_binary(self, node: BinaryExpression) -> str:
        return self.binary(node, OPERATORS)

    def render_unary(self, node: UnaryExpression) -> str:
        if node.operator == "!":
            return f"not {self.unary_operand(node)}"
        return f"-{self.unary_operand(node)}"
