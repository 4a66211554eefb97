"""
Canonical pseudocode emitter

Upper-case keywords, blocks closed with END keywords. The output is itself
valid input for the natural-language parser.
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
    PrintStatement,
    ReturnStatement,
    UnaryExpression,
    VariableDeclaration,
    WhileLoop,
)
from .base import BaseEmitter, counting_loop
from .registry import register_emitter

OPERATORS = {"%": "MOD", "&&": "AND", "||": "OR"}


@register_emitter(TargetLanguage.PSEUDOCODE)
class PseudocodeEmitter(BaseEmitter):
    comment_prefix = "//"
    chain_closer = "END IF"
    cuddle_else = False

    def _keyword_block(self, header: str, body, closer: str, depth: int) -> list[str]:
        return [
            self.line(depth, header),
            *self.emit_block(body, depth + 1),
            self.line(depth, closer),
        ]

    def emit_variable_declaration(self, node: VariableDeclaration, depth: int) -> list[str]:
        if node.value is None:
            return [self.line(depth, f"DECLARE {node.name}")]
        if node.is_constant:
            return [self.line(depth, f"CONSTANT {node.name} IS {self.expr(node.value)}")]
        return [self.line(depth, f"SET {node.name} TO {self.expr(node.value)}")]

    def emit_assignment(self, node: Assignment, depth: int) -> list[str]:
        return [self.line(depth, f"SET {node.target} TO {self.expr(node.value)}")]

    def emit_if(self, node: IfStatement, depth: int) -> list[str]:
        return self._keyword_block(f"IF {self.expr(node.condition)} THEN", node.body, "END IF", depth)

    def emit_else_if(self, node: ElseIfStatement, depth: int) -> list[str]:
        return self._keyword_block(
            f"ELSE IF {self.expr(node.condition)} THEN", node.body, "END IF", depth
        )

    def emit_else(self, node: ElseStatement, depth: int) -> list[str]:
        return self._keyword_block("ELSE", node.body, "END IF", depth)

    def emit_while(self, node: WhileLoop, depth: int) -> list[str]:
        return self._keyword_block(
            f"WHILE {self.expr(node.condition)} DO", node.body, "END WHILE", depth
        )

    def emit_for(self, node: ForLoop, depth: int) -> list[str]:
        loop = counting_loop(node)
        if loop is None:
            return [
                *self.emit_statement(node.init, depth),
                *self._keyword_block(
                    f"WHILE {self.expr(node.condition)} DO",
                    (*node.body, node.increment),
                    "END WHILE",
                    depth,
                ),
            ]

        stop = self.expr(loop.stop)
        if not loop.inclusive:
            # FROM ... TO is inclusive
            delta = -1 if loop.operator == "<" else 1
            if isinstance(loop.stop, Literal) and loop.stop.data_kind is DataKind.NUMBER:
                stop = self.number(loop.stop.value + delta)
            else:
                stop = f"{stop} {'-' if delta < 0 else '+'} 1"

        header = f"FOR {loop.variable} FROM {self.expr(loop.start)} TO {stop}"
        if loop.step_value != 1:
            header += f" STEP {self.expr(loop.step)}"
        return self._keyword_block(f"{header} DO", node.body, "END FOR", depth)

    def emit_for_each(self, node: ForEachLoop, depth: int) -> list[str]:
        return self._keyword_block(
            f"FOR EACH {node.variable} IN {self.expr(node.iterable)} DO",
            node.body,
            "END FOR EACH",
            depth,
        )

    def emit_function(self, node: FunctionDeclaration, depth: int) -> list[str]:
        return self._keyword_block(
            f"FUNCTION {node.name}({', '.join(node.parameters)})",
            node.body,
            "END FUNCTION",
            depth,
        )

    def emit_call(self, node: FunctionCall, depth: int) -> list[str]:
        return [self.line(depth, f"CALL {self.render_call(node)}")]

    def emit_return(self, node: ReturnStatement, depth: int) -> list[str]:
        if node.value is None:
            return [self.line(depth, "RETURN")]
        return [self.line(depth, f"RETURN {self.expr(node.value)}")]

    def emit_print(self, node: PrintStatement, depth: int) -> list[str]:
        return [self.line(depth, f"PRINT {self.expr(node.value)}")]

    def emit_comment(self, node: Comment, depth: int) -> list[str]:
        return self.comment_lines(node, depth)

    def render_literal(self, node: Literal) -> str:
        if node.data_kind is DataKind.STRING:
            return self.quote(node.value)
        if node.data_kind is DataKind.BOOLEAN:
            return "TRUE" if node.value else "FALSE"
        if node.data_kind is DataKind.NULL:
            return "NULL"
        return self.number(node.value)

    def render_binary(self, node: BinaryExpression) -> str:
        return self.binary(node, OPERATORS)

    def render_unary(self, node: UnaryExpression) -> str:
        if node.operator == "!":
            return f"NOT {self.unary_operand(node)}"
        return f"-{self.unary_operand(node)}"
