"""
JavaScript and TypeScript emitters

TypeScript is JavaScript plus advisory type annotations, so it only overrides
the binding and function headers.
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

OPERATORS = {"==": "===", "!=": "!=="}

TS_TYPES = {
    DataKind.STRING.value: "string",
    DataKind.NUMBER.value: "number",
    DataKind.BOOLEAN.value: "boolean",
}


@register_emitter(TargetLanguage.JAVASCRIPT)
class JavaScriptEmitter(BaseEmitter):
    comment_prefix = "//"

    def emit_program(self, tree: list[Node]) -> list[str]:
        lines = self.emit_block(tree, 0)
        if self.options.strict_mode and lines:
            return ["'use strict';", "", *lines]
        return lines

    def binding(self, node: VariableDeclaration) -> str:
        """`let x = v` / `const X = v` without the semicolon"""
        keyword = "const" if node.is_constant and node.value is not None else "let"
        if node.value is None:
            return f"{keyword} {node.name}"
        return f"{keyword} {node.name} = {self.expr(node.value)}"

    def function_header(self, node: FunctionDeclaration) -> str:
        return f"function {node.name}({', '.join(node.parameters)})"

    def emit_variable_declaration(self, node: VariableDeclaration, depth: int) -> list[str]:
        assignment = self.redeclared(node)
        if assignment is not None:
            return self.emit_assignment(assignment, depth)
        return [self.line(depth, f"{self.binding(node)};")]

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
        init = self._clause(node.init)
        update = self._update(node)
        header = f"for ({init}; {self.expr(node.condition)}; {update})"
        return self.braced(header, node.body, depth)

    def _clause(self, node: Node) -> str:
        if isinstance(node, VariableDeclaration):
            return self.binding(node)
        if isinstance(node, Assignment):
            return f"{node.target} = {self.expr(node.value)}"
        return self.expr(node)

    def _update(self, node: ForLoop) -> str:
        loop = counting_loop(node)
        if loop is None:
            return self._clause(node.increment)
        if loop.step_value == 1:
            return f"{loop.variable}++"
        if loop.step_value == -1:
            return f"{loop.variable}--"
        if loop.step_value is not None and loop.step_value < 0:
            return f"{loop.variable} -= {self.number(-loop.step_value)}"
        return f"{loop.variable} += {self.expr(loop.step)}"

    def emit_for_each(self, node: ForEachLoop, depth: int) -> list[str]:
        return self.braced(
            f"for (const {node.variable} of {self.expr(node.iterable)})", node.body, depth
        )

    def emit_function(self, node: FunctionDeclaration, depth: int) -> list[str]:
        with self.function_scope(node):
            return self.braced(self.function_header(node), node.body, depth)

    def emit_call(self, node: FunctionCall, depth: int) -> list[str]:
        return [self.line(depth, f"{self.render_call(node)};")]

    def emit_return(self, node: ReturnStatement, depth: int) -> list[str]:
        if node.value is None:
            return [self.line(depth, "return;")]
        return [self.line(depth, f"return {self.expr(node.value)};")]

    def emit_print(self, node: PrintStatement, depth: int) -> list[str]:
        return [self.line(depth, f"console.log({self.expr(node.value)});")]

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
        return self.binary(node, OPERATORS)

    def render_unary(self, node: UnaryExpression) -> str:
        return f"{node.operator}{self.unary_operand(node)}"


@register_emitter(TargetLanguage.TYPESCRIPT)
class TypeScriptEmitter(JavaScriptEmitter):
    """JavaScript with `: type` annotations on bindings and functions"""

    def binding(self, node: VariableDeclaration) -> str:
        keyword = "const" if node.is_constant and node.value is not None else "let"
        annotation = TS_TYPES.get(node.data_type, "any")
        if node.value is None:
            return f"{keyword} {node.name}: {annotation}"
        return f"{keyword} {node.name}: {annotation} = {self.expr(node.value)}"

    def function_header(self, node: FunctionDeclaration) -> str:
        params = ", ".join(f"{p}: any" for p in node.parameters)
        returns = "any" if has_value_return(node.body) else "void"
        return f"function {node.name}({params}): {returns}"
