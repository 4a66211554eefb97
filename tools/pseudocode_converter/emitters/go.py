"""
Go emitter

`package main` with statements in `func main()`. Top-level functions are
hoisted above main, nested ones become closures. `import "fmt"` is only
written when something prints.
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
from .base import BaseEmitter, counting_loop, has_value_return, uses_print
from .registry import register_emitter

ANY = "interface{}"


@register_emitter(TargetLanguage.GO)
class GoEmitter(BaseEmitter):
    comment_prefix = "//"

    def emit_program(self, tree: list[Node]) -> list[str]:
        functions = [node for node in tree if isinstance(node, FunctionDeclaration)]
        statements = [node for node in tree if not isinstance(node, FunctionDeclaration)]

        lines = ["package main", ""]
        if uses_print(tree):
            lines.extend(['import "fmt"', ""])
        for function in functions:
            with self.function_scope(function):
                lines.extend(self.braced(self._signature(function, function.name), function.body, 0))
            lines.append("")
        lines.extend(self.braced("func main()", statements, 0))
        return lines

    def _signature(self, node: FunctionDeclaration, name: str = "") -> str:
        params = ", ".join(f"{p} {ANY}" for p in node.parameters)
        head = f"func {name}({params})" if name else f"func({params})"
        if has_value_return(node.body):
            return f"{head} {ANY}"
        return head

    def emit_variable_declaration(self, node: VariableDeclaration, depth: int) -> list[str]:
        assignment = self.redeclared(node)
        if assignment is not None:
            return self.emit_assignment(assignment, depth)
        if node.value is None:
            return [self.line(depth, f"var {node.name} {ANY}")]
        if node.value == Literal.of(None):
            return [self.line(depth, f"var {node.name} {ANY} = nil")]
        if node.is_constant and isinstance(node.value, Literal):
            return [self.line(depth, f"const {node.name} = {self.expr(node.value)}")]
        return [self.line(depth, f"{node.name} := {self.expr(node.value)}")]

    def emit_assignment(self, node: Assignment, depth: int) -> list[str]:
        return [self.line(depth, f"{node.target} = {self.expr(node.value)}")]

    def emit_if(self, node: IfStatement, depth: int) -> list[str]:
        return self.braced(f"if {self.expr(node.condition)}", node.body, depth)

    def emit_else_if(self, node: ElseIfStatement, depth: int) -> list[str]:
        return self.braced(f"else if {self.expr(node.condition)}", node.body, depth)

    def emit_else(self, node: ElseStatement, depth: int) -> list[str]:
        return self.braced("else", node.body, depth)

    def emit_while(self, node: WhileLoop, depth: int) -> list[str]:
        if node.condition == Literal.of(True):
            return self.braced("for", node.body, depth)
        return self.braced(f"for {self.expr(node.condition)}", node.body, depth)

    def emit_for(self, node: ForLoop, depth: int) -> list[str]:
        loop = counting_loop(node)
        if loop is None:
            return [
                *self.emit_statement(node.init, depth),
                *self.braced(
                    f"for {self.expr(node.condition)}", (*node.body, node.increment), depth
                ),
            ]

        if loop.step_value == 1:
            update = f"{loop.variable}++"
        elif loop.step_value == -1:
            update = f"{loop.variable}--"
        else:
            update = f"{loop.variable} += {self.expr(loop.step)}"
        init_op = ":=" if isinstance(node.init, VariableDeclaration) else "="
        header = (
            f"for {loop.variable} {init_op} {self.expr(loop.start)}; "
            f"{self.expr(node.condition)}; {update}"
        )
        return self.braced(header, node.body, depth)

    def emit_for_each(self, node: ForEachLoop, depth: int) -> list[str]:
        return self.braced(
            f"for _, {node.variable} := range {self.expr(node.iterable)}", node.body, depth
        )

    def emit_function(self, node: FunctionDeclaration, depth: int) -> list[str]:
        # nested function: a closure bound to a local name
        with self.function_scope(node):
            return self.braced(f"{node.name} := {self._signature(node)}", node.body, depth)

    def emit_call(self, node: FunctionCall, depth: int) -> list[str]:
        return [self.line(depth, self.render_call(node))]

    def emit_return(self, node: ReturnStatement, depth: int) -> list[str]:
        if node.value is None:
            return [self.line(depth, "return")]
        return [self.line(depth, f"return {self.expr(node.value)}")]

    def emit_print(self, node: PrintStatement, depth: int) -> list[str]:
        return [self.line(depth, f"fmt.Println({self.expr(node.value)})")]

    def emit_comment(self, node: Comment, depth: int) -> list[str]:
        return self.comment_lines(node, depth)

    def render_literal(self, node: Literal) -> str:
        if node.data_kind is DataKind.STRING:
            return self.quote(node.value)
        if node.data_kind is DataKind.BOOLEAN:
            return "true" if node.value else "false"
        if node.data_kind is DataKind.NULL:
            return "nil"
        return self.number(node.value)

    def render_binary(self, node: BinaryExpression) -> str:
        return self.binary(node)

    def render_unary(self, node: UnaryExpression) -> str:
        return f"{node.operator}{self.unary_operand(node)}"
