"""
Annotated JavaScript for learners

Produces the same statements as JavaScriptEmitter with explanatory comment
lines around them. Which lines appear is controlled by AnnotationOptions:

- show_metacognition: a short preamble, the intent of every step, and a note
  on the first line of every block body
- explain_every_line: the general syntax before each statement and the
  outcome after simple statements
- show_actor_pattern: calls split into actor and action, bindings into parts

Branch statements (else if / else) only get the body note, so the
`} else {` joining of the plain emitter is unchanged.
"""

from collections.abc import Callable
from dataclasses import dataclass, fields

from ..languages import TargetLanguage
from ..models import (
    Assignment,
    ElseIfStatement,
    ElseStatement,
    ForEachLoop,
    ForLoop,
    FunctionCall,
    FunctionDeclaration,
    IfStatement,
    Node,
    PrintStatement,
    ReturnStatement,
    VariableDeclaration,
    WhileLoop,
)
from .base import AnnotationOptions, GenerateOptions
from .javascript import JavaScriptEmitter
from .registry import register_annotated_emitter

PREAMBLE = (
    "// === HOW THIS CODE WAS BUILT ===",
    "// Each pseudocode line became one JavaScript statement.",
    "// The comments around a statement say what it does and why.",
)


@dataclass(frozen=True)
class Note:
    """Comment text for one statement kind; `{field}` refers to the node's fields"""

    step: str | None = None
    thinking: str | None = None
    syntax: str | None = None
    inside: str | None = None
    result: str | None = None


NOTES: dict[type, Note] = {
    VariableDeclaration: Note(
        step="Creating a variable",
        thinking="Keep a value under the name '{name}' for later use",
        syntax="let name = value;",
        result="'{name}' is ready to use",
    ),
    Assignment: Note(
        step="Changing a variable",
        thinking="'{target}' already exists, it gets a new value",
        syntax="name = newValue;",
        result="'{target}' now holds the new value",
    ),
    IfStatement: Note(
        step="Making a decision",
        thinking="Run the block only when the condition holds",
        syntax="if (condition) { ... }",
        inside="Runs only when the condition is true",
    ),
    ElseIfStatement: Note(inside="Runs when this is the first condition that is true"),
    ElseStatement: Note(inside="Runs when no condition above was true"),
    WhileLoop: Note(
        step="Repeating while a condition holds",
        thinking="Check the condition, run the block, check again",
        syntax="while (condition) { ... }",
        inside="Repeats until the condition is false",
    ),
    ForLoop: Note(
        step="Counting loop",
        thinking="Repeat the block a known number of times",
        syntax="for (start; condition; step) { ... }",
        inside="Runs once per count",
    ),
    ForEachLoop: Note(
        step="Visiting every item",
        thinking="Take each element in turn as '{variable}'",
        syntax="for (const item of items) { ... }",
        inside="Runs once for each item",
    ),
    FunctionDeclaration: Note(
        step="Creating a reusable action",
        thinking="'{name}' groups steps that can be run by name",
        syntax="function name(params) { ... }",
        inside="Runs each time '{name}' is called",
    ),
    FunctionCall: Note(
        step="Using an action",
        thinking="Run the steps of '{name}'",
        syntax="name(arguments);",
        result="'{name}' has done its job",
    ),
    ReturnStatement: Note(
        step="Handing back a result",
        thinking="Leave the function and give the value to the caller",
        syntax="return value;",
    ),
    PrintStatement: Note(
        step="Showing output",
        thinking="Display a value to the user",
        syntax="console.log(value);",
        result="The value appears in the console",
    ),
}


def _node_fields(node: Node) -> dict[str, object]:
    return {f.name: getattr(node, f.name) for f in fields(node)}


@register_annotated_emitter(TargetLanguage.JAVASCRIPT)
class AnnotatedJavaScriptEmitter(JavaScriptEmitter):
    """JavaScript with learner comments, selected through GenerateOptions.annotations"""

    def __init__(self, options: GenerateOptions | None = None):
        super().__init__(options)
        self.annotations = self.options.annotations or AnnotationOptions()
        self._statement_handlers = {
            kind: self._annotated(kind, handler) for kind, handler in self._statement_handlers.items()
        }

    def emit_program(self, tree: list[Node]) -> list[str]:
        lines = super().emit_program(tree)
        if not (self.annotations.show_metacognition and lines):
            return lines
        # keep 'use strict'; as the first statement
        head = 2 if self.options.strict_mode else 0
        return [*lines[:head], *PREAMBLE, "", *lines[head:]]

    def _annotated(
        self, kind: type, handler: Callable[[Node, int], list[str]]
    ) -> Callable[[Node, int], list[str]]:
        note = NOTES.get(kind)
        if note is None:
            return handler

        def emit(node: Node, depth: int) -> list[str]:
            lines = handler(node, depth)
            if not lines:
                return lines
            values = _node_fields(node)
            annotations = self.annotations

            before: list[str] = []
            if annotations.show_metacognition and note.step:
                before.append(self._note(depth, f"=== STEP: {note.step} ==="))
                before.append(self._note(depth, "THINKING: " + note.thinking.format(**values)))
            if annotations.explain_every_line and note.syntax:
                before.append(self._note(depth, f"SYNTAX: {note.syntax}"))
            if annotations.show_actor_pattern:
                before.extend(self._note(depth, text) for text in self._actor_lines(node))

            if annotations.show_metacognition and note.inside:
                inside = self._note(depth + 1, "INSIDE: " + note.inside.format(**values))
                lines = [lines[0], inside, *lines[1:]]

            after: list[str] = []
            if annotations.explain_every_line and note.result:
                after.append(self._note(depth, "RESULT: " + note.result.format(**values)))
            return [*before, *lines, *after]

        return emit

    def _note(self, depth: int, text: str) -> str:
        return self.line(depth, f"{self.comment_prefix} {text}")

    def _actor_lines(self, node: Node) -> list[str]:
        if isinstance(node, PrintStatement):
            return [
                "ACTOR: console (the object doing the work)",
                "ACTION: log (write a line to the console)",
                "INPUT: the value in parentheses",
            ]
        if isinstance(node, FunctionCall):
            actor, dot, action = node.name.rpartition(".")
            if not dot:
                return [f"ACTION: {node.name} (a plain function, no actor)"]
            return [f"ACTOR: {actor}", f"ACTION: {action}"]
        if isinstance(node, VariableDeclaration):
            keyword = "const" if node.is_constant and node.value is not None else "let"
            return [f"PARTS: '{keyword}' keyword, '{node.name}' name, '=' assignment, value to store"]
        if isinstance(node, Assignment):
            return [f"PARTS: '{node.target}' variable to change, '=' assignment, new value"]
        return []
