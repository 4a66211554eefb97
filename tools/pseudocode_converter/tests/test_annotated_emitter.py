import pytest

from pseudocode_converter.emitters import (
    AnnotatedJavaScriptEmitter,
    AnnotationOptions,
    EmitterRegistry,
    GenerateOptions,
    JavaScriptEmitter,
)
from pseudocode_converter.emitters.annotated import PREAMBLE
from pseudocode_converter.exceptions import ConfigurationError
from pseudocode_converter.models import (
    FunctionCall,
    Identifier,
    Literal,
    PrintStatement,
    VariableDeclaration,
)
from pseudocode_converter.parser import parse_natural_language
from pseudocode_converter.translator import generate


@pytest.fixture
def total_tree():
    return [VariableDeclaration("total", Literal.of(0)), PrintStatement(Identifier("total"))]


def _annotated(tree, **flags) -> str:
    return generate(tree, "javascript", GenerateOptions(annotations=AnnotationOptions(**flags)))


def test_metacognition_explains_each_step(total_tree):
    output = _annotated(total_tree, show_metacognition=True)

    expected = "\n".join(
        [
            *PREAMBLE,
            "",
            "// === STEP: Creating a variable ===",
            "// THINKING: Keep a value under the name 'total' for later use",
            "let total = 0;",
            "// === STEP: Showing output ===",
            "// THINKING: Display a value to the user",
            "console.log(total);",
        ]
    )
    if output != expected:
        raise AssertionError(output)


def test_explain_every_line_adds_syntax_and_result(total_tree):
    output = _annotated(total_tree, explain_every_line=True)

    expected = (
        "// SYNTAX: let name = value;\n"
        "let total = 0;\n"
        "// RESULT: 'total' is ready to use\n"
        "// SYNTAX: console.log(value);\n"
        "console.log(total);\n"
        "// RESULT: The value appears in the console"
    )
    if output != expected:
        raise AssertionError(output)


def test_actor_pattern_splits_calls():
    tree = [PrintStatement(Literal.of("hi")), FunctionCall("player.jump"), FunctionCall("reset")]

    output = _annotated(tree, show_actor_pattern=True)

    expected = (
        "// ACTOR: console (the object doing the work)\n"
        "// ACTION: log (write a line to the console)\n"
        "// INPUT: the value in parentheses\n"
        'console.log("hi");\n'
        "// ACTOR: player\n"
        "// ACTION: jump\n"
        "player.jump();\n"
        "// ACTION: reset (a plain function, no actor)\n"
        "reset();"
    )
    if output != expected:
        raise AssertionError(output)


def test_actor_pattern_names_binding_parts(total_tree):
    lines = _annotated(total_tree[:1], show_actor_pattern=True).split("\n")

    assert lines == [
        "// PARTS: 'let' keyword, 'total' name, '=' assignment, value to store",
        "let total = 0;",
    ]


def test_block_notes_keep_else_chain_joined(if_chain_text):
    tree = parse_natural_language(if_chain_text)

    lines = _annotated(tree, show_metacognition=True).split("\n")

    assert "} else if (x > 5) {" in lines
    assert "} else {" in lines
    after_else = lines[lines.index("} else {") + 1]
    if after_else != "  // INSIDE: Runs when no condition above was true":
        raise AssertionError(after_else)
    assert lines[lines.index("if (x > 10) {") + 1] == "  // INSIDE: Runs only when the condition is true"
    assert lines[-1] == "}"


def test_nested_notes_follow_depth(nested_tree):
    options = GenerateOptions(indent_size=4, annotations=AnnotationOptions(explain_every_line=True))

    lines = generate(nested_tree, "javascript", options).split("\n")

    print_line = lines.index('        console.log("hello");')
    assert lines[print_line - 1] == "        // SYNTAX: console.log(value);"
    assert lines[print_line + 1] == "        // RESULT: The value appears in the console"


def test_strict_mode_stays_first(total_tree):
    options = GenerateOptions(strict_mode=True, annotations=AnnotationOptions(show_metacognition=True))

    lines = generate(total_tree, "javascript", options).split("\n")

    assert lines[:2] == ["'use strict';", ""]
    assert lines[2] == PREAMBLE[0]


def test_empty_tree_has_no_preamble():
    assert _annotated([], show_metacognition=True) == ""


@pytest.mark.parametrize("target", ["python", "typescript", "go"])
def test_targets_without_annotated_emitter_ignore_annotations(total_tree, target):
    options = GenerateOptions(annotations=AnnotationOptions(show_metacognition=True, explain_every_line=True))

    assert generate(total_tree, target, options) == generate(total_tree, target)


def test_disabled_annotations_select_the_plain_emitter(total_tree):
    options = GenerateOptions(annotations=AnnotationOptions())

    emitter = EmitterRegistry.create_emitter("javascript", options)

    assert type(emitter) is JavaScriptEmitter
    assert generate(total_tree, "javascript", options) == "let total = 0;\nconsole.log(total);"


def test_enabled_annotations_select_the_annotated_emitter():
    options = GenerateOptions(annotations=AnnotationOptions(explain_every_line=True))

    assert isinstance(EmitterRegistry.create_emitter("JavaScript", options), AnnotatedJavaScriptEmitter)
    assert "javascript" in EmitterRegistry.list_targets()
    assert len(EmitterRegistry.list_targets()) == 7


def test_annotations_must_be_an_options_record():
    with pytest.raises(ConfigurationError) as excinfo:
        GenerateOptions(annotations={"show_metacognition": True})

    assert excinfo.value.context.metadata["config_key"] == "annotations"
