import pytest

from pseudocode_converter.emitters import (
    AnnotatedJavaScriptEmitter,
    EmitterRegistry,
    GenerateOptions,
    counting_loop,
    register_emitter,
)
from pseudocode_converter.emitters.python import PythonEmitter
from pseudocode_converter.exceptions import ConfigurationError, UnsupportedLanguageError
from pseudocode_converter.languages import TargetLanguage
from pseudocode_converter.models import (
    Assignment,
    BinaryExpression,
    Comment,
    EXPRESSION_KINDS,
    ForLoop,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    Literal,
    NODE_KINDS,
    PrintStatement,
    ReturnStatement,
    Statement,
    STATEMENT_KINDS,
    UnaryExpression,
    VariableDeclaration,
)
from pseudocode_converter.parser import parse_natural_language
from pseudocode_converter.translator import generate

ALL_TARGETS = [language.value for language in TargetLanguage]


class Mystery(Statement):
    """A node kind no emitter knows about"""


def _lead(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _emit(text: str, target: str, **options) -> str:
    return generate(parse_natural_language(text), target, GenerateOptions(**options))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def test_every_target_is_registered():
    if EmitterRegistry.list_targets() != sorted(ALL_TARGETS):
        raise AssertionError(EmitterRegistry.list_targets())


@pytest.mark.parametrize(
    "emitter_class",
    [EmitterRegistry.get_emitter_class(target) for target in ALL_TARGETS] + [AnnotatedJavaScriptEmitter],
    ids=lambda cls: cls.__name__,
)
def test_handlers_cover_every_node_kind(emitter_class):
    emitter = emitter_class()

    missing = [kind.__name__ for kind in STATEMENT_KINDS if kind not in emitter._statement_handlers]
    missing += [kind.__name__ for kind in EXPRESSION_KINDS if kind not in emitter._expression_handlers]
    if missing:
        raise AssertionError(f"{emitter_class.__name__} has no handler for {missing}")
    assert set(NODE_KINDS) == set(STATEMENT_KINDS) | set(EXPRESSION_KINDS)


def test_unknown_target_is_a_distinct_error():
    with pytest.raises(UnsupportedLanguageError) as excinfo:
        EmitterRegistry.get_emitter_class("cobol")

    error = excinfo.value
    assert error.role == "target"
    if "python" not in error.supported:
        raise AssertionError(error.supported)
    assert not EmitterRegistry.is_registered("cobol")
    assert EmitterRegistry.is_registered("PYTHON")


def test_registering_a_second_emitter_for_a_target_fails():
    with pytest.raises(ValueError):

        @register_emitter(TargetLanguage.PYTHON)
        class OtherPython(PythonEmitter):
            pass


# ---------------------------------------------------------------------------
# Per-target output
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "target, expected",
    [
        ("pseudocode", "SET x TO 5"),
        ("python", "x = 5"),
        ("javascript", "let x = 5;"),
        ("typescript", "let x: number = 5;"),
        (
            "java",
            "public class Main {\n"
            "  public static void main(String[] args) {\n"
            "    int x = 5;\n"
            "  }\n"
            "}",
        ),
        ("go", "package main\n\nfunc main() {\n  x := 5\n}"),
        ("scala", "object Main extends App {\n  var x: Int = 5\n}"),
    ],
)
def test_set_statement_per_target(target, expected):
    output = _emit("Set x to 5", target)

    if output != expected:
        raise AssertionError(f"{target}:\n{output}")


@pytest.mark.parametrize(
    "target, expected",
    [
        ("pseudocode", ""),
        ("python", ""),
        ("javascript", ""),
        ("typescript", ""),
        ("java", "public class Main {\n  public static void main(String[] args) {\n  }\n}"),
        ("go", "package main\n\nfunc main() {\n}"),
        ("scala", "object Main extends App {\n}"),
    ],
)
def test_empty_tree_gives_empty_or_shell_output(target, expected):
    assert generate([], target) == expected


def test_if_chain_python(if_chain_text):
    output = _emit(if_chain_text, "python")

    expected = (
        "if x > 10:\n"
        "  print('big')\n"
        "elif x > 5:\n"
        "  print('medium')\n"
        "else:\n"
        "  print('small')"
    )
    if output != expected:
        raise AssertionError(output)


def test_if_chain_javascript_cuddles_else(if_chain_text):
    output = _emit(if_chain_text, "javascript")

    expected = (
        "if (x > 10) {\n"
        '  console.log("big");\n'
        "} else if (x > 5) {\n"
        '  console.log("medium");\n'
        "} else {\n"
        '  console.log("small");\n'
        "}"
    )
    if output != expected:
        raise AssertionError(output)


def test_if_chain_pseudocode_has_single_end_if(if_chain_text):
    output = _emit(if_chain_text, "pseudocode")

    expected = (
        "IF x > 10 THEN\n"
        '  PRINT "big"\n'
        "ELSE IF x > 5 THEN\n"
        '  PRINT "medium"\n'
        "ELSE\n"
        '  PRINT "small"\n'
        "END IF"
    )
    if output != expected:
        raise AssertionError(output)


@pytest.mark.parametrize(
    "target, header",
    [
        ("pseudocode", "FOR i FROM 0 TO 2 DO"),
        ("python", "for i in range(3):"),
        ("javascript", "for (let i = 0; i < 3; i++) {"),
        ("typescript", "for (let i: number = 0; i < 3; i++) {"),
        ("java", "    for (int i = 0; i < 3; i++) {"),
        ("go", "  for i := 0; i < 3; i++ {"),
        ("scala", "  for (i <- 0 until 3) {"),
    ],
)
def test_repeat_times_counting_loop(target, header):
    output = _emit('repeat 3 times\n  print "hi"\nend repeat', target)

    if header not in output.split("\n"):
        raise AssertionError(f"{target}:\n{output}")


def test_inclusive_and_descending_ranges():
    up = _emit("for i from 1 to 10\n  print i\nend for", "python")
    down = _emit("for i from 10 to 1 step -1\n  print i\nend for", "python")

    assert up.split("\n")[0] == "for i in range(1, 11):"
    assert down.split("\n")[0] == "for i in range(10, 0, -1):"
    assert _emit("for i from 10 to 1 step -1\nend for", "javascript").startswith(
        "for (let i = 10; i >= 1; i--) {"
    )
    assert _emit("for i from 1 to 10\nend for", "scala").split("\n")[1] == "  for (i <- 1 to 10) {"


def test_irregular_for_loop_falls_back_to_while():
    loop = ForLoop(
        init=VariableDeclaration("i", Literal.of(1)),
        condition=BinaryExpression("<", Identifier("i"), Literal.of(100)),
        increment=Assignment("i", BinaryExpression("*", Identifier("i"), Literal.of(2))),
        body=(PrintStatement(Identifier("i")),),
    )
    assert counting_loop(loop) is None

    output = generate([loop], "python")
    expected = "i = 1\nwhile i < 100:\n  print(i)\n  i = i * 2"
    if output != expected:
        raise AssertionError(output)


def test_for_each_per_target():
    text = "for each item in items\n  print item\nend for"

    assert _emit(text, "python").split("\n")[0] == "for item in items:"
    assert _emit(text, "javascript").split("\n")[0] == "for (const item of items) {"
    assert "  for _, item := range items {" in _emit(text, "go").split("\n")
    assert "    for (var item : items) {" in _emit(text, "java").split("\n")
    assert _emit(text, "pseudocode").split("\n")[-1] == "END FOR EACH"


def test_functions_are_hoisted_in_java_and_go():
    text = "function add(a, b)\n  return a + b\nend function\nprint add(1, 2)"

    java = _emit(text, "java")
    expected_java = (
        "public class Main {\n"
        "  public static void main(String[] args) {\n"
        "    System.out.println(add(1, 2));\n"
        "  }\n"
        "\n"
        "  public static Object add(Object a, Object b) {\n"
        "    return a + b;\n"
        "  }\n"
        "}"
    )
    if java != expected_java:
        raise AssertionError(java)

    go = _emit(text, "go")
    expected_go = (
        "package main\n"
        "\n"
        'import "fmt"\n'
        "\n"
        "func add(a interface{}, b interface{}) interface{} {\n"
        "  return a + b\n"
        "}\n"
        "\n"
        "func main() {\n"
        "  fmt.Println(add(1, 2))\n"
        "}"
    )
    if go != expected_go:
        raise AssertionError(go)


def test_function_signatures():
    tree = [
        FunctionDeclaration("add", ("a", "b"), (ReturnStatement(Identifier("a")),)),
        FunctionDeclaration("greet", ("name",), (PrintStatement(Identifier("name")),)),
    ]

    ts = generate(tree, "typescript").split("\n")
    assert ts[0] == "function add(a: any, b: any): any {"
    assert "function greet(name: any): void {" in ts
    scala = generate(tree, "scala").split("\n")
    assert "  def add(a: Any, b: Any): Any = {" in scala
    assert "  def greet(name: Any): Unit = {" in scala
    assert generate(tree, "python").split("\n")[0] == "def add(a, b):"


def test_nested_functions_closure_in_go_placeholder_in_java():
    inner = FunctionDeclaration("helper", (), (ReturnStatement(),))
    tree = [IfStatement(Identifier("ok"), (inner,))]

    go = generate(tree, "go").split("\n")
    if "    helper := func() {" not in go:
        raise AssertionError(go)
    java = generate(tree, "java")
    if "// unsupported node: FunctionDeclaration" not in java:
        raise AssertionError(java)


def test_operator_spelling_tables():
    tree = parse_natural_language("if a and not b then print x % 2")

    assert generate(tree, "python").split("\n")[0] == "if a and not b:"
    assert generate(tree, "javascript").split("\n")[0] == "if (a && !b) {"
    pseudo = generate(tree, "pseudocode").split("\n")
    assert pseudo[0] == "IF a AND NOT b THEN"
    assert pseudo[1] == "  PRINT x MOD 2"


def test_javascript_uses_strict_equality():
    assert _emit("if x == 1 then print x", "javascript").startswith("if (x === 1) {")
    assert _emit("if x is not 1 then print x", "javascript").startswith("if (x !== 1) {")


def test_precedence_parentheses():
    node = BinaryExpression(
        "*", BinaryExpression("+", Identifier("a"), Identifier("b")), Identifier("c")
    )
    right = BinaryExpression(
        "-", Identifier("a"), BinaryExpression("-", Identifier("b"), Identifier("c"))
    )
    negated = UnaryExpression("!", BinaryExpression("&&", Identifier("a"), Identifier("b")))

    assert generate([PrintStatement(node)], "python") == "print((a + b) * c)"
    assert generate([PrintStatement(right)], "python") == "print(a - (b - c))"
    assert generate([PrintStatement(negated)], "javascript") == "console.log(!(a && b));"


def test_literal_spelling():
    tree = [
        PrintStatement(Literal.of(True)),
        PrintStatement(Literal.of(None)),
        PrintStatement(Literal.of('say "hi"')),
    ]

    assert generate(tree, "python") == "print(True)\nprint(None)\nprint('say \"hi\"')"
    assert generate(tree, "pseudocode") == 'PRINT TRUE\nPRINT NULL\nPRINT "say \\"hi\\""'
    assert "fmt.Println(nil)" in generate(tree, "go")


def test_declarations_per_target():
    tree = [
        VariableDeclaration("PI", Literal.of(3.14), is_constant=True),
        VariableDeclaration("name", Literal.of("Ada")),
        VariableDeclaration("later"),
    ]

    assert generate(tree, "javascript") == 'const PI = 3.14;\nlet name = "Ada";\nlet later;'
    assert generate(tree, "typescript") == (
        'const PI: number = 3.14;\nlet name: string = "Ada";\nlet later: any;'
    )
    assert generate(tree, "python") == "PI = 3.14\nname = 'Ada'\nlater = None"
    assert generate(tree, "pseudocode") == 'CONSTANT PI IS 3.14\nSET name TO "Ada"\nDECLARE later'
    java = generate(tree, "java").split("\n")
    assert java[2:5] == ["    final double PI = 3.14;", '    String name = "Ada";', "    Object later;"]
    go = generate(tree, "go").split("\n")
    assert go[3:6] == ["  const PI = 3.14", '  name := "Ada"', "  var later interface{}"]
    scala = generate(tree, "scala").split("\n")
    assert scala[1:4] == ["  val PI: Double = 3.14", '  var name: String = "Ada"', "  var later: Any = null"]


def test_go_infinite_loop_and_import():
    output = _emit("loop forever\n  print 1\nend loop", "go").split("\n")

    assert 'import "fmt"' in output
    assert "  for {" in output
    no_print = _emit("Set x to 1", "go")
    if "import" in no_print:
        raise AssertionError(no_print)


def test_python_empty_body_gets_pass():
    assert generate([IfStatement(Identifier("x"))], "python") == "if x:\n  pass"


def test_javascript_strict_mode():
    output = _emit("Set x to 5", "javascript", strict_mode=True)

    assert output == "'use strict';\n\nlet x = 5;"
    assert generate([], "javascript", GenerateOptions(strict_mode=True)) == ""


# ---------------------------------------------------------------------------
# Degrade and options
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("target", ALL_TARGETS)
def test_unknown_node_becomes_placeholder(target):
    tree = [Mystery(), PrintStatement(Mystery())]

    output = generate(tree, target)

    placeholders = [line for line in output.split("\n") if "unsupported node: Mystery" in line]
    if len(placeholders) != 2:
        raise AssertionError(f"{target}:\n{output}")


def test_comments_can_be_dropped_but_placeholders_stay():
    tree = [Comment("note"), Mystery()]

    with_comments = generate(tree, "python")
    without = generate(tree, "python", GenerateOptions(include_comments=False))

    assert with_comments == "# note\n# unsupported node: Mystery"
    assert without == "# unsupported node: Mystery"


@pytest.mark.parametrize("target", ALL_TARGETS)
@pytest.mark.parametrize(
    "indent_size, indent_char",
    [(2, " "), (4, " "), (1, "\t")],
)
def test_indentation_is_one_unit_per_level(target, indent_size, indent_char, nested_tree):
    options = GenerateOptions(indent_size=indent_size, indent_char=indent_char)
    unit = options.unit
    lines = generate(nested_tree, target, options).split("\n")

    if_line = next(line for line in lines if line.lstrip().lower().startswith("if"))
    while_line = next(line for line in lines if line.lstrip().lower().startswith("while") or line.lstrip().startswith("for busy"))
    hello_line = next(line for line in lines if "hello" in line)
    done_line = next(line for line in lines if "done" in line)
    base = _lead(if_line)

    for line in lines:
        if line and len(_lead(line)) % len(unit):
            raise AssertionError(f"{target}: {line!r} is not a whole number of indent units")
        if line and set(_lead(line)) - {indent_char}:
            raise AssertionError(f"{target}: mixed indentation in {line!r}")

    if _lead(while_line) != base + unit:
        raise AssertionError(f"{target}: loop header not one level below if\n{lines}")
    if _lead(hello_line) != base + unit * 2:
        raise AssertionError(f"{target}: loop body not two levels below if\n{lines}")
    if _lead(done_line) != base:
        raise AssertionError(f"{target}: indentation did not return to the parent level\n{lines}")

    closers = lines[lines.index(hello_line) + 1 : lines.index(done_line)]
    for closer, depth in zip(closers, (1, 0)):
        if _lead(closer) != base + unit * depth:
            raise AssertionError(f"{target}: closer {closer!r} at the wrong depth")


def test_invalid_generate_options():
    with pytest.raises(ConfigurationError):
        GenerateOptions(indent_size=0)
    with pytest.raises(ConfigurationError):
        GenerateOptions(indent_size=True)
    with pytest.raises(ConfigurationError) as excinfo:
        GenerateOptions(indent_char="-")
    assert excinfo.value.context.metadata["config_key"] == "indent_char"


def test_large_indent_sizes_are_accepted():
    code = _emit("if ready then print 1", "python", indent_size=40)

    if code != "if ready:\n" + " " * 40 + "print(1)":
        raise AssertionError(repr(code))


def test_generation_is_deterministic(if_chain_text):
    tree = parse_natural_language(if_chain_text)

    for target in ALL_TARGETS:
        if generate(tree, target) != generate(tree, target):
            raise AssertionError(target)


# ---------------------------------------------------------------------------
# Repeated declarations
# ---------------------------------------------------------------------------

ACCUMULATE = "set total to 0\nfor i from 1 to 3\n  set total to total + i\nend for\nprint total"


@pytest.mark.parametrize(
    "target, declaration, update",
    [
        ("javascript", "let total = 0;", "  total = total + i;"),
        ("typescript", "let total: number = 0;", "  total = total + i;"),
        ("java", "    int total = 0;", "      total = total + i;"),
        ("go", "  total := 0", "    total = total + i"),
        ("scala", "  var total: Int = 0", "    total = total + i"),
    ],
)
def test_redeclaration_in_nested_block_is_an_assignment(target, declaration, update):
    lines = _emit(ACCUMULATE, target).split("\n")

    assert declaration in lines
    if update not in lines:
        raise AssertionError(f"{target}:\n" + "\n".join(lines))


def test_pseudocode_keeps_set_for_repeated_names():
    assert "  SET total TO total + i" in _emit(ACCUMULATE, "pseudocode").split("\n")


def test_sibling_block_declarations_stay_declarations():
    lines = _emit("if a\n  set x to 1\nend if\nset x to 2", "javascript").split("\n")

    assert lines == ["if (a) {", "  let x = 1;", "}", "let x = 2;"]


def test_function_scope_starts_from_its_parameters():
    text = "set n to 0\nfunction bump(n)\n  set n to n + 1\n  set m to n\nend function"

    lines = _emit(text, "javascript").split("\n")

    assert lines == [
        "let n = 0;",
        "function bump(n) {",
        "  n = n + 1;",
        "  let m = n;",
        "}",
    ]
