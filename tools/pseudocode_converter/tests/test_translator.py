import pytest

import pseudocode_converter.translator as translator
from pseudocode_converter import convert, detect_language, generate, parse
from pseudocode_converter.exceptions import ConfigurationError, UnsupportedLanguageError
from pseudocode_converter.languages import SOURCE_CAPABILITIES, SourceLanguage, TargetLanguage, capability
from pseudocode_converter.models import Comment, PrintStatement, VariableDeclaration, Literal


def test_round_trip_set_statement_to_pseudocode():
    tree = parse("Set x to 5")

    if generate(tree, "pseudocode") != "SET x TO 5":
        raise AssertionError(generate(tree, "pseudocode"))


def test_canonical_pseudocode_parses_back_to_same_tree():
    text = "Set total to 0\nfor each n in numbers\n  print n\nend for\nprint total"
    tree = parse(text)

    again = parse(generate(tree, "pseudocode"))
    if again != tree:
        raise AssertionError(again)


def test_parse_detects_source_when_omitted():
    result = translator.parse_with_result("SET x TO 5")

    assert result.source is SourceLanguage.PSEUDOCODE
    assert result.implemented is True
    assert result.nodes == [VariableDeclaration("x", Literal.of(5))]


def test_passthrough_sources_report_not_implemented():
    result = translator.parse_with_result("print x", "python")

    assert result.source is SourceLanguage.PYTHON
    if result.implemented:
        raise AssertionError("python input is read heuristically, not parsed")
    assert result.nodes == parse("print x", "natural")


def test_capability_flags():
    implemented = {lang for lang, cap in SOURCE_CAPABILITIES.items() if cap.implemented}

    if implemented != {SourceLanguage.NATURAL, SourceLanguage.PSEUDOCODE}:
        raise AssertionError(implemented)
    assert set(SOURCE_CAPABILITIES) == set(SourceLanguage)
    assert capability("Rust").implemented is False
    with pytest.raises(UnsupportedLanguageError):
        capability("klingon")


def test_unknown_tags_raise_distinct_error():
    with pytest.raises(UnsupportedLanguageError) as source_error:
        parse("print x", "klingon")
    assert source_error.value.role == "source"
    assert "Omit the source language to auto-detect it" in source_error.value.context.suggestions

    with pytest.raises(UnsupportedLanguageError) as target_error:
        generate([], "cobol")
    assert target_error.value.role == "target"
    assert isinstance(target_error.value, ValueError)


def test_convert_fails_on_bad_target_before_parsing(monkeypatch):
    def exploding_parser(options):
        raise AssertionError("parser should not run")

    monkeypatch.setitem(translator._PARSERS, SourceLanguage.NATURAL, exploding_parser)

    with pytest.raises(UnsupportedLanguageError):
        convert("the quick fox", "cobol", source="natural")


def test_tags_are_case_insensitive():
    assert convert("Set x to 5", "PYTHON").code == "x = 5"
    assert convert("Set x to 5", TargetLanguage.GO, source=" Natural ").source is SourceLanguage.NATURAL


class _BrokenParser:
    def __init__(self, options):
        self.options = options

    def get_parse_result(self, text):
        raise RuntimeError("boom")


def test_unexpected_parser_failure_degrades_to_natural_language(monkeypatch):
    monkeypatch.setitem(translator._PARSERS, SourceLanguage.JAVA, _BrokenParser)

    result = translator.parse_with_result("the quick fox", "java")

    if result.nodes != [Comment("the quick fox")]:
        raise AssertionError(result.nodes)
    if not any("parser failed" in w for w in result.warnings):
        raise AssertionError(result.warnings)


def test_converter_errors_from_parsers_propagate(monkeypatch):
    class StrictParser(_BrokenParser):
        def get_parse_result(self, text):
            raise ConfigurationError("bad parser option", config_key="use_indentation")

    monkeypatch.setitem(translator._PARSERS, SourceLanguage.NATURAL, StrictParser)

    with pytest.raises(ConfigurationError):
        translator.parse_with_result("x", "natural")


def test_convert_result_metadata():
    result = convert("if x > 5\n  print x\nend if", "javascript")

    assert result.target is TargetLanguage.JAVASCRIPT
    assert result.source is SourceLanguage.NATURAL
    if result.node_count != 6:
        raise AssertionError(result.node_count)
    assert result.duration_ms >= 0
    data = result.to_dict()
    assert data["target"] == "javascript"
    assert data["code"] == result.code
    assert data["warnings"] == []


@pytest.mark.parametrize(
    "condition, expected",
    [
        ("x is not greater than 5", "x <= 5"),
        ("x is not less than 5", "x >= 5"),
    ],
)
def test_negated_comparisons_convert_to_the_complement(condition, expected):
    result = convert(f"if {condition}\n  print x\nend if", "python")

    if result.code != f"if {expected}:\n  print(x)":
        raise AssertionError(result.code)


def test_convert_passes_parser_warnings_through():
    result = convert("while x < 3\n  print x", "python")

    assert result.has_warnings
    assert result.code == "while x < 3:\n  print(x)"


def test_failed_conversion_does_not_affect_the_next_one():
    with pytest.raises(UnsupportedLanguageError):
        convert("print 1", "cobol")

    assert convert("print 1", "python").code == "print(1)"


def test_public_detect_and_lists():
    assert detect_language("") is SourceLanguage.NATURAL
    assert translator.list_targets() == sorted(t.value for t in TargetLanguage)
    assert "natural" in translator.list_sources()
    assert parse("show 1") == [PrintStatement(Literal.of(1))]
