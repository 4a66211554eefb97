import json
import logging

import pytest

from pseudocode_converter.cli import ConverterCLI


@pytest.fixture
def cli():
    return ConverterCLI()


def test_no_command_prints_help(cli, capsys):
    exit_code = cli.run([])

    assert exit_code == 1
    assert "usage: pseudoconv" in capsys.readouterr().out


def test_convert_text(cli, capsys):
    exit_code = cli.run(["convert", "--text", "Set x to 5"])

    if exit_code != 0:
        raise AssertionError(exit_code)
    assert capsys.readouterr().out == "x = 5\n"


def test_convert_options(cli, capsys):
    exit_code = cli.run(
        ["convert", "--text", "if ready then print 1", "-t", "javascript", "--indent-char", "tab", "--indent-size", "1", "--strict"]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == "'use strict';\n\nif (ready) {\n\tconsole.log(1);\n}\n"


def test_convert_with_annotations(cli, capsys):
    exit_code = cli.run(
        ["convert", "--text", "print 1", "-t", "javascript", "--explain-every-line", "--show-actor-pattern"]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == (
        "// SYNTAX: console.log(value);\n"
        "// ACTOR: console (the object doing the work)\n"
        "// ACTION: log (write a line to the console)\n"
        "// INPUT: the value in parentheses\n"
        "console.log(1);\n"
        "// RESULT: The value appears in the console\n"
    )


def test_convert_file_to_output(cli, tmp_path, capsys):
    source = tmp_path / "notes.txt"
    source.write_text("print 1\n", encoding="utf-8")
    output = tmp_path / "notes.scala"

    exit_code = cli.run(["convert", str(source), "-t", "scala", "-o", str(output)])

    assert exit_code == 0
    assert capsys.readouterr().out == ""
    assert output.read_text(encoding="utf-8") == "object Main extends App {\n  println(1)\n}\n"


def test_convert_json(cli, capsys):
    cli.run(["convert", "--text", "SET x TO 5", "-t", "pseudocode", "--json"])

    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "SET x TO 5"
    assert data["source"] == "pseudocode"


def test_unknown_target_exits_2(cli, capsys):
    exit_code = cli.run(["convert", "--text", "print 1", "-t", "cobol"])

    assert exit_code == 2
    err = capsys.readouterr().err
    if "Unsupported target language: cobol" not in err:
        raise AssertionError(err)


def test_detect(cli, capsys):
    assert cli.run(["detect", "--text", "SET x TO 5"]) == 0
    assert capsys.readouterr().out.strip() == "pseudocode"


def test_parse_prints_tree(cli, capsys):
    assert cli.run(["parse", "--text", "print 1", "-s", "natural"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["source"] == "natural"
    assert data["implemented"] is True
    assert data["ast"] == [
        {"type": "PrintStatement", "value": {"type": "Literal", "value": 1, "data_kind": "number"}}
    ]


def test_languages(cli, capsys):
    assert cli.run(["languages"]) == 0

    out = capsys.readouterr().out
    assert "Sources:" in out
    assert "Targets:" in out
    assert "read as natural language" in out


def test_config_init_then_validate(cli, tmp_path, capsys):
    path = tmp_path / "config.yaml"

    assert cli.run(["config", "init", "-o", str(path)]) == 0
    assert path.exists()
    assert cli.run(["config", "init", "-o", str(path)]) == 1

    capsys.readouterr()
    assert cli.run(["config", "validate", "--path", str(path)]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["errors"] == []


def test_config_validate_invalid(cli, config_fixture, capsys):
    assert cli.run(["config", "validate", "--path", config_fixture("invalid_config.yaml")]) == 1
    assert cli.run(["config", "validate", "--path", config_fixture("invalid_config.yaml"), "--lenient"]) == 0


def test_config_show(cli, capsys, monkeypatch):
    monkeypatch.setenv("PSEUDOCONV_INDENT_SIZE", "4")

    assert cli.run(["config", "show"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["settings"]["generation"]["indent_size"] == 4
    assert data["env_overrides"] == ["PSEUDOCONV_INDENT_SIZE"]


def test_config_without_subcommand(cli):
    assert cli.run(["config"]) == 1


def test_global_config_option(cli, config_fixture, capsys):
    exit_code = cli.run(["--config", config_fixture("valid_config.yaml"), "convert", "--text", "print 1"])

    assert exit_code == 0
    assert capsys.readouterr().out == "console.log(1);\n"


@pytest.mark.parametrize(
    ("env_level", "argv_extra", "expected_level", "wrote_logged"),
    [
        (None, [], logging.INFO, True),
        ("ERROR", [], logging.ERROR, False),
        ("ERROR", ["-v"], logging.DEBUG, True),
    ],
)
def test_configured_log_level_applies(
    cli, tmp_path, monkeypatch, caplog, env_level, argv_extra, expected_level, wrote_logged
):
    if env_level:
        monkeypatch.setenv("PSEUDOCONV_LOG_LEVEL", env_level)
    caplog.set_level(logging.DEBUG)
    output = tmp_path / "out.py"

    exit_code = cli.run([*argv_extra, "convert", "--text", "print 1", "-o", str(output)])

    assert exit_code == 0
    assert logging.getLogger("pseudocode_converter").level == expected_level
    wrote = any(record.getMessage() == f"Wrote {output}" for record in caplog.records)
    if wrote != wrote_logged:
        raise AssertionError([record.getMessage() for record in caplog.records])
