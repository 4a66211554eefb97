"""
Pytest configuration and shared fixtures for pseudocode_converter tests
"""

import logging
import os
import sys
from pathlib import Path

import pytest

# Add the tools directory to the path so `pseudocode_converter` imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's PSEUDOCONV_* variables and config file out of tests"""
    for key in list(os.environ):
        if key.startswith("PSEUDOCONV_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("PSEUDOCONV_CONFIG", str(tmp_path / "no-such-config.yaml"))

    from pseudocode_converter.telemetry import reset_recorder

    reset_recorder()
    yield
    reset_recorder()
    logging.getLogger("pseudocode_converter").setLevel(logging.NOTSET)


@pytest.fixture
def parser():
    from pseudocode_converter.parser import NaturalLanguageParser

    return NaturalLanguageParser()


@pytest.fixture
def indent_parser():
    from pseudocode_converter.parser import NaturalLanguageParser, ParseOptions

    return NaturalLanguageParser(ParseOptions(use_indentation=True))


@pytest.fixture
def config_fixture():
    """Return the path of a config file under fixtures/configs"""

    def _path(name: str) -> str:
        return str(FIXTURES_DIR / "configs" / name)

    return _path


@pytest.fixture
def nested_tree():
    """if ready / while busy / print "hello", then a top-level print "done" """
    from pseudocode_converter.models import IfStatement, Identifier, Literal, PrintStatement, WhileLoop

    return [
        IfStatement(
            Identifier("ready"),
            (WhileLoop(Identifier("busy"), (PrintStatement(Literal.of("hello")),)),),
        ),
        PrintStatement(Literal.of("done")),
    ]


@pytest.fixture
def if_chain_text():
    return (
        "if x > 10 then\n"
        '  print "big"\n'
        "else if x > 5 then\n"
        '  print "medium"\n'
        "else\n"
        '  print "small"\n'
        "end if\n"
    )
