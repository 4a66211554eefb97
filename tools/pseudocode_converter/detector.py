"""
Heuristic language detection

Sniffs the whole input once and picks a source tag. Rules are checked in
priority order and the first hit wins; anything unrecognized (including empty
text) is natural language.
"""

import logging
import re

from .languages import SourceLanguage

logger = logging.getLogger(__name__)

# Canonical pseudocode is written with upper-case keywords, which is what
# separates "SET x TO 5" from the sentence "Set x to 5".
_PSEUDOCODE_RE = re.compile(
    r"^\s*(?:SET\s+\w+\s+TO\b|CONSTANT\s+\w+\s+IS\b|DECLARE\s+\w+|IF\b.*\bTHEN\s*$|"
    r"WHILE\b.*\bDO\s*$|FOR\s+EACH\b|FOR\b.*\bTO\b|FUNCTION\s+\w+|END\s+(?:IF|WHILE|FOR|FUNCTION)\b)",
    re.MULTILINE,
)

_TS_ANNOTATION_RE = re.compile(
    r":\s*(?:string|number|boolean|any|void)\b|\binterface\s+\w+|\btype\s+\w+\s*="
)
_PY_BLOCK_RE = re.compile(r"^\s*(?:def|class|import|from|if\b.*:|while\b.*:|for\b.*\bin\b.*:)", re.M)
_SCALA_KEYWORD_RE = re.compile(r"\b(?:val|var|def|object|trait)\b")

# (language, pattern) pairs, checked in order: interpreter and print idioms
_IDIOM_RULES: tuple[tuple[SourceLanguage, re.Pattern[str]], ...] = (
    (SourceLanguage.JAVA, re.compile(r"System\.out\.print")),
    (SourceLanguage.RUST, re.compile(r"\bprintln!\s*\(")),
    (SourceLanguage.GO, re.compile(r"\bfmt\.Print")),
)

# (language, keyword pattern, confirming pattern): generic heuristics
_KEYWORD_RULES: tuple[tuple[SourceLanguage, re.Pattern[str], re.Pattern[str]], ...] = (
    (
        SourceLanguage.JAVA,
        re.compile(r"\b(?:public|private|protected|interface|extends|implements|static)\b"),
        re.compile(r"\bclass\s+\w+"),
    ),
    (
        SourceLanguage.RUST,
        re.compile(r"\b(?:fn|let|mut|impl|trait|pub|mod|use)\b"),
        re.compile(r"->|\bfn\s+\w+\s*\("),
    ),
    (
        SourceLanguage.GO,
        re.compile(r"\b(?:func|package|import|type|var|const|range)\b"),
        re.compile(r"\bfunc\s+\w+\s*\(|^package\s+\w+", re.M),
    ),
    (
        SourceLanguage.SCALA,
        re.compile(r"\b(?:def|val|var|object|class|trait|extends|with)\b"),
        re.compile(r"\bobject\s+\w+|\bval\s+\w+\s*=|\bdef\s+\w+.*=\s*"),
    ),
    (
        SourceLanguage.TYPESCRIPT,
        re.compile(r"\b(?:const|let|var|function)\s+\w+"),
        _TS_ANNOTATION_RE,
    ),
    (
        SourceLanguage.JAVASCRIPT,
        re.compile(r"\b(?:const|let|var|function)\s+\w+|=>"),
        re.compile(r";\s*$|\{\s*$|=>", re.M),
    ),
)


def _detect_idiom(text: str) -> SourceLanguage | None:
    for language, pattern in _IDIOM_RULES:
        if pattern.search(text):
            return language

    if "console.log" in text:
        return SourceLanguage.TYPESCRIPT if _TS_ANNOTATION_RE.search(text) else SourceLanguage.JAVASCRIPT

    if "print(" in text and _PY_BLOCK_RE.search(text):
        return SourceLanguage.PYTHON
    if "println(" in text and _SCALA_KEYWORD_RE.search(text):
        return SourceLanguage.SCALA
    return None


def detect_language(text: str) -> SourceLanguage:
    """
    Guess the source language of a piece of text

    Args:
        text: Raw input

    Returns:
        A SourceLanguage; SourceLanguage.NATURAL when nothing matches
    """
    stripped = (text or "").strip()
    if not stripped:
        return SourceLanguage.NATURAL

    if _PSEUDOCODE_RE.search(stripped):
        return SourceLanguage.PSEUDOCODE

    idiom = _detect_idiom(stripped)
    if idiom is not None:
        logger.debug("Detected %s from a print idiom", idiom.value)
        return idiom

    if _PY_BLOCK_RE.search(stripped) and re.search(r":\s*$", stripped, re.M):
        return SourceLanguage.PYTHON

    for language, keywords, confirm in _KEYWORD_RULES:
        if keywords.search(stripped) and confirm.search(stripped):
            logger.debug("Detected %s from keyword heuristics", language.value)
            return language

    return SourceLanguage.NATURAL
