"""
Language tags understood by the converter

Source tags select a parser, target tags select an emitter. Every source tag
carries a capability record so callers can tell "really parsed as Python" from
"parsed heuristically as natural language".
"""

from dataclasses import dataclass
from enum import Enum

from .exceptions import UnsupportedLanguageError

AUTO = "auto"


class SourceLanguage(Enum):
    """Supported input languages"""

    NATURAL = "natural"
    PSEUDOCODE = "pseudocode"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    SCALA = "scala"
    RUST = "rust"
    GO = "go"

    @classmethod
    def from_tag(cls, tag: "str | SourceLanguage") -> "SourceLanguage":
        """Resolve a tag (case-insensitive) or raise UnsupportedLanguageError"""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            raise UnsupportedLanguageError(
                str(tag), role="source", supported=[lang.value for lang in cls]
            ) from None


class TargetLanguage(Enum):
    """Supported output languages"""

    PSEUDOCODE = "pseudocode"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JAVA = "java"
    SCALA = "scala"
    GO = "go"

    @classmethod
    def from_tag(cls, tag: "str | TargetLanguage") -> "TargetLanguage":
        """Resolve a tag (case-insensitive) or raise UnsupportedLanguageError"""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            raise UnsupportedLanguageError(
                str(tag), role="target", supported=[lang.value for lang in cls]
            ) from None


@dataclass(frozen=True)
class LanguageCapability:
    """What the converter can actually do with a source language"""

    language: SourceLanguage
    implemented: bool
    parser: str
    note: str = ""


NATURAL_LANGUAGE_PARSER = "natural-language"

SOURCE_CAPABILITIES: dict[SourceLanguage, LanguageCapability] = {
    SourceLanguage.NATURAL: LanguageCapability(
        SourceLanguage.NATURAL, implemented=True, parser=NATURAL_LANGUAGE_PARSER
    ),
    SourceLanguage.PSEUDOCODE: LanguageCapability(
        SourceLanguage.PSEUDOCODE,
        implemented=True,
        parser=NATURAL_LANGUAGE_PARSER,
        note="canonical keywords (SET, IF ... THEN, END IF) are part of the natural-language rules",
    ),
}
for _lang in SourceLanguage:
    SOURCE_CAPABILITIES.setdefault(
        _lang,
        LanguageCapability(
            _lang,
            implemented=False,
            parser=NATURAL_LANGUAGE_PARSER,
            note=f"no {_lang.value} grammar; input is read with the natural-language rules",
        ),
    )


def capability(language: "str | SourceLanguage") -> LanguageCapability:
    """Capability record of a source tag"""
    return SOURCE_CAPABILITIES[SourceLanguage.from_tag(language)]
