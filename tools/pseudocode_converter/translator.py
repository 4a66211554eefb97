"""
Parse / generate dispatch for the Pseudocode Converter

This module ties the pipeline together: detect the source language, pick the
parser registered for it, and hand the resulting tree to the emitter
registered for the target. Every function here is a pure function of its
arguments.
"""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .detector import detect_language
from .emitters import EmitterRegistry, GenerateOptions
from .exceptions import ConverterError
from .languages import AUTO, SOURCE_CAPABILITIES, SourceLanguage, TargetLanguage
from .models import Node, iter_nodes
from .parser import NaturalLanguageParser, ParseOptions, ParseResult
from .telemetry import get_recorder

logger = logging.getLogger(__name__)

# Source language -> parser factory. Only natural language (which also covers
# canonical pseudocode) has a real parser; the programming-language tags are
# declared passthroughs, see SOURCE_CAPABILITIES.
_PARSERS: dict[SourceLanguage, Callable[[ParseOptions], Any]] = {
    language: NaturalLanguageParser for language in SourceLanguage
}


@dataclass
class ConversionParse:
    """Result of parse dispatch"""

    nodes: list[Node]
    source: SourceLanguage
    implemented: bool
    warnings: list[str] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


@dataclass
class ConversionResult:
    """Result of a full text-to-text conversion"""

    code: str
    source: SourceLanguage
    target: TargetLanguage
    implemented: bool
    node_count: int
    warnings: list[str] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "source": self.source.value,
            "target": self.target.value,
            "implemented": self.implemented,
            "node_count": self.node_count,
            "warnings": list(self.warnings),
            "duration_ms": self.duration_ms,
        }


def resolve_source(text: str, source: "str | SourceLanguage | None" = None) -> SourceLanguage:
    """
    Turn a source tag into a SourceLanguage; None or "auto" runs the detector

    Raises:
        UnsupportedLanguageError: For an unknown explicit tag
    """
    if source is None or (isinstance(source, str) and source.strip().lower() == AUTO):
        detected = detect_language(text)
        logger.debug("Auto-detected source language: %s", detected.value)
        return detected
    return SourceLanguage.from_tag(source)


def parse_with_result(
    text: str,
    source: "str | SourceLanguage | None" = None,
    options: ParseOptions | None = None,
) -> ConversionParse:
    """
    Parse text into a tree, reporting which parser ran and any warnings
    """
    language = resolve_source(text, source)
    capability = SOURCE_CAPABILITIES[language]
    options = options or ParseOptions()
    warnings: list[str] = []

    if not capability.implemented:
        logger.debug("No %s grammar; reading input with the natural-language rules", language.value)

    with get_recorder().timed_section("parse", extra={"source": language.value}):
        parser = _PARSERS[language](options)
        try:
            result: ParseResult = parser.get_parse_result(text)
        except ConverterError:
            raise
        except Exception as e:
            logger.exception("%s parser failed, falling back to natural language", language.value)
            warnings.append(f"{language.value} parser failed ({e}); parsed as natural language")
            result = NaturalLanguageParser(options).get_parse_result(text)

    warnings.extend(result.warnings)
    return ConversionParse(
        nodes=list(result.nodes),
        source=language,
        implemented=capability.implemented,
        warnings=warnings,
    )


def parse(
    text: str,
    source: "str | SourceLanguage | None" = None,
    options: ParseOptions | None = None,
) -> list[Node]:
    """
    Parse text into a list of statement nodes

    Args:
        text: Input text
        source: Source tag; None or "auto" to detect it

    Raises:
        UnsupportedLanguageError: For an unknown explicit source tag
    """
    return parse_with_result(text, source, options).nodes


def generate(
    tree: Sequence[Node],
    target: "str | TargetLanguage",
    options: GenerateOptions | None = None,
) -> str:
    """
    Render a tree in a target language

    Raises:
        UnsupportedLanguageError: If no emitter is registered for the target
    """
    emitter = EmitterRegistry.create_emitter(target, options)
    with get_recorder().timed_section("generate", extra={"target": emitter.language.value}):
        return emitter.emit(tree)


def convert(
    text: str,
    target: "str | TargetLanguage",
    source: "str | SourceLanguage | None" = None,
    parse_options: ParseOptions | None = None,
    generate_options: GenerateOptions | None = None,
) -> ConversionResult:
    """
    Run the whole pipeline: detect, parse, generate
    """
    start = time.perf_counter()
    # Resolve the target first so a bad tag fails before any parsing work
    emitter_class = EmitterRegistry.get_emitter_class(target)
    parsed = parse_with_result(text, source, parse_options)
    code = generate(parsed.nodes, emitter_class.language, generate_options)
    duration_ms = (time.perf_counter() - start) * 1000.0

    node_count = sum(1 for _ in iter_nodes(parsed.nodes))
    get_recorder().record_event(
        "convert",
        duration_ms=duration_ms,
        counters={"nodes": node_count, "warnings": len(parsed.warnings)},
    )
    logger.debug(
        "Converted %s -> %s (%d nodes, %.2f ms)",
        parsed.source.value,
        emitter_class.language.value,
        node_count,
        duration_ms,
    )

    return ConversionResult(
        code=code,
        source=parsed.source,
        target=emitter_class.language,
        implemented=parsed.implemented,
        node_count=node_count,
        warnings=parsed.warnings,
        duration_ms=duration_ms,
    )


def list_targets() -> list[str]:
    return EmitterRegistry.list_targets()


def list_sources() -> list[str]:
    return [language.value for language in SourceLanguage]
