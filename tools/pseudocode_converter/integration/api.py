"""
High-level API for the Pseudocode Converter

This module provides simplified interfaces for common conversion tasks,
making it easy to integrate the converter into applications. Results are
plain dictionaries so they can be serialized as-is.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..config import Config, ConfigManager
from ..detector import detect_language
from ..exceptions import ConverterError
from ..languages import SOURCE_CAPABILITIES, SourceLanguage, TargetLanguage
from ..models import tree_to_dicts
from ..translator import convert, list_targets, parse_with_result

logger = logging.getLogger(__name__)


def _failure(error: ConverterError | OSError, **fields: Any) -> dict[str, Any]:
    if isinstance(error, ConverterError):
        details = error.to_dict()
    else:
        details = {"error": type(error).__name__, "message": str(error), "suggestions": []}
    return {
        "success": False,
        "code": None,
        "errors": [details["message"]],
        "warnings": [],
        "metadata": {"error_type": details["error"], "suggestions": details["suggestions"]},
        **fields,
    }


class ConverterAPI:
    """
    High-level API for the pseudocode converter

    Wraps the pipeline with configuration defaults (target language, indent,
    comment handling) and returns dictionaries instead of raising.
    """

    def __init__(self, config: Config | None = None, config_path: str | Path | None = None):
        """
        Initialize the converter API

        Args:
            config: Ready configuration object; loaded from file/env otherwise
            config_path: Optional path to configuration file
        """
        self._config = config if config is not None else ConfigManager.load(config_path)
        self._default_target = self._config.generation.default_target

    @property
    def config(self) -> Config:
        return self._config

    def set_default_target(self, language: str) -> None:
        """
        Set the default target language

        Raises:
            UnsupportedLanguageError: If the tag is unknown
        """
        self._default_target = TargetLanguage.from_tag(language).value
        logger.info("Default target language set to: %s", self._default_target)

    def _source(self, source: str | None) -> str | None:
        return source if source is not None else self._config.parsing.default_source

    def convert(self, text: str, target: str | None = None, source: str | None = None) -> dict[str, Any]:
        """
        Convert text to the specified target language

        Returns:
            Dictionary with success, code, source/target tags, warnings and metadata
        """
        target = target or self._default_target
        try:
            result = convert(
                text,
                target,
                source=self._source(source),
                parse_options=self._config.parsing.to_options(),
                generate_options=self._config.generation.to_options(),
            )
        except ConverterError as e:
            logger.error("Conversion failed: %s", e.message)
            return _failure(e, target=target, source=source)

        return {
            "success": True,
            "code": result.code,
            "source": result.source.value,
            "target": result.target.value,
            "errors": [],
            "warnings": result.warnings,
            "metadata": {
                "implemented": result.implemented,
                "node_count": result.node_count,
                "duration_ms": result.duration_ms,
            },
        }

    def convert_file(
        self,
        file_path: str | Path,
        output_path: str | Path | None = None,
        target: str | None = None,
        source: str | None = None,
    ) -> dict[str, Any]:
        """
        Convert the contents of a file, optionally writing the result
        """
        file_path = Path(file_path)
        if not file_path.exists():
            return {
                "success": False,
                "code": None,
                "errors": [f"File not found: {file_path}"],
                "warnings": [],
                "metadata": {"file": str(file_path)},
            }

        try:
            text = file_path.read_text(encoding="utf-8")
            result = self.convert(text, target, source)
            if output_path and result["success"]:
                output_path = Path(output_path)
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_text(result["code"], encoding="utf-8")
                result["metadata"]["output_file"] = str(output_path)
        except OSError as e:
            logger.error("File conversion failed: %s", e)
            return _failure(e, file=str(file_path))

        result["metadata"]["file"] = str(file_path)
        return result

    def batch_convert(
        self,
        items: list[str | dict[str, Any]],
        target: str | None = None,
        progress_callback: Callable[[int, int, str], None] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Convert several inputs

        Args:
            items: Strings, or dicts with "text" and optional "target"/"source"
            target: Default target for items that do not name one
            progress_callback: Called as (done, total, message)
        """
        results = []
        total = len(items)

        for i, item in enumerate(items):
            if isinstance(item, str):
                text, item_target, item_source = item, target, None
            else:
                text = item.get("text", "")
                item_target = item.get("target", target)
                item_source = item.get("source")

            if progress_callback:
                progress_callback(i, total, f"Converting item {i + 1}/{total}")

            result = self.convert(text, item_target, item_source)
            result["index"] = i
            results.append(result)

        if progress_callback:
            progress_callback(total, total, "Batch conversion complete")

        return results

    def detect(self, text: str) -> dict[str, Any]:
        language = detect_language(text)
        capability = SOURCE_CAPABILITIES[language]
        return {"language": language.value, "implemented": capability.implemented}

    def parse(self, text: str, source: str | None = None) -> dict[str, Any]:
        """Parse text and return the tree as JSON-friendly dicts"""
        try:
            parsed = parse_with_result(text, self._source(source), self._config.parsing.to_options())
        except ConverterError as e:
            return _failure(e, source=source)

        return {
            "success": True,
            "source": parsed.source.value,
            "implemented": parsed.implemented,
            "ast": tree_to_dicts(parsed.nodes),
            "warnings": parsed.warnings,
        }

    def get_info(self) -> dict[str, Any]:
        """Describe the available languages and the active defaults"""
        return {
            "targets": list_targets(),
            "sources": {
                language.value: {
                    "implemented": SOURCE_CAPABILITIES[language].implemented,
                    "parser": SOURCE_CAPABILITIES[language].parser,
                }
                for language in SourceLanguage
            },
            "default_target": self._default_target,
            "default_source": self._config.parsing.default_source,
            "indent_size": self._config.generation.indent_size,
        }


def convert_text(text: str, target: str = "python", source: str | None = None) -> str | None:
    """
    Quick conversion with default configuration

    Returns:
        The generated code, or None on failure
    """
    result = ConverterAPI(config=Config()).convert(text, target, source)
    return result["code"] if result["success"] else None


def convert_file(
    input_path: str | Path,
    output_path: str | Path | None = None,
    target: str = "python",
) -> bool:
    """Convert a file with default configuration; returns success"""
    result = ConverterAPI(config=Config()).convert_file(input_path, output_path, target)
    return bool(result["success"])


def batch_convert(texts: list[str], target: str = "python") -> list[str | None]:
    """Convert several strings with default configuration"""
    results = ConverterAPI(config=Config()).batch_convert(list(texts), target)
    return [r["code"] if r["success"] else None for r in results]
