"""
Conversion service.

Thin wrapper that binds the converter pipeline to one loaded configuration
and returns the API's DTOs. A single instance is shared per process; see
get_service().
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from pseudocode_converter import __version__, convert, detect_language, parse_with_result
from pseudocode_converter.config import Config, ConfigManager
from pseudocode_converter.languages import SOURCE_CAPABILITIES, SourceLanguage
from pseudocode_converter.models import tree_to_dicts
from pseudocode_converter.parser import ParseOptions
from pseudocode_converter.translator import list_targets

from .metrics_state import inc_counter
from .schemas import (
    ConvertRequest,
    ConvertResponse,
    DetectResponse,
    HealthResponse,
    LanguagesResponse,
    ParseRequest,
    ParseResponse,
    SourceLanguageInfo,
)
from .settings import Settings

log = logging.getLogger("converter_api.services")


class ConverterService:
    """Runs requests through the converter with configured defaults"""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()

    def _parse_options(self, use_indentation: bool | None) -> ParseOptions:
        options = self.config.parsing.to_options()
        if use_indentation is not None:
            options = replace(options, use_indentation=use_indentation)
        return options

    def health(self) -> HealthResponse:
        return HealthResponse(version=__version__, targets=len(list_targets()))

    def languages(self) -> LanguagesResponse:
        return LanguagesResponse(
            sources=[
                SourceLanguageInfo(
                    name=language.value,
                    implemented=SOURCE_CAPABILITIES[language].implemented,
                    parser=SOURCE_CAPABILITIES[language].parser,
                    note=SOURCE_CAPABILITIES[language].note,
                )
                for language in SourceLanguage
            ],
            targets=list_targets(),
            default_target=self.config.generation.default_target,
            default_source=self.config.parsing.default_source,
        )

    def detect(self, text: str) -> DetectResponse:
        language = detect_language(text)
        return DetectResponse(
            language=language.value, implemented=SOURCE_CAPABILITIES[language].implemented
        )

    def parse(self, req: ParseRequest) -> ParseResponse:
        parsed = parse_with_result(
            req.text,
            req.source or self.config.parsing.default_source,
            self._parse_options(req.use_indentation),
        )
        return ParseResponse(
            source=parsed.source.value,
            implemented=parsed.implemented,
            warnings=parsed.warnings,
            ast=tree_to_dicts(parsed.nodes),
        )

    def convert(self, req: ConvertRequest) -> ConvertResponse:
        generate_options = self.config.generation.to_options()
        if req.options is not None:
            generate_options = replace(generate_options, **req.options.overrides())

        result = convert(
            req.text,
            req.target or self.config.generation.default_target,
            source=req.source or self.config.parsing.default_source,
            parse_options=self._parse_options(req.use_indentation),
            generate_options=generate_options,
        )
        inc_counter("conversions_total")
        log.info(
            "convert",
            extra={
                "source": result.source.value,
                "target": result.target.value,
                "duration_ms": round(result.duration_ms, 3),
            },
        )
        return ConvertResponse(**result.to_dict())


_service: ConverterService | None = None
_service_lock = threading.Lock()


def get_service() -> ConverterService:
    """Return the process-wide service, loading the converter config on first use"""
    global _service
    if _service is not None:
        return _service

    with _service_lock:
        if _service is None:
            settings = Settings()
            _service = ConverterService(ConfigManager.load(settings.converter_config_path))
    return _service


def reset_service() -> None:
    """Drop the cached service (tests and config reloads)"""
    global _service
    with _service_lock:
        _service = None
