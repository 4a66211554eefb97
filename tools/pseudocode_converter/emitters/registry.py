"""
Emitter registry for the Pseudocode Converter

Maps target-language tags to emitter classes. Emitters register themselves
with the @register_emitter decorator when their module is imported; the
registry is only written at import time.
"""

import logging

from ..exceptions import UnsupportedLanguageError
from ..languages import TargetLanguage
from .base import BaseEmitter, GenerateOptions

logger = logging.getLogger(__name__)


class EmitterRegistry:
    """
    Central registry for all available emitters
    """

    _emitters: dict[TargetLanguage, type[BaseEmitter]] = {}
    # Variants used instead of the plain emitter when annotations are requested
    _annotated: dict[TargetLanguage, type[BaseEmitter]] = {}

    @classmethod
    def register(cls, emitter_class: type[BaseEmitter], language: TargetLanguage) -> None:
        """
        Register an emitter class for a target language

        Raises:
            ValueError: If the class is not an emitter, or another class is
                already registered for the language
        """
        if not issubclass(emitter_class, BaseEmitter):
            raise ValueError(f"{emitter_class.__name__} must inherit from BaseEmitter")

        existing = cls._emitters.get(language)
        if existing is not None:
            if existing is not emitter_class:
                raise ValueError(
                    f"Target '{language.value}' already registered as {existing.__name__}"
                )
            return

        emitter_class.language = language
        cls._emitters[language] = emitter_class
        logger.debug("Registered emitter: %s -> %s", language.value, emitter_class.__name__)

    @classmethod
    def get_emitter_class(cls, target: "str | TargetLanguage") -> type[BaseEmitter]:
        """
        Get the emitter class for a target tag

        Raises:
            UnsupportedLanguageError: If the tag is unknown or has no emitter
        """
        supported = cls.list_targets()
        try:
            language = TargetLanguage.from_tag(target)
        except UnsupportedLanguageError:
            raise UnsupportedLanguageError(str(target), role="target", supported=supported) from None

        if language not in cls._emitters:
            raise UnsupportedLanguageError(language.value, role="target", supported=supported)
        return cls._emitters[language]

    @classmethod
    def register_annotated(cls, emitter_class: type[BaseEmitter], language: TargetLanguage) -> None:
        """Register the annotated variant of a target's emitter"""
        if not issubclass(emitter_class, BaseEmitter):
            raise ValueError(f"{emitter_class.__name__} must inherit from BaseEmitter")
        cls._annotated[language] = emitter_class
        logger.debug("Registered annotated emitter: %s -> %s", language.value, emitter_class.__name__)

    @classmethod
    def create_emitter(
        cls, target: "str | TargetLanguage", options: GenerateOptions | None = None
    ) -> BaseEmitter:
        """
        Instantiate the emitter for a target

        Enabled annotations select the target's annotated variant; targets
        without one ignore them.
        """
        emitter_class = cls.get_emitter_class(target)
        annotations = options.annotations if options is not None else None
        if annotations is not None and annotations.enabled:
            annotated = cls._annotated.get(emitter_class.language)
            if annotated is None:
                logger.debug("No annotated emitter for %s, annotations ignored", emitter_class.language.value)
            else:
                emitter_class = annotated
        return emitter_class(options)

    @classmethod
    def is_registered(cls, target: "str | TargetLanguage") -> bool:
        try:
            cls.get_emitter_class(target)
        except UnsupportedLanguageError:
            return False
        return True

    @classmethod
    def list_targets(cls) -> list[str]:
        """Sorted tags of all registered targets"""
        return sorted(language.value for language in cls._emitters)


def register_emitter(language: TargetLanguage):
    """
    Class decorator registering an emitter for a target language

    Example:
        @register_emitter(TargetLanguage.PYTHON)
        class PythonEmitter(BaseEmitter):
            ...
    """

    def decorator(emitter_class: type[BaseEmitter]) -> type[BaseEmitter]:
        EmitterRegistry.register(emitter_class, language)
        return emitter_class

    return decorator


def register_annotated_emitter(language: TargetLanguage):
    """Class decorator registering the annotated variant for a target language"""

    def decorator(emitter_class: type[BaseEmitter]) -> type[BaseEmitter]:
        EmitterRegistry.register_annotated(emitter_class, language)
        return emitter_class

    return decorator
