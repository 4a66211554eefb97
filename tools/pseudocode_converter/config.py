"""
Configuration management for the Pseudocode Converter

- Sensible defaults that work out of the box
- YAML or JSON config files
- Environment variable overrides (PSEUDOCONV_*)
- Validation with helpful error messages
"""

import json
import logging
import os
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, cast

import yaml

from .emitters.base import VALID_INDENT_CHARS, GenerateOptions
from .exceptions import ConfigurationError
from .languages import AUTO, SourceLanguage, TargetLanguage
from .parser import ParseOptions

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes", "on")
_INDENT_CHAR_NAMES = {"space": " ", "tab": "\t", "\\t": "\t"}
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _normalize_indent_char(value: Any) -> Any:
    if isinstance(value, str):
        return _INDENT_CHAR_NAMES.get(value.strip().lower(), value)
    return value


@dataclass
class GenerationConfig:
    """Emitter settings"""

    default_target: str = TargetLanguage.PYTHON.value
    indent_size: int = 2
    indent_char: str = " "
    include_comments: bool = True
    strict_mode: bool = False

    def validate(self) -> list[str]:
        errors: list[str] = []

        targets = [lang.value for lang in TargetLanguage]
        if self.default_target not in targets:
            errors.append(
                f"generation.default_target must be one of {targets}, got '{self.default_target}'"
            )
        if isinstance(self.indent_size, bool) or not isinstance(self.indent_size, int):
            errors.append(f"generation.indent_size must be an integer, got {self.indent_size!r}")
        elif self.indent_size < 1:
            errors.append(f"generation.indent_size must be a positive integer, got {self.indent_size}")
        if self.indent_char not in VALID_INDENT_CHARS:
            errors.append(
                f"generation.indent_char must be a space or a tab, got {self.indent_char!r}"
            )

        return errors

    def to_options(self) -> GenerateOptions:
        return GenerateOptions(
            indent_size=self.indent_size,
            indent_char=self.indent_char,
            include_comments=self.include_comments,
            strict_mode=self.strict_mode,
        )


@dataclass
class ParsingConfig:
    """Parser settings"""

    default_source: str = AUTO
    use_indentation: bool = False

    def validate(self) -> list[str]:
        errors: list[str] = []

        sources = [AUTO] + [lang.value for lang in SourceLanguage]
        if self.default_source not in sources:
            errors.append(
                f"parsing.default_source must be one of {sources}, got '{self.default_source}'"
            )

        return errors

    def to_options(self) -> ParseOptions:
        return ParseOptions(use_indentation=self.use_indentation)


@dataclass
class Config:
    """Main configuration class"""

    generation: GenerationConfig = field(default_factory=GenerationConfig)
    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    log_level: str = "INFO"

    # Version (for compatibility checking)
    version: str = "1.0"

    def validate(self) -> list[str]:
        """Validate entire configuration, returning error messages"""
        errors: list[str] = []
        errors.extend(self.generation.validate())
        errors.extend(self.parsing.validate())

        if str(self.log_level).upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of {list(_LOG_LEVELS)}, got '{self.log_level}'")

        return errors

    # ---- Environment overrides ----

    _ENV_OVERRIDES = {
        "PSEUDOCONV_DEFAULT_TARGET": "generation.default_target",
        "PSEUDOCONV_INDENT_SIZE": "generation.indent_size",
        "PSEUDOCONV_INDENT_CHAR": "generation.indent_char",
        "PSEUDOCONV_INCLUDE_COMMENTS": "generation.include_comments",
        "PSEUDOCONV_STRICT_MODE": "generation.strict_mode",
        "PSEUDOCONV_DEFAULT_SOURCE": "parsing.default_source",
        "PSEUDOCONV_USE_INDENTATION": "parsing.use_indentation",
        "PSEUDOCONV_LOG_LEVEL": "log_level",
    }

    def _coerce_override_value(self, path: str, raw: str) -> tuple[bool, Any]:
        """Coerce a raw env value to the type the setting expects"""

        def _try_int(val: str) -> tuple[bool, Any]:
            try:
                return True, int(val)
            except ValueError:
                logger.warning("Invalid integer for %s from env: %s", path, val)
                return False, None

        coercers: dict[str, Callable[[str], tuple[bool, Any]]] = {
            "generation.default_target": lambda v: (True, v.strip().lower()),
            "generation.indent_size": _try_int,
            "generation.indent_char": lambda v: (True, _normalize_indent_char(v)),
            "generation.include_comments": lambda v: (True, v.lower() in _TRUTHY),
            "generation.strict_mode": lambda v: (True, v.lower() in _TRUTHY),
            "parsing.default_source": lambda v: (True, v.strip().lower()),
            "parsing.use_indentation": lambda v: (True, v.lower() in _TRUTHY),
            "log_level": lambda v: (True, v.strip().upper()),
        }

        fn = coercers.get(path)
        return fn(raw) if fn else (False, None)

    def _apply_override(self, path: str, value: Any) -> None:
        target: Any = self
        parts = path.split(".")
        for p in parts[:-1]:
            target = getattr(target, p)
        setattr(target, parts[-1], value)

    def apply_env_overrides(self) -> list[str]:
        """Apply environment variable overrides; returns the applied variable names"""
        applied: list[str] = []
        for env_key, path in self._ENV_OVERRIDES.items():
            raw = os.getenv(env_key)
            if raw is None:
                continue
            ok, value = self._coerce_override_value(path, raw)
            if not ok:
                continue
            self._apply_override(path, value)
            applied.append(env_key)
            logger.debug("Config override from %s -> %s", env_key, path)
        return applied

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create from dictionary; missing keys keep their defaults

        Raises:
            TypeError: On unknown keys
        """
        data = dict(data or {})
        if "generation" in data and isinstance(data["generation"], dict):
            generation_data = dict(cast("dict[str, Any]", data["generation"]))
            if "indent_char" in generation_data:
                generation_data["indent_char"] = _normalize_indent_char(generation_data["indent_char"])
            data["generation"] = GenerationConfig(**generation_data)

        if "parsing" in data and isinstance(data["parsing"], dict):
            data["parsing"] = ParsingConfig(**cast("dict[str, Any]", data["parsing"]))

        return cls(**data)


class ConfigManager:
    """Simple configuration manager"""

    DEFAULT_CONFIG_PATH = Path.home() / ".pseudocode_converter" / "config.yaml"

    @staticmethod
    def _truthy_env(name: str) -> bool:
        val = os.getenv(name)
        return bool(val) and val.strip().lower() in _TRUTHY

    @staticmethod
    def default_path() -> Path:
        """PSEUDOCONV_CONFIG when set, else ~/.pseudocode_converter/config.yaml"""
        env_path = os.getenv("PSEUDOCONV_CONFIG")
        return Path(env_path) if env_path else ConfigManager.DEFAULT_CONFIG_PATH

    @staticmethod
    def _read_file(config_path: Path) -> dict[str, Any]:
        with open(config_path, encoding="utf-8") as f:
            if config_path.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping, "
                f"got {type(data).__name__}"
            )
        return data

    @staticmethod
    def load(path: str | Path | None = None, strict: bool | None = None) -> Config:
        """
        Load configuration from file or create default.

        Precedence: defaults < file < env

        Args:
            path: Config file (YAML by .yaml/.yml suffix, JSON otherwise)
            strict: Raise ConfigurationError on invalid values. Defaults to
                True unless PSEUDOCONV_LENIENT_CONFIG is truthy.
        """
        config_path = Path(path) if path else ConfigManager.default_path()

        config = Config()
        if config_path.exists():
            try:
                config = Config.from_dict(ConfigManager._read_file(config_path))
            except (OSError, ValueError, TypeError, yaml.YAMLError, ConfigurationError) as e:
                logger.error("Failed to load config from %s: %s", config_path, e)
                logger.info("Using default configuration")
                config = Config()
        else:
            logger.debug("No configuration file found at %s, using defaults", config_path)

        config.apply_env_overrides()

        if strict is None:
            strict = not ConfigManager._truthy_env("PSEUDOCONV_LENIENT_CONFIG")

        errors = config.validate()
        if errors:
            if strict:
                preview = "; ".join(errors[:3])
                raise ConfigurationError(f"Invalid configuration: {preview}")
            for error in errors:
                logger.warning("Config warning: %s", error)

        return config

    @staticmethod
    def save(config: Config, path: str | Path | None = None) -> Path:
        """Save configuration to file; returns the path written"""
        config_path = Path(path) if path else ConfigManager.default_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            if config_path.suffix in [".yaml", ".yml"]:
                yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(config.to_dict(), f, indent=2)

        logger.info("Configuration saved to %s", config_path)
        return config_path

    @staticmethod
    def validate(config: Config) -> list[str]:
        """Validate configuration (list of error messages)"""
        return config.validate()

    @staticmethod
    def get_config_info(config_path: str | Path | None = None) -> dict[str, Any]:
        """Describe a config file: existence, version and validity"""
        path = Path(config_path) if config_path else ConfigManager.default_path()
        info: dict[str, Any] = {
            "path": str(path),
            "exists": path.exists(),
            "version": None,
            "is_valid": False,
            "issues": [],
        }
        if not path.exists():
            info["issues"].append("Configuration file does not exist")
            return info

        try:
            config = Config.from_dict(ConfigManager._read_file(path))
        except (OSError, ValueError, TypeError, yaml.YAMLError, ConfigurationError) as e:
            info["issues"].append(f"Failed to load: {e}")
            return info

        info["version"] = config.version
        info["issues"] = config.validate()
        info["is_valid"] = not info["issues"]
        return info
