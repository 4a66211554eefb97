"""Converter API settings.

Runtime configuration for the HTTP service, read from PSEUDOCONV_API_*
environment variables. Converter behavior itself (default target, indent,
etc.) comes from the converter's own config file; see
pseudocode_converter.config.
"""

from __future__ import annotations

import os


def _get_env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)


def _parse_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int(val: str | None, default: int) -> int:
    try:
        return int(str(val)) if val is not None else default
    except ValueError:
        return default


def _parse_csv(val: str | None) -> list[str]:
    if not val:
        return []
    items = [s.strip() for s in str(val).split(",")]
    return [s for s in items if s]


class Settings:
    """
    Runtime configuration loaded from environment variables with prefix
    PSEUDOCONV_API_.

        Variables:
        - PSEUDOCONV_API_ENV: "dev" or "prod" (default: dev)
        - PSEUDOCONV_API_PORT: int (default: 24811)
        - PSEUDOCONV_API_ALLOWED_ORIGINS: CSV list
            dev default if empty: [http://localhost:5173]
            prod default if empty: []
        - PSEUDOCONV_API_LOG_LEVEL: INFO|DEBUG|WARNING|ERROR (default: INFO)
        - PSEUDOCONV_API_LOG_DIR: directory for api.log; unset logs to
            stderr only
        - PSEUDOCONV_API_EXPOSE_OPENAPI_IN_DEV: bool (default: true)
        - PSEUDOCONV_API_CONFIG: converter config file passed to
            ConfigManager.load (default: PSEUDOCONV_CONFIG or the
            converter's default path)
    """

    def __init__(self) -> None:
        # Environment
        self.environment: str = (_get_env("PSEUDOCONV_API_ENV", "dev") or "dev").strip().lower()
        self.is_dev: bool = self.environment in {"dev", "development"}

        # Network
        self.port: int = _parse_int(_get_env("PSEUDOCONV_API_PORT"), 24811)

        if allowed_origins_env := _get_env("PSEUDOCONV_API_ALLOWED_ORIGINS"):
            self.allowed_origins: list[str] = _parse_csv(allowed_origins_env)
        else:
            self.allowed_origins = ["http://localhost:5173"] if self.is_dev else []

        # Logging
        self.log_level: str = (_get_env("PSEUDOCONV_API_LOG_LEVEL", "INFO") or "INFO").upper()
        self.log_dir: str | None = _get_env("PSEUDOCONV_API_LOG_DIR") or None

        # Docs in dev
        self.expose_openapi_in_dev: bool = _parse_bool(
            _get_env("PSEUDOCONV_API_EXPOSE_OPENAPI_IN_DEV"), True
        )

        self.converter_config_path: str | None = _get_env("PSEUDOCONV_API_CONFIG") or None
