from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make `converter_api` and `pseudocode_converter` importable from a checkout
ROOT = Path(__file__).resolve().parent.parent.parent
for path in (ROOT, ROOT / "tools"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from converter_api import metrics_state, services  # noqa: E402
from converter_api.app import create_app  # noqa: E402
from converter_api.settings import Settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep the developer's PSEUDOCONV_* variables and config file out of tests"""
    for key in list(os.environ):
        if key.startswith("PSEUDOCONV_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("PSEUDOCONV_CONFIG", str(tmp_path / "no-such-config.yaml"))
    monkeypatch.setenv("PSEUDOCONV_API_ENV", "dev")

    services.reset_service()
    metrics_state.reset()
    yield
    services.reset_service()


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(Settings()))
