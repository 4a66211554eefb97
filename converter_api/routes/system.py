from __future__ import annotations

from fastapi import APIRouter, Depends

from ..metrics_state import snapshot
from ..schemas import HealthResponse, LanguagesResponse
from ..services import ConverterService, get_service

router = APIRouter()


@router.get("/health", tags=["system"], response_model=HealthResponse)
def health(service: ConverterService = Depends(get_service)) -> HealthResponse:
    """
    GET /health: liveness plus the package version and emitter count.
    """
    return service.health()


@router.get("/languages", tags=["system"], response_model=LanguagesResponse)
def languages(service: ConverterService = Depends(get_service)) -> LanguagesResponse:
    """
    GET /languages: source tags with their capability flags, target tags,
    and the configured defaults.
    """
    return service.languages()


@router.get("/metrics", tags=["system"])
def metrics() -> dict[str, int]:
    """
    GET /metrics: process-local request and conversion counters.
    """
    return snapshot()
