from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette import status

from ..schemas import (
    ConvertRequest,
    ConvertResponse,
    DetectRequest,
    DetectResponse,
    ParseRequest,
    ParseResponse,
)
from ..services import ConverterService, get_service

router = APIRouter()


@router.post(
    "/convert",
    tags=["convert"],
    response_model=ConvertResponse,
    status_code=status.HTTP_200_OK,
)
def convert(req: ConvertRequest, service: ConverterService = Depends(get_service)) -> ConvertResponse:
    """
    POST /convert
    - Detect (unless a source tag is given), parse and generate
    - Unknown source/target tags are rejected with 422 and the supported tags
    - Parser warnings are returned alongside the code
    """
    return service.convert(req)


@router.post("/detect", tags=["convert"], response_model=DetectResponse)
def detect(req: DetectRequest, service: ConverterService = Depends(get_service)) -> DetectResponse:
    return service.detect(req.text)


@router.post("/parse", tags=["convert"], response_model=ParseResponse)
def parse(req: ParseRequest, service: ConverterService = Depends(get_service)) -> ParseResponse:
    """
    POST /parse: the tree as JSON (one object per node, keyed by "type")
    """
    return service.parse(req)
