"""
HTTP service for the Pseudocode Converter

FastAPI application exposing detect, parse and convert over JSON.
Run with `python -m converter_api` or `uvicorn converter_api.app:app`.
"""
