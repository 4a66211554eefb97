"""
Integration helpers for the Pseudocode Converter

High-level, dict-returning APIs for applications that embed the converter.
"""

from .api import ConverterAPI, batch_convert, convert_file, convert_text

__all__ = ["ConverterAPI", "batch_convert", "convert_file", "convert_text"]
