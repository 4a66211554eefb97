"""
Target-language emitters for the Pseudocode Converter

Importing this package registers every built-in emitter with the
EmitterRegistry.
"""

from .base import AnnotationOptions, BaseEmitter, GenerateOptions, UnsupportedNode, counting_loop
from .registry import EmitterRegistry, register_annotated_emitter, register_emitter

# Register the built-in emitters
from . import annotated, go, java, javascript, pseudocode, python, scala  # noqa: E402,F401
from .annotated import AnnotatedJavaScriptEmitter
from .go import GoEmitter
from .java import JavaEmitter
from .javascript import JavaScriptEmitter, TypeScriptEmitter
from .pseudocode import PseudocodeEmitter
from .python import PythonEmitter
from .scala import ScalaEmitter

__all__ = [
    "AnnotatedJavaScriptEmitter",
    "AnnotationOptions",
    "BaseEmitter",
    "EmitterRegistry",
    "GenerateOptions",
    "GoEmitter",
    "JavaEmitter",
    "JavaScriptEmitter",
    "PseudocodeEmitter",
    "PythonEmitter",
    "ScalaEmitter",
    "TypeScriptEmitter",
    "UnsupportedNode",
    "counting_loop",
    "register_annotated_emitter",
    "register_emitter",
]
