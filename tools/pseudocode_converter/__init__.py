"""
Pseudocode Converter Package

A deterministic converter that reads English-like pseudocode and renders it
in several programming languages: pseudocode, Python, JavaScript, TypeScript,
Java, Go and Scala.

Main Components:
- detect_language: Guesses the language of an input text
- NaturalLanguageParser: Turns pseudocode lines into a statement tree
- EmitterRegistry: Maps target languages to code emitters
- convert: Runs detect, parse and generate in one call

Usage:
    from pseudocode_converter import convert

    result = convert("Set x to 5\\nPrint x", "python")
    print(result.code)
"""

# Configuration
from .config import Config, ConfigManager, GenerationConfig, ParsingConfig
from .detector import detect_language

# Emitters
from .emitters import AnnotationOptions, BaseEmitter, EmitterRegistry, GenerateOptions, register_emitter

# Errors
from .exceptions import ConfigurationError, ConverterError, ErrorContext, UnsupportedLanguageError
from .languages import AUTO, SOURCE_CAPABILITIES, LanguageCapability, SourceLanguage, TargetLanguage

# Models
from .models import (
    ArrayAccess,
    Assignment,
    BinaryExpression,
    Comment,
    DataKind,
    ElseIfStatement,
    ElseStatement,
    ForEachLoop,
    ForLoop,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    Literal,
    Node,
    PrintStatement,
    PropertyAccess,
    ReturnStatement,
    UnaryExpression,
    VariableDeclaration,
    WhileLoop,
    iter_nodes,
    node_to_dict,
)
from .parser import NaturalLanguageParser, ParseOptions, ParseResult
from .translator import ConversionResult, convert, generate, parse, parse_with_result


__version__ = "1.0.0"

__all__ = [
    # Pipeline
    "convert",
    "parse",
    "parse_with_result",
    "generate",
    "detect_language",
    "ConversionResult",
    "NaturalLanguageParser",
    "ParseOptions",
    "ParseResult",
    # Languages
    "AUTO",
    "SourceLanguage",
    "TargetLanguage",
    "LanguageCapability",
    "SOURCE_CAPABILITIES",
    # Emitters
    "BaseEmitter",
    "EmitterRegistry",
    "GenerateOptions",
    "AnnotationOptions",
    "register_emitter",
    # Models
    "Node",
    "DataKind",
    "Literal",
    "Identifier",
    "BinaryExpression",
    "UnaryExpression",
    "ArrayAccess",
    "PropertyAccess",
    "VariableDeclaration",
    "Assignment",
    "IfStatement",
    "ElseIfStatement",
    "ElseStatement",
    "WhileLoop",
    "ForLoop",
    "ForEachLoop",
    "FunctionDeclaration",
    "FunctionCall",
    "ReturnStatement",
    "PrintStatement",
    "Comment",
    "iter_nodes",
    "node_to_dict",
    # Configuration
    "Config",
    "ConfigManager",
    "GenerationConfig",
    "ParsingConfig",
    # Errors
    "ConverterError",
    "ConfigurationError",
    "UnsupportedLanguageError",
    "ErrorContext",
]
