"""phpdocgen - regenerates @method stubs for a PHP library's fluent API.

Reads doc-comments from the library's function files, merges them with each
function's declared signature and rewrites the doc-comments of the sequence
wrapper class and the core function loader.
"""

from .config import GeneratorConfig
from .errors import (
    DocCommentError,
    DocGenError,
    ReflectionError,
    SourceParseError,
    TargetFileError,
)
from .extractors import DocumentationRegistry, build_function_documentation
from .generators import build_core_function_loader, build_sequence_wrapper
from .toolset import Toolset

__all__ = [
    "GeneratorConfig",
    "Toolset",
    "DocumentationRegistry",
    "build_function_documentation",
    "build_sequence_wrapper",
    "build_core_function_loader",
    "DocGenError",
    "DocCommentError",
    "ReflectionError",
    "SourceParseError",
    "TargetFileError",
]
