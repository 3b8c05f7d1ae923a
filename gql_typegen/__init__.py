"""gql-typegen - typed Python models for GraphQL query documents."""

from .core.compiler import CompileOptions, compile_document, compile_files
from .core.generator import CodeGenerator

__all__ = [
    "CodeGenerator",
    "CompileOptions",
    "compile_document",
    "compile_files",
]
