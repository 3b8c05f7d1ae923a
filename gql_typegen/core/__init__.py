"""Core modules for compiling GraphQL query documents into typed code."""

from .assembler import ModuleAssembler
from .cache import CompilationCache, NoopCache, SourceCache
from .compiler import CompileOptions, compile_document, compile_files, schema_source_class
from .context import QueryContext
from .deprecation import DeprecationStatus, DeprecationStrategy
from .errors import (
    ConfigurationError,
    GenerationError,
    MissingTypenameError,
    QuerySyntaxError,
    ResolutionError,
    SchemaFormatError,
    SerializationError,
    TypegenError,
    UnknownFieldError,
    UnknownFragmentError,
    UnknownTypeError,
    UnsupportedSelectionError,
)
from .field_type import FieldType, ListType, NamedType, OptionalType
from .generator import CodeGenerator
from .hooks import (
    AddHeaderHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .introspection import IntrospectionSource
from .ir import (
    IREnum,
    IREnumValue,
    IRField,
    IRInput,
    IRInterface,
    IRObject,
    IRScalar,
    IRSchema,
    IRUnion,
)
from .output import (
    CompiledModule,
    DeprecationMarker,
    EnumDefinition,
    FieldDefinition,
    OperationBinding,
    OperationNamespace,
    ScalarDefinition,
    SharedDefinitions,
    StructDefinition,
    UnionDefinition,
    VariantDefinition,
    Visibility,
)
from .parser import SchemaSource, SDLSource, build_schema_model
from .query import QueryDocument, parse_query
from .resolver import SelectionResolver
from .scalars import (
    DateHandler,
    DateTimeHandler,
    JSONHandler,
    ScalarHandler,
    ScalarRegistry,
    UUIDHandler,
)
from .synthesizer import TypeSynthesizer

__all__ = [
    # Errors
    "TypegenError",
    "ConfigurationError",
    "SchemaFormatError",
    "SerializationError",
    "QuerySyntaxError",
    "ResolutionError",
    "UnknownTypeError",
    "UnknownFieldError",
    "UnknownFragmentError",
    "UnsupportedSelectionError",
    "MissingTypenameError",
    "GenerationError",
    # Schema model
    "FieldType",
    "NamedType",
    "ListType",
    "OptionalType",
    "DeprecationStatus",
    "DeprecationStrategy",
    "IREnum",
    "IREnumValue",
    "IRField",
    "IRInput",
    "IRInterface",
    "IRObject",
    "IRScalar",
    "IRSchema",
    "IRUnion",
    "SchemaSource",
    "SDLSource",
    "IntrospectionSource",
    "build_schema_model",
    # Query documents
    "QueryDocument",
    "parse_query",
    # Compilation
    "QueryContext",
    "SelectionResolver",
    "TypeSynthesizer",
    "ModuleAssembler",
    "CompileOptions",
    "compile_document",
    "compile_files",
    "schema_source_class",
    "CompilationCache",
    "SourceCache",
    "NoopCache",
    # Output model
    "CompiledModule",
    "DeprecationMarker",
    "EnumDefinition",
    "FieldDefinition",
    "OperationBinding",
    "OperationNamespace",
    "ScalarDefinition",
    "SharedDefinitions",
    "StructDefinition",
    "UnionDefinition",
    "VariantDefinition",
    "Visibility",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    "DateTimeHandler",
    "DateHandler",
    "UUIDHandler",
    "JSONHandler",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "HookRunner",
    # Generator
    "CodeGenerator",
]
