"""Compilation entry points.

``compile_document`` runs the pipeline on an already-loaded schema and query
document. ``compile_files`` is the driver used by the CLI: it loads both
through a cache and picks the schema format from the file extension.

Example:
    options = CompileOptions(operation_name="AllCats")
    module = compile_files("queries/cats.graphql", "schema.graphql", options)
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .assembler import ModuleAssembler, response_type_name
from .cache import CompilationCache, SourceCache
from .context import QueryContext
from .deprecation import DeprecationStrategy
from .errors import ConfigurationError
from .introspection import IntrospectionSource
from .ir import IRSchema
from .naming import module_name
from .output import CompiledModule, Visibility
from .parser import SDLSource, build_schema_model
from .query import QueryDocument
from .resolver import SelectionResolver
from .synthesizer import TypeSynthesizer

logger = logging.getLogger(__name__)

SDL_EXTENSIONS = (".graphql", ".gql", ".graphqls")
INTROSPECTION_EXTENSIONS = (".json",)


@dataclass
class CompileOptions:
    """Options for compiling one query document."""
    # Operation to compile; all operations when None or unmatched
    operation_name: str | None = None
    # Defaults to the snake-cased name of the first compiled operation
    module_name: str | None = None
    # Comma-separated derive names merged onto every generated type
    additional_derives: str | None = None
    deprecation_strategy: DeprecationStrategy = DeprecationStrategy.WARN
    visibility: Visibility = Visibility.PUBLIC


def schema_source_class(path: Path) -> type[SDLSource] | type[IntrospectionSource]:
    """Pick the schema source format from the file extension."""
    suffix = path.suffix.lower()
    if suffix in SDL_EXTENSIONS:
        return SDLSource
    if suffix in INTROSPECTION_EXTENSIONS:
        return IntrospectionSource
    raise ConfigurationError(
        f"Unsupported extension for the GraphQL schema: {suffix or path.name} "
        f"(supported: {', '.join(SDL_EXTENSIONS + INTROSPECTION_EXTENSIONS)})"
    )


def compile_document(
    schema: IRSchema,
    document: QueryDocument,
    query: str,
    options: CompileOptions | None = None,
) -> CompiledModule:
    """Compile the selected operations of a document into one module.

    Any resolution error aborts the whole module.
    """
    options = options or CompileOptions()
    operations = document.operations_to_compile(options.operation_name)
    if not operations:
        raise ConfigurationError("The query document does not define any operation")

    context = QueryContext(
        schema,
        fragments=document.fragments,
        deprecation_strategy=options.deprecation_strategy,
    )
    context.ingest_additional_derives(options.additional_derives)
    resolver = SelectionResolver(context)
    synthesizer = TypeSynthesizer(context)

    multiple = len(operations) > 1
    resolved = [
        (operation, resolver.resolve_operation(operation, response_type_name(operation, multiple)))
        for operation in operations
    ]

    name = options.module_name or module_name(operations[0].name)
    module = ModuleAssembler(resolver, synthesizer).assemble(
        name, query, options.visibility, resolved
    )
    logger.debug(
        "Compiled module %s: %d operation(s), %d shared definition(s)",
        module.name,
        len(module.operations),
        len(module.shared.all()),
    )
    return module


def compile_files(
    query_path: str | Path,
    schema_path: str | Path,
    options: CompileOptions | None = None,
    cache: CompilationCache | None = None,
) -> CompiledModule:
    """Load a query and a schema file and compile them into a module."""
    cache = cache if cache is not None else SourceCache()
    query_path = Path(query_path)
    schema_path = Path(schema_path)

    source_class = schema_source_class(schema_path)
    query_text, document_node = cache.query_document(query_path)
    schema_text = cache.schema_text(schema_path)
    schema = build_schema_model(source_class(schema_text, name=str(schema_path)))

    return compile_document(schema, QueryDocument(document_node), query_text, options)
