"""Command-line interface for gql-typegen."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from .core.compiler import CompileOptions, compile_files
from .core.deprecation import DeprecationStrategy
from .core.errors import TypegenError
from .core.generator import CodeGenerator
from .core.hooks import AddHeaderHook, HookRunner
from .core.output import Visibility


def configure_logging(verbose: bool):
    """Send the library's log records to the console when verbose."""
    logger = logging.getLogger("gql_typegen")
    if not verbose or logger.handlers:
        return
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


@click.group()
@click.version_option(package_name="gql-typegen")
def main():
    """GraphQL query type generator for Python.

    Generate typed pydantic models from GraphQL query documents.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the GraphQL schema (.graphql/.gql/.graphqls SDL or .json introspection).",
)
@click.option(
    "--query",
    "-q",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the query document.",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(file_okay=False),
    help="Output directory for generated code.",
)
@click.option(
    "--operation-name",
    "-n",
    default=None,
    help="Operation to generate; all operations of the document when omitted or not found.",
)
@click.option(
    "--module-name",
    "-m",
    default=None,
    help="Name of the generated module (default: the snake-cased operation name).",
)
@click.option(
    "--derives",
    "-d",
    default=None,
    help="Comma-separated extra derives for the generated types (e.g. Frozen,Strict).",
)
@click.option(
    "--deprecation-strategy",
    type=click.Choice([s.value for s in DeprecationStrategy], case_sensitive=False),
    default=DeprecationStrategy.WARN.value,
    show_default=True,
    help="How to handle deprecated fields.",
)
@click.option(
    "--visibility",
    type=click.Choice([v.value for v in Visibility], case_sensitive=False),
    default=Visibility.PUBLIC.value,
    show_default=True,
    help="Whether the generated names are exported through __all__.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory with Jinja2 templates overriding the built-in ones.",
)
@click.option(
    "--header",
    default=None,
    help="Header prepended to every generated file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str,
    query: str,
    output: str,
    operation_name: str | None,
    module_name: str | None,
    derives: str | None,
    deprecation_strategy: str,
    visibility: str,
    template_dir: str | None,
    header: str | None,
    verbose: bool,
):
    """Generate Python types for the operations of a query document.

    Examples:

        gql-typegen generate --schema ./schema.graphql --query ./cats.graphql --output ./generated

        gql-typegen generate -s ./schema.json -q ./queries.graphql -o ./client -n AllCats

        gql-typegen generate -s ./schema.graphql -q ./cats.graphql -o ./out --derives Frozen
    """
    configure_logging(verbose)
    schema_path = Path(schema).resolve()
    query_path = Path(query).resolve()
    output_path = Path(output).resolve()

    if verbose:
        click.echo(f"Schema: {schema_path}")
        click.echo(f"Query: {query_path}")
        click.echo(f"Output: {output_path}")

    options = CompileOptions(
        operation_name=operation_name,
        module_name=module_name,
        additional_derives=derives,
        deprecation_strategy=DeprecationStrategy.parse(deprecation_strategy),
        visibility=Visibility(visibility.lower()),
    )

    hooks = HookRunner()
    if header:
        hooks.add_post_hook(AddHeaderHook(header))

    try:
        click.echo("Compiling query document...")
        module = compile_files(query_path, schema_path, options)

        if verbose:
            click.echo(f"  Operations: {len(module.operations)}")
            click.echo(f"  Scalars: {len(module.shared.scalars)}")
            click.echo(f"  Inputs: {len(module.shared.inputs)}")
            click.echo(f"  Enums: {len(module.shared.enums)}")
            click.echo(f"  Fragment types: {len(module.shared.fragments)}")

        click.echo("Generating code...")
        generator = CodeGenerator(module, str(output_path), template_dir=template_dir, hooks=hooks)
        written = generator.generate()
    except TypegenError as e:
        raise click.ClickException(e.message) from e

    if verbose:
        for path in written:
            click.echo(f"  Wrote {path}")
    click.echo(f"Done! Generated module {module.name} in {output_path}")


if __name__ == "__main__":
    main()
