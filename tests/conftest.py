"""Shared fixtures for gql-typegen tests."""

from pathlib import Path

import pytest

from gql_typegen.core.compiler import CompileOptions, compile_document
from gql_typegen.core.context import QueryContext
from gql_typegen.core.parser import SDLSource, build_schema_model
from gql_typegen.core.query import QueryDocument
from gql_typegen.core.resolver import SelectionResolver
from gql_typegen.core.synthesizer import TypeSynthesizer

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def schema():
    """The animal schema shared by most tests."""
    text = (DATA_DIR / "schema.graphql").read_text()
    return build_schema_model(SDLSource(text, name="schema.graphql"))


@pytest.fixture
def compile_query(schema):
    """Compile query text against the animal schema."""

    def _compile(query: str, **options):
        document = QueryDocument.from_source(query)
        return compile_document(schema, document, query, CompileOptions(**options))

    return _compile


@pytest.fixture
def make_pipeline(schema):
    """Build a resolver and synthesizer sharing one context."""

    def _make(query: str, **context_options):
        document = QueryDocument.from_source(query)
        context = QueryContext(schema, fragments=document.fragments, **context_options)
        return document, SelectionResolver(context), TypeSynthesizer(context)

    return _make
