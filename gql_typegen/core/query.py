"""Query document model.

Converts a graphql-core ``DocumentNode`` into operations, fragments and
selection trees that the resolver walks.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLSyntaxError,
    InlineFragmentNode,
    OperationDefinitionNode,
    SelectionSetNode,
    parse,
    value_from_ast_untyped,
)

from .errors import QuerySyntaxError
from .field_type import FieldType, from_type_node

logger = logging.getLogger(__name__)


@dataclass
class SelectedField:
    """A field selection, e.g. ``kittens: offsprings { pawsCount }``."""
    name: str
    alias: str | None = None
    selection: list["SelectionItem"] = field(default_factory=list)

    @property
    def output_name(self) -> str:
        return self.alias or self.name


@dataclass
class FragmentSpread:
    """A named fragment spread, ``...CatParts``."""
    fragment_name: str


@dataclass
class InlineFragment:
    """An inline fragment, ``... on Dog { barks }``."""
    type_condition: str | None
    selection: list["SelectionItem"] = field(default_factory=list)


SelectionItem = Union[SelectedField, FragmentSpread, InlineFragment]
Selection = list[SelectionItem]


@dataclass
class VariableDefinition:
    name: str
    type: FieldType
    default_value: Any = None


@dataclass
class Operation:
    """A query, mutation or subscription defined in the document."""
    name: str
    operation_type: str  # 'query', 'mutation' or 'subscription'
    variables: list[VariableDefinition]
    selection: Selection

    @property
    def is_subscription(self) -> bool:
        return self.operation_type == "subscription"


@dataclass
class Fragment:
    """A named fragment and the type it is declared on."""
    name: str
    on: str
    selection: Selection


def selection_from_node(node: SelectionSetNode | None) -> Selection:
    """Convert a graphql-core selection set into selection items."""
    items: Selection = []
    if node is None:
        return items
    for selection in node.selections:
        if isinstance(selection, FieldNode):
            items.append(
                SelectedField(
                    name=selection.name.value,
                    alias=selection.alias.value if selection.alias else None,
                    selection=selection_from_node(selection.selection_set),
                )
            )
        elif isinstance(selection, FragmentSpreadNode):
            items.append(FragmentSpread(fragment_name=selection.name.value))
        elif isinstance(selection, InlineFragmentNode):
            items.append(
                InlineFragment(
                    type_condition=(
                        selection.type_condition.name.value
                        if selection.type_condition
                        else None
                    ),
                    selection=selection_from_node(selection.selection_set),
                )
            )
    return items


def _operation_from_node(node: OperationDefinitionNode) -> Operation:
    operation_type = node.operation.value
    return Operation(
        # Anonymous operations are named after their kind
        name=node.name.value if node.name else operation_type.capitalize(),
        operation_type=operation_type,
        variables=[
            VariableDefinition(
                name=var.variable.name.value,
                type=from_type_node(var.type),
                default_value=(
                    value_from_ast_untyped(var.default_value)
                    if var.default_value
                    else None
                ),
            )
            for var in node.variable_definitions or ()
        ],
        selection=selection_from_node(node.selection_set),
    )


class QueryDocument:
    """Operations and fragments of one parsed query document."""

    def __init__(self, document: DocumentNode):
        self.operations: list[Operation] = []
        self.fragments: dict[str, Fragment] = {}

        for definition in document.definitions:
            if isinstance(definition, OperationDefinitionNode):
                self.operations.append(_operation_from_node(definition))
            elif isinstance(definition, FragmentDefinitionNode):
                self.fragments[definition.name.value] = Fragment(
                    name=definition.name.value,
                    on=definition.type_condition.name.value,
                    selection=selection_from_node(definition.selection_set),
                )

    @classmethod
    def from_source(cls, text: str, name: str = "<query>") -> "QueryDocument":
        return cls(parse_query(text, name))

    def select_operation(self, name: str | None) -> Operation | None:
        """Return the operation called ``name``, or the first one as a fallback.

        Returns None only when the document has no operations.
        """
        if name is not None:
            for operation in self.operations:
                if operation.name == name:
                    return operation
        return self.operations[0] if self.operations else None

    def operations_to_compile(self, name: str | None) -> list[Operation]:
        """Return the operations a module is generated for.

        A matching ``name`` selects that operation alone; no name, or a name
        matching none of them, selects every operation in the document.
        """
        if name is not None:
            for operation in self.operations:
                if operation.name == name:
                    return [operation]
            logger.debug("No operation named %r, compiling all operations", name)
        return list(self.operations)


def parse_query(text: str, name: str = "<query>") -> DocumentNode:
    try:
        return parse(text, no_location=True)
    except GraphQLSyntaxError as e:
        raise QuerySyntaxError(f"Could not parse query {name}: {e.message}") from e
