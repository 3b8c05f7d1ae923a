"""Selection resolver.

Walks a selection tree against the schema model, resolving each selected
field to its schema definition and producing a tree of resolved shapes: the
shape of the response data. Leaf types and fragments are marked required as
resolution first reaches them.

Nested shapes are named by accumulating a Pascal-cased prefix, so that
``query AllCats { offsprings { ... } }`` yields a nested ``AllCatsOffsprings``.
"""

import logging
from dataclasses import dataclass, field
from typing import Union

from .context import QueryContext
from .errors import (
    MissingTypenameError,
    UnknownFieldError,
    UnknownFragmentError,
    UnknownTypeError,
    UnsupportedSelectionError,
)
from .field_type import FieldType, inner_name, rename_inner
from .ir import TYPENAME_FIELD, IRField, IRInterface, IRObject, IRUnion
from .naming import nested_type_name
from .query import (
    Fragment,
    FragmentSpread,
    InlineFragment,
    Operation,
    SelectedField,
    Selection,
)

logger = logging.getLogger(__name__)

MULTIPLE_SUBSCRIPTION_FIELDS_ERROR = (
    "Multiple-field queries on the root subscription field are forbidden by GraphQL validation. "
    "See: https://github.com/facebook/graphql/blob/master/spec/Section%205%20--%20Validation.md"
    "#subscription-operation-definitions"
)


@dataclass
class ResolvedField:
    """A selected field matched against its schema definition."""
    output_name: str  # Alias if present, else the field name
    schema_field: IRField
    # The schema type with composite inner types replaced by the shape name
    type: FieldType
    shape: "ResolvedShape | None" = None


@dataclass
class ResolvedSpread:
    """A fragment spread, flattened into the enclosing shape."""
    fragment_name: str


ResolvedItem = Union[ResolvedField, ResolvedSpread]


@dataclass
class ResolvedVariant:
    """One concrete type of a polymorphic shape."""
    type_name: str
    shape_name: str
    items: list[ResolvedItem] = field(default_factory=list)


@dataclass
class ResolvedShape:
    """An object-shaped selection against an object, interface or union."""
    name: str
    type_name: str
    kind: str  # 'object', 'interface' or 'union'
    items: list[ResolvedItem] = field(default_factory=list)
    variants: list[ResolvedVariant] = field(default_factory=list)
    union_name: str | None = None  # Set when the shape is polymorphic

    @property
    def is_polymorphic(self) -> bool:
        return self.union_name is not None


class SelectionResolver:
    """Resolves selections against the schema of a QueryContext."""

    def __init__(self, context: QueryContext):
        self.context = context
        self.schema = context.schema
        # Fragment shapes in the order the fragments were first required
        self.fragment_shapes: dict[str, ResolvedShape] = {}

    def resolve_operation(self, operation: Operation, response_name: str) -> ResolvedShape:
        """Resolve an operation's root selection into the response-data shape.

        Nested shapes are prefixed with the operation name.
        """
        if operation.is_subscription and len(operation.selection) > 1:
            raise UnsupportedSelectionError(MULTIPLE_SUBSCRIPTION_FIELDS_ERROR)

        root_name = self.schema.root_type_name(operation.operation_type)
        root = self.schema.objects.get(root_name)
        if root is None:
            raise UnknownTypeError(root_name, f"{operation.operation_type} root type")

        for variable in operation.variables:
            type_name = inner_name(variable.type)
            if self.schema.lookup(type_name) is None and not self.schema.is_builtin_scalar(type_name):
                raise UnknownTypeError(type_name, f"variable ${variable.name}")
            self.context.tracker.require(type_name)

        logger.debug(
            "Resolving %s %s against %s", operation.operation_type, operation.name, root_name
        )
        return ResolvedShape(
            name=response_name,
            type_name=root.name,
            kind="object",
            items=self.resolve(root, operation.selection, operation.name),
        )

    def resolve(
        self,
        schema_type: IRObject | IRInterface,
        selection: Selection,
        prefix: str,
    ) -> list[ResolvedItem]:
        """Resolve the fields and fragment spreads of a selection on an object type."""
        items: list[ResolvedItem] = []
        for item in selection:
            if isinstance(item, SelectedField):
                items.append(self._resolve_field(schema_type, item, prefix))
            elif isinstance(item, FragmentSpread):
                items.append(self._resolve_spread(item))
            else:
                raise UnsupportedSelectionError(
                    "unimplemented: inline fragment on object field "
                    f"(`... on {item.type_condition}` in {schema_type.name})"
                )
        return items

    def resolve_fragment(self, fragment: Fragment) -> ResolvedShape:
        """Resolve a fragment's selection against the type it is declared on."""
        return self.resolve_shape(fragment.on, fragment.selection, fragment.name)

    def resolve_shape(self, type_name: str, selection: Selection, name: str) -> ResolvedShape:
        """Resolve a selection on a composite type into a shape called ``name``."""
        schema_type = self.schema.lookup(type_name)
        if isinstance(schema_type, IRObject):
            return ResolvedShape(
                name=name,
                type_name=type_name,
                kind="object",
                items=self.resolve(schema_type, selection, name),
            )
        if isinstance(schema_type, IRInterface):
            return self._resolve_interface(schema_type, selection, name)
        if isinstance(schema_type, IRUnion):
            return self._resolve_union(schema_type, selection, name)
        raise UnknownTypeError(type_name, f"selection {name}")

    def _resolve_field(
        self,
        schema_type: IRObject | IRInterface,
        selected: SelectedField,
        prefix: str,
    ) -> ResolvedField:
        schema_field = schema_type.fields.get(selected.name)
        if schema_field is None:
            raise UnknownFieldError(
                selected.name, schema_type.name, list(schema_type.fields)
            )

        output_name = selected.output_name
        type_name = inner_name(schema_field.type)
        if self._is_composite(type_name):
            shape_name = nested_type_name(prefix, output_name)
            shape = self.resolve_shape(type_name, selected.selection, shape_name)
            return ResolvedField(
                output_name=output_name,
                schema_field=schema_field,
                type=rename_inner(schema_field.type, shape_name),
                shape=shape,
            )

        if self.schema.lookup(type_name) is None and not self.schema.is_builtin_scalar(type_name):
            raise UnknownTypeError(type_name, f"field {schema_type.name}.{selected.name}")
        self.context.tracker.require(type_name)
        return ResolvedField(
            output_name=output_name,
            schema_field=schema_field,
            type=schema_field.type,
        )

    def _resolve_spread(self, spread: FragmentSpread) -> ResolvedSpread:
        fragment = self._fragment(spread.fragment_name)
        if self.context.tracker.require_fragment(fragment.name):
            self.fragment_shapes[fragment.name] = self.resolve_fragment(fragment)
        return ResolvedSpread(fragment_name=fragment.name)

    def _fragment(self, name: str) -> Fragment:
        fragment = self.context.fragments.get(name)
        if fragment is None:
            raise UnknownFragmentError(name)
        return fragment

    def _resolve_interface(
        self, iface: IRInterface, selection: Selection, name: str
    ) -> ResolvedShape:
        """Resolve an interface selection.

        Fields and spreads of the interface itself are shared by every
        implementor. Inline fragments (and spreads of fragments declared on
        an implementor) make the shape polymorphic: a union named
        ``{name}On`` tagged by ``__typename`` is flattened into it.
        """
        common: Selection = []
        per_type: dict[str, Selection] = {}
        for item in selection:
            if isinstance(item, InlineFragment):
                condition = item.type_condition or iface.name
                if condition == iface.name:
                    common.extend(item.selection)
                    continue
                if condition not in iface.implemented_by:
                    raise UnknownTypeError(
                        condition, f"inline fragment on interface {iface.name}"
                    )
                per_type.setdefault(condition, []).extend(item.selection)
            elif isinstance(item, FragmentSpread):
                fragment = self._fragment(item.fragment_name)
                if fragment.on in iface.implemented_by:
                    per_type.setdefault(fragment.on, []).append(item)
                else:
                    common.append(item)
            else:
                common.append(item)

        shape = ResolvedShape(
            name=name,
            type_name=iface.name,
            kind="interface",
            items=self.resolve(iface, common, name),
        )
        if not per_type:
            return shape

        if not self._selects_typename(common, iface.name):
            raise MissingTypenameError(iface.name, f"the {name} interface selection")

        union_name = self._union_name(name, common, iface.implemented_by)
        shape.union_name = union_name
        shape.variants = self._variants(union_name, iface.implemented_by, per_type)
        return shape

    def _resolve_union(self, union: IRUnion, selection: Selection, name: str) -> ResolvedShape:
        """Resolve a union selection into a tagged union of its members.

        Fragments declared on the union itself are expanded in place, so
        their inline fragments add to the member variants.
        """
        per_type: dict[str, Selection] = {}
        self._collect_union_selection(union, selection, per_type)

        if not self._selects_typename(selection, union.name):
            raise MissingTypenameError(union.name, f"the {name} union selection")

        return ResolvedShape(
            name=name,
            type_name=union.name,
            kind="union",
            variants=self._variants(f"{name}On", union.members, per_type),
            union_name=name,
        )

    def _collect_union_selection(
        self,
        union: IRUnion,
        selection: Selection,
        per_type: dict[str, Selection],
        expanded: frozenset[str] = frozenset(),
    ) -> None:
        for item in selection:
            if isinstance(item, SelectedField):
                if item.name != TYPENAME_FIELD:
                    raise UnsupportedSelectionError(
                        f"Invalid field selection `{item.name}` on union {union.name}: "
                        "only __typename and fragments are allowed"
                    )
            elif isinstance(item, InlineFragment):
                condition = item.type_condition or union.name
                if condition == union.name:
                    self._collect_union_selection(union, item.selection, per_type, expanded)
                    continue
                if condition not in union.members:
                    raise UnknownTypeError(condition, f"inline fragment on union {union.name}")
                per_type.setdefault(condition, []).extend(item.selection)
            else:
                fragment = self._fragment(item.fragment_name)
                if fragment.on == union.name:
                    if fragment.name in expanded:
                        raise UnsupportedSelectionError(
                            f"Fragment {fragment.name} spreads itself"
                        )
                    self._collect_union_selection(
                        union, fragment.selection, per_type, expanded | {fragment.name}
                    )
                elif fragment.on in union.members:
                    per_type.setdefault(fragment.on, []).append(item)
                else:
                    raise UnsupportedSelectionError(
                        f"Fragment {fragment.name} on {fragment.on} cannot be spread "
                        f"into union {union.name}"
                    )

    def _selects_typename(
        self, selection: Selection, type_name: str, seen: frozenset[str] = frozenset()
    ) -> bool:
        """Whether ``__typename`` is selected on ``type_name`` itself.

        Follows inline fragments and spreads whose condition is the same type.
        """
        for item in selection:
            if isinstance(item, SelectedField):
                if item.name == TYPENAME_FIELD:
                    return True
            elif isinstance(item, InlineFragment):
                if item.type_condition in (None, type_name) and self._selects_typename(
                    item.selection, type_name, seen
                ):
                    return True
            elif item.fragment_name not in seen:
                fragment = self._fragment(item.fragment_name)
                if fragment.on == type_name and self._selects_typename(
                    fragment.selection, type_name, seen | {fragment.name}
                ):
                    return True
        return False

    @staticmethod
    def _union_name(name: str, common: Selection, possible_types: list[str]) -> str:
        """Name the union of an interface shape, avoiding its nested shape names.

        Also keeps the variant names ``{union}{Type}`` clear of them, so that an
        ``on:`` or ``onDog:`` alias does not clash.
        """
        taken = {
            nested_type_name(name, item.output_name)
            for item in common
            if isinstance(item, SelectedField)
        }
        union_name = f"{name}On"
        while union_name in taken or any(f"{union_name}{t}" in taken for t in possible_types):
            union_name += "_"
        return union_name

    def _variants(
        self,
        prefix: str,
        possible_types: list[str],
        per_type: dict[str, Selection],
    ) -> list[ResolvedVariant]:
        """Build one variant per possible type, selected ones first.

        Variant shapes are named ``{prefix}{Type}``, e.g. ``MyQueryPetsOnDog``.
        """
        ordered = list(per_type) + [t for t in possible_types if t not in per_type]

        variants = []
        for type_name in ordered:
            obj = self.schema.objects.get(type_name)
            if obj is None:
                raise UnknownTypeError(type_name, f"possible type of {prefix}")
            shape_name = f"{prefix}{type_name}"
            variants.append(
                ResolvedVariant(
                    type_name=type_name,
                    shape_name=shape_name,
                    items=self.resolve(obj, per_type.get(type_name, []), shape_name),
                )
            )
        return variants

    def _is_composite(self, type_name: str) -> bool:
        return (
            type_name in self.schema.objects
            or type_name in self.schema.interfaces
            or type_name in self.schema.unions
        )
