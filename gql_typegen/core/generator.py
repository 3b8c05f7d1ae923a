"""Code generator for compiled query modules.

Renders Jinja2 templates to produce Python code from a ``CompiledModule``.
A document with one operation becomes ``<module>.py``; a document with
several becomes a ``<module>/`` package whose ``__init__.py`` holds the query
source and which has one module per operation.

Supports custom templates via the template_dir parameter:
    generator = CodeGenerator(module, output_dir, template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .errors import GenerationError
from .field_type import FieldType, ListType, OptionalType, inner_name, is_optional
from .hooks import HookRunner
from .ir import TYPENAME_FIELD
from .naming import escape_keyword, snake_case
from .output import (
    CompiledModule,
    EnumDefinition,
    FieldDefinition,
    OperationNamespace,
    ScalarDefinition,
    StructDefinition,
    TypeDefinition,
    UnionDefinition,
    Visibility,
)
from .scalars import ScalarRegistry

logger = logging.getLogger(__name__)

PRIMITIVE_PYTHON_TYPES = {"Boolean": "bool", "Float": "float", "Int": "int", "ID": "str"}

# Built-in scalars referenced directly rather than through an alias
BUILTIN_PYTHON_TYPES = {"String": "str"}

# Always imported by the module template
BASE_IMPORTS = {"import enum", "import typing", "import pydantic"}

# Derives every generated pydantic model already provides
IMPLIED_DERIVES = {"Serialize", "Deserialize"}

# Extra derives understood as boolean ``model_config`` flags
CONFIG_FLAGS = {
    "frozen",
    "strict",
    "validate_assignment",
    "validate_default",
    "use_enum_values",
    "str_strip_whitespace",
    "from_attributes",
}


def safe_docstring(text: str) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def safe_comment(text: str) -> str:
    """Make text safe for a single-line Python comment.

    Removes newlines, replaces markdown formatting, and ensures
    the text doesn't cause syntax errors when used as # comment.
    """
    if not text:
        return ""
    # Replace newlines with spaces
    text = text.replace("\n", " ").replace("\r", "")
    # Remove markdown bold/italic markers
    text = text.replace("**", "").replace("*", "")
    # Collapse multiple spaces
    text = re.sub(r"\s+", " ", text)
    # Truncate very long descriptions
    if len(text) > 120:
        text = text[:117] + "..."
    return text.strip()


def python_string(text: str) -> str:
    """Render text as a Python string literal, triple-quoted when possible."""
    if '"""' in text or "\\" in text or text.endswith('"'):
        return repr(text)
    return f'"""{text}"""'


@dataclass
class RenderedField:
    line: str
    comment: Optional[str] = None


@dataclass
class ScalarView:
    name: str
    python_type: str
    description: Optional[str] = None
    kind: str = "scalar"


@dataclass
class EnumMember:
    name: str
    value: str
    comment: Optional[str] = None


@dataclass
class EnumView:
    name: str
    members: List[EnumMember]
    description: Optional[str] = None
    kind: str = "enum"


@dataclass
class StructView:
    name: str
    bases: List[str]
    fields: List[RenderedField]
    config: List[str]
    # Flattened union fields filled from the parent object itself
    lifted: List[str] = field(default_factory=list)
    description: Optional[str] = None
    kind: str = "struct"

    @property
    def validator_name(self) -> str:
        return f"_lift_{snake_case(self.name)}"


@dataclass
class UnionView:
    name: str
    expression: str
    kind: str = "union"


class CodeGenerator:
    """Generates Python code from a compiled query module.

    Supports custom templates via the template_dir parameter.
    Templates in template_dir take precedence over built-in templates.

    Available templates to override:
        - module.py.j2: Types and binding of one operation
        - package_init.py.j2: Package holding the query of several operations

    Example:
        generator = CodeGenerator(
            module=compiled,
            output_dir="./generated",
            template_dir="./my_templates"
        )
        generator.generate()
    """

    def __init__(
        self,
        module: CompiledModule,
        output_dir: str,
        template_dir: Optional[str] = None,
        scalar_registry: Optional[ScalarRegistry] = None,
        hooks: Optional[HookRunner] = None,
    ):
        """Initialize the code generator.

        Args:
            module: The compiled query module
            output_dir: Directory where generated code will be written
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
            scalar_registry: Python types for custom scalars
            hooks: Hooks run before rendering and on each rendered file
        """
        self.module = module
        self.output_dir = output_dir
        self.template_dir = template_dir
        self.scalar_registry = scalar_registry or ScalarRegistry()
        self.hooks = hooks or HookRunner()
        self._ignored_derives: set[str] = set()

        # Build template loader - custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_typegen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        # Register custom filters
        self.env.filters["repr"] = repr
        self.env.filters["safe_docstring"] = safe_docstring
        self.env.filters["safe_comment"] = safe_comment
        self.env.filters["python_string"] = python_string

    def generate(self) -> List[str]:
        """Write all files and return their paths."""
        written = []
        for output_path, content in self.render().items():
            full_path = os.path.join(self.output_dir, output_path)
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, "w") as f:
                f.write(content)
            logger.debug("Wrote %s", full_path)
            written.append(full_path)
        return written

    def render(self) -> Dict[str, str]:
        """Render every file without writing it, keyed by relative path."""
        module = self.hooks.run_pre_hooks(self.module)
        if not module.multiple_operations:
            namespace = module.operations[0]
            return {
                f"{module.name}.py": self._render_file(
                    "module.py.j2",
                    f"{module.name}.py",
                    self._namespace_context(module, namespace, query_from_package=False),
                )
            }

        files = {
            f"{module.name}/__init__.py": self._render_file(
                "package_init.py.j2",
                f"{module.name}/__init__.py",
                {
                    "module": module,
                    "submodules": [ns.name for ns in module.operations],
                    "public": module.visibility is Visibility.PUBLIC,
                },
            )
        }
        for namespace in module.operations:
            output_path = f"{module.name}/{namespace.name}.py"
            files[output_path] = self._render_file(
                "module.py.j2",
                output_path,
                self._namespace_context(module, namespace, query_from_package=True),
            )
        return files

    def _render_file(self, template_name: str, output_path: str, context: Dict[str, Any]) -> str:
        """Render a template, validate it and run the post hooks."""
        template = self.env.get_template(template_name)
        content = template.render(context)

        # Validate Python syntax
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise GenerationError(output_path, template_name, e) from e

        return self.hooks.run_post_hooks(output_path, content)

    def _namespace_context(
        self,
        module: CompiledModule,
        namespace: OperationNamespace,
        query_from_package: bool,
    ) -> Dict[str, Any]:
        definitions = module.definitions_for(namespace)
        by_name = {d.name: d for d in definitions}
        views = [self._view(d, by_name) for d in definitions]

        binding_name = namespace.binding.operation_name
        if binding_name in by_name or binding_name in module.primitives:
            binding_name = f"{binding_name}Operation"

        exports: List[str] = []
        if module.visibility is Visibility.PUBLIC:
            exports = ["QUERY", "OPERATION_NAME", *module.type_names_for(namespace), binding_name]

        scalar_names = [s.name for s in module.shared.scalars]
        return {
            "module": module,
            "namespace": namespace,
            "binding": namespace.binding,
            "binding_name": binding_name,
            "query_from_package": query_from_package,
            "imports": [
                statement
                for statement in self.scalar_registry.imports_for(scalar_names)
                if statement not in BASE_IMPORTS
            ],
            "primitives": [(name, PRIMITIVE_PYTHON_TYPES[name]) for name in module.primitives],
            "definitions": views,
            "models": [v.name for v in views if v.kind == "struct"],
            "exports": exports,
        }

    def _view(self, definition: TypeDefinition, by_name: Dict[str, TypeDefinition]):
        if isinstance(definition, ScalarDefinition):
            return ScalarView(
                name=definition.name,
                python_type=self.scalar_registry.python_type(definition.name),
                description=definition.description,
            )
        if isinstance(definition, EnumDefinition):
            return EnumView(
                name=definition.name,
                members=[
                    EnumMember(
                        name=escape_keyword(value),
                        value=value,
                        comment=definition.variant_descriptions.get(value),
                    )
                    for value in definition.variants
                ],
                description=definition.description,
            )
        if isinstance(definition, UnionDefinition):
            return UnionView(name=definition.name, expression=self.union_expression(definition))
        return self._struct_view(definition, by_name)

    def _struct_view(self, struct: StructDefinition, by_name: Dict[str, TypeDefinition]) -> StructView:
        bases: List[str] = []
        fields: List[RenderedField] = []
        lifted: List[str] = []
        for fdef in struct.fields:
            if fdef.flatten:
                target = by_name.get(inner_name(fdef.type))
                if isinstance(target, StructDefinition):
                    # Fragment fields are inherited
                    bases.append(target.name)
                    continue
                lifted.append(fdef.name)
            fields.append(RenderedField(self.field_line(fdef, struct), fdef.description))

        if struct.tag and not any(f.wire_name == TYPENAME_FIELD for f in struct.fields):
            fields.insert(
                0,
                RenderedField(
                    f"typename: typing.Literal[{struct.tag!r}] = "
                    f"pydantic.Field(alias={TYPENAME_FIELD!r})"
                ),
            )

        return StructView(
            name=struct.name,
            bases=bases or ["pydantic.BaseModel"],
            fields=fields,
            config=self.config_flags(struct.derives),
            lifted=lifted,
            description=struct.description,
        )

    def python_type(self, field_type: FieldType) -> str:
        """Render a field type as a Python annotation."""
        if isinstance(field_type, OptionalType):
            return f"typing.Optional[{self.python_type(field_type.inner)}]"
        if isinstance(field_type, ListType):
            return f"typing.List[{self.python_type(field_type.inner)}]"
        return BUILTIN_PYTHON_TYPES.get(field_type.name, field_type.name)

    def field_line(self, fdef: FieldDefinition, struct: StructDefinition) -> str:
        """Render one model field as ``name: annotation [= pydantic.Field(...)]``."""
        annotation = self.python_type(fdef.type)
        if struct.tag and fdef.wire_name == TYPENAME_FIELD:
            annotation = f"typing.Literal[{struct.tag!r}]"

        args = []
        if fdef.has_default:
            args.append(f"default={fdef.default!r}")
        elif struct.role in ("input", "variables") and is_optional(fdef.type):
            args.append("default=None")
        if fdef.rename:
            args.append(f"alias={fdef.rename!r}")
        if fdef.deprecation:
            reason = fdef.deprecation.reason
            args.append(f"deprecated={reason!r}" if reason else "deprecated=True")

        if not args:
            return f"{fdef.name}: {annotation}"
        return f"{fdef.name}: {annotation} = pydantic.Field({', '.join(args)})"

    @staticmethod
    def union_expression(union: UnionDefinition) -> str:
        """Render a tagged union as a discriminated pydantic union."""
        members = [v.shape for v in union.variants]
        if not members:
            return "typing.Any"
        if len(members) == 1:
            return members[0]
        return (
            f"typing.Annotated[typing.Union[{', '.join(members)}], "
            f"pydantic.Field(discriminator=\"typename\")]"
        )

    def config_flags(self, derives: List[str]) -> List[str]:
        """Map derive names onto ``model_config`` arguments."""
        flags = ["populate_by_name=True"]
        for derive in derives:
            if derive in IMPLIED_DERIVES:
                continue
            flag = snake_case(derive)
            if flag in CONFIG_FLAGS:
                flags.append(f"{flag}=True")
            elif derive not in self._ignored_derives:
                self._ignored_derives.add(derive)
                logger.warning("Derive %s has no pydantic equivalent, ignoring it", derive)
        return flags
