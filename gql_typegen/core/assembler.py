"""Module assembler.

Gathers the synthesized definitions of every compiled operation of a
document into one ``CompiledModule``:

    primitives, scalars, input objects, enums, fragments,
    nested response shapes, variables, response data

When the document defines several operations, each one becomes a sibling
namespace and its top-level types are prefixed with the operation name.
"""

from .naming import module_name
from .output import (
    CompiledModule,
    OperationBinding,
    OperationNamespace,
    SharedDefinitions,
    Visibility,
)
from .query import Operation
from .resolver import ResolvedShape, SelectionResolver
from .synthesizer import TypeSynthesizer


def response_type_name(operation: Operation, multiple_operations: bool) -> str:
    return f"{operation.name}ResponseData" if multiple_operations else "ResponseData"


def variables_type_name(operation: Operation, multiple_operations: bool) -> str:
    return f"{operation.name}Variables" if multiple_operations else "Variables"


class ModuleAssembler:
    """Assembles the output module of one compilation."""

    def __init__(self, resolver: SelectionResolver, synthesizer: TypeSynthesizer):
        self.resolver = resolver
        self.synthesizer = synthesizer
        self.context = synthesizer.context

    def shared_definitions(self) -> SharedDefinitions:
        """Synthesize every required scalar, input object, enum and fragment.

        Categories keep schema declaration order; fragments come in the order
        they were first required.
        """
        schema = self.context.schema
        tracker = self.context.tracker
        shared = SharedDefinitions(
            scalars=[
                self.synthesizer.scalar_definition(s)
                for s in schema.scalars.values()
                if tracker.is_required(s.name)
            ],
            inputs=[
                self.synthesizer.input_definition(i)
                for i in schema.inputs.values()
                if tracker.is_required(i.name)
            ],
            enums=[
                self.synthesizer.enum_definition(e)
                for e in schema.enums.values()
                if tracker.is_required(e.name)
            ],
        )
        for name, shape in self.resolver.fragment_shapes.items():
            if tracker.is_fragment_required(name):
                shared.fragments.extend(self.synthesizer.shape_definitions(shape, role="fragment"))
        return shared

    def operation_namespace(
        self,
        operation: Operation,
        shape: ResolvedShape,
        query: str,
        multiple_operations: bool,
    ) -> OperationNamespace:
        definitions = self.synthesizer.shape_definitions(shape)
        response = definitions.pop()
        variables = self.synthesizer.variables_definition(
            operation, variables_type_name(operation, multiple_operations)
        )
        return OperationNamespace(
            name=module_name(operation.name),
            binding=OperationBinding(
                operation_name=operation.name,
                operation_type=operation.operation_type,
                variables_type=variables.name,
                response_type=response.name,
                query=query,
            ),
            shapes=definitions,
            variables=variables,
            response=response,
        )

    def assemble(
        self,
        name: str,
        query: str,
        visibility: Visibility,
        resolved: list[tuple[Operation, ResolvedShape]],
    ) -> CompiledModule:
        """Build the module from every resolved operation of the document."""
        multiple = len(resolved) > 1
        return CompiledModule(
            name=name,
            query=query,
            visibility=visibility,
            shared=self.shared_definitions(),
            operations=[
                self.operation_namespace(operation, shape, query, multiple)
                for operation, shape in resolved
            ],
        )
