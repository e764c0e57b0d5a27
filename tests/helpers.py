"""Test doubles standing in for the surrounding bean container."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from lifewire.attributes import ANY_QUALIFIER, Attributes, interception_specification
from lifewire.bean import AttributedType, Id
from lifewire.interceptor import Interceptor
from lifewire.introspection import Executable, ReflectiveIntrospector


class RecordingReferences:
    """In-memory reference selector that records every lookup."""

    def __init__(self) -> None:
        self.values: dict[AttributedType, Any] = {}
        self.interceptors: list[tuple[Interceptor, frozenset[Attributes]]] = []
        self.reference_queries: list[AttributedType] = []
        self.references_queries: list[AttributedType] = []

    def add_value(self, attributed_type: AttributedType, value: Any) -> None:
        self.values[attributed_type] = value

    def add_interceptor(self, interceptor: Interceptor, *bindings: Attributes) -> None:
        self.interceptors.append((interceptor, frozenset((*bindings, ANY_QUALIFIER))))

    def reference(self, attributed_type: AttributedType) -> Any:
        self.reference_queries.append(attributed_type)
        try:
            return self.values[attributed_type]
        except KeyError:
            msg = f"No reference registered for {attributed_type!r}"
            raise LookupError(msg) from None

    def references(self, attributed_type: AttributedType) -> Iterable[Any]:
        self.references_queries.append(attributed_type)
        requested = frozenset(attributed_type.qualifiers)
        return [
            interceptor
            for interceptor, qualifiers in self.interceptors
            if isinstance(interceptor, attributed_type.type) and qualifiers <= requested
        ]


class CountingIntrospector(ReflectiveIntrospector):
    """Reflective introspector that counts how often it is asked."""

    def __init__(self) -> None:
        self.calls = 0

    def executables(self, static_type: Any) -> Sequence[Executable]:
        self.calls += 1
        return super().executables(static_type)


def make_id(static_type: type[Any], bindings_by_signature: dict[str, Any] | None = None) -> Id:
    if bindings_by_signature is None:
        return Id(types=(static_type,))
    return Id(
        types=(static_type,),
        attributes=(interception_specification(bindings_by_signature),),
    )
