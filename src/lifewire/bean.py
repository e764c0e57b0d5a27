"""Boundary types shared with the surrounding bean container.

The container owns identities, resolves references and drives requests. This
module only describes those collaborators, plus the small immutable value
types that travel between them and the producers.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from lifewire.attributes import Attributes
from lifewire.exceptions import LifewireInvalidArgumentError


@dataclass(frozen=True, slots=True)
class AttributedType:
    """A type together with the qualifiers that narrow it."""

    type: Any
    qualifiers: tuple[Attributes, ...] = ()


@dataclass(frozen=True, slots=True)
class AttributedElement:
    """A named dependency slot: a constructor parameter or an injection point."""

    name: str
    attributed_type: AttributedType


@dataclass(frozen=True, slots=True)
class Assignment:
    """An attributed element paired with the value resolved for it."""

    element: AttributedElement
    value: Any


@dataclass(frozen=True, slots=True)
class Id:
    """Name the declared types and static attributes of a production request.

    The first entry of ``types`` is the static type whose declared constructors
    and methods are inspected for interceptor bindings.
    """

    types: tuple[Any, ...]
    attributes: tuple[Attributes, ...] = ()

    def __post_init__(self) -> None:
        if not self.types:
            msg = "Id requires at least one type."
            raise LifewireInvalidArgumentError(msg)

    @property
    def static_type(self) -> Any:
        """Return the type whose declaration carries the interceptor bindings."""
        return self.types[0]


@runtime_checkable
class ReferencesSelector(Protocol):
    """Resolve references on behalf of producers and initializers."""

    def reference(self, attributed_type: AttributedType) -> Any:
        """Return the single reference matching ``attributed_type``."""
        ...

    def references(self, attributed_type: AttributedType) -> Iterable[Any]:
        """Return every reference matching ``attributed_type``."""
        ...


class Request(ReferencesSelector, Protocol):
    """A reference selector scoped to one production of an ``Id``."""

    @property
    def id(self) -> Id: ...


Destruction = Hashable
"""Any hashable token correlating an instance with its deferred pre-destroy action."""


class Creation(Request, Protocol):
    """A request to create a contextual instance."""

    @property
    def destruction(self) -> Destruction:
        """Return the token that the matching ``dispose`` call will receive."""
        ...


@dataclass(eq=False)
class ProductionRequest:
    """Concrete creation request that doubles as its own destruction token.

    Equality and hashing are identity based, so each request is a distinct
    token even when two requests share an ``Id``.
    """

    id: Id
    selector: ReferencesSelector

    @property
    def destruction(self) -> ProductionRequest:
        return self

    def reference(self, attributed_type: AttributedType) -> Any:
        return self.selector.reference(attributed_type)

    def references(self, attributed_type: AttributedType) -> Iterable[Any]:
        return self.selector.references(attributed_type)


class Aggregate:
    """Declare dependencies and turn them into assignments."""

    def dependencies(self) -> Sequence[AttributedElement]:
        """Return the dependencies of this aggregate in declared order."""
        return ()

    def assign(self, resolve: Callable[[AttributedType], Any]) -> tuple[Assignment, ...]:
        """Resolve every dependency into an assignment, preserving order.

        Args:
            resolve: Callable returning the value for an attributed type,
                typically ``request.reference``.

        """
        return tuple(
            Assignment(element=element, value=resolve(element.attributed_type))
            for element in self.dependencies()
        )
