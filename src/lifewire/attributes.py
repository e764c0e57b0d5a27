from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias

INTERCEPTION_SPECIFICATION = "InterceptionSpecification"
"""Name of the ``Id`` attribute that maps method signatures to interceptor bindings."""


@dataclass(frozen=True, eq=False)
class Attributes:
    """Describe a named static marker such as a qualifier or an interceptor binding.

    Two ``Attributes`` are equal when their names and values are equal. Values
    may hold unhashable members (lists), so hashing only covers the name and
    the value keys.

    Examples:
        .. code-block:: python

            LOGGED = Attributes("Logged")
            RETRIED = Attributes("Retried", {"attempts": 3})

    """

    name: str
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, Attributes):
            return NotImplemented
        return self.name == other.name and dict(self.values) == dict(other.values)

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.values)))

    def __repr__(self) -> str:
        if not self.values:
            return f"@{self.name}"
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.values.items())
        return f"@{self.name}({rendered})"


ANY_QUALIFIER = Attributes("Any")
"""Qualifier matched by every reference, so unnarrowed interceptors still participate."""


BindingsValue: TypeAlias = Attributes | tuple[Attributes, ...] | list[Attributes]


def interception_specification(
    bindings_by_signature: Mapping[str, BindingsValue],
) -> Attributes:
    """Build the interception specification attribute for an ``Id``.

    Args:
        bindings_by_signature: Canonical method signatures such as
            ``"start()"`` or ``"__init__(str, int)"`` mapped to one binding, a
            tuple of bindings, or a list of bindings.

    """
    return Attributes(INTERCEPTION_SPECIFICATION, bindings_by_signature)


def find_attributes(attributes: Sequence[Attributes], name: str) -> Attributes | None:
    """Return the first attribute with the given name, if any.

    Args:
        attributes: Attributes to scan in order.
        name: Attribute name to look for.

    """
    for candidate in attributes:
        if candidate.name == name:
            return candidate
    return None
