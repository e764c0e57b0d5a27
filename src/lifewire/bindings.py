from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from types import MappingProxyType

from lifewire.attributes import (
    ANY_QUALIFIER,
    INTERCEPTION_SPECIFICATION,
    Attributes,
    find_attributes,
)
from lifewire.bean import AttributedType, Id, ReferencesSelector
from lifewire.interceptor import Interceptor
from lifewire.introspection import Executable, Introspector, ReflectiveIntrospector
from lifewire.stores import BindingsByExecutable, InterceptionStore

logger = logging.getLogger(__name__)

_NO_BINDINGS: BindingsByExecutable = MappingProxyType({})


class InterceptionBindingResolver:
    """Compute which interceptor bindings apply to each declared constructor and method.

    Bindings are a function of the static type declaration only, so results
    are cached per ``Id`` in the store and never recomputed.
    """

    def __init__(
        self,
        store: InterceptionStore,
        introspector: Introspector | None = None,
    ) -> None:
        self._store = store
        self._introspector = introspector if introspector is not None else ReflectiveIntrospector()

    def resolve(self, id_: Id) -> BindingsByExecutable:
        """Return the bindings of every executable of ``id_`` that has any.

        An empty mapping means no interception is possible for ``id_``.

        Args:
            id_: Identity carrying the static type and the interception specification.

        """
        return self._store.bindings(id_, self._compute)

    def _compute(self, id_: Id) -> BindingsByExecutable:
        specification = find_attributes(id_.attributes, INTERCEPTION_SPECIFICATION)
        if specification is None or not specification.values:
            return _NO_BINDINGS
        executables = self._introspector.executables(id_.static_type)
        if not executables:
            return _NO_BINDINGS
        return bindings_by_executable(specification, executables)


def bindings_by_executable(
    specification: Attributes,
    executables: Sequence[Executable],
) -> BindingsByExecutable:
    """Look up each executable's canonical signature in an interception specification.

    A single ``Attributes`` value binds one binding; a tuple or list binds all
    of its members. Executables without an entry are omitted.

    Args:
        specification: The ``InterceptionSpecification`` attribute.
        executables: Declared constructors and methods, in declaration order.

    """
    found: dict[Executable, frozenset[Attributes]] = {}
    for executable in executables:
        value = specification.values.get(executable.signature)
        if isinstance(value, Attributes):
            found[executable] = frozenset((value,))
        elif isinstance(value, (tuple, list)):
            bindings = frozenset(item for item in value if isinstance(item, Attributes))
            if bindings:
                found[executable] = bindings
    if not found:
        return _NO_BINDINGS
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Resolved interceptor bindings: %s",
            ", ".join(f"{executable!r} -> {sorted(map(repr, bindings))}" for executable, bindings in found.items()),
        )
    return MappingProxyType(found)


def interceptors(
    bindings: Iterable[Attributes],
    references: ReferencesSelector,
) -> Iterable[Interceptor]:
    """Look up the interceptors selected by a set of interceptor bindings.

    The query is qualified by the bindings plus ``ANY_QUALIFIER``, so
    interceptors registered without narrowing bindings participate too. An
    empty binding set performs no lookup.

    Args:
        bindings: Interceptor bindings of one executable.
        references: Reference resolution capability of the container.

    """
    ordered = sorted(set(bindings), key=_binding_sort_key)
    if not ordered:
        return ()
    return references.references(AttributedType(Interceptor, (*ordered, ANY_QUALIFIER)))


def _binding_sort_key(binding: Attributes) -> tuple[str, str]:
    return binding.name, repr(binding)

