from __future__ import annotations

import builtins
import inspect
import types
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from inspect import Parameter
from typing import Annotated, Any, Protocol, TypeVar, Union, get_args, get_origin, get_type_hints

_CONSTRUCTOR_NAMES = ("__new__", "__init__")
_BUILTINS_MODULE = builtins.__name__


class ExecutableKind(Enum):
    """Distinguish constructors from ordinary methods."""

    CONSTRUCTOR = auto()
    METHOD = auto()


@dataclass(frozen=True, slots=True)
class Executable:
    """Describe a constructor or method declared directly in a class body.

    ``parameter_types`` holds canonical type names (see ``canonical_name``) in
    declaration order, without the implicit ``self``/``cls`` parameter.
    """

    owner: type[Any]
    name: str
    kind: ExecutableKind
    parameter_types: tuple[str, ...] = ()

    @property
    def signature(self) -> str:
        """Render the lookup key used by interception specifications, e.g. ``frob(str[], int)``."""
        return f"{self.name}({', '.join(self.parameter_types)})"

    @property
    def is_constructor(self) -> bool:
        return self.kind is ExecutableKind.CONSTRUCTOR

    def __repr__(self) -> str:
        return f"{self.owner.__qualname__}.{self.signature}"


class Introspector(Protocol):
    """Enumerate the constructors and methods a type declares."""

    def executables(self, static_type: Any) -> Sequence[Executable]:
        """Return declared constructors and methods in declaration order."""
        ...


class ReflectiveIntrospector:
    """Introspect classes at runtime through ``inspect`` and ``typing``.

    Only members defined in the class body itself are reported; inherited
    members belong to the class that declares them. ``__new__`` and
    ``__init__`` are constructors, every other function, ``staticmethod`` or
    ``classmethod`` is a method. Anything that is not a class declares nothing.
    """

    def executables(self, static_type: Any) -> Sequence[Executable]:
        if not inspect.isclass(static_type):
            return ()

        executables: list[Executable] = []
        for name, member in vars(static_type).items():
            function, skip_first_parameter = self._unwrap_member(name, member)
            if function is None:
                continue
            kind = ExecutableKind.CONSTRUCTOR if name in _CONSTRUCTOR_NAMES else ExecutableKind.METHOD
            executables.append(
                Executable(
                    owner=static_type,
                    name=name,
                    kind=kind,
                    parameter_types=self._parameter_types(
                        function,
                        skip_first_parameter=skip_first_parameter,
                    ),
                ),
            )
        return tuple(executables)

    def _unwrap_member(
        self,
        name: str,
        member: object,
    ) -> tuple[Callable[..., Any] | None, bool]:
        if isinstance(member, staticmethod):
            # __new__ is stored as a staticmethod but still receives cls
            return member.__func__, name == "__new__"
        if isinstance(member, classmethod):
            return member.__func__, True
        if inspect.isfunction(member):
            return member, True
        return None, False

    def _parameter_types(
        self,
        function: Callable[..., Any],
        *,
        skip_first_parameter: bool,
    ) -> tuple[str, ...]:
        try:
            parameters = tuple(inspect.signature(function).parameters.values())
        except (TypeError, ValueError):
            return ()
        if skip_first_parameter and parameters:
            parameters = parameters[1:]

        annotations = self._resolved_type_hints(function)
        names: list[str] = []
        for parameter in parameters:
            annotation = annotations.get(parameter.name, parameter.annotation)
            name = canonical_name(annotation)
            if parameter.kind is Parameter.VAR_POSITIONAL:
                name = f"{name}[]"
            elif parameter.kind is Parameter.VAR_KEYWORD:
                name = f"**{name}"
            names.append(name)
        return tuple(names)

    def _resolved_type_hints(self, function: Callable[..., Any]) -> dict[str, Any]:
        try:
            return get_type_hints(function, include_extras=True)
        except (AttributeError, NameError, TypeError):
            # Unresolvable forward references fall back to the raw annotations.
            return {}


def canonical_name(annotation: Any) -> str:
    """Return the canonical name of a parameter annotation.

    Builtins render by bare name (``int``), other classes by
    ``module.qualname``. ``TypeVar`` renders as its bound (or first constraint,
    or ``object``), ``Annotated[T, ...]`` as ``T``, a parameterized generic as
    its erased origin, a union as its members joined by `` | ``. A missing
    annotation or ``Any`` renders as ``object``; unresolved string annotations
    render as written.

    Args:
        annotation: Parameter annotation to render.

    """
    if annotation is Parameter.empty or annotation is Any or annotation is object:
        return "object"
    if annotation is None or annotation is type(None):
        return "None"
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, TypeVar):
        if annotation.__bound__ is not None:
            return canonical_name(annotation.__bound__)
        if annotation.__constraints__:
            return canonical_name(annotation.__constraints__[0])
        return "object"

    origin = get_origin(annotation)
    if origin is Annotated:
        return canonical_name(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        return " | ".join(canonical_name(argument) for argument in get_args(annotation))
    if origin is not None:
        return canonical_name(origin)

    if isinstance(annotation, type):
        if annotation.__module__ == _BUILTINS_MODULE:
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"
    return repr(annotation)
