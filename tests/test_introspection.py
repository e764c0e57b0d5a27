"""Tests for executable discovery and canonical signatures."""

from __future__ import annotations

from typing import Annotated, Any, Generic, Optional, TypeVar

from lifewire.attributes import Attributes
from lifewire.introspection import (
    Executable,
    ExecutableKind,
    ReflectiveIntrospector,
    canonical_name,
)

T = TypeVar("T")
B = TypeVar("B", bound=int)


class Engine:
    pass


class Car(Generic[T]):
    def __init__(self, engine: Engine, wheels: int) -> None:
        self.engine = engine
        self.wheels = wheels

    def drive(self) -> None:
        pass

    def honk(self, *tones: str) -> None:
        pass

    def configure(self, **options: int) -> None:
        pass

    def load(self, cargo: list[str], owner: Optional[str]) -> None:  # noqa: UP007
        pass

    @staticmethod
    def build(size: int) -> Car[Any]:
        return Car(Engine(), size)

    @classmethod
    def default(cls, tag: Annotated[str, Attributes("Named")]) -> Car[Any]:
        return cls(Engine(), 4)

    def carry(self, item: T, limit: B) -> None:
        pass

    top_speed = 200


class SportsCar(Car[Any]):
    def boost(self) -> None:
        pass


def _signatures(cls: type[Any]) -> dict[str, str]:
    return {executable.name: executable.signature for executable in ReflectiveIntrospector().executables(cls)}


class TestReflectiveIntrospector:
    def test_constructor_signature_uses_canonical_parameter_names(self) -> None:
        assert _signatures(Car)["__init__"] == f"__init__({Engine.__module__}.Engine, int)"

    def test_method_without_parameters(self) -> None:
        assert _signatures(Car)["drive"] == "drive()"

    def test_variadic_parameters(self) -> None:
        """Variadic positionals render as arrays, keyword variadics with a ``**`` prefix."""
        signatures = _signatures(Car)

        assert signatures["honk"] == "honk(str[])"
        assert signatures["configure"] == "configure(**int)"

    def test_generics_are_erased_and_unions_joined(self) -> None:
        assert _signatures(Car)["load"] == "load(list, str | None)"

    def test_static_and_class_methods_skip_implicit_parameters(self) -> None:
        signatures = _signatures(Car)

        assert signatures["build"] == "build(int)"
        assert signatures["default"] == "default(str)"

    def test_type_variables_render_as_their_bounds(self) -> None:
        assert _signatures(Car)["carry"] == "carry(object, int)"

    def test_only_declared_members_are_reported(self) -> None:
        """Inherited methods and plain class attributes are not executables."""
        assert _signatures(SportsCar) == {"boost": "boost()"}
        assert "top_speed" not in _signatures(Car)

    def test_constructor_kind(self) -> None:
        kinds = {executable.name: executable.kind for executable in ReflectiveIntrospector().executables(Car)}

        assert kinds["__init__"] is ExecutableKind.CONSTRUCTOR
        assert kinds["drive"] is ExecutableKind.METHOD

    def test_dunder_new_is_a_constructor_without_cls(self) -> None:
        class Token:
            def __new__(cls, value: int) -> Any:
                return super().__new__(cls)

        (executable,) = ReflectiveIntrospector().executables(Token)

        assert executable.signature == "__new__(int)"
        assert executable.is_constructor

    def test_non_class_declares_nothing(self) -> None:
        assert ReflectiveIntrospector().executables(len) == ()

    def test_unresolvable_annotations_render_as_written(self) -> None:
        class Pending:
            def attach(self, other: MissingType) -> None:  # type: ignore[name-defined]  # noqa: F821
                pass

        (executable,) = ReflectiveIntrospector().executables(Pending)

        assert executable.signature == "attach(MissingType)"

    def test_repr_names_owner(self) -> None:
        executable = Executable(owner=Car, name="drive", kind=ExecutableKind.METHOD)

        assert repr(executable) == "Car.drive()"


class TestCanonicalName:
    def test_builtins_use_bare_names(self) -> None:
        assert canonical_name(int) == "int"
        assert canonical_name(str) == "str"

    def test_missing_and_any_annotations_are_object(self) -> None:
        from inspect import Parameter

        assert canonical_name(Parameter.empty) == "object"
        assert canonical_name(Any) == "object"

    def test_annotated_uses_inner_type(self) -> None:
        assert canonical_name(Annotated[int, "meta"]) == "int"

    def test_pep604_union(self) -> None:
        assert canonical_name(int | None) == "int | None"

    def test_unconstrained_type_variable_is_object(self) -> None:
        assert canonical_name(T) == "object"

    def test_constrained_type_variable_uses_first_constraint(self) -> None:
        assert canonical_name(TypeVar("C", str, bytes)) == "str"
