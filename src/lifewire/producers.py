from __future__ import annotations

import inspect
from abc import abstractmethod
from collections.abc import Callable, Sequence
from inspect import Parameter
from typing import Annotated, Any, Generic, TypeVar, get_args, get_origin, get_type_hints

from lifewire.attributes import Attributes
from lifewire.bean import (
    Aggregate,
    Assignment,
    AttributedElement,
    AttributedType,
    Creation,
    Destruction,
    Id,
)
from lifewire.exceptions import (
    LifewireDisposalError,
    LifewireError,
    LifewireInvalidArgumentError,
)

I = TypeVar("I")  # noqa: E741

_MISSING_ANNOTATION: Any = object()
_IMPLICIT_FIRST_PARAMETER_NAMES = {"self", "cls"}


class Producer(Aggregate, Generic[I]):
    """Produce, and later dispose of, contextual instances.

    A producer declares two immutable, ordered dependency lists: production
    dependencies feed the construction itself, initialization dependencies are
    consumed right after it. ``dependencies`` is their ordered union,
    production dependencies first.
    """

    @abstractmethod
    def production_dependencies(self) -> Sequence[AttributedElement]:
        """Return the dependencies needed to construct an instance, in declared order."""

    @abstractmethod
    def initialization_dependencies(self) -> Sequence[AttributedElement]:
        """Return the dependencies consumed after construction, in declared order."""

    def dependencies(self) -> Sequence[AttributedElement]:
        production_dependencies = self.production_dependencies()
        initialization_dependencies = self.initialization_dependencies()
        if not production_dependencies:
            return initialization_dependencies
        if not initialization_dependencies:
            return production_dependencies
        return tuple(dict.fromkeys((*production_dependencies, *initialization_dependencies)))

    def produce(self, creation: Creation) -> I:
        """Produce an instance for ``creation``, resolving dependencies through it.

        Args:
            creation: Creation request supplying the identity and references.

        """
        return self.produce_assigned(creation.id, self.assign(creation.reference))

    @abstractmethod
    def produce_assigned(self, id_: Id, assignments: Sequence[Assignment]) -> I:
        """Produce an instance from already resolved dependency assignments.

        Args:
            id_: Identity of the production request.
            assignments: Production assignments followed by initialization
                assignments, each in declared order.

        """

    def dispose(self, instance: I, destruction: Destruction) -> None:
        """Dispose of ``instance``; closes it when it exposes ``close()``.

        Args:
            instance: Instance previously returned by ``produce``.
            destruction: Token correlating the instance with its creation.

        Raises:
            LifewireDisposalError: If ``close()`` raises an ``Exception`` that
                is not already a lifewire error.

        """
        close = getattr(instance, "close", None)
        if not callable(close):
            return
        try:
            close()
        except LifewireError:
            raise
        except Exception as error:
            msg = f"Failed to close {type(instance).__qualname__}: {error}"
            raise LifewireDisposalError(msg) from error


class DelegatingProducer(Producer[I]):
    """Forward every producer operation to a delegate."""

    def __init__(self, delegate: Producer[I]) -> None:
        if delegate is None:
            msg = "A delegate producer is required."
            raise LifewireInvalidArgumentError(msg)
        self._delegate = delegate

    @property
    def delegate(self) -> Producer[I]:
        return self._delegate

    def assign(self, resolve: Callable[[AttributedType], Any]) -> tuple[Assignment, ...]:
        return self._delegate.assign(resolve)

    def dependencies(self) -> Sequence[AttributedElement]:
        return self._delegate.dependencies()

    def dispose(self, instance: I, destruction: Destruction) -> None:
        self._delegate.dispose(instance, destruction)

    def initialization_dependencies(self) -> Sequence[AttributedElement]:
        return self._delegate.initialization_dependencies()

    def produce(self, creation: Creation) -> I:
        return self._delegate.produce(creation)

    def produce_assigned(self, id_: Id, assignments: Sequence[Assignment]) -> I:
        return self._delegate.produce_assigned(id_, assignments)

    def production_dependencies(self) -> Sequence[AttributedElement]:
        return self._delegate.production_dependencies()


class CallableProducer(Producer[I]):
    """Produce instances by calling a factory, typically the class itself.

    Assignments are matched to dependencies by element, so an element declared
    in both lists needs a single assignment. Production values are passed to
    the factory positionally, in declared order. Each initialization value is
    then set on the instance as an attribute named after its element.

    Examples:
        .. code-block:: python

            producer = CallableProducer(
                Widget,
                production_dependencies=DependenciesExtractor().extract(Widget),
            )

    """

    def __init__(
        self,
        factory: Callable[..., I],
        *,
        production_dependencies: Sequence[AttributedElement] = (),
        initialization_dependencies: Sequence[AttributedElement] = (),
    ) -> None:
        if factory is None:
            msg = "A factory is required."
            raise LifewireInvalidArgumentError(msg)
        self._factory = factory
        self._production_dependencies = tuple(production_dependencies)
        self._initialization_dependencies = tuple(initialization_dependencies)

    def production_dependencies(self) -> Sequence[AttributedElement]:
        return self._production_dependencies

    def initialization_dependencies(self) -> Sequence[AttributedElement]:
        return self._initialization_dependencies

    def produce_assigned(self, id_: Id, assignments: Sequence[Assignment]) -> I:
        values = {assignment.element: assignment.value for assignment in assignments}
        missing = [element.name for element in self.dependencies() if element not in values]
        if missing:
            msg = f"Producer for {id_!r} is missing assignment(s) for: {', '.join(missing)}."
            raise LifewireInvalidArgumentError(msg)
        instance = self._factory(*(values[element] for element in self._production_dependencies))
        for element in self._initialization_dependencies:
            setattr(instance, element.name, values[element])
        return instance


class DependenciesExtractor:
    """Extract attributed elements from the annotated parameters of a callable.

    ``Annotated`` metadata that are ``Attributes`` become qualifiers of the
    element's attributed type. Parameters with defaults and variadic
    parameters are skipped; a required parameter without a usable annotation
    is an error.
    """

    def extract(self, provider: Callable[..., Any]) -> tuple[AttributedElement, ...]:
        """Return the dependency slots of ``provider`` in declaration order.

        Args:
            provider: Class or callable whose parameters describe its dependencies.

        """
        provider_name = getattr(provider, "__qualname__", repr(provider))
        annotations, annotation_error = self._resolved_type_hints(provider)
        elements: list[AttributedElement] = []

        for parameter in self._provider_parameters(provider):
            if not self._is_required_parameter(parameter):
                continue
            annotation = self._resolve_parameter_annotation(
                parameter=parameter,
                annotations=annotations,
                annotation_error=annotation_error,
                provider_name=provider_name,
            )
            elements.append(
                AttributedElement(
                    name=parameter.name,
                    attributed_type=self._attributed_type(annotation),
                ),
            )

        return tuple(elements)

    def _attributed_type(self, annotation: Any) -> AttributedType:
        if get_origin(annotation) is not Annotated:
            return AttributedType(annotation)
        inner, *metadata = get_args(annotation)
        qualifiers = tuple(item for item in metadata if isinstance(item, Attributes))
        return AttributedType(inner, qualifiers)

    def _resolve_parameter_annotation(
        self,
        *,
        parameter: Parameter,
        annotations: dict[str, Any],
        annotation_error: Exception | None,
        provider_name: str,
    ) -> Any:
        annotation = annotations.get(parameter.name, _MISSING_ANNOTATION)
        if annotation is not _MISSING_ANNOTATION:
            return annotation

        raw_annotation = parameter.annotation
        if raw_annotation is not Parameter.empty and not isinstance(raw_annotation, str):
            return raw_annotation

        error_message = (
            f"Unable to infer dependency for required parameter '{parameter.name}' "
            f"in provider '{provider_name}'. Add a type annotation or pass explicit dependencies."
        )
        if annotation_error is None:
            raise LifewireInvalidArgumentError(error_message)
        msg = f"{error_message} Original annotation error: {annotation_error}"
        raise LifewireInvalidArgumentError(msg) from annotation_error

    def _provider_parameters(self, provider: Callable[..., Any]) -> tuple[Parameter, ...]:
        parameters = tuple(inspect.signature(provider).parameters.values())
        if parameters and parameters[0].name in _IMPLICIT_FIRST_PARAMETER_NAMES:
            return parameters[1:]
        return parameters

    def _resolved_type_hints(
        self,
        provider: Callable[..., Any],
    ) -> tuple[dict[str, Any], Exception | None]:
        target = provider.__init__ if inspect.isclass(provider) else provider  # type: ignore[misc]
        try:
            return get_type_hints(target, include_extras=True), None
        except (AttributeError, NameError, TypeError) as error:
            return {}, error

    def _is_required_parameter(self, parameter: Parameter) -> bool:
        return (
            parameter.default is Parameter.empty
            and parameter.kind is not Parameter.VAR_POSITIONAL
            and parameter.kind is not Parameter.VAR_KEYWORD
        )
