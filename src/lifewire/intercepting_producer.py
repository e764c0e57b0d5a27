from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from itertools import chain
from typing import Any, TypeAlias, TypeVar

from lifewire.bean import Assignment, Creation, Destruction
from lifewire.bindings import InterceptionBindingResolver, interceptors
from lifewire.exceptions import (
    LifewireAmbiguousBindingError,
    LifewireDisposalError,
    LifewireError,
    LifewireInvalidArgumentError,
)
from lifewire.interception import InterceptionEngine, InterceptorMethod, Interceptions
from lifewire.interceptor_method_type import COMPOSITION_ORDER, InterceptorMethodType
from lifewire.introspection import Executable, Introspector
from lifewire.producers import DelegatingProducer, Producer
from lifewire.proxy import InterceptionProxier
from lifewire.stores import BindingsByExecutable, InterceptionStore

I = TypeVar("I")  # noqa: E741

logger = logging.getLogger(__name__)

HandlesByExecutable: TypeAlias = Mapping[Executable, Sequence[InterceptorMethod]]
"""Interceptor methods of one phase, per executable they were bound through."""

_Supplier: TypeAlias = Callable[[], Any]


class _TargetHolder:
    """Late-bound target of one lifecycle event chain, written once then read."""

    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value: Any = None

    def get(self) -> Any:
        return self.value


class InterceptingProducer(DelegatingProducer[I]):
    """Apply interception to the instances a delegate producer produces.

    For each production the bindings of the requested type are resolved (once
    per ``Id``), the interceptors they select are looked up through the
    creation request, and their interceptor methods are partitioned by phase.
    Active phases are layered around the delegate in ``COMPOSITION_ORDER``:

    - around-construct replaces plain production with a construction chain
      whose arguments map back onto the production dependencies;
    - around-invoke wraps the instance in an interception proxy;
    - post-construct fires on the (possibly proxied) instance;
    - pre-destroy is registered against the creation's destruction token and
      fired by ``dispose``, at most once.

    Types without bindings, or whose bindings select no interceptor methods,
    are produced by the delegate untouched.
    """

    def __init__(
        self,
        delegate: Producer[I],
        proxier: InterceptionProxier,
        *,
        store: InterceptionStore,
        introspector: Introspector | None = None,
        engine: InterceptionEngine | None = None,
    ) -> None:
        """Initialize the producer.

        Args:
            delegate: Producer performing the actual production and disposal.
            proxier: Builds proxies for around-invoke interception.
            store: Shared store for cached bindings and pending pre-destroy
                actions, owned by the container.
            introspector: Enumerates declared constructors and methods.
                Defaults to ``ReflectiveIntrospector``.
            engine: Builds interceptor chains. Defaults to ``Interceptions``.

        """
        super().__init__(delegate)
        if proxier is None:
            msg = "An interception proxier is required."
            raise LifewireInvalidArgumentError(msg)
        if store is None:
            msg = "An interception store is required."
            raise LifewireInvalidArgumentError(msg)
        self._proxier = proxier
        self._store = store
        self._resolver = InterceptionBindingResolver(store, introspector)
        self._engine = engine if engine is not None else Interceptions()
        self._steps: dict[
            InterceptorMethodType,
            Callable[[_Supplier, HandlesByExecutable, Creation], _Supplier],
        ] = {
            InterceptorMethodType.AROUND_CONSTRUCT: self._around_construct,
            InterceptorMethodType.AROUND_INVOKE: self._around_invoke,
            InterceptorMethodType.POST_CONSTRUCT: self._post_construct,
            InterceptorMethodType.PRE_DESTROY: self._pre_destroy,
        }

    def produce(self, creation: Creation) -> I:
        if creation is None:
            msg = "A creation request is required."
            raise LifewireInvalidArgumentError(msg)

        bindings = self._resolver.resolve(creation.id)
        if not bindings:
            return self._delegate.produce(creation)

        handles_by_type = self._handles_by_type(bindings, creation)
        if not handles_by_type:
            logger.debug("No interceptor methods selected for %r", creation.id)
            return self._delegate.produce(creation)

        supplier: _Supplier = lambda: self._delegate.produce(creation)  # noqa: E731
        for type_ in COMPOSITION_ORDER:
            handles = handles_by_type.get(type_)
            if handles:
                logger.debug("Applying %s interception to %r", type_, creation.id)
                supplier = self._steps[type_](supplier, handles, creation)

        try:
            return supplier()
        except BaseException:
            if InterceptorMethodType.PRE_DESTROY in handles_by_type:
                self._store.pop_pre_destroy(creation.destruction)
            raise

    def dispose(self, instance: I, destruction: Destruction) -> None:
        """Run the pending pre-destroy interception, if any, then dispose via the delegate.

        The pending action is removed before it runs, so disposing of the same
        token again only reaches the delegate.

        Args:
            instance: Instance previously returned by ``produce``.
            destruction: Token of the creation that produced ``instance``.

        Raises:
            LifewireDisposalError: If a pre-destroy interceptor method, or
                closing the instance, raises an ``Exception``.

        """
        if destruction is None:
            msg = "A destruction token is required."
            raise LifewireInvalidArgumentError(msg)

        action = self._store.pop_pre_destroy(destruction)
        if action is None:
            logger.debug("No pending pre-destroy interception for %r", destruction)
        else:
            try:
                action(instance, destruction)
            except LifewireError:
                raise
            except Exception as error:
                msg = f"Pre-destroy interception failed for {type(instance).__qualname__}: {error}"
                raise LifewireDisposalError(msg) from error
        super().dispose(instance, destruction)

    def _handles_by_type(
        self,
        bindings: BindingsByExecutable,
        creation: Creation,
    ) -> dict[InterceptorMethodType, dict[Executable, list[InterceptorMethod]]]:
        handles_by_type: dict[InterceptorMethodType, dict[Executable, list[InterceptorMethod]]] = {}
        for executable, executable_bindings in bindings.items():
            for interceptor in interceptors(executable_bindings, creation):
                for type_ in COMPOSITION_ORDER:
                    if not _applies_to(type_, executable):
                        continue
                    methods = interceptor.interceptor_methods(type_)
                    if methods:
                        handles_by_type.setdefault(type_, {}).setdefault(executable, []).extend(methods)
        return handles_by_type

    def _around_construct(
        self,
        _supplier: _Supplier,
        handles: HandlesByExecutable,
        creation: Creation,
    ) -> _Supplier:
        if len(handles) > 1:
            constructors = ", ".join(repr(executable) for executable in handles)
            msg = f"Only one constructor may be bound to around-construct interceptors, found: {constructors}."
            raise LifewireAmbiguousBindingError(msg)
        (interceptor_methods,) = handles.values()

        id_ = creation.id
        production_dependencies = tuple(self.production_dependencies())
        initialization_dependencies = tuple(
            element for element in self.initialization_dependencies() if element not in production_dependencies
        )

        def create(arguments: list[Any]) -> Any:
            if len(arguments) != len(production_dependencies):
                msg = (
                    f"Around-construct interceptors for {id_!r} left {len(arguments)} "
                    f"argument(s); {len(production_dependencies)} expected."
                )
                raise LifewireInvalidArgumentError(msg)
            assignments = [
                Assignment(element=element, value=argument)
                for element, argument in zip(production_dependencies, arguments)
            ]
            assignments.extend(
                Assignment(element=element, value=creation.reference(element.attributed_type))
                for element in initialization_dependencies
            )
            return self.produce_assigned(id_, tuple(assignments))

        construct = self._engine.of_construction(interceptor_methods, create)

        def supplier() -> Any:
            return construct([creation.reference(element.attributed_type) for element in production_dependencies])

        return supplier

    def _around_invoke(
        self,
        supplier: _Supplier,
        handles: HandlesByExecutable,
        creation: Creation,
    ) -> _Supplier:
        around_invokes = {executable: tuple(methods) for executable, methods in handles.items()}
        return lambda: self._proxier.interception_proxy(creation.id, supplier, around_invokes)

    def _post_construct(
        self,
        supplier: _Supplier,
        handles: HandlesByExecutable,
        _creation: Creation,
    ) -> _Supplier:
        target = _TargetHolder()
        fire = self._engine.of_lifecycle_event(_lifecycle_methods(handles), target.get)

        def post_constructed() -> Any:
            instance = supplier()
            target.value = instance
            fire()
            return instance

        return post_constructed

    def _pre_destroy(
        self,
        supplier: _Supplier,
        handles: HandlesByExecutable,
        creation: Creation,
    ) -> _Supplier:
        target = _TargetHolder()
        fire = self._engine.of_lifecycle_event(_lifecycle_methods(handles), target.get)

        def pre_destroy(instance: Any, _destruction: Destruction) -> None:
            target.value = instance
            fire()

        self._store.register_pre_destroy(creation.destruction, pre_destroy)
        return supplier


def _applies_to(type_: InterceptorMethodType, executable: Executable) -> bool:
    if type_ is InterceptorMethodType.AROUND_CONSTRUCT:
        return executable.is_constructor
    if type_ is InterceptorMethodType.AROUND_INVOKE:
        return not executable.is_constructor
    return True


def _lifecycle_methods(handles: HandlesByExecutable) -> tuple[InterceptorMethod, ...]:
    # one interceptor reached through several executables still fires once
    return tuple(dict.fromkeys(chain.from_iterable(handles.values())))
