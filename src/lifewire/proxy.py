from __future__ import annotations

import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol, TypeVar

from lifewire.bean import Id
from lifewire.exceptions import LifewireInvalidArgumentError
from lifewire.interception import InterceptionEngine, InterceptorMethod, Interceptions
from lifewire.introspection import Executable

I = TypeVar("I")  # noqa: E741

_PROXY_SLOTS = frozenset(
    (
        "_lifewire_dispatch",
        "_lifewire_engine",
        "_lifewire_lock",
        "_lifewire_specification",
        "_lifewire_target",
    ),
)

# Special methods are looked up on the type, never through __getattr__.
_FORWARDED_SPECIAL_METHODS = (
    "__aenter__",
    "__aexit__",
    "__aiter__",
    "__anext__",
    "__await__",
    "__bool__",
    "__call__",
    "__contains__",
    "__delitem__",
    "__enter__",
    "__exit__",
    "__getitem__",
    "__iter__",
    "__len__",
    "__next__",
    "__reversed__",
    "__setitem__",
)


class InterceptionProxier(Protocol):
    """Build proxies that route business method calls through around-invoke interceptors."""

    def interception_proxy(
        self,
        id_: Id,
        instance_supplier: Callable[[], I],
        around_invokes: Mapping[Executable, Sequence[InterceptorMethod]],
    ) -> I:
        """Return a proxy over the supplied instance.

        Args:
            id_: Identity of the production request.
            instance_supplier: Supplies the instance to proxy.
            around_invokes: Around-invoke interceptor methods per intercepted method.

        """
        ...


class ProxySpecification:
    """Describe what an interception proxy intercepts.

    Holds an immutable copy of the around-invoke table, indexed by method name
    since a Python class declares at most one member per name.
    """

    def __init__(
        self,
        id_: Id,
        around_invokes: Mapping[Executable, Sequence[InterceptorMethod]],
    ) -> None:
        self.id = id_
        self._methods_by_name: Mapping[str, tuple[InterceptorMethod, ...]] = MappingProxyType(
            {executable.name: tuple(methods) for executable, methods in around_invokes.items()},
        )

    @property
    def types(self) -> tuple[Any, ...]:
        return self.id.types

    def interceptor_methods(self, name: str) -> tuple[InterceptorMethod, ...]:
        """Return the around-invoke interceptor methods for ``name``, or an empty tuple.

        Args:
            name: Name of the invoked method.

        """
        return self._methods_by_name.get(name, ())


class MethodInterceptor(Protocol):
    """Dispatch one business method call made through a proxy."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any: ...


@dataclass(frozen=True, slots=True)
class Chained:
    """Call the instance's method through an around-invoke interceptor chain.

    ``source`` is the function the chain was built for; a chain is only reused
    while the instance still exposes that function under the same name.
    """

    chain: Callable[..., Any]
    source: Any

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.chain(*args, **kwargs)


def _source(method: Callable[..., Any]) -> Any:
    return getattr(method, "__func__", method)


class InterceptionProxy:
    """Stand in for an instance, dispatching its methods through a dispatch table.

    Attribute reads, writes and deletions are forwarded to the instance.
    Methods with around-invoke interceptor methods are wrapped in a
    ``Chained`` method interceptor, built once and rebuilt only when the
    instance's method changes. Every other attribute is returned exactly as the
    instance holds it at the time of the read. Protocol methods the instance's
    class supports (``len()``, iteration, ``with``, calling, indexing, ...)
    are dispatched the same way. Equality and hashing use the proxy's own
    identity and are never intercepted; ``__class__`` reports the instance's
    class so ``isinstance`` checks keep working.
    """

    __slots__ = tuple(sorted(_PROXY_SLOTS))

    def __init__(
        self,
        target: Any,
        specification: ProxySpecification,
        engine: InterceptionEngine,
    ) -> None:
        object.__setattr__(self, "_lifewire_target", target)
        object.__setattr__(self, "_lifewire_specification", specification)
        object.__setattr__(self, "_lifewire_engine", engine)
        object.__setattr__(self, "_lifewire_dispatch", {})
        object.__setattr__(self, "_lifewire_lock", threading.Lock())

    def _lifewire_dispatched(self, name: str, attribute: Any) -> Any:
        if not callable(attribute):
            return attribute
        specification: ProxySpecification = object.__getattribute__(self, "_lifewire_specification")
        interceptor_methods = specification.interceptor_methods(name)
        if not interceptor_methods:
            return attribute

        source = _source(attribute)
        dispatch: dict[str, Chained] = object.__getattribute__(self, "_lifewire_dispatch")
        lock: threading.Lock = object.__getattribute__(self, "_lifewire_lock")
        with lock:
            chained = dispatch.get(name)
        if chained is not None and chained.source is source:
            return chained

        engine: InterceptionEngine = object.__getattribute__(self, "_lifewire_engine")
        target = object.__getattribute__(self, "_lifewire_target")
        built = Chained(engine.of_invocation(interceptor_methods, attribute, lambda: target), source)
        with lock:
            chained = dispatch.get(name)
            if chained is not None and chained.source is source:
                return chained
            dispatch[name] = built
        return built

    @property  # type: ignore[misc]
    def __class__(self) -> type[Any]:  # noqa: D105
        return type(object.__getattribute__(self, "_lifewire_target"))

    def __getattr__(self, name: str) -> Any:
        attribute = getattr(object.__getattribute__(self, "_lifewire_target"), name)
        return self._lifewire_dispatched(name, attribute)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _PROXY_SLOTS:
            object.__setattr__(self, name, value)
        else:
            setattr(object.__getattribute__(self, "_lifewire_target"), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(object.__getattribute__(self, "_lifewire_target"), name)

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return object.__hash__(self)

    def __repr__(self) -> str:
        return repr(object.__getattribute__(self, "_lifewire_target"))

    def __str__(self) -> str:
        return str(object.__getattribute__(self, "_lifewire_target"))

    def __dir__(self) -> list[str]:
        return dir(object.__getattribute__(self, "_lifewire_target"))


def _special_method(name: str) -> Callable[..., Any]:
    def forward(self: InterceptionProxy, *args: Any, **kwargs: Any) -> Any:
        attribute = getattr(object.__getattribute__(self, "_lifewire_target"), name)
        return self._lifewire_dispatched(name, attribute)(*args, **kwargs)

    forward.__name__ = name
    forward.__qualname__ = f"{InterceptionProxy.__name__}.{name}"
    return forward


def _declares(cls: type[Any], name: str) -> bool:
    # the metaclass is not consulted, so classes do not look callable
    return any(name in vars(klass) for klass in cls.__mro__ if klass is not object)


_proxy_types: dict[type[Any], type[InterceptionProxy]] = {}
_proxy_types_lock = threading.Lock()


def proxy_type(target_type: type[Any]) -> type[InterceptionProxy]:
    """Return the proxy class for instances of ``target_type``.

    The class forwards exactly the protocol methods ``target_type`` supports,
    so ``callable()``, ``len()`` and friends behave on the proxy as they do on
    the instance.

    Args:
        target_type: Class of the proxied instance.

    """
    with _proxy_types_lock:
        cached = _proxy_types.get(target_type)
    if cached is not None:
        return cached

    namespace: dict[str, Any] = {"__slots__": ()}
    for name in _FORWARDED_SPECIAL_METHODS:
        if _declares(target_type, name):
            namespace[name] = _special_method(name)
    created = type(f"{InterceptionProxy.__name__}[{target_type.__qualname__}]", (InterceptionProxy,), namespace)
    with _proxy_types_lock:
        return _proxy_types.setdefault(target_type, created)


class ReflectiveInterceptionProxier:
    """Build ``InterceptionProxy`` objects at runtime."""

    def __init__(self, engine: InterceptionEngine | None = None) -> None:
        self._engine = engine if engine is not None else Interceptions()

    def interception_proxy(
        self,
        id_: Id,
        instance_supplier: Callable[[], I],
        around_invokes: Mapping[Executable, Sequence[InterceptorMethod]],
    ) -> I:
        instance = instance_supplier()
        if instance is None:
            msg = f"Instance supplier for {id_!r} returned None; nothing to proxy."
            raise LifewireInvalidArgumentError(msg)
        specification = ProxySpecification(id_, around_invokes)
        return proxy_type(type(instance))(instance, specification, self._engine)  # type: ignore[return-value]
