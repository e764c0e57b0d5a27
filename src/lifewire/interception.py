"""Default invocation engine: turns ordered interceptor methods into callable chains."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeAlias

InterceptorMethod: TypeAlias = Callable[["InvocationContext"], Any]
"""An interceptor method: receives the invocation context, usually calls ``proceed()``."""

Terminal: TypeAlias = Callable[["InvocationContext"], Any]


class InvocationContext:
    """Carry one intercepted construction, invocation or lifecycle event.

    Interceptor methods run in order; each one continues the chain by calling
    ``proceed()``. ``parameters`` is mutable: changes made before
    ``proceed()`` are what the next interceptor, and finally the target, see.
    ``context_data`` is shared by all interceptor methods of one chain.

    Attributes:
        target: The intercepted instance. During around-construct interception
            it is ``None`` until ``proceed()`` has created the instance.
        method: The bound method being invoked, or ``None`` for construction
            and lifecycle events.
        parameters: Positional arguments of the construction or invocation.
        kwargs: Keyword arguments of the invocation.
        context_data: Mutable mapping for interceptor-to-interceptor communication.

    """

    __slots__ = (
        "_interceptor_methods",
        "_position",
        "_terminal",
        "context_data",
        "kwargs",
        "method",
        "parameters",
        "target",
    )

    def __init__(
        self,
        *,
        interceptor_methods: Sequence[InterceptorMethod],
        terminal: Terminal,
        target: Any = None,
        method: Callable[..., Any] | None = None,
        parameters: Sequence[Any] = (),
        kwargs: dict[str, Any] | None = None,
    ) -> None:
        self._interceptor_methods = interceptor_methods
        self._terminal = terminal
        self._position = 0
        self.target = target
        self.method = method
        self.parameters = list(parameters)
        self.kwargs = dict(kwargs or {})
        self.context_data: dict[str, Any] = {}

    def proceed(self) -> Any:
        """Invoke the next interceptor method, or the target once the chain is exhausted."""
        position = self._position
        if position >= len(self._interceptor_methods):
            return self._terminal(self)
        self._position = position + 1
        try:
            return self._interceptor_methods[position](self)
        finally:
            self._position = position


class InterceptionEngine(Protocol):
    """Build callable chains around constructions, invocations and lifecycle events."""

    def of_construction(
        self,
        interceptor_methods: Sequence[InterceptorMethod],
        create: Callable[[list[Any]], Any],
    ) -> Callable[[list[Any]], Any]: ...

    def of_invocation(
        self,
        interceptor_methods: Sequence[InterceptorMethod],
        method: Callable[..., Any],
        target_supplier: Callable[[], Any],
    ) -> Callable[..., Any]: ...

    def of_lifecycle_event(
        self,
        interceptor_methods: Sequence[InterceptorMethod],
        target_supplier: Callable[[], Any],
    ) -> Callable[[], None]: ...


class Interceptions:
    """Run interceptor methods in order, each wrapping the rest of the chain."""

    def of_construction(
        self,
        interceptor_methods: Sequence[InterceptorMethod],
        create: Callable[[list[Any]], Any],
    ) -> Callable[[list[Any]], Any]:
        """Build a construction chain.

        The returned callable takes the construction arguments and returns the
        created instance. ``create`` receives the arguments as left by the
        interceptors, and its result becomes ``context.target``.

        Args:
            interceptor_methods: Around-construct interceptor methods, outermost first.
            create: Performs the real construction from the final argument list.

        """
        methods = tuple(interceptor_methods)

        def terminal(context: InvocationContext) -> Any:
            context.target = create(list(context.parameters))
            return context.target

        def construct(arguments: list[Any]) -> Any:
            context = InvocationContext(
                interceptor_methods=methods,
                terminal=terminal,
                parameters=arguments,
            )
            context.proceed()
            return context.target

        return construct

    def of_invocation(
        self,
        interceptor_methods: Sequence[InterceptorMethod],
        method: Callable[..., Any],
        target_supplier: Callable[[], Any],
    ) -> Callable[..., Any]:
        """Build a business method invocation chain.

        Args:
            interceptor_methods: Around-invoke interceptor methods, outermost first.
            method: Bound method called with the final parameters.
            target_supplier: Supplies the instance exposed as ``context.target``.

        """
        methods = tuple(interceptor_methods)

        def terminal(context: InvocationContext) -> Any:
            return context.method(*context.parameters, **context.kwargs)  # type: ignore[misc]

        def invoke(*args: Any, **kwargs: Any) -> Any:
            context = InvocationContext(
                interceptor_methods=methods,
                terminal=terminal,
                target=target_supplier(),
                method=method,
                parameters=args,
                kwargs=kwargs,
            )
            return context.proceed()

        return invoke

    def of_lifecycle_event(
        self,
        interceptor_methods: Sequence[InterceptorMethod],
        target_supplier: Callable[[], Any],
    ) -> Callable[[], None]:
        """Build a lifecycle event chain such as post-construct or pre-destroy.

        The target is read from ``target_supplier`` each time the event fires.

        Args:
            interceptor_methods: Lifecycle interceptor methods, outermost first.
            target_supplier: Supplies the instance exposed as ``context.target``.

        """
        methods = tuple(interceptor_methods)

        def fire() -> None:
            context = InvocationContext(
                interceptor_methods=methods,
                terminal=_no_op,
                target=target_supplier(),
            )
            context.proceed()

        return fire


def _no_op(_context: InvocationContext) -> None:
    return None
