from __future__ import annotations

from enum import Enum


class TargetKind(Enum):
    """Kind of element an interceptor method type applies to."""

    CONSTRUCTOR = "constructor"
    """Interceptor methods wrap instance construction."""

    EVENT = "event"
    """Interceptor methods run on a lifecycle event of an existing instance."""

    METHOD = "method"
    """Interceptor methods wrap business method invocations."""


class InterceptorMethodType(Enum):
    """Closed set of phases an interceptor method can occupy."""

    AROUND_CONSTRUCT = ("AroundConstruct", TargetKind.CONSTRUCTOR)
    """Wraps the construction of the instance and may replace its arguments."""

    AROUND_INVOKE = ("AroundInvoke", TargetKind.METHOD)
    """Wraps each business method call made through the interception proxy."""

    POST_CONSTRUCT = ("PostConstruct", TargetKind.EVENT)
    """Runs once after the instance has been materialized."""

    PRE_DESTROY = ("PreDestroy", TargetKind.EVENT)
    """Runs once when the instance is disposed of."""

    def __init__(self, display_name: str, kind: TargetKind) -> None:
        self.display_name = display_name
        self.kind = kind

    def __str__(self) -> str:
        return self.display_name


COMPOSITION_ORDER: tuple[InterceptorMethodType, ...] = (
    InterceptorMethodType.AROUND_CONSTRUCT,
    InterceptorMethodType.AROUND_INVOKE,
    InterceptorMethodType.POST_CONSTRUCT,
    InterceptorMethodType.PRE_DESTROY,
)
"""Order in which active phases are layered around production.

Construction materializes the instance, business-call proxying wraps the
materialized instance, post-construct then fires on it, and pre-destroy is
deferred until disposal.
"""
