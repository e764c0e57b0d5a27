from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from lifewire.interception import InterceptorMethod
from lifewire.interceptor_method_type import InterceptorMethodType


class Interceptor(ABC):
    """Expose ordered interceptor methods for each interceptor method type.

    Interceptors are container-managed references looked up by interceptor
    binding. Subclasses holding resources may override ``close``.
    """

    @abstractmethod
    def interceptor_methods(self, type_: InterceptorMethodType) -> Sequence[InterceptorMethod]:
        """Return the interceptor methods for ``type_``, outermost first.

        Args:
            type_: Phase whose interceptor methods are requested.

        """

    def close(self) -> None:
        """Release resources held by this interceptor."""


class MappedInterceptor(Interceptor):
    """Interceptor backed by a fixed phase-to-methods mapping.

    Examples:
        .. code-block:: python

            def log_call(context: InvocationContext) -> Any:
                logger.info("calling %s", context.method)
                return context.proceed()


            logging_interceptor = MappedInterceptor(
                {InterceptorMethodType.AROUND_INVOKE: [log_call]},
            )

    """

    def __init__(
        self,
        methods_by_type: Mapping[InterceptorMethodType, Sequence[InterceptorMethod]],
    ) -> None:
        self._methods_by_type = {
            type_: tuple(methods) for type_, methods in methods_by_type.items()
        }

    def interceptor_methods(self, type_: InterceptorMethodType) -> Sequence[InterceptorMethod]:
        return self._methods_by_type.get(type_, ())

    def __repr__(self) -> str:
        phases = ", ".join(str(type_) for type_ in self._methods_by_type)
        return f"{type(self).__name__}({phases})"
