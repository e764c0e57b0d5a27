from lifewire.attributes import (
    ANY_QUALIFIER,
    INTERCEPTION_SPECIFICATION,
    Attributes,
    interception_specification,
)
from lifewire.bean import (
    Assignment,
    AttributedElement,
    AttributedType,
    Creation,
    Destruction,
    Id,
    ProductionRequest,
    ReferencesSelector,
    Request,
)
from lifewire.bindings import InterceptionBindingResolver, interceptors
from lifewire.exceptions import (
    LifewireAmbiguousBindingError,
    LifewireDisposalError,
    LifewireError,
    LifewireInvalidArgumentError,
)
from lifewire.intercepting_producer import InterceptingProducer
from lifewire.interception import InterceptionEngine, Interceptions, InvocationContext
from lifewire.interceptor import Interceptor, MappedInterceptor
from lifewire.interceptor_method_type import COMPOSITION_ORDER, InterceptorMethodType, TargetKind
from lifewire.introspection import Executable, ExecutableKind, ReflectiveIntrospector
from lifewire.lifecycle import (
    Initializer,
    InterceptionsApplicator,
    PostInitializer,
    PreDestructor,
)
from lifewire.lock_mode import LockMode
from lifewire.producers import CallableProducer, DelegatingProducer, DependenciesExtractor, Producer
from lifewire.proxy import InterceptionProxier, ReflectiveInterceptionProxier
from lifewire.stores import InterceptionStore

__all__ = [
    "ANY_QUALIFIER",
    "COMPOSITION_ORDER",
    "INTERCEPTION_SPECIFICATION",
    "Assignment",
    "AttributedElement",
    "AttributedType",
    "Attributes",
    "CallableProducer",
    "Creation",
    "DelegatingProducer",
    "DependenciesExtractor",
    "Destruction",
    "Executable",
    "ExecutableKind",
    "Id",
    "Initializer",
    "InterceptingProducer",
    "InterceptionBindingResolver",
    "InterceptionEngine",
    "InterceptionProxier",
    "InterceptionStore",
    "Interceptions",
    "InterceptionsApplicator",
    "Interceptor",
    "InterceptorMethodType",
    "InvocationContext",
    "LifewireAmbiguousBindingError",
    "LifewireDisposalError",
    "LifewireError",
    "LifewireInvalidArgumentError",
    "LockMode",
    "MappedInterceptor",
    "PostInitializer",
    "PreDestructor",
    "Producer",
    "ProductionRequest",
    "ReferencesSelector",
    "ReflectiveInterceptionProxier",
    "ReflectiveIntrospector",
    "Request",
    "TargetKind",
    "interception_specification",
    "interceptors",
]
