class LifewireError(Exception):
    """Represent a base class for all lifewire-specific failures.

    Catch this type when you want to handle any lifewire error path without
    matching each concrete exception class individually.
    """


class LifewireInvalidArgumentError(LifewireError):
    """Signal a missing or malformed required argument.

    Raised before any side effect takes place, for example when
    ``InterceptingProducer.produce`` receives ``None`` instead of a creation
    request, when an around-construct interceptor chain changes the number of
    construction arguments, or when a proxier's instance supplier returns
    ``None``.
    """


class LifewireDisposalError(LifewireError):
    """Signal a failure while disposing of a contextual instance.

    Raised by ``Producer.dispose`` when closing the instance fails and by
    ``InterceptingProducer.dispose`` when a pre-destroy interceptor method
    fails. The original exception is always available as ``__cause__``.

    Exceptions that are already lifewire errors, and ``BaseException``
    subclasses such as ``KeyboardInterrupt``, are never wrapped.
    """


class LifewireAmbiguousBindingError(LifewireError):
    """Signal more than one constructor bound to around-construct interceptors.

    Raised by ``InterceptingProducer.produce`` when the interception
    specification of a type binds around-construct interceptors to both
    ``__new__`` and ``__init__``. Only one constructor can be intercepted.

    Typical fix is moving the bindings onto a single constructor.
    """
