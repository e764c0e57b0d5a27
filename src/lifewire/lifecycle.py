"""Outer lifecycle contracts layered around a ``Producer``.

A full creation runs ``producer -> initializer -> post-initializer ->
interceptions applicator``; a full destruction runs ``pre-destructor ->
producer.dispose``. An ``InterceptingProducer`` already performs the
interception parts of both chains internally, so callers that only need
interception can use it directly.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from typing import Generic, Protocol, TypeVar

from lifewire.bean import Aggregate, Assignment, Creation, Request
from lifewire.producers import Producer

I = TypeVar("I")  # noqa: E741


class Initializer(Aggregate, Generic[I]):
    """Complete the initialization of a freshly produced instance.

    Implementations of ``initialize_assigned`` must not call back into
    ``initialize``: that overload resolves dependencies through the request
    and would re-enter the container.
    """

    def initialize(self, instance: I, request: Request) -> I:
        """Initialize ``instance`` with dependencies resolved through ``request``.

        Args:
            instance: Instance returned by a producer.
            request: Request resolving this initializer's dependencies.

        """
        return self.initialize_assigned(instance, self.assign(request.reference))

    @abstractmethod
    def initialize_assigned(self, instance: I, assignments: Sequence[Assignment]) -> I:
        """Initialize ``instance`` from resolved assignments and return it (or a replacement).

        Args:
            instance: Instance returned by a producer.
            assignments: Assignments for ``dependencies()``, in declared order.

        """


class PostInitializer(Protocol[I]):
    """Finish setting up a fully initialized instance."""

    def post_initialize(self, instance: I, request: Request) -> I: ...


class PreDestructor(Protocol[I]):
    """Prepare an instance for disposal."""

    def pre_destroy(self, instance: I, request: Request) -> I: ...


class InterceptionsApplicator(Protocol[I]):
    """Install around-invoke interception on a fully initialized instance.

    May return the instance itself, a copy, or a proxy.
    """

    def __call__(self, instance: I, request: Request) -> I: ...


def create(
    creation: Creation,
    producer: Producer[I],
    initializer: Initializer[I],
    post_initializer: PostInitializer[I],
    applicator: InterceptionsApplicator[I],
) -> I:
    """Run the full creation chain for one request.

    Args:
        creation: Creation request driving every step.
        producer: Produces the raw instance.
        initializer: Completes its initialization.
        post_initializer: Finishes its setup.
        applicator: Installs around-invoke interception.

    """
    instance = producer.produce(creation)
    instance = initializer.initialize(instance, creation)
    instance = post_initializer.post_initialize(instance, creation)
    return applicator(instance, creation)


def destroy(
    instance: I,
    creation: Creation,
    producer: Producer[I],
    pre_destructor: PreDestructor[I],
) -> None:
    """Run the full destruction chain for an instance produced by ``create``.

    Args:
        instance: Instance returned by ``create``.
        creation: The request that created it; its destruction token is used.
        producer: Producer that produced it.
        pre_destructor: Prepares the instance for disposal.

    """
    producer.dispose(pre_destructor.pre_destroy(instance, creation), creation.destruction)
