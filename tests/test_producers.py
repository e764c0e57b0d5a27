"""Tests for producers, their dependency lists and disposal."""

from __future__ import annotations

from typing import Annotated, Any

import pytest

from lifewire.attributes import Attributes
from lifewire.bean import Assignment, AttributedElement, AttributedType, Id
from lifewire.exceptions import (
    LifewireDisposalError,
    LifewireError,
    LifewireInvalidArgumentError,
)
from lifewire.producers import CallableProducer, DelegatingProducer, DependenciesExtractor
from tests.helpers import RecordingReferences, make_id

PRIMARY = Attributes("Named", {"value": "primary"})

NAME = AttributedElement("name", AttributedType(str))
PORT = AttributedElement("port", AttributedType(int))
HOST = AttributedElement("host", AttributedType(str, (PRIMARY,)))


class Server:
    def __init__(self, name: str) -> None:
        self.name = name
        self.closed = False

    def close(self) -> None:
        self.closed = True


class TestDependencies:
    def test_production_dependencies_come_first(self) -> None:
        producer = CallableProducer(
            Server,
            production_dependencies=(NAME,),
            initialization_dependencies=(PORT, HOST),
        )

        assert tuple(producer.dependencies()) == (NAME, PORT, HOST)

    def test_duplicates_are_listed_once(self) -> None:
        producer = CallableProducer(
            Server,
            production_dependencies=(NAME,),
            initialization_dependencies=(NAME, PORT),
        )

        assert tuple(producer.dependencies()) == (NAME, PORT)

    def test_assign_resolves_in_declared_order(self) -> None:
        producer = CallableProducer(
            Server,
            production_dependencies=(NAME,),
            initialization_dependencies=(PORT,),
        )
        values = {NAME.attributed_type: "api", PORT.attributed_type: 8080}

        assignments = producer.assign(values.__getitem__)

        assert assignments == (Assignment(NAME, "api"), Assignment(PORT, 8080))


class TestCallableProducer:
    def test_produce_resolves_through_creation(
        self,
        references: RecordingReferences,
        make_request: Any,
    ) -> None:
        references.add_value(NAME.attributed_type, "api")
        references.add_value(PORT.attributed_type, 8080)
        producer = CallableProducer(
            Server,
            production_dependencies=(NAME,),
            initialization_dependencies=(PORT,),
        )

        server = producer.produce(make_request(make_id(Server)))

        assert server.name == "api"
        assert server.port == 8080

    def test_missing_assignment_is_rejected(self) -> None:
        producer = CallableProducer(Server, production_dependencies=(NAME,))

        with pytest.raises(LifewireInvalidArgumentError, match="missing assignment\(s\) for: name"):
            producer.produce_assigned(Id(types=(Server,)), ())

    def test_element_in_both_lists_needs_one_assignment(
        self,
        references: RecordingReferences,
        make_request: Any,
    ) -> None:
        references.add_value(NAME.attributed_type, "api")
        producer = CallableProducer(
            Server,
            production_dependencies=(NAME,),
            initialization_dependencies=(NAME,),
        )

        server = producer.produce(make_request(make_id(Server)))

        assert server.name == "api"
        assert references.reference_queries == [NAME.attributed_type]

    def test_factory_is_required(self) -> None:
        with pytest.raises(LifewireInvalidArgumentError):
            CallableProducer(None)  # type: ignore[arg-type]


class TestDispose:
    def test_closes_instances_exposing_close(self) -> None:
        server = Server("api")

        CallableProducer(Server).dispose(server, object())

        assert server.closed is True

    def test_instances_without_close_are_left_alone(self) -> None:
        CallableProducer(object).dispose(object(), object())

    def test_close_failure_is_wrapped(self) -> None:
        class Broken:
            def close(self) -> None:
                msg = "socket busy"
                raise OSError(msg)

        with pytest.raises(LifewireDisposalError) as exc_info:
            CallableProducer(Broken).dispose(Broken(), object())

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_lifewire_errors_are_not_rewrapped(self) -> None:
        class Failing:
            def close(self) -> None:
                msg = "already failed"
                raise LifewireError(msg)

        with pytest.raises(LifewireError) as exc_info:
            CallableProducer(Failing).dispose(Failing(), object())

        assert type(exc_info.value) is LifewireError

    def test_base_exceptions_propagate(self) -> None:
        class Interrupted:
            def close(self) -> None:
                raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            CallableProducer(Interrupted).dispose(Interrupted(), object())


class TestDelegatingProducer:
    def test_every_operation_is_forwarded(self) -> None:
        delegate = CallableProducer(
            Server,
            production_dependencies=(NAME,),
            initialization_dependencies=(PORT,),
        )
        producer = DelegatingProducer(delegate)

        assert producer.delegate is delegate
        assert producer.production_dependencies() == (NAME,)
        assert producer.initialization_dependencies() == (PORT,)
        assert tuple(producer.dependencies()) == (NAME, PORT)

        server = producer.produce_assigned(
            Id(types=(Server,)),
            (Assignment(NAME, "api"), Assignment(PORT, 1)),
        )
        producer.dispose(server, object())
        assert server.closed is True

    def test_delegate_is_required(self) -> None:
        with pytest.raises(LifewireInvalidArgumentError):
            DelegatingProducer(None)  # type: ignore[arg-type]


class TestDependenciesExtractor:
    def test_extracts_annotated_parameters_in_order(self) -> None:
        def build(name: str, host: Annotated[str, PRIMARY], port: int = 80, *args: Any, **kwargs: Any) -> Server:
            return Server(name)

        assert DependenciesExtractor().extract(build) == (
            NAME,
            HOST,
        )

    def test_class_constructor_skips_self(self) -> None:
        assert DependenciesExtractor().extract(Server) == (NAME,)

    def test_missing_annotation_is_rejected(self) -> None:
        def build(name):  # type: ignore[no-untyped-def]  # noqa: ANN001, ANN202
            return name

        with pytest.raises(LifewireInvalidArgumentError, match="'name'"):
            DependenciesExtractor().extract(build)

    def test_non_attribute_metadata_is_ignored(self) -> None:
        def build(name: Annotated[str, "doc"]) -> str:
            return name

        assert DependenciesExtractor().extract(build) == (NAME,)
