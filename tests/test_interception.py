"""Tests for the default invocation engine."""

from __future__ import annotations

from typing import Any

import pytest

from lifewire.interception import Interceptions, InvocationContext


class Greeter:
    def greet(self, name: str, *, punctuation: str = "!") -> str:
        return f"hello {name}{punctuation}"


class TestOfInvocation:
    def test_interceptors_run_outermost_first(self) -> None:
        events: list[str] = []

        def outer(context: InvocationContext) -> Any:
            events.append("outer before")
            result = context.proceed()
            events.append("outer after")
            return result

        def inner(context: InvocationContext) -> Any:
            events.append("inner")
            return context.proceed()

        greeter = Greeter()
        invoke = Interceptions().of_invocation([outer, inner], greeter.greet, lambda: greeter)

        assert invoke("ada") == "hello ada!"
        assert events == ["outer before", "inner", "outer after"]

    def test_parameter_changes_reach_the_method(self) -> None:
        def shout(context: InvocationContext) -> Any:
            context.parameters[0] = context.parameters[0].upper()
            context.kwargs["punctuation"] = "?"
            return context.proceed()

        greeter = Greeter()
        invoke = Interceptions().of_invocation([shout], greeter.greet, lambda: greeter)

        assert invoke("ada") == "hello ADA?"

    def test_interceptor_may_short_circuit(self) -> None:
        greeter = Greeter()
        invoke = Interceptions().of_invocation([lambda c: "cached"], greeter.greet, lambda: greeter)

        assert invoke("ada") == "cached"

    def test_context_exposes_target_and_method(self) -> None:
        seen: list[Any] = []

        def remember(context: InvocationContext) -> Any:
            seen.extend((context.target, context.method))
            return context.proceed()

        greeter = Greeter()
        invoke = Interceptions().of_invocation([remember], greeter.greet, lambda: greeter)
        invoke("ada")

        assert seen == [greeter, greeter.greet]

    def test_context_data_is_shared_along_the_chain(self) -> None:
        def write(context: InvocationContext) -> Any:
            context.context_data["user"] = "ada"
            return context.proceed()

        def read(context: InvocationContext) -> Any:
            return context.context_data["user"]

        greeter = Greeter()
        invoke = Interceptions().of_invocation([write, read], greeter.greet, lambda: greeter)

        assert invoke("bob") == "ada"

    def test_exceptions_propagate_unchanged(self) -> None:
        def fail(_context: InvocationContext) -> Any:
            msg = "denied"
            raise PermissionError(msg)

        greeter = Greeter()
        invoke = Interceptions().of_invocation([fail], greeter.greet, lambda: greeter)

        with pytest.raises(PermissionError, match="denied"):
            invoke("ada")

    def test_proceed_may_be_retried(self) -> None:
        """A failed proceed restores the position, so the rest of the chain can run again."""
        attempts: list[int] = []

        def retry(context: InvocationContext) -> Any:
            try:
                return context.proceed()
            except ValueError:
                return context.proceed()

        def flaky(context: InvocationContext) -> Any:
            attempts.append(1)
            if len(attempts) == 1:
                msg = "first attempt"
                raise ValueError(msg)
            return context.proceed()

        greeter = Greeter()
        invoke = Interceptions().of_invocation([retry, flaky], greeter.greet, lambda: greeter)

        assert invoke("ada") == "hello ada!"
        assert len(attempts) == 2


class TestOfConstruction:
    def test_returns_created_target(self) -> None:
        created: list[list[Any]] = []

        def create(arguments: list[Any]) -> Greeter:
            created.append(arguments)
            return Greeter()

        construct = Interceptions().of_construction([lambda c: c.proceed()], create)

        instance = construct(["a", 1])

        assert isinstance(instance, Greeter)
        assert created == [["a", 1]]

    def test_returns_target_even_if_interceptor_returns_something_else(self) -> None:
        construct = Interceptions().of_construction(
            [lambda c: (c.proceed(), "ignored")[1]],
            lambda _arguments: Greeter(),
        )

        assert isinstance(construct([]), Greeter)


class TestOfLifecycleEvent:
    def test_target_is_read_when_event_fires(self) -> None:
        seen: list[Any] = []
        holder: list[Any] = [None]

        fire = Interceptions().of_lifecycle_event([lambda c: seen.append(c.target)], lambda: holder[0])
        holder[0] = "instance"
        fire()

        assert seen == ["instance"]

    def test_proceed_at_chain_end_is_a_no_op(self) -> None:
        results: list[Any] = []

        fire = Interceptions().of_lifecycle_event([lambda c: results.append(c.proceed())], lambda: None)
        fire()

        assert results == [None]
