from __future__ import annotations

import asyncio
from typing import Any

import pytest

from boundflow._transport import SuccessEmpty, SuccessWithBody, TransportFailure
from boundflow.exceptions import BoundflowAuthenticationError
from boundflow.jobs import JobRegistry
from boundflow.models.state import Empty, Error, ErrorPresentation, Loading, Success
from boundflow.resource import BoundResourceMediator, Translation


async def _settle(ticks: int = 10) -> None:
    for _ in range(ticks):
        await asyncio.sleep(0)


class _BlockingCall:
    """Remote call that waits until released and records cancellation."""

    def __init__(self, outcome: Any) -> None:
        self.outcome = outcome
        self.release = asyncio.Event()
        self.started = 0
        self.cancelled = 0

    async def __call__(self) -> Any:
        self.started += 1
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return self.outcome


def _passthrough(body: Any) -> Translation[Any]:
    return Translation.success(body)


@pytest.mark.asyncio
async def test_second_invocation_supersedes_first() -> None:
    mediator = BoundResourceMediator(JobRegistry())
    first_call = _BlockingCall(SuccessWithBody("first"))

    async def second_call() -> Any:
        return SuccessWithBody("second")

    first = mediator.run("login", should_fetch_from_network=True, create_call=first_call, handle_success=_passthrough)
    second = mediator.run("login", should_fetch_from_network=True, create_call=second_call, handle_success=_passthrough)

    first_task = asyncio.create_task(first.collect())
    await _settle()
    assert first_call.started == 1

    second_states = await second.collect()
    # Releasing the superseded call must not deliver anything.
    first_call.release.set()
    first_states = await first_task

    assert second_states == [Loading(), Success("second")]
    assert first_states == [Loading()]
    assert first_call.cancelled == 1
    assert first.job is not None and first.job.cancelled


@pytest.mark.asyncio
async def test_no_network_returns_cache_without_calling_remote() -> None:
    mediator = BoundResourceMediator(JobRegistry())
    calls: list[str] = []

    async def create_call() -> Any:
        calls.append("called")
        return SuccessWithBody("network")

    states = await mediator.run(
        "search:cats",
        should_fetch_from_network=False,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=lambda: {"posts": ["cached"]},
    ).collect()

    assert states == [Loading(), Success({"posts": ["cached"]})]
    assert states[-1].is_final
    assert calls == []


@pytest.mark.asyncio
async def test_no_network_and_no_cache_yields_empty() -> None:
    mediator = BoundResourceMediator(JobRegistry())

    async def create_call() -> Any:  # pragma: no cover
        raise AssertionError("network must not be used")

    states = await mediator.run(
        "search:cats",
        should_fetch_from_network=False,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=lambda: None,
    ).collect()

    assert states == [Loading(), Empty()]


@pytest.mark.asyncio
async def test_cache_then_network_emits_interim_success() -> None:
    mediator = BoundResourceMediator(JobRegistry())

    async def load_from_cache() -> str:
        return "cached"

    async def create_call() -> Any:
        return SuccessWithBody("fresh")

    states = await mediator.run(
        "search:cats",
        should_fetch_from_network=True,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=load_from_cache,
    ).collect()

    assert states == [Loading(), Success("cached", is_final=False), Success("fresh")]
    assert [state.is_terminal for state in states] == [False, False, True]


@pytest.mark.asyncio
async def test_domain_error_is_never_emitted_as_success() -> None:
    mediator = BoundResourceMediator(JobRegistry())

    async def create_call() -> Any:
        return SuccessWithBody({"response": "Error", "error_message": "Invalid credentials"})

    states = await mediator.run(
        "login",
        should_fetch_from_network=True,
        create_call=create_call,
        handle_success=lambda body: Translation.domain_error(body["error_message"]),
    ).collect()

    assert states == [Loading(), Error("Invalid credentials", ErrorPresentation.DIALOG)]


@pytest.mark.asyncio
async def test_raised_domain_error_becomes_error_state() -> None:
    mediator = BoundResourceMediator(JobRegistry())

    async def create_call() -> Any:
        return SuccessWithBody({})

    def handle_success(_body: Any) -> Translation[Any]:
        raise BoundflowAuthenticationError("Account disabled", endpoint="account/login")

    states = await mediator.run(
        "login",
        should_fetch_from_network=True,
        create_call=create_call,
        handle_success=handle_success,
    ).collect()

    assert states[-1] == Error("Account disabled", ErrorPresentation.DIALOG)


@pytest.mark.asyncio
async def test_empty_transport_result_yields_empty_state() -> None:
    mediator = BoundResourceMediator(JobRegistry())

    async def create_call() -> Any:
        return SuccessEmpty()

    states = await mediator.run(
        "login", should_fetch_from_network=True, create_call=create_call, handle_success=_passthrough
    ).collect()

    assert states == [Loading(), Empty()]
    assert not isinstance(states[-1], Error)


@pytest.mark.asyncio
async def test_transport_failure_yields_dialog_error() -> None:
    mediator = BoundResourceMediator(JobRegistry())

    async def create_call() -> Any:
        return TransportFailure("HTTP 500 from account/login", status_code=500)

    states = await mediator.run(
        "login", should_fetch_from_network=True, create_call=create_call, handle_success=_passthrough
    ).collect()

    assert states == [Loading(), Error("HTTP 500 from account/login", ErrorPresentation.DIALOG)]


@pytest.mark.asyncio
async def test_explicit_cancel_stops_emissions() -> None:
    registry = JobRegistry()
    mediator = BoundResourceMediator(registry)
    call = _BlockingCall(SuccessWithBody("late"))

    stream = mediator.run("login", should_fetch_from_network=True, create_call=call, handle_success=_passthrough)
    task = asyncio.create_task(stream.collect())
    await _settle()

    assert registry.cancel("login") is True
    call.release.set()
    states = await task

    assert states == [Loading()]
    assert call.cancelled == 1
    assert "login" not in registry


@pytest.mark.asyncio
async def test_nothing_runs_until_observed() -> None:
    registry = JobRegistry()
    mediator = BoundResourceMediator(registry)
    touched: list[str] = []

    async def create_call() -> Any:
        touched.append("network")
        return SuccessEmpty()

    def load_from_cache() -> None:
        touched.append("cache")
        return None

    stream = mediator.run(
        "search:dogs",
        should_fetch_from_network=True,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=load_from_cache,
    )
    await _settle()
    assert touched == []
    assert len(registry) == 0

    await stream.collect()
    assert touched == ["cache", "network"]


@pytest.mark.asyncio
async def test_testing_delays_are_awaited(monkeypatch: pytest.MonkeyPatch) -> None:
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr("boundflow.resource.asyncio.sleep", fake_sleep)
    mediator = BoundResourceMediator(JobRegistry(), network_delay=3.0, cache_delay=0.5)

    async def create_call() -> Any:
        return SuccessEmpty()

    await mediator.run(
        "search:dogs",
        should_fetch_from_network=True,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=lambda: None,
    ).collect()

    assert delays == [0.5, 3.0]


@pytest.mark.asyncio
async def test_concurrently_started_streams_on_one_slot_do_not_hang() -> None:
    mediator = BoundResourceMediator(JobRegistry())
    calls: list[str] = []

    def make_call(value: str) -> Any:
        async def create_call() -> Any:
            calls.append(value)
            return SuccessWithBody(value)

        return create_call

    first = mediator.run("login", should_fetch_from_network=True, create_call=make_call("first"), handle_success=_passthrough)
    second = mediator.run("login", should_fetch_from_network=True, create_call=make_call("second"), handle_success=_passthrough)

    first_states, second_states = await asyncio.wait_for(
        asyncio.gather(first.collect(), second.collect()), timeout=2
    )

    assert first_states == []
    assert second_states == [Loading(), Success("second")]
    assert calls == ["second"]


@pytest.mark.asyncio
async def test_cancel_before_the_job_runs_ends_the_stream() -> None:
    registry = JobRegistry()
    mediator = BoundResourceMediator(registry)
    call = _BlockingCall(SuccessWithBody("late"))

    stream = mediator.run("login", should_fetch_from_network=True, create_call=call, handle_success=_passthrough)
    consumer = asyncio.create_task(stream.collect())
    await asyncio.sleep(0)

    assert registry.cancel("login") is True
    states = await asyncio.wait_for(consumer, timeout=2)

    assert states == []
    assert call.started == 0
    assert "login" not in registry


@pytest.mark.asyncio
async def test_connectivity_callable_is_evaluated_inside_the_job() -> None:
    registry = JobRegistry()
    mediator = BoundResourceMediator(registry)
    checks: list[bool] = []

    async def is_connected() -> bool:
        checks.append("login" in registry)
        return False

    async def create_call() -> Any:  # pragma: no cover
        raise AssertionError("network must not be used")

    stream = mediator.run(
        "login",
        should_fetch_from_network=is_connected,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=lambda: "cached",
    )
    await _settle()
    assert checks == []

    states = await stream.collect()

    assert checks == [True]
    assert states == [Loading(), Success("cached")]


@pytest.mark.asyncio
async def test_offline_only_cache_is_skipped_while_connected() -> None:
    mediator = BoundResourceMediator(JobRegistry())
    reads: list[str] = []

    def load_from_cache() -> str:
        reads.append("cache")
        return "cached"

    async def create_call() -> Any:
        return SuccessWithBody("fresh")

    online = await mediator.run(
        "login",
        should_fetch_from_network=lambda: True,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=load_from_cache,
        cache_when_connected=False,
    ).collect()
    offline = await mediator.run(
        "login",
        should_fetch_from_network=False,
        create_call=create_call,
        handle_success=_passthrough,
        load_from_cache=load_from_cache,
        cache_when_connected=False,
    ).collect()

    assert online == [Loading(), Success("fresh")]
    assert offline == [Loading(), Success("cached")]
    assert reads == ["cache"]
