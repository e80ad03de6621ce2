"""Tests for the action dispatcher wrapped around user actors."""

import pytest
from actor_harness import ProtocolError, Request, Response, UsageError, get_actor_instance
from actor_harness.testing.actions import CF_KEY_ACTION, Action, ActionType
from actor_harness.testing.results import USE_RESPONSE
from actor_harness.testing.wrapper import STATUS_FAILURE, STATUS_NO_CONTENT


def action_request(action_type, action_id):
    return Request("http://x", cf={CF_KEY_ACTION: Action(action_type, action_id).to_dict()})


@pytest.mark.asyncio
async def test_action_status_codes(system):
    """Successful actions answer no-content; failures answer a server error."""
    counter = system.env["COUNTER"]
    stub = counter.get(counter.new_unique_id())
    results = system.harness.results

    ok_id = results.next_id()
    response = await stub.fetch(action_request(ActionType.GET_INSTANCE, ok_id))
    assert response.status == STATUS_NO_CONTENT
    assert type(results.take(ok_id)).__name__ == "Counter"

    error = RuntimeError("nope")
    failing_id = results.next_id()

    def fail():
        raise error

    results.register(failing_id, fail)
    response = await stub.fetch(action_request(ActionType.RUN_CALLBACK, failing_id))
    assert response.status == STATUS_FAILURE
    assert results.take(failing_id) is error


@pytest.mark.asyncio
async def test_response_outcome_uses_sentinel(system):
    counter = system.env["COUNTER"]
    stub = counter.get(counter.new_unique_id())
    results = system.harness.results
    relayed = Response("relayed")

    action_id = results.next_id()
    results.register(action_id, lambda: relayed)
    response = await stub.fetch(action_request(ActionType.RUN_CALLBACK, action_id))

    assert response is relayed
    assert results.take(action_id) is USE_RESPONSE


@pytest.mark.asyncio
async def test_missing_callback_is_stored_as_failure(system):
    counter = system.env["COUNTER"]
    stub = counter.get(counter.new_unique_id())
    results = system.harness.results

    action_id = results.next_id()
    response = await stub.fetch(action_request(ActionType.RUN_CALLBACK, action_id))

    assert response.status == STATUS_FAILURE
    assert isinstance(results.take(action_id), ProtocolError)


@pytest.mark.asyncio
async def test_unknown_action_type_is_rejected(system):
    """Unknown tags never reach user code."""
    counter = system.env["COUNTER"]
    stub = counter.get(counter.new_unique_id())

    with pytest.raises(ProtocolError, match="Unknown action type"):
        await stub.fetch(Request("http://x", cf={CF_KEY_ACTION: {"type": "explode", "id": 1}}))

    instance = await get_actor_instance(stub)
    assert await instance.state.storage.list() == {}


@pytest.mark.asyncio
async def test_plain_requests_pass_through(system):
    """Requests without a descriptor reach the user's fetch unchanged."""
    counter = system.env["COUNTER"]
    stub = counter.get(counter.new_unique_id())

    response = await stub.fetch("http://x/abc", cf={"colo": "LHR"})

    assert response.json() == {"value": 1}


@pytest.mark.asyncio
async def test_user_errors_propagate_untouched(system):
    """Errors from ordinary hooks reach the caller as raised."""
    faulty = system.env["FAULTY"]
    stub = faulty.get(faulty.new_unique_id())

    with pytest.raises(ValueError, match="cannot serve /boom"):
        await stub.fetch("http://x/boom")
    with pytest.raises(ValueError, match="alarm failed"):
        await stub.deliver("alarm")


@pytest.mark.asyncio
async def test_missing_fetch_hook(system):
    silent = system.env["SILENT"]
    stub = silent.get(silent.new_unique_id())

    with pytest.raises(UsageError, match="does not export a fetch"):
        await stub.fetch("http://x")


@pytest.mark.asyncio
async def test_missing_other_hooks_are_no_ops(system):
    silent = system.env["SILENT"]
    stub = silent.get(silent.new_unique_id())

    assert await stub.deliver("alarm") is None
    assert await stub.deliver("web_socket_message", "ws", "hi") is None
    assert await stub.deliver("web_socket_close", "ws", 1000, "bye", True) is None
    assert await stub.deliver("web_socket_error", "ws", RuntimeError()) is None


@pytest.mark.asyncio
async def test_web_socket_events_are_forwarded(system):
    socket = system.env["SOCKET"]
    stub = socket.get(socket.new_unique_id())
    error = OSError("reset")

    await stub.deliver("web_socket_message", "ws", "hi")
    await stub.deliver("web_socket_close", "ws", 1000, "bye", True)
    await stub.deliver("web_socket_error", "ws", error)

    instance = await get_actor_instance(stub)
    assert instance.events == [
        ("message", "ws", "hi"),
        ("close", "ws", 1000, "bye", True),
        ("error", "ws", error),
    ]
