"""Pending-queue refresh, replacement, and removal."""
import asyncio
import threading

import requests

from conftest import LOGIN_OK, FakeResponse, kyc_payload
from kyc_review.core.errors import FetchFailure, Unauthorized


def _logged_in(make_controller, steps):
    """Log in, then run ``steps(controller)`` inside the same event loop."""

    async def scenario():
        controller = make_controller()
        await controller.login("admin", "secret")
        result = await steps(controller)
        snapshot = controller.snapshot()
        controller.notifications.clear()
        return controller, result, snapshot

    return asyncio.run(scenario())


def test_refresh_replaces_whole_collection(make_controller, http):
    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(200, [kyc_payload(1), kyc_payload(2), kyc_payload(3)]),
        FakeResponse(200, [kyc_payload(3), kyc_payload(4)]),
    )

    async def steps(controller):
        controller.open_details(1)
        return await controller.refresh()

    controller, outcome, snapshot = _logged_in(make_controller, steps)

    assert outcome.ok
    assert [record.id for record in snapshot.records] == [3, 4]
    # Selection is a copy and survives the stale entry being dropped.
    assert snapshot.selected_record.id == 1


def test_refresh_requires_authenticated_session(make_controller, http):
    async def scenario():
        controller = make_controller()
        return await controller.refresh()

    outcome = asyncio.run(scenario())

    assert isinstance(outcome.error, Unauthorized)
    assert http.calls == []


def test_refresh_unauthorized_expires_session(make_controller, http):
    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(200, [kyc_payload(1)]),
        FakeResponse(401),
    )

    async def steps(controller):
        controller.open_details(1)
        return await controller.refresh()

    controller, outcome, snapshot = _logged_in(make_controller, steps)

    assert isinstance(outcome.error, Unauthorized)
    assert snapshot.authenticated is False
    assert snapshot.records == ()
    assert snapshot.selected_record is None
    assert snapshot.notifications[-1].message == "Session expired. Please login again."


def test_refresh_failure_keeps_previous_records(make_controller, http):
    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(200, [kyc_payload(1)]),
        FakeResponse(500),
    )

    async def steps(controller):
        return await controller.refresh()

    controller, outcome, snapshot = _logged_in(make_controller, steps)

    assert isinstance(outcome.error, FetchFailure)
    assert [record.id for record in snapshot.records] == [1]
    assert snapshot.authenticated is True
    assert snapshot.notifications[-1].message == "Failed to load KYC records. Please try again."
    assert snapshot.loading is False


def test_refresh_network_failure(make_controller, http):
    http.add("POST", "/admin/login", LOGIN_OK)
    http.add("GET", "/admin/kyc/pending", requests.ConnectionError("down"))

    async def steps(controller):
        return await controller.refresh()

    controller, outcome, snapshot = _logged_in(make_controller, steps)

    assert isinstance(outcome.error, FetchFailure)
    assert snapshot.authenticated is True


def test_refresh_skips_malformed_and_resolved_entries(make_controller, http, caplog):
    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(
            200,
            [
                kyc_payload(1),
                {"id": "not-a-number", "user_id": 3, "customer_email": "x@example.com"},
                kyc_payload(2, status="approved"),
                kyc_payload(3, status=None),
            ],
        ),
    )
    caplog.set_level("WARNING")

    async def steps(controller):
        return None

    controller, _, snapshot = _logged_in(make_controller, steps)

    assert [record.id for record in snapshot.records] == [1, 3]
    assert snapshot.records[1].status == "pending"
    assert len(controller.store.alerts) == 2
    assert "position 1" in caplog.text


def test_remove_is_idempotent(make_controller, service):
    async def steps(controller):
        first = controller.store.remove(42)
        second = controller.store.remove(42)
        return first, second

    controller, (first, second), snapshot = _logged_in(make_controller, steps)

    assert first is True
    assert second is False
    assert [record.id for record in snapshot.records] == [7, 99]
    assert controller.store.get(42) is None


def test_refresh_from_previous_session_is_discarded(make_controller, http):
    release = threading.Event()

    def slow_pending(kwargs):
        release.wait(timeout=5)
        return FakeResponse(200, [kyc_payload(1)])

    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(200, [kyc_payload(1)]),
        slow_pending,
        FakeResponse(200, [kyc_payload(2)]),
    )

    async def scenario():
        controller = make_controller()
        await controller.login("admin", "secret")
        stale = asyncio.create_task(controller.refresh())
        while len(http.calls_to("GET", "/admin/kyc/pending")) < 2:
            await asyncio.sleep(0.01)
        controller.logout()
        await controller.login("auditor", "other-secret")
        before = [record.id for record in controller.store.records]
        release.set()
        outcome = await stale
        after = [record.id for record in controller.store.records]
        snapshot = controller.snapshot()
        controller.notifications.clear()
        return outcome, before, after, snapshot

    outcome, before, after, snapshot = asyncio.run(scenario())

    assert isinstance(outcome.error, Unauthorized)
    assert before == [2]
    assert after == [2]
    assert snapshot.authenticated is True
    assert snapshot.username == "auditor"


def test_stale_unauthorized_does_not_expire_new_session(make_controller, http):
    release = threading.Event()

    def slow_unauthorized(kwargs):
        release.wait(timeout=5)
        return FakeResponse(401)

    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(200, [kyc_payload(1)]),
        slow_unauthorized,
        FakeResponse(200, [kyc_payload(2)]),
    )

    async def scenario():
        controller = make_controller()
        await controller.login("admin", "secret")
        stale = asyncio.create_task(controller.refresh())
        while len(http.calls_to("GET", "/admin/kyc/pending")) < 2:
            await asyncio.sleep(0.01)
        controller.logout()
        await controller.login("admin", "secret")
        release.set()
        outcome = await stale
        snapshot = controller.snapshot()
        controller.notifications.clear()
        return outcome, snapshot

    outcome, snapshot = asyncio.run(scenario())

    assert isinstance(outcome.error, Unauthorized)
    assert snapshot.authenticated is True
    assert [record.id for record in snapshot.records] == [2]
    assert "Session expired. Please login again." not in [
        item.message for item in snapshot.notifications
    ]


def test_loading_stays_set_while_any_refresh_runs(make_controller, http):
    release = threading.Event()

    def slow_pending(kwargs):
        release.wait(timeout=5)
        return FakeResponse(200, [kyc_payload(3)])

    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(200, [kyc_payload(1)]),
        slow_pending,
        FakeResponse(200, [kyc_payload(2)]),
    )

    async def steps(controller):
        slow = asyncio.create_task(controller.refresh())
        while len(http.calls_to("GET", "/admin/kyc/pending")) < 2:
            await asyncio.sleep(0.01)
        await controller.refresh()
        during = controller.store.loading
        release.set()
        await slow
        return during, controller.store.loading

    controller, (during, after), snapshot = _logged_in(make_controller, steps)

    assert during is True
    assert after is False
    assert [record.id for record in snapshot.records] == [3]
