"""
Tests for the Notion store against a mocked HTTP transport.
"""

from __future__ import annotations

import json
from datetime import date
from zoneinfo import ZoneInfo

import httpx
import pytest

from barbershop.application.exceptions import ReservationNotFound, StoreUnavailable
from barbershop.application.use_cases.availability import AvailabilityResolver
from barbershop.application.use_cases.manage_booking import ManageBookingUseCase
from barbershop.domain.entities.reservation import NewReservation
from barbershop.infrastructure.store.notion_store import NotionReservationStore

MADRID = ZoneInfo("Europe/Madrid")
THURSDAY = date(2025, 2, 20)


def _page(page_id: str, start: str, name: str = "Ana", phone: str = "600111222") -> dict:
    return {
        "id": page_id,
        "created_time": "2025-02-19T08:00:00.000Z",
        "properties": {
            "Nombre": {"title": [{"plain_text": name, "text": {"content": name}}]},
            "Correo Electrónico": {"email": "ana@example.com"},
            "Teléfono": {"phone_number": phone},
            "Fecha": {"date": {"start": start}},
        },
    }


def _store(handler) -> NotionReservationStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return NotionReservationStore(
        token="secret",
        database_id="db123",
        base_url="https://notion.test/v1",
        notion_version="2022-06-28",
        timezone=MADRID,
        client=client,
    )


def test_create_writes_local_time_with_offset():
    """10:00 in Madrid in February is sent as +01:00, not as UTC."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_page("page-1", "2025-02-20T10:00:00.000+01:00"))

    created = _store(handler).create(
        NewReservation(date=THURSDAY, time="10:00", name="Ana", email="ana@example.com", phone="600111222")
    )

    assert seen["method"] == "POST"
    assert seen["url"] == "https://notion.test/v1/pages"
    assert seen["headers"]["Authorization"] == "Bearer secret"
    assert seen["headers"]["Notion-Version"] == "2022-06-28"
    props = seen["body"]["properties"]
    assert seen["body"]["parent"] == {"database_id": "db123"}
    assert props["Fecha"] == {"date": {"start": "2025-02-20T10:00:00+01:00"}}
    assert props["Nombre"]["title"][0]["text"]["content"] == "Ana"
    assert props["Teléfono"] == {"phone_number": "600111222"}

    assert created.id == "page-1"
    assert (created.date, created.time, created.name) == (THURSDAY, "10:00", "Ana")


def test_list_by_date_filters_on_the_day_and_follows_cursors():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        bodies.append(body)
        if "start_cursor" not in body:
            return httpx.Response(
                200,
                json={"results": [_page("p1", "2025-02-20T10:00:00.000+01:00")], "has_more": True, "next_cursor": "c2"},
            )
        return httpx.Response(
            200,
            json={"results": [_page("p2", "2025-02-20T17:30:00.000+01:00")], "has_more": False, "next_cursor": None},
        )

    found = _store(handler).list_by_date(THURSDAY)

    assert [r.time for r in found] == ["10:00", "17:30"]
    assert bodies[0]["filter"]["and"] == [
        {"property": "Fecha", "date": {"on_or_after": "2025-02-20"}},
        {"property": "Fecha", "date": {"before": "2025-02-21"}},
    ]
    assert bodies[1]["start_cursor"] == "c2"


def test_archive_and_update_of_missing_page():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"object": "error", "code": "object_not_found"})

    store = _store(handler)
    assert store.archive("gone") is False
    assert store.get("gone") is None
    with pytest.raises(ReservationNotFound):
        store.update("gone", THURSDAY, "11:00")


def test_archive_sends_archived_flag():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "p1", "archived": True})

    assert _store(handler).archive("p1") is True
    assert seen == {"method": "PATCH", "body": {"archived": True}}


def test_transport_and_server_errors_become_store_unavailable():
    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def failing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(StoreUnavailable):
        _store(broken).list_by_date(THURSDAY)
    with pytest.raises(StoreUnavailable):
        _store(failing).list_by_phone("600111222", THURSDAY)


def test_missing_credentials_are_rejected():
    with pytest.raises(ValueError):
        NotionReservationStore(token="", database_id="", client=httpx.Client())


def test_date_only_pages_are_left_out_of_phone_lookups(policy, calendar_export, clock):
    """A page with a bare date has no slot; the manage flow lists only timed ones."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "results": [_page("p1", "2025-02-21"), _page("p2", "2025-02-20T10:00:00.000+01:00")],
                "has_more": False,
            },
        )

    store = _store(handler)
    assert [r.id for r in store.list_by_phone("600111222", THURSDAY)] == ["p2"]

    manage = ManageBookingUseCase(
        policy=policy,
        resolver=AvailabilityResolver(policy=policy, store=store, timezone=MADRID),
        store=store,
        calendar_export=calendar_export,
        timezone=MADRID,
        clock=clock,
    )
    result = manage.lookup(manage.start().draft, "600111222")
    assert result.action == "list"
    assert [r.id for r in result.draft.reservations] == ["p2"]


def test_amount_and_payment_type_round_through_properties():
    """Optional price and payment method are written and read back when present."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        page = _page("page-1", "2025-02-20T10:00:00.000+01:00")
        page["properties"]["Monto"] = {"number": 15}
        page["properties"]["Tipo de pago"] = {"select": {"name": "Bizum"}}
        return httpx.Response(200, json=page)

    created = _store(handler).create(
        NewReservation(
            date=THURSDAY,
            time="10:00",
            name="Ana",
            email="ana@example.com",
            phone="600111222",
            amount=15,
            payment_type="Bizum",
        )
    )

    props = seen["body"]["properties"]
    assert props["Monto"] == {"number": 15}
    assert props["Tipo de pago"] == {"select": {"name": "Bizum"}}
    assert (created.amount, created.payment_type) == (15, "Bizum")

    plain = NotionReservationStore._parse_page(_page("p2", "2025-02-20T10:30:00.000+01:00"))
    assert plain.amount is None and plain.payment_type is None
