from datetime import datetime, timedelta, UTC
from decimal import Decimal

from eventdesk.db import models

EVENT_BODY = {
    "name": "PyCon DE 2026",
    "start_date": "2026-04-14T09:00:00Z",
    "end_date": "2026-04-16T18:00:00Z",
    "venue": "bcc",
    "city": "Berlin",
}


def test_create_event(client, org_admin, db_session):
    resp = client.post("/api/events", json=EVENT_BODY, headers=org_admin.headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["slug"] == "pycon-de-2026"
    assert body["status"] == "DRAFT"
    assert body["timezone"] == "UTC"
    assert body["organization_id"] == str(org_admin.org.id)
    assert body["counts"] == {"registrations": 0, "speakers": 0, "sessions": 0, "tracks": 0}

    audit = db_session.query(models.AuditLog).filter_by(entity_type="Event").one()
    assert audit.action == "CREATE"
    assert audit.entity_id == body["id"]
    assert audit.user_id == org_admin.user.id
    assert audit.ip_address == "testclient"


def test_create_event_with_taken_slug(client, org_admin):
    first = client.post("/api/events", json=EVENT_BODY, headers=org_admin.headers).json()
    second = client.post("/api/events", json=EVENT_BODY, headers=org_admin.headers).json()
    assert first["slug"] == "pycon-de-2026"
    assert second["slug"].startswith("pycon-de-2026-")


def test_create_event_rejects_inverted_dates(client, org_admin):
    resp = client.post(
        "/api/events",
        json={**EVENT_BODY, "start_date": "2026-04-16T09:00:00Z", "end_date": "2026-04-14T09:00:00Z"},
        headers=org_admin.headers,
    )
    assert resp.status_code == 422


def test_reviewer_cannot_create_event(client, user_factory, auth_headers):
    reviewer = user_factory("rev@example.com", role="REVIEWER")
    resp = client.post("/api/events", json=EVENT_BODY, headers=auth_headers(reviewer))
    assert resp.status_code == 403


def test_list_events_filters_by_status_and_org(client, org_admin, event_factory, organization_factory):
    event_factory(org_admin.org, name="Live One", status="LIVE")
    event_factory(org_admin.org, name="Draft One", status="DRAFT")
    event_factory(organization_factory("Other"), name="Foreign", status="LIVE")

    everything = client.get("/api/events", headers=org_admin.headers).json()
    assert sorted(e["name"] for e in everything) == ["Draft One", "Live One"]

    live = client.get("/api/events", params={"status": "LIVE"}, headers=org_admin.headers).json()
    assert [e["name"] for e in live] == ["Live One"]

    assert client.get("/api/events", params={"status": "PARTY"}, headers=org_admin.headers).status_code == 422


def test_event_detail_has_tickets_and_counts(
    client, org_admin, published_event, ticket_factory, registration_factory
):
    ticket = ticket_factory(published_event)
    registration_factory(published_event, ticket)

    resp = client.get(f"/api/events/{published_event.id}", headers=org_admin.headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["counts"]["registrations"] == 1
    assert [t["name"] for t in body["ticket_types"]] == ["General Admission"]
    assert body["ticket_types"][0]["registration_count"] == 1


def test_event_of_other_org_is_hidden(client, org_admin, organization_factory, event_factory):
    foreign = event_factory(organization_factory("Other"), name="Foreign")
    assert client.get(f"/api/events/{foreign.id}", headers=org_admin.headers).status_code == 404
    assert client.put(f"/api/events/{foreign.id}", json={"name": "Mine"}, headers=org_admin.headers).status_code == 404


def test_update_event_slug_and_settings(client, org_admin, published_event, event_factory):
    event_factory(org_admin.org, name="Taken")
    url = f"/api/events/{published_event.id}"

    renamed = client.put(url, json={"slug": "My New Slug!", "settings": {"color": "red"}}, headers=org_admin.headers)
    assert renamed.status_code == 200
    assert renamed.json()["slug"] == "my-new-slug"

    merged = client.put(url, json={"settings": {"banner": "top"}}, headers=org_admin.headers)
    assert merged.json()["settings"] == {"color": "red", "banner": "top"}

    taken = client.put(url, json={"slug": "taken"}, headers=org_admin.headers)
    assert taken.status_code == 400
    assert taken.json()["detail"] == "Slug already in use"

    invalid = client.put(url, json={"slug": "!!!"}, headers=org_admin.headers)
    assert invalid.status_code == 400
    assert invalid.json()["detail"] == "Invalid slug"


def test_update_event_checks_dates_against_stored_values(client, org_admin, published_event):
    before_start = (published_event.start_date - timedelta(days=1)).isoformat()
    resp = client.put(
        f"/api/events/{published_event.id}", json={"end_date": before_start}, headers=org_admin.headers
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "End date must be after start date"


def test_delete_event(client, org_admin, published_event, db_session):
    event_id = published_event.id
    resp = client.delete(f"/api/events/{event_id}", headers=org_admin.headers)
    assert resp.status_code == 204
    assert client.get(f"/api/events/{event_id}", headers=org_admin.headers).status_code == 404
    audit = db_session.query(models.AuditLog).filter_by(action="DELETE", entity_type="Event").one()
    assert audit.event_id == event_id
    assert audit.changes["slug"] == "pydata-summit"


def test_reviewer_sees_only_assigned_events(client, org_admin, event_factory, user_factory, auth_headers):
    reviewer = user_factory("rev@example.com", role="REVIEWER")
    assigned = event_factory(org_admin.org, name="Assigned", settings={"reviewerUserIds": [str(reviewer.id)]})
    hidden = event_factory(org_admin.org, name="Hidden")
    headers = auth_headers(reviewer)

    listed = client.get("/api/events", headers=headers).json()
    assert [e["name"] for e in listed] == ["Assigned"]
    assert client.get(f"/api/events/{assigned.id}", headers=headers).status_code == 200
    assert client.get(f"/api/events/{hidden.id}", headers=headers).status_code == 404
    assert client.put(f"/api/events/{assigned.id}", json={"name": "Mine"}, headers=headers).status_code == 403


# Ticket types

def test_create_ticket_type_defaults(client, org_admin, published_event):
    resp = client.post(
        f"/api/events/{published_event.id}/tickets",
        json={"name": "Early Bird", "price": "49.00", "quantity": 50},
        headers=org_admin.headers,
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert Decimal(body["price"]) == Decimal("49")
    assert body["currency"] == "USD"
    assert body["max_per_order"] == 10
    assert body["sold_count"] == 0
    assert body["is_active"] is True
    assert body["requires_approval"] is False


def test_ticket_quantity_must_be_positive(client, org_admin, published_event):
    resp = client.post(
        f"/api/events/{published_event.id}/tickets",
        json={"name": "Nothing", "quantity": 0},
        headers=org_admin.headers,
    )
    assert resp.status_code == 422


def test_ticket_quantity_cannot_drop_below_sold(
    client, org_admin, published_event, ticket_factory, registration_factory
):
    ticket = ticket_factory(published_event, quantity=10)
    registration_factory(published_event, ticket, email="one@example.com")
    registration_factory(published_event, ticket, email="two@example.com")

    url = f"/api/events/{published_event.id}/tickets/{ticket.id}"
    resp = client.put(url, json={"quantity": 1}, headers=org_admin.headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Quantity cannot be less than sold count (2)"

    ok = client.put(url, json={"quantity": 2, "name": "Standard"}, headers=org_admin.headers)
    assert ok.status_code == 200
    assert ok.json()["quantity"] == 2
    assert ok.json()["name"] == "Standard"


def test_delete_ticket_type(client, org_admin, published_event, ticket_factory, registration_factory):
    used = ticket_factory(published_event, name="Used")
    unused = ticket_factory(published_event, name="Unused")
    registration_factory(published_event, used)
    base = f"/api/events/{published_event.id}/tickets"

    blocked = client.delete(f"{base}/{used.id}", headers=org_admin.headers)
    assert blocked.status_code == 400
    assert blocked.json()["detail"] == "Cannot delete ticket type with registrations"

    assert client.delete(f"{base}/{unused.id}", headers=org_admin.headers).status_code == 204
    missing = client.get(f"{base}/{unused.id}", headers=org_admin.headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Ticket type not found"


def test_ticket_sales_window_round_trips(client, org_admin, published_event):
    opens = datetime(2026, 1, 1, 8, 0, tzinfo=UTC)
    resp = client.post(
        f"/api/events/{published_event.id}/tickets",
        json={"name": "Late", "quantity": 5, "sales_start": opens.isoformat()},
        headers=org_admin.headers,
    )
    assert resp.status_code == 201
    listed = client.get(f"/api/events/{published_event.id}/tickets", headers=org_admin.headers).json()
    assert datetime.fromisoformat(listed[0]["sales_start"].replace("Z", "+00:00")) == opens
