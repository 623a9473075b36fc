from datetime import datetime, timedelta, UTC

from eventdesk.db import models


def _create_key(client, org_admin, **extra):
    resp = client.post("/api/organization/api-keys", json={"name": "Website", **extra}, headers=org_admin.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_key_returns_secret_once(client, org_admin, db_session):
    body = _create_key(client, org_admin)
    assert body["key"].startswith("evk_")
    assert body["prefix"] == body["key"][:12]
    assert body["is_active"] is True

    listed = client.get("/api/organization/api-keys", headers=org_admin.headers).json()
    assert [k["id"] for k in listed] == [body["id"]]
    assert "key" not in listed[0]

    stored = db_session.query(models.ApiKey).one()
    assert body["key"] not in stored.key_hash
    audit = db_session.query(models.AuditLog).filter_by(action="API_KEY_CREATE").one()
    assert audit.changes["prefix"] == body["prefix"]


def test_organizer_can_list_but_not_create(client, org_admin, user_factory, auth_headers):
    organizer = user_factory("org@acme.example", role="ORGANIZER", organization=org_admin.org)
    assert client.get("/api/organization/api-keys", headers=auth_headers(organizer)).status_code == 200
    resp = client.post("/api/organization/api-keys", json={"name": "Mine"}, headers=auth_headers(organizer))
    assert resp.status_code == 403


def test_key_reads_events_of_its_organization(client, org_admin, published_event, db_session):
    raw = _create_key(client, org_admin)["key"]

    by_header = client.get("/api/events", headers={"X-API-Key": raw})
    assert by_header.status_code == 200
    assert [e["id"] for e in by_header.json()] == [str(published_event.id)]

    by_bearer = client.get(f"/api/events/{published_event.id}", headers={"Authorization": f"Bearer {raw}"})
    assert by_bearer.status_code == 200
    assert by_bearer.json()["slug"] == published_event.slug

    assert db_session.query(models.ApiKey).one().last_used_at is not None


def test_key_cannot_read_other_organizations(client, org_admin, organization_factory, event_factory):
    raw = _create_key(client, org_admin)["key"]
    foreign = event_factory(organization_factory("Other"), name="Foreign Fest")
    resp = client.get(f"/api/events/{foreign.id}", headers={"X-API-Key": raw})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Event not found"


def test_key_cannot_write(client, org_admin, published_event):
    raw = _create_key(client, org_admin)["key"]
    resp = client.post(
        "/api/events",
        json={"name": "Sneaky", "start_date": "2026-05-01T09:00:00Z", "end_date": "2026-05-01T18:00:00Z"},
        headers={"X-API-Key": raw},
    )
    assert resp.status_code == 401
    resp = client.put(f"/api/events/{published_event.id}", json={"name": "Renamed"}, headers={"X-API-Key": raw})
    assert resp.status_code == 401


def test_invalid_and_revoked_keys(client, org_admin, published_event, db_session):
    garbage = client.get("/api/events", headers={"X-API-Key": "evk_nothing_here"})
    assert garbage.status_code == 401
    assert garbage.json()["detail"] == "Invalid API key"

    created = _create_key(client, org_admin)
    revoke = client.delete(f"/api/organization/api-keys/{created['id']}", headers=org_admin.headers)
    assert revoke.status_code == 204
    assert db_session.query(models.ApiKey).one().is_active is False

    resp = client.get("/api/events", headers={"X-API-Key": created["key"]})
    assert resp.status_code == 401


def test_expired_key_is_rejected(client, org_admin):
    past = (datetime.now(UTC) - timedelta(days=1)).isoformat()
    created = _create_key(client, org_admin, expires_at=past)
    resp = client.get("/api/events", headers={"X-API-Key": created["key"]})
    assert resp.status_code == 401


def test_revoke_unknown_key(client, org_admin, organization_factory, db_session):
    other_org = organization_factory("Other")
    foreign = models.ApiKey(
        organization_id=other_org.id, key_id="abcdef0123456789", key_hash="x", name="Theirs", prefix="evk_abcdef01"
    )
    db_session.add(foreign)
    db_session.commit()

    resp = client.delete(f"/api/organization/api-keys/{foreign.id}", headers=org_admin.headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "API key not found"


def test_user_identity_wins_over_key(client, org_admin, published_event):
    resp = client.get("/api/events", headers={**org_admin.headers, "X-API-Key": "evk_broken"})
    assert resp.status_code == 200
