import pytest

from eventdesk.db import models


def _url(event, resource, suffix=""):
    return f"/api/events/{event.id}/{resource}{suffix}"


@pytest.fixture
def make_speaker(client, org_admin, published_event):
    def _create(email="guido@example.com", first_name="Guido", last_name="van Rossum", **extra):
        resp = client.post(
            _url(published_event, "speakers"),
            json={"email": email, "first_name": first_name, "last_name": last_name, **extra},
            headers=org_admin.headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create


@pytest.fixture
def make_track(client, org_admin, published_event):
    def _create(name="Data", **extra):
        resp = client.post(_url(published_event, "tracks"), json={"name": name, **extra}, headers=org_admin.headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create


@pytest.fixture
def make_session(client, org_admin, published_event):
    def _create(name="Keynote", start="2026-04-14T09:00:00Z", end="2026-04-14T10:30:00Z", **extra):
        resp = client.post(
            _url(published_event, "sessions"),
            json={"name": name, "start_time": start, "end_time": end, **extra},
            headers=org_admin.headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create


# Speakers

def test_create_speaker(make_speaker, db_session):
    speaker = make_speaker(email="Guido@Example.com", company="PSF")
    assert speaker["email"] == "guido@example.com"
    assert speaker["status"] == "INVITED"
    assert speaker["social_links"] == {}
    assert speaker["sessions"] == []
    assert db_session.query(models.AuditLog).filter_by(entity_type="Speaker").count() == 1


def test_speaker_email_unique_per_event(client, org_admin, published_event, make_speaker):
    make_speaker()
    other = make_speaker(email="brett@example.com", first_name="Brett")

    dup = client.post(
        _url(published_event, "speakers"),
        json={"email": "GUIDO@example.com", "first_name": "G", "last_name": "R"},
        headers=org_admin.headers,
    )
    assert dup.status_code == 400
    assert dup.json()["detail"] == "Speaker with this email already exists for this event"

    clash = client.put(
        _url(published_event, "speakers", f"/{other['id']}"), json={"email": "guido@example.com"}, headers=org_admin.headers
    )
    assert clash.status_code == 400


def test_list_speakers_by_status(client, org_admin, published_event, make_speaker):
    make_speaker()
    make_speaker(email="brett@example.com", status="CONFIRMED")
    resp = client.get(_url(published_event, "speakers"), params={"status": "CONFIRMED"}, headers=org_admin.headers)
    assert [s["email"] for s in resp.json()] == ["brett@example.com"]


def test_update_and_delete_speaker(client, org_admin, published_event, make_speaker):
    speaker = make_speaker()
    url = _url(published_event, "speakers", f"/{speaker['id']}")

    updated = client.put(url, json={"status": "CONFIRMED", "bio": "BDFL emeritus"}, headers=org_admin.headers)
    assert updated.status_code == 200
    assert updated.json()["status"] == "CONFIRMED"
    assert updated.json()["bio"] == "BDFL emeritus"

    assert client.delete(url, headers=org_admin.headers).status_code == 204
    missing = client.get(url, headers=org_admin.headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Speaker not found"


def test_speaker_invitation_email(client, org_admin, published_event, make_speaker, mailer):
    speaker = make_speaker()
    resp = client.post(
        _url(published_event, "speakers", f"/{speaker['id']}/email"),
        json={"type": "invitation", "custom_message": "We loved your last talk."},
        headers=org_admin.headers,
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Email sent to guido@example.com"
    sent = mailer.sent[-1]
    assert sent["subject"] == "Speaker Invitation - PyData Summit"
    assert "We loved your last talk." in sent["text"]
    assert "admin@acme.example" in sent["text"]


def test_speaker_custom_email_needs_subject(client, org_admin, published_event, make_speaker):
    speaker = make_speaker()
    resp = client.post(
        _url(published_event, "speakers", f"/{speaker['id']}/email"),
        json={"type": "custom", "custom_message": "Slides due Friday"},
        headers=org_admin.headers,
    )
    assert resp.status_code == 400


# Tracks

def test_track_sort_order_auto_increments(client, org_admin, published_event, make_track):
    first = make_track("Data")
    second = make_track("Web", color="#10b981")
    assert first["color"] == "#3B82F6"
    assert (first["sort_order"], second["sort_order"]) == (0, 1)

    pinned = make_track("Keynotes", sort_order=0)
    listed = client.get(_url(published_event, "tracks"), headers=org_admin.headers).json()
    assert [t["name"] for t in listed] == ["Data", "Keynotes", "Web"]
    assert pinned["session_count"] == 0


def test_track_color_must_be_hex(client, org_admin, published_event):
    resp = client.post(
        _url(published_event, "tracks"), json={"name": "Bad", "color": "blue"}, headers=org_admin.headers
    )
    assert resp.status_code == 422


def test_delete_track_with_sessions(client, org_admin, published_event, make_track, make_session):
    track = make_track()
    make_session(track_id=track["id"])
    url = _url(published_event, "tracks", f"/{track['id']}")

    blocked = client.delete(url, headers=org_admin.headers)
    assert blocked.status_code == 400
    assert blocked.json()["detail"] == "Cannot delete track with sessions"

    empty = make_track("Empty")
    assert client.delete(_url(published_event, "tracks", f"/{empty['id']}"), headers=org_admin.headers).status_code == 204


def test_update_track(client, org_admin, published_event, make_track):
    track = make_track()
    resp = client.put(
        _url(published_event, "tracks", f"/{track['id']}"), json={"name": "Data & ML"}, headers=org_admin.headers
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Data & ML"
    assert resp.json()["color"] == "#3B82F6"


# Sessions

def test_create_session_with_track_and_speakers(make_session, make_track, make_speaker, client, org_admin, published_event):
    track = make_track()
    guido = make_speaker()
    session = make_session(track_id=track["id"], speaker_ids=[guido["id"]], location="Hall A")

    assert session["track"]["name"] == "Data"
    assert [s["email"] for s in session["speakers"]] == ["guido@example.com"]
    assert session["status"] == "SCHEDULED"

    speaker = client.get(_url(published_event, "speakers", f"/{guido['id']}"), headers=org_admin.headers).json()
    assert [s["name"] for s in speaker["sessions"]] == ["Keynote"]


def test_session_validation(client, org_admin, published_event, make_speaker):
    url = _url(published_event, "sessions")
    base = {"name": "Talk", "start_time": "2026-04-14T09:00:00Z", "end_time": "2026-04-14T10:00:00Z"}

    inverted = client.post(url, json={**base, "end_time": "2026-04-14T09:00:00Z"}, headers=org_admin.headers)
    assert inverted.status_code == 422

    no_track = client.post(url, json={**base, "track_id": str(published_event.id)}, headers=org_admin.headers)
    assert no_track.status_code == 404
    assert no_track.json()["detail"] == "Track not found"

    guido = make_speaker()
    partial = client.post(
        url, json={**base, "speaker_ids": [guido["id"], str(published_event.id)]}, headers=org_admin.headers
    )
    assert partial.status_code == 404
    assert partial.json()["detail"] == "One or more speakers not found"


def test_list_sessions_by_date_and_track(client, org_admin, published_event, make_session, make_track):
    track = make_track()
    make_session("Day one", track_id=track["id"])
    make_session("Day two", start="2026-04-15T09:00:00Z", end="2026-04-15T10:00:00Z")
    url = _url(published_event, "sessions")

    day_two = client.get(url, params={"date": "2026-04-15"}, headers=org_admin.headers).json()
    assert [s["name"] for s in day_two] == ["Day two"]

    on_track = client.get(url, params={"track_id": track["id"]}, headers=org_admin.headers).json()
    assert [s["name"] for s in on_track] == ["Day one"]

    bad = client.get(url, params={"date": "15/04/2026"}, headers=org_admin.headers)
    assert bad.status_code == 400
    assert bad.json()["detail"] == "date must be YYYY-MM-DD"


def test_update_session(client, org_admin, published_event, make_session, make_speaker):
    guido = make_speaker()
    brett = make_speaker(email="brett@example.com", first_name="Brett")
    session = make_session(speaker_ids=[guido["id"]])
    url = _url(published_event, "sessions", f"/{session['id']}")

    too_early = client.put(url, json={"end_time": "2026-04-14T08:00:00Z"}, headers=org_admin.headers)
    assert too_early.status_code == 400
    assert too_early.json()["detail"] == "End time must be after start time"

    resp = client.put(
        url, json={"name": "Opening Keynote", "speaker_ids": [brett["id"]], "status": "CANCELLED"}, headers=org_admin.headers
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["name"] == "Opening Keynote"
    assert resp.json()["status"] == "CANCELLED"
    assert [s["email"] for s in resp.json()["speakers"]] == ["brett@example.com"]


def test_delete_session(client, org_admin, published_event, make_session):
    session = make_session()
    url = _url(published_event, "sessions", f"/{session['id']}")
    assert client.delete(url, headers=org_admin.headers).status_code == 204
    assert client.get(url, headers=org_admin.headers).status_code == 404


# Schedule

def test_schedule_lays_out_first_day(client, org_admin, published_event, make_track, make_session, make_speaker):
    web = make_track("Web", color="#10B981")
    data = make_track("Data")
    guido = make_speaker()
    make_session("Opening", start="2026-04-14T09:00:00Z", end="2026-04-14T10:30:00Z", speaker_ids=[guido["id"]])
    make_session("Django", start="2026-04-14T11:00:00Z", end="2026-04-14T11:15:00Z", track_id=web["id"])
    make_session("Pandas", start="2026-04-14T13:00:00Z", end="2026-04-14T14:00:00Z", track_id=data["id"])
    make_session("Sprints", start="2026-04-15T09:00:00Z", end="2026-04-15T17:00:00Z", track_id=data["id"])

    resp = client.get(_url(published_event, "schedule"), headers=org_admin.headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["dates"] == ["2026-04-14", "2026-04-15"]
    assert body["selected_date"] == "2026-04-14"
    assert len(body["time_slots"]) == 17
    assert body["time_slots"][0] == {"hour": 6, "label": "6:00 AM"}

    columns = body["columns"]
    assert [c["track_name"] for c in columns] == ["No Track", "Web", "Data"]
    assert columns[0]["track_id"] == "no-track"
    assert columns[0]["color"] is None
    opening = columns[0]["blocks"][0]
    assert (opening["top"], opening["height"]) == (180, 90)
    assert opening["speakers"][0]["email"] == "guido@example.com"
    short = columns[1]["blocks"][0]
    assert (short["top"], short["height"]) == (300, 30)
    assert columns[1]["color"] == "#10B981"


def test_schedule_filters_day_and_track(client, org_admin, published_event, make_track, make_session):
    data = make_track("Data")
    make_session("Opening", start="2026-04-14T09:00:00Z", end="2026-04-14T10:00:00Z")
    make_session("Sprints", start="2026-04-15T09:00:00Z", end="2026-04-15T17:00:00Z", track_id=data["id"])
    make_session("Lunch", start="2026-04-15T12:00:00Z", end="2026-04-15T13:00:00Z")
    url = _url(published_event, "schedule")

    second = client.get(url, params={"date": "2026-04-15"}, headers=org_admin.headers).json()
    assert second["selected_date"] == "2026-04-15"
    assert [c["track_name"] for c in second["columns"]] == ["Data", "No Track"]

    only_data = client.get(url, params={"date": "2026-04-15", "track_id": data["id"]}, headers=org_admin.headers).json()
    assert [b["name"] for c in only_data["columns"] for b in c["blocks"]] == ["Sprints"]


def test_empty_schedule(client, org_admin, published_event):
    body = client.get(_url(published_event, "schedule"), headers=org_admin.headers).json()
    assert body["dates"] == []
    assert body["selected_date"] is None
    assert body["columns"] == []
    assert len(body["time_slots"]) == 17
