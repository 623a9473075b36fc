from eventdesk.db import models


def _url(event, suffix=""):
    return f"/api/events/{event.id}/reviewers{suffix}"


DIRECT = {"type": "direct", "email": "Rita@Example.com", "first_name": "Rita", "last_name": "Viewer"}


def test_add_direct_reviewer_invites_new_account(client, org_admin, published_event, db_session, mailer):
    resp = client.post(_url(published_event), json=DIRECT, headers=org_admin.headers)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["invitation_sent"] is True
    assert body["message"] == "Reviewer added and invitation email sent"

    reviewer = db_session.query(models.User).filter_by(email="rita@example.com").one()
    assert reviewer.role == "REVIEWER"
    assert reviewer.organization_id is None
    assert body["user_id"] == str(reviewer.id)

    db_session.refresh(published_event)
    assert published_event.settings["reviewerUserIds"] == [str(reviewer.id)]
    assert mailer.sent[-1]["subject"] == "You've been invited to review PyData Summit"
    assert db_session.query(models.VerificationToken).filter_by(identifier="rita@example.com").count() == 1


def test_existing_reviewer_is_added_without_invitation(
    client, org_admin, published_event, user_factory, mailer
):
    user_factory("rita@example.com", role="REVIEWER")
    resp = client.post(_url(published_event), json=DIRECT, headers=org_admin.headers)
    assert resp.status_code == 201
    assert resp.json()["invitation_sent"] is False
    assert resp.json()["message"] == "Reviewer added to event"
    assert mailer.sent == []


def test_reviewer_added_twice(client, org_admin, published_event):
    assert client.post(_url(published_event), json=DIRECT, headers=org_admin.headers).status_code == 201
    again = client.post(_url(published_event), json=DIRECT, headers=org_admin.headers)
    assert again.status_code == 400
    assert again.json()["detail"] == "This person is already a reviewer for this event"


def test_staff_account_cannot_become_reviewer(client, org_admin, published_event, user_factory):
    user_factory("org@acme.example", role="ORGANIZER", organization=org_admin.org)
    resp = client.post(
        _url(published_event),
        json={**DIRECT, "email": "org@acme.example"},
        headers=org_admin.headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User already exists with role ORGANIZER. Change their role in Settings > Users first."


def test_add_speaker_as_reviewer(client, org_admin, published_event, db_session):
    speaker = client.post(
        f"/api/events/{published_event.id}/speakers",
        json={"email": "grace@example.com", "first_name": "Grace", "last_name": "Hopper", "company": "Navy"},
        headers=org_admin.headers,
    ).json()
    other = client.post(
        f"/api/events/{published_event.id}/speakers",
        json={"email": "alan@example.com", "first_name": "Alan", "last_name": "Turing"},
        headers=org_admin.headers,
    ).json()

    resp = client.post(
        _url(published_event), json={"type": "speaker", "speaker_id": speaker["id"]}, headers=org_admin.headers
    )
    assert resp.status_code == 201, resp.text
    linked = db_session.query(models.Speaker).filter_by(email="grace@example.com").one()
    assert str(linked.user_id) == resp.json()["user_id"]

    listing = client.get(_url(published_event), headers=org_admin.headers).json()
    assert len(listing["reviewers"]) == 1
    reviewer = listing["reviewers"][0]
    assert reviewer["speaker_id"] == speaker["id"]
    assert reviewer["company"] == "Navy"
    assert reviewer["account_active"] is False
    assert [s["id"] for s in listing["available_speakers"]] == [other["id"]]

    again = client.post(
        _url(published_event), json={"type": "speaker", "speaker_id": speaker["id"]}, headers=org_admin.headers
    )
    assert again.status_code == 400


def test_unknown_speaker(client, org_admin, published_event):
    resp = client.post(
        _url(published_event), json={"type": "speaker", "speaker_id": str(published_event.id)}, headers=org_admin.headers
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Speaker not found"


def test_reviewer_request_type_is_validated(client, org_admin, published_event):
    resp = client.post(_url(published_event), json={"type": "guest", "email": "x@example.com"}, headers=org_admin.headers)
    assert resp.status_code == 422


def test_reviewer_gains_read_access(client, org_admin, published_event, event_factory, db_session, auth_headers):
    other = event_factory(org_admin.org, name="Other Event")
    client.post(_url(published_event), json=DIRECT, headers=org_admin.headers)
    reviewer = db_session.query(models.User).filter_by(email="rita@example.com").one()
    headers = auth_headers(reviewer)

    listed = client.get("/api/events", headers=headers).json()
    assert [e["id"] for e in listed] == [str(published_event.id)]
    assert client.get(f"/api/events/{other.id}", headers=headers).status_code == 404
    # reviewers do not manage the reviewer list themselves
    assert client.get(_url(published_event), headers=headers).status_code == 403


def test_remove_reviewer(client, org_admin, published_event, db_session, auth_headers):
    added = client.post(_url(published_event), json=DIRECT, headers=org_admin.headers).json()
    resp = client.delete(_url(published_event, f"/{added['user_id']}"), headers=org_admin.headers)
    assert resp.status_code == 204

    db_session.refresh(published_event)
    assert published_event.settings["reviewerUserIds"] == []
    reviewer = db_session.query(models.User).filter_by(email="rita@example.com").one()
    assert client.get(f"/api/events/{published_event.id}", headers=auth_headers(reviewer)).status_code == 404

    missing = client.delete(_url(published_event, f"/{added['user_id']}"), headers=org_admin.headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Reviewer not found"
