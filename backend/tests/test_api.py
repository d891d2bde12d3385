from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from updoo.api.deps import get_lifecycle, get_notifier
from updoo.auth import create_access_token
from updoo.database import get_db
from updoo.errors import ConflictError
from updoo.main import app
from updoo.models.proposal import Proposal


@pytest.fixture()
def api(session_factory, notifier):
    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def _payload(reference, **overrides) -> dict:
    payload = {
        "title": "Landing page for a bakery",
        "description": "A one page site with a menu and contact form.",
        "category_id": reference["programming"],
        "billing_type": "FIXED",
        "rate": "1500",
        "experience_level": "JUNIOR",
        "project_type": "ONE_TIME",
        "offer_days": 7,
        "skill_ids": [reference["python"]],
    }
    payload.update(overrides)
    return payload


def _published(api, reference, client_user, admin_user) -> int:
    created = api.post("/api/listings", json=_payload(reference), headers=_auth(client_user))
    assert created.status_code == 201
    listing_id = created.json()["id"]
    assert api.post(f"/api/listings/{listing_id}/submit", headers=_auth(client_user)).status_code == 200
    assert api.post(f"/api/listings/{listing_id}/approve", headers=_auth(admin_user)).status_code == 200
    return listing_id


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_register_login_and_me(api):
    registered = api.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": "secret-123", "role": "FREELANCER", "language": "ENGLISH"},
    )
    assert registered.status_code == 200
    assert registered.json()["email"] == "new@example.com"

    duplicate = api.post(
        "/api/auth/register",
        json={"email": "new@example.com", "password": "secret-123", "role": "CLIENT"},
    )
    assert duplicate.status_code == 409

    admin_attempt = api.post(
        "/api/auth/register",
        json={"email": "boss@example.com", "password": "secret-123", "role": "ADMIN"},
    )
    assert admin_attempt.status_code == 422

    login = api.post("/api/auth/login", json={"email": "new@example.com", "password": "secret-123"})
    assert login.status_code == 200
    me = api.get("/api/auth/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"})
    assert me.json()["role"] == "FREELANCER"
    assert me.json()["language"] == "ENGLISH"

    assert api.post("/api/auth/login", json={"email": "new@example.com", "password": "wrong-pass"}).status_code == 401


def test_listing_flow_and_public_view(api, reference, client_user, admin_user, notifier):
    created = api.post("/api/listings", json=_payload(reference), headers=_auth(client_user))
    body = created.json()
    assert body["status"] == "DRAFT"
    assert body["rate"] == "1500.00"
    assert body["author"]["surname"] == "Kowalska"

    listing_id = body["id"]
    assert api.get(f"/api/listings/{listing_id}").status_code == 404

    api.post(f"/api/listings/{listing_id}/submit", headers=_auth(client_user))
    approved = api.post(f"/api/listings/{listing_id}/approve", headers=_auth(admin_user))
    assert approved.json()["status"] == "PUBLISHED"
    assert ("listing_approved", listing_id) in notifier.calls

    public = api.get(f"/api/listings/{listing_id}").json()
    assert public["rate"] is None
    assert public["author"]["surname"] == "K."
    assert public["display_status"] == "PUBLISHED"
    assert public["is_favorite"] is None


def test_error_mapping(api, reference, client_user, admin_user):
    listing_id = api.post("/api/listings", json=_payload(reference), headers=_auth(client_user)).json()["id"]

    forbidden = api.post(f"/api/listings/{listing_id}/approve", headers=_auth(client_user))
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "Unauthorized"

    wrong_state = api.post(f"/api/listings/{listing_id}/approve", headers=_auth(admin_user))
    assert wrong_state.status_code == 409
    assert wrong_state.json()["retryable"] is False

    api.post(f"/api/listings/{listing_id}/submit", headers=_auth(client_user))
    short_reason = api.post(
        f"/api/listings/{listing_id}/reject",
        json={"reason": "no"},
        headers=_auth(admin_user),
    )
    assert short_reason.status_code == 422
    assert short_reason.json()["error"] == "ValidationError"

    huge_rate = api.post("/api/listings", json=_payload(reference, rate="1e30"), headers=_auth(client_user))
    assert huge_rate.status_code == 422
    assert huge_rate.json()["error"] == "ValidationError"

    assert api.post("/api/listings", json=_payload(reference)).status_code == 401


def test_conflict_is_reported_as_retryable(api, admin_user):
    class RacingLifecycle:
        def approve(self, listing_id, caller):
            raise ConflictError("Listing 1 was modified concurrently, reload and retry")

    app.dependency_overrides[get_lifecycle] = lambda: RacingLifecycle()

    response = api.post("/api/listings/1/approve", headers=_auth(admin_user))

    assert response.status_code == 409
    assert response.json()["retryable"] is True


def test_feed_is_localized(api, reference, client_user, admin_user):
    listing_id = _published(api, reference, client_user, admin_user)

    english = api.get("/api/listings/feed", headers={"Accept-Language": "en-US"}).json()
    assert [item["id"] for item in english["items"]] == [listing_id]
    assert english["items"][0]["category"]["name"] == "Programming"

    polish = api.get("/api/listings/feed").json()
    assert polish["items"][0]["category"]["name"] == "Programowanie"
    assert polish["total"] == 1

    filtered = api.get("/api/listings/feed", params={"category_id": reference["writing"]}).json()
    assert filtered["items"] == []


def test_apply_and_list_applications(api, reference, client_user, freelancer_user, other_client_user, admin_user):
    listing_id = _published(api, reference, client_user, admin_user)

    applied = api.post(
        f"/api/listings/{listing_id}/apply",
        json={"message": "Happy to help"},
        headers=_auth(freelancer_user),
    )
    assert applied.status_code == 200

    as_owner = api.get(f"/api/listings/{listing_id}/applications", headers=_auth(client_user))
    assert [item["applicant_id"] for item in as_owner.json()] == [freelancer_user.id]
    assert api.get(f"/api/listings/{listing_id}/applications", headers=_auth(other_client_user)).status_code == 403

    mine = api.get("/api/applications/mine", headers=_auth(freelancer_user)).json()
    assert [item["listing_id"] for item in mine] == [listing_id]


def test_favorites_and_follows(api, reference, client_user, freelancer_user, admin_user):
    listing_id = _published(api, reference, client_user, admin_user)
    headers = _auth(freelancer_user)

    assert api.post(f"/api/favorites/{listing_id}", headers=headers).status_code == 200
    favorites = api.get("/api/favorites", headers=headers).json()
    assert [item["id"] for item in favorites] == [listing_id]
    assert favorites[0]["is_favorite"] is True
    assert api.get(f"/api/listings/{listing_id}", headers=headers).json()["is_favorite"] is True

    api.delete(f"/api/favorites/{listing_id}", headers=headers)
    assert api.get("/api/favorites", headers=headers).json() == []

    assert api.post(f"/api/follows/{reference['writing']}", headers=headers).status_code == 200
    assert api.post("/api/follows/999", headers=headers).status_code == 404
    followed = api.get("/api/follows", headers={**headers, "Accept-Language": "en"}).json()
    assert followed == [{"id": reference["writing"], "slug": "writing", "name": "Pisanie"}]


def test_proposal_round_trip(db, api, reference, admin_user, notifier):
    created = api.post(
        "/api/proposals",
        json={
            "email": "prospect@example.com",
            "reason": "NO_ACCOUNT",
            "language": "ENGLISH",
            "listing": _payload(reference),
        },
        headers=_auth(admin_user),
    )
    assert created.status_code == 201
    assert "proposal_invitation" in notifier.names()
    [listed] = api.get("/api/proposals", headers=_auth(admin_user)).json()
    assert listed["status"] == "PENDING"

    token = db.query(Proposal).one().token
    shown = api.get(f"/api/proposals/{token}").json()
    assert shown["title"] == "Landing page for a bakery"

    accepted = api.post(f"/api/proposals/{token}/accept", headers={"Accept-Language": "en"})
    assert accepted.status_code == 200
    assert accepted.json()["message"] == "Your listing has been sent for review."
    assert "proposal_credentials" in notifier.names()

    assert api.post(f"/api/proposals/{token}/accept").status_code == 409
    assert api.get("/api/proposals/unknown-token").status_code == 404


def test_reference_lists(api, reference):
    categories = api.get("/api/reference/categories", headers={"Accept-Language": "en"}).json()
    assert [item["name"] for item in categories] == ["Programming", "Pisanie"]
    locations = api.get("/api/reference/locations").json()
    assert locations == [{"id": reference["warsaw"], "slug": "warszawa", "name": "Warszawa"}]
