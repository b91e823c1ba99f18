"""Flask shell smoke tests: sign-in, onboarding, editing and sign-out."""

from decimal import Decimal

from sqlmodel import select

from blackroc.models import Customer, Invoice
from blackroc.services.auth import get_user_by_email
from blackroc.services.demo_seed import run_demo_seed

PASSWORD = "secret-pass"


def _register(client, email="buyer@example.com"):
    return client.post("/register", json={"email": email, "password": PASSWORD})


def test_public_root(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.get_json() == {"app": "BlackRoc", "signed_in": False}


def test_dashboard_requires_sign_in(client):
    resp = client.get("/dashboard/")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")


def test_register_validation_errors(client):
    resp = client.post("/register", json={"email": "nope", "password": "123"})

    assert resp.status_code == 400
    errors = resp.get_json()["errors"]
    assert "email" in errors and "password" in errors


def test_duplicate_registration_rejected(client):
    _register(client)
    client.post("/logout")

    resp = _register(client)

    assert resp.status_code == 400


def test_login_rejects_bad_password(client):
    _register(client)
    client.post("/logout")

    resp = client.post("/login", json={"email": "buyer@example.com", "password": "wrong-pass"})

    assert resp.status_code == 401


def test_first_visit_shows_onboarding(client):
    resp = _register(client)
    assert resp.status_code == 302

    body = client.get("/dashboard/").get_json()

    assert body["identity"]["email"] == "buyer@example.com"
    assert body["profile"]["state"] == "needs_onboarding"
    assert body["profile"]["form_visible"] is True
    assert body["profile"]["draft"]["email"] == "buyer@example.com"
    assert body["profile"]["draft"]["name"] == ""
    assert body["dashboard"]["stats"]["outstanding_balance"] == "0.00"
    assert body["notifications"] == []


def test_onboarding_missing_phone_is_rejected(client, app):
    _register(client)

    resp = client.post("/dashboard/profile", json={"name": "Acme", "phone": " "})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["profile"]["error"]["fields"] == ["phone"]
    assert len(body["notifications"]) == 1
    with app.extensions["blackroc"].session_factory() as session:
        assert session.exec(select(Customer)).first() is None


def test_onboarding_then_edit_keeps_untouched_fields(client):
    _register(client)

    resp = client.post(
        "/dashboard/profile", json={"name": "Thabo", "phone": "0215550100", "company": "X"}
    )
    assert resp.status_code == 200
    assert resp.get_json()["profile"]["state"] == "has_profile"

    resp = client.post("/dashboard/profile/edit", json={"name": "Acme", "phone": "0119721349"})

    assert resp.status_code == 200
    profile = resp.get_json()["profile"]["profile"]
    assert profile["name"] == "Acme"
    assert profile["phone"] == "0119721349"
    assert profile["company"] == "X"
    assert client.get("/dashboard/").get_json()["profile"]["state"] == "has_profile"


def test_dashboard_shows_seeded_stats(client, app):
    _register(client)
    ctx = app.extensions["blackroc"]
    user = get_user_by_email("buyer@example.com", ctx.session_factory)
    run_demo_seed(ctx.session_factory, user_id=user.id)

    body = client.get("/dashboard/").get_json()

    assert body["profile"]["state"] == "has_profile"
    assert body["dashboard"]["stats"]["total_quotes"] == 6
    assert body["dashboard"]["stats"]["outstanding_balance"] == "22950.50"
    assert len(body["dashboard"]["recent_quotes"]) == 5
    with ctx.session_factory() as session:
        legacy = session.exec(select(Invoice).where(Invoice.outstanding_amount.is_(None))).all()
        assert len(legacy) == 1
    assert Decimal(body["dashboard"]["stats"]["outstanding_balance"]) > 0


def test_logout_redirects_public_and_clears_session(client):
    _register(client)

    resp = client.post("/logout")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")
    assert client.get("/").get_json()["signed_in"] is False
    assert client.get("/dashboard/").status_code == 302


def test_onboarding_success_notification_reaches_response(client):
    _register(client)

    resp = client.post("/dashboard/profile", json={"name": "Acme", "phone": "0119721349"})

    assert resp.status_code == 200
    notifications = resp.get_json()["notifications"]
    assert len(notifications) == 1
    assert notifications[0]["kind"] == "success"
    assert notifications[0]["title"] == "Profile created"
    assert client.get("/dashboard/").get_json()["notifications"] == []


def test_logout_flashes_sign_out_message(client):
    _register(client)

    client.post("/logout")

    with client.session_transaction() as sess:
        flashes = sess.get("_flashes", [])
    assert ("success", "Signed out successfully") in flashes


def test_change_password_then_sign_in_with_new_password(client):
    _register(client)

    resp = client.post(
        "/account/password",
        json={
            "current_password": PASSWORD,
            "new_password": "fresh-pass",
            "confirm_password": "fresh-pass",
        },
    )

    assert resp.status_code == 200
    assert resp.get_json()["notifications"][0]["title"] == "Password updated"
    assert client.get("/").get_json()["signed_in"] is True

    client.post("/logout")
    assert client.post("/login", json={"email": "buyer@example.com", "password": PASSWORD}).status_code == 401
    assert client.post("/login", json={"email": "buyer@example.com", "password": "fresh-pass"}).status_code == 302


def test_change_password_rejects_mismatch_and_wrong_current(client):
    _register(client)

    resp = client.post(
        "/account/password",
        json={"current_password": PASSWORD, "new_password": "fresh-pass", "confirm_password": "other-pass"},
    )
    assert resp.status_code == 400
    assert "confirm_password" in resp.get_json()["errors"]

    resp = client.post(
        "/account/password",
        json={"current_password": "wrong-pass", "new_password": "fresh-pass", "confirm_password": "fresh-pass"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["errors"]["current_password"] == ["Current password is incorrect."]


def test_change_password_requires_sign_in(client):
    resp = client.post(
        "/account/password",
        json={"current_password": PASSWORD, "new_password": "fresh-pass", "confirm_password": "fresh-pass"},
    )

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
