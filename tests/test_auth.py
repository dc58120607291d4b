from datetime import datetime, timedelta, timezone

from jose import jwt

from app.models import Employee, User
from app.utils.security import create_access_token, get_password_hash, verify_password
from tests.conftest import TEST_SECRET, auth_header, register


def test_register_regular_user_creates_linked_employee(client, db_session):
    resp = client.post(
        "/api/auth/register",
        json={"username": "ana", "email": "Ana@Co.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    data = resp.json()
    user = data["user"]
    assert user["role"] == "user"
    assert user["email"] == "ana@co.com"
    assert user["employeeId"] is not None
    assert "hashedPassword" not in user and "password" not in user
    assert data["token"]

    employees = db_session.query(Employee).all()
    assert len(employees) == 1
    assert employees[0].id == user["employeeId"]
    assert employees[0].email == "ana@co.com"
    assert employees[0].name == "ana"
    assert employees[0].role == "Team Member"


def test_register_with_explicit_user_role_creates_employee(client):
    user, _ = register(client, "ben", "ben@co.com", role="user")
    assert user["employeeId"] is not None


def test_register_admin_has_no_employee(client, db_session):
    user, _ = register(client, "boss", "boss@co.com", role="admin")
    assert user["role"] == "admin"
    assert user["employeeId"] is None
    assert db_session.query(Employee).count() == 0


def test_register_duplicate_email_and_username(client):
    register(client, "ana", "ana@co.com")

    resp = client.post("/api/auth/register", json={"username": "other", "email": "ana@co.com", "password": "secret123"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email already in use"

    resp = client.post("/api/auth/register", json={"username": "ana", "email": "new@co.com", "password": "secret123"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username already taken"


def test_register_validation_errors_are_400(client):
    resp = client.post("/api/auth/register", json={"username": "ab", "email": "x@co.com", "password": "secret123"})
    assert resp.status_code == 400
    assert "username" in resp.json()["message"]

    resp = client.post("/api/auth/register", json={"username": "abc", "email": "not-an-email", "password": "secret123"})
    assert resp.status_code == 400

    resp = client.post("/api/auth/register", json={"username": "abc", "email": "x@co.com", "password": "123"})
    assert resp.status_code == 400

    resp = client.post("/api/auth/register", json={"username": "abc", "email": "x@co.com", "password": "secret123", "role": "root"})
    assert resp.status_code == 400


def test_register_rejects_email_taken_by_existing_employee(client, admin):
    client.post("/api/employees", json={"name": "Ana Lee", "role": "Engineer", "email": "ana@co.com"}, headers=admin["headers"])
    resp = client.post("/api/auth/register", json={"username": "ana", "email": "ana@co.com", "password": "secret123"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email already in use"


def test_login_success_and_failure(client):
    register(client, "ana", "ana@co.com", password="secret123")

    ok = client.post("/api/auth/login", json={"email": "ana@co.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["user"]["username"] == "ana"
    assert ok.json()["token"]

    wrong_password = client.post("/api/auth/login", json={"email": "ana@co.com", "password": "wrong-pass"})
    unknown_email = client.post("/api/auth/login", json={"email": "nobody@co.com", "password": "secret123"})
    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    # Failure must not reveal whether the email exists
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password"}


def test_me_requires_token(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Authentication required"


def test_me_returns_current_user(client, worker):
    resp = client.get("/api/auth/me", headers=worker["headers"])
    assert resp.status_code == 200
    assert resp.json()["id"] == worker["user"]["id"]
    assert resp.json()["employeeId"] == worker["user"]["employeeId"]


def test_me_rejects_garbage_and_expired_tokens(client, worker):
    resp = client.get("/api/auth/me", headers=auth_header("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"

    expired = create_access_token(worker["user"]["id"], TEST_SECRET, expire_days=-1)
    resp = client.get("/api/auth/me", headers=auth_header(expired))
    assert resp.status_code == 401

    forged = create_access_token(worker["user"]["id"], "some-other-secret")
    resp = client.get("/api/auth/me", headers=auth_header(forged))
    assert resp.status_code == 401


def test_me_rejects_token_of_deleted_user(client, worker, db_session):
    db_session.query(User).filter(User.id == worker["user"]["id"]).delete()
    db_session.commit()

    resp = client.get("/api/auth/me", headers=worker["headers"])
    assert resp.status_code == 401
    assert resp.json()["message"] == "User not found"


def test_token_carries_user_id_and_seven_day_expiry(worker):
    claims = jwt.decode(worker["token"], TEST_SECRET, algorithms=["HS256"])
    assert claims["sub"] == str(worker["user"]["id"])
    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    remaining = expires - datetime.now(timezone.utc)
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)


def test_password_hash_round_trip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_register_accepts_intranet_domain(client, db_session):
    user, token = register(client, "bob", "Bob@Company.local")
    assert user["email"] == "bob@company.local"
    assert token
    assert db_session.query(Employee).filter(Employee.email == "bob@company.local").count() == 1

    user, _ = register(client, "qa", "qa@staging.test")
    assert user["email"] == "qa@staging.test"


def test_register_still_rejects_reserved_domains(client):
    resp = client.post("/api/auth/register", json={"username": "abc", "email": "x@host.invalid", "password": "secret123"})
    assert resp.status_code == 400
    assert "email" in resp.json()["message"]


def test_login_with_malformed_email_is_401(client):
    register(client, "ana", "ana@co.com")

    for email in ("nobody", "", "@@"):
        resp = client.post("/api/auth/login", json={"email": email, "password": "x"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password"


def test_login_unknown_email_still_spends_a_hash_check(app, client, monkeypatch):
    register(client, "ana", "ana@co.com")
    calls = []
    monkeypatch.setattr(app.state.pwd_context, "dummy_verify", lambda *args, **kwargs: calls.append(1))

    resp = client.post("/api/auth/login", json={"email": "nobody@co.com", "password": "secret123"})
    assert resp.status_code == 401
    assert calls == [1]

    resp = client.post("/api/auth/login", json={"email": "ana@co.com", "password": "wrong-pass"})
    assert resp.status_code == 401
    assert calls == [1]


def test_password_hashes_use_the_app_context(app, client, db_session):
    register(client, "ana", "ana@co.com")
    stored = db_session.query(User).filter(User.email == "ana@co.com").first().hashed_password
    assert stored.startswith("$2b$04$")
    assert verify_password("secret123", stored, app.state.pwd_context)
