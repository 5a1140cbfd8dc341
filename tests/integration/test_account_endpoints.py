from __future__ import annotations

from pathlib import Path

import sqlalchemy as sa
from alembic.config import Config
from fastapi.testclient import TestClient

from alembic import command
from apps.api.main import create_app
from credential_backend.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRecord,
    AccountSummary,
)
from credential_backend.application.services.account_service import AccountService
from credential_backend.infrastructure.security.password_hasher import BcryptPasswordHasher

JO_SIGNUP = {
    "name": "Jo",
    "email": "jo@x.com",
    "password": "secret1",
    "confirmPassword": "secret1",
    "phone": "1234567890",
}


def _upgrade_head(tmp_path: Path, filename: str) -> tuple[str, str]:
    db_path = tmp_path / filename
    sync_url = f"sqlite+pysqlite:///{db_path}"
    async_url = f"sqlite+aiosqlite:///{db_path}"

    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", sync_url)
    command.upgrade(alembic_config, "head")

    return sync_url, async_url


def _count_users(sync_url: str) -> int:
    with sa.create_engine(sync_url).connect() as connection:
        return int(connection.execute(sa.text("SELECT COUNT(*) FROM users")).scalar_one())


class UnavailableAccountRepository:
    async def create_account(self, payload: AccountCreateInput) -> int:
        raise ConnectionError("SELECT * FROM users: connection refused")

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        raise ConnectionError("SELECT * FROM users: connection refused")

    async def list_accounts(self) -> list[AccountSummary]:
        raise ConnectionError("SELECT * FROM users: connection refused")


def test_signup_rejects_email_with_trailing_newline(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "api_newline_email.db")

    with TestClient(create_app(database_url=async_url)) as client:
        first = client.post("/api/signup", json=JO_SIGNUP)
        second = client.post("/api/signup", json={**JO_SIGNUP, "email": "jo@x.com\n"})

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"success": False, "message": "Please enter a valid email address"}
    assert _count_users(sync_url) == 1


def test_signup_then_duplicate_signup(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "api_signup.db")

    with TestClient(create_app(database_url=async_url)) as client:
        first = client.post("/api/signup", json=JO_SIGNUP)
        second = client.post("/api/signup", json=JO_SIGNUP)

    assert first.status_code == 201
    body = first.json()
    assert body["success"] is True
    assert body["message"] == "Account created successfully! Welcome, Jo!"
    assert isinstance(body["userId"], int)

    assert second.status_code == 400
    assert second.json() == {"success": False, "message": "Email already registered"}
    assert _count_users(sync_url) == 1

    with sa.create_engine(sync_url).connect() as connection:
        stored = connection.execute(
            sa.text("SELECT password_hash FROM users WHERE email = 'jo@x.com'")
        ).scalar_one()
    assert stored != "secret1"
    assert BcryptPasswordHasher().verify_password(password="secret1", password_hash=stored)


def test_login_wrong_password_and_unknown_email_are_identical(tmp_path: Path) -> None:
    _, async_url = _upgrade_head(tmp_path, "api_login_invalid.db")

    with TestClient(create_app(database_url=async_url)) as client:
        client.post("/api/signup", json=JO_SIGNUP)
        wrong_password = client.post(
            "/api/login",
            json={"email": "jo@x.com", "password": "wrong1"},
        )
        unknown_email = client.post(
            "/api/login",
            json={"email": "nobody@x.com", "password": "secret1"},
        )

    assert wrong_password.status_code == 401
    assert wrong_password.json() == {"success": False, "message": "Invalid email or password"}
    assert unknown_email.status_code == wrong_password.status_code
    assert unknown_email.json() == wrong_password.json()


def test_login_success_returns_profile(tmp_path: Path) -> None:
    _, async_url = _upgrade_head(tmp_path, "api_login_success.db")

    with TestClient(create_app(database_url=async_url)) as client:
        signup = client.post("/api/signup", json=JO_SIGNUP)
        response = client.post(
            "/api/login",
            json={"email": "jo@x.com", "password": "secret1"},
        )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Welcome back! Logged in as jo@x.com",
        "userId": signup.json()["userId"],
        "name": "Jo",
        "phone": "1234567890",
    }


def test_login_reports_missing_phone_as_null(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "api_login_no_phone.db")
    with sa.create_engine(sync_url).begin() as connection:
        connection.execute(
            sa.text(
                "INSERT INTO users (name, email, password_hash) "
                "VALUES (:name, :email, :password_hash)"
            ),
            {
                "name": "Legacy",
                "email": "legacy@x.com",
                "password_hash": BcryptPasswordHasher(rounds=4).hash_password("secret1"),
            },
        )

    with TestClient(create_app(database_url=async_url)) as client:
        response = client.post(
            "/api/login",
            json={"email": "legacy@x.com", "password": "secret1"},
        )

    assert response.status_code == 200
    assert response.json()["phone"] is None


def test_signup_short_password_creates_no_account(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "api_short_password.db")

    with TestClient(create_app(database_url=async_url)) as client:
        response = client.post(
            "/api/signup",
            json={**JO_SIGNUP, "password": "abc", "confirmPassword": "abc"},
        )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Password must be at least 6 characters",
    }
    assert _count_users(sync_url) == 0


def test_signup_missing_field_and_login_short_password_are_bad_requests(
    tmp_path: Path,
) -> None:
    _, async_url = _upgrade_head(tmp_path, "api_bad_requests.db")

    with TestClient(create_app(database_url=async_url)) as client:
        missing_phone = client.post("/api/signup", json={**JO_SIGNUP, "phone": ""})
        short_login = client.post("/api/login", json={"email": "jo@x.com", "password": "abc"})
        bad_body = client.post("/api/login", content=b"not json")

    assert missing_phone.status_code == 400
    assert missing_phone.json()["message"] == "Please fill in all fields"
    assert short_login.status_code == 400
    assert short_login.json() == {"success": False, "message": "Invalid email or password"}
    assert bad_body.status_code == 400
    assert bad_body.json() == {"success": False, "message": "Invalid request body"}


def test_empty_body_is_treated_as_missing_fields(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "api_empty_body.db")

    with TestClient(create_app(database_url=async_url)) as client:
        signup = client.post("/api/signup")
        login = client.post("/api/login")

    assert signup.status_code == 400
    assert signup.json() == {"success": False, "message": "Please fill in all fields"}
    assert login.status_code == 400
    assert login.json() == {"success": False, "message": "Please fill in all fields"}
    assert _count_users(sync_url) == 0


def test_list_users_never_exposes_password_hash(tmp_path: Path) -> None:
    _, async_url = _upgrade_head(tmp_path, "api_list_users.db")

    with TestClient(create_app(database_url=async_url)) as client:
        client.post("/api/signup", json=JO_SIGNUP)
        client.post(
            "/api/signup",
            json={**JO_SIGNUP, "name": "Ann", "email": "ann@x.com", "phone": "555"},
        )
        response = client.get("/api/users")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [user["email"] for user in body["users"]] == ["jo@x.com", "ann@x.com"]
    for user in body["users"]:
        assert set(user) == {"id", "name", "email", "phone", "createdAt"}


def test_store_failures_return_generic_server_errors() -> None:
    service = AccountService(
        accounts=UnavailableAccountRepository(),
        password_hasher=BcryptPasswordHasher(rounds=4),
    )

    with TestClient(create_app(account_service=service)) as client:
        signup = client.post("/api/signup", json=JO_SIGNUP)
        login = client.post("/api/login", json={"email": "jo@x.com", "password": "secret1"})
        users = client.get("/api/users")

    assert signup.status_code == 500
    assert signup.json() == {
        "success": False,
        "message": "Server error. Please try again later.",
    }
    assert login.status_code == 500
    assert login.json() == signup.json()
    assert users.status_code == 500
    assert users.json() == {"success": False, "message": "Server error"}
    assert "SELECT" not in signup.text


def test_static_directory_is_served_alongside_api(tmp_path: Path) -> None:
    static_dir = tmp_path / "public"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>login</h1>", encoding="utf-8")
    _, async_url = _upgrade_head(tmp_path, "api_static.db")

    with TestClient(create_app(database_url=async_url, static_dir=str(static_dir))) as client:
        page = client.get("/")
        users = client.get("/api/users")

    assert page.status_code == 200
    assert "<h1>login</h1>" in page.text
    assert users.status_code == 200


def test_cors_preflight_allows_configured_origin(tmp_path: Path) -> None:
    _, async_url = _upgrade_head(tmp_path, "api_cors.db")
    app = create_app(database_url=async_url, cors_origins=["https://app.example.org"])

    with TestClient(app) as client:
        response = client.options(
            "/api/login",
            headers={
                "Origin": "https://app.example.org",
                "Access-Control-Request-Method": "POST",
            },
        )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://app.example.org"
    assert response.headers["access-control-allow-credentials"] == "true"
