import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from config.settings import LOG_DIR
from constants import UserRole
from database import get_db
from exceptions import DatabaseError
from main import configure_logging, create_app
from utils.error_handlers import to_http_exception


@pytest.fixture
def client(db_session):
    app = create_app()
    app.dependency_overrides[get_db] = lambda: db_session
    # No context manager: the lifespan would initialize the configured database
    return TestClient(app)


@pytest.fixture
def owner(make_user):
    return make_user()


def test_health_check(client):
    response = client.get("/up")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_document(client, owner):
    response = client.post("/api/v1/documents", json={"title": "Resume", "content": "héllo", "user_id": owner.id})

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["title"] == "Resume"
    assert body["data"]["status"] == "uploaded"
    assert body["data"]["storage_bytes"] == 12


def test_create_document_with_blank_title(client, owner):
    response = client.post("/api/v1/documents", json={"title": " ", "user_id": owner.id})

    assert response.status_code == 422
    assert response.json() == {
        "success": False,
        "error": {"message": "Validation failed", "details": ["title can't be blank"]},
    }


def test_get_missing_document(client):
    response = client.get("/api/v1/documents/999")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["message"] == "Resource not found"


def test_list_documents_paginates(client, document_api, owner):
    document_api.batch_create([{"title": f"Doc {n}", "user_id": owner.id} for n in range(5)])

    response = client.get("/api/v1/documents", params={"page": 2, "per_page": 2, "sort_by": "id", "order": "asc"})

    assert response.status_code == 200
    body = response.json()
    assert [d["title"] for d in body["data"]] == ["Doc 2", "Doc 3"]
    assert body["meta"] == {"total_count": 5, "current_page": 2, "per_page": 2, "total_pages": 3}


def test_list_documents_caps_per_page(client):
    response = client.get("/api/v1/documents", params={"per_page": 1000})

    assert response.json()["meta"]["per_page"] == 100


def test_update_document(client, document_api, owner):
    document = document_api.create_or_raise(title="Draft", user_id=owner.id)

    response = client.patch(f"/api/v1/documents/{document.id}", json={"status": "signed"})

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "signed"
    assert response.json()["data"]["title"] == "Draft"
    assert document_api.find(document.id).status == "signed"


def test_update_missing_document(client):
    response = client.patch("/api/v1/documents/999", json={"title": "New"})

    assert response.status_code == 404


def test_delete_document(client, document_api, owner):
    document = document_api.create_or_raise(title="Old", user_id=owner.id)

    response = client.delete(f"/api/v1/documents/{document.id}")

    assert response.status_code == 200
    assert response.json()["data"] == {"id": document.id, "deleted": True}
    assert client.delete(f"/api/v1/documents/{document.id}").status_code == 404


def test_list_users_by_role(client, make_user):
    make_user(role=UserRole.GUEST)
    admin = make_user(role=UserRole.ADMIN)

    response = client.get("/api/v1/users", params={"role": "admin"})

    body = response.json()
    assert [u["id"] for u in body["data"]] == [admin.id]
    assert body["data"][0]["administrator?"] is True
    assert body["meta"] == {"total_count": 1}


def test_get_user_includes_account(client, account_api, make_user):
    account = account_api.create_or_raise(name="Acme")
    user = make_user(account_id=account.id)

    response = client.get(f"/api/v1/users/{user.id}")

    data = response.json()["data"]
    assert data["email"] == user.email
    assert data["full_name"] == "Ada Lovelace"
    assert data["account"]["name"] == "Acme"
    assert data["account"]["users_count"] == 1


def test_get_user_documents(client, document_api, owner):
    document_api.create_or_raise(title="Resume", user_id=owner.id)
    document_api.create_or_raise(title="NDA", user_id=owner.id, status="signed")

    response = client.get(f"/api/v1/users/{owner.id}/documents", params={"status": "signed"})

    assert [d["title"] for d in response.json()["data"]] == ["NDA"]
    assert client.get("/api/v1/users/999/documents").status_code == 404


def test_get_account(client, account_api, document_api, make_user):
    account = account_api.create_or_raise(name="Acme")
    user = make_user(account_id=account.id)
    document_api.create_or_raise(title="abc", user_id=user.id)

    response = client.get(f"/api/v1/accounts/{account.id}")

    data = response.json()["data"]
    assert data["users_count"] == 1
    assert data["documents_count"] == 1
    assert data["total_storage_bytes"] == 3
    assert client.get("/api/v1/accounts/999").status_code == 404


def test_get_account_users(client, account_api, make_user):
    account = account_api.create_or_raise(name="Acme")
    user = make_user(account_id=account.id)

    response = client.get(f"/api/v1/accounts/{account.id}/users")

    assert [u["id"] for u in response.json()["data"]] == [user.id]
    assert client.get("/api/v1/accounts/999/users").status_code == 404


def test_importing_the_app_configures_file_logging():
    def file_handlers():
        return [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]

    handlers = file_handlers()
    assert len(handlers) == 1
    assert Path(handlers[0].baseFilename) == LOG_DIR / "backend.log"

    configure_logging()
    assert len(file_handlers()) == 1


def test_database_errors_map_to_server_error():
    error = to_http_exception("Delete account", DatabaseError("delete", "Account delete failed"))

    assert error.status_code == 500
    assert error.detail == {"message": "Delete account failed", "details": ["Account delete failed"]}
