"""
HTTP tests for attachment downloads and the health endpoints.
"""

from datetime import timedelta
from pathlib import Path

import pytest

from task_manager.core.config import settings
from task_manager.core.jwt import create_access_token
from tests.conftest import OTHER_USERNAME, TEST_USERNAME, auth_headers


pytestmark = pytest.mark.unit

PHOTO = b"\x89PNG\r\n\x1a\n" + b"pixels" * 10


def upload_task(client, username=TEST_USERNAME):
    response = client.post(
        "/saveUserData",
        data={"name": "With photo", "taskStatus": "TO-DO"},
        files={"file": ("photo.png", PHOTO, "image/png")},
        headers=auth_headers(username),
    )
    assert response.status_code == 200, response.text
    return response.json()["newTask"]


def test_owner_downloads_attachment(client):
    task = upload_task(client)

    response = client.get(f"/files/{task['fileId']}", headers=auth_headers())

    assert response.status_code == 200
    assert response.content == PHOTO
    assert response.headers["content-type"] == "image/png"
    assert response.headers["content-length"] == str(len(PHOTO))


def test_other_user_cannot_download_attachment(client):
    task = upload_task(client)

    response = client.get(f"/files/{task['fileId']}", headers=auth_headers(OTHER_USERNAME))

    assert response.status_code == 404
    assert response.json()["code"] == "FILE_NOT_FOUND"


def test_download_requires_token(client):
    task = upload_task(client)

    response = client.get(f"/files/{task['fileId']}")

    assert response.status_code == 401


def test_download_without_ownership_check(client, monkeypatch):
    monkeypatch.setattr(settings, "FILES_REQUIRE_AUTH", False)
    task = upload_task(client)

    response = client.get(f"/files/{task['fileId']}")

    assert response.status_code == 200
    assert response.content == PHOTO


def test_open_download_of_missing_blob(client, monkeypatch):
    monkeypatch.setattr(settings, "FILES_REQUIRE_AUTH", False)

    response = client.get("/files/65a1b2c3d4e5f60718293a4b")

    assert response.status_code == 404


def test_default_image_is_public(client):
    response = client.get("/files/default")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content == Path(settings.DEFAULT_IMAGE_PATH).read_bytes()


def test_default_blob_downloadable_by_task_owner(client):
    task = client.post(
        "/saveUserData", json={"name": "No photo"}, headers=auth_headers()
    ).json()["newTask"]

    response = client.get(f"/files/{task['fileId']}", headers=auth_headers())

    assert response.status_code == 200
    assert response.content == Path(settings.DEFAULT_IMAGE_PATH).read_bytes()


def test_malformed_file_id(client):
    response = client.get("/files/not-an-object-id", headers=auth_headers())

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_FILE_ID"


def test_root_reports_running(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": f"{settings.APP_NAME} is running"}


def test_health_reports_database(client, fake_db):
    assert client.get("/health").json() == {"api_ok": True, "db_ok": True}

    fake_db.ping_ok = False
    assert client.get("/health").json() == {"api_ok": True, "db_ok": False}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.parametrize("header", ["Bearer garbage", "Bearer {expired}"])
def test_default_image_ignores_bad_token(client, header):
    expired = create_access_token(TEST_USERNAME, expires_delta=timedelta(seconds=-1))

    response = client.get("/files/default", headers={"Authorization": header.format(expired=expired)})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"


def test_open_download_ignores_bad_token(client, monkeypatch):
    monkeypatch.setattr(settings, "FILES_REQUIRE_AUTH", False)
    task = upload_task(client)

    response = client.get(f"/files/{task['fileId']}", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 200
    assert response.content == PHOTO


def test_download_with_expired_token(client):
    task = upload_task(client)
    expired = create_access_token(TEST_USERNAME, expires_delta=timedelta(seconds=-1))

    response = client.get(f"/files/{task['fileId']}", headers={"Authorization": f"Bearer {expired}"})

    assert response.status_code == 401
    assert response.json()["code"] == "TOKEN_EXPIRED"
