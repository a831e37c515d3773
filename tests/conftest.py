"""Shared fixtures: an app on a throwaway SQLite file with the media host faked out."""
import os

import pytest
from fastapi.testclient import TestClient

from videotube.api.dependencies import get_media_uploader
from videotube.config import Settings
from videotube.core.media import UploadResult
from videotube.main import create_app

API = "/api/v1/users"
DEFAULT_PASSWORD = "correct horse battery"


class FakeUploader:
    """Stands in for the media host; records uploads and can be told to fail"""

    def __init__(self):
        self.uploads = []
        self.fail = False

    async def upload(self, local_path):
        if not local_path:
            return None
        self.uploads.append(local_path)
        if os.path.exists(local_path):
            os.remove(local_path)
        if self.fail:
            return None
        name = os.path.basename(local_path)
        return UploadResult(url=f"https://media.example.com/{name}", public_id=name, resource_type="image")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'videotube-test.db'}",
        ACCESS_TOKEN_SECRET="test-access-secret",
        REFRESH_TOKEN_SECRET="test-refresh-secret",
        UPLOAD_TEMP_DIR=str(tmp_path / "temp"),
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def app(settings, uploader):
    application = create_app(settings)
    application.dependency_overrides[get_media_uploader] = lambda: uploader
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    """Session on the database the app uses; call expire_all() before re-reading"""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def register(client):
    def _register(username, email=None, password=DEFAULT_PASSWORD, full_name=None, cover=False):
        data = {
            "fullName": full_name or username.title(),
            "email": email or f"{username.lower()}@example.com",
            "username": username,
            "password": password,
        }
        files = {"avatar": ("avatar.png", b"\x89PNG avatar", "image/png")}
        if cover:
            files["coverImage"] = ("cover.jpg", b"\xff\xd8 cover", "image/jpeg")
        return client.post(f"{API}/register", data=data, files=files)
    return _register


@pytest.fixture
def login(client):
    def _login(username=None, password=DEFAULT_PASSWORD, email=None):
        body = {"password": password}
        if username is not None:
            body["username"] = username
        if email is not None:
            body["email"] = email
        return client.post(f"{API}/login", json=body)
    return _login


@pytest.fixture
def signed_in(register, login):
    """Register + login; returns (user json, access token, refresh token)"""
    def _signed_in(username, **kwargs):
        res = register(username, **kwargs)
        assert res.status_code == 201, res.text
        data = login(username, password=kwargs.get("password", DEFAULT_PASSWORD)).json()["data"]
        return data["user"], data["accessToken"], data["refreshToken"]
    return _signed_in


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer
