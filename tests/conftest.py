import os

os.environ["AMPHOMEUS_DB_URI"] = "sqlite://"
os.environ.pop("AMPHOMEUS_DB_URI_READ_ONLY", None)
os.environ["AMPHOMEUS_CORS_ALLOWED_ORIGINS"] = "http://localhost:3000"
os.environ["AMPHOMEUS_AUTH_URL"] = "http://auth.test"

from typing import List, Optional, Tuple
from unittest import mock

import pytest
from fastapi.testclient import TestClient

from amphomeus import cdn, db
from amphomeus.api import app
from amphomeus.journal.api import app as journal_api
from amphomeus.journal.models import Base, MediaType
from amphomeus.media.client import MediaDeleteFailed, MediaStoreClient
from amphomeus.media.data import MediaDeleteResult, MediaStoreConfig, MediaUploadResult

TEST_USER_ID = "8d0a4c6e-2f1b-4c31-9f0e-7d5b2a9c1e44"


class FakeMediaStore:
    """
    Records media store calls instead of talking to the provider.
    """

    def __init__(self) -> None:
        self.uploads: List[Tuple[str, int, Optional[str]]] = []
        self.deletes: List[Tuple[str, str]] = []
        self.failing_public_ids: List[str] = []

    def upload(
        self, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> MediaUploadResult:
        self.uploads.append((filename, len(content), content_type))
        return MediaUploadResult(
            url=f"https://res.cloudinary.test/amphomeus/{filename}",
            public_id=f"amphomeus/{filename}",
            media_type=MediaType.IMAGE,
        )

    def delete(self, public_id: str, resource_type: str = "image") -> MediaDeleteResult:
        self.deletes.append((public_id, resource_type))
        if public_id in self.failing_public_ids:
            raise MediaDeleteFailed(f"Could not delete {public_id}")
        return MediaDeleteResult(result="ok")


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=db.engine)
    yield db.engine
    Base.metadata.drop_all(bind=db.engine)


@pytest.fixture
def db_session(database):
    session = db.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def auth_provider():
    with mock.patch("amphomeus.middleware.requests.get") as requests_get:
        requests_get.return_value.status_code = 200
        requests_get.return_value.json.return_value = {
            "user_id": TEST_USER_ID,
            "verified": True,
        }
        yield requests_get


@pytest.fixture
def media_store():
    store = FakeMediaStore()
    journal_api.dependency_overrides[cdn.yield_media_store_provider_from_env] = lambda: (
        lambda: store
    )
    yield store
    journal_api.dependency_overrides.pop(cdn.yield_media_store_provider_from_env, None)


@pytest.fixture
def unconfigured_media_store(monkeypatch):
    """
    Removes media store credentials from the environment and drops any cached client.
    """
    for name in ["CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cdn, "_media_store_client", None)


@pytest.fixture
def media_store_config() -> MediaStoreConfig:
    return MediaStoreConfig(
        cloud_name="amphomeus-test",
        api_key="123456789",
        api_secret="test-secret",
        upload_prefix="https://api.cloudinary.test",
    )


@pytest.fixture
def media_store_client(media_store_config) -> MediaStoreClient:
    return MediaStoreClient(media_store_config)


@pytest.fixture
def client(media_store):
    with TestClient(app, headers={"Authorization": "Bearer test-token"}) as test_client:
        yield test_client
