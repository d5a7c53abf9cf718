from __future__ import annotations

from typing import Optional, Union

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from csbridge.auth.identity import Identity
from csbridge.metadata.client import get_metadata_client_factory
from csbridge.metadata.models import ContentSummary


Result = Union[ContentSummary, None, BaseException]


class FakeMetadataClient:
    def __init__(self, namespace: "FakeNamespace", identity: Identity) -> None:
        self._ns = namespace
        self.identity = identity

    async def get_content_summary(self, path: str) -> Optional[ContentSummary]:
        self._ns.calls.append((self.identity, path))
        r = self._ns.results.get(path)
        if isinstance(r, BaseException):
            raise r
        return r


class FakeNamespace:
    """
    Canned results per path; unknown paths report nothing.
    """

    def __init__(self) -> None:
        self.results: dict[str, Result] = {}
        self.calls: list[tuple[Identity, str]] = []
        self.factory_error: Optional[BaseException] = None

    def client_for(self, identity: Identity) -> FakeMetadataClient:
        if self.factory_error is not None:
            raise self.factory_error
        return FakeMetadataClient(self, identity)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch) -> None:
    """Send logs to a per-test dir and clear identity config."""
    monkeypatch.setenv("CSBRIDGE_LOG_DIR", str(tmp_path / "logs"))
    for name in (
        "CSBRIDGE_DEFAULT_UGI",
        "CSBRIDGE_IDENTITY_HEADER",
        "CSBRIDGE_GROUPS_HEADER",
        "CSBRIDGE_CORS_ORIGINS",
        "CSBRIDGE_NAMENODE_URL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def namespace() -> FakeNamespace:
    return FakeNamespace()


@pytest.fixture
def app(namespace: FakeNamespace) -> FastAPI:
    from csbridge.main import create_app

    application = create_app()
    application.dependency_overrides[get_metadata_client_factory] = lambda: namespace.client_for
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, headers={"X-Remote-User": "alice"})
