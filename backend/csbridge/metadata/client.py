from __future__ import annotations

from typing import Callable, Optional, Protocol

from csbridge.auth.identity import Identity
from csbridge.metadata.models import ContentSummary


class MetadataClient(Protocol):
    async def get_content_summary(self, path: str) -> Optional[ContentSummary]:
        """
        None means the service has nothing to report for `path`.
        Failures are raised as OSError subclasses.
        """
        ...


MetadataClientFactory = Callable[[Identity], MetadataClient]


def create_metadata_client(identity: Identity) -> MetadataClient:
    from csbridge.metadata.webhdfs import HttpMetadataClient  # noqa: WPS433

    return HttpMetadataClient(identity=identity)


def get_metadata_client_factory() -> MetadataClientFactory:
    """
    FastAPI dependency; tests override it with a fake factory.
    """
    return create_metadata_client
