from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from csbridge.auth.identity import Identity
from csbridge.config import http_timeout, namenode_url
from csbridge.metadata.errors import MetadataServiceError, RemoteError
from csbridge.metadata.models import ContentSummary


WEBHDFS_PREFIX = "/webhdfs/v1"

# Class the service itself reports for names it cannot resolve.
INVALID_PATH_CLASS = "org.apache.hadoop.fs.InvalidPathException"


class _SummaryBody(BaseModel):
    length: int
    fileCount: int
    directoryCount: int
    quota: int
    spaceConsumed: int
    spaceQuota: int


class _SummaryEnvelope(BaseModel):
    ContentSummary: _SummaryBody


class _RemoteExceptionBody(BaseModel):
    exception: str = ""
    javaClassName: str = ""
    message: str = ""


class _RemoteEnvelope(BaseModel):
    RemoteException: _RemoteExceptionBody


def _remote_exception(r: httpx.Response) -> Optional[_RemoteExceptionBody]:
    try:
        return _RemoteEnvelope.model_validate(r.json()).RemoteException
    except (ValueError, ValidationError):
        return None


class HttpMetadataClient:
    """
    Metadata client speaking the WebHDFS REST dialect:

        GET {base}/webhdfs/v1{path}?op=GETCONTENTSUMMARY&user.name=<user>

    One httpx.AsyncClient per call; no retries.
    """

    def __init__(
        self,
        *,
        identity: Identity,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._identity = identity
        self._base_url = (base_url or namenode_url()).rstrip("/")
        self._timeout = httpx.Timeout(timeout if timeout is not None else http_timeout())
        self._transport = transport

    def _url(self, path: str) -> str:
        return f"{self._base_url}{WEBHDFS_PREFIX}{quote(path, safe='/')}"

    def _params(self) -> dict[str, Any]:
        return {"op": "GETCONTENTSUMMARY", "user.name": self._identity.user}

    async def get_content_summary(self, path: str) -> Optional[ContentSummary]:
        # WebHDFS URLs can only address absolute names; answer the way the service does.
        if not path.startswith("/"):
            raise RemoteError(INVALID_PATH_CLASS, f"Invalid file name: {path}")

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.get(self._url(path), params=self._params())
        except httpx.HTTPError as e:
            raise MetadataServiceError(f"Metadata service unreachable: {e}") from e

        if r.status_code >= 400:
            body = _remote_exception(r)
            if body is None:
                raise RemoteError("HttpError", f"{r.status_code} {r.text.strip()}")
            if r.status_code == 404 and body.exception == "FileNotFoundException":
                return None
            raise RemoteError(body.javaClassName or body.exception, body.message)

        try:
            s = _SummaryEnvelope.model_validate(r.json()).ContentSummary
            return ContentSummary(
                length=s.length,
                file_count=s.fileCount,
                directory_count=s.directoryCount,
                quota=s.quota,
                space_consumed=s.spaceConsumed,
                space_quota=s.spaceQuota,
            )
        except (ValueError, ValidationError) as e:
            raise MetadataServiceError(f"Malformed content summary: {e}") from e
