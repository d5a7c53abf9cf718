from __future__ import annotations

from typing import Optional, Union
from urllib.parse import quote
from xml.etree import ElementTree as ET

import httpx

from csbridge.auth.identity import Identity
from csbridge.config import http_timeout
from csbridge.metadata.errors import MetadataServiceError, RemoteError
from csbridge.metadata.models import ContentSummary


ROOT_TAG = "ContentSummary"
FAULT_TAG = "RemoteException"


def parse_content_summary(data: Union[bytes, str]) -> Optional[ContentSummary]:
    """
    Parse a contentSummary document.

    Returns None for an empty root element and raises RemoteError when the
    document carries a RemoteException, wherever it sits.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ValueError(f"Malformed content summary document: {e}") from e

    fault = root if root.tag == FAULT_TAG else root.find(f".//{FAULT_TAG}")
    if fault is not None:
        raise RemoteError(fault.get("class", ""), fault.get("message", ""))
    if root.tag != ROOT_TAG:
        raise ValueError(f"Unexpected root element: {root.tag}")
    if not root.attrib:
        return None
    return ContentSummary.from_attributes(dict(root.attrib))


class ContentSummaryReader:
    """
    Client for the contentSummary endpoint, the consuming side of the bridge.
    """

    def __init__(
        self,
        base_url: str,
        identity: Identity,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._identity = identity
        self._timeout = httpx.Timeout(timeout if timeout is not None else http_timeout())
        self._transport = transport

    async def get_content_summary(self, path: str) -> Optional[ContentSummary]:
        url = f"{self._base_url}/contentSummary{quote(path, safe='/')}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.get(url, params={"ugi": self._identity.to_ugi()})
        except httpx.HTTPError as e:
            raise MetadataServiceError(f"contentSummary request failed: {e}") from e
        if r.status_code >= 400:
            raise MetadataServiceError(f"contentSummary error {r.status_code}: {r.text}")
        return parse_content_summary(r.content)
