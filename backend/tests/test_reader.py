"""Tests for reading contentSummary documents back."""

import asyncio

import httpx
import pytest

from csbridge.auth.identity import Identity
from csbridge.hftp.content_summary import ContentSummaryReader, parse_content_summary
from csbridge.metadata.errors import MetadataServiceError, RemoteError
from csbridge.metadata.models import ContentSummary

from conftest import FakeNamespace


def _reader(app) -> ContentSummaryReader:
    return ContentSummaryReader(
        "http://bridge",
        Identity(user="bob", groups=("staff",)),
        transport=httpx.ASGITransport(app=app),
    )


class TestParseContentSummary:
    """Tests for parsing documents without a server."""

    def test_populated(self) -> None:
        doc = (
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<ContentSummary length="7" fileCount="1" directoryCount="1" quota="10"'
            ' spaceConsumed="21" spaceQuota="-1"/>'
        )
        assert parse_content_summary(doc) == ContentSummary(7, 1, 1, 10, 21, -1)

    def test_empty_root(self) -> None:
        assert parse_content_summary(b'<?xml version="1.0" encoding="UTF-8"?><ContentSummary/>') is None

    def test_nested_fault(self) -> None:
        doc = '<ContentSummary><RemoteException path="/x" class="java.io.IOException" message="bad"/></ContentSummary>'
        with pytest.raises(RemoteError) as ei:
            parse_content_summary(doc)
        assert ei.value.class_name == "java.io.IOException"
        assert ei.value.message == "bad"

    def test_fault_as_root(self) -> None:
        with pytest.raises(RemoteError):
            parse_content_summary('<RemoteException path="/x" class="C" message="m"/>')

    def test_unexpected_root(self) -> None:
        with pytest.raises(ValueError, match="Unexpected root"):
            parse_content_summary("<FileStatus/>")

    def test_not_xml(self) -> None:
        with pytest.raises(ValueError, match="Malformed"):
            parse_content_summary("<ContentSummary")


class TestContentSummaryReader:
    """Tests for the reader against the running app."""

    def test_round_trip(self, app, namespace: FakeNamespace) -> None:
        summary = ContentSummary(2**40, 3, 2, -1, 3 * 2**40, -1)
        namespace.results["/data"] = summary

        assert asyncio.run(_reader(app).get_content_summary("/data")) == summary
        assert namespace.calls[0][0] == Identity(user="bob", groups=("staff",))

    def test_absent(self, app, namespace: FakeNamespace) -> None:
        assert asyncio.run(_reader(app).get_content_summary("/missing")) is None

    def test_fault_raises(self, app, namespace: FakeNamespace) -> None:
        namespace.results["/locked"] = RemoteError("org.apache.hadoop.security.AccessControlException", "denied")

        with pytest.raises(RemoteError) as ei:
            asyncio.run(_reader(app).get_content_summary("/locked"))

        assert ei.value.class_name == "org.apache.hadoop.security.AccessControlException"

    def test_http_error_status(self) -> None:
        reader = ContentSummaryReader(
            "http://bridge",
            Identity(user="bob"),
            transport=httpx.MockTransport(lambda r: httpx.Response(401, json={"detail": "no"})),
        )
        with pytest.raises(MetadataServiceError, match="401"):
            asyncio.run(reader.get_content_summary("/x"))
