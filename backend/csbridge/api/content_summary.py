from __future__ import annotations

from typing import AsyncIterator
from uuid import uuid4

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from csbridge.auth.identity import Identity, resolve_identity
from csbridge.logging.ndjson import log_event
from csbridge.metadata.client import MetadataClientFactory, get_metadata_client_factory
from csbridge.metadata.models import RemoteFailure
from csbridge.xmlout.fault import write_remote_failure
from csbridge.xmlout.writer import ENCODING, XmlWriter


router = APIRouter()


ROOT_TAG = "ContentSummary"
XML_MEDIA_TYPE = "application/xml; charset=UTF-8"


async def stream_content_summary(
    path: str,
    identity: Identity,
    client_factory: MetadataClientFactory,
) -> AsyncIterator[bytes]:
    """
    Yield the XML document for one summary request, piece by piece.

    I/O-class failures (OSError) from building the client or from the call
    are rendered as a RemoteException nested in the root element. Anything
    else still terminates the document before propagating.
    """
    request_id = uuid4().hex
    pending: list[str] = []
    xml = XmlWriter(pending.append)

    def flush() -> bytes:
        data = "".join(pending).encode(ENCODING)
        pending.clear()
        return data

    xml.declaration()
    xml.start_root(ROOT_TAG)
    yield flush()

    try:
        client = client_factory(identity)
        summary = await client.get_content_summary(path)
    except OSError as e:
        failure = RemoteFailure.from_exception(e)
        write_remote_failure(xml, path, failure)
        log_event(
            level="warning",
            event="content_summary.fault",
            user=identity.user,
            requestId=request_id,
            data={"path": path, "class": failure.class_name, "message": failure.message},
        )
    except Exception as e:
        xml.end_document()
        yield flush()
        log_event(
            level="error",
            event="content_summary.error",
            user=identity.user,
            requestId=request_id,
            data={"path": path, "error": repr(e)},
        )
        raise
    else:
        if summary is not None:
            for name, value in summary.as_attributes():
                xml.attribute(name, value)
        log_event(
            level="info",
            event="content_summary.get",
            user=identity.user,
            requestId=request_id,
            data={"path": path, "found": summary is not None},
        )

    xml.end_tag()
    xml.end_document()
    yield flush()


@router.get("/contentSummary{path:path}")
async def get_content_summary(
    path: str,
    identity: Identity = Depends(resolve_identity),
    client_factory: MetadataClientFactory = Depends(get_metadata_client_factory),
) -> StreamingResponse:
    # "/contentSummary/a/b" -> "/a/b"; the bare prefix means the root.
    target = path or "/"
    return StreamingResponse(
        stream_content_summary(target, identity, client_factory),
        media_type=XML_MEDIA_TYPE,
    )
