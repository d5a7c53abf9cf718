from __future__ import annotations

from csbridge.metadata.models import RemoteFailure
from csbridge.xmlout.writer import XmlWriter


FAULT_TAG = "RemoteException"


def write_remote_failure(xml: XmlWriter, path: str, failure: RemoteFailure) -> None:
    """
    <RemoteException path="..." class="..." message="..."/>

    Written inside whatever element is open, so the enclosing document
    stays well-formed. Readers match on the tag and attribute names.
    """
    xml.start_tag(FAULT_TAG)
    xml.attribute("path", path)
    xml.attribute("class", failure.class_name)
    xml.attribute("message", failure.message)
    xml.end_tag()
