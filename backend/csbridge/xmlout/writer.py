from __future__ import annotations

import re
from enum import Enum
from typing import Callable


class XmlWriterError(RuntimeError):
    pass


class WriterState(str, Enum):
    INITIAL = "initial"
    DECLARED = "declared"
    START_TAG_OPEN = "start_tag_open"
    IN_ELEMENT = "in_element"
    AFTER_ROOT = "after_root"
    ENDED = "ended"


_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*(:[A-Za-z_][A-Za-z0-9_.\-]*)?$")

_ATTR_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
}


# Outside the XML 1.0 Char production; not even a character reference may carry these.
_INVALID_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

REPLACEMENT_CHAR = "\ufffd"

ENCODING = "UTF-8"


def escape_attribute(value: str) -> str:
    value = _INVALID_CHARS_RE.sub(REPLACEMENT_CHAR, value)
    return "".join(_ATTR_ESCAPES.get(ch, ch) for ch in value)


class XmlWriter:
    """
    Incremental XML emitter for exactly one document.

    Every call hands its markup to `sink` immediately; nothing is buffered
    beyond the start tag still accepting attributes, which is closed lazily
    by the next child or by `end_tag`.

    Call order: declaration -> start_root -> (attribute | start_tag | end_tag)*
    -> end_document. `end_document` closes anything still open, so a
    document cut short by a failure is still well-formed.
    """

    def __init__(self, sink: Callable[[str], None]) -> None:
        self._sink = sink
        self.state = WriterState.INITIAL
        self._open: list[str] = []
        self._attrs: set[str] = set()
        self.end_document_calls = 0

    def _require(self, *states: WriterState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise XmlWriterError(f"Invalid call in state {self.state.value} (expected {allowed})")

    def _check_name(self, name: str) -> None:
        if not _NAME_RE.match(name or ""):
            raise XmlWriterError(f"Invalid XML name: {name!r}")

    def _close_start_tag(self) -> None:
        if self.state is WriterState.START_TAG_OPEN:
            self._sink(">")
            self.state = WriterState.IN_ELEMENT

    @property
    def depth(self) -> int:
        return len(self._open)

    def declaration(self) -> None:
        self._require(WriterState.INITIAL)
        self._sink(f'<?xml version="1.0" encoding="{ENCODING}"?>')
        self.state = WriterState.DECLARED

    def start_tag(self, name: str) -> None:
        self._require(WriterState.DECLARED, WriterState.START_TAG_OPEN, WriterState.IN_ELEMENT)
        self._check_name(name)
        self._close_start_tag()
        self._sink(f"<{name}")
        self._open.append(name)
        self._attrs = set()
        self.state = WriterState.START_TAG_OPEN

    def start_root(self, name: str) -> None:
        self._require(WriterState.DECLARED)
        self.start_tag(name)

    def attribute(self, name: str, value: str) -> None:
        self._require(WriterState.START_TAG_OPEN)
        self._check_name(name)
        if name in self._attrs:
            raise XmlWriterError(f"Duplicate attribute: {name}")
        self._attrs.add(name)
        self._sink(f' {name}="{escape_attribute(str(value))}"')

    def end_tag(self) -> None:
        self._require(WriterState.START_TAG_OPEN, WriterState.IN_ELEMENT)
        name = self._open.pop()
        if self.state is WriterState.START_TAG_OPEN:
            self._sink("/>")
        else:
            self._sink(f"</{name}>")
        self.state = WriterState.IN_ELEMENT if self._open else WriterState.AFTER_ROOT

    def end_document(self) -> None:
        if self.state is WriterState.ENDED:
            raise XmlWriterError("Document already ended")
        if self.state is WriterState.INITIAL:
            raise XmlWriterError("Cannot end a document without a declaration")
        while self._open:
            self.end_tag()
        self._sink("\n")
        self.end_document_calls += 1
        self.state = WriterState.ENDED
