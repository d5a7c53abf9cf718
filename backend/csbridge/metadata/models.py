from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from csbridge.metadata.errors import RemoteError


UNLIMITED = -1

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

MAX_MESSAGE_LEN = 4096

# Wire order of the summary attributes; consumers rely on it.
SUMMARY_FIELDS: tuple[tuple[str, str], ...] = (
    ("length", "length"),
    ("fileCount", "file_count"),
    ("directoryCount", "directory_count"),
    ("quota", "quota"),
    ("spaceConsumed", "space_consumed"),
    ("spaceQuota", "space_quota"),
)

_QUOTA_FIELDS = ("quota", "space_quota")


@dataclass(frozen=True)
class ContentSummary:
    length: int
    file_count: int
    directory_count: int
    quota: int
    space_consumed: int
    space_quota: int

    def __post_init__(self) -> None:
        for wire_name, attr in SUMMARY_FIELDS:
            v = getattr(self, attr)
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValueError(f"{wire_name} must be an int, got {type(v).__name__}")
            if not _INT64_MIN <= v <= _INT64_MAX:
                raise ValueError(f"{wire_name} out of int64 range: {v}")
            if attr in _QUOTA_FIELDS:
                if v < 0 and v != UNLIMITED:
                    raise ValueError(f"{wire_name} must be >= 0 or {UNLIMITED}, got {v}")
            elif v < 0:
                raise ValueError(f"{wire_name} must be >= 0, got {v}")

    def as_attributes(self) -> list[tuple[str, str]]:
        return [(wire_name, str(getattr(self, attr))) for wire_name, attr in SUMMARY_FIELDS]

    @classmethod
    def from_attributes(cls, attrs: dict[str, str]) -> "ContentSummary":
        values: dict[str, int] = {}
        for wire_name, attr in SUMMARY_FIELDS:
            raw: Optional[str] = attrs.get(wire_name)
            if raw is None:
                raise ValueError(f"Missing attribute: {wire_name}")
            try:
                values[attr] = int(raw)
            except ValueError as e:
                raise ValueError(f"{wire_name} is not a decimal integer: {raw!r}") from e
        return cls(**values)


def _class_name(exc: BaseException) -> str:
    t = type(exc)
    if t.__module__ == "builtins":
        return t.__qualname__
    return f"{t.__module__}.{t.__qualname__}"


@dataclass(frozen=True)
class RemoteFailure:
    """
    Fault descriptor for a failed remote call, rendered in-band as XML.
    """

    class_name: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "RemoteFailure":
        if isinstance(exc, RemoteError):
            class_name = exc.class_name or _class_name(exc)
            text = exc.message
        else:
            class_name = _class_name(exc)
            text = str(exc)
        message = (text or "").strip()
        if len(message) > MAX_MESSAGE_LEN:
            message = message[:MAX_MESSAGE_LEN] + "..."
        return cls(class_name=class_name, message=message or class_name)
