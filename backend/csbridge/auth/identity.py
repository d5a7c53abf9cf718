from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import Request

from csbridge.config import default_ugi, groups_header, identity_header


class IdentityError(RuntimeError):
    pass


@dataclass(frozen=True)
class Identity:
    """
    Opaque caller identity forwarded to the metadata service.
    """

    user: str
    groups: tuple[str, ...] = field(default_factory=tuple)

    def to_ugi(self) -> str:
        return ",".join((self.user,) + self.groups)


def parse_ugi(raw: str) -> Identity:
    parts = [p.strip() for p in raw.split(",")]
    user = parts[0] if parts else ""
    if not user:
        raise IdentityError(f"Malformed ugi: {raw!r}")
    return Identity(user=user, groups=tuple(p for p in parts[1:] if p))


def resolve_identity(request: Request) -> Identity:
    """
    Resolution order:
    - `ugi` query parameter ("user,group1,group2")
    - the user header, with optional comma-separated groups header
    - CSBRIDGE_DEFAULT_UGI
    """
    ugi = request.query_params.get("ugi")
    if ugi is not None:
        return parse_ugi(ugi)

    user = (request.headers.get(identity_header()) or "").strip()
    if user:
        groups = request.headers.get(groups_header()) or ""
        return Identity(user=user, groups=tuple(g.strip() for g in groups.split(",") if g.strip()))

    fallback = default_ugi()
    if fallback:
        return parse_ugi(fallback)
    raise IdentityError("Request carries no caller identity")
