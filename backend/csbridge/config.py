from __future__ import annotations

import os


def namenode_url() -> str:
    return os.environ.get("CSBRIDGE_NAMENODE_URL", "http://localhost:50070").strip().rstrip("/")


def http_timeout() -> float:
    try:
        return float(os.environ.get("CSBRIDGE_HTTP_TIMEOUT", "60"))
    except Exception:
        return 60.0


def identity_header() -> str:
    return os.environ.get("CSBRIDGE_IDENTITY_HEADER", "X-Remote-User").strip() or "X-Remote-User"


def groups_header() -> str:
    return os.environ.get("CSBRIDGE_GROUPS_HEADER", "X-Remote-Groups").strip() or "X-Remote-Groups"


def default_ugi() -> str:
    # "user,group1,group2"; empty means requests must carry an identity.
    return os.environ.get("CSBRIDGE_DEFAULT_UGI", "").strip()


def cors_origins() -> list[str]:
    raw = os.environ.get("CSBRIDGE_CORS_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]
