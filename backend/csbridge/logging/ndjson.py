from __future__ import annotations

import json
import os
import threading
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

_lock = threading.Lock()

LOG_PREFIX = "csbridge"


def _backend_dir() -> Path:
    # backend/csbridge/logging/ndjson.py -> backend/
    return Path(__file__).resolve().parents[2]


def log_dir() -> Path:
    p = os.environ.get("CSBRIDGE_LOG_DIR")
    if p:
        return Path(p)
    return _backend_dir() / "data" / "logs"


def _day_prefix(ts: Optional[float] = None) -> str:
    dt = datetime.fromtimestamp(ts or time.time())
    return dt.strftime(f"{LOG_PREFIX}-%Y-%m-%d")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except Exception:
        return default


def _max_bytes() -> int:
    return _env_int("CSBRIDGE_LOG_MAX_BYTES", 20 * 1024 * 1024)


def _retention_days() -> int:
    return _env_int("CSBRIDGE_LOG_RETENTION_DAYS", 14)


def _clip(v: Any, *, max_len: int = 400) -> Any:
    if v is None or isinstance(v, (int, float, bool)):
        return v
    if isinstance(v, str):
        if len(v) <= max_len:
            return v
        return v[:max_len] + f"...(+{len(v) - max_len} chars)"
    if isinstance(v, dict):
        return {str(k): _clip(vv, max_len=max_len) for k, vv in list(v.items())[:40]}
    if isinstance(v, (list, tuple)):
        return [_clip(x, max_len=max_len) for x in list(v)[:40]]
    return _clip(str(v), max_len=max_len)


def current_log_file(*, ts: Optional[float] = None) -> Path:
    """
    Today's file, or the first `.N` sibling still below the size limit.
    """
    d = log_dir()
    d.mkdir(parents=True, exist_ok=True)
    prefix = _day_prefix(ts)
    limit = _max_bytes()

    candidates = [d / f"{prefix}.ndjson"] + [d / f"{prefix}.{i}.ndjson" for i in range(1, 1000)]
    for p in candidates:
        try:
            if not p.exists() or p.stat().st_size < limit:
                return p
        except OSError:
            return p
    return candidates[0]


def _prune_old_files() -> None:
    d = log_dir()
    if not d.exists():
        return
    cutoff = datetime.now() - timedelta(days=_retention_days())
    for p in d.glob(f"{LOG_PREFIX}-*.ndjson"):
        try:
            if datetime.fromtimestamp(p.stat().st_mtime) < cutoff:
                p.unlink(missing_ok=True)
        except OSError:
            continue


def init_logging() -> None:
    """
    Best-effort init: ensure log dir exists and prune expired files.
    """
    with _lock:
        log_dir().mkdir(parents=True, exist_ok=True)
        _prune_old_files()


def log_event(
    *,
    level: str,
    event: str,
    data: Optional[dict[str, Any]] = None,
    requestId: Optional[str] = None,
    user: Optional[str] = None,
) -> None:
    """
    Append a single structured NDJSON record. Never raises.
    """
    rec: dict[str, Any] = {
        "ts": int(time.time() * 1000),
        "level": level,
        "event": event,
    }
    if requestId:
        rec["requestId"] = requestId
    if user:
        rec["user"] = user
    if data:
        rec["data"] = _clip(data)

    line = json.dumps(rec, ensure_ascii=False)
    with _lock:
        try:
            with open(current_log_file(), "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            # Best-effort: logging must not break a response.
            pass
