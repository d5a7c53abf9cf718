from __future__ import annotations

import argparse
import asyncio

from csbridge.auth.identity import parse_ugi
from csbridge.hftp.content_summary import ContentSummaryReader
from csbridge.metadata.errors import RemoteError


def main() -> int:
    ap = argparse.ArgumentParser(description="Fetch a content summary from a running bridge.")
    ap.add_argument("path", help="Absolute path in the metadata service namespace.")
    ap.add_argument("--url", default="http://localhost:8000", help="Bridge base URL.")
    ap.add_argument("--ugi", required=True, help='Caller identity, "user,group1,group2".')
    args = ap.parse_args()

    reader = ContentSummaryReader(args.url, parse_ugi(args.ugi))
    try:
        summary = asyncio.run(reader.get_content_summary(args.path))
    except RemoteError as e:
        raise SystemExit(f"{e.class_name}: {e.message}")

    if summary is None:
        print(f"{args.path}: nothing to report")
        return 0
    for name, value in summary.as_attributes():
        print(f"{name:>15} {value}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
