#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List

from app.schemas.common import RequestDomain
from app.services.adapters import MalformedPayloadError, to_snapshots
from app.services.status_service import flatten_requests


def load_payloads(path: Path) -> List[Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    # Accept the raw list, the {success, data} envelope or a page
    if isinstance(data, dict) and "success" in data:
        data = data.get("data")
    if isinstance(data, dict):
        data = data.get("content", [])
    return data if isinstance(data, list) else []


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Print reconciled rows for a dump of ERP request payloads")
    ap.add_argument("domain", choices=[d.value for d in RequestDomain], help="Request domain of the payloads")
    ap.add_argument("path", type=Path, help="JSON file with the backend response")
    ap.add_argument("--status", help="Only print rows with this canonical status")
    args = ap.parse_args(argv)

    try:
        snapshots = to_snapshots(RequestDomain(args.domain), load_payloads(args.path))
    except MalformedPayloadError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    rows = flatten_requests(snapshots)
    if args.status:
        rows = [r for r in rows if r.status.value == args.status.upper()]
    print(json.dumps([r.model_dump(mode="json") for r in rows], indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
