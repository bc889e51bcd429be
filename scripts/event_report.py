#!/usr/bin/env python3
"""
Print the full registry record of one capture event.

Usage:
    python scripts/event_report.py --event-id 1
    python scripts/event_report.py --doc-hash <64 hex chars>
"""
from __future__ import annotations

import argparse
import os
import sys

from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session

from capture_registry.app.domain.models import CaptureEventRead
from capture_registry.app.infra.clock import BlockClock
from capture_registry.app.infra.db import make_engine
from capture_registry.app.services.registry import CaptureRegistry


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show a capture event with its history.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--event-id", type=int, help="Registry event id")
    target.add_argument("--doc-hash", help="Hex-encoded document hash of the original claim")
    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./capture_registry.db"),
        help="Database URL (SQLAlchemy compatible)",
    )
    return parser.parse_args()


def load_event(registry: CaptureRegistry, args: argparse.Namespace) -> CaptureEventRead | None:
    if args.event_id is not None:
        return registry.get_event_details(args.event_id)
    return registry.get_event_by_hash(args.doc_hash)


def report(registry: CaptureRegistry, event: CaptureEventRead) -> None:
    print(f"Event {event.event_id} [{event.status.value}]")
    print(f"  facility:     {event.facility_principal}")
    print(f"  co2 amount:   {event.co2_amount}")
    print(f"  doc hash:     {event.doc_hash.hex()}")
    print(f"  registered:   {event.timestamp}  last updated: {event.last_updated}")
    if event.metadata:
        print(f"  metadata:     {event.metadata}")

    versions = registry.list_event_versions(event.event_id)
    print(f"Versions ({len(versions)})")
    for version in versions:
        print(
            f"  v{version.version} @{version.timestamp}: amount={version.updated_co2_amount} "
            f"hash={version.updated_doc_hash.hex()[:16]}... {version.update_notes}"
        )

    collaborators = registry.list_collaborators(event.event_id)
    print(f"Collaborators ({len(collaborators)})")
    for entry in collaborators:
        print(f"  {entry.principal} ({entry.role}): {', '.join(entry.permissions) or '-'}")

    notes = registry.list_notes(event.event_id)
    print(f"Notes ({len(notes)})")
    for note in notes:
        print(f"  #{note.note_id} @{note.timestamp} {note.author}: {note.content}")


def main() -> int:
    args = parse_args()
    engine = make_engine(args.database_url)
    SessionLocal = sessionmaker(bind=engine, class_=Session, autoflush=False)
    with SessionLocal() as db:
        # read-only: the clock is never consulted
        registry = CaptureRegistry(db, BlockClock())
        try:
            event = load_event(registry, args)
        except ValidationError as exc:
            print(f"Invalid lookup: {exc.errors()[0]['msg']}", file=sys.stderr)
            return 2
        if event is None:
            print("No matching capture event.", file=sys.stderr)
            return 1
        report(registry, event)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
