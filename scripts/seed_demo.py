#!/usr/bin/env python3
"""Seed the registry DB with demo facilities, events and collaborators."""
from __future__ import annotations

import argparse
import hashlib
import random

from sqlalchemy.orm import sessionmaker
from sqlmodel import Session

from capture_registry.app.domain.models import PERM_ADD_NOTES, PERM_UPDATE_STATUS
from capture_registry.app.infra.clock import BlockClock
from capture_registry.app.infra.db import init_db, make_engine
from capture_registry.app.services.registry import CaptureRegistry, deploy_registry


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed DB with demo capture events")
    parser.add_argument("--facilities", type=int, default=3)
    parser.add_argument("--events-per-facility", type=int, default=2)
    parser.add_argument("--deployer", default="deployer")
    parser.add_argument(
        "--database-url",
        default="sqlite:///./capture_registry.db",
    )
    return parser.parse_args()


def demo_hash(facility_id: str, idx: int) -> bytes:
    # demo documents only; real callers supply their own digests
    return hashlib.sha256(f"{facility_id}/report-{idx}".encode("utf-8")).digest()


def seed_facility(registry: CaptureRegistry, facility_id: str, auditor_id: str, count: int) -> int:
    created = 0
    for idx in range(1, count + 1):
        result = registry.register_capture_event(
            facility_id,
            random.randint(1, 50) * 100_000,
            demo_hash(facility_id, idx),
            f"Demo capture {idx} at {facility_id}",
        )
        if not result.success:
            print(f"[SKIP] {facility_id} report {idx}: error {int(result.error_code)}")
            continue
        event_id = result.value
        registry.add_collaborator(
            facility_id, event_id, auditor_id, "auditor", [PERM_UPDATE_STATUS, PERM_ADD_NOTES]
        )
        registry.add_note(auditor_id, event_id, "Scheduled for third-party audit")
        created += 1
    return created


def main() -> int:
    args = parse_args()
    engine = make_engine(args.database_url)
    init_db(engine)
    SessionLocal = sessionmaker(bind=engine, class_=Session, autoflush=False)
    with SessionLocal() as db:
        deploy_registry(db, args.deployer)
        clock = BlockClock()
        latest = CaptureRegistry(db, clock).latest_height()
        if latest is not None:
            clock.advance_to(latest + 1)
        registry = CaptureRegistry(db, clock)
        created = 0
        for idx in range(1, args.facilities + 1):
            created += seed_facility(
                registry, f"facility-{idx}", f"auditor-{idx}", args.events_per_facility
            )
        db.commit()
    print(f"Seeded {created} demo capture events.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
