"""Capture event, status and version routes."""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ..deps import caller_identity, registry_service
from ..domain.models import EventStatus
from ..domain.schemas import MAX_AMOUNT, CaptureEventIn, EventVersionIn, StatusUpdateIn
from ..responses import envelope, found
from ..services.registry import CaptureRegistry

router = APIRouter()

EventId = Annotated[int, Path(ge=0, le=MAX_AMOUNT)]
HEX_HASH_PATTERN = "^[0-9a-fA-F]{64}$"


@router.post("/", status_code=status.HTTP_201_CREATED)
def register_event(
    payload: CaptureEventIn,
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    result = registry.register_capture_event(
        caller, payload.co2_amount, payload.doc_hash, payload.metadata
    )
    return envelope(result, status.HTTP_201_CREATED)


@router.get("/")
def list_events(
    facility: Optional[str] = Query(None),
    event_status: Optional[EventStatus] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    registry: CaptureRegistry = Depends(registry_service),
):
    return found(registry.list_events(facility=facility, status=event_status, limit=limit))


@router.get("/by-hash/{doc_hash}")
def event_by_hash(
    doc_hash: str = Path(..., pattern=HEX_HASH_PATTERN),
    registry: CaptureRegistry = Depends(registry_service),
):
    return found(registry.get_event_by_hash(doc_hash))


@router.get("/{event_id}")
def get_event(event_id: EventId, registry: CaptureRegistry = Depends(registry_service)):
    return found(registry.get_event_details(event_id))


@router.patch("/{event_id}/status")
def update_status(
    payload: StatusUpdateIn,
    event_id: EventId,
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    return envelope(registry.update_event_status(caller, event_id, payload.status))


@router.post("/{event_id}/versions", status_code=status.HTTP_201_CREATED)
def add_version(
    payload: EventVersionIn,
    event_id: EventId,
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    result = registry.add_event_version(
        caller,
        event_id,
        payload.version,
        payload.updated_co2_amount,
        payload.updated_doc_hash,
        payload.update_notes,
    )
    return envelope(result, status.HTTP_201_CREATED)


@router.get("/{event_id}/versions")
def list_versions(event_id: EventId, registry: CaptureRegistry = Depends(registry_service)):
    return found(registry.list_event_versions(event_id))


@router.get("/{event_id}/versions/{version}")
def get_version(
    event_id: EventId,
    version: int = Path(..., ge=0, le=MAX_AMOUNT),
    registry: CaptureRegistry = Depends(registry_service),
):
    return found(registry.get_event_version(event_id, version))
