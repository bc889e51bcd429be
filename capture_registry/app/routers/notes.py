"""Event note routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from ..deps import caller_identity, registry_service
from ..domain.schemas import MAX_AMOUNT, NoteIn
from ..responses import envelope, found
from ..services.registry import CaptureRegistry

router = APIRouter()

EventId = Annotated[int, Path(ge=0, le=MAX_AMOUNT)]


@router.post("/{event_id}/notes", status_code=status.HTTP_201_CREATED)
def add_note(
    payload: NoteIn,
    event_id: EventId,
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    return envelope(registry.add_note(caller, event_id, payload.content), status.HTTP_201_CREATED)


@router.get("/{event_id}/notes")
def list_notes(event_id: EventId, registry: CaptureRegistry = Depends(registry_service)):
    return found(registry.list_notes(event_id))


@router.get("/{event_id}/notes/{note_id}")
def get_note(
    event_id: EventId,
    note_id: int = Path(..., ge=0, le=MAX_AMOUNT),
    registry: CaptureRegistry = Depends(registry_service),
):
    return found(registry.get_note(event_id, note_id))
