"""Per-event collaborator routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from ..deps import caller_identity, registry_service
from ..domain.models import MAX_PRINCIPAL_LEN
from ..domain.schemas import MAX_AMOUNT, CollaboratorIn
from ..responses import envelope, found
from ..services.registry import CaptureRegistry

router = APIRouter()

EventId = Annotated[int, Path(ge=0, le=MAX_AMOUNT)]
PrincipalPath = Annotated[str, Path(min_length=1, max_length=MAX_PRINCIPAL_LEN)]


@router.put("/{event_id}/collaborators/{principal}")
def put_collaborator(
    payload: CollaboratorIn,
    event_id: EventId,
    principal: PrincipalPath,
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    result = registry.add_collaborator(
        caller, event_id, principal, payload.role, payload.permissions
    )
    return envelope(result)


@router.get("/{event_id}/collaborators")
def list_collaborators(
    event_id: EventId, registry: CaptureRegistry = Depends(registry_service)
):
    return found(registry.list_collaborators(event_id))


@router.get("/{event_id}/collaborators/{principal}")
def get_collaborator(
    event_id: EventId,
    principal: PrincipalPath,
    registry: CaptureRegistry = Depends(registry_service),
):
    return found(registry.get_collaborator(event_id, principal))
