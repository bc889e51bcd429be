"""Admin controls: pause gate and admin hand-over."""
from fastapi import APIRouter, Depends

from ..deps import caller_identity, registry_service
from ..domain.schemas import AdminTransferIn
from ..responses import envelope, found
from ..services.registry import CaptureRegistry

router = APIRouter()


@router.post("/pause")
def pause(
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    return envelope(registry.pause_contract(caller))


@router.post("/unpause")
def unpause(
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    return envelope(registry.unpause_contract(caller))


@router.put("/admin")
def set_admin(
    payload: AdminTransferIn,
    caller: str = Depends(caller_identity),
    registry: CaptureRegistry = Depends(registry_service),
):
    return envelope(registry.set_admin(caller, payload.new_admin))


@router.get("/state")
def registry_state(registry: CaptureRegistry = Depends(registry_service)):
    return found(registry.get_state())
