"""Dependency injection utilities."""
from collections.abc import Generator

from fastapi import Depends, Header
from sqlmodel import Session

from .domain.models import MAX_PRINCIPAL_LEN
from .infra.clock import Clock, get_clock
from .infra.db import get_session
from .services.registry import CaptureRegistry


def db_session() -> Generator[Session, None, None]:
    """Provide a scoped DB session to FastAPI endpoints."""
    with get_session() as session:
        yield session


def clock_source() -> Clock:
    return get_clock()


def registry_service(
    session: Session = Depends(db_session),
    clock: Clock = Depends(clock_source),
) -> CaptureRegistry:
    return CaptureRegistry(session, clock)


def caller_identity(
    x_caller: str = Header(..., min_length=1, max_length=MAX_PRINCIPAL_LEN),
) -> str:
    """Caller principal, already authenticated by the hosting environment."""
    return x_caller
