"""FastAPI application bootstrap for the capture event registry."""
from contextlib import asynccontextmanager
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

from .infra.clock import get_clock
from .infra.db import get_session, init_db
from .routers import admin, collaborators, events, notes
from .services.registry import CaptureRegistry, deploy_registry

load_dotenv()

REGISTRY_DEPLOYER = os.getenv("REGISTRY_DEPLOYER", "deployer")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    with get_session() as session:
        deploy_registry(session, REGISTRY_DEPLOYER)
        latest = CaptureRegistry(session, get_clock()).latest_height()
    if latest is not None:
        # resume the logical clock past everything already stamped
        get_clock().advance_to(latest + 1)
    yield


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Capture Event Registry API", version="0.1.0", lifespan=lifespan)

    app.include_router(events.router, prefix="/events", tags=["events"])
    app.include_router(collaborators.router, prefix="/events", tags=["collaborators"])
    app.include_router(notes.router, prefix="/events", tags=["notes"])
    app.include_router(admin.router, prefix="/admin", tags=["admin"])

    return app


app = create_app()
