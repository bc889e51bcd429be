import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from capture_registry.app.infra.clock import BlockClock
from capture_registry.app.services.registry import CaptureRegistry, deploy_registry

DEPLOYER = "deployer"
FACILITY = "facility_1"
OTHER_FACILITY = "facility_2"
AUDITOR = "auditor_1"
USER = "user_1"
CLOCK_START = 1000


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        deploy_registry(session, DEPLOYER)
        yield session


@pytest.fixture
def clock():
    return BlockClock(start=CLOCK_START)


@pytest.fixture
def registry(session, clock):
    return CaptureRegistry(session, clock)


@pytest.fixture
def make_hash():
    def _make(label: str) -> bytes:
        raw = label.encode("utf-8")
        assert len(raw) <= 32
        return raw.ljust(32, b"0")

    return _make


@pytest.fixture
def event_id(registry, make_hash):
    """A pending event owned by FACILITY."""
    result = registry.register_capture_event(FACILITY, 1_000_000, make_hash("base-event"), "Test")
    assert result.success
    return result.value
