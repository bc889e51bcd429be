"""Domain models shared between API and persistence layers."""
from __future__ import annotations

from enum import Enum
from typing import Annotated, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer
from sqlalchemy import JSON, BigInteger, LargeBinary, String
from sqlmodel import Column, Field as SQLField, SQLModel

DOC_HASH_LEN = 32
MAX_METADATA_LEN = 1000
MAX_CONTENT_LEN = MAX_METADATA_LEN
MAX_UPDATE_NOTES_LEN = 200
MAX_ROLE_LEN = 50
MAX_PERMISSIONS = 5
MAX_PERMISSION_LEN = 20
MAX_PRINCIPAL_LEN = 128

# hashes are raw bytes in python and hex on the wire
HexBytes = Annotated[bytes, PlainSerializer(lambda value: value.hex(), return_type=str, when_used="json")]


class EventStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    UPDATED = "updated"


# pending is only ever the initial state
SETTABLE_STATUSES = frozenset(
    {EventStatus.VERIFIED.value, EventStatus.REJECTED.value, EventStatus.UPDATED.value}
)

PERM_UPDATE_STATUS = "update-status"
PERM_ADD_VERSION = "add-version"
PERM_ADD_NOTES = "add-notes"


class CaptureEvent(SQLModel, table=True):
    """A registered claim of captured CO2. Never deleted."""

    __tablename__ = "capture_events"

    event_id: int = SQLField(primary_key=True, sa_column_kwargs={"autoincrement": False})
    facility_principal: str = SQLField(index=True, max_length=MAX_PRINCIPAL_LEN)
    co2_amount: int = SQLField(sa_column=Column(BigInteger, nullable=False))
    timestamp: int
    doc_hash: bytes = SQLField(sa_column=Column(LargeBinary(DOC_HASH_LEN), nullable=False))
    event_metadata: str = SQLField(
        sa_column=Column("metadata", String(MAX_METADATA_LEN), nullable=False, server_default="")
    )
    status: EventStatus = SQLField(default=EventStatus.PENDING, index=True)
    last_updated: int


class EventHash(SQLModel, table=True):
    """Permanent claim of a document hash by the first event that used it."""

    __tablename__ = "event_hashes"

    doc_hash: bytes = SQLField(sa_column=Column(LargeBinary(DOC_HASH_LEN), primary_key=True))
    event_id: int = SQLField(foreign_key="capture_events.event_id", index=True)


class EventVersion(SQLModel, table=True):
    __tablename__ = "event_versions"

    event_id: int = SQLField(foreign_key="capture_events.event_id", primary_key=True)
    version: int = SQLField(primary_key=True, sa_column_kwargs={"autoincrement": False})
    updated_co2_amount: int = SQLField(sa_column=Column(BigInteger, nullable=False))
    updated_doc_hash: bytes = SQLField(sa_column=Column(LargeBinary(DOC_HASH_LEN), nullable=False))
    update_notes: str = SQLField(default="", max_length=MAX_UPDATE_NOTES_LEN)
    timestamp: int


class EventCollaborator(SQLModel, table=True):
    __tablename__ = "event_collaborators"

    event_id: int = SQLField(foreign_key="capture_events.event_id", primary_key=True)
    principal: str = SQLField(primary_key=True, max_length=MAX_PRINCIPAL_LEN)
    role: str = SQLField(max_length=MAX_ROLE_LEN)
    permissions: List[str] = SQLField(
        default_factory=list, sa_column=Column(JSON, nullable=False, server_default="[]")
    )
    added_at: int


class EventNote(SQLModel, table=True):
    """Append-only note. note_id comes from the registry-wide counter."""

    __tablename__ = "event_notes"

    event_id: int = SQLField(foreign_key="capture_events.event_id", primary_key=True)
    note_id: int = SQLField(primary_key=True, sa_column_kwargs={"autoincrement": False})
    author: str = SQLField(index=True, max_length=MAX_PRINCIPAL_LEN)
    content: str = SQLField(sa_column=Column(String(MAX_CONTENT_LEN), nullable=False))
    timestamp: int


class RegistryConfig(SQLModel, table=True):
    """Single-row global configuration: counters, pause flag and admin."""

    __tablename__ = "registry_config"

    id: int = SQLField(default=1, primary_key=True)
    next_event_id: int = SQLField(default=1)
    next_note_id: int = SQLField(default=1)
    paused: bool = SQLField(default=False)
    admin: str = SQLField(max_length=MAX_PRINCIPAL_LEN)


class CaptureEventRead(BaseModel):
    event_id: int
    facility_principal: str
    co2_amount: int
    timestamp: int
    doc_hash: HexBytes
    metadata: str = Field(validation_alias=AliasChoices("event_metadata", "metadata"))
    status: EventStatus
    last_updated: int

    model_config = ConfigDict(from_attributes=True)


class EventVersionRead(BaseModel):
    event_id: int
    version: int
    updated_co2_amount: int
    updated_doc_hash: HexBytes
    update_notes: str
    timestamp: int

    model_config = ConfigDict(from_attributes=True)


class CollaboratorRead(BaseModel):
    event_id: int
    principal: str
    role: str
    permissions: List[str]
    added_at: int

    model_config = ConfigDict(from_attributes=True)


class NoteRead(BaseModel):
    event_id: int
    note_id: int
    author: str
    content: str
    timestamp: int

    model_config = ConfigDict(from_attributes=True)


class RegistryStateRead(BaseModel):
    next_event_id: int
    next_note_id: int
    paused: bool
    admin: str

    model_config = ConfigDict(from_attributes=True)
