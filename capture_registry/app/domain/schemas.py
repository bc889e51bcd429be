"""API I/O schemas and boundary field formats.

Structural bounds live here. A value that does not fit one of these types is
rejected by validation before any registry state is read; business checks
such as the metadata length (error 105) run later inside the operations.
"""
from __future__ import annotations

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints

from .errors import ErrorCode
from .models import (
    DOC_HASH_LEN,
    MAX_PERMISSION_LEN,
    MAX_PERMISSIONS,
    MAX_PRINCIPAL_LEN,
    MAX_ROLE_LEN,
    MAX_UPDATE_NOTES_LEN,
)

MAX_AMOUNT = 2**63 - 1


def _coerce_hash(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError as exc:
            raise ValueError("doc hash must be hex encoded") from exc
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


Principal = Annotated[str, StringConstraints(min_length=1, max_length=MAX_PRINCIPAL_LEN)]
DocHash = Annotated[
    bytes,
    Field(min_length=DOC_HASH_LEN, max_length=DOC_HASH_LEN),
    BeforeValidator(_coerce_hash),
]
# sign is a business rule (error 102); only the storage width is structural
Amount = Annotated[int, Field(le=MAX_AMOUNT)]
# any string; values outside the settable set are the business error 104
StatusValue = str
Identifier = Annotated[int, Field(ge=0, le=MAX_AMOUNT)]
VersionNumber = Identifier
Role = Annotated[str, StringConstraints(max_length=MAX_ROLE_LEN)]
PermissionToken = Annotated[str, StringConstraints(max_length=MAX_PERMISSION_LEN)]
Permissions = Annotated[List[PermissionToken], Field(max_length=MAX_PERMISSIONS)]
UpdateNotes = Annotated[str, StringConstraints(max_length=MAX_UPDATE_NOTES_LEN)]


class Result(BaseModel):
    """Discriminated outcome of a registry operation."""

    success: bool
    value: Any = None
    error_code: Optional[ErrorCode] = None

    @classmethod
    def ok(cls, value: Any = True) -> "Result":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, code: ErrorCode) -> "Result":
        return cls(success=False, error_code=code)


class CaptureEventIn(BaseModel):
    co2_amount: Amount
    doc_hash: DocHash
    metadata: str = ""


class StatusUpdateIn(BaseModel):
    status: StatusValue


class EventVersionIn(BaseModel):
    version: VersionNumber
    updated_co2_amount: Amount
    updated_doc_hash: DocHash
    update_notes: UpdateNotes = ""


class CollaboratorIn(BaseModel):
    role: Role
    permissions: Permissions = Field(default_factory=list)


class NoteIn(BaseModel):
    content: str


class AdminTransferIn(BaseModel):
    new_admin: Principal
