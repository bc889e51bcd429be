"""Capture event registry: registration, lifecycle, delegation and notes."""
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import validate_call
from sqlalchemy import func
from sqlmodel import Session, select

from ..domain.errors import ErrorCode, RegistryNotDeployed
from ..domain.models import (
    MAX_CONTENT_LEN,
    MAX_METADATA_LEN,
    SETTABLE_STATUSES,
    CaptureEvent,
    CaptureEventRead,
    CollaboratorRead,
    EventCollaborator,
    EventHash,
    EventNote,
    EventStatus,
    EventVersion,
    EventVersionRead,
    NoteRead,
    RegistryConfig,
    RegistryStateRead,
)
from ..domain.policy import Action
from ..domain.schemas import (
    Amount,
    DocHash,
    Identifier,
    Permissions,
    Principal,
    Result,
    Role,
    StatusValue,
    UpdateNotes,
    VersionNumber,
)
from ..infra.clock import Clock
from .access import AccessEvaluator

logger = logging.getLogger(__name__)

CONFIG_ROW_ID = 1


def deploy_registry(session: Session, deployer: str) -> RegistryConfig:
    """Create the config row with `deployer` as admin. Idempotent."""
    config = session.get(RegistryConfig, CONFIG_ROW_ID)
    if config:
        return config
    config = RegistryConfig(id=CONFIG_ROW_ID, admin=deployer)
    session.add(config)
    session.flush()
    session.refresh(config)
    logger.info("registry deployed with admin %s", deployer)
    return config


def _short(doc_hash: bytes) -> str:
    return doc_hash.hex()[:12]


class CaptureRegistry:
    """Registry of record for capture events.

    Mutations return a `Result`; a failed precondition returns
    `Result.fail(code)` before anything is written. Arguments that do not fit
    their boundary types raise `pydantic.ValidationError` instead.
    """

    def __init__(self, session: Session, clock: Clock) -> None:
        self.session = session
        self.clock = clock
        self.access = AccessEvaluator(session)

    # ------------------------------------------------------------------
    # Admin controls
    # ------------------------------------------------------------------
    @validate_call
    def pause_contract(self, caller: Principal) -> Result:
        return self._set_paused(caller, True)

    @validate_call
    def unpause_contract(self, caller: Principal) -> Result:
        return self._set_paused(caller, False)

    @validate_call
    def set_admin(self, caller: Principal, new_admin: Principal) -> Result:
        config = self._config(for_update=True)
        if caller != config.admin:
            return self._rejected("set_admin", caller, ErrorCode.UNAUTHORIZED)
        config.admin = new_admin
        self.session.add(config)
        self.session.flush()
        logger.info("admin changed from %s to %s", caller, new_admin)
        return Result.ok()

    def _set_paused(self, caller: str, paused: bool) -> Result:
        operation = "pause_contract" if paused else "unpause_contract"
        config = self._config(for_update=True)
        if caller != config.admin:
            return self._rejected(operation, caller, ErrorCode.UNAUTHORIZED)
        config.paused = paused
        self.session.add(config)
        self.session.flush()
        logger.info("registry %s by %s", "paused" if paused else "unpaused", caller)
        return Result.ok()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    @validate_call
    def register_capture_event(
        self,
        caller: Principal,
        co2_amount: Amount,
        doc_hash: DocHash,
        metadata: str,
    ) -> Result:
        config = self._config(for_update=True)
        if config.paused:
            return self._rejected("register_capture_event", caller, ErrorCode.PAUSED)
        if co2_amount <= 0:
            return self._rejected("register_capture_event", caller, ErrorCode.INVALID_AMOUNT)
        if self.session.get(EventHash, doc_hash) is not None:
            return self._rejected("register_capture_event", caller, ErrorCode.ALREADY_REGISTERED)
        if len(metadata) > MAX_METADATA_LEN:
            return self._rejected("register_capture_event", caller, ErrorCode.INVALID_LENGTH)

        event_id = config.next_event_id
        now = self.clock.now()
        self.session.add(
            CaptureEvent(
                event_id=event_id,
                facility_principal=caller,
                co2_amount=co2_amount,
                timestamp=now,
                doc_hash=doc_hash,
                event_metadata=metadata,
                status=EventStatus.PENDING,
                last_updated=now,
            )
        )
        self.session.flush()
        self.session.add(EventHash(doc_hash=doc_hash, event_id=event_id))
        config.next_event_id = event_id + 1
        self.session.add(config)
        self.session.flush()
        logger.info(
            "event %d registered by %s (amount=%d hash=%s)",
            event_id,
            caller,
            co2_amount,
            _short(doc_hash),
        )
        return Result.ok(event_id)

    @validate_call
    def update_event_status(
        self,
        caller: Principal,
        event_id: Identifier,
        new_status: StatusValue,
    ) -> Result:
        config = self._config(for_update=True)
        if config.paused:
            return self._rejected("update_event_status", caller, ErrorCode.PAUSED)
        event = self.session.get(CaptureEvent, event_id)
        if event is None:
            return self._rejected("update_event_status", caller, ErrorCode.NOT_FOUND)
        if not self.access.allows(event, caller, Action.UPDATE_STATUS, config.admin):
            return self._rejected("update_event_status", caller, ErrorCode.UNAUTHORIZED)
        if new_status not in SETTABLE_STATUSES:
            return self._rejected("update_event_status", caller, ErrorCode.INVALID_STATUS)

        event.status = EventStatus(new_status)
        event.last_updated = self.clock.now()
        self.session.add(event)
        self.session.flush()
        logger.info("event %d status set to %s by %s", event_id, new_status, caller)
        return Result.ok()

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------
    @validate_call
    def add_event_version(
        self,
        caller: Principal,
        event_id: Identifier,
        version: VersionNumber,
        updated_co2_amount: Amount,
        updated_doc_hash: DocHash,
        update_notes: UpdateNotes,
    ) -> Result:
        config = self._config(for_update=True)
        if config.paused:
            return self._rejected("add_event_version", caller, ErrorCode.PAUSED)
        event = self.session.get(CaptureEvent, event_id)
        if event is None:
            return self._rejected("add_event_version", caller, ErrorCode.NOT_FOUND)
        if not self.access.allows(event, caller, Action.ADD_VERSION, config.admin):
            return self._rejected("add_event_version", caller, ErrorCode.UNAUTHORIZED)
        if updated_co2_amount <= 0:
            return self._rejected("add_event_version", caller, ErrorCode.INVALID_AMOUNT)

        if self.session.get(EventVersion, (event_id, version)) is not None:
            logger.info("event %d version %d overwritten by %s", event_id, version, caller)
        now = self.clock.now()
        self.session.merge(
            EventVersion(
                event_id=event_id,
                version=version,
                updated_co2_amount=updated_co2_amount,
                updated_doc_hash=updated_doc_hash,
                update_notes=update_notes,
                timestamp=now,
            )
        )

        event.status = EventStatus.UPDATED
        event.last_updated = now
        self.session.add(event)
        self.session.flush()
        logger.info("event %d version %d added by %s", event_id, version, caller)
        return Result.ok()

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------
    @validate_call
    def add_collaborator(
        self,
        caller: Principal,
        event_id: Identifier,
        collaborator: Principal,
        role: Role,
        permissions: Permissions,
    ) -> Result:
        config = self._config(for_update=True)
        if config.paused:
            return self._rejected("add_collaborator", caller, ErrorCode.PAUSED)
        event = self.session.get(CaptureEvent, event_id)
        if event is None:
            return self._rejected("add_collaborator", caller, ErrorCode.NOT_FOUND)
        if not self.access.allows(event, caller, Action.ADD_COLLABORATOR, config.admin):
            return self._rejected("add_collaborator", caller, ErrorCode.UNAUTHORIZED)

        # re-adding a principal replaces the whole entry
        self.session.merge(
            EventCollaborator(
                event_id=event_id,
                principal=collaborator,
                role=role,
                permissions=list(permissions),
                added_at=self.clock.now(),
            )
        )
        self.session.flush()
        logger.info(
            "collaborator %s granted %s on event %d by %s",
            collaborator,
            ",".join(permissions) or "-",
            event_id,
            caller,
        )
        return Result.ok()

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------
    @validate_call
    def add_note(self, caller: Principal, event_id: Identifier, content: str) -> Result:
        config = self._config(for_update=True)
        if config.paused:
            return self._rejected("add_note", caller, ErrorCode.PAUSED)
        event = self.session.get(CaptureEvent, event_id)
        if event is None:
            return self._rejected("add_note", caller, ErrorCode.NOT_FOUND)
        if not self.access.allows(event, caller, Action.ADD_NOTE, config.admin):
            return self._rejected("add_note", caller, ErrorCode.UNAUTHORIZED)
        if len(content) > MAX_CONTENT_LEN:
            return self._rejected("add_note", caller, ErrorCode.INVALID_LENGTH)

        note_id = config.next_note_id
        self.session.add(
            EventNote(
                event_id=event_id,
                note_id=note_id,
                author=caller,
                content=content,
                timestamp=self.clock.now(),
            )
        )
        config.next_note_id = note_id + 1
        self.session.add(config)
        self.session.flush()
        logger.info("note %d added to event %d by %s", note_id, event_id, caller)
        return Result.ok(note_id)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------
    @validate_call
    def get_event_details(self, event_id: Identifier) -> Optional[CaptureEventRead]:
        event = self.session.get(CaptureEvent, event_id)
        return CaptureEventRead.model_validate(event) if event else None

    @validate_call
    def get_event_by_hash(self, doc_hash: DocHash) -> Optional[CaptureEventRead]:
        claim = self.session.get(EventHash, doc_hash)
        return self.get_event_details(claim.event_id) if claim else None

    @validate_call
    def get_event_version(self, event_id: Identifier, version: VersionNumber) -> Optional[EventVersionRead]:
        record = self.session.get(EventVersion, (event_id, version))
        return EventVersionRead.model_validate(record) if record else None

    @validate_call
    def get_collaborator(self, event_id: Identifier, collaborator: Principal) -> Optional[CollaboratorRead]:
        entry = self.session.get(EventCollaborator, (event_id, collaborator))
        return CollaboratorRead.model_validate(entry) if entry else None

    @validate_call
    def get_note(self, event_id: Identifier, note_id: Identifier) -> Optional[NoteRead]:
        note = self.session.get(EventNote, (event_id, note_id))
        return NoteRead.model_validate(note) if note else None

    def get_next_event_id(self) -> int:
        return self._config().next_event_id

    def is_contract_paused(self) -> bool:
        return self._config().paused

    def get_contract_admin(self) -> str:
        return self._config().admin

    def get_state(self) -> RegistryStateRead:
        return RegistryStateRead.model_validate(self._config())

    def list_events(
        self,
        facility: Optional[str] = None,
        status: Optional[EventStatus] = None,
        limit: int = 100,
    ) -> List[CaptureEventRead]:
        stmt = select(CaptureEvent).order_by(CaptureEvent.event_id.asc()).limit(limit)
        if facility:
            stmt = stmt.where(CaptureEvent.facility_principal == facility)
        if status:
            stmt = stmt.where(CaptureEvent.status == status)
        return [CaptureEventRead.model_validate(event) for event in self.session.exec(stmt).all()]

    def list_event_versions(self, event_id: int) -> List[EventVersionRead]:
        stmt = (
            select(EventVersion)
            .where(EventVersion.event_id == event_id)
            .order_by(EventVersion.version.asc())
        )
        return [EventVersionRead.model_validate(record) for record in self.session.exec(stmt).all()]

    def list_collaborators(self, event_id: int) -> List[CollaboratorRead]:
        stmt = (
            select(EventCollaborator)
            .where(EventCollaborator.event_id == event_id)
            .order_by(EventCollaborator.principal.asc())
        )
        return [CollaboratorRead.model_validate(entry) for entry in self.session.exec(stmt).all()]

    def list_notes(self, event_id: int) -> List[NoteRead]:
        stmt = select(EventNote).where(EventNote.event_id == event_id).order_by(EventNote.note_id.asc())
        return [NoteRead.model_validate(note) for note in self.session.exec(stmt).all()]

    def latest_height(self) -> Optional[int]:
        """Highest clock value stamped on any stored record."""
        heights = [
            self.session.exec(select(func.max(CaptureEvent.last_updated))).first(),
            self.session.exec(select(func.max(EventVersion.timestamp))).first(),
            self.session.exec(select(func.max(EventCollaborator.added_at))).first(),
            self.session.exec(select(func.max(EventNote.timestamp))).first(),
        ]
        present = [height for height in heights if height is not None]
        return max(present) if present else None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _config(self, for_update: bool = False) -> RegistryConfig:
        stmt = select(RegistryConfig).where(RegistryConfig.id == CONFIG_ROW_ID)
        if for_update:
            # every mutation takes this row lock first; SQLite engines lock on BEGIN instead
            stmt = stmt.with_for_update()
        config = self.session.exec(stmt).first()
        if config is None:
            raise RegistryNotDeployed("registry config missing; call deploy_registry first")
        return config

    @staticmethod
    def _rejected(operation: str, caller: str, code: ErrorCode) -> Result:
        logger.info("%s rejected for %s: %s (%d)", operation, caller, code.name, code.value)
        return Result.fail(code)
