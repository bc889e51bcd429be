"""Collaborator permission resolution with access-decision logging."""
import logging
from typing import FrozenSet

from sqlmodel import Session

from ..domain.models import CaptureEvent, EventCollaborator
from ..domain.policy import Action, PolicyContext, is_allowed

logger = logging.getLogger(__name__)


class AccessEvaluator:
    def __init__(self, session: Session) -> None:
        self.session = session

    def permissions_for(self, event_id: int, principal: str) -> FrozenSet[str]:
        entry = self.session.get(EventCollaborator, (event_id, principal))
        if entry is None:
            return frozenset()
        return frozenset(entry.permissions)

    def has_permission(self, event_id: int, principal: str, token: str) -> bool:
        return token in self.permissions_for(event_id, principal)

    def allows(
        self,
        event: CaptureEvent,
        caller: str,
        action: Action,
        admin: str,
    ) -> bool:
        context = PolicyContext(
            subject_id=caller,
            is_admin=caller == admin,
            permissions=self.permissions_for(event.event_id, caller),
        )
        allowed = is_allowed(context, action, event.facility_principal)
        if not allowed:
            logger.warning(
                "access denied: %s on event %d by %s", action.value, event.event_id, caller
            )
        return allowed
