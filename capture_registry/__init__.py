"""
Capture Event Registry: the registry of record for CO2 capture claims.

Each capture event ties a facility's claimed amount to a 32-byte document
hash that no other event may ever reuse. Events move through status
transitions, gather versioned corrections, delegate narrow permissions to
collaborators and accumulate append-only notes, all behind a single admin
and a global pause gate.

Hashes are opaque here; computing them is the caller's business.
"""

__all__ = [
    "BlockClock",
    "CaptureRegistry",
    "ErrorCode",
    "Result",
    "deploy_registry",
]

from .app.domain.errors import ErrorCode
from .app.domain.schemas import Result
from .app.infra.clock import BlockClock
from .app.services.registry import CaptureRegistry, deploy_registry

__version__ = "0.1.0"
