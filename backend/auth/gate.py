from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from backend.auth.cookies import extract_session
from backend.auth.errors import AuthError, InternalFault, Unauthorized
from backend.auth.session import SessionCodec

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "Unauthorized: No token provided."
INVALID_TOKEN_MESSAGE = "Unauthorized: Invalid token."


class GateState(str, enum.Enum):
    NO_TOKEN = "no_token"
    VERIFYING = "verifying"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"
    FATAL = "fatal"


@dataclass(frozen=True)
class GateOutcome:
    state: GateState  # terminal: AUTHORIZED, REJECTED or FATAL
    stage: GateState  # last non-terminal state reached (NO_TOKEN or VERIFYING)
    subject: Optional[str] = None
    error: Optional[AuthError] = None

    @property
    def authorized(self) -> bool:
        return self.state is GateState.AUTHORIZED


def evaluate_session(codec: SessionCodec, cookies: Dict[str, str]) -> GateOutcome:
    """
    Decide whether a request carries a valid session.

    Missing cookie and bad/expired token are client failures (Rejected). Anything
    else, e.g. no signing secret configured, is Fatal and must surface as a 500.
    """
    token = extract_session(cookies)
    if token is None:
        return GateOutcome(GateState.REJECTED, GateState.NO_TOKEN, error=Unauthorized(NO_TOKEN_MESSAGE))

    try:
        claims = codec.verify(token)
    except Exception:
        logger.exception("Session verification failed unexpectedly")
        return GateOutcome(GateState.FATAL, GateState.VERIFYING, error=InternalFault())

    if not claims.ok:
        logger.debug("Rejected session token: %s", claims.error.reason)
        return GateOutcome(GateState.REJECTED, GateState.VERIFYING, error=Unauthorized(INVALID_TOKEN_MESSAGE))
    return GateOutcome(GateState.AUTHORIZED, GateState.VERIFYING, subject=claims.value.subject)
