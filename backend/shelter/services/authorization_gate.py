"""Authorization Gate — turns a session token into an AuthenticatedUser or fails.

Invariants:
    - Exactly one authorization call per public operation, before any other work
    - Rejected session → AuthorizationError; InternalError from the retry wrapper propagates unchanged
"""

import logging
from functools import partial

from shelter.core.domain_types import AUTHORIZATION
from shelter.core.entities import AuthenticatedUser
from shelter.core.errors import AuthorizationError
from shelter.core.repository_protocols import AuthorizationClient
from shelter.infrastructure.resilient_call import call_with_retry

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Validates session tokens against the authorization service."""

    def __init__(self, client: AuthorizationClient):
        self._client = client

    async def authorize(self, session_id: str) -> AuthenticatedUser:
        result = await call_with_retry(
            partial(self._client.authorize, session_id), upstream=AUTHORIZATION,
        )
        if not result.is_success or result.user_id is None:
            logger.info("Session rejected by authorization service")
            raise AuthorizationError()
        return AuthenticatedUser(user_id=result.user_id)
