"""
Team API-key authentication.

Teams call the API with ``Authorization: Bearer <team_api_key>``. The header is
parsed by a FastAPI dependency; resolving the key to a team happens against the
``teams`` table through ``TeamRepository``.
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from balance_api.core.errors import UnauthorizedError
from balance_api.core.logging import mask_api_key
from balance_api.domain.models.transaction import Team
from balance_api.persistence.team_repository import TeamRepository

logger = logging.getLogger(__name__)

MISSING_HEADER_MSG = "Missing or invalid Authorization header. Use: Bearer <team_api_key>"
INVALID_API_KEY_MSG = "Invalid team API key"

# Header is optional at the scheme level so a missing header renders our envelope
_bearer = HTTPBearer(auto_error=False)


def get_team_api_key(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Extract the team API key from the bearer header.

    Raises:
        UnauthorizedError: If the header is missing, not a bearer header,
            or carries an empty key
    """
    if credentials is None or not credentials.credentials.strip():
        logger.info("Rejected request without bearer credentials")
        raise UnauthorizedError(MISSING_HEADER_MSG)
    return credentials.credentials.strip()


async def authenticate_team(teams: TeamRepository, api_key: str) -> Team:
    """Resolve an API key to its team.

    Raises:
        UnauthorizedError: If no team owns the key
    """
    if not api_key:
        raise UnauthorizedError(MISSING_HEADER_MSG)
    team = await teams.get_by_api_key(api_key)
    if team is None:
        logger.info("No team found for API key", extra={"api_key": mask_api_key(api_key)})
        raise UnauthorizedError(INVALID_API_KEY_MSG)
    logger.debug("Team authenticated", extra={"team_id": team.id})
    return team
