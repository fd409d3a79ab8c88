"""Website listing service."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from balance_api.core.auth import authenticate_team
from balance_api.domain.models.transaction import Team
from balance_api.persistence.base import DEFAULT_COMMAND_TIMEOUT
from balance_api.persistence.team_repository import TeamRepository
from balance_api.persistence.website_repository import WebsiteRepository


class WebsiteService:
    """Service for website queries."""

    def __init__(
        self,
        session: AsyncSession | None,
        *,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        teams: TeamRepository | None = None,
        websites: WebsiteRepository | None = None,
    ):
        self.session = session
        self.teams = teams or TeamRepository(session, timeout=timeout)
        self.websites = websites or WebsiteRepository(session, timeout=timeout)

    async def list_websites(self, api_key: str) -> tuple[Team, list[dict[str, Any]]]:
        """List the calling team's websites."""
        team = await authenticate_team(self.teams, api_key)
        return team, await self.websites.list_by_team(team.id)
