"""Team repository.

Table: teams
"""

import logging

from sqlalchemy import text

from balance_api.core.logging import mask_api_key
from balance_api.domain.models.transaction import Team
from balance_api.persistence.base import BaseRepository

logger = logging.getLogger(__name__)


class TeamRepository(BaseRepository):
    """Repository for teams data access."""

    async def get_by_api_key(self, api_key: str) -> Team | None:
        """Find the team owning ``api_key``.

        Two rows are fetched so duplicated keys can be reported; the team with
        the lowest id wins.
        """
        result = await self._execute(
            text("""
                SELECT id, name
                FROM teams
                WHERE api_key = :api_key
                ORDER BY id
                LIMIT 2
            """),
            {"api_key": api_key},
        )
        rows = result.fetchall()
        if not rows:
            return None
        if len(rows) > 1:
            logger.warning(
                "API key shared by several teams; using the first",
                extra={"api_key": mask_api_key(api_key), "team_ids": [row[0] for row in rows]},
            )
        return Team(id=rows[0][0], name=rows[0][1])
