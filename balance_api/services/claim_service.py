"""Claim service handing out a team's oldest pending transaction."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from balance_api.core.auth import authenticate_team
from balance_api.core.errors import ClaimContentionError
from balance_api.domain.models.transaction import Team, TransactionStatus, claim_order_key
from balance_api.persistence.base import DEFAULT_COMMAND_TIMEOUT
from balance_api.persistence.team_repository import TeamRepository
from balance_api.persistence.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_CLAIM_ATTEMPTS = 3

CLAIMED_MSG = f'Transaction claimed and moved to "{TransactionStatus.IN_PROGRESS.value}"'
NOTHING_PENDING_MSG = "No pending transactions"


@dataclass
class ClaimResult:
    """Outcome of a claim call; ``transaction`` is None when nothing was pending."""

    team: Team
    transaction: dict[str, Any] | None

    @property
    def message(self) -> str:
        return CLAIMED_MSG if self.transaction is not None else NOTHING_PENDING_MSG


class ClaimService:
    """Service claiming pending transactions for teams.

    Claiming is first-in first-out on ``created_at``. The transition is a
    conditional write, so when two callers race for the same transaction only
    one update applies and the loser moves on to the next-oldest candidate.
    """

    def __init__(
        self,
        session: AsyncSession | None,
        *,
        max_attempts: int = DEFAULT_MAX_CLAIM_ATTEMPTS,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        teams: TeamRepository | None = None,
        transactions: TransactionRepository | None = None,
    ):
        self.session = session
        self.max_attempts = max_attempts
        self.teams = teams or TeamRepository(session, timeout=timeout)
        self.transactions = transactions or TransactionRepository(session, timeout=timeout)

    async def claim_oldest_pending(self, api_key: str) -> ClaimResult:
        """Claim the oldest pending transaction of the team owning ``api_key``.

        Raises:
            UnauthorizedError: If the key matches no team
            ClaimContentionError: If ``max_attempts`` writes were lost and candidates remain
            UpstreamUnavailableError: If the store fails or times out
        """
        team = await authenticate_team(self.teams, api_key)

        candidates = sorted(await self.transactions.list_pending(team.id), key=claim_order_key)
        logger.info(
            "Pending transactions found",
            extra={"team_id": team.id, "pending_count": len(candidates)},
        )

        rejected = 0
        for candidate in candidates:
            # Bound applies only while candidates remain
            if rejected >= self.max_attempts:
                raise ClaimContentionError(
                    "Too many concurrent claims",
                    details={
                        "details": f"Lost {rejected} consecutive claim attempts; retry the request"
                    },
                )

            claimed = await self.transactions.mark_in_progress(candidate["id"])
            if claimed is not None:
                await self.transactions.commit()
                logger.info(
                    "Transaction claimed",
                    extra={
                        "team_id": team.id,
                        "transaction_doc_id": claimed["id"],
                        "lost_races": rejected,
                    },
                )
                return ClaimResult(team=team, transaction=claimed)

            rejected += 1
            logger.info(
                "Claim lost to concurrent caller",
                extra={"team_id": team.id, "transaction_doc_id": candidate["id"]},
            )

        return ClaimResult(team=team, transaction=None)
