"""API route claiming a team's oldest pending transaction."""

from fastapi import APIRouter

from balance_api.core.dependencies import ClaimServiceDep, TeamApiKey
from balance_api.schemas.common import ErrorResponse
from balance_api.schemas.transaction import ClaimResponse

router = APIRouter(prefix="/team", tags=["team-transactions"])


@router.get(
    "/pending-transactions",
    response_model=ClaimResponse,
    responses={
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def claim_pending_transaction(
    api_key: TeamApiKey,
    claim_service: ClaimServiceDep,
) -> dict:
    """Claim the oldest pending transaction of the calling team.

    The returned transaction has already been moved to "กำลังโอน".
    `transaction` is null when the team has nothing pending. A 503 or 500
    after a claim attempt means the outcome is unknown; re-query the team's
    transactions before retrying.
    """
    result = await claim_service.claim_oldest_pending(api_key)
    return {
        "success": True,
        "team_id": result.team.id,
        "team_name": result.team.name,
        "message": result.message,
        "transaction": result.transaction,
    }
