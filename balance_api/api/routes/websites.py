"""API routes for team websites."""

from fastapi import APIRouter

from balance_api.core.dependencies import TeamApiKey, WebsiteServiceDep
from balance_api.schemas.common import ErrorResponse
from balance_api.schemas.website import WebsiteListResponse

router = APIRouter(prefix="/team", tags=["team-websites"])


@router.get(
    "/websites",
    response_model=WebsiteListResponse,
    responses={401: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def list_websites(
    api_key: TeamApiKey,
    website_service: WebsiteServiceDep,
) -> dict:
    """List the calling team's websites with their balances."""
    team, websites = await website_service.list_websites(api_key)
    return {
        "success": True,
        "team_id": team.id,
        "team_name": team.name,
        "website_count": len(websites),
        "websites": websites,
    }
