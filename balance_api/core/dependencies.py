"""
FastAPI dependency injection utilities.

Provides the team credential dependency and per-request service factories
bound to the request's database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from balance_api.core.auth import get_team_api_key
from balance_api.core.config import Settings, get_settings
from balance_api.core.database import get_session
from balance_api.services.claim_service import ClaimService
from balance_api.services.transaction_service import TransactionService
from balance_api.services.website_service import WebsiteService

TeamApiKey = Annotated[str, Depends(get_team_api_key)]
"""Bearer API key of the calling team; missing or malformed headers raise 401."""


def get_claim_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> ClaimService:
    """Get claim service instance."""
    return ClaimService(
        session,
        max_attempts=settings.claim.max_attempts,
        timeout=settings.database.command_timeout,
    )


def get_transaction_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> TransactionService:
    """Get team transaction service instance."""
    return TransactionService(session, timeout=settings.database.command_timeout)


def get_website_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> WebsiteService:
    """Get website service instance."""
    return WebsiteService(session, timeout=settings.database.command_timeout)


ClaimServiceDep = Annotated[ClaimService, Depends(get_claim_service)]
TransactionServiceDep = Annotated[TransactionService, Depends(get_transaction_service)]
WebsiteServiceDep = Annotated[WebsiteService, Depends(get_website_service)]
