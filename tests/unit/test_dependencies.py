"""Unit tests for dependencies module."""

from unittest.mock import MagicMock

from balance_api.core.config import Settings
from balance_api.core.dependencies import (
    get_claim_service,
    get_transaction_service,
    get_website_service,
)
from balance_api.services.claim_service import ClaimService
from balance_api.services.transaction_service import TransactionService
from balance_api.services.website_service import WebsiteService


def make_settings(max_attempts=5, command_timeout=2.0) -> Settings:
    settings = Settings()
    settings.claim.max_attempts = max_attempts
    settings.database.command_timeout = command_timeout
    return settings


class TestServiceFactories:
    """Test per-request service factories."""

    def test_claim_service_uses_settings(self):
        """Test the claim service gets its bound and deadline from settings."""
        session = MagicMock()

        service = get_claim_service(session=session, settings=make_settings())

        assert isinstance(service, ClaimService)
        assert service.max_attempts == 5
        assert service.transactions.session is session
        assert service.transactions.timeout == 2.0
        assert service.teams.timeout == 2.0

    def test_transaction_service(self):
        """Test the transaction service shares the request session."""
        session = MagicMock()

        service = get_transaction_service(session=session, settings=make_settings())

        assert isinstance(service, TransactionService)
        assert service.websites.session is session
        assert service.transactions.timeout == 2.0

    def test_website_service(self):
        """Test the website service shares the request session."""
        session = MagicMock()

        service = get_website_service(session=session, settings=make_settings())

        assert isinstance(service, WebsiteService)
        assert service.websites.session is session
