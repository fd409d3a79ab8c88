"""Unit tests for team API-key authentication."""

from unittest.mock import AsyncMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from balance_api.core.auth import (
    INVALID_API_KEY_MSG,
    MISSING_HEADER_MSG,
    authenticate_team,
    get_team_api_key,
)
from balance_api.core.errors import UnauthorizedError
from balance_api.domain.models.transaction import Team


class TestGetTeamApiKey:
    """Test bearer header parsing."""

    def test_returns_key(self):
        """Test a bearer credential yields the key."""
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="tk_abc")
        assert get_team_api_key(credentials) == "tk_abc"

    def test_strips_whitespace(self):
        """Test surrounding whitespace is dropped."""
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="  tk_abc ")
        assert get_team_api_key(credentials) == "tk_abc"

    def test_missing_header(self):
        """Test missing credentials raise UnauthorizedError."""
        with pytest.raises(UnauthorizedError) as exc_info:
            get_team_api_key(None)
        assert exc_info.value.message == MISSING_HEADER_MSG

    def test_blank_key(self):
        """Test a blank key raises UnauthorizedError."""
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="   ")
        with pytest.raises(UnauthorizedError):
            get_team_api_key(credentials)


class TestAuthenticateTeam:
    """Test resolving keys to teams."""

    @pytest.mark.asyncio
    async def test_known_key(self):
        """Test a known key resolves to its team."""
        teams = AsyncMock()
        teams.get_by_api_key.return_value = Team(id="T7", name="Team Seven")

        team = await authenticate_team(teams, "tk_abc")

        assert team.id == "T7"
        teams.get_by_api_key.assert_awaited_once_with("tk_abc")

    @pytest.mark.asyncio
    async def test_unknown_key(self):
        """Test an unknown key raises UnauthorizedError."""
        teams = AsyncMock()
        teams.get_by_api_key.return_value = None

        with pytest.raises(UnauthorizedError) as exc_info:
            await authenticate_team(teams, "nope")

        assert exc_info.value.message == INVALID_API_KEY_MSG

    @pytest.mark.asyncio
    async def test_empty_key_skips_lookup(self):
        """Test an empty key is rejected without querying teams."""
        teams = AsyncMock()

        with pytest.raises(UnauthorizedError):
            await authenticate_team(teams, "")

        teams.get_by_api_key.assert_not_awaited()
