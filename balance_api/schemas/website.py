"""Website schemas."""

from balance_api.schemas.transaction import CamelModel


class WebsiteOut(CamelModel):
    id: str
    name: str
    url: str | None = None
    api_key: str | None = None
    balance: float


class WebsiteListResponse(CamelModel):
    """Websites of a team with their balances."""

    success: bool = True
    team_id: str
    team_name: str | None = None
    website_count: int
    websites: list[WebsiteOut]
