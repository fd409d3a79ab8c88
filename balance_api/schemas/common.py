"""Shared response schemas."""

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing route.

    Extra keys (``details``, ``note``, ``missingFields`` ...) depend on the error.
    """

    model_config = ConfigDict(extra="allow")

    success: bool = False
    error: str
