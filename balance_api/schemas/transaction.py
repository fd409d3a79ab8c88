"""Transaction schemas for the team API.

Wire format is camelCase; models accept either the alias or the field name so
repository dictionaries (snake_case) validate directly.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionOut(CamelModel):
    """A transaction as returned to teams."""

    id: str
    transaction_id: str | None = None
    customer_username: str | None = None
    website_name: str | None = None
    website_id: str | None = None
    bank_name: str | None = None
    account_number: str | None = None
    real_name: str | None = None
    amount: float | None = None
    balance_before: float | None = None
    balance_after: float | None = None
    status: str
    type: str | None = None
    note: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    last_modified_by: str | None = None
    last_modified_by_email: str | None = None
    last_modified_at: datetime | None = None


class TeamTransactionOut(TransactionOut):
    """Transaction listing entry with ownership and completion fields."""

    team_id: str | None = None
    team_name: str | None = None
    completed_at: datetime | None = None


class ClaimResponse(CamelModel):
    """Response of the pending-transaction claim endpoint."""

    success: bool = True
    team_id: str
    team_name: str | None = None
    message: str
    transaction: TransactionOut | None = None


class TransactionListResponse(CamelModel):
    """All transactions of a team."""

    success: bool = True
    team_id: str
    team_name: str | None = None
    transaction_count: int
    transactions: list[TeamTransactionOut]


class WithdrawalCreate(CamelModel):
    """Request body for creating a withdrawal.

    Fields are optional here; presence and positivity are checked by the
    service so missing fields are reported together.
    """

    transaction_id: str | None = None
    customer_username: str | None = None
    website_name: str | None = None
    website_id: str | None = None
    bank_name: str | None = None
    account_number: str | None = None
    real_name: str | None = None
    # Left untyped so a non-numeric amount gets the dedicated error message
    amount: Any = None


class WithdrawalCreatedResponse(CamelModel):
    """Response after a withdrawal was recorded."""

    success: bool = True
    message: str
    data: TeamTransactionOut


class TransactionStatusUpdate(CamelModel):
    """Request body for completing or failing a transaction."""

    id: str | None = None
    status: str | None = None
    note: str | None = Field(default=None, max_length=1000)


class WebsiteBalance(CamelModel):
    id: str
    name: str
    current_balance: float


class CreditRefund(CamelModel):
    website_id: str
    website_name: str
    refund_amount: float
    message: str


class TransactionStatusUpdateResponse(CamelModel):
    """Response after a status update."""

    success: bool = True
    team_id: str
    team_name: str | None = None
    id: str
    transaction_id: str
    old_status: str
    new_status: str
    message: str
    website: WebsiteBalance
    credit_refund: CreditRefund | None = None
