"""Team transaction service: listing, withdrawal creation and status updates."""

import logging
from typing import Any
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from balance_api.core.auth import authenticate_team
from balance_api.core.errors import ConflictError, NotFoundError, ValidationError
from balance_api.domain.models.transaction import (
    TERMINAL_STATUSES,
    UPDATABLE_STATUSES,
    Team,
    TransactionStatus,
    TransactionType,
)
from balance_api.persistence.base import DEFAULT_COMMAND_TIMEOUT
from balance_api.persistence.team_repository import TeamRepository
from balance_api.persistence.transaction_repository import TransactionRepository
from balance_api.persistence.website_repository import WebsiteRepository
from balance_api.schemas.transaction import TransactionStatusUpdate, WithdrawalCreate

logger = logging.getLogger(__name__)

UNKNOWN_WEBSITE = "Unknown Website"

# (field name, wire name) pairs required on a withdrawal
REQUIRED_WITHDRAWAL_FIELDS = (
    ("transaction_id", "transactionId"),
    ("customer_username", "customerUsername"),
    ("bank_name", "bankName"),
    ("account_number", "accountNumber"),
    ("real_name", "realName"),
    ("amount", "amount"),
)


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and value > 0


class TransactionService:
    """Service for team transaction operations."""

    def __init__(
        self,
        session: AsyncSession | None,
        *,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        teams: TeamRepository | None = None,
        transactions: TransactionRepository | None = None,
        websites: WebsiteRepository | None = None,
    ):
        self.session = session
        self.teams = teams or TeamRepository(session, timeout=timeout)
        self.transactions = transactions or TransactionRepository(session, timeout=timeout)
        self.websites = websites or WebsiteRepository(session, timeout=timeout)

    async def list_transactions(self, api_key: str) -> tuple[Team, list[dict[str, Any]]]:
        """List every transaction of the calling team, newest first."""
        team = await authenticate_team(self.teams, api_key)
        return team, await self.transactions.list_by_team(team.id)

    async def create_withdrawal(
        self, api_key: str, request: WithdrawalCreate
    ) -> tuple[Team, dict[str, Any]]:
        """Record a pending withdrawal and debit the website balance."""
        self._validate_withdrawal(request)
        team = await authenticate_team(self.teams, api_key)

        if await self.transactions.exists_for_customer(
            request.customer_username, request.transaction_id
        ):
            raise ConflictError(
                "Transaction with this customerUsername and transactionId combination already exists."
            )

        website = await self._resolve_website(team, request)
        amount = float(request.amount)

        balances = await self.websites.debit(website["id"], amount)
        if balances is None:
            raise ValidationError(
                "Insufficient balance",
                details={"currentBalance": website["balance"], "requestedAmount": amount},
            )
        balance_before, balance_after = balances

        transaction = await self.transactions.create_withdrawal(
            transaction_doc_id=uuid4().hex,
            team_id=team.id,
            team_name=team.name,
            transaction_id=request.transaction_id,
            customer_username=request.customer_username,
            website_id=website["id"],
            website_name=website["name"],
            bank_name=request.bank_name,
            account_number=request.account_number,
            real_name=request.real_name,
            amount=amount,
            balance_before=balance_before,
            balance_after=balance_after,
        )
        await self.transactions.commit()

        logger.info(
            "Withdrawal created",
            extra={
                "team_id": team.id,
                "transaction_doc_id": transaction["id"],
                "website_id": website["id"],
                "amount": amount,
            },
        )
        return team, transaction

    async def update_status(
        self, api_key: str, request: TransactionStatusUpdate
    ) -> dict[str, Any]:
        """Complete or fail a pending/in-progress transaction.

        A failed withdrawal refunds its amount to the website in the same
        database transaction as the status change.
        """
        if not request.id:
            raise ValidationError("Transaction document ID is required")
        try:
            new_status = TransactionStatus(request.status)
        except ValueError:
            new_status = None
        if new_status not in TERMINAL_STATUSES:
            raise ValidationError(
                f'Status must be either "{TransactionStatus.SUCCESS.value}" '
                f'or "{TransactionStatus.FAILED.value}"'
            )

        team = await authenticate_team(self.teams, api_key)

        current = await self.transactions.get_by_id(request.id)
        if current is None:
            raise NotFoundError("Transaction not found")
        if current["team_id"] != team.id:
            raise NotFoundError("Transaction not found in your team")
        if current["status"] not in {s.value for s in UPDATABLE_STATUSES}:
            raise ValidationError(
                f"Transaction cannot be updated. Current status: {current['status']}"
            )

        website = None
        if current.get("website_id"):
            website = await self.websites.get_by_id(current["website_id"])

        updated = await self.transactions.finish(
            request.id, team.id, new_status, note=request.note or None
        )
        if updated is None:
            raise ConflictError(
                "Transaction status changed by another request",
                details={"id": request.id},
            )

        refund = None
        amount = current.get("amount") or 0
        if (
            new_status == TransactionStatus.FAILED
            and current.get("type") == TransactionType.WITHDRAW.value
            and website is not None
            and amount
        ):
            website = await self.websites.credit(website["id"], amount)
            if website is not None:
                refund = {
                    "website_id": website["id"],
                    "website_name": website["name"] or UNKNOWN_WEBSITE,
                    "refund_amount": amount,
                    "message": f"Credit refunded: {amount} THB",
                }

        await self.transactions.commit()
        logger.info(
            "Transaction status updated",
            extra={
                "team_id": team.id,
                "transaction_doc_id": request.id,
                "old_status": current["status"],
                "new_status": new_status.value,
                "refunded": refund is not None,
            },
        )

        return {
            "team_id": team.id,
            "team_name": team.name,
            "id": request.id,
            "transaction_id": current.get("transaction_id") or "",
            "old_status": current["status"],
            "new_status": new_status.value,
            "message": f'Transaction status updated to "{new_status.value}"',
            "website": {
                "id": current.get("website_id") or "",
                "name": (website or {}).get("name") or UNKNOWN_WEBSITE,
                "current_balance": (website or {}).get("balance", 0.0),
            },
            "credit_refund": refund,
        }

    def _validate_withdrawal(self, request: WithdrawalCreate) -> None:
        if not request.website_name and not request.website_id:
            raise ValidationError("Either websiteName or websiteId is required")

        missing = [
            wire_name
            for field_name, wire_name in REQUIRED_WITHDRAWAL_FIELDS
            if not getattr(request, field_name) and getattr(request, field_name) != 0
        ]
        if missing:
            raise ValidationError(
                "Missing required fields",
                details={
                    "missingFields": missing,
                    "required": [wire_name for _, wire_name in REQUIRED_WITHDRAWAL_FIELDS],
                },
            )

        if not _is_positive_number(request.amount):
            raise ValidationError("Amount must be a positive number")

    async def _resolve_website(self, team: Team, request: WithdrawalCreate) -> dict[str, Any]:
        if request.website_id:
            website = await self.websites.get_by_id(request.website_id)
            if website is None:
                raise NotFoundError("Website not found")
            if website["team_id"] != team.id:
                raise NotFoundError("Website not found in your team")
            return website

        website = await self.websites.get_by_name(team.id, request.website_name)
        if website is None:
            raise NotFoundError("Website not found in your team")
        return website
