"""Transaction repository using SQLAlchemy 2.0 async.

Table: transactions

Status transitions are written as conditional updates: the ``WHERE`` clause
repeats the expected current status and ``RETURNING`` yields the row only when
the update applied. Under READ COMMITTED a concurrent committed change makes
the predicate false, so two callers can never both win the same transition.
"""

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import text

from balance_api.domain.models.transaction import TransactionStatus, TransactionType
from balance_api.persistence.base import BaseRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, team_id, transaction_id, customer_username, website_name, website_id,
    bank_name, account_number, real_name, amount, balance_before, balance_after,
    status, type, note, created_at, updated_at, created_by,
    last_modified_by, last_modified_by_email, last_modified_at, completed_at, team_name
"""


def _to_float(value: Decimal | float | None) -> float | None:
    return float(value) if value is not None else None


class TransactionRepository(BaseRepository):
    """Repository for transactions data access."""

    async def get_by_id(self, transaction_doc_id: str) -> dict[str, Any] | None:
        """Get transaction by document ID."""
        result = await self._execute(
            text(f"SELECT {_COLUMNS} FROM transactions WHERE id = :id"),
            {"id": transaction_doc_id},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def list_by_team(self, team_id: str) -> list[dict[str, Any]]:
        """List every transaction owned by a team, newest first."""
        result = await self._execute(
            text(f"""
                SELECT {_COLUMNS}
                FROM transactions
                WHERE team_id = :team_id
                ORDER BY created_at DESC NULLS LAST, id DESC
            """),
            {"team_id": team_id},
        )
        return [self._row_to_dict(row) for row in result.fetchall()]

    async def list_pending(self, team_id: str) -> list[dict[str, Any]]:
        """List a team's transactions still waiting to be claimed."""
        result = await self._execute(
            text(f"""
                SELECT {_COLUMNS}
                FROM transactions
                WHERE team_id = :team_id AND status = :status
            """),
            {"team_id": team_id, "status": TransactionStatus.PENDING.value},
        )
        return [self._row_to_dict(row) for row in result.fetchall()]

    async def mark_in_progress(self, transaction_doc_id: str) -> dict[str, Any] | None:
        """Move a transaction from pending to in-progress.

        Returns the updated row, or None when the transaction is no longer
        pending (claimed by someone else or removed).
        """
        result = await self._execute(
            text(f"""
                UPDATE transactions
                SET status = :in_progress,
                    updated_at = NOW()
                WHERE id = :id AND status = :pending
                RETURNING {_COLUMNS}
            """),
            {
                "id": transaction_doc_id,
                "in_progress": TransactionStatus.IN_PROGRESS.value,
                "pending": TransactionStatus.PENDING.value,
            },
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def finish(
        self,
        transaction_doc_id: str,
        team_id: str,
        status: TransactionStatus,
        note: str | None = None,
    ) -> dict[str, Any] | None:
        """Set a terminal status on a pending or in-progress transaction.

        Returns None when the transaction left those statuses concurrently.
        """
        result = await self._execute(
            text(f"""
                UPDATE transactions
                SET status = :status,
                    updated_at = NOW(),
                    note = COALESCE(:note, note),
                    completed_at = CASE WHEN :completed THEN NOW() ELSE completed_at END
                WHERE id = :id
                  AND team_id = :team_id
                  AND status IN (:pending, :in_progress)
                RETURNING {_COLUMNS}
            """),
            {
                "id": transaction_doc_id,
                "team_id": team_id,
                "status": status.value,
                "note": note,
                "completed": status == TransactionStatus.SUCCESS,
                "pending": TransactionStatus.PENDING.value,
                "in_progress": TransactionStatus.IN_PROGRESS.value,
            },
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def exists_for_customer(self, customer_username: str, transaction_id: str) -> bool:
        """Check whether a customer already used this business transaction ID."""
        result = await self._execute(
            text("""
                SELECT 1 FROM transactions
                WHERE customer_username = :customer_username
                  AND transaction_id = :transaction_id
                LIMIT 1
            """),
            {"customer_username": customer_username, "transaction_id": transaction_id},
        )
        return result.fetchone() is not None

    async def create_withdrawal(
        self,
        transaction_doc_id: str,
        team_id: str,
        team_name: str | None,
        transaction_id: str,
        customer_username: str,
        website_id: str,
        website_name: str,
        bank_name: str,
        account_number: str,
        real_name: str,
        amount: float,
        balance_before: float,
        balance_after: float,
        created_by: str = "api",
    ) -> dict[str, Any]:
        """Insert a pending withdrawal transaction."""
        result = await self._execute(
            text(f"""
                INSERT INTO transactions (
                    id, team_id, team_name, transaction_id, customer_username,
                    website_name, website_id, bank_name, account_number, real_name,
                    amount, balance_before, balance_after, status, type,
                    created_at, updated_at, created_by
                ) VALUES (
                    :id, :team_id, :team_name, :transaction_id, :customer_username,
                    :website_name, :website_id, :bank_name, :account_number, :real_name,
                    :amount, :balance_before, :balance_after, :status, :type,
                    NOW(), NOW(), :created_by
                )
                RETURNING {_COLUMNS}
            """),
            {
                "id": transaction_doc_id,
                "team_id": team_id,
                "team_name": team_name,
                "transaction_id": transaction_id,
                "customer_username": customer_username,
                "website_name": website_name,
                "website_id": website_id,
                "bank_name": bank_name,
                "account_number": account_number,
                "real_name": real_name,
                "amount": Decimal(str(amount)),
                "balance_before": Decimal(str(balance_before)),
                "balance_after": Decimal(str(balance_after)),
                "status": TransactionStatus.PENDING.value,
                "type": TransactionType.WITHDRAW.value,
                "created_by": created_by,
            },
        )
        return self._row_to_dict(result.fetchone())

    def _row_to_dict(self, row) -> dict[str, Any]:
        """Convert a database row to a dictionary."""
        return {
            "id": row[0],
            "team_id": row[1],
            "transaction_id": row[2],
            "customer_username": row[3],
            "website_name": row[4],
            "website_id": row[5],
            "bank_name": row[6],
            "account_number": row[7],
            "real_name": row[8],
            "amount": _to_float(row[9]),
            "balance_before": _to_float(row[10]),
            "balance_after": _to_float(row[11]),
            "status": row[12],
            "type": row[13],
            "note": row[14],
            "created_at": row[15],
            "updated_at": row[16],
            "created_by": row[17],
            "last_modified_by": row[18],
            "last_modified_by_email": row[19],
            "last_modified_at": row[20],
            "completed_at": row[21],
            "team_name": row[22],
        }
