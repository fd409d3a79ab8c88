"""Website repository.

Table: websites

Balance changes are single-statement updates so concurrent debits and
refunds never overwrite each other.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text

from balance_api.persistence.base import BaseRepository

_COLUMNS = "id, team_id, name, url, api_key, balance, created_at, updated_at"


class WebsiteRepository(BaseRepository):
    """Repository for websites data access."""

    async def get_by_id(self, website_id: str) -> dict[str, Any] | None:
        """Get website by ID."""
        result = await self._execute(
            text(f"SELECT {_COLUMNS} FROM websites WHERE id = :id"),
            {"id": website_id},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def get_by_name(self, team_id: str, name: str) -> dict[str, Any] | None:
        """Get a team's website by display name."""
        result = await self._execute(
            text(f"""
                SELECT {_COLUMNS} FROM websites
                WHERE team_id = :team_id AND name = :name
                ORDER BY id
                LIMIT 1
            """),
            {"team_id": team_id, "name": name},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    async def list_by_team(self, team_id: str) -> list[dict[str, Any]]:
        """List a team's websites ordered by name."""
        result = await self._execute(
            text(f"SELECT {_COLUMNS} FROM websites WHERE team_id = :team_id ORDER BY name, id"),
            {"team_id": team_id},
        )
        return [self._row_to_dict(row) for row in result.fetchall()]

    async def debit(self, website_id: str, amount: float) -> tuple[float, float] | None:
        """Subtract ``amount`` if the balance covers it.

        Returns ``(balance_before, balance_after)`` or None when the balance
        is insufficient.
        """
        result = await self._execute(
            text("""
                UPDATE websites
                SET balance = balance - :amount,
                    updated_at = NOW()
                WHERE id = :id AND balance >= :amount
                RETURNING balance + :amount, balance
            """),
            {"id": website_id, "amount": Decimal(str(amount))},
        )
        row = result.fetchone()
        if row is None:
            return None
        return float(row[0]), float(row[1])

    async def credit(self, website_id: str, amount: float) -> dict[str, Any] | None:
        """Add ``amount`` back to a website balance and return the website."""
        result = await self._execute(
            text(f"""
                UPDATE websites
                SET balance = balance + :amount,
                    updated_at = NOW()
                WHERE id = :id
                RETURNING {_COLUMNS}
            """),
            {"id": website_id, "amount": Decimal(str(amount))},
        )
        row = result.fetchone()
        if row is None:
            return None
        return self._row_to_dict(row)

    def _row_to_dict(self, row) -> dict[str, Any]:
        """Convert a database row to a dictionary."""
        return {
            "id": row[0],
            "team_id": row[1],
            "name": row[2],
            "url": row[3],
            "api_key": row[4],
            "balance": float(row[5]) if row[5] is not None else 0.0,
            "created_at": row[6],
            "updated_at": row[7],
        }
