"""Transaction and team domain models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class TransactionStatus(str, Enum):
    """Stored status values (Thai labels used by the back office)."""

    PENDING = "รอโอน"
    IN_PROGRESS = "กำลังโอน"
    SUCCESS = "สำเร็จ"
    FAILED = "ล้มเหลว"


class TransactionType(str, Enum):
    WITHDRAW = "withdraw"


# Statuses a team may move a transaction out of
UPDATABLE_STATUSES = (TransactionStatus.PENDING, TransactionStatus.IN_PROGRESS)

# Terminal statuses a team may set through the update endpoint
TERMINAL_STATUSES = (TransactionStatus.SUCCESS, TransactionStatus.FAILED)


class Team(BaseModel):
    """A team resolved from its API key."""

    id: str
    name: str | None = None


def coerce_timestamp(value: Any) -> datetime:
    """Coerce a stored timestamp into an aware datetime.

    Missing or unparseable values become the Unix epoch. Naive datetimes are
    taken as UTC.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return EPOCH
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    if isinstance(value, int | float) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return EPOCH
    return EPOCH


def claim_order_key(transaction: dict[str, Any]) -> tuple[datetime, str]:
    """Sort key for FIFO claiming: oldest ``created_at`` first, then ``id``."""
    return coerce_timestamp(transaction.get("created_at")), str(transaction.get("id", ""))
