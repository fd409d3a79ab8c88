"""Base classes for repository layer."""

import asyncio
import logging
from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import TextClause

from balance_api.core.errors import (
    STORE_PERMISSION_NOTE,
    ConflictError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 10.0


class BaseRepository:
    """Shared session handling for repositories.

    Every round-trip runs under a deadline; driver errors and deadline expiry
    surface as ``UpstreamUnavailableError``.
    """

    def __init__(self, session: AsyncSession, timeout: float = DEFAULT_COMMAND_TIMEOUT):
        self.session = session
        self.timeout = timeout

    async def _execute(self, statement: TextClause, params: dict[str, Any] | None = None) -> Result:
        try:
            async with asyncio.timeout(self.timeout):
                return await self.session.execute(statement, params or {})
        except TimeoutError as exc:
            logger.error("Store call timed out", extra={"timeout": self.timeout})
            raise UpstreamUnavailableError(
                details={
                    "details": f"Store call exceeded {self.timeout}s deadline",
                    "note": STORE_PERMISSION_NOTE,
                }
            ) from exc
        except IntegrityError as exc:
            logger.info("Store rejected write", extra={"error": str(exc.orig)})
            raise ConflictError(
                "Write conflicts with an existing record", details={"details": str(exc.orig)}
            ) from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Store call failed", extra={"error": str(exc)})
            raise UpstreamUnavailableError(
                details={"details": str(exc), "note": STORE_PERMISSION_NOTE}
            ) from exc

    async def commit(self) -> None:
        """Commit the session's transaction under the same deadline."""
        try:
            async with asyncio.timeout(self.timeout):
                await self.session.commit()
        except TimeoutError as exc:
            raise UpstreamUnavailableError(
                details={
                    "details": f"Commit exceeded {self.timeout}s deadline",
                    "note": STORE_PERMISSION_NOTE,
                }
            ) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise UpstreamUnavailableError(
                details={"details": str(exc), "note": STORE_PERMISSION_NOTE}
            ) from exc
