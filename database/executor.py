"""
Positional-parameter query executor.

Runs SQL text written with numbered ``$n`` placeholders against an
``AsyncSession``. Each call is one statement followed by a commit.
"""

import logging
import re
from typing import Any, Optional, Sequence

from sqlalchemy import TextClause, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$(\d+)")

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def bind_positional(sql: str, values: Sequence[Any]) -> tuple[TextClause, dict[str, Any]]:
    """
    Rewrite ``$n`` placeholders into bound parameters.

    Args:
        sql: SQL text using ``$1``, ``$2``, ... placeholders
        values: Values in placeholder order; ``values[0]`` binds ``$1``

    Returns:
        Tuple of (text clause, parameter dict)

    Raises:
        ValueError: If a placeholder has no corresponding value
    """
    params: dict[str, Any] = {}

    def _replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index < 1 or index > len(values):
            raise ValueError(
                f"Placeholder ${index} has no value ({len(values)} supplied)"
            )
        name = f"p{index}"
        params[name] = values[index - 1]
        return f":{name}"

    return text(PLACEHOLDER.sub(_replace, sql)), params


def sqlstate(exc: DBAPIError) -> Optional[str]:
    """Return the SQLSTATE code carried by a wrapped driver error, if any."""
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


class QueryExecutor:
    """Executes parameterized SQL text and returns rows as dictionaries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def query(self, sql: str, values: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """
        Execute one statement and commit.

        Args:
            sql: SQL text with ``$n`` placeholders
            values: Ordered values for the placeholders

        Returns:
            Rows keyed by column label; empty for statements without rows
        """
        statement, params = bind_positional(sql, values)
        try:
            result = await self.session.execute(statement, params)
            rows = [dict(row) for row in result.mappings().all()] if result.returns_rows else []
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        return rows
