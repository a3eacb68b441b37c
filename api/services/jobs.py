"""Job service functions.

Every function receives the ``QueryExecutor`` for the current request.
Rows are returned as dicts shaped like the external job record:
``id, title, salary, equity, companyHandle``.
"""

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
import logging

from sqlalchemy.exc import IntegrityError

from core.exceptions import Duplicate, InvalidRequest, NoMatch, NotFound
from database.executor import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    QueryExecutor,
    sqlstate,
)
from database.sql import contains_pattern, sql_for_partial_update

logger = logging.getLogger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# Logical field name -> physical column, where they differ
JOB_COLUMN_TRANSLATION = {"companyHandle": "company_handle"}

JOB_UPDATABLE_FIELDS = ("title", "salary", "equity")

# (title given, min_salary given, has_equity truthy) -> WHERE clause
FILTER_PREDICATES: Dict[tuple[bool, bool, bool], str] = {
    (False, False, False): "",
    (True, False, False): "WHERE title ILIKE $1",
    (True, True, False): "WHERE title ILIKE $1 AND salary > $2",
    (True, False, True): "WHERE title ILIKE $1 AND equity > 0",
    (False, True, False): "WHERE salary > $1",
    (False, False, True): "WHERE equity > 0",
    (False, True, True): "WHERE salary > $1 AND equity > 0",
    (True, True, True): "WHERE title ILIKE $1 AND salary > $2 AND equity > 0",
}


async def create_job(
    executor: QueryExecutor,
    *,
    title: str,
    salary: Optional[int] = None,
    equity: Optional[Decimal] = None,
    company_handle: str,
) -> Dict[str, Any]:
    """Create a job and return the new record.

    The duplicate check and the insert are separate statements; the
    ``uq_jobs_title_company`` constraint catches a job inserted in between.
    """
    duplicate_check = await executor.query(
        "SELECT id FROM jobs WHERE title = $1 AND company_handle = $2",
        [title, company_handle],
    )
    if duplicate_check:
        raise Duplicate(f"Duplicate job exists: {title} at {company_handle}")

    try:
        rows = await executor.query(
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
            [title, salary, equity, company_handle],
        )
    except IntegrityError as e:
        code = sqlstate(e)
        if code == UNIQUE_VIOLATION:
            raise Duplicate(f"Duplicate job exists: {title} at {company_handle}") from e
        if code == FOREIGN_KEY_VIOLATION:
            raise InvalidRequest(f"Unknown company: {company_handle}") from e
        raise

    job = rows[0]
    logger.info(f"Created job {job['id']}: {title} at {company_handle}")
    return job


async def find_all(
    executor: QueryExecutor,
    title: Optional[str] = None,
    min_salary: Optional[int] = None,
    has_equity: Optional[bool] = None,
    *,
    raise_on_empty: bool = True,
) -> List[Dict[str, Any]]:
    """List jobs, optionally filtered.

    Args:
        title: Case-insensitive substring of the title
        min_salary: Only jobs paying strictly more than this
        has_equity: When truthy, only jobs offering equity above zero
        raise_on_empty: Raise ``NoMatch`` when filters match nothing

    Raises:
        NoMatch: If a filter was applied, nothing matched and
            ``raise_on_empty`` is set
    """
    key = (title is not None, min_salary is not None, bool(has_equity))
    values: List[Any] = []
    if title is not None:
        values.append(contains_pattern(title))
    if min_salary is not None:
        values.append(min_salary)

    sql = f"SELECT {JOB_COLUMNS} FROM jobs {FILTER_PREDICATES[key]}".rstrip()
    jobs = await executor.query(sql, values)

    if not jobs and any(key) and raise_on_empty:
        raise NoMatch("No jobs fit those parameters")
    return jobs


async def get_job(executor: QueryExecutor, job_id: int) -> Dict[str, Any]:
    """Get job details."""
    rows = await executor.query(f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1", [job_id])
    if not rows:
        raise NotFound(f"No job with id {job_id}")
    return rows[0]


async def update_job(
    executor: QueryExecutor, job_id: int, data: Mapping[str, Any]
) -> Dict[str, Any]:
    """Apply a partial update and return the updated record.

    Only keys present in ``data`` change. ``job_id`` binds the placeholder
    after the last ``SET`` value.
    """
    set_cols, values = sql_for_partial_update(
        data, JOB_COLUMN_TRANSLATION, allowed=JOB_UPDATABLE_FIELDS
    )
    id_index = f"${len(values) + 1}"
    sql = f"UPDATE jobs SET {set_cols} WHERE id = {id_index} RETURNING {JOB_COLUMNS}"
    logger.debug(f"Job update statement: {sql}")

    rows = await executor.query(sql, [*values, job_id])
    if not rows:
        raise NotFound(f"No job with id {job_id}")

    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return rows[0]


async def delete_job(executor: QueryExecutor, job_id: int) -> Dict[str, Any]:
    """Delete a job and return the deleted record."""
    rows = await executor.query(
        f"DELETE FROM jobs WHERE id = $1 RETURNING {JOB_COLUMNS}", [job_id]
    )
    if not rows:
        raise NotFound(f"No job with id {job_id}")

    logger.info(f"Deleted job {job_id}")
    return rows[0]
