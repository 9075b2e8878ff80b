"""Data access for jobs."""
import logging
from typing import Any, Dict, List, Optional

from psycopg2 import IntegrityError
from psycopg2.errors import ForeignKeyViolation

from jobly import db
from jobly.exceptions import BadRequestError, NotFoundError
from jobly.sql import sql_for_job_filter, sql_for_partial_update

logger = logging.getLogger(__name__)

_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'


# PUBLIC_INTERFACE
def create(data: Dict[str, Any]) -> Dict[str, Any]:
    """Create a job from {title, salary, equity, companyHandle}."""
    try:
        job = db.execute_returning(
            f"""
            INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {_COLUMNS}
            """,
            [data["title"], data.get("salary"), data.get("equity"), data["companyHandle"]],
        )
    except ForeignKeyViolation as e:
        raise BadRequestError(f"No company: {data['companyHandle']}") from e
    except IntegrityError as e:
        logger.warning("Rejected job for %s: %s", data["companyHandle"], e)
        raise BadRequestError(f"Invalid job for company: {data['companyHandle']}") from e
    return job


# PUBLIC_INTERFACE
def find_all(filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """List jobs ordered by title, optionally filtered by title/min_salary/has_equity."""
    where_sql, values = sql_for_job_filter(filters)
    return db.fetch_all(f"SELECT {_COLUMNS} FROM jobs {where_sql} ORDER BY title, id", values)


# PUBLIC_INTERFACE
def get(job_id: int) -> Dict[str, Any]:
    job = db.fetch_one(f"SELECT {_COLUMNS} FROM jobs WHERE id = $1", [job_id])
    if not job:
        raise NotFoundError(f"No job: {job_id}")
    return job


# PUBLIC_INTERFACE
def update(job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job's title, salary and/or equity.

    None values are written as NULL. The id and company cannot change.
    """
    set_cols, values = sql_for_partial_update(data, {})
    job = db.execute_returning(
        f"UPDATE jobs SET {set_cols} WHERE id = ${len(values) + 1} RETURNING {_COLUMNS}",
        [*values, job_id],
    )
    if not job:
        raise NotFoundError(f"No job: {job_id}")
    return job


# PUBLIC_INTERFACE
def remove(job_id: int) -> None:
    deleted = db.execute_returning("DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id])
    if not deleted:
        raise NotFoundError(f"No job: {job_id}")
    logger.info("Deleted job %s", job_id)
