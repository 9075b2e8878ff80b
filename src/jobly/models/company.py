"""Data access for companies."""
import logging
from typing import Any, Dict, List, Optional

from psycopg2 import IntegrityError
from psycopg2.errors import UniqueViolation

from jobly import db
from jobly.exceptions import BadRequestError, NotFoundError
from jobly.sql import sql_for_company_filter, sql_for_partial_update

logger = logging.getLogger(__name__)

_JS_TO_SQL = {"numEmployees": "num_employees", "logoUrl": "logo_url"}
_COLUMNS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'


# PUBLIC_INTERFACE
def create(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a company from {handle, name, description, numEmployees, logoUrl}.

    Raises BadRequestError if the handle or the name is already taken.
    """
    duplicate = db.fetch_one("SELECT handle FROM companies WHERE handle = $1", [data["handle"]])
    if duplicate:
        raise BadRequestError(f"Duplicate company: {data['handle']}")

    try:
        company = db.execute_returning(
            f"""
            INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_COLUMNS}
            """,
            [
                data["handle"],
                data["name"],
                data["description"],
                data.get("numEmployees"),
                data.get("logoUrl"),
            ],
        )
    except UniqueViolation as e:
        raise BadRequestError(f"Duplicate company: {data['handle']} ({data['name']})") from e
    except IntegrityError as e:
        logger.warning("Rejected company %s: %s", data["handle"], e)
        raise BadRequestError(f"Invalid company: {data['handle']}") from e
    logger.info("Created company %s", data["handle"])
    return company


# PUBLIC_INTERFACE
def find_all(filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """List companies ordered by name, optionally filtered by name_like/min_employees/max_employees."""
    where_sql, values = sql_for_company_filter(filters)
    return db.fetch_all(f"SELECT {_COLUMNS} FROM companies {where_sql} ORDER BY name", values)


# PUBLIC_INTERFACE
def get(handle: str) -> Dict[str, Any]:
    """Return a company with its jobs; raises NotFoundError."""
    company = db.fetch_one(f"SELECT {_COLUMNS} FROM companies WHERE handle = $1", [handle])
    if not company:
        raise NotFoundError(f"No company: {handle}")

    company["jobs"] = db.fetch_all(
        "SELECT id, title, salary, equity FROM jobs WHERE company_handle = $1 ORDER BY id",
        [handle],
    )
    return company


# PUBLIC_INTERFACE
def update(handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company.

    data may hold any of {name, description, numEmployees, logoUrl}; the
    handle itself cannot change. Raises BadRequestError on empty data and
    NotFoundError if there is no such company. A name already used by
    another company is a BadRequestError.
    """
    set_cols, values = sql_for_partial_update(data, _JS_TO_SQL)
    try:
        company = db.execute_returning(
            f"UPDATE companies SET {set_cols} WHERE handle = ${len(values) + 1} RETURNING {_COLUMNS}",
            [*values, handle],
        )
    except UniqueViolation as e:
        raise BadRequestError(f"Duplicate company name: {data.get('name')}") from e
    except IntegrityError as e:
        logger.warning("Rejected update of company %s: %s", handle, e)
        raise BadRequestError(f"Invalid company: {handle}") from e
    if not company:
        raise NotFoundError(f"No company: {handle}")
    return company


# PUBLIC_INTERFACE
def remove(handle: str) -> None:
    """Delete a company (its jobs cascade); raises NotFoundError."""
    deleted = db.execute_returning("DELETE FROM companies WHERE handle = $1 RETURNING handle", [handle])
    if not deleted:
        raise NotFoundError(f"No company: {handle}")
    logger.info("Deleted company %s", handle)
