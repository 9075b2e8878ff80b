"""Data access for users and their job applications."""
import logging
from typing import Any, Dict, List

from psycopg2 import IntegrityError
from psycopg2.errors import UniqueViolation

from jobly import db
from jobly.auth_utils import hash_password, verify_password
from jobly.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from jobly.sql import sql_for_partial_update

logger = logging.getLogger(__name__)

_JS_TO_SQL = {"firstName": "first_name", "lastName": "last_name"}
_COLUMNS = 'username, first_name AS "firstName", last_name AS "lastName", email, is_admin AS "isAdmin"'


# PUBLIC_INTERFACE
def authenticate(username: str, password: str) -> Dict[str, Any]:
    """Return the user for a valid username/password pair; raises UnauthorizedError."""
    user = db.fetch_one(f"SELECT {_COLUMNS}, password FROM users WHERE username = $1", [username])
    if user and verify_password(password, user.pop("password")):
        return user
    raise UnauthorizedError("Invalid username/password")


# PUBLIC_INTERFACE
def register(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a user from {username, password, firstName, lastName, email, isAdmin}.

    The password is stored hashed. Raises BadRequestError on a duplicate username.
    """
    duplicate = db.fetch_one("SELECT username FROM users WHERE username = $1", [data["username"]])
    if duplicate:
        raise BadRequestError(f"Duplicate username: {data['username']}")

    try:
        user = db.execute_returning(
            f"""
            INSERT INTO users (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {_COLUMNS}
            """,
            [
                data["username"],
                hash_password(data["password"]),
                data["firstName"],
                data["lastName"],
                data["email"],
                bool(data.get("isAdmin", False)),
            ],
        )
    except UniqueViolation as e:
        raise BadRequestError(f"Duplicate username: {data['username']}") from e
    except IntegrityError as e:
        logger.warning("Rejected user %s: %s", data["username"], e)
        raise BadRequestError(f"Invalid user: {data['username']}") from e
    logger.info("Registered user %s", data["username"])
    return user


# PUBLIC_INTERFACE
def find_all() -> List[Dict[str, Any]]:
    return db.fetch_all(f"SELECT {_COLUMNS} FROM users ORDER BY username")


# PUBLIC_INTERFACE
def get(username: str) -> Dict[str, Any]:
    """Return a user with the ids of the jobs they applied to; raises NotFoundError."""
    user = db.fetch_one(f"SELECT {_COLUMNS} FROM users WHERE username = $1", [username])
    if not user:
        raise NotFoundError(f"No user: {username}")

    applications = db.fetch_all(
        "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
        [username],
    )
    user["jobs"] = [a["job_id"] for a in applications]
    return user


# PUBLIC_INTERFACE
def update(username: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update {firstName, lastName, password, email}.

    A new password is hashed before it is stored; data itself is not modified.
    """
    if data.get("password"):
        data = {**data, "password": hash_password(data["password"])}

    set_cols, values = sql_for_partial_update(data, _JS_TO_SQL)
    try:
        user = db.execute_returning(
            f"UPDATE users SET {set_cols} WHERE username = ${len(values) + 1} RETURNING {_COLUMNS}",
            [*values, username],
        )
    except IntegrityError as e:
        logger.warning("Rejected update of user %s: %s", username, e)
        raise BadRequestError(f"Invalid user: {username}") from e
    if not user:
        raise NotFoundError(f"No user: {username}")
    return user


# PUBLIC_INTERFACE
def remove(username: str) -> None:
    deleted = db.execute_returning("DELETE FROM users WHERE username = $1 RETURNING username", [username])
    if not deleted:
        raise NotFoundError(f"No user: {username}")
    logger.info("Deleted user %s", username)


# PUBLIC_INTERFACE
def apply_to_job(username: str, job_id: int) -> None:
    """Record an application; raises NotFoundError for an unknown user or job."""
    if not db.fetch_one("SELECT id FROM jobs WHERE id = $1", [job_id]):
        raise NotFoundError(f"No job: {job_id}")
    if not db.fetch_one("SELECT username FROM users WHERE username = $1", [username]):
        raise NotFoundError(f"No username: {username}")

    try:
        db.execute("INSERT INTO applications (job_id, username) VALUES ($1, $2)", [job_id, username])
    except UniqueViolation as e:
        raise BadRequestError(f"Already applied to job {job_id}") from e
    except IntegrityError as e:
        logger.warning("Rejected application of %s to job %s: %s", username, job_id, e)
        raise BadRequestError(f"Cannot apply to job {job_id}") from e
