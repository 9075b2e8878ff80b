"""SQL fragment helpers shared by the data-access models.

All fragments use PostgreSQL-style positional placeholders (`$1`, `$2`, ...);
`jobly.db` rewrites them for the driver at execution time.
"""
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from jobly.exceptions import BadRequestError


class SqlFragment(NamedTuple):
    set_cols: str
    values: List[Any]


# PUBLIC_INTERFACE
def sql_for_partial_update(data_to_update: Mapping[str, Any], js_to_sql: Mapping[str, str]) -> SqlFragment:
    """
    Build the SET clause of a single-row UPDATE from a sparse payload.

    Args:
      - data_to_update: field name -> new value, in the order the fields should
        be numbered. None is kept and binds SQL NULL.
      - js_to_sql: field name -> column name. Fields missing from it are used
        verbatim as column names.

    Returns:
      SqlFragment(set_cols, values), e.g.
        {"firstName": "Aliya", "age": 32}, {"firstName": "first_name"}
        -> ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Column names are interpolated into the SQL text, so js_to_sql and the keys
    of data_to_update must come from a fixed per-entity table and a schema
    checked payload, never from raw user input. Values are only ever bound.

    Raises BadRequestError("No data") when data_to_update is empty.
    """
    keys = list(data_to_update)
    if not keys:
        raise BadRequestError("No data")

    cols = [f'"{js_to_sql.get(key, key)}"=${idx}' for idx, key in enumerate(keys, start=1)]
    return SqlFragment(
        set_cols=", ".join(cols),
        values=[data_to_update[key] for key in keys],
    )


def _where(clauses: List[str]) -> str:
    return ("WHERE " + " AND ".join(clauses)) if clauses else ""


# PUBLIC_INTERFACE
def sql_for_company_filter(filters: Optional[Dict[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for listing companies.

    Supported filters: name_like (case-insensitive substring), min_employees,
    max_employees. None values are ignored.
    """
    filters = filters or {}
    name_like = filters.get("name_like")
    min_employees = filters.get("min_employees")
    max_employees = filters.get("max_employees")

    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("minEmployees cannot be greater than maxEmployees")

    clauses: List[str] = []
    values: List[Any] = []
    if name_like:
        values.append(f"%{name_like}%")
        clauses.append(f"name ILIKE ${len(values)}")
    if min_employees is not None:
        values.append(min_employees)
        clauses.append(f"num_employees >= ${len(values)}")
    if max_employees is not None:
        values.append(max_employees)
        clauses.append(f"num_employees <= ${len(values)}")
    return _where(clauses), values


# PUBLIC_INTERFACE
def sql_for_job_filter(filters: Optional[Dict[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for listing jobs.

    Supported filters: title (case-insensitive substring), min_salary,
    has_equity (only True narrows the result).
    """
    filters = filters or {}
    clauses: List[str] = []
    values: List[Any] = []
    if filters.get("title"):
        values.append(f"%{filters['title']}%")
        clauses.append(f"title ILIKE ${len(values)}")
    if filters.get("min_salary") is not None:
        values.append(filters["min_salary"])
        clauses.append(f"salary >= ${len(values)}")
    if filters.get("has_equity") is True:
        clauses.append("equity > 0")
    return _where(clauses), values
