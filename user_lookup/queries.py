"""SQL construction for the lookup and search endpoints.

Builders return the query text with positional ``$n`` placeholders together
with the argument list, ready for ``asyncpg.Pool.fetch(query, *args)``.
No caller-supplied value is ever formatted into the query text.
"""

from datetime import datetime, timezone
from typing import Any

from user_lookup.errors import QueryValidationError
from user_lookup.schemas import InfoQuery, SearchQuery

USER_COLUMNS = "uid, name, birthday, sex"
MISSING_FILTER_MESSAGE = "Please provide at least one query parameter"


def _parse_date_bound(value: str, param: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise QueryValidationError(
            f"Invalid {param}: expected an ISO-8601 date, got {value!r}"
        ) from None
    # birthday is a timestamp without time zone
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def build_info_query(query: InfoQuery) -> tuple[str, list[Any]]:
    """Build the filtered, paginated user lookup.

    Raises:
        QueryValidationError: no filter was given or a date bound is invalid.
    """
    conditions: list[str] = []
    args: list[Any] = []

    def bind(value: Any) -> str:
        args.append(value)
        return f"${len(args)}"

    if query.uid is not None:
        conditions.append(f"uid = {bind(query.uid)}")

    if query.upper_date is not None:
        upper = _parse_date_bound(query.upper_date, "upperDate")
        conditions.append(f"birthday <= {bind(upper)}")

    if query.lower_date is not None:
        lower = _parse_date_bound(query.lower_date, "lowerDate")
        conditions.append(f"birthday >= {bind(lower)}")

    if not conditions:
        raise QueryValidationError(MISSING_FILTER_MESSAGE)

    sql = f"SELECT {USER_COLUMNS} FROM users WHERE {' AND '.join(conditions)}"

    # Date ranges come back sorted by name
    if query.upper_date is not None or query.lower_date is not None:
        sql += " ORDER BY name ASC"

    sql += f" LIMIT {bind(query.limit)} OFFSET {bind(query.offset)}"
    return sql, args


def build_search_query(query: SearchQuery) -> tuple[str, list[Any]]:
    """Case-insensitive substring match on name, ordered by name."""
    sql = (
        f"SELECT {USER_COLUMNS} FROM users "
        "WHERE name ILIKE $1 "
        "ORDER BY name ASC"
    )
    return sql, [f"%{query.name}%"]
