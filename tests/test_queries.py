from datetime import datetime

import pytest

from user_lookup.errors import QueryValidationError
from user_lookup.queries import MISSING_FILTER_MESSAGE, build_info_query, build_search_query
from user_lookup.schemas import InfoQuery, SearchQuery


def test_info_query_requires_a_filter() -> None:
    with pytest.raises(QueryValidationError) as excinfo:
        build_info_query(InfoQuery(page=3, limit=5))
    assert str(excinfo.value) == MISSING_FILTER_MESSAGE


def test_uid_only_lookup_is_unordered_with_default_paging() -> None:
    sql, args = build_info_query(InfoQuery(uid="U1"))

    assert sql == "SELECT uid, name, birthday, sex FROM users WHERE uid = $1 LIMIT $2 OFFSET $3"
    assert args == ["U1", 10, 0]
    assert "ORDER BY" not in sql


def test_uid_is_bound_not_interpolated() -> None:
    sql, args = build_info_query(InfoQuery(uid="x' OR '1'='1"))

    assert "OR" not in sql
    assert args[0] == "x' OR '1'='1"


def test_lower_date_orders_by_name() -> None:
    sql, args = build_info_query(InfoQuery(lower_date="1990-01-01"))

    assert "WHERE birthday >= $1" in sql
    assert "ORDER BY name ASC" in sql
    assert args == [datetime(1990, 1, 1), 10, 0]


def test_all_filters_are_joined_in_order() -> None:
    sql, args = build_info_query(
        InfoQuery(uid="U1", upper_date="2000-12-31T23:59:59", lower_date="1980-01-01", page=2, limit=5)
    )

    assert "WHERE uid = $1 AND birthday <= $2 AND birthday >= $3 ORDER BY name ASC LIMIT $4 OFFSET $5" in sql
    assert args == ["U1", datetime(2000, 12, 31, 23, 59, 59), datetime(1980, 1, 1), 5, 5]


def test_aliases_are_accepted() -> None:
    query = InfoQuery.model_validate({"upperDate": "1999-01-01", "lowerDate": "1980-01-01"})
    assert query.upper_date == "1999-01-01"
    assert query.lower_date == "1980-01-01"


@pytest.mark.parametrize(
    "page,limit,offset",
    [(1, 5, 0), (2, 5, 5), (4, 10, 30)],
)
def test_pagination_offset(page: int, limit: int, offset: int) -> None:
    _, args = build_info_query(InfoQuery(uid="U1", page=page, limit=limit))
    assert args[-2:] == [limit, offset]


def test_invalid_date_bound_is_rejected() -> None:
    with pytest.raises(QueryValidationError, match="upperDate"):
        build_info_query(InfoQuery(upper_date="yesterday"))


def test_aware_date_bound_is_normalised_to_utc() -> None:
    _, args = build_info_query(InfoQuery(upper_date="2000-01-01T02:00:00+02:00"))
    assert args[0] == datetime(2000, 1, 1, 0, 0, 0)


def test_search_wraps_name_in_wildcards() -> None:
    sql, args = build_search_query(SearchQuery(name="ann"))

    assert "WHERE name ILIKE $1" in sql
    assert sql.endswith("ORDER BY name ASC")
    assert "LIMIT" not in sql
    assert args == ["%ann%"]
