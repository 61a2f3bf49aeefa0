# tests/test_request.py
import pytest

from wildbook.errors import QueryError
from wildbook.query import combine, match_all, sex, year_range
from wildbook.request import SearchRequest, is_wrapped, with_pagination, wrap


def test_wrap_query_node():
    assert wrap(match_all()) == {"query": {"match_all": {}}}


def test_wrap_raw_mapping():
    assert wrap({"match_all": {}}) == {"query": {"match_all": {}}}


def test_wrap_does_not_double_wrap():
    body = {"query": {"match_all": {}}}
    assert wrap(body) is body
    assert "query" not in wrap(body)["query"]


@pytest.mark.parametrize(
    "query",
    [match_all(), sex("female"), combine([sex("female"), year_range(2020, 2023)]), {"term": {"a": 1}}],
)
def test_wrap_is_idempotent(query):
    assert wrap(wrap(query)) == wrap(query)


def test_is_wrapped_is_structural():
    assert is_wrapped({"query": {"term": {"sex": "female"}}})
    assert not is_wrapped(sex("female"))
    assert not is_wrapped({"term": {"query": "x"}})


def test_wrap_rejects_other_types():
    with pytest.raises(QueryError):
        wrap([{"match_all": {}}])  # type: ignore[arg-type]


def test_with_pagination_defaults():
    request = with_pagination(sex("female"))
    assert request == SearchRequest(
        body={"query": {"term": {"sex": "female"}}},
        params={"from": 0, "size": 10},
    )


def test_with_pagination_sort():
    request = with_pagination(match_all(), from_=20, size=5, sort="year", sort_order="desc")
    assert request.params == {"from": 20, "size": 5, "sort": "year", "sortOrder": "desc"}
    assert "from" not in request.body
    assert "size" not in request.body


def test_with_pagination_keeps_prewrapped_body():
    body = {"query": {"match_all": {}}}
    assert with_pagination(body).body is body


@pytest.mark.parametrize(
    "kwargs",
    [{"from_": -1}, {"size": 0}, {"size": -3}, {"sort_order": "up"}],
)
def test_with_pagination_validates(kwargs):
    with pytest.raises(QueryError):
        with_pagination(match_all(), **kwargs)
