# wildbook/query/combinators.py
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from wildbook.errors import QueryError

Scalar = str | int | float | bool


class BoolOperator(StrEnum):
    """Clause groups of a bool node."""

    MUST = "must"  # AND
    SHOULD = "should"  # OR
    MUST_NOT = "must_not"  # NOT
    FILTER = "filter"  # AND, no scoring


@dataclass(frozen=True)
class Query:
    """Base node of a search query tree."""

    def __and__(self, other: "Query") -> "Query":
        if not isinstance(other, Query):
            return NotImplemented
        return combine([self, other], BoolOperator.MUST)

    def __or__(self, other: "Query") -> "Query":
        if not isinstance(other, Query):
            return NotImplemented
        return combine([self, other], BoolOperator.SHOULD)

    def __invert__(self) -> "Bool":
        return Bool(must_not=(self,))


@dataclass(frozen=True)
class MatchAll(Query):
    """Matches every document."""


@dataclass(frozen=True)
class Term(Query):
    """Exact value match: field == value."""

    field: str
    value: Scalar


@dataclass(frozen=True)
class Terms(Query):
    """Field equals any of the listed values."""

    field: str
    values: tuple[Scalar, ...]


@dataclass(frozen=True)
class Range(Query):
    """Inclusive range. A bound left as None is omitted from the request."""

    field: str
    gte: Scalar | None = None
    lte: Scalar | None = None


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float


@dataclass(frozen=True)
class GeoBoundingBox(Query):
    field: str
    top_left: GeoPoint
    bottom_right: GeoPoint


@dataclass(frozen=True)
class Match(Query):
    """Full-text match on an analyzed field."""

    field: str
    text: str


@dataclass(frozen=True)
class Fuzzy(Query):
    field: str
    value: str
    fuzziness: str = "AUTO"


@dataclass(frozen=True)
class Exists(Query):
    """Field is present and non-null."""

    field: str


@dataclass(frozen=True)
class Wildcard(Query):
    field: str
    value: str


@dataclass(frozen=True)
class Bool(Query):
    """Boolean group of child queries.

    Clause tuples keep insertion order. Empty groups are left out when the
    node is serialized.
    """

    must: tuple[Query, ...] = ()
    should: tuple[Query, ...] = ()
    must_not: tuple[Query, ...] = ()
    filter: tuple[Query, ...] = ()
    minimum_should_match: int | None = None


def _coerce_operator(operator: BoolOperator | str) -> BoolOperator:
    try:
        return BoolOperator(operator)
    except ValueError:
        valid = ", ".join(op.value for op in BoolOperator)
        raise QueryError(f"Unknown operator {operator!r}; expected one of: {valid}") from None


def combine(
    queries: Iterable[Query],
    operator: BoolOperator | str = BoolOperator.MUST,
) -> Query:
    """Fold queries into one under a boolean operator.

    No queries gives MatchAll, a single query is returned as-is whatever the
    operator, and two or more are grouped under one bool node in call order.
    Nested bool nodes are never merged.
    """
    if isinstance(queries, Query):
        raise QueryError("combine() expects a sequence of queries, not a single Query")
    op = _coerce_operator(operator)
    items = tuple(queries)
    for position, item in enumerate(items):
        if not isinstance(item, Query):
            raise QueryError(
                f"combine() expects Query values, got {type(item).__name__} at position {position}"
            )

    if not items:
        return MatchAll()
    if len(items) == 1:
        return items[0]
    return Bool(**{op.value: items})


def and_(*queries: Query) -> Query:
    return combine(queries, BoolOperator.MUST)


def or_(*queries: Query) -> Query:
    return combine(queries, BoolOperator.SHOULD)


def not_(*queries: Query) -> Query:
    """Exclude every given query. A single query is wrapped in must_not."""
    if len(queries) == 1 and isinstance(queries[0], Query):
        return ~queries[0]
    return combine(queries, BoolOperator.MUST_NOT)
