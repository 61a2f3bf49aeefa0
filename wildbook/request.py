# wildbook/request.py
"""Assembly of search request bodies and query-string parameters."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from wildbook.errors import QueryError
from wildbook.query.combinators import Query
from wildbook.query.serialize import to_dict

logger = logging.getLogger(__name__)

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class SearchRequest:
    """JSON body plus query-string parameters for one search call."""

    body: Mapping[str, Any]
    params: dict[str, str | int] = field(default_factory=dict)


def is_wrapped(query: Query | Mapping[str, Any]) -> bool:
    """True when ``query`` is a mapping that already has a top-level ``query`` key.

    The check is purely structural: a raw mapping whose only field happens to
    be named ``query`` counts as wrapped.
    """
    return isinstance(query, Mapping) and "query" in query


def wrap(query: Query | Mapping[str, Any]) -> Mapping[str, Any]:
    """Put a query under the ``query`` key of a request body.

    Already wrapped bodies are returned unchanged, so wrapping is idempotent.
    """
    if is_wrapped(query):
        return query  # type: ignore[return-value]
    if isinstance(query, Query):
        return {"query": to_dict(query)}
    if isinstance(query, Mapping):
        return {"query": dict(query)}
    raise QueryError(f"Cannot wrap {type(query).__name__}; expected a Query or a mapping")


def with_pagination(
    envelope: Query | Mapping[str, Any],
    from_: int = 0,
    size: int = 10,
    sort: str | None = None,
    sort_order: SortOrder | None = None,
) -> SearchRequest:
    """Attach pagination and sorting to a request.

    The parameters travel in the query string, not in the JSON body.
    ``sort`` and ``sortOrder`` are only sent when given.
    """
    if from_ < 0:
        raise QueryError(f"from must be >= 0, got {from_}")
    if size <= 0:
        raise QueryError(f"size must be > 0, got {size}")
    if sort_order is not None and sort_order not in ("asc", "desc"):
        raise QueryError(f"sort_order must be 'asc' or 'desc', got {sort_order!r}")

    params: dict[str, str | int] = {"from": from_, "size": size}
    if sort is not None:
        params["sort"] = sort
    if sort_order is not None:
        params["sortOrder"] = sort_order

    body = wrap(envelope)
    logger.debug("Assembled search request: body=%s params=%s", body, params)
    return SearchRequest(body=body, params=params)
