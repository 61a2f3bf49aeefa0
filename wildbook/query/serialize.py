# wildbook/query/serialize.py
"""Conversion between query trees and their OpenSearch JSON form."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from wildbook.errors import QueryError
from wildbook.query.combinators import (
    Bool,
    BoolOperator,
    Exists,
    Fuzzy,
    GeoBoundingBox,
    GeoPoint,
    Match,
    MatchAll,
    Query,
    Range,
    Term,
    Terms,
    Wildcard,
)

logger = logging.getLogger(__name__)


def to_dict(query: Query) -> dict[str, Any]:
    """Convert a query tree into JSON-compatible dicts and lists."""
    match query:
        case MatchAll():
            return {"match_all": {}}
        case Term(field=f, value=v):
            return {"term": {f: v}}
        case Terms(field=f, values=vs):
            return {"terms": {f: list(vs)}}
        case Range(field=f, gte=gte, lte=lte):
            bounds: dict[str, Any] = {}
            if gte is not None:
                bounds["gte"] = gte
            if lte is not None:
                bounds["lte"] = lte
            return {"range": {f: bounds}}
        case GeoBoundingBox(field=f, top_left=tl, bottom_right=br):
            return {
                "geo_bounding_box": {
                    f: {
                        "top_left": {"lat": tl.lat, "lon": tl.lon},
                        "bottom_right": {"lat": br.lat, "lon": br.lon},
                    }
                }
            }
        case Match(field=f, text=t):
            return {"match": {f: t}}
        case Fuzzy(field=f, value=v, fuzziness=fz):
            return {"fuzzy": {f: {"value": v, "fuzziness": fz}}}
        case Exists(field=f):
            return {"exists": {"field": f}}
        case Wildcard(field=f, value=v):
            return {"wildcard": {f: {"value": v}}}
        case Bool():
            body: dict[str, Any] = {}
            for op in BoolOperator:
                clauses = getattr(query, op.value)
                if clauses:
                    body[op.value] = [to_dict(c) for c in clauses]
            if query.minimum_should_match is not None:
                body["minimum_should_match"] = query.minimum_should_match
            return {"bool": body}
        case _:
            raise QueryError(f"Unsupported query node: {query!r}")


def _object(payload: Any, operator: str, allowed: frozenset[str]) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise QueryError(f"'{operator}' expects an object, got {type(payload).__name__}")
    unknown = set(payload) - allowed
    if unknown:
        raise QueryError(f"'{operator}' does not support: {', '.join(sorted(unknown))}")
    return payload


def _single_entry(payload: Any, operator: str) -> tuple[str, Any]:
    if not isinstance(payload, Mapping) or len(payload) != 1:
        raise QueryError(f"'{operator}' expects an object with exactly one field")
    return next(iter(payload.items()))


def _point(data: Any) -> GeoPoint:
    if not isinstance(data, Mapping) or set(data) != {"lat", "lon"}:
        raise QueryError("geo point must be an object with 'lat' and 'lon'")
    return GeoPoint(lat=data["lat"], lon=data["lon"])


def _clauses(payload: Mapping[str, Any], key: str) -> tuple[Query, ...]:
    children = payload.get(key, [])
    if not isinstance(children, list):
        raise QueryError(f"'bool.{key}' expects a list of queries")
    return tuple(from_dict(c) for c in children)


_RANGE_KEYS = frozenset({"gte", "lte"})
_GEO_KEYS = frozenset({"top_left", "bottom_right"})
_FUZZY_KEYS = frozenset({"value", "fuzziness"})
_WILDCARD_KEYS = frozenset({"value"})
_EXISTS_KEYS = frozenset({"field"})
_BOOL_KEYS = frozenset(op.value for op in BoolOperator) | {"minimum_should_match"}


def from_dict(data: Mapping[str, Any]) -> Query:
    """Parse the JSON form of a query back into a query tree.

    Only the shapes produced by ``to_dict`` are accepted; options this
    package does not model (``gt``, ``boost``, ...) raise QueryError.
    """
    if not isinstance(data, Mapping) or len(data) != 1:
        raise QueryError("A query must be an object with exactly one operator key")
    operator, payload = next(iter(data.items()))

    match operator:
        case "match_all":
            _object(payload, operator, frozenset())
            return MatchAll()
        case "term":
            f, v = _single_entry(payload, operator)
            return Term(f, v)
        case "terms":
            f, vs = _single_entry(payload, operator)
            if not isinstance(vs, list):
                raise QueryError(f"'terms' expects a list of values for {f!r}")
            return Terms(f, tuple(vs))
        case "range":
            f, bounds = _single_entry(payload, operator)
            bounds = _object(bounds, operator, _RANGE_KEYS)
            return Range(f, gte=bounds.get("gte"), lte=bounds.get("lte"))
        case "geo_bounding_box":
            f, box = _single_entry(payload, operator)
            box = _object(box, operator, _GEO_KEYS)
            return GeoBoundingBox(f, _point(box.get("top_left")), _point(box.get("bottom_right")))
        case "match":
            f, t = _single_entry(payload, operator)
            return Match(f, t)
        case "fuzzy":
            f, opts = _single_entry(payload, operator)
            if not isinstance(opts, Mapping):
                return Fuzzy(f, opts)
            opts = _object(opts, operator, _FUZZY_KEYS)
            if "value" not in opts:
                raise QueryError("'fuzzy' expects a 'value'")
            return Fuzzy(f, opts["value"], opts.get("fuzziness", "AUTO"))
        case "exists":
            payload = _object(payload, operator, _EXISTS_KEYS)
            if "field" not in payload:
                raise QueryError("'exists' expects an object with a 'field' key")
            return Exists(payload["field"])
        case "wildcard":
            f, opts = _single_entry(payload, operator)
            if not isinstance(opts, Mapping):
                return Wildcard(f, opts)
            opts = _object(opts, operator, _WILDCARD_KEYS)
            if "value" not in opts:
                raise QueryError("'wildcard' expects a 'value'")
            return Wildcard(f, opts["value"])
        case "bool":
            payload = _object(payload, operator, _BOOL_KEYS)
            groups = {op.value: _clauses(payload, op.value) for op in BoolOperator}
            return Bool(**groups, minimum_should_match=payload.get("minimum_should_match"))
        case _:
            raise QueryError(f"Unknown query operator: {operator!r}")


def dumps(query: Query) -> str:
    """Compact JSON text, e.g. ``{"match_all":{}}``."""
    return json.dumps(to_dict(query), separators=(",", ":"), ensure_ascii=False)


def loads(text: str) -> Query:
    logger.debug("Parsing query JSON: %s", text)
    return from_dict(json.loads(text))
