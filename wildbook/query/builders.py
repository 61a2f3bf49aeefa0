# wildbook/query/builders.py
"""Factory functions for primitive Wildbook queries.

Every builder returns a fresh, immutable query node. Required string
arguments are checked eagerly so a malformed query never reaches the server.
"""

from collections.abc import Iterable

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
    Scalar,
    Term,
    Terms,
    Wildcard,
    combine,
)


def _require(name: str, value: object) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise QueryError(f"{name} is required")


def match_all() -> MatchAll:
    return MatchAll()


def term(field: str, value: Scalar) -> Term:
    _require("field", field)
    _require("value", value)
    return Term(field, value)


def terms(field: str, values: Iterable[Scalar]) -> Terms:
    _require("field", field)
    if isinstance(values, str):
        raise QueryError("values must be a collection, not a single string")
    return Terms(field, tuple(values))


def field_range(field: str, gte: Scalar | None = None, lte: Scalar | None = None) -> Range:
    """Inclusive range on ``field``.

    Only the bounds that are given end up in the request. With neither bound
    the query is still a range query (``{"range": {field: {}}}``).
    """
    _require("field", field)
    return Range(field, gte=gte, lte=lte)


def year_range(start_year: int | None = None, end_year: int | None = None) -> Range:
    return field_range("year", gte=start_year, lte=end_year)


def text_match(field: str, text: str, fuzzy: bool = False) -> Match | Fuzzy:
    """Full-text search on ``field``; ``fuzzy`` tolerates typos (AUTO fuzziness)."""
    _require("field", field)
    _require("text", text)
    if fuzzy:
        return Fuzzy(field, text)
    return Match(field, text)


def wildcard(field: str, pattern: str) -> Wildcard:
    _require("field", field)
    _require("pattern", pattern)
    return Wildcard(field, pattern)


def exists(field: str) -> Exists:
    _require("field", field)
    return Exists(field)


def missing(field: str) -> Bool:
    """Documents where ``field`` is absent or null."""
    return Bool(must_not=(exists(field),))


def geo_bounding_box(
    min_lat: float,
    max_lat: float,
    min_lon: float,
    max_lon: float,
    field: str = "location",
) -> GeoBoundingBox:
    """Box from its corners: latitude falls and longitude grows from top-left to bottom-right."""
    _require("field", field)
    for name, value in (
        ("min_lat", min_lat),
        ("max_lat", max_lat),
        ("min_lon", min_lon),
        ("max_lon", max_lon),
    ):
        _require(name, value)
    return GeoBoundingBox(
        field,
        top_left=GeoPoint(lat=max_lat, lon=min_lon),
        bottom_right=GeoPoint(lat=min_lat, lon=max_lon),
    )


def location(
    country: str | None = None,
    location_id: str | None = None,
    min_lat: float | None = None,
    max_lat: float | None = None,
    min_lon: float | None = None,
    max_lon: float | None = None,
) -> Query:
    """Filter by country, location ID and/or bounding box.

    The bounding box is only applied when all four bounds are given. With no
    usable criteria the result is match_all; a single criterion is returned
    bare; several are AND-ed together.
    """
    clauses: list[Query] = []
    if country is not None:
        clauses.append(term("country", country))
    if location_id is not None:
        clauses.append(term("locationId", location_id))
    if None not in (min_lat, max_lat, min_lon, max_lon):
        clauses.append(geo_bounding_box(min_lat, max_lat, min_lon, max_lon))  # type: ignore[arg-type]
    return combine(clauses, BoolOperator.MUST)


def species(genus: str, specific_epithet: str | None = None) -> Bool:
    """Match a species through either the taxonomy string or the split fields.

    Genus only: ``taxonomy`` starting with "<genus> " OR ``genus`` equal.
    Genus and epithet: ``taxonomy`` equal to "<genus> <epithet>" OR both
    ``genus`` and ``specificEpithet`` equal.
    """
    _require("genus", genus)
    if specific_epithet is None:
        return Bool(
            should=(wildcard("taxonomy", f"{genus} *"), term("genus", genus)),
            minimum_should_match=1,
        )
    _require("specific_epithet", specific_epithet)
    return Bool(
        should=(
            terms("taxonomy", [f"{genus} {specific_epithet}"]),
            species_by_fields(genus, specific_epithet),
        ),
        minimum_should_match=1,
    )


def species_by_fields(genus: str, specific_epithet: str | None = None) -> Query:
    """Match on the ``genus``/``specificEpithet`` fields only, ignoring ``taxonomy``."""
    _require("genus", genus)
    if specific_epithet is None:
        return term("genus", genus)
    return Bool(must=(term("genus", genus), term("specificEpithet", specific_epithet)))


def sex(value: str) -> Term:
    return term("sex", value)


def individual(individual_id: str) -> Term:
    return term("individualId", individual_id)


def submitter(submitter_id: str) -> Term:
    return term("submitterID", submitter_id)
