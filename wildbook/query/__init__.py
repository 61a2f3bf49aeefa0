from wildbook.query.builders import (
    exists,
    field_range,
    geo_bounding_box,
    individual,
    location,
    match_all,
    missing,
    sex,
    species,
    species_by_fields,
    submitter,
    term,
    terms,
    text_match,
    wildcard,
    year_range,
)
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
    and_,
    combine,
    not_,
    or_,
)
from wildbook.query.serialize import dumps, from_dict, loads, to_dict

__all__ = [
    # Nodes
    "Query",
    "MatchAll",
    "Term",
    "Terms",
    "Range",
    "GeoPoint",
    "GeoBoundingBox",
    "Match",
    "Fuzzy",
    "Exists",
    "Wildcard",
    "Bool",
    "BoolOperator",
    # Combination
    "combine",
    "and_",
    "or_",
    "not_",
    # Builders
    "match_all",
    "term",
    "terms",
    "field_range",
    "year_range",
    "text_match",
    "wildcard",
    "exists",
    "missing",
    "geo_bounding_box",
    "location",
    "species",
    "species_by_fields",
    "sex",
    "individual",
    "submitter",
    # Serialization
    "to_dict",
    "from_dict",
    "dumps",
    "loads",
]
