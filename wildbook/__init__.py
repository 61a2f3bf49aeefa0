# wildbook/__init__.py
"""wildbook - A client library for the Wildbook v3 search API."""

from wildbook.client import WildbookClient
from wildbook.errors import (
    APIError,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ForbiddenError,
    NotAuthenticatedError,
    NotFoundError,
    QueryError,
    WildbookError,
)
from wildbook.query import (
    Bool,
    BoolOperator,
    Query,
    combine,
    dumps,
    exists,
    field_range,
    individual,
    loads,
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
from wildbook.request import SearchRequest, with_pagination, wrap

__all__ = [
    # Query builders
    "Query",
    "Bool",
    "BoolOperator",
    "combine",
    "match_all",
    "term",
    "terms",
    "field_range",
    "year_range",
    "text_match",
    "wildcard",
    "exists",
    "missing",
    "location",
    "species",
    "species_by_fields",
    "sex",
    "individual",
    "submitter",
    "dumps",
    "loads",
    # Requests
    "wrap",
    "with_pagination",
    "SearchRequest",
    # Client
    "WildbookClient",
    # Errors
    "WildbookError",
    "QueryError",
    "ConfigurationError",
    "NotAuthenticatedError",
    "APIError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "BadRequestError",
]
