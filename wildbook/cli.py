# wildbook/cli.py
import asyncio
import json
import logging
import sys
from typing import Annotated, Any

import cyclopts

from wildbook.client import WildbookClient
from wildbook.errors import QueryError, WildbookError
from wildbook.query import (
    Query,
    combine,
    exists,
    location,
    missing,
    sex,
    species,
    year_range,
)
from wildbook.request import with_pagination

app = cyclopts.App(
    name="wildbook",
    help="Search encounters and individuals on a Wildbook instance.",
)

Sex = Annotated[str | None, cyclopts.Parameter(name="--sex", help="male, female or unknown")]
Genus = Annotated[str | None, cyclopts.Parameter(name="--genus", help="Genus name")]
Epithet = Annotated[
    str | None, cyclopts.Parameter(name="--epithet", help="Specific epithet (needs --genus)")
]
YearFrom = Annotated[int | None, cyclopts.Parameter(name="--year-from", help="Earliest year")]
YearTo = Annotated[int | None, cyclopts.Parameter(name="--year-to", help="Latest year")]
Country = Annotated[str | None, cyclopts.Parameter(name="--country", help="Country name")]
LocationId = Annotated[str | None, cyclopts.Parameter(name="--location-id", help="Location ID")]
HasIndividual = Annotated[
    bool | None,
    cyclopts.Parameter(
        name="--has-individual",
        negative="--no-individual",
        help="Only encounters with (or, negated, without) an assigned individual",
    ),
]
Operator = Annotated[
    str, cyclopts.Parameter(name="--operator", help="How to join filters: must, should, must_not")
]
From = Annotated[int, cyclopts.Parameter(name="--from", help="Pagination offset")]
Size = Annotated[int, cyclopts.Parameter(name=["--size", "-n"], help="Number of results")]
Sort = Annotated[str | None, cyclopts.Parameter(name="--sort", help="Field to sort by")]
SortOrder = Annotated[str | None, cyclopts.Parameter(name="--sort-order", help="asc or desc")]
Verbose = Annotated[bool, cyclopts.Parameter(name=["--verbose", "-v"], help="Debug logging")]


def build_query(
    sex_value: str | None = None,
    genus: str | None = None,
    epithet: str | None = None,
    year_from: int | None = None,
    year_to: int | None = None,
    country: str | None = None,
    location_id: str | None = None,
    has_individual: bool | None = None,
    operator: str = "must",
) -> Query:
    """Translate CLI filter options into a single query."""
    filters: list[Query] = []
    if sex_value:
        filters.append(sex(sex_value))
    if genus:
        filters.append(species(genus, epithet))
    elif epithet:
        raise QueryError("--epithet requires --genus")
    if year_from is not None or year_to is not None:
        filters.append(year_range(year_from, year_to))
    if country or location_id:
        filters.append(location(country=country, location_id=location_id))
    if has_individual is True:
        filters.append(exists("individualId"))
    elif has_individual is False:
        filters.append(missing("individualId"))
    return combine(filters, operator)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
            stream=sys.stderr,
        )


async def _run_search(
    kind: str,
    query: Query,
    from_: int,
    size: int,
    sort: str | None,
    sort_order: str | None,
) -> Any:
    async with WildbookClient() as client:
        await client.login()
        try:
            if kind == "individuals":
                return await client.search_individuals(query, from_, size, sort, sort_order)  # type: ignore[arg-type]
            return await client.search_encounters(query, from_, size, sort, sort_order)  # type: ignore[arg-type]
        finally:
            await client.logout()


def _search_command(kind: str, **options: Any) -> None:
    _configure_logging(options.pop("verbose"))
    paging = {k: options.pop(k) for k in ("from_", "size", "sort", "sort_order")}
    try:
        query = build_query(**options)
        result = asyncio.run(_run_search(kind, query, **paging))
    except WildbookError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(result, indent=2, ensure_ascii=False))


@app.command(name="encounters")
def encounters(
    sex: Sex = None,
    genus: Genus = None,
    epithet: Epithet = None,
    year_from: YearFrom = None,
    year_to: YearTo = None,
    country: Country = None,
    location_id: LocationId = None,
    has_individual: HasIndividual = None,
    operator: Operator = "must",
    from_: From = 0,
    size: Size = 10,
    sort: Sort = None,
    sort_order: SortOrder = None,
    verbose: Verbose = False,
) -> None:
    """Search encounters. Credentials come from WILDBOOK_URL/USERNAME/PASSWORD."""
    _search_command(
        "encounters",
        sex_value=sex,
        genus=genus,
        epithet=epithet,
        year_from=year_from,
        year_to=year_to,
        country=country,
        location_id=location_id,
        has_individual=has_individual,
        operator=operator,
        from_=from_,
        size=size,
        sort=sort,
        sort_order=sort_order,
        verbose=verbose,
    )


@app.command(name="individuals")
def individuals(
    sex: Sex = None,
    genus: Genus = None,
    epithet: Epithet = None,
    operator: Operator = "must",
    from_: From = 0,
    size: Size = 10,
    sort: Sort = None,
    sort_order: SortOrder = None,
    verbose: Verbose = False,
) -> None:
    """Search individuals."""
    _search_command(
        "individuals",
        sex_value=sex,
        genus=genus,
        epithet=epithet,
        operator=operator,
        from_=from_,
        size=size,
        sort=sort,
        sort_order=sort_order,
        verbose=verbose,
    )


@app.command(name="query")
def show_query(
    sex: Sex = None,
    genus: Genus = None,
    epithet: Epithet = None,
    year_from: YearFrom = None,
    year_to: YearTo = None,
    country: Country = None,
    location_id: LocationId = None,
    has_individual: HasIndividual = None,
    operator: Operator = "must",
    from_: From = 0,
    size: Size = 10,
    sort: Sort = None,
    sort_order: SortOrder = None,
) -> None:
    """Print the request that a search would send, without contacting the server."""
    try:
        query = build_query(
            sex_value=sex,
            genus=genus,
            epithet=epithet,
            year_from=year_from,
            year_to=year_to,
            country=country,
            location_id=location_id,
            has_individual=has_individual,
            operator=operator,
        )
        request = with_pagination(query, from_, size, sort, sort_order)  # type: ignore[arg-type]
    except WildbookError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps({"body": request.body, "params": request.params}, indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
