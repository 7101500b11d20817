"""Run a faceted search against the live API and print results and facet counts.

Usage:
    python scripts/facet_search.py <entity_type> [--query Q] [--filter F] [--sort S] [--page N]
    python scripts/facet_search.py --url URL
    python scripts/facet_search.py --pid PID

Examples:
    python scripts/facet_search.py works --query "coral bleaching" --filter "is_oa:true"
    python scripts/facet_search.py works --filter "publication_year:2020|2021,type:!dataset"
    python scripts/facet_search.py --url "/authors?filter=last_known_institution.id:I136199984"
    python scripts/facet_search.py --pid https://orcid.org/0000-0001-6187-6610
"""

import argparse
import asyncio
import math
import sys
import time
from urllib.parse import urlencode

from facetsearch.adapters.api.openalex import OpenAlexApiClient
from facetsearch.core.exceptions import SearchApiError
from facetsearch.domains.filters.formatting import display_year_range
from facetsearch.domains.filters.model import create_filter_from_identifier, sorted_filters
from facetsearch.search.factory import create_orchestrator


def dim(text: str) -> str:
    return f"\033[2m{text}\033[0m"


def bold(text: str) -> str:
    return f"\033[1m{text}\033[0m"


def cyan(text: str) -> str:
    return f"\033[36m{text}\033[0m"


def green(text: str) -> str:
    return f"\033[32m{text}\033[0m"


def red(text: str) -> str:
    return f"\033[31m{text}\033[0m"


def render_results(results: list) -> None:
    print(f"\n{cyan(bold('  Results'))}")
    for i, result in enumerate(results, start=1):
        name = result.get("display_name") or result.get("title") or result.get("id")
        cited = result.get("cited_by_count")
        suffix = dim(f" ({cited} citations)") if cited is not None else ""
        print(f"  {dim(f'{i:>2}.')} {name}{suffix}")


def render_facets(filters: list) -> None:
    if not filters:
        return
    print(f"\n{cyan(bold('  Facet counts'))}")
    by_key: dict = {}
    for f in filters:
        by_key.setdefault(f.key, []).append(f)
    for key, group in by_key.items():
        sort_by_value = bool(group[0].config and group[0].config.sort_by_value)
        label = group[0].display_name or key
        print(f"  {bold(label)}")
        for f in sorted_filters(group, sort_by_value)[:10]:
            pct = "" if math.isnan(f.count_percent) else dim(f" {f.count_percent:.1f}%")
            neg = red("not ") if f.is_negated else ""
            print(f"    {neg}{f.display_value} {green(str(f.count))}{pct}")


def build_url(args: argparse.Namespace) -> str:
    if args.url:
        return args.url
    filters = [args.filter] if args.filter else []
    if args.query:
        filters.append(f"display_name.search:{args.query}")
    query = {"page": args.page}
    if filters:
        query["filter"] = ",".join(filters)
    if args.sort:
        query["sort"] = args.sort
    return f"/{args.entity_type}?{urlencode(query)}"


async def run(args: argparse.Namespace) -> int:
    if args.pid:
        pid_filter = create_filter_from_identifier(args.pid)
        if pid_filter is None:
            print(red(f"No facet recognizes {args.pid!r}"))
            return 1
        print(f"  {dim('PID filter:')} {pid_filter.as_str}")
        if pid_filter.pid_url:
            print(f"  {dim('Resolves to:')} {pid_filter.pid_url}")
        url = f"/{pid_filter.entity_type}?{urlencode({'filter': pid_filter.as_str})}"
    else:
        url = build_url(args)

    async with OpenAlexApiClient() as api:
        orchestrator = create_orchestrator(url, api=api)
        start = time.monotonic()
        try:
            await orchestrator.boot_from_url()
        except SearchApiError as e:
            print(red(f"\n{e}"))
            return 1
        elapsed = time.monotonic() - start

    state = orchestrator.state
    print(f"{'─' * 60}")
    print(f"  {bold('Faceted Search')}")
    print(f"  {dim('Entity type:')} {state.entity_type}")
    if state.text_search:
        print(f"  {dim('Query:')} {state.text_search}")
    for f in state.input_filters:
        label = f.display_name or f.key
        print(f"  {dim('Filter:')} {label} = {'!' if f.is_negated else ''}{f.display_value}")
    years = [f.value for f in state.input_filters if f.key == "publication_year"]
    if len(years) == 1 and isinstance(years[0], str) and "-" in years[0]:
        start_year, _, end_year = years[0].partition("-")
        print(f"  {dim('Years:')} {display_year_range([start_year or None, end_year or None])}")
    sort_label = orchestrator.sort_object.display_name if orchestrator.sort_object else state.sort
    print(f"  {dim('Sort:')} {sort_label}")
    print(f"  {dim('API:')} {orchestrator.search_api_url}")
    print(f"{'─' * 60}")
    print(f"  {state.results_count} results, db {state.response_time}ms, page {state.page}")

    render_results(state.results)
    render_facets(state.results_filters)

    print(f"\n{'─' * 60}")
    print(f"  {dim(f'Total time: {elapsed:.1f}s')}")
    print(f"{'─' * 60}\n")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Faceted search viewer")
    parser.add_argument("entity_type", nargs="?", default="works", help="Entity type to search")
    parser.add_argument("--query", default=None, help="Free-text query")
    parser.add_argument("--filter", default=None, help="Encoded filter string")
    parser.add_argument("--sort", default=None, help="Sort as key[:direction]")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--url", default=None, help="Boot from a location URL instead")
    parser.add_argument("--pid", default=None, help="Search by persistent identifier")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
