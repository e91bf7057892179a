"""Developer CLI for trying queries against a centre snapshot file."""

import argparse
import asyncio

import pandas as pd
import structlog

from centrematch.categories import find_best_category_matches
from centrematch.centre_codes import generate_abbreviated_centre_code
from centrematch.config import EngineConfig, NearbyConfig
from centrematch.io import FileSnapshotSource, read_categories, resolution_rows, write_results
from centrematch.location_index import LocationIndex
from centrematch.logging import configure_logging
from centrematch.resolver import CentreResolver
from centrematch.suggestions import get_search_suggestions
from centrematch.types import LocationEntry, NearbyCentre, QueryResolution


def _build_index(args: argparse.Namespace) -> LocationIndex:
    log = structlog.get_logger()
    log.info("snapshot_source", path=args.centres)
    return LocationIndex(FileSnapshotSource(args.centres))


def _entries_frame(entries: list[LocationEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "centre_id": e.centre_id,
                "centre_name": e.centre_name,
                "suburb": e.suburb,
                "city": e.city,
                "state": e.state,
                "postcode": e.postcode,
            }
            for e in entries
        ]
    )


def _nearby_frame(nearby: list[NearbyCentre]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "centre_id": n.entry.centre_id,
                "centre_name": n.entry.centre_name,
                "suburb": n.entry.suburb,
                "state": n.entry.state,
                "distance_km": n.distance,
            }
            for n in nearby
        ]
    )


def _print_frame(title: str, df: pd.DataFrame) -> None:
    print(f"\n=== {title} ({len(df)}) ===")
    if df.empty:
        print("  No results.")
    else:
        print(df.to_string(index=False))


async def _resolve_all(args: argparse.Namespace) -> tuple[list[QueryResolution], CentreResolver]:
    index = _build_index(args)
    resolver = CentreResolver(index, EngineConfig())
    categories = read_categories(args.categories) if args.categories else None

    results: list[QueryResolution] = []
    for query in args.query:
        results.append(await resolver.resolve(query, categories, args.category))
    return results, resolver


def cmd_resolve(args: argparse.Namespace) -> None:
    results, resolver = asyncio.run(_resolve_all(args))

    for r in results:
        header = f'"{r.query}"'
        if r.category_keyword:
            header += f" category={r.category_keyword}"
            if r.matched_categories:
                header += f" ({', '.join(r.matched_categories)})"
        if r.state_filter:
            header += f" state={r.state_filter}"
        if r.collapsed:
            header += " [collapsed]"
        _print_frame(header, pd.DataFrame(resolution_rows(r)))
        if not r.centres:
            for s in get_search_suggestions(resolver.index.entries, r.parsed.centre_name):
                print(f"  {s.reason}")

    s = resolver.stats
    print("\n--- Statistics ---")
    print(f"Queries: {s.queries}")
    print(f"Collapsed: {s.collapsed}")
    print(f"Ranked: {s.ranked}")
    print(f"Pure category: {s.pure_category}")
    print(f"Area matches: {s.area_matches}")
    print(f"Empty: {s.empty}")

    if args.output:
        write_results(results, args.output)
        print(f"\nSaved to: {args.output}")


def cmd_area(args: argparse.Namespace) -> None:
    index = _build_index(args)
    entries = asyncio.run(index.find_by_area(args.area))
    _print_frame(f"Centres in '{args.area}'", _entries_frame(entries))


def cmd_near(args: argparse.Namespace) -> None:
    index = _build_index(args)
    nearby = asyncio.run(index.find_near_coordinates(args.lat, args.lng, args.radius))
    _print_frame(f"Centres within {args.radius} km of ({args.lat}, {args.lng})", _nearby_frame(nearby))


def cmd_nearby(args: argparse.Namespace) -> None:
    index = _build_index(args)
    nearby = asyncio.run(index.nearby_centres(args.centre_id, args.radius))
    _print_frame(f"Centres within {args.radius} km of centre {args.centre_id}", _nearby_frame(nearby))


def cmd_categories(args: argparse.Namespace) -> None:
    categories = read_categories(args.categories)
    matches = find_best_category_matches(
        args.keyword, categories, max_results=args.max, threshold=args.threshold
    )
    print(f"=== Categories matching '{args.keyword}' ({len(matches)}) ===")
    for name in matches:
        print(f"  {name}")


def cmd_code(args: argparse.Namespace) -> None:
    for name in args.name:
        print(f"{generate_abbreviated_centre_code(name)}  {name}")


def main() -> None:
    default_radius = NearbyConfig().default_radius_km

    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parent_parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    snapshot_parser = argparse.ArgumentParser(add_help=False)
    snapshot_parser.add_argument(
        "--centres", default="localdata/centres.csv", help="Centre snapshot (CSV or JSONL)"
    )

    parser = argparse.ArgumentParser(
        description="Shopping centre query resolution CLI",
        parents=[parent_parser],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve", parents=[parent_parser, snapshot_parser], help="Resolve search queries"
    )
    resolve_parser.add_argument("query", nargs="+", help="Search query (repeatable)")
    resolve_parser.add_argument("--categories", help="File with one category name per line")
    resolve_parser.add_argument("--category", help="Category keyword, skips detection")
    resolve_parser.add_argument("--output", help="Write results to CSV or JSONL")
    resolve_parser.set_defaults(func=cmd_resolve)

    area_parser = subparsers.add_parser(
        "area", parents=[parent_parser, snapshot_parser], help="List centres in a named area"
    )
    area_parser.add_argument("area", help='Area, suburb or city (e.g. "western sydney")')
    area_parser.set_defaults(func=cmd_area)

    near_parser = subparsers.add_parser(
        "near", parents=[parent_parser, snapshot_parser], help="Centres near coordinates"
    )
    near_parser.add_argument("--lat", type=float, required=True)
    near_parser.add_argument("--lng", type=float, required=True)
    near_parser.add_argument("--radius", type=float, default=default_radius, help=f"Radius in km (default: {default_radius})")
    near_parser.set_defaults(func=cmd_near)

    nearby_parser = subparsers.add_parser(
        "nearby", parents=[parent_parser, snapshot_parser], help="Centres near another centre"
    )
    nearby_parser.add_argument("centre_id", type=int)
    nearby_parser.add_argument("--radius", type=float, default=default_radius, help=f"Radius in km (default: {default_radius})")
    nearby_parser.set_defaults(func=cmd_nearby)

    categories_parser = subparsers.add_parser(
        "categories", parents=[parent_parser], help="Rank category names for a keyword"
    )
    categories_parser.add_argument("keyword")
    categories_parser.add_argument("--categories", required=True, help="File with one category name per line")
    categories_parser.add_argument("--max", type=int, default=5)
    categories_parser.add_argument("--threshold", type=float, default=0.5)
    categories_parser.set_defaults(func=cmd_categories)

    code_parser = subparsers.add_parser(
        "code", parents=[parent_parser], help="Generate 4-letter centre codes"
    )
    code_parser.add_argument("name", nargs="+", help="Centre name (repeatable)")
    code_parser.set_defaults(func=cmd_code)

    args = parser.parse_args()
    configure_logging(args.log_level, json_output=args.log_json)
    args.func(args)


if __name__ == "__main__":
    main()
