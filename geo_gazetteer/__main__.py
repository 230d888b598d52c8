"""CLI entrypoint for geo_gazetteer."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import BaseModel

from geo_gazetteer.logging_config import setup_logging
from geo_gazetteer.resolver import parse_identifier


def main(argv: Optional[list[str]] = None) -> int:
    setup_logging()

    parser = argparse.ArgumentParser(prog="geo-gazetteer")
    parser.add_argument("--dataset", default=None, help="Path to countries+states+cities.json")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")
    sub.add_parser("try")
    sub.add_parser("countries")

    country_parser = sub.add_parser("country")
    country_parser.add_argument("identifier", help="ISO2/ISO3 code, name or numeric id")
    country_parser.add_argument("--by", choices=["any", "code", "name"], default="any")

    states_parser = sub.add_parser("states")
    states_parser.add_argument("country", nargs="?")

    state_parser = sub.add_parser("state")
    state_parser.add_argument("country")
    state_parser.add_argument("state_code")

    cities_parser = sub.add_parser("cities")
    cities_parser.add_argument("country", nargs="?")
    cities_parser.add_argument("state", nargs="?")

    city_parser = sub.add_parser("city")
    city_parser.add_argument("country")
    city_parser.add_argument("state")
    city_parser.add_argument("name")

    hoods_parser = sub.add_parser("neighborhoods")
    hoods_parser.add_argument("country")
    hoods_parser.add_argument("state")
    hoods_parser.add_argument("city")
    hoods_parser.add_argument("--base-path", default=None)

    search_parser = sub.add_parser("search")
    search_parser.add_argument("query")
    search_parser.add_argument("--country", default=None)

    nearby_parser = sub.add_parser("nearby")
    nearby_parser.add_argument("lat", type=float)
    nearby_parser.add_argument("lon", type=float)
    nearby_parser.add_argument("radius_km", type=float)

    args = parser.parse_args(argv)

    if args.command == "serve":
        _serve()
        return 0

    from geo_gazetteer.dataset import DatasetError
    from geo_gazetteer.gazetteer import Gazetteer

    try:
        gz = Gazetteer.from_settings(args.dataset)
    except DatasetError as e:
        print(f"Error loading data: {e}", file=sys.stderr)
        return 1

    if args.command == "try":
        _try_mode(gz)
        return 0

    result = _run_command(gz, args)
    _print_json(result)
    return 1 if result is None else 0


def _serve() -> None:
    import uvicorn

    from geo_gazetteer.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "geo_gazetteer.api:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=(settings.env == "development"),
        log_level=settings.log_level.lower(),
    )


def _run_command(gz, args: argparse.Namespace) -> Any:
    cmd = args.command
    if cmd == "countries":
        return gz.get_all_countries()
    if cmd == "country":
        if args.by == "code":
            return gz.get_country_by_code(args.identifier)
        if args.by == "name":
            return gz.get_country_by_name(args.identifier)
        return gz.find_country(parse_identifier(args.identifier))
    if cmd == "states":
        if args.country is None:
            return gz.get_all_states()
        return gz.get_states_by_country(parse_identifier(args.country))
    if cmd == "state":
        return gz.get_state_by_code(parse_identifier(args.country), args.state_code)
    if cmd == "cities":
        if args.country is None:
            return gz.get_all_cities()
        if args.state is None:
            return gz.get_cities_by_country(parse_identifier(args.country))
        return gz.get_cities_by_state(parse_identifier(args.country), parse_identifier(args.state))
    if cmd == "city":
        return gz.get_city_by_name(parse_identifier(args.country), parse_identifier(args.state), args.name)
    if cmd == "neighborhoods":
        return gz.get_neighborhoods_by_city(
            parse_identifier(args.country),
            parse_identifier(args.state),
            parse_identifier(args.city),
            base_path=args.base_path,
        )
    if cmd == "search":
        country = parse_identifier(args.country) if args.country else None
        return gz.search_cities(args.query, country)
    if cmd == "nearby":
        return gz.get_cities_by_geo_location(args.lat, args.lon, args.radius_km)
    raise ValueError(f"Unknown command: {cmd}")


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump()
    if isinstance(result, (list, tuple)):
        return [_to_jsonable(r) for r in result]
    return result


def _print_json(result: Any) -> None:
    print(json.dumps(_to_jsonable(result), ensure_ascii=False, indent=2))


# ── Interactive console ───────────────────────────────────────────────

@dataclass(frozen=True)
class MenuEntry:
    name: str
    params: tuple[str, ...]
    run: Callable[..., Any]


def _menu(gz) -> dict[str, MenuEntry]:
    ident = parse_identifier
    entries = [
        MenuEntry("get_all_countries", (), lambda: gz.get_all_countries()),
        MenuEntry("get_country_by_code", ("code (ISO2 or ISO3)",), lambda c: gz.get_country_by_code(c)),
        MenuEntry("get_country_by_name", ("country name",), lambda n: gz.get_country_by_name(n)),
        MenuEntry("get_all_states", (), lambda: gz.get_all_states()),
        MenuEntry("get_states_by_country", ("country (ID, name, or ISO code)",),
                  lambda c: gz.get_states_by_country(ident(c))),
        MenuEntry("get_state_by_code", ("country (ID, name, or ISO code)", "state code"),
                  lambda c, s: gz.get_state_by_code(ident(c), s)),
        MenuEntry("get_all_cities", (), lambda: gz.get_all_cities()),
        MenuEntry("get_cities_by_country", ("country (ID, name, or ISO code)",),
                  lambda c: gz.get_cities_by_country(ident(c))),
        MenuEntry("get_cities_by_state", ("country (ID, name, or ISO code)", "state (ID, name, or code)"),
                  lambda c, s: gz.get_cities_by_state(ident(c), ident(s))),
        MenuEntry("get_city_by_name",
                  ("country (ID, name, or ISO code)", "state (ID, name, or code)", "city name"),
                  lambda c, s, n: gz.get_city_by_name(ident(c), ident(s), n)),
        MenuEntry("get_neighborhoods_by_city",
                  ("country (ID, name, or ISO code)", "state (ID, name, or code)", "city (ID or name)"),
                  lambda c, s, t: gz.get_neighborhoods_by_city(ident(c), ident(s), ident(t))),
        MenuEntry("search_cities", ("search query", "country (optional - ID, name, or ISO code)"),
                  lambda q, c: gz.search_cities(q, ident(c) if c else None)),
        MenuEntry("get_cities_by_geo_location", ("latitude", "longitude", "radius (km)"),
                  lambda lat, lon, r: gz.get_cities_by_geo_location(float(lat), float(lon), float(r))),
    ]
    return {str(i): entry for i, entry in enumerate(entries, 1)}


def _show_help(menu: dict[str, MenuEntry]) -> None:
    print("\n===== Available Functions =====")
    for key, entry in menu.items():
        print(f"{key}: {entry.name}({', '.join(entry.params)})")
    print("\nCommands:")
    print("help - Show this help")
    print("exit - Exit the program")
    print("===============================\n")


def _describe(item: Any) -> list[str]:
    lines = []
    if hasattr(item, "iso2"):
        lines.append(f"Country: {item.name} ({item.iso2})")
    elif hasattr(item, "cities"):
        lines.append(f"State: {item.name} ({item.state_code})")
        if getattr(item, "country_name", None):
            lines.append(f"Country: {item.country_name}")
    elif hasattr(item, "latitude"):
        lines.append(f"City: {item.name}")
        if getattr(item, "state_name", None):
            lines.append(f"State: {item.state_name}")
        if getattr(item, "country_name", None):
            lines.append(f"Country: {item.country_name}")
        if getattr(item, "distance_km", None) is not None:
            lines.append(f"Distance: {item.distance_km:.2f} km")
    else:
        lines.append(f"Name: {item.name}")
    return lines


def _display_results(result: Any, samples: int = 5) -> None:
    if result is None:
        print("Result: null (Not found)")
        return

    if isinstance(result, (list, tuple)):
        print(f"Results: {len(result)} items")
        if not result:
            print("Empty list - no results found")
            return
        shown = min(samples, len(result))
        print(f"\nShowing first {shown} of {len(result)} results:")
        for i, item in enumerate(result[:shown], 1):
            print(f"\n--- Item {i} ---")
            for line in _describe(item):
                print(line)
    else:
        print("Result:")
        for line in _describe(result):
            print(line)
        if hasattr(result, "iso3"):
            print(f"ISO Codes: {result.iso2}, {result.iso3}")
            print(f"Capital: {result.capital}")
            print(f"Currency: {result.currency}")

    if input("\nShow the full JSON result? (y/n) ").strip().lower() == "y":
        _print_json(result)


def _try_mode(gz) -> None:
    menu = _menu(gz)
    print("=== Interactive Gazetteer Console ===")
    print(f"Data loaded: {len(gz.data)} countries found")
    _show_help(menu)

    while True:
        try:
            answer = input("\nEnter function number (or help/exit): ").strip().lower()
        except EOFError:
            break
        if answer in {"exit", "quit", "q"}:
            print("Exiting...")
            break
        if answer == "help":
            _show_help(menu)
            continue

        entry = menu.get(answer)
        if entry is None:
            print('Invalid function number. Type "help" to see available functions.')
            continue

        print(f"\nRunning: {entry.name}")
        params = [input(f"Enter {p}: ").strip() for p in entry.params]
        try:
            _display_results(entry.run(*params))
        except ValueError as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    sys.exit(main())
