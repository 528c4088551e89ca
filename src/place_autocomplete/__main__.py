from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from place_autocomplete.config import YamlConfigLoader
from place_autocomplete.config.interfaces import ConfigLoader
from place_autocomplete.config.models import AppConfig, ConfigLoadRequest
from place_autocomplete.core.formatting import (
    DEFAULT_SEARCH_URL_BASE,
    build_coordinate_url,
    extract_full_address,
    extract_primary_name,
)
from place_autocomplete.core.models import LocationData, Suggestion
from place_autocomplete.logging import init_logging
from place_autocomplete.provider import NominatimSuggestionProvider, SuggestionProviderError
from place_autocomplete.scheduler import RequestScheduler, SelectionAcceptanceHandler

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="place-autocomplete", description="Location autocomplete runner")
    parser.add_argument(
        "--config",
        default="data/config/config.yaml",
        help="Path to config.yaml (default: data/config/config.yaml)",
    )
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Disable loading .env (env overrides still apply)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: search
    search_parser = subparsers.add_parser("search", help="Run a single provider query")
    search_parser.add_argument("query", help="Search text")

    # Command: simulate
    simulate_parser = subparsers.add_parser("simulate", help="Type text through the scheduler and print suggestions")
    simulate_parser.add_argument("text", help="Text to type one character at a time")
    simulate_parser.add_argument(
        "--keystroke-seconds",
        type=float,
        default=0.15,
        help="Delay between simulated keystrokes (default: 0.15)",
    )
    simulate_parser.add_argument(
        "--settle-seconds",
        type=float,
        default=3.0,
        help="How long to keep the scheduler running after the last keystroke (default: 3.0)",
    )
    simulate_parser.add_argument(
        "--accept-first",
        action="store_true",
        help="Accept the first suggestion instead of committing the typed text",
    )

    return parser


async def _load_config(args: argparse.Namespace) -> AppConfig:
    loader: ConfigLoader = YamlConfigLoader()
    request = ConfigLoadRequest(
        yaml_path=args.config,
        dotenv_path=None if args.no_dotenv else ".env",
    )
    return await loader.load(request)


def _print_suggestions(suggestions: Sequence[Suggestion]) -> None:
    if not suggestions:
        print("  (no suggestions)")
        return
    for index, suggestion in enumerate(suggestions, 1):
        print(f"  {index}. {extract_primary_name(suggestion.display_text)} [{suggestion.metadata}]")
        address = extract_full_address(suggestion.display_text)
        if address:
            print(f"     {address}")


def _print_location(location: LocationData, search_url_base: str = DEFAULT_SEARCH_URL_BASE) -> None:
    print(f"Selected: {location.display_name}")
    if location.coordinates is not None:
        print(f"  coordinates: {location.coordinates}")
        print(f"  map: {build_coordinate_url(location.coordinates, search_url_base)}")
    print(f"  url: {location.derived_url}")


class _ConsoleListener:
    def __init__(self) -> None:
        self.latest: tuple[Suggestion, ...] = ()

    def on_suggestions(self, suggestions: Sequence[Suggestion]) -> None:
        self.latest = tuple(suggestions)
        if suggestions:
            print(f"Suggestions ({len(suggestions)}):")
            _print_suggestions(suggestions)

    def on_loading(self, loading: bool) -> None:
        if loading:
            print("Searching locations...")


async def _search(args: argparse.Namespace) -> None:
    config = await _load_config(args)
    init_logging(config.logging)

    async with NominatimSuggestionProvider(config=config.provider) as provider:
        try:
            suggestions = await provider.search(args.query)
        except SuggestionProviderError as exc:
            logger.warning("Search failed. query=%s error=%s", args.query, exc)
            return
    _print_suggestions(suggestions)


async def _simulate(args: argparse.Namespace) -> None:
    config = await _load_config(args)
    init_logging(config.logging)
    logger.info("Starting typing simulation. text=%s", args.text)

    listener = _ConsoleListener()
    async with NominatimSuggestionProvider(config=config.provider) as provider:
        scheduler = RequestScheduler(provider=provider, settings=config.autocomplete, listener=listener)
        handler = SelectionAcceptanceHandler(
            scheduler=scheduler,
            sink=lambda location: _print_location(location, config.links.search_url_base),
            search_url_base=config.links.search_url_base,
        )
        try:
            for end in range(1, len(args.text) + 1):
                scheduler.on_text_changed(args.text[:end])
                await asyncio.sleep(args.keystroke_seconds)
            await asyncio.sleep(args.settle_seconds)

            if args.accept_first and listener.latest:
                handler.accept(listener.latest[0])
            else:
                handler.commit()
        finally:
            scheduler.close()


async def _main_async() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "search":
        await _search(args)
    elif args.command == "simulate":
        await _simulate(args)


def main() -> None:
    try:
        asyncio.run(_main_async())
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")


if __name__ == "__main__":
    main()
