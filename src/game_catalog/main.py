"""Main entry point for the game catalog.

This module provides:
- Command-line argument parsing
- The application context that builds and owns every service
- A headless search mode and the TUI launcher
"""

import argparse
import asyncio
import sys
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

import structlog

from .models import AppConfig, GameEntry, QueryState, SortField, SortOrder
from .services.cache import CatalogCache
from .services.catalog_loader import CatalogLoader
from .services.catalog_source import CatalogSource, create_catalog_source
from .services.config import VALID_LOG_LEVELS, ConfigurationService
from .services.debounce import Debouncer
from .services.errors import AppError, ErrorHandlingService
from .services.http_client import HttpClientService
from .services.logging import setup_logging
from .services.scoring import RelevanceScorer
from .services.search import SearchPipeline
from .services.storage import JsonFileKeyValueStore, KeyValueStore

log = structlog.stdlib.get_logger()

VERSION = "0.1.0"


class ApplicationContext:
    """Container for application services.

    Services are created lazily on first access and live as long as the
    context. Nothing in the service layer keeps module-level state; every
    consumer receives its collaborators from here.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        config: AppConfig | None = None,
        store: KeyValueStore | None = None,
        source: CatalogSource | None = None,
        http_client: HttpClientService | None = None,
    ) -> None:
        """Initialize the application context.

        Args:
            config_path: Path to configuration file
            config: Configuration to use instead of loading one
            store: Cache backend override (defaults to a JSON file at ``config.cache_path``)
            source: Catalog source override (defaults to one built from ``config.catalog_url``)
            http_client: HTTP client override
        """
        self._config_path = config_path
        self._config = config
        self._store = store
        self._source = source
        self._http_client = http_client

        self._config_service: ConfigurationService | None = None
        self._error_service: ErrorHandlingService | None = None
        self._cache: CatalogCache | None = None
        self._loader: CatalogLoader | None = None
        self._pipeline: SearchPipeline | None = None
        self._debouncers: list[Debouncer] = []

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    @property
    def error_service(self) -> ErrorHandlingService:
        if self._error_service is None:
            self._error_service = ErrorHandlingService()
        return self._error_service

    @property
    def http_client(self) -> HttpClientService:
        if self._http_client is None:
            self._http_client = HttpClientService(timeout=self.config.request_timeout)
        return self._http_client

    @property
    def cache(self) -> CatalogCache:
        if self._cache is None:
            store = self._store or JsonFileKeyValueStore(self.config.cache_path)
            self._cache = CatalogCache(store, ttl=timedelta(hours=self.config.cache_ttl_hours))
        return self._cache

    @property
    def loader(self) -> CatalogLoader:
        if self._loader is None:
            source = self._source or create_catalog_source(self.config.catalog_url, self.http_client)
            self._loader = CatalogLoader(
                source=source,
                cache=self.cache,
                skip_invalid_rows=self.config.skip_invalid_rows,
            )
        return self._loader

    @property
    def pipeline(self) -> SearchPipeline:
        if self._pipeline is None:
            self._pipeline = SearchPipeline(self.loader, RelevanceScorer())
        return self._pipeline

    def create_debouncer(self, callback: Callable[[Any], Any]) -> Debouncer:
        """Create a debouncer with the configured delay, cancelled on cleanup."""
        debouncer = Debouncer(callback, delay=self.config.debounce_delay_ms / 1000)
        self._debouncers.append(debouncer)
        return debouncer

    async def cleanup(self) -> None:
        """Cancel pending debounced calls and close connections."""
        log.info("Cleaning up application resources")
        for debouncer in self._debouncers:
            debouncer.cancel()
        if self._http_client is not None:
            await self._http_client.close()
        log.info("Application cleanup complete")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="game-catalog",
        description="Browse and search a catalog of browser games",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  game-catalog                                   Start the TUI
  game-catalog --no-tui --query "space"          Print matching games
  game-catalog --no-tui --genre Puzzle --sort-by rating
        """,
    )
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/game-catalog/config.json)",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=list(VALID_LOG_LEVELS),
        default=None,
        help="Set the logging level (default: from configuration)",
    )
    _ = parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    _ = parser.add_argument("--no-tui", action="store_true", help="Run one search and print the results")

    search = parser.add_argument_group("search (with --no-tui)")
    _ = search.add_argument("--query", default="", help="Text to search for")
    _ = search.add_argument("--genre", default="all", help="Only show games of this genre")
    _ = search.add_argument("--min-rating", type=float, default=None)
    _ = search.add_argument("--max-rating", type=float, default=None)
    _ = search.add_argument("--sort-by", choices=[field.value for field in SortField], default=None)
    _ = search.add_argument("--sort-order", choices=[order.value for order in SortOrder], default="desc")
    _ = search.add_argument("--refresh", action="store_true", help="Ignore the cache and refetch the catalog")
    return parser


def query_from_args(args: argparse.Namespace) -> QueryState:
    return QueryState.from_filters(
        search_text=args.query,
        genre=args.genre,
        min_rating=args.min_rating,
        max_rating=args.max_rating,
        sort_by=args.sort_by,
        sort_order=args.sort_order,
    )


def format_entry_line(entry: GameEntry) -> str:
    genres = entry.genre_string or "-"
    return f"{entry.id:<20} {entry.title:<32} {entry.rating:>4.1f}  {genres}"


async def run_search(context: ApplicationContext, query: QueryState, refresh: bool = False) -> int:
    """Run one search and print the results. Returns the process exit code."""
    try:
        if refresh:
            await context.pipeline.refresh()
        results = await context.pipeline.search(query)
    except AppError as e:
        user_error = context.error_service.handle_error(e, operation="search", component="cli")
        print(context.error_service.create_user_message(user_error), file=sys.stderr)
        return 1
    finally:
        await context.cleanup()

    if not results:
        print("No games match your search criteria.")
        return 0
    for entry in results:
        print(format_entry_line(entry))
    print(f"\n{len(results)} game(s)")
    return 0


async def run_tui(context: ApplicationContext) -> int:
    """Run the TUI application. Returns the process exit code."""
    from .ui.app import CatalogApp

    log.info("Starting TUI application")
    try:
        app = CatalogApp(context=context)
        await app.run_async()
        log.info("TUI application exited normally")
        return 0
    except Exception as e:
        log.error("TUI application error", error=str(e), exc_info=True)
        return 1
    finally:
        await context.cleanup()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)

    context = ApplicationContext(config_path=args.config)
    log_level = args.log_level or context.config.log_level
    log_dir = args.log_dir
    if log_dir is None and not args.no_tui:
        log_dir = Path("logs")

    _ = setup_logging(log_level=log_level, log_dir=log_dir, tui_mode=not args.no_tui)
    log.info(
        "Starting game catalog",
        version=VERSION,
        log_level=log_level,
        catalog_url=context.config.catalog_url,
    )

    try:
        if args.no_tui:
            query = query_from_args(args)
            exit_code = asyncio.run(run_search(context, query, refresh=args.refresh))
        else:
            exit_code = asyncio.run(run_tui(context))
    except KeyboardInterrupt:
        log.info("Application interrupted by user")
        exit_code = 130
    except AppError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        exit_code = 2

    log.info("Application exiting", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
