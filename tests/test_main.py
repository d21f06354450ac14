"""Tests for the command-line entry point and application context."""

import json
import tempfile
from pathlib import Path
from typing import Any

import pytest

from game_catalog.main import (
    ApplicationContext,
    build_parser,
    format_entry_line,
    main,
    query_from_args,
    run_search,
)
from game_catalog.models import AppConfig, GameEntry, SortField, SortOrder
from game_catalog.services.catalog_source import FileCatalogSource
from game_catalog.services.errors import DataSourceError
from game_catalog.services.storage import MemoryKeyValueStore


GAMES = {
    "games": [
        {"id": "a", "title": "Space Raiders", "genre": ["Action"], "rating": 4.5},
        {"id": "b", "title": "Puzzle Quest", "genre": ["Puzzle"], "rating": 3.0},
    ]
}


class StaticSource:
    location = "memory://catalog"

    def __init__(self, document: Any = None, error: Exception | None = None) -> None:
        self.document = GAMES if document is None else document
        self.error = error

    async def fetch(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.document


def make_context(source: StaticSource) -> ApplicationContext:
    config = AppConfig(catalog_url="memory://catalog", cache_path=Path("unused.json"))
    return ApplicationContext(config=config, store=MemoryKeyValueStore(), source=source)


class TestArgumentParsing:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        query = query_from_args(args)

        assert not args.no_tui
        assert query.is_empty
        assert query.sort_by is None

    def test_search_options(self) -> None:
        args = build_parser().parse_args([
            "--no-tui", "--query", "space", "--genre", "Action",
            "--min-rating", "4", "--sort-by", "releaseDate", "--sort-order", "asc",
        ])
        query = query_from_args(args)

        assert query.search_text == "space"
        assert query.genre == "Action"
        assert query.min_rating == 4.0
        assert query.sort_by == SortField.RELEASE_DATE
        assert query.sort_order == SortOrder.ASCENDING

    def test_invalid_sort_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--sort-by", "popularity"])


def test_format_entry_line() -> None:
    line = format_entry_line(GameEntry(id="a", title="Space Raiders", genre=("Action",), rating=4.5))

    assert "Space Raiders" in line
    assert "4.5" in line
    assert line.endswith("Action")


class TestRunSearch:
    @pytest.mark.asyncio
    async def test_prints_results(self, capsys: pytest.CaptureFixture[str]) -> None:
        context = make_context(StaticSource())
        args = build_parser().parse_args(["--no-tui", "--query", "space"])

        exit_code = await run_search(context, query_from_args(args))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Space Raiders" in out
        assert "Puzzle Quest" not in out
        assert "1 game(s)" in out

    @pytest.mark.asyncio
    async def test_no_results_message(self, capsys: pytest.CaptureFixture[str]) -> None:
        context = make_context(StaticSource())
        args = build_parser().parse_args(["--no-tui", "--query", "zzz"])

        exit_code = await run_search(context, query_from_args(args))

        assert exit_code == 0
        assert "No games match your search criteria." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_load_failure_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = DataSourceError("Failed to load games: HTTP error status 500", status_code=500)
        context = make_context(StaticSource(error=error))
        args = build_parser().parse_args(["--no-tui"])

        exit_code = await run_search(context, query_from_args(args))

        assert exit_code == 1
        assert "Failed to load games: HTTP error status 500" in capsys.readouterr().err
        assert context.error_service.get_recent_errors() == [error]


class TestApplicationContext:
    def test_services_are_created_once(self) -> None:
        context = make_context(StaticSource())

        assert context.pipeline is context.pipeline
        assert context.loader is context.pipeline.loader
        assert context.cache is context.loader.cache

    def test_debouncer_uses_configured_delay(self) -> None:
        config = AppConfig(catalog_url="data/games.json", cache_path=Path("unused.json"), debounce_delay_ms=150)
        context = ApplicationContext(config=config, store=MemoryKeyValueStore())

        debouncer = context.create_debouncer(lambda value: None)

        assert debouncer.delay == 0.15

    def test_file_catalog_url_builds_file_source(self) -> None:
        config = AppConfig(catalog_url="data/games.json", cache_path=Path("unused.json"))
        context = ApplicationContext(config=config, store=MemoryKeyValueStore())

        assert isinstance(context.loader.source, FileCatalogSource)


def test_main_headless_search(capsys: pytest.CaptureFixture[str]) -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        games_path = Path(temp_dir) / "games.json"
        _ = games_path.write_text(json.dumps(GAMES), encoding="utf-8")
        config_path = Path(temp_dir) / "config.json"
        _ = config_path.write_text(json.dumps({
            "catalog_url": str(games_path),
            "cache_path": str(Path(temp_dir) / "cache.json"),
        }), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_path), "--no-tui", "--genre", "Puzzle", "--log-level", "ERROR"])

        assert exc_info.value.code == 0
        assert (Path(temp_dir) / "cache.json").exists()

    out = capsys.readouterr().out
    assert "Puzzle Quest" in out
    assert "Space Raiders" not in out
