"""Tests for UI helpers, the screen registry and navigation."""

from pathlib import Path

from hypothesis import given, strategies as st
from rich.text import Span

from game_catalog.main import ApplicationContext
from game_catalog.models import AppConfig, GameEntry, QueryState, SortField, SortOrder
from game_catalog.ui.app import CatalogApp
from game_catalog.ui.screens import (
    CatalogScreen,
    get_registered_screens,
    get_screen_by_name,
    register_screen,
)
from game_catalog.ui.screens.catalog import (
    RELEVANCE,
    SORT_OPTIONS,
    build_summary,
    paginate,
    parse_sort_choice,
)
from game_catalog.ui.screens.detail import detail_row_text, render_details


def make_entries(count: int) -> list[GameEntry]:
    return [GameEntry(id=f"g{index}", title=f"Game {index}") for index in range(count)]


class TestPagination:
    @given(
        count=st.integers(min_value=0, max_value=200),
        page=st.integers(min_value=-5, max_value=30),
        page_size=st.integers(min_value=1, max_value=50),
    )
    def test_pages_cover_results(self, count: int, page: int, page_size: int) -> None:
        """**Feature: game-catalog, Property 10: Pagination stays in range**"""
        entries = make_entries(count)

        result = paginate(entries, page, page_size)

        assert 1 <= result.page <= result.total_pages
        assert len(result.items) <= page_size
        assert result.total == count
        if count:
            assert result.items
            first_index = (result.page - 1) * page_size
            assert result.items[0] is entries[first_index]

    def test_empty_results_have_one_page(self) -> None:
        result = paginate([], 1, 20)

        assert result.items == []
        assert result.total_pages == 1
        assert not result.has_previous
        assert not result.has_next

    def test_middle_page(self) -> None:
        result = paginate(make_entries(45), 2, 20)

        assert [entry.id for entry in result.items][0] == "g20"
        assert len(result.items) == 20
        assert result.total_pages == 3
        assert result.has_previous
        assert result.has_next

    def test_page_past_end_is_clamped(self) -> None:
        result = paginate(make_entries(45), 9, 20)

        assert result.page == 3
        assert len(result.items) == 5


class TestSortChoice:
    def test_relevance_means_no_explicit_sort(self) -> None:
        assert parse_sort_choice(RELEVANCE) == (None, SortOrder.DESCENDING)
        assert parse_sort_choice("") == (None, SortOrder.DESCENDING)

    def test_field_and_order(self) -> None:
        assert parse_sort_choice("releaseDate:asc") == (SortField.RELEASE_DATE, SortOrder.ASCENDING)
        assert parse_sort_choice("rating") == (SortField.RATING, SortOrder.DESCENDING)

    def test_every_option_parses(self) -> None:
        for _, value in SORT_OPTIONS:
            sort_by, sort_order = parse_sort_choice(value)
            assert isinstance(sort_order, SortOrder)
            assert sort_by is None or isinstance(sort_by, SortField)


class TestSummary:
    def test_plain_count(self) -> None:
        assert build_summary(12, QueryState()) == "Showing 12 games"

    def test_singular(self) -> None:
        assert build_summary(1, QueryState()) == "Showing 1 game"

    def test_with_filters(self) -> None:
        query = QueryState(search_text=" space ", genre="Action", min_rating=4.0)

        assert build_summary(3, query) == 'Showing 3 games matching "space" in Action rated 4+'


class TestDetailRows:
    def test_minimal_entry(self) -> None:
        rows = dict(render_details(GameEntry(id="g1", title="Bare")))

        assert rows == {"Rating": "0/5 (0 reviews)", "Genre": "-", "Released": "Unknown"}

    def test_full_entry(self) -> None:
        entry = GameEntry.from_raw({
            "id": "g1",
            "title": "Full",
            "developer": "Nova",
            "tags": ["retro"],
            "downloadLinks": [{"platform": "Linux", "url": "https://example.com/full.tar.gz"}],
            "screenshots": ["a.jpg", "b.jpg"],
        })

        rows = dict(render_details(entry))

        assert rows["Developer"] == "Nova"
        assert rows["Tags"] == "retro"
        assert rows["Download (Linux)"] == "https://example.com/full.tar.gz"
        assert rows["Screenshots"] == "2"

    def test_row_values_are_not_markup(self) -> None:
        value = "Studio [/x] [b]beta[/b]"

        text = detail_row_text("Developer", value)

        assert text.plain == f"Developer: {value}"
        assert text.spans == [Span(0, len("Developer: "), "bold")]


class TestScreenRegistry:
    def test_catalog_is_registered(self) -> None:
        assert isinstance(get_screen_by_name("catalog"), CatalogScreen)
        assert "catalog" in get_registered_screens()

    def test_unknown_screen_returns_none(self) -> None:
        assert get_screen_by_name("nonexistent_screen") is None

    def test_register_screen(self) -> None:
        register_screen("catalog_copy", CatalogScreen)

        assert "catalog_copy" in get_registered_screens()
        assert isinstance(get_screen_by_name("catalog_copy"), CatalogScreen)


class TestNavigationStack:
    @staticmethod
    def _app() -> CatalogApp:
        config = AppConfig(catalog_url="data/games.json", cache_path=Path("cache.json"))
        return CatalogApp(context=ApplicationContext(config=config))

    def test_app_starts_with_empty_navigation_stack(self) -> None:
        assert self._app().navigation_stack == []

    def test_navigation_stack_is_copy(self) -> None:
        app = self._app()
        stack = app.navigation_stack

        stack.append("test")

        assert "test" not in app.navigation_stack

    def test_app_keeps_its_context(self) -> None:
        app = self._app()

        assert app.app_context.config.catalog_url == "data/games.json"
