"""Catalog screen: debounced search, filters and a paginated game table."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

from typing_extensions import override

from textual.app import ComposeResult
from textual.binding import Binding, BindingType
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Select, Static

import structlog
from rich.text import Text

from ...models.game import GameEntry
from ...models.query import ALL_GENRES, QueryState, SortField, SortOrder
from ...services.debounce import Debouncer
from ...services.errors import AppError

from .base import BaseScreen

log = structlog.stdlib.get_logger()

RELEVANCE = "relevance"

SORT_OPTIONS: list[tuple[str, str]] = [
    ("Best match", RELEVANCE),
    ("Rating (high to low)", "rating:desc"),
    ("Rating (low to high)", "rating:asc"),
    ("Title (A-Z)", "title:asc"),
    ("Title (Z-A)", "title:desc"),
    ("Newest first", "releaseDate:desc"),
    ("Oldest first", "releaseDate:asc"),
    ("Most reviewed", "reviewCount:desc"),
]

RATING_OPTIONS: list[tuple[str, str]] = [
    ("Any rating", ""),
    ("3+ stars", "3"),
    ("4+ stars", "4"),
    ("4.5+ stars", "4.5"),
]


@dataclass(frozen=True)
class Page:
    """One page of results."""
    items: list[GameEntry]
    page: int
    total_pages: int
    total: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(entries: Sequence[GameEntry], page: int, page_size: int) -> Page:
    """Slice ``entries`` into a page, clamping ``page`` into the valid range.

    An empty list yields a single empty page.
    """
    total_pages = max(1, math.ceil(len(entries) / page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(entries[start:start + page_size]),
        page=page,
        total_pages=total_pages,
        total=len(entries),
    )


def parse_sort_choice(choice: str) -> tuple[SortField | None, SortOrder]:
    """Turn a sort select value like ``rating:desc`` into pipeline sort settings."""
    if not choice or choice == RELEVANCE:
        return None, SortOrder.DESCENDING
    field_value, _, order_value = choice.partition(":")
    query = QueryState.from_filters(sort_by=field_value, sort_order=order_value or None)
    return query.sort_by, query.sort_order


def build_summary(result_count: int, query: QueryState) -> str:
    """Describe the current result set, e.g. ``Showing 3 games matching "space" in Action``."""
    noun = "game" if result_count == 1 else "games"
    text = f"Showing {result_count} {noun}"
    filters = []
    if query.has_text:
        filters.append(f'matching "{query.search_text.strip()}"')
    if query.has_genre_filter:
        filters.append(f"in {query.genre}")
    if query.min_rating is not None:
        filters.append(f"rated {query.min_rating:g}+")
    if filters:
        text += " " + " ".join(filters)
    return text


class CatalogScreen(BaseScreen):
    """Searchable, filterable and paginated list of catalog games."""

    SCREEN_TITLE: ClassVar[str] = "Game Catalog"
    SCREEN_NAME: ClassVar[str] = "catalog"

    CSS: ClassVar[str] = """
    #catalog-container {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }

    #filter-row {
        height: 3;
    }

    #search-input {
        width: 2fr;
    }

    #genre-select, #rating-select, #sort-select {
        width: 1fr;
        margin-left: 1;
    }

    #summary {
        color: $text-muted;
        margin: 1 0;
    }

    #games-table {
        height: 1fr;
    }

    #status-message {
        text-align: center;
        color: $text-muted;
        padding: 2;
        display: none;
    }

    #status-message.visible {
        display: block;
    }

    #pagination-row {
        height: auto;
        align: center middle;
    }

    #page-label {
        width: auto;
        margin: 1 2;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("f", "focus_search", "Search", show=True),
        Binding("r", "refresh_catalog", "Reload", show=True),
        Binding("[", "previous_page", "Prev page", show=True),
        Binding("]", "next_page", "Next page", show=True),
    ]

    _search_results: list[GameEntry]
    _current_page: int
    _load_failed: bool
    _debouncer: Debouncer | None

    def __init__(self) -> None:
        super().__init__()
        self._search_results = []
        self._current_page = 1
        self._load_failed = False
        self._debouncer = None

    @override
    def compose(self) -> ComposeResult:
        with Container(id="catalog-container"):
            yield self.create_title_widget()
            with Horizontal(id="filter-row"):
                yield Input(placeholder="Search games...", id="search-input")
                yield Select([("All genres", ALL_GENRES)], value=ALL_GENRES, allow_blank=False, id="genre-select")
                yield Select(RATING_OPTIONS, value="", allow_blank=False, id="rating-select")
                yield Select(SORT_OPTIONS, value=RELEVANCE, allow_blank=False, id="sort-select")
            yield Static("Loading catalog...", id="summary", markup=False)
            yield DataTable(id="games-table")
            yield Static("", id="status-message")
            with Vertical(id="pagination-row"):
                with Horizontal():
                    yield Button("Previous", id="btn-previous", disabled=True)
                    yield Static("Page 1 of 1", id="page-label")
                    yield Button("Next", id="btn-next", disabled=True)

    @override
    async def on_mount(self) -> None:
        await super().on_mount()
        table = self.query_one("#games-table", DataTable)
        table.add_columns("Title", "Genre", "Rating", "Reviews", "Released")
        table.cursor_type = "row"
        self._debouncer = self.app_context.create_debouncer(self._on_search_settled)
        self.run_worker(self._load_catalog(refresh=False), exclusive=True, group="catalog")

    @override
    async def on_unmount(self) -> None:
        if self._debouncer is not None:
            self._debouncer.cancel()
        await super().on_unmount()

    def current_query(self) -> QueryState:
        """Build the query from the current widget values."""
        search_text = self.query_one("#search-input", Input).value
        genre = self.query_one("#genre-select", Select).value
        rating = self.query_one("#rating-select", Select).value
        sort_choice = self.query_one("#sort-select", Select).value
        sort_by, sort_order = parse_sort_choice(sort_choice if isinstance(sort_choice, str) else RELEVANCE)
        return QueryState.from_filters(
            search_text=search_text,
            genre=genre if isinstance(genre, str) else ALL_GENRES,
            min_rating=rating if isinstance(rating, str) else None,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    async def _load_catalog(self, refresh: bool) -> None:
        """Load (or reload) the catalog, then populate filters and results."""
        pipeline = self.app_context.pipeline
        try:
            if refresh:
                await pipeline.refresh()
            genres = await pipeline.get_genres()
        except AppError as e:
            self.handle_exception(e, operation="refresh_catalog" if refresh else "load_catalog")
            if not self.app_context.loader.is_loaded:
                self._load_failed = True
                self._show_status("Failed to load games. Press 'r' to try again.")
                self.query_one("#summary", Static).update("")
            # A failed refresh keeps the catalog that is already on screen
            return

        self._load_failed = False
        genre_select = self.query_one("#genre-select", Select)
        genre_select.set_options([("All genres", ALL_GENRES)] + [(genre, genre) for genre in genres])
        if refresh:
            self.notify_success("Catalog reloaded")
        await self._run_search()

    async def _run_search(self) -> None:
        query = self.current_query()
        try:
            self._search_results = await self.app_context.pipeline.search(query)
        except AppError as e:
            self.handle_exception(e, operation="search")
            return
        self._current_page = 1
        self._render_results(query)

    def _on_search_settled(self, _value: str) -> None:
        self.run_worker(self._run_search(), exclusive=True, group="search")

    def _render_results(self, query: QueryState | None = None) -> None:
        page = paginate(self._search_results, self._current_page, self.app_context.config.page_size)
        self._current_page = page.page

        table = self.query_one("#games-table", DataTable)
        table.clear()
        for entry in page.items:
            table.add_row(
                Text(entry.title[:40]),
                Text(entry.genre_string),
                f"{entry.rating:.1f}",
                str(entry.review_count),
                entry.release_date.isoformat() if entry.release_date else "-",
                key=entry.id,
            )

        if query is not None:
            self.query_one("#summary", Static).update(build_summary(page.total, query))
        self.query_one("#page-label", Static).update(f"Page {page.page} of {page.total_pages}")
        self.query_one("#btn-previous", Button).disabled = not page.has_previous
        self.query_one("#btn-next", Button).disabled = not page.has_next

        if page.total == 0:
            self._show_status("No games match your search criteria. Try different filters.")
        else:
            self._hide_status()

    def _show_status(self, message: str) -> None:
        status = self.query_one("#status-message", Static)
        status.update(message)
        _ = status.add_class("visible")
        self.query_one("#games-table", DataTable).display = False

    def _hide_status(self) -> None:
        _ = self.query_one("#status-message", Static).remove_class("visible")
        self.query_one("#games-table", DataTable).display = True

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input" and self._debouncer is not None:
            self._debouncer.execute(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search-input":
            if self._debouncer is not None:
                self._debouncer.cancel()
            self.run_worker(self._run_search(), exclusive=True, group="search")

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id in ("genre-select", "rating-select", "sort-select") and self.app_context.loader.is_loaded:
            self.run_worker(self._run_search(), exclusive=True, group="search")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-previous":
            self.action_previous_page()
        elif event.button.id == "btn-next":
            self.action_next_page()

    async def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key is None or event.row_key.value is None:
            return
        entry = await self.app_context.pipeline.get_by_id(str(event.row_key.value))
        if entry is None:
            log.warning("Selected game not found", game_id=event.row_key.value)
            return

        from .detail import GameDetailScreen

        await self.catalog_app.push_screen_with_tracking(GameDetailScreen.SCREEN_NAME, GameDetailScreen(entry))

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_refresh_catalog(self) -> None:
        # After a failed first load there is nothing cached to bypass, so a plain load is enough
        self.run_worker(self._load_catalog(refresh=not self._load_failed), exclusive=True, group="catalog")

    def action_previous_page(self) -> None:
        if self._current_page > 1:
            self._current_page -= 1
            self._render_results()

    def action_next_page(self) -> None:
        self._current_page += 1
        self._render_results()
