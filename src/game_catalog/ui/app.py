"""Main Textual application with screen management."""

from typing import TYPE_CHECKING, ClassVar

from typing_extensions import override

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.screen import Screen
from textual.widgets import Footer, Header

import structlog

if TYPE_CHECKING:
    from ..main import ApplicationContext

log = structlog.stdlib.get_logger()


class CatalogApp(App[None]):
    """Terminal front end for browsing and searching the game catalog."""

    CSS: ClassVar[str] = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True, priority=True),
        Binding("escape", "go_back", "Back", show=True),
        Binding("?", "show_help", "Help", show=True),
    ]

    _navigation_stack: list[str]

    def __init__(self, context: "ApplicationContext") -> None:
        """Initialize the application.

        Args:
            context: Application context providing the search pipeline and services
        """
        super().__init__()
        self.title = "Game Catalog"  # type: ignore[assignment]
        self.sub_title = "Browse and search games"  # type: ignore[assignment]
        self.app_context = context
        self._navigation_stack = []
        log.info("CatalogApp initialized")

    @property
    def navigation_stack(self) -> list[str]:
        """A copy of the names of the screens pushed so far."""
        return self._navigation_stack.copy()

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        await self.push_screen_with_tracking("catalog")

    async def push_screen_with_tracking(self, screen_name: str, screen: Screen[None] | None = None) -> None:
        """Push a screen by registered name, or a ready-made instance under that name."""
        from .screens import get_screen_by_name

        target = screen or get_screen_by_name(screen_name)
        if target is None:
            log.warning("Unknown screen requested", screen=screen_name)
            return
        self._navigation_stack.append(screen_name)
        await self.push_screen(target)
        log.info("Screen pushed", screen=screen_name, stack_depth=len(self._navigation_stack))

    async def action_go_back(self) -> None:
        if len(self._navigation_stack) > 1:
            current = self._navigation_stack.pop()
            log.info("Navigating back", from_screen=current, stack_depth=len(self._navigation_stack))
            _ = self.pop_screen()
        else:
            log.debug("Already at root screen, cannot go back")

    async def action_show_help(self) -> None:
        self.notify("Type to search, 'r' to reload the catalog, Enter for details, 'q' to quit")
