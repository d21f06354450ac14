"""Base screen class with common functionality for all screens."""

from typing import TYPE_CHECKING, Any, ClassVar

from textual.binding import Binding, BindingType
from textual.screen import Screen
from textual.widgets import Static

import structlog

from ...services.errors import ErrorSeverity, UserFriendlyError

if TYPE_CHECKING:
    from ...main import ApplicationContext
    from ..app import CatalogApp

log = structlog.stdlib.get_logger()


class BaseScreen(Screen[None]):
    """Base screen providing navigation, notifications and error reporting.

    Subclasses override compose() for their layout and may override
    on_screen_resume() / on_screen_suspend() for transition handling.
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    SCREEN_TITLE: ClassVar[str] = "Screen"
    SCREEN_NAME: ClassVar[str] = "base"

    _is_active: bool

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name or self.SCREEN_NAME)
        self._is_active = False

    @property
    def catalog_app(self) -> "CatalogApp":
        """The parent CatalogApp.

        Raises:
            RuntimeError: If the screen is not attached to a CatalogApp
        """
        from ..app import CatalogApp

        if isinstance(self.app, CatalogApp):
            return self.app
        raise RuntimeError("Screen is not attached to a CatalogApp")

    @property
    def app_context(self) -> "ApplicationContext":
        return self.catalog_app.app_context

    @property
    def screen_is_active(self) -> bool:
        return self._is_active

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME, title=self.SCREEN_TITLE)
        self._is_active = True

    async def on_unmount(self) -> None:
        log.info("Screen unmounted", screen=self.SCREEN_NAME)
        self._is_active = False

    def on_screen_resume(self) -> None:
        log.debug("Screen resumed", screen=self.SCREEN_NAME)
        self._is_active = True

    def on_screen_suspend(self) -> None:
        log.debug("Screen suspended", screen=self.SCREEN_NAME)
        self._is_active = False

    async def action_go_back(self) -> None:
        await self.catalog_app.action_go_back()

    def create_title_widget(self, title: str | None = None) -> Static:
        return Static(title or self.SCREEN_TITLE, classes="title", markup=False)

    def notify_error(self, message: str) -> None:
        self.notify(message, severity="error")
        log.error("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_success(self, message: str) -> None:
        self.notify(message, severity="information")
        log.info("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_warning(self, message: str) -> None:
        self.notify(message, severity="warning")
        log.warning("User notification", message=message, screen=self.SCREEN_NAME)

    def handle_exception(
        self,
        error: Exception,
        operation: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Report an exception through the error service and notify the user.

        Returns:
            The user-friendly error, for screens that render it themselves
        """
        error_service = self.app_context.error_service
        user_error = error_service.handle_error(
            error=error,
            operation=operation,
            component=self.SCREEN_NAME,
            context=context,
        )
        message = error_service.create_user_message(user_error, include_suggestions=False)

        if user_error.severity == ErrorSeverity.WARNING:
            self.notify_warning(message)
        else:
            self.notify_error(message)

        return user_error
