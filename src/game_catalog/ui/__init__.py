"""User interface components using Textual framework."""

from .app import CatalogApp
from .screens import (
    BaseScreen,
    CatalogScreen,
    GameDetailScreen,
    get_registered_screens,
    get_screen_by_name,
    register_screen,
)

__all__ = [
    "BaseScreen",
    "CatalogApp",
    "CatalogScreen",
    "GameDetailScreen",
    "get_registered_screens",
    "get_screen_by_name",
    "register_screen",
]
