"""Data models for the game catalog."""

from .config import AppConfig
from .cache import CacheRecord
from .game import DownloadLink, GameEntry, SystemRequirements
from .query import QueryState, SortField, SortOrder

__all__ = [
    "AppConfig",
    "CacheRecord",
    "DownloadLink",
    "GameEntry",
    "QueryState",
    "SortField",
    "SortOrder",
    "SystemRequirements",
]
