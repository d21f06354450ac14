"""Game catalog: load, cache and search a catalog of browser games."""

__version__ = "0.1.0"
