"""Configuration module."""

from .settings import LoaderSettings, ParserSettings, Settings, get_settings

__all__ = ["LoaderSettings", "ParserSettings", "Settings", "get_settings"]
