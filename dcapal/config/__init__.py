"""Configuration package for the DCA Pal API service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
