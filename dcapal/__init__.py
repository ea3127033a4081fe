"""DCA Pal market data and portfolio import API."""

__version__ = "0.1.0"

__all__ = ["__version__"]
