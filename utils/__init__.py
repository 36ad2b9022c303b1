"""
Utility modules for the valuation service.
"""

from .formatting import format_currency, format_percent, format_price_compact, format_area
from .config import Config
from .logging_setup import configure_logging

__all__ = [
    "format_currency",
    "format_percent",
    "format_price_compact",
    "format_area",
    "Config",
    "configure_logging",
]
