"""
tradestats - Trading Performance Analytics

Turns executed-trade records into a structured performance report.
"""

from importlib.metadata import version

try:
    __version__ = version("tradestats")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
