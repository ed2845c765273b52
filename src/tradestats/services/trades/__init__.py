"""Trade repository service: the engine's only source of input data."""

from tradestats.services.trades.interface import ITradeRepository, TradeRepositoryError
from tradestats.services.trades.repository import FileTradeRepository, InMemoryTradeRepository

__all__ = [
    "ITradeRepository",
    "TradeRepositoryError",
    "InMemoryTradeRepository",
    "FileTradeRepository",
]
