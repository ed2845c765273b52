"""Trade repository interface definition.

The analytics engine never touches storage directly. Report generation
depends on this Protocol so any store (database, file, in-memory fixture)
can be injected.
"""

from datetime import date
from typing import List, Protocol

from tradestats.libraries.analytics.models import Trade

__all__ = ["ITradeRepository", "TradeRepositoryError"]


class TradeRepositoryError(Exception):
    """Trades could not be read from the underlying store."""


class ITradeRepository(Protocol):
    """
    Source of executed trades.

    Responsibilities:
    - Return trades inside an inclusive date range
    - Return the whole trade history

    Does NOT:
    - Guarantee ordering (analyzers sort where order matters)
    - Compute statistics

    Examples:
        >>> repo: ITradeRepository = FileTradeRepository("data/trades.csv")
        >>> trades = repo.get_trades_by_date_range(date(2025, 1, 1), date(2025, 3, 31))
    """

    def get_trades_by_date_range(self, start: date, end: date) -> List[Trade]:
        """
        Get trades executed between start and end (both inclusive).

        Raises:
            TradeRepositoryError: If the store cannot be read
        """
        ...

    def get_all_trades(self) -> List[Trade]:
        """Get every stored trade."""
        ...
