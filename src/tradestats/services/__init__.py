"""tradestats services package.

Services wrap the pure analytics library with I/O: the trade repository
supplies input and the reporting service assembles and exports reports.
Collaborators are injected through Protocol interfaces.
"""

from tradestats.services.trades import FileTradeRepository, InMemoryTradeRepository, ITradeRepository

__all__: list[str] = [
    "ITradeRepository",
    "InMemoryTradeRepository",
    "FileTradeRepository",
]
