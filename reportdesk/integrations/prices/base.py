"""Abstract base class for realized price providers."""

from abc import ABC, abstractmethod
from datetime import date

from reportdesk.analysis.accuracy.comparator import RealizedRange


class PriceProvider(ABC):
    """Daily OHLC lookup used to score forecasts after the fact."""

    @abstractmethod
    def get_daily_range(self, symbol: str, day: date) -> RealizedRange | None:
        """Realized open/high/low/close for ``symbol`` on ``day``.

        Returns None when the market was closed or no bar is available yet.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        ...
