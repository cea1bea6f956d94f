"""Yahoo Finance price provider using yfinance."""

import logging
from datetime import date, timedelta

import pandas as pd
import yfinance as yf

from reportdesk.analysis.accuracy.comparator import RealizedRange
from reportdesk.core.metrics import PRICE_FETCHES
from reportdesk.integrations.prices.base import PriceProvider

logger = logging.getLogger(__name__)

_EXPECTED = ["open", "high", "low", "close"]


class YahooPriceProvider(PriceProvider):
    """Yahoo Finance daily bars (no credentials required)."""

    def get_daily_bars(self, symbol: str, start: date, end: date) -> pd.DataFrame:
        """Daily OHLC bars for ``start`` through ``end`` inclusive."""
        logger.info(f"Fetching {symbol} from Yahoo Finance: {start} to {end}")

        df = yf.download(
            symbol,
            start=start.isoformat(),
            end=(end + timedelta(days=1)).isoformat(),
            interval="1d",
            auto_adjust=False,
            progress=False,
        )

        if df.empty:
            logger.warning(f"No data returned for {symbol}")
            return pd.DataFrame()

        # Standardize column names to lowercase
        df.columns = [c.lower() if isinstance(c, str) else c[0].lower() for c in df.columns]

        for col in _EXPECTED:
            if col not in df.columns:
                logger.warning(f"Missing column {col} in Yahoo data for {symbol}")
                return pd.DataFrame()

        df = df[_EXPECTED]
        df.index = pd.to_datetime(df.index).date
        df.index.name = "date"
        return df.dropna()

    def get_daily_range(self, symbol: str, day: date) -> RealizedRange | None:
        try:
            bars = self.get_daily_bars(symbol, day, day)
        except Exception as e:
            PRICE_FETCHES.labels(provider=self.name, status="error").inc()
            logger.warning(f"Failed to fetch {symbol} for {day}: {e}")
            return None

        if bars.empty or day not in bars.index:
            PRICE_FETCHES.labels(provider=self.name, status="missing").inc()
            return None

        row = bars.loc[day]
        PRICE_FETCHES.labels(provider=self.name, status="ok").inc()
        return RealizedRange(
            high=float(row["high"]),
            low=float(row["low"]),
            open=float(row["open"]),
            close=float(row["close"]),
        )

    @property
    def name(self) -> str:
        return "yahoo"
