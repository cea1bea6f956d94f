"""Price provider factory."""

from reportdesk.integrations.prices.base import PriceProvider


def get_price_provider(source: str = "yahoo") -> PriceProvider:
    """Create a price provider instance.

    Args:
        source: Provider name (only "yahoo" is supported)
    """
    if source == "yahoo":
        from reportdesk.integrations.prices.yahoo_provider import YahooPriceProvider
        return YahooPriceProvider()
    raise ValueError(f"Unknown price source: {source}. Supported: 'yahoo'")
