from reportdesk.config import get_settings
from reportdesk.integrations.prices.base import PriceProvider
from reportdesk.integrations.prices.factory import get_price_provider


def get_prices() -> PriceProvider:
    """Price provider configured for this deployment."""
    return get_price_provider(get_settings().price_provider)
