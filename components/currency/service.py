"""
Currency formatting and conversion.

Pure functions over a fixed set of supported currencies. Conversion
goes through a rate provider; the default one holds a static table of
approximate rates and can be overridden from settings.
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from typing_extensions import TypedDict

logger = logging.getLogger(__name__)


class CurrencyInfo(TypedDict):
    code: str
    symbol: str
    name: str
    decimals: int


CURRENCIES: Dict[str, CurrencyInfo] = {
    "ARS": {"code": "ARS", "symbol": "$", "name": "Peso Argentino", "decimals": 0},
    "USD": {"code": "USD", "symbol": "US$", "name": "Dólar Estadounidense", "decimals": 2},
    "EUR": {"code": "EUR", "symbol": "€", "name": "Euro", "decimals": 2},
}

DEFAULT_CURRENCY = "ARS"

# Units of each currency per one USD (1 USD ~ 850 ARS, 1 EUR ~ 1.09 USD)
STATIC_UNITS_PER_USD: Dict[str, float] = {
    "ARS": 850.0,
    "USD": 1.0,
    "EUR": 1 / 1.09,
}


class RateProvider(Protocol):
    def rate(self, from_currency: str, to_currency: str) -> float:
        ...


class StaticRateProvider:
    """Rate provider backed by a units-per-USD lookup table."""

    def __init__(self, units_per_usd: Optional[Mapping[str, float]] = None) -> None:
        self.units_per_usd = dict(STATIC_UNITS_PER_USD)
        if units_per_usd:
            self.units_per_usd.update({code.upper(): float(value) for code, value in units_per_usd.items()})

    def rate(self, from_currency: str, to_currency: str) -> float:
        try:
            return self.units_per_usd[to_currency] / self.units_per_usd[from_currency]
        except KeyError:
            raise ValueError(f"No exchange rate for {from_currency} -> {to_currency}") from None


_default_provider: RateProvider = StaticRateProvider()


def set_rate_provider(provider: RateProvider) -> None:
    """Replace the process-wide default rate provider."""
    global _default_provider
    _default_provider = provider


def get_rate_provider() -> RateProvider:
    return _default_provider


def is_valid_currency(code: Optional[str]) -> bool:
    return code in CURRENCIES


def get_currency_info(code: str) -> Optional[CurrencyInfo]:
    return CURRENCIES.get(code)


def get_all_currencies() -> List[CurrencyInfo]:
    return list(CURRENCIES.values())


def _group(amount: float, decimals: int) -> str:
    # es-AR: "." groups thousands, "," separates decimals
    text = f"{abs(amount):,.{decimals}f}"
    return text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def format_amount(amount: float | Decimal, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount without its currency symbol."""
    info = CURRENCIES.get(currency)
    decimals = info["decimals"] if info else 2
    value = float(amount)
    sign = "-" if round(value, decimals) < 0 else ""
    return f"{sign}{_group(value, decimals)}"


def format_currency(amount: float | Decimal, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format an amount for display in its currency.

    ARS shows no decimals, USD and EUR show two. Unknown codes fall back
    to the code itself as the prefix.
    """
    info = CURRENCIES.get(currency)
    symbol = info["symbol"] if info else currency
    decimals = info["decimals"] if info else 2
    value = float(amount)
    sign = "-" if round(value, decimals) < 0 else ""
    return f"{sign}{symbol} {_group(value, decimals)}"


def convert_currency(
    amount: float | Decimal,
    from_currency: str,
    to_currency: str,
    provider: Optional[RateProvider] = None,
) -> float:
    """Convert an amount between currencies; identity when they match."""
    if from_currency == to_currency:
        return float(amount)
    rate = (provider or _default_provider).rate(from_currency, to_currency)
    return float(amount) * rate


class CurrencyAmount(TypedDict):
    amount: float
    currency: str


def normalize_amounts(
    amounts: Iterable[CurrencyAmount],
    base_currency: str = DEFAULT_CURRENCY,
    provider: Optional[RateProvider] = None,
) -> List[float]:
    """Convert each amount into the base currency."""
    return [
        convert_currency(item["amount"], item["currency"], base_currency, provider)
        for item in amounts
    ]


def calculate_total(
    amounts: Iterable[CurrencyAmount],
    base_currency: str = DEFAULT_CURRENCY,
    provider: Optional[RateProvider] = None,
) -> float:
    """Sum a mixed-currency collection in the base currency."""
    return sum(normalize_amounts(amounts, base_currency, provider))
