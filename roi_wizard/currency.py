import logging
from enum import Enum
from typing import Dict, Optional, Union

import numpy as np

from roi_wizard.errors import CurrencyConversionError

logger = logging.getLogger(__name__)


class Currency(Enum):
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    AUD = "AUD"


SYMBOLS = {
    Currency.EUR: "€",
    Currency.USD: "$",
    Currency.GBP: "£",
    Currency.AUD: "A$",
}

NOT_APPLICABLE = "not applicable"


def parse_currency(value: Union[str, Currency]) -> Currency:
    if isinstance(value, Currency):
        return value
    try:
        return Currency(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Unknown currency: {value!r}") from None


def symbol(currency: Currency) -> str:
    return SYMBOLS[currency]


def round_half_up(amount: float) -> int:
    # round() is banker's rounding; display always rounds .5 up
    return int(np.floor(float(amount) + 0.5))


def format_money(amount: float, currency: Currency) -> str:
    """Whole-unit money string, e.g. ``format_money(1234.6, Currency.EUR) -> '€1,235'``."""
    whole = round_half_up(amount)
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol(currency)}{abs(whole):,}"


def format_percent(fraction: float) -> str:
    return f"{fraction*100:.0f}%"


def format_months(months: Optional[float]) -> str:
    if months is None:
        return NOT_APPLICABLE
    return f"{months:.1f} mo"


def convert(amount: float, source: Currency, target: Currency, rates: Dict[Currency, float]) -> float:
    """Convert ``amount`` using ``rates`` (units of each currency per one base unit)."""
    if source == target:
        return float(amount)
    for cur in (source, target):
        if cur not in rates:
            raise CurrencyConversionError(f"No exchange rate for {cur.value}")
    converted = float(amount) / rates[source] * rates[target]
    logger.debug("converted %s %s -> %s %s", amount, source.value, round(converted, 2), target.value)
    return converted
