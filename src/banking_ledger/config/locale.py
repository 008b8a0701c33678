from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

from banking_ledger.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LocaleConfig:
    """How amounts and dates are rendered for one locale"""
    locale: str
    currency: str
    decimal_sep: str = "."
    thousands_sep: str = ","
    date_format: str = "%Y-%m-%d"

    def format_number(self, amount: Decimal) -> str:
        """Two decimals with this locale's separators, e.g. '1.234,56'"""
        text = f"{amount:,.2f}"
        return text.replace(",", "\0").replace(".", self.decimal_sep).replace("\0", self.thousands_sep)

    def format_currency(self, amount: Decimal, currency: Optional[str] = None) -> str:
        return f"{self.format_number(amount)} {currency or self.currency}"


# Default to German since that's the main market
DEFAULT_LOCALE = LocaleConfig(
    locale="de-DE",
    currency="EUR",
    decimal_sep=",",
    thousands_sep=".",
    date_format="%d.%m.%Y",
)

SUPPORTED_LOCALES: Dict[str, LocaleConfig] = {
    "de-DE": DEFAULT_LOCALE,
    "en-US": LocaleConfig(locale="en-US", currency="USD", date_format="%m/%d/%Y"),
    "en-GB": LocaleConfig(locale="en-GB", currency="GBP", date_format="%d/%m/%Y"),
    "fr-FR": LocaleConfig(
        locale="fr-FR",
        currency="EUR",
        decimal_sep=",",
        thousands_sep=" ",
        date_format="%d/%m/%Y",
    ),
}


class LocaleRegistry:
    """
    Holds the active locale.

    Unknown locale keys fall back to the default locale instead of failing.
    """

    def __init__(self, locale_key: Optional[str] = None):
        self._current = DEFAULT_LOCALE
        if locale_key:
            self.set_locale(locale_key)

    @property
    def current(self) -> LocaleConfig:
        return self._current

    def set_locale(self, key: str) -> LocaleConfig:
        """
        Switch to a supported locale.

        Args:
            key: Locale key such as 'en-US'

        Returns:
            The locale now in effect
        """
        loc = SUPPORTED_LOCALES.get(key)
        if loc is None:
            logger.warning("Locale '%s' not supported. Using default.", key)
            loc = DEFAULT_LOCALE
        self._current = loc
        return loc

    def set_custom_locale(self, config: LocaleConfig) -> None:
        """Use a locale that isn't in SUPPORTED_LOCALES"""
        self._current = config
