"""Exchange rate lookup for showing ledger amounts in a second currency.

Rates come from ``open.er-api.com`` (free, no API key). A fetched rate is
cached in local storage for five minutes. When a fetch fails the last known
rate is used even if it has expired; with no rate at all the conversion is
reported as unavailable (``None``). Nothing in here raises to the caller.
"""

from __future__ import annotations

import json
import time
import urllib.error
import urllib.request
from decimal import Decimal
from typing import Any, Callable, Optional

from banking_ledger.logging_setup import get_logger
from banking_ledger.repositories.base import KeyValueStore

CACHE_KEY = "exchange_rate_cache"
CACHE_SECONDS = 5 * 60
DEFAULT_RATE_URL = "https://open.er-api.com/v6/latest/EUR"
DEFAULT_TIMEOUT = 2.0

Fetcher = Callable[[str, float], dict]

logger = get_logger(__name__)


class ExchangeRateError(RuntimeError):
    """The rate API answered with an error or an unexpected body."""


def fetch_json(url: str, timeout: float) -> dict[str, Any]:
    """GET ``url`` and decode the JSON body."""

    req = urllib.request.Request(url, method="GET")
    req.add_header("Accept", "application/json")

    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise ExchangeRateError(f"API error: {e.code}") from e

    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ExchangeRateError("Invalid API response") from e


class ExchangeRateService:
    """Converts amounts from the ledger currency to one display currency.

    Parameters
    ----------
    store:
        Local storage holding the rate cache.
    target_currency:
        Currency code to read from the API's ``rates`` mapping.
    url:
        Rate endpoint; the base currency is part of the path.
    cache_seconds:
        How long a fetched rate counts as fresh.
    fetcher / clock:
        Injection points for tests; default to a urllib GET and ``time.time``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        target_currency: str = "KES",
        url: str = DEFAULT_RATE_URL,
        cache_seconds: int = CACHE_SECONDS,
        timeout: float = DEFAULT_TIMEOUT,
        fetcher: Optional[Fetcher] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.target_currency = target_currency
        self.url = url
        self.cache_seconds = cache_seconds
        self.timeout = timeout
        self._fetch = fetcher or fetch_json
        self._clock = clock

    def get_rate(self) -> Optional[Decimal]:
        """Return a fresh cached rate, a newly fetched one, or the last known one."""

        cached = self._read_cache()
        if cached is not None and self._is_fresh(cached["timestamp"]):
            return cached["rate"]

        try:
            rate = self._fetch_rate()
        except Exception as e:  # network, HTTP or payload problems are all non-fatal
            logger.warning("Exchange rate unavailable: %s", e)
            return cached["rate"] if cached is not None else None

        self._write_cache(rate)
        return rate

    def convert(self, amount: Decimal) -> Optional[Decimal]:
        """Amount in the display currency, or ``None`` when no rate is known."""

        rate = self.get_rate()
        if rate is None:
            return None
        return amount * rate

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fetch_rate(self) -> Decimal:
        data = self._fetch(self.url, self.timeout)
        rates = data.get("rates") or {}
        if data.get("result") != "success" or not rates.get(self.target_currency):
            raise ExchangeRateError("Invalid API response")
        return Decimal(str(rates[self.target_currency]))

    def _is_fresh(self, timestamp: float) -> bool:
        return self._clock() - timestamp < self.cache_seconds

    def _read_cache(self) -> Optional[dict[str, Any]]:
        try:
            raw = self.store.get(CACHE_KEY)
            if raw is None:
                return None
            data = json.loads(raw)
            return {"rate": Decimal(str(data["rate"])), "timestamp": float(data["timestamp"])}
        except Exception as e:
            logger.warning("Ignoring unreadable exchange rate cache: %s", e)
            return None

    def _write_cache(self, rate: Decimal) -> None:
        try:
            self.store.set(CACHE_KEY, json.dumps({"rate": str(rate), "timestamp": self._clock()}))
        except Exception as e:
            logger.warning("Could not cache exchange rate: %s", e)
