# egg_compare/sources/base_source.py

"""Abstract base classes for all retailer price sources."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from curl_cffi import requests as curl_requests

from egg_compare.config.settings import Settings
from egg_compare.errors import UpstreamUnavailable
from egg_compare.models.quote import InventoryStatus, RawOffer, RetailerQuote


@dataclass
class QuoteBundle:
    """Everything one source produced for a single comparison request."""

    quote: RetailerQuote
    raw_offers: list[RawOffer] = field(
        default_factory=lambda: list[RawOffer]()
    )
    inventory: InventoryStatus | None = None
    offers_degraded: bool = False


class PriceSource(ABC):
    """Abstract base class for every retailer price source.

    ``fetch_quote`` failures are fatal to the retailer. Failures of the
    offer and inventory sub-fetches are absorbed by :meth:`collect`.
    """

    mode: str = "live"

    def __init__(self, retailer: str, label: str) -> None:
        self.retailer = retailer
        self.label = label
        self.logger = logging.getLogger(f"egg_compare.{retailer}")
        self.settings = Settings()

    @abstractmethod
    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        """Fetch the retailer's price report for *location*.

        Raises ``UpstreamUnavailable`` or ``NoProductFound``.
        """
        ...

    def fetch_offers(self, sku: str) -> list[RawOffer]:
        """Fetch extra digital offers for *sku*. None by default."""
        return []

    def fetch_inventory(
        self, sku: str, location: str,
    ) -> InventoryStatus | None:
        """Fetch store inventory for *sku*; ``None`` when unsupported."""
        return None

    def collect(
        self, product_query: str, location: str,
    ) -> QuoteBundle:
        """Fetch the quote, then its offers and inventory.

        Only the quote fetch may raise. A failed offer fetch yields no
        extra offers and flags the bundle as degraded; a failed inventory
        fetch leaves ``inventory`` unset.
        """
        quote = self.fetch_quote(product_query, location)
        bundle = QuoteBundle(
            quote=quote, raw_offers=list(quote.raw_offers),
        )
        if not quote.sku:
            return bundle

        try:
            bundle.raw_offers.extend(self.fetch_offers(quote.sku))
        except Exception as exc:
            self.logger.warning(
                "[%s] Digital offers fetch failed: %s",
                self.retailer,
                exc,
                exc_info=True,
            )
            bundle.offers_degraded = True

        try:
            bundle.inventory = self.fetch_inventory(quote.sku, location)
        except Exception as exc:
            self.logger.warning(
                "[%s] Inventory check failed: %s",
                self.retailer,
                exc,
                exc_info=True,
            )
        return bundle


class HttpPriceSource(PriceSource):
    """Price source backed by a JSON HTTP API via ``curl_cffi``."""

    def __init__(self, retailer: str, label: str) -> None:
        super().__init__(retailer, label)
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _fetch_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> curl_requests.Response | None:
        """GET with retries on network errors, 429 and 5xx.

        Returns the last response received (any status), or ``None``
        when every attempt raised.
        """
        merged = {**self.settings.DEFAULT_HEADERS, **(headers or {})}
        resp: curl_requests.Response | None = None
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    params=params,
                    headers=merged,
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.retailer,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))
                continue

            if resp.status_code == 200:
                return resp
            self.logger.warning(
                "[%s] HTTP %d on attempt %d",
                self.retailer,
                resp.status_code,
                attempt + 1,
            )
            if resp.status_code != 429 and resp.status_code < 500:
                return resp
            time.sleep(self.settings.REQUEST_DELAY * (attempt + 1))
        return resp

    def _get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """GET *url* and decode a JSON object body.

        Raises ``UpstreamUnavailable`` on transport errors, non-200
        statuses and undecodable bodies.
        """
        resp = self._fetch_get(url, params=params, headers=headers)
        if resp is None:
            raise UpstreamUnavailable(self.retailer, "request failed")
        if resp.status_code != 200:
            raise UpstreamUnavailable(
                self.retailer,
                f"API returned status {resp.status_code}: "
                f"{resp.text[:200]}",
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamUnavailable(
                self.retailer, f"failed to parse response: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamUnavailable(
                self.retailer, "unexpected response shape"
            )
        return data

    @abstractmethod
    def _get_homepage(self) -> str:
        """Return the URL probed by the health checker."""
        ...

    @staticmethod
    def positive_or_none(value: Any) -> float | None:
        """Read a provider number where zero or junk means "absent"."""
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if number > 0 else None
