# egg_compare/sources/registry.py

"""Build the configured price sources, choosing live or mock per retailer."""

import importlib
import logging
from typing import Any

from egg_compare.config.settings import Settings
from egg_compare.errors import UpstreamUnavailable
from egg_compare.models.quote import RetailerQuote
from egg_compare.sources.base_source import PriceSource, QuoteBundle

logger = logging.getLogger("egg_compare.sources")


def _load_source_class(dotted_path: str) -> type[Any]:
    """Dynamically import a source class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def has_credentials(source: dict[str, str]) -> bool:
    """True when any credential named by the source entry is set."""
    names = [
        n.strip() for n in source.get("credentials", "").split(",")
        if n.strip()
    ]
    return any(getattr(Settings, name, "") for name in names)


class FallbackPriceSource(PriceSource):
    """Live source that falls back to its mock when upstream is down.

    Only ``UpstreamUnavailable`` triggers the fallback; an upstream that
    answers with no products is still reported as ``NoProductFound``.
    """

    mode = "live+mock"

    def __init__(
        self, primary: PriceSource, fallback: PriceSource,
    ) -> None:
        super().__init__(primary.retailer, primary.label)
        self.primary = primary
        self.fallback = fallback

    def fetch_quote(
        self, product_query: str, location: str,
    ) -> RetailerQuote:
        return self.collect(product_query, location).quote

    def collect(
        self, product_query: str, location: str,
    ) -> QuoteBundle:
        try:
            return self.primary.collect(product_query, location)
        except UpstreamUnavailable as exc:
            self.logger.warning(
                "[%s] Live source unavailable, using mock data: %s",
                self.retailer,
                exc,
            )
            return self.fallback.collect(product_query, location)


def build_source(source: dict[str, str]) -> PriceSource:
    """Instantiate the live or mock variant for one registry entry."""
    mock_cls = _load_source_class(source["mock"])
    if not has_credentials(source):
        logger.info(
            "No credentials for %s, using mock data", source["id"]
        )
        instance: PriceSource = mock_cls()
        return instance

    live: PriceSource = _load_source_class(source["live"])()
    if Settings.MOCK_FALLBACK:
        return FallbackPriceSource(live, mock_cls())
    return live


def build_sources(
    sources: list[dict[str, str]] | None = None,
) -> list[PriceSource]:
    """Build every registered source, in registry order."""
    entries = sources if sources is not None else Settings.AVAILABLE_SOURCES
    return [build_source(entry) for entry in entries]
