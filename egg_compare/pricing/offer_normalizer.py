# egg_compare/pricing/offer_normalizer.py

"""Offer normalisation: provider discount shapes to canonical offers."""

import logging
from collections.abc import Iterable
from datetime import datetime

from egg_compare.models.offer import Offer
from egg_compare.models.quote import RawOffer

logger = logging.getLogger("egg_compare.pricing")


class OfferNormalizer:
    """Map raw provider offers onto the canonical ``Offer`` shape."""

    @staticmethod
    def _parse_expiry(raw: RawOffer) -> datetime | None:
        """Parse an ISO-8601 expiry; unreadable values become ``None``."""
        if not raw.expires_at:
            return None
        text = raw.expires_at.strip()
        # fromisoformat() rejects a trailing "Z" before Python 3.11
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            logger.debug(
                "Unparseable expiry %r on offer %s",
                raw.expires_at,
                raw.offer_id,
            )
            return None

    @staticmethod
    def normalize(raw: RawOffer) -> Offer | None:
        """Normalise one raw offer, or return ``None`` to drop it.

        Rules, applied in order:
        1. A fixed amount wins over a percent when both are present.
        2. A discount value of zero or below is a no-op and is dropped.
        3. Percentages are capped at 100.
        4. With neither value, the offer becomes a descriptive marker.
        """
        expires_at = OfferNormalizer._parse_expiry(raw)

        if raw.discount_amount is not None:
            if raw.discount_amount <= 0:
                logger.debug(
                    "Dropped no-op amount offer %s (%.2f)",
                    raw.offer_id,
                    raw.discount_amount,
                )
                return None
            return Offer(
                offer_id=raw.offer_id,
                description=raw.description,
                discount_amount=raw.discount_amount,
                expires_at=expires_at,
            )

        if raw.discount_percent is not None:
            if raw.discount_percent <= 0:
                logger.debug(
                    "Dropped no-op percent offer %s (%.2f)",
                    raw.offer_id,
                    raw.discount_percent,
                )
                return None
            return Offer(
                offer_id=raw.offer_id,
                description=raw.description,
                discount_percent=min(raw.discount_percent, 100.0),
                expires_at=expires_at,
            )

        return Offer(
            offer_id=raw.offer_id,
            description=raw.description,
            expires_at=expires_at,
        )

    @staticmethod
    def normalize_all(raws: Iterable[RawOffer]) -> list[Offer]:
        """Normalise a quote's offers, preserving order.

        Dropped offers are skipped and a repeated ``offer_id`` keeps
        only its first occurrence.
        """
        offers: list[Offer] = []
        seen: set[str] = set()
        for raw in raws:
            if raw.offer_id in seen:
                logger.debug(
                    "Skipped duplicate offer %s", raw.offer_id
                )
                continue
            offer = OfferNormalizer.normalize(raw)
            if offer is None:
                continue
            seen.add(raw.offer_id)
            offers.append(offer)
        return offers
