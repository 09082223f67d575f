# egg_compare/models/offer.py

"""Canonical offer model shared by every retailer."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Offer:
    """A normalised discount, or a non-monetary promotional marker.

    At most one of ``discount_amount`` and ``discount_percent`` is set.
    An offer with neither (e.g. "Clearance Item") is shown to the user
    but takes nothing off the price.
    """

    offer_id: str
    description: str
    discount_amount: float | None = None
    discount_percent: float | None = None
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if (
            self.discount_amount is not None
            and self.discount_percent is not None
        ):
            msg = (
                f"Offer {self.offer_id!r} cannot carry both an amount "
                "and a percent discount"
            )
            raise ValueError(msg)
        if self.discount_amount is not None and self.discount_amount <= 0:
            msg = (
                f"Offer {self.offer_id!r} amount must be positive, "
                f"got {self.discount_amount}"
            )
            raise ValueError(msg)
        if self.discount_percent is not None and not (
            0 < self.discount_percent <= 100
        ):
            msg = (
                f"Offer {self.offer_id!r} percent must be in (0, 100], "
                f"got {self.discount_percent}"
            )
            raise ValueError(msg)

    @property
    def is_monetary(self) -> bool:
        """True when the offer reduces the price."""
        return (
            self.discount_amount is not None
            or self.discount_percent is not None
        )
