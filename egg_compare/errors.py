# egg_compare/errors.py

"""Exceptions raised while fetching and comparing retailer prices."""


class PriceSourceError(Exception):
    """Base class for failures of a single retailer price source."""

    def __init__(self, retailer: str, message: str) -> None:
        super().__init__(f"{retailer}: {message}")
        self.retailer = retailer


class UpstreamUnavailable(PriceSourceError):
    """The price source could not be reached or rejected the request."""


class NoProductFound(PriceSourceError):
    """The price source answered but returned no usable product."""


class ComparisonError(Exception):
    """A comparison could not be produced because one retailer failed."""

    def __init__(self, retailer: str, cause: BaseException) -> None:
        super().__init__(f"failed to get {retailer} price: {cause}")
        self.retailer = retailer
        self.cause = cause
