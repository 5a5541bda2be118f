# crossarb/adapters/base_adapter.py

"""Abstract base class for all platform adapters."""

import logging
from abc import ABC, abstractmethod

from crossarb.models.listing import (
    Platform,
    ProductSearchResult,
    SearchOptions,
    StockStatus,
)


class BaseAdapter(ABC):
    """Contract the scanner expects from a marketplace source.

    Methods may be implemented as plain functions or coroutines; the
    scanner awaits coroutines and runs plain calls in a worker thread.
    ``search`` is allowed to raise: the scanner treats any exception as
    zero results for this platform.
    """

    def __init__(self, platform: Platform) -> None:
        self.platform = platform
        self.logger = logging.getLogger(
            f"crossarb.adapters.{platform.value}"
        )

    @abstractmethod
    def search(self, options: SearchOptions) -> list[ProductSearchResult]:
        """Return listings matching *options*."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductSearchResult | None:
        """Look up one listing by its platform-native id."""

    @abstractmethod
    def check_stock(self, product_id: str) -> StockStatus:
        """Report availability for one listing."""
