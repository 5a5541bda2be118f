# crossarb/services/scanner.py

"""Orchestrates multi-platform searches and arbitrage pair evaluation."""

import asyncio
import inspect
import logging
from collections.abc import Mapping
from dataclasses import replace
from itertools import combinations
from typing import Any

from crossarb.config.settings import Settings
from crossarb.filters.product_filter import ProductFilter
from crossarb.filters.product_matcher import ProductMatcher
from crossarb.filters.product_validator import ProductValidator
from crossarb.models.listing import Platform, ProductSearchResult, SearchOptions
from crossarb.models.opportunity import (
    ArbitrageOpportunity,
    ScanOptions,
    ScanReport,
)
from crossarb.pricing.fee_model import FeeModel
from crossarb.pricing.rounding import round_money
from crossarb.services.opportunity_scorer import OpportunityScorer

logger = logging.getLogger("crossarb.scanner")


def _describe_failure(platform: Platform, exc: BaseException) -> str:
    if isinstance(exc, TimeoutError):
        return f"{platform}: search timed out"
    return f"{platform}: {type(exc).__name__}: {exc}"


class SearchOrchestrator:
    """Fans a query out to every adapter and ranks the profitable pairs.

    Adapter failures and timeouts never escape :meth:`scan`; they are
    logged, recorded on the :class:`ScanReport`, and count as zero
    results for that platform.
    """

    def __init__(
        self,
        fee_model: FeeModel | None = None,
        scorer: OpportunityScorer | None = None,
        matcher: ProductMatcher | None = None,
        timeout: float | None = None,
    ) -> None:
        self.fee_model = fee_model or FeeModel()
        self.scorer = scorer or OpportunityScorer()
        self.matcher = matcher or ProductMatcher()
        self.timeout = (
            Settings.ADAPTER_TIMEOUT if timeout is None else timeout
        )

    # ── Private helpers ──────────────────────────────────

    @staticmethod
    async def _call_search(
        adapter: Any, options: SearchOptions
    ) -> list[ProductSearchResult]:
        """Await async adapters; run blocking ones in a worker thread."""
        search = adapter.search
        if inspect.iscoroutinefunction(search):
            results = await search(options)
        else:
            results = await asyncio.to_thread(search, options)
            if inspect.isawaitable(results):
                results = await results
        return list(results or [])

    async def _run_adapters(
        self,
        adapters: Mapping[Platform, Any],
        platforms: list[Platform],
        options: ScanOptions,
        report: ScanReport,
    ) -> list[ProductSearchResult]:
        """Dispatch adapter searches concurrently and collect results."""
        search_options = SearchOptions(
            query=options.query,
            category=options.category,
            max_results=Settings.PER_PLATFORM_RESULTS,
        )

        tasks = [
            asyncio.wait_for(
                self._call_search(adapters[platform], search_options),
                timeout=self.timeout,
            )
            for platform in platforms
        ]
        batches = await asyncio.gather(*tasks, return_exceptions=True)

        listings: list[ProductSearchResult] = []
        for platform, batch in zip(platforms, batches):
            if isinstance(batch, BaseException):
                message = _describe_failure(platform, batch)
                report.errors.append(message)
                report.platform_counts[platform] = 0
                logger.error(
                    "Search failed for query '%s' on %s: %s",
                    options.query,
                    platform,
                    message,
                    exc_info=batch,
                )
                continue
            report.platform_counts[platform] = len(batch)
            listings.extend(batch)
            logger.debug(
                "%s returned %d listings", platform, len(batch)
            )

        return listings

    def _active_platforms(
        self,
        adapters: Mapping[Platform, Any],
        requested: list[Platform] | None,
    ) -> list[Platform]:
        if requested is None:
            return list(adapters)
        active: list[Platform] = []
        for platform in dict.fromkeys(requested):
            if platform in adapters:
                active.append(platform)
            else:
                logger.warning(
                    "No adapter registered for %s, skipping", platform
                )
        return active

    @staticmethod
    def _normalise_options(options: ScanOptions) -> ScanOptions:
        """Clamp out-of-range numeric options instead of failing the scan."""
        if options.min_margin_pct < 0:
            logger.warning(
                "min_margin_pct %.2f is negative, clamping to 0",
                options.min_margin_pct,
            )
            options = replace(options, min_margin_pct=0.0)
        if options.max_results < 0:
            logger.warning(
                "max_results %d is negative, clamping to 0",
                options.max_results,
            )
            options = replace(options, max_results=0)
        return options

    def _build_opportunity(
        self,
        buy: ProductSearchResult,
        sell: ProductSearchResult,
        min_margin_pct: float,
    ) -> ArbitrageOpportunity | None:
        calc = self.fee_model.calculate_profit(
            sell.platform,
            sell.price,
            buy.platform,
            buy.price,
            buy.shipping,
        )
        if calc.margin_pct < min_margin_pct or calc.net_profit <= 0:
            return None

        return ArbitrageOpportunity(
            product_id=buy.platform_id,
            product_title=buy.title,
            buy_platform=buy.platform,
            buy_price=buy.price,
            buy_shipping=buy.shipping,
            buy_url=buy.url,
            sell_platform=sell.platform,
            sell_price=sell.price,
            sell_shipping=sell.shipping,
            estimated_fees=round_money(calc.platform_fees + calc.payment_fees),
            estimated_profit=round_money(calc.net_profit),
            margin_pct=round_money(calc.margin_pct),
        )

    # ── Pair evaluation (synchronous) ────────────────────

    def find_opportunities(
        self,
        listings: list[ProductSearchResult],
        min_margin_pct: float,
        matched_only: bool = False,
    ) -> tuple[list[ArbitrageOpportunity], int]:
        """Evaluate every cross-platform pair of *listings*.

        The cheaper side (price plus shipping) is the buy side; on equal
        totals the earlier listing is the sell side. With
        *matched_only*, only pairs the matcher put in one group are
        evaluated.

        Returns the unranked opportunities and the number of pairs
        evaluated.
        """
        cluster_of: dict[int, int] | None = None
        if matched_only:
            cluster_of = {}
            for idx, group in enumerate(self.matcher.match(listings)):
                for product in group.products:
                    cluster_of[id(product)] = idx

        opportunities: list[ArbitrageOpportunity] = []
        evaluated = 0
        for a, b in combinations(listings, 2):
            if a.platform == b.platform:
                continue
            if cluster_of is not None:
                cluster = cluster_of.get(id(a))
                if cluster is None or cluster != cluster_of.get(id(b)):
                    continue

            if a.total_price < b.total_price:
                buy, sell = a, b
            else:
                buy, sell = b, a

            evaluated += 1
            opportunity = self._build_opportunity(buy, sell, min_margin_pct)
            if opportunity is not None:
                opportunities.append(opportunity)

        return opportunities, evaluated

    # ── Public entry points ──────────────────────────────

    async def scan_with_report(
        self,
        adapters: Mapping[Platform, Any],
        options: ScanOptions | None = None,
    ) -> ScanReport:
        """Run a full scan and return the opportunities with diagnostics."""
        options = self._normalise_options(options or ScanOptions())
        report = ScanReport(query=options.query)

        platforms = self._active_platforms(adapters, options.platforms)
        if not platforms:
            logger.info("No active platforms for query '%s'", options.query)
            return report

        logger.info(
            "Starting arbitrage scan: query='%s' platforms=%s min_margin=%.1f",
            options.query,
            ",".join(str(p) for p in platforms),
            options.min_margin_pct,
        )

        listings = await self._run_adapters(
            adapters, platforms, options, report
        )
        report.total_listings = len(listings)

        listings, report.invalid_count = ProductValidator.validate(listings)
        listings, report.excluded_count = ProductFilter.filter_by_keywords(
            listings, options.exclude_keywords
        )

        candidates, report.pairs_evaluated = self.find_opportunities(
            listings, options.min_margin_pct, options.matched_only
        )
        ranked = self.scorer.rank(candidates)
        report.opportunities = ranked[: options.max_results]

        if report.errors and len(report.errors) == len(platforms):
            logger.warning(
                "Every adapter failed for query '%s'", options.query
            )
        logger.info(
            "Arbitrage scan complete: %d returned of %d found "
            "(%d listings, %d pairs)",
            len(report.opportunities),
            len(ranked),
            report.total_listings,
            report.pairs_evaluated,
        )
        return report

    async def scan(
        self,
        adapters: Mapping[Platform, Any],
        options: ScanOptions | None = None,
    ) -> list[ArbitrageOpportunity]:
        """Return ranked opportunities across *adapters* for *options*."""
        report = await self.scan_with_report(adapters, options)
        return report.opportunities
