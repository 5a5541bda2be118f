# tests/test_scanner.py

"""Tests for SearchOrchestrator fan-out, pairing and ranking."""

import asyncio
import unittest

from crossarb.config.settings import Settings
from crossarb.models.listing import Platform, ProductSearchResult, SearchOptions
from crossarb.models.opportunity import ScanOptions
from crossarb.services.scanner import SearchOrchestrator


def _make(
    platform: Platform,
    price: float,
    title: str = "Sony WH-1000XM5 Headphones",
    shipping: float = 0.0,
    platform_id: str | None = None,
    **extra: object,
) -> ProductSearchResult:
    """Create a listing with sensible defaults."""
    return ProductSearchResult(
        platform_id=platform_id or f"{platform.value}-{title}-{price}",
        platform=platform,
        title=title,
        price=price,
        shipping=shipping,
        url=f"https://{platform.value}.example/item",
        **extra,  # type: ignore[arg-type]
    )


class FakeAdapter:
    """Async stub adapter returning canned listings and recording calls."""

    def __init__(self, listings: list[ProductSearchResult]) -> None:
        self.listings = listings
        self.calls: list[SearchOptions] = []

    async def search(self, options: SearchOptions) -> list[ProductSearchResult]:
        """Record the call and return the canned listings."""
        self.calls.append(options)
        return list(self.listings)


class SyncAdapter:
    """Blocking stub adapter, run by the scanner in a worker thread."""

    def __init__(self, listings: list[ProductSearchResult]) -> None:
        self.listings = listings

    def search(self, options: SearchOptions) -> list[ProductSearchResult]:
        """Return the canned listings."""
        return list(self.listings)


class BrokenAdapter:
    """Stub adapter that raises on search."""

    def search(self, options: SearchOptions) -> list[ProductSearchResult]:
        """Simulate a network failure."""
        msg = "Connection refused"
        raise ConnectionError(msg)


class SlowAdapter:
    """Stub adapter that never answers within the test timeout."""

    async def search(self, options: SearchOptions) -> list[ProductSearchResult]:
        """Sleep well past the orchestrator timeout."""
        await asyncio.sleep(5)
        return []


def _pair_adapters(
    buy_price: float = 10.0, sell_price: float = 30.0
) -> dict[Platform, FakeAdapter]:
    return {
        Platform.AMAZON: FakeAdapter([_make(Platform.AMAZON, buy_price)]),
        Platform.EBAY: FakeAdapter([_make(Platform.EBAY, sell_price)]),
    }


class TestScan(unittest.IsolatedAsyncioTestCase):
    """End-to-end scans over stub adapters."""

    def setUp(self) -> None:
        self.orchestrator = SearchOrchestrator()

    async def test_finds_cross_platform_opportunity(self) -> None:
        """Buy $10 on Amazon, sell $30 on eBay."""
        opportunities = await self.orchestrator.scan(
            _pair_adapters(), ScanOptions(query="headphones")
        )
        self.assertEqual(len(opportunities), 1)
        opp = opportunities[0]
        self.assertEqual(opp.buy_platform, Platform.AMAZON)
        self.assertEqual(opp.sell_platform, Platform.EBAY)
        self.assertEqual(opp.buy_price, 10.0)
        self.assertEqual(opp.sell_price, 30.0)
        self.assertAlmostEqual(opp.estimated_profit, 9.84, places=2)
        self.assertAlmostEqual(opp.margin_pct, 32.8, places=1)
        self.assertAlmostEqual(opp.estimated_fees, 4.17, places=2)
        self.assertGreater(opp.score, 0)
        self.assertLessEqual(opp.score, 1)

    async def test_buy_side_fields_come_from_cheaper_listing(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [_make(Platform.AMAZON, 10.0, platform_id="B0TEST")]
            ),
            Platform.EBAY: FakeAdapter([_make(Platform.EBAY, 30.0)]),
        }
        opp = (await self.orchestrator.scan(adapters, ScanOptions()))[0]
        self.assertEqual(opp.product_id, "B0TEST")
        self.assertEqual(opp.product_title, "Sony WH-1000XM5 Headphones")
        self.assertEqual(opp.buy_url, "https://amazon.example/item")

    async def test_equal_prices_yield_nothing(self) -> None:
        opportunities = await self.orchestrator.scan(
            _pair_adapters(20.0, 20.0), ScanOptions()
        )
        self.assertEqual(opportunities, [])

    async def test_high_min_margin_filters_everything(self) -> None:
        opportunities = await self.orchestrator.scan(
            _pair_adapters(), ScanOptions(min_margin_pct=90)
        )
        self.assertEqual(opportunities, [])

    async def test_max_results_truncates_ranked_list(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [_make(Platform.AMAZON, 10.0 + i) for i in range(5)]
            ),
            Platform.EBAY: FakeAdapter(
                [_make(Platform.EBAY, 40.0 + i) for i in range(5)]
            ),
        }
        report = await self.orchestrator.scan_with_report(
            adapters, ScanOptions(max_results=5)
        )
        self.assertEqual(len(report.opportunities), 5)
        self.assertEqual(report.pairs_evaluated, 25)

    async def test_max_results_zero_returns_empty(self) -> None:
        report = await self.orchestrator.scan_with_report(
            _pair_adapters(), ScanOptions(max_results=0)
        )
        self.assertEqual(report.opportunities, [])
        self.assertEqual(report.pairs_evaluated, 1)

    async def test_same_platform_pairs_are_skipped(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [_make(Platform.AMAZON, 10.0), _make(Platform.AMAZON, 90.0)]
            ),
        }
        report = await self.orchestrator.scan_with_report(
            adapters, ScanOptions()
        )
        self.assertEqual(report.opportunities, [])
        self.assertEqual(report.pairs_evaluated, 0)

    async def test_results_sorted_by_score(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [
                    _make(Platform.AMAZON, 15.0, title="Small Gap"),
                    _make(Platform.AMAZON, 5.0, title="Big Gap"),
                ]
            ),
            Platform.EBAY: FakeAdapter([_make(Platform.EBAY, 50.0)]),
        }
        opportunities = await self.orchestrator.scan(adapters, ScanOptions())
        self.assertEqual(len(opportunities), 2)
        self.assertEqual(opportunities[0].product_title, "Big Gap")
        self.assertEqual(opportunities[0].score, 0.85)
        self.assertEqual(opportunities[1].product_title, "Small Gap")
        self.assertEqual(opportunities[1].score, 0.74)
        scores = [o.score for o in opportunities]
        self.assertEqual(scores, sorted(scores, reverse=True))

    async def test_shipping_carried_through(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [_make(Platform.AMAZON, 10.0, shipping=2.0)]
            ),
            Platform.EBAY: FakeAdapter(
                [_make(Platform.EBAY, 40.0, shipping=3.0)]
            ),
        }
        opp = (await self.orchestrator.scan(adapters, ScanOptions()))[0]
        self.assertEqual(opp.buy_shipping, 2.0)
        self.assertEqual(opp.sell_shipping, 3.0)
        self.assertAlmostEqual(opp.estimated_profit, 16.55, places=2)

    async def test_deterministic(self) -> None:
        first = await self.orchestrator.scan(_pair_adapters(), ScanOptions())
        second = await self.orchestrator.scan(_pair_adapters(), ScanOptions())
        self.assertEqual(first, second)


class TestScanAdapters(unittest.IsolatedAsyncioTestCase):
    """Adapter dispatch, failures and platform selection."""

    async def test_failing_adapter_is_isolated(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter([_make(Platform.AMAZON, 10.0)]),
            Platform.EBAY: BrokenAdapter(),
            Platform.WALMART: FakeAdapter([_make(Platform.WALMART, 30.0)]),
        }
        report = await SearchOrchestrator().scan_with_report(
            adapters, ScanOptions()
        )
        self.assertEqual(len(report.opportunities), 1)
        self.assertEqual(report.opportunities[0].sell_platform, Platform.WALMART)
        self.assertEqual(len(report.errors), 1)
        self.assertIn("ebay", report.errors[0])
        self.assertIn("Connection refused", report.errors[0])
        self.assertEqual(report.platform_counts[Platform.EBAY], 0)
        self.assertEqual(report.platform_counts[Platform.AMAZON], 1)

    async def test_all_adapters_failing_returns_empty(self) -> None:
        adapters = {
            Platform.AMAZON: BrokenAdapter(),
            Platform.EBAY: BrokenAdapter(),
        }
        report = await SearchOrchestrator().scan_with_report(
            adapters, ScanOptions()
        )
        self.assertEqual(report.opportunities, [])
        self.assertEqual(len(report.errors), 2)

    async def test_no_adapters(self) -> None:
        opportunities = await SearchOrchestrator().scan({}, ScanOptions())
        self.assertEqual(opportunities, [])

    async def test_platform_subset_only_calls_selected(self) -> None:
        walmart = FakeAdapter([_make(Platform.WALMART, 5.0)])
        adapters = {**_pair_adapters(), Platform.WALMART: walmart}
        opportunities = await SearchOrchestrator().scan(
            adapters,
            ScanOptions(platforms=[Platform.AMAZON, Platform.EBAY]),
        )
        self.assertEqual(walmart.calls, [])
        for opp in opportunities:
            self.assertNotIn(
                Platform.WALMART, (opp.buy_platform, opp.sell_platform)
            )

    async def test_repeated_platform_is_searched_once(self) -> None:
        adapters = _pair_adapters()
        opportunities = await SearchOrchestrator().scan(
            adapters,
            ScanOptions(
                platforms=[Platform.AMAZON, Platform.EBAY, Platform.AMAZON]
            ),
        )
        self.assertEqual(len(adapters[Platform.AMAZON].calls), 1)
        self.assertEqual(len(adapters[Platform.EBAY].calls), 1)
        self.assertEqual(len(opportunities), 1)

    async def test_requested_platform_without_adapter_is_skipped(self) -> None:
        report = await SearchOrchestrator().scan_with_report(
            _pair_adapters(),
            ScanOptions(platforms=[Platform.AMAZON, Platform.TARGET]),
        )
        self.assertEqual(report.errors, [])
        self.assertEqual(list(report.platform_counts), [Platform.AMAZON])
        self.assertEqual(report.opportunities, [])

    async def test_sync_adapter_runs_in_thread(self) -> None:
        adapters = {
            Platform.AMAZON: SyncAdapter([_make(Platform.AMAZON, 10.0)]),
            Platform.EBAY: FakeAdapter([_make(Platform.EBAY, 30.0)]),
        }
        opportunities = await SearchOrchestrator().scan(adapters, ScanOptions())
        self.assertEqual(len(opportunities), 1)

    async def test_slow_adapter_times_out(self) -> None:
        adapters = {
            **_pair_adapters(),
            Platform.WALMART: SlowAdapter(),
        }
        report = await SearchOrchestrator(timeout=0.05).scan_with_report(
            adapters, ScanOptions()
        )
        self.assertEqual(len(report.opportunities), 1)
        self.assertEqual(report.errors, ["walmart: search timed out"])
        self.assertEqual(report.platform_counts[Platform.WALMART], 0)

    async def test_default_options(self) -> None:
        adapters = _pair_adapters()
        await SearchOrchestrator().scan(adapters)
        call = adapters[Platform.AMAZON].calls[0]
        self.assertEqual(call.query, Settings.DEFAULT_QUERY)
        self.assertEqual(call.max_results, Settings.PER_PLATFORM_RESULTS)

    async def test_query_and_category_forwarded(self) -> None:
        adapters = _pair_adapters()
        await SearchOrchestrator().scan(
            adapters, ScanOptions(query="headphones", category="electronics")
        )
        call = adapters[Platform.EBAY].calls[0]
        self.assertEqual(call.query, "headphones")
        self.assertEqual(call.category, "electronics")


class TestScanOptionsHandling(unittest.IsolatedAsyncioTestCase):
    """Option clamping, validation and keyword exclusion."""

    async def test_negative_margin_is_clamped_without_mutating(self) -> None:
        options = ScanOptions(min_margin_pct=-10)
        opportunities = await SearchOrchestrator().scan(
            _pair_adapters(), options
        )
        self.assertEqual(options.min_margin_pct, -10)
        self.assertEqual(len(opportunities), 1)
        for opp in opportunities:
            self.assertGreaterEqual(opp.margin_pct, 0)
            self.assertGreater(opp.estimated_profit, 0)

    async def test_negative_max_results_returns_empty(self) -> None:
        options = ScanOptions(max_results=-3)
        opportunities = await SearchOrchestrator().scan(
            _pair_adapters(), options
        )
        self.assertEqual(opportunities, [])
        self.assertEqual(options.max_results, -3)

    async def test_exclude_keywords(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [_make(Platform.AMAZON, 5.0, title="Broken Headphones For Parts")]
            ),
            Platform.EBAY: FakeAdapter([_make(Platform.EBAY, 50.0)]),
        }
        report = await SearchOrchestrator().scan_with_report(
            adapters, ScanOptions(exclude_keywords=["for parts"])
        )
        self.assertEqual(report.excluded_count, 1)
        self.assertEqual(report.opportunities, [])

    async def test_invalid_listings_are_dropped(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [_make(Platform.AMAZON, -5.0), _make(Platform.AMAZON, 10.0)]
            ),
            Platform.EBAY: FakeAdapter(
                [_make(Platform.EBAY, 30.0, shipping=-1.0)]
            ),
            Platform.WALMART: FakeAdapter([_make(Platform.WALMART, 30.0)]),
        }
        report = await SearchOrchestrator().scan_with_report(
            adapters, ScanOptions()
        )
        self.assertEqual(report.total_listings, 4)
        self.assertEqual(report.invalid_count, 2)
        self.assertEqual(report.pairs_evaluated, 1)
        self.assertEqual(len(report.opportunities), 1)

    async def test_free_listing_is_a_valid_buy_side(self) -> None:
        """A $0 item with $5 shipping resold on eBay for $30."""
        adapters = {
            Platform.FACEBOOK: FakeAdapter(
                [_make(Platform.FACEBOOK, 0.0, shipping=5.0)]
            ),
            Platform.EBAY: FakeAdapter([_make(Platform.EBAY, 30.0)]),
        }
        report = await SearchOrchestrator().scan_with_report(
            adapters, ScanOptions()
        )
        self.assertEqual(report.invalid_count, 0)
        self.assertEqual(report.pairs_evaluated, 1)
        self.assertEqual(len(report.opportunities), 1)
        opp = report.opportunities[0]
        self.assertEqual(opp.buy_platform, Platform.FACEBOOK)
        self.assertEqual(opp.buy_price, 0.0)
        self.assertEqual(opp.buy_shipping, 5.0)
        self.assertAlmostEqual(opp.estimated_profit, 14.84, places=2)
        self.assertAlmostEqual(opp.margin_pct, 49.47, places=2)

    async def test_matched_only_pairs_same_product(self) -> None:
        adapters = {
            Platform.AMAZON: FakeAdapter(
                [
                    _make(Platform.AMAZON, 200.0, upc="027242923232"),
                    _make(Platform.AMAZON, 5.0, title="USB-C Cable 6ft"),
                ]
            ),
            Platform.EBAY: FakeAdapter(
                [_make(Platform.EBAY, 300.0, upc="027242923232")]
            ),
        }
        loose = await SearchOrchestrator().scan(adapters, ScanOptions())
        strict = await SearchOrchestrator().scan(
            adapters, ScanOptions(matched_only=True)
        )
        self.assertEqual(len(loose), 2)
        self.assertEqual(len(strict), 1)
        self.assertEqual(strict[0].buy_price, 200.0)


class TestFindOpportunities(unittest.TestCase):
    """Synchronous pair evaluation."""

    def test_counts_cross_platform_pairs(self) -> None:
        listings = [
            _make(Platform.AMAZON, 10.0),
            _make(Platform.EBAY, 30.0),
            _make(Platform.WALMART, 30.0),
            _make(Platform.AMAZON, 12.0),
        ]
        opportunities, evaluated = SearchOrchestrator().find_opportunities(
            listings, 15.0
        )
        # 6 combinations minus the amazon/amazon pair
        self.assertEqual(evaluated, 5)
        for opp in opportunities:
            self.assertNotEqual(opp.buy_platform, opp.sell_platform)

    def test_tie_on_total_price_makes_first_listing_the_seller(self) -> None:
        listings = [
            _make(Platform.AMAZON, 50.0),
            _make(Platform.EBAY, 40.0, shipping=10.0),
        ]
        opportunities, evaluated = SearchOrchestrator().find_opportunities(
            listings, -1000.0
        )
        self.assertEqual(evaluated, 1)
        # Selling $50 against a $50 landed cost never nets a profit
        self.assertEqual(opportunities, [])

    def test_opportunities_are_unranked(self) -> None:
        listings = [_make(Platform.AMAZON, 10.0), _make(Platform.EBAY, 30.0)]
        opportunities, _ = SearchOrchestrator().find_opportunities(
            listings, 0.0
        )
        self.assertEqual(opportunities[0].score, 0.0)


if __name__ == "__main__":
    unittest.main()
