# crossarb/cli/runner.py

"""Headless scan runner over listing snapshots, reuses the async scanner."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from crossarb.adapters.json_file_adapter import JsonFileAdapter
from crossarb.config.settings import Settings
from crossarb.filters.product_matcher import ProductMatcher
from crossarb.models.listing import Platform, ProductSearchResult
from crossarb.models.opportunity import (
    ArbitrageOpportunity,
    MatchResult,
    ScanOptions,
)
from crossarb.services.scanner import SearchOrchestrator
from crossarb.storage.listing_store import (
    ListingStore,
    match_to_dict,
    opportunity_to_dict,
)

logger = logging.getLogger("crossarb.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _split_csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def resolve_platforms(platform_csv: str | None) -> list[Platform] | None:
    """Map a comma-separated list of platform IDs to :class:`Platform`.

    Returns ``None`` (scan everything loaded) when *platform_csv* is
    ``None``. Raises ``SystemExit`` on unknown IDs.
    """
    if platform_csv is None:
        return None

    valid = {p["id"] for p in Settings.PLATFORMS}
    requested = [r.lower() for r in _split_csv(platform_csv)]
    unknown = [r for r in requested if r not in valid]
    if unknown:
        _err.print(
            f"[red]Unknown platform(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {', '.join(sorted(valid))}[/dim]")
        raise SystemExit(1)

    return [Platform(r) for r in requested]


def load_listings(paths: list[str]) -> list[ProductSearchResult]:
    """Load and concatenate every snapshot file in *paths*."""
    listings: list[ProductSearchResult] = []
    for raw_path in paths:
        listings.extend(ListingStore.load(Path(raw_path)))
    return listings


def build_adapters(
    listings: list[ProductSearchResult],
) -> dict[Platform, JsonFileAdapter]:
    """One offline adapter per platform present in *listings*."""
    platforms = dict.fromkeys(item.platform for item in listings)
    return {
        platform: JsonFileAdapter(platform, listings=listings)
        for platform in platforms
    }


def _print_opportunities(opportunities: list[ArbitrageOpportunity]) -> None:
    """Render a Rich table of opportunities to stdout."""
    table = Table(
        title="Arbitrage Opportunities",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=48)
    table.add_column("Buy", style="magenta")
    table.add_column("Buy $", justify="right")
    table.add_column("Sell", style="magenta")
    table.add_column("Sell $", justify="right")
    table.add_column("Fees", justify="right", style="dim")
    table.add_column("Profit", justify="right", style="green")
    table.add_column("Margin", justify="right")
    table.add_column("Score", justify="right", style="bold")

    for idx, opp in enumerate(opportunities, 1):
        table.add_row(
            str(idx),
            opp.product_title[:48],
            str(opp.buy_platform),
            f"{opp.buy_price + opp.buy_shipping:,.2f}",
            str(opp.sell_platform),
            f"{opp.sell_price:,.2f}",
            f"{opp.estimated_fees:,.2f}",
            f"{opp.estimated_profit:,.2f}",
            f"{opp.margin_pct:.1f}%",
            f"{opp.score:.2f}",
        )

    Console().print(table)


def _print_matches(matches: list[MatchResult]) -> None:
    table = Table(
        title="Matched Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Type", justify="center")
    table.add_column("Confidence", justify="right")
    table.add_column("Listings")

    for idx, match in enumerate(matches, 1):
        listing_lines = "\n".join(
            f"{p.platform}: {p.title[:50]} ({p.price:,.2f})"
            for p in match.products
        )
        table.add_row(
            str(idx),
            str(match.match_type),
            f"{match.confidence:.2f}",
            listing_lines,
        )

    Console().print(table)


def _dump_json(payload: object) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


async def cli_scan(
    paths: list[str],
    query: str,
    category: str | None,
    min_margin_pct: float,
    max_results: int,
    platform_csv: str | None,
    exclude_csv: str | None,
    matched_only: bool,
    output_format: str,
) -> int:
    """Run a headless scan and return an exit code (0=found, 1=none/fail)."""
    platforms = resolve_platforms(platform_csv)
    try:
        listings = load_listings(paths)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load listings: %s", exc, exc_info=True)
        _err.print(f"[red]Failed to load listings: {exc}[/red]")
        return 1

    adapters = build_adapters(listings)
    options = ScanOptions(
        query=query,
        category=category,
        min_margin_pct=min_margin_pct,
        max_results=max_results,
        platforms=platforms,
        exclude_keywords=_split_csv(exclude_csv),
        matched_only=matched_only,
    )

    _err.print(
        f"[bold]Scanning:[/bold] {query or '(all listings)'}  "
        f"[dim]platforms={', '.join(str(p) for p in adapters)}"
        f" min_margin={min_margin_pct:g}%[/dim]"
    )

    report = await SearchOrchestrator().scan_with_report(adapters, options)

    for error_msg in report.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")

    if not report.opportunities:
        _err.print("[yellow]No opportunities found.[/yellow]")
        return 1

    parts: list[str] = [f"{report.pairs_evaluated} pairs"]
    if report.excluded_count:
        parts.append(f"{report.excluded_count} filtered")
    if report.invalid_count:
        parts.append(f"{report.invalid_count} invalid")
    _err.print(
        f"[green]✓ {len(report.opportunities)} opportunities"
        f" from {report.total_listings} listings"
        f" ({', '.join(parts)})[/green]"
    )

    if output_format == "table":
        _print_opportunities(report.opportunities)
    else:
        _dump_json([opportunity_to_dict(o) for o in report.opportunities])
    return 0


def cli_match(paths: list[str], output_format: str) -> int:
    """Group listings into same-product clusters and print them."""
    try:
        listings = load_listings(paths)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load listings: %s", exc, exc_info=True)
        _err.print(f"[red]Failed to load listings: {exc}[/red]")
        return 1

    matches = ProductMatcher().match(listings)
    if not matches:
        _err.print("[yellow]No cross-platform matches found.[/yellow]")
        return 1

    _err.print(
        f"[green]✓ {len(matches)} groups from {len(listings)} listings[/green]"
    )
    if output_format == "table":
        _print_matches(matches)
    else:
        _dump_json([match_to_dict(m) for m in matches])
    return 0
