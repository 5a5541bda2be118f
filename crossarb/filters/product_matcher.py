# crossarb/filters/product_matcher.py

"""Cross-platform product matching by UPC, ASIN and title similarity."""

import logging
import re
from collections.abc import Callable

from crossarb.config.settings import Settings
from crossarb.models.listing import ProductSearchResult
from crossarb.models.opportunity import MatchResult, MatchType

logger = logging.getLogger("crossarb.matcher")

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")


def normalise_title(title: str) -> str:
    """Lowercase, strip everything outside ``[a-z0-9\\s]``, collapse spaces."""
    return " ".join(_NON_ALNUM_RE.sub("", title.lower()).split())


def tokenize(title: str) -> set[str]:
    """Word tokens of the normalised title."""
    return set(normalise_title(title).split())


def title_similarity(a: str, b: str) -> float:
    """Jaccard index of the two titles' token sets (0 when either is empty)."""
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


class ProductMatcher:
    """Group listings from different platforms that describe one product.

    Passes run in priority order (UPC, ASIN, title); a listing joins at
    most one group and a group never holds two listings from the same
    platform.
    """

    def __init__(
        self,
        title_threshold: float = Settings.TITLE_SIMILARITY_THRESHOLD,
    ) -> None:
        self.title_threshold = title_threshold

    def match(self, results: list[ProductSearchResult]) -> list[MatchResult]:
        used: set[int] = set()
        matches: list[MatchResult] = []

        matches.extend(
            self._identifier_pass(
                results, used, "upc", MatchType.UPC, Settings.UPC_CONFIDENCE
            )
        )
        matches.extend(
            self._identifier_pass(
                results, used, "asin", MatchType.ASIN, Settings.ASIN_CONFIDENCE
            )
        )
        matches.extend(self._title_pass(results, used))

        logger.info(
            "Matched %d groups from %d listings",
            len(matches),
            len(results),
        )
        return matches

    def _identifier_pass(
        self,
        results: list[ProductSearchResult],
        used: set[int],
        attr: str,
        match_type: MatchType,
        confidence: float,
    ) -> list[MatchResult]:
        def same_identifier(
            anchor: ProductSearchResult, other: ProductSearchResult
        ) -> bool:
            value = getattr(other, attr)
            return bool(value) and value == getattr(anchor, attr)

        return self._group(
            results,
            used,
            same_identifier,
            match_type,
            confidence,
            anchor_ok=lambda r: bool(getattr(r, attr)),
        )

    def _title_pass(
        self,
        results: list[ProductSearchResult],
        used: set[int],
    ) -> list[MatchResult]:
        def similar(
            anchor: ProductSearchResult, other: ProductSearchResult
        ) -> bool:
            return (
                title_similarity(anchor.title, other.title)
                >= self.title_threshold
            )

        return self._group(
            results,
            used,
            similar,
            MatchType.TITLE,
            Settings.TITLE_CONFIDENCE,
        )

    @staticmethod
    def _group(
        results: list[ProductSearchResult],
        used: set[int],
        belongs: Callable[[ProductSearchResult, ProductSearchResult], bool],
        match_type: MatchType,
        confidence: float,
        anchor_ok: Callable[[ProductSearchResult], bool] = lambda r: True,
    ) -> list[MatchResult]:
        """Greedy grouping around each unused anchor, in input order."""
        groups: list[MatchResult] = []
        for i, anchor in enumerate(results):
            if i in used or not anchor_ok(anchor):
                continue
            members = [i]
            platforms = {anchor.platform}
            for j in range(i + 1, len(results)):
                if j in used:
                    continue
                other = results[j]
                if other.platform in platforms:
                    continue
                if belongs(anchor, other):
                    members.append(j)
                    platforms.add(other.platform)

            if len(members) > 1:
                used.update(members)
                groups.append(
                    MatchResult(
                        confidence=confidence,
                        match_type=match_type,
                        products=[results[k] for k in members],
                    )
                )
        return groups
