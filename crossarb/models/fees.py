# crossarb/models/fees.py

"""Fee schedule and profit calculation models."""

from dataclasses import dataclass, replace

from crossarb.models.listing import Platform
from crossarb.pricing.rounding import round_money


@dataclass(frozen=True)
class FeeStructure:
    """Seller-side fee schedule for one platform."""

    platform: Platform
    seller_fee_pct: float
    fixed_fee: float
    payment_processing_pct: float
    shipping_estimate: float


@dataclass
class FeeBreakdown:
    """Rounded fee summary for selling one item."""

    seller_fee: float
    fixed_fee: float
    payment_fee: float
    total_fees: float
    net_after_fees: float


@dataclass
class ProfitCalculation:
    """Full-precision profit figures for one buy/sell pair.

    Call :meth:`rounded` for a two-decimal copy suitable for display.
    """

    sell_price: float
    buy_price: float
    buy_shipping: float
    platform_fees: float
    payment_fees: float
    shipping_cost: float
    total_cost: float
    gross_profit: float
    net_profit: float
    margin_pct: float
    roi: float

    def rounded(self) -> "ProfitCalculation":
        """Return a copy with every field rounded to 2 decimals."""
        return replace(
            self,
            sell_price=round_money(self.sell_price),
            buy_price=round_money(self.buy_price),
            buy_shipping=round_money(self.buy_shipping),
            platform_fees=round_money(self.platform_fees),
            payment_fees=round_money(self.payment_fees),
            shipping_cost=round_money(self.shipping_cost),
            total_cost=round_money(self.total_cost),
            gross_profit=round_money(self.gross_profit),
            net_profit=round_money(self.net_profit),
            margin_pct=round_money(self.margin_pct),
            roi=round_money(self.roi),
        )
