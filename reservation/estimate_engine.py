"""
Estimate Engine — turns a SelectionState into an itemized Estimate.

Pure math, rebuilt from scratch on every call. Line items are always
appended in billing order:

1. Base fee (once a requester name is entered)
2. Report charge (flat price, or one line per named part)
3. Add-on option (unit price x quantity)
4. Connection fee (option AND a report with a connection fee)
5. Discount (referral or percent, on the subtotal of 1-4)
6. Convenience-store payment surcharge (not discountable)

Total = sum of items, floored at 0.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from pydantic import BaseModel

from .pricing_rules import PricingRules, display_label, get_rules
from .selection import SelectionState

logger = logging.getLogger(__name__)


class LineItem(BaseModel):
    label: str
    amount: int  # negative for discounts

    class Config:
        frozen = True


class Estimate(BaseModel):
    items: Tuple[LineItem, ...] = ()
    subtotal_before_discount: int = 0
    total: int = 0

    class Config:
        frozen = True


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class EstimateEngine:
    """
    Computes Estimates against one set of PricingRules.
    Holds no per-call state, so one instance can serve every request.
    """

    PERCENT_MIN = 0    # exclusive
    PERCENT_MAX = 100  # exclusive

    def __init__(self, rules: PricingRules):
        self.rules = rules

    def compute(self, state: SelectionState) -> Estimate:
        items: List[LineItem] = []

        self._add_base_fee(state, items)
        report_label, connection_fee = self._add_report(state, items)
        option_fired = self._add_option(state, items)

        if option_fired and report_label is not None and connection_fee > 0:
            items.append(LineItem(
                label=f"霊視接続料 {report_label} オプション利用",
                amount=connection_fee,
            ))

        subtotal = sum(item.amount for item in items)

        discount = self._discount_item(state, subtotal)
        if discount:
            items.append(discount)

        if state.payment_method and state.payment_method == self.rules.convenience_store_method:
            items.append(LineItem(
                label=self.rules.convenience_store_label,
                amount=self.rules.convenience_store_fee,
            ))

        total = max(sum(item.amount for item in items), 0)
        logger.debug("Estimate: %d items, subtotal %d, total %d", len(items), subtotal, total)
        return Estimate(items=tuple(items), subtotal_before_discount=subtotal, total=total)

    # --- Steps ---

    def _add_base_fee(self, state: SelectionState, items: List[LineItem]) -> None:
        if state.requester_name.strip():
            items.append(LineItem(label=self.rules.base_fee_label, amount=self.rules.base_fee))

    def _add_report(self, state: SelectionState, items: List[LineItem]) -> Tuple[Optional[str], int]:
        """
        Appends the report charge.
        Returns (report display label, its connection fee), or (None, 0) when no report.
        """
        choice = state.report_choice
        if choice is None:
            return None, 0

        if choice.is_per_part:
            rule = self.rules.per_part_reports.get(choice.id)
            label = display_label(rule.label) if rule else choice.id
            price = rule.price_per_part if rule else 0
            for part in state.filled_parts():
                items.append(LineItem(label=f"{label}: {part}", amount=price))
        else:
            rule = self.rules.flat_reports.get(choice.id)
            label = display_label(rule.label) if rule else choice.id
            # A zero-price report still gets a visible line
            items.append(LineItem(label=label, amount=rule.price if rule else 0))

        return label, rule.connection_fee if rule else 0

    def _add_option(self, state: SelectionState, items: List[LineItem]) -> bool:
        qty = state.option_quantity
        if qty <= 0:
            return False
        option = self.rules.option
        items.append(LineItem(label=f"{option.label} × {qty}", amount=option.unit_price * qty))
        return True

    def _discount_item(self, state: SelectionState, subtotal: int) -> Optional[LineItem]:
        coupon = state.coupon_choice
        if coupon is None:
            return None

        if coupon.kind == "referral":
            return LineItem(label=self.rules.referral_label, amount=-self.rules.referral_discount)

        if coupon.kind == "percent":
            percent = coupon.percent
            if not self.PERCENT_MIN < percent < self.PERCENT_MAX:
                return None
            discount = round_half_up(Decimal(subtotal) * percent / 100)
            return LineItem(label=f"{percent}% OFF クーポン", amount=-discount)

        return None


def compute_estimate(state: SelectionState, rules: Optional[PricingRules] = None) -> Estimate:
    """compute(state, rules) -> Estimate. Uses the configured rules when none are given."""
    return EstimateEngine(rules if rules is not None else get_rules()).compute(state)
