"""
Raw form fields -> SelectionState.

The reservation page posts its widgets as a flat dict of strings. This maps
them onto the structured selection, coercing numeric text the way the page
did (leading integer, otherwise 0).

Field names:
    requester_name, report_type, part_names (list) or part_name_0..N,
    consultation_qty, coupon_type ("none" | "referral" | "percent"),
    percent_off_value, payment_method, remarks, agree_all
"""

import re
from typing import List, Optional

from .config import settings
from .parsing import parse_int
from .pricing_rules import PricingRules
from .selection import CouponChoice, ReportChoice, SelectionState

_PART_FIELD = re.compile(r"^part_name_(\d+)$")

_TRUE_VALUES = {"1", "true", "on", "yes"}


def step_quantity(current, delta: int, maximum: Optional[int] = None) -> int:
    """The +/- quantity control: move by delta, clamp to [0, maximum]."""
    maximum = settings.OPTION_MAX_QUANTITY if maximum is None else maximum
    return max(0, min(parse_int(current) + delta, maximum))


def _text(value) -> str:
    return "" if value is None else str(value)


def _part_names(form: dict) -> List[str]:
    if "part_names" in form:
        raw = form.get("part_names")
        # A single text field posts one string, not a list
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, (list, tuple)):
            return []
        return [_text(p) for p in raw]
    indexed = []
    for key, value in form.items():
        match = _PART_FIELD.match(key)
        if match:
            indexed.append((int(match.group(1)), _text(value)))
    return [value for _, value in sorted(indexed)]


def _report_choice(form: dict, rules: PricingRules) -> Optional[ReportChoice]:
    report_id = _text(form.get("report_type")).strip()
    if not report_id:
        return None
    if rules.is_per_part(report_id):
        return ReportChoice.per_part(report_id)
    return ReportChoice.flat(report_id)


def _coupon_choice(form: dict) -> Optional[CouponChoice]:
    coupon = _text(form.get("coupon_type")).strip()
    if coupon == "referral":
        return CouponChoice.referral()
    if coupon == "percent":
        return CouponChoice.percent_off(form.get("percent_off_value"))
    if coupon == "none":
        return CouponChoice.no_coupon()
    # Anything else: the question has not been answered
    return None


def _checked(value) -> bool:
    if isinstance(value, bool):
        return value
    return _text(value).strip().lower() in _TRUE_VALUES


def selection_from_form(form: dict, rules: PricingRules) -> SelectionState:
    """Build a SelectionState snapshot from raw form fields."""
    maximum = rules.option.max_quantity
    quantity = min(max(parse_int(form.get("consultation_qty")), 0), maximum)
    return SelectionState(
        requester_name=_text(form.get("requester_name")),
        report_choice=_report_choice(form, rules),
        selected_parts=_part_names(form),
        option_quantity=quantity,
        coupon_choice=_coupon_choice(form),
        payment_method=_text(form.get("payment_method")).strip(),
        remarks=_text(form.get("remarks")),
        agreed_to_terms=_checked(form.get("agree_all")),
    )
