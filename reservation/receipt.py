"""
Receipt formatter — renders an accepted estimate as plain text for the
clipboard or a chat message.

Call only after the selection passed validation; no checks happen here.
"""

from typing import Optional

from .estimate_engine import Estimate
from .pricing_rules import PricingRules, get_rules
from .selection import SelectionState

HEADER = "【ヒーリングお申し込み内容】"
SEPARATOR = "-" * 32
CLOSING = "上記の内容で申し込みます。"
NOT_SELECTED = "未選択"


def format_price(amount: int) -> str:
    """Yen in the ja-JP convention: 5000 -> '￥5,000', -500 -> '-￥500'."""
    # Integer yen has no negative zero: a zero discount prints "￥0", not "-￥0"
    sign = "-" if amount < 0 else ""
    return f"{sign}￥{abs(amount):,}"


class ReceiptFormatter:

    def __init__(self, rules: PricingRules):
        self.rules = rules

    def format(self, estimate: Estimate, state: SelectionState) -> str:
        lines = [HEADER, "", f"お名前: {state.requester_name.strip()}", ""]

        for item in estimate.items:
            lines.append(f"{item.label}  {format_price(item.amount)}")

        lines += [
            "",
            SEPARATOR,
            f"合計金額: {format_price(estimate.total)}",
            SEPARATOR,
            "",
        ]

        payment = self.rules.payment_method_label(state.payment_method) or NOT_SELECTED
        lines.append(f"お支払い方法: {payment}")

        remarks = state.remarks.strip()
        if remarks:
            lines += ["", "備考:", remarks]

        lines += ["", CLOSING]
        return "\n".join(lines)


def format_receipt(estimate: Estimate, state: SelectionState,
                   rules: Optional[PricingRules] = None) -> str:
    return ReceiptFormatter(rules if rules is not None else get_rules()).format(estimate, state)
