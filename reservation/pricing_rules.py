"""
Pricing rules — price table and fee policy for the reservation form.

Lookup chain:
1. JSON file at settings.PRICING_RULES_PATH (if set and readable)
2. DEFAULT_RULES from this file

All amounts are whole yen.
"""

import json
import logging
from functools import lru_cache
from typing import Annotated, Dict, Optional

from pydantic import BaseModel, BeforeValidator, ValidationError

from .config import settings
from .parsing import parse_amount

logger = logging.getLogger(__name__)

# Unparsable or negative configured amounts count as zero
Amount = Annotated[int, BeforeValidator(parse_amount)]


def display_label(label: str) -> str:
    """Label text before any parenthesised price hint: '全身鑑定表 (¥3,000)' -> '全身鑑定表'."""
    return label.split("(")[0].strip()


class FlatReportRule(BaseModel):
    label: str
    price: Amount = 0
    connection_fee: Amount = 0

    class Config:
        frozen = True


class PerPartReportRule(BaseModel):
    label: str
    price_per_part: Amount = 0
    connection_fee: Amount = 0

    class Config:
        frozen = True


class OptionRule(BaseModel):
    label: str
    unit_price: Amount = 0
    max_quantity: int = settings.OPTION_MAX_QUANTITY

    class Config:
        frozen = True


class PricingRules(BaseModel):
    base_fee: Amount = 0
    base_fee_label: str = "基本ヒーリング料"
    flat_reports: Dict[str, FlatReportRule] = {}
    per_part_reports: Dict[str, PerPartReportRule] = {}
    option: OptionRule = OptionRule(label="オプション")
    referral_discount: Amount = 0
    referral_label: str = "紹介割引"
    convenience_store_fee: Amount = 0
    convenience_store_method: str = "convenience_store"
    convenience_store_label: str = "コンビニ払い手数料"
    # Payment method id -> text shown to the user
    payment_methods: Dict[str, str] = {}

    class Config:
        frozen = True

    def is_per_part(self, report_id: str) -> bool:
        return report_id in self.per_part_reports

    def payment_method_label(self, method: str) -> Optional[str]:
        """Display text for a payment method id, None if nothing was picked."""
        if not method:
            return None
        return self.payment_methods.get(method, method)


DEFAULT_RULES = PricingRules(
    base_fee=5000,
    flat_reports={
        "none": FlatReportRule(label="報告なし (¥0)", price=0),
        "simple": FlatReportRule(label="簡易レポート (¥1,000)", price=1000),
        "full": FlatReportRule(label="全身鑑定表 (¥3,000)", price=3000, connection_fee=500),
    },
    per_part_reports={
        "part": PerPartReportRule(
            label="１部位鑑定表 (1部位 ¥1,500)", price_per_part=1500, connection_fee=500,
        ),
    },
    option=OptionRule(label="霊視相談", unit_price=1000),
    referral_discount=500,
    convenience_store_fee=220,
    convenience_store_method="convenience_store",
    payment_methods={
        "bank_transfer": "銀行振込",
        "credit_card": "クレジットカード",
        "paypay": "PayPay",
        "convenience_store": "コンビニ払い",
    },
)


def load_pricing_rules(path: Optional[str] = None) -> PricingRules:
    """
    Load PricingRules from a JSON file.

    Falls back to DEFAULT_RULES when no path is configured or the file
    cannot be read or validated.
    """
    path = path if path is not None else settings.PRICING_RULES_PATH
    if not path:
        return DEFAULT_RULES
    try:
        with open(path, encoding="utf-8") as f:
            rules = PricingRules.model_validate(json.load(f))
    except FileNotFoundError:
        logger.warning("Pricing rules file %s not found, using defaults", path)
        return DEFAULT_RULES
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Invalid pricing rules in %s, using defaults: %s", path, e)
        return DEFAULT_RULES
    logger.info(
        "Loaded pricing rules from %s (%d flat, %d per-part reports)",
        path, len(rules.flat_reports), len(rules.per_part_reports),
    )
    return rules


@lru_cache(maxsize=None)
def get_rules() -> PricingRules:
    """The configured rules, read once per process."""
    return load_pricing_rules()
