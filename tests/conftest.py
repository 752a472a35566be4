"""
Shared test fixtures — pricing rules, selection builders, test client.
"""

import pytest
from fastapi.testclient import TestClient

from reservation.main import app
from reservation.pricing_rules import (
    FlatReportRule,
    OptionRule,
    PerPartReportRule,
    PricingRules,
)
from reservation.selection import CouponChoice, ReportChoice, SelectionState


@pytest.fixture
def rules():
    """Rules matching the worked example: base 5000, referral 500, store fee 220."""
    return PricingRules(
        base_fee=5000,
        flat_reports={
            "none": FlatReportRule(label="報告なし", price=0),
            "full": FlatReportRule(label="全身鑑定表 (¥3,000)", price=3000, connection_fee=500),
            "simple": FlatReportRule(label="簡易レポート", price=1000),
        },
        per_part_reports={
            "part": PerPartReportRule(label="１部位鑑定表", price_per_part=1500, connection_fee=300),
        },
        option=OptionRule(label="霊視相談", unit_price=1000, max_quantity=5),
        referral_discount=500,
        convenience_store_fee=220,
        convenience_store_method="convenience_store",
        payment_methods={
            "bank_transfer": "銀行振込",
            "convenience_store": "コンビニ払い",
        },
    )


@pytest.fixture
def complete_state():
    """A selection that passes every submission check."""
    return SelectionState(
        requester_name="Aoi",
        report_choice=ReportChoice.flat("full"),
        option_quantity=2,
        coupon_choice=CouponChoice.referral(),
        payment_method="convenience_store",
        agreed_to_terms=True,
    )


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)
