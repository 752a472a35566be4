"""
Pricing rules tests — defaults, label display, JSON loading with fallback.
"""

import json

import pytest

from reservation import pricing_rules
from reservation.config import settings
from reservation.estimate_engine import compute_estimate
from reservation.pricing_rules import (
    DEFAULT_RULES,
    PricingRules,
    display_label,
    get_rules,
    load_pricing_rules,
)
from reservation.receipt import format_receipt
from reservation.selection import SelectionState


def test_display_label_drops_price_hint():
    assert display_label("全身鑑定表 (¥3,000)") == "全身鑑定表"
    assert display_label("報告なし") == "報告なし"


def test_default_rules_match_form_constants():
    assert DEFAULT_RULES.base_fee == 5000
    assert DEFAULT_RULES.convenience_store_fee == 220
    assert DEFAULT_RULES.referral_discount == 500
    assert DEFAULT_RULES.payment_method_label("convenience_store") == "コンビニ払い"
    assert DEFAULT_RULES.is_per_part("part")
    assert not DEFAULT_RULES.is_per_part("full")


def test_payment_method_label(rules):
    assert rules.payment_method_label("") is None
    assert rules.payment_method_label("bank_transfer") == "銀行振込"
    assert rules.payment_method_label("unknown") == "unknown"


def test_bad_amounts_normalize_to_zero():
    rules = PricingRules.model_validate({
        "base_fee": "abc",
        "referral_discount": -300,
        "flat_reports": {"x": {"label": "X", "price": "1,500"}},
    })
    assert rules.base_fee == 0
    assert rules.referral_discount == 0
    assert rules.flat_reports["x"].price == 1


def test_load_without_path_uses_defaults():
    assert load_pricing_rules("") is DEFAULT_RULES


def test_load_from_json(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({
        "base_fee": 4000,
        "flat_reports": {"full": {"label": "全身鑑定表", "price": 2500, "connection_fee": 400}},
        "option": {"label": "霊視相談", "unit_price": 800},
        "payment_methods": {"convenience_store": "コンビニ払い"},
    }, ensure_ascii=False), encoding="utf-8")
    rules = load_pricing_rules(str(path))
    assert rules.base_fee == 4000
    assert rules.flat_reports["full"].connection_fee == 400
    assert rules.option.unit_price == 800


def test_load_missing_file_falls_back(tmp_path):
    assert load_pricing_rules(str(tmp_path / "nope.json")) is DEFAULT_RULES


def test_load_invalid_json_falls_back(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_pricing_rules(str(path)) is DEFAULT_RULES


def test_load_invalid_shape_falls_back(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"flat_reports": {"x": {"price": 100}}}), encoding="utf-8")
    assert load_pricing_rules(str(path)) is DEFAULT_RULES


# ============================================================
# Configured rules are read once
# ============================================================

@pytest.fixture
def rules_file(tmp_path, monkeypatch):
    """A rules file configured via settings, with the cache reset around the test."""
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"base_fee": 4000}), encoding="utf-8")
    monkeypatch.setattr(settings, "PRICING_RULES_PATH", str(path))
    get_rules.cache_clear()
    yield path
    get_rules.cache_clear()


def test_repeated_calls_read_rules_file_once(rules_file, monkeypatch):
    opened = []
    real_open = open

    def counting_open(*args, **kwargs):
        opened.append(args[0])
        return real_open(*args, **kwargs)

    monkeypatch.setattr(pricing_rules, "open", counting_open, raising=False)
    state = SelectionState(requester_name="Aoi")
    for _ in range(3):
        estimate = compute_estimate(state)
    format_receipt(estimate, state)
    assert opened == [str(rules_file)]


def test_rules_file_change_after_load_is_not_picked_up(rules_file):
    state = SelectionState(requester_name="Aoi")
    assert compute_estimate(state).total == 4000
    rules_file.write_text(json.dumps({"base_fee": 9000}), encoding="utf-8")
    assert compute_estimate(state).total == 4000
    assert get_rules() is get_rules()
