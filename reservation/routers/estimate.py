"""
Estimate API — thin HTTP surface for the reservation form.

GET  /api/estimate/rules     — Active pricing rules
POST /api/estimate           — Compute the estimate for a SelectionState
POST /api/estimate/form      — Same, from raw form fields
POST /api/estimate/validate  — Run the submission checks
POST /api/estimate/receipt   — Validate, then render the receipt text (copy action)
POST /api/estimate/submit    — As receipt, plus the messaging channel link
"""

import logging

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..estimate_engine import EstimateEngine
from ..form_input import selection_from_form
from ..pricing_rules import get_rules
from ..receipt import ReceiptFormatter, format_price
from ..selection import SelectionState
from ..validator import Validator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estimate", tags=["estimate"])

# Rules are read once; engine, validator and formatter hold no per-request state
rules = get_rules()
engine = EstimateEngine(rules)
validator = Validator()
formatter = ReceiptFormatter(rules)


def _estimate_response(state: SelectionState) -> dict:
    estimate = engine.compute(state)
    return {
        "estimate": estimate.model_dump(),
        "formatted_total": format_price(estimate.total),
    }


def _accepted_receipt(state: SelectionState) -> dict:
    """Validate first; only an accepted selection gets a receipt."""
    result = validator.validate(state)
    if not result.is_valid:
        raise HTTPException(status_code=422, detail={
            "message": result.message,
            "field_errors": [e.model_dump() for e in result.field_errors],
        })
    estimate = engine.compute(state)
    return {"text": formatter.format(estimate, state), "total": estimate.total}


@router.get("/rules")
def read_rules():
    return rules.model_dump()


@router.post("")
def compute(state: SelectionState):
    return _estimate_response(state)


@router.post("/form")
def compute_from_form(form: dict):
    """Recount from the raw form fields, as the page does on every input."""
    return _estimate_response(selection_from_form(form, rules))


@router.post("/validate")
def validate(state: SelectionState):
    return validator.validate(state).model_dump()


@router.post("/receipt")
def receipt(state: SelectionState):
    return _accepted_receipt(state)


@router.post("/submit")
def submit(state: SelectionState):
    """
    Receipt text plus the contact link. The client copies the text, then
    opens the link; neither step changes anything here.
    """
    response = _accepted_receipt(state)
    response["contact_url"] = settings.CONTACT_URL
    logger.info("Submission accepted, total %d", response["total"])
    return response
