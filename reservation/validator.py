"""
Validator — gates copy/submit of the reservation form.

Checks run in a fixed order; the first failure is the message shown to the
user, every failure marks its field.
"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel

from .selection import SelectionState

logger = logging.getLogger(__name__)

MESSAGES = {
    "requester_name": "お名前は必須です。",
    "report_type": "報告タイプを選択してください。",
    "part_names": "１部位鑑定表を選択した場合は、指定部位を1つ以上入力してください。",
    "coupon_type": "クーポンの有無を選択してください。",
    "payment_method": "お支払い方法は必須です。",
    "agree_all": "ご確認事項への同意は必須です。",
}


class FieldError(BaseModel):
    field_id: str
    message: str

    class Config:
        frozen = True


class ValidationResult(BaseModel):
    is_valid: bool
    field_errors: Tuple[FieldError, ...] = ()

    class Config:
        frozen = True

    @property
    def message(self) -> Optional[str]:
        """The user-facing message: the first error, if any."""
        return self.field_errors[0].message if self.field_errors else None

    @property
    def error_fields(self) -> List[str]:
        return [e.field_id for e in self.field_errors]


class Validator:

    def validate(self, state: SelectionState) -> ValidationResult:
        failed: List[str] = []

        if not state.requester_name.strip():
            failed.append("requester_name")

        if state.report_choice is None:
            failed.append("report_type")
        elif state.report_choice.is_per_part and not state.filled_parts():
            failed.append("part_names")

        # None = not answered yet; an explicit "no coupon" answer passes
        if state.coupon_choice is None:
            failed.append("coupon_type")

        if not state.payment_method:
            failed.append("payment_method")

        if not state.agreed_to_terms:
            failed.append("agree_all")

        errors = tuple(FieldError(field_id=f, message=MESSAGES[f]) for f in failed)
        if errors:
            logger.debug("Validation failed on %s", ", ".join(failed))
        return ValidationResult(is_valid=not errors, field_errors=errors)


def validate_selection(state: SelectionState) -> ValidationResult:
    return Validator().validate(state)
