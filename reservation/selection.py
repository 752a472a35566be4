"""
SelectionState — the user's current choices on the reservation form.

Owned and mutated by the form controller. The estimate engine, validator
and receipt formatter only read it.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator

from .parsing import parse_amount, parse_int


class ReportChoice(BaseModel):
    """A selected report tier: one flat price, or priced per named part."""
    kind: Literal["flat", "per_part"]
    id: str

    class Config:
        frozen = True

    @classmethod
    def flat(cls, report_id: str) -> "ReportChoice":
        return cls(kind="flat", id=report_id)

    @classmethod
    def per_part(cls, report_id: str) -> "ReportChoice":
        return cls(kind="per_part", id=report_id)

    @property
    def is_per_part(self) -> bool:
        return self.kind == "per_part"


class CouponChoice(BaseModel):
    """
    An answered coupon question.

    kind="none" is an explicit "no coupon" answer. An unanswered question is
    SelectionState.coupon_choice = None instead.
    """
    kind: Literal["none", "referral", "percent"]
    percent: int = 0

    class Config:
        frozen = True

    @field_validator("percent", mode="before")
    @classmethod
    def _coerce_percent(cls, v):
        return parse_int(v)

    @classmethod
    def no_coupon(cls) -> "CouponChoice":
        return cls(kind="none")

    @classmethod
    def referral(cls) -> "CouponChoice":
        return cls(kind="referral")

    @classmethod
    def percent_off(cls, percent) -> "CouponChoice":
        return cls(kind="percent", percent=percent)


class SelectionState(BaseModel):
    requester_name: str = ""
    report_choice: Optional[ReportChoice] = None
    # Entry order; blanks and duplicates allowed, blanks are skipped when pricing
    selected_parts: List[str] = []
    option_quantity: int = 0
    coupon_choice: Optional[CouponChoice] = None
    payment_method: str = ""
    remarks: str = ""
    agreed_to_terms: bool = False

    class Config:
        validate_assignment = True

    @field_validator("option_quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, v):
        return parse_amount(v)

    @field_validator("requester_name", "payment_method", "remarks", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    # --- Derived views ---

    def filled_parts(self) -> List[str]:
        """Trimmed, non-blank part names in entry order."""
        return [p.strip() for p in self.selected_parts if p and p.strip()]

    # --- Form editing ---

    def select_report(self, choice: Optional[ReportChoice]) -> None:
        """Pick a report tier. A per-part tier starts with one empty part field."""
        self.report_choice = choice
        if choice is not None and choice.is_per_part and not self.selected_parts:
            self.add_part()

    def add_part(self, name: str = "") -> None:
        self.selected_parts = self.selected_parts + [name]

    def remove_part(self, index: int) -> None:
        """Delete the part at a position. Out-of-range positions are ignored."""
        if 0 <= index < len(self.selected_parts):
            parts = list(self.selected_parts)
            del parts[index]
            self.selected_parts = parts

    def reset(self) -> None:
        """Clear every field back to the initial form state."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))
