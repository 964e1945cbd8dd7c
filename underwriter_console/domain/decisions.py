"""Underwriting decisions and their local validation.

A decision is built from raw form input (strings, exactly as typed) and
validated before anything goes over the wire. ``payload()`` raises
``ValidationError`` for bad input and otherwise returns the request body
for the decision endpoint.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from underwriter_console.domain.exceptions import ValidationError
from underwriter_console.utils.validation import is_blank, parse_positive_amount


class DecisionKind(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    REVIEW_LIMIT = "review_limit"
    EDIT_NAME = "edit_name"


class LimitDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


def _amount(raw: str, label: str) -> Union[int, float]:
    if is_blank(raw):
        raise ValidationError(f"{label} is required")
    amount = parse_positive_amount(raw)
    if amount is None:
        raise ValidationError(f"{label} must be a positive number")
    return int(amount) if amount == amount.to_integral_value() else float(amount)


@dataclass(frozen=True)
class Approve:
    target_user_id: str
    credit_limit: str

    kind = DecisionKind.APPROVE

    def payload(self) -> Dict[str, Any]:
        return {"creditLimit": _amount(self.credit_limit, "Credit limit")}


@dataclass(frozen=True)
class Reject:
    target_user_id: str
    reason: str

    kind = DecisionKind.REJECT

    def payload(self) -> Dict[str, Any]:
        if is_blank(self.reason):
            raise ValidationError("A reason is required to reject an application")
        return {"reason": self.reason.strip()}


@dataclass(frozen=True)
class ReviewLimit:
    target_user_id: str
    direction: str
    new_limit: str

    kind = DecisionKind.REVIEW_LIMIT

    def payload(self) -> Dict[str, Any]:
        try:
            direction = LimitDirection((self.direction or "").strip().lower())
        except ValueError:
            raise ValidationError("Choose whether to increase or decrease the limit") from None
        return {"action": direction.value, "newLimit": _amount(self.new_limit, "New limit")}


@dataclass(frozen=True)
class EditName:
    target_user_id: str
    first_name: str
    last_name: str = ""

    kind = DecisionKind.EDIT_NAME

    def payload(self) -> Dict[str, Any]:
        if is_blank(self.first_name):
            raise ValidationError("First name is required")
        return {"firstName": self.first_name.strip(), "lastName": (self.last_name or "").strip()}


Decision = Union[Approve, Reject, ReviewLimit, EditName]


def decision_from_form(target_user_id: str, kind: str, fields: Dict[str, Any]) -> Decision:
    """Build a decision from a submitted form; unknown kinds are a validation error"""
    try:
        decision_kind = DecisionKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown decision type: {kind}") from None

    if decision_kind is DecisionKind.APPROVE:
        return Approve(target_user_id, _text(fields.get("credit_limit")))
    if decision_kind is DecisionKind.REJECT:
        return Reject(target_user_id, _text(fields.get("reason")))
    if decision_kind is DecisionKind.REVIEW_LIMIT:
        return ReviewLimit(
            target_user_id,
            _text(fields.get("direction")),
            _text(fields.get("new_limit")),
        )
    return EditName(
        target_user_id,
        _text(fields.get("first_name")),
        _text(fields.get("last_name")),
    )


def _text(value: Any) -> str:
    return "" if value is None else str(value)
