"""
Asset Draft Validation (``inventory_modules.assets.validation``).

Responsibility
--------------
Field-level validation and normalisation of ``AssetDraft`` before an asset
is registered or edited.  Pure: the evaluation date is passed in.

Failure modes
-------------
* Any violated rule  -> ``AssetValidationError`` naming the field.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from inventory_kernel.exceptions import AssetValidationError
from inventory_modules.assets.models import AssetDraft, AssetStatus

MAX_CODE_LENGTH = 50
MAX_NAME_LENGTH = 255
MAX_UNIT_LENGTH = 50
MAX_EXTRA_MONTHS = 11


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require_text(field: str, value: str | None, max_length: int) -> str:
    cleaned = _clean(value) if isinstance(value, str) else None
    if cleaned is None:
        raise AssetValidationError(field, "is required")
    if len(cleaned) > max_length:
        raise AssetValidationError(field, f"must be {max_length} characters or less")
    return cleaned


def _require_int(field: str, value: object, minimum: int, maximum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise AssetValidationError(field, "must be an integer")
    if value < minimum:
        raise AssetValidationError(field, f"must be greater than or equal to {minimum}")
    if maximum is not None and value > maximum:
        raise AssetValidationError(field, f"must be between {minimum} and {maximum}")
    return value


def validate_draft(
    draft: AssetDraft,
    today: date,
    allow_future_acquisition: bool = False,
) -> AssetDraft:
    """
    Validate a draft and return a normalised copy.

    Rules:
        - name required, at most 255 characters; unit required, at most 50.
        - explicit code, when given, at most 50 characters.
        - acquisition cost is a Decimal >= 0 (floats are rejected).
        - quantity >= 0; economic life years >= 0; extra months 0..11.
        - acquisition date is a date not after ``today`` unless allowed.
        - status is an ``AssetStatus`` or one of its values.
        - free-text fields are trimmed; blank ones become ``None``.

    Raises:
        AssetValidationError: On the first violated rule.
    """
    name = _require_text("name", draft.name, MAX_NAME_LENGTH)
    unit = _require_text("unit", draft.unit, MAX_UNIT_LENGTH)

    code = None
    if draft.code is not None:
        code = _require_text("code", draft.code, MAX_CODE_LENGTH)

    if draft.category_id is None:
        raise AssetValidationError("category_id", "is required")

    cost = draft.acquisition_cost
    if isinstance(cost, int) and not isinstance(cost, bool):
        cost = Decimal(cost)
    if not isinstance(cost, Decimal) or not cost.is_finite():
        raise AssetValidationError("acquisition_cost", "must be a Decimal amount")
    if cost < 0:
        raise AssetValidationError("acquisition_cost", "must be greater than or equal to 0")

    quantity = _require_int("quantity", draft.quantity, 0)
    years = _require_int("economic_life_years", draft.economic_life_years, 0)
    extra_months = _require_int(
        "economic_life_extra_months", draft.economic_life_extra_months, 0, MAX_EXTRA_MONTHS,
    )

    acquired = draft.acquisition_date
    if isinstance(acquired, datetime):
        acquired = acquired.date()
    if not isinstance(acquired, date):
        raise AssetValidationError("acquisition_date", "is required")
    if not allow_future_acquisition and acquired > today:
        raise AssetValidationError("acquisition_date", "cannot be in the future")

    status = draft.status
    if not isinstance(status, AssetStatus):
        try:
            status = AssetStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in AssetStatus)
            raise AssetValidationError("status", f"must be one of: {allowed}") from None

    return replace(
        draft,
        name=name,
        unit=unit,
        code=code,
        acquisition_cost=cost,
        acquisition_date=acquired,
        quantity=quantity,
        economic_life_years=years,
        economic_life_extra_months=extra_months,
        status=status,
        specification=_clean(draft.specification),
        notes=_clean(draft.notes),
        procurement_source=_clean(draft.procurement_source),
    )
