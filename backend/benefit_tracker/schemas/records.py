"""Serialized record shape for a card set and its validation.

A record set is a JSON array of card objects with camelCase keys and dates
written as ISO-8601 date-time strings. Validation is strict (no coercion
between JSON types) and every problem is reported with a path such as
``root[0].benefits[2].frequency``; the set is accepted or rejected whole.
"""
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from benefit_tracker.utils.dates import to_date

BenefitFrequency = Literal[
    "monthly", "quarterly", "biannual", "annual", "every-4-years", "one-time", "carryover"
]


def _check_iso_date(value: str) -> str:
    try:
        to_date(value)
    except (ValueError, OverflowError):
        raise ValueError("should be an ISO-8601 date") from None
    return value


IsoDateStr = Annotated[str, AfterValidator(_check_iso_date)]


class RecordValidationError(Exception):
    """A candidate record set failed validation; nothing was applied."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"{len(errors)} validation error(s): " + "; ".join(errors[:5]))


class _Record(BaseModel):
    model_config = ConfigDict(
        strict=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class UsageJustificationRecord(_Record):
    id: str | None = None
    amount: float | None = None
    justification: str | None = None
    reminder_date: IsoDateStr | None = None
    charge_date: IsoDateStr | None = None
    confirmed: bool | None = None


class EarnedInstanceRecord(_Record):
    earned_date: IsoDateStr
    used_amount: float
    usage_justifications: list[UsageJustificationRecord] | None = None


class BenefitRecord(_Record):
    id: str
    description: str
    total_amount: float
    frequency: BenefitFrequency
    used_amount: float | None = None
    reset_type: str | None = None
    last_reset: IsoDateStr | None = None
    auto_claim: bool | None = None
    auto_claim_end_date: IsoDateStr | None = None
    ignored: bool | None = None
    ignored_end_date: IsoDateStr | None = None
    expiry_date: IsoDateStr | None = None
    is_carryover: bool | None = None
    earned_instances: list[EarnedInstanceRecord] | None = None
    required_minimum_spend_id: str | None = None
    usage_justifications: list[UsageJustificationRecord] | None = None


class MinimumSpendRecord(_Record):
    id: str
    description: str
    target_amount: float
    current_amount: float
    frequency: str
    reset_type: str | None = None
    deadline: IsoDateStr | None = None
    last_reset: IsoDateStr | None = None
    is_met: bool | None = None
    met_date: IsoDateStr | None = None
    ignored: bool | None = None
    ignored_end_date: IsoDateStr | None = None


class CardRecord(_Record):
    id: str
    name: str
    anniversary_date: IsoDateStr
    benefits: list[BenefitRecord]
    minimum_spends: list[MinimumSpendRecord]


_records_adapter = TypeAdapter(list[CardRecord])

_TYPE_MESSAGES = {
    "float_type": "should be a number",
    "int_type": "should be a number",
    "bool_type": "should be a boolean",
    "string_type": "should be a string",
    "list_type": "should be an array",
    "model_type": "should be an object",
    "model_attributes_type": "should be an object",
    "dict_type": "should be an object",
}


def _format_path(loc: tuple) -> str:
    path = "root"
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


def _format_error(error: dict) -> str:
    path = _format_path(error["loc"])
    kind = error["type"]

    if kind == "missing":
        return f"{path} is required"
    if error.get("input", ...) is None:
        return f"{path} is required and cannot be null"
    if kind == "literal_error":
        expected = error.get("ctx", {}).get("expected", "")
        options = expected.replace("'", "").replace(" or ", ", ")
        return f"{path} should be one of {options}"
    if kind == "value_error":
        return f"{path} {error['ctx']['error']}"
    if kind in _TYPE_MESSAGES:
        return f"{path} {_TYPE_MESSAGES[kind]}"
    return f"{path} {error['msg']}"


def validate_records(data) -> list[str]:
    """Return every validation problem in ``data``; an empty list means valid."""
    try:
        _records_adapter.validate_python(data, strict=True)
    except ValidationError as exc:
        return [_format_error(error) for error in exc.errors()]
    return []


def parse_records(data) -> list[CardRecord]:
    """Validate and parse a record set, raising RecordValidationError on any problem."""
    try:
        return _records_adapter.validate_python(data, strict=True)
    except ValidationError as exc:
        raise RecordValidationError([_format_error(error) for error in exc.errors()]) from exc


def dump_records(records: list[CardRecord]) -> list[dict]:
    return _records_adapter.dump_python(records, by_alias=True)
