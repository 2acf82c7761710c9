from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

BenefitFrequency = Literal[
    "monthly", "quarterly", "biannual", "annual", "every-4-years", "one-time", "carryover"
]
ResetType = Literal["calendar", "anniversary"]


class UsageJustificationCreate(BaseModel):
    amount: float = Field(ge=0, le=99_999_999)
    justification: str = Field(min_length=1, max_length=500)
    reminder_date: date | None = None
    charge_date: date | None = None
    instance_index: int | None = Field(default=None, ge=0)


class UsageJustificationUpdate(BaseModel):
    amount: float | None = Field(default=None, ge=0, le=99_999_999)
    justification: str | None = Field(default=None, min_length=1, max_length=500)
    reminder_date: date | None = None
    charge_date: date | None = None
    confirmed: bool | None = None
    instance_index: int | None = Field(default=None, ge=0)


class UsageJustificationOut(BaseModel):
    id: str
    amount: float
    justification: str
    reminder_date: date | None = None
    charge_date: date | None = None
    confirmed: bool = False
    reminder_due: bool = False

    model_config = {"from_attributes": True}


class EarnedInstanceOut(BaseModel):
    index: int
    earned_date: date
    used_amount: float
    remaining_amount: float
    expiry_date: date
    active: bool
    usage_justifications: list[UsageJustificationOut] = []


class BenefitCreate(BaseModel):
    description: str = Field(min_length=1, max_length=200)
    total_amount: float = Field(ge=0, le=99_999_999)
    frequency: BenefitFrequency
    reset_type: ResetType | None = "calendar"
    last_reset: date | None = None
    auto_claim: bool = False
    auto_claim_end_date: date | None = None
    ignored: bool = False
    ignored_end_date: date | None = None
    expiry_date: date | None = None
    required_minimum_spend_id: str | None = None


class BenefitUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1, max_length=200)
    total_amount: float | None = Field(default=None, ge=0, le=99_999_999)
    frequency: BenefitFrequency | None = None
    reset_type: ResetType | None = None
    auto_claim: bool | None = None
    auto_claim_end_date: date | None = None
    ignored: bool | None = None
    ignored_end_date: date | None = None
    expiry_date: date | None = None
    required_minimum_spend_id: str | None = None


class BenefitUsageUpdate(BaseModel):
    # Out-of-range values are clamped to [0, total_amount], not rejected
    used_amount: float


class BenefitOut(BaseModel):
    id: str
    card_id: str
    description: str
    total_amount: float
    used_amount: float
    frequency: str
    reset_type: str | None = None
    last_reset: date | None = None
    auto_claim: bool = False
    auto_claim_end_date: date | None = None
    ignored: bool = False
    ignored_end_date: date | None = None
    expiry_date: date | None = None
    is_carryover: bool = False
    required_minimum_spend_id: str | None = None
    # Derived against the reference date of the request
    remaining_amount: float
    fully_used: bool
    locked: bool = False
    auto_claim_active: bool = False
    ignored_active: bool = False
    next_reset_date: date | None = None
    days_until_reset: int | None = None
    needs_reset: bool = False
    deadline: date | None = None
    can_earn_this_year: bool = False
    carryover_remaining: float | None = None
    earned_instances: list[EarnedInstanceOut] = []
    usage_justifications: list[UsageJustificationOut] = []
    total_justified_amount: float = 0
