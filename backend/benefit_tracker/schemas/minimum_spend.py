from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from benefit_tracker.schemas.benefit import BenefitOut, ResetType

MinimumSpendFrequency = Literal["one-time", "yearly", "monthly", "quarterly", "biannual", "annual"]


class MinimumSpendCreate(BaseModel):
    description: str = Field(min_length=1, max_length=200)
    target_amount: float = Field(gt=0, le=99_999_999)
    frequency: MinimumSpendFrequency
    reset_type: ResetType | None = "calendar"
    deadline: date | None = None
    current_amount: float = Field(default=0, ge=0)
    ignored: bool = False
    ignored_end_date: date | None = None


class MinimumSpendUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1, max_length=200)
    target_amount: float | None = Field(default=None, gt=0, le=99_999_999)
    frequency: MinimumSpendFrequency | None = None
    reset_type: ResetType | None = None
    deadline: date | None = None
    ignored: bool | None = None
    ignored_end_date: date | None = None


class MinimumSpendProgressUpdate(BaseModel):
    current_amount: float


class MinimumSpendSpend(BaseModel):
    amount: float


class MinimumSpendOut(BaseModel):
    id: str
    card_id: str
    description: str
    target_amount: float
    current_amount: float
    frequency: str
    reset_type: str | None = None
    deadline: date | None = None
    last_reset: date | None = None
    is_met: bool = False
    met_date: date | None = None
    ignored: bool = False
    ignored_end_date: date | None = None
    progress_percent: float
    remaining_amount: float
    expired: bool = False
    ignored_active: bool = False
    current_deadline: date | None = None
    days_until_deadline: int | None = None
    gated_benefit_ids: list[str] = []


class MinimumSpendProgressOut(MinimumSpendOut):
    """Progress update result; lists the benefits this update unlocked."""
    newly_met: bool = False
    unlocked_benefits: list[BenefitOut] = []
