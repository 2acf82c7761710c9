from datetime import date

from pydantic import BaseModel, Field, field_validator

from benefit_tracker.schemas.benefit import BenefitOut
from benefit_tracker.schemas.minimum_spend import MinimumSpendOut
from benefit_tracker.utils.dates import to_anniversary_date


class CardCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    anniversary_date: date

    @field_validator("anniversary_date", mode="before")
    @classmethod
    def normalize_anniversary(cls, value):
        return to_anniversary_date(value)


class CardUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    anniversary_date: date | None = None

    @field_validator("anniversary_date", mode="before")
    @classmethod
    def normalize_anniversary(cls, value):
        return to_anniversary_date(value)


class ReorderRequest(BaseModel):
    old_index: int = Field(ge=0)
    new_index: int = Field(ge=0)


class CardOut(BaseModel):
    id: str
    name: str
    anniversary_date: date
    all_benefits_used: bool = False
    all_benefits_used_or_locked: bool = False
    benefits: list[BenefitOut] = []
    minimum_spends: list[MinimumSpendOut] = []
