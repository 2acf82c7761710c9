from datetime import date

from pydantic import BaseModel, Field


class PendingResetOut(BaseModel):
    card_id: str
    card_name: str
    benefit_id: str
    description: str
    next_reset_date: date | None = None
    missed_periods: int = 0

    model_config = {"from_attributes": True}


class ResetCheckOut(BaseModel):
    reference_date: date
    pending: list[PendingResetOut] = []
    auto_claimed: list[str] = []
    auto_reset: list[str] = []
    silent_rolled: list[str] = []
    minimum_spends_reset: list[str] = []
    saved: bool = False


class ResetBatchRequest(BaseModel):
    benefit_ids: list[str] = Field(default=[], max_length=10_000)


class ResetAcceptOut(BaseModel):
    applied: list[str] = []


class ResetDeclineOut(BaseModel):
    declined: list[PendingResetOut] = []


class ExpiringItemOut(BaseModel):
    card_id: str
    card_name: str
    benefit_id: str
    description: str
    remaining_amount: float
    expires_on: date
    instance_index: int | None = None

    model_config = {"from_attributes": True}


class ExpiringMinimumSpendOut(BaseModel):
    card_id: str
    card_name: str
    minimum_spend_id: str
    description: str
    remaining_amount: float
    deadline: date

    model_config = {"from_attributes": True}


class ExpiringOut(BaseModel):
    days: int
    active: list[ExpiringItemOut] = []
    ignored: list[ExpiringItemOut] = []
    fully_used: list[ExpiringItemOut] = []
    minimum_spends: list[ExpiringMinimumSpendOut] = []

    model_config = {"from_attributes": True}
