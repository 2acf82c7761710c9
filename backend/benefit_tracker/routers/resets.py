from datetime import date

from fastapi import APIRouter, Depends

from benefit_tracker.dependencies import get_reference_date, get_store, load_cards, save_cards
from benefit_tracker.schemas.reset import (
    PendingResetOut,
    ResetAcceptOut,
    ResetBatchRequest,
    ResetCheckOut,
    ResetDeclineOut,
)
from benefit_tracker.services.reset_engine import apply_resets, check_and_reset, decline_resets
from benefit_tracker.storage import StorageBackend

router = APIRouter(prefix="/api/resets", tags=["resets"])


@router.post("/check", response_model=ResetCheckOut)
def check_resets(store: StorageBackend = Depends(get_store), today: date = Depends(get_reference_date)):
    """Apply automatic rollovers and list the resets waiting for the user."""
    cards = load_cards(store)
    report = check_and_reset(cards, today)
    if report.changed:
        save_cards(store, cards)
    return ResetCheckOut(
        reference_date=today,
        pending=[PendingResetOut.model_validate(p) for p in report.pending],
        auto_claimed=report.auto_claimed,
        auto_reset=report.auto_reset,
        silent_rolled=report.silent_rolled,
        minimum_spends_reset=report.minimum_spends_reset,
        saved=report.changed,
    )


@router.post("/accept", response_model=ResetAcceptOut)
def accept_resets(
    data: ResetBatchRequest,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    applied = apply_resets(cards, data.benefit_ids, today)
    # A failed save raises before anything is reported as applied
    if applied:
        save_cards(store, cards)
    return ResetAcceptOut(applied=applied)


@router.post("/decline", response_model=ResetDeclineOut)
def decline_resets_endpoint(
    data: ResetBatchRequest,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    declined = decline_resets(cards, data.benefit_ids, today)
    return ResetDeclineOut(declined=[PendingResetOut.model_validate(p) for p in declined])
