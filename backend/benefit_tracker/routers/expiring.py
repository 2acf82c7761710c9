from datetime import date

from fastapi import APIRouter, Depends, Query

from benefit_tracker.config import settings
from benefit_tracker.dependencies import get_reference_date, get_store, load_cards
from benefit_tracker.schemas.reset import ExpiringOut
from benefit_tracker.services.expiring_service import get_expiring_summary
from benefit_tracker.storage import StorageBackend

router = APIRouter(prefix="/api/expiring", tags=["expiring"])


@router.get("", response_model=ExpiringOut)
def list_expiring(
    days: int | None = Query(default=None, ge=1, le=3660),
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    window = days if days is not None else settings.expiring_days
    summary = get_expiring_summary(load_cards(store), today, window)
    return ExpiringOut.model_validate(summary)
