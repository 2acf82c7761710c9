from typing import Any

from fastapi import APIRouter, Body, Depends

from benefit_tracker.dependencies import get_store, load_cards, save_cards
from benefit_tracker.schemas.export_import import ExportData, ImportResult, ValidationReport
from benefit_tracker.schemas.records import validate_records
from benefit_tracker.services.export_import import export_cards, import_cards, unwrap_payload
from benefit_tracker.storage import StorageBackend

router = APIRouter(prefix="/api/data", tags=["data"])


@router.get("/export", response_model=ExportData)
def export_data(store: StorageBackend = Depends(get_store)):
    return export_cards(load_cards(store))


@router.post("/validate", response_model=ValidationReport)
def validate_data(payload: Any = Body(...)):
    """Check a candidate record set without storing it."""
    errors = validate_records(unwrap_payload(payload))
    return ValidationReport(valid=not errors, errors=errors)


@router.post("/import", response_model=ImportResult)
def import_data(payload: Any = Body(...), store: StorageBackend = Depends(get_store)):
    """Replace the stored record set. Rejected whole when any record is invalid."""
    cards, result = import_cards(payload)
    save_cards(store, cards)
    return result
