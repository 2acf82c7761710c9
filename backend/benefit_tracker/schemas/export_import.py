from datetime import datetime

from pydantic import BaseModel, Field


class ExportData(BaseModel):
    version: int = 1
    exported_at: datetime
    cards: list[dict] = Field(default=[])


class ImportResult(BaseModel):
    cards_imported: int = 0
    benefits_imported: int = 0
    minimum_spends_imported: int = 0


class ValidationReport(BaseModel):
    valid: bool
    errors: list[str] = []
