from benefit_tracker.schemas.records import (
    BenefitRecord,
    CardRecord,
    EarnedInstanceRecord,
    MinimumSpendRecord,
    RecordValidationError,
    UsageJustificationRecord,
    parse_records,
    validate_records,
)

__all__ = [
    "BenefitRecord", "CardRecord", "EarnedInstanceRecord", "MinimumSpendRecord",
    "RecordValidationError", "UsageJustificationRecord", "parse_records", "validate_records",
]
