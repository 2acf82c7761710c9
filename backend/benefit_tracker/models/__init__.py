from benefit_tracker.models.benefit import (
    Benefit,
    ClaimPolicy,
    EarnedInstance,
    UsageJustification,
    resolve_claim_policy,
)
from benefit_tracker.models.minimum_spend import MinimumSpend
from benefit_tracker.models.card import Card
from benefit_tracker.models.stored_dataset import StoredDataset

__all__ = [
    "Benefit", "ClaimPolicy", "EarnedInstance", "UsageJustification", "resolve_claim_policy",
    "MinimumSpend", "Card", "StoredDataset",
]
