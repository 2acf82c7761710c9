import logging
from datetime import date

from benefit_tracker.cycles import CarryoverCycle
from benefit_tracker.models.benefit import Benefit, ClaimPolicy, EarnedInstance, UsageJustification
from benefit_tracker.models.card import Card
from benefit_tracker.schemas.benefit import (
    BenefitCreate,
    BenefitOut,
    BenefitUpdate,
    EarnedInstanceOut,
    UsageJustificationCreate,
    UsageJustificationOut,
    UsageJustificationUpdate,
)

logger = logging.getLogger(__name__)

# Fields that may be cleared to null through an update
_NULLABLE_FIELDS = {
    "reset_type",
    "auto_claim_end_date",
    "ignored_end_date",
    "expiry_date",
    "required_minimum_spend_id",
}


def _justification_to_out(entry: UsageJustification, today: date) -> UsageJustificationOut:
    out = UsageJustificationOut.model_validate(entry)
    out.reminder_due = entry.is_reminder_due(today)
    return out


def _instance_to_out(benefit: Benefit, index: int, instance: EarnedInstance, today: date) -> EarnedInstanceOut:
    cycle = CarryoverCycle(earned_instances=benefit.earned_instances)
    return EarnedInstanceOut(
        index=index,
        earned_date=instance.earned_date,
        used_amount=instance.used_amount,
        remaining_amount=max(benefit.total_amount - (instance.used_amount or 0), 0),
        expiry_date=cycle.calculate_expiry_date(instance.earned_date),
        active=cycle.is_instance_active(instance, today),
        usage_justifications=[_justification_to_out(j, today) for j in instance.usage_justifications],
    )


def benefit_to_out(card: Card, benefit: Benefit, today: date) -> BenefitOut:
    """Convert a benefit to its response, with every cycle field derived for ``today``."""
    carryover = benefit.is_carryover_benefit()
    return BenefitOut(
        id=benefit.id,
        card_id=card.id,
        description=benefit.description,
        total_amount=benefit.total_amount,
        used_amount=benefit.used_amount,
        frequency=benefit.frequency,
        reset_type=benefit.reset_type,
        last_reset=benefit.last_reset,
        auto_claim=benefit.auto_claim,
        auto_claim_end_date=benefit.auto_claim_end_date,
        ignored=benefit.ignored,
        ignored_end_date=benefit.ignored_end_date,
        expiry_date=benefit.expiry_date,
        is_carryover=benefit.is_carryover,
        required_minimum_spend_id=benefit.required_minimum_spend_id,
        remaining_amount=benefit.get_remaining_amount(),
        fully_used=benefit.is_fully_used(today),
        locked=card.is_benefit_locked(benefit),
        auto_claim_active=benefit.is_auto_claim_active(today),
        ignored_active=benefit.is_ignored_active(today),
        next_reset_date=benefit.get_next_reset_date(today),
        days_until_reset=benefit.days_until_reset(today),
        needs_reset=benefit.needs_reset(today),
        deadline=benefit.get_deadline(today),
        can_earn_this_year=benefit.can_earn_carryover_this_year(today),
        carryover_remaining=benefit.get_total_carryover_remaining(today) if carryover else None,
        earned_instances=[
            _instance_to_out(benefit, i, instance, today)
            for i, instance in enumerate(benefit.earned_instances)
        ],
        usage_justifications=[_justification_to_out(j, today) for j in benefit.usage_justifications],
        total_justified_amount=benefit.get_total_justified_amount(),
    )


def _clean_changes(data) -> dict:
    changes = data.model_dump(exclude_unset=True)
    return {k: v for k, v in changes.items() if v is not None or k in _NULLABLE_FIELDS}


def create_benefit(card: Card, data: BenefitCreate, today: date) -> Benefit:
    carryover = data.frequency == "carryover"
    recurring = data.frequency not in ("one-time", "carryover")
    benefit = Benefit(
        description=data.description,
        total_amount=data.total_amount,
        frequency=data.frequency,
        reset_type=(data.reset_type or "calendar") if recurring else None,
        last_reset=(data.last_reset or today) if recurring else None,
        expiry_date=data.expiry_date if data.frequency == "one-time" else None,
        is_carryover=carryover,
        required_minimum_spend_id=data.required_minimum_spend_id or None,
    )
    benefit.apply_claim_policy(ClaimPolicy(
        auto_claim=data.auto_claim,
        auto_claim_end_date=data.auto_claim_end_date,
        ignored=data.ignored,
        ignored_end_date=data.ignored_end_date,
    ))
    benefit.apply_auto_claim(today)
    card.add_benefit(benefit)
    logger.info("Added %s benefit %s to card %s", benefit.frequency, benefit.id, card.id)
    return benefit


def update_benefit(benefit: Benefit, data: BenefitUpdate, today: date) -> Benefit:
    benefit.update(_clean_changes(data))
    if benefit.is_recurring():
        # Switched from one-time or carryover: start the first period today
        if benefit.reset_type is None:
            benefit.reset_type = "calendar"
        if benefit.last_reset is None:
            benefit.last_reset = today
    benefit.apply_auto_claim(today)
    return benefit


def update_usage(benefit: Benefit, used_amount: float, today: date) -> Benefit:
    benefit.set_used_amount(used_amount)
    # Auto-claim keeps the benefit pinned at fully used
    benefit.apply_auto_claim(today)
    return benefit


def earn_instance(benefit: Benefit, today: date) -> EarnedInstance | None:
    instance = benefit.earn_carryover_instance(today)
    if instance is None:
        logger.warning("Benefit %s cannot earn a carryover instance on %s", benefit.id, today)
    else:
        logger.info("Benefit %s earned a carryover instance on %s", benefit.id, today)
    return instance


def update_instance_usage(benefit: Benefit, instance_index: int, used_amount: float) -> bool:
    return benefit.set_carryover_instance_usage(instance_index, used_amount)


def add_justification(benefit: Benefit, data: UsageJustificationCreate) -> UsageJustification | None:
    return benefit.add_usage_justification(
        data.amount,
        data.justification,
        reminder_date=data.reminder_date,
        charge_date=data.charge_date,
        instance_index=data.instance_index,
    )


def update_justification(benefit: Benefit, justification_id: str, data: UsageJustificationUpdate) -> bool:
    changes = data.model_dump(exclude_unset=True, exclude={"instance_index"})
    changes = {k: v for k, v in changes.items() if v is not None or k in ("reminder_date", "charge_date")}
    return benefit.update_usage_justification(justification_id, changes, data.instance_index)
