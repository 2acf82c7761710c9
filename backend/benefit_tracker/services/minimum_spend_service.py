import logging
from datetime import date

from benefit_tracker.models.card import Card
from benefit_tracker.models.minimum_spend import MinimumSpend
from benefit_tracker.schemas.minimum_spend import (
    MinimumSpendCreate,
    MinimumSpendOut,
    MinimumSpendProgressOut,
    MinimumSpendUpdate,
)
from benefit_tracker.services.benefit_service import benefit_to_out

logger = logging.getLogger(__name__)


def minimum_spend_to_out(card: Card, minimum_spend: MinimumSpend, today: date) -> MinimumSpendOut:
    return MinimumSpendOut(
        id=minimum_spend.id,
        card_id=card.id,
        description=minimum_spend.description,
        target_amount=minimum_spend.target_amount,
        current_amount=minimum_spend.current_amount,
        frequency=minimum_spend.frequency,
        reset_type=minimum_spend.reset_type,
        deadline=minimum_spend.deadline,
        last_reset=minimum_spend.last_reset,
        is_met=minimum_spend.is_met,
        met_date=minimum_spend.met_date,
        ignored=minimum_spend.ignored,
        ignored_end_date=minimum_spend.ignored_end_date,
        progress_percent=minimum_spend.get_progress_percent(),
        remaining_amount=minimum_spend.get_remaining_amount(),
        expired=minimum_spend.is_expired(today),
        ignored_active=minimum_spend.is_ignored_active(today),
        current_deadline=minimum_spend.get_deadline(today),
        days_until_deadline=minimum_spend.days_until_deadline(today),
        gated_benefit_ids=[b.id for b in card.get_benefits_requiring_minimum_spend(minimum_spend.id)],
    )


def create_minimum_spend(card: Card, data: MinimumSpendCreate, today: date) -> MinimumSpend:
    one_time = data.frequency == "one-time"
    minimum_spend = MinimumSpend(
        description=data.description,
        target_amount=data.target_amount,
        frequency=data.frequency,
        reset_type=None if one_time else (data.reset_type or "calendar"),
        deadline=data.deadline if one_time else None,
        last_reset=None if one_time else today,
        ignored=data.ignored,
        ignored_end_date=data.ignored_end_date if data.ignored else None,
    )
    card.add_minimum_spend(minimum_spend)
    minimum_spend.set_current_amount(data.current_amount, today)
    logger.info("Added %s minimum spend %s to card %s", minimum_spend.frequency, minimum_spend.id, card.id)
    return minimum_spend


def update_minimum_spend(minimum_spend: MinimumSpend, data: MinimumSpendUpdate, today: date) -> MinimumSpend:
    changes = data.model_dump(exclude_unset=True)
    changes = {
        k: v for k, v in changes.items()
        if v is not None or k in ("reset_type", "deadline", "ignored_end_date")
    }
    minimum_spend.update(changes, today)
    if minimum_spend.is_recurring():
        if minimum_spend.reset_type is None:
            minimum_spend.reset_type = "calendar"
        if minimum_spend.last_reset is None:
            minimum_spend.last_reset = today
    return minimum_spend


def _progress_out(card: Card, minimum_spend: MinimumSpend, newly_met: bool, today: date) -> MinimumSpendProgressOut:
    base = minimum_spend_to_out(card, minimum_spend, today)
    unlocked = card.get_unlocked_benefits(minimum_spend.id) if newly_met else []
    return MinimumSpendProgressOut(
        **base.model_dump(),
        newly_met=newly_met,
        unlocked_benefits=[benefit_to_out(card, b, today) for b in unlocked],
    )


def set_progress(card: Card, minimum_spend: MinimumSpend, amount: float, today: date) -> MinimumSpendProgressOut:
    newly_met = minimum_spend.set_current_amount(amount, today)
    if newly_met:
        logger.info("Minimum spend %s met on %s", minimum_spend.id, today)
    return _progress_out(card, minimum_spend, newly_met, today)


def add_spend(card: Card, minimum_spend: MinimumSpend, amount: float, today: date) -> MinimumSpendProgressOut:
    newly_met = minimum_spend.add_spend(amount, today)
    if newly_met:
        logger.info("Minimum spend %s met on %s", minimum_spend.id, today)
    return _progress_out(card, minimum_spend, newly_met, today)
