from benefit_tracker.models.benefit import Benefit, EarnedInstance, UsageJustification, new_id
from benefit_tracker.models.card import Card
from benefit_tracker.models.minimum_spend import MinimumSpend
from benefit_tracker.schemas.records import (
    BenefitRecord,
    CardRecord,
    EarnedInstanceRecord,
    MinimumSpendRecord,
    UsageJustificationRecord,
    dump_records,
    parse_records,
)
from benefit_tracker.utils.dates import to_anniversary_date, to_date, to_iso


def _justification_from_record(record: UsageJustificationRecord) -> UsageJustification:
    return UsageJustification(
        id=record.id or new_id("just"),
        amount=record.amount or 0,
        justification=record.justification or "",
        reminder_date=to_date(record.reminder_date),
        charge_date=to_date(record.charge_date),
        confirmed=record.confirmed or False,
    )


def _justification_to_record(entry: UsageJustification) -> UsageJustificationRecord:
    return UsageJustificationRecord(
        id=entry.id,
        amount=entry.amount,
        justification=entry.justification,
        reminder_date=to_iso(entry.reminder_date),
        charge_date=to_iso(entry.charge_date),
        confirmed=entry.confirmed,
    )


def _instance_from_record(record: EarnedInstanceRecord) -> EarnedInstance:
    return EarnedInstance(
        earned_date=to_date(record.earned_date),
        used_amount=record.used_amount,
        usage_justifications=[_justification_from_record(j) for j in record.usage_justifications or []],
    )


def _benefit_from_record(record: BenefitRecord) -> Benefit:
    return Benefit(
        id=record.id,
        description=record.description,
        total_amount=record.total_amount,
        used_amount=record.used_amount or 0,
        frequency=record.frequency,
        reset_type=record.reset_type or None,
        last_reset=to_date(record.last_reset),
        auto_claim=record.auto_claim or False,
        auto_claim_end_date=to_date(record.auto_claim_end_date),
        ignored=record.ignored or False,
        ignored_end_date=to_date(record.ignored_end_date),
        expiry_date=to_date(record.expiry_date),
        is_carryover=record.is_carryover or False,
        earned_instances=[_instance_from_record(i) for i in record.earned_instances or []],
        required_minimum_spend_id=record.required_minimum_spend_id or None,
        usage_justifications=[_justification_from_record(j) for j in record.usage_justifications or []],
    )


def _minimum_spend_from_record(record: MinimumSpendRecord) -> MinimumSpend:
    return MinimumSpend(
        id=record.id,
        description=record.description,
        target_amount=record.target_amount,
        current_amount=record.current_amount,
        frequency=record.frequency,
        reset_type=record.reset_type or None,
        deadline=to_date(record.deadline),
        last_reset=to_date(record.last_reset),
        is_met=record.is_met or False,
        met_date=to_date(record.met_date),
        ignored=record.ignored or False,
        ignored_end_date=to_date(record.ignored_end_date),
    )


def card_from_record(record: CardRecord) -> Card:
    return Card(
        id=record.id,
        name=record.name,
        anniversary_date=to_anniversary_date(record.anniversary_date),
        benefits=[_benefit_from_record(b) for b in record.benefits],
        minimum_spends=[_minimum_spend_from_record(m) for m in record.minimum_spends],
    )


def card_to_record(card: Card) -> CardRecord:
    benefits = [
        BenefitRecord(
            id=b.id,
            description=b.description,
            total_amount=b.total_amount,
            used_amount=b.used_amount,
            frequency=b.frequency,
            reset_type=b.reset_type,
            last_reset=to_iso(b.last_reset),
            auto_claim=b.auto_claim,
            auto_claim_end_date=to_iso(b.auto_claim_end_date),
            ignored=b.ignored,
            ignored_end_date=to_iso(b.ignored_end_date),
            expiry_date=to_iso(b.expiry_date),
            is_carryover=b.is_carryover,
            earned_instances=[
                EarnedInstanceRecord(
                    earned_date=to_iso(i.earned_date),
                    used_amount=i.used_amount,
                    usage_justifications=[_justification_to_record(j) for j in i.usage_justifications],
                )
                for i in b.earned_instances
            ],
            required_minimum_spend_id=b.required_minimum_spend_id,
            usage_justifications=[_justification_to_record(j) for j in b.usage_justifications],
        )
        for b in card.benefits
    ]
    minimum_spends = [
        MinimumSpendRecord(
            id=m.id,
            description=m.description,
            target_amount=m.target_amount,
            current_amount=m.current_amount,
            frequency=m.frequency,
            reset_type=m.reset_type,
            deadline=to_iso(m.deadline),
            last_reset=to_iso(m.last_reset),
            is_met=m.is_met,
            met_date=to_iso(m.met_date),
            ignored=m.ignored,
            ignored_end_date=to_iso(m.ignored_end_date),
        )
        for m in card.minimum_spends
    ]
    return CardRecord(
        id=card.id,
        name=card.name,
        anniversary_date=to_iso(card.anniversary_date),
        benefits=benefits,
        minimum_spends=minimum_spends,
    )


def cards_from_records(data) -> list[Card]:
    """Build aggregates from a raw record set. Raises RecordValidationError."""
    return [card_from_record(record) for record in parse_records(data)]


def cards_to_records(cards: list[Card]) -> list[dict]:
    return dump_records([card_to_record(card) for card in cards])
