from datetime import date

from benefit_tracker.cycles import CarryoverCycle
from benefit_tracker.models.benefit import EarnedInstance


def test_instance_active_through_end_of_following_year():
    instance = EarnedInstance(earned_date=date(2023, 6, 15))
    cycle = CarryoverCycle(earned_instances=[instance])
    assert cycle.calculate_expiry_date(instance.earned_date) == date(2024, 12, 31)
    assert cycle.is_instance_active(instance, date(2024, 12, 31)) is True
    assert cycle.is_instance_active(instance, date(2025, 1, 1)) is False


def test_expired_instances_are_kept_but_hidden():
    old = EarnedInstance(earned_date=date(2022, 3, 1))
    current = EarnedInstance(earned_date=date(2024, 2, 1))
    cycle = CarryoverCycle(earned_instances=[old, current])
    today = date(2024, 5, 1)
    assert cycle.get_active_instances(today) == [current]
    assert len(cycle.earned_instances) == 2


def test_total_remaining_counts_active_instances_only():
    cycle = CarryoverCycle(earned_instances=[
        EarnedInstance(earned_date=date(2022, 3, 1), used_amount=0),
        EarnedInstance(earned_date=date(2023, 3, 1), used_amount=100),
        EarnedInstance(earned_date=date(2024, 3, 1), used_amount=300),
    ])
    # 2022 instance expired; 2023 has 200 left; 2024 has 0 left
    assert cycle.get_total_remaining(300, date(2024, 5, 1)) == 200


def test_one_earn_per_calendar_year():
    cycle = CarryoverCycle(earned_instances=[EarnedInstance(earned_date=date(2024, 2, 1))])
    assert cycle.can_earn_this_year(date(2024, 11, 1)) is False
    assert cycle.can_earn_this_year(date(2025, 1, 1)) is True


def test_earn_deadline_is_end_of_current_year():
    assert CarryoverCycle().get_earn_deadline(date(2024, 5, 1)) == date(2024, 12, 31)


def test_earliest_expiry_and_days():
    cycle = CarryoverCycle(earned_instances=[
        EarnedInstance(earned_date=date(2024, 2, 1)),
        EarnedInstance(earned_date=date(2023, 8, 1)),
    ])
    today = date(2024, 12, 1)
    assert cycle.get_earliest_expiry_date(today) == date(2024, 12, 31)
    assert cycle.days_until_earliest_expiry(today) == 30


def test_no_instances():
    cycle = CarryoverCycle()
    today = date(2024, 1, 1)
    assert cycle.has_active_instances(today) is False
    assert cycle.get_earliest_expiry_date(today) is None
    assert cycle.days_until_earliest_expiry(today) is None
    assert cycle.is_recurring() is False
    assert cycle.is_expired(today) is False


def test_expiring_instances_window():
    soon = EarnedInstance(earned_date=date(2023, 4, 1))
    later = EarnedInstance(earned_date=date(2024, 4, 1))
    cycle = CarryoverCycle(earned_instances=[soon, later])
    today = date(2024, 12, 10)

    expiring = cycle.get_expiring_instances(today, 30)
    assert [e.instance for e in expiring] == [soon]
    assert expiring[0].expiry_date == date(2024, 12, 31)
    assert cycle.has_expiring_within(today, 30) is True
    assert cycle.has_expiring_within(today, 20) is False


def test_expiring_excludes_instance_expiring_today():
    instance = EarnedInstance(earned_date=date(2023, 4, 1))
    cycle = CarryoverCycle(earned_instances=[instance])
    assert cycle.get_expiring_instances(date(2024, 12, 31), 30) == []
