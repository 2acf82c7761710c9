from typing import Union

from benefit_tracker.cycles.carryover_cycle import CarryoverCycle, ExpiringInstance
from benefit_tracker.cycles.expiry_cycle import RECURRING_FREQUENCIES, ExpiryCycle, OneTimeCycle
from benefit_tracker.cycles.minimum_spend_cycle import MinimumSpendCycle

BenefitCycle = Union[ExpiryCycle, OneTimeCycle, CarryoverCycle]


def derive_benefit_cycle(benefit) -> BenefitCycle:
    """Build the cycle view for a benefit from its current fields.

    Called on every cycle query; nothing is cached on the benefit.
    """
    if benefit.is_carryover or benefit.frequency == "carryover":
        return CarryoverCycle(earned_instances=benefit.earned_instances)
    if benefit.frequency == "one-time":
        return OneTimeCycle(expiry_date=benefit.expiry_date)
    return ExpiryCycle(
        frequency=benefit.frequency,
        reset_type=benefit.reset_type,
        last_reset=benefit.last_reset,
        anniversary_date=benefit.anniversary_date,
    )


def derive_minimum_spend_cycle(minimum_spend) -> MinimumSpendCycle:
    return MinimumSpendCycle(
        frequency=minimum_spend.frequency,
        reset_type=minimum_spend.reset_type,
        deadline=minimum_spend.deadline,
        last_reset=minimum_spend.last_reset,
        anniversary_date=minimum_spend.anniversary_date,
    )


__all__ = [
    "BenefitCycle",
    "CarryoverCycle",
    "ExpiringInstance",
    "ExpiryCycle",
    "MinimumSpendCycle",
    "OneTimeCycle",
    "RECURRING_FREQUENCIES",
    "derive_benefit_cycle",
    "derive_minimum_spend_cycle",
]
