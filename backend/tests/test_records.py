import time
from datetime import date

import pytest

from benefit_tracker.schemas.records import RecordValidationError, parse_records, validate_records
from benefit_tracker.services.serialization import cards_from_records, cards_to_records
from tests.conftest import make_benefit, make_card, make_minimum_spend


@pytest.fixture
def new_york_tz(monkeypatch):
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def _card_record(**overrides):
    record = {
        "id": "card-1",
        "name": "Gold",
        "anniversaryDate": "2023-03-10T00:00:00",
        "benefits": [],
        "minimumSpends": [],
    }
    record.update(overrides)
    return record


def _benefit_record(**overrides):
    record = {
        "id": "benefit-1",
        "description": "Uber credit",
        "totalAmount": 15,
        "usedAmount": 0,
        "frequency": "monthly",
        "resetType": "calendar",
        "lastReset": "2024-01-15T00:00:00",
    }
    record.update(overrides)
    return record


def test_valid_record_set():
    data = [_card_record(benefits=[_benefit_record()])]
    assert validate_records(data) == []


def test_empty_set_is_valid():
    assert validate_records([]) == []


def test_root_must_be_array():
    assert validate_records({"cards": []}) == ["root should be an array"]


def test_missing_field_path():
    record = _card_record()
    del record["id"]
    assert validate_records([record]) == ["root[0].id is required"]


def test_null_field_path():
    errors = validate_records([_card_record(name=None)])
    assert errors == ["root[0].name is required and cannot be null"]


def test_wrong_type_is_not_coerced():
    data = [_card_record(), _card_record(benefits=[_benefit_record(totalAmount="15")])]
    assert validate_records(data) == ["root[1].benefits[0].totalAmount should be a number"]


def test_unknown_frequency_lists_allowed_values():
    errors = validate_records([_card_record(benefits=[_benefit_record(frequency="weekly")])])
    assert errors == [
        "root[0].benefits[0].frequency should be one of "
        "monthly, quarterly, biannual, annual, every-4-years, one-time, carryover"
    ]


def test_bad_date_string():
    errors = validate_records([_card_record(anniversaryDate="not a date")])
    assert errors == ["root[0].anniversaryDate should be an ISO-8601 date"]


def test_every_problem_is_reported():
    record = _card_record(name=5, benefits=[_benefit_record(autoClaim="yes")])
    errors = validate_records([record])
    assert "root[0].name should be a string" in errors
    assert "root[0].benefits[0].autoClaim should be a boolean" in errors
    assert len(errors) == 2


def test_parse_raises_with_all_errors():
    with pytest.raises(RecordValidationError) as exc_info:
        parse_records([_card_record(benefits="none")])
    assert exc_info.value.errors == ["root[0].benefits should be an array"]


def test_legacy_fields_are_ignored():
    benefit = _benefit_record(lastEarnReset="2023-01-01T00:00:00", earnProgress=3)
    cards = cards_from_records([_card_record(benefits=[benefit])])
    assert cards[0].benefits[0].description == "Uber credit"


def test_date_only_strings_are_accepted():
    cards = cards_from_records([_card_record(anniversaryDate="2023-03-10")])
    assert cards[0].anniversary_date == date(2023, 3, 10)


def test_serialized_shape_uses_camel_case_and_iso_dates():
    minimum_spend = make_minimum_spend(id="minspend-1")
    benefit = make_benefit(id="benefit-1", required_minimum_spend_id="minspend-1")
    benefit.add_usage_justification(5, "Lunch", reminder_date=date(2024, 2, 1))
    card = make_card(id="card-1", benefits=[benefit], minimum_spends=[minimum_spend])

    [record] = cards_to_records([card])

    assert record["anniversaryDate"] == "2023-03-10T00:00:00"
    assert record["minimumSpends"][0]["deadline"] == "2024-04-30T00:00:00"
    stored = record["benefits"][0]
    assert stored["lastReset"] == "2024-01-15T00:00:00"
    assert stored["requiredMinimumSpendId"] == "minspend-1"
    assert stored["usageJustifications"][0]["reminderDate"] == "2024-02-01T00:00:00"
    assert validate_records([record]) == []


def test_saved_cards_load_back_equal():
    carryover = make_benefit(frequency="carryover", is_carryover=True, reset_type=None, last_reset=None)
    carryover.earn_carryover_instance(date(2024, 3, 1))
    card = make_card(benefits=[make_benefit(used_amount=4), carryover], minimum_spends=[make_minimum_spend()])

    [loaded] = cards_from_records(cards_to_records([card]))

    assert loaded == card
    assert loaded.benefits[0].anniversary_date == card.anniversary_date


def test_justification_without_id_gets_one():
    benefit = _benefit_record(usageJustifications=[{"amount": 5, "justification": "Taxi"}])
    cards = cards_from_records([_card_record(benefits=[benefit])])
    assert cards[0].benefits[0].usage_justifications[0].id.startswith("just-")


def test_utc_midnight_anniversary_keeps_its_calendar_date(new_york_tz):
    card = _card_record(
        anniversaryDate="2023-03-10T00:00:00.000Z",
        benefits=[_benefit_record(
            frequency="annual", resetType="anniversary", lastReset="2024-03-10T05:00:00.000Z",
        )],
    )
    [loaded] = cards_from_records([card])

    assert loaded.anniversary_date == date(2023, 3, 10)
    benefit = loaded.benefits[0]
    assert benefit.last_reset == date(2024, 3, 10)
    assert benefit.get_next_reset_date(date(2024, 6, 1)) == date(2025, 3, 10)
