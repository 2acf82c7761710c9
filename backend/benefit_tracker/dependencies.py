from datetime import date

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from benefit_tracker.database import get_db
from benefit_tracker.models.benefit import Benefit
from benefit_tracker.models.card import Card
from benefit_tracker.models.minimum_spend import MinimumSpend
from benefit_tracker.services.card_service import find_card
from benefit_tracker.services.serialization import cards_from_records, cards_to_records
from benefit_tracker.storage import StorageBackend, get_storage_backend
from benefit_tracker.utils.timezone import get_today


def get_store(db: Session = Depends(get_db)) -> StorageBackend:
    return get_storage_backend(db)


def get_reference_date() -> date:
    """Today's date; tests override this to move the clock."""
    return get_today()


def load_cards(store: StorageBackend) -> list[Card]:
    """Load and validate the stored record set. Raises StorageError or RecordValidationError."""
    return cards_from_records(store.load_data())


def save_cards(store: StorageBackend, cards: list[Card]) -> None:
    store.save_data(cards_to_records(cards))


def get_card_or_404(cards: list[Card], card_id: str) -> Card:
    card = find_card(cards, card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


def get_benefit_or_404(card: Card, benefit_id: str) -> Benefit:
    benefit = card.find_benefit(benefit_id)
    if not benefit:
        raise HTTPException(status_code=404, detail="Benefit not found")
    return benefit


def get_minimum_spend_or_404(card: Card, minimum_spend_id: str) -> MinimumSpend:
    minimum_spend = card.find_minimum_spend(minimum_spend_id)
    if not minimum_spend:
        raise HTTPException(status_code=404, detail="Minimum spend not found")
    return minimum_spend
