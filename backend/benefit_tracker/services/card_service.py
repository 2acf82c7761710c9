import logging
from datetime import date

from benefit_tracker.models.card import Card, move_item
from benefit_tracker.schemas.card import CardCreate, CardOut, CardUpdate
from benefit_tracker.services.benefit_service import benefit_to_out
from benefit_tracker.services.minimum_spend_service import minimum_spend_to_out

logger = logging.getLogger(__name__)


def find_card(cards: list[Card], card_id: str) -> Card | None:
    return next((c for c in cards if c.id == card_id), None)


def card_to_out(card: Card, today: date) -> CardOut:
    return CardOut(
        id=card.id,
        name=card.name,
        anniversary_date=card.anniversary_date,
        all_benefits_used=card.is_all_benefits_used(today),
        all_benefits_used_or_locked=card.is_all_benefits_used_or_locked(today),
        benefits=[benefit_to_out(card, b, today) for b in card.benefits],
        minimum_spends=[minimum_spend_to_out(card, m, today) for m in card.minimum_spends],
    )


def create_card(cards: list[Card], data: CardCreate) -> Card:
    card = Card(name=data.name, anniversary_date=data.anniversary_date)
    cards.append(card)
    logger.info("Created card %s", card.id)
    return card


def update_card(card: Card, data: CardUpdate) -> Card:
    card.update(name=data.name, anniversary_date=data.anniversary_date)
    return card


def delete_card(cards: list[Card], card_id: str) -> bool:
    card = find_card(cards, card_id)
    if card is None:
        return False
    # Benefits and minimum spends go with the card
    cards.remove(card)
    logger.info("Deleted card %s with %d benefit(s)", card_id, len(card.benefits))
    return True


def reorder_cards(cards: list[Card], old_index: int, new_index: int) -> bool:
    return move_item(cards, old_index, new_index)
