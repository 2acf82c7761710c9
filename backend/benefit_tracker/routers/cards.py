from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from benefit_tracker.dependencies import (
    get_card_or_404,
    get_reference_date,
    get_store,
    load_cards,
    save_cards,
)
from benefit_tracker.schemas.card import CardCreate, CardOut, CardUpdate, ReorderRequest
from benefit_tracker.services.card_service import (
    card_to_out,
    create_card,
    delete_card,
    reorder_cards,
    update_card,
)
from benefit_tracker.storage import StorageBackend

router = APIRouter(prefix="/api/cards", tags=["cards"])


@router.get("", response_model=list[CardOut])
def list_cards(store: StorageBackend = Depends(get_store), today: date = Depends(get_reference_date)):
    return [card_to_out(card, today) for card in load_cards(store)]


@router.post("", response_model=CardOut, status_code=201)
def create_card_endpoint(
    data: CardCreate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = create_card(cards, data)
    save_cards(store, cards)
    return card_to_out(card, today)


@router.post("/reorder", response_model=list[CardOut])
def reorder_cards_endpoint(
    data: ReorderRequest,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    if data.old_index >= len(cards) or data.new_index >= len(cards):
        raise HTTPException(status_code=400, detail="Index out of range")
    if reorder_cards(cards, data.old_index, data.new_index):
        save_cards(store, cards)
    return [card_to_out(card, today) for card in cards]


@router.get("/{card_id}", response_model=CardOut)
def get_card_endpoint(
    card_id: str,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    card = get_card_or_404(load_cards(store), card_id)
    return card_to_out(card, today)


@router.put("/{card_id}", response_model=CardOut)
def update_card_endpoint(
    card_id: str,
    data: CardUpdate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    update_card(card, data)
    save_cards(store, cards)
    return card_to_out(card, today)


@router.delete("/{card_id}", status_code=204)
def delete_card_endpoint(card_id: str, store: StorageBackend = Depends(get_store)):
    cards = load_cards(store)
    if not delete_card(cards, card_id):
        raise HTTPException(status_code=404, detail="Card not found")
    save_cards(store, cards)
