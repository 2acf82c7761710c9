from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from benefit_tracker.dependencies import (
    get_card_or_404,
    get_minimum_spend_or_404,
    get_reference_date,
    get_store,
    load_cards,
    save_cards,
)
from benefit_tracker.schemas.minimum_spend import (
    MinimumSpendCreate,
    MinimumSpendOut,
    MinimumSpendProgressOut,
    MinimumSpendProgressUpdate,
    MinimumSpendSpend,
    MinimumSpendUpdate,
)
from benefit_tracker.services.minimum_spend_service import (
    add_spend,
    create_minimum_spend,
    minimum_spend_to_out,
    set_progress,
    update_minimum_spend,
)
from benefit_tracker.storage import StorageBackend

router = APIRouter(
    prefix="/api/cards/{card_id}/minimum-spends",
    tags=["minimum-spends"],
)


@router.get("", response_model=list[MinimumSpendOut])
def list_minimum_spends_endpoint(
    card_id: str,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    card = get_card_or_404(load_cards(store), card_id)
    return [minimum_spend_to_out(card, m, today) for m in card.minimum_spends]


@router.post("", response_model=MinimumSpendOut, status_code=201)
def create_minimum_spend_endpoint(
    card_id: str,
    data: MinimumSpendCreate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    minimum_spend = create_minimum_spend(card, data, today)
    save_cards(store, cards)
    return minimum_spend_to_out(card, minimum_spend, today)


@router.put("/{minimum_spend_id}", response_model=MinimumSpendOut)
def update_minimum_spend_endpoint(
    card_id: str,
    minimum_spend_id: str,
    data: MinimumSpendUpdate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    minimum_spend = get_minimum_spend_or_404(card, minimum_spend_id)
    update_minimum_spend(minimum_spend, data, today)
    save_cards(store, cards)
    return minimum_spend_to_out(card, minimum_spend, today)


@router.delete("/{minimum_spend_id}", status_code=204)
def delete_minimum_spend_endpoint(
    card_id: str, minimum_spend_id: str, store: StorageBackend = Depends(get_store)
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    # Gated benefits are unlinked, not deleted
    if not card.remove_minimum_spend(minimum_spend_id):
        raise HTTPException(status_code=404, detail="Minimum spend not found")
    save_cards(store, cards)


@router.put("/{minimum_spend_id}/progress", response_model=MinimumSpendProgressOut)
def set_progress_endpoint(
    card_id: str,
    minimum_spend_id: str,
    data: MinimumSpendProgressUpdate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    minimum_spend = get_minimum_spend_or_404(card, minimum_spend_id)
    result = set_progress(card, minimum_spend, data.current_amount, today)
    save_cards(store, cards)
    return result


@router.post("/{minimum_spend_id}/spend", response_model=MinimumSpendProgressOut)
def add_spend_endpoint(
    card_id: str,
    minimum_spend_id: str,
    data: MinimumSpendSpend,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    minimum_spend = get_minimum_spend_or_404(card, minimum_spend_id)
    result = add_spend(card, minimum_spend, data.amount, today)
    save_cards(store, cards)
    return result
