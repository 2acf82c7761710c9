from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from benefit_tracker.dependencies import (
    get_benefit_or_404,
    get_card_or_404,
    get_reference_date,
    get_store,
    load_cards,
    save_cards,
)
from benefit_tracker.models.card import Card
from benefit_tracker.schemas.benefit import (
    BenefitCreate,
    BenefitOut,
    BenefitUpdate,
    BenefitUsageUpdate,
    UsageJustificationCreate,
    UsageJustificationUpdate,
)
from benefit_tracker.schemas.card import ReorderRequest
from benefit_tracker.services.benefit_service import (
    add_justification,
    benefit_to_out,
    create_benefit,
    earn_instance,
    update_benefit,
    update_instance_usage,
    update_justification,
    update_usage,
)
from benefit_tracker.storage import StorageBackend

router = APIRouter(
    prefix="/api/cards/{card_id}/benefits",
    tags=["benefits"],
)


def _check_minimum_spend_link(card: Card, minimum_spend_id: str | None) -> None:
    if minimum_spend_id and not card.find_minimum_spend(minimum_spend_id):
        raise HTTPException(status_code=400, detail="Linked minimum spend does not exist on this card")


@router.get("", response_model=list[BenefitOut])
def list_benefits_endpoint(
    card_id: str,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    card = get_card_or_404(load_cards(store), card_id)
    return [benefit_to_out(card, b, today) for b in card.benefits]


@router.post("", response_model=BenefitOut, status_code=201)
def create_benefit_endpoint(
    card_id: str,
    data: BenefitCreate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    _check_minimum_spend_link(card, data.required_minimum_spend_id)
    benefit = create_benefit(card, data, today)
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)


@router.post("/reorder", response_model=list[BenefitOut])
def reorder_benefits_endpoint(
    card_id: str,
    data: ReorderRequest,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    if data.old_index >= len(card.benefits) or data.new_index >= len(card.benefits):
        raise HTTPException(status_code=400, detail="Index out of range")
    if card.reorder_benefits(data.old_index, data.new_index):
        save_cards(store, cards)
    return [benefit_to_out(card, b, today) for b in card.benefits]


@router.put("/{benefit_id}", response_model=BenefitOut)
def update_benefit_endpoint(
    card_id: str,
    benefit_id: str,
    data: BenefitUpdate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    _check_minimum_spend_link(card, data.required_minimum_spend_id)
    update_benefit(benefit, data, today)
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)


@router.delete("/{benefit_id}", status_code=204)
def delete_benefit_endpoint(card_id: str, benefit_id: str, store: StorageBackend = Depends(get_store)):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    if not card.remove_benefit(benefit_id):
        raise HTTPException(status_code=404, detail="Benefit not found")
    save_cards(store, cards)


@router.put("/{benefit_id}/usage", response_model=BenefitOut)
def update_usage_endpoint(
    card_id: str,
    benefit_id: str,
    data: BenefitUsageUpdate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    update_usage(benefit, data.used_amount, today)
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)


# ==================== CARRYOVER INSTANCES ====================


@router.post("/{benefit_id}/instances", response_model=BenefitOut, status_code=201)
def earn_instance_endpoint(
    card_id: str,
    benefit_id: str,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    if not benefit.is_carryover_benefit():
        raise HTTPException(status_code=400, detail="Benefit is not a carryover benefit")
    if earn_instance(benefit, today) is None:
        raise HTTPException(status_code=409, detail="Already earned this calendar year")
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)


@router.put("/{benefit_id}/instances/{instance_index}/usage", response_model=BenefitOut)
def update_instance_usage_endpoint(
    card_id: str,
    benefit_id: str,
    instance_index: int,
    data: BenefitUsageUpdate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    if not update_instance_usage(benefit, instance_index, data.used_amount):
        raise HTTPException(status_code=404, detail="Earned instance not found")
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)


# ==================== USAGE JUSTIFICATIONS ====================


@router.post("/{benefit_id}/justifications", response_model=BenefitOut, status_code=201)
def add_justification_endpoint(
    card_id: str,
    benefit_id: str,
    data: UsageJustificationCreate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    if add_justification(benefit, data) is None:
        raise HTTPException(status_code=404, detail="Earned instance not found")
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)


@router.put("/{benefit_id}/justifications/{justification_id}", response_model=BenefitOut)
def update_justification_endpoint(
    card_id: str,
    benefit_id: str,
    justification_id: str,
    data: UsageJustificationUpdate,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    if not update_justification(benefit, justification_id, data):
        raise HTTPException(status_code=404, detail="Justification not found")
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)


@router.delete("/{benefit_id}/justifications/{justification_id}", status_code=204)
def delete_justification_endpoint(
    card_id: str,
    benefit_id: str,
    justification_id: str,
    instance_index: int | None = None,
    store: StorageBackend = Depends(get_store),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    if not benefit.remove_usage_justification(justification_id, instance_index):
        raise HTTPException(status_code=404, detail="Justification not found")
    save_cards(store, cards)


@router.post("/{benefit_id}/justifications/{justification_id}/confirm", response_model=BenefitOut)
def confirm_justification_endpoint(
    card_id: str,
    benefit_id: str,
    justification_id: str,
    instance_index: int | None = None,
    store: StorageBackend = Depends(get_store),
    today: date = Depends(get_reference_date),
):
    cards = load_cards(store)
    card = get_card_or_404(cards, card_id)
    benefit = get_benefit_or_404(card, benefit_id)
    if not benefit.confirm_justification(justification_id, instance_index):
        raise HTTPException(status_code=404, detail="Justification not found")
    save_cards(store, cards)
    return benefit_to_out(card, benefit, today)
