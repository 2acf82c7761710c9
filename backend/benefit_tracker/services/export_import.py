import logging
from datetime import datetime, timezone

from benefit_tracker.models.card import Card
from benefit_tracker.schemas.export_import import ExportData, ImportResult
from benefit_tracker.schemas.records import RecordValidationError
from benefit_tracker.services.serialization import cards_from_records, cards_to_records

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


def export_cards(cards: list[Card]) -> ExportData:
    return ExportData(
        version=EXPORT_VERSION,
        exported_at=datetime.now(timezone.utc),
        cards=cards_to_records(cards),
    )


def unwrap_payload(payload) -> object:
    """Accept either a bare record array or an export document wrapping one."""
    if isinstance(payload, dict) and "cards" in payload:
        version = payload.get("version", EXPORT_VERSION)
        if version != EXPORT_VERSION:
            raise RecordValidationError(
                [f"root.version {version!r} is not supported; this app supports version {EXPORT_VERSION}"]
            )
        return payload["cards"]
    return payload


def import_cards(payload) -> tuple[list[Card], ImportResult]:
    """Validate a candidate record set and build its cards.

    Raises RecordValidationError listing every problem; nothing is built
    unless the whole set is valid. The caller replaces the stored set with
    the returned cards.
    """
    try:
        cards = cards_from_records(unwrap_payload(payload))
    except RecordValidationError as exc:
        logger.warning("Rejected import with %d validation error(s)", len(exc.errors))
        raise

    result = ImportResult(
        cards_imported=len(cards),
        benefits_imported=sum(len(card.benefits) for card in cards),
        minimum_spends_imported=sum(len(card.minimum_spends) for card in cards),
    )
    logger.info(
        "Imported %d card(s), %d benefit(s), %d minimum spend(s)",
        result.cards_imported,
        result.benefits_imported,
        result.minimum_spends_imported,
    )
    return cards, result
