"""Structured metadata extraction and review routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from trainlog.db.dependencies import get_db
from trainlog.errors import EntryNotFoundError, InvalidInputError, ReconciliationError
from trainlog.schemas.common import ApiResponse
from trainlog.schemas.journal_entry import JournalEntryRead, MetadataReviewResult
from trainlog.schemas.structured_metadata import (
    ExtractionResultRead,
    MetadataReviewRequest,
    StructuredExtractRequest,
)
from trainlog.services.journal_entries import review_entry_metadata
from trainlog.services.structured_extraction import run_structured_extraction

router = APIRouter()


@router.post("/structured-metadata/extract", response_model=ApiResponse[ExtractionResultRead])
def extract_structured_metadata(payload: StructuredExtractRequest) -> ApiResponse[ExtractionResultRead]:
    """Run one extraction pass over journal text without persisting anything."""

    try:
        result = run_structured_extraction(
            payload.to_journal_input(),
            prior_suggestions=[suggestion.to_suggestion() for suggestion in payload.prior_suggestions],
            reevaluate_fields=payload.reevaluate_fields,
            actor_role=payload.actor_role,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ReconciliationError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(data=ExtractionResultRead.model_validate(result))


@router.post(
    "/athletes/{athlete_id}/entries/{entry_id}/structured-metadata/review",
    response_model=ApiResponse[MetadataReviewResult],
)
def review_structured_metadata(
    payload: MetadataReviewRequest,
    athlete_id: str = Path(..., min_length=1),
    entry_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[MetadataReviewResult]:
    """Confirm, correct or reject suggestions on a stored entry."""

    try:
        entry, result = review_entry_metadata(db, athlete_id, entry_id, payload)
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Entry not found") from exc
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ReconciliationError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(
        data=MetadataReviewResult(
            entry=JournalEntryRead.model_validate(entry),
            extraction=ExtractionResultRead.model_validate(result),
        )
    )
