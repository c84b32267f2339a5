"""Legacy import preview and commit routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from trainlog.db.dependencies import get_db
from trainlog.errors import InvalidInputError, ReconciliationError
from trainlog.schemas.common import ApiResponse
from trainlog.schemas.journal_entry import JournalEntryRead
from trainlog.schemas.legacy_import import (
    LegacyImportCommitRequest,
    LegacyImportCommitResult,
    LegacyImportPreviewRead,
    LegacyImportPreviewRequest,
)
from trainlog.services.journal_entries import commit_legacy_import
from trainlog.services.legacy_import import preview_legacy_import

router = APIRouter(prefix="/athletes/{athlete_id}/legacy-imports")


@router.post("/preview", response_model=ApiResponse[LegacyImportPreviewRead])
def preview_import(
    payload: LegacyImportPreviewRequest,
    athlete_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[LegacyImportPreviewRead]:
    """Preview a legacy note as a draft entry. Nothing is written."""

    try:
        preview = preview_legacy_import(db, athlete_id, payload.to_request())
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ApiResponse(data=LegacyImportPreviewRead.model_validate(preview))


@router.post("/commit", response_model=ApiResponse[LegacyImportCommitResult], status_code=201)
def commit_import(
    payload: LegacyImportCommitRequest,
    athlete_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[LegacyImportCommitResult]:
    """Commit a previewed legacy note as a journal entry."""

    try:
        entry, preview = commit_legacy_import(db, athlete_id, payload)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ReconciliationError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(
        data=LegacyImportCommitResult(
            entry=JournalEntryRead.model_validate(entry),
            dedup_status=preview.dedup_status,
            conflict_status=preview.conflict_status,
        )
    )
