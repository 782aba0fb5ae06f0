"""API routes for statement uploads and the import review workspace."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerdesk.core.database import get_db
from ledgerdesk.core.validation import CollectionValidationError
from ledgerdesk.domain.imports.review import ReviewLedger
from ledgerdesk.domain.imports.schemas import (
    CompleteReviewRequest,
    CompleteReviewResult,
    DeleteAllResult,
    ImportBatchResult,
    PaginatedReviewRows,
    ReviewSummary,
    SetSelectionRequest,
)
from ledgerdesk.domain.imports.services import import_file, max_upload_bytes, validate_upload
from ledgerdesk.domain.tenants.models import Tenant
from ledgerdesk.domain.tenants.services import get_current_tenant

router = APIRouter(prefix="/tenant/{tenant_key}/import")


def _ledger(tenant: Tenant, db: AsyncSession) -> ReviewLedger:
    return ReviewLedger(db, tenant.id)


@router.post("/upload", response_model=ImportBatchResult)
async def upload_statement(
    file: UploadFile = File(...),
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> ImportBatchResult:
    """Upload an OFX/QFX file and stage its transactions for review."""
    # One byte past the limit is enough to know the file is too large.
    file_bytes = await file.read(max_upload_bytes() + 1)
    validate_upload(file.filename, len(file_bytes))

    return await import_file(db=db, tenant_id=tenant.id, file_bytes=file_bytes, file_name=file.filename)


@router.get("/review", response_model=PaginatedReviewRows)
async def get_pending_review(
    page_number: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None),
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> PaginatedReviewRows:
    return await _ledger(tenant, db).list_pending(page_number, page_size)


@router.get("/review/summary", response_model=ReviewSummary)
async def get_review_summary(
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> ReviewSummary:
    return await _ledger(tenant, db).summary()


@router.post("/review/selection", status_code=status.HTTP_204_NO_CONTENT)
async def set_review_selection(
    payload: SetSelectionRequest,
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await _ledger(tenant, db).set_selection(payload.keys, payload.is_selected)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/review/select-all", status_code=status.HTTP_204_NO_CONTENT)
async def select_all_review(
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await _ledger(tenant, db).select_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/review/deselect-all", status_code=status.HTTP_204_NO_CONTENT)
async def deselect_all_review(
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await _ledger(tenant, db).deselect_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/review/complete", response_model=CompleteReviewResult)
async def complete_review(
    payload: Optional[CompleteReviewRequest] = None,
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> CompleteReviewResult:
    """Accept the given (or selected) rows and reject everything else."""
    accepted_keys = payload.accepted_keys if payload else None
    try:
        return await _ledger(tenant, db).complete_review(accepted_keys)
    except CollectionValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.delete("/review", response_model=DeleteAllResult)
async def delete_all_pending_review(
    tenant: Tenant = Depends(get_current_tenant),
    db: AsyncSession = Depends(get_db),
) -> DeleteAllResult:
    deleted = await _ledger(tenant, db).delete_all_pending()
    return DeleteAllResult(deleted_count=deleted)
