"""Service helpers that power the statement import workflow."""
from __future__ import annotations

import logging
import os
from collections import Counter
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerdesk.core.config import settings
from ledgerdesk.domain.imports.duplicates import classify, load_tenant_history
from ledgerdesk.domain.imports.models import DuplicateStatus
from ledgerdesk.domain.imports.parser import parse_async
from ledgerdesk.domain.imports.review import ReviewLedger
from ledgerdesk.domain.imports.schemas import ImportBatchResult

logger = logging.getLogger(__name__)


class UploadRejectedError(HTTPException):
    """Specialized HTTP exception for uploads that fail the intake checks."""

    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        super().__init__(status_code=status_code, detail=detail)


def max_upload_bytes() -> int:
    return settings.IMPORT_MAX_FILE_MB * 1024 * 1024


def validate_upload(file_name: Optional[str], size: int) -> None:
    """Reject uploads that are missing, empty, oversized or of the wrong type."""
    if not file_name:
        raise UploadRejectedError("File name is required.")

    if size <= 0:
        raise UploadRejectedError("Uploaded file is empty.")

    if size > max_upload_bytes():
        raise UploadRejectedError(
            f"File exceeds maximum allowed size of {settings.IMPORT_MAX_FILE_MB} MB.",
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )

    extension = os.path.splitext(file_name)[1].lower()
    if extension not in settings.IMPORT_ALLOWED_EXTENSIONS:
        allowed = ", ".join(settings.IMPORT_ALLOWED_EXTENSIONS)
        raise UploadRejectedError(f"Unsupported file type. Allowed: {allowed}.")


async def import_file(
    *,
    db: AsyncSession,
    tenant_id: int,
    file_bytes: Optional[bytes],
    file_name: Optional[str],
) -> ImportBatchResult:
    """Parse an OFX/QFX file, classify its transactions and stage them for review."""
    parsed = await parse_async(file_bytes, file_name)

    if not parsed.transactions:
        return ImportBatchResult(
            imported_count=0,
            new_count=0,
            exact_duplicate_count=0,
            potential_duplicate_count=0,
            errors=parsed.errors,
        )

    history = await load_tenant_history(db, tenant_id, parsed.transactions)
    classified = classify(parsed.transactions, history)

    try:
        await ReviewLedger(db, tenant_id).stage(classified)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    counts = Counter(item.status for item in classified)
    result = ImportBatchResult(
        imported_count=len(classified),
        new_count=counts[DuplicateStatus.NEW],
        exact_duplicate_count=counts[DuplicateStatus.EXACT_DUPLICATE],
        potential_duplicate_count=counts[DuplicateStatus.POTENTIAL_DUPLICATE],
        errors=parsed.errors,
    )
    logger.info(
        "Imported %s for tenant %s: %s staged (%s new, %s exact, %s potential), %s errors",
        file_name or "<upload>",
        tenant_id,
        result.imported_count,
        result.new_count,
        result.exact_duplicate_count,
        result.potential_duplicate_count,
        len(result.errors),
    )
    return result
