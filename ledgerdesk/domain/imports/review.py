"""Tenant-scoped review workspace for imported transactions."""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerdesk.core import pagination
from ledgerdesk.core.config import settings
from ledgerdesk.domain.imports.models import DuplicateStatus, ImportReviewTransaction
from ledgerdesk.domain.imports.schemas import (
    ClassifiedTransaction,
    CompleteReviewResult,
    PaginatedReviewRows,
    ReviewRowOut,
    ReviewSummary,
)
from ledgerdesk.domain.transactions.services import TransactionEdit, add_transactions

logger = logging.getLogger(__name__)


class ReviewLedger:
    """Staged import rows of one tenant, and the transitions out of staging.

    A row is created by :meth:`stage` and leaves the workspace either through
    :meth:`complete_review` (accepted into the ledger or rejected) or through
    :meth:`delete_all_pending`.
    """

    def __init__(self, db: AsyncSession, tenant_id: int) -> None:
        self.db = db
        self.tenant_id = tenant_id

    def _scoped(self):
        return select(ImportReviewTransaction).where(ImportReviewTransaction.tenant_id == self.tenant_id)

    async def _count(self, *criteria) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(ImportReviewTransaction)
            .where(ImportReviewTransaction.tenant_id == self.tenant_id, *criteria)
        )
        return int(result.scalar_one())

    async def stage(self, classified: Sequence[ClassifiedTransaction]) -> List[ImportReviewTransaction]:
        """Add classified rows to the workspace (flushed, not committed)."""
        rows = [
            ImportReviewTransaction(
                key=item.key,
                tenant_id=self.tenant_id,
                date=item.transaction.date,
                amount=item.transaction.amount,
                payee=item.transaction.payee,
                memo=item.transaction.memo,
                source=item.transaction.source,
                external_id=item.transaction.external_id,
                duplicate_status=item.status,
                duplicate_of_key=item.duplicate_of_key,
                # Duplicates start deselected so the user has to opt in.
                is_selected=item.status == DuplicateStatus.NEW,
            )
            for item in classified
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return rows

    async def list_pending(
        self,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginatedReviewRows:
        number, size = pagination.normalize_page(
            page_number,
            page_size,
            default_page_size=settings.REVIEW_DEFAULT_PAGE_SIZE,
            max_page_size=settings.REVIEW_MAX_PAGE_SIZE,
        )
        total_count = await self._count()

        result = await self.db.execute(
            self._scoped()
            .order_by(ImportReviewTransaction.id.asc())
            .offset((number - 1) * size)
            .limit(size)
            .execution_options(populate_existing=True)
        )
        items = [ReviewRowOut.model_validate(row) for row in result.scalars().all()]

        return PaginatedReviewRows(items=items, metadata=pagination.calculate(number, size, total_count))

    async def complete_review(self, accepted_keys: Optional[Iterable[uuid.UUID]] = None) -> CompleteReviewResult:
        """Accept some staged rows into the ledger and discard all the others.

        With ``accepted_keys`` the rows with those keys are accepted; keys that
        are not staged are ignored. Without it, the currently selected rows are
        accepted. Every row staged at call time is resolved in one commit.
        """
        result = await self.db.execute(
            self._scoped()
            .order_by(ImportReviewTransaction.id.asc())
            .execution_options(populate_existing=True)
        )
        pending = list(result.scalars().all())

        if accepted_keys is None:
            accepted = [row for row in pending if row.is_selected]
        else:
            wanted = set(accepted_keys)
            accepted = [row for row in pending if row.key in wanted]

        edits = [
            TransactionEdit(
                date=row.date,
                amount=row.amount,
                payee=row.payee,
                memo=row.memo,
                source=row.source,
                external_id=row.external_id,
            )
            for row in accepted
        ]

        try:
            await add_transactions(self.db, self.tenant_id, edits)
            for row in pending:
                await self.db.delete(row)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        outcome = CompleteReviewResult(
            accepted_count=len(accepted),
            rejected_count=len(pending) - len(accepted),
        )
        logger.info(
            "Review completed for tenant %s: %s accepted, %s rejected",
            self.tenant_id,
            outcome.accepted_count,
            outcome.rejected_count,
        )
        return outcome

    async def delete_all_pending(self) -> int:
        """Discard the whole workspace without accepting anything."""
        count = await self._count()
        try:
            await self.db.execute(
                delete(ImportReviewTransaction).where(ImportReviewTransaction.tenant_id == self.tenant_id)
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Discarded %s pending review rows for tenant %s", count, self.tenant_id)
        return count

    async def set_selection(self, keys: Iterable[uuid.UUID], is_selected: bool) -> None:
        key_list = list(keys)
        if not key_list:
            return
        await self._update_selection(ImportReviewTransaction.key.in_(key_list), is_selected=is_selected)

    async def select_all(self) -> None:
        await self._update_selection(is_selected=True)

    async def deselect_all(self) -> None:
        await self._update_selection(is_selected=False)

    async def _update_selection(self, *criteria, is_selected: bool) -> None:
        try:
            await self.db.execute(
                update(ImportReviewTransaction)
                .where(ImportReviewTransaction.tenant_id == self.tenant_id, *criteria)
                .values(is_selected=is_selected)
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def summary(self) -> ReviewSummary:
        def count_status(status: DuplicateStatus):
            return func.coalesce(func.sum(case((ImportReviewTransaction.duplicate_status == status, 1), else_=0)), 0)

        result = await self.db.execute(
            select(
                func.count(),
                func.coalesce(func.sum(case((ImportReviewTransaction.is_selected.is_(True), 1), else_=0)), 0),
                count_status(DuplicateStatus.NEW),
                count_status(DuplicateStatus.EXACT_DUPLICATE),
                count_status(DuplicateStatus.POTENTIAL_DUPLICATE),
            )
            .select_from(ImportReviewTransaction)
            .where(ImportReviewTransaction.tenant_id == self.tenant_id)
        )
        total, selected, new, exact, potential = result.one()
        return ReviewSummary(
            total_count=int(total),
            selected_count=int(selected),
            new_count=int(new),
            exact_duplicate_count=int(exact),
            potential_duplicate_count=int(potential),
        )
