"""Duplicate classification of imported transactions against tenant history."""
from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerdesk.domain.imports.models import DuplicateStatus, ImportReviewTransaction
from ledgerdesk.domain.imports.payees import collapse_whitespace
from ledgerdesk.domain.imports.schemas import ClassifiedTransaction, ImportedTransaction
from ledgerdesk.domain.transactions.models import Transaction

Fingerprint = Tuple[datetime.date, Decimal, str]

CENT = Decimal("0.01")
# Keeps IN (...) lists under SQLite's bound-parameter limit.
QUERY_CHUNK_SIZE = 500


def fingerprint(date: datetime.date, amount, payee: str) -> Fingerprint:
    return date, Decimal(str(amount)).quantize(CENT), collapse_whitespace(payee).casefold()


@dataclass
class TenantHistory:
    """What a tenant already has, indexed for duplicate lookups.

    Values are the keys of the matching permanent transaction or staged row.
    """

    transactions_by_external_id: Dict[str, uuid.UUID] = field(default_factory=dict)
    pending_by_external_id: Dict[str, uuid.UUID] = field(default_factory=dict)
    by_fingerprint: Dict[Fingerprint, uuid.UUID] = field(default_factory=dict)


def classify(batch: Sequence[ImportedTransaction], history: TenantHistory) -> List[ClassifiedTransaction]:
    """Label each transaction New, ExactDuplicate or PotentialDuplicate.

    An external id match (permanent ledger, then pending rows, then earlier
    rows of this batch) is an exact duplicate. Otherwise a (date, amount,
    payee) match against the permanent ledger or pending rows is a potential
    duplicate.
    """
    classified: List[ClassifiedTransaction] = []
    batch_keys: Dict[str, uuid.UUID] = {}

    for txn in batch:
        row_key = uuid.uuid4()
        external_id = txn.external_id

        if external_id in history.transactions_by_external_id:
            status, duplicate_of = DuplicateStatus.EXACT_DUPLICATE, history.transactions_by_external_id[external_id]
        elif external_id in history.pending_by_external_id:
            status, duplicate_of = DuplicateStatus.EXACT_DUPLICATE, history.pending_by_external_id[external_id]
        elif external_id in batch_keys:
            status, duplicate_of = DuplicateStatus.EXACT_DUPLICATE, batch_keys[external_id]
        else:
            duplicate_of = history.by_fingerprint.get(fingerprint(txn.date, txn.amount, txn.payee))
            status = DuplicateStatus.POTENTIAL_DUPLICATE if duplicate_of else DuplicateStatus.NEW

        batch_keys.setdefault(external_id, row_key)
        classified.append(
            ClassifiedTransaction(transaction=txn, status=status, duplicate_of_key=duplicate_of, key=row_key)
        )

    return classified


def _chunks(values: Sequence, size: int = QUERY_CHUNK_SIZE) -> Iterator[Sequence]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


async def _latest_by_external_id(db: AsyncSession, model, tenant_id: int, external_ids: Sequence[str]) -> Dict[str, uuid.UUID]:
    latest: Dict[str, tuple] = {}
    for chunk in _chunks(external_ids):
        result = await db.execute(
            select(model.external_id, model.date, model.id, model.key).where(
                model.tenant_id == tenant_id,
                model.external_id.in_(chunk),
            )
        )
        for external_id, date, row_id, key in result.all():
            current = latest.get(external_id)
            if current is None or (date, row_id) > current[:2]:
                latest[external_id] = (date, row_id, key)
    return {external_id: entry[2] for external_id, entry in latest.items()}


async def _fingerprints(db: AsyncSession, model, tenant_id: int, dates: Sequence[datetime.date]) -> Iterable[tuple]:
    rows: List[tuple] = []
    for chunk in _chunks(dates):
        result = await db.execute(
            select(model.date, model.amount, model.payee, model.key)
            .where(model.tenant_id == tenant_id, model.date.in_(chunk))
            .order_by(model.id.asc())
        )
        rows.extend(result.all())
    return rows


async def load_tenant_history(
    db: AsyncSession,
    tenant_id: int,
    batch: Sequence[ImportedTransaction],
) -> TenantHistory:
    """Load only the history that can match this batch."""
    history = TenantHistory()
    if not batch:
        return history

    external_ids = sorted({txn.external_id for txn in batch})
    dates = sorted({txn.date for txn in batch})

    history.transactions_by_external_id = await _latest_by_external_id(db, Transaction, tenant_id, external_ids)
    history.pending_by_external_id = await _latest_by_external_id(
        db, ImportReviewTransaction, tenant_id, external_ids
    )

    for model in (Transaction, ImportReviewTransaction):
        for date, amount, payee, key in await _fingerprints(db, model, tenant_id, dates):
            history.by_fingerprint.setdefault(fingerprint(date, amount, payee), key)

    return history
