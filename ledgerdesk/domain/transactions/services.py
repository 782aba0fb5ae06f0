"""Creation of permanent ledger transactions."""
from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerdesk.core.validation import ensure_valid_collection
from ledgerdesk.domain.transactions.models import Split, Transaction

logger = logging.getLogger(__name__)

MAX_PAYEE_LENGTH = 255
MAX_MEMO_LENGTH = 1000
MAX_SOURCE_LENGTH = 200
MAX_EXTERNAL_ID_LENGTH = 255


class TransactionEdit(BaseModel):
    """Fields needed to create one ledger transaction."""

    date: datetime.date
    amount: Decimal
    payee: str
    memo: Optional[str] = None
    source: Optional[str] = None
    external_id: Optional[str] = None
    category: str = ""

    model_config = ConfigDict(extra="forbid")


def validate_transaction_edit(item: TransactionEdit) -> List[str]:
    messages: List[str] = []
    if not item.payee or not item.payee.strip():
        messages.append("payee must not be blank")
    elif len(item.payee) > MAX_PAYEE_LENGTH:
        messages.append(f"payee exceeds {MAX_PAYEE_LENGTH} characters")
    if item.memo and len(item.memo) > MAX_MEMO_LENGTH:
        messages.append(f"memo exceeds {MAX_MEMO_LENGTH} characters")
    if item.source and len(item.source) > MAX_SOURCE_LENGTH:
        messages.append(f"source exceeds {MAX_SOURCE_LENGTH} characters")
    if item.external_id and len(item.external_id) > MAX_EXTERNAL_ID_LENGTH:
        messages.append(f"external_id exceeds {MAX_EXTERNAL_ID_LENGTH} characters")
    return messages


async def add_transactions(
    db: AsyncSession,
    tenant_id: int,
    edits: Sequence[TransactionEdit],
) -> List[Transaction]:
    """Add transactions, each with a single split carrying the full amount.

    The whole collection is validated before anything is added. Nothing is
    committed here; the caller owns the unit of work.
    """
    ensure_valid_collection(edits, validate_transaction_edit)

    created: List[Transaction] = []
    for edit in edits:
        transaction = Transaction(
            tenant_id=tenant_id,
            date=edit.date,
            amount=edit.amount,
            payee=edit.payee,
            memo=edit.memo,
            source=edit.source,
            external_id=edit.external_id,
            splits=[Split(amount=edit.amount, category=edit.category, order=0)],
        )
        db.add(transaction)
        created.append(transaction)

    await db.flush()
    logger.debug("Added %s transactions for tenant %s", len(created), tenant_id)
    return created
