"""Data shapes for the statement import and review workflow."""
from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ledgerdesk.core.pagination import PaginationMetadata
from ledgerdesk.domain.imports.models import DuplicateStatus


class ParseError(BaseModel):
    """A document- or transaction-level problem found while parsing a file."""

    message: str
    code: Optional[str] = None
    file_name: Optional[str] = None


@dataclass(frozen=True)
class ImportedTransaction:
    """One normalized bank-statement line ready for duplicate detection."""

    external_id: str
    date: datetime.date
    amount: Decimal
    payee: str
    memo: Optional[str]
    source: str


@dataclass
class ImportParseResult:
    transactions: List[ImportedTransaction] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)


@dataclass(frozen=True)
class ClassifiedTransaction:
    transaction: ImportedTransaction
    status: DuplicateStatus
    duplicate_of_key: Optional[uuid.UUID] = None
    key: uuid.UUID = field(default_factory=uuid.uuid4)


class ImportBatchResult(BaseModel):
    """Outcome of one upload, shown to the user.

    ``new_count + exact_duplicate_count + potential_duplicate_count`` always
    equals ``imported_count``. Errors never prevent the successfully parsed
    transactions from being staged.
    """

    imported_count: int
    new_count: int
    exact_duplicate_count: int
    potential_duplicate_count: int
    errors: List[ParseError] = Field(default_factory=list)


class ReviewRowOut(BaseModel):
    """A staged transaction as presented for review."""

    key: uuid.UUID
    date: datetime.date
    payee: str
    memo: Optional[str] = None
    source: Optional[str] = None
    amount: Decimal
    external_id: Optional[str] = None
    duplicate_status: DuplicateStatus
    duplicate_of_key: Optional[uuid.UUID] = None
    is_selected: bool

    model_config = ConfigDict(from_attributes=True)


class PaginatedReviewRows(BaseModel):
    items: List[ReviewRowOut]
    metadata: PaginationMetadata


class ReviewSummary(BaseModel):
    """Counts over the pending review workspace."""

    total_count: int
    selected_count: int
    new_count: int
    exact_duplicate_count: int
    potential_duplicate_count: int


class CompleteReviewResult(BaseModel):
    accepted_count: int
    rejected_count: int


class CompleteReviewRequest(BaseModel):
    """Keys to accept; when omitted, the server-side selection is used."""

    accepted_keys: Optional[List[uuid.UUID]] = None

    model_config = ConfigDict(extra="forbid")


class SetSelectionRequest(BaseModel):
    keys: List[uuid.UUID]
    is_selected: bool

    model_config = ConfigDict(extra="forbid")


class DeleteAllResult(BaseModel):
    deleted_count: int
