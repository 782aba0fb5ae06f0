"""Utilities for importing bank statements into the review workspace."""

from .schemas import (
    CompleteReviewResult,
    ImportBatchResult,
    ImportedTransaction,
    ImportParseResult,
    PaginatedReviewRows,
    ParseError,
)

__all__ = [
    "CompleteReviewResult",
    "ImportBatchResult",
    "ImportedTransaction",
    "ImportParseResult",
    "PaginatedReviewRows",
    "ParseError",
]
