"""Whole-file parsing: decode, then normalize and map every record."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ledgerdesk.domain.imports.decoder import DISCARDED_ENTRY, decode
from ledgerdesk.domain.imports.mapper import build_account_label, map_transaction
from ledgerdesk.domain.imports.schemas import ImportParseResult, ParseError

logger = logging.getLogger(__name__)


def parse_file(file_bytes: Optional[bytes], file_name: Optional[str] = None) -> ImportParseResult:
    """Parse an OFX/QFX upload into transactions plus the errors met on the way.

    Empty input is a valid no-op. Nothing is raised for malformed files or
    records: failures come back in ``errors`` and the remaining records are
    still returned, in document order.
    """
    result = ImportParseResult()
    if not file_bytes:
        return result

    document = decode(file_bytes)
    if isinstance(document, ParseError):
        result.errors.append(document.model_copy(update={"file_name": file_name}))
        return result

    for statement in document.statements:
        account_label = build_account_label(statement.account_type, statement.account_id)

        for record in statement.transactions:
            mapped = map_transaction(statement.institution_name, account_label, record, file_name)
            if isinstance(mapped, ParseError):
                result.errors.append(mapped)
            else:
                result.transactions.append(mapped)

        for reason in statement.discarded:
            result.errors.append(
                ParseError(message=f"Skipped transaction: {reason}", code=DISCARDED_ENTRY, file_name=file_name)
            )

    logger.info(
        "Parsed %s: %s transactions, %s errors",
        file_name or "<upload>",
        len(result.transactions),
        len(result.errors),
    )
    return result


async def parse_async(file_bytes: Optional[bytes], file_name: Optional[str] = None) -> ImportParseResult:
    """Run :func:`parse_file` without blocking the event loop."""
    return await asyncio.to_thread(parse_file, file_bytes, file_name)
