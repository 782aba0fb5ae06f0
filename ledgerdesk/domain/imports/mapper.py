"""Mapping of decoded statement records into imported transactions."""
from __future__ import annotations

import hashlib
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ledgerdesk.domain.imports.decoder import DecodedTransactionRecord
from ledgerdesk.domain.imports.payees import normalize_payee
from ledgerdesk.domain.imports.schemas import ImportedTransaction, ParseError
from ledgerdesk.domain.transactions.services import TransactionEdit, validate_transaction_edit

MISSING_PAYEE = "missing_payee"
INVALID_FIELDS = "invalid_fields"
SOURCE_SEPARATOR = " - "


def format_account_type(account_type: Optional[str]) -> str:
    """'CHECKING' -> 'Checking'."""
    if not account_type:
        return ""
    value = account_type.strip()
    return value[:1].upper() + value[1:].lower()


def build_account_label(account_type: Optional[str], account_id: Optional[str]) -> str:
    formatted_type = format_account_type(account_type)
    account_id = (account_id or "").strip()
    if account_id:
        return f"{formatted_type} ({account_id})" if formatted_type else account_id
    return formatted_type


def build_source(institution_name: Optional[str], account_label: Optional[str]) -> str:
    parts = [part.strip() for part in (institution_name, account_label) if part and part.strip()]
    return SOURCE_SEPARATOR.join(parts)


def transaction_hash(posted: datetime, amount: Decimal, payee: str, memo: Optional[str], source: str) -> str:
    """Stable identifier for records that carry no native transaction id."""
    payload = f"{posted:%Y-%m-%dT%H:%M:%S}|{amount:.2f}|{payee}|{memo or ''}|{source}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest().upper()


def map_transaction(
    institution_name: Optional[str],
    account_label: Optional[str],
    record: DecodedTransactionRecord,
    file_name: Optional[str] = None,
) -> ImportedTransaction | ParseError:
    source = build_source(institution_name, account_label)
    payee, memo = normalize_payee(record.name, record.memo)
    if payee is None:
        return ParseError(
            message=(
                f"Transaction on {record.posted:%Y-%m-%d} has no payee name "
                "(NAME and MEMO fields both missing or empty)"
            ),
            code=MISSING_PAYEE,
            file_name=file_name,
        )

    external_id = (record.native_id or "").strip() or transaction_hash(
        record.posted, record.amount, payee, memo, source
    )

    mapped = ImportedTransaction(
        external_id=external_id,
        date=record.posted.date(),
        amount=record.amount,
        payee=payee,
        memo=memo,
        source=source,
    )

    # Rows that could not be accepted into the ledger are never staged.
    problems = validate_transaction_edit(
        TransactionEdit(
            date=mapped.date,
            amount=mapped.amount,
            payee=mapped.payee,
            memo=mapped.memo,
            source=mapped.source,
            external_id=mapped.external_id,
        )
    )
    if problems:
        return ParseError(
            message=f"Transaction on {mapped.date:%Y-%m-%d} was skipped: {'; '.join(problems)}",
            code=INVALID_FIELDS,
            file_name=file_name,
        )

    return mapped
