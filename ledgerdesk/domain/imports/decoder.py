"""OFX/QFX decoding on top of ``ofxparse``.

The library owns the SGML/XML grammar; this module only reshapes its output
into plain records and turns library failures into ``ParseError`` values.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from io import BytesIO
from typing import List, Optional, Tuple

from ofxparse import OfxParser

from ledgerdesk.domain.imports.schemas import ParseError

logger = logging.getLogger(__name__)

DECODE_FAILED = "decode_failed"
DISCARDED_ENTRY = "discarded_entry"


@dataclass(frozen=True)
class DecodedTransactionRecord:
    native_id: Optional[str]
    posted: datetime
    amount: Decimal
    name: Optional[str]
    memo: Optional[str]


@dataclass
class DecodedStatement:
    institution_name: Optional[str]
    account_type: Optional[str]
    account_id: Optional[str]
    transactions: List[DecodedTransactionRecord] = field(default_factory=list)
    discarded: List[str] = field(default_factory=list)


@dataclass
class DecodedDocument:
    statements: List[DecodedStatement] = field(default_factory=list)


def _text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


_STMTTRN_BLOCK = re.compile(rb"<STMTTRN>(.*?)</STMTTRN>", re.IGNORECASE | re.DOTALL)
_FITID_VALUE = re.compile(rb"<FITID>([^<\r\n]*)", re.IGNORECASE)
_DTPOSTED_OFFSET = re.compile(rb"<DTPOSTED>[^<\r\n\[]*\[\s*([+-]?\d+(?:\.\d+)?)", re.IGNORECASE)


class PostingOffsets:
    """UTC offsets written in each record's DTPOSTED, in document order.

    ofxparse shifts DTPOSTED to UTC; adding the offset back gives the clock
    time written in the file, whose date is the posting date.
    """

    def __init__(self, data: bytes) -> None:
        self._entries: List[Tuple[Optional[str], timedelta]] = []
        for block in _STMTTRN_BLOCK.finditer(data):
            body = block.group(1)
            fitid = _FITID_VALUE.search(body)
            offset = _DTPOSTED_OFFSET.search(body)
            self._entries.append(
                (
                    _text(fitid.group(1).decode("ascii", "ignore")) if fitid else None,
                    timedelta(hours=float(offset.group(1))) if offset else timedelta(0),
                )
            )
        self._position = 0

    def offset_for(self, native_id: Optional[str]) -> timedelta:
        # Records ofxparse discarded are skipped by walking forward to the next matching FITID.
        for index in range(self._position, len(self._entries)):
            fitid, offset = self._entries[index]
            if fitid == native_id:
                self._position = index + 1
                return offset
        return timedelta(0)


def _institution_name(ofx, account) -> Optional[str]:
    institution = getattr(account, "institution", None)
    name = _text(getattr(institution, "organization", None))
    if name:
        return name
    return _text(getattr(getattr(ofx, "signon", None), "fi_org", None))


def _decode_statement(ofx, account, offsets: PostingOffsets) -> DecodedStatement:
    statement = getattr(account, "statement", None)
    decoded = DecodedStatement(
        institution_name=_institution_name(ofx, account),
        account_type=_text(getattr(account, "account_type", None)),
        account_id=_text(getattr(account, "account_id", None)),
    )
    if statement is None:
        return decoded

    for txn in getattr(statement, "transactions", None) or []:
        native_id = _text(getattr(txn, "id", None))
        decoded.transactions.append(
            DecodedTransactionRecord(
                native_id=native_id,
                posted=txn.date + offsets.offset_for(native_id),
                amount=Decimal(str(txn.amount)),
                name=getattr(txn, "payee", None),
                memo=getattr(txn, "memo", None),
            )
        )

    for entry in getattr(statement, "discarded_entries", None) or []:
        error = entry.get("error") if isinstance(entry, dict) else entry
        decoded.discarded.append(str(error))

    return decoded


def decode(data: bytes) -> DecodedDocument | ParseError:
    """Decode raw OFX/QFX bytes.

    Returns the decoded document, or a ``ParseError`` describing why the file
    could not be read. Library exceptions never escape this function.
    """
    if b"<OFX" not in data.upper():
        logger.warning("OFX decode failed: no <OFX> element")
        return ParseError(message="Failed to parse OFX document: no <OFX> element found", code=DECODE_FAILED)

    try:
        ofx = OfxParser.parse(BytesIO(data), fail_fast=False)
        accounts = list(getattr(ofx, "accounts", None) or [])
        if not accounts and getattr(ofx, "account", None) is not None:
            accounts = [ofx.account]
        offsets = PostingOffsets(data)
        document = DecodedDocument(statements=[_decode_statement(ofx, account, offsets) for account in accounts])
    except Exception as exc:  # noqa: BLE001 - any library failure is a bad document
        logger.warning("OFX decode failed: %s", exc)
        return ParseError(message=f"Failed to parse OFX document: {exc}", code=DECODE_FAILED)

    return document
