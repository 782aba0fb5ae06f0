"""Shared pytest fixtures for ledgerdesk tests.

Every test gets its own file-backed SQLite database under ``tmp_path`` (an
in-memory database would be private to a single aiosqlite connection), plus a
tenant to import into. OFX payloads are generated from small dicts so tests
can state exactly which NAME/MEMO/FITID combinations they exercise.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledgerdesk.core.database import create_engine_for, init_db
from ledgerdesk.domain.tenants.services import create_tenant

OFX_HEADER = """OFXHEADER:100
DATA:OFXSGML
VERSION:102
SECURITY:NONE
ENCODING:USASCII
CHARSET:1252
COMPRESSION:NONE
OLDFILEUID:NONE
NEWFILEUID:NONE

"""


def _stmttrn(txn: dict[str, Any]) -> str:
    lines = [
        "<STMTTRN>",
        f"<TRNTYPE>{txn.get('type', 'DEBIT')}",
        f"<DTPOSTED>{txn['posted']}",
        f"<TRNAMT>{txn['amount']}",
    ]
    if txn.get("fitid") is not None:
        lines.append(f"<FITID>{txn['fitid']}")
    if txn.get("name") is not None:
        lines.append(f"<NAME>{txn['name']}")
    if txn.get("memo") is not None:
        lines.append(f"<MEMO>{txn['memo']}")
    lines.append("</STMTTRN>")
    return "\n".join(lines)


def build_ofx(
    transactions: list[dict[str, Any]],
    *,
    org: Optional[str] = "MegaBankCorp",
    account_id: str = "1234567890",
    account_type: str = "CHECKING",
) -> bytes:
    """Render an OFX 1.x (SGML) bank statement with the given transactions."""
    fi = f"<FI>\n<ORG>{org}\n<FID>1234\n</FI>\n" if org else ""
    body = "\n".join(_stmttrn(txn) for txn in transactions)
    document = (
        OFX_HEADER
        + "<OFX>\n"
        + "<SIGNONMSGSRSV1>\n<SONRS>\n<STATUS>\n<CODE>0\n<SEVERITY>INFO\n</STATUS>\n"
        + "<DTSERVER>20240131120000\n<LANGUAGE>ENG\n"
        + fi
        + "</SONRS>\n</SIGNONMSGSRSV1>\n"
        + "<BANKMSGSRSV1>\n<STMTTRNRS>\n<TRNUID>1\n<STATUS>\n<CODE>0\n<SEVERITY>INFO\n</STATUS>\n"
        + "<STMTRS>\n<CURDEF>USD\n"
        + f"<BANKACCTFROM>\n<BANKID>123456789\n<ACCTID>{account_id}\n<ACCTTYPE>{account_type}\n</BANKACCTFROM>\n"
        + "<BANKTRANLIST>\n<DTSTART>20240101\n<DTEND>20240131\n"
        + body
        + "\n</BANKTRANLIST>\n"
        + "<LEDGERBAL>\n<BALAMT>1000.00\n<DTASOF>20240131\n</LEDGERBAL>\n"
        + "</STMTRS>\n</STMTTRNRS>\n</BANKMSGSRSV1>\n</OFX>\n"
    )
    return document.encode("ascii")


SAMPLE_TRANSACTIONS = [
    {"fitid": "FIT001", "posted": "20240105120000", "amount": "-50.00", "name": "WALMART", "memo": "WALMART SUPERCENTER #1234"},
    {"fitid": "FIT002", "posted": "20240107", "amount": "-4.25", "name": "Coffee Shop", "memo": "Morning purchase"},
    {"fitid": "FIT003", "posted": "20240115", "amount": "2500.00", "type": "CREDIT", "name": "ACME PAYROLL"},
]


@pytest.fixture()
def make_ofx() -> Callable[..., bytes]:
    return build_ofx


@pytest.fixture()
def sample_ofx() -> bytes:
    return build_ofx(SAMPLE_TRANSACTIONS)


@pytest.fixture()
async def engine(tmp_path: Path):
    test_engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'ledgerdesk-test.db'}")
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture()
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def tenant(db):
    return await create_tenant(db, "Household")


@pytest.fixture()
async def other_tenant(db):
    return await create_tenant(db, "Other household")
