from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from ledgerdesk.core.validation import (
    CollectionItemError,
    CollectionValidationError,
    ensure_valid_collection,
    validate_collection,
)
from ledgerdesk.domain.transactions.services import TransactionEdit, validate_transaction_edit


def _positive(value: int) -> list[str]:
    return [] if value > 0 else ["must be positive"]


def test_valid_collection_has_no_errors() -> None:
    assert validate_collection([1, 2, 3], _positive) == []
    assert validate_collection([], _positive) == []
    ensure_valid_collection([1], _positive)


def test_errors_are_reported_per_index() -> None:
    errors = validate_collection([1, 0, 5, -2], _positive)

    assert errors == [
        CollectionItemError(index=1, message="must be positive"),
        CollectionItemError(index=3, message="must be positive"),
    ]
    assert str(errors[0]) == "items[1]: must be positive"


def test_ensure_valid_collection_raises_with_all_errors() -> None:
    with pytest.raises(CollectionValidationError) as excinfo:
        ensure_valid_collection([0, 0], _positive)

    assert [error.index for error in excinfo.value.errors] == [0, 1]
    assert "items[0]" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)


def test_transaction_edit_rules() -> None:
    ok = TransactionEdit(date=date(2024, 1, 1), amount=Decimal("1.00"), payee="Shop")
    blank = TransactionEdit(date=date(2024, 1, 1), amount=Decimal("1.00"), payee="  ")
    too_long = TransactionEdit(
        date=date(2024, 1, 1),
        amount=Decimal("1.00"),
        payee="p" * 256,
        memo="m" * 1001,
        external_id="e" * 256,
    )

    assert validate_transaction_edit(ok) == []
    assert validate_transaction_edit(blank) == ["payee must not be blank"]
    assert validate_transaction_edit(too_long) == [
        "payee exceeds 255 characters",
        "memo exceeds 1000 characters",
        "external_id exceeds 255 characters",
    ]


def test_transaction_edit_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        TransactionEdit(date=date(2024, 1, 1), amount=Decimal("1.00"), payee="Shop", tenant_id=7)
