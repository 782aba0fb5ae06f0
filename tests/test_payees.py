from __future__ import annotations

import pytest

from ledgerdesk.domain.imports.payees import collapse_whitespace, is_truncated_name, normalize_payee


def test_truncated_name_prefers_full_memo() -> None:
    assert normalize_payee("WALMART", "WALMART SUPERCENTER #1234") == ("WALMART SUPERCENTER #1234", None)


def test_unrelated_name_and_memo_are_kept() -> None:
    assert normalize_payee("Coffee Shop", "Morning purchase") == ("Coffee Shop", "Morning purchase")


def test_blank_name_uses_memo_as_payee() -> None:
    assert normalize_payee("", "Only Memo Present") == ("Only Memo Present", None)
    assert normalize_payee(None, "Only Memo Present") == ("Only Memo Present", None)
    assert normalize_payee("   ", "Only Memo Present") == ("Only Memo Present", None)


@pytest.mark.parametrize(
    ("name", "memo"),
    [("", ""), (None, None), ("  ", "\t"), (None, "   ")],
)
def test_no_payee_when_name_and_memo_are_blank(name, memo) -> None:
    assert normalize_payee(name, memo) == (None, None)


def test_truncation_check_ignores_case_and_spacing() -> None:
    assert normalize_payee("amazon  mktp", "AMAZON MKTP US*2K3 Seattle") == ("AMAZON MKTP US*2K3 Seattle", None)
    assert is_truncated_name(" Trader  Joe", "TRADER JOE'S #552")


def test_name_only_keeps_name() -> None:
    assert normalize_payee("ACME PAYROLL", None) == ("ACME PAYROLL", None)


def test_memo_shorter_than_name_is_not_truncation() -> None:
    assert normalize_payee("SHELL OIL 5744", "SHELL") == ("SHELL OIL 5744", "SHELL")


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  a \t b\n c ") == "a b c"
    assert collapse_whitespace(None) == ""
