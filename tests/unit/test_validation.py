from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

CUSTOMER_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"


def test_valid_form_yields_typed_draft() -> None:
    from services.dashboard.app.validation import Validated, validate_invoice_form

    result = validate_invoice_form({"customerId": CUSTOMER_ID, "amount": "49.99", "status": "paid"})

    assert isinstance(result, Validated)
    assert result.ok is True
    assert result.value.customer_id == UUID(CUSTOMER_ID)
    assert result.value.amount == Decimal("49.99")
    assert result.value.status == "paid"
    assert result.value.date is None


@pytest.mark.parametrize("status", [None, "", "   "])
def test_missing_status_defaults_to_pending(status) -> None:
    from services.dashboard.app.validation import validate_invoice_form

    raw = {"customerId": CUSTOMER_ID, "amount": "10"}
    if status is not None:
        raw["status"] = status
    result = validate_invoice_form(raw)

    assert result.ok
    assert result.value.status == "pending"


def test_missing_customer_and_amount_are_both_reported() -> None:
    from services.dashboard.app.validation import Rejected, validate_invoice_form

    result = validate_invoice_form({"status": "paid"})

    assert isinstance(result, Rejected)
    assert result.ok is False
    assert sorted(result.errors) == ["amount", "customerId"]


@pytest.mark.parametrize("amount", ["abc", "", "-5", "0", "NaN", "inf", "99999999999", "0.001", "0.004", 0.004])
def test_malformed_or_out_of_range_amount_is_rejected(amount: str | float) -> None:
    from services.dashboard.app.validation import validate_invoice_form

    result = validate_invoice_form({"customerId": CUSTOMER_ID, "amount": amount})

    assert not result.ok
    assert list(result.errors) == ["amount"]


def test_malformed_customer_id_is_rejected() -> None:
    from services.dashboard.app.validation import validate_invoice_form

    result = validate_invoice_form({"customerId": "not-a-uuid", "amount": "10"})

    assert not result.ok
    assert list(result.errors) == ["customerId"]


def test_unknown_status_is_rejected() -> None:
    from services.dashboard.app.validation import validate_invoice_form

    result = validate_invoice_form({"customerId": CUSTOMER_ID, "amount": "10", "status": "overdue"})

    assert not result.ok
    assert list(result.errors) == ["status"]


def test_amount_is_coerced_from_numbers_and_padded_strings() -> None:
    from services.dashboard.app.validation import validate_invoice_form

    assert validate_invoice_form({"customerId": CUSTOMER_ID, "amount": 12}).value.amount == Decimal("12")
    assert validate_invoice_form({"customerId": CUSTOMER_ID, "amount": " 7.5 "}).value.amount == Decimal("7.5")


def test_optional_date_is_parsed_and_extra_keys_ignored() -> None:
    from services.dashboard.app.validation import validate_invoice_form

    result = validate_invoice_form(
        {"customerId": CUSTOMER_ID, "amount": "1", "date": "2025-06-01", "$ACTION_ID_abc": "", "id": "x"}
    )

    assert result.ok
    assert result.value.date == date(2025, 6, 1)


def test_parse_invoice_id() -> None:
    from services.dashboard.app.errors import InvoiceValidationError
    from services.dashboard.app.validation import parse_invoice_id

    assert parse_invoice_id(f" {CUSTOMER_ID} ") == UUID(CUSTOMER_ID)
    assert parse_invoice_id(UUID(CUSTOMER_ID)) == UUID(CUSTOMER_ID)
    with pytest.raises(InvoiceValidationError) as exc:
        parse_invoice_id("42")
    assert exc.value.errors == {"id": ["Invalid invoice id."]}


def test_half_a_cent_rounds_up_to_the_minimum() -> None:
    from services.dashboard.app.validation import validate_invoice_form

    result = validate_invoice_form({"customerId": CUSTOMER_ID, "amount": "0.005"})

    assert result.ok
    assert result.value.amount == Decimal("0.005")
