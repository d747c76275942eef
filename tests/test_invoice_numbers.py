from datetime import datetime

from borewell.invoice_numbers import monthly_invoice_number, next_invoice_number


def test_first_invoice_number():
    assert next_invoice_number([], prefix="INV") == "INV-001"


def test_next_after_highest_ignores_foreign_numbers():
    existing = ["INV-003", "INV-007", "", "QT-050", "INV-abc", " INV-002 "]

    assert next_invoice_number(existing, prefix="INV") == "INV-008"


def test_number_grows_past_three_digits():
    assert next_invoice_number(["INV-1000"], prefix="INV") == "INV-1001"


def test_monthly_sequence():
    counters = {}
    jan = datetime(2025, 1, 20)

    first, counters2 = monthly_invoice_number(counters, jan)
    second, counters3 = monthly_invoice_number(counters2, jan)
    feb, _ = monthly_invoice_number(counters3, datetime(2025, 2, 1))

    assert (first, second, feb) == ("2501-001", "2501-002", "2502-001")
    assert counters == {}
    assert counters2 == {"2501": 1}
