import pytest

from heritage_atlas.common.numbers import parse_number, parse_size_number


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("R 1,250,000", 1250000.0),
        ("1 250 000", 1250000.0),
        ("R12 850 000.50", 12850000.5),
        ("453", 453.0),
        (7500000, 7500000.0),
        ("-12.5", -12.5),
        ("12.5.3", 12.5),
    ],
)
def test_parse_number_strips_currency_and_separators(raw, expected):
    assert parse_number(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "N/A", "-", "TBC"])
def test_parse_number_returns_none_for_non_numbers(raw):
    assert parse_number(raw) is None


def test_parse_size_number_sums_multi_parcel_entries():
    assert parse_size_number("120 + 80") == 200.0
    assert parse_size_number("1,000+ 250 + n/a") == 1250.0
    assert parse_size_number("n/a + tbc") is None


def test_parse_size_number_single_value():
    assert parse_size_number("453") == 453.0
    assert parse_size_number("") is None
    assert parse_size_number(None) is None
