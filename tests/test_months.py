from datetime import date

import pytest

from tracker_api.months import (
    current_month, long_label, month_bounds, month_of, parse_month, shift_month, short_label, trailing_months,
)


def test_parse_month():
    assert parse_month('2024-03') == date(2024, 3, 1)


@pytest.mark.parametrize('value', ['2024-3', '2024-13', '2024-00', '24-03', '2024/03', '2024-03\n', '0000-05', '', None])
def test_parse_month_rejects(value):
    with pytest.raises(ValueError):
        parse_month(value)


def test_month_bounds_inclusive():
    assert month_bounds('2024-02') == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds('2023-12') == (date(2023, 12, 1), date(2023, 12, 31))


def test_shift_month_across_years():
    assert shift_month('2024-01', -1) == '2023-12'
    assert shift_month('2024-11', 3) == '2025-02'
    assert shift_month('2024-05', 0) == '2024-05'


def test_trailing_months_oldest_first():
    assert trailing_months('2024-03') == ['2023-10', '2023-11', '2023-12', '2024-01', '2024-02', '2024-03']


def test_labels():
    assert short_label('2024-03') == 'Mar 2024'
    assert long_label('2024-03') == 'March 2024'


def test_month_of_and_current_month():
    assert month_of(date(2024, 3, 31)) == '2024-03'
    assert current_month(date(2025, 1, 9)) == '2025-01'
