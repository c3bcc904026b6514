from datetime import datetime, timezone

import pytest

FIXED_TIME = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def conventional_sheet():
    return [
        ["ACME WHOLESALE RATE SHEET", None, None],
        [None, None, None],
        ["CONFORMING 30 YEAR FIXED", None, None],
        ["Rate", "15-Day", "30-Day"],
        [6.0, 98.6, 98.5],
        [6.5, 100.3, 100.2],
        [7.0, 102.1, 102.0],
        [None, None, None],
        ["CONFORMING 15-YR FIXED", None, None],
        ["RATE", "30 DAY", "45 DAY"],
        ["5.500%", "99.125", "99.0"],
        ["5.750%", "n/a", "100.4"],
        ["6.000%", "(100.875)", "100.7"],
        ["CONFORMING 10 YEAR FIXED", None, None],
        ["Rate", "30 Day", None],
        [5.25, 99.5, None],
        [None, None, None],
        ["7/6 SOFR ARM (30 YR AMORTIZATION)", None, None],
        ["Rate", "30 Day", None],
        [5.875, 99.75, None],
        [6.125, 101.0, None],
    ]


@pytest.fixture
def high_balance_sheet():
    return [
        ["HIGH BALANCE 30 YEAR FIXED", None],
        ["Rate", "30 Day"],
        [6.25, 98.0],
        [6.75, 99.9],
    ]


@pytest.fixture
def workbook(conventional_sheet, high_balance_sheet):
    return {
        "Conventional": conventional_sheet,
        "Conv High Balance": high_balance_sheet,
        "FHA": [
            ["FHA 30 YR FIXED", None],
            ["Rate", "30-Day"],
            [5.99, 99.0],
            [6.25, 100.1],
        ],
        "Notes": [["30 YEAR FIXED"], ["Rate", "30 Day"], [1.0, 1.0]],
    }
