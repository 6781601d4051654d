from datetime import date

import pytest

from backend.saju_year import parse_birth_date, resolve_saju_year, resolve_year_ganji


@pytest.mark.parametrize(
    "birth, expected",
    [
        (date(1990, 1, 1), 1989),
        (date(1990, 2, 3), 1989),
        (date(1990, 2, 4), 1990),
        (date(1990, 12, 31), 1990),
    ],
)
def test_saju_year_turns_over_at_ipchun(birth, expected):
    assert resolve_saju_year(birth) == expected


def test_birth_date_before_ipchun_uses_previous_ganji():
    resolved = resolve_year_ganji(birth_date="1990-02-03")
    assert resolved == {"saju_year": 1989, "stem": "기", "branch": "사", "ganji": "기사"}


def test_year_only():
    assert resolve_year_ganji(year=1974)["ganji"] == "갑인"


def test_birth_date_wins_over_year():
    assert resolve_year_ganji(year=2000, birth_date="1974-05-01")["saju_year"] == 1974


@pytest.mark.parametrize("raw", ["", "1990/02/03", "1990-02-30", "not-a-date"])
def test_invalid_birth_dates_raise(raw):
    with pytest.raises(ValueError):
        parse_birth_date(raw)


def test_missing_year_source_raises():
    with pytest.raises(ValueError):
        resolve_year_ganji()
