"""Saju-year resolution.

The Saju year turns over at 입춘 rather than on January 1st. A fixed cutoff of
February 4th is used; births before it belong to the previous year.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from backend.ganji_tables import year_ganji_parts

IPCHUN_MONTH = 2
IPCHUN_DAY = 4
BIRTH_DATE_FORMAT = "%Y-%m-%d"


def parse_birth_date(raw: str) -> date:
    """Parse ``YYYY-MM-DD``; raises ValueError on anything else."""
    text = str(raw or "").strip()
    if not text:
        raise ValueError("birth_date is empty")
    return datetime.strptime(text, BIRTH_DATE_FORMAT).date()


def resolve_saju_year(birth_date: date) -> int:
    if (birth_date.month, birth_date.day) < (IPCHUN_MONTH, IPCHUN_DAY):
        return birth_date.year - 1
    return birth_date.year


def resolve_year_ganji(year: Optional[int] = None, birth_date: Optional[str] = None) -> dict[str, Any]:
    """Resolve {saju_year, stem, branch, ganji} from a birth date or a raw year.

    The birth date wins when both are supplied.
    """
    if birth_date:
        saju_year = resolve_saju_year(parse_birth_date(birth_date))
    elif year is not None:
        saju_year = int(year)
    else:
        raise ValueError("Either year or birth_date is required.")
    stem, branch = year_ganji_parts(saju_year)
    return {
        "saju_year": saju_year,
        "stem": stem,
        "branch": branch,
        "ganji": stem + branch,
    }
