"""Static Ganji tables for Hangul name analysis.

Consonants and vowels are mapped onto the ten Heavenly Stems by phonetic
group. Each stem carries exactly one Earthly Branch and one Five-Element.
All data here is immutable; lookups never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class FiveElement(str, Enum):
    WOOD = "목(木)"
    FIRE = "화(火)"
    EARTH = "토(土)"
    METAL = "금(金)"
    WATER = "수(水)"
    UNKNOWN = "미상"


CHEONGAN: tuple[str, ...] = ("갑", "을", "병", "정", "무", "기", "경", "신", "임", "계")
JIJI: tuple[str, ...] = ("자", "축", "인", "묘", "진", "사", "오", "미", "신", "유", "술", "해")

# Reference year whose stem and branch are both index 0 (갑자).
GANJI_ANCHOR_YEAR = 4


@dataclass(frozen=True)
class GanjiTriple:
    stem: str
    branch: str
    element: FiveElement

    @property
    def resolved(self) -> bool:
        return self.stem in CHEONGAN

    def to_dict(self) -> dict[str, str]:
        return {"stem": self.stem, "branch": self.branch, "element": self.element.value}


UNKNOWN_GANJI = GanjiTriple(stem="", branch="", element=FiveElement.UNKNOWN)

_STEM_PROFILE: dict[str, tuple[str, FiveElement]] = {
    "갑": ("인", FiveElement.WOOD),
    "을": ("묘", FiveElement.WOOD),
    "병": ("오", FiveElement.FIRE),
    "정": ("사", FiveElement.FIRE),
    "무": ("진", FiveElement.EARTH),
    "기": ("축", FiveElement.EARTH),
    "경": ("신", FiveElement.METAL),
    "신": ("유", FiveElement.METAL),
    "임": ("자", FiveElement.WATER),
    "계": ("해", FiveElement.WATER),
}

# stem -> (consonants, vowels)
_PHONETIC_GROUPS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "갑": (("ㄱ",), ("ㅏ", "ㅐ")),
    "을": (("ㅋ", "ㄲ"), ("ㅕ", "ㅖ")),
    "병": (("ㄴ",), ("ㅛ",)),
    "정": (("ㄷ", "ㄹ", "ㅌ", "ㄸ"), ("ㅜ",)),
    "무": (("ㅁ",), ("ㅣ",)),
    "기": (("ㅂ", "ㅍ", "ㅃ"), ("ㅡ", "ㅢ")),
    "경": (("ㅅ",), ("ㅑ", "ㅒ")),
    "신": (("ㅈ", "ㅊ", "ㅆ", "ㅉ"), ("ㅓ", "ㅔ")),
    "임": (("ㅇ",), ("ㅗ",)),
    "계": (("ㅎ",), ("ㅠ",)),
}


def _build_symbol_table() -> MappingProxyType:
    table: dict[str, GanjiTriple] = {}
    for stem, (consonants, vowels) in _PHONETIC_GROUPS.items():
        branch, element = _STEM_PROFILE[stem]
        triple = GanjiTriple(stem=stem, branch=branch, element=element)
        for symbol in consonants + vowels:
            table[symbol] = triple
    return MappingProxyType(table)


SYMBOL_GANJI = _build_symbol_table()

STEM_LABELS: dict[str, str] = {
    stem: stem + element.value[0] for stem, (_branch, element) in _STEM_PROFILE.items()
}


def lookup_ganji(symbol: str) -> GanjiTriple:
    """Return the Ganji triple for a phoneme symbol, or the unknown triple."""
    return SYMBOL_GANJI.get(symbol, UNKNOWN_GANJI)


def stem_index(stem: str) -> int:
    """Index of a stem in the ten-stem cycle, -1 when unresolvable."""
    try:
        return CHEONGAN.index(stem)
    except ValueError:
        return -1


def format_cheongan(stem: str) -> str:
    """Render a stem with its element syllable (갑 -> 갑목)."""
    return STEM_LABELS.get(stem, stem)


def year_ganji_parts(year: int) -> tuple[str, str]:
    """Return (stem, branch) for a resolved Saju year."""
    offset = int(year) - GANJI_ANCHOR_YEAR
    return CHEONGAN[offset % 10], JIJI[offset % 12]


def calculate_ganji(year: int) -> str:
    stem, branch = year_ganji_parts(year)
    return stem + branch
