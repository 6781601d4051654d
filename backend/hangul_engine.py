"""Hangul syllable decomposition and Ganji/Sipsung component mapping.

Pure functions only. A character outside the Hangul syllable block is never
an error: it comes back as its own lead symbol with an empty vowel and no tail,
and its mapping resolves to the unknown element with no Ten-Gods class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from backend.ganji_tables import (
    FiveElement,
    GanjiTriple,
    lookup_ganji,
    year_ganji_parts,
)
from backend.sipsung import SipsungGroup, SipsungInfo, calculate_sipsung

HANGUL_BASE = 0xAC00
HANGUL_LAST = 0xD7A3
LEAD_STRIDE = 588  # 21 vowels * 28 tails
VOWEL_STRIDE = 28

CHO_SYMBOLS: tuple[str, ...] = (
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ", "ㅅ",
    "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)
JUNG_SYMBOLS: tuple[str, ...] = (
    "ㅏ", "ㅐ", "ㅑ", "ㅒ", "ㅓ", "ㅔ", "ㅕ", "ㅖ", "ㅗ", "ㅘ", "ㅙ",
    "ㅚ", "ㅛ", "ㅜ", "ㅝ", "ㅞ", "ㅟ", "ㅠ", "ㅡ", "ㅢ", "ㅣ",
)
JONG_SYMBOLS: tuple[str, ...] = (
    "", "ㄱ", "ㄲ", "ㄳ", "ㄴ", "ㄵ", "ㄶ", "ㄷ", "ㄹ", "ㄺ", "ㄻ", "ㄼ", "ㄽ", "ㄾ",
    "ㄿ", "ㅀ", "ㅁ", "ㅂ", "ㅄ", "ㅅ", "ㅆ", "ㅇ", "ㅈ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

# ㅢ stays a single unit (기토) and is deliberately absent here.
VOWEL_DECOMPOSITION: dict[str, tuple[str, ...]] = {
    "ㅘ": ("ㅗ", "ㅏ"),
    "ㅙ": ("ㅗ", "ㅏ", "ㅣ"),
    "ㅚ": ("ㅗ", "ㅣ"),
    "ㅝ": ("ㅜ", "ㅓ"),
    "ㅞ": ("ㅜ", "ㅓ", "ㅣ"),
    "ㅟ": ("ㅜ", "ㅣ"),
}

SLOT_LEAD = "lead"
SLOT_VOWEL = "vowel"
SLOT_TAIL = "tail"

VowelParts = Union[str, tuple[str, ...]]


@dataclass(frozen=True)
class SyllableParts:
    lead: str
    vowel: VowelParts
    tail: Optional[str]


@dataclass(frozen=True)
class NameComponentMapping:
    symbol: str
    ganji: GanjiTriple
    sipsung: Optional[SipsungInfo]

    @property
    def element(self) -> FiveElement:
        return self.ganji.element

    @property
    def group(self) -> Optional[SipsungGroup]:
        return self.sipsung.group if self.sipsung is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            **self.ganji.to_dict(),
            "sipsung": self.sipsung.to_dict() if self.sipsung is not None else None,
        }


VowelMapping = Union[NameComponentMapping, tuple[NameComponentMapping, ...]]


@dataclass(frozen=True)
class HangulSyllableBlock:
    char: str
    lead: NameComponentMapping
    vowel: VowelMapping
    tail: Optional[NameComponentMapping]

    @property
    def vowel_components(self) -> tuple[NameComponentMapping, ...]:
        if isinstance(self.vowel, tuple):
            return self.vowel
        return (self.vowel,)

    def slots(self) -> Iterator[tuple[str, NameComponentMapping]]:
        """Yield (slot, mapping) pairs in reading order."""
        yield SLOT_LEAD, self.lead
        for mapping in self.vowel_components:
            yield SLOT_VOWEL, mapping
        if self.tail is not None:
            yield SLOT_TAIL, self.tail

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.vowel, tuple):
            vowel: Any = [mapping.to_dict() for mapping in self.vowel]
        else:
            vowel = self.vowel.to_dict()
        return {
            "char": self.char,
            "lead": self.lead.to_dict(),
            "vowel": vowel,
            "tail": self.tail.to_dict() if self.tail is not None else None,
        }


@dataclass(frozen=True)
class AnalysisResult:
    saju_year: int
    year_stem: str
    year_branch: str
    surname: HangulSyllableBlock
    given_name: tuple[HangulSyllableBlock, ...]
    gender: str
    birth_date: Optional[str] = None

    @property
    def ganji(self) -> str:
        return self.year_stem + self.year_branch

    @property
    def full_name(self) -> str:
        return self.surname.char + "".join(block.char for block in self.given_name)

    @property
    def blocks(self) -> tuple[HangulSyllableBlock, ...]:
        return (self.surname,) + self.given_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.full_name,
            "saju_year": self.saju_year,
            "birth_date": self.birth_date,
            "year_stem": self.year_stem,
            "year_branch": self.year_branch,
            "ganji": self.ganji,
            "gender": self.gender,
            "surname": self.surname.to_dict(),
            "given_name": [block.to_dict() for block in self.given_name],
        }


@dataclass(frozen=True)
class PositionedComponent:
    index: int
    char: str
    syllable_index: int
    slot: str
    is_surname: bool
    mapping: NameComponentMapping

    @property
    def symbol(self) -> str:
        return self.mapping.symbol


def expand_vowel(symbol: str) -> VowelParts:
    """Split a compound vowel into its simple vowels; others pass through."""
    return VOWEL_DECOMPOSITION.get(symbol, symbol)


def decompose_syllable(char: str) -> SyllableParts:
    code = ord(char[0]) - HANGUL_BASE if char else -1
    if not 0 <= code <= HANGUL_LAST - HANGUL_BASE:
        return SyllableParts(lead=char, vowel="", tail=None)

    cho_idx, rest = divmod(code, LEAD_STRIDE)
    jung_idx, jong_idx = divmod(rest, VOWEL_STRIDE)
    tail = JONG_SYMBOLS[jong_idx]
    return SyllableParts(
        lead=CHO_SYMBOLS[cho_idx],
        vowel=expand_vowel(JUNG_SYMBOLS[jung_idx]),
        tail=tail or None,
    )


def map_component(symbol: str, year_stem: str) -> NameComponentMapping:
    ganji = lookup_ganji(symbol)
    return NameComponentMapping(
        symbol=symbol,
        ganji=ganji,
        sipsung=calculate_sipsung(ganji.stem, year_stem),
    )


def map_syllable(char: str, year_stem: str) -> HangulSyllableBlock:
    parts = decompose_syllable(char)
    if isinstance(parts.vowel, tuple):
        vowel: VowelMapping = tuple(map_component(sym, year_stem) for sym in parts.vowel)
    else:
        vowel = map_component(parts.vowel, year_stem)
    return HangulSyllableBlock(
        char=char,
        lead=map_component(parts.lead, year_stem),
        vowel=vowel,
        tail=map_component(parts.tail, year_stem) if parts.tail else None,
    )


def build_analysis(
    surname: str,
    given_name: str,
    *,
    saju_year: int,
    year_stem: str,
    year_branch: str,
    gender: str,
    birth_date: Optional[str] = None,
) -> AnalysisResult:
    """Assemble an Analysis Result from an already resolved year stem/branch."""
    return AnalysisResult(
        saju_year=int(saju_year),
        year_stem=year_stem,
        year_branch=year_branch,
        surname=map_syllable(surname[0], year_stem),
        given_name=tuple(map_syllable(char, year_stem) for char in given_name),
        gender=gender,
        birth_date=birth_date,
    )


def analyze_name(
    surname: str,
    given_name: str,
    saju_year: int,
    gender: str = "male",
    birth_date: Optional[str] = None,
) -> AnalysisResult:
    stem, branch = year_ganji_parts(saju_year)
    return build_analysis(
        surname,
        given_name,
        saju_year=saju_year,
        year_stem=stem,
        year_branch=branch,
        gender=gender,
        birth_date=birth_date,
    )


def iter_components(analysis: AnalysisResult) -> Iterator[PositionedComponent]:
    """Yield every phoneme slot of the full name in left-to-right order."""
    index = 0
    for syllable_index, block in enumerate(analysis.blocks):
        for slot, mapping in block.slots():
            yield PositionedComponent(
                index=index,
                char=block.char,
                syllable_index=syllable_index,
                slot=slot,
                is_surname=syllable_index == 0,
                mapping=mapping,
            )
            index += 1


def flatten_components(analysis: AnalysisResult) -> list[PositionedComponent]:
    return list(iter_components(analysis))


def core_component_index(analysis: AnalysisResult) -> Optional[int]:
    """Flat index of the lead of the first given-name syllable."""
    if not analysis.given_name:
        return None
    return sum(1 for _ in analysis.surname.slots())
