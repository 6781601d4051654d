from __future__ import annotations

import unittest

from backend.ganji_tables import (
    CHEONGAN,
    JIJI,
    SYMBOL_GANJI,
    UNKNOWN_GANJI,
    FiveElement,
    calculate_ganji,
    format_cheongan,
    lookup_ganji,
    stem_index,
    year_ganji_parts,
)


class TestGanjiLookup(unittest.TestCase):
    def test_consonant_and_vowel_groups(self) -> None:
        self.assertEqual(lookup_ganji("ㄱ").stem, "갑")
        self.assertEqual(lookup_ganji("ㄱ").branch, "인")
        self.assertEqual(lookup_ganji("ㄱ").element, FiveElement.WOOD)
        self.assertEqual(lookup_ganji("ㄲ").stem, "을")
        self.assertEqual(lookup_ganji("ㄹ").stem, "정")
        self.assertEqual(lookup_ganji("ㅃ").element, FiveElement.EARTH)
        self.assertEqual(lookup_ganji("ㅉ").stem, "신")
        self.assertEqual(lookup_ganji("ㅎ").branch, "해")
        self.assertEqual(lookup_ganji("ㅐ").stem, "갑")
        self.assertEqual(lookup_ganji("ㅗ").element, FiveElement.WATER)
        self.assertEqual(lookup_ganji("ㅣ").stem, "무")

    def test_ui_vowel_is_earth_gi(self) -> None:
        triple = lookup_ganji("ㅢ")
        self.assertEqual((triple.stem, triple.branch, triple.element), ("기", "축", FiveElement.EARTH))

    def test_unmapped_symbols_default_to_unknown(self) -> None:
        for symbol in ("ㄳ", "ㅀ", "ㅘ", "", "A", "7"):
            with self.subTest(symbol=symbol):
                self.assertEqual(lookup_ganji(symbol), UNKNOWN_GANJI)
                self.assertFalse(lookup_ganji(symbol).resolved)

    def test_each_stem_has_single_branch_and_element(self) -> None:
        seen: dict[str, tuple[str, FiveElement]] = {}
        for triple in SYMBOL_GANJI.values():
            seen.setdefault(triple.stem, (triple.branch, triple.element))
            self.assertEqual(seen[triple.stem], (triple.branch, triple.element))
        self.assertEqual(set(seen), set(CHEONGAN))

    def test_table_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            SYMBOL_GANJI["ㄱ"] = UNKNOWN_GANJI  # type: ignore[index]


class TestYearGanji(unittest.TestCase):
    def test_anchor_year_is_gapja(self) -> None:
        self.assertEqual(year_ganji_parts(4), ("갑", "자"))

    def test_known_years(self) -> None:
        self.assertEqual(calculate_ganji(1974), "갑인")
        self.assertEqual(calculate_ganji(1984), "갑자")
        self.assertEqual(calculate_ganji(1989), "기사")
        self.assertEqual(calculate_ganji(2024), "갑진")

    def test_years_before_anchor_wrap_around(self) -> None:
        self.assertEqual(year_ganji_parts(3), ("계", "해"))

    def test_cycle_offsets_are_stable(self) -> None:
        for year in range(4, 130):
            stem, branch = year_ganji_parts(year)
            self.assertEqual(stem_index(stem), (year - 4) % 10)
            self.assertEqual(JIJI[(year - 4) % 12], branch)
            self.assertEqual(year_ganji_parts(year), (stem, branch))


class TestStemLabels(unittest.TestCase):
    def test_format_cheongan(self) -> None:
        self.assertEqual(format_cheongan("갑"), "갑목")
        self.assertEqual(format_cheongan("정"), "정화")
        self.assertEqual(format_cheongan("신"), "신금")
        self.assertEqual(format_cheongan("계"), "계수")
        self.assertEqual(format_cheongan(""), "")

    def test_stem_index_unknown(self) -> None:
        self.assertEqual(stem_index(""), -1)
        self.assertEqual(stem_index("자"), -1)


if __name__ == "__main__":
    unittest.main()
