from __future__ import annotations

import unittest
from collections import Counter

from backend.sipsung import (
    GROUP_RELATIONS,
    SIPSUNG_MATRIX,
    GroupRelation,
    SipsungGroup,
    calculate_sipsung,
    check_geuk,
    check_jungcheop,
    check_saeng,
    get_sipsung_group_code,
    relation_between,
)


class TestSipsungMatrix(unittest.TestCase):
    def test_same_stem_is_bigyeon(self) -> None:
        for row_idx, row in enumerate(SIPSUNG_MATRIX):
            self.assertEqual(row[row_idx], 1)

    def test_rows_are_permutations(self) -> None:
        for row in SIPSUNG_MATRIX:
            self.assertEqual(sorted(row), list(range(10)))

    def test_classify_against_gap_year(self) -> None:
        info = calculate_sipsung("갑", "갑")
        self.assertEqual((info.code, info.name, info.group), (1, "비견", SipsungGroup.BIGEOP))

        info = calculate_sipsung("병", "갑")
        self.assertEqual((info.code, info.name, info.group_code), (9, "편인", 9))

        info = calculate_sipsung("무", "갑")
        self.assertEqual((info.code, info.name, info.group), (7, "편관", SipsungGroup.GWANSEONG))

        info = calculate_sipsung("정", "갑")
        self.assertEqual((info.code, info.name, info.group), (0, "정인", SipsungGroup.INSEONG))

    def test_unresolved_stems_return_none(self) -> None:
        self.assertIsNone(calculate_sipsung("", "갑"))
        self.assertIsNone(calculate_sipsung("갑", ""))
        self.assertIsNone(calculate_sipsung("자", "갑"))

    def test_to_dict(self) -> None:
        self.assertEqual(
            calculate_sipsung("임", "갑").to_dict(),
            {"code": 3, "name": "식신", "group": "식상", "group_code": 3},
        )


class TestGroupRelations(unittest.TestCase):
    def test_group_codes(self) -> None:
        self.assertEqual([get_sipsung_group_code(c) for c in range(10)], [9, 1, 1, 3, 3, 5, 5, 7, 7, 9])
        self.assertEqual(get_sipsung_group_code(None), -1)
        self.assertEqual(get_sipsung_group_code(12), -1)

    def test_table_covers_every_pair_once(self) -> None:
        self.assertEqual(len(GROUP_RELATIONS), 25)
        for group in SipsungGroup:
            row = Counter(GROUP_RELATIONS[(group, other)] for other in SipsungGroup)
            self.assertEqual(row, Counter(GroupRelation))

    def test_relations_are_mirrored(self) -> None:
        mirror = {
            GroupRelation.SAME: GroupRelation.SAME,
            GroupRelation.GENERATES: GroupRelation.GENERATED_BY,
            GroupRelation.GENERATED_BY: GroupRelation.GENERATES,
            GroupRelation.CONTROLS: GroupRelation.CONTROLLED_BY,
            GroupRelation.CONTROLLED_BY: GroupRelation.CONTROLS,
        }
        for (a, b), relation in GROUP_RELATIONS.items():
            self.assertEqual(GROUP_RELATIONS[(b, a)], mirror[relation])

    def test_generation_cycle(self) -> None:
        self.assertTrue(check_saeng(1, 3))
        self.assertTrue(check_saeng(4, 5))
        self.assertTrue(check_saeng(6, 7))
        self.assertTrue(check_saeng(8, 9))
        self.assertTrue(check_saeng(0, 2))
        self.assertFalse(check_saeng(3, 1))

    def test_control_cycle(self) -> None:
        self.assertTrue(check_geuk(1, 5))
        self.assertTrue(check_geuk(3, 7))
        self.assertTrue(check_geuk(5, 9))
        self.assertTrue(check_geuk(7, 1))
        self.assertTrue(check_geuk(9, 3))
        self.assertFalse(check_geuk(1, 7))

    def test_authority_controls_self(self) -> None:
        self.assertIs(relation_between(SipsungGroup.GWANSEONG, SipsungGroup.BIGEOP), GroupRelation.CONTROLS)

    def test_duplication(self) -> None:
        self.assertTrue(check_jungcheop(1, 2))
        self.assertTrue(check_jungcheop(9, 0))
        self.assertFalse(check_jungcheop(1, 3))
        self.assertFalse(check_jungcheop(None, None))
        self.assertIsNone(relation_between(None, SipsungGroup.BIGEOP))


if __name__ == "__main__":
    unittest.main()
