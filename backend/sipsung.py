"""Ten-Gods (Sipsung) relation matrix and group relations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from backend.ganji_tables import stem_index

# rows: name-component stem index, columns: year stem index
SIPSUNG_MATRIX: tuple[tuple[int, ...], ...] = (
    (1, 2, 3, 4, 5, 6, 7, 8, 9, 0),
    (2, 1, 4, 3, 6, 5, 8, 7, 0, 9),
    (9, 0, 1, 2, 3, 4, 5, 6, 7, 8),
    (0, 9, 2, 1, 4, 3, 6, 5, 8, 7),
    (7, 8, 9, 0, 1, 2, 3, 4, 5, 6),
    (8, 7, 0, 9, 2, 1, 4, 3, 6, 5),
    (5, 6, 7, 8, 9, 0, 1, 2, 3, 4),
    (6, 5, 8, 7, 0, 9, 2, 1, 4, 3),
    (3, 4, 5, 6, 7, 8, 9, 0, 1, 2),
    (4, 3, 6, 5, 8, 7, 0, 9, 2, 1),
)

SIPSUNG_NAMES: dict[int, str] = {
    1: "비견",
    2: "겁재",
    3: "식신",
    4: "상관",
    5: "편재",
    6: "정재",
    7: "편관",
    8: "정관",
    9: "편인",
    0: "정인",
}


class SipsungGroup(str, Enum):
    BIGEOP = "비겁"
    SIKSANG = "식상"
    JAESEONG = "재성"
    GWANSEONG = "관성"
    INSEONG = "인성"

    @property
    def code(self) -> int:
        return GROUP_CODES[self]


GROUP_CODES: dict[SipsungGroup, int] = {
    SipsungGroup.BIGEOP: 1,
    SipsungGroup.SIKSANG: 3,
    SipsungGroup.JAESEONG: 5,
    SipsungGroup.GWANSEONG: 7,
    SipsungGroup.INSEONG: 9,
}

_CODE_GROUPS: dict[int, SipsungGroup] = {
    1: SipsungGroup.BIGEOP,
    2: SipsungGroup.BIGEOP,
    3: SipsungGroup.SIKSANG,
    4: SipsungGroup.SIKSANG,
    5: SipsungGroup.JAESEONG,
    6: SipsungGroup.JAESEONG,
    7: SipsungGroup.GWANSEONG,
    8: SipsungGroup.GWANSEONG,
    9: SipsungGroup.INSEONG,
    0: SipsungGroup.INSEONG,
}


class GroupRelation(str, Enum):
    SAME = "same"
    GENERATES = "generates"
    GENERATED_BY = "generated_by"
    CONTROLS = "controls"
    CONTROLLED_BY = "controlled_by"


# Directed edges: key generates / controls value.
SAENG_CYCLE: dict[SipsungGroup, SipsungGroup] = {
    SipsungGroup.BIGEOP: SipsungGroup.SIKSANG,
    SipsungGroup.SIKSANG: SipsungGroup.JAESEONG,
    SipsungGroup.JAESEONG: SipsungGroup.GWANSEONG,
    SipsungGroup.GWANSEONG: SipsungGroup.INSEONG,
    SipsungGroup.INSEONG: SipsungGroup.BIGEOP,
}

GEUK_CYCLE: dict[SipsungGroup, SipsungGroup] = {
    SipsungGroup.BIGEOP: SipsungGroup.JAESEONG,
    SipsungGroup.SIKSANG: SipsungGroup.GWANSEONG,
    SipsungGroup.JAESEONG: SipsungGroup.INSEONG,
    SipsungGroup.GWANSEONG: SipsungGroup.BIGEOP,
    SipsungGroup.INSEONG: SipsungGroup.SIKSANG,
}


def _build_relation_table() -> dict[tuple[SipsungGroup, SipsungGroup], GroupRelation]:
    table: dict[tuple[SipsungGroup, SipsungGroup], GroupRelation] = {}
    for group in SipsungGroup:
        table[(group, group)] = GroupRelation.SAME
        table[(group, SAENG_CYCLE[group])] = GroupRelation.GENERATES
        table[(SAENG_CYCLE[group], group)] = GroupRelation.GENERATED_BY
        table[(group, GEUK_CYCLE[group])] = GroupRelation.CONTROLS
        table[(GEUK_CYCLE[group], group)] = GroupRelation.CONTROLLED_BY
    return table


GROUP_RELATIONS = _build_relation_table()


@dataclass(frozen=True)
class SipsungInfo:
    code: int
    name: str
    group: SipsungGroup

    @property
    def group_code(self) -> int:
        return self.group.code

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "name": self.name,
            "group": self.group.value,
            "group_code": self.group_code,
        }


def group_for_code(code: Optional[int]) -> Optional[SipsungGroup]:
    if code is None:
        return None
    return _CODE_GROUPS.get(code)


def get_sipsung_group_code(code: Optional[int]) -> int:
    """Group code (1, 3, 5, 7, 9) for a Ten-Gods code, -1 when unknown."""
    group = group_for_code(code)
    return group.code if group is not None else -1


def calculate_sipsung(name_stem: str, year_stem: str) -> Optional[SipsungInfo]:
    """Classify a name-component stem against the birth-year stem.

    Returns None when either stem is outside the ten-stem cycle.
    """
    name_idx = stem_index(name_stem)
    year_idx = stem_index(year_stem)
    if name_idx < 0 or year_idx < 0:
        return None
    code = SIPSUNG_MATRIX[name_idx][year_idx]
    return SipsungInfo(code=code, name=SIPSUNG_NAMES[code], group=_CODE_GROUPS[code])


def relation_between(a: Optional[SipsungGroup], b: Optional[SipsungGroup]) -> Optional[GroupRelation]:
    """Relation of group a towards group b; None when either is unresolved."""
    if a is None or b is None:
        return None
    return GROUP_RELATIONS[(a, b)]


def check_saeng(a: Optional[int], b: Optional[int]) -> bool:
    """True when code a's group generates code b's group."""
    return relation_between(group_for_code(a), group_for_code(b)) is GroupRelation.GENERATES


def check_geuk(a: Optional[int], b: Optional[int]) -> bool:
    """True when code a's group controls code b's group."""
    return relation_between(group_for_code(a), group_for_code(b)) is GroupRelation.CONTROLS


def check_jungcheop(a: Optional[int], b: Optional[int]) -> bool:
    return relation_between(group_for_code(a), group_for_code(b)) is GroupRelation.SAME
