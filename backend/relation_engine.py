"""Adjacency relation engine.

Components interact only with their immediate left and right neighbours in the
flattened reading-order sequence. For a focal component the engine tests
duplication (same group), control by a neighbour, and generation in either
direction, then resolves a polarity with a fixed priority order:

1. duplicated and controlled  -> favorable   (purified)
2. duplicated, not controlled -> unfavorable (excess)
3. controlled, not duplicated -> unfavorable (suppressed)
4. generation with a neighbour -> favorable  (flowing)
5. otherwise                  -> neutral     (plain)

Unresolved groups make every test involving them false.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Union

from backend.hangul_engine import (
    AnalysisResult,
    NameComponentMapping,
    PositionedComponent,
    core_component_index,
    flatten_components,
)
from backend.sipsung import GroupRelation, SipsungGroup, relation_between

SCOPE_CORE = "core"
SCOPE_ALL = "all"


class Polarity(str, Enum):
    FAVORABLE = "favorable"
    UNFAVORABLE = "unfavorable"
    NEUTRAL = "neutral"


class Verdict(str, Enum):
    PURIFIED = "purified"
    EXCESS = "excess"
    SUPPRESSED = "suppressed"
    FLOWING = "flowing"
    PLAIN = "plain"


VERDICT_POLARITY: dict[Verdict, Polarity] = {
    Verdict.PURIFIED: Polarity.FAVORABLE,
    Verdict.EXCESS: Polarity.UNFAVORABLE,
    Verdict.SUPPRESSED: Polarity.UNFAVORABLE,
    Verdict.FLOWING: Polarity.FAVORABLE,
    Verdict.PLAIN: Polarity.NEUTRAL,
}

_RATIONALE_TEMPLATES: dict[Verdict, str] = {
    Verdict.PURIFIED: "{label}이(가) 이웃과 중첩되었으나 이웃 {controller}의 극을 받아 과잉 기운이 정화됩니다.",
    Verdict.EXCESS: "{label}이(가) 이웃과 중첩되었고 제어하는 기운이 없어 기운이 넘치고 정체됩니다.",
    Verdict.SUPPRESSED: "{label}이(가) 이웃 {controller}의 극을 받으나 중첩이 없어 기운이 눌립니다.",
    Verdict.FLOWING: "{label}이(가) 이웃 {partner}과(와) 상생하여 기운이 순환합니다.",
    Verdict.PLAIN: "{label}은(는) 이웃과 뚜렷한 생극 관계가 없어 평이합니다.",
}

Component = Union[NameComponentMapping, PositionedComponent]


@dataclass(frozen=True)
class AdjacencyStatus:
    index: int
    symbol: str
    group: Optional[SipsungGroup]
    is_duplicated: bool
    is_controlled: bool
    is_generated: bool
    polarity: Polarity
    verdict: Verdict
    rationale: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "symbol": self.symbol,
            "group": self.group.value if self.group is not None else None,
            "is_duplicated": self.is_duplicated,
            "is_controlled": self.is_controlled,
            "is_generated": self.is_generated,
            "polarity": self.polarity.value,
            "verdict": self.verdict.value,
            "rationale": self.rationale,
        }


def _mapping(component: Component) -> NameComponentMapping:
    if isinstance(component, PositionedComponent):
        return component.mapping
    return component


def _neighbours(sequence: Sequence[Component], index: int) -> list[NameComponentMapping]:
    found: list[NameComponentMapping] = []
    if index > 0:
        found.append(_mapping(sequence[index - 1]))
    if index < len(sequence) - 1:
        found.append(_mapping(sequence[index + 1]))
    return found


def _label(mapping: NameComponentMapping) -> str:
    if mapping.sipsung is None:
        return f"{mapping.symbol or '빈 자리'}(미상)"
    return f"{mapping.symbol}({mapping.sipsung.name})"


def evaluate_component(sequence: Sequence[Component], index: int) -> AdjacencyStatus:
    """Run the adjacency procedure for the component at ``index``."""
    focal = _mapping(sequence[index])
    group = focal.group
    neighbours = _neighbours(sequence, index)

    duplicated = False
    controller: Optional[NameComponentMapping] = None
    partner: Optional[NameComponentMapping] = None
    for neighbour in neighbours:
        relation = relation_between(neighbour.group, group)
        if relation is GroupRelation.SAME:
            duplicated = True
        elif relation is GroupRelation.CONTROLS:
            controller = controller or neighbour
        elif relation in (GroupRelation.GENERATES, GroupRelation.GENERATED_BY):
            partner = partner or neighbour

    controlled = controller is not None
    generated = partner is not None

    if duplicated and controlled:
        verdict = Verdict.PURIFIED
    elif duplicated:
        verdict = Verdict.EXCESS
    elif controlled:
        verdict = Verdict.SUPPRESSED
    elif generated:
        verdict = Verdict.FLOWING
    else:
        verdict = Verdict.PLAIN

    rationale = _RATIONALE_TEMPLATES[verdict].format(
        label=_label(focal),
        controller=_label(controller) if controller is not None else "",
        partner=_label(partner) if partner is not None else "",
    )
    return AdjacencyStatus(
        index=index,
        symbol=focal.symbol,
        group=group,
        is_duplicated=duplicated,
        is_controlled=controlled,
        is_generated=generated,
        polarity=VERDICT_POLARITY[verdict],
        verdict=verdict,
        rationale=rationale,
    )


def evaluate_sequence(sequence: Sequence[Component]) -> list[AdjacencyStatus]:
    return [evaluate_component(sequence, index) for index in range(len(sequence))]


def evaluate_analysis(analysis: AnalysisResult, scope: str = SCOPE_CORE) -> list[AdjacencyStatus]:
    """Evaluate the focal component only (``core``) or every component (``all``)."""
    sequence = flatten_components(analysis)
    if scope == SCOPE_ALL:
        return evaluate_sequence(sequence)
    if scope != SCOPE_CORE:
        raise ValueError(f"Unsupported scope: {scope!r}")
    core_index = core_component_index(analysis)
    if core_index is None or core_index >= len(sequence):
        return []
    return [evaluate_component(sequence, core_index)]
