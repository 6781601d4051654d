"""Deterministic name profile builder.

Turns an Analysis Result plus its adjacency statuses into the JSON profile that
the report table and the narrative prompt consume.
"""

from __future__ import annotations

import hashlib
import json
from collections import Counter
from typing import Any, Iterable

from backend.ganji_tables import FiveElement, format_cheongan
from backend.hangul_engine import (
    SLOT_LEAD,
    SLOT_TAIL,
    SLOT_VOWEL,
    AnalysisResult,
    PositionedComponent,
    core_component_index,
    flatten_components,
)
from backend.relation_engine import SCOPE_ALL, SCOPE_CORE, AdjacencyStatus, evaluate_component, evaluate_sequence
from backend.sipsung import SipsungGroup

SEQUENCE_SEPARATOR = " → "

SLOT_LABELS_KO = {
    SLOT_LEAD: "초성",
    SLOT_VOWEL: "중성",
    SLOT_TAIL: "종성",
}

# Unordered adjacent group pairs that the narrative prompt treats as special.
PATTERN_PAIRS: dict[str, frozenset[SipsungGroup]] = {
    "hidden_wealth": frozenset({SipsungGroup.GWANSEONG, SipsungGroup.BIGEOP}),
    "rivalry_for_wealth": frozenset({SipsungGroup.BIGEOP, SipsungGroup.JAESEONG}),
    "output_blocked": frozenset({SipsungGroup.INSEONG, SipsungGroup.SIKSANG}),
    "output_generates_wealth": frozenset({SipsungGroup.SIKSANG, SipsungGroup.JAESEONG}),
}


def _canonical_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _sha256_hex(value: Any) -> str:
    return hashlib.sha256(_canonical_json(value).encode("utf-8")).hexdigest()


def build_table_rows(sequence: Iterable[PositionedComponent]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for component in sequence:
        mapping = component.mapping
        rows.append(
            {
                "symbol": mapping.symbol,
                "stem_label": format_cheongan(mapping.ganji.stem),
                "sipsung_name": mapping.sipsung.name if mapping.sipsung is not None else "",
            }
        )
    return rows


def _annotate(component: PositionedComponent) -> str:
    mapping = component.mapping
    if mapping.sipsung is None:
        return f"{mapping.symbol}[{FiveElement.UNKNOWN.value}]"
    info = mapping.sipsung
    return (
        f"{mapping.symbol}[{format_cheongan(mapping.ganji.stem)} "
        f"{info.name}/{info.group.value} g{info.group_code} c{info.code}]"
    )


def build_sequence_text(sequence: Iterable[PositionedComponent]) -> str:
    """Render the flattened components as one annotated left-to-right line."""
    return SEQUENCE_SEPARATOR.join(_annotate(component) for component in sequence)


def build_summary_text(sequence: Iterable[PositionedComponent]) -> str:
    parts: list[str] = []
    for component in sequence:
        if component.mapping.sipsung is None:
            continue
        owner = "성" if component.is_surname else f"이름{component.syllable_index}"
        parts.append(f"{owner} {SLOT_LABELS_KO[component.slot]}: {component.mapping.sipsung.name}")
    return ", ".join(parts)


def count_elements(sequence: Iterable[PositionedComponent]) -> dict[str, int]:
    counts = Counter(component.mapping.element for component in sequence)
    return {element.value: counts.get(element, 0) for element in FiveElement}


def detect_patterns(sequence: list[PositionedComponent]) -> dict[str, bool]:
    """Flag special group pairings; only immediate neighbours are considered."""
    found = {name: False for name in PATTERN_PAIRS}
    for left, right in zip(sequence, sequence[1:]):
        pair = {left.mapping.group, right.mapping.group}
        if None in pair:
            continue
        for name, wanted in PATTERN_PAIRS.items():
            if pair == wanted:
                found[name] = True
    return found


def _core_component_payload(
    sequence: list[PositionedComponent],
    core_index: int | None,
    status: AdjacencyStatus | None,
) -> dict[str, Any] | None:
    if core_index is None or core_index >= len(sequence):
        return None
    component = sequence[core_index]
    mapping = component.mapping
    return {
        "index": core_index,
        "char": component.char,
        "symbol": mapping.symbol,
        "element": mapping.element.value,
        "stem_label": format_cheongan(mapping.ganji.stem),
        "sipsung": mapping.sipsung.to_dict() if mapping.sipsung is not None else None,
        "status": status.to_dict() if status is not None else None,
    }


def build_name_profile(analysis: AnalysisResult, scope: str = SCOPE_ALL) -> dict[str, Any]:
    if scope not in (SCOPE_CORE, SCOPE_ALL):
        raise ValueError(f"Unsupported scope: {scope!r}")

    sequence = flatten_components(analysis)
    core_index = core_component_index(analysis)
    core_status = None
    if core_index is not None and core_index < len(sequence):
        core_status = evaluate_component(sequence, core_index)

    if scope == SCOPE_ALL:
        statuses = evaluate_sequence(sequence)
    else:
        statuses = [core_status] if core_status is not None else []

    profile: dict[str, Any] = {
        "name": analysis.full_name,
        "gender": analysis.gender,
        "saju_year": analysis.saju_year,
        "birth_date": analysis.birth_date,
        "ganji": analysis.ganji,
        "year_stem": analysis.year_stem,
        "year_branch": analysis.year_branch,
        "scope": scope,
        "core_component": _core_component_payload(sequence, core_index, core_status),
        "table_rows": build_table_rows(sequence),
        "sequence_text": build_sequence_text(sequence),
        "summary_text": build_summary_text(sequence),
        "adjacency": [status.to_dict() for status in statuses],
        "element_balance": count_elements(sequence),
        "patterns": detect_patterns(sequence),
    }
    profile["profile_hash"] = compute_profile_hash(profile)
    return profile


def compute_profile_hash(profile: dict[str, Any]) -> str:
    payload = {key: value for key, value in profile.items() if key != "profile_hash"}
    return _sha256_hex(payload)
