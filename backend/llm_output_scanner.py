from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

FORBIDDEN_PATTERNS = [
    re.compile(r"\bg[13579]\b"),
    re.compile(r"\bc[0-9]\b"),
    re.compile(r"(그룹|십성)\s*코드"),
    re.compile(r"sipsung|jungcheop|geuk|saeng", re.IGNORECASE),
    re.compile(r"profile_hash|sequence_text", re.IGNORECASE),
    re.compile(r"^\s*안녕하세요", re.MULTILINE),
]


def scan_forbidden_patterns(
    text: str,
    patterns: Iterable[re.Pattern] = FORBIDDEN_PATTERNS,
) -> list[dict[str, str]]:
    findings: list[dict[str, str]] = []
    for pattern in patterns:
        for match in pattern.finditer(text or ""):
            start = max(0, match.start() - 40)
            end = min(len(text), match.end() + 40)
            findings.append(
                {
                    "pattern": pattern.pattern,
                    "match": match.group(0),
                    "context": (text[start:end] or "").replace("\n", " "),
                }
            )
    return findings


def scan_text_file(path: Path) -> list[dict[str, str]]:
    return scan_forbidden_patterns(path.read_text(encoding="utf-8"))
