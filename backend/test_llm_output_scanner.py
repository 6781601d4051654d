from pathlib import Path

from backend.llm_output_scanner import scan_forbidden_patterns, scan_text_file


def test_llm_output_scanner_detects_forbidden_tokens() -> None:
    text = "안녕하세요.\n명주성은 g7 관성이며 십성 코드 c8 입니다. sequence_text 참조."
    findings = scan_forbidden_patterns(text)
    matches = {f["match"] for f in findings}
    assert {"g7", "c8", "십성 코드", "sequence_text", "안녕하세요"} <= matches


def test_llm_output_scanner_allows_clean_text() -> None:
    text = "명주성의 기운이 이웃과 상생하여 재능이 자연스럽게 재물로 이어지는 흐름입니다."
    findings = scan_forbidden_patterns(text)
    assert findings == []


def test_scan_text_file(tmp_path: Path) -> None:
    path = tmp_path / "reading.txt"
    path.write_text("비겁과 재성이 jungcheop 관계입니다.", encoding="utf-8")
    findings = scan_text_file(path)
    assert [f["match"] for f in findings] == ["jungcheop"]
