import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Optional

from backend.llm_output_scanner import scan_forbidden_patterns
from backend.profile_engine import _canonical_json
from backend.prompts import PROMPT_VERSION, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
DEFAULT_FALLBACK_MODELS = ("gpt-4o-mini", "gpt-4o")
READING_TEMPERATURE = 0.35
PARAGRAPH_MAX_CHARS = 300

logger = logging.getLogger("namelogy")
llm_audit_logger = logging.getLogger("llm_audit")

PATTERN_LABELS_KO = {
    "hidden_wealth": "관성과 비겁의 인접 (숨은 재물)",
    "rivalry_for_wealth": "비겁과 재성의 인접 (군비쟁재)",
    "output_blocked": "인성과 식상의 인접 (도식)",
    "output_generates_wealth": "식상과 재성의 인접 (식상생재)",
}

VERDICT_LABELS_KO = {
    "purified": "정화",
    "excess": "과잉",
    "suppressed": "억눌림",
    "flowing": "순환",
    "plain": "평이",
}


def _utc_iso_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _emit_llm_audit_event(
    *,
    request_id: str,
    profile_hash: str,
    model_used: str,
    endpoint: str,
) -> dict[str, str]:
    event = {
        "request_id": request_id,
        "profile_hash": profile_hash,
        "prompt_version": PROMPT_VERSION,
        "timestamp_utc": _utc_iso_now(),
        "model_used": model_used,
        "endpoint": endpoint,
    }
    llm_audit_logger.info(_canonical_json(event))
    return event


def _candidate_openai_models(primary_model: str) -> list[str]:
    """Return de-duplicated model fallback order for chat completions."""
    configured = [m for m in os.getenv("OPENAI_FALLBACK_MODELS", "").split(",") if m.strip()]
    candidates = [primary_model, *(configured or DEFAULT_FALLBACK_MODELS)]
    out: list[str] = []
    for model in candidates:
        normalized = (model or "").strip()
        if normalized and normalized not in out:
            out.append(normalized)
    return out


def _build_openai_payload(
    *,
    model: str,
    system_message: str,
    user_message: str,
    max_completion_tokens: int,
) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": system_message},
            {"role": "user", "content": user_message},
        ],
        "temperature": READING_TEMPERATURE,
        "max_completion_tokens": int(max_completion_tokens),
    }


def _split_long_paragraph_at_sentence_boundary(paragraph: str, max_chars: int = PARAGRAPH_MAX_CHARS) -> str:
    text = paragraph.strip()
    if not text or len(text) <= max_chars or "\n" in text:
        return paragraph

    sentence_endings = [m.end() for m in re.finditer(r"[.!?。！？](?:\s+|$)", text)]
    if not sentence_endings:
        return paragraph

    target = len(text) // 2
    candidates = [idx for idx in sentence_endings if 80 < idx < len(text) - 80] or sentence_endings
    split_idx = min(candidates, key=lambda idx: abs(idx - target))

    first = text[:split_idx].strip()
    second = text[split_idx:].strip()
    if not first or not second:
        return paragraph
    return f"{first}\n\n{second}"


def _normalize_long_paragraphs(text: str, max_chars: int = PARAGRAPH_MAX_CHARS) -> str:
    if not isinstance(text, str) or not text.strip():
        return text
    parts = re.split(r"(\n\s*\n)", text)
    normalized_parts: list[str] = []
    for part in parts:
        if re.fullmatch(r"\n\s*\n", part or ""):
            normalized_parts.append(part)
            continue
        normalized_parts.append(_split_long_paragraph_at_sentence_boundary(part, max_chars=max_chars))
    return "".join(normalized_parts)


def _core_label(profile: dict[str, Any]) -> tuple[str, str]:
    core = profile.get("core_component") or {}
    sipsung = core.get("sipsung") or {}
    label = f"{core.get('symbol', '')} {sipsung.get('name', '미상')} ({core.get('element', '미상')})".strip()
    status = core.get("status") or {}
    verdict = VERDICT_LABELS_KO.get(status.get("verdict"), "미상")
    rationale = status.get("rationale")
    return label, f"{verdict} - {rationale}" if rationale else verdict


def build_name_reading_prompt(profile: dict[str, Any]) -> str:
    core_label, core_verdict = _core_label(profile)
    adjacency_lines = [
        f"- {item['index']}번 {item['symbol']}: {VERDICT_LABELS_KO.get(item['verdict'], item['verdict'])} ({item['rationale']})"
        for item in profile.get("adjacency", [])
    ]
    patterns = profile.get("patterns", {})
    pattern_lines = [f"- {label}: {'있음' if patterns.get(key) else '없음'}" for key, label in PATTERN_LABELS_KO.items()]
    element_lines = [f"- {element}: {count}" for element, count in profile.get("element_balance", {}).items()]

    return USER_PROMPT_TEMPLATE.format(
        name=profile.get("name", ""),
        gender_label="여성" if profile.get("gender") == "female" else "남성",
        saju_year=profile.get("saju_year", ""),
        ganji=profile.get("ganji", ""),
        core_label=core_label,
        core_verdict=core_verdict,
        sequence_text=profile.get("sequence_text", ""),
        summary_text=profile.get("summary_text", "") or "없음",
        adjacency_lines="\n".join(adjacency_lines) or "- 없음",
        pattern_lines="\n".join(pattern_lines),
        element_lines="\n".join(element_lines),
    )


async def generate_name_reading(
    *,
    async_client: Any,
    profile: dict[str, Any],
    request_id: str,
    endpoint: str,
    max_tokens: int,
    model: str = OPENAI_MODEL,
) -> dict[str, Any]:
    """Ask the chat model for a four-chapter reading of a name profile.

    Returns {reading, model_used, findings}. Raises RuntimeError when no
    candidate model produces a non-empty reading.
    """
    if async_client is None:
        raise RuntimeError("OpenAI client not initialized")

    user_message = build_name_reading_prompt(profile)
    profile_hash = str(profile.get("profile_hash", ""))
    selected_model = str(model or OPENAI_MODEL).strip() or OPENAI_MODEL
    candidate_models = _candidate_openai_models(selected_model)
    last_error: Optional[Exception] = None

    for candidate_model in candidate_models:
        payload = _build_openai_payload(
            model=candidate_model,
            system_message=SYSTEM_PROMPT,
            user_message=user_message,
            max_completion_tokens=max_tokens,
        )
        try:
            logger.info(
                "LLM API call started request_id=%s selected_model=%s profile_hash=%s",
                request_id,
                candidate_model,
                profile_hash,
            )
            response = await async_client.chat.completions.create(**payload)
            text = response.choices[0].message.content if response and response.choices else ""
            response_text = text if isinstance(text, str) else ""
            if not response_text.strip():
                raise RuntimeError(
                    "LLM returned empty reading. Model: "
                    f"{candidate_model}, finish_reason: "
                    f"{getattr(response.choices[0], 'finish_reason', 'N/A') if response and response.choices else 'N/A'}"
                )
            response_text = _normalize_long_paragraphs(response_text)
            findings = scan_forbidden_patterns(response_text)
            if findings:
                logger.warning(
                    "LLM reading contains forbidden patterns request_id=%s count=%s patterns=%s",
                    request_id,
                    len(findings),
                    sorted({f["pattern"] for f in findings}),
                )
            model_used = f"openai/{candidate_model}"
            _emit_llm_audit_event(
                request_id=request_id,
                profile_hash=profile_hash,
                model_used=model_used,
                endpoint=endpoint,
            )
            logger.info(
                "LLM reading generated request_id=%s model_used=%s response_length=%s",
                request_id,
                model_used,
                len(response_text),
            )
            return {"reading": response_text, "model_used": model_used, "findings": findings}
        except Exception as e:
            last_error = e
            logger.warning(
                "LLM model attempt failed request_id=%s selected_model=%s profile_hash=%s error_type=%s error=%s",
                request_id,
                candidate_model,
                profile_hash,
                type(e).__name__,
                str(e),
            )

    raise RuntimeError(
        "LLM reading failed for all candidate models "
        f"{candidate_models}. last_error={type(last_error).__name__ if last_error else 'N/A'}: {last_error}"
    ) from last_error
