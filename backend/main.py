#!/usr/bin/env python3
"""Hangul name analysis backend (FastAPI).

- Name decomposition and Sipsung mapping: deterministic engine
- Narrative reading: OpenAI
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Force override so blank terminal variables don't block the .env file
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path, override=True)
load_dotenv(dotenv_path=env_path.parent.parent / ".env", override=False)

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Literal, Optional
from uuid import uuid4

# Support both `uvicorn backend.main:app` (repo root) and
# `uvicorn main:app` (backend directory) execution contexts.
if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parent.parent))

from backend.hangul_engine import build_analysis
from backend.llm_service import OPENAI_MODEL, generate_name_reading
from backend.profile_engine import build_name_profile
from backend.prompts import PROMPT_VERSION
from backend.reading_cache import cache, reading_cache_key
from backend.relation_engine import SCOPE_ALL
from backend.saju_year import resolve_year_ganji

from openai import AsyncOpenAI
import httpx

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s - %(message)s",
)

logger = logging.getLogger("namelogy")

# ------------------------------------------------------------------------------
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
READING_MAX_TOKENS_DEFAULT = 4000
READING_MAX_TOKENS_HARD_LIMIT = 8000


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


READING_MAX_TOKENS = _env_int("READING_MAX_TOKENS", READING_MAX_TOKENS_DEFAULT)


def _utc_iso_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _resolve_request_id(request: Optional[Request], explicit_request_id: Optional[str] = None) -> str:
    explicit = explicit_request_id.strip() if isinstance(explicit_request_id, str) else ""
    if explicit:
        return explicit
    if request is not None:
        for header in ("x-request-id", "x-correlation-id"):
            value = (request.headers.get(header) or "").strip()
            if value:
                return value
    return str(uuid4())


def _resolve_llm_max_tokens(raw_value: Any, default_value: int) -> int:
    try:
        tokens = int(raw_value)
    except (TypeError, ValueError):
        tokens = int(default_value)
    if tokens <= 0:
        tokens = int(default_value)
    if tokens > READING_MAX_TOKENS_HARD_LIMIT:
        raise HTTPException(
            status_code=400,
            detail=f"llm_max_tokens must be <= {READING_MAX_TOKENS_HARD_LIMIT}",
        )
    return tokens


app = FastAPI(title="Hangul Namelogy Backend")

allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:8501").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------------------------
# OpenAI client initialization
# ------------------------------------------------------------------------------
async_client = None
OPENAI_HTTP_CLIENT: Optional[httpx.AsyncClient] = None


def _first_nonempty_env(*keys: str) -> Optional[str]:
    for key in keys:
        value = os.getenv(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _build_openai_client() -> tuple[Optional[AsyncOpenAI], Optional[httpx.AsyncClient]]:
    if not OPENAI_API_KEY:
        return None, None

    base_url = _first_nonempty_env("OPENAI_BASE_URL", "OPENAI_API_BASE")
    proxy_url = _first_nonempty_env("OPENAI_PROXY_URL", "HTTPS_PROXY", "https_proxy")
    timeout = httpx.Timeout(connect=10.0, read=90.0, write=90.0, pool=90.0)

    try:
        if proxy_url:
            http_client = httpx.AsyncClient(timeout=timeout, trust_env=True, proxy=proxy_url)
        else:
            http_client = httpx.AsyncClient(timeout=timeout, trust_env=True)
        client_kwargs: dict[str, Any] = {"api_key": OPENAI_API_KEY, "http_client": http_client}
        if base_url:
            client_kwargs["base_url"] = base_url
        client = AsyncOpenAI(**client_kwargs)
        logger.info(
            "OpenAI client initialized base_url=%s proxy_configured=%s",
            str(getattr(client, "base_url", "default")),
            "True" if bool(proxy_url) else "False",
        )
        return client, http_client
    except Exception as e:
        logger.warning("OpenAI client initialization failed: %s", e)
        return None, None


async_client, OPENAI_HTTP_CLIENT = _build_openai_client()
if async_client is None:
    logger.warning("OpenAI client is None. Readings are disabled. Check OPENAI_API_KEY in .env")

# ------------------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------------------
class NameAnalysisRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    surname: str = Field(..., min_length=1, description="Surname (first character is used)")
    given_name: str = Field(..., min_length=1, description="Given name, one syllable per character")
    gender: Literal["male", "female"] = Field("male", description="Gender tag")
    year: Optional[int] = Field(None, ge=1, le=9999, description="Saju year")
    birth_date: Optional[str] = Field(None, description="Birth date YYYY-MM-DD (입춘 cutoff applied)")
    scope: Literal["core", "all"] = Field(SCOPE_ALL, description="Adjacency evaluation scope")

    @field_validator("given_name")
    @classmethod
    def strip_inner_spaces(cls, value: str) -> str:
        compact = "".join(value.split())
        if not compact:
            raise ValueError("given_name must contain at least one character.")
        return compact

    @model_validator(mode="after")
    def require_year_source(self) -> "NameAnalysisRequest":
        if self.year is None and not self.birth_date:
            raise ValueError("Either year or birth_date is required.")
        return self


class NameReadingRequest(NameAnalysisRequest):
    use_cache: bool = Field(True, description="Serve a cached reading when available")
    llm_max_tokens: int = Field(READING_MAX_TOKENS, description="Completion token budget")


def _analyze_request(payload: NameAnalysisRequest) -> tuple[dict[str, Any], dict[str, Any]]:
    try:
        year_info = resolve_year_ganji(year=payload.year, birth_date=payload.birth_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid birth date: {e}") from e

    analysis = build_analysis(
        payload.surname,
        payload.given_name,
        saju_year=year_info["saju_year"],
        year_stem=year_info["stem"],
        year_branch=year_info["branch"],
        gender=payload.gender,
        birth_date=payload.birth_date,
    )
    profile = build_name_profile(analysis, scope=payload.scope)
    return analysis.to_dict(), profile

# ------------------------------------------------------------------------------
# API endpoints: Health Check
# ------------------------------------------------------------------------------
@app.get("/health")
def health():
    return {
        "status": "ok",
        "openai_configured": bool(async_client),
        "model": OPENAI_MODEL,
        "prompt_version": PROMPT_VERSION,
        "reading_cache_items": len(cache),
        "reading_cache_ttl_sec": cache.default_ttl,
        "timestamp_utc": _utc_iso_now(),
    }

# ------------------------------------------------------------------------------
# API endpoints: Presets
# ------------------------------------------------------------------------------
@app.get("/presets")
def get_presets():
    return {
        "presets": [
            {
                "id": "sample_1974",
                "label": "샘플 (강유정, 1974)",
                "surname": "강",
                "given_name": "유정",
                "gender": "female",
                "year": 1974,
            },
            {
                "id": "sample_birth_date",
                "label": "샘플 (김과위, 입춘 전 출생)",
                "surname": "김",
                "given_name": "과위",
                "gender": "male",
                "birth_date": "1990-02-03",
            },
        ]
    }

# ------------------------------------------------------------------------------
# API endpoints: Analysis
# ------------------------------------------------------------------------------
@app.post("/analyze")
def analyze_name_endpoint(payload: NameAnalysisRequest):
    """Deterministic decomposition, Sipsung mapping and adjacency profile."""
    analysis, profile = _analyze_request(payload)
    logger.info(
        "Name analyzed ganji=%s scope=%s profile_hash=%s",
        profile["ganji"],
        profile["scope"],
        profile["profile_hash"],
    )
    return {"analysis": analysis, "profile": profile}


@app.post("/ai_reading")
async def get_ai_reading(payload: NameReadingRequest, request: Request):
    """Generate a narrative reading for a name profile."""
    request_id = _resolve_request_id(request)
    max_tokens = _resolve_llm_max_tokens(payload.llm_max_tokens, READING_MAX_TOKENS)
    _analysis, profile = _analyze_request(payload)
    cache_key = reading_cache_key(profile["profile_hash"], PROMPT_VERSION, OPENAI_MODEL)

    if payload.use_cache:
        cached = cache.get(cache_key)
        if cached:
            logger.info("Reading cache hit request_id=%s profile_hash=%s", request_id, profile["profile_hash"])
            return {"cached": True, "request_id": request_id, "profile": profile, **cached}

    if async_client is None:
        raise HTTPException(status_code=503, detail="OpenAI client is not configured.")

    try:
        result = await generate_name_reading(
            async_client=async_client,
            profile=profile,
            request_id=request_id,
            endpoint="/ai_reading",
            max_tokens=max_tokens,
        )
    except RuntimeError as e:
        logger.error("Reading generation failed request_id=%s error=%s", request_id, e)
        raise HTTPException(status_code=502, detail="Reading generation failed. Please retry later.") from e

    cache.set(cache_key, result)
    return {"cached": False, "request_id": request_id, "profile": profile, **result}


# ------------------------------------------------------------------------------
# Local entrypoint
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
