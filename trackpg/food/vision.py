# -*- coding: utf-8 -*-
"""Food — nutrition analysis of a meal photo via the Gemini generateContent API."""

from __future__ import annotations

import ast
import base64
import json
import logging
import re
import time
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import ExternalAnalysisError
from .models import AnalysisResult

logger = logging.getLogger(__name__)

_RETRY_STATUS = {429, 500, 502, 503, 504}
_RAW_TEXT_LIMIT = 800


@dataclass(frozen=True)
class VisionSettings:
    api_key: Optional[str]
    base_url: str
    model: str
    timeout: float
    max_retries: int
    retry_backoff: float


def resolve_vision_settings(**overrides: Any) -> VisionSettings:
    cfg = VisionSettings(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url.rstrip("/"),
        model=settings.gemini_model,
        timeout=settings.gemini_timeout,
        max_retries=max(0, settings.gemini_max_retries),
        retry_backoff=max(0.0, settings.gemini_retry_backoff),
    )
    return replace(cfg, **overrides) if overrides else cfg


PROMPT = (
    "You are a registered dietitian and health coach. "
    "Analyze the food in this image and estimate, for the portion shown: "
    "calories, carbs, protein and fat, plus the main vitamins and minerals. "
    "Then give one short piece of coach-style feedback about this meal.\n"
    "Return STRICT JSON only, no markdown, matching:\n"
    "{\n"
    '  "nutrition": {\n'
    '    "calories": "estimated kcal",\n'
    '    "carbs": "estimated grams",\n'
    '    "protein": "estimated grams",\n'
    '    "fat": "estimated grams",\n'
    '    "vitamins": ["Vitamin A"],\n'
    '    "minerals": ["Iron"]\n'
    "  },\n"
    '  "health_coach_feedback": "string"\n'
    "}\n"
    "If there is no food in the image, set calories to \"unknown\"."
)


# ---- model output parsing ----


def _remove_trailing_commas(text: str) -> str:
    """Drop commas directly before a closing brace/bracket, outside string literals."""
    out: list[str] = []
    in_str = False
    escaped = False
    for i, ch in enumerate(text):
        if in_str:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue
        if ch == "\"":
            in_str = True
        elif ch == ",":
            rest = text[i + 1 :].lstrip()
            if rest[:1] in ("}", "]"):
                continue
        out.append(ch)
    return "".join(out)


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    return re.sub(r"\s*```$", "", cleaned)


def _iter_json_object_candidates(text: str) -> List[str]:
    """Balanced top-level {...} spans in arbitrary text, respecting string literals."""
    cleaned = _strip_fences(text)
    candidates: List[str] = []
    in_str = False
    escaped = False
    depth = 0
    start: int | None = None
    for i, ch in enumerate(cleaned):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue
        if ch == "\"":
            in_str = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start is not None:
                candidates.append(cleaned[start : i + 1])
                start = None
    return candidates


def _sanitize_json_like(text: str) -> str:
    cleaned = text.replace("“", "\"").replace("”", "\"")
    cleaned = cleaned.replace("‘", "'").replace("’", "'")
    cleaned = _remove_trailing_commas(cleaned)
    cleaned = re.sub(r"\bNaN\b", "null", cleaned)
    return re.sub(r"-?\bInfinity\b", "null", cleaned)


def parse_model_output(content: str) -> Dict[str, Any]:
    """Pull the first JSON object out of model text; raises ValueError when there is none."""
    last_error: Exception | None = None
    for candidate in _iter_json_object_candidates(content):
        sanitized = _sanitize_json_like(candidate)
        for attempt in (candidate, sanitized):
            try:
                parsed = json.loads(attempt)
            except json.JSONDecodeError as exc:
                last_error = exc
                continue
            if isinstance(parsed, dict):
                return parsed
        # Python-literal style dicts (single quotes, None/True/False).
        py = re.sub(r"\bnull\b", "None", sanitized)
        py = re.sub(r"\btrue\b", "True", py)
        py = re.sub(r"\bfalse\b", "False", py)
        try:
            parsed = ast.literal_eval(py)
        except (ValueError, SyntaxError) as exc:
            last_error = exc
            continue
        if isinstance(parsed, dict):
            return parsed
    if last_error is None:
        raise ValueError("Model output does not contain a JSON object")
    raise ValueError(f"Failed to parse model JSON: {last_error}") from last_error


_RANGE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:-|–|to)\s*(\d+(?:\.\d+)?)")
_NUM_RE = re.compile(r"\d+(?:\.\d+)?")


def coerce_amount(value: Any) -> Optional[float]:
    """'350 kcal' -> 350.0, '10-20g' -> 15.0, 'unknown' -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value >= 0 else None
    if not isinstance(value, str):
        return None
    s = value.replace(",", "").strip()
    m = _RANGE_RE.search(s)
    if m:
        return (float(m.group(1)) + float(m.group(2))) / 2
    m = _NUM_RE.search(s)
    return float(m.group(0)) if m else None


def _normalize_analysis(parsed: Dict[str, Any]) -> Dict[str, Any]:
    nutrition = parsed.get("nutrition")
    if not isinstance(nutrition, dict):
        nutrition = parsed.get("nutritional_content") or parsed.get("nutrients")
    if not isinstance(nutrition, dict):
        raise ValueError("Response has no 'nutrition' object")

    feedback = parsed.get("health_coach_feedback")
    if feedback is None:
        feedback = parsed.get("feedback") or parsed.get("suggestion") or ""
    if isinstance(feedback, list):
        feedback = " ".join(str(x).strip() for x in feedback if x is not None)

    known: Dict[str, Any] = {}
    for key in ("calories", "carbs", "protein", "fat"):
        value = nutrition.get(key)
        known[key] = value.strip() if isinstance(value, str) else value
    if known.get("carbs") is None and "carbohydrates" in nutrition:
        known["carbs"] = nutrition.get("carbohydrates")
    known["vitamins"] = nutrition.get("vitamins")
    known["minerals"] = nutrition.get("minerals")
    return {"nutrition": known, "health_coach_feedback": str(feedback).strip()}


# ---- transport ----


def _extract_text(data: object) -> str:
    if not isinstance(data, dict):
        return ""
    out: List[str] = []
    for candidate in data.get("candidates") or []:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        for part in parts or []:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                out.append(part["text"])
        if out:
            break
    return "".join(out)


def _extract_error(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200].strip() or f"HTTP {resp.status_code}"
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict):
        status = err.get("status") or err.get("code") or resp.status_code
        message = err.get("message") or "unknown error"
        return f"{status}: {message}"
    return f"HTTP {resp.status_code}"


def _generate_content(
    payload: Dict[str, Any],
    cfg: VisionSettings,
    *,
    model: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Dict[str, Any]:
    if not cfg.api_key:
        raise ExternalAnalysisError("Vision model is not configured", details="GEMINI_API_KEY is not set")

    url = f"{cfg.base_url}/models/{model or cfg.model}:generateContent"
    headers = {"Content-Type": "application/json", "x-goog-api-key": cfg.api_key}
    last_error = "no attempt made"
    attempts = cfg.max_retries + 1

    with httpx.Client(timeout=cfg.timeout, follow_redirects=True, transport=transport) as client:
        for attempt in range(1, attempts + 1):
            try:
                resp = client.post(url, headers=headers, json=payload)
            except httpx.TransportError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
                logger.warning("vision call attempt %d/%d failed: %s", attempt, attempts, last_error)
            else:
                if resp.status_code < 400:
                    try:
                        return resp.json()
                    except ValueError as exc:
                        snippet = resp.text.replace("\n", " ").strip()[:200]
                        raise ExternalAnalysisError(
                            "Vision model returned a non-JSON body", details=snippet
                        ) from exc
                last_error = _extract_error(resp)
                if resp.status_code not in _RETRY_STATUS:
                    raise ExternalAnalysisError("Vision model call failed", details=last_error)
                logger.warning("vision call attempt %d/%d got %s", attempt, attempts, last_error)
            if attempt < attempts and cfg.retry_backoff > 0:
                time.sleep(cfg.retry_backoff * attempt)

    raise ExternalAnalysisError("Vision model call failed", details=last_error)


def analyze_food(
    *,
    image_bytes: bytes,
    image_mime: str,
    cfg: VisionSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> AnalysisResult:
    """Send a meal photo to the vision model and return the parsed nutrition estimate.

    Raises ExternalAnalysisError when the call fails or the reply does not fit
    the nutrition schema; nothing is filled in with guessed values.
    """
    if not image_bytes:
        raise ExternalAnalysisError("Empty image")
    cfg = cfg or resolve_vision_settings()
    payload = {
        "contents": [
            {
                "parts": [
                    {"text": PROMPT},
                    {
                        "inline_data": {
                            "mime_type": image_mime or "image/jpeg",
                            "data": base64.b64encode(image_bytes).decode("ascii"),
                        }
                    },
                ]
            }
        ],
        "generationConfig": {"responseMimeType": "application/json"},
    }

    data = _generate_content(payload, cfg, transport=transport)
    text = _extract_text(data)
    logger.debug("vision raw response: %s", text[:_RAW_TEXT_LIMIT])
    if not text.strip():
        feedback = data.get("promptFeedback") if isinstance(data, dict) else None
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        raise ExternalAnalysisError(
            "Vision model returned no text",
            details=f"blocked: {reason}" if reason else "empty candidates",
        )

    try:
        known = _normalize_analysis(parse_model_output(text))
        result = AnalysisResult.model_validate(known)
    except (ValueError, PydanticValidationError) as exc:
        logger.warning("vision output parse failed: %s", exc)
        raise ExternalAnalysisError(
            "Failed to parse AI response", details=str(exc), raw_text=text[:_RAW_TEXT_LIMIT]
        ) from exc
    return result


def check_model(
    model: str | None = None,
    *,
    cfg: VisionSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Send a trivial text prompt and return the first bit of the reply."""
    cfg = cfg or resolve_vision_settings()
    payload = {"contents": [{"parts": [{"text": "Hello, are you there?"}]}]}
    data = _generate_content(payload, replace(cfg, max_retries=0), model=model, transport=transport)
    text = _extract_text(data).strip()
    if not text:
        raise ExternalAnalysisError("Model returned no text", details=model or cfg.model)
    return text[:80]
