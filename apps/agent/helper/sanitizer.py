"""Strict decoding of language model replies.

Replies are trimmed and stripped of Markdown code fences, then handed to
``json.loads`` unchanged. There is no repair step: anything ``json.loads``
rejects is reported as a failed decode so callers take their fallback path.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)


@dataclass(frozen=True)
class DecodeResult:
    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "DecodeResult":
        return cls(ok=False, value=None, error=error)


def strip_code_fences(text: Optional[str]) -> str:
    """Remove every fence marker and surrounding whitespace."""
    if not text:
        return ""
    return _FENCE_RE.sub("", text.strip()).strip()


def decode_json(text: Optional[str]) -> DecodeResult:
    cleaned = strip_code_fences(text)
    if not cleaned:
        return DecodeResult.failure("empty response")
    try:
        return DecodeResult(ok=True, value=json.loads(cleaned))
    except (TypeError, ValueError) as exc:
        return DecodeResult.failure(f"invalid JSON: {exc}")


def decode_json_object(text: Optional[str]) -> DecodeResult:
    result = decode_json(text)
    if result.ok and not isinstance(result.value, dict):
        return DecodeResult.failure(f"expected JSON object, got {type(result.value).__name__}")
    return result


def decode_json_array(text: Optional[str]) -> DecodeResult:
    result = decode_json(text)
    if result.ok and not isinstance(result.value, list):
        return DecodeResult.failure(f"expected JSON array, got {type(result.value).__name__}")
    return result
