# wardrobe_project/core/response_parsing.py
"""
Lenient parsing of free-form model output.

Models are asked for bare values or JSON but routinely wrap answers in
markdown fences, prose or quotes. Every helper here degrades to a caller
supplied default instead of raising.
"""
import json
import re
from typing import Any, Dict, List, Optional, Sequence

_FENCE_RE = re.compile(r"```(?:json|JSON)?")
_FILLER_PREFIX_RE = re.compile(
    r"^(?:this is an?|this is|the item is an?|the item is|it is an?|it is|it's an?|it's)\s+",
    re.IGNORECASE,
)
MAX_COLORS = 4
MAX_COLOR_LENGTH = 20


def strip_code_fences(text: str) -> str:
    if not text:
        return ""
    return _FENCE_RE.sub("", text).strip()


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError):
        return None


def _normalize_token(value: str) -> str:
    return re.sub(r"[\s\-]+", "_", value.strip().strip("\"'.,:;*`").upper())


def _json_candidate(data: Any, attribute: str) -> Optional[str]:
    if isinstance(data, str):
        return data
    if isinstance(data, list) and data and isinstance(data[0], str):
        return data[0]
    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(key, str) and key.lower() in (attribute.lower(), "value") and isinstance(value, str):
                return value
    return None


def parse_choice(
    text: str,
    allowed: Sequence[str],
    default: str,
    attribute: str = "value",
    synonyms: Optional[Dict[str, str]] = None,
) -> str:
    """
    Maps a model answer onto one of the allowed values.

    Tries strict JSON first, then the first word, then a substring match of any
    allowed value, then the synonym table. Falls back to the default.
    """
    cleaned = strip_code_fences(text)
    if not cleaned:
        return default
    allowed_set = set(allowed)

    candidate = _json_candidate(_load_json(cleaned), attribute)
    if candidate is not None and _normalize_token(candidate) in allowed_set:
        return _normalize_token(candidate)

    whole = _normalize_token(cleaned)
    if whole in allowed_set:
        return whole

    words = re.split(r"[\s,;:]+", cleaned.strip())
    if words and _normalize_token(words[0]) in allowed_set:
        return _normalize_token(words[0])

    upper = cleaned.upper()
    underscored = re.sub(r"[\s\-]+", "_", upper)
    for value in sorted(allowed, key=len, reverse=True):
        if value in underscored or value.replace("_", " ") in upper:
            return value

    for keyword, target in (synonyms or {}).items():
        if keyword in upper:
            return target

    return default


def parse_colors(text: str, default: Sequence[str]) -> List[str]:
    cleaned = strip_code_fences(text)
    if not cleaned:
        return list(default)

    colors: Optional[List[Any]] = None
    match = re.search(r"\[.*?\]", cleaned, re.DOTALL)
    if match:
        data = _load_json(match.group(0))
        if isinstance(data, list):
            colors = data
    if colors is None:
        data = _load_json(cleaned)
        if isinstance(data, list):
            colors = data
        elif isinstance(data, dict) and isinstance(data.get("colors"), list):
            colors = data["colors"]
        elif isinstance(data, str):
            colors = [data]
    if colors is None:
        stripped = re.sub(r"[\[\]\"']", "", cleaned)
        colors = [
            re.sub(r"^(?:[-*•]|\d+[.)])\s*", "", token).strip()
            for token in re.split(r"[\r\n,]+", stripped)
        ]
        colors = [c for c in colors if 0 < len(c) < MAX_COLOR_LENGTH]

    result: List[str] = []
    for color in colors:
        if not isinstance(color, str):
            continue
        color = color.strip()
        if color and color not in result:
            result.append(color)
        if len(result) == MAX_COLORS:
            break
    return result or list(default)


def parse_name(text: str, default: str) -> str:
    cleaned = strip_code_fences(text)
    data = _load_json(cleaned) if cleaned else None
    if isinstance(data, dict) and isinstance(data.get("name"), str):
        cleaned = data["name"]
    elif isinstance(data, str):
        cleaned = data

    line = next((ln.strip() for ln in cleaned.splitlines() if ln.strip()), "")
    line = line.strip("\"'*` ")
    line = _FILLER_PREFIX_RE.sub("", line).strip().rstrip(".").strip("\"' ")
    if not line:
        return default
    return line[0].upper() + line[1:]


def parse_json_array(text: str) -> Optional[List[Any]]:
    """Returns the first JSON array in the text (or the whole body if it is one), else None."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        return None
    start, end = cleaned.find("["), cleaned.rfind("]")
    if start != -1 and end > start:
        data = _load_json(cleaned[start:end + 1])
        if isinstance(data, list):
            return data
    data = _load_json(cleaned)
    return data if isinstance(data, list) else None
