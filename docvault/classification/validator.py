"""Coerces a raw AI response into a ClassificationResult.

Unlike a strict schema check, every field here has a safe default: a bad
value is corrected, never rejected.
"""

import unicodedata
from typing import Any

from docvault.classification.models import (
    CATEGORIES,
    CLASSIFICATION_LEVELS,
    DEFAULT_CATEGORY,
    LANGUAGES,
    MAX_SUMMARY_CHARS,
    MAX_TAGS,
    PRIORITIES,
    ClassificationResult,
)

FALLBACK_CONFIDENCE = 0.1
FALLBACK_SUMMARY = "Error en clasificación automática"
FALLBACK_TAGS: tuple[str, ...] = ("sin-clasificar",)

# Checked in order; first key found inside the folded category wins.
_CATEGORY_ALIASES: tuple[tuple[str, str], ...] = (
    ("admin", "Administrativo"),
    ("administracion", "Administrativo"),
    ("academico", "Académico"),
    ("educativo", "Académico"),
    ("juridico", "Legal"),
    ("normativo", "Legal"),
    ("legal", "Legal"),
    ("presupuesto", "Financiero"),
    ("economia", "Financiero"),
    ("financ", "Financiero"),
    ("personal", "Recursos Humanos"),
    ("rrhh", "Recursos Humanos"),
    ("recursos humanos", "Recursos Humanos"),
    ("construccion", "Infraestructura"),
    ("mantenimiento", "Infraestructura"),
    ("infraestructura", "Infraestructura"),
)

_PRIORITY_ALIASES = {
    "bajo": "low",
    "baja": "low",
    "normal": "medium",
    "media": "medium",
    "alto": "high",
    "alta": "high",
    "urgente": "urgent",
}


def fallback_classification() -> ClassificationResult:
    """Result used whenever the provider call or parsing fails."""
    return ClassificationResult(
        category=DEFAULT_CATEGORY,
        confidence=FALLBACK_CONFIDENCE,
        tags=FALLBACK_TAGS,
        summary=FALLBACK_SUMMARY,
        language="es",
        priority="medium",
        classification_level="internal",
        is_fallback=True,
    )


def validate_and_build(data: dict[str, Any]) -> ClassificationResult:
    """Build a ClassificationResult, replacing invalid fields with defaults."""
    raw_tags = data.get("tags")
    if raw_tags is None:
        raw_tags = data.get("keywords")
    return ClassificationResult(
        category=resolve_category(data.get("category")),
        confidence=_clamp_confidence(data.get("confidence")),
        tags=_normalize_tags(raw_tags),
        summary=_truncate_summary(data.get("summary")),
        language=_pick(data.get("language"), LANGUAGES, "es"),
        priority=_resolve_priority(data.get("priority")),
        classification_level=_pick(
            data.get("classification_level", data.get("classificationLevel")),
            CLASSIFICATION_LEVELS,
            "internal",
        ),
    )


def resolve_category(raw: Any) -> str:
    if not isinstance(raw, str):
        return DEFAULT_CATEGORY
    if raw in CATEGORIES:
        return raw
    folded = _fold(raw)
    for canonical in CATEGORIES:
        if _fold(canonical) == folded:
            return canonical
    for alias, canonical in _CATEGORY_ALIASES:
        if alias in folded:
            return canonical
    return DEFAULT_CATEGORY


def _fold(value: str) -> str:
    """Lower-case and strip accents so 'Jurídico' matches 'juridico'."""
    decomposed = unicodedata.normalize("NFKD", value.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _clamp_confidence(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0.0
    if raw != raw:  # NaN
        return 0.0
    if raw <= 0:
        return 0.0
    if raw >= 1:
        return 1.0
    return float(raw)


def _normalize_tags(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    seen: dict[str, None] = {}
    for item in raw:
        if not isinstance(item, str):
            continue
        tag = item.strip().lower()
        if tag:
            seen.setdefault(tag, None)
    return tuple(seen)[:MAX_TAGS]


def _truncate_summary(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip()[:MAX_SUMMARY_CHARS]


def _resolve_priority(raw: Any) -> str:
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        lowered = _PRIORITY_ALIASES.get(lowered, lowered)
        if lowered in PRIORITIES:
            return lowered
    return "medium"


def _pick(raw: Any, allowed: frozenset[str], default: str) -> str:
    if isinstance(raw, str) and raw.strip().lower() in allowed:
        return raw.strip().lower()
    return default
