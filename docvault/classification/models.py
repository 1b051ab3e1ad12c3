from dataclasses import dataclass, field
from typing import Any

CATEGORIES: tuple[str, ...] = (
    "Administrativo",
    "Académico",
    "Legal",
    "Financiero",
    "Recursos Humanos",
    "Infraestructura",
)
DEFAULT_CATEGORY = CATEGORIES[0]

LANGUAGES = frozenset({"es", "en"})
PRIORITIES = frozenset({"low", "medium", "high", "urgent"})
CLASSIFICATION_LEVELS = frozenset({"public", "internal", "confidential", "secret"})

MAX_TAGS = 10
MAX_SUMMARY_CHARS = 200


@dataclass(frozen=True)
class ClassificationResult:
    """Validated AI classification attached to a document at creation."""

    category: str = DEFAULT_CATEGORY
    confidence: float = 0.0
    tags: tuple[str, ...] = field(default_factory=tuple)
    summary: str = ""
    language: str = "es"
    priority: str = "medium"
    classification_level: str = "internal"
    is_fallback: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClassificationResult":
        """Rebuild a result previously stored with to_dict()."""
        return cls(
            category=data.get("category", DEFAULT_CATEGORY),
            confidence=float(data.get("confidence", 0.0)),
            tags=tuple(data.get("tags", ())),
            summary=data.get("summary", ""),
            language=data.get("language", "es"),
            priority=data.get("priority", "medium"),
            classification_level=data.get("classification_level", "internal"),
            is_fallback=bool(data.get("is_fallback", False)),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "category": self.category,
            "confidence": self.confidence,
            "tags": list(self.tags),
            "summary": self.summary,
            "language": self.language,
            "priority": self.priority,
            "classification_level": self.classification_level,
            "is_fallback": self.is_fallback,
        }
