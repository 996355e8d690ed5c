# application/planning/intent.py
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Tuple, Union

PLANNING_KEYWORDS: Tuple[str, ...] = (
    "planning",
    "planing",
    "planifier",
    "planification",
    "programme",
    "programmer",
    "calendrier",
    "semaine",
    "planning de la semaine",
    "prochaines étapes",
    "prochaine étape",
    "suite du chantier",
    "organiser",
    "ordonnancer",
    "séquencer",
    "proposer un plan",
    "propose un plan",
    "propose-moi",
    "propose moi",
    "quelles tâches",
    "que faire cette semaine",
    "que faire ensuite",
    "prioriser",
    "next steps",
)


def normalize_text(text: str) -> str:
    """Minúsculas y sin diacríticos (NFD sin marcas combinantes)."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


@dataclass(frozen=True)
class PlanningIntent:
    matched_keyword: str


@dataclass(frozen=True)
class GeneralIntent:
    pass


Intent = Union[PlanningIntent, GeneralIntent]


class IntentClassifier(Protocol):
    def classify(self, message: str) -> Intent: ...


class KeywordIntentClassifier:
    """Clasificador por subcadenas; insensible a mayúsculas y acentos."""

    def __init__(self, keywords: Iterable[str] = PLANNING_KEYWORDS) -> None:
        self.keywords: Tuple[Tuple[str, str], ...] = tuple((kw, normalize_text(kw)) for kw in keywords)

    def classify(self, message: str) -> Intent:
        normalized = normalize_text(message)
        for keyword, normalized_kw in self.keywords:
            if normalized_kw and normalized_kw in normalized:
                return PlanningIntent(matched_keyword=keyword)
        return GeneralIntent()


_default_classifier = KeywordIntentClassifier()


def classify_intent(message: str, classifier: Optional[IntentClassifier] = None) -> Intent:
    return (classifier or _default_classifier).classify(message)


def detect_planning_intent(message: str) -> bool:
    return isinstance(classify_intent(message), PlanningIntent)
