# domain/construction_knowledge.py
"""
Conocimiento de oficio BTP: orden canónico de las fases de un chantier de
rehabilitación / obra y catálogo de tipos de intervención.

Tabla versionada y estructurada: la consumen los prompts y la podrá consumir
cualquier validación futura del planning propuesto.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

KNOWLEDGE_VERSION = "2025-01"


@dataclass(frozen=True)
class TradeStep:
    order: int
    name: str
    detail: str


TRADE_SEQUENCE: Tuple[TradeStep, ...] = (
    TradeStep(1, "Préparation & repérages", "diagnostics, protections, installations de chantier"),
    TradeStep(2, "Démolition / dépose", "dépose éléments existants, évacuation gravats"),
    TradeStep(3, "Gros œuvre / structure", "ouvertures, renforcements, maçonnerie"),
    TradeStep(4, "Réseaux secs", "électricité, courants faibles, VMC"),
    TradeStep(5, "Réseaux humides", "plomberie, évacuations, chauffage"),
    TradeStep(6, "Isolation / cloisons", "placo, doublages, faux plafonds"),
    TradeStep(7, "Revêtements sols", "chape, carrelage, parquet"),
    TradeStep(8, "Revêtements muraux", "enduits, faïence, peinture"),
    TradeStep(9, "Menuiseries / aménagements", "portes, placards, cuisine"),
    TradeStep(10, "Finitions", "accessoires, raccords, nettoyage"),
    TradeStep(11, "Réception et levée des réserves", ""),
)

# Agrupadas por líneas tal y como se muestran en el prompt
TRADE_CATEGORY_GROUPS: Tuple[Tuple[str, ...], ...] = (
    ("Démolition", "Gros œuvre", "Électricité", "Plomberie", "Chauffage/Climatisation"),
    ("Isolation", "Plâtrerie/Cloisons", "Menuiserie intérieure", "Menuiserie extérieure"),
    ("Carrelage/Sols", "Peinture", "Cuisine", "Salle de bain", "Façade", "Toiture"),
    ("VRD (Voiries et Réseaux Divers)", "Espaces verts", "Nettoyage"),
)

TRADE_CATEGORIES: Tuple[str, ...] = tuple(c for group in TRADE_CATEGORY_GROUPS for c in group)

# Resumen en una línea de la secuencia (postura del conducteur de travaux)
SEQUENCE_HEADLINE = "démolition → gros œuvre → réseaux → second œuvre → finitions → réception"


def render_trade_sequence() -> str:
    lines = []
    for step in TRADE_SEQUENCE:
        suffix = f" ({step.detail})" if step.detail else ""
        lines.append(f"{step.order}. {step.name}{suffix}")
    return "\n".join(lines)


def render_trade_categories() -> str:
    return "\n".join(f"- {', '.join(group)}" for group in TRADE_CATEGORY_GROUPS)
