"""Evaluate the registered narrative rules for one interpretation context."""

from __future__ import annotations

import logging

# Ensure all rules are registered on import
import lca_engine.interpretation.rules  # noqa: F401
from lca_engine.engine.sensitivity import PERTURBATION
from lca_engine.interpretation.context import InterpretationContext
from lca_engine.interpretation.registry import get_rules
from lca_engine.models.enums import NarrativeSection

logger = logging.getLogger(__name__)


def generate_narrative(ctx: InterpretationContext) -> dict[NarrativeSection, tuple[str, ...]]:
    """Run every rule, grouped by section, in registry order."""
    narrative: dict[NarrativeSection, tuple[str, ...]] = {}
    for section in NarrativeSection:
        sentences: list[str] = []
        for rule in get_rules(section):
            produced = rule.rule_fn(ctx)
            if produced:
                logger.debug(f"Rule '{rule.id}' produced {len(produced)} sentence(s)")
            sentences.extend(produced)
        narrative[section] = tuple(sentences)
    return narrative


def uncertainty_level(ctx: InterpretationContext) -> str:
    """'moderate' when coverage >= 80% and methodology is consistent, else 'high'."""
    if ctx.completeness.overall_score >= 80.0 and ctx.completeness.methodology_consistent:
        return "moderate"
    return "high"


def uncertainty_statement(ctx: InterpretationContext) -> str:
    pct = int(PERTURBATION * 100)
    flagged = ctx.highly_sensitive
    parts = [
        f"The overall uncertainty of this assessment is considered {uncertainty_level(ctx)}.",
        f"Data coverage is {ctx.completeness.overall_score:.0f}% across lifecycle stages.",
    ]
    if flagged:
        parts.append(
            f"Results are sensitive to {len(flagged)} parameter(s): a ±{pct}% variation "
            "in these parameters moves the category total by more than the "
            "configured sensitivity threshold."
        )
    else:
        parts.append(
            f"No highly sensitive parameters were identified within a ±{pct}% variation range."
        )
    if ctx.completeness.methodology_consistent:
        parts.append("Methodology is applied consistently across all materials.")
    else:
        parts.append(
            "Caution: methodological inconsistencies were found, which may affect comparability."
        )
    return " ".join(parts)
