from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from lca_engine.models.enums import NarrativeSection

if TYPE_CHECKING:
    from .context import InterpretationContext

# Global registry -- maps rule_id -> NarrativeRule
_REGISTRY: dict[str, NarrativeRule] = {}


@dataclass(frozen=True)
class NarrativeRule:
    """A deterministic narrative template in the rule library."""

    id: str
    section: NarrativeSection
    description: str
    rule_fn: Callable[[InterpretationContext], list[str]]
    order: int = 100


def register_rule(
    rule_id: str,
    section: NarrativeSection,
    description: str,
    order: int = 100,
) -> Callable:
    """Decorator to register a function as a narrative rule."""

    def decorator(
        fn: Callable[[InterpretationContext], list[str]]
    ) -> Callable[[InterpretationContext], list[str]]:
        _REGISTRY[rule_id] = NarrativeRule(
            id=rule_id,
            section=section,
            description=description,
            rule_fn=fn,
            order=order,
        )
        return fn

    return decorator


def get_rule(rule_id: str) -> Optional[NarrativeRule]:
    """Look up a rule by ID."""
    return _REGISTRY.get(rule_id)


def get_rules(section: Optional[NarrativeSection] = None) -> list[NarrativeRule]:
    """Registered rules, optionally for one section, in evaluation order."""
    rules = [r for r in _REGISTRY.values() if section is None or r.section == section]
    return sorted(rules, key=lambda r: (r.order, r.id))
