from .context import InterpretationContext
from .narrative import generate_narrative, uncertainty_level, uncertainty_statement
from .registry import NarrativeRule, get_rule, get_rules, register_rule

__all__ = [
    "InterpretationContext",
    "generate_narrative",
    "uncertainty_level",
    "uncertainty_statement",
    "NarrativeRule",
    "get_rule",
    "get_rules",
    "register_rule",
]
