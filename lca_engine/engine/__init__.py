from .aggregator import ImpactAggregator
from .completeness import CompletenessChecker
from .contribution import ContributionAnalyzer
from .sensitivity import PERTURBATION, SensitivityAnalyzer
from .speciation import GHGSpeciator

__all__ = [
    "ImpactAggregator",
    "CompletenessChecker",
    "ContributionAnalyzer",
    "PERTURBATION",
    "SensitivityAnalyzer",
    "GHGSpeciator",
]
