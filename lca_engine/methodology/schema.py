"""Pydantic models for methodology configuration validation."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from lca_engine.models.enums import (
    ImpactCategory,
    LifecycleStage,
    MaterialCategory,
    TransportMode,
)


class ContributionThresholds(BaseModel):
    """Percentage thresholds used to classify contributors."""

    dominant_pct: float = Field(default=40.0, gt=0, le=100)
    significant_pct: float = Field(default=10.0, gt=0, le=100)

    @model_validator(mode="after")
    def significant_below_dominant(self) -> ContributionThresholds:
        if self.significant_pct >= self.dominant_pct:
            raise ValueError(
                f"significant_pct ({self.significant_pct}) must be below "
                f"dominant_pct ({self.dominant_pct})"
            )
        return self


class SensitivitySettings(BaseModel):
    """Tunables for the one-at-a-time sensitivity analysis."""

    top_n: int = Field(default=3, ge=1)
    highly_sensitive_threshold: float = Field(
        default=0.5,
        ge=0,
        description="Sensitivity ratio above which a parameter is flagged",
    )
    categories: list[ImpactCategory] = Field(
        default_factory=lambda: list(ImpactCategory)
    )


class CompletenessSettings(BaseModel):
    """Stage coverage expectations and mass-balance tolerance."""

    expected_stages: dict[LifecycleStage, int] = Field(
        default_factory=lambda: {stage: 1 for stage in LifecycleStage},
        description="Expected minimum number of resolved entries per stage",
    )
    mass_balance_tolerance_pct: float = Field(default=10.0, ge=0)
    low_confidence_threshold: float = Field(default=0.5, ge=0, le=1.0)

    @field_validator("expected_stages")
    @classmethod
    def minimums_not_negative(cls, v: dict[LifecycleStage, int]) -> dict[LifecycleStage, int]:
        for stage, minimum in v.items():
            if minimum < 0:
                raise ValueError(f"expected minimum for {stage.value} cannot be negative")
        return v


class ResolverSettings(BaseModel):
    """Waterfall resolution tunables."""

    min_match_score: float = Field(default=0.5, gt=0, le=1.0)
    default_confidence: float = Field(default=0.3, ge=0, le=1.0)


class SpeciationProfile(BaseModel):
    """Heuristic split of an aggregated CO2e value into gas components.

    Every share is a fraction of the total CO2e. CH4 and N2O shares are
    converted back to gas masses with their GWP.
    """

    fossil_share: float = Field(default=0.0, ge=0, le=1.0)
    biogenic_share: float = Field(default=0.0, ge=0, le=1.0)
    dluc_share: float = Field(default=0.0, ge=0, le=1.0)
    ch4_fossil_share: float = Field(default=0.0, ge=0, le=1.0)
    ch4_biogenic_share: float = Field(default=0.0, ge=0, le=1.0)
    n2o_share: float = Field(default=0.0, ge=0, le=1.0)

    @model_validator(mode="after")
    def shares_sum_to_one(self) -> SpeciationProfile:
        total = (
            self.fossil_share
            + self.biogenic_share
            + self.dluc_share
            + self.ch4_fossil_share
            + self.ch4_biogenic_share
            + self.n2o_share
        )
        if abs(total - 1.0) > 0.001:
            raise ValueError(f"Speciation shares must sum to 1.0, got {total:.4f}")
        return self


class SpeciationSettings(BaseModel):
    """Reconciliation tolerance and the pluggable category profile table."""

    tolerance_pct: float = Field(default=1.0, ge=0)
    profiles: dict[str, SpeciationProfile]

    @field_validator("profiles")
    @classmethod
    def default_profile_present(cls, v: dict[str, SpeciationProfile]) -> dict[str, SpeciationProfile]:
        if "default" not in v:
            raise ValueError("speciation profiles must include a 'default' profile")
        valid_keys = {c.value for c in MaterialCategory} | {"default"}
        unknown = set(v) - valid_keys
        if unknown:
            raise ValueError(f"Unknown speciation profile keys: {sorted(unknown)}")
        return v

    def profile_for(self, category: MaterialCategory) -> SpeciationProfile:
        return self.profiles.get(category.value, self.profiles["default"])


class MethodologyConfig(BaseModel):
    """Top-level methodology configuration."""

    id: str
    name: str
    version: str
    contribution: ContributionThresholds = Field(default_factory=ContributionThresholds)
    sensitivity: SensitivitySettings = Field(default_factory=SensitivitySettings)
    completeness: CompletenessSettings = Field(default_factory=CompletenessSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    speciation: SpeciationSettings
    transport_factors: dict[TransportMode, float] = Field(
        default_factory=dict,
        description="kg CO2e per tonne-km",
    )

    @field_validator("transport_factors")
    @classmethod
    def transport_factors_not_negative(cls, v: dict[TransportMode, float]) -> dict[TransportMode, float]:
        for mode, factor in v.items():
            if factor < 0:
                raise ValueError(f"transport factor for {mode.value} cannot be negative")
        return v
