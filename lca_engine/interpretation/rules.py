"""Narrative rule templates for ISO 14044 life cycle interpretation.

Each function is a pure template over an InterpretationContext and returns
zero or more sentences. Nothing here is free-form generation: identical
contexts always yield identical text.
"""

from lca_engine.interpretation.context import InterpretationContext
from lca_engine.interpretation.registry import register_rule
from lca_engine.models.enums import (
    BOUNDARY_STAGES,
    CATEGORY_LABELS,
    STAGE_LABELS,
    ImpactCategory,
    NarrativeSection,
    ProvenanceTier,
    SystemBoundary,
)

# Findings


@register_rule(
    rule_id="no_data",
    section=NarrativeSection.FINDING,
    description="Explicit statement when no material could be resolved.",
    order=0,
)
def no_data_finding(ctx: InterpretationContext) -> list[str]:
    if ctx.has_data:
        return []
    return [
        f"No data: none of the {len(ctx.failed_materials)} recorded material(s) of "
        f"{ctx.product_name} could be resolved to emission factors, so all impact "
        "results are zero."
    ]


@register_rule(
    rule_id="total_footprint",
    section=NarrativeSection.FINDING,
    description="Total carbon footprint per functional unit.",
    order=10,
)
def total_footprint_finding(ctx: InterpretationContext) -> list[str]:
    if not ctx.has_data:
        return []
    total = ctx.totals.get(ImpactCategory.CLIMATE, 0.0)
    return [
        f"The total carbon footprint of {ctx.product_name} is {total:.3f} kg CO2e "
        f"per {ctx.functional_unit}."
    ]


@register_rule(
    rule_id="climate_hotspot",
    section=NarrativeSection.FINDING,
    description="Largest climate contributor and the number of significant hotspots.",
    order=20,
)
def climate_hotspot_finding(ctx: InterpretationContext) -> list[str]:
    climate = ctx.contributions.get(ImpactCategory.CLIMATE)
    if climate is None or climate.total == 0 or not climate.records:
        return []
    top = climate.records[0]
    sentences = [
        f"{top.material} is the largest contributor to climate impact at "
        f"{top.percentage:.1f}% ({top.absolute_value:.3f} kg CO2e)."
    ]
    hotspots = [r for r in climate.records if r.is_dominant or r.is_significant]
    if 0 < len(hotspots) <= 3:
        sentences.append(
            f"Climate impact is concentrated in {len(hotspots)} material(s), "
            "representing potential hotspots for reduction."
        )
    return sentences


@register_rule(
    rule_id="other_category_dominance",
    section=NarrativeSection.FINDING,
    description="Dominant contributors in water, land and waste.",
    order=30,
)
def other_category_dominance_finding(ctx: InterpretationContext) -> list[str]:
    sentences = []
    for category in ImpactCategory:
        if category == ImpactCategory.CLIMATE:
            continue
        analysis = ctx.contributions.get(category)
        if analysis is None or analysis.total == 0:
            continue
        for record in analysis.dominant:
            sentences.append(
                f"{record.material} dominates {CATEGORY_LABELS[category]} at "
                f"{record.percentage:.1f}%."
            )
    return sentences


@register_rule(
    rule_id="biogenic_disclosure",
    section=NarrativeSection.FINDING,
    description="Biogenic carbon reported apart from fossil carbon.",
    order=40,
)
def biogenic_disclosure_finding(ctx: InterpretationContext) -> list[str]:
    if ctx.ghg.biogenic_co2e <= 0:
        return []
    return [
        f"Biogenic CO2e of {ctx.ghg.biogenic_co2e:.3f} kg is reported separately "
        f"from fossil CO2e of {ctx.ghg.fossil_co2e:.3f} kg."
    ]


@register_rule(
    rule_id="sensitive_parameters",
    section=NarrativeSection.FINDING,
    description="Parameters flagged as highly sensitive.",
    order=50,
)
def sensitive_parameters_finding(ctx: InterpretationContext) -> list[str]:
    flagged = ctx.highly_sensitive
    if not flagged:
        return []
    names = ", ".join(dict.fromkeys(s.parameter for s in flagged))
    return [
        f"Sensitivity analysis identifies {len(flagged)} highly sensitive "
        f"parameter(s): {names}."
    ]


# Limitations


@register_rule(
    rule_id="coverage_gap",
    section=NarrativeSection.LIMITATION,
    description="Stage coverage below 100%.",
    order=10,
)
def coverage_gap_limitation(ctx: InterpretationContext) -> list[str]:
    completeness = ctx.completeness
    if completeness.overall_score >= 100.0:
        return []
    sentence = f"Data coverage is {completeness.overall_score:.0f}%."
    uncovered = completeness.uncovered_stages
    if uncovered:
        sentence += " Missing stages: " + ", ".join(STAGE_LABELS[s] for s in uncovered) + "."
    return [sentence]


@register_rule(
    rule_id="system_boundary",
    section=NarrativeSection.LIMITATION,
    description="Stages excluded by the declared system boundary.",
    order=20,
)
def system_boundary_limitation(ctx: InterpretationContext) -> list[str]:
    if ctx.system_boundary == SystemBoundary.CRADLE_TO_GRAVE:
        return []
    included = set(BOUNDARY_STAGES[ctx.system_boundary])
    excluded = [STAGE_LABELS[s] for s in BOUNDARY_STAGES[SystemBoundary.CRADLE_TO_GRAVE] if s not in included]
    return [
        f"System boundary is {ctx.system_boundary.value}; "
        f"{', '.join(excluded)} impacts are excluded."
    ]


@register_rule(
    rule_id="methodology_mix",
    section=NarrativeSection.LIMITATION,
    description="More than one characterisation method in use.",
    order=30,
)
def methodology_mix_limitation(ctx: InterpretationContext) -> list[str]:
    methods = {m.methodology for m in ctx.materials if m.methodology}
    if len(methods) <= 1:
        return []
    return [
        "Multiple methodologies were used across materials, which may introduce "
        "inconsistencies in results."
    ]


@register_rule(
    rule_id="mass_balance",
    section=NarrativeSection.LIMITATION,
    description="Mass balance failures or an unassessed mass balance.",
    order=40,
)
def mass_balance_limitation(ctx: InterpretationContext) -> list[str]:
    check = ctx.completeness.mass_balance
    if not check.assessed:
        if not ctx.has_data:
            return []
        return ["Mass balance was not assessed because no product output mass was declared."]
    if check.valid:
        return []
    return [
        f"Mass balance check failed: input mass {check.input_kg:.3f} kg differs from "
        f"declared output {check.output_kg:.3f} kg by {check.variance_pct:.1f}% "
        f"(tolerance {check.tolerance_pct:.0f}%)."
    ]


@register_rule(
    rule_id="low_confidence",
    section=NarrativeSection.LIMITATION,
    description="Materials resolved with low-confidence factors.",
    order=50,
)
def low_confidence_limitation(ctx: InterpretationContext) -> list[str]:
    if not ctx.low_confidence_materials:
        return []
    return [
        "Some materials use secondary or proxy emission factors with lower "
        "confidence scores: "
        + ", ".join(m.material_name for m in ctx.low_confidence_materials)
        + "."
    ]


@register_rule(
    rule_id="proxy_speciation",
    section=NarrativeSection.LIMITATION,
    description="Heuristic GHG speciation disclosure.",
    order=60,
)
def proxy_speciation_limitation(ctx: InterpretationContext) -> list[str]:
    heuristic = [m for m in ctx.materials if m.ghg.method != "explicit"]
    if not heuristic:
        return []
    return [
        f"GHG speciation for {len(heuristic)} material(s) uses category heuristics, "
        "a proxy decomposition of aggregated values rather than measured gas "
        "inventories; results built on blended data tiers can overstate apparent precision."
    ]


@register_rule(
    rule_id="failed_materials",
    section=NarrativeSection.LIMITATION,
    description="Materials excluded from the results.",
    order=70,
)
def failed_materials_limitation(ctx: InterpretationContext) -> list[str]:
    if not ctx.failed_materials:
        return []
    details = ", ".join(
        f"{f.material_name} ({f.error_type.value})" for f in ctx.failed_materials
    )
    return [f"{len(ctx.failed_materials)} material(s) are excluded from the results: {details}."]


# Recommendations


@register_rule(
    rule_id="reduction_priorities",
    section=NarrativeSection.RECOMMENDATION,
    description="Prioritise significant climate contributors.",
    order=10,
)
def reduction_priorities_recommendation(ctx: InterpretationContext) -> list[str]:
    climate = ctx.contributions.get(ImpactCategory.CLIMATE)
    if climate is None:
        return []
    top = [r for r in climate.records[:3] if r.is_dominant or r.is_significant]
    if not top:
        return []
    return [
        "Prioritise emission reduction efforts on: "
        + ", ".join(r.material for r in top)
        + ". These account for the largest share of climate impact."
    ]


@register_rule(
    rule_id="sensitive_data_quality",
    section=NarrativeSection.RECOMMENDATION,
    description="Improve data for highly sensitive parameters.",
    order=20,
)
def sensitive_data_quality_recommendation(ctx: InterpretationContext) -> list[str]:
    flagged = ctx.highly_sensitive
    if not flagged:
        return []
    names = ", ".join(dict.fromkeys(s.material_name for s in flagged))
    return [
        f"Improve data quality for {names} as results are highly sensitive to "
        "these parameters."
    ]


@register_rule(
    rule_id="increase_coverage",
    section=NarrativeSection.RECOMMENDATION,
    description="Coverage below 80%.",
    order=30,
)
def increase_coverage_recommendation(ctx: InterpretationContext) -> list[str]:
    if ctx.completeness.overall_score >= 80.0:
        return []
    return [
        "Increase data coverage by linking production facilities and modelling "
        "the missing lifecycle stages."
    ]


@register_rule(
    rule_id="replace_defaults",
    section=NarrativeSection.RECOMMENDATION,
    description="Replace tertiary category defaults.",
    order=40,
)
def replace_defaults_recommendation(ctx: InterpretationContext) -> list[str]:
    defaults = ctx.materials_in_tier(ProvenanceTier.TERTIARY)
    if not defaults:
        return []
    return [
        "Replace category-default factors for "
        + ", ".join(m.material_name for m in defaults)
        + " with supplier-specific or curated proxy data."
    ]


@register_rule(
    rule_id="reconcile_mass_balance",
    section=NarrativeSection.RECOMMENDATION,
    description="Reconcile a failed mass balance.",
    order=50,
)
def reconcile_mass_balance_recommendation(ctx: InterpretationContext) -> list[str]:
    check = ctx.completeness.mass_balance
    if not check.assessed or check.valid:
        return []
    return [
        "Reconcile recorded input quantities with the declared product output "
        "mass before publishing results."
    ]


@register_rule(
    rule_id="critical_review",
    section=NarrativeSection.RECOMMENDATION,
    description="ISO 14044 critical review for public comparative use.",
    order=90,
)
def critical_review_recommendation(ctx: InterpretationContext) -> list[str]:
    if not ctx.has_data:
        return []
    return [
        "Commission a critical review according to ISO 14044 clause 6 before "
        "using these results in comparative assertions disclosed to the public."
    ]
