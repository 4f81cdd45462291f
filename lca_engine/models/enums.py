from enum import Enum


class ProvenanceTier(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


class LifecycleStage(str, Enum):
    RAW_MATERIALS = "raw_materials"
    PACKAGING = "packaging"
    PROCESSING = "processing"
    DISTRIBUTION = "distribution"
    USE_PHASE = "use_phase"
    END_OF_LIFE = "end_of_life"


class ImpactCategory(str, Enum):
    CLIMATE = "climate"
    WATER = "water"
    LAND = "land"
    WASTE = "waste"


class MaterialCategory(str, Enum):
    AGRICULTURAL = "agricultural"
    PACKAGING = "packaging"
    ENERGY = "energy"
    TRANSPORT = "transport"
    WASTE = "waste"
    OTHER = "other"


class TransportMode(str, Enum):
    ROAD = "road"
    RAIL = "rail"
    SEA = "sea"
    AIR = "air"
    MULTIMODAL = "multimodal"


class SystemBoundary(str, Enum):
    CRADLE_TO_GATE = "cradle-to-gate"
    CRADLE_TO_SHELF = "cradle-to-shelf"
    CRADLE_TO_CONSUMER = "cradle-to-consumer"
    CRADLE_TO_GRAVE = "cradle-to-grave"


class AnnualizationConfidence(int, Enum):
    """Confidence tier of an annualised estimate, by months of data covered."""

    LOW = 1
    MODERATE = 2
    HIGH = 3
    COMPLETE = 4


class FailureType(str, Enum):
    DATA_NOT_FOUND = "data_not_found"
    UNIT_MISMATCH = "unit_mismatch"


class NarrativeSection(str, Enum):
    FINDING = "finding"
    LIMITATION = "limitation"
    RECOMMENDATION = "recommendation"


CATEGORY_UNITS: dict[ImpactCategory, str] = {
    ImpactCategory.CLIMATE: "kg CO2e",
    ImpactCategory.WATER: "m3",
    ImpactCategory.LAND: "m2a",
    ImpactCategory.WASTE: "kg",
}

CATEGORY_LABELS: dict[ImpactCategory, str] = {
    ImpactCategory.CLIMATE: "Climate Change",
    ImpactCategory.WATER: "Water Consumption",
    ImpactCategory.LAND: "Land Use",
    ImpactCategory.WASTE: "Waste Generation",
}

STAGE_LABELS: dict[LifecycleStage, str] = {
    LifecycleStage.RAW_MATERIALS: "Raw Materials",
    LifecycleStage.PACKAGING: "Packaging",
    LifecycleStage.PROCESSING: "Processing",
    LifecycleStage.DISTRIBUTION: "Distribution",
    LifecycleStage.USE_PHASE: "Use Phase",
    LifecycleStage.END_OF_LIFE: "End of Life",
}

# Stages inside each declared system boundary.
BOUNDARY_STAGES: dict[SystemBoundary, tuple[LifecycleStage, ...]] = {
    SystemBoundary.CRADLE_TO_GATE: (
        LifecycleStage.RAW_MATERIALS,
        LifecycleStage.PACKAGING,
        LifecycleStage.PROCESSING,
    ),
    SystemBoundary.CRADLE_TO_SHELF: (
        LifecycleStage.RAW_MATERIALS,
        LifecycleStage.PACKAGING,
        LifecycleStage.PROCESSING,
        LifecycleStage.DISTRIBUTION,
    ),
    SystemBoundary.CRADLE_TO_CONSUMER: (
        LifecycleStage.RAW_MATERIALS,
        LifecycleStage.PACKAGING,
        LifecycleStage.PROCESSING,
        LifecycleStage.DISTRIBUTION,
        LifecycleStage.USE_PHASE,
    ),
    SystemBoundary.CRADLE_TO_GRAVE: tuple(LifecycleStage),
}
