"""Classify a material into a category from its name."""

from __future__ import annotations

from lca_engine.models.enums import MaterialCategory

# Keyword lists checked in order; the first category with a hit wins.
_ENERGY_KEYWORDS = (
    "electricity", "natural gas", "diesel", "petrol", "gasoline", "coal",
    "fuel", "heating", "steam", "lpg", "kwh",
)
_TRANSPORT_KEYWORDS = (
    "transport", "hgv", "lorry", "truck", "freight", "shipping", "logistics",
    "courier", "delivery",
)
_WASTE_KEYWORDS = (
    "waste", "landfill", "incineration", "compost", "wastewater", "effluent",
    "recycling",
)
_PACKAGING_KEYWORDS = (
    "bottle", "glass", "can", "aluminium", "aluminum", "label", "cap",
    "closure", "cardboard", "carton", "corrugated", "paper", "film", "pet",
    "hdpe", "ldpe", "plastic", "crate", "pallet", "box", "wrap",
)
_AGRICULTURAL_KEYWORDS = (
    "sugar", "barley", "wheat", "malt", "hops", "grape", "apple", "fruit",
    "juice", "milk", "cocoa", "coffee", "tea", "corn", "maize", "rice",
    "oat", "potato", "citric", "yeast", "honey", "botanical", "herb",
    "flavouring", "flavoring", "cotton", "wool",
)

_RULES: tuple[tuple[MaterialCategory, tuple[str, ...]], ...] = (
    (MaterialCategory.ENERGY, _ENERGY_KEYWORDS),
    (MaterialCategory.TRANSPORT, _TRANSPORT_KEYWORDS),
    (MaterialCategory.WASTE, _WASTE_KEYWORDS),
    (MaterialCategory.PACKAGING, _PACKAGING_KEYWORDS),
    (MaterialCategory.AGRICULTURAL, _AGRICULTURAL_KEYWORDS),
)


def detect_material_category(name: str) -> MaterialCategory:
    """Classify a material by keyword.

    Uses a heuristic approach:
    1. Energy carriers -> ENERGY
    2. Freight and logistics -> TRANSPORT
    3. Waste treatment -> WASTE
    4. Packaging formats and materials -> PACKAGING
    5. Crops and food ingredients -> AGRICULTURAL
    6. Anything else -> OTHER
    """
    tokens = set(name.lower().replace("-", " ").replace("/", " ").split())
    lower = " ".join(name.lower().split())

    for category, keywords in _RULES:
        for keyword in keywords:
            # Multi-word keywords match as substrings, single words as whole tokens.
            if " " in keyword:
                if keyword in lower:
                    return category
            elif keyword in tokens or (len(keyword) > 4 and keyword in lower):
                return category

    return MaterialCategory.OTHER
