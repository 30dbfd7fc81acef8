"""Truck Label Catalogue — the fixed sections, parts, damage types and severities.

Invariants:
    - Every part belongs to exactly one section
    - SEVERITY_LEVELS is ordered from least to most severe (index = rank)
    - Fallback payloads use the name as the id

Design Decisions:
    - Tuples, not lists: catalogue is immutable at runtime
    - The DB rows are seeded from these constants; routes filter DB rows
      back down to the catalogue so stray rows never reach the labelling UI
"""

TRUCK_SECTIONS: tuple[str, ...] = (
    "Front of Truck",
    "Cab/Driver Area",
    "Driver Side",
    "Passenger Side",
    "Rear of Truck",
    "Top/Roof",
    "Underside/Bottom",
)

SECTION_PARTS: dict[str, tuple[str, ...]] = {
    "Front of Truck": (
        "Top Hood Panel",
        "Center Bumper",
        "LT Bumper End",
        "RT Bumper End",
        "Grille",
        "LT Headlamp",
        "RT Headlamp",
    ),
    "Cab/Driver Area": (
        "Windshield",
        "Cab Back Panel",
    ),
    "Driver Side": (
        "LT Fender",
        "LT Fender Extension",
        "LT Cowl Panel",
        "LT Step/Running Board",
        "LT Fairing",
        "LT Mid Fairing",
        "LT End Fairing",
        "LT Door",
        "LT Sleeper Panel",
        "LT Cab Extender",
        "LT Cab Ext Upper",
        "LT Side Marker/Reflector",
    ),
    "Passenger Side": (
        "RT Fender",
        "RT Fender Extension",
        "RT Cowl Panel",
        "RT Step/Running Board",
        "RT Fairing",
        "RT Mid Fairing",
        "RT End Fairing",
        "RT Door",
        "RT Sleeper Panel",
        "RT Cab Extender",
        "RT Cab Ext Upper",
        "RT Side Marker/Reflector",
    ),
    "Rear of Truck": (
        "Sleeper Back Panel",
        "Rear Bumper/ICC Bumper",
        "LT Tail Lamp",
        "RT Tail Lamp",
        "License Plate Bracket",
        "Rear Step",
        "LT Mud Flap Hanger",
        "RT Mud Flap Hanger",
    ),
    "Top/Roof": (
        "Roof Panel",
        "Sleeper Roof Panel",
        "Sun Visor",
        "Roof Air Deflector",
        "Clearance Lights",
        "Marker Lights",
    ),
    "Underside/Bottom": (
        "LT Step Bracket",
        "RT Step Bracket",
        "LT Splash Shield",
        "RT Splash Shield",
        "Underbody Fairing Panel",
    ),
}

DAMAGE_TYPES: tuple[str, ...] = (
    "Dent",
    "Scratch",
    "Scrape",
    "Gouge",
    "Crack",
    "Hole/Puncture",
    "Rust",
    "Corrosion",
    "Paint Damage",
    "Paint Fade",
    "Paint Chips",
    "Clear Coat Damage",
    "Chrome Damage",
    "Collision Damage",
    "Impact Damage",
    "Hail Damage",
    "Weather Damage",
    "Road Debris Damage",
    "Stone Chips",
    "Broken",
    "Missing",
    "Bent",
    "Twisted",
    "Warped",
    "Wear",
    "Other",
)

SEVERITY_LEVELS: tuple[str, ...] = ("Minor", "Moderate", "Severe", "Critical")


def fallback_sections() -> list[dict]:
    """Sections with their parts, built from constants (DB unavailable)."""
    return [
        {
            "id": name,
            "name": name,
            "vehicle_parts": [
                {"id": part, "name": part} for part in SECTION_PARTS[name]
            ],
        }
        for name in TRUCK_SECTIONS
    ]


def fallback_damage_types() -> list[dict]:
    return [{"id": name, "name": name} for name in DAMAGE_TYPES]


def fallback_severity_levels() -> list[dict]:
    return [
        {"id": name, "name": name, "rank": rank}
        for rank, name in enumerate(SEVERITY_LEVELS)
    ]


def filter_sections_to_catalog(sections: list[dict]) -> list[dict]:
    """Drop sections not in the catalogue and parts not allowed for their section.

    Input/output shape: [{"id", "name", "vehicle_parts": [{"id", "name"}]}].
    Order follows the input.
    """
    allowed_sections = set(TRUCK_SECTIONS)
    filtered = []
    for section in sections:
        if section["name"] not in allowed_sections:
            continue
        allowed_parts = set(SECTION_PARTS.get(section["name"], ()))
        filtered.append({
            **section,
            "vehicle_parts": [
                p for p in section.get("vehicle_parts", [])
                if p["name"] in allowed_parts
            ],
        })
    return filtered
