"""House types and the per-house-type stage catalog.

Pure domain logic with no external dependencies. The database table
``stage_configs`` is seeded from ``STAGE_CATALOG`` and is the runtime source
of truth for percent lookups.
"""
from enum import Enum


class HouseType(str, Enum):
    SINGLE = "Single"
    DOUBLE = "Double"


INITIAL_STAGE = "Project Setup"
FINAL_STAGE = "Finalisation"

# Ordered (stage name, percent) pairs; strictly increasing, terminal entry = 100
STAGE_CATALOG: dict[HouseType, list[tuple[str, int]]] = {
    HouseType.SINGLE: [
        ("Project Setup", 10),
        ("Architectural", 20),
        ("Frames", 40),
        ("Trusses", 55),
        ("Steel", 70),
        ("Client Check", 80),
        ("Engineer Review", 90),
        ("Finalisation", 100),
    ],
    HouseType.DOUBLE: [
        ("Project Setup", 10),
        ("Architectural", 20),
        ("Lower Frames", 30),
        ("Floor Trusses", 45),
        ("Lower Steel", 55),
        ("Upper Frames", 65),
        ("Roof Trusses", 75),
        ("Client Check", 85),
        ("Engineer Review", 95),
        ("Finalisation", 100),
    ],
}


def validate_catalog(catalog: dict[HouseType, list[tuple[str, int]]]) -> None:
    """Raise ValueError unless every list is strictly increasing and ends at 100."""
    for house_type, entries in catalog.items():
        if not entries:
            raise ValueError(f"Stage list for {house_type.value} is empty")
        names = [name for name, _ in entries]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate stage names for {house_type.value}")
        percents = [percent for _, percent in entries]
        if any(b <= a for a, b in zip(percents, percents[1:])):
            raise ValueError(f"Stage percents for {house_type.value} are not strictly increasing")
        if percents[-1] != 100:
            raise ValueError(f"Terminal stage for {house_type.value} must be 100%, got {percents[-1]}")

