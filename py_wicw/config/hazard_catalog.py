"""
Hazard type catalog.

Defines the 24 hazard types (16 static, 8 regenerating) and their default
gameplay properties. ``first_appearance_world`` gates which hazards a world
may roll; ``spawn_weight`` drives the weighted selection.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class HazardType(str, Enum):
    """Hazard types, in catalog order."""

    # Static
    BIRD_POOP = "bird_poop"
    DEAD_FLIES = "dead_flies"
    MUD = "mud"
    OIL_STAIN = "oil_stain"
    SPIDERWEB = "spiderweb"
    GRAFFITI = "graffiti"
    STICKERS = "stickers"
    TAPE_RESIDUE = "tape_residue"
    WATER_MARKS = "water_marks"
    RUST = "rust"
    GUM = "gum"
    PAINT = "paint"
    ASH = "ash"
    MOLD = "mold"
    SCRATCHES = "scratches"
    DUST = "dust"

    # Regenerating
    FROST = "frost"
    ALGAE = "algae"
    TREE_SAP = "tree_sap"
    FOG = "fog"
    NANO_BOTS = "nano_bots"
    POLLEN = "pollen"
    CONDENSATION = "condensation"
    POLLUTION = "pollution"


class HazardProperties(BaseModel):
    """Gameplay properties of a hazard type."""

    type: HazardType
    display_name: str
    is_regenerating: bool = False
    clean_difficulty: float = Field(default=1.0, ge=0.0, description="Swipe multiplier")
    swipes_required: int = Field(default=3, ge=1)
    regen_rate: float = Field(default=0.025, ge=0.0, description="Fraction regrown per second")
    spread_radius: float = Field(default=2.0, ge=0.0)
    first_appearance_world: int = Field(default=1, ge=1)
    spawn_weight: float = Field(default=1.0, ge=0.0)
    requires_special_tool: bool = False
    blocks_gestures: bool = False

    class Config:
        frozen = True


def _static(type_, name, difficulty, swipes, world, weight, **extra):
    return HazardProperties(
        type=type_,
        display_name=name,
        clean_difficulty=difficulty,
        swipes_required=swipes,
        first_appearance_world=world,
        spawn_weight=weight,
        **extra,
    )


def _regenerating(type_, name, difficulty, swipes, regen, world, weight, **extra):
    return HazardProperties(
        type=type_,
        display_name=name,
        is_regenerating=True,
        clean_difficulty=difficulty,
        swipes_required=swipes,
        regen_rate=regen,
        first_appearance_world=world,
        spawn_weight=weight,
        **extra,
    )


DEFAULT_HAZARD_CATALOG: List[HazardProperties] = [
    _static(HazardType.BIRD_POOP, "Bird Poop", 1.0, 2, 1, 1.5),
    _static(HazardType.DEAD_FLIES, "Dead Flies", 0.8, 1, 1, 1.2),
    _static(HazardType.MUD, "Mud", 1.2, 4, 1, 1.3),
    _static(HazardType.OIL_STAIN, "Oil Stain", 1.8, 6, 2, 0.8),
    _static(HazardType.SPIDERWEB, "Spiderweb", 0.6, 2, 2, 1.0),
    _static(HazardType.GRAFFITI, "Graffiti", 2.0, 8, 3, 0.5),
    _static(HazardType.STICKERS, "Stickers", 1.5, 5, 2, 0.9),
    _static(HazardType.TAPE_RESIDUE, "Tape Residue", 1.4, 4, 3, 0.7),
    _static(HazardType.WATER_MARKS, "Water Marks", 0.9, 3, 1, 1.4),
    _static(HazardType.RUST, "Rust", 2.5, 10, 4, 0.4, blocks_gestures=True),
    _static(HazardType.GUM, "Gum", 1.6, 5, 2, 0.8),
    _static(HazardType.PAINT, "Paint", 1.7, 6, 3, 0.6),
    _static(HazardType.ASH, "Ash", 0.7, 2, 3, 1.0),
    _static(HazardType.MOLD, "Mold", 1.9, 7, 4, 0.5),
    _static(HazardType.SCRATCHES, "Scratches", 3.0, 12, 5, 0.3, requires_special_tool=True),
    _static(HazardType.DUST, "Dust", 0.5, 1, 1, 1.5),
    _regenerating(HazardType.FROST, "Frost", 1.3, 4, 0.025, 4, 0.7, spread_radius=2.5),
    _regenerating(HazardType.ALGAE, "Algae", 1.5, 5, 0.020, 3, 0.8, spread_radius=2.0),
    _regenerating(HazardType.TREE_SAP, "Tree Sap", 2.0, 7, 0.015, 5, 0.5, spread_radius=1.5),
    _regenerating(HazardType.FOG, "Fog", 0.8, 2, 0.025, 2, 1.0, spread_radius=3.0),
    _regenerating(HazardType.NANO_BOTS, "Nano-Bots", 2.2, 8, 0.028, 8, 0.4, spread_radius=2.5),
    _regenerating(HazardType.POLLEN, "Pollen", 0.6, 2, 0.022, 2, 0.9, spread_radius=2.8),
    _regenerating(HazardType.CONDENSATION, "Condensation", 0.7, 2, 0.025, 1, 1.2, spread_radius=2.2),
    _regenerating(HazardType.POLLUTION, "Pollution", 1.8, 6, 0.018, 6, 0.6, spread_radius=2.0),
]
