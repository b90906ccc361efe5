"""
Hazard catalog queries and weighted per-world selection.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from ..config.hazard_catalog import DEFAULT_HAZARD_CATALOG, HazardProperties, HazardType
from .alea_prng import AleaPRNG

logger = structlog.get_logger()

REGENERATING_DIFFICULTY_BONUS = 0.5


@dataclass(frozen=True)
class HazardPlacement:
    """A hazard instance anchored on the window."""

    type: HazardType
    position: Tuple[float, float]
    size: float
    clean_difficulty: float
    regen_rate: float

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "position": list(self.position),
            "size": self.size,
            "clean_difficulty": self.clean_difficulty,
            "regen_rate": self.regen_rate,
        }


class HazardCatalog:
    """Read-only view over the hazard properties table."""

    def __init__(self, hazards: Optional[Sequence[HazardProperties]] = None):
        self._hazards: List[HazardProperties] = list(
            DEFAULT_HAZARD_CATALOG if hazards is None else hazards
        )
        self._by_type: Dict[HazardType, HazardProperties] = {h.type: h for h in self._hazards}

    def __len__(self) -> int:
        return len(self._hazards)

    def properties(self, hazard_type: HazardType) -> Optional[HazardProperties]:
        return self._by_type.get(hazard_type)

    def hazards_for_world(self, world_number: int) -> List[HazardProperties]:
        """Hazards unlocked by the given world."""
        return [h for h in self._hazards if h.first_appearance_world <= world_number]

    def regenerating(self) -> List[HazardProperties]:
        return [h for h in self._hazards if h.is_regenerating]

    def special_tool(self) -> List[HazardProperties]:
        return [h for h in self._hazards if h.requires_special_tool]

    def select(self, world_number: int, count: int, prng: AleaPRNG) -> List[HazardType]:
        """
        Draw ``count`` hazard types for a world, weighted by spawn weight.

        Types may repeat. Returns an empty list when the world has no
        hazard with positive weight.
        """
        available = self.hazards_for_world(world_number)
        total_weight = sum(h.spawn_weight for h in available)
        if count <= 0 or total_weight <= 0:
            if count > 0:
                logger.warning("No hazards available for world", world=world_number)
            return []

        selected = []
        for _ in range(count):
            value = prng.random() * total_weight
            cumulative = 0.0
            chosen = available[-1]
            for hazard in available:
                cumulative += hazard.spawn_weight
                if value <= cumulative:
                    chosen = hazard
                    break
            selected.append(chosen.type)
        return selected

    def level_difficulty(self, hazard_types: Iterable[HazardType]) -> float:
        """Total clean difficulty; regenerating hazards add a flat bonus."""
        total = 0.0
        for hazard_type in hazard_types:
            props = self._by_type.get(hazard_type)
            if props is None:
                continue
            total += props.clean_difficulty
            if props.is_regenerating:
                total += REGENERATING_DIFFICULTY_BONUS
        return total
