"""
Level generation configuration.

``LevelConfig`` holds the tunable difficulty curve and generation
parameters. It is loaded once at startup and handed to the orchestrator;
every field has a documented default so generation never fails because a
config file, or a key inside it, is missing.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

import structlog
from pydantic import BaseModel, Field, model_validator

from .hazard_catalog import HazardProperties

logger = structlog.get_logger()


class LevelConfig(BaseModel):
    """Difficulty curve and procedural generation settings."""

    # World progression
    floors_per_world: int = Field(default=100, ge=1, description="Floors per world")
    rooms_per_floor: int = Field(default=10, ge=1, description="Rooms per floor")
    total_worlds: int = Field(default=10, ge=1, description="Total worlds available")

    # Difficulty scaling
    starting_timer: float = Field(default=120.0, gt=0, description="Timer (s) for world 1")
    ending_timer: float = Field(default=40.0, gt=0, description="Timer (s) for the last world")
    starting_hazard_count: int = Field(default=8, ge=0, description="Hazard count floor")
    ending_hazard_count: int = Field(default=25, ge=0, description="Hazard count ceiling")
    hazard_world_step: int = Field(default=2, ge=0, description="Extra hazards per world")
    hazard_floor_step: float = Field(default=0.1, ge=0, description="Extra hazards per floor")
    min_difficulty: float = Field(default=1.0, description="Difficulty multiplier at level 0")
    max_difficulty: float = Field(default=10.0, description="Difficulty multiplier at the last level")

    # Hazard generation
    min_hazard_size: float = Field(default=0.5, ge=0.1, le=2.0, description="Min hazard size (window units)")
    max_hazard_size: float = Field(default=1.5, ge=0.5, le=3.0, description="Max hazard size (window units)")
    min_hazard_distance: float = Field(default=1.0, ge=0.5, le=3.0, description="Min distance between hazards")
    poisson_attempts: int = Field(default=20, ge=10, le=50, description="Bridson candidates per point")
    hazard_catalog: Optional[List[HazardProperties]] = Field(
        default=None, description="Hazard catalog override, defaults to the built-in catalog"
    )

    # Regeneration
    enable_regeneration: bool = Field(default=True, description="Enable hazard regrowth")
    regeneration_rate: float = Field(default=2.5, ge=0.0, le=10.0, description="Base regrowth (%/s)")
    regeneration_world_step: float = Field(default=0.2, ge=0.0, description="Extra regrowth per world (%/s)")
    regen_stop_threshold: float = Field(default=80.0, ge=50.0, le=100.0, description="Clean % that stops regrowth")
    neighbor_threshold: int = Field(default=4, ge=3, le=8, description="Dirty neighbours needed to regrow")
    regrowth_warmup_steps: int = Field(default=1, ge=0, description="Automaton steps applied to the initial grid")
    regrowth_step_seconds: float = Field(default=1.0, gt=0, description="Simulated seconds per warm-up step")

    # Window
    window_width: float = Field(default=10.0, ge=5.0, le=20.0, description="Window width (world units)")
    window_height: float = Field(default=8.0, ge=5.0, le=20.0, description="Window height (world units)")
    grid_size: int = Field(default=64, ge=8, le=512, description="Hazard grid cells per side")

    # Solvability validation
    enable_ai_validation: bool = Field(default=True, description="Run the solvability bot")
    min_solvability_percent: float = Field(default=95.0, ge=80.0, le=100.0, description="Target clean %")
    max_validation_attempts: int = Field(default=3, ge=1, le=10, description="Attempts allowed to review policy")
    clear_radius: float = Field(default=6.0, gt=0, description="Bot wipe radius (cells)")
    max_validation_iterations: int = Field(default=500, ge=1, description="Bot wipe cap")
    validation_budget_seconds: float = Field(default=0.25, gt=0, description="Bot wall-clock budget")

    # Noise
    perlin_octaves: int = Field(default=7, ge=1, le=10, description="Noise octaves")
    perlin_frequency: float = Field(default=0.1, ge=0.01, le=1.0, description="Base noise frequency (1/cells)")
    perlin_persistence: float = Field(default=0.5, gt=0, le=1.0, description="Amplitude falloff per octave")
    perlin_lacunarity: float = Field(default=2.0, ge=1.0, description="Frequency gain per octave")

    # Themes
    world_theme_names: List[str] = Field(
        default=[
            "Suburban Homes",
            "Downtown Towers",
            "Historic District",
            "Industrial Zone",
            "Coastal Resort",
            "Urban Decay",
            "Mountain Chalet",
            "Cyberpunk City",
            "Space Station",
            "Formby Mansion",
        ],
        description="World theme names by world",
    )

    class Config:
        extra = "ignore"

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.ending_hazard_count < self.starting_hazard_count:
            raise ValueError("ending_hazard_count must be >= starting_hazard_count")
        if self.max_hazard_size < self.min_hazard_size:
            raise ValueError("max_hazard_size must be >= min_hazard_size")
        return self

    @property
    def levels_per_world(self) -> int:
        return max(1, self.floors_per_world * self.rooms_per_floor)

    @property
    def total_levels(self) -> int:
        return max(1, self.total_worlds * self.levels_per_world)

    @property
    def noise_scale(self) -> float:
        """Cells per lattice unit at the first octave."""
        return 1.0 / self.perlin_frequency

    @classmethod
    def load(cls, path: Optional[Union[str, Path]]) -> "LevelConfig":
        """
        Load a config from a JSON file.

        A missing path or file gives the default config; keys absent from
        the file keep their defaults. Malformed JSON or out-of-range values
        raise.
        """
        if path is None:
            logger.info("No level config path given, using defaults")
            return cls()

        config_path = Path(path)
        if not config_path.exists():
            logger.warning("Level config not found, using defaults", path=str(config_path))
            return cls()

        with config_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"Level config must be a JSON object: {config_path}")

        config = cls(**data)
        logger.info("Level config loaded", path=str(config_path), keys=sorted(data))
        return config
