"""
Level orchestration: level index in, reproducible level descriptor out.

The orchestrator maps a level index to world/floor/room coordinates,
derives independent seeds for each subsystem, scales the difficulty curve,
rolls the hazard set, builds the initial hazard grid (noise field, blue
noise anchors, stamped hazards, regrowth warm-up) and certifies it with the
solvability bot. Descriptors are immutable and cached by level index;
concurrent requests for the same uncached index are coalesced.
"""

import math
import numbers
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np
import structlog

from ..config.hazard_catalog import HazardType
from ..config.level_config import LevelConfig
from ..config.world_themes import WorldTheme, build_world_themes
from ..utils.parallel import WorkerPool
from .alea_prng import AleaPRNG
from .blue_noise import BlueNoiseSampler, SamplePoint
from .hazards import HazardCatalog, HazardPlacement
from .level_cache import LevelCache
from .noise_field import NoiseField
from .regrowth import RegrowthAutomaton
from .solvability import SolvabilityValidator

NOISE_SEED_PRIME = 7919
SAMPLING_SEED_PRIME = 6421
HAZARD_SEED_PRIME = 5381

KEY_LEVEL_INTERVAL = 100
STORY_LEVEL_INTERVAL = 500
MAX_ELEGANT_PATHS = 3


@dataclass(frozen=True)
class LevelSeed:
    """Independent per-subsystem seeds derived from one level index."""

    noise: int
    sampling: int
    hazard: int

    @classmethod
    def from_level(cls, level_index: int) -> "LevelSeed":
        return cls(
            noise=level_index * NOISE_SEED_PRIME,
            sampling=level_index * SAMPLING_SEED_PRIME,
            hazard=level_index * HAZARD_SEED_PRIME,
        )


@dataclass(frozen=True)
class LevelDescriptor:
    """Generated level parameters. Created once per level index."""

    level_index: int
    world_number: int
    floor_number: int
    room_number: int
    seeds: LevelSeed
    difficulty_multiplier: float
    hazard_count: int
    hazards: Tuple[HazardType, ...]
    placements: Tuple[HazardPlacement, ...]
    hazard_difficulty: float
    regen_rate: float
    timer_seconds: float
    is_solvable: bool
    achieved_clean_percentage: Optional[float]
    elegant_paths: int
    theme_name: str
    is_key_level: bool
    is_story_level: bool

    def to_dict(self) -> dict:
        """JSON-safe representation."""
        return {
            "level_index": self.level_index,
            "world_number": self.world_number,
            "floor_number": self.floor_number,
            "room_number": self.room_number,
            "seeds": {
                "noise": self.seeds.noise,
                "sampling": self.seeds.sampling,
                "hazard": self.seeds.hazard,
            },
            "difficulty_multiplier": self.difficulty_multiplier,
            "hazard_count": self.hazard_count,
            "hazards": [h.value for h in self.hazards],
            "placements": [p.to_dict() for p in self.placements],
            "hazard_difficulty": self.hazard_difficulty,
            "regen_rate": self.regen_rate,
            "timer_seconds": self.timer_seconds,
            "is_solvable": self.is_solvable,
            "achieved_clean_percentage": self.achieved_clean_percentage,
            "elegant_paths": self.elegant_paths,
            "theme_name": self.theme_name,
            "is_key_level": self.is_key_level,
            "is_story_level": self.is_story_level,
        }


@dataclass
class LevelLayout:
    """Initial hazard grid of a level, rebuilt on demand for the rendering layer."""

    level_index: int
    grid: np.ndarray
    anchors: List[SamplePoint] = field(default_factory=list)
    placements: Tuple[HazardPlacement, ...] = ()


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _clamp(value, low, high):
    return max(low, min(high, value))


class LevelOrchestrator:
    """
    Builds and memoizes level descriptors.

    Args:
        config: Level curve and generation settings
        catalog: Hazard catalog, built from ``config.hazard_catalog`` when omitted
        pool: Worker pool for cell-parallel grid stages
        logger: Bound structlog logger used at generation lifecycle points
    """

    def __init__(
        self,
        config: Optional[LevelConfig] = None,
        catalog: Optional[HazardCatalog] = None,
        pool: Optional[WorkerPool] = None,
        logger=None,
    ):
        self.config = config or LevelConfig()
        self.catalog = catalog or HazardCatalog(self.config.hazard_catalog)
        self.pool = pool or WorkerPool(1)
        self.logger = logger or structlog.get_logger()

        self.noise_field = NoiseField(self.pool)
        self.sampler = BlueNoiseSampler()
        self.validator = SolvabilityValidator()
        self.world_themes: List[WorldTheme] = [
            theme
            for theme in build_world_themes(self.config.levels_per_world, self.config.world_theme_names)
            if theme.world_number <= self.config.total_worlds
        ]

        self._cache: LevelCache[LevelDescriptor] = LevelCache()
        self._count_lock = threading.Lock()
        self._generation_count = 0

    # -- Difficulty curve ---------------------------------------------------

    def level_coordinates(self, level_index: int) -> Tuple[int, int, int]:
        """Map a level index to (world, floor, room), clamping the world."""
        levels_per_world = self.config.levels_per_world
        rooms_per_floor = self.config.rooms_per_floor

        world_number = _clamp((level_index - 1) // levels_per_world + 1, 1, self.config.total_worlds)
        level_in_world = (level_index - 1) % levels_per_world + 1
        floor_number = (level_in_world - 1) // rooms_per_floor + 1
        room_number = (level_in_world - 1) % rooms_per_floor + 1
        return world_number, floor_number, room_number

    def difficulty_multiplier(self, level_index: int) -> float:
        progress = _clamp(level_index / self.config.total_levels, 0.0, 1.0)
        return _lerp(self.config.min_difficulty, self.config.max_difficulty, progress)

    def hazard_count(self, world_number: int, floor_number: int) -> int:
        config = self.config
        world_base = config.starting_hazard_count + (world_number - 1) * config.hazard_world_step
        floor_bonus = int(math.floor(floor_number * config.hazard_floor_step))
        return _clamp(world_base + floor_bonus, config.starting_hazard_count, config.ending_hazard_count)

    def regen_rate(self, world_number: int) -> float:
        """Regrowth as a fraction of a cell per second."""
        if not self.config.enable_regeneration:
            return 0.0
        percent = self.config.regeneration_rate + (world_number - 1) * self.config.regeneration_world_step
        return percent / 100.0

    def timer_duration(self, world_number: int) -> float:
        total_worlds = self.config.total_worlds
        t = (world_number - 1) / (total_worlds - 1) if total_worlds > 1 else 0.0
        return _lerp(self.config.starting_timer, self.config.ending_timer, t)

    # -- Themes -------------------------------------------------------------

    def get_world_theme(self, world_number: int) -> Optional[WorldTheme]:
        for theme in self.world_themes:
            if theme.world_number == world_number:
                return theme
        return None

    def world_range(self, world_number: int) -> Tuple[int, int]:
        """First and last level index of a world."""
        if world_number < 1 or world_number > self.config.total_worlds:
            raise ValueError(
                f"World {world_number} outside 1..{self.config.total_worlds}"
            )
        levels_per_world = self.config.levels_per_world
        return (world_number - 1) * levels_per_world + 1, world_number * levels_per_world

    # -- Generation ---------------------------------------------------------

    @property
    def generation_count(self) -> int:
        """Number of descriptors actually computed (cache hits excluded)."""
        with self._count_lock:
            return self._generation_count

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def cached(self, level_index: int) -> Optional[LevelDescriptor]:
        return self._cache.get(level_index)

    def generate(self, level_index: int) -> LevelDescriptor:
        """Return the descriptor for a level, generating it at most once."""
        if isinstance(level_index, bool) or not isinstance(level_index, numbers.Integral):
            raise ValueError(f"Level index must be an int, got {level_index!r}")
        level_index = int(level_index)
        if level_index < 1:
            raise ValueError(f"Level index must be >= 1, got {level_index}")
        return self._cache.get_or_create(level_index, lambda: self._build_descriptor(level_index))

    get_level = generate

    def _build_descriptor(self, level_index: int) -> LevelDescriptor:
        start = time.perf_counter()
        log = self.logger.bind(level=level_index)
        log.info("Generating level")

        config = self.config
        world_number, floor_number, room_number = self.level_coordinates(level_index)
        seeds = LevelSeed.from_level(level_index)
        hazard_count = self.hazard_count(world_number, floor_number)
        regen_rate = self.regen_rate(world_number)

        hazard_prng = AleaPRNG(seeds.hazard)
        hazards = self.catalog.select(world_number, hazard_count, hazard_prng)
        anchors = self._sample_anchors(seeds)
        placements = self._place_hazards(hazards, anchors, hazard_prng)
        if len(placements) < len(hazards):
            log.warning("Not enough anchors for every hazard", anchors=len(anchors), hazards=len(hazards))
        elegant_paths = hazard_prng.randint(1, MAX_ELEGANT_PATHS)

        grid = self._compose_grid(seeds, placements, regen_rate)

        if config.enable_ai_validation:
            result = self.validator.validate(
                grid,
                target_clean_percentage=config.min_solvability_percent,
                clear_radius=config.clear_radius,
                max_iterations=config.max_validation_iterations,
                compute_budget=config.validation_budget_seconds,
            )
            is_solvable = result.solvable
            achieved = result.achieved_clean_percentage
            if not is_solvable:
                log.warning(
                    "Level flagged for review",
                    achieved=round(achieved, 2),
                    target=config.min_solvability_percent,
                    budget_exceeded=result.budget_exceeded,
                )
        else:
            is_solvable = True
            achieved = None

        theme = self.get_world_theme(world_number)
        descriptor = LevelDescriptor(
            level_index=level_index,
            world_number=world_number,
            floor_number=floor_number,
            room_number=room_number,
            seeds=seeds,
            difficulty_multiplier=self.difficulty_multiplier(level_index),
            hazard_count=hazard_count,
            hazards=tuple(hazards),
            placements=tuple(placements),
            hazard_difficulty=self.catalog.level_difficulty(hazards),
            regen_rate=regen_rate,
            timer_seconds=self.timer_duration(world_number),
            is_solvable=is_solvable,
            achieved_clean_percentage=achieved,
            elegant_paths=elegant_paths,
            theme_name=theme.theme_name if theme else f"World {world_number}",
            is_key_level=level_index % KEY_LEVEL_INTERVAL == 0,
            is_story_level=level_index % STORY_LEVEL_INTERVAL == 0,
        )

        with self._count_lock:
            self._generation_count += 1

        log.info(
            "Generated level",
            world=world_number,
            floor=floor_number,
            room=room_number,
            hazards=hazard_count,
            timer=round(descriptor.timer_seconds, 2),
            solvable=is_solvable,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return descriptor

    def _sample_anchors(self, seeds: LevelSeed) -> List[SamplePoint]:
        return self.sampler.sample(
            seeds.sampling,
            self.config.min_hazard_distance,
            (self.config.window_width, self.config.window_height),
            self.config.poisson_attempts,
        )

    def _place_hazards(
        self,
        hazards: List[HazardType],
        anchors: List[SamplePoint],
        prng: AleaPRNG,
    ) -> List[HazardPlacement]:
        """Pair hazards with shuffled anchors; extra hazards stay unplaced."""
        order = list(range(len(anchors)))
        prng.shuffle(order)

        placements = []
        for hazard_type, anchor_index in zip(hazards, order):
            props = self.catalog.properties(hazard_type)
            placements.append(
                HazardPlacement(
                    type=hazard_type,
                    position=anchors[anchor_index],
                    size=prng.uniform(self.config.min_hazard_size, self.config.max_hazard_size),
                    clean_difficulty=props.clean_difficulty if props else 1.0,
                    regen_rate=props.regen_rate if props and props.is_regenerating else 0.0,
                )
            )
        return placements

    def _compose_grid(
        self,
        seeds: LevelSeed,
        placements: Tuple[HazardPlacement, ...],
        regen_rate: float,
    ) -> np.ndarray:
        config = self.config
        size = config.grid_size
        grid = self.noise_field.generate(
            seeds.noise,
            size,
            octaves=config.perlin_octaves,
            scale=config.noise_scale,
            persistence=config.perlin_persistence,
            lacunarity=config.perlin_lacunarity,
        )

        # Hazards are stamped as cones in window units, cell centres at i + 0.5
        cells_x = size / config.window_width
        cells_y = size / config.window_height
        centres = np.arange(size, dtype=np.float64) + 0.5
        for placement in placements:
            px, py = placement.position
            dx = (centres[None, :] - px * cells_x) / (placement.size * cells_x)
            dy = (centres[:, None] - py * cells_y) / (placement.size * cells_y)
            intensity = np.clip(1.0 - np.sqrt(dx * dx + dy * dy), 0.0, 1.0)
            np.maximum(grid, intensity, out=grid)

        if config.enable_regeneration and config.regrowth_warmup_steps > 0:
            automaton = RegrowthAutomaton(
                size,
                pool=self.pool,
                regen_rate=regen_rate,
                neighbor_threshold=config.neighbor_threshold,
                stop_threshold=config.regen_stop_threshold,
            )
            automaton.initialize(grid)
            for _ in range(config.regrowth_warmup_steps):
                automaton.update_step(config.regrowth_step_seconds)
            grid = automaton.current_grid()

        return grid

    def build_layout(self, descriptor: LevelDescriptor) -> LevelLayout:
        """Rebuild the initial hazard grid of a generated level."""
        anchors = self._sample_anchors(descriptor.seeds)
        grid = self._compose_grid(descriptor.seeds, descriptor.placements, descriptor.regen_rate)
        return LevelLayout(
            level_index=descriptor.level_index,
            grid=grid,
            anchors=anchors,
            placements=descriptor.placements,
        )

    # -- Batch & cache ------------------------------------------------------

    def pre_generate_world(
        self,
        world_number: int,
        cancel_event: Optional[threading.Event] = None,
        progress: Optional[Callable[[int, int], None]] = None,
    ) -> int:
        """
        Generate every level of a world, in order.

        Args:
            world_number: World to fill
            cancel_event: Stops the batch before the next level when set
            progress: Called with (levels done, levels total) after each level

        Returns:
            Number of levels processed
        """
        start_level, end_level = self.world_range(world_number)
        total = end_level - start_level + 1
        self.logger.info(
            "Pre-generating world", world=world_number, start=start_level, end=end_level
        )

        processed = 0
        for level_index in range(start_level, end_level + 1):
            if cancel_event is not None and cancel_event.is_set():
                self.logger.info("World pre-generation cancelled", world=world_number, processed=processed)
                return processed
            self.generate(level_index)
            processed += 1
            if progress is not None:
                progress(processed, total)

        self.logger.info("World pre-generation complete", world=world_number, processed=processed)
        return processed

    def clear_cache(self) -> int:
        """Drop all cached descriptors."""
        cleared = self._cache.clear()
        self.logger.info("Level cache cleared", cleared=cleared)
        return cleared
