"""
Core level generation functionality.
"""

from .alea_prng import AleaPRNG
from .noise_field import NoiseField
from .blue_noise import BlueNoiseSampler
from .regrowth import RegrowthAutomaton, regrowth_step
from .solvability import SolvabilityValidator, ValidationResult
from .hazards import HazardCatalog, HazardPlacement
from .level_cache import LevelCache
from .level_generator import LevelDescriptor, LevelLayout, LevelOrchestrator, LevelSeed

__all__ = ['AleaPRNG', 'NoiseField', 'BlueNoiseSampler',
           'RegrowthAutomaton', 'regrowth_step',
           'SolvabilityValidator', 'ValidationResult',
           'HazardCatalog', 'HazardPlacement', 'LevelCache',
           'LevelDescriptor', 'LevelLayout', 'LevelOrchestrator', 'LevelSeed']
