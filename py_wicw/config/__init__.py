"""
Configuration modules for level generation.
"""

from .config import Settings, get_settings
from .hazard_catalog import DEFAULT_HAZARD_CATALOG, HazardProperties, HazardType
from .level_config import LevelConfig
from .world_themes import DEFAULT_WORLD_THEMES, WorldTheme, build_world_themes

__all__ = ['Settings', 'get_settings', 'LevelConfig',
           'HazardType', 'HazardProperties', 'DEFAULT_HAZARD_CATALOG',
           'WorldTheme', 'DEFAULT_WORLD_THEMES', 'build_world_themes']
