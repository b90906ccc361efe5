"""World theme table (10 worlds)."""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class WorldTheme:
    """Presentation metadata for a world."""

    world_number: int
    theme_name: str
    description: str
    ambient_color: Tuple[float, float, float]
    music_track: str
    start_level: int = 0
    end_level: int = 0


DEFAULT_WORLD_THEMES: List[WorldTheme] = [
    WorldTheme(1, "Suburban Homes", "Classic residential windows - where it all begins",
               (0.9, 0.95, 1.0), "Music/World1_Suburban"),
    WorldTheme(2, "Downtown Offices", "Corporate skyscrapers with city views",
               (0.85, 0.9, 1.0), "Music/World2_Office"),
    WorldTheme(3, "Historic District", "Stained glass, ornate frames, centuries of grime",
               (1.0, 0.95, 0.85), "Music/World3_Historic"),
    WorldTheme(4, "Industrial Zone", "Factories, warehouses, heavy rust and oil",
               (0.8, 0.75, 0.7), "Music/World4_Industrial"),
    WorldTheme(5, "Coastal Resort", "Beach hotels, salt spray, seagull presents",
               (0.85, 0.95, 1.0), "Music/World5_Coastal"),
    WorldTheme(6, "Urban Decay", "Abandoned buildings, graffiti, overgrown",
               (0.7, 0.75, 0.7), "Music/World6_Decay"),
    WorldTheme(7, "Mountain Lodge", "Alpine chalets, frost patterns, breathtaking views",
               (0.9, 0.95, 1.0), "Music/World7_Mountain"),
    WorldTheme(8, "Cyberpunk Megacity", "Neon-lit skyscrapers, nano-bot infestations, acid rain",
               (0.8, 0.85, 1.0), "Music/World8_Cyberpunk"),
    WorldTheme(9, "Space Station", "Zero-G cleaning, gyroscope gestures, cosmic vistas",
               (0.7, 0.8, 0.9), "Music/World9_Space"),
    WorldTheme(10, "Formby's Mansion", "The final challenge - George's legendary estate",
               (1.0, 0.98, 0.95), "Music/World10_Mansion"),
]


def build_world_themes(
    levels_per_world: int,
    theme_names: Optional[Sequence[str]] = None,
) -> List[WorldTheme]:
    """
    Build the theme table for the configured world size.

    Non-blank names in ``theme_names`` override the defaults position by
    position; level ranges are recomputed from ``levels_per_world``.
    """
    themes = []
    for i, theme in enumerate(DEFAULT_WORLD_THEMES):
        name = theme.theme_name
        if theme_names is not None and i < len(theme_names) and theme_names[i].strip():
            name = theme_names[i]
        themes.append(
            replace(
                theme,
                theme_name=name,
                start_level=(theme.world_number - 1) * levels_per_world + 1,
                end_level=theme.world_number * levels_per_world,
            )
        )
    return themes
