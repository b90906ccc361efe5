"""
Startup wiring for the generation services.

Everything is constructed explicitly here and handed down by reference;
there is no global registry.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from .config.config import Settings, get_settings
from .config.level_config import LevelConfig
from .core.hazards import HazardCatalog
from .core.level_generator import LevelOrchestrator
from .utils.logging import configure_logging
from .utils.parallel import WorkerPool


@dataclass
class GenerationServices:
    """Owned service objects for one process."""

    settings: Settings
    config: LevelConfig
    pool: WorkerPool
    catalog: HazardCatalog
    orchestrator: LevelOrchestrator

    def close(self) -> None:
        self.pool.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def build_services(
    settings: Optional[Settings] = None,
    config: Optional[LevelConfig] = None,
    setup_logging: bool = False,
) -> GenerationServices:
    """
    Build the worker pool, hazard catalog and orchestrator.

    Args:
        settings: Process settings, read from the environment when omitted
        config: Level config, loaded from ``settings.level_config_path`` when omitted
        setup_logging: Configure structlog from the settings first
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(settings.log_level, settings.log_format)

    config = config or LevelConfig.load(settings.level_config_path)
    pool = WorkerPool(settings.worker_count)
    catalog = HazardCatalog(config.hazard_catalog)
    orchestrator = LevelOrchestrator(
        config=config,
        catalog=catalog,
        pool=pool,
        logger=structlog.get_logger("py_wicw.levels"),
    )

    structlog.get_logger().info(
        "Generation services ready",
        workers=settings.worker_count,
        worlds=config.total_worlds,
        levels_per_world=config.levels_per_world,
        hazards=len(catalog),
    )
    return GenerationServices(
        settings=settings,
        config=config,
        pool=pool,
        catalog=catalog,
        orchestrator=orchestrator,
    )
