"""FastAPI service exposing level descriptors to the gameplay layer."""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import structlog
from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel

from ..bootstrap import GenerationServices, build_services

logger = structlog.get_logger()


# Request/Response models
class PlacementResponse(BaseModel):
    """A hazard anchored on the window."""

    type: str
    position: Tuple[float, float]
    size: float
    clean_difficulty: float
    regen_rate: float


class SeedResponse(BaseModel):
    noise: int
    sampling: int
    hazard: int


class LevelResponse(BaseModel):
    """Generated level descriptor."""

    level_index: int
    world_number: int
    floor_number: int
    room_number: int
    seeds: SeedResponse
    difficulty_multiplier: float
    hazard_count: int
    hazards: List[str]
    placements: List[PlacementResponse]
    hazard_difficulty: float
    regen_rate: float
    timer_seconds: float
    is_solvable: bool
    achieved_clean_percentage: Optional[float] = None
    elegant_paths: int
    theme_name: str
    is_key_level: bool
    is_story_level: bool


class ThemeResponse(BaseModel):
    """World theme metadata."""

    world_number: int
    theme_name: str
    description: str
    ambient_color: Tuple[float, float, float]
    music_track: str
    start_level: int
    end_level: int


class JobResponse(BaseModel):
    """Pre-generation job status."""

    job_id: str
    world_number: int
    status: str
    processed: int
    total: int
    progress_percent: int
    message: str
    error_message: Optional[str] = None


@dataclass
class PreGenerationJob:
    job_id: str
    world_number: int
    total: int
    status: str = "pending"
    processed: int = 0
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def to_response(self) -> JobResponse:
        percent = int(self.processed * 100 / self.total) if self.total else 100
        return JobResponse(
            job_id=self.job_id,
            world_number=self.world_number,
            status=self.status,
            processed=self.processed,
            total=self.total,
            progress_percent=percent,
            message=f"Job {self.status}",
            error_message=self.error_message,
        )


def create_app(services: Optional[GenerationServices] = None) -> FastAPI:
    """
    Build the API around a set of generation services.

    When ``services`` is omitted they are built from the environment at
    startup and closed at shutdown.
    """
    app = FastAPI(
        title="Window Level Generator API",
        description="Procedural level generation and solvability validation",
        version="0.1.0",
    )
    app.state.services = services
    app.state.owns_services = services is None
    jobs: Dict[str, PreGenerationJob] = {}
    jobs_lock = threading.Lock()

    def orchestrator():
        if app.state.services is None:
            raise HTTPException(status_code=503, detail="Generation services not ready")
        return app.state.services.orchestrator

    def find_job(job_id: str) -> PreGenerationJob:
        with jobs_lock:
            job = jobs.get(job_id)
        if job is None:
            raise HTTPException(status_code=404, detail="Job not found")
        return job

    def run_pre_generation(job: PreGenerationJob) -> None:
        """Background task filling a world's levels."""
        logger.info("Starting world pre-generation", job_id=job.job_id, world=job.world_number)
        job.status = "running"

        def progress(done: int, total: int) -> None:
            job.processed = done

        try:
            orchestrator().pre_generate_world(
                job.world_number, cancel_event=job.cancel_event, progress=progress
            )
        except Exception as e:
            logger.error("World pre-generation failed", job_id=job.job_id, error=str(e))
            job.status = "failed"
            job.error_message = str(e)
            return

        job.status = "cancelled" if job.cancel_event.is_set() and job.processed < job.total else "completed"
        logger.info("World pre-generation finished", job_id=job.job_id, status=job.status)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting Window Level Generator API")
        if app.state.services is None:
            app.state.services = build_services(setup_logging=True)
        logger.info("API startup complete")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Window Level Generator API")
        for job in list(jobs.values()):
            job.cancel_event.set()
        if app.state.owns_services and app.state.services is not None:
            app.state.services.close()

    @app.get("/")
    async def root():
        return {
            "message": "Window Level Generator API",
            "version": "0.1.0",
            "status": "running",
        }

    @app.get("/health")
    async def health_check():
        levels = orchestrator()
        return {
            "status": "healthy",
            "cached_levels": levels.cache_size,
            "generated_levels": levels.generation_count,
        }

    @app.get("/levels/{level_index}", response_model=LevelResponse)
    def get_level(level_index: int):
        """Generate (or fetch from cache) a level descriptor."""
        try:
            descriptor = orchestrator().generate(level_index)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return descriptor.to_dict()

    @app.get("/worlds/{world_number}/theme", response_model=ThemeResponse)
    async def get_world_theme(world_number: int):
        theme = orchestrator().get_world_theme(world_number)
        if theme is None:
            raise HTTPException(status_code=404, detail="World not found")
        return ThemeResponse(
            world_number=theme.world_number,
            theme_name=theme.theme_name,
            description=theme.description,
            ambient_color=theme.ambient_color,
            music_track=theme.music_track,
            start_level=theme.start_level,
            end_level=theme.end_level,
        )

    @app.post("/worlds/{world_number}/pregenerate", response_model=JobResponse)
    async def pre_generate_world(world_number: int, background_tasks: BackgroundTasks):
        """
        Start a pre-generation job for a whole world.

        Returns immediately with job ID. Use /jobs/{job_id} to check status.
        """
        try:
            start_level, end_level = orchestrator().world_range(world_number)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))

        job = PreGenerationJob(
            job_id=str(uuid.uuid4()),
            world_number=world_number,
            total=end_level - start_level + 1,
        )
        with jobs_lock:
            jobs[job.job_id] = job

        background_tasks.add_task(run_pre_generation, job)
        logger.info("World pre-generation requested", job_id=job.job_id, world=world_number)
        return job.to_response()

    @app.get("/jobs/{job_id}", response_model=JobResponse)
    async def get_job_status(job_id: str):
        return find_job(job_id).to_response()

    @app.post("/jobs/{job_id}/cancel", response_model=JobResponse)
    async def cancel_job(job_id: str):
        job = find_job(job_id)
        job.cancel_event.set()
        if job.status == "pending":
            job.status = "cancelled"
        logger.info("Pre-generation cancel requested", job_id=job_id)
        return job.to_response()

    @app.delete("/cache")
    async def clear_cache():
        return {"cleared": orchestrator().clear_cache()}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from ..config.config import get_settings

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
