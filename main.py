"""FastAPI entry point for the Optima artifact stream service."""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Optima Stream Core",
    description="Artifact delta reducer and video scene timing service",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Register routers ────────────────────────────────────────
from api.artifact import router as artifact_router  # noqa: E402
from api.health import router as health_router  # noqa: E402
from api.video_timing import router as video_timing_router  # noqa: E402

app.include_router(health_router)
app.include_router(video_timing_router)
app.include_router(artifact_router)


if __name__ == "__main__":
    logger.info("Starting on port %d (debug=%s)", settings.service_port, settings.debug)
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.service_port,
        reload=settings.debug,
    )
