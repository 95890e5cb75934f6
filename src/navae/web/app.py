"""
FastAPI application factory for the driver assistant.

Routes:
- /               -> live view page (Jinja2 template)
- /api/state      -> control state and active alerts (polled by the page)
- /api/detection/toggle, /api/camera/toggle -> the two controls
- /api/detections -> latest detection list
- /api/camera/live.mjpg -> annotated live stream
- /api/healthz    -> liveness
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from navae import __version__
from navae.models.config import Config
from navae.runtime.services import AssistantService, build_service
from .routes import api, pages


def create_app(config: Optional[Config] = None, service: Optional[AssistantService] = None) -> FastAPI:
    """Create the FastAPI app; the service starts and stops with it."""
    config = config or Config()
    service = service or build_service(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await service.start()
        try:
            yield
        finally:
            await service.shutdown()
            logging.info("Web app shut down")

    app = FastAPI(
        title="Navae AI Driver Assistant",
        version=__version__,
        description="Live hazard detection overlay with spoken alerts",
        lifespan=lifespan,
    )
    app.state.service = service

    app.include_router(api.router, prefix="/api")
    app.include_router(pages.router)

    return app
