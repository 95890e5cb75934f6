"""
Page routes: the single-page driver view.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

# Display order on the info line
HAZARD_LABELS = ["People", "Cars", "Trucks", "Buses", "Bicycles", "Motorcycles"]


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    """Live view with alert banners, status line and controls."""
    service = request.app.state.service
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": "Navae AI Driver Assistant",
            "hazard_labels": HAZARD_LABELS,
            "cooldown_s": service.ctx.alerts.policy.cooldown_ms / 1000.0,
            "stream_fps": service.ctx.config.web.stream_fps,
        },
    )
