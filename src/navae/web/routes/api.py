from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Optional

import cv2
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from navae.alerts.policy import HAZARD_CLASSES
from navae.runtime.services import AssistantService
from ..api_models import DetectionsResponse, HealthResponse, StateResponse

router = APIRouter()


def get_service(request: Request) -> AssistantService:
    return request.app.state.service


def build_state(service: AssistantService) -> Dict[str, Any]:
    """
    Snapshot of control state and active alerts for the page.
    Reading the alerts also drops any whose display time has passed.
    """
    ctx = service.ctx
    control = ctx.control
    return {
        "status": control.status,
        "model_status": control.model_status.value,
        "detecting": control.detecting,
        "can_toggle_detection": control.can_toggle_detection,
        "facing": control.facing.value,
        "mirrored": control.mirrored,
        "camera_ready": ctx.feed.is_ready,
        "alerts": [a.to_dict() for a in ctx.alerts.active()],
        "hazard_classes": sorted(HAZARD_CLASSES),
        "cooldown_s": ctx.alerts.policy.cooldown_ms / 1000.0,
        "timestamp": time.time(),
    }


@router.get("/state", response_model=StateResponse)
async def get_state(service: AssistantService = Depends(get_service)):
    return build_state(service)


@router.post("/detection/toggle", response_model=StateResponse)
async def post_toggle_detection(service: AssistantService = Depends(get_service)):
    control = service.control
    if not control.can_toggle_detection:
        raise HTTPException(
            status_code=409,
            detail=f"Detection unavailable: model is {control.model_status.value}",
        )
    await service.toggle_detection()
    return build_state(service)


@router.post("/camera/toggle", response_model=StateResponse)
async def post_toggle_camera(service: AssistantService = Depends(get_service)):
    service.toggle_camera()
    return build_state(service)


@router.get("/detections", response_model=DetectionsResponse)
async def get_detections(service: AssistantService = Depends(get_service)):
    detections = service.ctx.latest_detections
    return {"count": len(detections), "detections": [d.to_dict() for d in detections]}


@router.get("/healthz", response_model=HealthResponse)
async def healthz(service: AssistantService = Depends(get_service)):
    ctx = service.ctx
    return {
        "status": "ok",
        "uptime_seconds": int(time.time() - ctx.started_at),
        "camera_ready": ctx.feed.is_ready,
        "model_status": ctx.control.model_status.value,
        "poller_running": service.poller.running,
        "poller_ticks": service.poller.stats.ticks,
        "poller_failures": service.poller.stats.failures,
    }


@router.get("/camera/live.mjpg")
async def camera_live_stream(fps: Optional[int] = None, service: AssistantService = Depends(get_service)):
    """
    Stream MJPEG frames from the camera feed with the detection overlay on top.
    """
    fps = max(1, min(30, int(fps or service.ctx.config.web.stream_fps)))
    delay = 1.0 / fps

    async def gen():
        while True:
            frame = service.ctx.composite_frame()
            if frame is None:
                await asyncio.sleep(0.1)
                continue

            ok, buf = cv2.imencode(".jpg", frame)
            if not ok:
                await asyncio.sleep(delay)
                continue
            jpg = buf.tobytes()
            yield b"--frame\r\nContent-Type: image/jpeg\r\n\r\n" + jpg + b"\r\n"
            await asyncio.sleep(delay)

    return StreamingResponse(
        gen(),
        media_type="multipart/x-mixed-replace; boundary=frame",
        headers={"Cache-Control": "no-store"},
    )
