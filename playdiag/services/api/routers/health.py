# playdiag/services/api/routers/health.py
from __future__ import annotations
import shutil

from fastapi import APIRouter

from playdiag.common.settings import get_settings

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Liveness plus whether the probe/decode binaries resolve on this host."""
    s = get_settings()
    tools = {
        "ffprobe": shutil.which(s.ffprobe.bin) is not None,
        "ffmpeg": shutil.which(s.ffmpeg.bin) is not None,
    }
    return {
        "ok": True,
        "app": s.app_name,
        "env": s.app_env,
        "tools": tools,
    }
