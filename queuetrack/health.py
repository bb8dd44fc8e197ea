# queuetrack/health.py
from fastapi import APIRouter

from queuetrack.config import get_settings

router = APIRouter()


@router.get("/health")
def health():
    return {"ok": True, "store_backend": get_settings().store_backend}


@router.get("/mcp/info")
def mcp_info():
    return {"status": "ok", "transport": "streamable-http", "path": "/mcp"}
