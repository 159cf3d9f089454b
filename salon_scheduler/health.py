# salon_scheduler/health.py
from fastapi import APIRouter

from salon_scheduler.config import get_settings
from salon_scheduler.services.store import get_store

router = APIRouter()

@router.get("/health")
def health():
    store = get_store()
    return {
        "status": "ok",
        "app": get_settings().app_name,
        "active_professionals": len(store.master_data.iter_professionals(active_only=True)),
    }

@router.get("/mcp/info")
def mcp_info():
    return {"status": "ok", "transport": "streamable-http", "path": "/mcp", "server": "salon_scheduler"}
