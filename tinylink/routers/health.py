from fastapi import APIRouter, Depends
from tinylink.core.config import settings
from tinylink.db.Connection import database
from tinylink.db.store import LinkStore

router = APIRouter(tags=["health"])

# simple liveness
@router.get("/health")
def health():
    return {"status": "healthy", "service": settings.PROJECT_NAME}

# liveness in the dashboard's shape
@router.get("/healthz")
def healthz():
    return {"ok": True, "service": settings.PROJECT_NAME}

# readiness: check the record store
@router.get("/ready")
def readiness(store: LinkStore = Depends(database.get_store)):
    store_ok = database.verify_store_connection(store)
    details = {"store": "ok" if store_ok else "error"}
    return {"ready": store_ok, "details": details}
