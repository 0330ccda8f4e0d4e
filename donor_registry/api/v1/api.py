from fastapi import APIRouter
from donor_registry.api.v1.endpoints import dashboard, donors, exports

api_router = APIRouter()

api_router.include_router(donors.router, prefix="/donors", tags=["donors"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(exports.router, prefix="/export", tags=["export"])


@api_router.get("/health", tags=["health"])
def api_health():
    return {"ok": True}
