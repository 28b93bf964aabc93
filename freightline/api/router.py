"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from datetime import datetime

from freightline.core.exceptions import FreightlineError, NotFound, DuplicateEntry

from freightline.api.master import master_router
from freightline.api.inventory import inventory_router
from freightline.api.shipments import shipments_router
from freightline.api.queue import queue_router
from freightline.api.financial import financial_router

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(master_router)
api_router.include_router(inventory_router)
api_router.include_router(shipments_router)
api_router.include_router(queue_router)
api_router.include_router(financial_router)

# ===================== HEALTH & STATUS =====================

@api_router.get("/status")
async def api_status():
    return {"status": "ok", "version": "1.0.0", "timestamp": datetime.now().isoformat()}

# ===================== ERRORS =====================

ERROR_STATUS_CODES = {
    NotFound: 404,
    DuplicateEntry: 409,
}

async def domain_error_handler(request: Request, exc: FreightlineError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        400
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})

def register_error_handlers(app: FastAPI):
    app.add_exception_handler(FreightlineError, domain_error_handler)
