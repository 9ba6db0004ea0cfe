"""
Health check and monitoring endpoints for production.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from fieldsales import calendar_store, leads_store
from fieldsales.config import config

router = APIRouter(tags=["Health & Monitoring"])


# GET /health
# Gets: nothing
# Returns: {status, service, version}
# Example:
#   curl http://localhost:8000/health
@router.get("/health")
async def health_check():
    """
    Basic health check - returns 200 if service is running.
    Use this for liveness checks.
    """
    return {
        "status": "healthy",
        "service": "fieldsales-crm",
        "version": "1.0.0"
    }


# GET /health/ready
# Gets: nothing
# Returns: readiness checks for the scheduling configuration and stores; 503 when not ready
# Example:
#   curl http://localhost:8000/health/ready
@router.get("/health/ready")
async def readiness_check():
    """
    Readiness check - verifies the engine can take bookings.
    Use this for Kubernetes readiness checks.

    Checks:
    - At least one time slot is configured
    - The daily cap and service radius are positive
    - The staff roster is not empty
    """
    checks = {
        "time_slots": len(config.TIME_SLOTS) > 0,
        "scheduling_rules": config.DAILY_VISIT_CAP > 0 and config.MAX_DISTANCE_KM > 0,
        "staff_roster": len(calendar_store.list_staff()) > 0,
        "ready": False,
    }
    checks["ready"] = all(v for k, v in checks.items() if k != "ready")
    return JSONResponse(status_code=200 if checks["ready"] else 503, content=checks)


# GET /health/info
# Gets: nothing
# Returns: service configuration summary
# Example:
#   curl http://localhost:8000/health/info
@router.get("/health/info")
async def system_info():
    """
    System information and configuration status.
    """
    return {
        "service": "fieldsales-crm",
        "version": "1.0.0",
        "configuration": {
            "office": {"latitude": config.OFFICE_LATITUDE, "longitude": config.OFFICE_LONGITUDE},
            "max_distance_km": config.MAX_DISTANCE_KM,
            "time_slots": config.TIME_SLOTS,
            "daily_visit_cap": config.DAILY_VISIT_CAP,
            "planner_horizon_days": config.PLANNER_HORIZON_DAYS,
            "client_neglect_days": config.CLIENT_NEGLECT_DAYS,
            "debug_mode": config.DEBUG
        },
        "stats": {
            "staff": len(calendar_store.list_staff()),
            "leads": len(leads_store.list_leads()),
            "visits": len(calendar_store.list_visits()),
        }
    }
