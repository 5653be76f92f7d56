"""
Central API Router
Combines all API endpoints into a single router for main.py
"""
from fastapi import APIRouter
from api.endpoints import graticule
from api import logs

# Create the main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(graticule.router, prefix="/api/graticule", tags=["graticule"])
api_router.include_router(logs.router)


# Add a root endpoint for API discovery
@api_router.get("/api")
async def api_root():
    """API root endpoint for discovery"""
    return {
        "message": "Graticule API v1.0",
        "documentation": "/docs",
        "endpoints": {
            "lines": "/api/graticule/lines - Meridians and parallels for a map view (GeoJSON)",
            "intervals": "/api/graticule/intervals - Interval table for a graticule projection",
            "projections": "/api/graticule/projections/{code} - Extent and units of a projection",
            "logs": "/logs/recent - Recent log records",
        }
    }
