"""
Graticule API Endpoints
Meridian/parallel grid lines for a map view, plus projection metadata
"""
from fastapi import APIRouter, HTTPException, status, Query
from pydantic import BaseModel
from typing import Optional, Dict, Any, List
import logging

from pipelines.mapping.graticule import GraticuleConfigurationError, GraticuleInvariantError
from services.graticule import get_graticule_service

logger = logging.getLogger(__name__)
router = APIRouter()


class GraticuleLinesRequest(BaseModel):
    """View to draw a graticule over; extent, center and resolution are in view units"""
    extent: List[float]
    resolution: float
    view_projection: str = "EPSG:3857"
    center: Optional[List[float]] = None
    pixel_ratio: float = 1.0
    # Graticule configuration; omitted fields use the server defaults
    projection: Optional[str] = None
    intervals: Optional[List[float]] = None
    target_size: Optional[float] = None
    max_lines: Optional[int] = None
    ground_model: Optional[str] = None


@router.post("/lines")
def get_graticule_lines(
    body: GraticuleLinesRequest,
) -> Dict[str, Any]:
    try:
        logger.info(f"📥 Graticule request: view={body.view_projection} "
                    f"graticule={body.projection or 'default'} resolution={body.resolution}")
        return get_graticule_service().compute(body.model_dump())
    except GraticuleConfigurationError as e:
        logger.warning(f"⚠️ Rejected graticule request: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GraticuleInvariantError as e:
        logger.error(f"💥 Graticule computation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Graticule computation failed: {str(e)}"
        )


@router.get("/intervals")
def get_graticule_intervals(
    projection: Optional[str] = Query(None, description="Graticule projection code"),
) -> Dict[str, Any]:
    try:
        return get_graticule_service().get_intervals(projection)
    except GraticuleConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/projections/{code:path}")
def get_projection_info(
    code: str,
) -> Dict[str, Any]:
    try:
        return get_graticule_service().describe_projection(code)
    except GraticuleConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
