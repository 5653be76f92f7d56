from fastapi import APIRouter, Query, Response
from typing import Optional
from services.logging_service import get_ring_handler, LOG_FILE
import os
import io
import zipfile
import json
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/recent")
def get_recent_logs(limit: int = Query(500, ge=1, le=5000), level: Optional[str] = None):
    ring = get_ring_handler()
    return {"logs": ring.get_recent(limit, min_level=level)}


@router.get("/download")
def download_logs():
    buf = io.BytesIO()
    base = os.path.basename(LOG_FILE)
    directory = os.path.dirname(LOG_FILE)
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        # Rotating files graticule.log, graticule.log.1, ...
        if os.path.isdir(directory):
            for name in os.listdir(directory):
                if name.startswith(os.path.splitext(base)[0]):
                    path = os.path.join(directory, name)
                    if os.path.isfile(path):
                        zf.write(path, arcname=name)
        else:
            logger.debug(f"📁 Log directory {directory} does not exist yet")

        ring_json = json.dumps({"logs": get_ring_handler().get_recent(2000)}, indent=2).encode("utf-8")
        zf.writestr("recent_ring_buffer.json", ring_json)

    headers = {"Content-Disposition": 'attachment; filename="graticule-logs.zip"'}
    return Response(content=buf.getvalue(), media_type="application/zip", headers=headers)
