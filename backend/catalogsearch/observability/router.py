"""Metrics, health and readiness endpoints"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_object_storage
from ..domain.storage import ObjectStoragePort
from .health import HealthReport, HealthStatus, check_database_health, check_object_storage_health

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get(
    "/health",
    summary="Health check endpoint",
    description="Database and object storage status. 503 only when the database is down.",
)
def health_check(
    db: Session = Depends(get_db),
    storage: ObjectStoragePort = Depends(get_object_storage),
):
    report = HealthReport(
        components={
            "database": check_database_health(db),
            "object_storage": check_object_storage_health(storage),
        }
    )
    return JSONResponse(content=report.to_dict(), status_code=report.http_status)


@router.get("/ready", summary="Readiness check endpoint")
def readiness_check(db: Session = Depends(get_db)):
    """Ready once the database, which also holds the vectors, answers."""
    database = check_database_health(db)
    if database.status != HealthStatus.HEALTHY:
        return JSONResponse(content={"status": "not_ready", "message": database.message}, status_code=503)
    return {"status": "ready", "message": "Accepting search and chat traffic"}
