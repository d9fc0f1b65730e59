"""Liveness probes for the backing services.

The catalog and the pgvector documents table share one PostgreSQL database,
so a single database probe covers both. Object storage only matters for
image uploads; the service can still search while the bucket is down.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from ..domain.storage import ObjectStoragePort
from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Result of one probe."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "message": self.message, "latency_ms": self.latency_ms}


def probe(label: str, check: Callable[[], Any]) -> ComponentHealth:
    """Run a check, timing it and turning any exception into UNHEALTHY."""
    start = time.perf_counter()
    try:
        check()
    except Exception as e:
        logger.error(f"{label} health check failed: {e}", exc_info=True)
        return ComponentHealth(status=HealthStatus.UNHEALTHY, message=f"{label} error: {e}")
    latency_ms = round((time.perf_counter() - start) * 1000, 2)
    return ComponentHealth(status=HealthStatus.HEALTHY, message=f"{label} OK", latency_ms=latency_ms)


def check_database_health(db: Session) -> ComponentHealth:
    return probe("Database", lambda: db.execute(text("SELECT 1")))


def check_object_storage_health(storage: ObjectStoragePort) -> ComponentHealth:
    return probe("Object storage", storage.check_bucket)


@dataclass
class HealthReport:
    """Aggregated probe results.

    The database is critical. Any other failing component only degrades the
    service, since search and chat keep working without image uploads.
    """
    components: Dict[str, ComponentHealth] = field(default_factory=dict)
    critical: tuple = ("database",)

    @property
    def status(self) -> HealthStatus:
        failing = [name for name, c in self.components.items() if c.status != HealthStatus.HEALTHY]
        if not failing:
            return HealthStatus.HEALTHY
        if any(name in self.critical for name in failing):
            return HealthStatus.UNHEALTHY
        return HealthStatus.DEGRADED

    @property
    def http_status(self) -> int:
        return 503 if self.status == HealthStatus.UNHEALTHY else 200

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "components": {name: c.to_dict() for name, c in self.components.items()},
        }
