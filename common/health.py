"""
common.health
~~~~~~~~~~~~~
GET /health/ – liveness + readiness check.

Returns:
    200  {"status": "ok", "db": "ok", "schools": <n>}
    503  {"status": "degraded", "db": "error: <msg>"}
"""
import structlog
from django.db import DatabaseError, connection
from django.http import JsonResponse

from apps.registry.models import School

logger = structlog.get_logger(__name__)


def health_check(request):
    """Report database connectivity and whether reference data is loaded."""
    try:
        connection.ensure_connection()
        school_count = School.objects.filter(is_active=True).count()
    except DatabaseError as exc:
        logger.error("health_check_db_failure", error=str(exc))
        return JsonResponse({"status": "degraded", "db": f"error: {exc}"}, status=503)

    return JsonResponse({"status": "ok", "db": "ok", "schools": school_count})
