import structlog
from django.db import connection
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

logger = structlog.get_logger(__name__)


@require_http_methods(["GET"])
def healthz(request):
    """Health check endpoint for container probes"""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return JsonResponse({"status": "healthy", "database": "connected"}, status=200)
    except Exception as exc:  # pragma: no cover - depends on a broken database
        logger.error("healthz.fail", error=str(exc))
        return JsonResponse({"status": "unhealthy"}, status=503)
