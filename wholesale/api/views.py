"""
GraphQL endpoint and CSV report download with structured logging.
"""
import json
import logging
from uuid import uuid4

from ariadne import graphql_sync
from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from wholesale.api.middleware import ErrorHandler
from wholesale.api.schema import schema
from wholesale.domain.errors import InvalidInputError
from wholesale.infra.csv_export import render_report_csv, report_filename
from wholesale.infra.pii_masker import mask_pii_in_dict
from wholesale.services import ReportService

logger = logging.getLogger(__name__)


def _session_key(request) -> str:
    return request.headers.get("X-Session-ID") or settings.WHOLESALE_DEFAULT_SESSION


class WholesaleGraphQLView:
    """GraphQL view bound to one order session per request."""

    def dispatch(self, request, *args, **kwargs):
        """Handle GraphQL request."""
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        session_key = _session_key(request)
        user_id = request.headers.get("X-User-ID")

        log_data = {
            "request_id": request_id,
            "session_key": session_key,
            "user_id": user_id,
            "operation": "graphql",
        }
        logger.info("graphql_request", extra=mask_pii_in_dict(log_data))

        try:
            response = self._process_graphql_request(request, session_key, user_id)
        except Exception as e:
            response = ErrorHandler.handle_error(e)
            logger.error(
                "graphql_error",
                extra={
                    "request_id": request_id,
                    "session_key": session_key,
                    "error": str(e),
                }
            )

        logger.info(
            "graphql_response",
            extra={
                "request_id": request_id,
                "session_key": session_key,
                "status": response.status_code,
            }
        )
        return response

    def _process_graphql_request(self, request, session_key, user_id):
        if request.method == "GET":
            return JsonResponse({"message": "GraphQL endpoint. Use POST for queries."})

        try:
            data = json.loads(request.body)
        except json.JSONDecodeError:
            return JsonResponse(
                {"error": {"code": "VALIDATION_ERROR", "message": "Invalid JSON"}},
                status=400
            )

        success, result = graphql_sync(
            schema,
            data,
            context_value={
                "request": request,
                "session_key": session_key,
                "user_id": user_id,
            },
            error_formatter=ErrorHandler.format_graphql_error,
            debug=settings.DEBUG,
        )

        status_code = 200 if success else 400
        return JsonResponse(result, status=status_code)


def _int_param(request, name: str) -> int | None:
    raw = request.GET.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidInputError(f"{name} must be an integer, got {raw!r}")


@csrf_exempt
@require_http_methods(["GET", "POST"])
def graphql_view(request):
    """GraphQL endpoint."""
    view = WholesaleGraphQLView()
    return view.dispatch(request)


@require_http_methods(["GET"])
def report_csv_view(request):
    """Monthly sales report as a CSV attachment."""
    session_key = _session_key(request)
    try:
        report = ReportService().monthly_report(
            session_key,
            year=_int_param(request, "year"),
            month=_int_param(request, "month"),
        )
    except Exception as e:
        return ErrorHandler.handle_error(e)

    response = HttpResponse(render_report_csv(report), content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="{report_filename(report)}"'
    logger.info(
        "report_exported",
        extra={"session_key": session_key, "operation": "export_report"},
    )
    return response
