"""
Error mapping for API responses.
"""
import logging

from django.http import JsonResponse
from graphql import GraphQLError

from wholesale.domain.errors import OrderingError

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Error handler for API responses."""

    ERROR_CODES = {
        "VALIDATION_ERROR": 400,
        "NOT_FOUND": 404,
        "INVALID_STATE": 400,
        "INVALID_SNAPSHOT": 400,
        "INTERNAL_ERROR": 500,
    }

    @classmethod
    def error_body(cls, error: Exception) -> tuple[dict, int]:
        """Return ({"code", "message"}, http status) for an exception."""
        if isinstance(error, OrderingError):
            return (
                {"code": error.code, "message": error.message},
                cls.ERROR_CODES.get(error.code, 400),
            )

        logger.error(
            "unexpected_error",
            extra={
                "operation": type(error).__name__,
                "error": str(error),
            },
            exc_info=error,
        )
        return (
            {"code": "INTERNAL_ERROR", "message": "An internal error occurred"},
            cls.ERROR_CODES["INTERNAL_ERROR"],
        )

    @classmethod
    def handle_error(cls, error: Exception) -> JsonResponse:
        """Handle error and return JSON response."""
        body, status_code = cls.error_body(error)
        return JsonResponse({"error": body}, status=status_code)

    @classmethod
    def format_graphql_error(cls, error: GraphQLError, debug: bool = False) -> dict:
        """Ariadne error formatter adding ``extensions.code``.

        Errors raised before any resolver runs (unknown fields, scalar values
        that fail to parse) and plain ``ValueError``s keep the GraphQL message
        and are reported as ``VALIDATION_ERROR``.
        """
        formatted = error.formatted
        extensions = formatted.setdefault("extensions", {})
        original = error.original_error
        if original is None or (
            isinstance(original, ValueError) and not isinstance(original, OrderingError)
        ):
            extensions["code"] = "VALIDATION_ERROR"
            return formatted

        body, _ = cls.error_body(original)
        formatted["message"] = body["message"]
        extensions["code"] = body["code"]
        return formatted
