"""Error rendering for the connector HTTP surface."""
from typing import Any, Dict, Tuple
import logging

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from src.domain.errors import ConnectorError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Tuple[int, Dict[str, Any]]:
        context = context or {}
        operation = context.get("operation", "request")
        if isinstance(exc, ConnectorError):
            logger.warning("%s (%s) during %s: %s", type(exc).__name__, exc.code, operation, exc.message)
            return exc.http_status, exc.to_dict()

        if isinstance(exc, (RequestValidationError, PydanticValidationError)):
            errors = exc.errors()
            logger.warning("Malformed payload during %s: %s", operation, errors)
            return 400, {"statusCode": "3100", "message": f"Malformed request: {len(errors)} validation error(s)"}

        logger.error("Unhandled exception in connector: %s", exc, exc_info=True)
        return 500, {
            "statusCode": "2001",
            "message": "An internal error occurred while processing the request.",
        }
