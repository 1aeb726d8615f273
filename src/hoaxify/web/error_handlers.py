import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from hoaxify.errors import AccessDeniedError, AuthenticationError, MailDeliveryError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, validation_errors: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content: dict[str, object] = {"message": message}
    if error_type:
        content["type"] = error_type
    if validation_errors:
        content["validation_errors"] = validation_errors
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    validation_errors = None
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
        validation_errors = exc.field_errors
    elif isinstance(exc, MailDeliveryError):
        status_code = 502
        error_type = "mail_delivery_error"
    else:
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code, str(exc), error_type, validation_errors)


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", path=request.url.path, error_class=type(exc).__name__)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
