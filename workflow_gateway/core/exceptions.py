"""Error taxonomy shared by the API, the services and the execution engine.

Each error carries the HTTP status it is reported with; the FastAPI
exception handlers in ``workflow_gateway.main`` turn them into the
``{"success": false, "error": ...}`` envelope.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

from workflow_gateway.core.logging import get_logger

logger = get_logger("errors")


class AppError(Exception):
    """Base app exception."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MalformedCredentialError(AppError):
    """Authorization header missing or not of the form 'Bearer <token>'."""

    status_code = 401
    default_message = "Invalid authorization header"


class InvalidCredentialError(AppError):
    """Token signature, expiry or payload rejected."""

    status_code = 401
    default_message = "Invalid or expired token"


class BadInputError(AppError):
    """Missing or invalid fields, bad enum values, non-object overrides."""

    status_code = 400
    default_message = "Invalid request body"


class ForbiddenError(AppError):
    """Access policy denial."""

    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Workflow not found"


class InfrastructureError(AppError):
    """Store fault. The message stays generic; details only go to the log."""

    status_code = 500


class WorkflowExecutionError(AppError):
    """Transport-level failure of the outbound workflow call."""

    status_code = 500
    default_message = "Workflow execution failed"


class WorkflowTimeoutError(WorkflowExecutionError):
    default_message = "Workflow execution timed out"


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as a generic InfrastructureError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"{message}: {e}")
        raise InfrastructureError(message) from e
