"""Shared API dependencies."""

from typing import Callable, Type, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError

from workflow_gateway.config import Settings
from workflow_gateway.core.exceptions import BadInputError
from workflow_gateway.core.security import get_current_actor
from workflow_gateway.schemas.auth import Actor

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def format_validation_error(exc: ValidationError) -> str:
    """Collapse pydantic errors into one client-facing message."""
    errors = exc.errors()
    missing = [".".join(str(p) for p in e["loc"]) for e in errors if e["type"] == "missing"]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    for error in errors:
        if error["loc"] and error["type"] != "json_invalid":
            field = ".".join(str(p) for p in error["loc"])
            return f"Invalid {field}: {error['msg']}"
    return BadInputError.default_message


def json_body(model: Type[ModelT]) -> Callable:
    """
    Parse the request body into ``model`` after the caller is authenticated,
    so credential failures are always reported before body errors.
    An empty body counts as ``{}``.
    """

    async def dependency(
        request: Request,
        actor: Actor = Depends(get_current_actor),
    ) -> ModelT:
        raw = await request.body()
        try:
            return model.model_validate_json(raw or b"{}")
        except ValidationError as e:
            raise BadInputError(format_validation_error(e)) from e

    return dependency
