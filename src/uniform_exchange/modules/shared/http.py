"""
Request helpers shared by routers.

Some endpoints validate their JSON body inside the handler so that auth,
rate limiting and query checks answer first.
"""

import json
from typing import Any, TypeVar
from uuid import UUID

from fastapi import HTTPException, Request, status
from pydantic import BaseModel, ValidationError

from uniform_exchange.core.exceptions import INVALID_DATA_MESSAGE, validation_details

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_json_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Parse and validate the request body against ``model``.

    Raises:
        HTTPException 400: If the body is not JSON or fails validation
    """
    try:
        payload: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": INVALID_DATA_MESSAGE, "code": "INVALID_JSON"},
        ) from e

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": INVALID_DATA_MESSAGE,
                "code": "VALIDATION_ERROR",
                "details": validation_details(e),
            },
        ) from e


def parse_id_param(value: str | None, label: str) -> UUID:
    """
    Parse the ``?id=`` query parameter.

    Raises:
        HTTPException 400: If it is missing or not a UUID
    """
    if not value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": f"{label} ID is required", "code": "ID_REQUIRED"},
        )
    try:
        return UUID(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": f"Invalid {label.lower()} ID", "code": "INVALID_ID"},
        ) from e


def body_schema(model: type[BaseModel]) -> dict[str, Any]:
    """OpenAPI requestBody for endpoints that read the body themselves."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema(by_alias=True)}},
        }
    }
