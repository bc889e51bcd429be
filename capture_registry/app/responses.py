"""Result envelope rendering for HTTP responses."""
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from .domain.errors import HTTP_STATUS
from .domain.schemas import Result


def envelope(result: Result, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    status_code = success_status if result.success else HTTP_STATUS[result.error_code]
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


def found(value: Any) -> JSONResponse:
    """Queries never fail: an absent record is a successful `None`."""
    return envelope(Result.ok(value))
