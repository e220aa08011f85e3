"""Error response body shared by all endpoints."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    details: dict | str | None = None
