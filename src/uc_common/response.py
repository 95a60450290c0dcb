"""Response bodies for the users API.

Reads return the bare user array. Writes and failures use:

    {"success": true, "count": 2}
    {"error": "Failed to write users"}
"""

from pydantic import BaseModel


class WriteResponse(BaseModel):
    success: bool = True
    count: int


class ErrorResponse(BaseModel):
    error: str


def write_response(count: int) -> WriteResponse:
    return WriteResponse(success=True, count=count)


def error_response(message: str) -> ErrorResponse:
    return ErrorResponse(error=message)
