# contacts_api/utils/errors.py

from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse


class ErrorKind(Enum):
    BAD_REQUEST = 400
    CONFLICT = 409
    NOT_FOUND = 404
    INTERNAL_ERROR = 500

    @property
    def status_code(self) -> int:
        return self.value


class ContactError(Exception):
    """A failure with a known HTTP projection: ``{"message": ...}`` + status."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def bad_request(cls, message: str) -> "ContactError":
        return cls(ErrorKind.BAD_REQUEST, message)

    @classmethod
    def conflict(cls, name) -> "ContactError":
        # A body without contact_name collides on null
        name = "null" if name is None else name
        return cls(ErrorKind.CONFLICT, f"Contact with name '{name}' already exists.")

    @classmethod
    def not_found(cls, name) -> "ContactError":
        return cls(ErrorKind.NOT_FOUND, f"Contact with name {name} does NOT exist.")

    @classmethod
    def internal(cls, action: str, error: Exception) -> "ContactError":
        # Only the error text reaches the client, never the traceback
        return cls(ErrorKind.INTERNAL_ERROR, f"Failed to {action}: {error}")

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            content={"message": self.message},
            status_code=self.kind.status_code,
        )


async def contact_error_handler(request: Request, exc: ContactError) -> JSONResponse:
    return exc.to_response()
