"""API error handling

Use-case failures reach the client as ``{"error": {"code", "message", "details"}}``.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INSUFFICIENT_FUNDS": status.HTTP_402_PAYMENT_REQUIRED,
    "DAILY_LIMIT_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
    "COOLDOWN_ACTIVE": status.HTTP_429_TOO_MANY_REQUESTS,
    "STORE_CONTENTION": status.HTTP_409_CONFLICT,
    "ACCOUNT_DISABLED": status.HTTP_403_FORBIDDEN,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    @classmethod
    def from_error(cls, error: Error) -> "ClientError":
        return cls(error, status_code=ERROR_STATUS_CODES.get(error.code, status.HTTP_400_BAD_REQUEST))


def error_body(error: Error) -> dict:
    return {
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details,
        }
    }


async def client_error_handler(request: Request, exc: ClientError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(Error(code="INTERNAL_ERROR", message="Internal server error")),
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
