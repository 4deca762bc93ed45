"""Error taxonomy shared by the stores, services and routers.

Each error carries the HTTP status it maps to; the app registers a single
exception handler that renders any of them as ``{"error": message}``.
"""
from typing import Optional


class AppError(Exception):
    status_code = 500
    default_message = "internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "invalid request"


class Unauthorized(AppError):
    status_code = 401
    default_message = "unauthorized"


class NotFound(AppError):
    status_code = 404
    default_message = "not found"


class Conflict(AppError):
    status_code = 409
    default_message = "conflict"


class InternalError(AppError):
    status_code = 500
