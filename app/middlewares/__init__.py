"""Middlewares package"""

from app.middlewares.error_handler import ErrorResponse, build_error_response


__all__ = [
    "ErrorResponse",
    "build_error_response",
]
