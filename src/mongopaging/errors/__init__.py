"""Error handling module for mongopaging."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    InternalServerError,
    ServiceUnavailableError,
    CursorDecodeError,
    CursorEncodeError,
    create_problem_response
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "InternalServerError",
    "ServiceUnavailableError",
    "CursorDecodeError",
    "CursorEncodeError",
    "create_problem_response",
    "register_exception_handlers"
]
