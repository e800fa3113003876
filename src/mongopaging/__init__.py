"""Keyset (seek-based) pagination for MongoDB find commands."""

from .errors.problem_details import CursorDecodeError, CursorEncodeError
from .pagination import (
    BSONCursor,
    CommandExecutor,
    Cursor,
    CursorValue,
    PagingQuery,
    SignedCursor,
    SortDirection,
    SortSpec,
    decode_cursor,
    encode_cursor
)

__all__ = [
    "BSONCursor",
    "CommandExecutor",
    "Cursor",
    "CursorDecodeError",
    "CursorEncodeError",
    "CursorValue",
    "PagingQuery",
    "SignedCursor",
    "SortDirection",
    "SortSpec",
    "decode_cursor",
    "encode_cursor"
]
