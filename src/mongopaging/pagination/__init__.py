"""Pagination module for keyset (seek-based) pagination."""

from .cursor import (
    Cursor,
    CursorValue,
    BSONCursor,
    SignedCursor,
    encode_cursor,
    decode_cursor,
    create_link_header
)
from .query import (
    CommandExecutor,
    PagingQuery,
    SortDirection,
    SortSpec
)

__all__ = [
    "Cursor",
    "CursorValue",
    "BSONCursor",
    "SignedCursor",
    "encode_cursor",
    "decode_cursor",
    "create_link_header",
    "CommandExecutor",
    "PagingQuery",
    "SortDirection",
    "SortSpec"
]
