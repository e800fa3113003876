"""Documents API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from ..config import get_settings
from ..db.connection import get_executor
from ..errors.problem_details import BadRequestError
from ..models.documents import (
    DocumentListResponse, to_extended_json, parse_filter, parse_fields
)
from ..pagination import (
    CommandExecutor, Cursor, PagingQuery, SignedCursor, create_link_header
)
from ..pagination.cursor import default_cursor


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/collections/{collection}/documents",
    tags=["Documents"],
    responses={
        400: {"description": "Bad Request"},
        422: {"description": "Unprocessable Entity"},
        503: {"description": "Service Unavailable"}
    }
)


def get_cursor_codec() -> Cursor:
    """Signed tokens when a cursor secret is configured, plain ones otherwise."""
    settings = get_settings()
    if settings.cursor_secret:
        return SignedCursor(settings.cursor_secret)
    return default_cursor


@router.get(
    "",
    response_model=DocumentListResponse,
    summary="List documents",
    description="List documents of a collection with keyset (cursor) pagination.",
    responses={
        200: {"description": "Documents retrieved successfully"}
    }
)
async def list_documents(
    collection: str,
    request: Request,
    response: Response,
    executor: Annotated[CommandExecutor, Depends(get_executor)],
    codec: Annotated[Cursor, Depends(get_cursor_codec)],
    limit: Annotated[int | None, Query(ge=1, description="Number of documents per page")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    sort: Annotated[str | None, Query(description="Sort field, prefixed with + or -")] = None,
    filter_: Annotated[str | None, Query(alias="filter", description="Extended JSON filter")] = None,
    fields: Annotated[str | None, Query(description="Comma-separated fields, - to exclude")] = None
) -> DocumentListResponse:
    """List one page of documents.

    Documents are sorted by ``sort`` (``-_id`` by default). Pass the returned
    ``next_cursor`` back as ``cursor`` to fetch the following page; an empty
    page returns the cursor it was given.

    Args:
        collection: Collection to read from
        request: FastAPI request object
        response: FastAPI response object for adding headers
        executor: Command executor for the configured database
        codec: Cursor codec
        limit: Maximum number of documents to return
        cursor: Pagination cursor from a previous page
        sort: Compact sort spec, e.g. ``-created_at``
        filter_: Filter as an Extended JSON object
        fields: Projection, e.g. ``name,email`` or ``-password``

    Returns:
        Page of documents with the next cursor and a Link header
    """
    settings = get_settings()
    page_size = limit or settings.default_page_size
    if page_size > settings.max_page_size:
        raise BadRequestError(f"limit must not exceed {settings.max_page_size}")

    query = (
        PagingQuery(executor, collection, codec=codec)
        .find(parse_filter(filter_))
        .sort(sort or settings.default_sort)
        .limit(page_size)
        .select(parse_fields(fields))
        .cursor(cursor)
    )
    # min/max need a hint; the ascending index keeps max an exclusive upper bound.
    query.hint({query.sort_spec.field: 1})
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Listing documents: {query.explain()}")

    documents, next_cursor = await query.execute()

    if next_cursor and len(documents) == page_size:
        params = {"limit": str(page_size), "sort": str(query.sort_spec)}
        if filter_:
            params["filter"] = filter_
        if fields:
            params["fields"] = fields

        link_header = create_link_header(
            base_url=str(request.url).split("?")[0],
            params=params,
            next_cursor=next_cursor
        )
        if link_header:
            response.headers["Link"] = link_header

    logger.info(f"Retrieved {len(documents)} documents from collection '{collection}'")
    return DocumentListResponse(
        documents=[to_extended_json(document) for document in documents],
        next_cursor=next_cursor or None,
        count=len(documents)
    )
