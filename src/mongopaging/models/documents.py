"""Pydantic models for paginated document listings."""

import json
from typing import Any, Dict, List, Mapping, Optional

import bson
from bson import json_util
from bson.raw_bson import RawBSONDocument
from pydantic import BaseModel, Field, ConfigDict

from ..errors.problem_details import BadRequestError


class DocumentListResponse(BaseModel):
    """Response model for a page of documents."""

    documents: List[Dict[str, Any]] = Field(description="Documents as relaxed Extended JSON")
    next_cursor: Optional[str] = Field(default=None, description="Cursor for the next page")
    count: int = Field(description="Number of documents in this page")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "documents": [
                    {"_id": {"$oid": "65a1f0c2e4b0a1b2c3d4e5f6"}, "name": "Alice", "created_at": 5},
                    {"_id": {"$oid": "65a1f0c2e4b0a1b2c3d4e5f5"}, "name": "Bob", "created_at": 4}
                ],
                "next_cursor": "FQAAABBjcmVhdGVkX2F0AAQAAAAA",
                "count": 2
            }
        }
    )


def to_extended_json(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a (raw) BSON document into a JSON-ready dict."""
    if isinstance(document, RawBSONDocument):
        document = bson.decode(document.raw)
    return json.loads(json_util.dumps(document, json_options=json_util.RELAXED_JSON_OPTIONS))


def parse_filter(value: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse a filter given as an Extended JSON object.

    Raises:
        BadRequestError: If the value is not a JSON object
    """
    if not value:
        return None

    try:
        criteria = json_util.loads(value)
    except (ValueError, TypeError) as e:
        raise BadRequestError(f"Invalid filter: {e}")

    if not isinstance(criteria, dict):
        raise BadRequestError("Invalid filter: expected a JSON object")
    return criteria


def parse_fields(value: Optional[str]) -> Optional[Dict[str, int]]:
    """Parse ``a,b,-c`` into a projection; ``-`` excludes a field."""
    if not value:
        return None

    projection = {}
    for name in value.split(","):
        name = name.strip()
        if not name:
            continue
        if name.startswith("-"):
            projection[name[1:]] = 0
        else:
            projection[name] = 1
    return projection or None
