"""Tests for document listing models and query parameter parsing."""

from datetime import datetime, timezone

import bson
import pytest
from bson import ObjectId
from bson.raw_bson import RawBSONDocument

from mongopaging.errors.problem_details import BadRequestError
from mongopaging.models.documents import (
    DocumentListResponse, to_extended_json, parse_filter, parse_fields
)


class TestParseFilter:
    """Test filter parsing."""

    def test_empty(self):
        """Test missing filters."""
        assert parse_filter(None) is None
        assert parse_filter("") is None

    def test_extended_json(self):
        """Test Extended JSON types are decoded."""
        criteria = parse_filter('{"owner": {"$oid": "65a1f0c2e4b0a1b2c3d4e5f6"}, "active": true}')

        assert criteria == {"owner": ObjectId("65a1f0c2e4b0a1b2c3d4e5f6"), "active": True}

    def test_invalid_json(self):
        """Test malformed filters."""
        with pytest.raises(BadRequestError):
            parse_filter("{not json")

    def test_not_an_object(self):
        """Test filters must be objects."""
        with pytest.raises(BadRequestError):
            parse_filter("[1, 2]")


class TestParseFields:
    """Test projection parsing."""

    def test_inclusion_and_exclusion(self):
        """Test - prefix excludes a field."""
        assert parse_fields("name, email") == {"name": 1, "email": 1}
        assert parse_fields("-password") == {"password": 0}

    def test_empty(self):
        """Test missing or blank projections."""
        assert parse_fields(None) is None
        assert parse_fields(" , ") is None


class TestExtendedJson:
    """Test document rendering."""

    def test_raw_document(self):
        """Test raw BSON documents become relaxed Extended JSON."""
        oid = ObjectId("65a1f0c2e4b0a1b2c3d4e5f6")
        raw = RawBSONDocument(bson.encode({
            "_id": oid,
            "created_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            "count": 3
        }))

        rendered = to_extended_json(raw)

        assert rendered == {
            "_id": {"$oid": "65a1f0c2e4b0a1b2c3d4e5f6"},
            "created_at": {"$date": "2024-01-02T03:04:05Z"},
            "count": 3
        }

    def test_list_response(self):
        """Test the response model."""
        response = DocumentListResponse(documents=[{"a": 1}], next_cursor=None, count=1)

        assert response.model_dump() == {"documents": [{"a": 1}], "next_cursor": None, "count": 1}
