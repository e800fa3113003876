"""Pydantic models for mongopaging."""

from .documents import DocumentListResponse, to_extended_json, parse_filter, parse_fields

__all__ = ["DocumentListResponse", "to_extended_json", "parse_filter", "parse_fields"]
