"""Pytest configuration and shared fixtures for the mongopaging tests."""

import logging
from typing import Any, Dict, List, Mapping, Optional

import bson
import pytest
from bson.raw_bson import RawBSONDocument
from pymongo.errors import OperationFailure


logging.getLogger("pymongo").setLevel(logging.WARNING)


def _matches(document: Dict[str, Any], criteria: Optional[Mapping[str, Any]]) -> bool:
    if not criteria:
        return True
    return all(document.get(key) == value for key, value in criteria.items())


class InMemoryExecutor:
    """Interprets ``find`` commands the way mongod does for a single-field index.

    ``min`` is an inclusive lower bound, ``max`` an exclusive upper bound
    (both rejected without a ``hint``, as mongod does since 4.2),
    then ``skip`` and ``limit`` apply in sort order. Only equality filters are
    understood. Documents come back as ``RawBSONDocument`` like the real
    executor returns them.
    """

    def __init__(self, documents: List[Dict[str, Any]], database: str = "test"):
        self.documents = [dict(d) for d in documents]
        self.database = database
        self.commands: List[Mapping[str, Any]] = []
        self.kwargs: List[Dict[str, Any]] = []

    async def run_command(self, command: Mapping[str, Any], **kwargs: Any) -> Mapping[str, Any]:
        self.commands.append(command)
        self.kwargs.append(kwargs)

        if ("min" in command or "max" in command) and "hint" not in command:
            raise OperationFailure("hint must be provided when using min/max", code=2)

        (field, direction), = command["sort"].items()
        rows = [d for d in self.documents if _matches(d, command.get("filter"))]
        rows.sort(key=lambda d: d[field], reverse=direction == -1)

        if "min" in command:
            rows = [d for d in rows if d[field] >= command["min"][field]]
        if "max" in command:
            rows = [d for d in rows if d[field] < command["max"][field]]

        rows = rows[command.get("skip", 0):]
        if command["limit"]:
            rows = rows[:command["limit"]]

        projection = command.get("projection")
        if projection:
            included = [k for k, v in projection.items() if v]
            rows = [{k: v for k, v in row.items() if k in included or k == "_id"} for row in rows]

        return {
            "cursor": {
                "firstBatch": [RawBSONDocument(bson.encode(row)) for row in rows],
                "id": 0,
                "ns": f"{self.database}.{command['find']}"
            },
            "ok": 1.0
        }


@pytest.fixture
def created_at_documents() -> List[Dict[str, Any]]:
    """Five documents with created_at 1..5."""
    return [
        {"_id": i, "name": f"user-{i}", "email": f"user{i}@example.com", "created_at": i}
        for i in range(1, 6)
    ]


@pytest.fixture
def executor(created_at_documents) -> InMemoryExecutor:
    """In-memory executor over the created_at documents."""
    return InMemoryExecutor(created_at_documents)
