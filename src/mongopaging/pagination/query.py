"""Keyset pagination over MongoDB ``find`` commands.

``PagingQuery`` turns a filter, a sort field, a limit and an optional cursor
token into one ``find`` command bounded with ``min``/``max``, runs it through a
``CommandExecutor`` and returns the page together with the token for the next
page.

Bounds depend on the sort direction:

* descending sorts resume below the cursor with ``max``, which is exclusive,
  so the boundary document is not returned again;
* ascending sorts resume with ``min``, which is inclusive, so ``skip=1`` drops
  the boundary document. This is not safe under concurrent inserts that share
  the boundary value.
"""

import logging
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from bson import json_util
from pydantic import BaseModel, ConfigDict

from ..errors.problem_details import CursorDecodeError, CursorEncodeError
from .cursor import BSONCursor, Cursor, CursorValue


logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "_id"


class SortDirection(IntEnum):
    """MongoDB sort direction values."""

    ASCENDING = 1
    DESCENDING = -1


class SortSpec(BaseModel):
    """A single sort field and its direction."""

    model_config = ConfigDict(frozen=True)

    field: str = DEFAULT_SORT_FIELD
    direction: SortDirection = SortDirection.DESCENDING

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortSpec":
        """Parse the compact ``[+|-]field`` form.

        ``+`` sorts ascending, ``-`` or no prefix sorts descending. An empty
        field name falls back to ``_id``.
        """
        field = value or ""
        direction = SortDirection.DESCENDING
        if field.startswith("+"):
            direction, field = SortDirection.ASCENDING, field[1:]
        elif field.startswith("-"):
            field = field[1:]
        return cls(field=field or DEFAULT_SORT_FIELD, direction=direction)

    def as_document(self) -> Dict[str, int]:
        return {self.field: int(self.direction)}

    def __str__(self) -> str:
        prefix = "+" if self.direction is SortDirection.ASCENDING else "-"
        return f"{prefix}{self.field}"


class CommandExecutor(Protocol):
    """Runs a database command and returns the raw response document."""

    async def run_command(self, command: Mapping[str, Any], **kwargs: Any) -> Mapping[str, Any]:
        ...


def _lookup(document: Mapping[str, Any], path: str) -> Tuple[bool, Any]:
    """Resolve a dotted field path, returning ``(found, value)``."""
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return False, None
        current = current[part]
    return True, current


class PagingQuery:
    """Builds and runs one keyset-paginated ``find`` command.

    Each instance holds the state of a single page request; create a new one
    per request instead of sharing it.

    Example:
        query = PagingQuery(executor, "users")
        documents, next_cursor = await (
            query.find({"active": True}).sort("-created_at").limit(20).cursor(token).execute()
        )
    """

    def __init__(self, executor: CommandExecutor, collection: str, codec: Optional[Cursor] = None):
        self._executor = executor
        self._collection = collection
        self._codec = codec or BSONCursor()
        self._criteria: Any = None
        self._projection: Any = None
        self._sort = SortSpec()
        self._limit = 0
        self._cursor_token = ""
        self._hint: Any = None

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def sort_spec(self) -> SortSpec:
        return self._sort

    @property
    def is_bounded(self) -> bool:
        """True when resuming from a cursor, False on the first page."""
        return bool(self._cursor_token)

    def find(self, criteria: Any) -> "PagingQuery":
        """Set the query filter."""
        self._criteria = criteria
        return self

    def sort(self, field: str) -> "PagingQuery":
        """Set the sort field in ``[+|-]field`` form; empty resets to ``-_id``."""
        self._sort = SortSpec.parse(field)
        return self

    def limit(self, count: int) -> "PagingQuery":
        """Set the page size. There is no default; zero asks for no documents."""
        if count < 0:
            raise ValueError("Limit must not be negative")
        self._limit = count
        return self

    def select(self, projection: Any) -> "PagingQuery":
        """Set the projection of returned fields."""
        self._projection = projection
        return self

    def cursor(self, token: Optional[str]) -> "PagingQuery":
        """Resume after the page that produced ``token``; empty means first page."""
        self._cursor_token = token or ""
        return self

    def hint(self, index: Any) -> "PagingQuery":
        """Set the index hint. MongoDB 4.2+ requires one alongside min/max."""
        self._hint = index
        return self

    def _range_bound(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        if not self._cursor_token:
            return None

        try:
            value = self._codec.parse(self._cursor_token)
        except CursorDecodeError as e:
            logger.warning(f"Rejected cursor for collection '{self._collection}': {e}")
            raise

        if value.field != self._sort.field:
            raise CursorDecodeError(
                f"cursor field '{value.field}' does not match sort field '{self._sort.field}'"
            )

        if self._sort.direction is SortDirection.DESCENDING:
            return "max", value.as_document()
        return "min", value.as_document()

    def build_command(self) -> Dict[str, Any]:
        """Assemble the ``find`` command for the current state.

        Returns:
            Command document, keys in MongoDB command order

        Raises:
            CursorDecodeError: If the cursor token is invalid
        """
        bound = self._range_bound()

        command: Dict[str, Any] = {
            "find": self._collection,
            "limit": self._limit,
            "batchSize": self._limit,
            "singleBatch": True,
        }

        if self._criteria is not None:
            command["filter"] = self._criteria

        command["sort"] = self._sort.as_document()

        if self._projection is not None:
            command["projection"] = self._projection

        if bound is not None:
            operator, document = bound
            if operator == "min":
                command["skip"] = 1
            command[operator] = document

        if self._hint is not None:
            command["hint"] = self._hint

        return command

    async def execute(self, **kwargs: Any) -> Tuple[List[Any], str]:
        """Run the command and return the page plus the next cursor.

        Keyword arguments (a client session, for instance) are passed to the
        executor untouched, and executor errors propagate unchanged.

        Returns:
            Tuple of (documents, next_cursor). When no documents come back,
            next_cursor is the cursor this query was given.

        Raises:
            CursorDecodeError: If the incoming cursor is invalid; nothing is run
            CursorEncodeError: If the next cursor cannot be encoded; the batch
                is available on the exception's ``documents``
        """
        command = self.build_command()
        logger.debug(f"Prepared find command: {command}")

        response = await self._executor.run_command(command, **kwargs)
        documents = self._first_batch(response)

        if not documents:
            logger.debug(f"No documents left in '{self._collection}' after cursor")
            return documents, self._cursor_token

        field = self._sort.field
        found, value = _lookup(documents[-1], field)
        if not found:
            logger.warning(f"Last document in '{self._collection}' has no '{field}' field")

        try:
            next_cursor = self._codec.create(CursorValue(field=field, value=value))
        except CursorEncodeError as e:
            e.documents = documents
            raise

        return documents, next_cursor

    @staticmethod
    def _first_batch(response: Optional[Mapping[str, Any]]) -> List[Any]:
        if not response:
            return []
        cursor = response.get("cursor")
        if not cursor:
            return []
        return list(cursor.get("firstBatch") or [])

    def explain(self) -> str:
        """Render the command as Extended JSON without running it.

        Construction errors are described in the returned string.
        """
        try:
            command = self.build_command()
        except CursorDecodeError as e:
            return f"error: {e}"

        try:
            return json_util.dumps(command, json_options=json_util.RELAXED_JSON_OPTIONS)
        except (TypeError, ValueError):
            return repr(command)
