"""Cursor tokens for keyset pagination.

A token is the URL-safe, unpadded base64 form of a BSON document holding
exactly one field: the sort field and its value in the last document of a
page. BSON is self-describing, so numbers, strings, datetimes and ObjectIds
all travel through the same code path.
"""

import base64
import binascii
import hashlib
import hmac
import re
from datetime import timezone
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable
from urllib.parse import urlencode

import bson
from bson.codec_options import CodecOptions
from bson.errors import BSONError
from pydantic import BaseModel, ConfigDict, Field

from ..errors.problem_details import CursorDecodeError, CursorEncodeError


TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# Datetimes come back aware so they compare equal to what was encoded.
DECODE_OPTIONS = CodecOptions(tz_aware=True, tzinfo=timezone.utc)

SIGNATURE_LENGTH = 32


class CursorValue(BaseModel):
    """The resume point of a page: one sort field and its last-seen value."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Sort field name")
    value: Any = Field(default=None, description="Sort field value of the last document")

    def as_document(self) -> Dict[str, Any]:
        """Return the single-field mapping used for ``min``/``max`` bounds."""
        return {self.field: self.value}


@runtime_checkable
class Cursor(Protocol):
    """Encodes and decodes cursor tokens."""

    def create(self, value: CursorValue) -> str:
        ...

    def parse(self, token: str) -> CursorValue:
        ...


class BSONCursor:
    """Default codec: unpadded URL-safe base64 over a one-field BSON document."""

    def create(self, value: CursorValue) -> str:
        """Encode a cursor value into a token.

        Args:
            value: Field and value to resume from

        Returns:
            URL-safe base64 token without padding

        Raises:
            CursorEncodeError: If the value cannot be represented in BSON
        """
        try:
            data = bson.encode(value.as_document())
        except (BSONError, OverflowError) as e:
            raise CursorEncodeError(str(e))

        return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

    def parse(self, token: str) -> CursorValue:
        """Decode a token produced by ``create``.

        Args:
            token: Cursor token

        Returns:
            The decoded cursor value

        Raises:
            CursorDecodeError: If the token is not unpadded URL-safe base64,
                or does not hold a well-formed single-field BSON document
        """
        if not token:
            raise CursorDecodeError("empty cursor provided")

        if not TOKEN_PATTERN.match(token) or len(token) % 4 == 1:
            raise CursorDecodeError("not URL-safe unpadded base64")

        try:
            data = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
        except (binascii.Error, ValueError) as e:
            raise CursorDecodeError(f"not base64: {e}")

        try:
            document = bson.decode(data, codec_options=DECODE_OPTIONS)
        except BSONError as e:
            raise CursorDecodeError(f"not a BSON document: {e}")

        if len(document) != 1:
            raise CursorDecodeError(f"expected exactly one field, found {len(document)}")

        # Repeated keys collapse into one dict entry; re-encoding exposes them.
        try:
            canonical = bson.encode(document)
        except (BSONError, OverflowError) as e:
            raise CursorDecodeError(f"not a BSON document: {e}")
        if len(canonical) != len(data):
            raise CursorDecodeError("expected exactly one field, found repeated keys")

        (field, value), = document.items()
        return CursorValue(field=field, value=value)


class SignedCursor:
    """Wraps another codec and appends an HMAC-SHA256 signature.

    Tokens look like ``<inner token>.<signature>``; any change to either part
    is rejected on parse.
    """

    def __init__(self, secret: Union[str, bytes], inner: Optional[Cursor] = None):
        if not secret:
            raise ValueError("Cursor secret must not be empty")
        self._key = secret.encode("utf-8") if isinstance(secret, str) else secret
        self._inner = inner or BSONCursor()

    def _sign(self, token: str) -> str:
        digest = hmac.new(self._key, token.encode("utf-8"), hashlib.sha256)
        return digest.hexdigest()[:SIGNATURE_LENGTH]

    def create(self, value: CursorValue) -> str:
        token = self._inner.create(value)
        return f"{token}.{self._sign(token)}"

    def parse(self, token: str) -> CursorValue:
        if not token:
            raise CursorDecodeError("empty cursor provided")

        inner, sep, signature = token.rpartition(".")
        if not sep:
            raise CursorDecodeError("missing signature")

        expected = self._sign(inner)
        if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
            raise CursorDecodeError("signature mismatch")

        return self._inner.parse(inner)


default_cursor = BSONCursor()


def encode_cursor(field: str, value: Any) -> str:
    """Encode ``{field: value}`` with the default codec."""
    return default_cursor.create(CursorValue(field=field, value=value))


def decode_cursor(cursor: str) -> CursorValue:
    """Decode a token with the default codec.

    Raises:
        CursorDecodeError: If the cursor is invalid or malformed
    """
    return default_cursor.parse(cursor)


def create_link_header(
    base_url: str,
    params: Dict[str, Any],
    next_cursor: Optional[str] = None
) -> Optional[str]:
    """Create Link header for pagination as per RFC 8288.

    Args:
        base_url: Base URL for the resource
        params: Current query parameters
        next_cursor: Cursor for next page

    Returns:
        Link header value or None if there is no next page
    """
    if not next_cursor:
        return None

    next_params = {**params, "cursor": next_cursor}
    return f'<{base_url}?{urlencode(next_params)}>; rel="next"'
