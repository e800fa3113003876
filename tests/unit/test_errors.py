"""Tests for error handling and Problem Details implementation."""

import json
from unittest.mock import Mock

from mongopaging.errors.problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    InternalServerError,
    ServiceUnavailableError,
    CursorDecodeError,
    CursorEncodeError,
    create_problem_response
)


class TestProblemDetail:
    """Test ProblemDetail model."""

    def test_problem_detail_defaults(self):
        """Test ProblemDetail with default values."""
        problem = ProblemDetail(title="Test Error", status=400)

        assert problem.type == "about:blank"
        assert problem.detail is None
        assert problem.instance is None

    def test_problem_detail_extra_fields(self):
        """Test ProblemDetail allows extra fields."""
        problem = ProblemDetail(title="Test Error", status=400, error_code="TEST_001")

        assert problem.error_code == "TEST_001"


class TestProblemDetailException:
    """Test ProblemDetailException and subclasses."""

    def test_to_problem_detail_uses_request_path(self):
        """Test the request path becomes the instance."""
        request = Mock()
        request.url.path = "/v1/collections/users/documents"

        problem = BadRequestError("bad").to_problem_detail(request)

        assert problem.status == 400
        assert problem.instance == "/v1/collections/users/documents"

    def test_to_response(self):
        """Test JSON response rendering."""
        response = ServiceUnavailableError(database_error="timeout").to_response()

        assert response.status_code == 503
        assert response.headers["content-type"] == "application/problem+json"
        body = json.loads(response.body)
        assert body["title"] == "Service Unavailable"
        assert body["database_error"] == "timeout"

    def test_str_uses_detail(self):
        """Test the exception message."""
        exc = ProblemDetailException(status=418, title="Teapot")

        assert str(exc) == "Teapot"


class TestCursorErrors:
    """Test the cursor error taxonomy."""

    def test_decode_error_is_bad_request(self):
        """Test decode errors map to 400."""
        exc = CursorDecodeError("not base64")

        assert isinstance(exc, BadRequestError)
        assert exc.status == 400
        assert exc.detail == "Invalid cursor: not base64"

    def test_encode_error_keeps_documents(self):
        """Test encode errors carry the fetched batch."""
        exc = CursorEncodeError("cannot encode object", documents=[{"a": 1}])

        assert isinstance(exc, InternalServerError)
        assert exc.status == 500
        assert exc.documents == [{"a": 1}]
        assert "documents" not in json.loads(exc.to_response().body)


def test_create_problem_response():
    """Test the response helper."""
    response = create_problem_response(status=422, title="Validation Error", detail="limit: too big")

    assert response.status_code == 422
    assert json.loads(response.body)["detail"] == "limit: too big"


def test_error_package_exports():
    """Test the errors package exposes only the errors the service raises."""
    from mongopaging import errors

    assert set(errors.__all__) == {
        "ProblemDetail",
        "ProblemDetailException",
        "BadRequestError",
        "InternalServerError",
        "ServiceUnavailableError",
        "CursorDecodeError",
        "CursorEncodeError",
        "create_problem_response",
        "register_exception_handlers"
    }
