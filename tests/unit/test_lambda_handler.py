"""Unit tests for AWS Lambda handler."""

import json
from unittest.mock import MagicMock, Mock, patch

import pytest

from src.lambda_handler import lambda_handler

API_GATEWAY_EVENT = {
    "version": "2.0",
    "requestContext": {
        "http": {"method": "GET", "path": "/api/locations"},
        "requestId": "request-id",
    },
    "rawPath": "/api/locations",
}


@pytest.mark.unit
class TestLambdaHandler:
    """Tests for the lambda_handler entry point."""

    @pytest.fixture
    def context(self) -> MagicMock:
        """Create a Lambda context with a request id."""
        context = MagicMock()
        context.aws_request_id = "test-request-id"
        return context

    @patch("src.lambda_handler.mangum_handler")
    def test_delegates_to_mangum(self, mock_mangum_handler: Mock, context: MagicMock) -> None:
        """Test that API Gateway events are served through Mangum."""
        mock_mangum_handler.return_value = {"statusCode": 200, "body": '{"success": true}'}

        result = lambda_handler(API_GATEWAY_EVENT, context)

        assert result["statusCode"] == 200
        mock_mangum_handler.assert_called_once_with(API_GATEWAY_EVENT, context)

    @patch("src.lambda_handler.mangum_handler")
    def test_unhandled_exception_returns_error_envelope(
        self, mock_mangum_handler: Mock, context: MagicMock
    ) -> None:
        """Test that failures escaping Mangum become a generic 500 envelope."""
        mock_mangum_handler.side_effect = Exception("adapter exploded")

        result = lambda_handler(API_GATEWAY_EVENT, context)

        assert result["statusCode"] == 500
        assert result["headers"]["Content-Type"] == "application/json"
        body = json.loads(result["body"])
        assert body["error"] == "Internal Server Error"
        assert body["message"] == "Internal Server Error"
        assert "timestamp" in body
        assert "exploded" not in result["body"]

    def test_uninitialized_handler_returns_500(self, context: MagicMock) -> None:
        """Test that the handler is not built in test mode and fails safely."""
        result = lambda_handler(API_GATEWAY_EVENT, context)

        assert result["statusCode"] == 500
