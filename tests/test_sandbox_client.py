"""
Unit tests for SandboxClient

Tests:
- Successful evaluation
- Transport, status and payload errors
"""

from unittest.mock import Mock, patch

import pytest
import requests

from recordmap.api.sandbox_client import SandboxClient
from recordmap.exceptions import SandboxEvaluationError


@pytest.fixture
def client():
    """Client for a local sandbox"""
    return SandboxClient("http://sandbox.local/", api_key="token")


class TestSandboxClient:
    """Tests for SandboxClient"""

    @patch("requests.Session.post")
    def test_evaluate(self, mock_post, client):
        """Test the expression and record are posted and the result returned"""
        mock_response = Mock()
        mock_response.json.return_value = {"result": 42}
        mock_post.return_value = mock_response

        assert client.evaluate("value * 2", {"value": 21}) == 42

        args, kwargs = mock_post.call_args
        assert args[0] == "http://sandbox.local/evaluate"
        assert kwargs["json"] == {"expression": "value * 2", "record": {"value": 21}}
        assert kwargs["timeout"] == 5
        assert client.session.headers["Authorization"] == "Bearer token"

    @patch("requests.Session.post")
    def test_null_result(self, mock_post, client):
        """Test a null result is a valid result"""
        mock_response = Mock()
        mock_response.json.return_value = {"result": None}
        mock_post.return_value = mock_response

        assert client.evaluate("null", {}) is None

    @patch("requests.Session.post")
    def test_transport_error(self, mock_post, client):
        """Test request failures raise SandboxEvaluationError"""
        mock_post.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(SandboxEvaluationError):
            client.evaluate("value", {})

    @patch("requests.Session.post")
    def test_http_error(self, mock_post, client):
        """Test non-2xx responses raise"""
        mock_response = Mock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("500")
        mock_post.return_value = mock_response

        with pytest.raises(SandboxEvaluationError):
            client.evaluate("value", {})

    @patch("requests.Session.post")
    def test_error_payload(self, mock_post, client):
        """Test a response without result reports the sandbox error"""
        mock_response = Mock()
        mock_response.json.return_value = {"error": "ReferenceError: foo is not defined"}
        mock_post.return_value = mock_response

        with pytest.raises(SandboxEvaluationError, match="ReferenceError"):
            client.evaluate("foo", {})

    @patch("requests.Session.post")
    def test_invalid_json(self, mock_post, client):
        """Test an unparseable body raises"""
        mock_response = Mock()
        mock_response.json.side_effect = ValueError("no json")
        mock_post.return_value = mock_response

        with pytest.raises(SandboxEvaluationError):
            client.evaluate("value", {})
