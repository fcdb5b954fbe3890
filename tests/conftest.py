"""Pytest fixtures for CalendAI website scanner tests.

This module provides shared fixtures for testing the FastAPI application
and the scan pipeline, including a mocked HTTP transport and a mocked
OpenAI client.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.openai_service import OpenAIService


def make_completion(content: str | None) -> MagicMock:
    """Build an object shaped like an OpenAI chat completion response."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def make_http_client(handler) -> httpx.AsyncClient:
    """Create an AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def client():
    """Create a test client for the FastAPI application.

    Returns:
        TestClient: A test client instance for making requests to the API.
    """
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def mock_create():
    """AsyncMock standing in for ``chat.completions.create``."""
    return AsyncMock()


@pytest.fixture
def ai_service(mock_create):
    """OpenAIService with a configured key and a mocked SDK client."""
    service = OpenAIService(api_key="test-key", model="test-model")
    sdk_client = MagicMock()
    sdk_client.chat.completions.create = mock_create
    service._client = sdk_client
    return service


@pytest.fixture
def acme_html():
    """Page carrying every tag the extractor looks for."""
    return """<html>
<head>
  <title>Acme Corp</title>
  <meta name="description" content="We build great products">
  <meta property="og:image" content="https://acme.com/og.png">
  <link rel="icon" href="/favicon.ico">
  <meta name="theme-color" content="#ff5500">
</head>
<body>Welcome to Acme Corp</body>
</html>"""


@pytest.fixture
def acme_ai_response():
    """AI answer matching ``acme_html``."""
    return {
        "businessName": "Acme Corp",
        "description": "We build great products",
        "suggestedEventDescription": "Book a consultation with Acme Corp",
        "primaryColor": "#ff5500",
        "secondaryColor": "#333333",
        "logoUrl": "https://acme.com/og.png",
    }


@pytest.fixture
def completion():
    """Factory for mocked chat completion responses."""
    return make_completion


@pytest.fixture
def http_client_factory():
    """Factory for AsyncClients backed by a mock transport handler."""
    return make_http_client
