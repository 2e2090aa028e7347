"""
Shared pytest configuration and fixtures for the Hetzner Robot client tests.

This module provides common fixtures used across all test modules including:
- Client configurations
- A recording mock transport for httpx
- Client factories wired to the mock transport
"""

import json
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from src.hrobot.core import RobotClient, RobotConfig

# ========== Configuration Fixtures ==========


@pytest.fixture
def robot_config() -> RobotConfig:
    """Provide a test configuration."""
    return RobotConfig(
        url="https://robot.test",
        username="#ws+test",
        password="test_password_abcdef",
        poll_initial_delay=0.01,
        poll_max_delay=0.04,
        poll_max_attempts=5,
    )


# ========== HTTP Mock Transport ==========


class MockTransport(httpx.MockTransport):
    """Mock transport that replays configured responses and records requests."""

    def __init__(self, responses: Optional[dict] = None):
        """Initialize mock transport with optional response mapping.

        Args:
            responses: Maps "METHOD /path" (query string included) to either a
                JSON-able body, an ``httpx.Response``, or a list of those
                returned in order
        """
        self.responses = dict(responses or {})
        self.requests_made = []
        super().__init__(self._handle_request)

    def add(self, method: str, path: str, body: Any = None, status_code: int = 200):
        self.responses[f"{method} {path}"] = json_response(body, status_code)

    def _handle_request(self, request: httpx.Request) -> httpx.Response:
        target = request.url.raw_path.decode()
        self.requests_made.append(
            {
                "method": request.method,
                "path": target,
                "headers": dict(request.headers),
                "body": request.content.decode(),
            }
        )

        key = f"{request.method} {target}"
        if key not in self.responses:
            return httpx.Response(404, json={"error": {"status": 404, "code": "NOT_FOUND", "message": key}})

        response = self.responses[key]
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, httpx.Response):
            return response
        return json_response(response)


def json_response(body: Any, status_code: int = 200) -> httpx.Response:
    """Build a response whose body is ``body`` serialized as JSON."""
    if body is None:
        return httpx.Response(status_code)
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode(),
        headers={"Content-Type": "application/json"},
    )


@pytest.fixture
def mock_transport() -> MockTransport:
    """Provide an empty mock transport."""
    return MockTransport()


@pytest_asyncio.fixture
async def robot_client(robot_config, mock_transport):
    """Provide a client that talks to ``mock_transport``."""
    client = RobotClient(robot_config, transport=mock_transport)
    yield client
    await client.close()


# ========== Pytest Configuration ==========


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
