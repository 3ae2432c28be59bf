"""Unit tests for the auth provider client"""

import asyncio
import httpx
import pytest
from unittest.mock import AsyncMock, patch
from finance_tracker.domain.exceptions import AuthServiceError
from finance_tracker.infrastructure.clients.auth import AuthClient

BASE_URL = "http://auth.test"
USER_URL = f"{BASE_URL}/auth/v1/user"


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("GET", USER_URL), **kwargs)


def _resolve(client: AuthClient, token: str = "token_abc"):
    return asyncio.run(client.get_current_user(token))


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_resolves_user(mock_get: AsyncMock):
    mock_get.return_value = _response(200, json={"id": "user_1", "email": "sam@example.com"})
    client = AuthClient(base_url=BASE_URL, api_key="anon-key")

    user = _resolve(client)

    assert user.id == "user_1"
    assert user.email == "sam@example.com"
    args, kwargs = mock_get.call_args
    assert args[0] == USER_URL
    assert kwargs["headers"]["Authorization"] == "Bearer token_abc"
    assert kwargs["headers"]["apikey"] == "anon-key"


@pytest.mark.parametrize("status_code", [401, 403])
@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_rejected_token_returns_none(mock_get: AsyncMock, status_code: int):
    mock_get.return_value = _response(status_code, json={"msg": "invalid JWT"})

    assert _resolve(AuthClient(base_url=BASE_URL, api_key="")) is None


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_provider_error_raises(mock_get: AsyncMock):
    mock_get.return_value = _response(500, text="boom")

    with pytest.raises(AuthServiceError):
        _resolve(AuthClient(base_url=BASE_URL, api_key=""))


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_timeout_raises(mock_get: AsyncMock):
    mock_get.side_effect = httpx.ReadTimeout("timed out")

    with pytest.raises(AuthServiceError, match="timeout"):
        _resolve(AuthClient(base_url=BASE_URL, api_key="", timeout=0.5))


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
def test_malformed_payload_raises(mock_get: AsyncMock):
    mock_get.return_value = _response(200, json={"email": "no-id@example.com"})

    with pytest.raises(AuthServiceError):
        _resolve(AuthClient(base_url=BASE_URL, api_key=""))
