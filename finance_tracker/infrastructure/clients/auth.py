"""Hosted auth provider client for resolving bearer tokens to users"""

import httpx
from dataclasses import dataclass
from typing import Optional
from finance_tracker.domain.exceptions import AuthServiceError
from finance_tracker.config import settings


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: Optional[str] = None


class AuthClient:
    """Client for the external auth provider's user endpoint"""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.auth_api_base
        self.api_key = api_key if api_key is not None else settings.auth_api_key
        self.timeout = timeout or settings.http_timeout_seconds

    async def get_current_user(self, access_token: str) -> Optional[AuthenticatedUser]:
        """
        Resolve an access token to the signed-in user.

        Returns:
            AuthenticatedUser, or None if the provider rejects the token

        Raises:
            AuthServiceError: On timeout, unexpected HTTP errors, or invalid response
        """
        headers = {"Authorization": f"Bearer {access_token}"}
        if self.api_key:
            headers["apikey"] = self.api_key

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(f"{self.base_url}/auth/v1/user", headers=headers)
                if response.status_code in (401, 403):
                    return None
                response.raise_for_status()
                data = response.json()

                return AuthenticatedUser(id=str(data["id"]), email=data.get("email"))

            except httpx.TimeoutException as e:
                raise AuthServiceError(f"Auth provider timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AuthServiceError(f"Auth provider error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AuthServiceError(f"Auth provider unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise AuthServiceError(f"Invalid user payload from auth provider: {e}") from e
