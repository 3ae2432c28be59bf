"""Dependency injection for FastAPI endpoints"""

import logging
from datetime import date
from fastapi import Depends, HTTPException, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from finance_tracker.domain.exceptions import AuthServiceError
from finance_tracker.infrastructure.clients.auth import AuthClient, AuthenticatedUser
from finance_tracker.infrastructure.observability.metrics import auth_failures_counter

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_auth_client() -> AuthClient:
    """Provide auth provider client instance"""
    return AuthClient()


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_client: AuthClient = Depends(get_auth_client),
) -> AuthenticatedUser:
    """
    Resolve the bearer token to a user or reject the request.

    401 for a missing/rejected token, 503 if the auth provider is down.
    """
    if credentials is None:
        auth_failures_counter.labels(reason="missing_token").inc()
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        user = await auth_client.get_current_user(credentials.credentials)
    except AuthServiceError as e:
        auth_failures_counter.labels(reason="provider_error").inc()
        logging.error(f"Auth provider error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Authentication service unavailable")

    if user is None:
        auth_failures_counter.labels(reason="invalid_token").inc()
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return user


def get_as_of(as_of: date | None = Query(None, description="Reference date for month windows (default: today)")) -> date:
    """Injectable "now" so dashboard figures are reproducible"""
    return as_of or date.today()
