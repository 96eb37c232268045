"""Bearer-token auth for the admin data API.

Single shared password from the ADMIN_PASSWORD env var, sent as
``Authorization: Bearer <password>``. No users or roles.
"""

from __future__ import annotations

import secrets

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pricecatalog.config import settings
from pricecatalog.errors import UnauthorizedError

security = HTTPBearer(auto_error=False)


async def bearer_credential(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),  # noqa: B008
) -> str | None:
    """FastAPI dependency — extract the bearer token, if any.

    Verification happens in the service so the route can answer with the
    API's own error shape.
    """
    if credentials is None:
        return None
    return credentials.credentials


def verify_credential(credential: str | None) -> None:
    """Raise UnauthorizedError unless ``credential`` matches the admin password."""
    expected = settings.admin.admin_password
    if not credential or not expected:
        raise UnauthorizedError()

    password_ok = secrets.compare_digest(
        credential.encode("utf-8"),
        expected.encode("utf-8"),
    )
    if not password_ok:
        raise UnauthorizedError()
