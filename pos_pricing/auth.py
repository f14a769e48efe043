"""
Admin Authentication
====================

HTTP Basic Authentication for the admin endpoints of the pricing service
(currently catalog cache invalidation). Credentials come from config.py:

- ADMIN_USERNAME: Username for admin access (default: "admin")
- ADMIN_PASSWORD: Password for admin access (required, no default)

The dependency:
- returns 503 if ADMIN_PASSWORD is not configured (admin access fails closed)
- returns 401 with a WWW-Authenticate header if the credentials are wrong
- returns the username when they are right

Credentials are compared with ``secrets.compare_digest`` so response time does
not reveal how much of a guess matched.

Usage:
------
    from pos_pricing.auth import verify_admin_credentials

    @router.post("/admin/catalog/cache/invalidate")
    def invalidate(admin: str = Depends(verify_admin_credentials)):
        ...
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from . import config


security = HTTPBasic(realm="POS Pricing Admin")


def verify_admin_credentials(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """
    Verify HTTP Basic Auth credentials for admin endpoints.

    Returns:
        str: The authenticated username

    Raises:
        HTTPException (503): ADMIN_PASSWORD is not set
        HTTPException (401): Credentials are invalid
    """
    if not config.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin authentication not configured. Set ADMIN_PASSWORD environment variable.",
        )

    username_correct = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        config.ADMIN_USERNAME.encode("utf-8"),
    )
    password_correct = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        config.ADMIN_PASSWORD.encode("utf-8"),
    )

    if not (username_correct and password_correct):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username
