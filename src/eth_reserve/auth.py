"""Bearer-token guards for admin and cron endpoints."""
import secrets

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eth_reserve.deps import SettingsDep

_bearer = HTTPBearer(auto_error=False)


def _check_token(
    credentials: HTTPAuthorizationCredentials | None, expected: str | None, realm: str
) -> None:
    if (
        credentials is None
        or not expected
        or not secrets.compare_digest(credentials.credentials.encode(), expected.encode())
    ):
        raise HTTPException(status_code=401, detail=f"{realm} access required")


def require_admin(
    settings: SettingsDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> None:
    """Reject callers not presenting ADMIN_TOKEN."""
    _check_token(credentials, settings.admin_token, "Admin")


def require_cron(
    settings: SettingsDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> None:
    """Reject callers not presenting CRON_SECRET."""
    _check_token(credentials, settings.cron_secret, "Cron")
