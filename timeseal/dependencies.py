"""FastAPI dependency functions for the token codec and CSRF checks."""

from fastapi import Depends, HTTPException, Request, status

from timeseal.codec import TokenCodec
from timeseal.config import Settings
from timeseal.middleware import request_is_valid


def get_settings(request: Request) -> Settings:
    """Return the Settings the application was built with."""
    return request.app.state.settings


def get_codec(request: Request) -> TokenCodec:
    """Return the application's token codec."""
    return request.app.state.codec


def require_csrf(
    request: Request,
    codec: TokenCodec = Depends(get_codec),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request with 403 unless it carries a valid CSRF token."""
    valid = request_is_valid(
        request,
        codec,
        token_header=settings.csrf_header,
        token_cookie=settings.csrf_cookie,
        session_header=settings.session_header,
        session_cookie=settings.session_cookie,
    )
    if not valid:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
