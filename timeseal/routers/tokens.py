"""Token routes: issue a CSRF token and a protected check endpoint."""

import secrets

from fastapi import APIRouter, Depends, Request, Response

from timeseal.codec import TokenCodec
from timeseal.config import Settings
from timeseal.dependencies import get_codec, get_settings
from timeseal.middleware import header_or_cookie_value

router = APIRouter(prefix="/csrf")


@router.get("/token")
async def issue_token(
    request: Request,
    response: Response,
    codec: TokenCodec = Depends(get_codec),
    settings: Settings = Depends(get_settings),
):
    """Issue a token for the caller's session, minting a session id if needed."""
    session_id = header_or_cookie_value(request, settings.session_header, settings.session_cookie)
    if not session_id:
        session_id = secrets.token_hex(32)
        response.set_cookie(
            key=settings.session_cookie,
            value=session_id,
            httponly=True,
            samesite="lax",
        )

    token = codec.generate(session_id)
    response.headers[settings.csrf_header] = token
    response.set_cookie(
        key=settings.csrf_cookie,
        value=token,
        samesite="strict",
        max_age=int(codec.max_age),
    )
    return {"token": token}


@router.post("/check")
async def check_token():
    """Reached only when the middleware accepted the token."""
    return {"status": "ok"}
