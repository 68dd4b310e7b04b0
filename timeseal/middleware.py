"""Starlette middleware that rejects requests without a valid CSRF token."""

import logging
from typing import Awaitable, Callable, Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from timeseal.codec import TokenCodec

logger = logging.getLogger("timeseal.middleware")

InvalidHandler = Callable[[Request], Awaitable[Response]]


def header_or_cookie_value(
    request: Request, header_name: Optional[str], cookie_name: Optional[str]
) -> str:
    """Return the named header, falling back to the named cookie. Empty if neither."""
    if header_name:
        value = request.headers.get(header_name)
        if value:
            return value

    if cookie_name:
        value = request.cookies.get(cookie_name)
        if value:
            return value

    return ""


def request_is_valid(
    request: Request,
    codec: Optional[TokenCodec],
    *,
    token_header: Optional[str] = None,
    token_cookie: Optional[str] = None,
    session_header: Optional[str] = None,
    session_cookie: Optional[str] = None,
) -> bool:
    """Extract the token/session pair from ``request`` and validate it."""
    if codec is None:
        return False
    token = header_or_cookie_value(request, token_header, token_cookie)
    session_id = header_or_cookie_value(request, session_header, session_cookie)
    if not token or not session_id:
        return False
    return codec.is_valid(session_id, token)


class CSRFMiddleware(BaseHTTPMiddleware):
    """Only serve requests carrying a valid session/token pair.

    The pair is read from headers or cookies. Invalid requests go to
    ``invalid_handler`` or, without one, get an empty 403. Methods listed in
    ``exempt_methods`` pass through unchecked.
    """

    def __init__(
        self,
        app: ASGIApp,
        codec: Optional[TokenCodec] = None,
        *,
        token_header: Optional[str] = None,
        token_cookie: Optional[str] = None,
        session_header: Optional[str] = None,
        session_cookie: Optional[str] = None,
        invalid_handler: Optional[InvalidHandler] = None,
        exempt_methods: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.codec = codec
        self.token_header = token_header
        self.token_cookie = token_cookie
        self.session_header = session_header
        self.session_cookie = session_cookie
        self.invalid_handler = invalid_handler
        self.exempt_methods = frozenset(m.upper() for m in exempt_methods)

    async def dispatch(self, request: Request, call_next):
        if request.method in self.exempt_methods:
            return await call_next(request)

        valid = request_is_valid(
            request,
            self.codec,
            token_header=self.token_header,
            token_cookie=self.token_cookie,
            session_header=self.session_header,
            session_cookie=self.session_cookie,
        )
        if valid:
            return await call_next(request)

        if self.invalid_handler is not None:
            return await self.invalid_handler(request)

        token = header_or_cookie_value(request, self.token_header, self.token_cookie)
        session_id = header_or_cookie_value(request, self.session_header, self.session_cookie)
        logger.warning(
            f"Rejected request with an invalid CSRF token={token!r} "
            f"for session={session_id!r} (event=csrf_invalid)"
        )
        return Response(status_code=403)
