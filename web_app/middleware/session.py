"""Session cookie middleware."""

import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

SESSION_COOKIE_NAME = "session_token"


class SessionMiddleware(BaseHTTPMiddleware):
    """Identify anonymous users by a session token cookie.

    The token is read from the request cookie, or generated on first contact
    and set on the response. Routes find it in ``request.state.user_token``.
    """

    def __init__(self, app, cookie_name: str = SESSION_COOKIE_NAME):
        """Initialize session middleware."""
        super().__init__(app)
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next: Callable):
        """Attach the session token to the request and the response."""
        token = request.cookies.get(self.cookie_name)
        is_new = not token
        if is_new:
            token = str(uuid.uuid4())

        request.state.user_token = token

        response = await call_next(request)

        if is_new:
            response.set_cookie(self.cookie_name, token, httponly=True)
        return response


def get_user_token(request: Request) -> str:
    """Session token of the current request ("" outside the middleware)."""
    return getattr(request.state, "user_token", "")
