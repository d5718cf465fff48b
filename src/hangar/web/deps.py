from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, APIKeyHeader

from hangar.app import App
from hangar.core.modules.session.models import AuthToken
from hangar.errors import AuthenticationError

TOKEN_COOKIE = "token"
# "Bearer <token>" is preferred; "HangarAuth <token>" is what older API clients send
TOKEN_SCHEMES = frozenset({"bearer", "hangarauth"})

authorization_header = APIKeyHeader(name="Authorization", auto_error=False)
cookie_scheme = APIKeyCookie(name=TOKEN_COOKIE, auto_error=False)


def parse_authorization(value: str | None) -> AuthToken | None:
    """Extract the session token from an Authorization header value."""
    if not value:
        return None
    scheme, _, token = value.strip().partition(" ")
    token = token.strip()
    if scheme.lower() not in TOKEN_SCHEMES or not token:
        return None
    return AuthToken(token)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_auth_token(
    app: Annotated[App, Depends(get_app)],
    authorization: Annotated[str | None, Depends(authorization_header)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken:
    """Return the first presented session token that resolves to a live session.

    The Authorization header is tried before the cookie, so an API client that
    also carries a browser cookie acts with the token it sent explicitly.
    """
    candidates = [parse_authorization(authorization), AuthToken(token_cookie) if token_cookie else None]
    presented = [token for token in candidates if token is not None]
    if not presented:
        raise AuthenticationError("No session token presented")

    for auth_token in presented:
        if await app.is_auth_token_valid(auth_token):
            return auth_token
    raise AuthenticationError("Invalid or expired session")


AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
