"""Access-token checks applied to protected views."""

import functools
import os
from typing import Any, Callable, Tuple, TypeVar

import jwt
from flask import g, jsonify, request
from flask.typing import ResponseReturnValue

from .models import AccessTokenClaims

_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]
_DECODE_OPTIONS = {"verify_aud": False, "verify_iat": False}

_View = TypeVar("_View", bound=Callable[..., ResponseReturnValue])


class InvalidAccessToken(ValueError):
    """Raised when an Authorization header does not carry a valid access token."""

    def __init__(self, message: str = "invalid access token") -> None:
        super().__init__(message)


def parse_access_token(authorization_header: str, secret: str) -> AccessTokenClaims:
    """Check the "<scheme> <token>" header and return the token's claims."""
    parts = authorization_header.split(" ")
    if len(parts) != 2:
        raise InvalidAccessToken()
    try:
        payload = jwt.decode(
            parts[1], secret, algorithms=_HMAC_ALGORITHMS, options=_DECODE_OPTIONS
        )
        return AccessTokenClaims.from_payload(payload)
    except (jwt.PyJWTError, ValueError) as err:
        raise InvalidAccessToken() from err


def _request_claims() -> AccessTokenClaims:
    return parse_access_token(
        request.headers.get("Authorization", ""), os.environ.get("JWT_SECRET", "")
    )


def _unauthorized(body: Any) -> Tuple[Any, int]:
    return jsonify(body), 401


def admin_only(view: _View) -> _View:
    """Let the request through only with an access token for the admin role."""

    @functools.wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> ResponseReturnValue:
        try:
            claims = _request_claims()
        except InvalidAccessToken as err:
            return _unauthorized({"error": str(err)})
        if claims.role != "admin":
            return _unauthorized(
                {"error": "insufficient role permissions", "role": claims.role}
            )
        g.admin_uuid = claims.user_id
        return view(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def logged_in(view: _View) -> _View:
    """Let the request through only with a valid access token."""

    @functools.wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> ResponseReturnValue:
        try:
            claims = _request_claims()
        except InvalidAccessToken as err:
            return _unauthorized({"error": str(err)})
        g.user_uuid = claims.user_id
        return view(*args, **kwargs)

    return wrapper  # type: ignore[return-value]