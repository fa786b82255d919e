# boutique/auth.py
from typing import Optional

from fastapi import Header, Request

from .errors import Unauthorized
from .tokens import TokenService


def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens


def require_admin(request: Request, authorization: Optional[str] = Header(default=None)) -> str:
    """
    Guard for mutating catalog routes. Expects `Authorization: Bearer <token>`
    and returns the verified admin username, also kept on request.state.
    """
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise Unauthorized("Unauthorized")
    identity = get_tokens(request).verify(token.strip())
    request.state.admin = identity
    return identity
