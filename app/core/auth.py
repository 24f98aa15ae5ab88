"""Authentification des requêtes.

Le token est cherché dans une liste ordonnée de sources (cookie puis header
``Authorization: Bearer``); la première source qui renvoie une valeur gagne.
"""

from typing import Optional, Sequence

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.core.errors import AuthorizationFailure
from app.core.security import decode_token

NOT_AUTHORIZED = "Not Authorized. Login Again"


class TokenSource:
    def extract(self, request: Request, settings: Settings) -> Optional[str]:
        raise NotImplementedError


class CookieTokenSource(TokenSource):
    def extract(self, request: Request, settings: Settings) -> Optional[str]:
        return request.cookies.get(settings.TOKEN_COOKIE_NAME) or None


class BearerTokenSource(TokenSource):
    def extract(self, request: Request, settings: Settings) -> Optional[str]:
        authorization = request.headers.get("Authorization")
        if not authorization:
            return None
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer":
            return None
        return token.strip() or None


DEFAULT_TOKEN_SOURCES: Sequence[TokenSource] = (CookieTokenSource(), BearerTokenSource())


def extract_token(
    request: Request,
    settings: Settings,
    sources: Sequence[TokenSource] = DEFAULT_TOKEN_SOURCES,
) -> Optional[str]:
    for source in sources:
        token = source.extract(request, settings)
        if token:
            return token
    return None


def get_current_user_id(request: Request, settings: Settings = Depends(get_settings)) -> int:
    """Dépendance des routes protégées: renvoie l'id de l'utilisateur du token"""
    token = extract_token(request, settings)
    if not token:
        raise AuthorizationFailure(NOT_AUTHORIZED)

    user_id = decode_token(token, settings)
    if user_id is None:
        raise AuthorizationFailure(NOT_AUTHORIZED)

    request.state.user_id = user_id
    return user_id
