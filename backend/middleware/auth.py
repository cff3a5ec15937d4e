"""
Bearer token authentication.

Identity itself is delegated to Auth0; this module only verifies the access
token a client presents and extracts its subject (the Auth0 user id).

Two verification modes:
  - AUTH0_DOMAIN set: RS256 tokens checked against the tenant JWKS, with
    audience and issuer validation.
  - otherwise: HS256 tokens signed with JWT_SECRET (development and tests,
    see issue_access_token()).
"""
import logging
from datetime import datetime, timezone, timedelta
from fastapi import Header
from typing import Optional

import jwt

from config import settings
from domain.errors import UnauthorizedError

logger = logging.getLogger(__name__)

_jwks_client: Optional[jwt.PyJWKClient] = None


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _get_jwks_client() -> jwt.PyJWKClient:
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = jwt.PyJWKClient(settings.auth0_jwks_url, cache_keys=True)
    return _jwks_client


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def _decode_auth0_token(token: str) -> dict:
    signing_key = _get_jwks_client().get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        audience=settings.jwt_audience,
        issuer=settings.auth0_issuer,
        options={"require": ["exp", "iss", "sub"]},
    )


def _decode_local_token(token: str) -> dict:
    if not settings.jwt_secret:
        raise UnauthorizedError("Token verification is not configured.")
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        issuer=settings.jwt_issuer,
        options={"require": ["exp", "iat", "iss", "sub"], "verify_aud": False},
    )


def decode_access_token(token: str) -> dict:
    try:
        if settings.auth0_domain:
            return _decode_auth0_token(token)
        return _decode_local_token(token)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token expired.")
    except jwt.PyJWKClientError as e:
        logger.warning(f"JWKS lookup failed: {e}")
        raise UnauthorizedError("Invalid access token.")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid access token.")


def issue_access_token(*, subject: str, email: Optional[str] = None) -> str:
    """Mint an HS256 access token (development and tests only)."""
    if not settings.jwt_secret:
        raise UnauthorizedError("Token verification is not configured.")
    now = _now_utc()
    exp = now.replace(microsecond=0) + timedelta(minutes=settings.jwt_access_ttl_minutes)
    payload = {
        "iss": settings.jwt_issuer,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


async def require_token_subject(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """Return the Auth0 subject of a valid bearer token, else 401."""
    token = _parse_bearer_token(authorization)
    if not token:
        raise UnauthorizedError(
            "Authentication required. Provide Authorization: Bearer <token>."
        )
    payload = decode_access_token(token)
    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("Access token has no subject.")
    return subject
