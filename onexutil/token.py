"""Signing and parsing of HMAC-signed JSON Web Tokens that carry a user identity."""

from __future__ import annotations

import secrets
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

__all__ = ["TokenError", "init", "parse", "parse_request", "sign"]

_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


class TokenError(Exception):
    """Raised when a token cannot be signed, found or verified."""


@dataclass
class _Config:
    key: str
    identity_key: str
    expiration: timedelta


# Without a call to init the signing key is random and lives only in this process.
_config = _Config(secrets.token_urlsafe(32), "identityKey", timedelta(hours=2))
_init_lock = threading.Lock()
_initialized = False


def _as_timedelta(value: timedelta | float) -> timedelta:
    return value if isinstance(value, timedelta) else timedelta(seconds=value)


def init(
    key: str = "",
    identity_key: str = "",
    expiration: timedelta | float | None = None,
) -> None:
    """Configure the signing key, identity claim name and token lifetime.

    Only the first call has any effect; empty or zero values keep the defaults.
    A number given as ``expiration`` is taken as seconds.
    """
    global _initialized
    with _init_lock:
        if _initialized:
            return
        _initialized = True
        if key:
            _config.key = key
        if identity_key:
            _config.identity_key = identity_key
        if expiration:
            _config.expiration = _as_timedelta(expiration)


def parse(token: str, key: str) -> str:
    """Verify ``token`` with ``key`` and return the identity it carries."""
    try:
        claims = jwt.decode(token, key, algorithms=_HMAC_ALGORITHMS)
    except jwt.InvalidTokenError as exc:
        raise TokenError(str(exc)) from exc
    identity = claims.get(_config.identity_key)
    if not isinstance(identity, str) or not identity:
        raise TokenError("signature is invalid")
    return identity


def _header_value(headers: Mapping[str, object], name: str) -> str:
    wanted = name.lower()
    for header, value in headers.items():
        if header.lower() == wanted:
            if isinstance(value, (list, tuple)):
                return str(value[0]) if value else ""
            return str(value)
    return ""


def parse_request(headers: Mapping[str, object]) -> str:
    """Read a bearer token from the ``Authorization`` header and parse it."""
    header = _header_value(headers, "Authorization")
    if not header:
        raise TokenError("the length of the `Authorization` header is zero")
    parts = header.split()
    if len(parts) < 2 or parts[0].lower() != "bearer":
        raise TokenError("invalid auth token")
    return parse(parts[1], _config.key)


def sign(identity: str) -> tuple[str, datetime]:
    """Sign a token for ``identity``; return it with its expiry time (UTC)."""
    if not _config.key:
        raise TokenError("key is invalid")
    now = datetime.now(timezone.utc)
    expire_at = now + _config.expiration
    issued = int(now.timestamp())
    claims = {
        _config.identity_key: identity,
        "nbf": issued,
        "iat": issued,
        "exp": int(expire_at.timestamp()),
    }
    return jwt.encode(claims, _config.key, algorithm="HS256"), expire_at