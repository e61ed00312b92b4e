"""
JWT token utilities for safe decoding without verification.

Used by the token cache to notice bearer tokens that already expired. The
token is NOT verified; the result only decides whether to fetch a new one.
"""

import time
from typing import Any, Dict, Optional, cast

import jwt


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Safely decode JWT token without verification.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload as dictionary, or None if decoding fails
    """
    if not token:
        return None
    try:
        return cast(Dict[str, Any], jwt.decode(token, options={"verify_signature": False}))
    except jwt.PyJWTError:
        # Opaque or malformed token
        return None


def get_token_expiry(token: str) -> Optional[float]:
    """
    Read the ``exp`` claim of a JWT.

    Args:
        token: JWT token string

    Returns:
        Expiry as a unix timestamp, or None for opaque tokens and tokens without ``exp``
    """
    decoded = decode_token(token)
    if not decoded:
        return None

    exp = decoded.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        return float(exp)
    return None


def is_token_expired(token: str, leeway: float = 0.0) -> bool:
    """
    Check whether a JWT has expired.

    Tokens that cannot be decoded never count as expired.

    Args:
        token: JWT token string
        leeway: Seconds before ``exp`` at which the token already counts as expired

    Returns:
        True if the token carries an ``exp`` claim in the past
    """
    expiry = get_token_expiry(token)
    if expiry is None:
        return False
    return expiry <= time.time() + leeway
