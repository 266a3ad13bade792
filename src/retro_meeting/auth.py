"""
Authentication tokens

Tokens are HS256 JWTs. ``sub`` is the user id and ``tms`` lists the ids of
the teams the user belongs to, so team membership checks don't need a query.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from jose import JWTError, jwt
from starlette.requests import HTTPConnection

from .config import config

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 30


@dataclass
class AuthToken:
    """Decoded claims of a valid auth token"""
    sub: str
    tms: List[str] = field(default_factory=list)

    @property
    def user_id(self) -> str:
        return self.sub


def create_auth_token(user_id: str, team_ids: Optional[List[str]] = None,
                      expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed auth token

    Args:
        user_id: Id of the authenticated user
        team_ids: Teams the user belongs to
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    claims = {
        "sub": user_id,
        "tms": list(team_ids or []),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, config.SECRET_KEY, algorithm=ALGORITHM)


def decode_auth_token(token: str) -> Optional[AuthToken]:
    """Verify and decode a token, returning None if it is invalid or expired"""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Token verification failed: Token has expired")
        return None
    except JWTError as e:
        logger.warning(f"Token verification failed: {type(e).__name__} - {str(e)}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token verification failed: payload missing user ID")
        return None
    return AuthToken(sub=str(user_id), tms=[str(team_id) for team_id in payload.get("tms") or []])


def get_auth_token(connection: HTTPConnection) -> Optional[AuthToken]:
    """
    Extract the auth token from a request or websocket

    HTTP requests send ``Authorization: Bearer <token>``. Browsers can't set
    headers on a websocket handshake, so sockets may pass ``?token=<token>``.
    """
    raw_token = None
    authorization = connection.headers.get("Authorization")
    if authorization and authorization.lower().startswith("bearer "):
        raw_token = authorization[7:].strip()
    elif connection.query_params.get("token"):
        raw_token = connection.query_params.get("token")

    if not raw_token:
        return None
    return decode_auth_token(raw_token)
