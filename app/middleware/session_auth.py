"""
Session Authentication Middleware.

Verifies the bearer session token issued by the Brewline auth front end
(HS256 JWT signed with SECRET_KEY) and exposes the signed-in user as
``g.user``.

Token claims:
- sub: User ID
- email: User email
- name: Display name
- role: CUSTOMER, CAFE_OWNER or SUPER_ADMIN
- exp: Expiration time

How the session is resolved is pluggable: ``init_session_auth(app,
loader=...)`` installs any callable returning a SessionUser or None, so
tests and other front ends can swap the JWT check out.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Callable, Optional

import jwt
from flask import current_app, g, request

from ..utils.errors import unauthorized
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

SESSION_LOADER_KEY = 'brewline.session_loader'
TOKEN_ALGORITHM = 'HS256'


@dataclass
class SessionUser:
    """The authenticated caller."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str = 'CUSTOMER'


def issue_session_token(user: SessionUser, max_age: int = None) -> str:
    """Sign a session token for a user (used by the auth front end and tests)."""
    max_age = max_age or current_app.config.get('SESSION_MAX_AGE', 3600)
    payload = {
        'sub': user.id,
        'email': user.email,
        'name': user.name,
        'role': user.role,
        'exp': datetime.now(timezone.utc) + timedelta(seconds=max_age),
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm=TOKEN_ALGORITHM)


def decode_session_token(token: str) -> Optional[dict]:
    """
    Decode and verify a session token.

    Returns:
        Decoded token payload or None if invalid
    """
    if not token:
        return None

    try:
        return jwt.decode(
            token,
            current_app.config['SECRET_KEY'],
            algorithms=[TOKEN_ALGORITHM],
            options={'require': ['sub', 'exp']},
        )
    except jwt.ExpiredSignatureError:
        logger.info('Session token expired')
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f'Invalid session token: {e}')
        return None


def load_user_from_bearer() -> Optional[SessionUser]:
    """Default session loader: Authorization: Bearer <token>."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None

    payload = decode_session_token(auth_header[7:].strip())
    if not payload:
        return None

    return SessionUser(
        id=str(payload['sub']),
        email=payload.get('email'),
        name=payload.get('name'),
        role=payload.get('role') or 'CUSTOMER',
    )


def init_session_auth(app, loader: Callable[[], Optional[SessionUser]] = None) -> None:
    """Install the session loader used by require_session."""
    app.extensions[SESSION_LOADER_KEY] = loader or load_user_from_bearer


def current_user() -> Optional[SessionUser]:
    """The signed-in user for this request, or None."""
    loader = current_app.extensions.get(SESSION_LOADER_KEY, load_user_from_bearer)
    return loader()


def require_session(f):
    """
    Decorator to require an authenticated session.

    Sets g.user when authenticated, otherwise responds 401.

    Usage:
        @require_session
        def my_endpoint():
            user = g.user
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = current_user()
        if user is None:
            return unauthorized()

        g.user = user
        return f(*args, **kwargs)

    return decorated_function
