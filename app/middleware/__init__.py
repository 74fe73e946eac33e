"""
Middleware package for Brewline.
"""
from .session_auth import (
    SessionUser,
    current_user,
    init_session_auth,
    issue_session_token,
    require_session,
)
from .request_id import init_request_id_tracking
