"""
Utility modules for Brewline.
"""
from .logging_config import setup_logging, get_logger
from .errors import (
    ErrorCode,
    error_response,
    bad_request,
    unauthorized,
    not_found,
    internal_error
)
from .exceptions import (
    BrewlineError,
    NotFoundError,
    CustomerNotFoundError,
    ProfileNotFoundError,
    ValidationError,
    InsufficientOrdersError,
    InsufficientPointsError
)
