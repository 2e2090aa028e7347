"""
Hetzner Robot Client

An asynchronous client for the Hetzner Robot webservice: dedicated server
management, firewalls, boot configuration, reverse DNS, SSH keys and
vSwitches.
"""

__version__ = "1.0.0"
__license__ = "MPL-2.0"

from .api import Robot
from .core.client import RobotClient
from .core.config_loader import ConfigLoader
from .core.exceptions import (
    APIError,
    AuthenticationError,
    ConditionCancelledError,
    ConditionTimeoutError,
    ConfigurationError,
    ErrorCode,
    ErrorKind,
    NetworkError,
    ParseError,
    RobotError,
    WaitError,
    is_api_error,
    is_not_found_error,
    is_rate_limit_error,
)
from .core.models import RobotConfig
from .core.poller import ConditionPoller, PollConfig

__all__ = [
    # Exceptions
    "RobotError",
    "ErrorKind",
    "ErrorCode",
    "APIError",
    "NetworkError",
    "ParseError",
    "AuthenticationError",
    "ConfigurationError",
    "WaitError",
    "ConditionTimeoutError",
    "ConditionCancelledError",
    "is_api_error",
    "is_not_found_error",
    "is_rate_limit_error",
    # Core classes
    "RobotConfig",
    "ConfigLoader",
    "RobotClient",
    "ConditionPoller",
    "PollConfig",
    "Robot",
]
