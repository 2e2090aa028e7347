"""
Hetzner Robot Client - Core Infrastructure

This package contains the transport, envelope handling, form encoding, error
taxonomy and condition poller shared by all resource services.
"""

from .client import RequestResponseLogger, RobotClient
from .config_loader import ConfigLoader
from .envelope import DEFAULT_ENVELOPE_KEYS, EnvelopeUnwrapper, unwrap, unwrap_array
from .exceptions import (
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
    is_firewall_in_process_error,
    is_firewall_rule_limit_exceeded_error,
    is_not_found_error,
    is_rate_limit_error,
    is_unauthorized_error,
    map_error_response,
)
from .form import (
    EncodedForm,
    FirewallRuleEncoder,
    encode_bracket_list,
    encode_firewall_rules,
    encode_form,
)
from .models import RobotConfig
from .poller import ConditionPoller, PollConfig, PollResult, PollState, wait_for_condition

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
    "map_error_response",
    "is_api_error",
    "is_rate_limit_error",
    "is_not_found_error",
    "is_firewall_in_process_error",
    "is_unauthorized_error",
    "is_firewall_rule_limit_exceeded_error",
    # Models
    "RobotConfig",
    "ConfigLoader",
    # Client
    "RobotClient",
    "RequestResponseLogger",
    # Envelopes
    "DEFAULT_ENVELOPE_KEYS",
    "EnvelopeUnwrapper",
    "unwrap",
    "unwrap_array",
    # Form encoding
    "EncodedForm",
    "FirewallRuleEncoder",
    "encode_form",
    "encode_firewall_rules",
    "encode_bracket_list",
    # Poller
    "ConditionPoller",
    "PollConfig",
    "PollResult",
    "PollState",
    "wait_for_condition",
]
