"""
Hetzner Robot Client - Response Envelope Handling

The webservice wraps resources under a key named after the resource type
(``{"server": {...}}``), wraps every element of list responses individually
(``[{"server": {...}}, ...]``) and sometimes returns bare values. This module
normalizes all of those shapes to the inner payload.
"""

import json
from typing import Any, Iterable, Optional, Sequence, Union

from .exceptions import ParseError

# Probe order matters: the first populated key wins.
DEFAULT_ENVELOPE_KEYS: tuple[str, ...] = (
    "data",
    "server",
    "servers",
    "firewall",
    "ip",
    "reset",
    "boot",
    "rescue",
    "key",
    "vswitch",
    "rdns",
    "failover",
    "traffic",
    "server_market_product",
    "server_market_transaction",
    "server_addon_transaction",
    "server_addon_product",
    "transaction",
    "firewall_template",
)

# A top-level "id" marks a bare resource rather than an envelope
RESOURCE_MARKER = "id"


def load_json(raw: Union[bytes, str]) -> Any:
    """Decode a response body, raising ``ParseError`` on malformed JSON."""
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError("failed to decode response body", e)


class EnvelopeUnwrapper:
    """Strips provider envelopes using a priority-ordered list of wrapper keys."""

    def __init__(self, keys: Optional[Iterable[str]] = None):
        self.keys: tuple[str, ...] = tuple(keys) if keys is not None else DEFAULT_ENVELOPE_KEYS

    def with_keys(self, *extra: str) -> "EnvelopeUnwrapper":
        """Return an unwrapper probing ``extra`` after the current keys."""
        return EnvelopeUnwrapper(self.keys + tuple(k for k in extra if k not in self.keys))

    def detect_key(self, obj: Any) -> Optional[str]:
        """Return the first wrapper key populated in ``obj``, if any."""
        if not isinstance(obj, dict):
            return None
        for key in self.keys:
            if key in obj:
                return key
        return None

    def unwrap(self, raw: Union[bytes, str]) -> Any:
        """Decode ``raw`` and strip its envelope.

        Raises:
            ParseError: If the body is not valid JSON
        """
        return self.unwrap_value(load_json(raw))

    def unwrap_value(self, value: Any) -> Any:
        """Strip the envelope of an already decoded JSON value."""
        if isinstance(value, list):
            if not value:
                return value
            if isinstance(value[0], dict) and RESOURCE_MARKER in value[0]:
                return value
            key = self.detect_key(value[0])
            if key is None:
                return value
            return extract_items(value, key)

        if not isinstance(value, dict):
            return value

        if RESOURCE_MARKER in value:
            return value

        key = self.detect_key(value)
        if key is None:
            return value
        return value[key]

    def unwrap_array(self, raw: Union[bytes, str], wrapper_key: str) -> list:
        """Decode a list whose elements are wrapped under ``wrapper_key``.

        Raises:
            ParseError: If the body is not valid JSON or not a JSON array
        """
        value = load_json(raw)
        if not isinstance(value, list):
            raise ParseError(
                "failed to unwrap array response",
                TypeError(f"expected JSON array, got {type(value).__name__}"),
                context={"wrapper_key": wrapper_key},
            )
        return extract_items(value, wrapper_key)


def extract_items(items: Sequence[Any], wrapper_key: str) -> list:
    """Pull ``wrapper_key`` out of every element; elements without it are skipped."""
    return [
        item[wrapper_key]
        for item in items
        if isinstance(item, dict) and wrapper_key in item
    ]


default_unwrapper = EnvelopeUnwrapper()


def unwrap(raw: Union[bytes, str]) -> Any:
    return default_unwrapper.unwrap(raw)


def unwrap_array(raw: Union[bytes, str], wrapper_key: str) -> list:
    return default_unwrapper.unwrap_array(raw, wrapper_key)
