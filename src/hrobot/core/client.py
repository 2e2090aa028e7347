"""
Hetzner Robot Client - API Transport

This module provides the client that turns typed operations into
authenticated HTTP calls against the Robot webservice, normalizes response
envelopes and maps error payloads into typed errors.
"""

import base64
import json
import logging
import ssl
import time
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

import certifi
import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .envelope import EnvelopeUnwrapper, default_unwrapper
from .exceptions import NetworkError, ParseError, map_error_response
from .form import EncodedForm, FormData, encode_form
from .models import RobotConfig

logger = logging.getLogger("hrobot")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")


# Header values that must never reach the logs
REDACTED_HEADERS = frozenset({"authorization", "proxy-authorization"})


class RequestResponseLogger:
    """Writes one JSON line per webservice request and one per response.

    Robot credentials travel in the Basic auth header, so that header is
    replaced with ``[REDACTED]``. Bodies are never logged; requests only
    record whether a body was sent.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @staticmethod
    def redact(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        return {
            name: "[REDACTED]" if name.lower() in REDACTED_HEADERS else value
            for name, value in (headers or {}).items()
        }

    def log_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        has_body: bool = False,
        operation: str = "unknown",
    ) -> None:
        entry = {
            "operation": operation,
            "request": {
                "method": method,
                "url": url,
                "headers": self.redact(headers),
                "has_data": has_body,
            },
        }
        self.logger.info(f"API Request: {json.dumps(entry)}")

    def log_response(
        self,
        status_code: int,
        response_size: Optional[int] = None,
        duration_ms: Optional[float] = None,
        operation: str = "unknown",
        error: Optional[BaseException] = None,
    ) -> None:
        """Log the outcome of a call.

        ``status_code`` is 0 when the transport failed before a response
        arrived. Provider errors (4xx/5xx) and transport failures log at
        WARNING, everything else at INFO.
        """
        ok = 200 <= status_code < 400
        entry = {
            "operation": operation,
            "response": {
                "status_code": status_code,
                "response_size": response_size,
                "duration_ms": round(duration_ms, 2) if duration_ms is not None else None,
                "success": ok,
                "has_error": error is not None,
            },
        }
        if error is not None:
            entry["error"] = str(error)

        self.logger.log(logging.INFO if ok else logging.WARNING, f"API Response: {json.dumps(entry)}")


request_logger = RequestResponseLogger(logger)




@lru_cache(maxsize=256)
def _type_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


class RobotClient:
    """Transport for the Robot webservice.

    Holds only immutable configuration after construction, so one instance
    can serve concurrent calls.
    """

    def _create_ssl_context(self, verify_ssl: bool) -> ssl.SSLContext:
        """TLS context for robot-ws: certifi CA bundle, hostname checks, TLS 1.2 floor."""
        if not verify_ssl:
            logger.warning(
                f"TLS certificate verification is disabled for {self.base_url}; "
                "webservice credentials can be intercepted by anyone on the path"
            )
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            return context

        context = ssl.create_default_context(cafile=certifi.where())
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        return context

    def __init__(
        self,
        config: RobotConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        unwrapper: Optional[EnvelopeUnwrapper] = None,
    ):
        """Initialize Robot webservice client.

        Args:
            config: Connection configuration
            transport: Optional httpx transport (mock transports in tests)
            unwrapper: Envelope unwrapper; defaults to the standard key list
        """
        self.config = config
        self.base_url = config.url.rstrip("/")
        self.user_agent = config.user_agent
        self.timeout = config.timeout
        self.verify_ssl = config.verify_ssl
        self.tz = config.tzinfo()
        self.unwrapper = unwrapper or default_unwrapper

        self.client = httpx.AsyncClient(
            verify=self._create_ssl_context(self.verify_ssl),
            timeout=httpx.Timeout(self.timeout, pool=5.0),
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            transport=transport,
        )

        # robot-ws accepts HTTP Basic only; the header is built once per client
        credentials = f"{config.username}:{config.password}".encode()
        self.auth_header = base64.b64encode(credentials).decode()

        logger.debug(f"Robot client ready for {self.base_url} as {config.username}")

    async def close(self):
        """Close the httpx client."""
        await self.client.aclose()

    async def __aenter__(self) -> "RobotClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def execute(
        self,
        method: str,
        path: str,
        *,
        content: Optional[str] = None,
        content_type: Optional[str] = None,
        timeout: Optional[float] = None,
        operation: str = "api_request",
    ) -> Tuple[int, bytes]:
        """Send one authenticated request and read the whole response body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: Path relative to the base URL, e.g. "/server/123"
            content: Encoded request body
            content_type: Content type of ``content``; form encoding by default
            timeout: Per-call timeout overriding the configured one
            operation: Name of operation for logging

        Returns:
            Tuple of HTTP status code and raw body bytes

        Raises:
            ValueError: For an unsupported method or empty path
            NetworkError: If the request cannot be sent or the body not read
        """
        method = (method or "").upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method!r}")
        if not path:
            raise ValueError("Request path is required")

        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Basic {self.auth_header}",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if content is not None:
            headers["Content-Type"] = content_type or FORM_CONTENT_TYPE

        request_logger.log_request(method, url, headers, content is not None, operation)
        start_time = time.monotonic()

        try:
            async with self.client.stream(
                method,
                url,
                content=content.encode() if content is not None else None,
                headers=headers,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            ) as response:
                body = await response.aread()
        except httpx.TimeoutException as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            request_logger.log_response(0, 0, duration_ms, operation, e)
            raise NetworkError(
                f"request timed out after {timeout or self.timeout}s",
                e,
                context={"method": method, "path": path},
            )
        except httpx.HTTPError as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            request_logger.log_response(0, 0, duration_ms, operation, e)
            raise NetworkError(
                "request failed",
                e,
                context={"method": method, "path": path, "base_url": self.base_url},
            )

        duration_ms = (time.monotonic() - start_time) * 1000
        request_logger.log_response(response.status_code, len(body), duration_ms, operation)
        return response.status_code, body

    def handle_response(
        self,
        status_code: int,
        body: bytes,
        target: Any = None,
        wrapper_key: Optional[str] = None,
    ) -> Any:
        """Turn a status and body into a decoded value or a typed error.

        Raises:
            APIError: For status codes >= 400
            ParseError: If the body cannot be unwrapped or decoded
        """
        if status_code >= 400:
            raise map_error_response(status_code, body)

        if status_code == 204 or not body:
            return None

        if wrapper_key is not None:
            payload = self.unwrapper.unwrap_array(body, wrapper_key)
        else:
            payload = self.unwrapper.unwrap(body)

        return self.decode(payload, target)

    def decode(self, payload: Any, target: Any = None) -> Any:
        """Validate an unwrapped payload into ``target``.

        The provider timezone is passed as validation context so timestamp
        fields can localize naive values.
        """
        if target is None:
            return payload
        try:
            return _type_adapter(target).validate_python(payload, context={"timezone": self.tz})
        except PydanticValidationError as e:
            raise ParseError(
                "failed to decode response",
                e,
                context={"target": getattr(target, "__name__", repr(target))},
            )

    async def request(
        self,
        method: str,
        path: str,
        *,
        data: Optional[FormData] = None,
        form: Optional[EncodedForm] = None,
        json_body: Any = None,
        target: Any = None,
        wrapper_key: Optional[str] = None,
        operation: str = "api_request",
        timeout: Optional[float] = None,
    ) -> Any:
        """Make a request to the Robot webservice and decode the result.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            data: Form fields for the standard form encoder
            form: Pre-encoded body from the hierarchical encoder
            json_body: Value to send as JSON
            target: Type to decode the unwrapped body into; None returns raw JSON
            wrapper_key: Unwrap a list whose elements are wrapped under this key
            operation: Name of operation for logging/error context
            timeout: Per-call timeout in seconds

        Returns:
            Decoded response, or None for empty/204 responses

        Raises:
            ValueError: For invalid arguments
            NetworkError: For transport failures
            ParseError: For bodies that cannot be encoded or decoded
            APIError: For error responses from the webservice
        """
        given = [b for b in (data, form, json_body) if b is not None]
        if len(given) > 1:
            raise ValueError("Only one of data, form or json_body may be given")

        content: Optional[str] = None
        content_type: Optional[str] = None
        if data is not None:
            content = encode_form(data)
            content_type = FORM_CONTENT_TYPE
        elif form is not None:
            if not isinstance(form, EncodedForm):
                raise TypeError("form must be an EncodedForm from the hierarchical encoder")
            if form:
                content = form.text
                content_type = FORM_CONTENT_TYPE
        elif json_body is not None:
            try:
                content = json.dumps(json_body)
            except (TypeError, ValueError) as e:
                raise ParseError("failed to marshal request body", e)
            content_type = JSON_CONTENT_TYPE

        status_code, body = await self.execute(
            method,
            path,
            content=content,
            content_type=content_type,
            timeout=timeout,
            operation=operation,
        )
        return self.handle_response(status_code, body, target, wrapper_key)

    async def get(self, path: str, target: Any = None, **kwargs) -> Any:
        """Perform a GET request."""
        return await self.request("GET", path, target=target, **kwargs)

    async def get_wrapped_list(self, path: str, wrapper_key: str, target: Any = None, **kwargs) -> Any:
        """GET a list whose elements are wrapped, e.g. ``[{"server": {...}}]``."""
        return await self.request("GET", path, target=target, wrapper_key=wrapper_key, **kwargs)

    async def post(self, path: str, data: Optional[FormData] = None, target: Any = None, **kwargs) -> Any:
        """Perform a POST request with form data."""
        return await self.request("POST", path, data=data, target=target, **kwargs)

    async def post_raw(self, path: str, form: EncodedForm, target: Any = None, **kwargs) -> Any:
        """POST a pre-encoded form whose keys contain literal brackets."""
        return await self.request("POST", path, form=form, target=target, **kwargs)

    async def put(self, path: str, data: Optional[FormData] = None, target: Any = None, **kwargs) -> Any:
        """Perform a PUT request with form data."""
        return await self.request("PUT", path, data=data, target=target, **kwargs)

    async def delete(self, path: str, **kwargs) -> None:
        """Perform a DELETE request."""
        await self.request("DELETE", path, **kwargs)

    async def delete_with_body(
        self,
        path: str,
        data: Optional[FormData] = None,
        target: Any = None,
        form: Optional[EncodedForm] = None,
        **kwargs,
    ) -> Any:
        """DELETE with a form body, as used for cancellations."""
        return await self.request("DELETE", path, data=data, form=form, target=target, **kwargs)

    async def post_json(self, path: str, body: Any, target: Any = None, **kwargs) -> Any:
        """Perform a POST request with a JSON body."""
        return await self.request("POST", path, json_body=body, target=target, **kwargs)
