import abc
import json
import logging
from collections.abc import Mapping
from typing import (
    Any,
    ClassVar,
    Protocol,
)

import requests
import tenacity

from .defaults import (
    DEFAULT_STOREKIT_RECEIPTS_TIMEOUT_S,
    DEFAULT_STOREKIT_RECEIPTS_TRANSPORT_ATTEMPTS,
)
from .exceptions import TransportError

log = logging.getLogger(__name__)


class Transport(Protocol):
    def call(self, endpoint: str, procedure: str, payload: Mapping[str, Any]) -> bytes | None:
        """Invoke `procedure` at `endpoint` and return the raw response payload.

        Returns None when the backend answered without data. Raises TransportError
        when the call itself failed.
        """


class HTTPTransport(abc.ABC):
    """Base for transports that POST JSON over a shared requests session."""

    TIMEOUT_S: ClassVar[float] = DEFAULT_STOREKIT_RECEIPTS_TIMEOUT_S

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float | None = None,
        attempts: int = DEFAULT_STOREKIT_RECEIPTS_TRANSPORT_ATTEMPTS,
    ):
        if attempts < 1:
            raise ValueError(f"attempts must be positive, got {attempts}")
        self._session = session or requests.Session()
        self._timeout = self.TIMEOUT_S if timeout is None else timeout
        self._attempts = attempts

    @staticmethod
    def url_for(endpoint: str, procedure: str) -> str:
        return f"{endpoint.rstrip('/')}/{procedure}"

    def call(self, endpoint: str, procedure: str, payload: Mapping[str, Any]) -> bytes | None:
        retrying = tenacity.Retrying(
            retry=tenacity.retry_if_exception_type(TransportError),
            stop=tenacity.stop_after_attempt(self._attempts),
            wait=tenacity.wait_exponential(),
            before_sleep=tenacity.before_sleep_log(log, logging.WARNING),
            reraise=True,
        )
        return retrying(self._call_once, self.url_for(endpoint, procedure), payload)

    def _post(self, url: str, body: Mapping[str, Any]) -> requests.Response:
        try:
            response = self._session.post(url, json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        if not response.ok:
            log.warning(
                'Verification backend %s returned response %s with data "%s".',
                url,
                response.status_code,
                response.text,
            )
            raise TransportError(
                f"Verification backend {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            )
        return response

    @abc.abstractmethod
    def _call_once(self, url: str, payload: Mapping[str, Any]) -> bytes | None:
        raise NotImplementedError


class AppStoreTransport(HTTPTransport):
    """Talks to the App Store verifyReceipt endpoints directly."""

    def _call_once(self, url: str, payload: Mapping[str, Any]) -> bytes | None:
        # https://developer.apple.com/documentation/appstorereceipts/verifyreceipt
        response = self._post(url, payload)
        return response.content or None


class CallableFunctionTransport(HTTPTransport):
    """Talks to a relay exposing HTTPS callable functions.

    Request body is `{"data": <payload>}`; the relay answers with either
    `{"result": <value>}` or `{"error": {"status": ..., "message": ..., "details": ...}}`.
    """

    def _call_once(self, url: str, payload: Mapping[str, Any]) -> bytes | None:
        response = self._post(url, {"data": dict(payload)})

        try:
            envelope = response.json()
        except ValueError as exc:
            raise TransportError(f"Relay {url} returned a malformed envelope", details=response.text) from exc
        if not isinstance(envelope, dict):
            raise TransportError(f"Relay {url} returned a malformed envelope", details=response.text)

        if (error := envelope.get("error")) is not None:
            error = error if isinstance(error, dict) else {"message": str(error)}
            raise TransportError(
                f"Relay {url} failed: {error.get('status', 'UNKNOWN')} {error.get('message', '')}".rstrip(),
                status_code=response.status_code,
                details=error.get("details"),
            )

        result = envelope.get("result")
        if result is None:
            return None
        if isinstance(result, str):
            return result.encode("utf-8")
        return json.dumps(result).encode("utf-8")
