import base64
import json
import threading
import unittest.mock
from collections.abc import Callable, Mapping
from typing import Any

import requests

from storekit_receipts.v0.enums import ReceiptStatus

Response = bytes | str | None | BaseException


def make_json_response_with_status(status: ReceiptStatus | int, **extra) -> bytes:
    return json.dumps({"status": int(status), **extra}).encode()


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


class FakeTransport:
    """Replays scripted responses, or asks `responder` for each call."""

    def __init__(self, *responses: Response, responder: Callable[..., Response] | None = None):
        self.responses = list(responses)
        self.responder = responder
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self._lock = threading.Lock()

    def call(self, endpoint: str, procedure: str, payload: Mapping[str, Any]) -> bytes | str | None:
        with self._lock:
            self.calls.append((endpoint, procedure, dict(payload)))
            if self.responder is not None:
                response = self.responder(endpoint, procedure, payload)
            else:
                response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def endpoints(self) -> list[str]:
        return [endpoint for endpoint, _, _ in self.calls]


def make_mock_response(code: int, body: bytes | str | dict | list | None) -> unittest.mock.MagicMock:
    if isinstance(body, (dict, list)):
        content = json.dumps(body).encode()
    elif isinstance(body, str):
        content = body.encode()
    else:
        content = body or b""

    result = unittest.mock.MagicMock()
    result.status_code = code
    result.ok = code < 400
    result.content = content
    result.text = content.decode(errors="replace")
    result.json = unittest.mock.MagicMock(side_effect=lambda: json.loads(content))
    return result


def make_fake_session(*responses: unittest.mock.MagicMock | BaseException) -> unittest.mock.MagicMock:
    fake_session = unittest.mock.MagicMock(spec=requests.Session)
    fake_session.post = unittest.mock.MagicMock(side_effect=list(responses))
    return fake_session
