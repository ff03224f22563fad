from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .enums import ReceiptStatus


class StorekitReceiptsError(Exception):
    pass


class ConfigurationError(StorekitReceiptsError):
    pass


class TransportError(StorekitReceiptsError):
    """Raised by transports when the remote call itself fails."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ReceiptValidationError(StorekitReceiptsError):
    """Base for every failure kind a validation can terminate with."""

    code = "unknown"

    def __init__(self, message: str, debug_info: dict | None = None):
        super().__init__(message)
        self.debug_info = debug_info or {}

    def __str__(self) -> str:
        if not self.debug_info:
            return super().__str__()
        return super().__str__() + f" {self.debug_info}"


class TransportFailure(ReceiptValidationError):
    code = "transport_failure"

    def __init__(self, cause: BaseException):
        super().__init__(
            "Verification backend could not be reached",
            debug_info={"cause": repr(cause)},
        )
        self.cause = cause


class NoRemoteData(ReceiptValidationError):
    code = "no_remote_data"

    def __init__(self):
        super().__init__("Verification backend returned no data")


class DecodeFailure(ReceiptValidationError):
    code = "decode_failure"

    def __init__(self, raw_text: str | None):
        super().__init__(
            "Verification response is not a JSON object",
            debug_info={"raw_text": raw_text},
        )
        self.raw_text = raw_text


class InvalidStatus(ReceiptValidationError):
    code = "invalid_status"

    def __init__(self, receipt_info: Mapping[str, Any], status: ReceiptStatus):
        super().__init__(
            "Receipt was rejected by the verification backend",
            debug_info={"status": status.name, "raw_status": receipt_info.get("status")},
        )
        self.receipt_info = receipt_info
        self.status = status


class InternalFailure(ReceiptValidationError):
    """The attempt ended without reaching the backend's verdict, e.g. it was cancelled."""

    code = "internal_failure"

    def __init__(self, cause: BaseException):
        super().__init__(
            "Receipt validation did not complete",
            debug_info={"cause": repr(cause)},
        )
        self.cause = cause
