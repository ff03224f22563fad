import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from logging import getLogger
from typing import ClassVar

from .enums import (
    Environment,
    ReceiptStatus,
)
from .exceptions import (
    DecodeFailure,
    InvalidStatus,
    NoRemoteData,
)
from .metrics import sandbox_redirects_total
from .models import ReceiptInfo
from .results import (
    ValidationFailure,
    ValidationResult,
    ValidationSuccess,
)

log = getLogger(__name__)


@dataclass(frozen=True)
class Attempt:
    receipt_data: bytes
    environment: Environment
    shared_secret: str | None = None
    # set once the attempt was re-targeted at sandbox, there is no second redirect
    redirected: bool = False

    @property
    def can_redirect(self) -> bool:
        return self.environment is Environment.PRODUCTION and not self.redirected

    def redirected_to_sandbox(self) -> "Attempt":
        return replace(self, environment=Environment.SANDBOX, redirected=True)


def _as_text(payload: bytes | str) -> str | None:
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        return None


class ResponseInterpreter:
    """Turns a raw backend payload into a ValidationResult.

    Also owns the sandbox redirect: when production answers that the receipt
    belongs to sandbox, the attempt is handed back through `revalidate`
    re-targeted at sandbox. This happens at most once per top-level call.
    """

    REDIRECT_STATUS: ClassVar[ReceiptStatus] = ReceiptStatus.SANDBOX_RECEIPT_ON_PRODUCTION_ENV

    def __init__(self, accepted_statuses: Iterable[ReceiptStatus] = (ReceiptStatus.OK,)):
        self.accepted_statuses = frozenset(accepted_statuses)
        if self.REDIRECT_STATUS in self.accepted_statuses:
            raise ValueError(f"{self.REDIRECT_STATUS.name} triggers a redirect and cannot be accepted")

    @staticmethod
    def decode(payload: bytes | str) -> ReceiptInfo:
        try:
            receipt_info = json.loads(payload)
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors, deep nesting exhausts the stack
            raise DecodeFailure(_as_text(payload)) from exc

        if not isinstance(receipt_info, dict):
            raise DecodeFailure(_as_text(payload))
        return receipt_info

    @staticmethod
    def read_status(receipt_info: ReceiptInfo) -> ReceiptStatus:
        raw_status = receipt_info.get("status")
        if not isinstance(raw_status, int) or isinstance(raw_status, bool):
            return ReceiptStatus.NONE
        return ReceiptStatus.from_code(raw_status)

    def interpret(
        self,
        payload: bytes | str | None,
        attempt: Attempt,
        revalidate: Callable[[Attempt], ValidationResult],
    ) -> ValidationResult:
        if payload is None:
            log.warning("No data received from %s environment", attempt.environment.value)
            return ValidationFailure(NoRemoteData())

        try:
            receipt_info = self.decode(payload)
        except DecodeFailure as decode_failure:
            log.exception("Could not decode response from %s environment", attempt.environment.value)
            return ValidationFailure(decode_failure)

        status = self.read_status(receipt_info)
        if status is ReceiptStatus.NONE:
            log.warning("Response from %s environment carries no status", attempt.environment.value)
            return ValidationFailure(InvalidStatus(receipt_info, status))

        if status is self.REDIRECT_STATUS:
            # https://developer.apple.com/documentation/appstorereceipts/verifyreceipt
            # "As a best practice, always call the production URL for verifyReceipt first, and proceed
            # to verify with the sandbox URL if you receive a 21007 status code."
            if attempt.can_redirect:
                log.info("Sandbox receipt sent to production, re-submitting to sandbox")
                sandbox_redirects_total.inc()
                return revalidate(attempt.redirected_to_sandbox())
            log.warning("Backend reported a sandbox receipt on %s environment again", attempt.environment.value)
            return ValidationFailure(InvalidStatus(receipt_info, status))

        if status in self.accepted_statuses:
            return ValidationSuccess(receipt_info)

        log.warning(
            "Receipt rejected by %s environment with status %s (%s)",
            attempt.environment.value,
            receipt_info.get("status"),
            status.name,
        )
        return ValidationFailure(InvalidStatus(receipt_info, status))
