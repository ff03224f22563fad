from dataclasses import dataclass
from typing import Union

from .exceptions import ReceiptValidationError
from .models import (
    ReceiptInfo,
    VerifyReceiptResponse,
)


@dataclass(frozen=True)
class ValidationSuccess:
    receipt_info: ReceiptInfo

    is_success = True
    outcome = "success"

    def unwrap(self) -> ReceiptInfo:
        return self.receipt_info

    def parse(self) -> VerifyReceiptResponse:
        return VerifyReceiptResponse.from_receipt_info(self.receipt_info)


@dataclass(frozen=True)
class ValidationFailure:
    error: ReceiptValidationError

    is_success = False

    @property
    def outcome(self) -> str:
        return self.error.code

    @property
    def receipt_info(self) -> ReceiptInfo | None:
        return getattr(self.error, "receipt_info", None)

    def unwrap(self) -> ReceiptInfo:
        raise self.error


ValidationResult = Union[ValidationSuccess, ValidationFailure]
