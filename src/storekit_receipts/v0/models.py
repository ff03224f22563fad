from .._internal.models import (  # noqa: F401
    AppleInApp,
    AppleReceipt,
    ReceiptInfo,
    VerificationRequest,
    VerifyReceiptResponse,
)
from .._internal.results import (  # noqa: F401
    ValidationFailure,
    ValidationResult,
    ValidationSuccess,
)
