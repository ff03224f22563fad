from .conf import VerifierSettings  # noqa: F401
from .enums import Environment, ReceiptStatus  # noqa: F401
from .models import ValidationFailure, ValidationResult, ValidationSuccess  # noqa: F401
from .verifier import ReceiptVerifier, build_verifier  # noqa: F401
