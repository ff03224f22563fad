from .._internal.interpreter import (  # noqa: F401
    Attempt,
    ResponseInterpreter,
)
from .._internal.verifier import (  # noqa: F401
    Completion,
    ReceiptVerifier,
    build_verifier,
)
