from .._internal.exceptions import (  # noqa: F401
    ConfigurationError,
    DecodeFailure,
    InternalFailure,
    InvalidStatus,
    NoRemoteData,
    ReceiptValidationError,
    StorekitReceiptsError,
    TransportError,
    TransportFailure,
)
